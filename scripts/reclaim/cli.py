"""CLI entry point: reclaim-mannequin."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from scripts.reclaim.base_service import IdentityService
from scripts.reclaim.config import ReclaimConfig, load_config
from scripts.reclaim.errors import ManifestError, ReclaimError
from scripts.reclaim.logging_config import configure_logging
from scripts.reclaim.manifest import parse_manifest
from scripts.reclaim.models import OutcomeStatus, ReclaimOutcome, ReclaimRequest
from scripts.reclaim.orchestrator import ReclaimOrchestrator, summarize

logger = logging.getLogger("reclaim.cli")

DESCRIPTION = (
    "Reclaims one or more mannequin users. An invite is sent and the target "
    "user has to accept it for the remapping to occur. Reclaim a single user "
    "with --mannequin-user and --target-user, or in bulk with --csv. The CSV "
    "file has the mannequin login (source) and the reclaiming user login "
    "(target) as its first two columns; the first line is a header and is "
    "ignored. If both are given, the CSV file takes precedence."
)

_STATUS_LABELS = {
    OutcomeStatus.SUCCEEDED: "OK",
    OutcomeStatus.SKIPPED_ALREADY_MAPPED: "SKIPPED",
    OutcomeStatus.FAILED: "FAILED",
}


def file_exists(path: str) -> bool:
    return os.path.isfile(path)


def read_lines(path: str) -> list[str]:
    with open(path, encoding="utf-8-sig") as fh:
        return fh.read().splitlines()


def build_service(config: ReclaimConfig) -> IdentityService:
    from scripts.reclaim.providers.github_mannequins import GitHubIdentityService

    return GitHubIdentityService(config.github)


def format_outcome(outcome: ReclaimOutcome) -> str:
    label = _STATUS_LABELS[outcome.status]
    if outcome.request is not None:
        source = outcome.request.mannequin_login or outcome.request.mannequin_id
        subject = f"{source} -> {outcome.request.target_login}"
    else:
        subject = "(unparsed row)"
    if outcome.line_number is not None:
        subject = f"line {outcome.line_number}: {subject}"
    line = f"[{label}] {subject}"
    if outcome.detail:
        line += f": {outcome.detail}"
    return line


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reclaim-mannequin", description=DESCRIPTION)
    parser.add_argument("--github-org", required=True, help="Organization that owns the mannequins")
    parser.add_argument("--csv", help="CSV file path with list of mannequins to be reclaimed")
    parser.add_argument("--mannequin-user", help="The login of the mannequin to be remapped")
    parser.add_argument(
        "--mannequin-id",
        help="The id of the mannequin, to pick one of several mannequins sharing a login",
    )
    parser.add_argument("--target-user", help="The login of the target user to be mapped")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Map the user even if it was previously mapped",
    )
    parser.add_argument("--github-pat", help="Token to use instead of GH_PAT")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _run(args: argparse.Namespace, orchestrator: ReclaimOrchestrator) -> list[ReclaimOutcome]:
    org = args.github_org

    if args.csv:
        logger.info("Reclaiming mannequins with CSV %s", args.csv, extra={"org": org})
        if args.force:
            logger.info("Previously mapped mannequins will be reclaimed again", extra={"org": org})
        if not file_exists(args.csv):
            raise ManifestError(f"File {args.csv} does not exist.")
        try:
            lines = read_lines(args.csv)
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestError(f"File {args.csv} could not be read: {exc}") from exc
        rows = parse_manifest(lines)
        return orchestrator.reclaim_manifest(rows, org, args.force)

    logger.info(
        "Reclaiming mannequin",
        extra={"org": org, "mannequin": args.mannequin_user or args.mannequin_id, "target": args.target_user},
    )
    request = ReclaimRequest(
        mannequin_login=args.mannequin_user or "",
        mannequin_id=args.mannequin_id,
        target_login=args.target_user,
    )
    return [orchestrator.reclaim_one(request, org, args.force)]


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    has_single = (args.mannequin_user or args.mannequin_id) and args.target_user
    if not args.csv and not has_single:
        parser.error("Either --csv or --mannequin-user and --target-user must be specified")

    try:
        config = load_config(github_pat=args.github_pat)
    except ValueError as exc:
        configure_logging("DEBUG" if args.verbose else "INFO")
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    configure_logging("DEBUG" if args.verbose else config.log_level)

    service = build_service(config)
    try:
        outcomes = _run(args, ReclaimOrchestrator(service))
    except ReclaimError as exc:
        logger.error("%s", exc.message, extra={"org": args.github_org, "status": exc.code})
        raise SystemExit(1) from exc
    finally:
        service.close()

    for outcome in outcomes:
        print(format_outcome(outcome))
    counts = summarize(outcomes)
    print(
        f"{counts['total']} processed: {counts['succeeded']} invited, "
        f"{counts['skipped_already_mapped']} skipped, {counts['failed']} failed"
    )
    sys.stdout.flush()

    if counts["failed"]:
        raise SystemExit(1)
