"""Top-level reclaim coordinator for single requests and manifests."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from scripts.reclaim.base_service import IdentityService
from scripts.reclaim.errors import ReclaimError
from scripts.reclaim.executor import ReclaimExecutor
from scripts.reclaim.models import (
    ManifestRow,
    OutcomeStatus,
    PlanAction,
    ReclaimOutcome,
    ReclaimRequest,
    RequestState,
)
from scripts.reclaim.planner import plan_reclaim
from scripts.reclaim.resolver import MannequinResolver

logger = logging.getLogger("reclaim.orchestrator")

_TRANSITIONS: dict[RequestState, frozenset[RequestState]] = {
    RequestState.PENDING: frozenset({RequestState.RESOLVING, RequestState.FAILED}),
    RequestState.RESOLVING: frozenset({RequestState.PLANNING, RequestState.FAILED}),
    RequestState.PLANNING: frozenset({
        RequestState.EXECUTING,
        RequestState.SKIPPED_ALREADY_MAPPED,
        RequestState.FAILED,
    }),
    RequestState.EXECUTING: frozenset({RequestState.SUCCEEDED, RequestState.FAILED}),
    RequestState.SUCCEEDED: frozenset(),
    RequestState.SKIPPED_ALREADY_MAPPED: frozenset(),
    RequestState.FAILED: frozenset(),
}

_TERMINAL_STATUS = {
    RequestState.SUCCEEDED: OutcomeStatus.SUCCEEDED,
    RequestState.SKIPPED_ALREADY_MAPPED: OutcomeStatus.SKIPPED_ALREADY_MAPPED,
    RequestState.FAILED: OutcomeStatus.FAILED,
}


class RequestTracker:
    """Forward-only state machine for one request."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.state = RequestState.PENDING

    def advance(self, new_state: RequestState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal transition for {self.label}: {self.state.value} -> {new_state.value}"
            )
        logger.debug("%s: %s -> %s", self.label, self.state.value, new_state.value)
        self.state = new_state

    @property
    def status(self) -> OutcomeStatus:
        try:
            return _TERMINAL_STATUS[self.state]
        except KeyError:
            raise RuntimeError(f"{self.label} has not reached a terminal state") from None


class ReclaimOrchestrator:
    """Runs resolve -> plan -> execute per request against one IdentityService."""

    def __init__(self, service: IdentityService) -> None:
        self.service = service
        self.resolver = MannequinResolver(service)
        self.executor = ReclaimExecutor(service)

    def reclaim_one(
        self,
        request: ReclaimRequest,
        org: str,
        force: bool = False,
        line_number: Optional[int] = None,
    ) -> ReclaimOutcome:
        label = request.mannequin_login or request.mannequin_id
        tracker = RequestTracker(label)
        log_extra = {
            "org": org,
            "mannequin": label,
            "target": request.target_login,
            "line": line_number,
        }
        mannequin_id: Optional[str] = None

        try:
            tracker.advance(RequestState.RESOLVING)
            mannequin = self.resolver.resolve(
                org, login=request.mannequin_login, mannequin_id=request.mannequin_id
            )
            mannequin_id = mannequin.id

            tracker.advance(RequestState.PLANNING)
            plan = plan_reclaim(mannequin, request.target_login, force)

            if plan.action is PlanAction.SKIP_ALREADY_MAPPED:
                tracker.advance(RequestState.SKIPPED_ALREADY_MAPPED)
                self.executor.execute(plan, org)
                mapped_to = mannequin.already_mapped_target_login or mannequin.already_mapped_target_id
                return ReclaimOutcome(
                    request=request,
                    status=tracker.status,
                    detail=(
                        f"{mannequin.login} is already mapped to {mapped_to}; "
                        "use --force to reclaim it again"
                    ),
                    mannequin_id=mannequin_id,
                    line_number=line_number,
                )

            tracker.advance(RequestState.EXECUTING)
            self.executor.execute(plan, org)
            tracker.advance(RequestState.SUCCEEDED)
        except ReclaimError as exc:
            tracker.advance(RequestState.FAILED)
            logger.error(
                "Reclaim failed for %s: %s", label, exc,
                extra={**log_extra, "status": exc.code},
            )
            return ReclaimOutcome(
                request=request,
                status=tracker.status,
                detail=exc.message,
                error_code=exc.code,
                mannequin_id=mannequin_id,
                line_number=line_number,
            )

        return ReclaimOutcome(
            request=request,
            status=tracker.status,
            detail=f"Invitation sent to {request.target_login}",
            mannequin_id=mannequin_id,
            line_number=line_number,
        )

    def reclaim_many(
        self,
        requests: Sequence[ReclaimRequest],
        org: str,
        force: bool = False,
    ) -> list[ReclaimOutcome]:
        """Reclaim each request in order; a failed request never stops the batch."""
        return [self.reclaim_one(req, org, force) for req in requests]

    def reclaim_manifest(
        self,
        rows: Sequence[ManifestRow],
        org: str,
        force: bool = False,
    ) -> list[ReclaimOutcome]:
        """Like reclaim_many, but malformed rows become failed outcomes in place."""
        outcomes: list[ReclaimOutcome] = []
        for row in rows:
            if row.error is not None:
                tracker = RequestTracker(f"line {row.line_number}")
                tracker.advance(RequestState.FAILED)
                logger.error(
                    "%s", row.error,
                    extra={"org": org, "line": row.line_number, "status": row.error.code},
                )
                outcomes.append(ReclaimOutcome(
                    request=None,
                    status=tracker.status,
                    detail=row.error.message,
                    error_code=row.error.code,
                    line_number=row.line_number,
                ))
                continue
            outcomes.append(self.reclaim_one(row.request, org, force, line_number=row.line_number))
        return outcomes


def summarize(outcomes: Sequence[ReclaimOutcome]) -> dict[str, int]:
    """Count outcomes per status."""
    counts = {status.value: 0 for status in OutcomeStatus}
    for outcome in outcomes:
        counts[outcome.status.value] += 1
    counts["total"] = len(outcomes)
    return counts
