"""CSV manifest parsing.

The first line is always a header and is dropped. Each remaining line yields
one ManifestRow, in file order. Rows that cannot become a ReclaimRequest keep
their MalformedRowError so the orchestrator can fail them individually.
"""

from __future__ import annotations

import csv
import logging
from typing import Sequence

from scripts.reclaim.errors import InvalidRequestError, MalformedRowError, ManifestError
from scripts.reclaim.models import ManifestRow, ReclaimRequest

logger = logging.getLogger("reclaim.manifest")

MIN_COLUMNS = 2


def parse_manifest(lines: Sequence[str]) -> list[ManifestRow]:
    """Parse raw manifest lines into rows, skipping the header."""
    if not lines:
        raise ManifestError("Manifest is empty; expected a header row")

    rows: list[ManifestRow] = []
    # Header is line 1
    for line_number, raw in enumerate(lines[1:], start=2):
        rows.append(_parse_line(line_number, raw))

    malformed = sum(1 for r in rows if r.error is not None)
    logger.debug("Parsed %d manifest rows (%d malformed)", len(rows), malformed)
    return rows


def _parse_line(line_number: int, raw: str) -> ManifestRow:
    try:
        fields = next(csv.reader([raw]), [])
    except csv.Error as exc:
        return ManifestRow(
            line_number=line_number,
            raw=raw,
            error=MalformedRowError(line_number, str(exc)),
        )
    fields = [f.strip() for f in fields]

    if len(fields) < MIN_COLUMNS:
        error = MalformedRowError(
            line_number,
            f"expected at least {MIN_COLUMNS} columns (mannequin login, target login), "
            f"got {len(fields)}",
        )
        return ManifestRow(line_number=line_number, raw=raw, error=error)

    try:
        request = ReclaimRequest(mannequin_login=fields[0], target_login=fields[1])
    except InvalidRequestError as exc:
        return ManifestRow(
            line_number=line_number,
            raw=raw,
            error=MalformedRowError(line_number, exc.message),
        )
    return ManifestRow(line_number=line_number, raw=raw, request=request)
