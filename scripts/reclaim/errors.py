"""Error taxonomy for the reclaim workflow.

Every failure the workflow reports per request derives from ReclaimError and
carries a stable ``code`` that ends up on the outcome.
"""

from __future__ import annotations


class ReclaimError(Exception):
    """Base exception for reclaim failures."""

    code: str = "RECLAIM_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(ReclaimError):
    """A request is missing the fields needed to identify a mannequin or target."""

    code = "INVALID_REQUEST"


class MannequinNotFoundError(ReclaimError):
    """No mannequin in the organization matches the request."""

    code = "NOT_FOUND"


class AmbiguousMannequinError(ReclaimError):
    """Several mannequins share the requested login."""

    code = "AMBIGUOUS"

    def __init__(self, login: str, candidate_ids: list[str]) -> None:
        self.login = login
        self.candidate_ids = candidate_ids
        super().__init__(
            f"Multiple mannequins share login '{login}' "
            f"(ids: {', '.join(candidate_ids)}). "
            "Use --mannequin-id to choose one."
        )


class RemoteError(ReclaimError):
    """The identity backend rejected a call or could not be reached."""

    code = "REMOTE_ERROR"


class MalformedRowError(ReclaimError):
    """A manifest row is missing required columns."""

    code = "MALFORMED_ROW"

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        super().__init__(f"Invalid line {line_number}: {reason}")


class ManifestError(ReclaimError):
    """The manifest as a whole cannot be processed."""

    code = "MANIFEST_ERROR"
