"""Records passed between the reclaim workflow stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scripts.reclaim.errors import InvalidRequestError, MalformedRowError


class PlanAction(str, Enum):
    INVITE = "invite"
    SKIP_ALREADY_MAPPED = "skip-already-mapped"


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED_ALREADY_MAPPED = "skipped_already_mapped"
    FAILED = "failed"


class RequestState(str, Enum):
    PENDING = "pending"
    RESOLVING = "resolving"
    PLANNING = "planning"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    SKIPPED_ALREADY_MAPPED = "skipped_already_mapped"
    FAILED = "failed"


@dataclass(frozen=True)
class ReclaimRequest:
    """One desired mannequin -> target remapping."""

    mannequin_login: str
    target_login: str
    mannequin_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.target_login:
            raise InvalidRequestError("Target login is required")
        if not self.mannequin_login and not self.mannequin_id:
            raise InvalidRequestError("Either a mannequin login or a mannequin id is required")


@dataclass(frozen=True)
class MannequinIdentity:
    id: str
    login: str
    already_mapped_target_id: Optional[str] = None
    already_mapped_target_login: Optional[str] = None

    @property
    def is_mapped(self) -> bool:
        return bool(self.already_mapped_target_id)


@dataclass(frozen=True)
class ReclaimPlan:
    mannequin: MannequinIdentity
    target_login: str
    action: PlanAction


@dataclass(frozen=True)
class ManifestRow:
    """A manifest line after parsing: either a request or the reason it was rejected."""

    line_number: int
    raw: str
    request: Optional[ReclaimRequest] = None
    error: Optional[MalformedRowError] = None


@dataclass(frozen=True)
class ReclaimOutcome:
    """Terminal result for one request.

    ``request`` is None only for a manifest row that never became a request.
    """

    request: Optional[ReclaimRequest]
    status: OutcomeStatus
    detail: Optional[str] = None
    error_code: Optional[str] = None
    mannequin_id: Optional[str] = None
    line_number: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED
