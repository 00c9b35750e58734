"""Carry out a ReclaimPlan against the identity backend."""

from __future__ import annotations

import logging

from scripts.reclaim.base_service import IdentityService
from scripts.reclaim.errors import RemoteError
from scripts.reclaim.models import OutcomeStatus, PlanAction, ReclaimPlan

logger = logging.getLogger("reclaim.executor")


class ReclaimExecutor:
    def __init__(self, service: IdentityService) -> None:
        self.service = service

    def execute(self, plan: ReclaimPlan, org: str) -> OutcomeStatus:
        """Issue at most one reclaim call. Backend failures raise RemoteError."""
        mannequin = plan.mannequin
        log_extra = {
            "service": self.service.SERVICE_NAME,
            "org": org,
            "mannequin": mannequin.login,
            "target": plan.target_login,
        }

        if plan.action is PlanAction.SKIP_ALREADY_MAPPED:
            logger.info(
                "Mannequin %s is already mapped to %s, skipping",
                mannequin.login,
                mannequin.already_mapped_target_login or mannequin.already_mapped_target_id,
                extra=log_extra,
            )
            return OutcomeStatus.SKIPPED_ALREADY_MAPPED

        try:
            self.service.reclaim(org, mannequin.id, plan.target_login)
        except RemoteError:
            raise
        except Exception as exc:
            raise RemoteError(str(exc)) from exc

        logger.info(
            "Reclaim invitation sent for %s -> %s",
            mannequin.login,
            plan.target_login,
            extra=log_extra,
        )
        return OutcomeStatus.SUCCEEDED
