"""Decide what to do with a resolved mannequin."""

from __future__ import annotations

from scripts.reclaim.models import MannequinIdentity, PlanAction, ReclaimPlan


def plan_reclaim(mannequin: MannequinIdentity, target_login: str, force: bool) -> ReclaimPlan:
    """Invite unless the mannequin is already mapped and ``force`` is off."""
    if mannequin.is_mapped and not force:
        action = PlanAction.SKIP_ALREADY_MAPPED
    else:
        action = PlanAction.INVITE
    return ReclaimPlan(mannequin=mannequin, target_login=target_login, action=action)
