from __future__ import annotations

import logging

import pytest

from scripts.reclaim.errors import RemoteError
from scripts.reclaim.executor import ReclaimExecutor
from scripts.reclaim.models import MannequinIdentity, OutcomeStatus
from scripts.reclaim.planner import plan_reclaim
from tests.helpers.identity import FakeIdentityService


def test_invite_issues_one_reclaim_call(fake_service: FakeIdentityService, alice: MannequinIdentity) -> None:
    status = ReclaimExecutor(fake_service).execute(plan_reclaim(alice, "bob-real", False), "acme")

    assert status is OutcomeStatus.SUCCEEDED
    assert fake_service.reclaim_calls == [("acme", "M_alice", "bob-real")]


def test_skip_issues_no_call(fake_service: FakeIdentityService, mapped_carol: MannequinIdentity) -> None:
    status = ReclaimExecutor(fake_service).execute(plan_reclaim(mapped_carol, "x", False), "acme")

    assert status is OutcomeStatus.SKIPPED_ALREADY_MAPPED
    assert fake_service.reclaim_calls == []


def test_remote_error_is_not_retried(fake_service: FakeIdentityService, alice: MannequinIdentity) -> None:
    fake_service.failing_targets["bob-real"] = "Target user 'bob-real' not found"

    with pytest.raises(RemoteError, match="not found"):
        ReclaimExecutor(fake_service).execute(plan_reclaim(alice, "bob-real", False), "acme")

    assert len(fake_service.reclaim_calls) == 1


def test_unexpected_service_errors_become_remote_errors(alice: MannequinIdentity) -> None:
    class BrokenService(FakeIdentityService):
        def reclaim(self, org: str, mannequin_id: str, target_login: str) -> None:
            raise ConnectionError("connection reset")

    with pytest.raises(RemoteError, match="connection reset"):
        ReclaimExecutor(BrokenService([alice])).execute(plan_reclaim(alice, "bob-real", False), "acme")


def test_log_records_carry_service_name(
    fake_service: FakeIdentityService, alice: MannequinIdentity, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="reclaim.executor"):
        ReclaimExecutor(fake_service).execute(plan_reclaim(alice, "bob-real", False), "acme")

    record = caplog.records[-1]
    assert record.service == "fake"
    assert record.org == "acme"
    assert record.target == "bob-real"
