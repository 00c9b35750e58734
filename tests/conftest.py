from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from scripts.reclaim.models import MannequinIdentity
from tests.helpers.identity import FakeIdentityService


@pytest.fixture
def alice() -> MannequinIdentity:
    return MannequinIdentity(id="M_alice", login="alice-mannequin")


@pytest.fixture
def mapped_carol() -> MannequinIdentity:
    return MannequinIdentity(
        id="M_carol",
        login="carol-mannequin",
        already_mapped_target_id="U_carol",
        already_mapped_target_login="carol-real",
    )


@pytest.fixture
def fake_service(alice: MannequinIdentity, mapped_carol: MannequinIdentity) -> FakeIdentityService:
    return FakeIdentityService([
        alice,
        mapped_carol,
        MannequinIdentity(id="M_dup1", login="dup-mannequin"),
        MannequinIdentity(id="M_dup2", login="dup-mannequin"),
    ])


@pytest.fixture(autouse=True)
def _reset_reclaim_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("reclaim")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
