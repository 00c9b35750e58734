"""Mannequin lookup against the backend's current identity list."""

from __future__ import annotations

import logging
from typing import Optional

from scripts.reclaim.base_service import IdentityService
from scripts.reclaim.errors import (
    AmbiguousMannequinError,
    InvalidRequestError,
    MannequinNotFoundError,
    RemoteError,
)
from scripts.reclaim.models import MannequinIdentity

logger = logging.getLogger("reclaim.resolver")


class MannequinResolver:
    def __init__(self, service: IdentityService) -> None:
        self.service = service

    def resolve(
        self,
        org: str,
        login: Optional[str] = None,
        mannequin_id: Optional[str] = None,
    ) -> MannequinIdentity:
        """Find the single mannequin matching ``login`` and/or ``mannequin_id``.

        The backend is queried on every call so the result reflects mappings
        made earlier in the same batch.
        """
        if not login and not mannequin_id:
            raise InvalidRequestError("Either a mannequin login or a mannequin id is required")

        try:
            mannequins = self.service.list_mannequins(org)
        except RemoteError:
            raise
        except Exception as exc:
            raise RemoteError(str(exc)) from exc
        logger.debug(
            "Fetched %d mannequins for %s", len(mannequins), org,
            extra={"service": self.service.SERVICE_NAME, "org": org, "mannequin": login or mannequin_id},
        )

        if mannequin_id:
            return self._by_id(org, mannequins, mannequin_id, login)
        return self._by_login(org, mannequins, login)

    @staticmethod
    def _by_id(
        org: str,
        mannequins: list[MannequinIdentity],
        mannequin_id: str,
        login: Optional[str],
    ) -> MannequinIdentity:
        for m in mannequins:
            if m.id != mannequin_id:
                continue
            if login and m.login != login:
                raise MannequinNotFoundError(
                    f"Mannequin with id '{mannequin_id}' and login '{login}' not found in {org}"
                )
            return m
        raise MannequinNotFoundError(f"Mannequin with id '{mannequin_id}' not found in {org}")

    @staticmethod
    def _by_login(
        org: str,
        mannequins: list[MannequinIdentity],
        login: str,
    ) -> MannequinIdentity:
        matches = [m for m in mannequins if m.login == login]
        if not matches:
            raise MannequinNotFoundError(f"Mannequin '{login}' not found in {org}")
        if len(matches) > 1:
            raise AmbiguousMannequinError(login, [m.id for m in matches])
        return matches[0]
