"""Abstract capability every identity backend implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from scripts.reclaim.models import MannequinIdentity


class IdentityService(ABC):
    """Reads mannequins and issues reclaim invitations for an organization.

    Implementations raise RemoteError for any backend or transport failure.
    """

    SERVICE_NAME: str = ""

    @abstractmethod
    def list_mannequins(self, org: str) -> list[MannequinIdentity]:
        """Return the organization's current mannequins."""

    @abstractmethod
    def reclaim(self, org: str, mannequin_id: str, target_login: str) -> None:
        """Send the invitation that remaps ``mannequin_id`` onto ``target_login``."""

    def close(self) -> None:
        """Release any held connections."""
