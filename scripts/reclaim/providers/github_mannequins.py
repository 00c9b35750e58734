"""GitHub GraphQL identity service: mannequin listing and attribution invitations."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from scripts.reclaim.base_service import IdentityService
from scripts.reclaim.config import GitHubConfig
from scripts.reclaim.errors import RemoteError
from scripts.reclaim.models import MannequinIdentity

logger = logging.getLogger("reclaim.github")

ORGANIZATION_ID_QUERY = """
query($login: String!) {
  organization(login: $login) { login id name }
}
"""

USER_ID_QUERY = """
query($login: String!) {
  user(login: $login) { id name }
}
"""

MANNEQUINS_QUERY = """
query($login: String!, $first: Int, $after: String) {
  organization(login: $login) {
    mannequins(first: $first, after: $after) {
      pageInfo { endCursor hasNextPage }
      nodes {
        id
        login
        claimant { id login }
      }
    }
  }
}
"""

CREATE_ATTRIBUTION_INVITATION_MUTATION = """
mutation($orgId: ID!, $sourceId: ID!, $targetId: ID!) {
  createAttributionInvitation(
    input: { ownerId: $orgId, sourceId: $sourceId, targetId: $targetId }
  ) {
    source { ... on Mannequin { id login } }
    target { ... on User { id login } }
  }
}
"""


class GitHubIdentityService(IdentityService):
    SERVICE_NAME = "github"
    PAGE_SIZE = 100

    def __init__(self, config: GitHubConfig, session: Optional[requests.Session] = None) -> None:
        self._url = config.graphql_url
        self._timeout = config.timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"bearer {config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def close(self) -> None:
        self._session.close()

    def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST one GraphQL document and return its ``data`` object."""
        try:
            resp = self._session.post(
                self._url,
                json={"query": query, "variables": variables},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise RemoteError(f"GitHub request failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteError(f"GitHub returned an invalid JSON response: {exc}") from exc

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(e.get("message", str(e)) for e in errors)
            raise RemoteError(messages)
        return payload.get("data") or {}

    def get_organization_id(self, org: str) -> str:
        data = self._graphql(ORGANIZATION_ID_QUERY, {"login": org})
        organization = data.get("organization")
        if not organization:
            raise RemoteError(f"Organization '{org}' not found")
        return organization["id"]

    def get_user_id(self, login: str) -> Optional[str]:
        data = self._graphql(USER_ID_QUERY, {"login": login})
        user = data.get("user")
        return user["id"] if user else None

    def list_mannequins(self, org: str) -> list[MannequinIdentity]:
        results: list[MannequinIdentity] = []
        after: Optional[str] = None

        while True:
            data = self._graphql(
                MANNEQUINS_QUERY,
                {"login": org, "first": self.PAGE_SIZE, "after": after},
            )
            organization = data.get("organization")
            if not organization:
                raise RemoteError(f"Organization '{org}' not found")

            page = organization["mannequins"]
            for node in page.get("nodes") or []:
                claimant = node.get("claimant") or {}
                results.append(MannequinIdentity(
                    id=node["id"],
                    login=node["login"],
                    already_mapped_target_id=claimant.get("id"),
                    already_mapped_target_login=claimant.get("login"),
                ))

            page_info = page.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            after = page_info.get("endCursor")

        logger.debug("Listed %d mannequins", len(results), extra={"org": org})
        return results

    def reclaim(self, org: str, mannequin_id: str, target_login: str) -> None:
        org_id = self.get_organization_id(org)
        target_id = self.get_user_id(target_login)
        if not target_id:
            raise RemoteError(f"Target user '{target_login}' not found")

        data = self._graphql(
            CREATE_ATTRIBUTION_INVITATION_MUTATION,
            {"orgId": org_id, "sourceId": mannequin_id, "targetId": target_id},
        )
        invitation = data.get("createAttributionInvitation")
        if not invitation:
            raise RemoteError(
                f"GitHub did not create an attribution invitation for {mannequin_id}"
            )
