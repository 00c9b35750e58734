"""Configuration via environment variables (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class GitHubConfig:
    token: str
    api_base_url: str = "https://api.github.com"
    timeout_seconds: float = 30.0

    @property
    def graphql_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/graphql"


@dataclass(frozen=True)
class ReclaimConfig:
    github: GitHubConfig
    log_level: str = "INFO"


def load_config(github_pat: Optional[str] = None) -> ReclaimConfig:
    """Load configuration from environment variables.

    An explicit ``github_pat`` (the --github-pat flag) wins over GH_PAT and
    GITHUB_TOKEN.
    """
    load_dotenv()

    token = github_pat or os.environ.get("GH_PAT") or os.environ.get("GITHUB_TOKEN", "")
    if not token:
        raise ValueError("A GitHub token is required: pass --github-pat or set GH_PAT")

    github = GitHubConfig(
        token=token,
        api_base_url=os.environ.get("GITHUB_API_BASE_URL", "https://api.github.com"),
        timeout_seconds=float(os.environ.get("GITHUB_TIMEOUT_SECONDS", "30")),
    )

    return ReclaimConfig(
        github=github,
        log_level=os.environ.get("RECLAIM_LOG_LEVEL", "INFO"),
    )
