"""GitHub adapter: pull requests, diffs, issues and comments."""

from __future__ import annotations

from typing import Any

import httpx

from .config import GITHUB_API_BASE_URL
from .http_client import AuthenticatedJSONClient, pretty_json

JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


def _author_type(comment: object) -> str | None:
    user = comment.get("user") if isinstance(comment, dict) else None
    kind = user.get("type") if isinstance(user, dict) else None
    return kind if isinstance(kind, str) else None


def filter_bot_comments(value: Any) -> Any:
    """Drop comments authored by bot accounts.

    Only entries whose ``user.type`` is exactly ``"Bot"`` are removed. Entries with a
    missing or unreadable author type are kept. Non-list values pass through unchanged.
    """
    if not isinstance(value, list):
        return value
    return [c for c in value if _author_type(c) != "Bot"]


class GitHubAdapter:
    """Read-only tools against the GitHub REST API."""

    def __init__(
        self,
        *,
        token: str | None = None,
        api_base_url: str = GITHUB_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._client = AuthenticatedJSONClient(
            service_name="GitHub",
            token=token,
            accept=JSON_MEDIA_TYPE,
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return self._client.has_token

    def _repo_url(self, owner: str, repo: str, suffix: str) -> str:
        return f"{self._api_base_url}/repos/{owner}/{repo}/{suffix}"

    async def get_pull_request(self, owner: str, repo: str, pull_number: int) -> str:
        data = await self._client.perform("GET", self._repo_url(owner, repo, f"pulls/{pull_number}"))
        return pretty_json(data)

    async def get_pull_request_diff(self, owner: str, repo: str, pull_number: int) -> str:
        """Return the unified diff of a pull request as raw text."""
        return await self._client.perform_text(
            "GET",
            self._repo_url(owner, repo, f"pulls/{pull_number}"),
            accept=DIFF_MEDIA_TYPE,
        )

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> str:
        data = await self._client.perform("GET", self._repo_url(owner, repo, f"issues/{issue_number}"))
        return pretty_json(data)

    async def get_comments(self, owner: str, repo: str, number: int) -> str:
        """Return issue or pull request comments, excluding bot comments."""
        data = await self._client.perform("GET", self._repo_url(owner, repo, f"issues/{number}/comments"))
        return pretty_json(filter_bot_comments(data))

    async def aclose(self) -> None:
        await self._client.aclose()
