"""Jira adapter: issues, development status, edits and comments.

Uses Jira REST API v2 and the dev-status 1.0 endpoint family. Paths are relative to the
configured instance URL.
"""

from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_JIRA_INSTANCE_URL
from .http_client import AuthenticatedJSONClient, pretty_json

EDIT_CONFIRMATION = "Issue updated successfully."

DEFAULT_APPLICATION_TYPE = "github"
DEFAULT_DATA_TYPE = "pullrequest"


class JiraAdapter:
    """Tools against a Jira instance."""

    def __init__(
        self,
        *,
        instance_url: str = DEFAULT_JIRA_INSTANCE_URL,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = AuthenticatedJSONClient(
            service_name="Jira",
            token=token,
            base_url=instance_url,
            transport=transport,
        )

    @property
    def instance_url(self) -> str:
        return self._client.base_url or ""

    @property
    def has_token(self) -> bool:
        return self._client.has_token

    async def get_issue(self, issue_key: str) -> str:
        data = await self._client.perform("GET", f"rest/api/2/issue/{issue_key}?expand=names,renderedFields")
        return pretty_json(data)

    async def get_dev_status(
        self,
        issue_id: int,
        application_type: str | None = None,
        data_type: str | None = None,
    ) -> str:
        """Return linked pull requests/commits for an issue (numeric id, not key)."""
        app = application_type if application_type is not None else DEFAULT_APPLICATION_TYPE
        kind = data_type if data_type is not None else DEFAULT_DATA_TYPE
        path = f"rest/dev-status/1.0/issue/detail?issueId={issue_id}&applicationType={app}&dataType={kind}"
        data = await self._client.perform("GET", path)
        return pretty_json(data)

    async def edit_issue(self, issue_key: str, fields: dict[str, Any]) -> str:
        # Jira answers 204 No Content on success; any body is discarded.
        await self._client.perform("PUT", f"rest/api/2/issue/{issue_key}", {"fields": fields})
        return EDIT_CONFIRMATION

    async def add_comment(self, issue_key: str, body: str) -> str:
        data = await self._client.perform("POST", f"rest/api/2/issue/{issue_key}/comment", {"body": body})
        return pretty_json(data)

    async def aclose(self) -> None:
        await self._client.aclose()
