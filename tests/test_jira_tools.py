"""Jira adapter tests.

All HTTP traffic goes through httpx.MockTransport; no real network calls are made.
"""

from __future__ import annotations

import json

import httpx
import pytest
from github_jira_mcp.errors import ToolError
from github_jira_mcp.jira_tools import EDIT_CONFIRMATION, JiraAdapter


class Recorder:
    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response


def _adapter(recorder: Recorder, *, instance_url: str = "https://jira.example.com", token: str | None = "pat") -> JiraAdapter:
    return JiraAdapter(instance_url=instance_url, token=token, transport=httpx.MockTransport(recorder))


@pytest.mark.asyncio
async def test_get_issue_expands_names_and_rendered_fields() -> None:
    payload = {"id": "10001", "key": "ABC-1", "fields": {"summary": "Crash"}}
    rec = Recorder(httpx.Response(200, json=payload))

    out = await _adapter(rec).get_issue("ABC-1")

    assert json.loads(out) == payload
    req = rec.requests[0]
    assert req.method == "GET"
    assert req.url.host == "jira.example.com"
    assert req.url.path == "/rest/api/2/issue/ABC-1"
    assert req.url.params["expand"] == "names,renderedFields"
    assert req.headers["Accept"] == "application/json"
    assert req.headers["Authorization"] == "Bearer pat"


@pytest.mark.asyncio
async def test_trailing_slash_instance_url_is_normalized() -> None:
    rec = Recorder(httpx.Response(200, json={}))
    adapter = _adapter(rec, instance_url="https://jira.example.com///")

    _ = await adapter.get_issue("ABC-1")

    assert adapter.instance_url == "https://jira.example.com"
    url = str(rec.requests[0].url)
    assert "//" not in url.split("://", 1)[1]
    assert rec.requests[0].url.path == "/rest/api/2/issue/ABC-1"


@pytest.mark.asyncio
async def test_get_dev_status_defaults() -> None:
    rec = Recorder(httpx.Response(200, json={"detail": []}))

    out = await _adapter(rec).get_dev_status(10001)

    assert json.loads(out) == {"detail": []}
    req = rec.requests[0]
    assert req.url.path == "/rest/dev-status/1.0/issue/detail"
    assert "issueId=10001&applicationType=github&dataType=pullrequest" in str(req.url)


@pytest.mark.asyncio
async def test_get_dev_status_explicit_types() -> None:
    rec = Recorder(httpx.Response(200, json={"detail": []}))

    _ = await _adapter(rec).get_dev_status(5, application_type="bitbucket", data_type="repository")

    params = rec.requests[0].url.params
    assert params["issueId"] == "5"
    assert params["applicationType"] == "bitbucket"
    assert params["dataType"] == "repository"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(204),
        httpx.Response(200, json={"id": "10001", "self": "https://jira.example.com/rest/api/2/issue/10001"}),
    ],
)
async def test_edit_issue_returns_confirmation_regardless_of_body(response: httpx.Response) -> None:
    rec = Recorder(response)
    fields = {"summary": "New title", "labels": ["triaged"]}

    out = await _adapter(rec).edit_issue("ABC-1", fields)

    assert out == EDIT_CONFIRMATION == "Issue updated successfully."
    req = rec.requests[0]
    assert req.method == "PUT"
    assert req.url.path == "/rest/api/2/issue/ABC-1"
    assert req.headers["Content-Type"] == "application/json"
    assert json.loads(req.content) == {"fields": fields}


@pytest.mark.asyncio
async def test_edit_issue_validation_error_includes_upstream_body() -> None:
    body = '{"errorMessages":[],"errors":{"summary":"Field \'summary\' cannot be set."}}'
    rec = Recorder(httpx.Response(400, text=body))

    with pytest.raises(ToolError) as exc:
        _ = await _adapter(rec).edit_issue("ABC-1", {"summary": "x"})

    assert exc.value.status_code == 400
    assert "Jira API Error 400" in exc.value.message
    assert body in exc.value.message


@pytest.mark.asyncio
async def test_add_comment_posts_body_and_returns_created_comment() -> None:
    created = {"id": "20000", "body": "Looks good", "author": {"name": "bot"}}
    rec = Recorder(httpx.Response(201, json=created))

    out = await _adapter(rec).add_comment("ABC-1", "Looks good")

    assert json.loads(out) == created
    req = rec.requests[0]
    assert req.method == "POST"
    assert req.url.path == "/rest/api/2/issue/ABC-1/comment"
    assert json.loads(req.content) == {"body": "Looks good"}


@pytest.mark.asyncio
async def test_requests_are_unauthenticated_without_token() -> None:
    rec = Recorder(httpx.Response(200, json={}))

    _ = await _adapter(rec, token=None).get_issue("ABC-1")

    assert "Authorization" not in rec.requests[0].headers


@pytest.mark.asyncio
async def test_empty_success_body_renders_null() -> None:
    rec = Recorder(httpx.Response(200, content=b""))

    out = await _adapter(rec).get_issue("ABC-1")

    assert out == "null"
