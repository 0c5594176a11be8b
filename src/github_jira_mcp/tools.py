"""Tool registry and dispatch layer.

This module:
- defines the exposed tools (public contract surface)
- builds a per-server runtime from host-provided config
- validates arguments before any tool implementation runs
- routes a call by name to the GitHub or Jira adapter
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from .config import ServerConfig, load_config_from_env
from .errors import ToolError
from .github_tools import GitHubAdapter
from .jira_tools import JiraAdapter

logger = logging.getLogger(__name__)

_OWNER_REPO_PROPS: dict[str, Any] = {
    "owner": {"type": "string", "description": "Repository owner (user or organization)"},
    "repo": {"type": "string", "description": "Repository name"},
}

TOOL_METADATA: dict[str, dict[str, Any]] = {
    "github_get_pr": {
        "description": "Get details about a pull request, including title, body, and state.",
        "inputSchema": {
            "type": "object",
            "required": ["owner", "repo", "pull_number"],
            "properties": {
                **_OWNER_REPO_PROPS,
                "pull_number": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "github_get_pr_diff": {
        "description": "Get the diff content of a pull request.",
        "inputSchema": {
            "type": "object",
            "required": ["owner", "repo", "pull_number"],
            "properties": {
                **_OWNER_REPO_PROPS,
                "pull_number": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "github_get_issue": {
        "description": "Get details about an issue.",
        "inputSchema": {
            "type": "object",
            "required": ["owner", "repo", "issue_number"],
            "properties": {
                **_OWNER_REPO_PROPS,
                "issue_number": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "github_get_comments": {
        "description": "Get comments on an issue or pull request, filtering out bot comments.",
        "inputSchema": {
            "type": "object",
            "required": ["owner", "repo", "number"],
            "properties": {
                **_OWNER_REPO_PROPS,
                "number": {"type": "integer", "minimum": 0, "description": "Issue or pull request number"},
            },
            "additionalProperties": False,
        },
    },
    "jira_get_issue": {
        "description": "Get details about a Jira issue, including comments and status.",
        "inputSchema": {
            "type": "object",
            "required": ["issue_key"],
            "properties": {
                "issue_key": {"type": "string", "description": "Issue key, e.g. PROJ-123"},
            },
            "additionalProperties": False,
        },
    },
    "jira_get_dev_status": {
        "description": "Get development status (PRs, commits) for an issue. Requires numeric issue ID.",
        "inputSchema": {
            "type": "object",
            "required": ["issue_id"],
            "properties": {
                "issue_id": {"type": "integer", "minimum": 0},
                "application_type": {"type": ["string", "null"], "default": "github"},
                "data_type": {"type": ["string", "null"], "default": "pullrequest"},
            },
            "additionalProperties": False,
        },
    },
    "jira_edit_issue": {
        "description": "Edit a Jira issue. 'fields' should be a JSON object mapping field IDs/names to values.",
        "inputSchema": {
            "type": "object",
            "required": ["issue_key", "fields"],
            "properties": {
                "issue_key": {"type": "string"},
                "fields": {"type": "object"},
            },
            "additionalProperties": False,
        },
    },
    "jira_add_comment": {
        "description": "Add a comment to a Jira issue.",
        "inputSchema": {
            "type": "object",
            "required": ["issue_key", "body"],
            "properties": {
                "issue_key": {"type": "string"},
                "body": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
}


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-server runtime dependencies shared across tool calls."""

    config: ServerConfig
    github: GitHubAdapter
    jira: JiraAdapter


_RUNTIME: Runtime | None = None


def validate_tool_arguments(tool_name: str, arguments: dict[str, Any]) -> None:
    """Validate tool arguments against the tool's declared input schema.

    This is intentionally a minimal validator that enforces:
    - required fields
    - no extra properties when additionalProperties=false
    - basic JSON types (string/integer/object), with "null" allowed when listed
    - integer minimum

    It does NOT implement full JSON Schema.
    """
    if tool_name not in TOOL_METADATA:
        raise ToolError("Unknown tool", code="UserInput")

    schema = TOOL_METADATA[tool_name]["inputSchema"]
    props: dict[str, Any] = schema.get("properties", {})
    required: list[str] = schema.get("required", [])

    for k in required:
        if k not in arguments:
            raise ToolError(f"Missing required field: {k}", code="UserInput")

    if schema.get("additionalProperties", True) is False:
        extras = sorted(k for k in arguments if k not in props)
        if extras:
            raise ToolError(f"Unexpected fields are not allowed: {', '.join(extras)}", code="UserInput")

    for k, spec in props.items():
        if k not in arguments:
            continue
        v = arguments[k]
        expected = spec.get("type")
        if isinstance(expected, list):
            if v is None and "null" in expected:
                continue
            expected = next((t for t in expected if t != "null"), None)
        if expected == "string":
            if not isinstance(v, str):
                raise ToolError(f"Field '{k}' must be a string", code="UserInput")
        elif expected == "integer":
            # bool is an int subclass but never a valid JSON integer here.
            if not isinstance(v, int) or isinstance(v, bool):
                raise ToolError(f"Field '{k}' must be an integer", code="UserInput")
            minimum = spec.get("minimum")
            if isinstance(minimum, int) and v < minimum:
                raise ToolError(f"Field '{k}' must be >= {minimum}", code="UserInput")
        elif expected == "object" and not isinstance(v, dict):
            raise ToolError(f"Field '{k}' must be an object", code="UserInput")


def build_runtime(config: ServerConfig) -> Runtime:
    """Construct adapters from resolved configuration."""
    return Runtime(
        config=config,
        github=GitHubAdapter(token=config.github.token, api_base_url=config.github.api_base_url),
        jira=JiraAdapter(instance_url=config.jira.instance_url, token=config.jira.token),
    )


def initialize_runtime_from_env() -> Runtime:
    """Initialize and cache runtime from environment.

    Called at server startup (fail-fast), and can also be used lazily.
    """
    global _RUNTIME  # pylint: disable=global-statement
    if _RUNTIME is not None:
        return _RUNTIME

    _RUNTIME = build_runtime(load_config_from_env())
    logger.info(
        "Runtime initialized (github_token=%s, jira_token=%s, jira_instance=%s)",
        _RUNTIME.github.has_token,
        _RUNTIME.jira.has_token,
        _RUNTIME.jira.instance_url,
    )
    return _RUNTIME


async def close_runtime() -> None:
    """Close the cached runtime's HTTP clients, if any."""
    global _RUNTIME  # pylint: disable=global-statement
    runtime, _RUNTIME = _RUNTIME, None
    if runtime is None:
        return
    await runtime.github.aclose()
    await runtime.jira.aclose()


async def _tool_github_get_pr(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.github.get_pull_request(arguments["owner"], arguments["repo"], arguments["pull_number"])


async def _tool_github_get_pr_diff(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.github.get_pull_request_diff(arguments["owner"], arguments["repo"], arguments["pull_number"])


async def _tool_github_get_issue(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.github.get_issue(arguments["owner"], arguments["repo"], arguments["issue_number"])


async def _tool_github_get_comments(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.github.get_comments(arguments["owner"], arguments["repo"], arguments["number"])


async def _tool_jira_get_issue(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.jira.get_issue(arguments["issue_key"])


async def _tool_jira_get_dev_status(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.jira.get_dev_status(
        arguments["issue_id"],
        application_type=arguments.get("application_type"),
        data_type=arguments.get("data_type"),
    )


async def _tool_jira_edit_issue(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.jira.edit_issue(arguments["issue_key"], arguments["fields"])


async def _tool_jira_add_comment(runtime: Runtime, arguments: dict[str, Any]) -> str:
    return await runtime.jira.add_comment(arguments["issue_key"], arguments["body"])


_TOOL_FUNCS: dict[str, Callable[[Runtime, dict[str, Any]], Awaitable[str]]] = {
    "github_get_pr": _tool_github_get_pr,
    "github_get_pr_diff": _tool_github_get_pr_diff,
    "github_get_issue": _tool_github_get_issue,
    "github_get_comments": _tool_github_get_comments,
    "jira_get_issue": _tool_jira_get_issue,
    "jira_get_dev_status": _tool_jira_get_dev_status,
    "jira_edit_issue": _tool_jira_edit_issue,
    "jira_add_comment": _tool_jira_add_comment,
}


async def dispatch_tool(name: str, arguments: dict[str, Any]) -> str:
    """Dispatch a tool call and return its text payload.

    Raises:
        ToolError: For unknown tools, invalid arguments, or any upstream failure.
    """
    if name not in TOOL_METADATA:
        raise ToolError(
            f"Unknown tool: {name}",
            code="UserInput",
            hint=f"Available tools: {', '.join(sorted(TOOL_METADATA.keys()))}",
        )

    validate_tool_arguments(name, arguments)

    func = _TOOL_FUNCS.get(name)
    if func is None:
        raise ToolError("Tool not implemented", code="UserInput")

    runtime = initialize_runtime_from_env()
    start = time.monotonic()
    try:
        result = await func(runtime, arguments)
    except ToolError as err:
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("Tool %s failed in %sms (status=%s)", name, duration_ms, err.status_code)
        raise

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info("Tool %s succeeded in %sms", name, duration_ms)
    return result
