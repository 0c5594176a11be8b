"""Configuration loading for github-jira-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
Tokens are secrets and must never be emitted to agents or logs. Adapters receive resolved
values from here and never read the environment themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ToolError

GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_JIRA_INSTANCE_URL = "https://jira.atlassian.com"

GITHUB_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
JIRA_TOKEN_ENV_VARS = ("JIRA_PAT", "JIRA_API_TOKEN")
JIRA_INSTANCE_URL_ENV_VAR = "JIRA_INSTANCE_URL"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """GitHub adapter configuration."""

    token: str | None
    api_base_url: str = GITHUB_API_BASE_URL


@dataclass(frozen=True, slots=True)
class JiraConfig:
    """Jira adapter configuration."""

    token: str | None
    instance_url: str = DEFAULT_JIRA_INSTANCE_URL


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Top-level server configuration."""

    github: GitHubConfig
    jira: JiraConfig


def _first_env(names: tuple[str, ...]) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _parse_instance_url(value: str | None) -> str:
    if not value or not value.strip():
        return DEFAULT_JIRA_INSTANCE_URL
    url = value.strip().rstrip("/")
    if not url.startswith(("https://", "http://")):
        raise ToolError(f"{JIRA_INSTANCE_URL_ENV_VAR} must start with http:// or https://", code="Config")
    return url


def load_config_from_env() -> ServerConfig:
    """Load configuration from environment variables.

    Tokens are optional; without one, requests are sent unauthenticated.

    Raises:
        ToolError: If JIRA_INSTANCE_URL is set but not an http(s) URL.
    """
    return ServerConfig(
        github=GitHubConfig(token=_first_env(GITHUB_TOKEN_ENV_VARS)),
        jira=JiraConfig(
            token=_first_env(JIRA_TOKEN_ENV_VARS),
            instance_url=_parse_instance_url(os.getenv(JIRA_INSTANCE_URL_ENV_VAR)),
        ),
    )
