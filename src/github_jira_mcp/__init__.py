"""GitHub + Jira MCP Server.

A Model Context Protocol server exposing thin, typed tools over the GitHub REST API
(pull requests, diffs, issues, comments) and the Jira REST API (issues, development
status, edits, comments).

Run with: uvx python -m github_jira_mcp
"""

__version__ = "1.0.0"
