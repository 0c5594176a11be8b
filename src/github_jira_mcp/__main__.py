#!/usr/bin/env python3
"""github-jira-mcp entry point: GitHub and Jira tools over MCP stdio.

Run:
  uvx python -m github_jira_mcp                # start server (stdio)
  uvx python -m github_jira_mcp --test         # run lightweight self-tests then exit
"""

import argparse
import asyncio
import sys

from github_jira_mcp.server import run_server, test_server


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="github_jira_mcp",
        description="MCP server exposing GitHub pull request/issue tools and Jira issue tools over stdio. "
        "Reads GITHUB_TOKEN/GH_TOKEN, JIRA_PAT/JIRA_API_TOKEN and JIRA_INSTANCE_URL from the environment.",
        add_help=True,
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Build the GitHub and Jira tool listings and status resources without serving, then exit.",
    )
    return parser.parse_args(argv)


def main() -> None:
    """CLI dispatcher for the MCP server."""
    args = parse_args(sys.argv[1:])
    try:
        if args.test:
            asyncio.run(test_server())
        else:
            asyncio.run(run_server())
    except KeyboardInterrupt:
        print("\nServer stopped by user", file=sys.stderr)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        print(f"Server error: {exc}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
