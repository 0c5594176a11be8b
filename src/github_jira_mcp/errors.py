"""Tool error type and serialization helpers.

Every failure surfaced to an agent is a ToolError carrying a human-readable message.
Messages may include upstream response bodies but must never include credentials.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """An error raised by a tool call.

    Upstream failures (send, read, status, parse) all use code "Internal" and are
    distinguished only by message text.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "Internal",
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.status_code = status_code


def tool_error_to_result(err: ToolError) -> dict[str, Any]:
    """Convert a ToolError into the standard error envelope."""
    return to_error_result(code=err.code, message=err.message, hint=err.hint)


def to_error_result(*, code: str, message: str, hint: str | None = None) -> dict[str, Any]:
    """Build a standard error envelope."""
    out: dict[str, Any] = {"ok": False, "code": code, "message": message}
    if hint:
        out["hint"] = hint
    return out
