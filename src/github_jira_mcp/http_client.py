"""Authenticated JSON-over-HTTP client shared by the GitHub and Jira adapters.

Provides:
- one reusable httpx.AsyncClient per adapter
- bearer credential and content-negotiation headers on every call
- a single attempt per call (no retries, default redirects and timeouts)
- uniform ToolError translation for send, read, status and parse failures
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from . import __version__
from .errors import ToolError

logger = logging.getLogger(__name__)

USER_AGENT = f"github-jira-mcp/{__version__}"


class AuthenticatedJSONClient:
    """Performs one authenticated HTTP round trip per call and normalizes the outcome."""

    def __init__(
        self,
        *,
        service_name: str,
        token: str | None = None,
        base_url: str | None = None,
        accept: str = "application/json",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a client.

        Args:
            service_name: Label used in status error messages (e.g. "GitHub").
            token: Optional bearer token sent as the Authorization header.
            base_url: When set, calls take paths relative to it; otherwise full URLs.
            accept: Default Accept header, overridable per call.
            transport: Optional httpx transport for tests.
        """
        self._service_name = service_name
        self._token = token
        self._base_url = base_url.rstrip("/") if base_url is not None else None
        self._accept = accept
        self._http = httpx.AsyncClient(headers={"User-Agent": USER_AGENT}, transport=transport)

    @property
    def base_url(self) -> str | None:
        return self._base_url

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def resolve_url(self, url_or_path: str) -> str:
        if self._base_url is None:
            return url_or_path
        return f"{self._base_url}/{url_or_path.lstrip('/')}"

    def _headers(self, *, accept: str | None, has_body: bool) -> dict[str, str]:
        headers = {"Accept": accept or self._accept}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self._token is not None:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _round_trip(
        self,
        method: str,
        url_or_path: str,
        *,
        json_body: Any = None,
        accept: str | None = None,
    ) -> str:
        has_body = json_body is not None
        request = self._http.build_request(
            method,
            self.resolve_url(url_or_path),
            headers=self._headers(accept=accept, has_body=has_body),
            content=json.dumps(json_body).encode("utf-8") if has_body else None,
        )

        try:
            resp = await self._http.send(request, stream=True)
        except httpx.RequestError as exc:
            logger.warning("%s %s %s: send failed (%s)", self._service_name, method, request.url.path, type(exc).__name__)
            raise ToolError(f"Failed to send request: {exc}") from exc

        try:
            await resp.aread()
        except httpx.RequestError as exc:
            logger.warning("%s %s %s: read failed (%s)", self._service_name, method, request.url.path, type(exc).__name__)
            raise ToolError(f"Failed to read response body: {exc}") from exc
        finally:
            await resp.aclose()

        text = resp.text
        if not resp.is_success:
            logger.warning("%s %s %s: status %s", self._service_name, method, request.url.path, resp.status_code)
            raise ToolError(
                f"{self._service_name} API Error {resp.status_code} {resp.reason_phrase}: {text}",
                status_code=resp.status_code,
            )
        return text

    async def perform(
        self,
        method: str,
        url_or_path: str,
        json_body: Any = None,
        *,
        accept: str | None = None,
    ) -> Any:
        """Make a request and return decoded JSON.

        A successful response with an empty body (e.g. 204 No Content) yields None.

        Raises:
            ToolError: On transport failure, non-2xx status, or an unparseable body.
        """
        text = await self._round_trip(method, url_or_path, json_body=json_body, accept=accept)
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ToolError(f"Failed to parse JSON response: {exc}") from exc

    async def perform_text(self, method: str, url_or_path: str, *, accept: str | None = None) -> str:
        """Make a request and return the response body verbatim."""
        return await self._round_trip(method, url_or_path, accept=accept)

    async def aclose(self) -> None:
        if not self._http.is_closed:
            await self._http.aclose()


def pretty_json(value: Any) -> str:
    """Render a decoded JSON value as 2-space-indented text."""
    return json.dumps(value, indent=2, ensure_ascii=False)
