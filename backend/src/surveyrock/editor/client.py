"""Async client for the SurveyRock REST API."""

from __future__ import annotations

import inspect
import os
from collections.abc import Awaitable, Callable, Generator
from typing import Any

import httpx

SURVEYROCK_API_URL_ENV = "SURVEYROCK_API_URL"
SURVEYROCK_TIMEOUT_ENV = "SURVEYROCK_TIMEOUT"

# Returns the current access token (or None when signed out)
TokenProvider = Callable[[], "str | None | Awaitable[str | None]"]


class ApiError(Exception):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _get_timeout() -> float:
    """Get request timeout from environment (default 30s)."""
    timeout_env = os.environ.get(SURVEYROCK_TIMEOUT_ENV)
    if timeout_env:
        try:
            return float(timeout_env)
        except ValueError:
            pass
    return 30.0


class BearerTokenAuth(httpx.Auth):
    """Injects `Authorization: Bearer <token>` into every request.

    The token provider may be sync or async; a missing token sends the
    request unauthenticated.
    """

    def __init__(self, token_provider: TokenProvider):
        self._token_provider = token_provider

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._token_provider()
        if inspect.isawaitable(token):
            raise RuntimeError("Async token provider used with a sync client")
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request

    async def async_auth_flow(self, request: httpx.Request):
        token = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        if body.get("detail"):
            return str(body["detail"])
        if body.get("errors"):
            return "; ".join(e.get("message", "") for e in body["errors"])
        if body.get("error"):
            return str(body["error"])
    return response.reason_phrase


class SurveyRockClient:
    """Connection, schema and tile operations used by the tile editor."""

    def __init__(
        self,
        base_url: str | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. "http://localhost:8000/api"
                      (default from SURVEYROCK_API_URL)
            token_provider: Supplies the bearer token for each request
            transport: Custom transport (tests use httpx.MockTransport)
            timeout: Request timeout in seconds (default from env or 30s)
        """
        self._http = httpx.AsyncClient(
            base_url=base_url
            or os.environ.get(SURVEYROCK_API_URL_ENV, "http://localhost:8000/api"),
            auth=BearerTokenAuth(token_provider) if token_provider else None,
            transport=transport,
            timeout=timeout or _get_timeout(),
        )

    async def __aenter__(self) -> SurveyRockClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._http.request(method, path, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    async def list_connections(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/connections")
        return body.get("data", []) if isinstance(body, dict) else body or []

    async def fetch_schema(self, connection_id: str) -> Any:
        """Return the raw schema response (envelope included)."""
        return await self._request("GET", f"/connections/{connection_id}/schema")

    async def fetch_table_columns(
        self, connection_id: str, schema: str, table: str
    ) -> list[dict[str, Any]]:
        body = await self._request(
            "GET", f"/connections/{connection_id}/schema/{schema}/{table}"
        )
        if isinstance(body, dict):
            if body.get("success") and isinstance(body.get("data"), list):
                return body["data"]
            raise ApiError(200, body.get("error") or f"No columns returned for {schema}.{table}")
        return body or []

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------

    async def create_tile(self, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("POST", "/tiles", json=payload)
        return body["data"]

    async def update_tile(self, tile_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("PUT", f"/tiles/{tile_id}", json=payload)
        return body["data"]

    async def get_tile(self, tile_id: str) -> dict[str, Any]:
        body = await self._request("GET", f"/tiles/{tile_id}")
        return body["data"]
