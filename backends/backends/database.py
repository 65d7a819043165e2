"""Hosted-database client — thin PostgREST (Supabase) table writer.

* ``insert(table, row)``              → inserted rows
* ``update(table, values, eq=...)``   → updated rows

Uses ``httpx.AsyncClient`` with connection pooling.  No retries: a
failed write surfaces as ``PersistenceError`` and the caller decides
whether it is fatal.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

log = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the database rejects a write or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(resp: httpx.Response) -> str:
    """Pull the human-readable message out of a PostgREST error body."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "msg", "error", "details"):
            if body.get(key):
                return str(body[key])
    return resp.text or f"HTTP {resp.status_code}"


class DatabaseClient:
    """Async client for the ``/rest/v1`` table API.

    Parameters
    ----------
    base_url : str
        Project origin, e.g. ``https://xyz.supabase.co``.
    api_key : str
        Anon or service key; sent as ``apikey`` and bearer token.
    timeout : float
        Default request timeout in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Injected transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Prefer": "return=representation",
            },
        )

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DatabaseClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # -- Internal ------------------------------------------------------

    async def _send(
        self,
        method: str,
        table: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        log.debug("db → %s %s", method, table)
        try:
            resp = await self._client.request(method, f"/{table}", json=payload, params=params)
        except httpx.HTTPError as exc:
            raise PersistenceError(f"{type(exc).__name__}: {exc}") from exc

        if resp.is_error:
            raise PersistenceError(_error_message(resp), resp.status_code)

        if not resp.content:
            return []
        try:
            rows = resp.json()
        except ValueError as exc:
            raise PersistenceError("invalid response body", resp.status_code) from exc
        if isinstance(rows, dict):
            rows = [rows]
        return rows

    # -- Writes --------------------------------------------------------

    async def insert(self, table: str, row: dict[str, Any]) -> list[dict[str, Any]]:
        """Insert one row and return the stored representation."""
        return await self._send("POST", table, row)

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        eq: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update rows whose columns equal *eq* and return them.

        An empty filter is refused rather than updating the whole table.
        """
        if not eq:
            raise ValueError("update requires at least one equality filter")
        params = {column: f"eq.{value}" for column, value in eq.items()}
        return await self._send("PATCH", table, values, params=params)
