"""Best-effort webhook forwarding.

``deliver`` never raises: transport errors and non-2xx answers are
logged and reported through its boolean return value.  Each event is
posted at most once.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

log = logging.getLogger(__name__)


class WebhookNotifier:
    """POSTs JSON events to one configured URL."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "WebhookNotifier":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def deliver(self, payload: dict[str, Any]) -> bool:
        """Send *payload*; return True if the receiver accepted it."""
        event = payload.get("type", "?")
        try:
            resp = await self._client.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            log.warning("webhook %s failed: %s", event, exc)
            return False
        except Exception:
            log.exception("webhook %s failed unexpectedly", event)
            return False

        if resp.is_error:
            log.warning("webhook %s rejected: HTTP %d", event, resp.status_code)
            return False

        log.debug("webhook %s delivered", event)
        return True
