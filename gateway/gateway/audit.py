"""Bounded in-memory audit trails.

Toolsets record what they were asked to do (scraping reports,
classifications, consent events) into an ``AuditTrail``.  A trail holds
at most ``max_entries`` records and forgets records older than
``window_seconds``; it is diagnostic only and lost on restart.
"""

from __future__ import annotations

import logging
import time
from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import anyio

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuditEntry:
    key: str
    recorded_at: float
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        ts = datetime.fromtimestamp(self.recorded_at, tz=timezone.utc)
        return {"key": self.key, "recordedAt": ts.isoformat(), **self.data}


class AuditTrail:
    def __init__(
        self,
        name: str,
        max_entries: int = 1000,
        window_seconds: float = 86400.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.name = name
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: deque[AuditEntry] = deque(maxlen=max_entries)
        self._lock = anyio.Lock()

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen or 0

    def configure(self, max_entries: int, window_seconds: float) -> None:
        """Resize the trail; the newest entries are kept."""
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._entries = deque(self._entries, maxlen=max_entries)
        self.window_seconds = window_seconds

    def _evict(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._entries and self._entries[0].recorded_at < cutoff:
            self._entries.popleft()

    async def record(self, key: str, **data: Any) -> AuditEntry:
        async with self._lock:
            now = self._clock()
            self._evict(now)
            entry = AuditEntry(key, now, data)
            self._entries.append(entry)
        log.debug("audit %s ← %s", self.name, key)
        return entry

    async def snapshot(self) -> list[AuditEntry]:
        async with self._lock:
            self._evict(self._clock())
            return list(self._entries)

    async def count(self) -> int:
        return len(await self.snapshot())

    async def count_by(self, field_name: str) -> dict[str, int]:
        """Tally live entries by the value of one recorded field."""
        entries = await self.snapshot()
        return dict(Counter(str(e.data.get(field_name)) for e in entries))
