"""Tests for the bounded audit trail."""

import pytest
from gateway.audit import AuditTrail


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.anyio
async def test_record_and_snapshot():
    trail = AuditTrail("t", clock=FakeClock())
    await trail.record("a", kind="x")
    await trail.record("b", kind="y")
    entries = await trail.snapshot()
    assert [e.key for e in entries] == ["a", "b"]
    assert entries[0].data == {"kind": "x"}


@pytest.mark.anyio
async def test_oldest_entries_dropped_at_capacity():
    trail = AuditTrail("t", max_entries=3, clock=FakeClock())
    for i in range(5):
        await trail.record(f"k{i}")
    assert [e.key for e in await trail.snapshot()] == ["k2", "k3", "k4"]


@pytest.mark.anyio
async def test_entries_expire_after_window():
    clock = FakeClock()
    trail = AuditTrail("t", window_seconds=60, clock=clock)
    await trail.record("old")
    clock.now += 30
    await trail.record("new")
    clock.now += 45
    assert [e.key for e in await trail.snapshot()] == ["new"]
    clock.now += 60
    assert await trail.count() == 0


@pytest.mark.anyio
async def test_count_by():
    trail = AuditTrail("t", clock=FakeClock())
    await trail.record("c1", classification="tapu")
    await trail.record("c2", classification="noa")
    await trail.record("c3", classification="tapu")
    assert await trail.count_by("classification") == {"tapu": 2, "noa": 1}


@pytest.mark.anyio
async def test_configure_keeps_newest():
    trail = AuditTrail("t", max_entries=10, clock=FakeClock())
    for i in range(4):
        await trail.record(f"k{i}")
    trail.configure(max_entries=2, window_seconds=3600)
    assert trail.max_entries == 2
    assert [e.key for e in await trail.snapshot()] == ["k2", "k3"]


@pytest.mark.anyio
async def test_entry_to_dict():
    trail = AuditTrail("t", clock=FakeClock(0.0))
    entry = await trail.record("p1", event="initiated")
    assert entry.to_dict() == {
        "key": "p1",
        "recordedAt": "1970-01-01T00:00:00+00:00",
        "event": "initiated",
    }


def test_rejects_zero_capacity():
    with pytest.raises(ValueError):
        AuditTrail("t", max_entries=0)
