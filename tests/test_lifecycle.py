from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from vote_telegram.lifecycle import SESSION_RETENTION, SessionSweeper
from vote_telegram.votes import VoteStore


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_retention_is_seven_days() -> None:
    assert SESSION_RETENTION == timedelta(days=7)


def test_sweep_once_removes_expired_sessions() -> None:
    start = datetime(2024, 5, 1, tzinfo=UTC)
    clock = FakeClock(start)
    store = VoteStore(clock=clock)
    store.create_session("old", "Old")
    clock.now = start + timedelta(days=5)
    store.create_session("new", "New")
    clock.now = start + timedelta(days=8)

    removed = SessionSweeper(store).sweep_once()

    assert removed == 1
    assert "old" not in store
    assert "new" in store


@pytest.mark.asyncio
async def test_sweeper_runs_immediately_on_start_and_stops() -> None:
    start = datetime(2024, 5, 1, tzinfo=UTC)
    clock = FakeClock(start)
    store = VoteStore(clock=clock)
    store.create_session("old", "Old")
    clock.now = start + timedelta(days=30)

    sweeper = SessionSweeper(store, interval_seconds=3600)
    await sweeper.start()
    await sweeper.start()
    for _ in range(20):
        if len(store) == 0:
            break
        await asyncio.sleep(0.01)

    assert len(store) == 0
    assert sweeper.running is True

    await sweeper.stop()
    assert sweeper.running is False


@pytest.mark.asyncio
async def test_sweeper_survives_sweep_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    store = VoteStore()
    calls: list[int] = []

    def _boom(retention: timedelta, now: datetime | None = None) -> int:
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "expire_older_than", _boom)
    sweeper = SessionSweeper(store, interval_seconds=0.01)
    await sweeper.start()
    for _ in range(50):
        if len(calls) >= 2:
            break
        await asyncio.sleep(0.01)
    await sweeper.stop()

    assert len(calls) >= 2
