"""Tests for in-flight request sharing."""

import asyncio

import pytest

from sonub.services.deduplicator import RequestDeduplicator


@pytest.mark.asyncio
async def test__dedupe__concurrent_callers_share_one_call() -> None:
    dedup = RequestDeduplicator()
    calls = 0

    async def fetch() -> dict[str, int]:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return {"calls": calls}

    results = await asyncio.gather(
        dedup.dedupe("categories", fetch), dedup.dedupe("categories", fetch)
    )

    assert calls == 1
    assert results[0] == results[1] == {"calls": 1}
    assert (dedup.total, dedup.deduplicated) == (1, 1)
    assert dedup.get_in_flight_count() == 0


@pytest.mark.asyncio
async def test__dedupe__sequential_calls_run_again() -> None:
    dedup = RequestDeduplicator()
    calls = 0

    async def fetch() -> int:
        nonlocal calls
        calls += 1
        return calls

    assert await dedup.dedupe("k", fetch) == 1
    assert await dedup.dedupe("k", fetch) == 2


@pytest.mark.asyncio
async def test__dedupe__error_reaches_every_waiter() -> None:
    dedup = RequestDeduplicator()

    async def fetch() -> None:
        await asyncio.sleep(0.01)
        raise RuntimeError("down")

    results = await asyncio.gather(
        dedup.dedupe("k", fetch), dedup.dedupe("k", fetch), return_exceptions=True
    )

    assert all(isinstance(r, RuntimeError) for r in results)
    assert dedup.get_in_flight_count() == 0
