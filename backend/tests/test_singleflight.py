"""Tests for concurrent lookup deduplication."""

import asyncio

import pytest
from sneaker_proxy.services.singleflight import SingleFlight


@pytest.mark.asyncio
async def test_concurrent_calls_share_one_execution():
    flight = SingleFlight()
    calls = 0
    release = asyncio.Event()

    async def lookup():
        nonlocal calls
        calls += 1
        await release.wait()
        return ["result"]

    waiters = [asyncio.ensure_future(flight.do("search:dunk:5", lookup)) for _ in range(3)]
    await asyncio.sleep(0)
    assert len(flight) == 1
    release.set()
    results = await asyncio.gather(*waiters)

    assert calls == 1
    assert results == [["result"]] * 3
    assert len(flight) == 0


@pytest.mark.asyncio
async def test_sequential_calls_run_again():
    flight = SingleFlight()
    calls = 0

    async def lookup():
        nonlocal calls
        calls += 1
        return calls

    assert await flight.do("k", lookup) == 1
    assert await flight.do("k", lookup) == 2


@pytest.mark.asyncio
async def test_different_keys_do_not_share():
    flight = SingleFlight()

    async def lookup_a():
        return "a"

    async def lookup_b():
        return "b"

    results = await asyncio.gather(flight.do("a", lookup_a), flight.do("b", lookup_b))
    assert results == ["a", "b"]


@pytest.mark.asyncio
async def test_exception_reaches_every_waiter():
    flight = SingleFlight()
    release = asyncio.Event()

    async def failing():
        await release.wait()
        raise RuntimeError("upstream exploded")

    waiters = [asyncio.ensure_future(flight.do("k", failing)) for _ in range(2)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert len(flight) == 0


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_call():
    flight = SingleFlight()
    release = asyncio.Event()

    async def lookup():
        await release.wait()
        return "done"

    first = asyncio.ensure_future(flight.do("k", lookup))
    second = asyncio.ensure_future(flight.do("k", lookup))
    await asyncio.sleep(0)
    first.cancel()
    release.set()

    assert await second == "done"
    with pytest.raises(asyncio.CancelledError):
        await first
