from __future__ import annotations

import asyncio
from datetime import date

import pytest

from fuelpanel.models.prices import PriceResponse
from fuelpanel.state.keys import CacheKey, derive_key
from fuelpanel.state.store import FetchStatus, PriceRecordStore

_K1 = derive_key(date(2024, 3, 10), "E10")
_K2 = derive_key(date(2024, 3, 9), "E10")


def _response(price: float) -> PriceResponse:
    return PriceResponse.model_validate(
        {"message": "", "prices": {"today": {"date": "2024-03-10", "price": price, "prevPrices": []}}}
    )


class _GatedFetcher:
    """Fetch double whose calls block until their key's gate is opened."""

    def __init__(self) -> None:
        self.calls: list[CacheKey] = []
        self.results: dict[CacheKey, PriceResponse | Exception] = {}
        self._gates: dict[CacheKey, asyncio.Event] = {}

    def gate(self, key: CacheKey) -> asyncio.Event:
        return self._gates.setdefault(key, asyncio.Event())

    def release(self, key: CacheKey, result: PriceResponse | Exception) -> None:
        self.results[key] = result
        self.gate(key).set()

    async def __call__(self, key: CacheKey) -> PriceResponse:
        self.calls.append(key)
        await self.gate(key).wait()
        result = self.results[key]
        if isinstance(result, Exception):
            raise result
        return result


def test_unknown_key_is_idle() -> None:
    store = PriceRecordStore()
    status = store.status(_K1)
    assert status == FetchStatus.idle()
    assert status.is_resolved is False


@pytest.mark.asyncio
async def test_concurrent_resolves_fetch_once() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()

    statuses = [store.resolve(_K1, fetcher) for _ in range(5)]
    await asyncio.sleep(0)

    assert all(s.loading and s.data is None for s in statuses)
    assert fetcher.calls == [_K1]

    fetcher.release(_K1, _response(21.45))
    final = await store.wait(_K1)

    assert final.loading is False
    assert final.data == _response(21.45)
    assert fetcher.calls == [_K1]


@pytest.mark.asyncio
async def test_resolved_key_is_served_from_store() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()
    fetcher.release(_K1, _response(21.45))

    store.resolve(_K1, fetcher)
    await store.wait(_K1)
    status = store.resolve(_K1, fetcher)
    await asyncio.sleep(0)

    assert status.data == _response(21.45)
    assert status.loading is False
    assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_failure_is_reported_and_retry_is_caller_driven() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()
    fetcher.release(_K1, RuntimeError("service down"))

    store.resolve(_K1, fetcher)
    failed = await store.wait(_K1)
    assert failed.loading is False
    assert isinstance(failed.error, RuntimeError)
    assert failed.data is None

    # No automatic retry.
    await asyncio.sleep(0)
    assert len(fetcher.calls) == 1

    fetcher.results[_K1] = _response(20.0)
    retry = store.resolve(_K1, fetcher)
    assert retry.loading is True
    assert retry.error is None

    recovered = await store.wait(_K1)
    assert recovered.data == _response(20.0)
    assert len(fetcher.calls) == 2


@pytest.mark.asyncio
async def test_late_result_for_other_key_does_not_touch_current_key() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()

    store.resolve(_K1, fetcher)
    store.resolve(_K2, fetcher)
    await asyncio.sleep(0)

    fetcher.release(_K1, _response(21.45))
    await store.wait(_K1)

    current = store.status(_K2)
    assert current.loading is True
    assert current.data is None
    assert store.status(_K1).data == _response(21.45)

    fetcher.release(_K2, _response(19.0))
    assert (await store.wait(_K2)).data == _response(19.0)
    assert store.status(_K1).data == _response(21.45)


@pytest.mark.asyncio
async def test_revalidate_keeps_previous_data_visible() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()
    fetcher.release(_K1, _response(21.45))
    store.resolve(_K1, fetcher)
    await store.wait(_K1)

    fetcher.gate(_K1).clear()
    status = store.revalidate(_K1, fetcher)
    assert status.loading is True
    assert status.data == _response(21.45)

    # A second revalidate while in flight does not fetch again.
    store.revalidate(_K1, fetcher)
    await asyncio.sleep(0)
    assert len(fetcher.calls) == 2

    fetcher.release(_K1, _response(22.0))
    assert (await store.wait(_K1)).data == _response(22.0)


@pytest.mark.asyncio
async def test_discard_cancels_fetch_and_releases_waiters() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()

    store.resolve(_K1, fetcher)
    waiter = asyncio.create_task(store.wait(_K1))
    await asyncio.sleep(0)

    store.discard(_K1)

    assert await waiter == FetchStatus.idle()
    assert _K1 not in store
    assert store.status(_K1) == FetchStatus.idle()


@pytest.mark.asyncio
async def test_aclose_cancels_outstanding_fetches() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()
    store.resolve(_K1, fetcher)
    store.resolve(_K2, fetcher)
    await asyncio.sleep(0)

    await store.aclose()

    assert _K1 not in store
    assert _K2 not in store


def test_resolve_without_running_loop_leaves_key_fetchable() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()

    assert store.resolve(_K1, fetcher) == FetchStatus.idle()
    assert _K1 not in store

    async def _inside_loop() -> FetchStatus:
        fetcher.release(_K1, _response(21.45))
        store.resolve(_K1, fetcher)
        return await store.wait(_K1)

    assert asyncio.run(_inside_loop()).data == _response(21.45)
    assert fetcher.calls == [_K1]


@pytest.mark.asyncio
async def test_cancelled_fetch_ends_attempt_and_allows_retry() -> None:
    store = PriceRecordStore()
    calls: list[CacheKey] = []

    async def fetch(key: CacheKey) -> PriceResponse:
        calls.append(key)
        if len(calls) == 1:
            raise asyncio.CancelledError
        return _response(21.45)

    store.resolve(_K1, fetch)
    ended = await asyncio.wait_for(store.wait(_K1), 1.0)
    assert ended.loading is False
    assert ended.data is None

    retry = store.resolve(_K1, fetch)
    assert retry.loading is True
    assert (await asyncio.wait_for(store.wait(_K1), 1.0)).data == _response(21.45)
    assert calls == [_K1, _K1]


@pytest.mark.asyncio
async def test_cancelled_revalidate_keeps_previous_data() -> None:
    store = PriceRecordStore()
    fetcher = _GatedFetcher()
    fetcher.release(_K1, _response(21.45))
    store.resolve(_K1, fetcher)
    await store.wait(_K1)

    fetcher.gate(_K1).clear()
    store.revalidate(_K1, fetcher)
    await asyncio.sleep(0)
    fetch_task = store._entries[_K1].task  # noqa: SLF001
    assert fetch_task is not None
    fetch_task.cancel()

    ended = await asyncio.wait_for(store.wait(_K1), 1.0)
    assert ended == FetchStatus(data=_response(21.45))

    # Served from the store again, no new fetch.
    assert store.resolve(_K1, fetcher).data == _response(21.45)
    await asyncio.sleep(0)
    assert len(fetcher.calls) == 2
