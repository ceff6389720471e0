"""Request-deduplicating price record store.

This is the only component allowed to write fetch results. Each cache key
owns one entry; at most one fetch per key is outstanding at any time, and a
completion is only ever applied to the entry of the key that started it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from fuelpanel.models.prices import PriceResponse
from fuelpanel.state.keys import CacheKey

_logger = logging.getLogger(__name__)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


FetchFn = Callable[[CacheKey], Awaitable[PriceResponse]]


@dataclass(frozen=True, slots=True)
class FetchStatus:
    """What a reader sees for one key."""

    loading: bool = False
    data: PriceResponse | None = None
    error: Exception | None = None

    @classmethod
    def idle(cls) -> FetchStatus:
        return cls()

    @property
    def is_resolved(self) -> bool:
        return not self.loading and (self.data is not None or self.error is not None)


@dataclass(slots=True)
class _Entry:
    status: FetchStatus
    task: asyncio.Task[None] | None = None
    attempt: int = 0
    waiters: list[asyncio.Future[FetchStatus]] = field(default_factory=list)


class PriceRecordStore:
    """In-memory key -> status mapping with per-key fetch deduplication.

    All methods must be called from the event loop thread. :meth:`resolve`
    and :meth:`revalidate` only schedule fetches while a loop is running.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, _Entry] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def status(self, key: CacheKey) -> FetchStatus:
        """Current status for *key* without triggering a fetch."""
        entry = self._entries.get(key)
        if entry is None:
            return FetchStatus.idle()
        return entry.status

    def resolve(self, key: CacheKey, fetch_fn: FetchFn) -> FetchStatus:
        """Return the status for *key*, starting a fetch when needed.

        * unknown key: start the one fetch for it;
        * in flight or resolved with data: return as is;
        * ended without data (error or cancellation): start a new attempt.

        Without a running event loop nothing is scheduled and the key is
        left untouched, so a later call from inside the loop fetches it.
        """
        entry = self._entries.get(key)
        if entry is not None and (entry.task is not None or entry.status.data is not None):
            _logger.debug("Serving %s from store (loading=%s)", key, entry.status.loading)
            return entry.status
        loop = _running_loop()
        if loop is None:
            _logger.warning("No running event loop, not fetching %s", key)
            return self.status(key)
        if entry is None:
            entry = _Entry(status=FetchStatus(loading=True))
            self._entries[key] = entry
        else:
            _logger.debug("Retrying %s after failed attempt", key)
            entry.status = FetchStatus(loading=True)
        self._start(loop, key, entry, fetch_fn)
        return entry.status

    def revalidate(self, key: CacheKey, fetch_fn: FetchFn) -> FetchStatus:
        """Fetch *key* again even if it is resolved.

        The previous data stays visible, flagged as loading, until the new
        attempt completes. Does nothing while a fetch is already in flight.
        """
        entry = self._entries.get(key)
        if entry is None:
            return self.resolve(key, fetch_fn)
        if entry.task is not None:
            return entry.status
        loop = _running_loop()
        if loop is None:
            _logger.warning("No running event loop, not revalidating %s", key)
            return entry.status
        entry.status = FetchStatus(loading=True, data=entry.status.data)
        self._start(loop, key, entry, fetch_fn)
        return entry.status

    async def wait(self, key: CacheKey) -> FetchStatus:
        """Wait for the in-flight fetch of *key* (if any) and return its status."""
        entry = self._entries.get(key)
        if entry is None or entry.task is None:
            return self.status(key)
        waiter: asyncio.Future[FetchStatus] = asyncio.get_running_loop().create_future()
        entry.waiters.append(waiter)
        return await waiter

    def discard(self, key: CacheKey) -> None:
        """Forget *key*, cancelling its fetch if one is outstanding."""
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        if entry.task is not None:
            entry.task.cancel()
        self._release_waiters(entry, FetchStatus.idle())

    async def aclose(self) -> None:
        """Cancel every outstanding fetch."""
        tasks = [entry.task for entry in self._entries.values() if entry.task is not None]
        for key in list(self._entries):
            self.discard(key)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal transitions
    # ------------------------------------------------------------------

    def _start(self, loop: asyncio.AbstractEventLoop, key: CacheKey, entry: _Entry, fetch_fn: FetchFn) -> None:
        entry.attempt += 1
        _logger.debug("Fetching %s (attempt %d)", key, entry.attempt)
        entry.task = loop.create_task(
            self._run(key, entry, entry.attempt, fetch_fn),
            name=f"fuelpanel-fetch-{key}",
        )

    async def _run(self, key: CacheKey, entry: _Entry, attempt: int, fetch_fn: FetchFn) -> None:
        try:
            data = await fetch_fn(key)
        except asyncio.CancelledError:
            # Previous data (if any) stays; without it the next resolve starts over.
            _logger.debug("Fetching %s was cancelled", key)
            self._complete(key, entry, attempt, FetchStatus(data=entry.status.data))
            raise
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Fetching %s failed: %s", key, exc)
            self._complete(key, entry, attempt, FetchStatus(error=exc))
        else:
            self._complete(key, entry, attempt, FetchStatus(data=data))

    def _complete(self, key: CacheKey, entry: _Entry, attempt: int, status: FetchStatus) -> None:
        # A discarded or superseded entry absorbs the result silently.
        if self._entries.get(key) is not entry or entry.attempt != attempt:
            _logger.debug("Dropping late result for %s", key)
            return
        entry.status = status
        entry.task = None
        self._release_waiters(entry, status)

    @staticmethod
    def _release_waiters(entry: _Entry, status: FetchStatus) -> None:
        waiters, entry.waiters = entry.waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(status)
