"""Backoff iterators: live, cancellable cursors over a StrategyConfig.

The caller makes its first attempt right after `start()`, then calls
`next()` before every further attempt. `next()` waits out the delay the
policy prescribes and returns True, or returns False when the run is over:
either a bound was hit (exhausted) or the stop signal fired mid-wait
(cancelled, see `was_stopped()`).

Example:
    >>> it = BackoffIterator.start(StrategyConfig(initial_delay=0.1, max_attempts=3))
    >>> while True:
    ...     if try_connect():
    ...         break
    ...     if not it.next(stop_event):
    ...         raise ConnectionError("gave up")

    >>> # Or drive it as a plain loop
    >>> for attempt in attempts(cfg, stop_event):
    ...     if try_connect():
    ...         break

Both bounds are checked before sleeping, so a bounded run never ends with
a wasted wait.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import AsyncIterator, Iterator
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, Self

if TYPE_CHECKING:
    from .strategy import StrategyConfig

logger = logging.getLogger("pacer.retry")

Clock = Callable[[], float]


class IteratorState(StrEnum):
    """Lifecycle of a backoff run. EXHAUSTED and CANCELLED are terminal."""
    FRESH = "fresh"
    RUNNING = "running"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


_TERMINAL: frozenset[IteratorState] = frozenset({IteratorState.EXHAUSTED, IteratorState.CANCELLED})


class _BackoffCursor:
    """Policy state and arithmetic shared by the sync and async iterators.

    Not safe for concurrent use; the config it points at is shared read-only.
    """

    __slots__ = ("_config", "_clock", "_attempt", "_current_delay", "_start", "_stopped", "_state", "_last_delay")

    def __init__(self, config: StrategyConfig, clock: Clock | None = None) -> None:
        self.reset(config, clock)

    @classmethod
    def start(cls, config: StrategyConfig, clock: Clock | None = None) -> Self:
        """Begin a run. The caller's first attempt happens now, with no wait."""
        return cls(config, clock)

    def reset(self, config: StrategyConfig, clock: Clock | None = None) -> None:
        """Rewind this instance to a fresh run bound to `config`."""
        self._config = config
        self._clock = clock or time.monotonic
        self._attempt = 0
        self._current_delay = config.initial_delay
        self._start = self._clock()
        self._stopped = False
        self._state = IteratorState.FRESH
        self._last_delay: float | None = None

    @property
    def config(self) -> StrategyConfig:
        return self._config

    @property
    def attempt(self) -> int:
        """Number of `next()` calls made so far (0 right after start)."""
        return self._attempt

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def elapsed(self) -> float:
        """Seconds since the run began."""
        return self._clock() - self._start

    @property
    def last_delay(self) -> float | None:
        """Delay computed by the most recent `next()`, None before the first."""
        return self._last_delay

    def was_stopped(self) -> bool:
        """True only if the run ended because the stop signal fired."""
        return self._stopped

    def _advance(self) -> float | None:
        """Count an attempt and compute the next wait, or None if the policy says stop."""
        if self._state in _TERMINAL:
            return None
        self._state = IteratorState.RUNNING
        self._attempt += 1
        cfg = self._config

        if cfg.max_attempts is not None and self._attempt >= cfg.max_attempts:
            logger.debug("backoff exhausted: attempt cap %d reached", cfg.max_attempts)
            return self._exhaust()

        if cfg.regular:
            delay = cfg.initial_delay
        else:
            delay = self._current_delay
            if cfg.growth_factor > 1:
                self._current_delay *= cfg.growth_factor
            if cfg.max_delay > 0:
                delay = min(delay, cfg.max_delay)
                self._current_delay = min(self._current_delay, cfg.max_delay)
        self._last_delay = delay

        if cfg.max_total_duration > 0 and self.elapsed + delay > cfg.max_total_duration:
            logger.debug(
                "backoff exhausted: waiting %.3fs would pass the %.3fs budget",
                delay, cfg.max_total_duration,
            )
            return self._exhaust()

        logger.debug("attempt %d: waiting %.3fs", self._attempt + 1, delay)
        return delay

    def _exhaust(self) -> None:
        self._state = IteratorState.EXHAUSTED

    def _settle(self, cancelled: bool) -> bool:
        """Record the outcome of a wait. Returns whether the caller should try again."""
        if not cancelled:
            return True
        logger.debug("backoff cancelled while waiting before attempt %d", self._attempt + 1)
        self._stopped = True
        self._state = IteratorState.CANCELLED
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attempt={self._attempt}, state={self._state.value}, config={self._config})"


class BackoffIterator(_BackoffCursor):
    """Blocking backoff iterator for threaded code.

    The stop signal is a `threading.Event`; setting it from any thread
    interrupts a wait in progress. Plain `for` iteration passes no stop
    signal; use `iterate(stop)` for a cancellable loop.
    """

    __slots__ = ()

    def next(self, stop: threading.Event | None = None) -> bool:
        """Wait for the next attempt. Returns False when the run is over."""
        if (delay := self._advance()) is None:
            return False
        if stop is None:
            if delay > 0:
                time.sleep(delay)
            return self._settle(False)
        return self._settle(stop.wait(delay) if delay > 0 else stop.is_set())

    def iterate(self, stop: threading.Event | None = None) -> Iterator[int]:
        """Yield 1-based attempt numbers, waiting between them."""
        yield self._attempt + 1
        while self.next(stop):
            yield self._attempt + 1

    def __iter__(self) -> Iterator[int]:
        """Uncancellable iteration; see `iterate` to pass a stop event."""
        return self.iterate()


class AsyncBackoffIterator(_BackoffCursor):
    """Backoff iterator for asyncio code.

    The stop signal is an `asyncio.Event`; the wait races a timer against it.
    Plain `async for` passes no stop signal; use `iterate(stop)` to cancel.
    """

    __slots__ = ()

    async def next(self, stop: asyncio.Event | None = None) -> bool:
        """Wait for the next attempt. Returns False when the run is over."""
        if (delay := self._advance()) is None:
            return False
        if stop is None:
            await asyncio.sleep(max(delay, 0))
            return self._settle(False)
        if delay <= 0 or stop.is_set():
            return self._settle(stop.is_set())

        waiter = asyncio.ensure_future(stop.wait())
        try:
            done, _ = await asyncio.wait({waiter}, timeout=delay)
        finally:
            if not waiter.done():
                waiter.cancel()
        return self._settle(bool(done))

    async def iterate(self, stop: asyncio.Event | None = None) -> AsyncIterator[int]:
        """Yield 1-based attempt numbers, waiting between them."""
        yield self._attempt + 1
        while await self.next(stop):
            yield self._attempt + 1

    def __aiter__(self) -> AsyncIterator[int]:
        """Uncancellable iteration; see `iterate` to pass a stop event."""
        return self.iterate()


def attempts(
    config: StrategyConfig,
    stop: threading.Event | None = None,
    *,
    clock: Clock | None = None,
) -> Iterator[int]:
    """Iterate attempt numbers for a fresh run; `break` once the operation succeeds."""
    return BackoffIterator.start(config, clock).iterate(stop)


def async_attempts(
    config: StrategyConfig,
    stop: asyncio.Event | None = None,
    *,
    clock: Clock | None = None,
) -> AsyncIterator[int]:
    """Async counterpart of `attempts` for use with ``async for``."""
    return AsyncBackoffIterator.start(config, clock).iterate(stop)
