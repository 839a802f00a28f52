"""Whole-second stopwatch driven by a cancellable periodic ticker."""

from __future__ import annotations

import logging
import random
import threading
import time
from datetime import timedelta
from functools import partial
from typing import Callable, Optional, Protocol

from .errors import InvalidRangeError

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TickerFactory = Callable[[Callable[[], None], timedelta], Ticker]


class ThreadTicker:
    """Invoke a callback once per interval from a daemon thread."""

    def __init__(self, callback: Callable[[], None], interval: timedelta) -> None:
        self._callback = callback
        self._interval = interval.total_seconds()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stop_event.set()

    def _run_loop(self) -> None:
        # Deadlines are absolute so slow callbacks do not accumulate drift.
        deadline = time.monotonic() + self._interval
        while not self._stop_event.wait(max(deadline - time.monotonic(), 0.0)):
            self._callback()
            deadline += self._interval


class Clock:
    """Counts elapsed whole seconds while running."""

    def __init__(
        self,
        tick_interval: timedelta = timedelta(seconds=1),
        *,
        ticker_factory: TickerFactory = ThreadTicker,
    ) -> None:
        self._tick_interval = tick_interval
        self._ticker_factory = ticker_factory
        self._lock = threading.Lock()
        self._elapsed = 0
        self._running = False
        self._generation = 0
        self._ticker: Optional[Ticker] = None

    @property
    def elapsed_seconds(self) -> int:
        with self._lock:
            return self._elapsed

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            ticker = self._ticker_factory(
                partial(self._on_tick, self._generation), self._tick_interval
            )
            self._ticker = ticker
        ticker.start()
        logger.info("Clock started at %ds.", self.elapsed_seconds)

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._halt_locked()
            elapsed = self._elapsed
        logger.info("Clock stopped at %ds.", elapsed)

    def restart(self) -> None:
        with self._lock:
            self._halt_locked()
            self._elapsed = 0
        logger.debug("Clock reset.")
        self.start()

    def set_elapsed(self, seconds: int) -> None:
        if seconds < 0:
            raise ValueError(f"Elapsed time cannot be negative: {seconds}")
        with self._lock:
            self._elapsed = int(seconds)
        logger.debug("Elapsed time set to %ds.", seconds)

    def randomize(
        self,
        min_seconds: int,
        max_seconds: int,
        rng: Optional[random.Random] = None,
    ) -> int:
        """Set elapsed time to a uniform pick from ``[min, max]``."""
        if min_seconds > max_seconds:
            raise InvalidRangeError(min_seconds, max_seconds)
        value = (rng or random).randint(min_seconds, max_seconds)
        self.set_elapsed(value)
        logger.debug("Generated random time %ds in [%d, %d].", value, min_seconds, max_seconds)
        return value

    def _halt_locked(self) -> None:
        self._running = False
        self._generation += 1
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if not self._running or generation != self._generation:
                return
            self._elapsed += 1
