"""Shared fixtures: an in-memory store and a hand-driven ticker."""

from __future__ import annotations

import sqlite3
from datetime import date, timedelta
from typing import Callable, Optional

import pytest

from batch_timer.clock import Clock
from batch_timer.config import TrackerSettings
from batch_timer.session import TrackerSession
from batch_timer.storage import PersistenceGateway


class MemoryStore:
    """Dict-backed stand-in for the SQLite store."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})
        self.fail_writes = False

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise sqlite3.OperationalError("database or disk is full")
        self.data[key] = value

    def remove(self, key: str) -> bool:
        if self.fail_writes:
            raise sqlite3.OperationalError("database or disk is full")
        return self.data.pop(key, None) is not None


class ManualTicker:
    """Ticker whose ticks are fired by the test."""

    def __init__(self, callback: Callable[[], None], interval: timedelta) -> None:
        self.callback = callback
        self.interval = interval
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            self.callback()


class TickerRecorder:
    """Ticker factory that remembers every ticker it built."""

    def __init__(self) -> None:
        self.tickers: list[ManualTicker] = []

    def __call__(self, callback: Callable[[], None], interval: timedelta) -> ManualTicker:
        ticker = ManualTicker(callback, interval)
        self.tickers.append(ticker)
        return ticker

    @property
    def latest(self) -> ManualTicker:
        return self.tickers[-1]


FIXED_DAY = date(2024, 3, 7)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def gateway(store: MemoryStore) -> PersistenceGateway:
    return PersistenceGateway(store)


@pytest.fixture()
def tickers() -> TickerRecorder:
    return TickerRecorder()


@pytest.fixture()
def clock(tickers: TickerRecorder) -> Clock:
    return Clock(ticker_factory=tickers)


@pytest.fixture()
def session(gateway: PersistenceGateway, tickers: TickerRecorder) -> TrackerSession:
    return TrackerSession.restore(
        gateway,
        TrackerSettings(),
        ticker_factory=tickers,
        today=lambda: FIXED_DAY,
    )
