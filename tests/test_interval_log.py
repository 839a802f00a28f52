"""Tests for the interval log."""

import random

import pytest

from batch_timer.errors import IndexOutOfRangeError
from batch_timer.interval_log import IntervalLog
from batch_timer.models import LogEntry
from batch_timer.storage import LOG_KEY


@pytest.fixture()
def log(clock, gateway):
    return IntervalLog(clock, gateway)


def _fill(log, clock, pairs):
    for duration, quantity in pairs:
        clock.set_elapsed(duration)
        log.commit(quantity)


class TestCommit:
    """Committing intervals."""

    def test_commit_reads_clock_without_resetting(self, log, clock, tickers):
        clock.start()
        tickers.latest.fire(30)
        entry = log.commit(5)

        assert entry == LogEntry(30, 5)
        assert clock.running
        assert clock.elapsed_seconds == 30

    def test_non_numeric_quantity_is_zero(self, log, clock):
        clock.set_elapsed(12)
        assert log.commit("lots").quantity == 0

    def test_duplicates_allowed(self, log, clock):
        _fill(log, clock, [(10, 1), (10, 1)])
        assert log.entries == [LogEntry(10, 1), LogEntry(10, 1)]

    def test_scenario_totals(self, log, clock):
        _fill(log, clock, [(30, 5), (45, 3)])
        totals = log.totals
        assert totals.total_duration == 75
        assert totals.total_quantity == 8

    def test_totals_never_drift(self, log, clock):
        rng = random.Random(7)
        for _ in range(100):
            clock.set_elapsed(rng.randint(0, 600))
            log.commit(rng.randint(0, 50))
            assert log.totals.total_duration == sum(e.duration_seconds for e in log)
            assert log.totals.total_quantity == sum(e.quantity for e in log)
            if len(log) > 3 and rng.random() < 0.3:
                log.delete_at(rng.randrange(len(log)))
                assert log.totals.total_duration == sum(e.duration_seconds for e in log)

    def test_commit_persists(self, log, clock, gateway):
        _fill(log, clock, [(30, 5)])
        assert gateway.load_log() == [LogEntry(30, 5)]


class TestDelete:
    """Deleting single intervals."""

    def test_delete_shifts_later_entries(self, log, clock, gateway):
        _fill(log, clock, [(10, 1), (20, 2), (30, 3), (40, 4), (50, 5)])
        removed = log.delete_at(2)

        assert removed == LogEntry(30, 3)
        assert len(log) == 4
        assert log.entries[2] == LogEntry(40, 4)
        assert log.totals.total_duration == 120
        assert log.totals.total_quantity == 12
        assert gateway.load_log() == log.entries

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_invalid_index(self, log, clock, index):
        _fill(log, clock, [(10, 1), (20, 2), (30, 3)])
        with pytest.raises(IndexOutOfRangeError):
            log.delete_at(index)
        assert len(log) == 3

    def test_deleting_last_entry_writes_empty_array(self, log, clock, store):
        _fill(log, clock, [(10, 1)])
        log.delete_at(0)
        assert store.data[LOG_KEY] == b"[]"


class TestClear:
    """Clearing the log behind a confirmation."""

    def test_declined_clear_changes_nothing(self, log, clock, store):
        _fill(log, clock, [(10, 1)])
        prompts = []

        def decline(prompt):
            prompts.append(prompt)
            return False

        assert log.clear(decline) is False
        assert len(log) == 1
        assert LOG_KEY in store.data
        assert prompts

    def test_confirmed_clear_removes_key(self, log, clock, store):
        _fill(log, clock, [(10, 1), (20, 2)])
        assert log.clear(lambda _prompt: True) is True
        assert len(log) == 0
        assert log.totals.total_duration == 0
        assert LOG_KEY not in store.data

    def test_truthy_non_boolean_is_not_confirmation(self, log, clock):
        _fill(log, clock, [(10, 1)])
        assert log.clear(lambda _prompt: "yes") is False
        assert len(log) == 1

    def test_failed_write_keeps_memory_state(self, log, clock, store):
        store.fail_writes = True
        _fill(log, clock, [(10, 1)])
        assert log.entries == [LogEntry(10, 1)]
        assert LOG_KEY not in store.data
