"""Ordered log of committed intervals."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional, Sequence, Union

from .clock import Clock
from .errors import IndexOutOfRangeError
from .models import LogEntry, RunningTotals
from .normalization import coerce_quantity
from .reporting import compute_totals
from .storage import PersistenceGateway

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

CLEAR_LOG_PROMPT = "Clear the whole interval log?"


class IntervalLog:
    """Append-only list of intervals, mirrored to the persistence gateway."""

    def __init__(
        self,
        clock: Clock,
        gateway: PersistenceGateway,
        entries: Optional[Sequence[LogEntry]] = None,
    ) -> None:
        self._clock = clock
        self._gateway = gateway
        self._entries: list[LogEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    @property
    def totals(self) -> RunningTotals:
        return compute_totals(self._entries)

    def commit(self, quantity: Union[int, float, str, None]) -> LogEntry:
        """Record the clock's current reading with a quantity."""
        entry = LogEntry(
            duration_seconds=self._clock.elapsed_seconds,
            quantity=coerce_quantity(quantity),
        )
        self._entries.append(entry)
        logger.debug("Committed interval %s.", entry)
        self._gateway.save_log(self._entries)
        return entry

    def delete_at(self, index: int) -> LogEntry:
        if not 0 <= index < len(self._entries):
            raise IndexOutOfRangeError(index, len(self._entries))
        entry = self._entries.pop(index)
        logger.debug("Deleted interval %d: %s.", index, entry)
        self._gateway.save_log(self._entries)
        return entry

    def clear(self, confirm: Confirm) -> bool:
        """Empty the log after an affirmative ``confirm`` answer."""
        if confirm(CLEAR_LOG_PROMPT) is not True:
            logger.debug("Log clear declined.")
            return False
        self._entries.clear()
        self._gateway.remove_log()
        logger.info("Interval log cleared.")
        return True
