"""A tracking session: one clock, one interval log, one summary table."""

from __future__ import annotations

import logging
import random
import threading
from datetime import date
from typing import Any, Callable, Dict, Optional, Union

from .clock import Clock, ThreadTicker, TickerFactory
from .config import TrackerSettings
from .errors import IndexOutOfRangeError
from .interval_log import Confirm, IntervalLog
from .models import LogEntry, SummaryRow
from .normalization import coerce_quantity, parse_time
from .reporting import format_time
from .storage import PersistenceGateway
from .summary_table import SummaryTable

logger = logging.getLogger(__name__)


class TrackerSession:
    """Serialize user actions against the clock, log, and table."""

    def __init__(
        self,
        clock: Clock,
        log: IntervalLog,
        table: SummaryTable,
        settings: TrackerSettings,
    ) -> None:
        self.clock = clock
        self.log = log
        self.table = table
        self.settings = settings
        self.pending_quantity: Union[int, float, str] = settings.default_quantity
        self._lock = threading.RLock()

    @classmethod
    def restore(
        cls,
        gateway: PersistenceGateway,
        settings: Optional[TrackerSettings] = None,
        *,
        ticker_factory: TickerFactory = ThreadTicker,
        today: Callable[[], date] = date.today,
    ) -> "TrackerSession":
        """Build a session from whatever the gateway has stored."""
        resolved = settings or TrackerSettings()
        clock = Clock(resolved.tick_interval, ticker_factory=ticker_factory)
        log = IntervalLog(clock, gateway, gateway.load_log())
        table = SummaryTable(
            gateway,
            gateway.load_table(),
            date_format=resolved.date_format,
            footer_mode=resolved.footer_average,
            today=today,
        )
        logger.info(
            "Session restored with %d interval(s) and %d summary row(s).",
            len(log),
            len(table),
        )
        return cls(clock, log, table, resolved)

    def start(self) -> None:
        with self._lock:
            self.clock.start()

    def stop(self) -> None:
        with self._lock:
            self.clock.stop()

    def restart(self) -> None:
        with self._lock:
            self.clock.restart()

    def set_elapsed_text(self, value: str) -> int:
        seconds = parse_time(value)
        with self._lock:
            self.clock.set_elapsed(seconds)
        return seconds

    def randomize(
        self,
        min_text: Optional[str] = None,
        max_text: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> int:
        """Pick a random elapsed time; raises ``InvalidRangeError`` on a bad range."""
        min_seconds = (
            parse_time(min_text) if min_text is not None else self.settings.random_min_seconds
        )
        max_seconds = (
            parse_time(max_text) if max_text is not None else self.settings.random_max_seconds
        )
        with self._lock:
            return self.clock.randomize(min_seconds, max_seconds, rng)

    def set_pending_quantity(self, value: Union[int, float, str]) -> None:
        with self._lock:
            self.pending_quantity = value

    def commit(self, quantity: Union[int, float, str, None] = None) -> LogEntry:
        with self._lock:
            return self.log.commit(self.pending_quantity if quantity is None else quantity)

    def delete_entry(self, index: int) -> bool:
        with self._lock:
            try:
                self.log.delete_at(index)
            except IndexOutOfRangeError as exc:
                logger.warning("Ignoring interval deletion: %s", exc)
                return False
            return True

    def clear_log(self, confirm: Confirm) -> bool:
        with self._lock:
            return self.log.clear(confirm)

    def snapshot(self) -> SummaryRow:
        with self._lock:
            return self.table.snapshot(self.log)

    def annotate(self, index: int, value: str) -> bool:
        with self._lock:
            try:
                self.table.set_annotation(index, value)
            except IndexOutOfRangeError as exc:
                logger.warning("Ignoring annotation edit: %s", exc)
                return False
            return True

    def delete_row(self, index: int, confirm: Confirm) -> bool:
        with self._lock:
            try:
                return self.table.delete_at(index, confirm)
            except IndexOutOfRangeError as exc:
                logger.warning("Ignoring row deletion: %s", exc)
                return False

    def clear_table(self, confirm: Confirm) -> bool:
        with self._lock:
            return self.table.clear(confirm)

    def shutdown(self) -> None:
        self.clock.stop()

    def state(self) -> Dict[str, Any]:
        with self._lock:
            elapsed = self.clock.elapsed_seconds
            totals = self.log.totals
            footer = self.table.footer(len(self.log))
            return {
                "clock": {
                    "elapsed_seconds": elapsed,
                    "elapsed": format_time(elapsed),
                    "running": self.clock.running,
                },
                "pending_quantity": coerce_quantity(self.pending_quantity),
                "log": [
                    {
                        "index": index,
                        "duration_seconds": entry.duration_seconds,
                        "duration": format_time(entry.duration_seconds),
                        "quantity": entry.quantity,
                    }
                    for index, entry in enumerate(self.log)
                ],
                "totals": {
                    "total_duration_seconds": totals.total_duration,
                    "total_duration": format_time(totals.total_duration),
                    "total_quantity": totals.total_quantity,
                    "count": totals.count,
                },
                "table": [_row_payload(index, row) for index, row in enumerate(self.table)],
                "footer": {
                    "total_duration_seconds": footer.total_duration,
                    "total_duration": format_time(footer.total_duration),
                    "total_quantity": footer.total_quantity,
                    "total_batches": footer.total_batches,
                    "average_per_batch": footer.average_per_batch,
                },
            }


def _row_payload(index: int, row: SummaryRow) -> Dict[str, Any]:
    return {
        "index": index,
        "number": row.sequence_number,
        "total_duration_seconds": row.total_duration,
        "total_duration": format_time(row.total_duration),
        "total_quantity": row.total_quantity,
        "batch_count": row.batch_count,
        "date": row.snapshot_date,
        "average_per_batch": row.average_per_batch,
        "average_per_unit": row.average_per_unit,
        "annotation": row.annotation,
    }
