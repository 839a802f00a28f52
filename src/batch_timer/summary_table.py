"""Summary table of snapshots taken from the interval log."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterator, Optional, Sequence

from .errors import IndexOutOfRangeError
from .interval_log import Confirm, IntervalLog
from .models import SummaryRow, TableFooter
from .reporting import FOOTER_PER_ROW, average_duration, table_footer
from .storage import PersistenceGateway

logger = logging.getLogger(__name__)

CLEAR_TABLE_PROMPT = "Clear the whole summary table?"


class SummaryTable:
    """Ordered snapshot rows, mirrored to the persistence gateway."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        rows: Optional[Sequence[SummaryRow]] = None,
        *,
        date_format: str = "%d.%m.%Y",
        footer_mode: str = FOOTER_PER_ROW,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._gateway = gateway
        self._rows: list[SummaryRow] = list(rows or [])
        self._date_format = date_format
        self._footer_mode = footer_mode
        self._today = today

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[SummaryRow]:
        return iter(list(self._rows))

    @property
    def rows(self) -> list[SummaryRow]:
        return list(self._rows)

    def snapshot(self, log: IntervalLog) -> SummaryRow:
        """Copy the log's current totals into a new row."""
        totals = log.totals
        batch_count = len(log)
        row = SummaryRow(
            sequence_number=len(self._rows) + 1,
            total_duration=totals.total_duration,
            total_quantity=totals.total_quantity,
            batch_count=batch_count,
            snapshot_date=self._today().strftime(self._date_format),
            average_per_batch=average_duration(totals.total_duration, batch_count),
            average_per_unit=average_duration(totals.total_duration, totals.total_quantity),
        )
        self._rows.append(row)
        logger.debug("Added summary row %s.", row)
        self._gateway.save_table(self._rows)
        return row

    def set_annotation(self, index: int, value: str) -> SummaryRow:
        row = self._row_at(index)
        row.annotation = value
        logger.debug("Row %d annotation set to %r.", index, value)
        self._gateway.save_table(self._rows)
        return row

    def delete_at(self, index: int, confirm: Confirm) -> bool:
        """Remove one row after an affirmative ``confirm`` answer."""
        row = self._row_at(index)
        if confirm(f"Delete summary row #{row.sequence_number}?") is not True:
            logger.debug("Deletion of row %d declined.", index)
            return False
        del self._rows[index]
        logger.debug("Deleted summary row %d.", index)
        self._gateway.save_table(self._rows)
        return True

    def clear(self, confirm: Confirm) -> bool:
        if confirm(CLEAR_TABLE_PROMPT) is not True:
            logger.debug("Table clear declined.")
            return False
        self._rows.clear()
        self._gateway.remove_table()
        logger.info("Summary table cleared.")
        return True

    def footer(self, live_log_length: int) -> TableFooter:
        return table_footer(self._rows, live_log_length, self._footer_mode)

    def _row_at(self, index: int) -> SummaryRow:
        if not 0 <= index < len(self._rows):
            raise IndexOutOfRangeError(index, len(self._rows))
        return self._rows[index]
