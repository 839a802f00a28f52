"""Persistence gateway mirroring the interval log and summary table.

Both collections are stored as JSON arrays under fixed keys of a key/value
store. Reads never fail: a missing or unreadable value loads as an empty
collection. Writes are best-effort and report success as a boolean.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional, Protocol, Sequence, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .errors import ParseError
from .models import LogEntry, SummaryRow
from .reporting import NOT_AVAILABLE

logger = logging.getLogger(__name__)

LOG_KEY = "timerLog"
TABLE_KEY = "tableEntries"

_STORE_ERRORS = (sqlite3.Error, OSError)

RecordT = TypeVar("RecordT", bound=BaseModel)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def remove(self, key: str) -> bool: ...


class LogRecord(BaseModel):
    time: NonNegativeInt
    input: int

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogRecord":
        return cls(time=entry.duration_seconds, input=entry.quantity)

    def to_entry(self) -> LogEntry:
        return LogEntry(duration_seconds=self.time, quantity=self.input)


class TableRecord(BaseModel):
    number: int
    totalTime: NonNegativeInt
    totalInputValue: int
    packsValue: int = 0
    date: str
    averageTime: str = NOT_AVAILABLE
    averageTimePerImage: str = NOT_AVAILABLE
    editableNumber: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("averageTime", "averageTimePerImage", mode="before")
    @classmethod
    def blank_average_is_not_available(cls, value: object) -> object:
        return value or NOT_AVAILABLE

    @field_validator("editableNumber", mode="before")
    @classmethod
    def annotation_as_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_row(cls, row: SummaryRow) -> "TableRecord":
        return cls(
            number=row.sequence_number,
            totalTime=row.total_duration,
            totalInputValue=row.total_quantity,
            packsValue=row.batch_count,
            date=row.snapshot_date,
            averageTime=row.average_per_batch,
            averageTimePerImage=row.average_per_unit,
            editableNumber=row.annotation,
        )

    def to_row(self) -> SummaryRow:
        return SummaryRow(
            sequence_number=self.number,
            total_duration=self.totalTime,
            total_quantity=self.totalInputValue,
            batch_count=self.packsValue,
            snapshot_date=self.date,
            average_per_batch=self.averageTime,
            average_per_unit=self.averageTimePerImage,
            annotation=self.editableNumber,
        )


_ARRAY_ADAPTER = TypeAdapter(list[Any])
_LOG_ADAPTER = TypeAdapter(list[LogRecord])
_TABLE_ADAPTER = TypeAdapter(list[TableRecord])


def decode_records(key: str, raw: bytes, model: type[RecordT]) -> list[RecordT]:
    """Validate a stored JSON array record by record.

    A value that is not a JSON array raises ``ParseError``. Individual records
    that fail validation are dropped with a warning; the rest are kept.
    """
    try:
        items = _ARRAY_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise ParseError(key, f"{exc.error_count()} validation error(s)") from exc

    records: list[RecordT] = []
    for position, item in enumerate(items):
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "Skipping stored %s record %d: %d validation error(s).",
                key,
                position,
                exc.error_count(),
            )
    return records


def encode_records(records: Sequence[BaseModel], adapter: TypeAdapter) -> bytes:
    return adapter.dump_json(list(records))


class PersistenceGateway:
    """Load and save the interval log and summary table through a store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load_log(self) -> list[LogEntry]:
        records = self._load(LOG_KEY, LogRecord)
        return [record.to_entry() for record in records]

    def save_log(self, entries: Sequence[LogEntry]) -> bool:
        payload = encode_records([LogRecord.from_entry(entry) for entry in entries], _LOG_ADAPTER)
        return self._write(LOG_KEY, payload)

    def remove_log(self) -> bool:
        return self._remove(LOG_KEY)

    def load_table(self) -> list[SummaryRow]:
        records = self._load(TABLE_KEY, TableRecord)
        return [record.to_row() for record in records]

    def save_table(self, rows: Sequence[SummaryRow]) -> bool:
        payload = encode_records([TableRecord.from_row(row) for row in rows], _TABLE_ADAPTER)
        return self._write(TABLE_KEY, payload)

    def remove_table(self) -> bool:
        return self._remove(TABLE_KEY)

    def _load(self, key: str, model: type[RecordT]) -> list[RecordT]:
        try:
            raw = self.store.get(key)
        except _STORE_ERRORS:
            logger.exception("Failed to read %s; starting empty.", key)
            return []
        if raw is None:
            logger.debug("No stored value for %s.", key)
            return []
        try:
            records = decode_records(key, raw, model)
        except ParseError as exc:
            logger.warning("%s Falling back to an empty collection.", exc)
            return []
        logger.debug("Restored %d record(s) from %s.", len(records), key)
        return records

    def _write(self, key: str, payload: bytes) -> bool:
        try:
            self.store.set(key, payload)
        except _STORE_ERRORS:
            logger.exception("Failed to persist %s; keeping in-memory state.", key)
            return False
        return True

    def _remove(self, key: str) -> bool:
        try:
            self.store.remove(key)
        except _STORE_ERRORS:
            logger.exception("Failed to remove %s.", key)
            return False
        return True
