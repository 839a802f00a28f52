"""Domain models for recorded intervals and summary snapshots."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One committed interval: elapsed seconds plus the quantity produced."""

    duration_seconds: int
    quantity: int


@dataclass(frozen=True, slots=True)
class RunningTotals:
    """Totals derived from the full interval log."""

    total_duration: int = 0
    total_quantity: int = 0
    count: int = 0


@dataclass(slots=True)
class SummaryRow:
    """Point-in-time copy of the running totals."""

    sequence_number: int
    total_duration: int
    total_quantity: int
    batch_count: int
    snapshot_date: str
    average_per_batch: str
    average_per_unit: str
    annotation: str = ""


@dataclass(frozen=True, slots=True)
class TableFooter:
    """Table-wide totals shown below the summary rows."""

    total_duration: int
    total_quantity: int
    total_batches: int
    average_per_batch: str
