"""Aggregation helpers and console rendering for logs and summary tables."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from .models import LogEntry, RunningTotals, SummaryRow, TableFooter

NOT_AVAILABLE = "N/A"

FOOTER_PER_ROW = "per-row"
FOOTER_LIVE_LOG = "live-log"
FOOTER_MODES = (FOOTER_PER_ROW, FOOTER_LIVE_LOG)


def format_time(total_seconds: int) -> str:
    """Render seconds as ``HH:MM:SS``; hours keep growing past 24."""
    if total_seconds < 0:
        raise ValueError(f"Cannot format negative duration: {total_seconds}")
    hours, remainder = divmod(int(total_seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def round_half_up(numerator: int | Decimal, denominator: int) -> int:
    """Divide exactly and round to the nearest integer, ties away from zero."""
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def average_duration(total_duration: int, count: int) -> str:
    if count <= 0:
        return NOT_AVAILABLE
    return format_time(round_half_up(total_duration, count))


def compute_totals(entries: Iterable[LogEntry]) -> RunningTotals:
    total_duration = 0
    total_quantity = 0
    count = 0
    for entry in entries:
        total_duration += entry.duration_seconds
        total_quantity += entry.quantity
        count += 1
    return RunningTotals(
        total_duration=total_duration,
        total_quantity=total_quantity,
        count=count,
    )


def table_footer(
    rows: Sequence[SummaryRow],
    live_log_length: int,
    mode: str = FOOTER_PER_ROW,
) -> TableFooter:
    """Sum the table and average each row's duration per batch.

    In ``live-log`` mode every row is divided by the current log length,
    which reproduces the historical widget's output.
    """
    if mode not in FOOTER_MODES:
        raise ValueError(f"Unknown footer mode: {mode!r}")

    average = NOT_AVAILABLE
    if rows:
        per_row = Decimal(0)
        for row in rows:
            divisor = row.batch_count if mode == FOOTER_PER_ROW else live_log_length
            per_row += Decimal(row.total_duration) / Decimal(max(1, divisor))
        average = format_time(round_half_up(per_row, len(rows)))

    return TableFooter(
        total_duration=sum(row.total_duration for row in rows),
        total_quantity=sum(row.total_quantity for row in rows),
        total_batches=sum(row.batch_count for row in rows),
        average_per_batch=average,
    )


class SummaryPrinter:
    """Render the interval log and summary table in the console."""

    def __init__(self, footer_mode: str = FOOTER_PER_ROW) -> None:
        self.footer_mode = footer_mode

    def print_log(self, entries: Sequence[LogEntry]) -> None:
        if not entries:
            print("No intervals recorded.")
            return

        totals = compute_totals(entries)
        print("Interval log")
        print("-" * 40)
        for index, entry in enumerate(entries):
            print(f"  {index:>3}  {format_time(entry.duration_seconds)}  qty {entry.quantity}")
        print()
        print(f"Total time:     {format_time(totals.total_duration)}")
        print(f"Total quantity: {totals.total_quantity}")

    def print_table(self, rows: Sequence[SummaryRow], live_log_length: int) -> None:
        if not rows:
            print("Summary table is empty.")
            return

        print("Summary table")
        print("-" * 78)
        print(
            f"  {'#':>3}  {'Total':>9}  {'Qty':>6}  {'Batches':>7}  {'Date':<10}"
            f"  {'Avg/batch':>9}  {'Avg/unit':>9}  Note"
        )
        for row in rows:
            print(
                f"  {row.sequence_number:>3}  {format_time(row.total_duration):>9}"
                f"  {row.total_quantity:>6}  {row.batch_count:>7}  {row.snapshot_date:<10}"
                f"  {row.average_per_batch:>9}  {row.average_per_unit:>9}  {row.annotation}"
            )
        footer = table_footer(rows, live_log_length, self.footer_mode)
        print("-" * 78)
        print(
            f"  {'':>3}  {format_time(footer.total_duration):>9}  {footer.total_quantity:>6}"
            f"  {footer.total_batches:>7}  {'':<10}  {footer.average_per_batch:>9}"
        )
