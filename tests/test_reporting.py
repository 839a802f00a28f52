"""Tests for the aggregation helpers."""

import pytest

from batch_timer.models import LogEntry, SummaryRow
from batch_timer.reporting import (
    average_duration,
    compute_totals,
    format_time,
    round_half_up,
    table_footer,
)


def _row(total_duration: int, batch_count: int, total_quantity: int = 0) -> SummaryRow:
    return SummaryRow(
        sequence_number=1,
        total_duration=total_duration,
        total_quantity=total_quantity,
        batch_count=batch_count,
        snapshot_date="07.03.2024",
        average_per_batch="N/A",
        average_per_unit="N/A",
    )


class TestFormatTime:
    """Tests for format_time."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "00:00:00"),
            (59, "00:00:59"),
            (3661, "01:01:01"),
            (86399, "23:59:59"),
            (360000, "100:00:00"),
        ],
    )
    def test_renders_zero_padded_clock(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            format_time(-1)


class TestAverageDuration:
    """Tests for average_duration and its rounding."""

    @pytest.mark.parametrize("total", [0, 1, 75, 360000])
    def test_zero_count_is_not_available(self, total):
        assert average_duration(total, 0) == "N/A"

    def test_negative_count_is_not_available(self):
        assert average_duration(100, -3) == "N/A"

    def test_ties_round_up(self):
        assert average_duration(75, 2) == "00:00:38"
        assert average_duration(5, 2) == "00:00:03"

    def test_below_half_rounds_down(self):
        assert average_duration(10, 3) == "00:00:03"

    def test_round_half_up_is_exact(self):
        # 2.5 is a tie even though binary floats would round it to 2.
        assert round_half_up(5, 2) == 3
        assert round_half_up(7, 4) == 2
        assert round_half_up(-5, 2) == -3


class TestComputeTotals:
    """Tests for compute_totals."""

    def test_empty(self):
        totals = compute_totals([])
        assert (totals.total_duration, totals.total_quantity, totals.count) == (0, 0, 0)

    def test_sums_durations_and_quantities(self):
        totals = compute_totals([LogEntry(30, 5), LogEntry(45, 3), LogEntry(10, -2)])
        assert totals.total_duration == 85
        assert totals.total_quantity == 6
        assert totals.count == 3


class TestTableFooter:
    """Tests for the summary table footer."""

    def test_empty_table(self):
        footer = table_footer([], live_log_length=4)
        assert footer.total_duration == 0
        assert footer.total_batches == 0
        assert footer.average_per_batch == "N/A"

    def test_sums_rows(self):
        footer = table_footer([_row(60, 2, 10), _row(90, 3, 7)], live_log_length=0)
        assert footer.total_duration == 150
        assert footer.total_quantity == 17
        assert footer.total_batches == 5

    def test_per_row_divides_by_each_batch_count(self):
        # (60 / 2 + 90 / 3) / 2 = 30
        footer = table_footer([_row(60, 2), _row(90, 3)], live_log_length=10, mode="per-row")
        assert footer.average_per_batch == "00:00:30"

    def test_live_log_divides_by_current_log_length(self):
        # (60 / 10 + 90 / 10) / 2 = 7.5
        footer = table_footer([_row(60, 2), _row(90, 3)], live_log_length=10, mode="live-log")
        assert footer.average_per_batch == "00:00:08"

    def test_empty_divisors_count_as_one(self):
        footer = table_footer([_row(40, 0)], live_log_length=0, mode="live-log")
        assert footer.average_per_batch == "00:00:40"
        footer = table_footer([_row(40, 0)], live_log_length=0, mode="per-row")
        assert footer.average_per_batch == "00:00:40"

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            table_footer([], live_log_length=0, mode="weighted")
