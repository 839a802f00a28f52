"""Configuration models and helpers for the batch timer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .normalization import parse_time
from .reporting import FOOTER_MODES, FOOTER_PER_ROW


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration for a tracking session."""

    tick_interval: timedelta = timedelta(seconds=1)
    random_min_seconds: int = 90
    random_max_seconds: int = 175
    default_quantity: int = 30
    date_format: str = "%d.%m.%Y"
    footer_average: str = FOOTER_PER_ROW

    @classmethod
    def from_options(
        cls,
        random_min: str | None = None,
        random_max: str | None = None,
        default_quantity: int | None = None,
        footer_average: str | None = None,
        date_format: str | None = None,
    ) -> "TrackerSettings":
        defaults = cls()
        footer = footer_average or defaults.footer_average
        if footer not in FOOTER_MODES:
            raise ValueError(
                f"footer_average must be one of {', '.join(FOOTER_MODES)}; got {footer!r}"
            )
        return cls(
            random_min_seconds=(
                parse_time(random_min) if random_min is not None else defaults.random_min_seconds
            ),
            random_max_seconds=(
                parse_time(random_max) if random_max is not None else defaults.random_max_seconds
            ),
            default_quantity=(
                default_quantity if default_quantity is not None else defaults.default_quantity
            ),
            date_format=date_format or defaults.date_format,
            footer_average=footer,
        )
