"""Workout domain models."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Union


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# Quoted literals, escaped or padded characters, and bracket tags other than
# elapsed-time codes like [h] or [ss] are not date/time codes.
_FORMAT_LITERAL_RE = re.compile(r'"[^"]*"|\\.|[_*].|\[(?![hms]+\])[^\]]*\]', re.IGNORECASE)


def _format_codes(number_format: str) -> str:
    return _FORMAT_LITERAL_RE.sub("", number_format).lower()


@dataclass(frozen=True)
class Segment:
    duration_sec: int
    power_pct: float
    ramp_end_pct: float | None = None
    cadence_rpm: int | None = None

    def __post_init__(self) -> None:
        if self.duration_sec <= 0:
            raise ValueError("Segment duration must be > 0")
        if self.power_pct <= 0:
            raise ValueError("Segment power must be > 0")
        if self.ramp_end_pct is not None and self.ramp_end_pct <= 0:
            raise ValueError("Segment ramp end power must be > 0")
        if round_half_up(self.power_pct) <= 0 or round_half_up(self.end_pct) <= 0:
            raise ValueError("Segment power must round to at least 1%")
        if self.cadence_rpm is not None and self.cadence_rpm <= 0:
            raise ValueError("Segment cadence must be > 0")

    @property
    def is_ramp(self) -> bool:
        return self.ramp_end_pct is not None

    @property
    def end_pct(self) -> float:
        return self.ramp_end_pct if self.ramp_end_pct is not None else self.power_pct

    @property
    def average_pct(self) -> float:
        return (self.power_pct + self.end_pct) / 2.0

    @property
    def tss(self) -> float:
        """Training Stress Score, using the average target as intensity factor."""
        hours = self.duration_sec / 3600.0
        return hours * (self.average_pct / 100.0) ** 2 * 100.0


@dataclass(frozen=True)
class Workout:
    name: str
    ftp_watts: int
    segments: tuple[Segment, ...]

    @property
    def total_duration_sec(self) -> int:
        return sum(segment.duration_sec for segment in self.segments)

    @property
    def tss(self) -> float:
        return sum(segment.tss for segment in self.segments)

    @property
    def intensity_factor(self) -> float:
        hours = self.total_duration_sec / 3600.0
        if hours <= 0:
            return 0.0
        return math.sqrt(self.tss / (hours * 100.0))

    def segment_starts(self) -> list[int]:
        starts: list[int] = []
        elapsed = 0
        for segment in self.segments:
            starts.append(elapsed)
            elapsed += segment.duration_sec
        return starts


# Spreadsheet cell values, resolved explicitly by the parser.


@dataclass(frozen=True)
class EmptyCell:
    pass


@dataclass(frozen=True)
class NumberCell:
    value: float
    number_format: str = "General"

    @property
    def is_percent(self) -> bool:
        return "%" in self.number_format


@dataclass(frozen=True)
class TextCell:
    value: str


@dataclass(frozen=True)
class TimeCell:
    value: time | timedelta
    number_format: str = "h:mm"

    @property
    def shows_seconds(self) -> bool:
        return "s" in _format_codes(self.number_format)

    @property
    def elapsed_sec(self) -> float:
        if isinstance(self.value, timedelta):
            return self.value.total_seconds()
        return (
            self.value.hour * 3600
            + self.value.minute * 60
            + self.value.second
            + self.value.microsecond / 1_000_000
        )


Cell = Union[EmptyCell, NumberCell, TextCell, TimeCell]


def read_cell(value: object, number_format: str | None = None) -> Cell:
    fmt = number_format or "General"
    if value is None:
        return EmptyCell()
    if isinstance(value, bool):
        return TextCell(str(value))
    if isinstance(value, (int, float)):
        return NumberCell(float(value), fmt)
    # a datetime carries a calendar date, never a duration
    if isinstance(value, datetime):
        return TextCell(value.isoformat())
    if isinstance(value, (time, timedelta)):
        return TimeCell(value, fmt)
    text = str(value).strip()
    if not text:
        return EmptyCell()
    return TextCell(text)
