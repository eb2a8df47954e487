"""Workout workbook parser (XLSX)."""

from __future__ import annotations

import logging
import re
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from openpyxl import load_workbook
from openpyxl.utils.cell import coordinate_to_tuple
from openpyxl.utils.exceptions import InvalidFileException

from ergsheet.workout.constants import (
    CADENCE_COLUMN,
    DURATION_COLUMN,
    FTP_CELL,
    HEADER_ROWS,
    OVERVIEW_SHEET,
    POWER_COLUMN,
    RAMP_DELIMITERS,
)
from ergsheet.workout.errors import (
    InvalidCadence,
    InvalidDuration,
    InvalidFtp,
    InvalidPower,
    MalformedWorkbook,
    MissingOverviewSheet,
    WorkbookNotFound,
    WorkoutParseError,
)
from ergsheet.workout.model import (
    Cell,
    EmptyCell,
    NumberCell,
    Segment,
    TextCell,
    TimeCell,
    Workout,
    read_cell,
    round_half_up,
)

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\d+(?:[.,]\d+)?$")
_CLOCK_RE = re.compile(r"^(\d+):([0-5]?\d)(?::([0-5]?\d))?$")
_PERCENT_RE = re.compile(r"^(\d+(?:[.,]\d+)?)\s*%?$")


@contextmanager
def open_workbook(path: str | Path) -> Iterator[Any]:
    """Open a workbook read-only with cached formula results, closing it on exit."""
    file_path = Path(path)
    if not file_path.is_file():
        raise WorkbookNotFound(f"Workbook not found: {file_path}")
    try:
        workbook = load_workbook(file_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise MalformedWorkbook(f"Cannot open workbook {file_path}: {exc}") from exc

    try:
        yield workbook
    finally:
        workbook.close()


def read_ftp(workbook: Any) -> int:
    if OVERVIEW_SHEET not in workbook.sheetnames:
        raise MissingOverviewSheet(
            f"Workbook has no '{OVERVIEW_SHEET}' sheet (found: {', '.join(workbook.sheetnames)})",
            sheet=OVERVIEW_SHEET,
        )

    row, column = coordinate_to_tuple(FTP_CELL)
    cell = _read_single_cell(workbook[OVERVIEW_SHEET], row, column)

    def fail(reason: str) -> InvalidFtp:
        return InvalidFtp(reason, sheet=OVERVIEW_SHEET, field=f"FTP ({FTP_CELL})")

    if isinstance(cell, NumberCell):
        value = cell.value
    elif isinstance(cell, TextCell) and _NUMBER_RE.match(cell.value):
        value = float(cell.value.replace(",", "."))
    elif isinstance(cell, EmptyCell):
        raise fail("FTP cell is empty")
    else:
        raise fail(f"FTP must be a number, got {_describe(cell)}")

    ftp = round_half_up(value)
    if ftp <= 0:
        raise fail(f"FTP must be > 0, got {value:g}")
    logger.debug("FTP %s W read from %s!%s", ftp, OVERVIEW_SHEET, FTP_CELL)
    return ftp


def workout_sheet_names(workbook: Any) -> list[str]:
    # chart sheets are listed in sheetnames but hold no cells
    return [ws.title for ws in workbook.worksheets if ws.title != OVERVIEW_SHEET]


def parse_workout_sheet(worksheet: Any, name: str, ftp_watts: int) -> Workout:
    """Scan data rows below the header until the first fully blank row.

    Every failing field raises with the sheet name and the spreadsheet row
    number; malformed rows are never skipped.
    """
    segments: list[Segment] = []
    last_column = max(DURATION_COLUMN, POWER_COLUMN, CADENCE_COLUMN)
    first_row = HEADER_ROWS + 1

    for row_number, row in enumerate(
        worksheet.iter_rows(min_row=first_row, max_col=last_column),
        start=first_row,
    ):
        duration_cell = _cell_at(row, DURATION_COLUMN)
        power_cell = _cell_at(row, POWER_COLUMN)
        cadence_cell = _cell_at(row, CADENCE_COLUMN)

        if all(
            isinstance(cell, EmptyCell)
            for cell in (duration_cell, power_cell, cadence_cell)
        ):
            logger.debug("Sheet '%s': end of data at row %s", name, row_number)
            break

        try:
            duration_sec = parse_duration(duration_cell)
            power_pct, ramp_end_pct = parse_power(power_cell)
            cadence_rpm = parse_cadence(cadence_cell)
        except WorkoutParseError as exc:
            exc.sheet = name
            exc.row = row_number
            raise

        segments.append(
            Segment(
                duration_sec=duration_sec,
                power_pct=power_pct,
                ramp_end_pct=ramp_end_pct,
                cadence_rpm=cadence_rpm,
            )
        )

    logger.debug("Sheet '%s': %s segment(s)", name, len(segments))
    return Workout(name=name, ftp_watts=ftp_watts, segments=tuple(segments))


def parse_duration(cell: Cell) -> int:
    field = "duration"
    seconds: float
    if isinstance(cell, TimeCell):
        if cell.shows_seconds:
            seconds = cell.elapsed_sec
        else:
            # "5:00" typed into an h:mm cell is authored as minutes:seconds
            seconds = cell.elapsed_sec / 60.0
    elif isinstance(cell, NumberCell):
        seconds = cell.value * 60.0
    elif isinstance(cell, TextCell):
        seconds = _parse_duration_text(cell.value)
    elif isinstance(cell, EmptyCell):
        raise InvalidDuration("duration is missing", field=field)
    else:
        raise InvalidDuration(f"unsupported value {_describe(cell)}", field=field)

    duration_sec = round_half_up(seconds)
    if duration_sec <= 0:
        raise InvalidDuration(f"duration must be > 0, got {_describe(cell)}", field=field)
    return duration_sec


def _parse_duration_text(text: str) -> float:
    if _NUMBER_RE.match(text):
        return float(text.replace(",", ".")) * 60.0

    match = _CLOCK_RE.match(text)
    if match is None:
        raise InvalidDuration(
            f"expected minutes or M:SS, got '{text}'", field="duration"
        )
    first, second, third = match.groups()
    if third is None:
        return int(first) * 60 + int(second)
    return int(first) * 3600 + int(second) * 60 + int(third)


def parse_power(cell: Cell) -> tuple[float, float | None]:
    """Return the start percentage and, for ramps, the end percentage."""
    field = "power"
    if isinstance(cell, NumberCell):
        pct = cell.value * 100.0 if cell.is_percent else cell.value
        return _positive_pct(pct, cell), None
    if isinstance(cell, TextCell):
        parts = _split_ramp(cell.value)
        if parts is None:
            return _parse_pct_text(cell.value), None
        start, end = parts
        return _parse_pct_text(start), _parse_pct_text(end)
    if isinstance(cell, EmptyCell):
        raise InvalidPower("power is missing", field=field)
    raise InvalidPower(f"unsupported value {_describe(cell)}", field=field)


def _split_ramp(text: str) -> tuple[str, str] | None:
    lowered = text.lower()
    for delimiter in RAMP_DELIMITERS:
        index = lowered.find(delimiter)
        if index <= 0:
            continue
        start = text[:index].strip()
        end = text[index + len(delimiter):].strip()
        if not start or not end:
            raise InvalidPower(f"incomplete ramp '{text}'", field="power")
        return start, end
    return None


def _parse_pct_text(text: str) -> float:
    match = _PERCENT_RE.match(text.strip())
    if match is None:
        raise InvalidPower(f"expected a percentage, got '{text}'", field="power")
    return _positive_pct(float(match.group(1).replace(",", ".")), TextCell(text))


def _positive_pct(pct: float, cell: Cell) -> float:
    if pct <= 0:
        raise InvalidPower(f"power must be > 0, got {_describe(cell)}", field="power")
    if round_half_up(pct) <= 0:
        raise InvalidPower(
            f"power {_describe(cell)} rounds to 0%", field="power"
        )
    return pct


def parse_cadence(cell: Cell) -> int | None:
    field = "cadence"
    if isinstance(cell, EmptyCell):
        return None
    if isinstance(cell, NumberCell):
        value = cell.value
    elif isinstance(cell, TextCell) and _NUMBER_RE.match(cell.value):
        value = float(cell.value.replace(",", "."))
    else:
        raise InvalidCadence(f"expected rpm, got {_describe(cell)}", field=field)

    if value != int(value) or value <= 0:
        raise InvalidCadence(
            f"cadence must be a positive integer, got {value:g}", field=field
        )
    return int(value)


def iter_workouts(workbook: Any) -> Iterator[Workout]:
    """Yield one workout per sheet; the FTP is validated before the first one."""
    ftp_watts = read_ftp(workbook)
    for name in workout_sheet_names(workbook):
        yield parse_workout_sheet(workbook[name], name, ftp_watts)


def load_workouts(path: str | Path) -> tuple[int, list[Workout]]:
    with open_workbook(path) as workbook:
        ftp_watts = read_ftp(workbook)
        workouts = [
            parse_workout_sheet(workbook[name], name, ftp_watts)
            for name in workout_sheet_names(workbook)
        ]
    return ftp_watts, workouts


def _read_single_cell(worksheet: Any, row: int, column: int) -> Cell:
    for cells in worksheet.iter_rows(
        min_row=row, max_row=row, min_col=column, max_col=column
    ):
        for cell in cells:
            return read_cell(cell.value, getattr(cell, "number_format", None))
    return EmptyCell()


def _cell_at(row: tuple[Any, ...], column: int) -> Cell:
    if column > len(row):
        return EmptyCell()
    cell = row[column - 1]
    return read_cell(cell.value, getattr(cell, "number_format", None))


def _describe(cell: Cell) -> str:
    if isinstance(cell, EmptyCell):
        return "an empty cell"
    if isinstance(cell, TextCell):
        return f"'{cell.value}'"
    if isinstance(cell, NumberCell):
        return f"{cell.value:g}"
    return str(cell.value)
