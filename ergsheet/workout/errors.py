"""Conversion errors, each carrying enough context to fix the workbook."""

from __future__ import annotations


class ErgSheetError(Exception):
    """Base class for every failure raised by ergsheet."""


class WorkoutParseError(ErgSheetError, ValueError):
    """Raised when the workbook content cannot be turned into workouts."""

    def __init__(
        self,
        message: str,
        *,
        sheet: str | None = None,
        row: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.sheet = sheet
        self.row = row
        self.field = field

    def __str__(self) -> str:
        context: list[str] = []
        if self.sheet is not None:
            context.append(f"sheet '{self.sheet}'")
        if self.row is not None:
            context.append(f"row {self.row}")
        if self.field is not None:
            context.append(self.field)
        if not context:
            return self.message
        return f"{', '.join(context)}: {self.message}"


class MalformedWorkbook(WorkoutParseError):
    """The workbook container cannot be opened."""


class WorkbookNotFound(MalformedWorkbook):
    pass


class MissingOverviewSheet(WorkoutParseError):
    pass


class InvalidFtp(WorkoutParseError):
    pass


class InvalidDuration(WorkoutParseError):
    pass


class InvalidPower(WorkoutParseError):
    pass


class InvalidCadence(WorkoutParseError):
    pass


class EmptyWorkout(WorkoutParseError):
    """A workout sheet holds no interval rows."""


class WriteFailure(ErgSheetError):
    """An erg file could not be created or written."""
