"""Workbook to erg conversion runtime."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ergsheet.workout.erg import erg_filename, write_erg
from ergsheet.workout.model import Workout, round_half_up
from ergsheet.workout.workbook import iter_workouts, open_workbook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    workout: Workout
    path: Path

    def summary_line(self) -> str:
        minutes, seconds = divmod(self.workout.total_duration_sec, 60)
        return (
            f"{self.path.name:<24} | TSS: {round_half_up(self.workout.tss):>5} "
            f"| IF: {self.workout.intensity_factor:.2f} "
            f"| {minutes:d}:{seconds:02d} | {self.workout.name}"
        )


class WorkbookConverter:
    def __init__(self, out_dir: Path | None = None) -> None:
        self._out_dir = out_dir

    def convert(self, path: str | Path) -> list[ConversionResult]:
        """Convert every workout sheet in order, stopping at the first failure.

        Files written before a failure are left in place.
        """
        workbook_path = Path(path)
        out_dir = self._out_dir or workbook_path.parent
        results: list[ConversionResult] = []
        used_names: set[str] = set()

        with open_workbook(workbook_path) as workbook:
            for workout in iter_workouts(workbook):
                filename = _unique_filename(erg_filename(workout.name), used_names)
                out = write_erg(workout, out_dir, filename=filename)
                logger.info(
                    "Converted sheet '%s' (%s segments) -> %s",
                    workout.name,
                    len(workout.segments),
                    out,
                )
                results.append(ConversionResult(workout=workout, path=out))

        return results


def convert_workbook(path: str | Path, out_dir: Path | None = None) -> list[ConversionResult]:
    return WorkbookConverter(out_dir=out_dir).convert(path)


def _unique_filename(filename: str, used: set[str]) -> str:
    candidate = filename
    stem, dot, suffix = filename.rpartition(".")
    counter = 2
    while candidate.lower() in used:
        candidate = f"{stem}-{counter}{dot}{suffix}"
        counter += 1
    used.add(candidate.lower())
    return candidate
