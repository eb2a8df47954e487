"""Erg course file rendering and writing."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ergsheet.workout.constants import (
    COURSE_DATA_CLOSE,
    COURSE_DATA_OPEN,
    COURSE_HEADER_CLOSE,
    COURSE_HEADER_OPEN,
    DEFAULT_FILE_STEM,
    ERG_EXTENSION,
    ERG_UNITS,
    ERG_VERSION,
)
from ergsheet.workout.errors import EmptyWorkout, WriteFailure
from ergsheet.workout.model import Workout, round_half_up

logger = logging.getLogger(__name__)


def course_header(workout: Workout) -> list[str]:
    # FTP is metadata only; the device scales percentages with its own FTP.
    return [
        COURSE_HEADER_OPEN,
        f"VERSION = {ERG_VERSION}",
        f"UNITS = {ERG_UNITS}",
        f"DESCRIPTION = {workout.name}",
        f"FTP = {workout.ftp_watts}",
        COURSE_HEADER_CLOSE,
    ]


def course_points(workout: Workout) -> list[tuple[int, int]]:
    """Elapsed-second/power-percent control points for the course data.

    Constant segments contribute one point at their start. Ramps contribute
    their start and end points. A final point at the total duration is added
    when the last segment does not already end with one.
    """
    points: list[tuple[int, int]] = []
    for start, segment in zip(workout.segment_starts(), workout.segments):
        points.append((start, round_half_up(segment.power_pct)))
        if segment.is_ramp:
            points.append(
                (start + segment.duration_sec, round_half_up(segment.end_pct))
            )

    total = workout.total_duration_sec
    if points and points[-1][0] < total:
        points.append((total, round_half_up(workout.segments[-1].end_pct)))
    return points


def render_erg(workout: Workout) -> str:
    if not workout.segments:
        raise EmptyWorkout("workout has no intervals", sheet=workout.name)

    lines = course_header(workout)
    lines.append(COURSE_DATA_OPEN)
    lines.extend(f"{elapsed}\t{pct}" for elapsed, pct in course_points(workout))
    lines.append(COURSE_DATA_CLOSE)
    return "\n".join(lines) + "\n"


def erg_filename(name: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", name.strip()).strip("._")
    return f"{stem or DEFAULT_FILE_STEM}{ERG_EXTENSION}"


def write_erg(workout: Workout, out_dir: Path, filename: str | None = None) -> Path:
    content = render_erg(workout)
    out = out_dir / (filename or erg_filename(workout.name))
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
    except OSError as exc:
        raise WriteFailure(f"Cannot write {out}: {exc}") from exc
    logger.debug("Wrote %s (%s bytes)", out, len(content))
    return out
