"""Workbook layout and erg file constants."""

from __future__ import annotations

# Workbook layout
OVERVIEW_SHEET = "Overview"
FTP_CELL = "B1"
HEADER_ROWS = 1

# 1-based column indexes in workout sheets
DURATION_COLUMN = 1
POWER_COLUMN = 2
CADENCE_COLUMN = 3

# Ramp delimiters; "->" must be tried before "-" and ">"
RAMP_DELIMITERS = ("..", "->", "→", "–", "—", "-", ">", "to")

# Erg course file
ERG_EXTENSION = ".erg"
ERG_VERSION = "2"
ERG_UNITS = "ENGLISH"
COURSE_HEADER_OPEN = "[COURSE HEADER]"
COURSE_HEADER_CLOSE = "[END COURSE HEADER]"
COURSE_DATA_OPEN = "[COURSE DATA]"
COURSE_DATA_CLOSE = "[END COURSE DATA]"
DEFAULT_FILE_STEM = "workout"
