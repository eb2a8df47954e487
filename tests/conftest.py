from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
from openpyxl import Workbook
from openpyxl.chart import BarChart, Reference

HEADER = ["Duration", "Power", "Cadence"]


def write_workbook(
    path: Path,
    *,
    ftp: Any = 250,
    sheets: dict[str, list[list[Any]]] | None = None,
    formats: dict[tuple[str, str], str] | None = None,
    with_overview: bool = True,
    chart_of: str | None = None,
) -> Path:
    """Write a workbook with an Overview sheet (FTP in B1) and workout sheets.

    `chart_of` adds a chart sheet plotting the power column of that sheet.
    """
    workbook = Workbook()
    first = workbook.active
    if with_overview:
        first.title = "Overview"
        first["A1"] = "FTP"
        first["B1"] = ftp
    else:
        first.title = "Notes"

    for name, rows in (sheets or {}).items():
        sheet = workbook.create_sheet(name)
        sheet.append(HEADER)
        for row in rows:
            sheet.append(row)

    if chart_of is not None:
        source = workbook[chart_of]
        chart = BarChart()
        chart.add_data(
            Reference(source, min_col=2, min_row=1, max_row=source.max_row),
            titles_from_data=True,
        )
        workbook.create_chartsheet(f"{chart_of} Chart").add_chart(chart)

    for (name, coordinate), number_format in (formats or {}).items():
        workbook[name][coordinate].number_format = number_format

    workbook.save(path)
    return path


@pytest.fixture
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    def factory(name: str = "plan.xlsx", **kwargs: Any) -> Path:
        return write_workbook(tmp_path / name, **kwargs)

    return factory
