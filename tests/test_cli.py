from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from ergsheet.cli.main import build_parser, main


def test_cli_converts_and_prints_summaries(
    make_workbook: Callable[..., Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = make_workbook(sheets={"Tempo": [["5:00", 50]], "Ramp": [[10, "50-80"]]})
    out_dir = tmp_path / "out"

    code = main([str(path), "--output-dir", str(out_dir), "--quiet"])

    assert code == 0
    assert (out_dir / "Tempo.erg").exists()
    assert (out_dir / "Ramp.erg").exists()
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Tempo.erg")


def test_cli_reports_missing_overview(
    make_workbook: Callable[..., Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = make_workbook(with_overview=False, sheets={"Tempo": [[5, 50]]})

    code = main([str(path), "--output-dir", str(tmp_path / "out")])

    assert code == 1
    assert "Overview" in capsys.readouterr().err


def test_cli_reports_missing_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main([str(tmp_path / "nope.xlsx")])

    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_cli_reports_row_context(
    make_workbook: Callable[..., Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = make_workbook(sheets={"Tempo": [["5:00", 50], ["later", 60]]})

    code = main([str(path), "--output-dir", str(tmp_path / "out")])

    assert code == 1
    assert "sheet 'Tempo', row 3, duration" in capsys.readouterr().err


def test_parser_rejects_conflicting_verbosity() -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["plan.xlsx", "--verbose", "--quiet"])

    assert excinfo.value.code == 2


def test_cli_skips_chart_sheets(
    make_workbook: Callable[..., Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = make_workbook(sheets={"Tempo": [["5:00", 50]]}, chart_of="Tempo")
    out_dir = tmp_path / "out"

    code = main([str(path), "--output-dir", str(out_dir), "--quiet"])

    assert code == 0
    assert [p.name for p in out_dir.iterdir()] == ["Tempo.erg"]
    assert len(capsys.readouterr().out.splitlines()) == 1
