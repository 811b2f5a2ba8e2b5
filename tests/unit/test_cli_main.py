from __future__ import annotations

import json
from pathlib import Path

from cpace_estimator.cli import main as cli_main
from cpace_estimator.excel import reader
from cpace_estimator.logging.init import reset_logging


def test_classify_prints_category_confidence_and_percentage(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main(["classify", "Boiler", "Office furniture"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert code == 0
    assert lines == [
        "hvac\t0.60\t100%\tBoiler",
        "not_eligible\t0.90\t0%\tOffice furniture",
    ]


def test_classify_uses_configured_confidence_scale(temp_workdir: Path, monkeypatch, capsys):
    reset_logging()
    cfg = temp_workdir / "custom.yml"
    cfg.write_text("classifier:\n  confidence_scale: 60\n", encoding="utf-8")
    monkeypatch.setenv("CPACE_CONFIG", str(cfg))
    code = cli_main(["classify", "Boiler"])
    assert code == 0
    assert "hvac\t0.30\t100%\tBoiler" in capsys.readouterr().out


def test_dotenv_sets_config_path(temp_workdir: Path, monkeypatch, capsys):
    reset_logging()
    # .env wins over the process environment; monkeypatch restores it afterwards
    monkeypatch.setenv("CPACE_CONFIG", "config/ignored.yml")
    (temp_workdir / "strict.yml").write_text("classifier:\n  confidence_scale: 18\n", encoding="utf-8")
    (temp_workdir / ".env").write_text("CPACE_CONFIG=strict.yml\n", encoding="utf-8")
    code = cli_main(["classify", "Boiler"])
    assert code == 0
    assert "hvac\t1.00\t100%\tBoiler" in capsys.readouterr().out


def test_inspect_prints_structure(make_workbook, cost_breakdown_rows, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main(["inspect", str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: retrofit.xlsx" in out
    assert "SHEET: Budget header_row=4 rows=10" in out
    assert "cols=['Item Description', 'Qty', 'Unit Cost', 'Total']" in out
    assert "'amount_columns': ['Total']" in out


def test_analyze_prints_summary(make_workbook, cost_breakdown_rows, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main(["analyze", str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert (
        "SUMMARY items=5 skipped_aggregates=3 total_original=198000 "
        "total_eligible=180000 eligible_pct=90.91"
    ) in out
    assert "sheet='Budget' description='Item Description' amount='Total'" in out


def test_analyze_json_output(make_workbook, cost_breakdown_rows, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main(["analyze", str(path), "--json"])
    out = capsys.readouterr().out
    assert code == 0
    payload = json.loads(next(line for line in out.splitlines() if line.startswith("{")))
    assert payload["file"] == "retrofit.xlsx"
    assert payload["sheet"] == "Budget"
    assert payload["total_items"] == 5
    assert payload["skipped_aggregate_rows"] == 3
    assert payload["eligibility_breakdown"]["hvac"] == 2
    assert payload["eligibility_breakdown"]["ev_charging"] == 0
    assert [li["eligibility_category"] for li in payload["line_items"]] == [
        "hvac", "hvac", "lighting", "electrical", "not_eligible",
    ]


def test_analyze_writes_csv(make_workbook, cost_breakdown_rows, temp_workdir: Path, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main(["analyze", str(path), "--csv", "--output-dir", "reports"])
    assert code == 0
    csv_path = temp_workdir / "reports" / "retrofit-pace-analysis.csv"
    assert csv_path.exists()
    text = csv_path.read_text(encoding="utf-8")
    assert text.endswith("\nTotal Original,198000\nTotal Eligible,180000\n")
    assert "csv written:" in capsys.readouterr().out


def test_analyze_unknown_column_is_logged(make_workbook, cost_breakdown_rows, temp_workdir: Path, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main([
        "analyze", str(path),
        "--description-column", "Item Description",
        "--amount-column", "Extended Price",
    ])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR retrofit.xlsx: column 'Extended Price' not found" in out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    rec = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert rec["error_type"] == "COLUMN_NOT_FOUND"
    assert rec["sheet"] == "Budget"


def test_analyze_unknown_sheet(make_workbook, cost_breakdown_rows, temp_workdir: Path, capsys):
    reset_logging()
    path = make_workbook("retrofit.xlsx", {"Budget": cost_breakdown_rows})
    code = cli_main(["analyze", str(path), "--sheet", "Summary"])
    assert code == 1
    rec = json.loads(next((temp_workdir / "logs").glob("errors-*.log")).read_text(encoding="utf-8").strip())
    assert rec["error_type"] == "SHEET_NOT_FOUND"
    assert rec["sheet"] == "Summary"


def test_analyze_uninferable_columns(make_workbook, capsys, temp_workdir: Path):
    reset_logging()
    path = make_workbook("notes.xlsx", {"Notes": [["Note", "Owner"], ["call back", "kim"], ["ok", "lee"]]})
    code = cli_main(["analyze", str(path)])
    assert code == 1
    rec = json.loads(next((temp_workdir / "logs").glob("errors-*.log")).read_text(encoding="utf-8").strip())
    assert rec["error_type"] == "COLUMN_NOT_INFERRED"


def test_debug_flag(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main(["--debug", "classify", "Boiler"])
    assert code == 0
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
    reset_logging()


def test_analyze_logs_unreadable_sheet_and_continues(make_workbook, cost_breakdown_rows, temp_workdir: Path, monkeypatch, capsys):
    reset_logging()
    original = reader.normalize_sheet

    def _normalize(df, sheet_name, *args, **kwargs):
        if sheet_name == "Broken":
            raise ValueError("merged cells could not be read")
        return original(df, sheet_name, *args, **kwargs)

    monkeypatch.setattr(reader, "normalize_sheet", _normalize)
    path = make_workbook("retrofit.xlsx", {
        "Budget": cost_breakdown_rows,
        "Broken": [["Description", "Total"], ["Chiller", 7000]],
    })
    code = cli_main(["analyze", str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY items=5" in out
    rec = json.loads(next((temp_workdir / "logs").glob("errors-*.log")).read_text(encoding="utf-8").strip())
    assert rec["error_type"] == "SHEET_PARSE_ERROR"
    assert rec["sheet"] == "Broken"
    assert rec["row"] == -1
    assert rec["message"] == "merged cells could not be read"
