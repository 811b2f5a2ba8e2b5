# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest

from cpace_estimator.models.sheet import Sheet


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CPACE_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """classifier:
  confidence_scale: 30
  short_circuit_min_length: 6
ingestion:
  sample_rows: 10
  header_scan_rows: 16
  header_scan_columns: 11
export:
  output_directory: ./out
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "cpace.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header) into an .xlsx file, one sheet per key."""
    with pd.ExcelWriter(path) as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[[str, dict[str, list[list[object]]]], Path]:
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return write_workbook(temp_workdir / "data" / name, sheets)
    return _make


def build_sheet(headers: list[str], rows: list[list[Any]], name: str = "Sheet1") -> Sheet:
    """Sheet built directly from values (bypasses Excel I/O)."""
    records = tuple({h: (r[i] if i < len(r) else None) for i, h in enumerate(headers)} for r in rows)
    return Sheet(name=name, headers=tuple(headers), rows=records, sample_rows=records[:10])


@pytest.fixture()
def cost_sheet() -> Sheet:
    return build_sheet(
        ["Item Description", "Qty", "Unit Cost", "Total"],
        [
            ["HVAC Replacement", 1, 100000, 100000],
            ["Subtotal", None, None, 100000],
            ["Furniture", 10, 500, 5000],
        ],
        name="Budget",
    )


@pytest.fixture()
def cost_breakdown_rows() -> list[list[object]]:
    """Realistic cost breakdown with a title block, divisions and subtotals."""
    return [
        ["ACME Builders"],
        ["Project: Office Retrofit"],
        ["Prepared by: Estimating Dept"],
        ["Item Description", "Qty", "Unit Cost", "Total"],
        ["Division 23 - HVAC", None, None, None],
        ["Rooftop VRF heat pump system", 4, 25000, 100000],
        ["Ductwork replacement", 1, 40000, 40000],
        ["Division 23 Total", None, None, 140000],
        ["Division 26 - Electrical", None, None, None],
        ["LED lighting retrofit", 200, 150, 30000],
        ["Electrical panel upgrade", 2, 10000, 20000],
        ["Subtotal - Division 26", None, None, 50000],
        ["Interior paint", 1, 8000, 8000],
        ["Grand Total", None, None, 198000],
    ]
