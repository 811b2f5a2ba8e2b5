from __future__ import annotations

import pandas as pd

from cpace_estimator.excel.reader import detect_header_row

"""Header row detection over raw (header-less) frames."""


def _frame(rows: list[list[object]]) -> pd.DataFrame:
    return pd.DataFrame(rows)


def test_title_block_then_header_selects_header_row():
    df = _frame([
        ["ACME Builders"],
        ["Project: Office Retrofit"],
        ["Prepared by: Estimating Dept"],
        ["Item Description", "Qty", "Unit Cost", "Total"],
        ["Boiler replacement", 1, 50000, 50000],
    ])
    assert detect_header_row(df) == 3


def test_no_text_defaults_to_row_zero():
    df = _frame([[1, 2, 3], [4, 5, 6]])
    assert detect_header_row(df) == 0


def test_equal_scores_keep_first_row():
    df = _frame([
        ["Description", "Total"],
        ["Description", "Total"],
    ])
    assert detect_header_row(df) == 0


def test_rows_beyond_scan_limit_are_ignored():
    rows: list[list[object]] = [[i, i * 2] for i in range(20)]
    rows.append(["Description", "Amount"])
    df = _frame(rows)
    # header sits at row 20, only the first 16 rows are scanned
    assert detect_header_row(df) == 0
    assert detect_header_row(df, max_rows=25) == 20


def test_columns_beyond_scan_limit_are_ignored():
    filler = [None] * 11
    df = _frame([
        ["notes here"] + [None] * 11,
        filler + ["Description"],
    ])
    # row 1 only has text in column 12 -> invisible with the default 11-column window
    assert detect_header_row(df) == 0
    assert detect_header_row(df, max_columns=12) == 1


def test_keyword_cells_outscore_plain_text():
    df = _frame([
        ["Office retrofit budget summary prepared for owner review"],
        ["CSI", "Description", "Total"],
    ])
    assert detect_header_row(df) == 1
