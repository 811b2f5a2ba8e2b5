from __future__ import annotations

import csv
import io
import logging
import re
import uuid
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import ParseError, SheetNotFoundError
from ..models.sheet import DEFAULT_SAMPLE_ROWS, CellValue, Sheet, SheetStructure, Workbook
from .cells import is_blank, normalize_cell

"""Workbook reader: raw bytes -> normalized Sheets.

Cost breakdowns rarely start with their header on the first line (title
blocks, project info, logos), so the header row is detected heuristically:

1. Score each of the first rows by how header-like its text cells look
2. Use the best row as headers ("Column N" for empty cells)
3. Every later non-empty row becomes a data row (header -> value)

Each worksheet is parsed independently; a broken worksheet is recorded in
Workbook.failed_sheets instead of failing the whole workbook.
"""

__all__ = [
    "HEADER_KEYWORDS",
    "detect_header_row",
    "normalize_sheet",
    "parse_workbook",
    "read_workbook",
    "list_sheet_names",
    "get_sheet",
    "get_sheet_structure",
    "get_column_values",
]

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = (
    "description", "item", "name", "total", "amount", "cost", "price",
    "qty", "quantity", "unit", "remarks", "notes", "csi", "code",
)
HEADER_SCAN_ROWS = 16
HEADER_SCAN_COLUMNS = 11

_TITLE_CASE = re.compile(r"^[A-Z][a-z]")
_CSV_SUFFIXES = {".csv"}


def _score_header_cell(text: str) -> int:
    score = 0
    lower = text.lower()
    if any(kw in lower for kw in HEADER_KEYWORDS):
        score += 10
    if 1 < len(text) < 30:
        score += 2
    if text == text.upper() or _TITLE_CASE.match(text):
        score += 1
    return score


def detect_header_row(
    df: pd.DataFrame,
    max_rows: int = HEADER_SCAN_ROWS,
    max_columns: int = HEADER_SCAN_COLUMNS,
) -> int:
    """Return the 0-based index of the most header-like row.

    Only text cells score. A later row must score strictly higher to replace
    the current best, so ties go to the earliest row. Row 0 when nothing scores.
    """
    best_row = 0
    best_score = 0
    n_rows = min(df.shape[0], max_rows)
    n_cols = min(df.shape[1], max_columns)
    for r in range(n_rows):
        score = 0
        text_count = 0
        for c in range(n_cols):
            val = df.iat[r, c]
            if isinstance(val, str):
                text_count += 1
                score += _score_header_cell(val)
        score += text_count * 2
        if score > best_score:
            best_score = score
            best_row = r
    return best_row


def _header_text(val: CellValue, col: int) -> str:
    if is_blank(val):
        return f"Column {col + 1}"
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def _trim_leading_empty_columns(df: pd.DataFrame) -> pd.DataFrame:
    # 使用範囲の先頭列から読む (A 列始まりとは限らない)
    start = 0
    while start < df.shape[1] and df.iloc[:, start].isna().all():
        start += 1
    return df.iloc[:, start:] if start else df


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
    header_scan_rows: int = HEADER_SCAN_ROWS,
    header_scan_columns: int = HEADER_SCAN_COLUMNS,
) -> Sheet:
    """Normalize a raw (header-less) DataFrame into a Sheet.

    Steps:
    1. Drop all-empty leading columns (the used range may start after column A)
    2. Detect the header row
    3. Build header names from that row ("Column N" counts from the first used column)
    4. Rows below become data rows; fully empty rows are skipped
    5. Drop the first data row if it merely repeats the header
    """
    df = _trim_leading_empty_columns(df)
    if df.shape[0] == 0 or df.shape[1] == 0:
        return Sheet(name=sheet_name, headers=(), rows=(), sample_rows=())

    header_idx = detect_header_row(df, header_scan_rows, header_scan_columns)
    logger.info(f"sheet '{sheet_name}' - detected header row: {header_idx + 1}")

    header_cells = [normalize_cell(v) for v in df.iloc[header_idx].tolist()]
    headers = [_header_text(v, i) for i, v in enumerate(header_cells)]

    rows: list[dict[str, CellValue]] = []
    for _, raw in df.iloc[header_idx + 1:].iterrows():
        values = [normalize_cell(v) for v in raw.tolist()]
        if all(v is None for v in values):
            continue
        if not rows and [_header_text(v, i) for i, v in enumerate(values)] == headers:
            # header text re-included as data
            continue
        row: dict[str, CellValue] = {}
        for header, val in zip(headers, values, strict=False):
            # duplicate header names: first column wins
            if header not in row:
                row[header] = val
        rows.append(row)

    return Sheet(
        name=sheet_name,
        headers=tuple(headers),
        rows=tuple(rows),
        sample_rows=tuple(rows[:sample_rows]),
        header_row_index=header_idx,
    )


def _coerce_csv_cell(text: str) -> CellValue:
    stripped = text.strip()
    if stripped == "":
        return None
    upper = stripped.upper()
    if upper in ("TRUE", "FALSE"):
        return upper == "TRUE"
    try:
        num = float(stripped)
    except ValueError:
        return text
    if "_" in stripped or num != num or num in (float("inf"), float("-inf")):
        return text
    if num.is_integer() and re.fullmatch(r"[+-]?\d+", stripped):
        return int(stripped)
    return num


def _read_csv_frame(raw_bytes: bytes) -> pd.DataFrame:
    try:
        text = raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"csv is not valid UTF-8: {e}") from e
    try:
        records = [[_coerce_csv_cell(c) for c in rec] for rec in csv.reader(io.StringIO(text))]
    except csv.Error as e:
        raise ParseError(f"invalid csv: {e}") from e
    # ragged rows are padded by the DataFrame constructor
    return pd.DataFrame(records, dtype=object)


def _read_raw_frames(raw_bytes: bytes, filename: str) -> dict[str, Any]:
    """Return raw frames per sheet name; values are DataFrames or per-sheet exceptions."""
    if Path(filename).suffix.lower() in _CSV_SUFFIXES:
        return {Path(filename).stem: _read_csv_frame(raw_bytes)}
    try:
        xls = pd.ExcelFile(io.BytesIO(raw_bytes))
    except Exception as e:
        raise ParseError(f"cannot read '{filename}' as a spreadsheet: {e}") from e
    frames: dict[str, Any] = {}
    for name in xls.sheet_names:
        try:
            # header は自前で検出するので生読み
            frames[str(name)] = xls.parse(name, header=None)
        except Exception as e:
            frames[str(name)] = e
    return frames


def parse_workbook(
    raw_bytes: bytes,
    filename: str,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
    header_scan_rows: int = HEADER_SCAN_ROWS,
    header_scan_columns: int = HEADER_SCAN_COLUMNS,
) -> Workbook:
    """Parse spreadsheet bytes into a Workbook (one Sheet per worksheet).

    Raises:
        ParseError: the bytes are not a readable workbook / csv
    """
    if not raw_bytes:
        raise ParseError(f"'{filename}' is empty")
    frames = _read_raw_frames(raw_bytes, filename)
    sheets: list[Sheet] = []
    failed: dict[str, str] = {}
    for name, frame in frames.items():
        if isinstance(frame, Exception):
            failed[name] = str(frame)
            logger.warning(f"sheet '{name}' in '{filename}' could not be parsed: {frame}")
            continue
        try:
            sheets.append(normalize_sheet(frame, name, sample_rows, header_scan_rows, header_scan_columns))
        except Exception as e:
            failed[name] = str(e)
            logger.warning(f"sheet '{name}' in '{filename}' could not be normalized: {e}")
    logger.info(f"parsed '{filename}': {len(sheets)} sheet(s), {len(failed)} failed")
    return Workbook(id=uuid.uuid4().hex, filename=filename, sheets=tuple(sheets), failed_sheets=failed)


def read_workbook(path: Path, **kwargs: Any) -> Workbook:
    """Read a workbook file from disk (see parse_workbook)."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseError(f"cannot read {path}: {e}") from e
    return parse_workbook(raw, path.name, **kwargs)


def list_sheet_names(workbook: Workbook) -> list[str]:
    return [s.name for s in workbook.sheets]


def get_sheet(workbook: Workbook, name: str) -> Sheet:
    for sheet in workbook.sheets:
        if sheet.name == name:
            return sheet
    raise SheetNotFoundError(name, list_sheet_names(workbook))


def get_sheet_structure(sheet: Sheet) -> SheetStructure:
    return SheetStructure(
        headers=list(sheet.headers),
        sample_rows=[dict(r) for r in sheet.sample_rows],
        total_rows=sheet.total_rows,
    )


def get_column_values(sheet: Sheet, column: str) -> list[CellValue]:
    """All values of ``column`` in row order (None where a row lacks the cell).

    An unknown column yields one None per row; ``analyze`` is the operation
    that rejects unknown columns.
    """
    return [row.get(column) for row in sheet.rows]
