from __future__ import annotations

from dataclasses import dataclass

from ..models.sheet import Sheet
from .cells import is_number
from .reader import get_column_values

"""Column inference: advisory guesses for the description / amount columns.

Three independent detectors, each returning header names in header order.
They never choose the columns themselves; the caller (CLI, session, or an
external decision-maker) picks one description and one amount column.
"""

__all__ = [
    "ColumnInference",
    "DESCRIPTION_KEYWORDS",
    "AMOUNT_KEYWORDS",
    "find_numeric_columns",
    "find_description_columns",
    "find_amount_columns",
    "infer_columns",
    "suggest_columns",
]

DESCRIPTION_KEYWORDS = ("description", "item", "name", "detail", "scope", "work")
AMOUNT_KEYWORDS = ("total", "amount", "cost", "price", "value", "sum", "extended")

NUMERIC_SHARE = 0.5
LONG_TEXT_SHARE = 0.3
LONG_TEXT_MIN_LENGTH = 20


@dataclass(frozen=True)
class ColumnInference:
    numeric_columns: list[str]
    description_columns: list[str]
    amount_columns: list[str]

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "numeric_columns": list(self.numeric_columns),
            "description_columns": list(self.description_columns),
            "amount_columns": list(self.amount_columns),
        }


def _unique_headers(sheet: Sheet) -> list[str]:
    # duplicate header names share one row key
    return list(dict.fromkeys(sheet.headers))


def find_numeric_columns(sheet: Sheet) -> list[str]:
    """Columns where strictly more than half of the values are numbers."""
    numeric: list[str] = []
    for header in _unique_headers(sheet):
        values = get_column_values(sheet, header)
        count = sum(1 for v in values if is_number(v))
        if count > len(values) * NUMERIC_SHARE:
            numeric.append(header)
    return numeric


def find_description_columns(sheet: Sheet) -> list[str]:
    """Columns whose header names a description; long-text columns as fallback."""
    columns = [h for h in _unique_headers(sheet) if any(kw in h.lower() for kw in DESCRIPTION_KEYWORDS)]
    if columns:
        return columns
    for header in _unique_headers(sheet):
        values = get_column_values(sheet, header)
        long_text = sum(1 for v in values if isinstance(v, str) and len(v) > LONG_TEXT_MIN_LENGTH)
        if long_text > len(values) * LONG_TEXT_SHARE:
            columns.append(header)
    return columns


def find_amount_columns(sheet: Sheet) -> list[str]:
    """Numeric columns whose header names a money total."""
    return [h for h in find_numeric_columns(sheet) if any(kw in h.lower() for kw in AMOUNT_KEYWORDS)]


def infer_columns(sheet: Sheet) -> ColumnInference:
    return ColumnInference(
        numeric_columns=find_numeric_columns(sheet),
        description_columns=find_description_columns(sheet),
        amount_columns=find_amount_columns(sheet),
    )


def suggest_columns(inference: ColumnInference) -> tuple[str | None, str | None]:
    """First description candidate and first amount candidate (None if absent)."""
    desc = inference.description_columns[0] if inference.description_columns else None
    amount = inference.amount_columns[0] if inference.amount_columns else None
    return desc, amount
