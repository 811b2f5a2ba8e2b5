from __future__ import annotations

import math
import re
from typing import Any

import pandas as pd

"""Cell value normalization & coercion helpers.

Ingestion keeps cell values as str / int / float / bool / None. Analysis then
needs two loose coercions over those values:

- cell_to_text: falsy cells (None, "", 0, False) become "", numbers print
  without a trailing ".0" when integral
- cell_to_amount: numbers pass through, numeric strings are parsed, anything
  else (including NaN / infinity) becomes 0
"""

__all__ = [
    "normalize_cell",
    "is_blank",
    "is_number",
    "cell_to_text",
    "cell_to_amount",
]

# underscores are accepted by float() but are not a spreadsheet number format
_NUMERIC_TEXT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize_cell(val: Any) -> Any:
    """Convert a raw pandas cell into a plain Python value.

    NaN / NaT -> None, numpy scalars -> Python scalars, date/time -> ISO string.
    """
    if val is None:
        return None
    if isinstance(val, str):
        return val
    try:
        if pd.isna(val):
            return None
    except (TypeError, ValueError):  # pragma: no cover (array-like cells)
        return val
    if hasattr(val, "item") and not hasattr(val, "isoformat"):
        val = val.item()  # numpy scalar
    if hasattr(val, "isoformat"):
        return val.isoformat()
    return val


def is_blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and val.strip() == "")


def is_number(val: Any) -> bool:
    """True for int / float cells; booleans are not numbers here."""
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def cell_to_text(val: Any) -> str:
    if val is None or val is False or val == "":
        return ""
    if val is True:
        return "true"
    if is_number(val):
        if val == 0 or (isinstance(val, float) and math.isnan(val)):
            return ""
        if isinstance(val, float) and val.is_integer() and abs(val) < 1e21:
            return str(int(val))
        return str(val)
    return str(val)


def cell_to_amount(val: Any) -> float:
    if val is None:
        return 0
    if isinstance(val, bool):
        return 1 if val else 0
    if is_number(val):
        return val if math.isfinite(val) else 0
    if isinstance(val, str):
        text = val.strip()
        if not _NUMERIC_TEXT.match(text):
            return 0
        num = float(text)
        if not math.isfinite(num):
            return 0
        return int(num) if num.is_integer() and "." not in text and "e" not in text.lower() else num
    return 0
