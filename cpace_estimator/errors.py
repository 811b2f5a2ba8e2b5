from __future__ import annotations

"""Exception hierarchy shared by ingestion, lookup and analysis.

- ParseError: workbook bytes cannot be decoded as tabular data (fatal for the workbook)
- NotFoundError: a sheet or column name is absent (recoverable; re-query structure first)
"""

__all__ = [
    "ParseError",
    "NotFoundError",
    "SheetNotFoundError",
    "ColumnNotFoundError",
]


class ParseError(Exception):
    """Raised when raw bytes cannot be opened as a spreadsheet."""


class NotFoundError(LookupError):
    """Base class for sheet / column lookup failures."""


class SheetNotFoundError(NotFoundError):
    def __init__(self, sheet_name: str, available: list[str] | None = None) -> None:
        self.sheet_name = sheet_name
        self.available = available or []
        super().__init__(f"sheet '{sheet_name}' not found (available: {self.available})")


class ColumnNotFoundError(NotFoundError):
    def __init__(self, sheet_name: str, column: str) -> None:
        self.sheet_name = sheet_name
        self.column = column
        super().__init__(f"column '{column}' not found in sheet '{sheet_name}'")
