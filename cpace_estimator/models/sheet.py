from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

"""Sheet / Workbook domain models for the CPACE estimator.

A Sheet is the normalized form of one worksheet after header-row detection:
ordered headers plus ordered row records (header -> cell value). It is built
once at ingestion time and never mutated afterwards.
"""

__all__ = [
    "CellValue",
    "Sheet",
    "SheetStructure",
    "Workbook",
    "DEFAULT_SAMPLE_ROWS",
]

# str | int | float | bool | None
CellValue = Any

DEFAULT_SAMPLE_ROWS = 10


@dataclass(frozen=True)
class Sheet:
    """Normalized worksheet.

    Every row's key set is a subset of ``headers``; missing cells are stored as
    ``None`` rather than left out. ``sample_rows`` is the first N rows, kept for
    structure-preview callers. Rows are read-only mappings.
    """
    name: str
    headers: tuple[str, ...]
    rows: tuple[Mapping[str, CellValue], ...]
    sample_rows: tuple[Mapping[str, CellValue], ...] = ()
    header_row_index: int = 0  # 0-based position of the detected header in the raw sheet

    def __post_init__(self) -> None:
        # frozen なので object.__setattr__ で差し替える
        object.__setattr__(self, "rows", tuple(MappingProxyType(dict(r)) for r in self.rows))
        object.__setattr__(self, "sample_rows", tuple(MappingProxyType(dict(r)) for r in self.sample_rows))

    @property
    def total_rows(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class SheetStructure:
    """Headers plus a preview of the first rows (inspection surface)."""
    headers: list[str]
    sample_rows: list[dict[str, CellValue]]
    total_rows: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "headers": list(self.headers),
            "sample_rows": [dict(r) for r in self.sample_rows],
            "total_rows": self.total_rows,
        }


@dataclass(frozen=True)
class Workbook:
    """Parsed workbook: one Sheet per worksheet that parsed successfully.

    Worksheets that failed are listed in ``failed_sheets`` (name -> reason)
    so callers can report them without losing the rest of the workbook.
    """
    id: str
    filename: str
    sheets: tuple[Sheet, ...]
    failed_sheets: dict[str, str] = field(default_factory=dict)
