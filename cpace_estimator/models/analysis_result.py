from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .eligibility import EligibilityCategory

"""Analysis result models for the CPACE estimator.

LineItemAnalysis is created once per accepted row during an analysis pass.
AnalysisResult aggregates them; it is derived data and can always be rebuilt
from the ordered line-item sequence (see services.analysis.build_result).
"""

__all__ = [
    "LineItemAnalysis",
    "AnalysisResult",
    "empty_breakdown",
]


def empty_breakdown() -> dict[EligibilityCategory, int]:
    """Zero-filled per-category counter in canonical category order."""
    return {c: 0 for c in EligibilityCategory}


@dataclass(frozen=True)
class LineItemAnalysis:
    """Classification of a single spreadsheet row."""
    row_index: int  # 0-based data row position in the sheet
    description: str
    original_amount: float
    eligible_amount: float  # original_amount * eligibility_percentage
    eligibility_category: EligibilityCategory
    eligibility_percentage: float
    reasoning: str  # static rationale of the category

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_index": self.row_index,
            "description": self.description,
            "original_amount": self.original_amount,
            "eligible_amount": self.eligible_amount,
            "eligibility_category": self.eligibility_category.value,
            "eligibility_percentage": self.eligibility_percentage,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate of one analysis pass over a sheet + column pair.

    ``skipped_aggregates`` and ``category_breakdown`` are diagnostics for the
    caller; the totals only ever cover ``line_items``.
    """
    line_items: tuple[LineItemAnalysis, ...]
    total_original: float
    total_eligible: float
    summary: str = ""
    skipped_aggregates: int = 0
    category_breakdown: Mapping[EligibilityCategory, int] = field(default_factory=empty_breakdown)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_breakdown", MappingProxyType(dict(self.category_breakdown)))

    @property
    def total_items(self) -> int:
        return len(self.line_items)

    @property
    def eligible_ratio(self) -> float:
        """total_eligible / total_original (0 when nothing was accepted)."""
        if self.total_original == 0:
            return 0.0
        return self.total_eligible / self.total_original

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_items": self.total_items,
            "skipped_aggregate_rows": self.skipped_aggregates,
            "total_original": self.total_original,
            "total_eligible": self.total_eligible,
            "eligibility_breakdown": {c.value: n for c, n in self.category_breakdown.items()},
            "summary": self.summary,
            "line_items": [li.to_dict() for li in self.line_items],
        }
