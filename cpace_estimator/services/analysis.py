from __future__ import annotations

import logging
from collections.abc import Iterable

from ..errors import ColumnNotFoundError
from ..excel.cells import cell_to_amount, cell_to_text
from ..models.analysis_result import AnalysisResult, LineItemAnalysis, empty_breakdown
from ..models.eligibility import EligibilityCategory
from ..models.sheet import Sheet
from ..rules.aggregate import is_aggregate_row, matching_pattern
from ..rules.classifier import EligibilityClassifier, default_classifier

"""Analysis orchestration: one pass over a sheet + column pair.

For each row (sheet order):
1. description / amount cells are coerced (text, number; junk -> "" / 0)
2. empty description or zero amount -> skipped silently
3. aggregate rows (subtotals etc.) -> skipped and counted
4. everything else is classified and becomes a LineItemAnalysis

The pass is pure: same sheet + columns -> identical AnalysisResult.
"""

__all__ = [
    "analyze",
    "build_result",
    "category_breakdown",
    "default_summary",
]

logger = logging.getLogger(__name__)


def category_breakdown(line_items: Iterable[LineItemAnalysis]) -> dict[EligibilityCategory, int]:
    """Line-item count per category; all categories present, zero-filled."""
    counts = empty_breakdown()
    for item in line_items:
        counts[item.eligibility_category] += 1
    return counts


def default_summary(n_items: int, skipped: int, total_original: float, total_eligible: float) -> str:
    pct = (total_eligible / total_original * 100) if total_original else 0.0
    return (
        f"{n_items} line items analyzed ({skipped} aggregate rows skipped): "
        f"${total_eligible:,.2f} of ${total_original:,.2f} eligible for CPACE financing ({pct:.1f}%)"
    )


def build_result(
    line_items: Iterable[LineItemAnalysis],
    summary: str | None = None,
    skipped_aggregates: int = 0,
) -> AnalysisResult:
    """Rebuild an AnalysisResult from an explicit line-item sequence.

    Totals are recomputed by summing in order, so they always equal the sums
    over ``line_items``.
    """
    items = tuple(line_items)
    total_original = 0
    total_eligible = 0
    for item in items:
        total_original += item.original_amount
        total_eligible += item.eligible_amount
    if summary is None:
        summary = default_summary(len(items), skipped_aggregates, total_original, total_eligible)
    return AnalysisResult(
        line_items=items,
        total_original=total_original,
        total_eligible=total_eligible,
        summary=summary,
        skipped_aggregates=skipped_aggregates,
        category_breakdown=category_breakdown(items),
    )


def analyze(
    sheet: Sheet,
    description_column: str,
    amount_column: str,
    classifier: EligibilityClassifier | None = None,
) -> AnalysisResult:
    """Classify every line item of ``sheet`` and aggregate eligible amounts.

    Raises:
        ColumnNotFoundError: either column is not a header of the sheet
            (checked before any row is processed)
    """
    for column in (description_column, amount_column):
        if column not in sheet.headers:
            raise ColumnNotFoundError(sheet.name, column)
    clf = classifier or default_classifier

    line_items: list[LineItemAnalysis] = []
    skipped_aggregates = 0
    for i, row in enumerate(sheet.rows):
        description = cell_to_text(row.get(description_column))
        amount = cell_to_amount(row.get(amount_column))

        if not description or amount == 0:
            continue

        if is_aggregate_row(description):
            skipped_aggregates += 1
            pattern = matching_pattern(description)
            logger.debug(
                f"skipping aggregate row {i}: '{description}' ({amount:,}) "
                f"matched={pattern.label if pattern else 'empty'}"
            )
            continue

        classification = clf.classify(description)
        eligibility = clf.eligibility_info(classification.category)
        line_items.append(
            LineItemAnalysis(
                row_index=i,
                description=description,
                original_amount=amount,
                eligible_amount=clf.eligible_amount(amount, classification.category),
                eligibility_category=classification.category,
                eligibility_percentage=eligibility.percentage,
                reasoning=eligibility.description,
            )
        )

    result = build_result(line_items, skipped_aggregates=skipped_aggregates)
    logger.info(
        f"analysis of '{sheet.name}' complete: {result.total_items} line items, "
        f"{skipped_aggregates} aggregate rows skipped"
    )
    return result
