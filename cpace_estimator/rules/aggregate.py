from __future__ import annotations

import re
from dataclasses import dataclass

"""Aggregate row detection (subtotals, totals, section headers).

These rows repeat costs that are already itemized elsewhere in the sheet, so
they must never enter eligible-amount sums. Detection is a pure function of
the description text: the trimmed, lower-cased string is tested against a
table of patterns.
"""

__all__ = [
    "AggregatePattern",
    "AGGREGATE_PATTERNS",
    "matching_pattern",
    "is_aggregate_row",
]


@dataclass(frozen=True)
class AggregatePattern:
    label: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _p(label: str, regex: str) -> AggregatePattern:
    return AggregatePattern(label, re.compile(regex))


AGGREGATE_PATTERNS: tuple[AggregatePattern, ...] = (
    _p("subtotal", r"\bsubtotal\b"),
    _p("sub-total", r"\bsub-total\b"),
    _p("sub total", r"\bsub total\b"),
    _p("leading total", r"^total\b"),
    _p("trailing total", r"\btotal\s*$"),
    _p("total with separator", r"\btotal\s*[-:]"),
    _p("grand total", r"\bgrand\s*total\b"),
    _p("hard cost total", r"\bhard\s*cost.*total"),
    _p("soft cost total", r"\bsoft\s*cost.*total"),
    _p("project total", r"\bproject\s*total\b"),
    _p("contract total", r"\bcontract\s*total\b"),
    _p("construction total", r"\bconstruction\s*total\b"),
    _p("division total", r"\bdivision\s+\d+\s*total"),
    _p("division heading", r"\bdivision\s+\d+\s*-?\s*$"),
    _p("csi section code", r"^\d{2}\s*0000\s*$"),
    _p("bare division", r"^division\s+\d+$"),
    # CSI line code without any description, e.g. "01 1000"
    _p("csi line code", r"^\d{2}\s+\d{4}$"),
)


def matching_pattern(description: str) -> AggregatePattern | None:
    """First aggregate pattern matching ``description`` (None if it is a line item)."""
    lower = description.lower().strip()
    for pattern in AGGREGATE_PATTERNS:
        if pattern.matches(lower):
            return pattern
    return None


def is_aggregate_row(description: str | None) -> bool:
    """True when the row is a subtotal / total / section header (or empty)."""
    if not description:
        return True
    return matching_pattern(description) is not None
