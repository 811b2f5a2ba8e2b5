from __future__ import annotations

import csv
import io
from pathlib import Path

from ..models.analysis_result import AnalysisResult

"""CSV export of an analysis result.

Layout:
- header: Description, Original Amount, Eligible Amount, Category, Percentage, Reasoning
- one fully quoted row per line item (category label, whole percent)
- a blank line, then "Total Original,<n>" and "Total Eligible,<n>" trailers
"""

__all__ = [
    "CSV_HEADERS",
    "render_csv",
    "write_csv",
]

CSV_HEADERS = ["Description", "Original Amount", "Eligible Amount", "Category", "Percentage", "Reasoning"]


def _format_amount(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_percentage(fraction: float) -> str:
    return f"{fraction * 100:.0f}%"


def render_csv(result: AnalysisResult) -> str:
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for item in result.line_items:
        writer.writerow([
            item.description,
            _format_amount(item.original_amount),
            _format_amount(item.eligible_amount),
            item.eligibility_category.label,
            _format_percentage(item.eligibility_percentage),
            item.reasoning,
        ])
    buf.write("\n")
    buf.write(f"Total Original,{_format_amount(result.total_original)}\n")
    buf.write(f"Total Eligible,{_format_amount(result.total_eligible)}\n")
    return buf.getvalue()


def write_csv(result: AnalysisResult, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_csv(result), encoding="utf-8")
    return path
