from __future__ import annotations

from ..models.analysis_result import AnalysisResult

"""Summary line rendering for the SUMMARY log output.

Format:
SUMMARY items={n} skipped_aggregates={n} total_original={x}
total_eligible={x} eligible_pct={p}
"""


def _format_number(value: float) -> str:
    # 整数値は小数点なしで出力
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: AnalysisResult) -> str:
    """Render a SUMMARY line from an AnalysisResult.

    Examples:
        >>> from cpace_estimator.services.analysis import build_result
        >>> render_summary_line(build_result([]))
        'SUMMARY items=0 skipped_aggregates=0 total_original=0 total_eligible=0 eligible_pct=0'
    """
    pct = result.eligible_ratio * 100
    return (
        f"SUMMARY items={result.total_items} "
        f"skipped_aggregates={result.skipped_aggregates} "
        f"total_original={_format_number(result.total_original)} "
        f"total_eligible={_format_number(result.total_eligible)} "
        f"eligible_pct={_format_number(pct)}"
    )
