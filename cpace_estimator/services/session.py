from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from ..excel.columns import infer_columns
from ..excel.reader import get_sheet, get_sheet_structure
from ..models.analysis_result import AnalysisResult, LineItemAnalysis
from ..models.sheet import Workbook
from ..rules.classifier import EligibilityClassifier
from .analysis import analyze, build_result

"""Caller-owned analysis session.

The core functions are stateless; a conversational or batch driver that
explores a workbook over several steps keeps its progress in an
AnalysisSession and passes it explicitly to each step:

    session = start_session(workbook)
    describe_sheet(session, "Budget")
    run_analysis(session, "Budget", "Description", "Total")
    result = submit_results(session, "HVAC and envelope dominate")
"""

__all__ = [
    "AnalysisSession",
    "start_session",
    "describe_sheet",
    "run_analysis",
    "submit_results",
]

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSession:
    """Per-workbook progress of one analysis conversation / batch job."""
    workbook: Workbook
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    classifier: EligibilityClassifier | None = None
    line_items: tuple[LineItemAnalysis, ...] = ()
    last_result: AnalysisResult | None = None
    sheet_name: str | None = None


def start_session(workbook: Workbook, classifier: EligibilityClassifier | None = None) -> AnalysisSession:
    session = AnalysisSession(workbook=workbook, classifier=classifier)
    logger.debug(f"session {session.session_id} started for '{workbook.filename}'")
    return session


def describe_sheet(session: AnalysisSession, sheet_name: str) -> dict[str, Any]:
    """Structure preview plus inferred column candidates for one sheet."""
    sheet = get_sheet(session.workbook, sheet_name)
    info = get_sheet_structure(sheet).to_dict()
    info.update(infer_columns(sheet).to_dict())
    return info


def run_analysis(
    session: AnalysisSession,
    sheet_name: str,
    description_column: str,
    amount_column: str,
) -> AnalysisResult:
    """Analyze one sheet and remember its line items in the session.

    A failed lookup (unknown sheet/column) leaves the session unchanged.
    """
    sheet = get_sheet(session.workbook, sheet_name)
    result = analyze(sheet, description_column, amount_column, classifier=session.classifier)
    session.line_items = result.line_items
    session.last_result = result
    session.sheet_name = sheet_name
    return result


def submit_results(session: AnalysisSession, summary: str) -> AnalysisResult:
    """Final result from the session's stored line items with the caller's summary."""
    skipped = session.last_result.skipped_aggregates if session.last_result else 0
    result = build_result(session.line_items, summary=summary, skipped_aggregates=skipped)
    session.last_result = result
    return result
