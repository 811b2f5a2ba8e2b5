from __future__ import annotations

import pytest

from cpace_estimator.errors import ColumnNotFoundError, SheetNotFoundError
from cpace_estimator.models.sheet import Workbook
from cpace_estimator.services.session import describe_sheet, run_analysis, start_session, submit_results


@pytest.fixture()
def workbook(cost_sheet) -> Workbook:
    return Workbook(id="wb1", filename="budget.xlsx", sheets=(cost_sheet,))


def test_session_flow(workbook):
    session = start_session(workbook)
    info = describe_sheet(session, "Budget")
    assert info["headers"] == ["Item Description", "Qty", "Unit Cost", "Total"]
    assert info["total_rows"] == 3
    assert info["amount_columns"] == ["Unit Cost", "Total"]

    analyzed = run_analysis(session, "Budget", "Item Description", "Total")
    assert session.line_items == analyzed.line_items
    assert session.sheet_name == "Budget"

    final = submit_results(session, "Mostly HVAC")
    assert final.summary == "Mostly HVAC"
    assert final.total_original == analyzed.total_original
    assert final.total_eligible == analyzed.total_eligible
    assert final.skipped_aggregates == 1
    assert session.last_result is final


def test_submit_without_analysis_is_empty(workbook):
    session = start_session(workbook)
    result = submit_results(session, "nothing yet")
    assert result.total_items == 0
    assert result.total_original == 0


def test_failed_lookup_leaves_session_untouched(workbook):
    session = start_session(workbook)
    run_analysis(session, "Budget", "Item Description", "Total")
    before = session.line_items
    with pytest.raises(SheetNotFoundError):
        run_analysis(session, "Other", "Item Description", "Total")
    with pytest.raises(ColumnNotFoundError):
        run_analysis(session, "Budget", "Item Description", "Nope")
    assert session.line_items == before


def test_sessions_are_independent(workbook):
    a = start_session(workbook)
    b = start_session(workbook)
    run_analysis(a, "Budget", "Item Description", "Total")
    assert a.session_id != b.session_id
    assert b.line_items == ()
