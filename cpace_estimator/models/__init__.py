"""Domain models for the CPACE eligibility estimator.

Sheets and workbooks produced by ingestion, the eligibility category set,
per-row analysis records and the aggregate result, plus config and error-log
records.
"""

from .analysis_result import AnalysisResult, LineItemAnalysis
from .config_models import AppConfig, ClassifierSettings, ExportSettings, IngestionSettings
from .eligibility import Classification, EligibilityCategory, PaceEligibility
from .error_record import ErrorRecord
from .sheet import Sheet, SheetStructure, Workbook

__all__ = [
    # Ingestion models
    "Sheet",
    "SheetStructure",
    "Workbook",
    # Eligibility models
    "EligibilityCategory",
    "PaceEligibility",
    "Classification",
    # Analysis models
    "LineItemAnalysis",
    "AnalysisResult",
    # Configuration models
    "AppConfig",
    "ClassifierSettings",
    "IngestionSettings",
    "ExportSettings",
    # Error log
    "ErrorRecord",
]
