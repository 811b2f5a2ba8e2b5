from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the CPACE estimator.

These are the typed, frozen forms of config/cpace.yml. The loader in
cpace_estimator/config/loader.py validates the YAML against the JSON schema
and builds these objects; every field has a default so a missing config
file simply means default_config().
"""

__all__ = [
    "ClassifierSettings",
    "IngestionSettings",
    "ExportSettings",
    "AppConfig",
]


@dataclass(frozen=True)
class ClassifierSettings:
    """Tunable parameters of the keyword classifier."""
    confidence_scale: float = 30.0  # best score that maps to confidence 1.0
    short_circuit_min_length: int = 6  # min not_eligible keyword length for the early exit


@dataclass(frozen=True)
class IngestionSettings:
    """Header detection / preview limits."""
    sample_rows: int = 10
    header_scan_rows: int = 16
    header_scan_columns: int = 11


@dataclass(frozen=True)
class ExportSettings:
    output_directory: str = "./out"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    classifier: ClassifierSettings = field(default_factory=ClassifierSettings)
    ingestion: IngestionSettings = field(default_factory=IngestionSettings)
    export: ExportSettings = field(default_factory=ExportSettings)
