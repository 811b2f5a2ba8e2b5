from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ClassifierSettings, ExportSettings, IngestionSettings

"""Config loader.

Responsibilities:
- Load YAML config (default: config/cpace.yml, overridable via CPACE_CONFIG)
- Validate against config_schema.json (unknown keys are rejected)
- Apply defaults for every missing section / key
"""

__all__ = [
    "ConfigError",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "default_config",
    "resolve_config_path",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/cpace.yml")
CONFIG_ENV_VAR = "CPACE_CONFIG"


class ConfigError(Exception):
    pass


def default_config() -> AppConfig:
    return AppConfig()


def resolve_config_path(explicit: str | Path | None = None) -> Path:
    """--config argument > CPACE_CONFIG env var > config/cpace.yml."""
    if explicit:
        return Path(explicit)
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config
            violates the schema (wrong types, unknown keys, out of range)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    clf_raw = data.get("classifier") or {}
    ing_raw = data.get("ingestion") or {}
    exp_raw = data.get("export") or {}
    defaults = default_config()
    return AppConfig(
        classifier=ClassifierSettings(
            confidence_scale=float(clf_raw.get("confidence_scale", defaults.classifier.confidence_scale)),
            short_circuit_min_length=clf_raw.get(
                "short_circuit_min_length", defaults.classifier.short_circuit_min_length
            ),
        ),
        ingestion=IngestionSettings(
            sample_rows=ing_raw.get("sample_rows", defaults.ingestion.sample_rows),
            header_scan_rows=ing_raw.get("header_scan_rows", defaults.ingestion.header_scan_rows),
            header_scan_columns=ing_raw.get("header_scan_columns", defaults.ingestion.header_scan_columns),
        ),
        export=ExportSettings(
            output_directory=exp_raw.get("output_directory", defaults.export.output_directory),
        ),
    )
