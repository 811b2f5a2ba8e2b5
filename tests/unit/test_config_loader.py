from __future__ import annotations
import pytest
from pathlib import Path
from cpace_estimator.config.loader import (
    ConfigError,
    default_config,
    load_config,
    resolve_config_path,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.classifier.confidence_scale == 30.0
    assert cfg.classifier.short_circuit_min_length == 6
    assert cfg.ingestion.sample_rows == 10
    assert cfg.export.output_directory == "./out"


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError):
        load_config(missing)


def test_load_config_partial_applies_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "cpace.yml"
    cfg_path.write_text("classifier:\n  confidence_scale: 45\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.classifier.confidence_scale == 45.0
    assert cfg.classifier.short_circuit_min_length == 6
    assert cfg.ingestion == default_config().ingestion


def test_load_config_empty_file_is_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "cpace.yml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_config(cfg_path) == default_config()


def test_load_config_invalid_yaml(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "cpace.yml"
    cfg_path.write_text("classifier: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "invalid yaml" in str(e.value)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("confidence_scale: 30", "confidence_scale: high")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_non_positive_scale(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("confidence_scale: 30", "confidence_scale: 0")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    # unknown top-level keys are rejected by additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_resolve_config_path_precedence(temp_workdir: Path, monkeypatch):
    assert resolve_config_path() == Path("config/cpace.yml")
    monkeypatch.setenv("CPACE_CONFIG", "custom.yml")
    assert resolve_config_path() == Path("custom.yml")
    assert resolve_config_path("explicit.yml") == Path("explicit.yml")
