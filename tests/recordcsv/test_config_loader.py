"""Layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from recordcsv.config import (
    EncoderConfig,
    RecordCSVConfig,
    WriterConfig,
    load_config,
    load_environment_settings,
    load_raw_config,
    settings_from_mapping,
)
from recordcsv.logging import LogFormat

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RECORDCSV_CONFIG", raising=False)
    monkeypatch.delenv("RECORDCSV_LOG_LEVEL", raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file() -> None:
    config = load_config(environ={})

    assert config == RecordCSVConfig()
    assert config.encoder.tag_key == "csv"
    assert config.writer.delimiter == ","
    assert config.logging.format is LogFormat.JSON


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "recordcsv.yaml",
        "encoder:\n  tag_key: json\n  list_delimiters: ['[', ']']\nwriter:\n  use_crlf: true\n",
    )

    config = load_config(path, environ={})

    assert config.encoder.tag_key == "json"
    assert config.encoder.list_delimiters == ("[", "]")
    assert config.writer.use_crlf is True


def test_precedence_yaml_then_environment_then_overrides(tmp_path: Path) -> None:
    path = _write(tmp_path / "recordcsv.yaml", "encoder:\n  numeric_base: 8\n  tag_key: json\n")
    environ = {"RECORDCSV__ENCODER__NUMERIC_BASE": "16", "RECORDCSV__WRITER__DELIMITER": ";"}

    from_env = load_config(path, environ=environ)
    overridden = load_config(path, environ=environ, overrides={"encoder.numeric_base": "2"})

    assert from_env.encoder.numeric_base == 16
    assert from_env.encoder.tag_key == "json"
    assert from_env.writer.delimiter == ";"
    assert overridden.encoder.numeric_base == 2


def test_config_path_from_environment(tmp_path: Path) -> None:
    path = _write(tmp_path / "env.yaml", "writer:\n  delimiter: '|'\n")

    config = load_config(environ={"RECORDCSV_CONFIG": str(path)})

    assert config.writer.delimiter == "|"


def test_log_level_variable_is_upper_cased() -> None:
    config = load_config(environ={"RECORDCSV_LOG_LEVEL": " debug "})

    assert config.logging.level == "DEBUG"


def test_numeric_base_is_clamped() -> None:
    config = load_config(environ={}, overrides={"encoder.numeric_base": 99})

    assert config.encoder.numeric_base == 36
    assert EncoderConfig(numeric_base=0).numeric_base == 2


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.yaml", "encoder:\n  colour: blue\n")

    with pytest.raises(ValidationError):
        load_config(path, environ={})


def test_invalid_delimiter_is_rejected() -> None:
    with pytest.raises(ValidationError):
        WriterConfig(delimiter=";;")


def test_empty_tag_key_is_rejected() -> None:
    with pytest.raises(ValidationError):
        EncoderConfig(tag_key="")


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path / "list.yaml", "- a\n- b\n")

    with pytest.raises(TypeError, match="must produce a mapping"):
        load_raw_config(path)


def test_empty_yaml_is_an_empty_mapping(tmp_path: Path) -> None:
    assert load_raw_config(_write(tmp_path / "empty.yaml", "")) == {}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        load_config(tmp_path / "missing.yaml", environ={})


def test_settings_from_mapping_ignores_unrelated_names() -> None:
    settings = settings_from_mapping({"HOME": "/tmp", "RECORDCSV_LOG_LEVEL": "warning"})

    assert settings.config_path is None
    assert settings.log_level == "WARNING"


def test_settings_read_env_file(tmp_path: Path) -> None:
    env_file = _write(tmp_path / ".env", "RECORDCSV_LOG_LEVEL=error\n")

    settings = load_environment_settings(env_file=env_file)

    assert settings.log_level == "ERROR"


def test_explicit_environ_ignores_process_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("RECORDCSV_LOG_LEVEL", "debug")
    monkeypatch.setenv("RECORDCSV_CONFIG", str(tmp_path / "never-read.yaml"))
    monkeypatch.setenv("RECORDCSV__ENCODER__TAG_KEY", "json")

    config = load_config(environ={})

    assert config.logging.level == "INFO"
    assert config.encoder.tag_key == "csv"
    assert settings_from_mapping({}).log_level is None
