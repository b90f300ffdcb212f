"""Configuration loading utilities."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, cast

import yaml

from recordcsv.logging import LogEvents, UnifiedLogger

from .environment import (
    ENV_PREFIX,
    EnvironmentSettings,
    load_environment_settings,
    settings_from_mapping,
)
from .models import RecordCSVConfig

__all__ = ["load_config", "load_raw_config"]

logger = UnifiedLogger.get(__name__)


def load_raw_config(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a mapping."""

    resolved = Path(path).expanduser()
    if not resolved.exists():
        msg = f"Configuration file not found: {resolved}"
        raise FileNotFoundError(msg)
    payload = yaml.safe_load(resolved.read_text(encoding="utf-8"))
    if payload is None:
        return {}
    if not isinstance(payload, MutableMapping):
        msg = f"Configuration file must produce a mapping: {resolved}"
        raise TypeError(msg)
    return {str(key): value for key, value in payload.items()}


def load_config(
    path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RecordCSVConfig:
    """Load and validate the recordcsv configuration.

    Layers, lowest precedence first: the YAML file at ``path`` (or the
    ``RECORDCSV_CONFIG`` location), ``RECORDCSV_LOG_LEVEL``, prefixed
    ``RECORDCSV__SECTION__KEY`` variables and finally dotted ``overrides``
    such as ``{"encoder.numeric_base": 16}``.
    """

    env_mapping: Mapping[str, str] = os.environ if environ is None else environ
    settings: EnvironmentSettings = (
        load_environment_settings() if environ is None else settings_from_mapping(environ)
    )
    log = logger.bind(component="config")

    config_path = Path(path) if path is not None else settings.config_path
    payload: dict[str, Any] = {}
    if config_path is not None:
        payload = load_raw_config(config_path)
        log.debug(LogEvents.CONFIG_FILE_LOADED, path=str(config_path))

    if settings.log_level is not None:
        payload = _deep_merge(payload, {"logging": {"level": settings.log_level}})

    env_overrides = _collect_env_overrides(env_mapping, prefixes=(ENV_PREFIX,))
    if env_overrides:
        payload = _deep_merge(payload, env_overrides)
        log.debug(LogEvents.CONFIG_ENV_OVERRIDE_APPLIED, sections=sorted(env_overrides))

    if overrides:
        pairs = [
            (tuple(dotted_key.split(".")), _coerce_value(raw_value))
            for dotted_key, raw_value in overrides.items()
        ]
        payload = _deep_merge(payload, _build_tree(pairs))

    return RecordCSVConfig.model_validate(payload)


def _deep_merge(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge two mapping-like objects."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], MutableMapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(
                cast(Mapping[str, Any], merged[key]),
                cast(Mapping[str, Any], value),
            )
        else:
            merged[key] = value
    return merged


def _build_tree(pairs: Sequence[tuple[Sequence[str], Any]]) -> dict[str, Any]:
    """Turn ``(path, value)`` pairs into a nested mapping."""
    tree: dict[str, Any] = {}
    for parts, value in pairs:
        if not parts:
            continue
        node = tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return tree


def _coerce_value(value: Any) -> Any:
    """Best-effort conversion of environment and override values."""
    if isinstance(value, str):
        try:
            return yaml.safe_load(value)
        except yaml.YAMLError:
            return value
    return value


def _collect_env_overrides(env: Mapping[str, str], *, prefixes: Sequence[str]) -> dict[str, Any]:
    """Collect prefixed environment variables and build a nested override tree."""
    overrides: dict[str, Any] = {}
    for prefix in prefixes:
        if not prefix:
            continue
        scoped_pairs: list[tuple[Sequence[str], Any]] = []
        for key, raw_value in env.items():
            if not key.startswith(prefix) or not key[len(prefix) :]:
                continue
            parts = [
                segment.strip().lower()
                for segment in key[len(prefix) :].split("__")
                if segment.strip()
            ]
            if parts:
                scoped_pairs.append((tuple(parts), _coerce_value(raw_value)))
        scoped_tree = _build_tree(scoped_pairs)
        if scoped_tree:
            overrides = _deep_merge(overrides, scoped_tree)
    return overrides
