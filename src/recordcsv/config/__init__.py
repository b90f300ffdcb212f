"""Configuration models and loaders."""

from .environment import EnvironmentSettings, load_environment_settings, settings_from_mapping
from .loader import load_config, load_raw_config
from .models import (
    MAX_NUMERIC_BASE,
    MIN_NUMERIC_BASE,
    EncoderConfig,
    LoggingConfig,
    RecordCSVConfig,
    WriterConfig,
    clamp_numeric_base,
)

__all__ = [
    "EncoderConfig",
    "EnvironmentSettings",
    "LoggingConfig",
    "MAX_NUMERIC_BASE",
    "MIN_NUMERIC_BASE",
    "RecordCSVConfig",
    "WriterConfig",
    "clamp_numeric_base",
    "load_config",
    "load_environment_settings",
    "load_raw_config",
    "settings_from_mapping",
]
