"""Environment-driven configuration helpers for recordcsv."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

__all__ = [
    "ENV_PREFIX",
    "EnvironmentSettings",
    "load_environment_settings",
    "settings_from_mapping",
]

ENV_PREFIX = "RECORDCSV__"
"""Prefix of ``RECORDCSV__SECTION__KEY`` override variables."""

_SHORT_VARIABLES: tuple[str, ...] = ("RECORDCSV_CONFIG", "RECORDCSV_LOG_LEVEL")


class EnvironmentSettings(BaseSettings):
    """Typed view of recordcsv environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    config_path: Path | None = Field(default=None, alias="RECORDCSV_CONFIG")
    log_level: str | None = Field(default=None, alias="RECORDCSV_LOG_LEVEL")

    @field_validator("config_path")
    @classmethod
    def _resolve_config_path(cls, value: Path | None) -> Path | None:
        """Expand the user directory of the configured path."""
        if value is None:
            return None
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str | None) -> str | None:
        """Upper-case the level name; blank values count as unset."""
        if value is None:
            return None
        normalized = value.strip().upper()
        return normalized or None


def load_environment_settings(*, env_file: Path | None = None) -> EnvironmentSettings:
    """Load settings from the process environment and ``.env``.

    Parameters
    ----------
    env_file:
        Optional path to a ``.env`` file. When omitted, the default search order
        from :class:`EnvironmentSettings` is used.
    """

    init_kwargs: dict[str, Any] = {}
    if env_file is not None:
        init_kwargs["_env_file"] = env_file
    return EnvironmentSettings(**init_kwargs)


class _MappingSettings(EnvironmentSettings):
    """Settings populated from constructor values only."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def settings_from_mapping(environ: Mapping[str, str]) -> EnvironmentSettings:
    """Build settings from ``environ`` alone; the process environment and
    ``.env`` are not consulted.
    """

    values = {name: environ[name] for name in _SHORT_VARIABLES if name in environ}
    return _MappingSettings(**values)
