"""Configuration models for the encoder, the row writer and logging."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recordcsv.logging import LogFormat

__all__ = [
    "MIN_NUMERIC_BASE",
    "MAX_NUMERIC_BASE",
    "clamp_numeric_base",
    "EncoderConfig",
    "WriterConfig",
    "LoggingConfig",
    "RecordCSVConfig",
]

MIN_NUMERIC_BASE = 2
MAX_NUMERIC_BASE = 36


def clamp_numeric_base(value: int) -> int:
    """Clamp ``value`` into the range of bases unsigned integers can render in."""

    return min(max(int(value), MIN_NUMERIC_BASE), MAX_NUMERIC_BASE)


class EncoderConfig(BaseModel):
    """Settings of a :class:`~recordcsv.encoder.StructuralEncoder`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    use_field_tags: bool = Field(
        default=True,
        description="Use declared field tags (instead of field names) as column names.",
    )
    tag_key: str = Field(
        default="csv",
        min_length=1,
        description="Tag namespace read when tags are enabled.",
    )
    numeric_base: int = Field(
        default=10,
        description="Base used for unsigned integer cells; clamped to [2, 36].",
    )
    list_delimiters: tuple[str, str] = Field(
        default=("(", ")"),
        description="Opening and closing strings wrapped around collapsed collections.",
    )

    @field_validator("numeric_base")
    @classmethod
    def _clamp_numeric_base(cls, value: int) -> int:
        return clamp_numeric_base(value)


class WriterConfig(BaseModel):
    """Settings of the delimited-text row writer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Single character separating cells.",
    )
    use_crlf: bool = Field(
        default=False,
        description="Terminate lines with \\r\\n instead of \\n.",
    )


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Log level for UnifiedLogger.")
    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log format (json, key_value).",
    )


class RecordCSVConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
