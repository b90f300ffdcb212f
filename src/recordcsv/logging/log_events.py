"""Registry of structured logging event identifiers."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any

from structlog.stdlib import BoundLogger

__all__ = ["LogEvents", "emit"]


class LogEvents(str, Enum):
    """Strongly typed registry of recordcsv log events."""

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, _last_values: list[str]) -> str:
        """Produce a dotted ``namespace.action.suffix`` identifier from the member name."""
        parts = name.lower().split("_")
        namespace = parts[0] if parts else "event"
        suffix = parts[-1] if len(parts) > 1 else "event"
        action_parts = parts[1:-1] if len(parts) > 2 else ["event"]
        return ".".join((namespace, ".".join(action_parts), suffix))

    def __str__(self) -> str:
        return str(self.value)

    CLI_RUN_START = auto()
    CLI_RUN_FINISH = auto()
    CLI_RUN_ERROR = auto()
    CLI_OUTPUT_WRITTEN = auto()
    CONFIG_FILE_LOADED = auto()
    CONFIG_ENV_OVERRIDE_APPLIED = auto()
    ENCODER_FIELD_EXCLUDED = auto()
    ENCODER_PLAN_BUILT = auto()
    ENCODER_COLUMNS_DERIVED = auto()
    ENCODER_ROWS_MARSHALLED = auto()
    WRITER_ROWS_FLUSHED = auto()
    WRITER_FILE_WRITTEN = auto()


def emit(logger: BoundLogger, event: str | LogEvents, **fields: Any) -> None:
    """Send an event via ``BoundLogger`` without mutating the provided fields."""

    message = event.value if isinstance(event, LogEvents) else event
    logger.info(message, **fields)
