"""Structured logging for the encoder, the writers and the command line.

Every component logs through :class:`UnifiedLogger`; :func:`configure_logging`
routes structlog events through stdlib ``logging`` so that one handler
renders them as JSON or ``key=value`` lines on stderr.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, MutableMapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, cast

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    unbind_contextvars,
)
from structlog.stdlib import BoundLogger

__all__ = [
    "LogFormat",
    "LogConfig",
    "DEFAULT_LOG_LEVEL",
    "MANDATORY_FIELDS",
    "configure_logging",
    "get_logger",
    "UnifiedLogger",
]


class LogFormat(str, Enum):
    """Renderers selectable with ``--log-format`` or ``logging.format``."""

    JSON = "json"
    KEY_VALUE = "key_value"


DEFAULT_LOG_LEVEL = logging.INFO

MANDATORY_FIELDS: Sequence[str] = ("component", "command")
"""Fields expected on every event; absent ones are listed under ``missing_context``."""

_ROOT_LOGGER_NAME: Final[str] = "recordcsv"

_KEY_ORDER: Sequence[str] = (
    "timestamp",
    "level",
    "component",
    "command",
    "record_type",
    "message",
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    level: int | str = DEFAULT_LOG_LEVEL
    format: LogFormat = LogFormat.JSON


def _coerce_log_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    mapped_level = logging.getLevelNamesMapping().get(level.upper())
    if mapped_level is None:
        raise ValueError(f"Unsupported log level: {level}")
    return mapped_level


def _report_missing_context(
    _: Any,
    __: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    missing = [name for name in MANDATORY_FIELDS if name not in event_dict]
    if missing:
        event_dict.setdefault("missing_context", missing)
    return event_dict


def _renderer_for(format: LogFormat) -> Any:
    if format is LogFormat.KEY_VALUE:
        return structlog.processors.KeyValueRenderer(
            key_order=_KEY_ORDER,
            sort_keys=False,
            drop_missing=True,
        )
    return structlog.processors.JSONRenderer(sort_keys=True, ensure_ascii=False)


def configure_logging(config: LogConfig | None = None) -> None:
    """Install the stderr handler and the structlog processor chain.

    Raises:
        ValueError: if ``config.level`` names no stdlib logging level.
    """

    cfg = config or LogConfig()
    level = _coerce_log_level(cfg.level)
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _report_missing_context,
        structlog.processors.EventRenamer("message"),
        structlog.processors.format_exc_info,
    ]

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer_for(LogFormat(cfg.format)),
            ],
        )
    )
    logging.basicConfig(handlers=[handler], level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = _ROOT_LOGGER_NAME) -> BoundLogger:
    """Return a (lazily configured) bound logger named ``name``."""

    return cast(BoundLogger, structlog.get_logger(name))


class UnifiedLogger:
    """Single entry point for configuring loggers and binding context."""

    @staticmethod
    def configure(config: LogConfig | None = None) -> None:
        configure_logging(config)

    @staticmethod
    def get(name: str | None = None) -> BoundLogger:
        return get_logger(name or _ROOT_LOGGER_NAME)

    @staticmethod
    def bind(**context: Any) -> None:
        """Bind context included with every subsequent event."""

        bind_contextvars(**context)

    @staticmethod
    def reset() -> None:
        clear_contextvars()

    @staticmethod
    def scoped(**context: Any) -> AbstractContextManager[None]:
        """Bind ``context`` for the duration of a ``with`` block.

        Keys that were already bound get their previous values back on exit.
        """

        @contextmanager
        def _scope() -> Iterator[None]:
            existing = get_contextvars()
            previous = {key: existing[key] for key in context if key in existing}
            bind_contextvars(**context)
            try:
                yield None
            finally:
                unbind_contextvars(*context)
                if previous:
                    bind_contextvars(**previous)

        return _scope()

    @staticmethod
    def command(command: str, **context: Any) -> AbstractContextManager[None]:
        """Scope events to the CLI ``command`` being run."""

        return UnifiedLogger.scoped(command=command, **context)
