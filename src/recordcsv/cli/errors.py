"""CLI error codes and emission helpers."""
from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NoReturn

import typer

from recordcsv.logging import LogEvents, UnifiedLogger

__all__ = [
    "CliErrorCode",
    "CliErrorTemplate",
    "CLI_ERROR_CONFIG",
    "CLI_ERROR_ENCODING",
    "CLI_ERROR_INPUT",
    "emit_cli_error",
    "emit_cli_error_and_exit",
    "format_cli_error",
]


class CliErrorCode(str, Enum):
    """Canonical CLI error codes."""

    CONFIG = "E002"
    ENCODING = "E003"
    INPUT = "E004"


@dataclass(frozen=True)
class CliErrorTemplate:
    """Descriptor bundling an error code with a human-readable label."""

    code: CliErrorCode
    label: str


CLI_ERROR_CONFIG = CliErrorTemplate(CliErrorCode.CONFIG, "configuration_error")
CLI_ERROR_ENCODING = CliErrorTemplate(CliErrorCode.ENCODING, "encoding_error")
CLI_ERROR_INPUT = CliErrorTemplate(CliErrorCode.INPUT, "input_error")

_CLI_ERROR_PREFIX = "[recordcsv-cli]"


def format_cli_error(template: CliErrorTemplate, message: str) -> str:
    """Return a deterministic string representation for stderr."""

    return f"{_CLI_ERROR_PREFIX} ERROR {template.code.value}: {message}"


def emit_cli_error(
    *,
    template: CliErrorTemplate,
    message: str,
    event: LogEvents | str = LogEvents.CLI_RUN_ERROR,
    context: Mapping[str, Any] | None = None,
) -> None:
    """Emit a structured log record and deterministic stderr message."""

    bound_context: MutableMapping[str, Any] = dict(context or {})
    bound_context.setdefault("component", "cli")
    bound_context.setdefault("error_code", template.code.value)
    bound_context.setdefault("error_label", template.label)
    bound_context.setdefault("error_message", message)
    UnifiedLogger.get(__name__).error(event, **bound_context)
    typer.echo(format_cli_error(template, message), err=True)


def emit_cli_error_and_exit(
    *,
    template: CliErrorTemplate,
    message: str,
    event: LogEvents | str = LogEvents.CLI_RUN_ERROR,
    context: Mapping[str, Any] | None = None,
    exit_code: int = 1,
    cause: BaseException | None = None,
) -> NoReturn:
    """Emit a CLI error event and terminate the command."""

    emit_cli_error(template=template, message=message, event=event, context=context)
    if cause is not None:
        raise typer.Exit(code=exit_code) from cause
    raise typer.Exit(code=exit_code)
