"""Typer application for the recordcsv command line.

Console entry points should target :func:`recordcsv.cli.app.run`.
"""

from __future__ import annotations

import importlib
import sys
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from recordcsv.config import EncoderConfig, LoggingConfig, RecordCSVConfig, load_config
from recordcsv.encoder import StructuralEncoder
from recordcsv.errors import RecordCSVError
from recordcsv.io import write_rows_atomic
from recordcsv.kinds import is_record_type
from recordcsv.logging import LogConfig, LogEvents, LogFormat, UnifiedLogger, emit
from recordcsv.writer import RowWriter

from .errors import (
    CLI_ERROR_CONFIG,
    CLI_ERROR_ENCODING,
    CLI_ERROR_INPUT,
    emit_cli_error_and_exit,
    format_cli_error,
)
from .sample_data import sample_people

__all__ = ["app", "create_app", "run"]

_log = UnifiedLogger.get(__name__)


@dataclass(frozen=True)
class CliState:
    """Global options captured by the application callback."""

    log_level: str | None = None
    log_format: LogFormat | None = None


def _configure_logging(state: CliState, config: LoggingConfig) -> None:
    level = state.log_level or config.level
    log_format = state.log_format or config.format
    try:
        UnifiedLogger.configure(LogConfig(level=level, format=LogFormat(log_format)))
    except ValueError as exc:
        typer.echo(format_cli_error(CLI_ERROR_CONFIG, str(exc)), err=True)
        raise typer.Exit(code=1) from exc


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()


def _resolve_target(target: str) -> Any:
    """Import ``MODULE:ATTR`` and return the attribute (called if it is a factory)."""

    module_name, separator, attribute = target.partition(":")
    if not separator or not module_name or not attribute:
        raise ValueError(f"expected MODULE:ATTR, got {target!r}")
    value: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        value = getattr(value, part)
    if callable(value) and not is_record_type(value):
        value = value()
    return value


def _cli_overrides(
    *, tag: str | None, use_tags: bool | None, base: int | None
) -> Mapping[str, Any]:
    overrides: dict[str, Any] = {}
    if tag is not None:
        overrides["encoder.tag_key"] = tag
    if use_tags is not None:
        overrides["encoder.use_field_tags"] = use_tags
    if base is not None:
        overrides["encoder.numeric_base"] = base
    return overrides


def create_app() -> typer.Typer:
    """Create the Typer application with all commands registered."""

    app = typer.Typer(
        name="recordcsv",
        help="Encode dataclasses, pydantic models and NamedTuples as CSV.",
        add_completion=False,
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            envvar="RECORDCSV_LOG_LEVEL",
            help="Log level (DEBUG, INFO, WARNING, ERROR).",
        ),
        log_format: LogFormat | None = typer.Option(
            None,
            "--log-format",
            case_sensitive=False,
            help="Structured log renderer.",
        ),
    ) -> None:
        ctx.obj = CliState(log_level=log_level, log_format=log_format)

    @app.command(name="example")
    def example(
        ctx: typer.Context,
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Destination file. Defaults to a new temporary file.",
        ),
        crlf: bool = typer.Option(False, "--crlf", help="Terminate lines with \\r\\n."),
        open_delimiter: str = typer.Option('"', "--open", help="Opening list delimiter."),
        close_delimiter: str = typer.Option('"', "--close", help="Closing list delimiter."),
    ) -> None:
        """Encode canned Person records and write them to a CSV file."""

        config = RecordCSVConfig(
            encoder=EncoderConfig(list_delimiters=(open_delimiter, close_delimiter)),
        )
        config = config.model_copy(
            update={"writer": config.writer.model_copy(update={"use_crlf": crlf})}
        )
        _configure_logging(_state(ctx), config.logging)

        with UnifiedLogger.command("example", component="cli"):
            _log.info(LogEvents.CLI_RUN_START)
            rows = StructuralEncoder(config.encoder).marshal(sample_people())
            if output is None:
                handle = tempfile.NamedTemporaryFile(
                    prefix="CSV", suffix=".csv", delete=False
                )
                handle.close()
                destination = Path(handle.name)
            else:
                destination = output
            try:
                write_rows_atomic(rows, destination, config=config.writer)
            except OSError as exc:
                emit_cli_error_and_exit(
                    template=CLI_ERROR_INPUT,
                    message=f"cannot write {destination}: {exc}",
                    context={"path": str(destination)},
                    cause=exc,
                )
            emit(_log, LogEvents.CLI_OUTPUT_WRITTEN, path=str(destination), rows=len(rows) - 1)
            typer.echo(f"Data marshaled to CSV and saved as {destination}")
            _log.info(LogEvents.CLI_RUN_FINISH)

    @app.command(name="export")
    def export(
        ctx: typer.Context,
        target: str = typer.Argument(
            ...,
            help="MODULE:ATTR naming a sequence of records (or a factory returning one).",
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Destination file. Defaults to standard output.",
        ),
        tag: str | None = typer.Option(None, "--tag", help="Tag namespace for column names."),
        use_tags: bool | None = typer.Option(
            None,
            "--tags/--no-tags",
            help="Use declared field tags as column names.",
        ),
        base: int | None = typer.Option(
            None,
            "--base",
            help="Base for unsigned integer cells (clamped to 2..36).",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="YAML configuration file.",
        ),
    ) -> None:
        """Encode records imported from MODULE:ATTR as CSV."""

        state = _state(ctx)
        _configure_logging(state, LoggingConfig())
        try:
            config = load_config(
                config_path,
                overrides=_cli_overrides(tag=tag, use_tags=use_tags, base=base),
            )
        except (FileNotFoundError, TypeError, ValidationError) as exc:
            emit_cli_error_and_exit(
                template=CLI_ERROR_CONFIG,
                message=str(exc),
                context={"command": "export"},
                cause=exc,
            )
        _configure_logging(state, config.logging)

        with UnifiedLogger.command("export", component="cli"):
            _log.info(LogEvents.CLI_RUN_START, target=target)
            try:
                records = _resolve_target(target)
            except (ImportError, AttributeError, ValueError) as exc:
                emit_cli_error_and_exit(
                    template=CLI_ERROR_INPUT,
                    message=f"cannot resolve {target}: {exc}",
                    context={"target": target},
                    cause=exc,
                )
            try:
                rows = StructuralEncoder(config.encoder).marshal(records)
            except RecordCSVError as exc:
                emit_cli_error_and_exit(
                    template=CLI_ERROR_ENCODING,
                    message=str(exc),
                    context={"target": target, **exc.context},
                    cause=exc,
                )

            if output is None:
                writer = RowWriter.from_writer_config(sys.stdout, config.writer)
                writer.write_all(rows)
            else:
                write_rows_atomic(rows, output, config=config.writer)
                emit(_log, LogEvents.CLI_OUTPUT_WRITTEN, path=str(output), rows=len(rows) - 1)
            _log.info(LogEvents.CLI_RUN_FINISH, rows=len(rows) - 1)

    return app


app = create_app()


def run() -> None:
    """Invoke the Typer application."""

    app()
