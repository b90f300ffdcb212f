"""Delimited-text row writer fed by the structural encoder."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any, TextIO

from recordcsv.config.models import RecordCSVConfig, WriterConfig
from recordcsv.encoder import StructuralEncoder
from recordcsv.logging import LogEvents, UnifiedLogger

__all__ = ["RowWriter"]

logger = UnifiedLogger.get(__name__)

_FORMAT_TERMINATOR = "\r\n"


class RowWriter:
    """Write rows of string cells to a text stream.

    Cells containing the delimiter, a double quote or a line break are
    quoted and embedded quotes are doubled.  The encoder never quotes; that
    is left entirely to this class.
    """

    def __init__(
        self,
        stream: TextIO,
        encoder: StructuralEncoder | None = None,
        *,
        delimiter: str = ",",
        use_crlf: bool = False,
    ) -> None:
        self._stream = stream
        self._encoder = encoder or StructuralEncoder()
        self._delimiter = delimiter
        self._use_crlf = use_crlf
        self._rows_written = 0
        self._line = io.StringIO()
        self._writer = self._make_writer()

    @classmethod
    def from_config(cls, stream: TextIO, config: RecordCSVConfig) -> RowWriter:
        """Build a writer and its encoder from a configuration document."""
        return cls.from_writer_config(
            stream, config.writer, encoder=StructuralEncoder(config.encoder)
        )

    @classmethod
    def from_writer_config(
        cls,
        stream: TextIO,
        config: WriterConfig,
        *,
        encoder: StructuralEncoder | None = None,
    ) -> RowWriter:
        return cls(stream, encoder, delimiter=config.delimiter, use_crlf=config.use_crlf)

    def _make_writer(self) -> Any:
        # csv quotes cells holding any terminator character; CRLF covers both.
        return csv.writer(
            self._line,
            delimiter=self._delimiter,
            quotechar='"',
            quoting=csv.QUOTE_MINIMAL,
            lineterminator=_FORMAT_TERMINATOR,
        )

    @property
    def encoder(self) -> StructuralEncoder:
        return self._encoder

    @property
    def use_crlf(self) -> bool:
        return self._use_crlf

    def set_use_crlf(self, flag: bool) -> None:
        """Terminate subsequent lines with ``\\r\\n`` when ``flag`` is true."""
        self._use_crlf = bool(flag)

    def set_tag(self, name: str) -> None:
        self._encoder.set_tag_key(name)

    def set_use_tags(self, flag: bool) -> None:
        self._encoder.set_use_field_tags(flag)

    def write(self, row: Sequence[str]) -> None:
        """Write one row."""
        self._writer.writerow(row)
        text = self._line.getvalue()[: -len(_FORMAT_TERMINATOR)]
        self._line.seek(0)
        self._line.truncate()
        self._stream.write(text + ("\r\n" if self._use_crlf else "\n"))
        self._rows_written += 1

    def write_all(self, rows: Iterable[Sequence[str]]) -> None:
        """Write every row, then flush the stream."""
        for row in rows:
            self.write(row)
        self.flush()

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if callable(flush):
            flush()
        logger.debug(LogEvents.WRITER_ROWS_FLUSHED, component="writer", rows=self._rows_written)

    def write_records(self, records: Any) -> None:
        """Marshal ``records`` and write the header plus one row per record."""
        self.write_all(self._encoder.marshal(records))

    def write_columns(self, record: Any) -> None:
        """Write the header row of a record type or instance."""
        self.write(self._encoder.derive_columns(record))

    def write_record(self, record: Any) -> None:
        """Write the data row of a single record instance."""
        self.write(self._encoder.derive_row(record))
