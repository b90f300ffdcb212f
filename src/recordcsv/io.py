"""File and DataFrame outputs for encoded rows."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from recordcsv.config.models import RecordCSVConfig, WriterConfig
from recordcsv.encoder import StructuralEncoder
from recordcsv.logging import LogEvents, UnifiedLogger
from recordcsv.writer import RowWriter

__all__ = ["rows_to_frame", "write_records_csv", "write_rows_atomic"]

logger = UnifiedLogger.get(__name__)


def write_rows_atomic(
    rows: Sequence[Sequence[str]],
    path: Path,
    *,
    config: WriterConfig | None = None,
) -> Path:
    """Write ``rows`` to ``path`` through a temporary file and an atomic replace."""

    cfg = config or WriterConfig()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as handle:
            RowWriter.from_writer_config(handle, cfg).write_all(rows)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.info(
        LogEvents.WRITER_FILE_WRITTEN,
        component="writer",
        path=str(path),
        rows=len(rows),
    )
    return path


def write_records_csv(
    records: Any,
    path: Path,
    *,
    config: RecordCSVConfig | None = None,
) -> Path:
    """Marshal ``records`` and write them to ``path`` atomically."""

    cfg = config or RecordCSVConfig()
    rows = StructuralEncoder(cfg.encoder).marshal(records)
    return write_rows_atomic(rows, path, config=cfg.writer)


def rows_to_frame(rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Build a ``string``-typed DataFrame from a header row and data rows.

    Duplicate column names (possible when embedded records share field
    names) are preserved.
    """

    if not rows:
        return pd.DataFrame(dtype="string")
    header, *data = rows
    return pd.DataFrame([list(row) for row in data], columns=list(header), dtype="string")
