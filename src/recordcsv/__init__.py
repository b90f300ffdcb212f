"""Encode dataclasses, pydantic models and NamedTuples as CSV rows."""

from recordcsv.config import EncoderConfig, RecordCSVConfig, WriterConfig, load_config
from recordcsv.encoder import StructuralEncoder
from recordcsv.errors import (
    EmptyInputError,
    NilInputError,
    NotASliceOfStructsError,
    NotAStructError,
    RecordCSVError,
    UnsupportedLeafKindError,
)
from recordcsv.io import rows_to_frame, write_records_csv, write_rows_atomic
from recordcsv.kinds import Kind, classify
from recordcsv.stringify import stringify
from recordcsv.writer import RowWriter

__all__ = [
    "EmptyInputError",
    "EncoderConfig",
    "Kind",
    "NilInputError",
    "NotASliceOfStructsError",
    "NotAStructError",
    "RecordCSVConfig",
    "RecordCSVError",
    "RowWriter",
    "StructuralEncoder",
    "UnsupportedLeafKindError",
    "WriterConfig",
    "classify",
    "load_config",
    "rows_to_frame",
    "stringify",
    "write_records_csv",
    "write_rows_atomic",
]

__version__ = "0.1.0"
