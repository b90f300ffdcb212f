"""Domain exceptions raised by the structural encoder."""

from __future__ import annotations

from typing import Any

from recordcsv.kinds import Kind

__all__ = [
    "RecordCSVError",
    "NotAStructError",
    "NotASliceOfStructsError",
    "NilInputError",
    "EmptyInputError",
    "UnsupportedLeafKindError",
]

_PREFIX = "recordcsv"


class RecordCSVError(Exception):
    """Base class for recordcsv domain errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = dict(context)


class NotAStructError(RecordCSVError):
    """Raised when a record was required but another kind was received."""

    def __init__(self, kind: Kind, *, message: str | None = None) -> None:
        detail = message or "a value of type record is required"
        super().__init__(f"{_PREFIX}: {detail}: type was {kind.value}", kind=kind.value)
        self.kind = kind


class NotASliceOfStructsError(RecordCSVError):
    """Raised when ``marshal`` does not receive a sequence of records."""

    def __init__(self, kind: Kind, element_kind: Kind | None = None) -> None:
        if kind is not Kind.SEQUENCE or element_kind is None:
            message = f"{_PREFIX}: a sequence is required: type was {kind.value}"
        else:
            message = (
                f"{_PREFIX}: a sequence of records is required: "
                f"element type was {element_kind.value}"
            )
        super().__init__(
            message,
            kind=kind.value,
            element_kind=element_kind.value if element_kind is not None else None,
        )
        self.kind = kind
        self.element_kind = element_kind


class NilInputError(RecordCSVError):
    """Raised when the sequence of records is ``None``."""

    def __init__(self) -> None:
        super().__init__(f"{_PREFIX}: the sequence of records was None")


class EmptyInputError(RecordCSVError):
    """Raised when the sequence of records is empty."""

    def __init__(self) -> None:
        super().__init__(f"{_PREFIX}: the sequence of records was empty")


class UnsupportedLeafKindError(RecordCSVError):
    """Raised by the leaf formatter when asked to stringify a non-leaf kind."""

    def __init__(self, kind: Kind, *, method: str = "stringify") -> None:
        super().__init__(
            f"{_PREFIX}:{method}: unsupported type: {kind.value}",
            kind=kind.value,
            method=method,
        )
        self.kind = kind
        self.method = method
