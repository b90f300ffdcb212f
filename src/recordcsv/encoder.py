"""Structural encoder turning records into CSV header and data rows.

Column derivation walks a record *type*; row derivation walks a record
*instance*.  Both iterate the same cached :class:`~recordcsv.plan.RecordPlan`,
so every row is aligned with the header derived for its type:

>>> from dataclasses import dataclass, field
>>> @dataclass
... class Basic:
...     name: str = field(metadata={"csv": "Nom"})
...     books: list[str] = field(metadata={"csv": "Liste"})
>>> StructuralEncoder().marshal([Basic("Fyodor Dostoyevsky", ["Brothers Karamazov"])])
[['Nom', 'Liste'], ['Fyodor Dostoyevsky', '(Brothers Karamazov)']]
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from typing import Any

from recordcsv.config.models import EncoderConfig, clamp_numeric_base
from recordcsv.errors import (
    EmptyInputError,
    NilInputError,
    NotASliceOfStructsError,
    NotAStructError,
    UnsupportedLeafKindError,
)
from recordcsv.kinds import (
    LEAF_KINDS,
    Kind,
    TypeShape,
    is_record,
    is_record_type,
    kind_of_value,
)
from recordcsv.logging import LogEvents, UnifiedLogger
from recordcsv.plan import RecordPlan, record_plan
from recordcsv.stringify import render_leaf, stringify

__all__ = ["StructuralEncoder"]

logger = UnifiedLogger.get(__name__)

_ANY_SHAPE = TypeShape(Kind.ANY, Any)


def _runtime_shape(value: Any) -> TypeShape:
    """Shape of a value whose declared type is not specific enough."""
    kind = kind_of_value(value)
    if kind is Kind.RECORD:
        return TypeShape(Kind.RECORD, type(value), record_type=type(value))
    if kind is Kind.SEQUENCE:
        return TypeShape(
            Kind.SEQUENCE,
            type(value),
            items=(_ANY_SHAPE,),
            unordered=isinstance(value, AbstractSet),
        )
    if kind is Kind.MAPPING:
        return TypeShape(Kind.MAPPING, type(value), items=(_ANY_SHAPE, _ANY_SHAPE))
    if kind in LEAF_KINDS:
        return TypeShape(kind, type(value))
    raise UnsupportedLeafKindError(kind, method="render")


class StructuralEncoder:
    """Derive columns and rows from dataclasses, pydantic models and NamedTuples."""

    def __init__(self, config: EncoderConfig | None = None) -> None:
        self._config = config or EncoderConfig()
        self._column_names: list[str] = []

    @property
    def config(self) -> EncoderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_use_field_tags(self, flag: bool) -> None:
        """Toggle whether declared tags supply column names."""
        self._config = self._config.model_copy(update={"use_field_tags": bool(flag)})

    def set_tag_key(self, name: str) -> None:
        """Read tags from the ``name`` namespace; empty names are ignored."""
        if not name:
            return
        self._config = self._config.model_copy(update={"tag_key": name})

    def set_list_delimiters(self, open_: str, close: str) -> None:
        """Set the strings wrapped around collapsed collections."""
        self._config = self._config.model_copy(update={"list_delimiters": (open_, close)})

    def set_numeric_base(self, base: int) -> None:
        """Set the base of unsigned integer cells, clamped to ``[2, 36]``."""
        self._config = self._config.model_copy(
            update={"numeric_base": clamp_numeric_base(base)}
        )

    def column_names(self) -> list[str]:
        """Return a copy of the columns from the most recent header derivation."""
        return list(self._column_names)

    # ------------------------------------------------------------------
    # Header derivation
    # ------------------------------------------------------------------

    def derive_columns(self, record: Any) -> list[str]:
        """Return the column names of a record type or instance.

        Raises:
            NotAStructError: if ``record`` is neither a record type nor a
                record instance.
        """

        if is_record_type(record):
            record_type = record
        elif is_record(record):
            record_type = type(record)
        else:
            raise NotAStructError(kind_of_value(record))
        columns = self._columns_of(record_plan(record_type))
        self._column_names = list(columns)
        logger.debug(
            LogEvents.ENCODER_COLUMNS_DERIVED,
            component="encoder",
            record_type=record_type.__qualname__,
            columns=len(columns),
        )
        return columns

    def _columns_of(self, plan: RecordPlan) -> list[str]:
        use_tags = self._config.use_field_tags
        tag_key = self._config.tag_key
        names: list[str] = []
        for item in plan.included:
            if item.nested is not None:
                names.extend(self._columns_of(item.nested))
            else:
                names.append(item.field.column_name(use_tags=use_tags, tag_key=tag_key))
        return names

    # ------------------------------------------------------------------
    # Row derivation
    # ------------------------------------------------------------------

    def derive_row(self, record: Any) -> list[str]:
        """Return the cells of a record instance, aligned with its columns.

        Raises:
            NotAStructError: if ``record`` is not a record instance.
        """

        if not is_record(record):
            raise NotAStructError(kind_of_value(record))
        return self._row_of(record_plan(type(record)), record)

    def _row_of(self, plan: RecordPlan, instance: Any) -> list[str]:
        cells: list[str] = []
        for item in plan.included:
            value = getattr(instance, item.field.name, None)
            if item.nested is not None:
                if value is None:
                    cells.extend([""] * item.nested.width)
                else:
                    cells.extend(self._row_of(item.nested, value))
            else:
                cells.append(self._render(item.field.shape, value, top_level=True))
        return cells

    def _wrap(self, text: str) -> str:
        open_, close = self._config.list_delimiters
        return f"{open_}{text}{close}"

    def _render(self, shape: TypeShape, value: Any, *, top_level: bool) -> str:
        if value is None:
            return ""
        if shape.kind is Kind.ANY:
            shape = _runtime_shape(value)
        kind = shape.kind
        if kind is Kind.OPTIONAL:
            return self._render(shape.inner, value, top_level=top_level)
        if kind is Kind.SEQUENCE:
            return self._wrap(",".join(self._render_elements(shape, value)))
        if kind is Kind.MAPPING:
            joined = ",".join(self._render_pairs(shape, value))
            # A mapping owning its cell is left bare; nested ones are wrapped.
            return joined if top_level else self._wrap(joined)
        if kind is Kind.RECORD:
            if not is_record(value):
                return self._render(_runtime_shape(value), value, top_level=top_level)
            return self._wrap(",".join(self._row_of(record_plan(type(value)), value)))
        return render_leaf(value, shape, base=self._config.numeric_base)

    def _render_elements(self, shape: TypeShape, value: Any) -> list[str]:
        if shape.fixed:
            rendered = [
                self._render(
                    shape.items[index] if index < len(shape.items) else _ANY_SHAPE,
                    element,
                    top_level=False,
                )
                for index, element in enumerate(value)
            ]
        else:
            rendered = [self._render(shape.inner, element, top_level=False) for element in value]
        if shape.unordered or isinstance(value, AbstractSet):
            rendered.sort()
        return rendered

    def _render_pairs(self, shape: TypeShape, value: Mapping[Any, Any]) -> list[str]:
        pairs = sorted(
            (
                self._render(shape.key, key, top_level=False),
                self._render(shape.value, item, top_level=False),
            )
            for key, item in value.items()
        )
        return [f"{key}:{item}" for key, item in pairs]

    # ------------------------------------------------------------------
    # Bulk entry point and leaf helper
    # ------------------------------------------------------------------

    def marshal(self, records: Any) -> list[list[str]]:
        """Return the header row followed by one row per record.

        The header is derived from the first element; every element is
        assumed to share its type.

        Raises:
            NilInputError: if ``records`` is ``None``.
            NotASliceOfStructsError: if ``records`` is not a sequence, or its
                first element is not a record.
            EmptyInputError: if ``records`` is empty.
        """

        if records is None:
            raise NilInputError()
        if (
            isinstance(records, (str, bytes, bytearray, Mapping))
            or is_record(records)
            or not isinstance(records, Sequence)
        ):
            raise NotASliceOfStructsError(kind_of_value(records))
        if len(records) == 0:
            raise EmptyInputError()
        first = records[0]
        if not is_record(first):
            raise NotASliceOfStructsError(Kind.SEQUENCE, kind_of_value(first))

        rows = [self.derive_columns(first)]
        rows.extend(self.derive_row(record) for record in records)
        logger.debug(
            LogEvents.ENCODER_ROWS_MARSHALLED,
            component="encoder",
            record_type=type(first).__qualname__,
            rows=len(rows) - 1,
        )
        return rows

    def stringify(self, value: Any, kind: Kind | None = None) -> str:
        """Canonical string of a primitive leaf, using this encoder's numeric base."""
        return stringify(value, kind, base=self._config.numeric_base)
