"""Kind classification shared by header and row derivation.

Every annotation reachable from a record field is reduced to a
:class:`TypeShape`: a small tree of :class:`Kind` values describing the
primitive leaf, the record, or the collection/optional wrapper and its
element shapes.  Header derivation and row derivation both consult the same
shape, so the decision whether a field contributes a column is made in
exactly one place.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import ctypes
import dataclasses
import functools
import queue
import threading
import types
from collections.abc import (
    AsyncIterator,
    Awaitable,
    Callable,
    Collection,
    Iterable,
    Iterator,
    Mapping,
    Sequence,
)
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Final,
    ForwardRef,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

import numpy as np
from pydantic import BaseModel

__all__ = [
    "Kind",
    "LEAF_KINDS",
    "COLLAPSED_KINDS",
    "UNSUPPORTED_KINDS",
    "TypeShape",
    "classify",
    "is_record",
    "is_record_type",
    "is_supported_kind",
    "kind_of_value",
]


class Kind(str, Enum):
    """Structural classification of an annotation or runtime value."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OPTIONAL = "optional"
    FUNC = "func"
    CHANNEL = "channel"
    ANY = "any"
    POINTER = "pointer"
    INVALID = "invalid"


LEAF_KINDS: frozenset[Kind] = frozenset(
    {Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT, Kind.COMPLEX, Kind.STRING}
)
"""Primitive kinds rendered by the stringify rule."""

COLLAPSED_KINDS: frozenset[Kind] = frozenset({Kind.SEQUENCE, Kind.MAPPING, Kind.OPTIONAL})
"""Composite kinds that always occupy exactly one column."""

UNSUPPORTED_KINDS: frozenset[Kind] = frozenset(
    {Kind.FUNC, Kind.CHANNEL, Kind.ANY, Kind.POINTER, Kind.INVALID}
)
"""Kinds that are silently excluded wherever they appear."""

_NONE_TYPE = type(None)

_ABSTRACT_NUMPY_TYPES: frozenset[type] = frozenset(
    {
        np.generic,
        np.number,
        np.integer,
        np.signedinteger,
        np.unsignedinteger,
        np.inexact,
        np.floating,
        np.complexfloating,
    }
)

_FUNCTION_TYPES: tuple[type, ...] = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    functools.partial,
)

_CHANNEL_TYPES: tuple[type, ...] = (
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    asyncio.Future,
    concurrent.futures.Future,
    threading.Thread,
    threading.Event,
    threading.Condition,
    threading.Semaphore,
    threading.Barrier,
    type(threading.Lock()),
    type(threading.RLock()),
    Iterator,
    AsyncIterator,
    Awaitable,
)

_POINTER_TYPES: tuple[type, ...] = (
    memoryview,
    ctypes._Pointer,
    ctypes.c_void_p,
    ctypes.c_char_p,
    ctypes.c_wchar_p,
)


def is_supported_kind(kind: Kind) -> bool:
    """Return ``True`` unless ``kind`` is always excluded."""

    return kind not in UNSUPPORTED_KINDS


def is_record_type(tp: Any) -> bool:
    """Return ``True`` for dataclass, pydantic model and NamedTuple classes."""

    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    if issubclass(tp, BaseModel):
        return tp is not BaseModel
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def is_record(value: Any) -> bool:
    """Return ``True`` for record instances (not record classes)."""

    return not isinstance(value, type) and is_record_type(type(value))


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Classified annotation.

    ``items`` holds the element shape of a sequence (one entry, or one entry
    per position for fixed-size tuples), the key and value shapes of a
    mapping, or the wrapped shape of an optional.
    """

    kind: Kind
    annotation: Any = field(default=None, compare=False)
    items: tuple[TypeShape, ...] = ()
    scalar_type: type | None = None
    record_type: type | None = None
    fixed: bool = False
    unordered: bool = False

    @property
    def supported(self) -> bool:
        if self.kind in UNSUPPORTED_KINDS:
            return False
        if self.kind in COLLAPSED_KINDS:
            return bool(self.items) and all(item.supported for item in self.items)
        return True

    @property
    def inner(self) -> TypeShape:
        return self.items[0]

    @property
    def key(self) -> TypeShape:
        return self.items[0]

    @property
    def value(self) -> TypeShape:
        return self.items[1]


_ANY_SHAPE = TypeShape(Kind.ANY, Any)


def classify(annotation: Any) -> TypeShape:
    """Reduce a type annotation to its :class:`TypeShape`."""

    if annotation is None or annotation is _NONE_TYPE:
        return TypeShape(Kind.INVALID, annotation)
    if isinstance(annotation, (str, ForwardRef)):
        return TypeShape(Kind.INVALID, annotation)
    if annotation is Any or annotation is object or isinstance(annotation, TypeVar):
        return TypeShape(Kind.ANY, annotation)

    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return classify(supertype)

    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin is Annotated:
        return classify(args[0])
    if origin is ClassVar or origin is Final:
        return classify(args[0]) if args else TypeShape(Kind.ANY, annotation)
    if origin is Literal:
        return _classify_literal(annotation, args)
    if origin is Union or origin is types.UnionType:
        return _classify_union(annotation, args)

    base = origin if origin is not None else annotation
    if base is Callable:
        return TypeShape(Kind.FUNC, annotation)
    if not isinstance(base, type):
        return TypeShape(Kind.INVALID, annotation)

    if is_record_type(base):
        return TypeShape(Kind.RECORD, annotation, record_type=base)
    leaf = _leaf_shape(base, annotation)
    if leaf is not None:
        return leaf
    if issubclass(base, (bytes, bytearray)):
        octet = TypeShape(Kind.UINT, np.uint8, scalar_type=np.uint8)
        return TypeShape(Kind.SEQUENCE, annotation, items=(octet,))
    if issubclass(base, _FUNCTION_TYPES):
        return TypeShape(Kind.FUNC, annotation)
    if issubclass(base, _CHANNEL_TYPES):
        return TypeShape(Kind.CHANNEL, annotation)
    if issubclass(base, _POINTER_TYPES):
        return TypeShape(Kind.POINTER, annotation)
    if issubclass(base, Mapping):
        return _classify_mapping(annotation, args)
    if issubclass(base, tuple):
        return _classify_tuple(annotation, args)
    if issubclass(base, AbstractSet):
        return _classify_sequence(annotation, args, unordered=True)
    if issubclass(base, Sequence) or base is Collection:
        return _classify_sequence(annotation, args)
    if issubclass(base, Iterable):
        return TypeShape(Kind.CHANNEL, annotation)
    return TypeShape(Kind.INVALID, annotation)


def _concrete_numpy_type(base: type) -> type | None:
    if issubclass(base, np.generic) and base not in _ABSTRACT_NUMPY_TYPES:
        return base
    return None


def _leaf_shape(base: type, annotation: Any) -> TypeShape | None:
    # bool before int: bool is an int subclass.
    if issubclass(base, (bool, np.bool_)):
        return TypeShape(Kind.BOOL, annotation)
    if issubclass(base, np.unsignedinteger):
        return TypeShape(Kind.UINT, annotation, scalar_type=_concrete_numpy_type(base))
    if issubclass(base, (int, np.integer)):
        return TypeShape(Kind.INT, annotation)
    if issubclass(base, (float, np.floating)):
        return TypeShape(Kind.FLOAT, annotation, scalar_type=_concrete_numpy_type(base))
    if issubclass(base, (complex, np.complexfloating)):
        return TypeShape(Kind.COMPLEX, annotation, scalar_type=_concrete_numpy_type(base))
    if issubclass(base, str):
        return TypeShape(Kind.STRING, annotation)
    return None


def _classify_literal(annotation: Any, args: tuple[Any, ...]) -> TypeShape:
    kinds = {kind_of_value(arg) for arg in args}
    if len(kinds) == 1:
        (kind,) = kinds
        if kind in LEAF_KINDS:
            return TypeShape(kind, annotation)
    return TypeShape(Kind.ANY, annotation)


def _classify_union(annotation: Any, args: tuple[Any, ...]) -> TypeShape:
    present = tuple(arg for arg in args if arg is not _NONE_TYPE)
    if len(present) == 1 and len(present) < len(args):
        return TypeShape(Kind.OPTIONAL, annotation, items=(classify(present[0]),))
    return TypeShape(Kind.ANY, annotation)


def _classify_mapping(annotation: Any, args: tuple[Any, ...]) -> TypeShape:
    if len(args) == 2:
        items = (classify(args[0]), classify(args[1]))
    elif len(args) == 1:
        # Counter[K]: counts are ints.
        items = (classify(args[0]), TypeShape(Kind.INT, int))
    else:
        items = (_ANY_SHAPE, _ANY_SHAPE)
    return TypeShape(Kind.MAPPING, annotation, items=items)


def _classify_tuple(annotation: Any, args: tuple[Any, ...]) -> TypeShape:
    if not args:
        return TypeShape(Kind.SEQUENCE, annotation, items=(_ANY_SHAPE,))
    if len(args) == 2 and args[1] is Ellipsis:
        return TypeShape(Kind.SEQUENCE, annotation, items=(classify(args[0]),))
    return TypeShape(
        Kind.SEQUENCE,
        annotation,
        items=tuple(classify(arg) for arg in args),
        fixed=True,
    )


def _classify_sequence(
    annotation: Any, args: tuple[Any, ...], *, unordered: bool = False
) -> TypeShape:
    element = classify(args[0]) if args else _ANY_SHAPE
    return TypeShape(Kind.SEQUENCE, annotation, items=(element,), unordered=unordered)


def kind_of_value(value: Any) -> Kind:
    """Classify a runtime value (or a type object) into a :class:`Kind`."""

    if value is None:
        return Kind.INVALID
    if isinstance(value, type) or get_origin(value) is not None:
        return classify(value).kind
    if is_record(value):
        return Kind.RECORD
    if isinstance(value, (bool, np.bool_)):
        return Kind.BOOL
    if isinstance(value, np.unsignedinteger):
        return Kind.UINT
    if isinstance(value, (int, np.integer)):
        return Kind.INT
    if isinstance(value, (float, np.floating)):
        return Kind.FLOAT
    if isinstance(value, (complex, np.complexfloating)):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.SEQUENCE
    if isinstance(value, _POINTER_TYPES):
        return Kind.POINTER
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, (Sequence, AbstractSet)):
        return Kind.SEQUENCE
    if isinstance(value, _CHANNEL_TYPES):
        return Kind.CHANNEL
    if callable(value):
        return Kind.FUNC
    return Kind.INVALID
