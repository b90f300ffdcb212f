"""Canonical string forms of primitive leaf values.

Floats use the shortest round-trip mantissa in uppercase scientific
notation (``3.242E+01``); complex numbers use the shortest ``%g`` form of
each part (``(-64+12i)``); unsigned integers honour the configured base.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

import numpy as np

from recordcsv.errors import UnsupportedLeafKindError
from recordcsv.kinds import LEAF_KINDS, Kind, TypeShape, kind_of_value

__all__ = [
    "format_complex",
    "format_float",
    "format_unsigned",
    "render_leaf",
    "stringify",
]

# Runtime kinds that may be formatted by a wider declared kind.
_WIDENINGS: dict[Kind, frozenset[Kind]] = {
    Kind.INT: frozenset({Kind.UINT, Kind.FLOAT, Kind.COMPLEX}),
    Kind.UINT: frozenset({Kind.INT, Kind.FLOAT, Kind.COMPLEX}),
    Kind.FLOAT: frozenset({Kind.COMPLEX}),
}

# Shortest %g switches to exponent form outside [1e-4, 1e6).
_G_EXPONENT_LOW = -4
_G_EXPONENT_HIGH = 6


def _float_type(value: Any, scalar_type: type | None) -> type:
    if isinstance(value, np.floating):
        return type(value)
    if scalar_type is not None and issubclass(scalar_type, np.floating):
        return scalar_type
    return np.float64


def format_float(value: Any, scalar_type: type | None = None) -> str:
    """Render ``value`` as ``d.dddE±XX`` using the shortest round-trip mantissa."""

    number = _float_type(value, scalar_type)(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    text = np.format_float_scientific(number, unique=True, trim="-", exp_digits=2)
    return text.upper()


def _format_g(number: np.floating, *, plus: bool = False) -> str:
    if math.isnan(number):
        return "+NaN" if plus else "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    scientific = np.format_float_scientific(number, unique=True, trim="-", exp_digits=2)
    exponent = int(scientific.rsplit("e", 1)[1])
    if exponent < _G_EXPONENT_LOW or exponent >= _G_EXPONENT_HIGH:
        text = scientific
    else:
        text = np.format_float_positional(number, unique=True, trim="-")
    if plus and not text.startswith("-"):
        return f"+{text}"
    return text


def format_complex(value: Any, scalar_type: type | None = None) -> str:
    """Render ``value`` as ``(<real><signed imag>i)``."""

    if isinstance(value, np.complexfloating):
        part_type: type = np.float32 if isinstance(value, np.complex64) else np.float64
    elif scalar_type is np.complex64:
        part_type = np.float32
    else:
        part_type = np.float64
    number = complex(value)
    real = _format_g(part_type(number.real))
    imag = _format_g(part_type(number.imag), plus=True)
    return f"({real}{imag}i)"


def format_unsigned(value: Any, base: int = 10) -> str:
    """Render a non-negative integer in ``base`` with lowercase digits."""

    number = int(value)
    if number < 0:
        raise ValueError(f"negative value {number} cannot be rendered as unsigned")
    return np.base_repr(number, base).lower()


def _format(value: Any, kind: Kind, *, base: int, scalar_type: type | None) -> str:
    if kind is Kind.BOOL:
        return "true" if value else "false"
    if kind is Kind.INT:
        return str(int(value))
    if kind is Kind.UINT:
        return format_unsigned(value, base)
    if kind is Kind.FLOAT:
        return format_float(value, scalar_type)
    if kind is Kind.COMPLEX:
        return format_complex(value, scalar_type)
    if kind is Kind.STRING:
        return str(value)
    raise UnsupportedLeafKindError(kind)


def _unwrap_enum(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def render_leaf(value: Any, shape: TypeShape, *, base: int = 10) -> str:
    """Render a leaf value declared with ``shape``.

    The declared kind wins when the runtime value widens into it (an ``int``
    stored in a ``float`` field renders as a float); otherwise the runtime
    kind decides.
    """

    value = _unwrap_enum(value)
    runtime = kind_of_value(value)
    declared = shape.kind
    if declared in LEAF_KINDS and (
        declared is runtime or declared in _WIDENINGS.get(runtime, frozenset())
    ):
        return _format(value, declared, base=base, scalar_type=shape.scalar_type)
    if runtime not in LEAF_KINDS:
        raise UnsupportedLeafKindError(runtime)
    return _format(value, runtime, base=base, scalar_type=None)


def stringify(value: Any, kind: Kind | None = None, *, base: int = 10) -> str:
    """Return the canonical string form of a primitive leaf value.

    Raises:
        UnsupportedLeafKindError: if ``kind`` (or the runtime kind of
            ``value`` when ``kind`` is omitted) is not a primitive leaf.
    """

    value = _unwrap_enum(value)
    effective = kind if kind is not None else kind_of_value(value)
    if effective not in LEAF_KINDS:
        raise UnsupportedLeafKindError(effective)
    return _format(value, effective, base=base, scalar_type=None)
