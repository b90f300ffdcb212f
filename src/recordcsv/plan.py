"""Per-type field plans shared by header and row derivation.

Every declared field of a record type is turned into exactly one decision:
:class:`Included` (optionally carrying the plan of an embedded record) or
:class:`Excluded` with the reason it contributes no column.  Both walks
iterate :attr:`RecordPlan.included` only, so a field can never be present in
the header and missing from a row or vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Union

from recordcsv.fields import FieldDescriptor, describe_fields
from recordcsv.kinds import Kind
from recordcsv.logging import LogEvents, UnifiedLogger

__all__ = [
    "ExclusionReason",
    "Included",
    "Excluded",
    "Decision",
    "RecordPlan",
    "build_plan",
    "record_plan",
]

logger = UnifiedLogger.get(__name__)


class ExclusionReason(str, Enum):
    """Why a declared field contributes no column."""

    PRIVATE = "private"
    UNSUPPORTED = "unsupported"
    RECURSIVE = "recursive"


@dataclass(frozen=True, slots=True)
class Included:
    """A field that contributes one column, or the columns of ``nested``."""

    field: FieldDescriptor
    nested: RecordPlan | None = None

    @property
    def width(self) -> int:
        return self.nested.width if self.nested is not None else 1


@dataclass(frozen=True, slots=True)
class Excluded:
    field: FieldDescriptor
    reason: ExclusionReason


Decision = Union[Included, Excluded]


@dataclass(frozen=True, slots=True)
class RecordPlan:
    """Ordered inclusion decisions for every declared field of a record type."""

    record_type: type
    decisions: tuple[Decision, ...]
    width: int

    @property
    def included(self) -> tuple[Included, ...]:
        return tuple(item for item in self.decisions if isinstance(item, Included))

    @property
    def excluded(self) -> tuple[Excluded, ...]:
        return tuple(item for item in self.decisions if isinstance(item, Excluded))


def _decide(descriptor: FieldDescriptor, chain: tuple[type, ...]) -> Decision:
    if not descriptor.exported:
        return Excluded(descriptor, ExclusionReason.PRIVATE)
    shape = descriptor.shape
    if not shape.supported:
        return Excluded(descriptor, ExclusionReason.UNSUPPORTED)
    if shape.kind is Kind.RECORD:
        nested_type = shape.record_type
        if nested_type is None or nested_type in chain:
            return Excluded(descriptor, ExclusionReason.RECURSIVE)
        return Included(descriptor, build_plan(nested_type, chain))
    return Included(descriptor)


def build_plan(record_type: type, ancestry: tuple[type, ...] = ()) -> RecordPlan:
    """Plan ``record_type``; ``ancestry`` lists the enclosing record types.

    An embedded record field whose type is already in ``ancestry`` (or is
    ``record_type`` itself) is excluded so that column derivation terminates.
    """

    chain = (*ancestry, record_type)
    decisions = tuple(_decide(descriptor, chain) for descriptor in describe_fields(record_type))
    width = sum(item.width for item in decisions if isinstance(item, Included))
    return RecordPlan(record_type=record_type, decisions=decisions, width=width)


@lru_cache(maxsize=None)
def record_plan(record_type: type) -> RecordPlan:
    """Return the cached plan of a top-level record type."""

    plan = build_plan(record_type)
    log = logger.bind(component="encoder.plan", record_type=record_type.__qualname__)
    for item in plan.excluded:
        log.debug(
            LogEvents.ENCODER_FIELD_EXCLUDED,
            field=item.field.name,
            reason=item.reason.value,
            kind=item.field.shape.kind.value,
        )
    log.debug(LogEvents.ENCODER_PLAN_BUILT, width=plan.width, fields=len(plan.decisions))
    return plan
