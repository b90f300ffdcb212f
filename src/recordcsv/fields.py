"""Field introspection for dataclasses, pydantic models and NamedTuples."""

from __future__ import annotations

import dataclasses
import inspect
import sys
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from recordcsv.kinds import TypeShape, classify

__all__ = ["FieldDescriptor", "describe_fields"]


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One declared field of a record type."""

    name: str
    annotation: Any
    tags: Mapping[str, str]
    shape: TypeShape

    @property
    def exported(self) -> bool:
        """Underscore-prefixed fields are private to their defining module."""
        return not self.name.startswith("_")

    def tag(self, key: str) -> str | None:
        """Return the non-empty tag value under ``key``, if any."""
        value = self.tags.get(key)
        return value or None

    def column_name(self, *, use_tags: bool, tag_key: str) -> str:
        if use_tags:
            tagged = self.tag(tag_key)
            if tagged is not None:
                return tagged
        return self.name


def _string_tags(source: Mapping[Any, Any] | None) -> dict[str, str]:
    if not source:
        return {}
    return {str(key): value for key, value in source.items() if isinstance(value, str)}


_RESOLUTION_ERRORS = (NameError, TypeError, SyntaxError, AttributeError)


def _local_namespace(record_type: type) -> dict[str, Any]:
    """Names visible to a record type defined inside a function.

    Postponed annotations of such a type refer to names that only exist in
    the enclosing frames, so the active call stack is searched innermost
    first.
    """

    namespace: dict[str, Any] = {}
    if "<locals>" in record_type.__qualname__:
        frame = sys._getframe(1)
        while frame is not None:
            for name, value in frame.f_locals.items():
                namespace.setdefault(name, value)
            frame = frame.f_back
    namespace.setdefault(record_type.__name__, record_type)
    return namespace


def _declared_annotations(record_type: type) -> dict[str, tuple[Any, type]]:
    """Raw annotation of every field together with the class declaring it."""

    declared: dict[str, tuple[Any, type]] = {}
    for owner in reversed(record_type.__mro__):
        for name, annotation in inspect.get_annotations(owner).items():
            declared[name] = (annotation, owner)
    return declared


def _resolve_one(name: str, annotation: Any, owner: type, localns: dict[str, Any]) -> Any:
    module = sys.modules.get(owner.__module__)
    globalns = vars(module) if module is not None else {}
    holder = type(
        owner.__name__,
        (),
        {"__annotations__": {name: annotation}, "__module__": owner.__module__},
    )
    return typing.get_type_hints(
        holder, globalns=globalns, localns=localns, include_extras=True
    )[name]


def _resolve_each(record_type: type, localns: dict[str, Any]) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    for name, (annotation, owner) in _declared_annotations(record_type).items():
        try:
            hints[name] = _resolve_one(name, annotation, owner, localns)
        except _RESOLUTION_ERRORS:
            # Left as written; an unresolved annotation classifies as invalid.
            hints[name] = annotation
    return hints


def _resolved_hints(record_type: type) -> dict[str, Any]:
    """Resolve field annotations, one field at a time if any of them fails."""

    localns = _local_namespace(record_type)
    try:
        return typing.get_type_hints(record_type, localns=localns, include_extras=True)
    except _RESOLUTION_ERRORS:
        return _resolve_each(record_type, localns)


def _dataclass_fields(record_type: type) -> list[FieldDescriptor]:
    hints = _resolved_hints(record_type)
    described = []
    for item in dataclasses.fields(record_type):
        annotation = hints.get(item.name, item.type)
        described.append(
            FieldDescriptor(
                name=item.name,
                annotation=annotation,
                tags=_string_tags(item.metadata),
                shape=classify(annotation),
            )
        )
    return described


def _model_fields(record_type: type[BaseModel]) -> list[FieldDescriptor]:
    described = []
    for name, info in record_type.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, Mapping) else None
        tags = _string_tags(extra)
        if info.alias and "json" not in tags:
            tags["json"] = info.alias
        described.append(
            FieldDescriptor(
                name=name,
                annotation=info.annotation,
                tags=tags,
                shape=classify(info.annotation),
            )
        )
    return described


def _namedtuple_fields(record_type: type) -> list[FieldDescriptor]:
    hints = _resolved_hints(record_type)
    described = []
    for name in record_type._fields:  # type: ignore[attr-defined]
        annotation = hints.get(name, Any)
        described.append(
            FieldDescriptor(name=name, annotation=annotation, tags={}, shape=classify(annotation))
        )
    return described


def describe_fields(record_type: type) -> tuple[FieldDescriptor, ...]:
    """Return the declared fields of ``record_type`` in declaration order.

    Private fields are included; callers decide whether to skip them.
    """

    if dataclasses.is_dataclass(record_type):
        return tuple(_dataclass_fields(record_type))
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return tuple(_model_fields(record_type))
    if isinstance(record_type, type) and issubclass(record_type, tuple):
        return tuple(_namedtuple_fields(record_type))
    raise TypeError(f"{record_type!r} is not a record type")
