"""
Member binding: which members of a candidate instance are legal operands.

A member is eligible when it is writable and its declared type is a
primitive scalar (bool, int, float, numpy scalars of those kinds) or str.
Everything else (objects, collections, dates, enums, Decimal) is invisible
to the evaluator, so referencing it is an unknown-identifier error.

Type metadata is discovered once per class and cached; values are read
from the instance on every call.

Sources, in order (later sources override earlier ones by name):
- dataclass fields (read-only when the dataclass is frozen)
- annotated class attributes (read-only when Final or a NamedTuple field)
- properties (read-only without a setter; type from the getter's return
  annotation)
- unannotated public instance attributes (type from the current value)
"""

from __future__ import annotations

import dataclasses
import enum
import inspect
import sys
import types
import typing
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Iterable, Optional

from ..types import MemberBinding, MemberDescriptor, ValueType

# A NULL with no declared type binds as text, like an untyped column
UNTYPED_NULL_TYPE = str


def _is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def unwrap_optional(declared: Any) -> tuple[Any, bool]:
    """
    Strip Optional[...] from a declared type.

    Returns:
        (inner type, nullable). Unions of several non-None types are
        returned unchanged and are never eligible.
    """
    origin = typing.get_origin(declared)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(declared)
        inner = [a for a in args if a is not type(None)]
        nullable = len(inner) < len(args)
        if len(inner) == 1:
            return inner[0], nullable
        return declared, nullable
    return declared, False


def _module_namespace(klass: type) -> dict:
    module = sys.modules.get(klass.__module__)
    return vars(module) if module is not None else {}


def _resolve_annotation(annotation: Any, globalns: dict, localns: Optional[dict]) -> Any:
    """Evaluate one postponed annotation; None when a name in it is unknown."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)
    except (NameError, AttributeError, TypeError, SyntaxError):
        return None


def _type_hints(obj: Any) -> dict[str, Any]:
    """
    get_type_hints, resolved name by name when the whole set fails.

    An annotation naming something only imported under TYPE_CHECKING drops
    that one name; the other annotations still resolve.
    """
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError, AttributeError):
        pass

    if isinstance(obj, type):
        owners = [(klass, _module_namespace(klass), dict(vars(klass))) for klass in reversed(obj.__mro__)]
    else:
        owners = [(obj, getattr(obj, "__globals__", {}), None)]

    hints: dict[str, Any] = {}
    for owner, globalns, localns in owners:
        for name, annotation in inspect.get_annotations(owner).items():
            hints.pop(name, None)
            resolved = _resolve_annotation(annotation, globalns, localns)
            if resolved is not None:
                hints[name] = resolved
    return hints


def _descriptor_from_annotation(name: str, declared: Any, read_only: bool) -> Optional[MemberDescriptor]:
    origin = typing.get_origin(declared)
    if origin is typing.ClassVar:
        return None
    if origin is typing.Final:
        args = typing.get_args(declared)
        declared = args[0] if args else Any
        read_only = True
    elif declared is typing.Final:
        declared, read_only = Any, True
    inner, nullable = unwrap_optional(declared)
    return MemberDescriptor(name=name, declared_type=inner, read_only=read_only, nullable=nullable)


@lru_cache(maxsize=None)
def describe_members(cls: type) -> tuple[MemberDescriptor, ...]:
    """
    Describe the public members of a type.

    Cached per type; the descriptors carry no values and can be reused for
    every instance of cls.

    Args:
        cls: Class to inspect

    Returns:
        Tuple of MemberDescriptor in discovery order
    """
    hints = _type_hints(cls)
    found: dict[str, MemberDescriptor] = {}

    if dataclasses.is_dataclass(cls):
        frozen = cls.__dataclass_params__.frozen
        for f in dataclasses.fields(cls):
            if not _is_public(f.name):
                continue
            descriptor = _descriptor_from_annotation(f.name, hints.get(f.name, f.type), frozen)
            if descriptor is not None:
                found[f.name] = descriptor

    named_tuple = issubclass(cls, tuple) and hasattr(cls, "_fields")
    for name, declared in hints.items():
        if name in found or not _is_public(name):
            continue
        descriptor = _descriptor_from_annotation(name, declared, named_tuple)
        if descriptor is not None:
            found[name] = descriptor

    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if not isinstance(attr, property) or not _is_public(name):
                continue
            declared = _type_hints(attr.fget).get("return", Any) if attr.fget else Any
            inner, nullable = unwrap_optional(declared)
            found[name] = MemberDescriptor(
                name=name,
                declared_type=inner,
                read_only=attr.fset is None,
                nullable=nullable,
            )

    return tuple(found.values())


def describe_instance(instance: Any) -> tuple[MemberDescriptor, ...]:
    """
    Describe the members of one instance.

    Class-level descriptors plus public instance attributes that the class
    does not declare, typed by their current value. Mapping candidates are
    described by their string keys.
    """
    if isinstance(instance, Mapping):
        return tuple(
            _describe_value(name, value)
            for name, value in instance.items()
            if isinstance(name, str) and _is_public(name)
        )

    declared = describe_members(type(instance))
    known = {d.name for d in declared}
    extra = [
        _describe_value(name, value)
        for name, value in getattr(instance, "__dict__", {}).items()
        if _is_public(name) and name not in known and not callable(value)
    ]
    return declared + tuple(extra)


def _describe_value(name: str, value: Any) -> MemberDescriptor:
    if value is None:
        return MemberDescriptor(name=name, declared_type=UNTYPED_NULL_TYPE, nullable=True)
    return MemberDescriptor(name=name, declared_type=type(value))


def is_eligible(descriptor: MemberDescriptor) -> bool:
    """
    Selection predicate: writable AND primitive or string type.

    Enum types are excluded even when they subclass int or str.
    """
    if descriptor.read_only:
        return False
    declared = descriptor.declared_type
    if isinstance(declared, type) and issubclass(declared, enum.Enum):
        return False
    return ValueType.from_type(declared) != ValueType.UNKNOWN


def _read(instance: Any, name: str) -> Any:
    if isinstance(instance, Mapping):
        return instance.get(name)
    # Declared but never assigned reads as NULL
    return getattr(instance, name, None)


def eligible_bindings(
    instance: Any,
    members: Optional[Iterable[MemberDescriptor]] = None,
) -> tuple[MemberBinding, ...]:
    """
    Bind the current values of an instance's eligible members.

    Re-reads every value on each call; nothing is cached.

    Args:
        instance: Candidate object (or a mapping of member values)
        members: Explicit descriptor set; replaces reflective discovery

    Returns:
        Tuple of MemberBinding, one per eligible member
    """
    descriptors = tuple(members) if members is not None else describe_instance(instance)
    return tuple(
        MemberBinding(name=d.name, declared_type=d.declared_type, value=_read(instance, d.name))
        for d in descriptors
        if is_eligible(d)
    )


__all__ = [
    "UNTYPED_NULL_TYPE",
    "unwrap_optional",
    "describe_members",
    "describe_instance",
    "is_eligible",
    "eligible_bindings",
]
