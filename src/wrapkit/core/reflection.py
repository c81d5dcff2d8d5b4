"""Field enumeration for composite values.

Given a composite value, field_levels() returns its (name, value) pairs
grouped by the class that declares them, most derived class first. This
is the only place wrapkit looks inside objects; the wrapper never reads
attributes directly.

Supported composites:
- dataclass instances
- pydantic models
- named tuples
- instances with __slots__ (per declaring class)
- plain instances with a __dict__ (attributed to the most derived class)
- Enum members (no fields) and Variant cases
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from pydantic import BaseModel

from wrapkit.core.protocols import Variant

_UNSET = object()


@dataclass
class FieldLevel:
    """Fields declared by one class in an inheritance chain.

    Attributes:
        owner: The declaring class.
        fields: (name, value) pairs in declaration order.
    """

    owner: type
    fields: List[Tuple[str, Any]] = field(default_factory=list)


def is_named_tuple(value: Any) -> bool:
    """Check whether a value is a named tuple instance."""
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_composite(value: Any) -> bool:
    """Check whether a value is a composite with (possibly zero) fields.

    Builtin scalars and containers are never composites.
    """
    if isinstance(value, (Enum, Variant)):
        return True
    if is_named_tuple(value):
        return True
    if type(value).__module__ == "builtins":
        return False
    if dataclasses.is_dataclass(value) or isinstance(value, BaseModel):
        return True
    if hasattr(value, "__dict__"):
        return True
    return any(True for _ in _iter_slot_classes(type(value)))


def field_levels(obj: Any) -> List[FieldLevel]:
    """Enumerate the fields of a composite, most derived class first.

    Args:
        obj: A composite value (see is_composite()).

    Returns:
        One FieldLevel per class in the inheritance chain that declares
        fields. Attributes set on the instance but not declared by any
        class belong to the most derived level.
    """
    cls = type(obj)

    if isinstance(obj, Variant):
        fields = [(obj.case, obj.values[0])] if len(obj.values) == 1 else []
        return [FieldLevel(cls, fields)]

    if isinstance(obj, Enum):
        return [FieldLevel(cls, [])]

    if is_named_tuple(obj):
        return [FieldLevel(cls, list(zip(cls._fields, obj)))]

    levels: List[FieldLevel] = []
    declared: Set[str] = set()

    for klass in cls.__mro__:
        if klass is object or klass.__module__ == "builtins":
            continue

        names = _declared_names(klass)
        fields = []
        for name in names:
            if name in declared:
                continue
            declared.add(name)
            value = getattr(obj, _attribute_name(klass, name), _UNSET)
            if value is not _UNSET:
                fields.append((name, value))

        levels.append(FieldLevel(klass, fields))

    instance_dict: Optional[Dict[str, Any]] = getattr(obj, "__dict__", None)
    if instance_dict:
        extra = [(k, v) for k, v in instance_dict.items() if k not in declared]
        if extra:
            if not levels:
                levels.append(FieldLevel(cls))
            levels[0].fields.extend(extra)

    return levels


def _declared_names(klass: type) -> List[str]:
    """Names of the fields a class declares itself (not inherited)."""
    names: List[str] = []

    if dataclasses.is_dataclass(klass):
        inherited = set()
        for base in klass.__bases__:
            if dataclasses.is_dataclass(base):
                inherited.update(f.name for f in dataclasses.fields(base))
        names.extend(
            f.name for f in dataclasses.fields(klass) if f.name not in inherited
        )

    elif issubclass(klass, BaseModel) and klass is not BaseModel:
        inherited = set()
        for base in klass.__bases__:
            if issubclass(base, BaseModel):
                inherited.update(base.model_fields)
        names.extend(n for n in klass.model_fields if n not in inherited)

    for slot in _own_slots(klass):
        if slot not in names:
            names.append(slot)

    return names


def _own_slots(klass: type) -> List[str]:
    """Non-dunder slot names declared directly on a class."""
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [s for s in slots if not (s.startswith("__") and s.endswith("__"))]


def _iter_slot_classes(cls: type) -> Iterator[type]:
    for klass in cls.__mro__:
        if klass is not object and _own_slots(klass):
            yield klass


def _attribute_name(klass: type, name: str) -> str:
    """Apply private name mangling for __private slot names."""
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


__all__ = [
    "FieldLevel",
    "is_named_tuple",
    "is_composite",
    "field_levels",
]
