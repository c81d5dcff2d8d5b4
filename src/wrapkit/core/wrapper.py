"""The wrapping engine.

A Wrapper converts arbitrary values into JSON-compatible structures:
dictionaries, lists, strings, numbers and booleans. Each value goes
through a single classification step (classify()) that decides its
Shape; the Shape then selects the conversion.

Conversion order for a value:
1. WrapCustomizable with an overridden wrap(): the hook's result is used
2. WrappableDate or a registered adapter: formatted / adapted
3. None: absent, the field or element is left out
4. Primitive (str, int, float, bool): passed through
5. Enum member: its name (WrappableEnum members use their raw value)
6. Variant: its case name, or {case: payload}
7. Callable: absent
8. Mapping: dict with derived string keys
9. Sequence or set: list
10. Composite: dict built field by field, ancestors first

Example:
    >>> from dataclasses import dataclass
    >>> from wrapkit import Wrapper
    >>>
    >>> @dataclass
    ... class Point:
    ...     x: int
    ...     y: int
    >>>
    >>> Wrapper().wrap(Point(1, 2))
    {'x': 1, 'y': 2}
"""

import functools
import inspect
import logging
from collections import deque
from collections.abc import Mapping, Set, ValuesView
from collections.abc import Sequence as SequenceABC
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Set as SetType

from wrapkit.core.adapters import AdapterRegistry, default_registry
from wrapkit.core.dates import DateFormatter, DateLike
from wrapkit.core.errors import CyclicStructure, InvalidTopLevelObject, WrappingFailed
from wrapkit.core.hooks import (
    as_customizable,
    as_wrappable_date,
    invoke_wrap,
    invoke_wrap_field,
    overrides_hook,
    resolve_key,
    resolve_key_style,
    wrapped_key_for,
)
from wrapkit.core.keys import KeyStyle, get_default_key_style
from wrapkit.core.protocols import OMIT, Variant
from wrapkit.core.reflection import FieldLevel, field_levels, is_composite, is_named_tuple
from wrapkit.observability import ObservabilityHub, TraceLevel
from wrapkit.observability.records import FieldSkipRecord

logger = logging.getLogger(__name__)

WrappedDict = Dict[str, Any]

# Internal marker for "no value": the caller omits the key or element.
_ABSENT = object()

_PRIMITIVE_TYPES = (str, int, float, bool)

# The Wrapper currently converting, so Wrappers created inside hooks
# inherit its settings.
_current_wrapper: ContextVar[Optional["Wrapper"]] = ContextVar(
    "wrapkit_current_wrapper", default=None
)

# ids of the values on the current descent path, shared by every Wrapper
# taking part in one top-level call.
_descent_path: ContextVar[Optional[SetType[int]]] = ContextVar(
    "wrapkit_descent_path", default=None
)


def current_wrapper() -> Optional["Wrapper"]:
    """Return the Wrapper whose conversion is in progress, if any."""
    return _current_wrapper.get()


class Shape(Enum):
    """Runtime shape of a value, decided once per recursion step."""

    ABSENT = auto()
    CUSTOMIZED = auto()
    DATE = auto()
    ADAPTED = auto()
    PRIMITIVE = auto()
    ENUM_CASE = auto()
    VARIANT = auto()
    CALLABLE = auto()
    MAPPING = auto()
    SEQUENCE = auto()
    EMPTY_COMPOSITE = auto()
    COMPOSITE = auto()
    OTHER = auto()


class Classification(NamedTuple):
    """Result of classify(): the shape plus what the conversion needs.

    detail holds the adapter for ADAPTED and the field levels for
    COMPOSITE and EMPTY_COMPOSITE; it is None otherwise.
    """

    shape: Shape
    detail: Any = None


def is_callable_value(value: Any) -> bool:
    """Check whether a value is a function-like object.

    Instances of classes defining __call__ are not function-like; they
    are wrapped as composites.
    """
    return inspect.isroutine(value) or isinstance(value, (functools.partial, type))


class Wrapper:
    """Converts objects into JSON-compatible dictionaries.

    Use this class from custom wrap() implementations to build on the
    default behavior. From top-level code, use wrapkit.wrap() instead.

    A Wrapper created while another one is converting (inside a hook)
    inherits the date formatter, key style, adapters and cycle setting it
    was not given, and shares the other's cycle tracking.

    Args:
        context: Arbitrary object passed to every customization hook.
        date_formatter: Formatter for date values. If None, a formatter
            using DEFAULT_DATE_FORMAT is created on the first date.
        key_style: Key style for composites that declare none. Defaults
            to the process-wide default key style.
        adapters: Adapter registry. Defaults to the process-wide registry.
        detect_cycles: Raise CyclicStructure when a value contains itself.
            Defaults to True.
        trace: Emit field-level trace records when VERBOSE tracing is on.
    """

    def __init__(
        self,
        context: Any = None,
        date_formatter: Optional[DateFormatter] = None,
        key_style: Optional[KeyStyle] = None,
        adapters: Optional[AdapterRegistry] = None,
        detect_cycles: Optional[bool] = None,
        trace: bool = True,
    ):
        parent = current_wrapper()
        if parent is not None:
            if date_formatter is None:
                date_formatter = parent._date_formatter
            if key_style is None:
                key_style = parent._key_style
            if adapters is None:
                adapters = parent._adapters
            if detect_cycles is None:
                detect_cycles = parent._detect_cycles

        self._context = context
        self._date_formatter = date_formatter
        self._key_style = key_style
        self._adapters = adapters if adapters is not None else default_registry()
        self._detect_cycles = detect_cycles if detect_cycles is not None else True
        self._trace = trace

    @property
    def context(self) -> Any:
        """The context passed to customization hooks."""
        return self._context

    @property
    def date_formatter(self) -> Optional[DateFormatter]:
        """The date formatter, None until a default one is needed."""
        return self._date_formatter

    @property
    def key_style(self) -> KeyStyle:
        """Key style for composites that declare none."""
        return self._key_style or get_default_key_style()

    # =========================================================================
    # Public API
    # =========================================================================

    def wrap(self, obj: Any) -> WrappedDict:
        """Wrap an object using the default behavior.

        The object's own wrap() hook is not called, which makes this safe
        to use from inside that hook. Nested values still get their hooks.

        Raises:
            InvalidTopLevelObject: If obj cannot become a dictionary.
            WrappingFailed: If a nested hook fails.
        """
        return self.wrap_object(obj, enable_customized_wrapping=False)

    def wrap_object(self, obj: Any, enable_customized_wrapping: bool = True) -> WrappedDict:
        """Wrap a top-level object into a dictionary.

        Args:
            obj: Composite or mapping to wrap.
            enable_customized_wrapping: Whether obj's own wrap() hook may
                replace the default behavior.

        Returns:
            The wrapped dictionary.

        Raises:
            InvalidTopLevelObject: If obj cannot become a dictionary.
            WrappingFailed: If a hook fails.
            CyclicStructure: If obj contains itself.
        """
        with self._activate():
            return self._wrap_root(obj, enable_customized_wrapping)

    def wrap_value(self, value: Any, field_name: Optional[str] = None) -> Any:
        """Wrap any value, top-level or nested.

        Args:
            value: Value to wrap.
            field_name: Name of the field or key holding the value.

        Returns:
            The wrapped value, or None if the value is absent (None or a
            callable).
        """
        with self._activate():
            wrapped = self._wrap_value(value, field_name)
        return None if wrapped is _ABSENT else wrapped

    def format_date(self, value: DateLike) -> str:
        """Format a date, creating the default formatter if needed."""
        if self._date_formatter is None:
            self._date_formatter = DateFormatter()
        return self._date_formatter.format(value)

    def _wrap_root(self, obj: Any, enable_customized_wrapping: bool) -> WrappedDict:
        if enable_customized_wrapping:
            customizable = as_customizable(obj)
            if customizable is not None and overrides_hook(customizable, "wrap"):
                wrapped = invoke_wrap(customizable, self._context, self._date_formatter)
                if not isinstance(wrapped, dict):
                    raise InvalidTopLevelObject(obj)
                return wrapped

        classification = self.classify(obj)
        shape = classification.shape

        if shape == Shape.MAPPING:
            return self._wrap_mapping(obj)
        if shape in (Shape.COMPOSITE, Shape.EMPTY_COMPOSITE):
            return self._wrap_composite(obj, classification.detail)
        if shape in (Shape.ENUM_CASE, Shape.VARIANT):
            # Enum cases have no fields of their own; at the root a case
            # without payload becomes an empty dictionary.
            return self._wrap_composite(obj, self._levels_for_case(obj))
        if shape == Shape.CUSTOMIZED and not enable_customized_wrapping:
            return self._wrap_composite(obj, field_levels(obj))
        if shape == Shape.ADAPTED:
            wrapped = self._wrap_value(obj, None)
            if isinstance(wrapped, dict):
                return wrapped

        raise InvalidTopLevelObject(obj)

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(self, value: Any) -> Classification:
        """Decide the shape of a value."""
        if value is None:
            return Classification(Shape.ABSENT)

        customizable = as_customizable(value)
        if customizable is not None and overrides_hook(customizable, "wrap"):
            return Classification(Shape.CUSTOMIZED)

        if as_wrappable_date(value) is not None:
            return Classification(Shape.DATE)

        adapter = self._adapters.lookup(value)
        if adapter is not None:
            return Classification(Shape.ADAPTED, adapter)

        if isinstance(value, Enum):
            return Classification(Shape.ENUM_CASE)
        if isinstance(value, _PRIMITIVE_TYPES):
            return Classification(Shape.PRIMITIVE)
        if isinstance(value, Variant):
            return Classification(Shape.VARIANT)
        if is_callable_value(value):
            return Classification(Shape.CALLABLE)
        if isinstance(value, Mapping):
            return Classification(Shape.MAPPING)

        if is_named_tuple(value) or (
            is_composite(value)
            and not isinstance(value, (SequenceABC, Set, deque, ValuesView))
        ):
            levels = field_levels(value)
            if any(level.fields for level in levels):
                return Classification(Shape.COMPOSITE, levels)
            return Classification(Shape.EMPTY_COMPOSITE, levels)

        if isinstance(value, (SequenceABC, Set, deque, ValuesView)):
            return Classification(Shape.SEQUENCE)

        return Classification(Shape.OTHER)

    # =========================================================================
    # Conversion
    # =========================================================================

    def _wrap_value(self, value: Any, field_name: Optional[str]) -> Any:
        classification = self.classify(value)
        shape = classification.shape

        if shape == Shape.ABSENT or shape == Shape.CALLABLE:
            return _ABSENT
        if shape == Shape.CUSTOMIZED:
            return invoke_wrap(value, self._context, self._date_formatter)
        if shape == Shape.DATE:
            return self._wrap_date(value)
        if shape == Shape.ADAPTED:
            return self._wrap_value(classification.detail(value, self), field_name)
        if shape == Shape.PRIMITIVE or shape == Shape.OTHER:
            return value
        if shape == Shape.ENUM_CASE:
            return value.name
        if shape == Shape.VARIANT:
            if not value.values:
                return value.case
            return self._wrap_composite(value, self._levels_for_case(value))
        if shape == Shape.MAPPING:
            return self._wrap_mapping(value)
        if shape == Shape.SEQUENCE:
            return self._wrap_sequence(value)
        if shape == Shape.EMPTY_COMPOSITE:
            return {}
        return self._wrap_composite(value, classification.detail)

    def _wrap_date(self, value: Any) -> str:
        if self._date_formatter is None:
            self._date_formatter = DateFormatter()
        return value.wrap_date(self._date_formatter)

    def _levels_for_case(self, value: Any) -> List[FieldLevel]:
        if isinstance(value, Variant) and len(value.values) > 1:
            # Only single-payload cases have a defined dictionary form.
            raise WrappingFailed(value)
        return field_levels(value)

    def _wrap_sequence(self, collection: Any) -> List[Any]:
        with self._guard(collection):
            wrapped_list = []
            for element in collection:
                wrapped = self._wrap_value(element, None)
                if wrapped is not _ABSENT:
                    wrapped_list.append(wrapped)
            return wrapped_list

    def _wrap_mapping(self, mapping: Mapping) -> WrappedDict:
        with self._guard(mapping):
            wrapped_dict: WrappedDict = {}
            for key, value in mapping.items():
                wrapped_key = wrapped_key_for(key)
                if wrapped_key is None:
                    self._trace_skip(mapping, repr(key), "unrepresentable")
                    continue
                wrapped = self._wrap_value(value, wrapped_key)
                if wrapped is not _ABSENT:
                    wrapped_dict[wrapped_key] = wrapped
            return wrapped_dict

    def _wrap_composite(self, obj: Any, levels: List[FieldLevel]) -> WrappedDict:
        """Wrap a composite field by field, most ancestral class first."""
        customizable = as_customizable(obj)
        style = resolve_key_style(customizable, self.key_style)
        wraps_fields = customizable is not None and overrides_hook(customizable, "wrap_field")

        with self._guard(obj):
            wrapped_dict: WrappedDict = {}

            for level in reversed(levels):
                for field_name, value in level.fields:
                    if value is None:
                        self._trace_skip(obj, field_name, "absent")
                        continue

                    key = resolve_key(customizable, field_name, style)
                    if key is None:
                        self._trace_skip(obj, field_name, "key_dropped")
                        continue

                    if wraps_fields:
                        wrapped = invoke_wrap_field(
                            customizable,
                            field_name,
                            value,
                            self._context,
                            self._date_formatter,
                        )
                        if wrapped is OMIT:
                            self._trace_skip(obj, field_name, "omitted")
                            continue
                        if wrapped is not None:
                            wrapped_dict[key] = wrapped
                            continue

                    wrapped = self._wrap_value(value, field_name)
                    if wrapped is _ABSENT:
                        self._trace_skip(obj, field_name, "unrepresentable")
                        continue
                    wrapped_dict[key] = wrapped

            return wrapped_dict

    @contextmanager
    def _guard(self, value: Any) -> Iterator[None]:
        """Track value on the current descent path to detect cycles."""
        if not self._detect_cycles:
            yield
            return

        path = _descent_path.get()
        token = None
        if path is None:
            path = set()
            token = _descent_path.set(path)

        marker = id(value)
        if marker in path:
            raise CyclicStructure(value)

        path.add(marker)
        try:
            yield
        finally:
            path.discard(marker)
            if token is not None:
                _descent_path.reset(token)

    @contextmanager
    def _activate(self) -> Iterator[None]:
        """Make this Wrapper the current one while it converts."""
        token = _current_wrapper.set(self)
        try:
            yield
        finally:
            _current_wrapper.reset(token)

    def _trace_skip(self, obj: Any, field_name: str, reason: str) -> None:
        if not self._trace:
            return
        hub = ObservabilityHub.get_instance()
        if hub.enabled and hub.is_level_enabled(TraceLevel.VERBOSE):
            hub.emit(FieldSkipRecord(
                type_name=type(obj).__qualname__,
                field_name=field_name,
                reason=reason,
            ))


__all__ = [
    "WrappedDict",
    "Shape",
    "Classification",
    "Wrapper",
    "is_callable_value",
    "current_wrapper",
]
