"""Customization points for wrapping.

Types opt into specialized behavior by mixing in WrapCustomizable (or
WrappableEnum) or by implementing the WrappableKey / WrappableDate
protocols. Every hook has a default implementation, so a type only
overrides what it needs.

Example:
    >>> from dataclasses import dataclass
    >>> from wrapkit import WrapCustomizable, KeyStyle, wrap
    >>>
    >>> @dataclass
    ... class User(WrapCustomizable):
    ...     firstName: str
    ...     password: str
    ...
    ...     @property
    ...     def wrap_key_style(self):
    ...         return KeyStyle.CONVERT_TO_SNAKE_CASE
    ...
    ...     def key_for_wrapping(self, field_name):
    ...         if field_name == "password":
    ...             return None
    ...         return super().key_for_wrapping(field_name)
    >>>
    >>> wrap(User("John", "secret"))
    {'first_name': 'John'}
"""

from enum import Enum
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from wrapkit.core.dates import DateFormatter
from wrapkit.core.keys import KeyStyle, apply_key_style, get_default_key_style


class _Omit:
    """Sentinel type for OMIT."""

    _instance: Optional["_Omit"] = None

    def __new__(cls) -> "_Omit":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


# Returned from wrap_field() to mean "handled, but produce no key".
OMIT = _Omit()


class WrapCustomizable:
    """Mixin providing the main customization point for wrapping.

    All methods have default implementations. Override the ones you need:

    - wrap_key_style: naming convention for this type's keys
    - wrap: replace the whole wrapping of an instance
    - key_for_wrapping: rename or drop a single field
    - wrap_field: replace the wrapped value of a single field
    """

    @property
    def wrap_key_style(self) -> Optional[KeyStyle]:
        """Key style for this type's fields.

        Returning None uses the Wrapper's default (normally the
        process-wide default key style).
        """
        return None

    def wrap(self, context: Any = None, date_formatter: Optional[DateFormatter] = None) -> Any:
        """Override the wrapping of this object.

        Top-level types should return a dict. To build on the default
        behavior, use a Wrapper (never wrapkit.wrap(), which would call
        this method again):

            >>> def wrap(self, context=None, date_formatter=None):
            ...     wrapped = Wrapper(context, date_formatter).wrap(self)
            ...     wrapped["kind"] = "user"
            ...     return wrapped

        A Wrapper created here inherits the key style, adapters and date
        formatter of the Wrapper that called the hook.

        Returning None is treated as a failure and raises WrappingFailed.
        """
        from wrapkit.core.wrapper import Wrapper

        return Wrapper(context=context, date_formatter=date_formatter).wrap(self)

    def key_for_wrapping(self, field_name: str) -> Optional[str]:
        """Override the key used for a field.

        Returning None skips the field. The default applies this type's
        key style, or the converting Wrapper's when the type declares none.
        """
        from wrapkit.core.wrapper import current_wrapper

        wrapper = current_wrapper()
        default = wrapper.key_style if wrapper is not None else get_default_key_style()
        return apply_key_style(field_name, self.wrap_key_style or default)

    def wrap_field(
        self,
        field_name: str,
        original_value: Any,
        context: Any = None,
        date_formatter: Optional[DateFormatter] = None,
    ) -> Any:
        """Override the wrapping of a single field.

        Return None to use the default wrapping for the field, or OMIT to
        leave it out of the output. Raising an exception aborts the whole
        wrap call with WrappingFailed.
        """
        return None


class WrappableEnum(WrapCustomizable):
    """Mixin for Enums that should be wrapped as their raw value.

    Example:
        >>> class Status(WrappableEnum, Enum):
        ...     ACTIVE = "active"
        ...     DISABLED = 17
    """

    def wrap(self, context: Any = None, date_formatter: Optional[DateFormatter] = None) -> Any:
        if isinstance(self, Enum):
            return self.value
        return super().wrap(context, date_formatter)


@runtime_checkable
class WrappableKey(Protocol):
    """Protocol for types used as keys in a wrapped dictionary."""

    def to_wrapped_key(self) -> str:
        """Convert this value into a dictionary key."""
        ...


@runtime_checkable
class WrappableDate(Protocol):
    """Protocol for date-like types that format themselves."""

    def wrap_date(self, date_formatter: DateFormatter) -> str:
        """Format this date using the given formatter."""
        ...


class Variant:
    """An enumerated case carrying associated values.

    Plain Enum members cover cases without data; a Variant covers the
    cases that carry a payload:

        >>> wrap(Model(shape=Variant("circle", 2.5)))
        {'shape': {'circle': 2.5}}

    A Variant without values wraps as its case name.

    Attributes:
        case: Name of the case.
        values: Associated values, in declaration order.
    """

    __slots__ = ("case", "values")

    def __init__(self, case: str, *values: Any):
        self.case = case
        self.values: Tuple[Any, ...] = values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            return NotImplemented
        return self.case == other.case and self.values == other.values

    def __hash__(self) -> int:
        return hash((self.case, self.values))

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in (self.case,) + self.values)
        return f"{type(self).__name__}({args})"


__all__ = [
    "OMIT",
    "WrapCustomizable",
    "WrappableEnum",
    "WrappableKey",
    "WrappableDate",
    "Variant",
]
