"""Customization hook resolution.

This module is the single place where the engine asks whether a value
declares a capability (WrapCustomizable, WrappableKey, WrappableDate) and
whether a hook is overridden. A hook that is not overridden is never
called: the engine runs its default behavior directly, in the same
Wrapper, so the lazily created date formatter and cycle tracking carry
through.
"""

import logging
from enum import Enum
from typing import Any, Optional

from wrapkit.core.dates import DateFormatter
from wrapkit.core.errors import WrapError, WrappingFailed
from wrapkit.core.keys import KeyStyle, apply_key_style
from wrapkit.core.protocols import WrapCustomizable, WrappableDate, WrappableEnum, WrappableKey

logger = logging.getLogger(__name__)


def as_customizable(value: Any) -> Optional[WrapCustomizable]:
    """Return the value if it is WrapCustomizable, else None."""
    if isinstance(value, WrapCustomizable):
        return value
    return None


def as_wrappable_date(value: Any) -> Optional[WrappableDate]:
    """Return the value if it formats itself as a date, else None."""
    if isinstance(value, WrappableDate):
        return value
    return None


def overrides_hook(obj: WrapCustomizable, name: str) -> bool:
    """Check whether obj's class overrides a WrapCustomizable hook.

    Args:
        obj: A WrapCustomizable instance.
        name: Hook name ("wrap", "key_for_wrapping", "wrap_field" or
            "wrap_key_style").
    """
    return getattr(type(obj), name, None) is not getattr(WrapCustomizable, name)


def resolve_key_style(customizable: Optional[WrapCustomizable], default: KeyStyle) -> KeyStyle:
    """Resolve the key style for a composite."""
    if customizable is None:
        return default
    return customizable.wrap_key_style or default


def resolve_key(
    customizable: Optional[WrapCustomizable],
    field_name: str,
    style: KeyStyle,
) -> Optional[str]:
    """Resolve the output key for a field; None drops the field."""
    if customizable is not None and overrides_hook(customizable, "key_for_wrapping"):
        return customizable.key_for_wrapping(field_name)
    return apply_key_style(field_name, style)


def invoke_wrap(
    customizable: WrapCustomizable,
    context: Any,
    date_formatter: Optional[DateFormatter],
) -> Any:
    """Call an overridden whole-object hook.

    Raises:
        WrappingFailed: If the hook returns None or raises.
    """
    try:
        wrapped = customizable.wrap(context, date_formatter)
    except (WrapError, RecursionError):
        raise
    except Exception as e:
        logger.debug(f"wrap() hook of {type(customizable).__name__} raised: {e!r}")
        raise WrappingFailed(customizable) from e

    if wrapped is None:
        raise WrappingFailed(customizable)
    return wrapped


def invoke_wrap_field(
    customizable: WrapCustomizable,
    field_name: str,
    original_value: Any,
    context: Any,
    date_formatter: Optional[DateFormatter],
) -> Any:
    """Call an overridden per-field hook.

    Returns:
        The hook's result: None when the field is not handled, OMIT when
        it is handled without a value.

    Raises:
        WrappingFailed: If the hook raises.
    """
    try:
        return customizable.wrap_field(field_name, original_value, context, date_formatter)
    except (WrapError, RecursionError):
        raise
    except Exception as e:
        logger.debug(
            f"wrap_field() hook of {type(customizable).__name__} "
            f"raised for '{field_name}': {e!r}"
        )
        raise WrappingFailed(customizable, field_name) from e


def wrapped_key_for(key: Any) -> Optional[str]:
    """Derive a dictionary key for a mapping key.

    Strings are used as they are and WrappableKeys supply their own
    string. Enum members use the same text they wrap to as values: their
    name, or str() of their raw value for WrappableEnum members. Other
    keys with a meaningful str()/repr() (numbers, UUIDs, ...) use it.
    Keys with only the default object representation yield None and
    their pair is dropped.
    """
    if isinstance(key, str) and not isinstance(key, Enum):
        return key
    if isinstance(key, WrappableKey):
        return key.to_wrapped_key()
    if isinstance(key, WrappableEnum) and isinstance(key, Enum):
        return str(key.value)
    if isinstance(key, Enum):
        return key.name

    key_type = type(key)
    if key_type.__str__ is not object.__str__ or key_type.__repr__ is not object.__repr__:
        return str(key)
    return None


__all__ = [
    "as_customizable",
    "as_wrappable_date",
    "overrides_hook",
    "resolve_key_style",
    "resolve_key",
    "invoke_wrap",
    "invoke_wrap_field",
    "wrapped_key_for",
]
