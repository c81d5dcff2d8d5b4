"""Type adapters for values whose types cannot mix in WrapCustomizable.

An adapter is a callable ``adapter(value, wrapper) -> Any`` registered for
a type. Lookup walks the value's MRO, so an adapter registered for a base
class also covers its subclasses. The adapter's result is wrapped again,
so it may return lists or dicts that still contain composites; it must
not return a value of the adapted type itself.

Built-in adapters cover dates, paths, UUIDs, decimals, URLs, bytes,
timedeltas, complex numbers and numpy arrays/scalars.

Example:
    >>> from wrapkit.core.adapters import register_adapter
    >>>
    >>> @register_adapter(Money)
    ... def wrap_money(value, wrapper):
    ...     return f"{value.amount} {value.currency}"
"""

import base64
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional
from urllib.parse import ParseResult, SplitResult
from uuid import UUID

import numpy as np

if TYPE_CHECKING:
    from wrapkit.core.wrapper import Wrapper

logger = logging.getLogger(__name__)

Adapter = Callable[[Any, "Wrapper"], Any]


class AdapterRegistry:
    """Registry mapping types to adapters.

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register(Money, lambda value, wrapper: str(value))
        >>> registry.lookup(Money(5, "EUR")) is not None
        True
    """

    def __init__(self):
        self._adapters: Dict[type, Adapter] = {}

    def register(self, type_: type, adapter: Optional[Adapter] = None):
        """Register an adapter for a type.

        Can be used directly or as a decorator.

        Args:
            type_: Type the adapter handles (subclasses included).
            adapter: The adapter callable. Omit to use as a decorator.

        Returns:
            The adapter (or a decorator registering it).
        """
        if adapter is None:
            def decorator(fn: Adapter) -> Adapter:
                self._adapters[type_] = fn
                return fn
            return decorator

        self._adapters[type_] = adapter
        return adapter

    def unregister(self, type_: type) -> None:
        """Remove the adapter registered for a type, if any."""
        self._adapters.pop(type_, None)

    def lookup(self, value: Any) -> Optional[Adapter]:
        """Find the adapter for a value.

        Args:
            value: Value to look up.

        Returns:
            The adapter for the nearest registered class in the value's
            MRO, or None.
        """
        if not self._adapters:
            return None
        for klass in type(value).__mro__:
            adapter = self._adapters.get(klass)
            if adapter is not None:
                return adapter
        return None

    def copy(self) -> "AdapterRegistry":
        """Create an independent copy of this registry."""
        registry = AdapterRegistry()
        registry._adapters = dict(self._adapters)
        return registry

    def __contains__(self, type_: type) -> bool:
        return type_ in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


# =============================================================================
# Built-in adapters
# =============================================================================


def _wrap_date(value: Any, wrapper: "Wrapper") -> str:
    return wrapper.format_date(value)


def _wrap_as_string(value: Any, wrapper: "Wrapper") -> str:
    return str(value)


def _wrap_url(value: Any, wrapper: "Wrapper") -> str:
    return value.geturl()


def _wrap_bytes(value: Any, wrapper: "Wrapper") -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


def _wrap_timedelta(value: timedelta, wrapper: "Wrapper") -> float:
    return value.total_seconds()


def _wrap_complex(value: complex, wrapper: "Wrapper") -> Dict[str, float]:
    return {"real": value.real, "imag": value.imag}


def _wrap_numpy_array(value: np.ndarray, wrapper: "Wrapper") -> Any:
    return value.tolist()


def _wrap_numpy_scalar(value: np.generic, wrapper: "Wrapper") -> Any:
    return value.item()


def register_builtin_adapters(registry: AdapterRegistry) -> AdapterRegistry:
    """Register the built-in adapters on a registry."""
    for date_type in (datetime, date, time):
        registry.register(date_type, _wrap_date)
    for string_type in (PurePath, UUID, Decimal):
        registry.register(string_type, _wrap_as_string)
    registry.register(ParseResult, _wrap_url)
    registry.register(SplitResult, _wrap_url)
    registry.register(bytes, _wrap_bytes)
    registry.register(bytearray, _wrap_bytes)
    registry.register(timedelta, _wrap_timedelta)
    registry.register(complex, _wrap_complex)
    registry.register(np.ndarray, _wrap_numpy_array)
    registry.register(np.generic, _wrap_numpy_scalar)
    return registry


_default_registry: Optional[AdapterRegistry] = None


def default_registry() -> AdapterRegistry:
    """Get the process-wide registry used by Wrappers by default."""
    global _default_registry
    if _default_registry is None:
        _default_registry = register_builtin_adapters(AdapterRegistry())
    return _default_registry


def reset_default_registry() -> None:
    """Reset the default registry to the built-in adapters. For testing."""
    global _default_registry
    _default_registry = None


def register_adapter(type_: type, adapter: Optional[Adapter] = None):
    """Register an adapter on the default registry.

    Can be used directly or as a decorator.
    """
    logger.debug(f"Registering adapter for {type_.__qualname__}")
    return default_registry().register(type_, adapter)


__all__ = [
    "Adapter",
    "AdapterRegistry",
    "register_builtin_adapters",
    "default_registry",
    "reset_default_registry",
    "register_adapter",
]
