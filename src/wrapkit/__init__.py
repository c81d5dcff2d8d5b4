"""wrapkit - Wrap Python objects into JSON-compatible dictionaries.

wrapkit inspects an object's fields at runtime and turns dataclasses,
pydantic models, named tuples and plain objects into dictionaries,
without any schema declared up front.

Quick Start:
    >>> import wrapkit
    >>>
    >>> @dataclass
    ... class Event:
    ...     name: str
    ...     startDate: datetime
    ...     tags: Set[str]
    >>>
    >>> wrapkit.wrap(Event("Launch", datetime(2024, 5, 1, 9, 30), {"tech"}))
    {'name': 'Launch', 'startDate': '2024-05-01 09:30:00', 'tags': ['tech']}
    >>>
    >>> # Customize per type
    >>> class Account(wrapkit.WrapCustomizable):
    ...     def key_for_wrapping(self, field_name):
    ...         return None if field_name == "password" else field_name

For advanced usage, see:
- wrapkit.core: Wrapper, customization protocols, adapters
- wrapkit.config: YAML configuration
- wrapkit.observability: tracing of wrap calls
- wrapkit.plugin: adapter plugins via entry points
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wrapkit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

# =============================================================================
# High-level API (recommended)
# =============================================================================
from wrapkit.api import (
    wrap,
    wrap_many,
    wrap_to_bytes,
    wrap_many_to_bytes,
)
from wrapkit.encoding import EncodeOptions

# =============================================================================
# Core exports (for customization)
# =============================================================================
from wrapkit.core.adapters import register_adapter
from wrapkit.core.dates import DEFAULT_DATE_FORMAT, DateFormatter
from wrapkit.core.errors import (
    CyclicStructure,
    InvalidTopLevelObject,
    WrapError,
    WrappingFailed,
)
from wrapkit.core.keys import KeyStyle, get_default_key_style, set_default_key_style
from wrapkit.core.protocols import (
    OMIT,
    Variant,
    WrapCustomizable,
    WrappableDate,
    WrappableEnum,
    WrappableKey,
)
from wrapkit.core.wrapper import WrappedDict, Wrapper

__all__ = [
    # High-level API
    "wrap",
    "wrap_many",
    "wrap_to_bytes",
    "wrap_many_to_bytes",
    "EncodeOptions",
    # Engine
    "Wrapper",
    "WrappedDict",
    # Customization
    "WrapCustomizable",
    "WrappableEnum",
    "WrappableKey",
    "WrappableDate",
    "Variant",
    "OMIT",
    "register_adapter",
    # Keys and dates
    "KeyStyle",
    "get_default_key_style",
    "set_default_key_style",
    "DEFAULT_DATE_FORMAT",
    "DateFormatter",
    # Errors
    "WrapError",
    "InvalidTopLevelObject",
    "WrappingFailed",
    "CyclicStructure",
]
