"""Core wrapping engine.

- wrapper: Wrapper, the classify-and-convert engine
- protocols: customization points (WrapCustomizable, WrappableEnum, ...)
- hooks: capability checks and hook invocation
- reflection: field enumeration for composites
- adapters: conversions for types that cannot be customized
- keys, dates, errors: key styles, date formatting, error types
"""

from wrapkit.core.adapters import (
    AdapterRegistry,
    default_registry,
    register_adapter,
)
from wrapkit.core.dates import DEFAULT_DATE_FORMAT, DateFormatter
from wrapkit.core.errors import (
    CyclicStructure,
    InvalidTopLevelObject,
    WrapError,
    WrappingFailed,
)
from wrapkit.core.keys import (
    KeyStyle,
    convert_to_snake_case,
    get_default_key_style,
    set_default_key_style,
)
from wrapkit.core.protocols import (
    OMIT,
    Variant,
    WrapCustomizable,
    WrappableDate,
    WrappableEnum,
    WrappableKey,
)
from wrapkit.core.reflection import FieldLevel, field_levels
from wrapkit.core.wrapper import Shape, WrappedDict, Wrapper

__all__ = [
    # Engine
    "Wrapper",
    "WrappedDict",
    "Shape",
    # Customization
    "WrapCustomizable",
    "WrappableEnum",
    "WrappableKey",
    "WrappableDate",
    "Variant",
    "OMIT",
    # Keys
    "KeyStyle",
    "convert_to_snake_case",
    "get_default_key_style",
    "set_default_key_style",
    # Dates
    "DEFAULT_DATE_FORMAT",
    "DateFormatter",
    # Adapters
    "AdapterRegistry",
    "default_registry",
    "register_adapter",
    # Reflection
    "FieldLevel",
    "field_levels",
    # Errors
    "WrapError",
    "InvalidTopLevelObject",
    "WrappingFailed",
    "CyclicStructure",
]
