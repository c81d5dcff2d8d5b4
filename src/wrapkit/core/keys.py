"""Key styles applied to field names when building dictionary keys.

The process-wide default key style is the one piece of global state in
wrapkit. It is read whenever a composite declares no style of its own and
the Wrapper was not given an explicit one. Set it once at startup; it is
not meant to be flipped between concurrent wrap calls.

Example:
    >>> from wrapkit.core.keys import KeyStyle, set_default_key_style
    >>> set_default_key_style(KeyStyle.CONVERT_TO_SNAKE_CASE)
    >>> convert_to_snake_case("myProperty")
    'my_property'
"""

import re
from enum import Enum


class KeyStyle(str, Enum):
    """Naming convention for keys derived from field names."""

    MATCH_FIELD_NAME = "match_field_name"
    CONVERT_TO_SNAKE_CASE = "convert_to_snake_case"


# An uppercase letter after a lowercase one, or an uppercase letter that
# starts a lowercase run (not at index 0 and not right after "_").
_SNAKE_CASE_BOUNDARY = re.compile(r"(?<=[a-z])([A-Z])|(?<=[^_])([A-Z])(?=[a-z])")

_default_key_style = KeyStyle.MATCH_FIELD_NAME


def convert_to_snake_case(name: str) -> str:
    """Convert a camelCased field name to snake_case.

    Examples:
        >>> convert_to_snake_case("camelCased")
        'camel_cased'
        >>> convert_to_snake_case("CAPITALIZED")
        'capitalized'
        >>> convert_to_snake_case("HTTPServer")
        'http_server'
        >>> convert_to_snake_case("_underscored")
        '_underscored'
    """
    return _SNAKE_CASE_BOUNDARY.sub(r"_\1\2", name).lower()


def apply_key_style(name: str, style: KeyStyle) -> str:
    """Apply a key style to a field name."""
    if style == KeyStyle.CONVERT_TO_SNAKE_CASE:
        return convert_to_snake_case(name)
    return name


def get_default_key_style() -> KeyStyle:
    """Get the process-wide default key style."""
    return _default_key_style


def set_default_key_style(style: KeyStyle) -> None:
    """Set the process-wide default key style.

    Args:
        style: Key style used by composites that declare none.
    """
    global _default_key_style
    _default_key_style = KeyStyle(style)


__all__ = [
    "KeyStyle",
    "convert_to_snake_case",
    "apply_key_style",
    "get_default_key_style",
    "set_default_key_style",
]
