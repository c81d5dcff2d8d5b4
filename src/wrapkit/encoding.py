"""Byte encoding of wrapped dictionaries.

Wrapped output is plain JSON data, so encoding is a thin layer over the
json module. Encoder errors (for example NaN with allow_nan=False) are
not translated; they reach the caller as raised by json.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class EncodeOptions:
    """Options for the JSON encoder.

    Attributes:
        indent: Indentation for pretty printing. None writes compact JSON.
        sort_keys: Write dictionary keys in sorted order.
        ensure_ascii: Escape all non-ASCII characters.
        allow_nan: Allow NaN and Infinity. Standard JSON has neither, so
            the default rejects them with ValueError.
    """

    indent: Optional[int] = None
    sort_keys: bool = False
    ensure_ascii: bool = False
    allow_nan: bool = False

    @property
    def separators(self) -> Optional[tuple]:
        # json's defaults leave a space after ":" and ","; compact output
        # drops both.
        if self.indent is None:
            return (",", ":")
        return None


def encode(payload: Any, options: Optional[EncodeOptions] = None) -> bytes:
    """Encode a wrapped payload as UTF-8 JSON.

    Args:
        payload: A wrapped dictionary or a list of them.
        options: Encoder options. Defaults to EncodeOptions().

    Returns:
        The encoded bytes.

    Raises:
        ValueError: If the payload holds NaN/Infinity and allow_nan is off.
        TypeError: If the payload holds a value json cannot encode.

    Example:
        >>> encode({"name": "wrap"})
        b'{"name":"wrap"}'
    """
    options = options or EncodeOptions()
    text = json.dumps(
        payload,
        indent=options.indent,
        sort_keys=options.sort_keys,
        ensure_ascii=options.ensure_ascii,
        allow_nan=options.allow_nan,
        separators=options.separators,
    )
    return text.encode("utf-8")


__all__ = [
    "EncodeOptions",
    "encode",
]
