"""Error types raised while wrapping objects.

Every error raised by the engine derives from WrapError, so callers can
catch the whole family with a single except clause. Errors are terminal
for the top-level call that raised them: no partial dictionary is ever
returned.
"""

from typing import Any, Optional


class WrapError(Exception):
    """Base class for wrapping errors.

    Attributes:
        object: The value that could not be wrapped.
    """

    def __init__(self, obj: Any, message: str):
        super().__init__(message)
        self.object = obj


class InvalidTopLevelObject(WrapError):
    """Raised when the root value cannot be represented as a dictionary.

    Strings, numbers, sequences, dates and raw-value enums are not valid
    top-level input; pass a composite or a mapping instead.
    """

    def __init__(self, obj: Any):
        super().__init__(
            obj,
            f"Invalid top level object of type {type(obj).__name__}: "
            f"wrapping must produce a dictionary",
        )


class WrappingFailed(WrapError):
    """Raised when a customization hook signals failure.

    Attributes:
        object: The object whose hook failed.
        field_name: Name of the field being wrapped, if the failure
            happened in a per-field hook.
    """

    def __init__(self, obj: Any, field_name: Optional[str] = None):
        if field_name is None:
            message = f"Wrapping failed for object of type {type(obj).__name__}"
        else:
            message = (
                f"Wrapping failed for field '{field_name}' "
                f"of {type(obj).__name__}"
            )
        super().__init__(obj, message)
        self.field_name = field_name


class CyclicStructure(WrapError):
    """Raised when a value refers back to one of its own ancestors."""

    def __init__(self, obj: Any):
        super().__init__(
            obj,
            f"Cyclic reference detected at object of type {type(obj).__name__}",
        )


__all__ = [
    "WrapError",
    "InvalidTopLevelObject",
    "WrappingFailed",
    "CyclicStructure",
]
