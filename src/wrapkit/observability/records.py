"""Trace record data classes for observability.

Record Categories:
- Base: TraceRecord base class
- Call: one summary per top-level wrap / encode call
- Failure: wrap errors
- Field: fields left out of the output and why

Records are wrapped with wrapkit itself: TraceRecord is WrapCustomizable
and drops its internal min_level field from the output.
"""

from dataclasses import dataclass, field
from typing import Optional
import json
import time

from wrapkit.core.protocols import WrapCustomizable

# Forward reference for TraceLevel
from wrapkit.observability import TraceLevel


@dataclass
class TraceRecord(WrapCustomizable):
    """Base class for all trace records.

    All trace records have:
    - record_type: String identifying the record type
    - timestamp_ns: When the record was created (monotonic)
    - min_level: Minimum trace level required to emit this record

    Subclasses should set record_type as a class variable.
    """
    record_type: str = field(default="base", init=False)
    timestamp_ns: int = field(default_factory=lambda: time.perf_counter_ns())
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    def key_for_wrapping(self, field_name: str) -> Optional[str]:
        if field_name == "min_level":
            return None
        return field_name

    def to_dict(self) -> dict:
        """Convert record to dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization.
        """
        from wrapkit.core.wrapper import Wrapper

        return Wrapper(trace=False).wrap(self)

    def to_json(self) -> str:
        """Convert record to JSON string."""
        return json.dumps(self.to_dict(), default=str)


# =============================================================================
# Call Records
# =============================================================================


@dataclass
class WrapRecord(TraceRecord):
    """Summary of a successful top-level call.

    Emitted by wrap(), wrap_many() and the bytes variants.
    """
    record_type: str = field(default="wrap", init=False)
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    operation: str = ""   # "wrap", "wrap_many", "wrap_to_bytes", ...
    type_name: str = ""
    item_count: int = 1
    key_count: int = 0
    byte_count: int = 0
    duration_ms: float = 0.0


# =============================================================================
# Failure Records
# =============================================================================


@dataclass
class WrapFailureRecord(TraceRecord):
    """Record of a failed top-level call."""
    record_type: str = field(default="wrap_failure", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    operation: str = ""
    type_name: str = ""
    error_type: str = ""  # "InvalidTopLevelObject", "WrappingFailed", ...
    message: str = ""
    field_name: Optional[str] = None


# =============================================================================
# Field Records
# =============================================================================


@dataclass
class FieldSkipRecord(TraceRecord):
    """Record of a field left out of a wrapped dictionary.

    Reasons:
    - absent: the field's value is None
    - key_dropped: key_for_wrapping() returned None
    - omitted: wrap_field() returned OMIT
    - unrepresentable: the value is a callable
    """
    record_type: str = field(default="field_skip", init=False)
    min_level: TraceLevel = field(default=TraceLevel.VERBOSE, repr=False)

    type_name: str = ""
    field_name: str = ""
    reason: str = ""


__all__ = [
    "TraceRecord",
    "WrapRecord",
    "WrapFailureRecord",
    "FieldSkipRecord",
]
