"""Top-level wrapping functions.

These are the entry points most code needs:

    >>> import wrapkit
    >>>
    >>> @dataclass
    ... class User:
    ...     name: str
    ...     age: int
    >>>
    >>> wrapkit.wrap(User("John", 42))
    {'name': 'John', 'age': 42}
    >>> wrapkit.wrap_to_bytes(User("John", 42))
    b'{"name":"John","age":42}'

Each call builds its own Wrapper, so a default date formatter created
during one call is never shared with another. When tracing is enabled,
every call emits a WrapRecord on success and a WrapFailureRecord on
failure.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional

from wrapkit.core.dates import DateFormatter
from wrapkit.core.errors import WrapError, WrappingFailed
from wrapkit.core.wrapper import WrappedDict, Wrapper
from wrapkit.encoding import EncodeOptions, encode
from wrapkit.observability import ObservabilityHub, TraceLevel
from wrapkit.observability.records import WrapFailureRecord, WrapRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Dictionaries
# =============================================================================


def wrap(
    obj: Any,
    context: Any = None,
    date_formatter: Optional[DateFormatter] = None,
    detect_cycles: bool = True,
) -> WrappedDict:
    """Wrap an object into a dictionary.

    The object's own wrap() hook, if it overrides one, is used.

    Args:
        obj: Composite (dataclass, model, plain object, enum case) or
            mapping to wrap.
        context: Object passed to every customization hook.
        date_formatter: Formatter for date values. Defaults to
            "%Y-%m-%d %H:%M:%S".
        detect_cycles: Raise CyclicStructure for self-containing values.

    Returns:
        A dictionary containing only JSON-compatible values.

    Raises:
        InvalidTopLevelObject: If obj cannot become a dictionary.
        WrappingFailed: If a customization hook fails.
        CyclicStructure: If obj contains itself.
    """
    with _traced("wrap", obj) as call:
        wrapped = _wrap_root(obj, context, date_formatter, detect_cycles)
        call.key_count = len(wrapped)
        return wrapped


def wrap_many(
    objs: Iterable[Any],
    context: Any = None,
    date_formatter: Optional[DateFormatter] = None,
    detect_cycles: bool = True,
) -> List[WrappedDict]:
    """Wrap each object of a sequence into a dictionary.

    The first failure aborts the call; no partial list is returned.

    Args:
        objs: Objects to wrap.
        context: Object passed to every customization hook.
        date_formatter: Formatter for date values.
        detect_cycles: Raise CyclicStructure for self-containing values.

    Returns:
        One dictionary per object, in order.
    """
    objs = list(objs)
    with _traced("wrap_many", objs) as call:
        wrapped = [
            _wrap_root(obj, context, date_formatter, detect_cycles)
            for obj in objs
        ]
        call.item_count = len(wrapped)
        call.key_count = sum(len(item) for item in wrapped)
        return wrapped


# =============================================================================
# Bytes
# =============================================================================


def wrap_to_bytes(
    obj: Any,
    options: Optional[EncodeOptions] = None,
    context: Any = None,
    date_formatter: Optional[DateFormatter] = None,
    detect_cycles: bool = True,
) -> bytes:
    """Wrap an object and encode it as UTF-8 JSON.

    Args:
        obj: Object to wrap.
        options: Encoder options.
        context: Object passed to every customization hook.
        date_formatter: Formatter for date values.
        detect_cycles: Raise CyclicStructure for self-containing values.

    Returns:
        The encoded dictionary.

    Raises:
        WrapError: If wrapping fails.
        ValueError, TypeError: If encoding fails, as raised by json.
    """
    with _traced("wrap_to_bytes", obj) as call:
        wrapped = _wrap_root(obj, context, date_formatter, detect_cycles)
        data = encode(wrapped, options)
        call.key_count = len(wrapped)
        call.byte_count = len(data)
        return data


def wrap_many_to_bytes(
    objs: Iterable[Any],
    options: Optional[EncodeOptions] = None,
    context: Any = None,
    date_formatter: Optional[DateFormatter] = None,
    detect_cycles: bool = True,
) -> bytes:
    """Wrap a sequence of objects and encode the list as UTF-8 JSON."""
    objs = list(objs)
    with _traced("wrap_many_to_bytes", objs) as call:
        wrapped = [
            _wrap_root(obj, context, date_formatter, detect_cycles)
            for obj in objs
        ]
        data = encode(wrapped, options)
        call.item_count = len(wrapped)
        call.key_count = sum(len(item) for item in wrapped)
        call.byte_count = len(data)
        return data


# =============================================================================
# Internals
# =============================================================================


def _wrap_root(
    obj: Any,
    context: Any,
    date_formatter: Optional[DateFormatter],
    detect_cycles: bool,
) -> WrappedDict:
    wrapper = Wrapper(
        context=context,
        date_formatter=date_formatter,
        detect_cycles=detect_cycles,
    )
    return wrapper.wrap_object(obj, enable_customized_wrapping=True)


class _Call:
    """Counters filled in by a traced call."""

    def __init__(self):
        self.item_count = 1
        self.key_count = 0
        self.byte_count = 0


@contextmanager
def _traced(operation: str, target: Any) -> Iterator[_Call]:
    """Time a top-level call and emit its trace record.

    Exceptions always propagate; tracing only observes them.
    """
    call = _Call()
    start_ns = time.perf_counter_ns()
    try:
        yield call
    except Exception as e:
        _emit_failure(operation, target, e)
        raise

    hub = ObservabilityHub.get_instance()
    if hub.enabled and hub.is_level_enabled(TraceLevel.NORMAL):
        hub.emit(WrapRecord(
            operation=operation,
            type_name=type(target).__qualname__,
            item_count=call.item_count,
            key_count=call.key_count,
            byte_count=call.byte_count,
            duration_ms=(time.perf_counter_ns() - start_ns) / 1_000_000,
        ))


def _emit_failure(operation: str, target: Any, error: Exception) -> None:
    hub = ObservabilityHub.get_instance()
    if not hub.enabled:
        return

    if isinstance(error, WrapError):
        type_name = type(error.object).__qualname__
    else:
        type_name = type(target).__qualname__
    field_name = error.field_name if isinstance(error, WrappingFailed) else None

    logger.debug(f"{operation} failed for {type_name}: {error!r}")
    hub.emit(WrapFailureRecord(
        operation=operation,
        type_name=type_name,
        error_type=type(error).__name__,
        message=str(error),
        field_name=field_name,
    ))


__all__ = [
    "wrap",
    "wrap_many",
    "wrap_to_bytes",
    "wrap_many_to_bytes",
]
