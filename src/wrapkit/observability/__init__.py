"""Observability system for wrapkit.

Traces wrap calls so slow or failing conversions can be spotted:
- One summary record per top-level wrap call
- Failure records with the error kind and offending field
- Per-field skip records explaining why a key is missing

Trace Levels:
- OFF: No tracing (default)
- MINIMAL: Failures only
- NORMAL: Per-call summaries
- VERBOSE: Every skipped field

Example:
    >>> from wrapkit.observability import ObservabilityHub, TraceLevel, MemorySink
    >>> hub = ObservabilityHub.get_instance()
    >>> sink = MemorySink()
    >>> hub.configure(level=TraceLevel.VERBOSE, sinks=[sink])
    >>>
    >>> wrap(user)
    >>> [r.field_name for r in sink.get_records("field_skip")]
    ['password']
"""

import logging
import threading
from enum import IntEnum
from typing import List, Optional

logger = logging.getLogger(__name__)


class TraceLevel(IntEnum):
    """Observability trace levels.

    Higher levels include all lower level information.
    """
    OFF = 0       # No tracing
    MINIMAL = 1   # Failures
    NORMAL = 2    # Call summaries
    VERBOSE = 3   # Field-level detail


class Sink:
    """Base class for trace sinks.

    Sinks receive trace records and handle their output
    (file, console, memory buffer, etc.).
    """

    def write(self, record: "TraceRecord") -> None:
        """Write a trace record.

        Args:
            record: The trace record to write.
        """
        raise NotImplementedError

    def flush(self) -> None:
        """Flush any buffered records."""
        pass

    def close(self) -> None:
        """Close the sink and release resources."""
        pass


class ObservabilityHub:
    """Central hub for trace configuration and record emission.

    Singleton - use get_instance() to access.

    Thread Safety:
        Records can be emitted from multiple threads. Sinks must not
        emit records themselves.

    Example:
        >>> hub = ObservabilityHub.get_instance()
        >>> hub.configure(level=TraceLevel.NORMAL, sinks=[ConsoleSink()])
        >>>
        >>> # Fast check before creating records
        >>> if hub.enabled:
        ...     hub.emit(record)
    """

    _instance: Optional["ObservabilityHub"] = None
    _lock = threading.Lock()

    def __init__(self):
        """Initialize the hub. Use get_instance() instead."""
        self._level = TraceLevel.OFF
        self._sinks: List[Sink] = []
        self._emit_lock = threading.Lock()
        self._enabled = False

    @classmethod
    def get_instance(cls) -> "ObservabilityHub":
        """Get the singleton hub instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. For testing only."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.shutdown()
            cls._instance = None

    def configure(
        self,
        level: TraceLevel = TraceLevel.OFF,
        sinks: Optional[List[Sink]] = None,
        replace_sinks: bool = False,
    ) -> None:
        """Configure the hub.

        Args:
            level: Trace level to set.
            sinks: Optional sinks to add.
            replace_sinks: Close and remove existing sinks first.
        """
        if replace_sinks:
            self._close_sinks()

        self._level = TraceLevel(level)
        self._enabled = self._level > TraceLevel.OFF

        for sink in sinks or []:
            self.add_sink(sink)

    def add_sink(self, sink: Sink) -> None:
        """Add a sink for trace output."""
        with self._emit_lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        """Remove a sink."""
        with self._emit_lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    @property
    def sinks(self) -> List[Sink]:
        """Registered sinks (a copy)."""
        with self._emit_lock:
            return list(self._sinks)

    def emit(self, record: "TraceRecord") -> None:
        """Emit a trace record to all sinks.

        Sink errors are logged and never reach the wrap call.
        """
        if not self._enabled:
            return

        if record.min_level > self._level:
            return

        with self._emit_lock:
            for sink in self._sinks:
                try:
                    sink.write(record)
                except Exception as e:
                    logger.debug(f"Sink {type(sink).__name__} failed to write: {e!r}")

    def flush(self) -> None:
        """Flush all sinks."""
        with self._emit_lock:
            for sink in self._sinks:
                try:
                    sink.flush()
                except Exception as e:
                    logger.debug(f"Sink {type(sink).__name__} failed to flush: {e!r}")

    def shutdown(self) -> None:
        """Close all sinks and turn tracing off."""
        self._close_sinks()
        self._level = TraceLevel.OFF
        self._enabled = False

    def _close_sinks(self) -> None:
        with self._emit_lock:
            for sink in self._sinks:
                try:
                    sink.flush()
                    sink.close()
                except Exception as e:
                    logger.debug(f"Sink {type(sink).__name__} failed to close: {e!r}")
            self._sinks.clear()

    @property
    def enabled(self) -> bool:
        """Fast check if tracing is enabled."""
        return self._enabled

    @property
    def level(self) -> TraceLevel:
        """Current trace level."""
        return self._level

    def is_level_enabled(self, level: TraceLevel) -> bool:
        """Check if a specific trace level is enabled."""
        return self._level >= level


# Import TraceRecord and sinks after defining TraceLevel
from wrapkit.observability.records import TraceRecord
from wrapkit.observability.sinks import FileSink, ConsoleSink, MemorySink, NullSink

__all__ = [
    # Core
    "TraceLevel",
    "Sink",
    "ObservabilityHub",
    # Records
    "TraceRecord",
    # Sinks
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
