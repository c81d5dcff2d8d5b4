"""Trace output sinks for observability.

Sinks receive trace records and handle their output to various destinations:
- FileSink: JSONL file output
- ConsoleSink: Formatted console output
- MemorySink: In-memory buffer for testing/analysis
- NullSink: Discards everything
"""

import sys
import threading
from collections import defaultdict, deque
from pathlib import Path
from typing import Callable, Deque, Dict, List, Optional, TextIO

from wrapkit.observability import Sink
from wrapkit.observability.records import (
    TraceRecord,
    WrapRecord,
    WrapFailureRecord,
    FieldSkipRecord,
)


class FileSink(Sink):
    """Sink that writes trace records to a JSONL file.

    Each record is written as a single JSON line, suitable for
    post-processing with tools like jq.

    Args:
        path: Path to the output file.
        buffer_size: Number of records to buffer before flushing (default: 100).
        append: Whether to append to existing file (default: False).

    Example:
        >>> sink = FileSink("/tmp/wrap.jsonl")
        >>> hub.add_sink(sink)
        >>> # ... wrapping ...
        >>> sink.close()  # Ensure final flush
    """

    def __init__(
        self,
        path: str,
        buffer_size: int = 100,
        append: bool = False,
    ):
        self._path = Path(path)
        self._buffer_size = buffer_size
        self._append = append

        self._buffer: List[str] = []
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

        self._open_file()

    @property
    def path(self) -> Path:
        """Output file path."""
        return self._path

    def _open_file(self) -> None:
        mode = "a" if self._append else "w"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, mode, encoding="utf-8")

    def write(self, record: TraceRecord) -> None:
        """Buffer a record, flushing when the buffer is full."""
        line = record.to_json()

        with self._lock:
            self._buffer.append(line)
            if len(self._buffer) >= self._buffer_size:
                self._flush_buffer()

    def _flush_buffer(self) -> None:
        """Flush the buffer to disk. Must be called with lock held."""
        if not self._buffer or self._file is None:
            return

        for line in self._buffer:
            self._file.write(line + "\n")
        self._file.flush()
        self._buffer.clear()

    def flush(self) -> None:
        """Flush any buffered records to disk."""
        with self._lock:
            self._flush_buffer()

    def close(self) -> None:
        """Close the file."""
        with self._lock:
            self._flush_buffer()
            if self._file is not None:
                self._file.close()
                self._file = None


class ConsoleSink(Sink):
    """Sink that writes human-readable trace lines to the console.

    Failures are always shown. Call summaries are shown only when slower
    than slow_threshold_ms; skipped fields only when show_skipped is set.

    Args:
        stream: Output stream (default: sys.stderr).
        color: Enable ANSI color codes (default: True).
        slow_threshold_ms: Threshold for slow-call warnings (default: 10.0).
        show_skipped: Show skipped-field records (default: False).
        format_fn: Optional custom format function for records.
    """

    # ANSI color codes
    COLORS = {
        "reset": "\033[0m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "cyan": "\033[96m",
        "gray": "\033[90m",
    }

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        color: bool = True,
        slow_threshold_ms: float = 10.0,
        show_skipped: bool = False,
        format_fn: Optional[Callable[[TraceRecord], Optional[str]]] = None,
    ):
        self._stream = stream or sys.stderr
        self._color = color and self._stream.isatty()
        self._slow_threshold_ms = slow_threshold_ms
        self._show_skipped = show_skipped
        self._format_fn = format_fn
        self._lock = threading.Lock()

    def _colorize(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def write(self, record: TraceRecord) -> None:
        """Write a formatted trace record to console."""
        if self._format_fn:
            line = self._format_fn(record)
        else:
            line = self._format_record(record)

        if line:
            with self._lock:
                self._stream.write(line + "\n")
                self._stream.flush()

    def _format_record(self, record: TraceRecord) -> Optional[str]:
        if isinstance(record, WrapFailureRecord):
            return self._format_failure(record)
        elif isinstance(record, WrapRecord):
            return self._format_wrap(record)
        elif isinstance(record, FieldSkipRecord):
            return self._format_skip(record)
        else:
            return None

    def _format_failure(self, record: WrapFailureRecord) -> str:
        tag = self._colorize("[FAIL]", "red")
        target = self._colorize(record.type_name, "cyan")
        if record.field_name:
            target += f".{record.field_name}"
        return f"{tag} {record.operation} {target}: {record.error_type}: {record.message}"

    def _format_wrap(self, record: WrapRecord) -> Optional[str]:
        if record.duration_ms <= self._slow_threshold_ms:
            return None

        tag = self._colorize("[SLOW]", "yellow")
        target = self._colorize(record.type_name, "cyan")
        return (
            f"{tag} {record.operation} {target} took {record.duration_ms:.1f}ms "
            f"(> {self._slow_threshold_ms:.1f}ms threshold)"
        )

    def _format_skip(self, record: FieldSkipRecord) -> Optional[str]:
        if not self._show_skipped:
            return None

        tag = self._colorize("[SKIP]", "gray")
        return f"{tag} {record.type_name}.{record.field_name} ({record.reason})"

    def flush(self) -> None:
        """Flush the output stream."""
        with self._lock:
            self._stream.flush()


class MemorySink(Sink):
    """Sink that stores trace records in memory.

    Useful for testing and for in-session analysis.

    Args:
        max_records: Maximum number of records to keep (default: 10000).

    Example:
        >>> sink = MemorySink()
        >>> hub.add_sink(sink)
        >>> # ... wrapping ...
        >>> failures = sink.get_records("wrap_failure")
    """

    def __init__(self, max_records: int = 10000):
        self._max_records = max_records
        self._records: Deque[TraceRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def write(self, record: TraceRecord) -> None:
        """Store a trace record in memory."""
        with self._lock:
            self._records.append(record)

    def get_records(self, record_type: Optional[str] = None) -> List[TraceRecord]:
        """Get stored records.

        Args:
            record_type: Optional filter by record type.

        Returns:
            List of trace records.
        """
        with self._lock:
            records = list(self._records)

        if record_type:
            records = [r for r in records if r.record_type == record_type]

        return records

    def get_by_type_name(self, type_name: str) -> List[TraceRecord]:
        """Get all records about a wrapped type.

        Args:
            type_name: Qualified name of the wrapped type.
        """
        with self._lock:
            records = list(self._records)

        return [
            r for r in records
            if getattr(r, "type_name", None) == type_name
        ]

    def get_timing_stats(self) -> Dict[str, dict]:
        """Get per-operation timing statistics from call records.

        Returns:
            Dict mapping operation names to count/avg/max/min stats.
        """
        times: Dict[str, List[float]] = defaultdict(list)
        for record in self.get_records("wrap"):
            times[record.operation].append(record.duration_ms)

        return {
            operation: {
                "count": len(values),
                "avg_ms": sum(values) / len(values),
                "max_ms": max(values),
                "min_ms": min(values),
            }
            for operation, values in times.items()
        }

    def clear(self) -> None:
        """Clear all stored records."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        """Number of stored records."""
        return len(self._records)


class NullSink(Sink):
    """Sink that discards all records."""

    def write(self, record: TraceRecord) -> None:
        """Discard the record."""
        pass


__all__ = [
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
