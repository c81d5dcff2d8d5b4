"""Tests for wrapkit observability system."""

import io
import json

import pytest

from wrapkit.observability import (
    TraceLevel,
    Sink,
    ObservabilityHub,
    TraceRecord,
    FileSink,
    ConsoleSink,
    MemorySink,
    NullSink,
)
from wrapkit.observability.records import (
    WrapRecord,
    WrapFailureRecord,
    FieldSkipRecord,
)


# =============================================================================
# TraceLevel Tests
# =============================================================================


class TestTraceLevel:
    """Tests for TraceLevel enum."""

    def test_level_ordering(self):
        """Test trace levels are ordered correctly."""
        assert TraceLevel.OFF < TraceLevel.MINIMAL
        assert TraceLevel.MINIMAL < TraceLevel.NORMAL
        assert TraceLevel.NORMAL < TraceLevel.VERBOSE

    def test_level_values(self):
        """Test trace level values."""
        assert TraceLevel.OFF == 0
        assert TraceLevel.MINIMAL == 1
        assert TraceLevel.NORMAL == 2
        assert TraceLevel.VERBOSE == 3


# =============================================================================
# Record Tests
# =============================================================================


class TestTraceRecord:
    """Tests for trace records."""

    def test_base_record_creation(self):
        """Test creating a base trace record."""
        record = TraceRecord()

        assert record.record_type == "base"
        assert record.timestamp_ns > 0
        assert record.min_level == TraceLevel.NORMAL

    def test_to_dict_drops_min_level(self):
        """Test records wrap themselves without their level."""
        data = WrapRecord(operation="wrap", type_name="User", key_count=2).to_dict()

        assert "min_level" not in data
        assert data["record_type"] == "wrap"
        assert data["operation"] == "wrap"
        assert data["key_count"] == 2

    def test_to_dict_omits_none(self):
        """Test unset optional fields are left out."""
        data = WrapFailureRecord(error_type="InvalidTopLevelObject").to_dict()

        assert "field_name" not in data
        assert data["error_type"] == "InvalidTopLevelObject"

    def test_to_json(self):
        """Test JSON serialization."""
        data = json.loads(FieldSkipRecord(type_name="User", field_name="x", reason="absent").to_json())

        assert data["record_type"] == "field_skip"
        assert data["reason"] == "absent"

    def test_default_levels(self):
        """Test each record type's minimum level."""
        assert WrapFailureRecord().min_level == TraceLevel.MINIMAL
        assert WrapRecord().min_level == TraceLevel.NORMAL
        assert FieldSkipRecord().min_level == TraceLevel.VERBOSE


# =============================================================================
# ObservabilityHub Tests
# =============================================================================


class TestObservabilityHub:
    """Tests for ObservabilityHub singleton."""

    def test_singleton(self):
        """Test hub is a singleton."""
        hub1 = ObservabilityHub.get_instance()
        hub2 = ObservabilityHub.get_instance()

        assert hub1 is hub2

    def test_default_disabled(self):
        """Test hub is disabled by default."""
        hub = ObservabilityHub.get_instance()

        assert not hub.enabled
        assert hub.level == TraceLevel.OFF

    def test_configure(self):
        """Test configuring the hub."""
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.NORMAL)

        assert hub.enabled
        assert hub.level == TraceLevel.NORMAL

    def test_configure_replace_sinks(self):
        """Test replacing sinks closes the old ones."""
        hub = ObservabilityHub.get_instance()
        old, new = MemorySink(), MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[old])

        hub.configure(level=TraceLevel.NORMAL, sinks=[new], replace_sinks=True)

        assert hub.sinks == [new]

    def test_add_remove_sink(self):
        """Test adding and removing sinks."""
        hub = ObservabilityHub.get_instance()
        sink = MemorySink()

        hub.add_sink(sink)
        assert sink in hub.sinks

        hub.remove_sink(sink)
        assert sink not in hub.sinks

    def test_emit_when_disabled(self):
        """Test emit does nothing when disabled."""
        hub = ObservabilityHub.get_instance()
        sink = MemorySink()
        hub.add_sink(sink)

        hub.emit(TraceRecord())

        assert len(sink) == 0

    def test_emit_respects_min_level(self):
        """Test emit respects record's min_level."""
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.NORMAL)
        sink = MemorySink()
        hub.add_sink(sink)

        hub.emit(FieldSkipRecord())
        hub.emit(WrapRecord())
        hub.emit(WrapFailureRecord())

        assert len(sink) == 2

    def test_sink_errors_do_not_propagate(self):
        """Test a failing sink does not break emission."""
        class FailingSink(Sink):
            def write(self, record):
                raise IOError("disk full")

        hub = ObservabilityHub.get_instance()
        memory = MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[FailingSink(), memory])

        hub.emit(WrapRecord())

        assert len(memory) == 1

    def test_is_level_enabled(self):
        """Test is_level_enabled method."""
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.NORMAL)

        assert hub.is_level_enabled(TraceLevel.MINIMAL)
        assert hub.is_level_enabled(TraceLevel.NORMAL)
        assert not hub.is_level_enabled(TraceLevel.VERBOSE)

    def test_shutdown(self):
        """Test shutdown clears sinks and disables tracing."""
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.VERBOSE, sinks=[MemorySink()])

        hub.shutdown()

        assert not hub.enabled
        assert hub.sinks == []


# =============================================================================
# FileSink Tests
# =============================================================================


class TestFileSink:
    """Tests for FileSink."""

    def test_write_creates_file(self, tmp_path):
        """Test writing creates a file."""
        path = tmp_path / "logs" / "trace.jsonl"
        sink = FileSink(str(path), buffer_size=1)

        sink.write(TraceRecord())
        sink.close()

        assert path.exists()
        assert "base" in path.read_text()

    def test_buffered_writes(self, tmp_path):
        """Test records are buffered before writing."""
        path = tmp_path / "trace.jsonl"
        sink = FileSink(str(path), buffer_size=5)

        for _ in range(3):
            sink.write(TraceRecord())

        assert path.read_text() == ""

        sink.flush()
        assert path.read_text().count("\n") == 3

        sink.close()

    def test_jsonl_format(self, tmp_path):
        """Test output is valid JSONL."""
        path = tmp_path / "trace.jsonl"
        sink = FileSink(str(path), buffer_size=1)

        sink.write(WrapRecord(operation="wrap", type_name="A"))
        sink.write(WrapRecord(operation="wrap", type_name="B"))
        sink.close()

        lines = path.read_text().strip().split("\n")
        assert len(lines) == 2
        assert [json.loads(line)["type_name"] for line in lines] == ["A", "B"]

    def test_append(self, tmp_path):
        """Test append mode keeps existing lines."""
        path = tmp_path / "trace.jsonl"
        path.write_text("existing\n")

        sink = FileSink(str(path), buffer_size=1, append=True)
        sink.write(TraceRecord())
        sink.close()

        assert path.read_text().startswith("existing\n")


# =============================================================================
# MemorySink Tests
# =============================================================================


class TestMemorySink:
    """Tests for MemorySink."""

    def test_max_records_limit(self):
        """Test max_records limit."""
        sink = MemorySink(max_records=3)

        for _ in range(5):
            sink.write(TraceRecord())

        assert len(sink) == 3

    def test_get_records_by_type(self):
        """Test filtering records by type."""
        sink = MemorySink()
        sink.write(WrapRecord())
        sink.write(WrapFailureRecord())

        assert len(sink.get_records()) == 2
        assert len(sink.get_records(record_type="wrap")) == 1

    def test_get_by_type_name(self):
        """Test getting records about one wrapped type."""
        sink = MemorySink()
        sink.write(WrapRecord(type_name="User"))
        sink.write(FieldSkipRecord(type_name="User", field_name="x"))
        sink.write(WrapRecord(type_name="Order"))

        assert len(sink.get_by_type_name("User")) == 2

    def test_get_timing_stats(self):
        """Test computing timing statistics."""
        sink = MemorySink()
        sink.write(WrapRecord(operation="wrap", duration_ms=10.0))
        sink.write(WrapRecord(operation="wrap", duration_ms=20.0))
        sink.write(WrapRecord(operation="wrap", duration_ms=30.0))
        sink.write(WrapRecord(operation="wrap_many", duration_ms=15.0))

        stats = sink.get_timing_stats()

        assert stats["wrap"]["count"] == 3
        assert stats["wrap"]["avg_ms"] == pytest.approx(20.0)
        assert stats["wrap"]["max_ms"] == 30.0
        assert stats["wrap_many"]["min_ms"] == 15.0

    def test_clear(self):
        """Test clearing records."""
        sink = MemorySink()
        sink.write(TraceRecord())

        sink.clear()

        assert len(sink) == 0


# =============================================================================
# NullSink Tests
# =============================================================================


class TestNullSink:
    """Tests for NullSink."""

    def test_discards_records(self):
        """Test sink discards all records."""
        sink = NullSink()

        sink.write(TraceRecord())
        sink.flush()
        sink.close()


# =============================================================================
# ConsoleSink Tests
# =============================================================================


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_formats_failure(self):
        """Test failure formatting."""
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False)

        sink.write(WrapFailureRecord(
            operation="wrap",
            type_name="User",
            error_type="WrappingFailed",
            message="boom",
            field_name="email",
        ))

        output = stream.getvalue()
        assert "[FAIL]" in output
        assert "User.email" in output
        assert "boom" in output

    def test_formats_slow_call(self):
        """Test slow calls are reported."""
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False, slow_threshold_ms=5.0)

        sink.write(WrapRecord(operation="wrap", type_name="User", duration_ms=12.0))

        output = stream.getvalue()
        assert "[SLOW]" in output
        assert "12.0ms" in output

    def test_skips_fast_calls(self):
        """Test fast calls are not printed."""
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False, slow_threshold_ms=5.0)

        sink.write(WrapRecord(duration_ms=1.0))

        assert stream.getvalue() == ""

    def test_skipped_fields_opt_in(self):
        """Test skipped fields are printed only when enabled."""
        record = FieldSkipRecord(type_name="User", field_name="nickname", reason="absent")

        quiet = io.StringIO()
        ConsoleSink(stream=quiet, color=False).write(record)
        loud = io.StringIO()
        ConsoleSink(stream=loud, color=False, show_skipped=True).write(record)

        assert quiet.getvalue() == ""
        assert "User.nickname (absent)" in loud.getvalue()

    def test_custom_format_fn(self):
        """Test a custom formatter replaces the default."""
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, format_fn=lambda r: f"<{r.record_type}>")

        sink.write(WrapRecord())

        assert stream.getvalue() == "<wrap>\n"
