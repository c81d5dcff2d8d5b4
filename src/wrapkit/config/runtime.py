"""Runtime object conversion for configuration.

apply_config() turns a validated ConfigSchema into live settings:

- the process-wide default key style
- the observability hub level and sinks
- adapter plugins loaded into the default registry

and returns a WrapRuntime holding the per-call settings (date formatter,
encoder options, cycle detection).

Example:
    >>> runtime = apply_config(load_yaml_config("wrapkit.yaml"))
    >>> runtime.wrap_to_bytes(order)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional
from zoneinfo import ZoneInfo

from wrapkit import api
from wrapkit.config.schema import ConfigSchema, SinkSchema
from wrapkit.core.dates import DateFormatter
from wrapkit.core.keys import set_default_key_style
from wrapkit.core.wrapper import WrappedDict
from wrapkit.encoding import EncodeOptions
from wrapkit.observability import (
    ConsoleSink,
    FileSink,
    MemorySink,
    NullSink,
    ObservabilityHub,
    Sink,
    TraceLevel,
)
from wrapkit.plugin import load_adapter_plugins

logger = logging.getLogger(__name__)

_TRACE_LEVELS = {
    "off": TraceLevel.OFF,
    "minimal": TraceLevel.MINIMAL,
    "normal": TraceLevel.NORMAL,
    "verbose": TraceLevel.VERBOSE,
}


@dataclass
class WrapRuntime:
    """Per-call settings derived from a configuration.

    Attributes:
        date_formatter: Formatter passed to every wrap call.
        encode_options: Options for the bytes variants.
        detect_cycles: Cycle detection setting for every wrap call.
        plugins: Names of the adapter plugins that were loaded.
    """

    date_formatter: DateFormatter = field(default_factory=DateFormatter)
    encode_options: EncodeOptions = field(default_factory=EncodeOptions)
    detect_cycles: bool = True
    plugins: List[str] = field(default_factory=list)

    def wrap(self, obj: Any, context: Any = None) -> WrappedDict:
        """Wrap an object with this runtime's settings."""
        return api.wrap(
            obj,
            context=context,
            date_formatter=self.date_formatter,
            detect_cycles=self.detect_cycles,
        )

    def wrap_many(self, objs: Iterable[Any], context: Any = None) -> List[WrappedDict]:
        """Wrap a sequence of objects with this runtime's settings."""
        return api.wrap_many(
            objs,
            context=context,
            date_formatter=self.date_formatter,
            detect_cycles=self.detect_cycles,
        )

    def wrap_to_bytes(self, obj: Any, context: Any = None) -> bytes:
        """Wrap and encode an object with this runtime's settings."""
        return api.wrap_to_bytes(
            obj,
            options=self.encode_options,
            context=context,
            date_formatter=self.date_formatter,
            detect_cycles=self.detect_cycles,
        )

    def wrap_many_to_bytes(self, objs: Iterable[Any], context: Any = None) -> bytes:
        """Wrap and encode a sequence of objects with this runtime's settings."""
        return api.wrap_many_to_bytes(
            objs,
            options=self.encode_options,
            context=context,
            date_formatter=self.date_formatter,
            detect_cycles=self.detect_cycles,
        )


def create_sink(schema: SinkSchema) -> Sink:
    """Create a sink from its configuration.

    Args:
        schema: Validated sink configuration.

    Returns:
        The sink instance.
    """
    if schema.type == "file":
        return FileSink(schema.path, **schema.options)
    elif schema.type == "console":
        return ConsoleSink(**schema.options)
    elif schema.type == "memory":
        return MemorySink(**schema.options)
    else:
        return NullSink()


def create_date_formatter(date_format: str, timezone: Optional[str] = None) -> DateFormatter:
    """Create a date formatter from configuration values.

    Args:
        date_format: strftime pattern, or "iso" for ISO 8601.
        timezone: Optional IANA timezone name.
    """
    tz = ZoneInfo(timezone) if timezone else None
    if date_format.lower() == "iso":
        return DateFormatter.iso(tz)
    return DateFormatter(date_format, tz)


def apply_config(
    config: ConfigSchema,
    hub: Optional[ObservabilityHub] = None,
) -> WrapRuntime:
    """Apply a configuration to the running process.

    Sets the default key style, replaces the hub's sinks and level, and
    loads adapter plugins when enabled.

    Args:
        config: Validated configuration.
        hub: Hub to configure. Defaults to the singleton.

    Returns:
        A WrapRuntime carrying the per-call settings.
    """
    wrapping = config.wrapping
    set_default_key_style(wrapping.key_style)

    hub = hub or ObservabilityHub.get_instance()
    sinks = [create_sink(sink) for sink in config.observability.sinks]
    hub.configure(
        level=_TRACE_LEVELS[config.observability.level],
        sinks=sinks,
        replace_sinks=True,
    )

    plugins: List[str] = []
    if config.plugins.enabled:
        plugins = load_adapter_plugins(exclude=config.plugins.exclude)

    encoding = config.encoding
    runtime = WrapRuntime(
        date_formatter=create_date_formatter(wrapping.date_format, wrapping.timezone),
        encode_options=EncodeOptions(
            indent=encoding.indent,
            sort_keys=encoding.sort_keys,
            ensure_ascii=encoding.ensure_ascii,
            allow_nan=encoding.allow_nan,
        ),
        detect_cycles=wrapping.detect_cycles,
        plugins=plugins,
    )

    logger.info(
        f"Applied configuration: key_style={wrapping.key_style.value}, "
        f"trace_level={config.observability.level}, "
        f"sinks={len(sinks)}, plugins={len(plugins)}"
    )
    return runtime


__all__ = [
    "WrapRuntime",
    "apply_config",
    "create_sink",
    "create_date_formatter",
]
