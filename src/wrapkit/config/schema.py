"""Pydantic validation models for wrapkit configuration.

Defines the schema for YAML configuration files with validation
rules and sensible defaults.
"""

from typing import Any, Dict, List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from wrapkit.core.dates import DEFAULT_DATE_FORMAT
from wrapkit.core.keys import KeyStyle


class SinkSchema(BaseModel):
    """Configuration for an observability sink.

    Attributes:
        type: Sink type (file, console, memory, null).
        path: File path for file sinks.
        options: Additional sink-specific options, passed to the sink.
    """

    type: Literal["file", "console", "memory", "null"] = "file"
    path: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_file_sink_has_path(self) -> "SinkSchema":
        """Validate that file sinks have a path."""
        if self.type == "file" and not self.path:
            raise ValueError("File sink requires 'path' to be set")
        return self


class ObservabilitySchema(BaseModel):
    """Configuration for observability/tracing.

    Attributes:
        level: Trace level (off, minimal, normal, verbose).
        sinks: List of sink configurations.
    """

    level: Literal["off", "minimal", "normal", "verbose"] = "off"
    sinks: List[SinkSchema] = Field(default_factory=list)


class WrappingSchema(BaseModel):
    """Configuration for the wrapping engine.

    Attributes:
        key_style: Process-wide default key style.
        date_format: strftime pattern for dates, or "iso" for ISO 8601.
        timezone: Optional IANA timezone aware datetimes are converted to.
        detect_cycles: Raise CyclicStructure for self-containing values.
    """

    key_style: KeyStyle = KeyStyle.MATCH_FIELD_NAME
    date_format: str = DEFAULT_DATE_FORMAT
    timezone: Optional[str] = None
    detect_cycles: bool = True

    @field_validator("date_format")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        """Validate that the date format is not empty."""
        if not v.strip():
            raise ValueError("date_format must not be empty")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate that the timezone is a known IANA name."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class EncodingSchema(BaseModel):
    """Configuration for the JSON byte encoder.

    Attributes:
        indent: Indentation for pretty printing; None writes compact JSON.
        sort_keys: Write dictionary keys in sorted order.
        ensure_ascii: Escape all non-ASCII characters.
        allow_nan: Allow NaN and Infinity in the output.
    """

    indent: Optional[int] = Field(default=None, ge=0)
    sort_keys: bool = False
    ensure_ascii: bool = False
    allow_nan: bool = False


class PluginsSchema(BaseModel):
    """Configuration for adapter plugin loading.

    Attributes:
        enabled: Load adapter plugins from entry points.
        exclude: Entry point names to skip.
    """

    enabled: bool = True
    exclude: List[str] = Field(default_factory=list)


class ConfigSchema(BaseModel):
    """Root configuration schema.

    Attributes:
        version: Configuration file version (currently "1.0").
        wrapping: Engine settings.
        encoding: Byte encoder settings.
        plugins: Adapter plugin settings.
        observability: Tracing settings.
    """

    version: str = "1.0"
    wrapping: WrappingSchema = Field(default_factory=WrappingSchema)
    encoding: EncodingSchema = Field(default_factory=EncodingSchema)
    plugins: PluginsSchema = Field(default_factory=PluginsSchema)
    observability: ObservabilitySchema = Field(default_factory=ObservabilitySchema)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate configuration version."""
        supported = {"1.0"}
        if v not in supported:
            raise ValueError(
                f"Unsupported config version: {v}. Supported: {supported}"
            )
        return v


__all__ = [
    "ConfigSchema",
    "WrappingSchema",
    "EncodingSchema",
    "PluginsSchema",
    "ObservabilitySchema",
    "SinkSchema",
]
