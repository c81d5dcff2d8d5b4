"""Configuration system for wrapkit.

Provides YAML-based configuration with:
- Pydantic schema validation
- Environment variable substitution (${VAR} and ${VAR:-default})
- Runtime object conversion (apply_config)

Example YAML config:
    version: "1.0"
    wrapping:
      key_style: convert_to_snake_case
      date_format: "%Y-%m-%dT%H:%M:%S"
      timezone: UTC
    encoding:
      indent: 2
      sort_keys: true
    plugins:
      exclude: [legacy]
    observability:
      level: normal
      sinks:
        - type: file
          path: "${LOG_DIR:-./logs}/wrap.jsonl"

Example usage:
    >>> from wrapkit.config import load_yaml_config, apply_config
    >>> runtime = apply_config(load_yaml_config("wrapkit.yaml"))
    >>> runtime.wrap(order)
"""

from wrapkit.config.schema import (
    ConfigSchema,
    WrappingSchema,
    EncodingSchema,
    PluginsSchema,
    ObservabilitySchema,
    SinkSchema,
)
from wrapkit.config.loader import (
    load_yaml_config,
    load_yaml_string,
    load_dict_config,
    substitute_env_vars,
    ConfigLoadError,
)
from wrapkit.config.runtime import (
    WrapRuntime,
    apply_config,
    create_sink,
    create_date_formatter,
)

__all__ = [
    # Schema models
    "ConfigSchema",
    "WrappingSchema",
    "EncodingSchema",
    "PluginsSchema",
    "ObservabilitySchema",
    "SinkSchema",
    # Loader
    "load_yaml_config",
    "load_yaml_string",
    "load_dict_config",
    "substitute_env_vars",
    "ConfigLoadError",
    # Runtime
    "WrapRuntime",
    "apply_config",
    "create_sink",
    "create_date_formatter",
]
