"""Plugin discovery and loading system.

This module provides infrastructure for discovering and loading
adapter plugins via Python entry points.
"""

from wrapkit.plugin.discovery import (
    discover_adapters,
    load_adapter_plugin,
    load_adapter_plugins,
    ADAPTERS_GROUP,
)

__all__ = [
    "discover_adapters",
    "load_adapter_plugin",
    "load_adapter_plugins",
    "ADAPTERS_GROUP",
]
