"""Plugin discovery system for wrapkit.

Third-party packages contribute type adapters via Python entry points.
Each entry point in the `wrapkit.adapters` group loads a callable taking
an AdapterRegistry and registering adapters on it:

```toml
[project.entry-points."wrapkit.adapters"]
money = "mypackage.wrapping:register"
```

```python
def register(registry):
    registry.register(Money, lambda value, wrapper: f"{value.amount} {value.currency}")
```

Example:
    >>> from wrapkit.plugin import discover_adapters, load_adapter_plugins
    >>>
    >>> for name in discover_adapters():
    ...     print(f"Found adapter plugin: {name}")
    >>>
    >>> loaded = load_adapter_plugins(exclude=["legacy"])
"""

import logging
from importlib.metadata import EntryPoint, entry_points
from typing import Callable, Dict, Iterable, List, Optional

from wrapkit.core.adapters import AdapterRegistry, default_registry

logger = logging.getLogger(__name__)

# Entry point group name
ADAPTERS_GROUP = "wrapkit.adapters"

AdapterPlugin = Callable[[AdapterRegistry], None]


def _get_entry_points(group: str) -> Dict[str, EntryPoint]:
    """Get entry points for a group.

    Args:
        group: The entry point group name.

    Returns:
        Dict mapping entry point names to entry point objects.
    """
    return {ep.name: ep for ep in entry_points(group=group)}


def discover_adapters() -> Dict[str, EntryPoint]:
    """Discover all available adapter plugins.

    Scans the `wrapkit.adapters` entry point group.

    Returns:
        Dict mapping plugin names to their entry points.
    """
    return _get_entry_points(ADAPTERS_GROUP)


def load_adapter_plugin(name: str) -> AdapterPlugin:
    """Load an adapter plugin's register callable by name.

    Args:
        name: The registered name of the plugin.

    Returns:
        The plugin's register callable.

    Raises:
        KeyError: If no plugin with the given name is registered.
        ImportError: If the plugin cannot be loaded.
    """
    plugins = discover_adapters()
    if name not in plugins:
        raise KeyError(
            f"No adapter plugin registered with name '{name}'. "
            f"Available: {list(plugins.keys())}"
        )
    return plugins[name].load()


def load_adapter_plugins(
    registry: Optional[AdapterRegistry] = None,
    exclude: Iterable[str] = (),
) -> List[str]:
    """Load all adapter plugins into a registry.

    A plugin that fails to load or register is logged and skipped; the
    remaining plugins still load.

    Args:
        registry: Registry to register adapters on. Defaults to the
            process-wide registry.
        exclude: Plugin names to skip.

    Returns:
        Names of the plugins that loaded successfully, sorted.
    """
    registry = registry if registry is not None else default_registry()
    excluded = set(exclude)
    loaded = []

    for name, entry_point in sorted(discover_adapters().items()):
        if name in excluded:
            logger.debug(f"Skipping excluded adapter plugin '{name}'")
            continue
        try:
            register = entry_point.load()
            register(registry)
        except Exception as e:
            logger.warning(f"Failed to load adapter plugin '{name}': {e}")
            continue
        loaded.append(name)
        logger.info(f"Loaded adapter plugin '{name}'")

    return loaded


__all__ = [
    "ADAPTERS_GROUP",
    "AdapterPlugin",
    "discover_adapters",
    "load_adapter_plugin",
    "load_adapter_plugins",
]
