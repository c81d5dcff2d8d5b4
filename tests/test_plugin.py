"""Tests for plugin discovery system."""

import pytest

from wrapkit import wrap
from wrapkit.core.adapters import AdapterRegistry, default_registry
from wrapkit.plugin import (
    ADAPTERS_GROUP,
    discover_adapters,
    load_adapter_plugin,
    load_adapter_plugins,
)


# =============================================================================
# Test Fixtures
# =============================================================================


class Money:
    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency


class FakeEntryPoint:
    """Stands in for importlib.metadata.EntryPoint."""

    def __init__(self, name, target):
        self.name = name
        self._target = target

    def load(self):
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


def register_money(registry):
    registry.register(Money, lambda value, wrapper: f"{value.amount} {value.currency}")


def register_broken(registry):
    raise RuntimeError("bad plugin")


@pytest.fixture
def fake_plugins(monkeypatch):
    """Replace entry point discovery with a fixed set of plugins."""
    plugins = {
        "money": FakeEntryPoint("money", register_money),
        "broken": FakeEntryPoint("broken", register_broken),
        "missing": FakeEntryPoint("missing", ImportError("no module named 'gone'")),
    }
    monkeypatch.setattr(
        "wrapkit.plugin.discovery.discover_adapters",
        lambda: plugins,
    )
    return plugins


# =============================================================================
# Discovery Tests
# =============================================================================


class TestDiscovery:
    """Tests for entry point discovery."""

    def test_group_name(self):
        """Test the entry point group name."""
        assert ADAPTERS_GROUP == "wrapkit.adapters"

    def test_discover_returns_dict(self):
        """Test discover_adapters returns a dict."""
        assert isinstance(discover_adapters(), dict)


# =============================================================================
# Loading Tests
# =============================================================================


class TestLoadAdapterPlugins:
    """Tests for loading adapter plugins."""

    def test_failing_plugins_are_skipped(self, fake_plugins):
        """Test plugins that fail to import or register do not stop loading."""
        registry = AdapterRegistry()

        loaded = load_adapter_plugins(registry)

        assert loaded == ["money"]
        assert Money in registry

    def test_exclude(self, fake_plugins):
        """Test excluded plugins are not loaded."""
        registry = AdapterRegistry()

        loaded = load_adapter_plugins(registry, exclude=["money"])

        assert loaded == []
        assert Money not in registry

    def test_default_registry(self, fake_plugins):
        """Test plugins register on the process-wide registry by default."""
        load_adapter_plugins()

        assert Money in default_registry()
        assert wrap({"price": Money(3, "EUR")}) == {"price": "3 EUR"}

    def test_load_single_plugin(self, fake_plugins):
        """Test loading one plugin's register callable by name."""
        assert load_adapter_plugin("money") is register_money

    def test_load_unknown_plugin(self, fake_plugins):
        """Test an unknown plugin name raises KeyError."""
        with pytest.raises(KeyError, match="nope"):
            load_adapter_plugin("nope")
