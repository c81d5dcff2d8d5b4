"""Shared fixtures for wrapkit tests."""

import pytest

from wrapkit.core.adapters import reset_default_registry
from wrapkit.core.keys import KeyStyle, set_default_key_style
from wrapkit.observability import ObservabilityHub


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset process-wide state before and after each test."""
    ObservabilityHub.reset_instance()
    set_default_key_style(KeyStyle.MATCH_FIELD_NAME)
    reset_default_registry()
    yield
    ObservabilityHub.reset_instance()
    set_default_key_style(KeyStyle.MATCH_FIELD_NAME)
    reset_default_registry()
