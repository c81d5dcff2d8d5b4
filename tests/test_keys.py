"""Tests for key styles and dictionary key derivation."""

import uuid
from enum import Enum

import pytest

from wrapkit import WrappableEnum
from wrapkit.core.hooks import wrapped_key_for
from wrapkit.core.keys import (
    KeyStyle,
    apply_key_style,
    convert_to_snake_case,
    get_default_key_style,
    set_default_key_style,
)


class TestSnakeCase:
    """Tests for convert_to_snake_case()."""

    @pytest.mark.parametrize("name, expected", [
        ("simple", "simple"),
        ("myProperty", "my_property"),
        ("camelCased", "camel_cased"),
        ("CAPITALIZED", "capitalized"),
        ("_underscored", "_underscored"),
        ("center_underscored", "center_underscored"),
        ("double__underscored", "double__underscored"),
        ("HTTPServer", "http_server"),
        ("Some", "some"),
        ("userID", "user_id"),
    ])
    def test_conversion(self, name, expected):
        """Test snake case conversion of field names."""
        assert convert_to_snake_case(name) == expected

    def test_apply_match_field_name(self):
        """Test that MATCH_FIELD_NAME keeps the name."""
        assert apply_key_style("myProperty", KeyStyle.MATCH_FIELD_NAME) == "myProperty"

    def test_apply_snake_case(self):
        """Test that CONVERT_TO_SNAKE_CASE converts the name."""
        assert apply_key_style("myProperty", KeyStyle.CONVERT_TO_SNAKE_CASE) == "my_property"


class TestDefaultKeyStyle:
    """Tests for the process-wide default key style."""

    def test_default_is_match_field_name(self):
        """Test the initial default."""
        assert get_default_key_style() == KeyStyle.MATCH_FIELD_NAME

    def test_set_default(self):
        """Test changing the default."""
        set_default_key_style(KeyStyle.CONVERT_TO_SNAKE_CASE)

        assert get_default_key_style() == KeyStyle.CONVERT_TO_SNAKE_CASE

    def test_set_default_from_string(self):
        """Test that the style can be given by value."""
        set_default_key_style("convert_to_snake_case")

        assert get_default_key_style() is KeyStyle.CONVERT_TO_SNAKE_CASE

    def test_set_default_rejects_unknown(self):
        """Test that unknown styles are rejected."""
        with pytest.raises(ValueError):
            set_default_key_style("kebab")


class TestWrappedKey:
    """Tests for mapping key derivation."""

    def test_string_key(self):
        """Test strings are used as they are."""
        assert wrapped_key_for("name") == "name"

    def test_numeric_keys(self):
        """Test numbers use their string form."""
        assert wrapped_key_for(15) == "15"
        assert wrapped_key_for(2.5) == "2.5"
        assert wrapped_key_for(True) == "True"

    def test_uuid_key(self):
        """Test keys with their own __str__."""
        key = uuid.UUID("12345678-1234-5678-1234-567812345678")

        assert wrapped_key_for(key) == "12345678-1234-5678-1234-567812345678"

    def test_wrappable_key(self):
        """Test keys implementing to_wrapped_key()."""
        class Key:
            def to_wrapped_key(self):
                return "custom"

        assert wrapped_key_for(Key()) == "custom"

    def test_opaque_key(self):
        """Test keys with only the default representation."""
        class Opaque:
            pass

        assert wrapped_key_for(Opaque()) is None

    def test_enum_keys(self):
        """Test enum keys use the text the member wraps to."""
        class Color(Enum):
            RED = 1

        class Size(str, Enum):
            LARGE = "large"

        class Level(WrappableEnum, Enum):
            HIGH = 17

        assert wrapped_key_for(Color.RED) == "RED"
        assert wrapped_key_for(Size.LARGE) == "LARGE"
        assert wrapped_key_for(Level.HIGH) == "17"
