"""Tests for byte encoding."""

import json
import math
from dataclasses import dataclass, field
from typing import List

import pytest

from wrapkit import EncodeOptions, InvalidTopLevelObject, wrap_many_to_bytes, wrap_to_bytes
from wrapkit.encoding import encode


@dataclass
class Model:
    string: str = "A string"
    number: int = 42
    array: List[int] = field(default_factory=lambda: [4, 1, 9])


class TestEncode:
    """Tests for encode()."""

    def test_compact_by_default(self):
        """Test default output has no whitespace."""
        assert encode({"a": 1, "b": [1, 2]}) == b'{"a":1,"b":[1,2]}'

    def test_indent(self):
        """Test pretty printing."""
        data = encode({"a": 1}, EncodeOptions(indent=2))

        assert data == b'{\n  "a": 1\n}'

    def test_sort_keys(self):
        """Test sorted keys."""
        assert encode({"b": 1, "a": 2}, EncodeOptions(sort_keys=True)) == b'{"a":2,"b":1}'

    def test_unicode(self):
        """Test non-ASCII text is written as UTF-8 by default."""
        assert encode({"name": "café"}) == '{"name":"café"}'.encode("utf-8")
        assert encode({"name": "café"}, EncodeOptions(ensure_ascii=True)) == b'{"name":"caf\\u00e9"}'

    def test_nan_rejected_by_default(self):
        """Test encoder errors surface unchanged."""
        with pytest.raises(ValueError):
            encode({"value": math.nan})

    def test_nan_allowed(self):
        """Test NaN can be enabled."""
        assert encode({"value": math.nan}, EncodeOptions(allow_nan=True)) == b'{"value":NaN}'


class TestWrapToBytes:
    """Tests for the bytes variants of wrap()."""

    def test_wrap_to_bytes(self):
        """Test wrapping and encoding an object."""
        data = wrap_to_bytes(Model())

        assert json.loads(data) == {"string": "A string", "number": 42, "array": [4, 1, 9]}

    def test_wrap_many_to_bytes(self):
        """Test wrapping and encoding a list of objects."""
        data = wrap_many_to_bytes([Model(number=1), Model(number=2)])

        decoded = json.loads(data)
        assert [item["number"] for item in decoded] == [1, 2]

    def test_options_are_applied(self):
        """Test encoder options reach the encoder."""
        data = wrap_to_bytes(Model(), options=EncodeOptions(sort_keys=True))

        assert data == b'{"array":[4,1,9],"number":42,"string":"A string"}'

    def test_wrap_errors_propagate(self):
        """Test wrapping errors are raised before encoding."""
        with pytest.raises(InvalidTopLevelObject):
            wrap_to_bytes("A string")
