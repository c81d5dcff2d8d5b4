"""Tests for field enumeration."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel

from wrapkit import Variant, WrapCustomizable
from wrapkit.core.reflection import field_levels, is_composite, is_named_tuple


class Color(Enum):
    RED = 1


@dataclass
class Base:
    a: int = 1


@dataclass
class Derived(Base):
    b: int = 2


class TestIsComposite:
    """Tests for is_composite()."""

    def test_builtins_are_not_composites(self):
        """Test builtin scalars and containers."""
        for value in ("a", 1, 2.5, [1], {"a": 1}, (1,), {1}, b"x"):
            assert not is_composite(value)

    def test_composites(self):
        """Test dataclasses, plain objects, enums and variants."""
        class Plain:
            pass

        assert is_composite(Base())
        assert is_composite(Plain())
        assert is_composite(Color.RED)
        assert is_composite(Variant("a"))

    def test_named_tuple(self):
        """Test named tuples are composites."""
        class Point(NamedTuple):
            x: int

        assert is_named_tuple(Point(1))
        assert not is_named_tuple((1,))
        assert is_composite(Point(1))


class TestFieldLevels:
    """Tests for field_levels()."""

    def test_dataclass_levels(self):
        """Test levels are ordered most derived first."""
        levels = field_levels(Derived())

        assert [level.owner for level in levels] == [Derived, Base]
        assert levels[0].fields == [("b", 2)]
        assert levels[1].fields == [("a", 1)]

    def test_redeclared_field_belongs_to_base(self):
        """Test a field redeclared in a subclass is listed once."""
        @dataclass
        class Child(Base):
            a: int = 10

        levels = field_levels(Child())
        names = [name for level in levels for name, _ in level.fields]

        assert names == ["a"]
        assert levels[-1].fields == [("a", 10)]

    def test_plain_object_attributes(self):
        """Test instance attributes belong to the most derived level."""
        class Parent:
            def __init__(self):
                self.x = 1

        class Child(Parent):
            def __init__(self):
                super().__init__()
                self.y = 2

        levels = field_levels(Child())

        assert levels[0].owner is Child
        assert levels[0].fields == [("x", 1), ("y", 2)]

    def test_customizable_mixin_has_no_fields(self):
        """Test the WrapCustomizable mixin contributes no fields."""
        @dataclass
        class Model(WrapCustomizable):
            name: str = "n"

        levels = field_levels(Model())
        fields = [f for level in levels for f in level.fields]

        assert fields == [("name", "n")]

    def test_pydantic_levels(self):
        """Test pydantic models list their model fields."""
        class Parent(BaseModel):
            a: int = 1

        class Child(Parent):
            b: Optional[str] = None

        levels = field_levels(Child())
        by_owner = {level.owner: level.fields for level in levels}

        assert by_owner[Child] == [("b", None)]
        assert by_owner[Parent] == [("a", 1)]

    def test_private_slot_names(self):
        """Test mangled __private slots are read."""
        class Secret:
            __slots__ = ("__token",)

            def __init__(self):
                self.__token = "t"

        levels = field_levels(Secret())

        assert levels[0].fields == [("__token", "t")]

    def test_enum_has_no_fields(self):
        """Test enum members have a single empty level."""
        levels = field_levels(Color.RED)

        assert len(levels) == 1
        assert levels[0].fields == []

    def test_variant_fields(self):
        """Test variants expose one field named after the case."""
        assert field_levels(Variant("circle", 2.5))[0].fields == [("circle", 2.5)]
        assert field_levels(Variant("idle"))[0].fields == []
