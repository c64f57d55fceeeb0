"""Tests for descriptors and the schema registry."""

import pytest

from typed_protos.types import (
    SCALAR_TYPES,
    DescriptorKind,
    EnumDescriptor,
    EnumValueDescriptor,
    FieldDescriptor,
    ListDescriptor,
    MapDescriptor,
    MessageDescriptor,
    ScalarKind,
    SchemaRegistry,
    join_name,
    scalar,
)


class TestScalarDescriptor:
    """Tests for scalar descriptors."""

    def test_properties(self):
        """Test scalar descriptor properties."""
        type_def = scalar("uint32")
        assert type_def.name == "uint32"
        assert type_def.type_name == "uint32"
        assert type_def.scalar is ScalarKind.INT
        assert type_def.kind is DescriptorKind.SCALAR
        assert type_def.is_scalar is True
        assert type_def.is_message is False
        assert type_def.is_list is False

    def test_int_ranges(self):
        """Test the ranges of integer scalars."""
        assert (scalar("int32").min_value, scalar("int32").max_value) == (-(2**31), 2**31 - 1)
        assert (scalar("uint64").min_value, scalar("uint64").max_value) == (0, 2**64 - 1)
        assert (scalar("sfixed64").min_value, scalar("sfixed64").max_value) == (
            -(2**63),
            2**63 - 1,
        )

    def test_non_int_scalars_unbounded(self):
        """Test that non-integer scalars carry no range."""
        for name in ["string", "bytes", "bool", "double", "float"]:
            assert SCALAR_TYPES[name].min_value is None
            assert SCALAR_TYPES[name].max_value is None

    def test_float_kinds(self):
        """Test that double and float share the float kind."""
        assert scalar("double").scalar is ScalarKind.FLOAT
        assert scalar("float").scalar is ScalarKind.FLOAT

    def test_value_equality(self):
        """Test that scalar descriptors compare by value."""
        assert scalar("string") == SCALAR_TYPES["string"]
        assert scalar("int32") != scalar("sint32")
        assert hash(scalar("int64")) == hash(SCALAR_TYPES["int64"])

    def test_unknown(self):
        """Test looking up an unknown scalar name."""
        with pytest.raises(KeyError, match="int128"):
            scalar("int128")


class TestContainerDescriptors:
    """Tests for list and map descriptors."""

    def test_list(self):
        """Test list descriptor properties."""
        type_def = ListDescriptor(scalar("string"))
        assert type_def.type_name == "list<string>"
        assert type_def.is_list is True
        assert type_def == ListDescriptor(scalar("string"))
        assert type_def != ListDescriptor(scalar("bytes"))

    def test_map(self):
        """Test map descriptor properties."""
        type_def = MapDescriptor(scalar("int32"), scalar("bytes"))
        assert type_def.type_name == "map<int32, bytes>"
        assert type_def.is_map is True

    def test_nested_type_name(self):
        """Test the type name of a list of messages."""
        msg = MessageDescriptor(full_name="pkg.Msg", package="pkg")
        assert ListDescriptor(msg).type_name == "list<pkg.Msg>"

    def test_message_elements_compare_by_identity(self):
        """Test that containers of different messages are not equal."""
        a = MessageDescriptor(full_name="pkg.A", package="pkg")
        b = MessageDescriptor(full_name="pkg.B", package="pkg")
        assert ListDescriptor(a) == ListDescriptor(a)
        assert ListDescriptor(a) != ListDescriptor(b)
        assert MapDescriptor(scalar("string"), a) != MapDescriptor(scalar("string"), b)


class TestMessageDescriptor:
    """Tests for message descriptors."""

    def test_properties(self):
        """Test message descriptor properties."""
        msg = MessageDescriptor(
            full_name="pkg.Outer.Inner",
            package="pkg",
            fields=[FieldDescriptor(name="x", number=1, type_def=scalar("bool"))],
        )
        assert msg.name == "Inner"
        assert msg.type_name == "pkg.Outer.Inner"
        assert msg.is_message is True
        assert msg.get_field("x").number == 1
        assert msg.get_field("y") is None
        assert repr(msg) == "MessageDescriptor('pkg.Outer.Inner')"

    def test_identity_equality(self):
        """Test that message descriptors compare by identity."""
        a = MessageDescriptor(full_name="pkg.Msg", package="pkg")
        b = MessageDescriptor(full_name="pkg.Msg", package="pkg")
        assert a == a
        assert a != b

    def test_distinct_hashes(self):
        """Test that distinct message descriptors hash separately."""
        a = MessageDescriptor(full_name="pkg.A", package="pkg")
        b = MessageDescriptor(full_name="pkg.B", package="pkg")
        assert len({a, b, a}) == 2
        assert MessageDescriptor(full_name="x", package="") != EnumDescriptor(
            full_name="x", package=""
        )


class TestEnumDescriptor:
    """Tests for enum descriptors."""

    def test_values(self):
        """Test looking up enum values by name and number."""
        enum = EnumDescriptor(
            full_name="Color",
            package="",
            values=[EnumValueDescriptor("RED", 0), EnumValueDescriptor("BLUE", 5)],
        )
        assert enum.name == "Color"
        assert enum.is_enum is True
        assert enum.get_value("BLUE").number == 5
        assert enum.get_value("GREEN") is None
        assert enum.get_value_by_number(0).name == "RED"
        assert enum.get_value_by_number(1) is None

    def test_identity_equality(self):
        """Test that enum descriptors compare by identity."""
        values = [EnumValueDescriptor("A", 0)]
        a = EnumDescriptor(full_name="E", package="", values=values)
        b = EnumDescriptor(full_name="E", package="", values=values)
        assert a == a
        assert a != b
        assert len({a, b}) == 2


class TestJoinName:
    """Tests for join_name()."""

    def test_join(self):
        """Test joining with and without a prefix."""
        assert join_name("a.b", "C") == "a.b.C"
        assert join_name("", "C") == "C"


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""

    def test_register_and_lookup(self):
        """Test registering and looking up a top-level type."""
        registry = SchemaRegistry()
        msg = MessageDescriptor(full_name="pkg.Msg", package="pkg")
        registry.register(msg)

        assert registry.lookup("pkg.Msg") is msg
        assert registry.lookup_top_level("pkg.Msg") is msg
        assert registry.get_or_raise("pkg.Msg") is msg
        assert "pkg.Msg" in registry
        assert "pkg.Other" not in registry

    def test_register_nested(self):
        """Test registering a nested type."""
        registry = SchemaRegistry()
        outer = MessageDescriptor(full_name="pkg.Outer", package="pkg")
        inner = EnumDescriptor(
            full_name="pkg.Outer.Kind", package="pkg", values=[EnumValueDescriptor("A", 0)]
        )
        registry.register(outer)
        registry.register_nested(outer, inner)

        assert registry.lookup("pkg.Outer.Kind") is inner
        assert registry.lookup_top_level("pkg.Outer.Kind") is None
        assert registry.children_of(outer) == {"Kind": inner}
        assert registry.enum_values_of(inner) == ["A"]

    def test_children_of_is_a_copy(self):
        """Test that children_of() cannot modify the descriptor."""
        registry = SchemaRegistry()
        outer = MessageDescriptor(full_name="Outer", package="")
        registry.register(outer)
        registry.children_of(outer)["X"] = outer
        assert registry.children_of(outer) == {}

    def test_duplicate(self):
        """Test registering the same name twice."""
        registry = SchemaRegistry()
        registry.register(MessageDescriptor(full_name="pkg.Msg", package="pkg"))
        with pytest.raises(ValueError, match="already defined"):
            registry.register(MessageDescriptor(full_name="pkg.Msg", package="pkg"))

    def test_get_or_raise_missing(self):
        """Test get_or_raise() with an unknown name."""
        with pytest.raises(KeyError, match="not found"):
            SchemaRegistry().get_or_raise("pkg.Missing")

    def test_packages(self):
        """Test that registering a type records its package and parents."""
        registry = SchemaRegistry()
        registry.register(MessageDescriptor(full_name="a.b.c.Msg", package="a.b.c"))

        assert registry.has_package("a")
        assert registry.has_package("a.b")
        assert registry.has_package("a.b.c")
        assert not registry.has_package("a.b.c.Msg")
        assert not registry.has_package("b")

    def test_top_level_names(self):
        """Test listing the types declared directly in a package."""
        registry = SchemaRegistry()
        registry.register(MessageDescriptor(full_name="a.Msg", package="a"))
        registry.register(MessageDescriptor(full_name="a.b.Deep", package="a.b"))
        registry.register(
            EnumDescriptor(full_name="a.Kind", package="a", values=[EnumValueDescriptor("X", 0)])
        )

        assert sorted(registry.top_level_names("a")) == ["Kind", "Msg"]
        assert registry.top_level_names("a.b") == ["Deep"]
        assert registry.list_types() == ["a.Msg", "a.b.Deep", "a.Kind"]

    def test_freeze(self):
        """Test that a frozen registry rejects changes."""
        registry = SchemaRegistry()
        assert registry.frozen is False
        registry.freeze()
        assert registry.frozen is True
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register(MessageDescriptor(full_name="Msg", package=""))
        with pytest.raises(RuntimeError):
            registry.add_package("pkg")
