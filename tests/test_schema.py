"""Tests for loading schemas and the Schema facade."""

import logging

import pytest

from typed_protos import EnumType, MessageType, NotFoundError, Schema, descriptor_of


class TestSchemaLoad:
    """Tests for Schema.load() and Schema.parse()."""

    def test_load_file(self, tmp_path, schema_text):
        """Test loading a schema file."""
        path = tmp_path / "test.proto"
        path.write_text(schema_text)

        schema = Schema.load(path)
        assert "skycfg.test_proto.MessageV3" in schema.list_types()
        assert schema.registry.frozen

    def test_load_multiple_files(self, tmp_path):
        """Test that later files can reference types from earlier ones."""
        base = tmp_path / "base.proto"
        base.write_text("package base; message Id { string value = 1; }")
        user = tmp_path / "user.proto"
        user.write_text("package app; message User { base.Id id = 1; }")

        schema = Schema.load(str(base), str(user))
        user_type = descriptor_of(schema.get_type("app.User"))
        assert user_type.get_field("id").type_def is descriptor_of(schema.get_type("base.Id"))

    def test_load_missing_file(self, tmp_path):
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError, match="Schema file not found"):
            Schema.load(tmp_path / "missing.proto")

    def test_parse_logs_summary(self, caplog):
        """Test that parsing logs the number of types."""
        with caplog.at_level(logging.INFO, logger="typed_protos.schema"):
            Schema.parse("message A {} enum B { X = 0; }")
        assert "2 types" in caplog.text


class TestSchemaAccess:
    """Tests for looking up types and building values by name."""

    def test_get_type(self, schema):
        """Test looking up message and enum types by full name."""
        assert isinstance(schema.get_type("skycfg.test_proto.MessageV3"), MessageType)
        assert isinstance(schema.get_type("skycfg.test_proto.MessageV3.NestedEnum"), EnumType)

    def test_get_type_missing(self, schema):
        """Test looking up an unknown type."""
        with pytest.raises(NotFoundError) as exc_info:
            schema.get_type("skycfg.test_proto.Nope")
        assert str(exc_info.value) == 'Protobuf type "skycfg.test_proto.Nope" not found'

    def test_package(self, schema):
        """Test getting a package handle."""
        assert repr(schema.package("skycfg.test_proto")) == '<proto.Package "skycfg.test_proto">'

    def test_new_message(self, schema):
        """Test building a message by type name."""
        msg = schema.new_message("skycfg.test_proto.MessageV3", f_string="x")
        assert msg.f_string == "x"
        assert msg.DESCRIPTOR.full_name == "skycfg.test_proto.MessageV3"

    def test_new_message_from_enum(self, schema):
        """Test that an enum name cannot build a message."""
        with pytest.raises(TypeError, match="not a message type"):
            schema.new_message("skycfg.test_proto.ToplevelEnumV3")

    def test_new_list_and_map(self, schema):
        """Test building field containers by type name."""
        lst = schema.new_list("skycfg.test_proto.MessageV3", "r_double")
        lst.append(1)
        assert lst == [1.0]

        m = schema.new_map("skycfg.test_proto.MessageV3", "map_string")
        m["a"] = "b"
        assert m == {"a": "b"}

    def test_proto_module_shared(self, schema):
        """Test that the facade and its proto module share handles."""
        assert schema.package("skycfg") == schema.proto.package("skycfg")
