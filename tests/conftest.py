"""Shared fixtures for typed_protos tests."""

import pytest

from typed_protos import Schema

TEST_SCHEMA = """
syntax = "proto3";

package skycfg.test_proto;

message MessageV2 {
  optional string f_string = 1;

  message NestedMessage {
    optional string f_string = 1;
  }

  enum NestedEnum {
    NESTED_ENUM_A = 0;
    NESTED_ENUM_B = 1;
  }
}

message MessageV3 {
  string f_string = 1;
  int32 f_int32 = 2;
  int64 f_int64 = 3;
  uint32 f_uint32 = 4;
  double f_double = 5;
  bool f_bool = 6;
  bytes f_bytes = 7;
  NestedMessage f_submsg = 8;
  ToplevelEnumV3 f_toplevel_enum = 9;
  NestedEnum f_nested_enum = 10;

  repeated string r_string = 11;
  repeated double r_double = 12;
  repeated int32 r_int32 = 13;
  repeated NestedMessage r_submsg = 14;

  map<string, string> map_string = 15;
  map<int32, NestedMessage> map_submsg = 16;

  message NestedMessage {
    string f_string = 1;
  }

  enum NestedEnum {
    NESTED_ENUM_A = 0;
    NESTED_ENUM_B = 1;
  }
}

enum ToplevelEnumV2 {
  TOPLEVEL_ENUM_V2_A = 0;
  TOPLEVEL_ENUM_V2_B = 1;
}

enum ToplevelEnumV3 {
  TOPLEVEL_ENUM_V3_A = 0;
  TOPLEVEL_ENUM_V3_B = 1;
}
"""


@pytest.fixture
def schema():
    """Schema loaded from the test proto definitions."""
    return Schema.parse(TEST_SCHEMA)


@pytest.fixture
def pb(schema):
    """Package handle for skycfg.test_proto."""
    return schema.package("skycfg.test_proto")


@pytest.fixture
def schema_text():
    """Source text of the test proto definitions."""
    return TEST_SCHEMA
