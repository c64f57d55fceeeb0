"""Typed Protos - schema-checked messages, lists and maps for dynamic code."""

from typed_protos.convert import convert, type_name, value_repr
from typed_protos.errors import (
    ConversionError,
    NotAttributeError,
    NotFoundError,
    ProtoError,
)
from typed_protos.mapping import TypedMap
from typed_protos.message import EnumValue, Message
from typed_protos.namespace import (
    EnumType,
    HandleKind,
    MessageType,
    Package,
    ProtoModule,
    children,
    descriptor_of,
    full_name_of,
    kind_of,
    new_list,
    new_map,
    resolve,
)
from typed_protos.parsing import SchemaParser
from typed_protos.repeated import TypedList
from typed_protos.schema import Schema
from typed_protos.types import (
    Descriptor,
    DescriptorKind,
    EnumDescriptor,
    FieldDescriptor,
    ListDescriptor,
    MapDescriptor,
    MessageDescriptor,
    ScalarDescriptor,
    ScalarKind,
    SchemaRegistry,
)

__all__ = [
    # Main API
    "Schema",
    "SchemaParser",
    "ProtoModule",
    # Resolution
    "Package",
    "MessageType",
    "EnumType",
    "HandleKind",
    "resolve",
    "children",
    "full_name_of",
    "kind_of",
    "descriptor_of",
    "new_list",
    "new_map",
    # Values and containers
    "Message",
    "EnumValue",
    "TypedList",
    "TypedMap",
    "convert",
    "type_name",
    "value_repr",
    # Errors
    "ProtoError",
    "NotFoundError",
    "NotAttributeError",
    "ConversionError",
    # Descriptors
    "Descriptor",
    "DescriptorKind",
    "ScalarKind",
    "ScalarDescriptor",
    "MessageDescriptor",
    "EnumDescriptor",
    "FieldDescriptor",
    "ListDescriptor",
    "MapDescriptor",
    "SchemaRegistry",
]

__version__ = "0.1.0"
