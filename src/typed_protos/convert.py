"""Conversion of dynamic values to schema-declared types.

Every mutation of a typed container, and every message field assignment,
goes through :func:`convert`. It either returns the value to store or raises
:class:`~typed_protos.errors.ConversionError`.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from typed_protos.errors import ConversionError
from typed_protos.types import (
    Descriptor,
    DescriptorKind,
    EnumDescriptor,
    ListDescriptor,
    MapDescriptor,
    MessageDescriptor,
    ScalarDescriptor,
    ScalarKind,
)

# Host type names for builtin values
_TYPE_NAMES: dict[type, str] = {
    str: "string",
    bool: "bool",
    int: "int",
    float: "float",
    bytes: "bytes",
    type(None): "NoneType",
    list: "list",
    tuple: "tuple",
    dict: "dict",
}


def type_name(value: Any) -> str:
    """Return the dynamic type name of ``value`` as shown in errors."""
    name = _TYPE_NAMES.get(type(value))
    if name is not None:
        return name

    from typed_protos.mapping import TypedMap
    from typed_protos.message import EnumValue, Message
    from typed_protos.namespace import TypeHandle, kind_of
    from typed_protos.repeated import TypedList

    if isinstance(value, Message):
        return value.DESCRIPTOR.full_name
    if isinstance(value, EnumValue):
        return value.descriptor.full_name
    if isinstance(value, TypedList):
        return "list"
    if isinstance(value, TypedMap):
        return "dict"
    if isinstance(value, TypeHandle):
        return f"proto.{kind_of(value).value}"
    return type(value).__name__


def _bytes_repr(value: bytes) -> str:
    parts = []
    for byte in value:
        ch = chr(byte)
        if ch in '"\\':
            parts.append("\\" + ch)
        elif 0x20 <= byte < 0x7F:
            parts.append(ch)
        else:
            parts.append(f"\\x{byte:02x}")
    return 'b"' + "".join(parts) + '"'


def value_repr(value: Any) -> str:
    """Return the literal representation of ``value``.

    Strings are double-quoted; containers render their elements recursively.
    """
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, bytes):
        return _bytes_repr(value)
    if value is None or isinstance(value, (bool, int, float)):
        return repr(value)
    if isinstance(value, list):
        return "[" + ", ".join(value_repr(v) for v in value) + "]"
    if isinstance(value, tuple):
        if len(value) == 1:
            return "(" + value_repr(value[0]) + ",)"
        return "(" + ", ".join(value_repr(v) for v in value) + ")"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{value_repr(k)}: {value_repr(v)}" for k, v in value.items()) + "}"
    return str(value)


def _mismatch(value: Any, declared: str) -> ConversionError:
    return ConversionError(value_repr(value), type_name(value), declared)


def _convert_scalar(value: Any, descriptor: ScalarDescriptor) -> Any:
    kind = descriptor.scalar
    if kind is ScalarKind.STRING:
        if isinstance(value, str):
            return value
    elif kind is ScalarKind.BYTES:
        if isinstance(value, bytes):
            return value
    elif kind is ScalarKind.BOOL:
        if isinstance(value, bool):
            return value
    elif kind is ScalarKind.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            if descriptor.min_value is not None and value < descriptor.min_value:
                raise _mismatch(value, descriptor.type_name)
            if descriptor.max_value is not None and value > descriptor.max_value:
                raise _mismatch(value, descriptor.type_name)
            return value
    elif kind is ScalarKind.FLOAT:
        if isinstance(value, float):
            return value
        # The one widening rule: int literals are accepted for float fields.
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
    raise _mismatch(value, descriptor.type_name)


def _convert_message(value: Any, descriptor: MessageDescriptor) -> Any:
    from typed_protos.message import Message

    if isinstance(value, Message) and value.DESCRIPTOR.full_name == descriptor.full_name:
        return value
    raise _mismatch(value, descriptor.type_name)


def _convert_enum(value: Any, descriptor: EnumDescriptor) -> Any:
    from typed_protos.message import EnumValue

    if isinstance(value, EnumValue) and value.descriptor.full_name == descriptor.full_name:
        return value
    raise _mismatch(value, descriptor.type_name)


def _convert_list(value: Any, descriptor: ListDescriptor) -> Any:
    from typed_protos.repeated import TypedList

    if not isinstance(value, (list, tuple, TypedList)):
        raise _mismatch(value, descriptor.type_name)
    return TypedList(descriptor.element, value)


def _convert_map(value: Any, descriptor: MapDescriptor) -> Any:
    from typed_protos.mapping import TypedMap

    if not isinstance(value, (dict, TypedMap)):
        raise _mismatch(value, descriptor.type_name)
    return TypedMap(descriptor.key, descriptor.value, value.items())


_CONVERTERS: dict[DescriptorKind, Callable[[Any, Any], Any]] = {
    DescriptorKind.SCALAR: _convert_scalar,
    DescriptorKind.MESSAGE: _convert_message,
    DescriptorKind.ENUM: _convert_enum,
    DescriptorKind.LIST: _convert_list,
    DescriptorKind.MAP: _convert_map,
}


def convert(value: Any, descriptor: Descriptor) -> Any:
    """Check ``value`` against ``descriptor`` and return the value to store.

    Lists and maps are converted element by element into fresh typed
    containers, so the result never aliases the caller's container.

    Raises:
        ConversionError: If the value does not match the declared type.
    """
    return _CONVERTERS[descriptor.kind](value, descriptor)
