"""Message instances and enum values bound to schema types."""

from __future__ import annotations

from typing import Any

from typed_protos.convert import convert, value_repr
from typed_protos.errors import NotAttributeError
from typed_protos.types import (
    DescriptorKind,
    EnumDescriptor,
    EnumValueDescriptor,
    FieldDescriptor,
    MessageDescriptor,
    ScalarKind,
)

# Values read from unset scalar fields
_ZERO_VALUES: dict[ScalarKind, Any] = {
    ScalarKind.STRING: "",
    ScalarKind.INT: 0,
    ScalarKind.BOOL: False,
    ScalarKind.FLOAT: 0.0,
    ScalarKind.BYTES: b"",
}


class EnumValue:
    """A named value of an enum type."""

    __slots__ = ("_descriptor", "_value")

    def __init__(self, descriptor: EnumDescriptor, value: EnumValueDescriptor) -> None:
        self._descriptor = descriptor
        self._value = value

    @property
    def descriptor(self) -> EnumDescriptor:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._value.name

    @property
    def number(self) -> int:
        return self._value.number

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumValue):
            return NotImplemented
        return (
            self._descriptor.full_name == other._descriptor.full_name
            and self.name == other.name
        )

    def __hash__(self) -> int:
        return hash((self._descriptor.full_name, self.name))

    def __repr__(self) -> str:
        return f"<{self._descriptor.full_name} {self.name}={self.number}>"


def default_enum_value(descriptor: EnumDescriptor) -> EnumValue | None:
    """Return the first declared value of an enum, used for unset fields."""
    if not descriptor.values:
        return None
    return EnumValue(descriptor, descriptor.values[0])


class Message:
    """An instance of a message type.

    Field reads fall back to the field's zero value; repeated and map fields
    materialize an empty typed container on first read, owned by this
    message. Every assignment is converted against the field's descriptor.
    """

    def __init__(self, descriptor: MessageDescriptor, /, **fields: Any) -> None:
        object.__setattr__(self, "_descriptor", descriptor)
        object.__setattr__(self, "_fields", {})
        for name, value in fields.items():
            setattr(self, name, value)

    @property
    def DESCRIPTOR(self) -> MessageDescriptor:
        return self._descriptor

    def _field(self, name: str) -> FieldDescriptor:
        f = self._descriptor.get_field(name)
        if f is None:
            raise NotAttributeError(self._descriptor.full_name, name)
        return f

    def _current(self, f: FieldDescriptor) -> Any:
        """Return a field's value without materializing anything."""
        if f.name in self._fields:
            return self._fields[f.name]
        type_def = f.type_def
        kind = type_def.kind
        if kind is DescriptorKind.SCALAR:
            return _ZERO_VALUES[type_def.scalar]
        if kind is DescriptorKind.ENUM:
            return default_enum_value(type_def)
        if kind is DescriptorKind.LIST:
            return []
        if kind is DescriptorKind.MAP:
            return {}
        return None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        f = self._field(name)
        if name in self._fields:
            return self._fields[name]
        if f.type_def.kind in (DescriptorKind.LIST, DescriptorKind.MAP):
            # Stored so that in-place mutation of the container persists.
            self._fields[name] = convert(self._current(f), f.type_def)
            return self._fields[name]
        return self._current(f)

    def __setattr__(self, name: str, value: Any) -> None:
        f = self._field(name)
        if value is None:
            self._fields.pop(name, None)
            return
        self._fields[name] = convert(value, f.type_def)

    def __delattr__(self, name: str) -> None:
        self._field(name)
        self._fields.pop(name, None)

    def __dir__(self) -> list[str]:
        return sorted(f.name for f in self._descriptor.fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        if self._descriptor.full_name != other._descriptor.full_name:
            return False
        return all(self._current(f) == other._current(f) for f in self._descriptor.fields)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [self._descriptor.full_name]
        for f in self._descriptor.fields:
            if f.name not in self._fields:
                continue
            value = self._fields[f.name]
            if f.type_def.kind in (DescriptorKind.LIST, DescriptorKind.MAP) and not value:
                continue
            parts.append(f"{f.name}:{value_repr(value)}")
        return "<" + " ".join(parts) + ">"
