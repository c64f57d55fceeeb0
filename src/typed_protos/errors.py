"""Exceptions raised by typed_protos."""

from __future__ import annotations


class ProtoError(Exception):
    """Base class for typed_protos errors."""


class NotFoundError(ProtoError, AttributeError):
    """A package or message scope has no child with the requested name."""

    def __init__(self, full_name: str) -> None:
        super().__init__(f'Protobuf type "{full_name}" not found')
        self.full_name = full_name


class NotAttributeError(ProtoError, AttributeError):
    """An attribute was requested from a value that cannot have it."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"{owner} has no .{name} field or method")
        self.owner = owner
        self.attr = name


class ConversionError(ProtoError, TypeError):
    """A value does not match the type declared by the schema."""

    def __init__(self, value_repr: str, actual: str, declared: str) -> None:
        super().__init__(
            f'value {value_repr} (type "{actual}") can\'t be assigned to type "{declared}".'
        )
        self.value_repr = value_repr
        self.actual = actual
        self.declared = declared
