"""Resolution of dotted names to package, message and enum handles.

Handles form a closed set of variants tagged by :class:`HandleKind`.
Packages and message types are namespaces: they resolve child names and
list their children. Enum types are leaves: attribute access yields one of
their declared values, and any other name is a :class:`NotAttributeError`
rather than a :class:`NotFoundError`.

Every public attribute name of a handle belongs to the schema. Handle state
lives in underscore attributes and is read through the module-level
accessors (:func:`full_name_of`, :func:`kind_of`, :func:`descriptor_of`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from typed_protos.errors import NotAttributeError, NotFoundError
from typed_protos.mapping import TypedMap
from typed_protos.message import EnumValue, Message
from typed_protos.repeated import TypedList
from typed_protos.types import (
    DescriptorKind,
    EnumDescriptor,
    FieldDescriptor,
    MessageDescriptor,
    SchemaRegistry,
    join_name,
)


class HandleKind(Enum):
    PACKAGE = "Package"
    MESSAGE_TYPE = "MessageType"
    ENUM_TYPE = "EnumType"


class TypeHandle:
    """Base class for handles. Identity is the kind plus the full name."""

    _kind: HandleKind

    def __init__(self, registry: SchemaRegistry, full_name: str) -> None:
        self._registry = registry
        self._full_name = full_name

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return resolve(self, name)

    def __dir__(self) -> list[str]:
        return children(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeHandle):
            return NotImplemented
        return self._kind is other._kind and self._full_name == other._full_name

    def __hash__(self) -> int:
        return hash((self._kind, self._full_name))

    def __repr__(self) -> str:
        return f'<proto.{self._kind.value} "{self._full_name}">'


class Package(TypeHandle):
    """A package scope, e.g. ``proto.package("skycfg.test_proto")``."""

    _kind = HandleKind.PACKAGE


class MessageType(TypeHandle):
    """A message type. Calling it builds a :class:`Message`."""

    _kind = HandleKind.MESSAGE_TYPE

    def __init__(self, registry: SchemaRegistry, descriptor: MessageDescriptor) -> None:
        super().__init__(registry, descriptor.full_name)
        self._descriptor = descriptor

    def __call__(self, /, **fields: Any) -> Message:
        return Message(self._descriptor, **fields)


class EnumType(TypeHandle):
    """An enum type. Its attributes are its declared values."""

    _kind = HandleKind.ENUM_TYPE

    def __init__(self, registry: SchemaRegistry, descriptor: EnumDescriptor) -> None:
        super().__init__(registry, descriptor.full_name)
        self._descriptor = descriptor


def full_name_of(handle: TypeHandle) -> str:
    """Return the fully qualified dotted name of a handle."""
    return handle._full_name


def kind_of(handle: TypeHandle) -> HandleKind:
    return handle._kind


def descriptor_of(handle: MessageType | EnumType) -> MessageDescriptor | EnumDescriptor:
    """Return the descriptor behind a message or enum type handle.

    Raises:
        TypeError: If ``handle`` is a package.
    """
    if not isinstance(handle, (MessageType, EnumType)):
        raise TypeError(f"{handle!r} has no descriptor")
    return handle._descriptor


def _container_field(message_type: MessageType, name: str, kind: DescriptorKind) -> FieldDescriptor:
    if not isinstance(message_type, MessageType):
        raise TypeError(f"{message_type!r} is not a message type")
    f = message_type._descriptor.get_field(name)
    if f is None:
        raise NotAttributeError(message_type._full_name, name)
    if f.type_def.kind is not kind:
        raise TypeError(
            f'field "{name}" of {message_type._full_name} has type "{f.type_def.type_name}", '
            f"not a {kind.value} field"
        )
    return f


def new_list(message_type: MessageType, field_name: str) -> TypedList:
    """Return an empty typed list for the repeated field ``field_name``."""
    f = _container_field(message_type, field_name, DescriptorKind.LIST)
    return TypedList(f.type_def.element)


def new_map(message_type: MessageType, field_name: str) -> TypedMap:
    """Return an empty typed map for the map field ``field_name``."""
    f = _container_field(message_type, field_name, DescriptorKind.MAP)
    return TypedMap(f.type_def.key, f.type_def.value)


def handle_for(
    registry: SchemaRegistry, descriptor: MessageDescriptor | EnumDescriptor
) -> MessageType | EnumType:
    """Wrap a message or enum descriptor in its handle."""
    if descriptor.kind is DescriptorKind.MESSAGE:
        return MessageType(registry, descriptor)
    if descriptor.kind is DescriptorKind.ENUM:
        return EnumType(registry, descriptor)
    raise TypeError(f"No handle for {descriptor.kind.value} descriptors")


def _resolve_in_package(scope: Package, name: str) -> Package | MessageType | EnumType:
    full_name = join_name(scope._full_name, name)
    registry = scope._registry
    if registry.has_package(full_name):
        return Package(registry, full_name)
    descriptor = registry.lookup_top_level(full_name)
    if descriptor is None:
        raise NotFoundError(full_name)
    return handle_for(registry, descriptor)


def _resolve_in_message(scope: MessageType, name: str) -> MessageType | EnumType:
    child = scope._registry.children_of(scope._descriptor).get(name)
    if child is None:
        raise NotFoundError(join_name(scope._full_name, name))
    return handle_for(scope._registry, child)


def _resolve_in_enum(scope: EnumType, name: str) -> EnumValue:
    value = scope._descriptor.get_value(name)
    if value is None:
        raise NotAttributeError(f"proto.{scope._kind.value}", name)
    return EnumValue(scope._descriptor, value)


_RESOLVERS: dict[HandleKind, Callable[[Any, str], Any]] = {
    HandleKind.PACKAGE: _resolve_in_package,
    HandleKind.MESSAGE_TYPE: _resolve_in_message,
    HandleKind.ENUM_TYPE: _resolve_in_enum,
}


def resolve(scope: TypeHandle, name: str) -> Any:
    """Resolve ``name`` within ``scope``.

    Packages search nested packages, then top-level types; message types
    search their nested types; enum types return the named value.

    Raises:
        NotFoundError: A package or message scope has no such child. The
            error carries the full dotted path that was attempted.
        NotAttributeError: An enum type has no value with that name.
    """
    return _RESOLVERS[scope._kind](scope, name)


_CHILD_LISTERS: dict[HandleKind, Callable[[Any], list[str]]] = {
    HandleKind.PACKAGE: lambda s: s._registry.top_level_names(s._full_name),
    HandleKind.MESSAGE_TYPE: lambda s: list(s._registry.children_of(s._descriptor)),
    HandleKind.ENUM_TYPE: lambda s: s._registry.enum_values_of(s._descriptor),
}


def children(scope: TypeHandle) -> list[str]:
    """Return the sorted names of the types (or enum values) in ``scope``."""
    return sorted(_CHILD_LISTERS[scope._kind](scope))


class ProtoModule:
    """The ``proto`` module exposed to scripts."""

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry

    def package(self, name: str) -> Package:
        """Return the package handle for the dotted ``name``."""
        return Package(self._registry, name)

    def __dir__(self) -> list[str]:
        return ["package"]

    def __repr__(self) -> str:
        return '<module "proto">'
