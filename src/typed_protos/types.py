"""Descriptor definitions and the schema registry for typed_protos."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class DescriptorKind(Enum):
    """Tag for the closed set of descriptor variants."""

    SCALAR = "scalar"
    MESSAGE = "message"
    ENUM = "enum"
    LIST = "list"
    MAP = "map"


class ScalarKind(Enum):
    """Runtime value kinds a scalar field can hold."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    FLOAT = "float"
    BYTES = "bytes"


def _int_range(bits: int, signed: bool) -> tuple[int, int]:
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


@dataclass(frozen=True, eq=False)
class Descriptor:
    """Base class for all descriptors."""

    @property
    def kind(self) -> DescriptorKind:
        raise NotImplementedError

    @property
    def type_name(self) -> str:
        """Return the declared type name used in conversion errors."""
        raise NotImplementedError

    @property
    def is_scalar(self) -> bool:
        return self.kind is DescriptorKind.SCALAR

    @property
    def is_message(self) -> bool:
        return self.kind is DescriptorKind.MESSAGE

    @property
    def is_enum(self) -> bool:
        return self.kind is DescriptorKind.ENUM

    @property
    def is_list(self) -> bool:
        return self.kind is DescriptorKind.LIST

    @property
    def is_map(self) -> bool:
        return self.kind is DescriptorKind.MAP


@dataclass(frozen=True)
class ScalarDescriptor(Descriptor):
    """A scalar type such as ``string`` or ``int32``.

    ``name`` is the schema spelling; ``scalar`` is the runtime kind it maps to.
    Integer scalars carry the inclusive range of their declared width.
    """

    name: str
    scalar: ScalarKind
    min_value: int | None = None
    max_value: int | None = None

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.SCALAR

    @property
    def type_name(self) -> str:
        return self.name


# Schema spellings of the scalar types.
SCALAR_TYPES: dict[str, ScalarDescriptor] = {
    "string": ScalarDescriptor("string", ScalarKind.STRING),
    "bytes": ScalarDescriptor("bytes", ScalarKind.BYTES),
    "bool": ScalarDescriptor("bool", ScalarKind.BOOL),
    "double": ScalarDescriptor("double", ScalarKind.FLOAT),
    "float": ScalarDescriptor("float", ScalarKind.FLOAT),
}
for _name, _bits, _signed in [
    ("int32", 32, True),
    ("int64", 64, True),
    ("uint32", 32, False),
    ("uint64", 64, False),
    ("sint32", 32, True),
    ("sint64", 64, True),
    ("fixed32", 32, False),
    ("fixed64", 64, False),
    ("sfixed32", 32, True),
    ("sfixed64", 64, True),
]:
    _lo, _hi = _int_range(_bits, _signed)
    SCALAR_TYPES[_name] = ScalarDescriptor(_name, ScalarKind.INT, _lo, _hi)

# Scalar kinds allowed as map keys.
MAP_KEY_KINDS = frozenset({ScalarKind.STRING, ScalarKind.INT, ScalarKind.BOOL})


def scalar(name: str) -> ScalarDescriptor:
    """Look up a scalar descriptor by its schema spelling."""
    try:
        return SCALAR_TYPES[name]
    except KeyError:
        raise KeyError(f"Unknown scalar type '{name}'") from None


@dataclass(frozen=True)
class ListDescriptor(Descriptor):
    """Descriptor of a repeated field: every element has ``element`` type."""

    element: Descriptor

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.LIST

    @property
    def type_name(self) -> str:
        return f"list<{self.element.type_name}>"


@dataclass(frozen=True)
class MapDescriptor(Descriptor):
    """Descriptor of a map field."""

    key: Descriptor
    value: Descriptor

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.MAP

    @property
    def type_name(self) -> str:
        return f"map<{self.key.type_name}, {self.value.type_name}>"


@dataclass(frozen=True)
class FieldDescriptor:
    """A field declared within a message."""

    name: str
    number: int
    type_def: Descriptor


@dataclass(frozen=True)
class EnumValueDescriptor:
    """A single named value of an enum."""

    name: str
    number: int


# Message and enum descriptors are compared by identity: the loader creates
# each one exactly once and every reference shares it.


@dataclass(frozen=True, eq=False)
class MessageDescriptor(Descriptor):
    """A message type, possibly nested inside another message."""

    full_name: str
    package: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    nested: dict[str, Descriptor] = field(default_factory=dict)

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.MESSAGE

    @property
    def type_name(self) -> str:
        return self.full_name

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __repr__(self) -> str:
        return f"MessageDescriptor({self.full_name!r})"


@dataclass(frozen=True, eq=False)
class EnumDescriptor(Descriptor):
    """An enum type with its values in declaration order."""

    full_name: str
    package: str
    values: list[EnumValueDescriptor] = field(default_factory=list)

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.ENUM

    @property
    def type_name(self) -> str:
        return self.full_name

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]

    def get_value(self, name: str) -> EnumValueDescriptor | None:
        for v in self.values:
            if v.name == name:
                return v
        return None

    def get_value_by_number(self, number: int) -> EnumValueDescriptor | None:
        for v in self.values:
            if v.number == number:
                return v
        return None

    def __repr__(self) -> str:
        return f"EnumDescriptor({self.full_name!r})"


def join_name(prefix: str, name: str) -> str:
    """Join a scope prefix and a name into a dotted path."""
    return f"{prefix}.{name}" if prefix else name


class SchemaRegistry:
    """Registry of all message and enum descriptors, keyed by full name.

    Populated once by the loader, then frozen. A frozen registry is never
    mutated, so it can be shared freely between resolvers.
    """

    def __init__(self) -> None:
        self._top_level: dict[str, MessageDescriptor | EnumDescriptor] = {}
        self._all: dict[str, MessageDescriptor | EnumDescriptor] = {}
        self._packages: set[str] = set()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    def _check_writable(self) -> None:
        if self._frozen:
            raise RuntimeError("Schema registry is frozen")

    def add_package(self, name: str) -> None:
        """Record a package name (and its parents) as known."""
        self._check_writable()
        parts = name.split(".") if name else []
        for i in range(1, len(parts) + 1):
            self._packages.add(".".join(parts[:i]))

    def register(self, descriptor: MessageDescriptor | EnumDescriptor) -> None:
        """Register a top-level message or enum descriptor."""
        self._check_writable()
        name = descriptor.full_name
        if name in self._all:
            raise ValueError(f"Type '{name}' is already defined")
        self.add_package(descriptor.package)
        self._top_level[name] = descriptor
        self._all[name] = descriptor
        logger.debug("Registered %s %s", descriptor.kind.value, name)

    def register_nested(
        self,
        parent: MessageDescriptor,
        descriptor: MessageDescriptor | EnumDescriptor,
    ) -> None:
        """Register a message or enum declared inside ``parent``."""
        self._check_writable()
        name = descriptor.full_name
        if name in self._all:
            raise ValueError(f"Type '{name}' is already defined")
        parent.nested[descriptor.name] = descriptor
        self._all[name] = descriptor
        logger.debug("Registered nested %s %s", descriptor.kind.value, name)

    def lookup_top_level(self, full_name: str) -> MessageDescriptor | EnumDescriptor | None:
        """Get a top-level message or enum by full name."""
        return self._top_level.get(full_name)

    def lookup(self, full_name: str) -> MessageDescriptor | EnumDescriptor | None:
        """Get a message or enum by full name, at any nesting depth."""
        return self._all.get(full_name)

    def get_or_raise(self, full_name: str) -> MessageDescriptor | EnumDescriptor:
        descriptor = self._all.get(full_name)
        if descriptor is None:
            raise KeyError(f"Type '{full_name}' not found")
        return descriptor

    def children_of(self, descriptor: MessageDescriptor) -> dict[str, Descriptor]:
        """Return the nested messages and enums of a message, by short name."""
        return dict(descriptor.nested)

    def enum_values_of(self, descriptor: EnumDescriptor) -> list[str]:
        """Return the value names of an enum in declaration order."""
        return [v.name for v in descriptor.values]

    def has_package(self, name: str) -> bool:
        return name in self._packages

    def top_level_names(self, package: str) -> list[str]:
        """Return short names of the types declared directly in ``package``."""
        return [d.name for d in self._top_level.values() if d.package == package]

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._all.keys())

    def __contains__(self, full_name: str) -> bool:
        return full_name in self._all
