"""Schema class tying a loaded registry to its script-facing handles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from typed_protos.errors import NotFoundError
from typed_protos.mapping import TypedMap
from typed_protos.message import Message
from typed_protos.namespace import (
    EnumType,
    MessageType,
    Package,
    ProtoModule,
    handle_for,
    new_list,
    new_map,
)
from typed_protos.parsing import SchemaParser
from typed_protos.repeated import TypedList
from typed_protos.types import SchemaRegistry

logger = logging.getLogger(__name__)


class Schema:
    """A frozen set of message and enum types."""

    def __init__(self, registry: SchemaRegistry) -> None:
        """Initialize a schema.

        Args:
            registry: Registry with all type definitions. It is frozen here
                and must not be modified afterwards.
        """
        registry.freeze()
        self.registry = registry
        self.proto = ProtoModule(registry)

    @classmethod
    def parse(cls, *sources: str) -> Schema:
        """Parse schema source texts into one schema.

        Later sources may reference types from earlier ones.

        Args:
            sources: Schema language texts.

        Returns:
            A new Schema instance.
        """
        parser = SchemaParser()
        registry = SchemaRegistry()
        for source in sources:
            parser.parse(source, registry)
        logger.info("Loaded %d schema source(s), %d types", len(sources), len(registry.list_types()))
        return cls(registry)

    @classmethod
    def load(cls, *paths: Path | str) -> Schema:
        """Load schema files into one schema, in the order given.

        Raises:
            FileNotFoundError: If a file does not exist.
        """
        sources = []
        for path in paths:
            path = Path(path)
            if not path.exists():
                raise FileNotFoundError(f"Schema file not found: {path}")
            logger.debug("Reading schema file %s", path)
            sources.append(path.read_text())
        return cls.parse(*sources)

    def package(self, name: str) -> Package:
        """Get the package handle for ``name``."""
        return self.proto.package(name)

    def get_type(self, full_name: str) -> MessageType | EnumType:
        """Get the handle of a message or enum by full name.

        Raises:
            NotFoundError: If no such type is registered.
        """
        descriptor = self.registry.lookup(full_name)
        if descriptor is None:
            raise NotFoundError(full_name)
        return handle_for(self.registry, descriptor)

    def new_message(self, full_name: str, /, **fields: Any) -> Message:
        """Create a message instance of the named type."""
        return self._message_type(full_name)(**fields)

    def new_list(self, message_name: str, field_name: str) -> TypedList:
        """Create an empty typed list for a repeated field."""
        return new_list(self._message_type(message_name), field_name)

    def new_map(self, message_name: str, field_name: str) -> TypedMap:
        """Create an empty typed map for a map field."""
        return new_map(self._message_type(message_name), field_name)

    def _message_type(self, full_name: str) -> MessageType:
        handle = self.get_type(full_name)
        if not isinstance(handle, MessageType):
            raise TypeError(f"{handle!r} is not a message type")
        return handle

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return self.registry.list_types()
