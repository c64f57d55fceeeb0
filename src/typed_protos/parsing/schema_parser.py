"""Parser for the schema language."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from typed_protos.parsing.schema_lexer import SchemaLexer
from typed_protos.types import (
    MAP_KEY_KINDS,
    SCALAR_TYPES,
    Descriptor,
    EnumDescriptor,
    EnumValueDescriptor,
    FieldDescriptor,
    ListDescriptor,
    MapDescriptor,
    MessageDescriptor,
    SchemaRegistry,
    join_name,
)

logger = logging.getLogger(__name__)

SUPPORTED_SYNTAX = ("proto2", "proto3")


@dataclass
class SyntaxSpec:
    """A ``syntax = "..."`` declaration."""

    value: str


@dataclass
class PackageSpec:
    """A ``package a.b.c;`` declaration."""

    name: str
    lineno: int = 0


@dataclass
class FieldSpec:
    """Specification for a field before type resolution.

    ``key_type`` is set only for map fields.
    """

    name: str
    number: int
    type_name: str
    label: str | None = None
    key_type: str | None = None
    lineno: int = 0


@dataclass
class EnumSpec:
    """Specification for an enum before registration."""

    name: str
    values: list[tuple[str, int]]
    lineno: int = 0


@dataclass
class MessageSpec:
    """Specification for a message before registration."""

    name: str
    fields: list[FieldSpec] = field(default_factory=list)
    messages: list[MessageSpec] = field(default_factory=list)
    enums: list[EnumSpec] = field(default_factory=list)
    lineno: int = 0


class SchemaParser:
    """Parser for the schema language.

    Parsing produces specs, which are then resolved into descriptors in two
    phases: every message and enum is registered first, then field types
    are resolved, so forward and self references work.
    """

    tokens = SchemaLexer.tokens
    start = "schema"

    def __init__(self) -> None:
        self.lexer = SchemaLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.registry: SchemaRegistry = SchemaRegistry()

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : statement_list"""
        p[0] = p[1]

    def p_schema_empty(self, p: yacc.YaccProduction) -> None:
        """schema : empty"""
        p[0] = []

    def p_statement_list_single(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement"""
        p[0] = [p[1]] if p[1] is not None else []

    def p_statement_list_multiple(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement_list statement"""
        p[0] = p[1]
        if p[2] is not None:
            p[0].append(p[2])

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : syntax_decl
                     | package_decl
                     | message_def
                     | enum_def"""
        p[0] = p[1]

    def p_statement_semi(self, p: yacc.YaccProduction) -> None:
        """statement : SEMI"""
        p[0] = None

    def p_syntax_decl(self, p: yacc.YaccProduction) -> None:
        """syntax_decl : SYNTAX EQUALS STRING SEMI"""
        p[0] = SyntaxSpec(value=p[3])

    def p_package_decl(self, p: yacc.YaccProduction) -> None:
        """package_decl : PACKAGE IDENTIFIER SEMI"""
        p[0] = PackageSpec(name=p[2], lineno=p.lineno(2))

    def p_message_def(self, p: yacc.YaccProduction) -> None:
        """message_def : MESSAGE IDENTIFIER LBRACE message_body RBRACE"""
        spec = MessageSpec(name=p[2], lineno=p.lineno(2))
        for item in p[4]:
            if isinstance(item, FieldSpec):
                spec.fields.append(item)
            elif isinstance(item, MessageSpec):
                spec.messages.append(item)
            elif isinstance(item, EnumSpec):
                spec.enums.append(item)
        p[0] = spec

    def p_message_body(self, p: yacc.YaccProduction) -> None:
        """message_body : message_body message_item"""
        p[0] = p[1]
        if p[2] is not None:
            p[0].append(p[2])

    def p_message_body_empty(self, p: yacc.YaccProduction) -> None:
        """message_body : empty"""
        p[0] = []

    def p_message_item(self, p: yacc.YaccProduction) -> None:
        """message_item : field_def
                        | map_field_def
                        | message_def
                        | enum_def"""
        p[0] = p[1]

    def p_message_item_semi(self, p: yacc.YaccProduction) -> None:
        """message_item : SEMI"""
        p[0] = None

    def p_field_def(self, p: yacc.YaccProduction) -> None:
        """field_def : IDENTIFIER IDENTIFIER EQUALS INTEGER SEMI"""
        p[0] = FieldSpec(name=p[2], number=p[4], type_name=p[1], lineno=p.lineno(2))

    def p_field_def_labeled(self, p: yacc.YaccProduction) -> None:
        """field_def : field_label IDENTIFIER IDENTIFIER EQUALS INTEGER SEMI"""
        p[0] = FieldSpec(
            name=p[3], number=p[5], type_name=p[2], label=p[1], lineno=p.lineno(3)
        )

    def p_field_label(self, p: yacc.YaccProduction) -> None:
        """field_label : REPEATED
                       | OPTIONAL
                       | REQUIRED"""
        p[0] = p[1]

    def p_map_field_def(self, p: yacc.YaccProduction) -> None:
        """map_field_def : MAP LT IDENTIFIER COMMA IDENTIFIER GT IDENTIFIER EQUALS INTEGER SEMI"""
        p[0] = FieldSpec(
            name=p[7], number=p[9], type_name=p[5], key_type=p[3], lineno=p.lineno(7)
        )

    def p_enum_def(self, p: yacc.YaccProduction) -> None:
        """enum_def : ENUM IDENTIFIER LBRACE enum_body RBRACE"""
        p[0] = EnumSpec(name=p[2], values=p[4], lineno=p.lineno(2))

    def p_enum_body(self, p: yacc.YaccProduction) -> None:
        """enum_body : enum_body enum_item"""
        p[0] = p[1]
        if p[2] is not None:
            p[0].append(p[2])

    def p_enum_body_empty(self, p: yacc.YaccProduction) -> None:
        """enum_body : empty"""
        p[0] = []

    def p_enum_item(self, p: yacc.YaccProduction) -> None:
        """enum_item : IDENTIFIER EQUALS INTEGER SEMI"""
        p[0] = (p[1], p[3])

    def p_enum_item_semi(self, p: yacc.YaccProduction) -> None:
        """enum_item : SEMI"""
        p[0] = None

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse_specs(self, data: str) -> list[Any]:
        """Parse schema text into unresolved specs."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        return specs or []

    def parse(self, data: str, registry: SchemaRegistry | None = None) -> SchemaRegistry:
        """Parse schema text and register its types.

        Args:
            data: Schema source text.
            registry: Registry to add the types to. Types already registered
                there can be referenced. A new registry is created if omitted.

        Returns:
            The populated registry.
        """
        self.registry = registry if registry is not None else SchemaRegistry()
        specs = self.parse_specs(data)
        logger.debug("Parsed %d top-level statements", len(specs))
        self._resolve_specs(specs)
        return self.registry

    def _resolve_specs(self, specs: list[Any]) -> None:
        """Register every message and enum, then resolve field types."""
        package = ""
        seen_package = False
        pending: list[tuple[MessageDescriptor, MessageSpec]] = []

        # Phase 1: register descriptors with empty field lists
        for spec in specs:
            if isinstance(spec, SyntaxSpec):
                if spec.value not in SUPPORTED_SYNTAX:
                    raise ValueError(f"Unsupported syntax '{spec.value}'")
            elif isinstance(spec, PackageSpec):
                if seen_package:
                    raise ValueError(
                        f"Multiple package declarations (line {spec.lineno})"
                    )
                if spec.name.startswith("."):
                    raise ValueError(f"Invalid package name '{spec.name}'")
                seen_package = True
                package = spec.name
                self.registry.add_package(package)
            elif isinstance(spec, MessageSpec):
                self._declare_message(spec, package, None, pending)
            elif isinstance(spec, EnumSpec):
                self._declare_enum(spec, package, None)

        # Phase 2: resolve field types
        for descriptor, spec in pending:
            self._resolve_fields(descriptor, spec)

    def _check_simple_name(self, name: str, lineno: int) -> None:
        if "." in name:
            raise ValueError(f"Invalid type name '{name}' (line {lineno})")

    def _register(
        self,
        descriptor: MessageDescriptor | EnumDescriptor,
        parent: MessageDescriptor | None,
    ) -> None:
        if parent is None:
            self.registry.register(descriptor)
        else:
            self.registry.register_nested(parent, descriptor)

    def _declare_message(
        self,
        spec: MessageSpec,
        package: str,
        parent: MessageDescriptor | None,
        pending: list[tuple[MessageDescriptor, MessageSpec]],
    ) -> None:
        self._check_simple_name(spec.name, spec.lineno)
        scope = parent.full_name if parent is not None else package
        descriptor = MessageDescriptor(full_name=join_name(scope, spec.name), package=package)
        self._register(descriptor, parent)
        pending.append((descriptor, spec))
        for child in spec.messages:
            self._declare_message(child, package, descriptor, pending)
        for child_enum in spec.enums:
            self._declare_enum(child_enum, package, descriptor)

    def _declare_enum(
        self,
        spec: EnumSpec,
        package: str,
        parent: MessageDescriptor | None,
    ) -> None:
        self._check_simple_name(spec.name, spec.lineno)
        scope = parent.full_name if parent is not None else package
        full_name = join_name(scope, spec.name)
        if not spec.values:
            raise ValueError(f"Enum '{full_name}' must declare at least one value")

        values: list[EnumValueDescriptor] = []
        names: set[str] = set()
        numbers: set[int] = set()
        for name, number in spec.values:
            if name in names:
                raise ValueError(f"Enum '{full_name}': value '{name}' is already defined")
            if number in numbers:
                raise ValueError(f"Enum '{full_name}': number {number} is already used")
            names.add(name)
            numbers.add(number)
            values.append(EnumValueDescriptor(name=name, number=number))

        self._register(EnumDescriptor(full_name=full_name, package=package, values=values), parent)

    def _resolve_fields(self, descriptor: MessageDescriptor, spec: MessageSpec) -> None:
        names: set[str] = set()
        numbers: set[int] = set()
        scope = descriptor.full_name
        for fspec in spec.fields:
            if fspec.name in names:
                raise ValueError(
                    f"Field '{fspec.name}' is already defined in '{scope}' (line {fspec.lineno})"
                )
            if fspec.number < 1 or fspec.number in numbers:
                raise ValueError(
                    f"Field '{fspec.name}' in '{scope}' has invalid or duplicate number "
                    f"{fspec.number} (line {fspec.lineno})"
                )
            names.add(fspec.name)
            numbers.add(fspec.number)

            type_def: Descriptor
            if fspec.key_type is not None:
                key = self._resolve_type(fspec.key_type, scope, fspec.lineno)
                if not key.is_scalar or key.scalar not in MAP_KEY_KINDS:
                    raise ValueError(
                        f"Invalid map key type '{fspec.key_type}' for field "
                        f"'{fspec.name}' in '{scope}'"
                    )
                value = self._resolve_type(fspec.type_name, scope, fspec.lineno)
                type_def = MapDescriptor(key=key, value=value)
            else:
                type_def = self._resolve_type(fspec.type_name, scope, fspec.lineno)
                if fspec.label == "repeated":
                    type_def = ListDescriptor(element=type_def)
            descriptor.fields.append(
                FieldDescriptor(name=fspec.name, number=fspec.number, type_def=type_def)
            )

    def _resolve_type(self, name: str, scope: str, lineno: int) -> Descriptor:
        """Resolve a type reference from ``scope``, innermost scope first."""
        if name in SCALAR_TYPES:
            return SCALAR_TYPES[name]
        if name.startswith("."):
            found = self.registry.lookup(name[1:])
            if found is not None:
                return found
        else:
            parts = scope.split(".") if scope else []
            while True:
                found = self.registry.lookup(join_name(".".join(parts), name))
                if found is not None:
                    return found
                if not parts:
                    break
                parts.pop()
        raise ValueError(f"Unknown type '{name}' referenced from '{scope}' (line {lineno})")
