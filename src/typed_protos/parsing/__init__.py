"""Parsing module for the schema language."""

from typed_protos.parsing.schema_parser import SchemaParser
from typed_protos.parsing.schema_lexer import SchemaLexer

__all__ = [
    "SchemaLexer",
    "SchemaParser",
]
