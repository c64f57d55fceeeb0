"""Lexer for the schema language."""

import ply.lex as lex


class SchemaLexer:
    """Lexer for tokenizing .proto-style schema text."""

    # Reserved keywords
    reserved = {
        "syntax": "SYNTAX",
        "package": "PACKAGE",
        "message": "MESSAGE",
        "enum": "ENUM",
        "map": "MAP",
        "repeated": "REPEATED",
        "optional": "OPTIONAL",
        "required": "REQUIRED",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "STRING",
        "LBRACE",
        "RBRACE",
        "LT",
        "GT",
        "COMMA",
        "SEMI",
        "EQUALS",
    ] + list(reserved.values())

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LT = r"<"
    t_GT = r">"
    t_COMMA = r","
    t_SEMI = r";"
    t_EQUALS = r"="

    # Ignored characters (spaces and tabs; newlines are counted separately)
    t_ignore = " \t\r"

    t_ignore_LINE_COMMENT = r"//[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_BLOCK_COMMENT(self, t: lex.LexToken) -> None:
        r"/\*[\s\S]*?\*/"
        t.lexer.lineno += t.value.count("\n")

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"\"[^\"\n]*\"|'[^'\n]*'"
        t.value = t.value[1:-1]
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+"
        t.value = int(t.value)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"\.?[a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at line {t.lineno}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
