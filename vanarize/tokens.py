"""Token kinds and the token record produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Every kind of token the lexer can produce."""

    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()
    COLON = auto()
    DOUBLE_COLON = auto()

    # One or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUNCTION = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    STRUCT = auto()
    IMPORT = auto()
    ASYNC = auto()
    AWAIT = auto()

    # Primitive type names
    TYPE_BYTE = auto()
    TYPE_SHORT = auto()
    TYPE_INT = auto()
    TYPE_LONG = auto()
    TYPE_FLOAT = auto()
    TYPE_DOUBLE = auto()
    TYPE_CHAR = auto()
    TYPE_BOOLEAN = auto()
    TYPE_STRING = auto()
    TYPE_VOID = auto()

    ERROR = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A lexed token.

    ``text`` is the slice of source the token covers; for ``ERROR`` tokens
    it is the error message instead.
    """

    type: TokenType
    text: str
    line: int