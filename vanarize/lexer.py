"""Hand-written scanner turning source text into tokens."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Iterator

from vanarize.tokens import Token, TokenType

_ALPHA = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_END = "\0"

# Keywords decided by the first character alone: (offset, rest, type).
_BY_FIRST = {
    "d": (1, "ouble", TokenType.TYPE_DOUBLE),
    "e": (1, "lse", TokenType.ELSE),
    "l": (1, "ong", TokenType.TYPE_LONG),
    "n": (1, "il", TokenType.NIL),
    "o": (1, "r", TokenType.OR),
    "p": (1, "rint", TokenType.PRINT),
    "r": (1, "eturn", TokenType.RETURN),
    "v": (1, "oid", TokenType.TYPE_VOID),
}

# Keywords decided by the first two characters: rest starts at offset 2.
_BY_SECOND = {
    "a": {
        "n": ("d", TokenType.AND),
        "s": ("ync", TokenType.ASYNC),
        "w": ("ait", TokenType.AWAIT),
    },
    "b": {
        "o": ("olean", TokenType.TYPE_BOOLEAN),
        "y": ("te", TokenType.TYPE_BYTE),
    },
    "c": {
        "h": ("ar", TokenType.TYPE_CHAR),
        "l": ("ass", TokenType.CLASS),
    },
    "f": {
        "a": ("lse", TokenType.FALSE),
        "o": ("r", TokenType.FOR),
        "u": ("nction", TokenType.FUNCTION),
        "l": ("oat", TokenType.TYPE_FLOAT),
    },
    "i": {
        "m": ("port", TokenType.IMPORT),
        "n": ("t", TokenType.TYPE_INT),
    },
    "s": {
        "u": ("per", TokenType.SUPER),
        "h": ("ort", TokenType.TYPE_SHORT),
    },
    "t": {
        "h": ("is", TokenType.THIS),
        "r": ("ue", TokenType.TRUE),
    },
}

_SINGLE_CHAR = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "/": TokenType.SLASH,
    "*": TokenType.STAR,
}

# first char -> (second char, two-char type, one-char type)
_ONE_OR_TWO = {
    ":": (":", TokenType.DOUBLE_COLON, TokenType.COLON),
    "!": ("=", TokenType.BANG_EQUAL, TokenType.BANG),
    "=": ("=", TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": ("=", TokenType.LESS_EQUAL, TokenType.LESS),
    ">": ("=", TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def _check(text: str, offset: int, rest: str, kind: TokenType) -> TokenType:
    return kind if text[offset:] == rest else TokenType.IDENTIFIER


def _identifier_type(text: str) -> TokenType:
    first = text[0]
    if first in _BY_FIRST:
        return _check(text, *_BY_FIRST[first])
    if len(text) <= 1 or first not in _BY_SECOND:
        return TokenType.IDENTIFIER
    second = text[1]
    if first == "i" and second == "f":
        return TokenType.IF
    if first == "s" and second == "t":
        if len(text) > 3:
            if text[3] == "i":
                return _check(text, 4, "ng", TokenType.TYPE_STRING)
            if text[3] == "u":
                return _check(text, 4, "ct", TokenType.STRUCT)
        return TokenType.IDENTIFIER
    entry = _BY_SECOND[first].get(second)
    if entry is None:
        return TokenType.IDENTIFIER
    rest, kind = entry
    return _check(text, 2, rest, kind)


@dataclass(frozen=True)
class LexerState:
    """A snapshot of the lexer position, used for backtracking."""

    start: int
    current: int
    line: int


class Lexer:
    """Scans source text one token at a time.

    Scanning stops at the end of the text or at the first NUL character.
    Problems are reported as ``ERROR`` tokens carrying a message.
    """

    def __init__(self, source: str) -> None:
        self._source = source.split(_END, 1)[0]
        self._start = 0
        self._current = 0
        self._line = 1

    def _at_end(self) -> bool:
        return self._current >= len(self._source)

    def _advance(self) -> str:
        char = self._source[self._current]
        self._current += 1
        return char

    def _peek(self) -> str:
        return _END if self._at_end() else self._source[self._current]

    def _peek_next(self) -> str:
        index = self._current + 1
        return self._source[index] if index < len(self._source) else _END

    def _match(self, expected: str) -> bool:
        if self._peek() != expected or self._at_end():
            return False
        self._current += 1
        return True

    def _make(self, kind: TokenType) -> Token:
        return Token(kind, self._source[self._start:self._current], self._line)

    def _error(self, message: str) -> Token:
        return Token(TokenType.ERROR, message, self._line)

    def _skip_whitespace(self) -> None:
        while True:
            char = self._peek()
            if char in " \r\t" and not self._at_end():
                self._advance()
            elif char == "\n":
                self._line += 1
                self._advance()
            elif char == "/" and self._peek_next() == "/":
                while self._peek() != "\n" and not self._at_end():
                    self._advance()
            else:
                return

    def _identifier(self) -> Token:
        while self._peek() in _ALPHA or self._peek() in _DIGITS:
            self._advance()
        text = self._source[self._start:self._current]
        return self._make(_identifier_type(text))

    def _number(self) -> Token:
        while self._peek() in _DIGITS:
            self._advance()
        if self._peek() == "." and self._peek_next() in _DIGITS:
            self._advance()
            while self._peek() in _DIGITS:
                self._advance()
        return self._make(TokenType.NUMBER)

    def _string(self) -> Token:
        while self._peek() != '"' and not self._at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()
        if self._at_end():
            return self._error("Unterminated string.")
        self._advance()
        return self._make(TokenType.STRING)

    def next_token(self) -> Token:
        """Scan and return the next token; ``EOF`` repeats once reached."""
        self._skip_whitespace()
        self._start = self._current
        if self._at_end():
            return self._make(TokenType.EOF)

        char = self._advance()
        if char in _ALPHA:
            return self._identifier()
        if char in _DIGITS:
            return self._number()
        if char in _SINGLE_CHAR:
            return self._make(_SINGLE_CHAR[char])
        if char in _ONE_OR_TWO:
            second, double, single = _ONE_OR_TWO[char]
            return self._make(double if self._match(second) else single)
        if char == '"':
            return self._string()
        return self._error("Unexpected character.")

    def get_state(self) -> LexerState:
        """Return the current position so it can be restored later."""
        return LexerState(self._start, self._current, self._line)

    def restore_state(self, state: LexerState) -> None:
        """Rewind (or advance) to a position taken with :meth:`get_state`."""
        self._start = state.start
        self._current = state.current
        self._line = state.line

    def __iter__(self) -> Iterator[Token]:
        """Yield the remaining tokens, ending with the ``EOF`` token."""
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Scan a whole source text; the list ends with an ``EOF`` token."""
    return list(Lexer(source))