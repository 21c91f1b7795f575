import dataclasses

import pytest

from vanarize.tokens import Token, TokenType


def test_token_equality_by_value():
    a = Token(TokenType.IDENTIFIER, "name", 4)
    b = Token(TokenType.IDENTIFIER, "name", 4)
    assert a == b
    assert hash(a) == hash(b)


def test_tokens_differ_by_type():
    assert Token(TokenType.NUMBER, "x", 1) != Token(TokenType.IDENTIFIER, "x", 1)


def test_tokens_differ_by_line():
    assert Token(TokenType.IDENTIFIER, "x", 1) != Token(TokenType.IDENTIFIER, "x", 2)


def test_token_is_immutable():
    token = Token(TokenType.PLUS, "+", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        token.text = "-"
    assert token == Token(TokenType.PLUS, "+", 1)


def test_equal_tokens_collapse_in_a_set():
    tokens = {
        Token(TokenType.EOF, "", 3),
        Token(TokenType.EOF, "", 3),
        Token(TokenType.ERROR, "Unexpected character.", 3),
    }
    assert len(tokens) == 2
    assert Token(TokenType.EOF, "", 3) in tokens