import pytest

from vanarize.lexer import Lexer, LexerState, tokenize
from vanarize.tokens import Token, TokenType


def kinds(source):
    return [token.type for token in tokenize(source)]


@pytest.mark.parametrize(
    "word, kind",
    [
        ("and", TokenType.AND),
        ("async", TokenType.ASYNC),
        ("await", TokenType.AWAIT),
        ("boolean", TokenType.TYPE_BOOLEAN),
        ("byte", TokenType.TYPE_BYTE),
        ("char", TokenType.TYPE_CHAR),
        ("class", TokenType.CLASS),
        ("double", TokenType.TYPE_DOUBLE),
        ("else", TokenType.ELSE),
        ("false", TokenType.FALSE),
        ("for", TokenType.FOR),
        ("function", TokenType.FUNCTION),
        ("float", TokenType.TYPE_FLOAT),
        ("if", TokenType.IF),
        ("import", TokenType.IMPORT),
        ("int", TokenType.TYPE_INT),
        ("long", TokenType.TYPE_LONG),
        ("nil", TokenType.NIL),
        ("or", TokenType.OR),
        ("print", TokenType.PRINT),
        ("return", TokenType.RETURN),
        ("super", TokenType.SUPER),
        ("string", TokenType.TYPE_STRING),
        ("struct", TokenType.STRUCT),
        ("short", TokenType.TYPE_SHORT),
        ("this", TokenType.THIS),
        ("true", TokenType.TRUE),
        ("void", TokenType.TYPE_VOID),
    ],
)
def test_keywords(word, kind):
    tokens = tokenize(word)
    assert tokens[0] == Token(kind, word, 1)
    assert tokens[1].type is TokenType.EOF


@pytest.mark.parametrize(
    "word", ["andy", "x", "format", "whilst", "while", "st", "integer", "a1b2"]
)
def test_plain_identifiers(word):
    tokens = tokenize(word)
    assert tokens[0].type is TokenType.IDENTIFIER
    assert tokens[0].text == word


def test_if_prefix_is_always_if():
    assert tokenize("iffy")[0].type is TokenType.IF


def test_string_keyword_ignores_third_letter():
    assert tokenize("staing")[0].type is TokenType.TYPE_STRING


def test_underscore_is_not_part_of_identifier():
    tokens = tokenize("a_b")
    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER,
        TokenType.ERROR,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]
    assert tokens[1].text == "Unexpected character."
    assert tokens[2].text == "b"


def test_decimal_number():
    tokens = tokenize("3.14")
    assert tokens[0] == Token(TokenType.NUMBER, "3.14", 1)


def test_trailing_dot_is_separate():
    tokens = tokenize("3.")
    assert [t.type for t in tokens] == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[0].text == "3"


def test_number_followed_by_identifier():
    tokens = tokenize("9abc")
    assert [(t.type, t.text) for t in tokens[:2]] == [
        (TokenType.NUMBER, "9"),
        (TokenType.IDENTIFIER, "abc"),
    ]


@pytest.mark.parametrize(
    "text, kind",
    [
        ("(", TokenType.LEFT_PAREN),
        (")", TokenType.RIGHT_PAREN),
        ("{", TokenType.LEFT_BRACE),
        ("}", TokenType.RIGHT_BRACE),
        ("[", TokenType.LEFT_BRACKET),
        ("]", TokenType.RIGHT_BRACKET),
        (";", TokenType.SEMICOLON),
        (",", TokenType.COMMA),
        (".", TokenType.DOT),
        ("-", TokenType.MINUS),
        ("+", TokenType.PLUS),
        ("/", TokenType.SLASH),
        ("*", TokenType.STAR),
        (":", TokenType.COLON),
        ("::", TokenType.DOUBLE_COLON),
        ("!", TokenType.BANG),
        ("!=", TokenType.BANG_EQUAL),
        ("=", TokenType.EQUAL),
        ("==", TokenType.EQUAL_EQUAL),
        ("<", TokenType.LESS),
        ("<=", TokenType.LESS_EQUAL),
        (">", TokenType.GREATER),
        (">=", TokenType.GREATER_EQUAL),
    ],
)
def test_operators(text, kind):
    tokens = tokenize(text)
    assert tokens[0] == Token(kind, text, 1)
    assert len(tokens) == 2


def test_string_token_keeps_quotes():
    source = '"hello world"'
    tokens = tokenize(source)
    assert tokens[0] == Token(TokenType.STRING, source, 1)


def test_unterminated_string():
    tokens = tokenize('"abc')
    assert tokens[0].type is TokenType.ERROR
    assert tokens[0].text == "Unterminated string."
    assert tokens[-1].type is TokenType.EOF


def test_comments_are_skipped():
    assert kinds("a // b c d\n+") == [
        TokenType.IDENTIFIER,
        TokenType.PLUS,
        TokenType.EOF,
    ]


def test_line_numbers_follow_newlines():
    source = 'a\n// note\n"x\ny" b'
    tokens = tokenize(source)
    last_line = source.count("\n") + 1
    assert tokens[0].line == 1
    assert tokens[1].type is TokenType.STRING
    assert tokens[1].line == last_line
    assert tokens[2].text == "b"
    assert tokens[2].line == last_line


def test_empty_source_gives_only_eof():
    assert tokenize("") == [Token(TokenType.EOF, "", 1)]


def test_whitespace_only_source():
    assert kinds(" \t\r\n ") == [TokenType.EOF]


def test_eof_repeats():
    lexer = Lexer("x")
    lexer.next_token()
    first = lexer.next_token()
    second = lexer.next_token()
    assert first.type is TokenType.EOF
    assert first == second


def test_nul_ends_the_source():
    tokens = tokenize("a\0b")
    assert [(t.type, t.text) for t in tokens] == [
        (TokenType.IDENTIFIER, "a"),
        (TokenType.EOF, ""),
    ]


def test_non_ascii_is_unexpected():
    tokens = tokenize("é")
    assert tokens[0].type is TokenType.ERROR
    assert tokens[0].text == "Unexpected character."


def test_state_restore_replays_tokens():
    lexer = Lexer("var x = 1 + 2;")
    lexer.next_token()
    state = lexer.get_state()
    first_pass = [lexer.next_token() for _ in range(4)]
    lexer.restore_state(state)
    second_pass = [lexer.next_token() for _ in range(4)]
    assert first_pass == second_pass
    assert isinstance(state, LexerState)
    assert state == lexer.get_state() or state.current < lexer.get_state().current


def test_iteration_stops_after_eof():
    lexer = Lexer("a b c")
    tokens = list(lexer)
    assert tokens[-1].type is TokenType.EOF
    assert [t.text for t in tokens[:-1]] == ["a", "b", "c"]
    assert sum(t.type is TokenType.EOF for t in tokens) == 1


def test_tokenize_matches_iteration():
    source = "function add(a :: int) { return a + 1; }"
    assert tokenize(source) == list(Lexer(source))