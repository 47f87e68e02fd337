import pytest

from minicc.lexer import (
    Lexer,
    Token,
    TokenType,
    append_tokens,
    identifier_type,
    token_type_name,
    tokenize,
)


def test_if_whitespace():
    token = Lexer("   if ").next_token()
    assert token.type is TokenType.IF
    assert token.lexeme == "if"
    assert token.length == 2


def test_not_equals():
    token = Lexer("    !=  ").next_token()
    assert token.type is TokenType.NEQ
    assert token.lexeme == "!="
    assert token.length == 2


def test_keyword_detection_while():
    assert identifier_type("while") is TokenType.WHILE


def test_keyword_detection_return():
    assert identifier_type("return") is TokenType.RETURN


def test_int_literal():
    token = Lexer("12345").next_token()
    assert token.type is TokenType.INT_LITERAL
    assert token.lexeme == "12345"
    assert token.length == 5


def test_semicolon():
    token = Lexer("  ;").next_token()
    assert token.type is TokenType.SEMICOLON
    assert token.lexeme == ";"
    assert token.length == 1


@pytest.mark.parametrize(
    "text, expected",
    [
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
        ("for", TokenType.FOR),
        ("int", TokenType.INT_TYPE),
        ("void", TokenType.VOID_TYPE),
        ("iff", TokenType.IDENTIFIER),
        ("in", TokenType.IDENTIFIER),
        ("Return", TokenType.IDENTIFIER),
    ],
)
def test_identifier_type(text, expected):
    assert identifier_type(text) is expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(", TokenType.LPAREN),
        (")", TokenType.RPAREN),
        ("{", TokenType.LBRACE),
        ("}", TokenType.RBRACE),
        (",", TokenType.COMMA),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("*", TokenType.STAR),
        ("/", TokenType.SLASH),
        ("%", TokenType.PERCENT),
        ("=", TokenType.ASSIGN),
        ("==", TokenType.EQ),
        ("<", TokenType.LT),
        ("<=", TokenType.LEQ),
        (">", TokenType.GT),
        (">=", TokenType.GEQ),
    ],
)
def test_operators(source, expected):
    token = Lexer(source).next_token()
    assert token.type is expected
    assert token.lexeme == source


def test_tokenize_declaration():
    tokens = tokenize("int x = 12;")
    assert [t.type for t in tokens] == [
        TokenType.INT_TYPE,
        TokenType.IDENTIFIER,
        TokenType.ASSIGN,
        TokenType.INT_LITERAL,
        TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    assert [t.lexeme for t in tokens] == ["int", "x", "=", "12", ";", ""]


def test_number_then_identifier():
    tokens = tokenize("12abc")
    assert [(t.type, t.lexeme) for t in tokens[:2]] == [
        (TokenType.INT_LITERAL, "12"),
        (TokenType.IDENTIFIER, "abc"),
    ]


def test_identifier_with_digits_and_underscore():
    token = Lexer("_a1b2 ").next_token()
    assert token.type is TokenType.IDENTIFIER
    assert token.lexeme == "_a1b2"


def test_line_numbers():
    tokens = tokenize("a\nb\r\n\tc")
    assert [t.line for t in tokens] == [1, 2, 3, 3]


def test_bang_alone_is_error():
    token = Lexer("!x").next_token()
    assert token.type is TokenType.UNKNOWN
    assert token.lexeme == "Unexpected '!'"


def test_unexpected_character():
    token = Lexer("@").next_token()
    assert token.type is TokenType.UNKNOWN
    assert token.lexeme == "Unexpected character."
    assert token.length == len("Unexpected character.")


def test_comment_after_slash_token():
    tokens = tokenize("a // hi\nb")
    assert [(t.type, t.lexeme, t.line) for t in tokens] == [
        (TokenType.IDENTIFIER, "a", 1),
        (TokenType.SLASH, "/", 1),
        (TokenType.IDENTIFIER, "b", 2),
        (TokenType.EOF, "", 2),
    ]


def test_comment_at_start():
    tokens = tokenize("//x")
    assert [t.type for t in tokens] == [TokenType.SLASH, TokenType.EOF]


def test_nul_ends_input():
    tokens = tokenize("a\0b")
    assert [t.type for t in tokens] == [TokenType.IDENTIFIER, TokenType.EOF]


def test_eof_repeats():
    lexer = Lexer("")
    assert lexer.next_token().type is TokenType.EOF
    assert lexer.next_token().type is TokenType.EOF


def test_iter_stops_after_eof():
    tokens = list(Lexer("x y"))
    assert len(tokens) == 3
    assert tokens[-1].type is TokenType.EOF


def test_token_type_names():
    assert token_type_name(TokenType.INT_LITERAL) == "INT"
    assert token_type_name(TokenType.NEQ) == "NEQ"
    assert token_type_name(TokenType.UNKNOWN) == "UNKNOWN"
    assert token_type_name(TokenType.VOID_TYPE) == "INVALID"


def test_token_format():
    token = Token(TokenType.IDENTIFIER, "main", 3)
    assert token.format(True) == (
        'Token(type=IDENTIFIER, lexeme="main", length=4, line=3)'
    )
    assert token.format(False) == 'Token(type=IDENTIFIER, lexeme="main", length=4)'
    assert str(token) == token.format(True)


def test_append_tokens(tmp_path):
    path = tmp_path / "tokens"
    append_tokens(tokenize("x;")[:-1], path)
    append_tokens(tokenize("1"), path)
    assert path.read_text(encoding="utf-8").splitlines() == [
        'Token(type=IDENTIFIER, lexeme="x", length=1)',
        'Token(type=SEMICOLON, lexeme=";", length=1)',
        'Token(type=INT, lexeme="1", length=1)',
        'Token(type=EOF, lexeme="", length=0)',
    ]


def test_lexer_repr():
    lexer = Lexer("ab cd")
    lexer.next_token()
    assert repr(lexer) == 'Lexer(start="ab cd", current=" cd", offset=2, line=1)'