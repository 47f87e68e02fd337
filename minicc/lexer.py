"""Tokenizer for the small C subset understood by the compiler."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike


class TokenType(enum.IntEnum):
    """Kinds of tokens produced by the lexer."""

    EOF = 0
    INT_LITERAL = enum.auto()
    IDENTIFIER = enum.auto()
    # Keywords
    IF = enum.auto()
    ELSE = enum.auto()
    WHILE = enum.auto()
    FOR = enum.auto()
    RETURN = enum.auto()
    INT_TYPE = enum.auto()
    VOID_TYPE = enum.auto()
    # Operators
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    PERCENT = enum.auto()
    ASSIGN = enum.auto()
    EQ = enum.auto()
    NEQ = enum.auto()
    LT = enum.auto()
    GT = enum.auto()
    LEQ = enum.auto()
    GEQ = enum.auto()
    # Delimiters
    SEMICOLON = enum.auto()
    COMMA = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LBRACE = enum.auto()
    RBRACE = enum.auto()
    UNKNOWN = enum.auto()


_KEYWORDS = {
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "return": TokenType.RETURN,
    "int": TokenType.INT_TYPE,
    "void": TokenType.VOID_TYPE,
}

_TYPE_NAMES = {
    TokenType.EOF: "EOF",
    TokenType.INT_LITERAL: "INT",
    TokenType.IDENTIFIER: "IDENTIFIER",
    TokenType.IF: "IF",
    TokenType.ELSE: "ELSE",
    TokenType.WHILE: "WHILE",
    TokenType.FOR: "FOR",
    TokenType.RETURN: "RETURN",
    TokenType.INT_TYPE: "INT_TYPE",
    TokenType.PLUS: "PLUS",
    TokenType.MINUS: "MINUS",
    TokenType.STAR: "STAR",
    TokenType.SLASH: "SLASH",
    TokenType.PERCENT: "PERCENT",
    TokenType.ASSIGN: "ASSIGN",
    TokenType.EQ: "EQ",
    TokenType.NEQ: "NEQ",
    TokenType.LT: "LT",
    TokenType.GT: "GT",
    TokenType.LEQ: "LEQ",
    TokenType.GEQ: "GEQ",
    TokenType.SEMICOLON: "SEMICOLON",
    TokenType.COMMA: "COMMA",
    TokenType.LPAREN: "LPAREN",
    TokenType.RPAREN: "RPAREN",
    TokenType.LBRACE: "LBRACE",
    TokenType.RBRACE: "RBRACE",
    TokenType.UNKNOWN: "UNKNOWN",
}

_SINGLE_CHAR = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
}

# Operators that may be followed by '=': (single form, two-character form).
_WITH_EQUALS = {
    "=": (TokenType.ASSIGN, TokenType.EQ),
    "<": (TokenType.LT, TokenType.LEQ),
    ">": (TokenType.GT, TokenType.GEQ),
}


def identifier_type(text: str) -> TokenType:
    """Return the keyword type of ``text``, or IDENTIFIER if it is not a keyword."""
    return _KEYWORDS.get(text, TokenType.IDENTIFIER)


def token_type_name(token_type: TokenType) -> str:
    """Return the display name of a token type ("INVALID" for unnamed types)."""
    return _TYPE_NAMES.get(token_type, "INVALID")


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


@dataclass(frozen=True)
class Token:
    """A token: its type, its text and the line it was found on."""

    type: TokenType
    lexeme: str
    line: int

    @property
    def length(self) -> int:
        return len(self.lexeme)

    def format(self, with_line: bool = True) -> str:
        """Render the token for display; the line is omitted when ``with_line`` is false."""
        name = token_type_name(self.type)
        if with_line:
            return (
                f'Token(type={name}, lexeme="{self.lexeme}", '
                f"length={self.length}, line={self.line})"
            )
        return f'Token(type={name}, lexeme="{self.lexeme}", length={self.length})'

    def __str__(self) -> str:
        return self.format(True)


class Lexer:
    """Turns source text into tokens, one at a time."""

    def __init__(self, source: str) -> None:
        # A NUL character marks the end of the input.
        nul = source.find("\0")
        self.source = source if nul < 0 else source[:nul]
        self.start = 0
        self.current = 0
        self.line = 1

    def __repr__(self) -> str:
        return (
            f'Lexer(start="{self.source[self.start:]}", '
            f'current="{self.source[self.current:]}", '
            f"offset={self.current - self.start}, line={self.line})"
        )

    def _at_end(self) -> bool:
        return self.current >= len(self.source)

    def _peek(self) -> str:
        return "" if self._at_end() else self.source[self.current]

    def _previous(self) -> str:
        return self.source[self.current - 1] if self.current > 0 else ""

    def _advance(self) -> str:
        char = self.source[self.current]
        self.current += 1
        return char

    def _skip_whitespace(self) -> None:
        while True:
            char = self._peek()
            if char in (" ", "\r", "\t"):
                self._advance()
            elif char == "\n":
                self.line += 1
                self._advance()
            elif char == "/" and self._previous() == "/":
                # A comment is recognised once the preceding character was '/'.
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                return

    def _make(self, token_type: TokenType) -> Token:
        return Token(token_type, self.source[self.start:self.current], self.line)

    def _error(self, message: str) -> Token:
        return Token(TokenType.UNKNOWN, message, self.line)

    def next_token(self) -> Token:
        """Scan and return the next token; returns EOF tokens once input is exhausted."""
        self._skip_whitespace()
        self.start = self.current
        if self._at_end():
            return Token(TokenType.EOF, "", self.line)

        char = self._advance()
        if _is_alpha(char):
            while _is_alpha(self._peek()) or _is_digit(self._peek()):
                self._advance()
            text = self.source[self.start:self.current]
            return Token(identifier_type(text), text, self.line)
        if _is_digit(char):
            while _is_digit(self._peek()):
                self._advance()
            return self._make(TokenType.INT_LITERAL)

        if char in _SINGLE_CHAR:
            return self._make(_SINGLE_CHAR[char])
        if char in _WITH_EQUALS:
            single, double = _WITH_EQUALS[char]
            if self._peek() == "=":
                self._advance()
                return self._make(double)
            return self._make(single)
        if char == "!":
            if self._peek() == "=":
                self._advance()
                return self._make(TokenType.NEQ)
            return self._error("Unexpected '!'")
        return self._error("Unexpected character.")

    def __iter__(self) -> Iterator[Token]:
        """Yield the remaining tokens, ending with (and including) the EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Return all tokens of ``source``; the last one is the EOF token."""
    return list(Lexer(source))


def append_tokens(tokens: Iterable[Token], path: str | PathLike[str]) -> None:
    """Append one line per token, without line numbers, to the file at ``path``."""
    with open(path, "a", encoding="utf-8") as handle:
        for token in tokens:
            handle.write(token.format(False) + "\n")