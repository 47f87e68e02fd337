"""Recursive-descent parser turning tokens into syntax tree nodes."""

from __future__ import annotations

import re
from collections.abc import Iterable

from minicc.lexer import Token, TokenType
from minicc.nodes import (
    Binary,
    Block,
    Conditional,
    Declaration,
    Function,
    FunctionCall,
    IntLiteral,
    Node,
    NodeType,
    Return,
    Variable,
    VariableDeclaration,
    While,
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class ParseError(ValueError):
    """Raised when the token stream does not form a valid program."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


def is_data_type(token: Token) -> bool:
    """Return True if ``token`` names a data type (``int`` or ``void``)."""
    return token.type in (TokenType.INT_TYPE, TokenType.VOID_TYPE)


def token_to_int(token: Token) -> int:
    """Convert an integer literal token to its value, checking the 32-bit int range."""
    match = _LEADING_INT.match(token.lexeme)
    if match is None:
        raise ParseError("No digits found in substring")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ParseError("Number out of range for int")
    return value


class Parser:
    """Parses a list of tokens; ``index`` is the position of the current token."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self.index = 0

    # Token access

    def _peek(self, offset: int = 0) -> Token:
        position = self.index + offset
        if 0 <= position < len(self.tokens):
            return self.tokens[position]
        line = self.tokens[-1].line if self.tokens else 1
        return Token(TokenType.EOF, "", line)

    def _advance(self) -> Token:
        token = self._peek()
        self.index += 1
        return token

    def _expect(self, token_type: TokenType, message: str) -> Token:
        if self._peek().type is not token_type:
            raise ParseError(f"{message} at tokenIndex = {self.index}", self.index)
        return self._advance()

    # Grammar

    def parse_file(self) -> list[Function]:
        """Parse every top-level function definition, skipping anything else."""
        functions: list[Function] = []
        while self.index < len(self.tokens):
            token = self._peek()
            if token.type is TokenType.EOF:
                break
            if (
                is_data_type(token)
                and self._peek(1).type is TokenType.IDENTIFIER
                and self._peek(2).type is TokenType.LPAREN
            ):
                functions.append(self.parse_function())
                continue
            self.index += 1
        return functions

    def parse_function(self) -> Function:
        """Parse ``type name(params) { body }``."""
        return_type = self._advance()
        name = self._advance()
        self._expect(TokenType.LPAREN, "Expected '(' after function name")

        parameters: list[Node | None] = []
        while self._peek().type is not TokenType.RPAREN:
            parameters.append(self.parse_variable_declaration())
            if self._peek().type is TokenType.COMMA:
                self._advance()
        self._advance()

        if self._peek().type is not TokenType.LBRACE:
            raise ParseError("Expected '{' after function parameters", self.index)
        body = self.parse_block()
        return Function(name, return_type, parameters, body)

    def parse_block(self) -> Block:
        """Parse a braced block, or a single statement when no brace follows."""
        statements: list[Node] = []
        if self._peek().type is not TokenType.LBRACE:
            node = self.parse_statement()
            if node is not None:
                statements.append(node)
            return Block(statements)

        self._advance()
        while self._peek().type is not TokenType.RBRACE:
            if self._peek().type is TokenType.EOF:
                raise ParseError("Expected '}' before end of input", self.index)
            node = self.parse_statement()
            if node is not None:
                statements.append(node)
        self._advance()
        return Block(statements)

    def parse_statement(self) -> Node | None:
        """Parse one statement; returns None for tokens that form no statement."""
        token = self._peek()

        if is_data_type(token):
            declaration = self.parse_variable_declaration()
            if self._peek().type is not TokenType.ASSIGN:
                self._advance()
                return declaration
            self._advance()
            expression = self.parse_expression()
            self._advance()  # semicolon
            return Declaration(declaration, expression)

        match token.type:
            case TokenType.RETURN:
                self._advance()
                expression = self.parse_expression()
                if self._peek().type is not TokenType.SEMICOLON:
                    raise ParseError("Expected semicolon after return", self.index)
                self._advance()
                return Return(expression)
            case TokenType.SEMICOLON:
                self._advance()
                return None
            case TokenType.IF | TokenType.ELSE:
                return self.parse_conditional()
            case TokenType.WHILE:
                return self.parse_while()
            case TokenType.IDENTIFIER if self._peek(1).type is TokenType.ASSIGN:
                variable = Variable(self._advance())
                self._advance()  # assignment operator
                return Declaration(variable, self.parse_expression())
            case TokenType.IDENTIFIER if self._peek(1).type is TokenType.LPAREN:
                return self.parse_function_call()
            case _:
                self._advance()
                return None

    def parse_expression(self) -> Node:
        """Parse a value, or a right-associated chain ``value op expression``."""
        if self._peek(1).type in (TokenType.RPAREN, TokenType.SEMICOLON):
            return self.parse_variable_or_literal()
        if self._peek().type in (TokenType.IDENTIFIER, TokenType.INT_LITERAL):
            left = self.parse_variable_or_literal()
            operator = self._advance().type
            return Binary(left, operator, self.parse_expression())
        raise ParseError(f"Expected an expression at tokenIndex = {self.index}", self.index)

    def parse_variable_or_literal(self) -> Variable | IntLiteral:
        """Parse a variable reference or an integer literal."""
        token = self._peek()
        if token.type is TokenType.IDENTIFIER:
            self._advance()
            return Variable(token)
        if token.type is TokenType.INT_LITERAL:
            value = token_to_int(token)
            self._advance()
            return IntLiteral(value, token)
        raise ParseError(
            f"Expected a variable or literal at tokenIndex = {self.index}", self.index
        )

    def parse_variable_declaration(self) -> VariableDeclaration:
        """Parse ``type name``."""
        if not is_data_type(self._peek()):
            raise ParseError("Expected a data type", self.index)
        var_type = self._advance()
        if self._peek().type is not TokenType.IDENTIFIER:
            raise ParseError("Expected an identifier", self.index)
        name = self._advance()
        return VariableDeclaration(name, var_type)

    def parse_while(self) -> While:
        """Parse ``while (condition) body``."""
        self._expect(TokenType.WHILE, "Expected 'while'")
        self._expect(TokenType.LPAREN, "Expected '('")
        condition = self.parse_expression()
        self._expect(TokenType.RPAREN, "Expected ')'")
        body = self.parse_block()
        return While(condition, body)

    def parse_conditional(self) -> Conditional:
        """Parse an ``if``, ``else if`` or ``else`` branch."""
        token = self._peek()
        if token.type is TokenType.IF:
            kind = NodeType.IF_STATEMENT
            self._advance()
        elif token.type is TokenType.ELSE:
            following = self._peek(1).type
            if following is TokenType.IF:
                kind = NodeType.ELSE_IF_STATEMENT
                self.index += 2
            elif following is TokenType.LBRACE:
                kind = NodeType.ELSE_STATEMENT
                self._advance()
            else:
                raise ParseError(
                    f"Expected 'if', 'else' or 'else if' at tokenIndex = {self.index}",
                    self.index,
                )
        else:
            raise ParseError(
                f"Expected 'if', 'else if' or 'else' at tokenIndex = {self.index}",
                self.index,
            )

        condition: Node | None = None
        if kind is not NodeType.ELSE_STATEMENT:
            self._expect(TokenType.LPAREN, "Expected '('")
            condition = self.parse_expression()
            self._expect(TokenType.RPAREN, "Expected ')'")

        body = self.parse_block()
        return Conditional(kind, condition, body)

    def parse_function_call(self) -> FunctionCall:
        """Parse ``name(arg, ...)``; the closing parenthesis is left unconsumed."""
        name = self._advance()
        self._expect(TokenType.LPAREN, "Expected '('")
        arguments: list[Node | None] = []
        while self._peek().type is not TokenType.RPAREN:
            arguments.append(self.parse_variable_or_literal())
            following = self._peek().type
            if following is TokenType.RPAREN:
                break
            if following is TokenType.COMMA:
                self._advance()
            else:
                raise ParseError(
                    f"Expected ',' or ')' in call at tokenIndex = {self.index}",
                    self.index,
                )
        return FunctionCall(name, arguments)


def parse(tokens: Iterable[Token]) -> list[Function]:
    """Parse a whole token stream into its function definitions."""
    return Parser(tokens).parse_file()