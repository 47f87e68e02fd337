"""Syntax tree nodes and their text rendering."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from os import PathLike

from minicc.lexer import Token, TokenType, token_type_name


class NodeType(enum.IntEnum):
    """Kinds of syntax tree nodes."""

    INT_LITERAL = 0
    VARIABLE = enum.auto()
    VARIABLE_DECLARATION = enum.auto()
    BINARY = enum.auto()
    UNARY = enum.auto()
    ASSIGNMENT = enum.auto()
    DECLARATION = enum.auto()
    FUNCTION_DECLARATION = enum.auto()
    FUNCTION_CALL = enum.auto()
    IF_STATEMENT = enum.auto()
    WHILE_STATEMENT = enum.auto()
    BLOCK = enum.auto()
    RETURN = enum.auto()
    FOR_STATEMENT = enum.auto()
    ELSE_IF_STATEMENT = enum.auto()
    ELSE_STATEMENT = enum.auto()


class Node:
    """Base class of all syntax tree nodes."""

    @property
    def type(self) -> NodeType:
        raise NotImplementedError


@dataclass
class IntLiteral(Node):
    """An integer constant."""

    value: int
    token: Token | None = None

    @property
    def type(self) -> NodeType:
        return NodeType.INT_LITERAL


@dataclass
class Variable(Node):
    """A reference to a variable by name."""

    name: Token

    @property
    def type(self) -> NodeType:
        return NodeType.VARIABLE


@dataclass
class VariableDeclaration(Node):
    """A typed variable name, as in ``int x``."""

    name: Token
    var_type: Token | None = None

    @property
    def type(self) -> NodeType:
        return NodeType.VARIABLE_DECLARATION


@dataclass
class Binary(Node):
    """A binary operation ``left <operator> right``."""

    left: Node | None
    operator: TokenType
    right: Node | None

    @property
    def type(self) -> NodeType:
        return NodeType.BINARY


@dataclass
class Unary(Node):
    """A unary operation applied to one operand."""

    operator: str
    operand: Node | None

    @property
    def type(self) -> NodeType:
        return NodeType.UNARY


@dataclass
class Declaration(Node):
    """Assignment of an expression to a declared or existing variable."""

    variable: Node | None
    expression: Node | None

    @property
    def type(self) -> NodeType:
        return NodeType.DECLARATION


@dataclass
class Block(Node):
    """A sequence of statements."""

    statements: list[Node] = field(default_factory=list)

    @property
    def type(self) -> NodeType:
        return NodeType.BLOCK


@dataclass
class Function(Node):
    """A function definition."""

    name: Token
    return_type: Token
    parameters: list[Node | None] = field(default_factory=list)
    body: Node | None = None

    @property
    def type(self) -> NodeType:
        return NodeType.FUNCTION_DECLARATION


@dataclass
class FunctionCall(Node):
    """A call of a named function with arguments."""

    name: Token
    arguments: list[Node | None] = field(default_factory=list)

    @property
    def type(self) -> NodeType:
        return NodeType.FUNCTION_CALL


@dataclass
class Conditional(Node):
    """An ``if``, ``else if`` or ``else`` branch."""

    kind: NodeType
    condition: Node | None
    body: Node | None

    def __post_init__(self) -> None:
        if self.kind not in (
            NodeType.IF_STATEMENT,
            NodeType.ELSE_IF_STATEMENT,
            NodeType.ELSE_STATEMENT,
        ):
            raise ValueError(f"not a conditional node kind: {self.kind!r}")

    @property
    def type(self) -> NodeType:
        return self.kind


@dataclass
class While(Node):
    """A ``while`` loop."""

    condition: Node | None
    body: Node | None

    @property
    def type(self) -> NodeType:
        return NodeType.WHILE_STATEMENT


@dataclass
class Return(Node):
    """A ``return`` statement."""

    expression: Node | None

    @property
    def type(self) -> NodeType:
        return NodeType.RETURN


def _emit(lines: list[str], node: Node | None, indent: int) -> None:
    pad = "  " * indent
    inner = "  " * (indent + 1)

    def child(label: str, sub: Node | None) -> None:
        lines.append(f"{inner}{label}:")
        _emit(lines, sub, indent + 2)

    match node:
        case None:
            lines.append(f"{pad}NULL")
        case IntLiteral(value=value):
            lines.append(f"{pad}IntLiteral: {value}")
        case VariableDeclaration(name=name, var_type=None):
            lines.append(f"{pad}Variable: {name.lexeme}")
        case VariableDeclaration(name=name, var_type=var_type):
            lines.append(
                f"{pad}Variable Declaration: {name.lexeme} of type {var_type.lexeme}"
            )
        case Variable(name=name):
            lines.append(f"{pad}Variable: {name.lexeme}")
        case Binary():
            lines.append(
                f"{pad}Binary Expression: '{token_type_name(node.operator)}'"
            )
            child("Left", node.left)
            child("Right", node.right)
        case Unary():
            lines.append(f"{pad}Unary Expression: '{node.operator}'")
            child("Operand", node.operand)
        case Declaration():
            lines.append(f"{pad}Declaration:")
            child("Variable Declaration", node.variable)
            child("Expression", node.expression)
        case Function():
            lines.append(
                f"{pad}Function Declaration: {node.name.lexeme} "
                f"returns {node.return_type.lexeme}"
            )
            lines.append(f"{inner}Parameters ({len(node.parameters)}):")
            for parameter in node.parameters:
                _emit(lines, parameter, indent + 2)
            child("Body Statements", node.body)
        case FunctionCall():
            lines.append(
                f"{pad}Function Call: {node.name.lexeme} "
                f"with {len(node.arguments)} argument(s)"
            )
            for argument in node.arguments:
                _emit(lines, argument, indent + 1)
        case Conditional(kind=NodeType.ELSE_STATEMENT):
            lines.append(f"{pad}Else Statement:")
            child("Body", node.body)
        case Conditional():
            title = (
                "If Statement"
                if node.kind is NodeType.IF_STATEMENT
                else "Else If Statement"
            )
            lines.append(f"{pad}{title}:")
            child("Condition", node.condition)
            child("Body", node.body)
        case While():
            lines.append(f"{pad}While Statement:")
            child("Condition", node.condition)
            child("Body", node.body)
        case Block():
            lines.append(f"{pad}Block with {len(node.statements)} statement(s):")
            for statement in node.statements:
                _emit(lines, statement, indent + 1)
        case Return():
            lines.append(f"{pad}Return Statement:")
            child("Expression", node.expression)
        case _:
            lines.append(f"{pad}Unknown AST Node")


def format_ast(node: Node | None, indent: int = 0) -> str:
    """Render a node and its children as indented text, one line per entry."""
    lines: list[str] = []
    _emit(lines, node, indent)
    return "".join(line + "\n" for line in lines)


def format_program(nodes: Iterable[Node | None]) -> str:
    """Render every top-level node, numbered by its position; ``None`` entries are skipped."""
    parts = ["Printing AST for the entire file:\n"]
    for position, node in enumerate(nodes):
        if node is not None:
            parts.append(f"\n--- AST Node {position} ---\n")
            parts.append(format_ast(node, 0))
    return "".join(parts)


def write_program(nodes: Iterable[Node | None], path: str | PathLike[str]) -> None:
    """Write the rendering of ``nodes`` to ``path``, replacing its contents."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(format_program(nodes))