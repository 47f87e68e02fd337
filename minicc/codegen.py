"""Generation of x86-64 assembly (Intel syntax) from syntax tree nodes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from os import PathLike

from minicc.lexer import TokenType
from minicc.nodes import (
    Binary,
    Block,
    Declaration,
    Function,
    FunctionCall,
    IntLiteral,
    Node,
    Return,
    Variable,
    VariableDeclaration,
)

_OP_NAMES = {
    TokenType.PLUS: "add",
    TokenType.MINUS: "sub",
    TokenType.STAR: "imul",
    TokenType.SLASH: "idiv",
}

_ARGUMENT_REGISTERS = ("edi", "esi", "edx", "ecx", "e8d", "e9d")

_INDENT = "        "

_PROLOGUE = (
    ".intel_syntax noprefix\n"
    ".global _start\n"
    ".text\n"
    "_start:\n"
    "    call main\n"
    "    mov rdi, rax       # syscall: exit\n"
    "    mov rax, 60        # exit code 0\n"
    "    syscall\n\n"
)


class CodegenError(ValueError):
    """Raised when a syntax tree cannot be turned into assembly."""


def op_name(op: TokenType) -> str:
    """Return the mnemonic for a binary operator, or "UNKNOWN_OP"."""
    return _OP_NAMES.get(op, "UNKNOWN_OP")


def register_name(index: int) -> str:
    """Return the 32-bit register that carries argument number ``index`` (from 0)."""
    if not 0 <= index < len(_ARGUMENT_REGISTERS):
        raise CodegenError(f"no argument register for parameter {index}")
    return _ARGUMENT_REGISTERS[index]


@dataclass
class Memory:
    """Stack slots of a function's variables, as offsets from ``rbp``."""

    variables: list[tuple[str, int]] = field(default_factory=list)
    next_location: int = -4

    def add_variable(self, name: str) -> int:
        """Give ``name`` the next free 4-byte slot and return its offset."""
        offset = self.next_location
        self.variables.append((name, offset))
        self.next_location -= 4
        return offset

    def location(self, name: str) -> int:
        """Return the offset of ``name``, or -1 if it has no slot."""
        for variable, offset in self.variables:
            if variable == name:
                return offset
        return -1

    def operand(self, name: str) -> str:
        """Return the memory operand for ``name``, such as ``[rbp-4]``."""
        offset = self.location(name)
        if offset > 0:
            return f"[rbp+{offset}]"
        return f"[rbp{offset}]"

    def format(self) -> str:
        """Render the layout, one ``name -> [rbp-N]`` line per variable."""
        return "".join(
            f"  {name} -> [rbp-{-offset}]\n" for name, offset in self.variables
        )


class CodeGenerator:
    """Collects assembly lines for the functions handed to it."""

    def __init__(self) -> None:
        self.instructions: list[str] = []

    def _emit(self, text: str) -> None:
        self.instructions.append(_INDENT + text)

    def function(self, node: Node) -> None:
        """Emit the label, prologue, parameter stores and body of a function."""
        if not isinstance(node, Function):
            raise CodegenError("Not a function node")
        memory = Memory()
        self.instructions.append(f"{node.name.lexeme}:")
        self._emit("push    rbp")
        self._emit("mov     rbp, rsp")
        for index, parameter in enumerate(node.parameters):
            if not isinstance(parameter, VariableDeclaration):
                raise CodegenError("Function parameter is not a variable declaration")
            name = parameter.name.lexeme
            memory.add_variable(name)
            self._emit(
                f"mov     DWORD PTR {memory.operand(name)}, {register_name(index)}"
            )
        if isinstance(node.body, Block):
            for statement in node.body.statements:
                self.statement(statement, memory)

    def statement(self, node: Node, memory: Memory) -> None:
        """Emit one statement; statement kinds without code generation are skipped."""
        match node:
            case Declaration():
                self._declaration(node, memory)
            case VariableDeclaration():
                memory.add_variable(node.name.lexeme)
            case FunctionCall():
                self._call(node, memory)
            case Return():
                self.expression(node.expression, memory)
                self._emit("pop     rbp")
                self._emit("ret")
            case _:
                pass

    def _declaration(self, node: Declaration, memory: Memory) -> None:
        target = node.variable
        if isinstance(target, VariableDeclaration):
            memory.add_variable(target.name.lexeme)
            operand = memory.operand(target.name.lexeme)
        elif isinstance(target, Variable):
            operand = memory.operand(target.name.lexeme)
        else:
            raise CodegenError("Not a variable node")
        self.expression(node.expression, memory)
        self._emit(f"mov     DWORD PTR {operand}, eax")

    def _call(self, node: FunctionCall, memory: Memory) -> None:
        for index, argument in enumerate(node.arguments):
            self.expression(argument, memory)
            self._emit(f"mov     {register_name(index)}, eax")
        self._emit(f"call    {node.name.lexeme}")

    def expression(self, node: Node | None, memory: Memory) -> None:
        """Emit code leaving the value of a literal, variable or binary node in eax."""
        match node:
            case None:
                raise CodegenError("Missing expression")
            case Binary():
                self.binary(node, memory, True)
            case IntLiteral(value=value):
                self._emit(f"mov     eax, {value}")
            case Variable(name=name):
                self._emit(f"mov     eax, DWORD PTR {memory.operand(name.lexeme)}")
            case _:
                pass

    def binary(self, node: Binary, memory: Memory, first: bool) -> None:
        """Emit a binary operation: right operand in edx, left in eax, then the op."""
        right = node.right
        match right:
            case IntLiteral(value=value):
                self._emit(f"mov     edx, {value}")
            case Variable(name=name):
                self._emit(f"mov     edx, DWORD PTR {memory.operand(name.lexeme)}")
            case Binary():
                self.binary(right, memory, True)
            case _:
                raise CodegenError("Unsupported right operand")

        match node.left:
            case IntLiteral(value=value):
                self._emit(f"mov     eax, {value}")
            case Variable(name=name):
                self._emit(f"mov     eax, DWORD PTR {memory.operand(name.lexeme)}")
            case _:
                pass

        mnemonic = op_name(node.operator)
        if first:
            self._emit(f"{mnemonic}     eax, edx")
        else:
            self._emit(f"{mnemonic}     edx, eax")


def generate(functions: Iterable[Node | None]) -> list[str]:
    """Return the assembly lines for all functions; ``None`` entries are skipped."""
    generator = CodeGenerator()
    for node in functions:
        if node is not None:
            generator.function(node)
    return generator.instructions


def render_assembly(instructions: Iterable[str]) -> str:
    """Return a complete assembly file: the startup code followed by the lines."""
    return _PROLOGUE + "".join(f"{line}\n" for line in instructions)


def write_assembly(
    instructions: Iterable[str], path: str | PathLike[str] = "chat.s"
) -> None:
    """Write the complete assembly file to ``path``, replacing its contents."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(render_assembly(instructions))