"""Command line entry point: compile a source file to assembly."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from minicc.codegen import CodegenError, generate, render_assembly, write_assembly
from minicc.lexer import Token, TokenType, append_tokens, tokenize
from minicc.nodes import write_program
from minicc.parser import ParseError, parse


def _source_tokens(source: str) -> list[Token]:
    """Return the tokens of ``source`` without the final EOF token."""
    return [token for token in tokenize(source) if token.type is not TokenType.EOF]


def compile_source(source: str) -> str:
    """Compile program text into a complete assembly file and return its text."""
    functions = parse(_source_tokens(source))
    return render_assembly(generate(functions))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minicc",
        description="Compile a small C subset to x86-64 assembly.",
    )
    parser.add_argument(
        "input", nargs="?", default="test.txt", help="source file (default: test.txt)"
    )
    parser.add_argument(
        "--output", default="chat.s", help="assembly file to write (default: chat.s)"
    )
    parser.add_argument(
        "--tokens", default="tokens", help="file the tokens are appended to"
    )
    parser.add_argument(
        "--ast", default="ast", help="file the syntax tree is written to"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the compiler; returns the process exit status."""
    args = _build_parser().parse_args(argv)

    try:
        with open(args.input, encoding="utf-8") as handle:
            source = handle.read()
    except OSError:
        print("Error opening file.", file=sys.stderr)
        return 1

    tokens = _source_tokens(source)
    try:
        append_tokens(tokens, args.tokens)
    except OSError as error:
        print(f"Error writing tokens: {error}", file=sys.stderr)
        return 1

    print("\nParsing tokens...\n")
    try:
        functions = parse(tokens)
    except ParseError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    try:
        write_program(functions, args.ast)
    except OSError as error:
        print(f"Error opening file '{args.ast}': {error}", file=sys.stderr)
        return 1
    print("AST Nodes:")

    try:
        instructions = generate(functions)
    except CodegenError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    try:
        write_assembly(instructions, args.output)
    except OSError as error:
        print(f"Failed to open {args.output} for writing: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())