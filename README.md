# minicc

minicc is a small compiler for a tiny subset of C. It tokenizes the source,
builds a syntax tree, and emits x86-64 assembly in Intel syntax. The output
is a standalone program whose `_start` routine calls `main` and exits with
the value `main` leaves in `rax`.

## What it understands

- `int` and `void` function definitions with `int` parameters (up to six)
- local variable declarations, with or without an initial value
- assignments to existing variables
- integer literals and variables combined with `+`, `-`, `*` and `/`
- calls to other functions with literal or variable arguments
- `return` statements
- `//` line comments

The parser also recognises `if`, `else if`, `else` and `while`, and shows
them in the syntax tree dump.

## What it does not do

- No code is generated for `if`, `else` or `while`; those statements are
  skipped by the code generator.
- Expressions have no precedence and no parentheses: `a op b op c` is read as
  `a op (b op c)`.
- `%` and the comparison operators are tokenized and parsed, but have no
  instruction of their own (they come out as `UNKNOWN_OP`).
- Functions do not reserve stack space for their locals, so a local stored
  before a call may be overwritten by that call.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
minicc [input] [--output FILE] [--tokens FILE] [--ast FILE]
```

With no arguments, `minicc` reads `test.txt` from the current directory and
writes three files:

- `tokens` (`--tokens`): every token, one per line, appended to any
  existing file
- `ast` (`--ast`): a readable dump of the syntax tree
- `chat.s` (`--output`): the generated assembly

The command exits with status 1 if the input cannot be read, a file cannot
be written, or the program fails to parse or compile.

Assemble and link the result with the GNU tools:

```
as chat.s -o chat.o
ld chat.o -o chat
./chat; echo $?
```

For example, this program exits with status 7:

```c
int main() {
    int x = 3;
    return x + 4;
}
```

## Library use

Each stage is available on its own:

```python
from minicc.lexer import tokenize
from minicc.parser import parse
from minicc.codegen import generate, render_assembly
from minicc.nodes import format_program

source = "int main() { int x = 2 * 3; return x + 1; }"

tokens = tokenize(source)
functions = parse(tokens)
print(format_program(functions))

instructions = generate(functions)
print(render_assembly(instructions))
```

- `minicc.lexer`: `Lexer`, `Token`, `TokenType`, `tokenize`, `append_tokens`
- `minicc.nodes`: the syntax tree node classes, `format_ast`,
  `format_program`, `write_program`
- `minicc.parser`: `Parser`, `parse`, `ParseError`
- `minicc.codegen`: `CodeGenerator`, `Memory`, `generate`,
  `render_assembly`, `write_assembly`, `CodegenError`
- `minicc.cli.compile_source` runs the whole pipeline on a string of source
  text and returns the assembly file's text.

Parsing problems raise `minicc.parser.ParseError`, and code generation
problems raise `minicc.codegen.CodegenError`.