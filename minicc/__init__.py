"""A tiny compiler for a subset of C: lexer, parser, syntax tree and x86-64 code generator."""

__version__ = "1.0.0"