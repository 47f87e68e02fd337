import pytest

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
    Unary,
    Variable,
    VariableDeclaration,
    While,
    format_ast,
    format_program,
    write_program,
)


def ident(text):
    return Token(TokenType.IDENTIFIER, text, 1)


def int_type():
    return Token(TokenType.INT_TYPE, "int", 1)


def sample_function():
    body = Block(
        [
            Declaration(
                VariableDeclaration(ident("x"), int_type()),
                Binary(IntLiteral(1), TokenType.PLUS, Variable(ident("y"))),
            ),
            Return(Variable(ident("x"))),
        ]
    )
    return Function(
        ident("main"),
        int_type(),
        [VariableDeclaration(ident("y"), int_type())],
        body,
    )


def test_int_literal():
    assert format_ast(IntLiteral(42)) == "IntLiteral: 42\n"


def test_none_is_null_with_indent():
    assert format_ast(None, 2) == "    NULL\n"


def test_variable_and_declaration_without_type():
    assert format_ast(Variable(ident("abc"))) == "Variable: abc\n"
    assert format_ast(VariableDeclaration(ident("abc"))) == "Variable: abc\n"


def test_variable_declaration_with_type():
    node = VariableDeclaration(ident("x"), int_type())
    assert format_ast(node) == "Variable Declaration: x of type int\n"


def test_binary_layout():
    node = Binary(IntLiteral(1), TokenType.PLUS, Variable(ident("y")))
    assert format_ast(node) == (
        "Binary Expression: 'PLUS'\n"
        "  Left:\n"
        "    IntLiteral: 1\n"
        "  Right:\n"
        "    Variable: y\n"
    )


def test_unary_layout():
    node = Unary("-", IntLiteral(3))
    lines = format_ast(node).splitlines()
    assert lines == ["Unary Expression: '-'", "  Operand:", "    IntLiteral: 3"]


def test_else_has_no_condition():
    node = Conditional(NodeType.ELSE_STATEMENT, None, Block())
    lines = format_ast(node).splitlines()
    assert lines[0] == "Else Statement:"
    assert "  Condition:" not in lines


def test_if_and_else_if_titles():
    cond = Variable(ident("a"))
    assert format_ast(Conditional(NodeType.IF_STATEMENT, cond, Block())).startswith(
        "If Statement:\n  Condition:\n"
    )
    assert format_ast(
        Conditional(NodeType.ELSE_IF_STATEMENT, cond, Block())
    ).startswith("Else If Statement:\n  Condition:\n")


def test_conditional_rejects_other_kind():
    with pytest.raises(ValueError):
        Conditional(NodeType.BLOCK, None, Block())


def test_while_layout():
    node = While(Variable(ident("a")), Block())
    lines = format_ast(node).splitlines()
    assert lines[0] == "While Statement:"
    assert lines[-1] == "    Block with 0 statement(s):"


def test_function_call_counts_arguments():
    node = FunctionCall(ident("f"), [IntLiteral(1), Variable(ident("b"))])
    lines = format_ast(node).splitlines()
    assert lines[0] == "Function Call: f with 2 argument(s)"
    assert lines[1:] == ["  IntLiteral: 1", "  Variable: b"]


def test_function_layout():
    text = format_ast(sample_function())
    lines = text.splitlines()
    assert lines[0] == "Function Declaration: main returns int"
    assert lines[1] == "  Parameters (1):"
    assert lines[2] == "    Variable Declaration: y of type int"
    assert lines[3] == "  Body Statements:"
    assert lines[4] == "    Block with 2 statement(s):"
    assert "        Return Statement:" not in lines
    assert "      Return Statement:" in lines


def test_indent_shifts_every_line():
    node = sample_function()
    plain = format_ast(node).splitlines()
    shifted = format_ast(node, 1).splitlines()
    assert shifted == ["  " + line for line in plain]


def test_node_types():
    assert IntLiteral(1).type is NodeType.INT_LITERAL
    assert Block().type is NodeType.BLOCK
    assert sample_function().type is NodeType.FUNCTION_DECLARATION
    assert (
        Conditional(NodeType.ELSE_STATEMENT, None, None).type
        is NodeType.ELSE_STATEMENT
    )


def test_unknown_node():
    class Custom(Node):
        @property
        def type(self):
            return NodeType.ASSIGNMENT

    assert format_ast(Custom()) == "Unknown AST Node\n"


def test_format_program_skips_none_and_keeps_positions():
    text = format_program([None, IntLiteral(7), None])
    assert text.startswith("Printing AST for the entire file:\n")
    assert "--- AST Node 1 ---" in text
    assert "--- AST Node 0 ---" not in text
    assert "--- AST Node 2 ---" not in text
    assert text.endswith("IntLiteral: 7\n")


def test_format_program_empty():
    assert format_program([]) == "Printing AST for the entire file:\n"


def test_write_program_round_trip(tmp_path):
    path = tmp_path / "ast"
    path.write_text("old contents", encoding="utf-8")
    nodes = [sample_function()]
    write_program(nodes, path)
    assert path.read_text(encoding="utf-8") == format_program(nodes)