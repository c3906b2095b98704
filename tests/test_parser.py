"""
ZQC Parser Test Suite
=====================

Tests for the recursive descent parser on well-formed input: expression
precedence and associativity, casts, postfix chains, literal values,
statements, declarations and token spans. Error recovery is covered in
test_recovery.py and declarator shapes in test_declarator.py.

Test Organization
-----------------
- TestExpressions: precedence cascade and associativity
- TestPrimaryAndPostfix: literals, calls, subscripts, parentheses
- TestStatements: control flow and blocks
- TestDeclarations: specifiers, declarator lists, initializers
- TestSpans: token ranges recorded on nodes
- TestScenarios: end-to-end examples
- TestGeneratedPrograms: randomly generated well-formed programs
"""

import random

import pytest

from zqc.frontend.ast import (
    ArrayDeclarator,
    ArraySubscript,
    AssignmentExpression,
    AssignmentOperator,
    BinaryExpression,
    BinaryOperator,
    BreakStatement,
    CallExpression,
    CastExpression,
    CompilationUnit,
    CompoundStatement,
    ContinueStatement,
    Declaration,
    DeclarationRoot,
    EmptyStatement,
    ExpressionStatement,
    FunctionDeclarator,
    IdentifierDeclarator,
    IdentifierExpression,
    IfStatement,
    NumberLiteral,
    ParenthesizedExpression,
    ReturnStatement,
    StringLiteral,
    UnaryExpression,
    UnaryOperator,
    WhileStatement,
)
from zqc.frontend.diagnostics import DiagnosticKind
from zqc.frontend.driver import parse_source, parse_tokens
from zqc.frontend.lexer import tokenize
from zqc.frontend.parser import Parser
from zqc.frontend.tokens import Token, TokenKind


# =============================================================================
# Helpers
# =============================================================================

INT = Token(TokenKind.INT, "int", 1)
CHAR = Token(TokenKind.CHAR, "char", 1)
DOUBLE = Token(TokenKind.DOUBLE, "double", 1)


def parse(source: str) -> CompilationUnit:
    """Parse source that must be free of errors."""
    outcome = parse_source(source, "test.c")
    assert outcome.ok, outcome.diagnostics.report()
    return outcome.unit


def body(source: str) -> tuple:
    """Parse statements inside a function body and return its items."""
    unit = parse(f"void f() {{ {source} }}")
    return unit.declarations[0].body.items


def expr(source: str):
    """Parse a single expression statement and return the expression."""
    (statement,) = body(f"{source};")
    assert isinstance(statement, ExpressionStatement)
    return statement.expression


def name(text: str) -> IdentifierExpression:
    return IdentifierExpression(text)


def num(value) -> NumberLiteral:
    return NumberLiteral(float(value))


def binary(operator, left, right) -> BinaryExpression:
    return BinaryExpression(operator, left, right)


def decl_name(text: str, line: int = 1) -> IdentifierDeclarator:
    return IdentifierDeclarator(Token(TokenKind.IDENTIFIER, text, line))


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Tests for the precedence cascade."""

    def test_multiplication_binds_tighter(self):
        """a + b * c parses as a + (b * c)."""
        assert expr("a + b * c") == binary(
            BinaryOperator.ADD,
            name("a"),
            binary(BinaryOperator.MULTIPLY, name("b"), name("c")),
        )

    def test_left_associative(self):
        """a - b - c parses as (a - b) - c."""
        assert expr("a - b - c") == binary(
            BinaryOperator.SUBTRACT,
            binary(BinaryOperator.SUBTRACT, name("a"), name("b")),
            name("c"),
        )

    def test_multiplicative_left_associative(self):
        assert expr("a / b % c") == binary(
            BinaryOperator.MODULO,
            binary(BinaryOperator.DIVIDE, name("a"), name("b")),
            name("c"),
        )

    def test_assignment_right_associative(self):
        """a = b = c parses as a = (b = c)."""
        assert expr("a = b = c") == AssignmentExpression(
            AssignmentOperator.ASSIGN,
            name("a"),
            AssignmentExpression(AssignmentOperator.ASSIGN, name("b"), name("c")),
        )

    @pytest.mark.parametrize("op,operator", [
        ("=", AssignmentOperator.ASSIGN),
        ("+=", AssignmentOperator.ADD_ASSIGN),
        ("-=", AssignmentOperator.SUB_ASSIGN),
        ("*=", AssignmentOperator.MUL_ASSIGN),
        ("/=", AssignmentOperator.DIV_ASSIGN),
    ])
    def test_assignment_operators(self, op, operator):
        assert expr(f"x {op} 1") == AssignmentExpression(operator, name("x"), num(1))

    @pytest.mark.parametrize("op", ["%=", "&=", "|=", "^="])
    def test_operators_without_assignment_form(self, op):
        """Compound operators the grammar lacks are lexed but not parsed."""
        outcome = parse_source(f"void f() {{ x {op} 1; }}")
        assert outcome.diagnostics.error_count() == 1

    def test_assignment_value_is_full_expression(self):
        assert expr("x = a || b") == AssignmentExpression(
            AssignmentOperator.ASSIGN,
            name("x"),
            binary(BinaryOperator.LOGICAL_OR, name("a"), name("b")),
        )

    def test_logical_levels(self):
        """|| is below &&."""
        assert expr("a || b && c") == binary(
            BinaryOperator.LOGICAL_OR,
            name("a"),
            binary(BinaryOperator.LOGICAL_AND, name("b"), name("c")),
        )

    def test_bitwise_levels(self):
        """| is below ^, which is below &."""
        assert expr("a | b ^ c & d") == binary(
            BinaryOperator.BIT_OR,
            name("a"),
            binary(
                BinaryOperator.BIT_XOR,
                name("b"),
                binary(BinaryOperator.BIT_AND, name("c"), name("d")),
            ),
        )

    def test_equality_below_relational(self):
        assert expr("a < b == c >= d") == binary(
            BinaryOperator.EQUAL,
            binary(BinaryOperator.LESS, name("a"), name("b")),
            binary(BinaryOperator.GREATER_EQ, name("c"), name("d")),
        )

    def test_relational_operators(self):
        assert expr("a > b").operator == BinaryOperator.GREATER
        assert expr("a <= b").operator == BinaryOperator.LESS_EQ
        assert expr("a != b").operator == BinaryOperator.NOT_EQUAL

    def test_shift_below_additive(self):
        assert expr("1 << 2 + 3") == binary(
            BinaryOperator.SHIFT_LEFT,
            num(1),
            binary(BinaryOperator.ADD, num(2), num(3)),
        )
        assert expr("a >> b").operator == BinaryOperator.SHIFT_RIGHT

    def test_unary_operators(self):
        assert expr("-a * !b") == binary(
            BinaryOperator.MULTIPLY,
            UnaryExpression(UnaryOperator.MINUS, name("a")),
            UnaryExpression(UnaryOperator.LOGICAL_NOT, name("b")),
        )
        assert expr("+a") == UnaryExpression(UnaryOperator.PLUS, name("a"))

    def test_nested_unary(self):
        assert expr("- -a") == UnaryExpression(
            UnaryOperator.MINUS,
            UnaryExpression(UnaryOperator.MINUS, name("a")),
        )

    def test_cast(self):
        assert expr("(int) x") == CastExpression((INT,), name("x"))

    def test_cast_binds_tighter_than_binary(self):
        assert expr("(double) a + b") == binary(
            BinaryOperator.ADD,
            CastExpression((DOUBLE,), name("a")),
            name("b"),
        )

    def test_nested_casts(self):
        assert expr("(char) (int) x") == CastExpression(
            (CHAR,), CastExpression((INT,), name("x")),
        )

    def test_cast_as_multiplicative_operand(self):
        """A cast is accepted on the right of *, / and %."""
        assert expr("a * (int) b") == binary(
            BinaryOperator.MULTIPLY,
            name("a"),
            CastExpression((INT,), name("b")),
        )

    def test_cast_under_unary(self):
        assert expr("-(int) x") == UnaryExpression(
            UnaryOperator.MINUS, CastExpression((INT,), name("x")),
        )

    def test_parenthesized_grouping(self):
        assert expr("(a + b) * c") == binary(
            BinaryOperator.MULTIPLY,
            ParenthesizedExpression(binary(BinaryOperator.ADD, name("a"), name("b"))),
            name("c"),
        )

    def test_assignment_to_parenthesized_target(self):
        assert expr("(a) = 1") == AssignmentExpression(
            AssignmentOperator.ASSIGN, ParenthesizedExpression(name("a")), num(1),
        )


# =============================================================================
# Primary and Postfix Tests
# =============================================================================

class TestPrimaryAndPostfix:
    """Tests for literals and postfix chains."""

    def test_decimal(self):
        assert expr("42") == num(42)

    def test_hexadecimal(self):
        assert expr("0x1F") == num(31)

    def test_double(self):
        assert expr("2.5") == num(2.5)

    def test_char_constant(self):
        """Character constants become their code point."""
        assert expr("'A'") == num(65)

    def test_char_escape(self):
        assert expr(r"'\n'") == num(10)

    def test_empty_char_constant(self):
        assert expr("''") == num(0)

    def test_string_is_decoded(self):
        assert expr(r'"hi\n"') == StringLiteral("hi\n")

    def test_invalid_numeric_constant(self):
        """A malformed constant from a token file is an expression error."""
        tokens = [
            Token(TokenKind.INT, "int", 1),
            Token(TokenKind.IDENTIFIER, "a", 1),
            Token(TokenKind.ASSIGN, "=", 1),
            Token(TokenKind.INTEGER_CONSTANT, "1x", 1),
            Token(TokenKind.SEMICOLON, ";", 1),
            Token(TokenKind.EOF, "", 1),
        ]
        outcome = parse_tokens(tokens)
        (diagnostic,) = outcome.diagnostics.errors
        assert diagnostic.kind == DiagnosticKind.EXPECTED_EXPRESSION
        assert diagnostic.position == 3
        assert diagnostic.message == "invalid numeric constant '1x'"

    def test_call_without_arguments(self):
        assert expr("f()") == CallExpression(name("f"))

    def test_call_with_arguments(self):
        assert expr("f(1, x = 2, g(y))") == CallExpression(
            name("f"),
            (
                num(1),
                AssignmentExpression(AssignmentOperator.ASSIGN, name("x"), num(2)),
                CallExpression(name("g"), (name("y"),)),
            ),
        )

    def test_subscript(self):
        assert expr("a[i + 1]") == ArraySubscript(
            name("a"), binary(BinaryOperator.ADD, name("i"), num(1)),
        )

    def test_postfix_chain(self):
        """Postfix operators chain left to right."""
        assert expr("a[1](2)[3]") == ArraySubscript(
            CallExpression(ArraySubscript(name("a"), num(1)), (num(2),)),
            num(3),
        )

    def test_unary_applies_to_postfix(self):
        assert expr("-a[0]") == UnaryExpression(
            UnaryOperator.MINUS, ArraySubscript(name("a"), num(0)),
        )


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Tests for statements inside function bodies."""

    def test_if_without_else(self):
        (statement,) = body("if (x) y;")
        assert statement == IfStatement(name("x"), ExpressionStatement(name("y")))

    def test_if_else(self):
        (statement,) = body("if (x) y; else z;")
        assert statement == IfStatement(
            name("x"),
            ExpressionStatement(name("y")),
            ExpressionStatement(name("z")),
        )

    def test_dangling_else_binds_to_nearest_if(self):
        (statement,) = body("if (a) if (b) x; else y;")
        assert statement.else_branch is None
        assert statement.then_branch == IfStatement(
            name("b"),
            ExpressionStatement(name("x")),
            ExpressionStatement(name("y")),
        )

    def test_else_if_chain(self):
        (statement,) = body("if (a) x; else if (b) y; else z;")
        assert isinstance(statement.else_branch, IfStatement)
        assert statement.else_branch.else_branch == ExpressionStatement(name("z"))

    def test_while(self):
        (statement,) = body("while (i < 10) { i += 1; if (i) continue; break; }")
        assert statement == WhileStatement(
            binary(BinaryOperator.LESS, name("i"), num(10)),
            CompoundStatement((
                ExpressionStatement(
                    AssignmentExpression(AssignmentOperator.ADD_ASSIGN, name("i"), num(1)),
                ),
                IfStatement(name("i"), ContinueStatement()),
                BreakStatement(),
            )),
        )

    def test_return(self):
        assert body("return;") == (ReturnStatement(),)
        assert body("return a * 2;") == (
            ReturnStatement(binary(BinaryOperator.MULTIPLY, name("a"), num(2))),
        )

    def test_empty_statement(self):
        assert body(";;") == (EmptyStatement(), EmptyStatement())

    def test_empty_body(self):
        assert body("") == ()

    def test_nested_blocks(self):
        assert body("{ { } ; }") == (
            CompoundStatement((CompoundStatement(()), EmptyStatement())),
        )

    def test_declarations_mixed_with_statements(self):
        items = body("int a; a = 1; double b; b = a;")
        assert [type(item) for item in items] == [
            Declaration, ExpressionStatement, Declaration, ExpressionStatement,
        ]

    def test_cast_expression_statement(self):
        """A statement starting with a cast is not taken for a declaration."""
        (statement,) = body("(int) x;")
        assert statement == ExpressionStatement(CastExpression((INT,), name("x")))

    def test_keyword_statements_need_semicolons(self):
        outcome = parse_source("void f() { break }")
        assert not outcome.ok


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Tests for top-level and block declarations."""

    def test_specifiers_only(self):
        (declaration,) = parse("int;").declarations
        assert declaration == Declaration(DeclarationRoot((INT,)))

    def test_multiple_specifiers(self):
        (declaration,) = parse("double int v;").declarations
        assert declaration.root.specifiers == (DOUBLE, INT)

    def test_declarator_list_with_initializers(self):
        (declaration,) = parse("int a = 1, b, c = a;").declarations
        root = declaration.root
        assert [d.name for d in root.declarators] == ["a", "b", "c"]
        assert root.initializers == (num(1), None, name("a"))

    def test_initializer_is_assignment_expression(self):
        (declaration,) = parse("int a = b = 2;").declarations
        assert declaration.root.initializers == (
            AssignmentExpression(AssignmentOperator.ASSIGN, name("b"), num(2)),
        )

    def test_function_prototype_and_definition(self):
        unit = parse("int f(int a); int f(int a) { return a; }")
        prototype, definition = unit.declarations
        assert not prototype.is_function_definition
        assert definition.is_function_definition
        assert prototype.root == definition.root

    def test_multiple_top_level_declarations(self):
        unit = parse("int a;\nchar b[4];\nvoid main() { }")
        assert len(unit.declarations) == 3

    def test_empty_unit(self):
        assert parse("") == CompilationUnit(())

    def test_stream_without_eof_is_rejected(self):
        with pytest.raises(ValueError):
            Parser([Token(TokenKind.INT, "int", 1)])


# =============================================================================
# Span Tests
# =============================================================================

class TestSpans:
    """Tests for token ranges recorded on nodes."""

    def test_declaration_spans(self):
        unit = parse("int a;")
        (declaration,) = unit.declarations
        assert (unit.span.start, unit.span.end) == (0, 3)
        assert (declaration.span.start, declaration.span.end) == (0, 3)
        assert (declaration.root.span.start, declaration.root.span.end) == (0, 2)
        declarator = declaration.root.declarators[0]
        assert (declarator.span.start, declarator.span.end) == (1, 2)

    def test_binary_span_covers_operands(self):
        expression = expr("a + b * c")
        # void f ( ) { a + b * c ; }
        assert (expression.span.start, expression.span.end) == (5, 10)
        assert (expression.right.span.start, expression.right.span.end) == (7, 10)

    def test_function_definition_span(self):
        (definition,) = parse("int f() { return 1; }").declarations
        assert (definition.span.start, definition.span.end) == (0, 9)
        assert (definition.body.span.start, definition.body.span.end) == (4, 9)


# =============================================================================
# Scenario Tests
# =============================================================================

class TestScenarios:
    """End-to-end examples."""

    def test_simple_declaration(self):
        outcome = parse_source("int a;")
        assert outcome.ok
        assert outcome.unit == CompilationUnit((
            Declaration(DeclarationRoot((INT,), (decl_name("a"),), (None,))),
        ))

    def test_array_declaration(self):
        (declaration,) = parse("int a[10];").declarations
        assert declaration.root.declarators == (ArrayDeclarator(decl_name("a"), num(10)),)

    def test_function_definition(self):
        (declaration,) = parse("int f(int a, int b) { return a + b; }").declarations
        assert declaration == Declaration(
            DeclarationRoot(
                (INT,),
                (FunctionDeclarator(
                    decl_name("f"),
                    (
                        DeclarationRoot((INT,), (decl_name("a"),), (None,)),
                        DeclarationRoot((INT,), (decl_name("b"),), (None,)),
                    ),
                ),),
                (None,),
            ),
            CompoundStatement((
                ReturnStatement(binary(BinaryOperator.ADD, name("a"), name("b"))),
            )),
        )

    def test_if_else_blocks(self):
        (statement,) = body("if (x) { y = 1; } else { y = 2; }")
        assert statement == IfStatement(
            name("x"),
            CompoundStatement((
                ExpressionStatement(AssignmentExpression(AssignmentOperator.ASSIGN, name("y"), num(1))),
            )),
            CompoundStatement((
                ExpressionStatement(AssignmentExpression(AssignmentOperator.ASSIGN, name("y"), num(2))),
            )),
        )

    def test_program_over_several_lines(self):
        source = (
            "double scale(double v, int n);\n"
            "\n"
            "int main() {\n"
            "    int i = 0;\n"
            "    double total[8];\n"
            "    while (i < 8) {\n"
            "        total[i] = scale((double) i, 2) * 0.5;\n"
            "        i += 1;\n"
            "    }\n"
            "    return 0;\n"
            "}\n"
        )
        unit = parse(source)
        assert len(unit.declarations) == 2
        main = unit.declarations[1]
        assert main.root.declarators[0].base.name == "main"
        assert isinstance(main.body.items[2], WhileStatement)


# =============================================================================
# Generated Programs
# =============================================================================

class ProgramGenerator:
    """Builds random well-formed programs from the grammar's productions."""

    SPECIFIERS = ["int", "char", "double", "void", "int int"]
    BINARY = ["*", "/", "%", "+", "-", "<<", ">>", "<", ">", "<=", ">=",
              "==", "!=", "&", "^", "|", "&&", "||"]
    ASSIGN = ["=", "+=", "-=", "*=", "/="]
    LEAVES = ["x", "y", "count", "12", "0x1F", "2.5", "'c'", '"text"']

    def __init__(self, seed: int):
        self.rng = random.Random(seed)

    def expression(self, depth: int = 0) -> str:
        rng = self.rng
        if depth >= 3:
            return rng.choice(self.LEAVES)
        choice = rng.randrange(8)
        if choice == 0:
            return f"({self.expression(depth + 1)})"
        if choice == 1:
            return f"{rng.choice(['-', '+', '!'])}{self.expression(depth + 1)}"
        if choice == 2:
            return f"({rng.choice(['int', 'double', 'char'])}) {self.expression(depth + 1)}"
        if choice == 3:
            arguments = ", ".join(self.expression(depth + 1) for _ in range(rng.randrange(3)))
            return f"f({arguments})"
        if choice == 4:
            return f"table[{self.expression(depth + 1)}]"
        if choice == 5:
            return rng.choice(self.LEAVES)
        left = self.expression(depth + 1)
        right = self.expression(depth + 1)
        return f"{left} {rng.choice(self.BINARY)} {right}"

    def statement(self, depth: int = 0) -> str:
        rng = self.rng
        choice = rng.randrange(9 if depth < 3 else 5)
        if choice == 0:
            return ";"
        if choice == 1:
            return rng.choice(["break;", "continue;", "return;"])
        if choice == 2:
            return f"return {self.expression()};"
        if choice == 3:
            return f"x {rng.choice(self.ASSIGN)} {self.expression()};"
        if choice == 4:
            return f"{self.expression()};"
        if choice == 5:
            return f"while ({self.expression()}) {self.statement(depth + 1)}"
        if choice == 6:
            text = f"if ({self.expression()}) {self.statement(depth + 1)}"
            if rng.random() < 0.5:
                text += f" else {self.statement(depth + 1)}"
            return text
        return self.block(depth + 1)

    def block(self, depth: int) -> str:
        items = []
        for _ in range(self.rng.randrange(4)):
            if self.rng.random() < 0.3:
                items.append(self.declaration())
            else:
                items.append(self.statement(depth))
        return "{\n" + "\n".join(items) + "\n}"

    def declarator(self) -> str:
        rng = self.rng
        name = rng.choice(["a", "b", "total", "buf"])
        choice = rng.randrange(4)
        if choice == 0:
            return f"{name}[{rng.randrange(1, 9)}]"
        if choice == 1:
            return f"{name}[]"
        if choice == 2:
            return f"{name}[2][3]"
        return name

    def declaration(self) -> str:
        rng = self.rng
        parts = []
        for _ in range(rng.randrange(1, 4)):
            part = self.declarator()
            if rng.random() < 0.4:
                part += f" = {self.expression()}"
            parts.append(part)
        return f"{rng.choice(self.SPECIFIERS)} {', '.join(parts)};"

    def function(self) -> str:
        rng = self.rng
        parameters = ", ".join(
            f"{rng.choice(self.SPECIFIERS)} {self.declarator()}"
            for _ in range(rng.randrange(3))
        )
        header = f"{rng.choice(self.SPECIFIERS)} fn{rng.randrange(100)}({parameters})"
        if rng.random() < 0.3:
            return header + ";"
        return header + " " + self.block(0)

    def program(self) -> str:
        items = []
        for _ in range(self.rng.randrange(1, 6)):
            items.append(self.function() if self.rng.random() < 0.6 else self.declaration())
        return "\n".join(items)


def check_nested_spans(node):
    """Every child lies inside its parent and siblings do not overlap."""
    assert node.span is not None, node
    children = sorted(node.children(), key=lambda child: child.span.start)
    previous_end = node.span.start
    for child in children:
        assert child.span is not None, child
        assert child.span.start >= previous_end
        assert child.span.end <= node.span.end
        assert len(child.span) > 0
        previous_end = child.span.end
        check_nested_spans(child)


class TestGeneratedPrograms:
    """Well-formed programs parse cleanly and their spans tile the input."""

    @pytest.mark.parametrize("seed", range(40))
    def test_generated_program(self, seed):
        source = ProgramGenerator(seed).program()
        tokens = tokenize(source)
        outcome = parse_tokens(tokens)
        assert outcome.ok, f"{source}\n{outcome.diagnostics.report()}"

        declarations = outcome.unit.declarations
        position = 0
        for declaration in declarations:
            assert declaration.span.start == position
            position = declaration.span.end
        assert position == len(tokens) - 1

        check_nested_spans(outcome.unit)

    @pytest.mark.parametrize("seed", range(5))
    def test_parse_is_deterministic(self, seed):
        tokens = tokenize(ProgramGenerator(seed).program())
        first = Parser(tokens)
        second = Parser(tokens)
        assert first.parse() == second.parse()
        assert first.diagnostics.errors == second.diagnostics.errors
