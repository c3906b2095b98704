"""
AST XML Printer
===============

Renders a parsed tree as indented XML, one nested element per node, for
inspection and for comparing parser output across runs.

Example output for ``int a[10];``::

    <compilation-unit>
        <declaration>
            <decl-root>
                <decl-specifiers>
                    <specifiers>int</specifiers>
                </decl-specifiers>
                <decl-declarators>
                    <decl-array>
                        <array>
                            <decl-identifier>a</decl-identifier>
                        </array>
                        <size>
                            <expr-number>10.0</expr-number>
                        </size>
                    </decl-array>
                </decl-declarators>
                <decl-initializer>
                </decl-initializer>
            </decl-root>
        </declaration>
    </compilation-unit>
"""

from contextlib import contextmanager
from html import escape
from typing import Iterator, Optional

from zqc.frontend.ast import (
    ASTVisitor,
    AssignmentExpression,
    AssignmentOperator,
    BinaryExpression,
    BinaryOperator,
    Node,
    UnaryExpression,
    UnaryOperator,
)


BINARY_ELEMENTS = {
    BinaryOperator.MULTIPLY: "expr-multi",
    BinaryOperator.DIVIDE: "expr-div",
    BinaryOperator.MODULO: "expr-mod",
    BinaryOperator.ADD: "add",
    BinaryOperator.SUBTRACT: "minus",
    BinaryOperator.SHIFT_LEFT: "l-shift",
    BinaryOperator.SHIFT_RIGHT: "r-shift",
    BinaryOperator.GREATER: "greater",
    BinaryOperator.LESS: "less",
    BinaryOperator.GREATER_EQ: "greater-equal",
    BinaryOperator.LESS_EQ: "less-equal",
    BinaryOperator.EQUAL: "equality",
    BinaryOperator.NOT_EQUAL: "inequality",
    BinaryOperator.BIT_OR: "bit-or",
    BinaryOperator.BIT_XOR: "bit-xor",
    BinaryOperator.BIT_AND: "bit-and",
    BinaryOperator.LOGICAL_AND: "logical-and",
    BinaryOperator.LOGICAL_OR: "logical-or",
}

ASSIGNMENT_ELEMENTS = {
    AssignmentOperator.ASSIGN: "assign",
    AssignmentOperator.ADD_ASSIGN: "add-assign",
    AssignmentOperator.SUB_ASSIGN: "sub-assign",
    AssignmentOperator.MUL_ASSIGN: "multi-assign",
    AssignmentOperator.DIV_ASSIGN: "div-assign",
}

UNARY_ELEMENTS = {
    UnaryOperator.PLUS: "expr-unary-plus",
    UnaryOperator.MINUS: "expr-unary-minus",
    UnaryOperator.LOGICAL_NOT: "logical-not",
}


class XMLPrinter(ASTVisitor):
    """
    Pretty-prints an AST as XML with four-space indentation.

    Usage:
        text = XMLPrinter().print(unit)
    """

    INDENT = "    "

    def __init__(self):
        self._lines: list[str] = []
        self._depth = 0

    def print(self, node: Node) -> str:
        """Render a node and everything below it."""
        self._lines = []
        self._depth = 0
        self.visit(node)
        return "\n".join(self._lines) + "\n"

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _line(self, text: str) -> None:
        self._lines.append(self.INDENT * self._depth + text)

    def _leaf(self, tag: str, text: str) -> None:
        self._line(f"<{tag}>{escape(text, quote=False)}</{tag}>")

    @contextmanager
    def _element(self, tag: str) -> Iterator[None]:
        self._line(f"<{tag}>")
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self._line(f"</{tag}>")

    def _child(self, tag: str, node: Optional[Node]) -> None:
        """Wrap a child node (or nothing) in a labelled element."""
        with self._element(tag):
            if node is not None:
                self.visit(node)

    # =========================================================================
    # Declarators
    # =========================================================================

    def visit_DeclarationRoot(self, node) -> None:
        with self._element("decl-root"):
            with self._element("decl-specifiers"):
                for token in node.specifiers:
                    self._leaf("specifiers", token.lexeme)
            with self._element("decl-declarators"):
                for declarator in node.declarators:
                    self.visit(declarator)
            with self._element("decl-initializer"):
                for initializer in node.initializers:
                    if initializer is not None:
                        self.visit(initializer)

    def visit_ArrayDeclarator(self, node) -> None:
        with self._element("decl-array"):
            self._child("array", node.base)
            self._child("size", node.size)

    def visit_FunctionDeclarator(self, node) -> None:
        with self._element("decl-func"):
            self._child("callee", node.base)
            with self._element("parameters"):
                for parameter in node.parameters:
                    self.visit(parameter)

    def visit_IdentifierDeclarator(self, node) -> None:
        self._leaf("decl-identifier", node.name)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_IdentifierExpression(self, node) -> None:
        self._leaf("expr-identifier", node.name)

    def visit_NumberLiteral(self, node) -> None:
        self._leaf("expr-number", str(node.value))

    def visit_StringLiteral(self, node) -> None:
        self._leaf("expr-string", node.text)

    def visit_ParenthesizedExpression(self, node) -> None:
        with self._element("expr-paren"):
            self.visit(node.inner)

    def visit_ArraySubscript(self, node) -> None:
        with self._element("expr-array-sub"):
            self._child("array", node.array)
            self._child("subscript", node.index)

    def visit_CallExpression(self, node) -> None:
        with self._element("expr-func-call"):
            self._child("func", node.callee)
            with self._element("args"):
                for argument in node.arguments:
                    self.visit(argument)

    def visit_UnaryExpression(self, node: UnaryExpression) -> None:
        with self._element(UNARY_ELEMENTS[node.operator]):
            self._child("operand", node.operand)

    def visit_CastExpression(self, node) -> None:
        with self._element("expr-cast"):
            with self._element("types"):
                for token in node.specifiers:
                    self._leaf("type", token.lexeme)
            self._child("operand", node.operand)

    def visit_BinaryExpression(self, node: BinaryExpression) -> None:
        with self._element(BINARY_ELEMENTS[node.operator]):
            self._child("left-operand", node.left)
            self._child("right-operand", node.right)

    def visit_AssignmentExpression(self, node: AssignmentExpression) -> None:
        with self._element(ASSIGNMENT_ELEMENTS[node.operator]):
            self._child("left-operand", node.target)
            self._child("right-operand", node.value)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_CompilationUnit(self, node) -> None:
        with self._element("compilation-unit"):
            for declaration in node.declarations:
                self.visit(declaration)

    def visit_Declaration(self, node) -> None:
        with self._element("declaration"):
            self.visit(node.root)
            if node.body is not None:
                self._child("body", node.body)

    def visit_CompoundStatement(self, node) -> None:
        with self._element("compound-statement"):
            for item in node.items:
                self.visit(item)

    def visit_IfStatement(self, node) -> None:
        with self._element("if-statement"):
            self._child("condition", node.condition)
            self._child("if-body", node.then_branch)
            if node.else_branch is not None:
                self._child("else-body", node.else_branch)

    def visit_WhileStatement(self, node) -> None:
        with self._element("while-statement"):
            self._child("condition", node.condition)
            self._child("body", node.body)

    def visit_ReturnStatement(self, node) -> None:
        with self._element("return-statement"):
            if node.value is not None:
                self._child("value", node.value)

    def visit_BreakStatement(self, node) -> None:
        with self._element("break-statement"):
            pass

    def visit_ContinueStatement(self, node) -> None:
        with self._element("continue-statement"):
            pass

    def visit_EmptyStatement(self, node) -> None:
        with self._element("empty-statement"):
            pass

    def visit_ExpressionStatement(self, node) -> None:
        with self._element("expression-statement"):
            self.visit(node.expression)


def print_xml(node: Node) -> str:
    """Render a tree as XML text."""
    return XMLPrinter().print(node)
