"""
ZQC Abstract Syntax Tree (AST) Definitions
==========================================

This module defines the AST node types built by the ZQC parser.

Node Hierarchy
--------------
Node (base)
├── Expressions
│   ├── IdentifierExpression - variable reference
│   ├── NumberLiteral - integer, double or char constant (as float)
│   ├── StringLiteral - string constant
│   ├── ParenthesizedExpression - ( expr )
│   ├── ArraySubscript - array indexing a[i]
│   ├── CallExpression - function call f(a, b)
│   ├── UnaryExpression - prefix + - !
│   ├── CastExpression - ( specifiers ) expr
│   ├── BinaryExpression - * / % + - << >> > < >= <= == != | ^ & && ||
│   └── AssignmentExpression - = += -= *= /=
├── Declarators
│   ├── DeclarationRoot - specifiers, declarators and initializers
│   ├── ArrayDeclarator - base[size]
│   ├── FunctionDeclarator - base(parameters)
│   └── IdentifierDeclarator - plain name
└── Statements
    ├── CompilationUnit - root node, all top-level declarations
    ├── Declaration - declaration, or function definition when it has a body
    ├── CompoundStatement - { items }
    ├── IfStatement - if/else statement
    ├── WhileStatement - while loop
    ├── ReturnStatement - return statement
    ├── BreakStatement - break statement
    ├── ContinueStatement - continue statement
    ├── EmptyStatement - lone ';'
    └── ExpressionStatement - expression followed by ';'

Design Notes
------------
- All nodes are frozen dataclasses; sequences are tuples
- The operator enums are the variant tags of the unary, binary and
  assignment families, so consumers dispatch on (class, operator)
- Every node built by the parser carries the half-open token range it
  covers in ``span``; spans are ignored by equality so hand-built trees
  compare equal to parsed ones
"""

from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Any, Iterator, Optional

from zqc.frontend.tokens import Token


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class TokenSpan:
    """
    Half-open range of token indices ``[start, end)`` covered by a node.
    """
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Node:
    """
    Base class for all AST nodes.

    Attributes:
        span: Token range covered by this node (set by the parser)
    """
    span: Optional[TokenSpan] = field(default=None, compare=False, kw_only=True)

    def children(self) -> Iterator["Node"]:
        """Yield child nodes in field order, flattening tuples."""
        for f in fields(self):
            if f.name == "span":
                continue
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Node):
                        yield item


@dataclass(frozen=True)
class Expression(Node):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Declarator(Node):
    """Base class for declarator nodes."""
    pass


@dataclass(frozen=True)
class Statement(Node):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

class UnaryOperator(Enum):
    """Prefix unary operators."""
    PLUS = auto()         # +x
    MINUS = auto()        # -x
    LOGICAL_NOT = auto()  # !x


class BinaryOperator(Enum):
    """Binary operator types."""
    # Multiplicative
    MULTIPLY = auto()     # *
    DIVIDE = auto()       # /
    MODULO = auto()       # %

    # Additive
    ADD = auto()          # +
    SUBTRACT = auto()     # -

    # Shift
    SHIFT_LEFT = auto()   # <<
    SHIFT_RIGHT = auto()  # >>

    # Relational
    GREATER = auto()      # >
    LESS = auto()         # <
    GREATER_EQ = auto()   # >=
    LESS_EQ = auto()      # <=

    # Equality
    EQUAL = auto()        # ==
    NOT_EQUAL = auto()    # !=

    # Bitwise
    BIT_OR = auto()       # |
    BIT_XOR = auto()      # ^
    BIT_AND = auto()      # &

    # Logical
    LOGICAL_AND = auto()  # &&
    LOGICAL_OR = auto()   # ||


class AssignmentOperator(Enum):
    """Assignment operator types."""
    ASSIGN = auto()       # =
    ADD_ASSIGN = auto()   # +=
    SUB_ASSIGN = auto()   # -=
    MUL_ASSIGN = auto()   # *=
    DIV_ASSIGN = auto()   # /=


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """
    Variable reference expression.

    Attributes:
        name: The identifier text
    """
    name: str


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Numeric constant.

    Integer, double and character constants all normalize to a float;
    a character constant holds its code point.

    Attributes:
        value: The numeric value
    """
    value: float


@dataclass(frozen=True)
class StringLiteral(Expression):
    """
    String constant.

    Attributes:
        text: The decoded string contents, without quotes
    """
    text: str


@dataclass(frozen=True)
class ParenthesizedExpression(Expression):
    """Expression in grouping parentheses."""
    inner: Expression


@dataclass(frozen=True)
class ArraySubscript(Expression):
    """
    Array subscript expression (array[index]).

    Attributes:
        array: The array expression
        index: The index expression
    """
    array: Expression
    index: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call expression.

    Attributes:
        callee: The called expression
        arguments: Argument expressions, in order
    """
    callee: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Prefix unary operation (op x).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class CastExpression(Expression):
    """
    Type cast expression (specifiers)expr.

    Attributes:
        specifiers: The declaration specifier tokens between the parentheses
        operand: The expression being cast
    """
    specifiers: tuple[Token, ...]
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    """
    Assignment expression (target op= value), right-associative.

    Attributes:
        operator: The assignment operator
        target: The assigned expression
        value: The value expression
    """
    operator: AssignmentOperator
    target: Expression
    value: Expression


# =============================================================================
# Declarator Nodes
# =============================================================================

@dataclass(frozen=True)
class IdentifierDeclarator(Declarator):
    """
    Plain name declarator.

    Attributes:
        token: The identifier token
    """
    token: Token

    @property
    def name(self) -> str:
        return self.token.lexeme


@dataclass(frozen=True)
class ArrayDeclarator(Declarator):
    """
    Array declarator (base[size]).

    Attributes:
        base: The declarator being made an array
        size: Size expression, None for ``[]``
    """
    base: Declarator
    size: Optional[Expression] = None


@dataclass(frozen=True)
class DeclarationRoot(Declarator):
    """
    Declaration specifiers with their declarators and initializers.

    ``initializers`` is parallel to ``declarators``; an entry is None when
    that declarator has no ``= value``. A bare ``int;`` has no declarators
    and no initializers. Function parameters are roots with exactly one
    declarator and a single None initializer.

    Attributes:
        specifiers: Declaration specifier tokens (int, double, char, void)
        declarators: Declared names and shapes, in order
        initializers: Optional initializer for each declarator
    """
    specifiers: tuple[Token, ...]
    declarators: tuple[Declarator, ...] = ()
    initializers: tuple[Optional[Expression], ...] = ()

    def __post_init__(self):
        if len(self.initializers) != len(self.declarators):
            raise ValueError(
                f"{len(self.declarators)} declarators but {len(self.initializers)} initializers"
            )


@dataclass(frozen=True)
class FunctionDeclarator(Declarator):
    """
    Function declarator (base(parameters)).

    Attributes:
        base: The declarator being made a function
        parameters: One DeclarationRoot per parameter
    """
    base: Declarator
    parameters: tuple[DeclarationRoot, ...] = ()


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class CompoundStatement(Statement):
    """
    Block enclosed in braces.

    Attributes:
        items: Declarations and statements, in source order
    """
    items: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Declaration(Statement):
    """
    Declaration or function definition.

    Attributes:
        root: The declaration specifiers and declarators
        body: Function body for a definition, None for a plain declaration
    """
    root: DeclarationRoot
    body: Optional[CompoundStatement] = None

    @property
    def is_function_definition(self) -> bool:
        return self.body is not None


@dataclass(frozen=True)
class CompilationUnit(Statement):
    """
    Root node of the AST.

    Attributes:
        declarations: Top-level declarations and function definitions
    """
    declarations: tuple[Declaration, ...] = ()


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    If statement with optional else clause.

    Attributes:
        condition: The condition expression
        then_branch: Statement executed if condition is true
        else_branch: Optional statement executed if condition is false
    """
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    """
    While loop statement.

    Attributes:
        condition: Loop condition
        body: Loop body statement
    """
    condition: Expression
    body: Statement


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """
    Return statement.

    Attributes:
        value: Optional return value expression
    """
    value: Optional[Expression] = None


@dataclass(frozen=True)
class BreakStatement(Statement):
    """Break statement for exiting loops."""
    pass


@dataclass(frozen=True)
class ContinueStatement(Statement):
    """Continue statement for skipping to next loop iteration."""
    pass


@dataclass(frozen=True)
class EmptyStatement(Statement):
    """Lone semicolon."""
    pass


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """
    Expression used as a statement (followed by semicolon).

    Attributes:
        expression: The expression
    """
    expression: Expression


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; every other node falls back to generic_visit, which visits the
    children in field order.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_IdentifierDeclarator(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        collector.visit(unit)
    """

    def visit(self, node: Node) -> Any:
        """Visit a node by dispatching on its class name."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """Visit all children of the node."""
        for child in node.children():
            self.visit(child)
