"""
ZQC Front End
=============

Pipeline
--------
    Source → Lexer → tokens → Parser → AST
                       ↕
                  token XML file

The parser is the core: recursive descent where every rule is a function
of a start index returning an explicit Success or Failure, alternatives
are tried in order with the deepest failure kept, declarators are
resolved by bracket scanning, and the compilation unit and each block
recover from failed items by skipping to a synchronization point.

Usage
-----
>>> from zqc.frontend import parse_source, XMLPrinter
>>> outcome = parse_source("int a[10];")
>>> outcome.ok
True
>>> print(XMLPrinter().print(outcome.unit))  # doctest: +SKIP

Language Subset
---------------
- Types: int, double, char, void (no typedef names)
- Declarators: names, arrays a[n], functions f(int x)
- Statements: if/else, while, return, break, continue, blocks, ;
- Expressions: assignment (= += -= *= /=), || && | ^ &, comparisons,
  shifts, + - * / %, casts, prefix ! + -, calls, subscripts
"""

from zqc.frontend.ast import (
    ASTVisitor,
    Node,
    Expression,
    Declarator,
    Statement,
    TokenSpan,
    IdentifierExpression,
    NumberLiteral,
    StringLiteral,
    ParenthesizedExpression,
    ArraySubscript,
    CallExpression,
    UnaryExpression,
    UnaryOperator,
    CastExpression,
    BinaryExpression,
    BinaryOperator,
    AssignmentExpression,
    AssignmentOperator,
    DeclarationRoot,
    ArrayDeclarator,
    FunctionDeclarator,
    IdentifierDeclarator,
    CompilationUnit,
    Declaration,
    CompoundStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    BreakStatement,
    ContinueStatement,
    EmptyStatement,
    ExpressionStatement,
)
from zqc.frontend.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticKind,
    ErrorMode,
)
from zqc.frontend.driver import ParseOutcome, parse_source, parse_token_file, parse_tokens
from zqc.frontend.errors import (
    FrontendError,
    LexerError,
    InvalidCharacterError,
    TokenFormatError,
    ParseFailedError,
)
from zqc.frontend.lexer import Lexer, tokenize
from zqc.frontend.options import ParserOptions
from zqc.frontend.parser import Parser
from zqc.frontend.token_xml import dump_tokens, load_tokens, load_token_file
from zqc.frontend.tokens import Token, TokenKind
from zqc.frontend.xml_printer import XMLPrinter, print_xml
