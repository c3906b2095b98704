"""
ZQC - Front End for a Small C-like Language
===========================================

This package turns ZQC source text, or a serialized token stream, into an
abstract syntax tree. Syntax errors are collected rather than fatal: the
parser recovers after each one so a single run reports as many problems
as it can.

Main Components
---------------
- **frontend**: tokens, lexer, token XML codec, parser, AST, diagnostics
    The recursive descent parser with ordered-alternative backtracking,
    declarator resolution and panic-mode error recovery

- **cli**: command-line tools
    ``zqclex`` (source to token XML) and ``zqcparse`` (source or token XML
    to AST XML)

Quick Start
-----------
Parse a program:
    >>> from zqc.frontend import parse_source
    >>> outcome = parse_source("int f(int a, int b) { return a + b; }")
    >>> outcome.ok
    True

Report errors:
    >>> outcome = parse_source("int a")
    >>> print(outcome.diagnostics.report())  # doctest: +SKIP
    <input>:1: error: expected ';' after 'a'
        int a
             ^

Or use the command-line tools:
    $ zqclex prog.c
    $ zqcparse --tokens prog.c.xml
"""

__version__ = "1.0.0"

from zqc.errors import ZQCError, SourceLocation

__all__ = ["__version__", "ZQCError", "SourceLocation"]
