"""
Declarator Resolution
=====================

Works out what a declarator declares without a symbol table, in two
passes over the tokens:

1. End finding. Starting at the declarator's first token, repeatedly
   step over an identifier, a balanced ``( ... )`` group or a balanced
   ``[ ... ]`` group. The index reached is the exclusive end.

2. Shape resolution over ``[start, end)``, working from the right:

   - a single identifier is an IdentifierDeclarator
   - a trailing ``]`` makes an ArrayDeclarator whose base is everything
     before the matching ``[`` and whose size is the expression between
     the brackets (None when they are empty)
   - a trailing ``)`` makes a FunctionDeclarator whose base is everything
     before the matching ``(`` and whose parameters are the
     comma-separated ``specifiers declarator`` pairs inside
   - anything else is an invalid declarator

For ``int table[4](char c)`` the end is the ``)``, the outer shape is a
function taking ``char c``, and its base ``table[4]`` is an array.
"""

from typing import TYPE_CHECKING, Union

from zqc.frontend.ast import (
    ArrayDeclarator,
    DeclarationRoot,
    FunctionDeclarator,
    IdentifierDeclarator,
)
from zqc.frontend.diagnostics import DiagnosticKind
from zqc.frontend.results import Failure, ParseResult, Success, expected, fail
from zqc.frontend.tokens import TokenKind

if TYPE_CHECKING:
    from zqc.frontend.parser import Parser


_OPEN_TO_CLOSE = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
}
_CLOSE_TO_OPEN = {close: open_ for open_, close in _OPEN_TO_CLOSE.items()}

# A bracket scan never runs past these
_SCAN_STOPS = frozenset({
    TokenKind.SEMICOLON,
    TokenKind.LBRACE,
    TokenKind.RBRACE,
    TokenKind.EOF,
})


class DeclaratorResolver:
    """
    Resolves declarators for a Parser.

    The resolver shares the parser's token stream and calls back into it
    for array size expressions and parameter specifiers.
    """

    def __init__(self, parser: "Parser"):
        self.parser = parser
        self.tokens = parser.tokens

    def parse(self, start: int) -> ParseResult:
        """Parse the declarator starting at ``start``."""
        end = self.find_end(start)
        if isinstance(end, Failure):
            return end
        if end == start:
            return fail(DiagnosticKind.INVALID_DECLARATOR, start)
        result = self.resolve(start, end)
        if not result.ok:
            return result
        return Success(result.node, end)

    # =========================================================================
    # End Finding
    # =========================================================================

    def find_end(self, start: int) -> Union[int, Failure]:
        """Return the exclusive end index of the declarator at ``start``."""
        pos = start
        while True:
            kind = self.tokens[pos].kind
            if kind == TokenKind.IDENTIFIER:
                pos += 1
            elif kind in _OPEN_TO_CLOSE:
                close = self.match_forward(pos)
                if isinstance(close, Failure):
                    return close
                pos = close + 1
            else:
                return pos

    def match_forward(self, open_index: int) -> Union[int, Failure]:
        """Index of the bracket closing the one at ``open_index``."""
        stack = []
        pos = open_index
        while True:
            kind = self.tokens[pos].kind
            if kind in _OPEN_TO_CLOSE:
                stack.append(pos)
            elif kind in _CLOSE_TO_OPEN:
                if self.tokens[stack[-1]].kind != _CLOSE_TO_OPEN[kind]:
                    return fail(DiagnosticKind.MISMATCHED_DELIMITER, pos)
                stack.pop()
                if not stack:
                    return pos
            elif kind in _SCAN_STOPS:
                return fail(DiagnosticKind.MISMATCHED_DELIMITER, stack[-1], depth=pos)
            pos += 1

    def match_backward(self, close_index: int, start: int) -> Union[int, Failure]:
        """Index of the bracket opening the one at ``close_index``, not before ``start``."""
        stack = []
        pos = close_index
        while pos >= start:
            kind = self.tokens[pos].kind
            if kind in _CLOSE_TO_OPEN:
                stack.append(pos)
            elif kind in _OPEN_TO_CLOSE:
                if self.tokens[stack[-1]].kind != _OPEN_TO_CLOSE[kind]:
                    return fail(DiagnosticKind.MISMATCHED_DELIMITER, pos, depth=close_index)
                stack.pop()
                if not stack:
                    return pos
            pos -= 1
        return fail(DiagnosticKind.MISMATCHED_DELIMITER, close_index)

    # =========================================================================
    # Shape Resolution
    # =========================================================================

    def resolve(self, start: int, end: int) -> ParseResult:
        """Resolve the declarator covering exactly ``[start, end)``."""
        return self.parser.guarded(start, lambda _: self._resolve(start, end))

    def _resolve(self, start: int, end: int) -> ParseResult:
        span = self.parser.span(start, end)
        if end <= start:
            return fail(DiagnosticKind.INVALID_DECLARATOR, start)

        last = self.tokens[end - 1].kind
        if end - start == 1 and last == TokenKind.IDENTIFIER:
            return Success(IdentifierDeclarator(self.tokens[start], span=span), end)

        if last not in (TokenKind.RBRACKET, TokenKind.RPAREN):
            return fail(DiagnosticKind.INVALID_DECLARATOR, start)

        open_index = self.match_backward(end - 1, start)
        if isinstance(open_index, Failure):
            return open_index
        if open_index == start:
            return fail(DiagnosticKind.INVALID_DECLARATOR, start)

        base = self.resolve(start, open_index)
        if not base.ok:
            return base

        if last == TokenKind.RBRACKET:
            size = self._array_size(open_index, end - 1)
            if not size.ok:
                return size
            return Success(ArrayDeclarator(base.node, size.node, span=span), end)

        parameters = self._parameters(open_index, end - 1)
        if not parameters.ok:
            return parameters
        return Success(FunctionDeclarator(base.node, parameters.node, span=span), end)

    def _array_size(self, open_index: int, close_index: int) -> ParseResult:
        if close_index == open_index + 1:
            return Success(None, close_index)
        size = self.parser.parse_expression(open_index + 1)
        if size.ok and size.end != close_index:
            return expected(size.end, TokenKind.RBRACKET)
        return size

    def _parameters(self, open_index: int, close_index: int) -> ParseResult:
        """Parse ``specifiers declarator`` pairs between a pair of parentheses."""
        pos = open_index + 1
        parameters = []
        if pos == close_index:
            return Success((), close_index)

        while True:
            specifiers = self.parser.parse_specifiers(pos)
            if not specifiers.ok:
                return specifiers
            declarator = self.parse(specifiers.end)
            if not declarator.ok:
                return declarator
            parameters.append(DeclarationRoot(
                specifiers.node,
                (declarator.node,),
                (None,),
                span=self.parser.span(pos, declarator.end),
            ))
            pos = declarator.end

            if pos == close_index:
                return Success(tuple(parameters), close_index)
            if self.tokens[pos].kind != TokenKind.COMMA:
                return expected(pos, TokenKind.RPAREN, TokenKind.COMMA)
            pos += 1
