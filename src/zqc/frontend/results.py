"""
Parse Rule Results
==================

Every parse rule is a function of a start index that returns either a
Success (the node, the index just past it, and any diagnostics recovered
along the way) or a Failure (a Diagnostic whose depth says how far the
rule got). Rules never move a shared cursor, so backtracking is simply
calling another rule with the same start index.

first_of() is the ordered-choice combinator: the first alternative to
succeed wins, and when none does the deepest failure is returned.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from zqc.frontend.diagnostics import Diagnostic, DiagnosticKind, ErrorMode
from zqc.frontend.tokens import TokenKind, describe_kind


@dataclass(frozen=True)
class Success:
    """
    A rule that matched.

    Attributes:
        node: The value built by the rule (usually an AST node)
        end: Index of the first token after the match
        diagnostics: Errors recovered from inside the match
    """
    node: Any
    end: int
    diagnostics: tuple[Diagnostic, ...] = ()

    ok = True


@dataclass(frozen=True)
class Failure:
    """A rule that did not match."""
    diagnostic: Diagnostic

    ok = False

    @property
    def depth(self) -> int:
        return self.diagnostic.depth

    @property
    def kind(self) -> DiagnosticKind:
        return self.diagnostic.kind


ParseResult = Union[Success, Failure]
Rule = Callable[[int], ParseResult]


# Closing punctuation is reported after the previous token, openers before
# the current one
_AFTER_PREVIOUS = frozenset({
    TokenKind.SEMICOLON,
    TokenKind.RPAREN,
    TokenKind.RBRACKET,
    TokenKind.RBRACE,
})
_BEFORE_CURRENT = frozenset({
    TokenKind.LPAREN,
    TokenKind.LBRACKET,
    TokenKind.LBRACE,
})


def fail(
    kind: DiagnosticKind,
    position: int,
    depth: Optional[int] = None,
    detail: Optional[str] = None,
) -> Failure:
    """Build a Failure that refers to the token at ``position``."""
    return Failure(Diagnostic(
        kind,
        position,
        position if depth is None else depth,
        message_detail=detail,
    ))


def expected(position: int, *what: Union[TokenKind, str], depth: Optional[int] = None) -> Failure:
    """
    Build an EXPECTED_TOKEN failure for a token missing at ``position``.

    ``what`` holds token kinds and/or plain descriptions such as
    "type specifier". The first entry picks the error mode.
    """
    first = what[0]
    mode = ErrorMode.AT
    referenced = position
    if first in _AFTER_PREVIOUS and position > 0:
        mode = ErrorMode.AFTER
        referenced = position - 1
    elif first in _BEFORE_CURRENT:
        mode = ErrorMode.BEFORE

    descriptions = tuple(describe_kind(w) if isinstance(w, TokenKind) else w for w in what)
    return Failure(Diagnostic(
        DiagnosticKind.EXPECTED_TOKEN,
        referenced,
        position if depth is None else depth,
        descriptions,
        mode,
    ))


def deepest(first: Failure, second: Failure) -> Failure:
    """
    Pick the failure that got further.

    On a tie the first one wins, with the expected sets of two
    expected-token failures at the same token merged.
    """
    if second.depth > first.depth:
        return second
    if second.depth < first.depth:
        return first
    merged = first.diagnostic.merge(second.diagnostic)
    return first if merged is first.diagnostic else Failure(merged)


def first_of(
    start: int,
    *alternatives: Rule,
    on_superseded: Optional[Callable[[Failure], None]] = None,
) -> ParseResult:
    """
    Try each alternative from ``start`` in order.

    Returns the first success. When every alternative fails, returns the
    deepest failure. When an alternative succeeds after others failed,
    the deepest of those failures is handed to ``on_superseded`` so the
    caller can still report it if the surrounding construct fails later.

    A NESTING_TOO_DEEP failure ends the search at once: retrying the
    same input through another alternative only nests deeper.
    """
    best: Optional[Failure] = None
    for alternative in alternatives:
        result = alternative(start)
        if result.ok:
            if best is not None and on_superseded is not None:
                on_superseded(best)
            return result
        if result.kind == DiagnosticKind.NESTING_TOO_DEEP:
            return result
        best = result if best is None else deepest(best, result)
    return best
