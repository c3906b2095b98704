"""
Parse Diagnostics
=================

Syntax errors found by the parser are recorded as Diagnostic records
rather than raised. A DiagnosticCollector is created for every parse run
and accumulates the errors the recovery loops give up on, plus warnings
about ill-formed tokens.

Diagnostic Kinds
----------------
- EXPECTED_TOKEN: a required token (or one of a set) was missing
- MISMATCHED_DELIMITER: an unbalanced bracket inside a declarator
- INVALID_DECLARATOR: a declarator that is not a name, array or function
- EXPECTED_EXPRESSION: no expression could start at this token
- NESTING_TOO_DEEP: the input nests deeper than the parser allows

Positions
---------
``position`` is the index of the token the message refers to, and
``mode`` says how the message relates to it::

    prog.c:1: error: expected ';' after 'a'
        int a
             ^

``depth`` is the index of the token where the failure was detected. It
orders failures between backtracking alternatives: the deeper one wins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from zqc.errors import SourceLocation, format_error
from zqc.frontend.errors import ParseFailedError
from zqc.frontend.tokens import Token, TokenKind


class DiagnosticKind(Enum):
    """Category of a parse diagnostic."""
    EXPECTED_TOKEN = "expected-token"
    MISMATCHED_DELIMITER = "mismatched-delimiter"
    INVALID_DECLARATOR = "invalid-declarator"
    EXPECTED_EXPRESSION = "expected-expression"
    NESTING_TOO_DEEP = "nesting-too-deep"


class ErrorMode(Enum):
    """How a diagnostic message relates to the token at its position."""
    AT = "at"
    AFTER = "after"
    BEFORE = "before"


_DEFAULT_MESSAGES = {
    DiagnosticKind.MISMATCHED_DELIMITER: "mismatched delimiter",
    DiagnosticKind.INVALID_DECLARATOR: "invalid declarator",
    DiagnosticKind.EXPECTED_EXPRESSION: "expected expression",
    DiagnosticKind.NESTING_TOO_DEEP: "nesting too deep",
}


@dataclass(frozen=True)
class Diagnostic:
    """
    A single parse error.

    Attributes:
        kind: The diagnostic category
        position: Index of the token the message refers to
        depth: Index of the token where the failure was detected
        expected: Descriptions of what was expected (EXPECTED_TOKEN only)
        mode: Whether the error is at, after or before the token
        message_detail: Replaces the default message text when set
    """
    kind: DiagnosticKind
    position: int
    depth: int
    expected: tuple[str, ...] = ()
    mode: ErrorMode = ErrorMode.AT
    message_detail: Optional[str] = None

    @property
    def message(self) -> str:
        """The message text without the token reference."""
        if self.message_detail:
            return self.message_detail
        if self.kind == DiagnosticKind.EXPECTED_TOKEN:
            if len(self.expected) == 1:
                return f"expected {self.expected[0]}"
            return f"expected one of {', '.join(self.expected)}"
        return _DEFAULT_MESSAGES[self.kind]

    def merge(self, other: "Diagnostic") -> "Diagnostic":
        """
        Combine the expected sets of two failures at the same token.

        Only EXPECTED_TOKEN diagnostics with equal position and mode are
        merged; any other pair returns self unchanged.
        """
        if (
            self.kind != DiagnosticKind.EXPECTED_TOKEN
            or other.kind != DiagnosticKind.EXPECTED_TOKEN
            or self.position != other.position
            or self.mode != other.mode
            or self.message_detail
            or other.message_detail
        ):
            return self
        expected = self.expected + tuple(e for e in other.expected if e not in self.expected)
        if expected == self.expected:
            return self
        return Diagnostic(self.kind, self.position, self.depth, expected, self.mode)


def _describe_token(token: Token) -> str:
    if token.kind == TokenKind.EOF:
        return "end of input"
    return f"'{token.lexeme}'"


class DiagnosticCollector:
    """
    Collects the diagnostics of one parse run for batch reporting.

    Diagnostics are kept in the order they were recorded. Rendering needs
    the token stream, so the collector holds on to it.

    Example:
        collector = DiagnosticCollector(tokens, "prog.c")
        collector.add(diagnostic)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        filename: str = "<input>",
        max_errors: int = 100,
        source_lines: Optional[Sequence[str]] = None,
    ):
        self.tokens = tokens
        self.filename = filename
        self.max_errors = max_errors
        self.source_lines = source_lines
        self.errors: list[Diagnostic] = []
        self.warnings: list[str] = []

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)

    def add(self, diagnostic: Diagnostic) -> None:
        """Add an error to the collection."""
        self.errors.append(diagnostic)

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Add a warning message."""
        if location:
            self.warnings.append(f"{location}: warning: {message}")
        else:
            self.warnings.append(f"warning: {message}")

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self, pending: int = 0) -> bool:
        """Return True if max_errors has been reached, counting pending errors too."""
        return len(self.errors) + pending >= self.max_errors

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    # =========================================================================
    # Rendering
    # =========================================================================

    def location(self, diagnostic: Diagnostic) -> SourceLocation:
        """Source location of the token a diagnostic refers to."""
        return SourceLocation(self.filename, self._token(diagnostic.position).line)

    def format(self, diagnostic: Diagnostic) -> str:
        """
        Render one diagnostic with its source line and a caret.

        The source line comes from ``source_lines`` when available,
        otherwise it is rebuilt by joining the lexemes of the tokens on
        that line with single spaces.
        """
        token = self._token(diagnostic.position)
        message = f"{diagnostic.message} {diagnostic.mode.value} {_describe_token(token)}"

        source_line, column = self._context(diagnostic.position)
        if column is not None and diagnostic.mode == ErrorMode.AFTER:
            column += len(token.lexeme)

        return format_error(
            message,
            location=self.location(diagnostic),
            source_line=source_line,
            caret_column=column,
        )

    def _token(self, position: int) -> Token:
        return self.tokens[min(max(position, 0), len(self.tokens) - 1)]

    def _context(self, position: int) -> tuple[Optional[str], Optional[int]]:
        """Return the source line of a token and the 1-based column it starts at."""
        position = min(max(position, 0), len(self.tokens) - 1)
        line = self.tokens[position].line

        first = position
        while first > 0 and self.tokens[first - 1].line == line:
            first -= 1
        last = position
        while last + 1 < len(self.tokens) and self.tokens[last + 1].line == line:
            last += 1

        if self.source_lines is not None and 0 < line <= len(self.source_lines):
            text = self.source_lines[line - 1]
            # Locate each lexeme in turn so repeated names find the right occurrence
            cursor = 0
            for index in range(first, position + 1):
                lexeme = self.tokens[index].lexeme
                found = text.find(lexeme, cursor)
                if found < 0:
                    break
                if index == position:
                    return text, found + 1
                cursor = found + len(lexeme)

        lexemes = [token.lexeme for token in self.tokens[first:last + 1]]
        column = sum(len(lexeme) + 1 for lexeme in lexemes[:position - first]) + 1
        return " ".join(lexemes).rstrip(), column

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = []

        for diagnostic in self.errors:
            lines.append(self.format(diagnostic))
            lines.append("")

        for warning in self.warnings:
            lines.append(warning)

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()

    def raise_if_errors(self) -> None:
        """Raise a ParseFailedError if any errors were collected."""
        if self.has_errors():
            raise ParseFailedError(self.report(), error_count=len(self.errors))
