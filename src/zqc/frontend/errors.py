"""
Front End Error Hierarchy
=========================

Exceptions raised by the ZQC front end. All inherit from FrontendError,
which itself inherits from ZQCError.

Exception Hierarchy
-------------------
FrontendError (base for all front end errors)
├── LexerError - character outside the language, unterminated comment
├── TokenFormatError - serialized token block with the wrong shape
└── ParseFailedError - aggregate report built from parse diagnostics

Parse errors themselves are recorded as Diagnostic records by the parser
(see zqc.frontend.diagnostics); ParseFailedError only wraps the final
report for callers that want an exception.
"""

from typing import Optional

from zqc.errors import ZQCError, SourceLocation, format_error


class FrontendError(ZQCError):
    """
    Base exception for all front end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error with location, source context and hint."""
        return format_error(
            self.message,
            location=self.location,
            source_line=self.source_line,
            hint=self.hint,
        )


class LexerError(FrontendError):
    """
    Lexical error in source code.

    Raised when the lexer meets input it cannot turn into a token at all,
    such as a character outside the language or an unterminated block
    comment. Unterminated string and character literals are not errors
    here: they become tokens with ``well_formed=False``.
    """
    pass


class InvalidCharacterError(LexerError):
    """Character that does not start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class TokenFormatError(FrontendError):
    """
    Malformed serialized token file.

    Raised by the token loader when a record block does not have exactly
    the expected seven-line shape, or when one of its fields cannot be
    decoded.
    """

    def __init__(
        self,
        message: str,
        filename: str = "<tokens>",
        line: Optional[int] = None,
        source_line: Optional[str] = None,
    ):
        location = SourceLocation(filename, line) if line is not None else None
        super().__init__(message, location=location, source_line=source_line)


class ParseFailedError(FrontendError):
    """
    Aggregate parse failure containing every collected diagnostic.

    The message is already a formatted report from DiagnosticCollector
    and is passed through unchanged.
    """

    def __init__(self, report: str, error_count: int = 0):
        self.error_count = error_count
        super().__init__(report)

    def _format_message(self) -> str:
        """Return message as-is - it's already a formatted report."""
        return self.message
