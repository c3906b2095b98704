"""
ZQC Error Hierarchy
===================

This module defines the exception hierarchy for the whole ZQC toolchain.
All exceptions inherit from ZQCError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
ZQCError (base)
└── FrontendError (zqc.frontend.errors)
    ├── LexerError - invalid character, unterminated comment
    ├── TokenFormatError - malformed serialized token file
    └── ParseFailedError - aggregate report of parse diagnostics

Design Philosophy
-----------------
Syntax errors found while parsing are NOT exceptions: the parser records
them as diagnostics and keeps going (see zqc.frontend.diagnostics). The
exceptions here are for conditions that stop a tool outright, and for
callers that prefer an exception over inspecting the diagnostics.

Error messages follow this format:
    filename:line: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ZQCError(Exception):
    """
    Base exception for all ZQC errors.

    All exceptions in the toolchain inherit from this class:

        try:
            outcome = parse_token_file("prog.c.xml")
        except ZQCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens only carry a line number, so the column is optional and is
    left out of the formatted location when it is not known.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed), 0 when unknown
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line' or 'filename:line:column'."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


def format_error(
    message: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
    caret_column: Optional[int] = None,
    hint: Optional[str] = None,
) -> str:
    """
    Format an error message with location, source context, and hint.

    Example output:
        prog.c:3: error: expected ';' after 'a'
            int a
                 ^
        hint: every declaration ends with ';'
    """
    parts = []

    if location:
        parts.append(f"{location}: error: {message}")
    else:
        parts.append(f"error: {message}")

    if source_line is not None:
        parts.append(f"    {source_line}")
        if caret_column is None and location is not None:
            caret_column = location.column
        if caret_column is not None and caret_column > 0:
            padding = " " * (4 + caret_column - 1)
            parts.append(f"{padding}^")

    if hint:
        parts.append(f"hint: {hint}")

    return "\n".join(parts)
