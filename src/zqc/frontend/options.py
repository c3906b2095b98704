"""
Parser configuration options.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ParserOptions:
    """
    Parser configuration options.

    Attributes:
        filename: Name used in diagnostic locations
        max_errors: Stop recording diagnostics after this many errors
        max_nesting: Deepest allowed nesting of expressions, statements
                     and declarators before the parser gives up on a
                     construct with a nesting-too-deep failure
        source_lines: Source text split into lines, used to show
                      the offending line under a diagnostic. When None the
                      line is rebuilt from the token lexemes.
    """
    filename: str = "<input>"
    max_errors: int = 100
    max_nesting: int = 64
    source_lines: Optional[list[str]] = None

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")
        if self.max_nesting < 1:
            raise ValueError(f"max_nesting must be at least 1, got {self.max_nesting}")
