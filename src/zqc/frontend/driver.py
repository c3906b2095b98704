"""
Front End Drivers
=================

Convenience functions that run the parser over source text, a token
stream or a serialized token file.

Example:
    >>> from zqc.frontend import parse_source
    >>> outcome = parse_source("int a;")
    >>> outcome.ok
    True
    >>> outcome.unit.declarations[0].root.declarators[0].name
    'a'
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence, Union

from zqc.errors import SourceLocation
from zqc.frontend.ast import CompilationUnit
from zqc.frontend.diagnostics import DiagnosticCollector
from zqc.frontend.lexer import tokenize
from zqc.frontend.options import ParserOptions
from zqc.frontend.parser import Parser
from zqc.frontend.token_xml import load_token_file
from zqc.frontend.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass
class ParseOutcome:
    """
    Result of parsing one input.

    Attributes:
        unit: The compilation unit; partial when there are errors
        diagnostics: Errors and warnings recorded while parsing
    """
    unit: CompilationUnit
    diagnostics: DiagnosticCollector

    @property
    def ok(self) -> bool:
        """True when the tree is complete (no errors were recorded)."""
        return not self.diagnostics.has_errors()


def _warn_ill_formed(tokens: Sequence[Token], diagnostics: DiagnosticCollector) -> None:
    for token in tokens:
        if token.well_formed:
            continue
        what = "string literal" if token.kind == TokenKind.STRING else "character constant"
        diagnostics.add_warning(
            f"unterminated {what} {token.lexeme!r}",
            SourceLocation(diagnostics.filename, token.line),
        )


def parse_tokens(tokens: Sequence[Token], options: Optional[ParserOptions] = None) -> ParseOutcome:
    """
    Parse a token stream.

    Ill-formed literal tokens are accepted by the grammar and reported as
    warnings.

    Raises:
        ValueError: If the stream does not end with an EOF token
    """
    parser = Parser(tokens, options)
    unit = parser.parse()
    _warn_ill_formed(parser.tokens, parser.diagnostics)
    return ParseOutcome(unit, parser.diagnostics)


def parse_source(
    source: str,
    filename: Optional[str] = None,
    options: Optional[ParserOptions] = None,
) -> ParseOutcome:
    """
    Tokenize and parse source text.

    Args:
        source: ZQC source code
        filename: Name used in diagnostics (defaults to options.filename)
        options: Parser configuration

    Raises:
        LexerError: If the source contains a character outside the language
    """
    options = options or ParserOptions()
    options = replace(
        options,
        filename=filename or options.filename,
        source_lines=source.splitlines(),
    )
    tokens = tokenize(source, options.filename)
    logger.debug("Lexed %d tokens from %s", len(tokens), options.filename)
    return parse_tokens(tokens, options)


def parse_token_file(path: Union[str, Path], options: Optional[ParserOptions] = None) -> ParseOutcome:
    """
    Load a serialized token file and parse it.

    Diagnostics name the file unless ``options`` sets a filename of its own.

    Raises:
        TokenFormatError: If the file does not hold well-shaped token records
        FileNotFoundError: If the file does not exist
    """
    tokens = load_token_file(path)
    options = options or ParserOptions()
    if options.filename == ParserOptions.filename:
        options = replace(options, filename=str(path))
    return parse_tokens(tokens, options)
