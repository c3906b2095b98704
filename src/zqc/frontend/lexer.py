"""
ZQC Lexer (Tokenizer)
=====================

This module implements a lexer for the ZQC language. It converts source
text into the token stream consumed by the parser.

Token Categories
----------------
- Keywords: if, else, while, return, break, continue, print
- Type specifiers: int, double, char, void
- Identifiers: variable and function names
- Numbers: decimal and hexadecimal (0x) integers, doubles (1.5)
- Strings: "double quoted"
- Characters: 'single quoted'
- Operators and punctuation: + += && || << ( ) [ ] { } ; , ~ ...

Lexemes are kept verbatim: a string literal token's lexeme still carries
its quotes and escape sequences. The parser decodes literal values with
decode_literal().

Unterminated literals
---------------------
A string or character literal cut short by a newline or the end of input
is NOT an error here. The lexer emits the token with ``well_formed=False``
and lets the caller decide how to report it.

Example Usage
-------------
>>> from zqc.frontend.lexer import Lexer
>>> for token in Lexer('int a = 3;', "test.c").tokenize():
...     print(token.kind.name, token.lexeme)
INT int
IDENTIFIER a
ASSIGN =
INTEGER_CONSTANT 3
SEMICOLON ;
EOF
"""

import string
from typing import Iterator

from zqc.errors import SourceLocation
from zqc.frontend.errors import LexerError, InvalidCharacterError
from zqc.frontend.tokens import Token, TokenKind, KEYWORDS, PUNCTUATORS


# Escape sequences in strings and characters
ESCAPE_SEQUENCES = {
    "n": "\n",      # Newline
    "r": "\r",      # Carriage return
    "t": "\t",      # Tab
    "b": "\b",      # Backspace
    "f": "\f",      # Form feed
    "v": "\v",      # Vertical tab
    "\\": "\\",     # Backslash
    "'": "'",       # Single quote
    '"': '"',       # Double quote
    "0": "\0",      # Null
    "a": "\a",      # Bell/alert
}


def decode_literal(lexeme: str) -> str:
    """
    Decode the body of a string or character literal lexeme.

    Strips the surrounding quotes (the closing one may be missing for an
    ill-formed token) and resolves escape sequences, including \\xNN.
    Unknown escapes decode to the escaped character itself.
    """
    if not lexeme:
        return ""
    quote = lexeme[0]
    body = lexeme[1:]

    chars = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == quote:
            break
        if char != "\\" or i + 1 >= len(body):
            chars.append(char)
            i += 1
            continue

        escaped = body[i + 1]
        i += 2
        if escaped in ESCAPE_SEQUENCES:
            chars.append(ESCAPE_SEQUENCES[escaped])
        elif escaped == "x":
            hex_digits = ""
            while i < len(body) and len(hex_digits) < 2 and body[i] in string.hexdigits:
                hex_digits += body[i]
                i += 1
            chars.append(chr(int(hex_digits, 16)) if hex_digits else "x")
        else:
            chars.append(escaped)

    return "".join(chars)


class Lexer:
    """
    Tokenizes ZQC source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = line_number
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, always ending with an EOF token

        Raises:
            LexerError: If a character outside the language is found
        """
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            yield self._scan_token()

        yield Token(TokenKind.EOF, "", self._line)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or "" past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line and column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _current_line_text(self) -> str:
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in " \t\n\r\f\v":
                self._advance()
                continue

            # Single-line comment: //
            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            # Multi-line comment: /* */
            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        start_line = self._line
        start_col = self._column

        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise LexerError(
            "unterminated multi-line comment",
            SourceLocation(self.filename, start_line, start_col),
            hint="add closing */ to terminate the comment",
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start_pos = self._pos
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char in self.IDENT_START:
            while self._peek() and self._peek() in self.IDENT_CHARS:
                self._advance()
            text = self.source[start_pos:self._pos]
            return Token(KEYWORDS.get(text, TokenKind.IDENTIFIER), text, start_line)

        if char.isdigit():
            return self._scan_number(start_pos, start_line)

        if char in "\"'":
            return self._scan_quoted(start_pos, start_line)

        # Longest match first: every operator is one or two characters
        two = self.source[self._pos:self._pos + 2]
        if two in PUNCTUATORS:
            self._advance()
            self._advance()
            return Token(PUNCTUATORS[two], two, start_line)
        if char in PUNCTUATORS:
            self._advance()
            return Token(PUNCTUATORS[char], char, start_line)

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            self._current_line_text(),
        )

    def _scan_number(self, start_pos: int, start_line: int) -> Token:
        """
        Scan a numeric constant.

        Handles:
        - Decimal: 123
        - Hexadecimal: 0x7F or 0X7F
        - Double: 3.25 (digits, a dot, optional digits)
        """
        if self._peek() == "0" and self._peek(1) in ("x", "X") and self._peek(2) and self._peek(2) in string.hexdigits:
            self._advance()
            self._advance()
            while self._peek() and self._peek() in string.hexdigits:
                self._advance()
            return Token(TokenKind.INTEGER_CONSTANT, self.source[start_pos:self._pos], start_line)

        while self._peek().isdigit():
            self._advance()

        if not self._match("."):
            return Token(TokenKind.INTEGER_CONSTANT, self.source[start_pos:self._pos], start_line)

        while self._peek().isdigit():
            self._advance()
        return Token(TokenKind.DOUBLE_CONSTANT, self.source[start_pos:self._pos], start_line)

    def _scan_quoted(self, start_pos: int, start_line: int) -> Token:
        """
        Scan a string or character literal, keeping the lexeme verbatim.

        A literal that reaches a newline or the end of input before its
        closing quote yields an ill-formed token.
        """
        quote = self._advance()
        kind = TokenKind.STRING if quote == '"' else TokenKind.CHAR_CONSTANT

        while not self._at_end() and self._peek() != "\n":
            char = self._advance()
            if char == "\\" and self._peek() not in ("", "\n"):
                self._advance()
            elif char == quote:
                return Token(kind, self.source[start_pos:self._pos], start_line)

        return Token(kind, self.source[start_pos:self._pos], start_line, well_formed=False)


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a whole source string into a list ending with EOF."""
    return list(Lexer(source, filename).tokenize())
