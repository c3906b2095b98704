"""
Serialized Token Records
========================

Reads and writes token streams in the line-oriented XML record format
produced by ``zqclex``. This lets a token stream be computed once,
persisted, and fed to the parser later.

Record Format
-------------
The file is a ``<tokens>`` root line, one seven-line block per token,
and a closing ``</tokens>`` line::

    <tokens>
    <token>
    <number>0</number>
    <value>int</value>
    <type>INT</type>
    <line>1</line>
    <valid>true</valid>
    </token>
    ...
    </tokens>

The reader is strict: any block that does not match this shape exactly
raises TokenFormatError, naming the offending line.

The ``type`` field holds a TokenKind name, or with ``categories=True``
a coarse category name (``keyword``, ``punctuator``, ``identifier``,
``integer_constant``, ``float_constant``, ``char_constant``, ``string``,
``eof``). The reader accepts both; keyword and punctuator kinds are
recovered from the value.
"""

import logging
import re
from html import escape, unescape
from pathlib import Path
from typing import Iterable, Union

from zqc.frontend.errors import TokenFormatError
from zqc.frontend.tokens import Token, TokenKind, KEYWORDS, PUNCTUATORS, eof_token

logger = logging.getLogger(__name__)

ROOT_OPEN = "<tokens>"
ROOT_CLOSE = "</tokens>"
RECORD_FIELDS = ("number", "value", "type", "line", "valid")
RECORD_LINES = len(RECORD_FIELDS) + 2

_CATEGORY_KINDS = {
    "identifier": TokenKind.IDENTIFIER,
    "integer_constant": TokenKind.INTEGER_CONSTANT,
    "float_constant": TokenKind.DOUBLE_CONSTANT,
    "char_constant": TokenKind.CHAR_CONSTANT,
    "string": TokenKind.STRING,
    "eof": TokenKind.EOF,
}


# =============================================================================
# Writing
# =============================================================================

def token_to_record(token: Token, categories: bool = False) -> list[str]:
    """
    Render one token as its seven record lines.

    With ``categories`` the type field holds the coarse category name
    instead of the TokenKind name.
    """
    type_name = token.kind.category if categories else token.kind.name
    return [
        "<token>",
        f"<number>{token.sequence_number}</number>",
        f"<value>{escape(token.lexeme, quote=False)}</value>",
        f"<type>{type_name}</type>",
        f"<line>{token.line}</line>",
        f"<valid>{'true' if token.well_formed else 'false'}</valid>",
        "</token>",
    ]


def dump_tokens(tokens: Iterable[Token], categories: bool = False) -> str:
    """Serialize a token stream, EOF marker included, to record text."""
    lines = [ROOT_OPEN]
    for token in tokens:
        lines.extend(token_to_record(token, categories))
    lines.append(ROOT_CLOSE)
    return "\n".join(lines) + "\n"


# =============================================================================
# Reading
# =============================================================================

class _RecordReader:
    """Strict reader over the lines of a token record file."""

    def __init__(self, text: str, filename: str):
        self.lines = text.splitlines()
        self.filename = filename

    def error(self, message: str, index: int) -> TokenFormatError:
        source_line = self.lines[index] if 0 <= index < len(self.lines) else None
        return TokenFormatError(message, self.filename, index + 1, source_line)

    def read(self) -> list[Token]:
        lines = self.lines
        # Trailing blank lines are tolerated, nothing else is
        while lines and not lines[-1].strip():
            lines.pop()

        if not lines or lines[0].strip() != ROOT_OPEN:
            raise self.error(f"expected '{ROOT_OPEN}' on the first line", 0)
        if lines[-1].strip() != ROOT_CLOSE:
            raise self.error(f"expected '{ROOT_CLOSE}' on the last line", len(lines) - 1)

        body_end = len(lines) - 1
        tokens = []
        for start in range(1, body_end, RECORD_LINES):
            if start + RECORD_LINES > body_end:
                raise self.error(f"incomplete token record, expected {RECORD_LINES} lines", start)
            tokens.append(self._read_record(start))

        if not tokens or tokens[-1].kind != TokenKind.EOF:
            line = tokens[-1].line if tokens else 1
            tokens.append(eof_token(line))
        elif any(token.kind == TokenKind.EOF for token in tokens[:-1]):
            raise self.error("EOF token before the end of the stream", 0)

        logger.debug("Loaded %d tokens from %s", len(tokens), self.filename)
        return tokens

    def _read_record(self, start: int) -> Token:
        if self.lines[start].strip() != "<token>":
            raise self.error("expected '<token>'", start)
        end = start + RECORD_LINES - 1
        if self.lines[end].strip() != "</token>":
            raise self.error("expected '</token>'", end)

        values = {}
        for offset, name in enumerate(RECORD_FIELDS, start=1):
            index = start + offset
            match = re.fullmatch(rf"<{name}>(.*)</{name}>", self.lines[index].strip("\r\n\t "))
            if match is None:
                raise self.error(f"expected '<{name}>...</{name}>'", index)
            values[name] = (unescape(match.group(1)), index)

        number = self._read_int(*values["number"])
        line = self._read_int(*values["line"])
        lexeme = values["value"][0]
        kind = self._read_kind(values["type"][0], lexeme, values["type"][1])

        valid_text, valid_index = values["valid"]
        if valid_text not in ("true", "false"):
            raise self.error(f"invalid 'valid' flag {valid_text!r}", valid_index)

        return Token(kind, lexeme, line, well_formed=valid_text == "true", sequence_number=number)

    def _read_int(self, text: str, index: int) -> int:
        try:
            return int(text)
        except ValueError:
            raise self.error(f"expected an integer, got {text!r}", index) from None

    def _read_kind(self, type_name: str, lexeme: str, index: int) -> TokenKind:
        if type_name in TokenKind.__members__:
            return TokenKind[type_name]
        if type_name in _CATEGORY_KINDS:
            return _CATEGORY_KINDS[type_name]
        if type_name == "keyword" and lexeme in KEYWORDS:
            return KEYWORDS[lexeme]
        if type_name == "punctuator" and lexeme in PUNCTUATORS:
            return PUNCTUATORS[lexeme]
        raise self.error(f"unknown token type {type_name!r} for value {lexeme!r}", index)


def load_tokens(text: str, filename: str = "<tokens>") -> list[Token]:
    """
    Parse record text into a token stream.

    Returns:
        The tokens, always ending with an EOF token

    Raises:
        TokenFormatError: If any block deviates from the record shape
    """
    return _RecordReader(text, filename).read()


def load_token_file(path: Union[str, Path]) -> list[Token]:
    """Read a token record file from disk."""
    path = Path(path)
    return load_tokens(path.read_text(encoding="utf-8"), str(path))
