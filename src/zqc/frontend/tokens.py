"""
ZQC Token Model
===============

The token contract shared by the lexer, the token XML codec and the
parser. A token stream is an ordered, 0-indexed, immutable list of
tokens whose last element is always an EOF token.

Token Categories
----------------
- Punctuation: ( ) [ ] { } , ; ~
- Operators: + += - -= * *= / /= % %= & &= && | |= || ^ ^= ! != = == > >= >> < <= <<
- Literals: identifier, string, integer constant, double constant, char constant
- Keywords: if else while return break continue print
- Type specifiers: int double char void
- EOF
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum, auto


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the ZQC language.

    Keywords and type specifiers are distinguished from identifiers so
    the parser never needs a symbol table to tell them apart.
    """

    # === Punctuation ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;
    TILDE = auto()          # ~

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    PLUS_ASSIGN = auto()    # +=
    MINUS = auto()          # -
    MINUS_ASSIGN = auto()   # -=
    STAR = auto()           # *
    STAR_ASSIGN = auto()    # *=
    SLASH = auto()          # /
    SLASH_ASSIGN = auto()   # /=
    PERCENT = auto()        # %
    PERCENT_ASSIGN = auto() # %=

    # === Bitwise and Logical Operators ===
    AMPERSAND = auto()      # &
    AND_ASSIGN = auto()     # &=
    AND = auto()            # &&
    PIPE = auto()           # |
    OR_ASSIGN = auto()      # |=
    OR = auto()             # ||
    CARET = auto()          # ^
    XOR_ASSIGN = auto()     # ^=
    NOT = auto()            # !

    # === Comparison and Shift Operators ===
    NE = auto()             # !=
    ASSIGN = auto()         # =
    EQ = auto()             # ==
    GT = auto()             # >
    GE = auto()             # >=
    RSHIFT = auto()         # >>
    LT = auto()             # <
    LE = auto()             # <=
    LSHIFT = auto()         # <<

    # === Literals ===
    IDENTIFIER = auto()
    STRING = auto()
    INTEGER_CONSTANT = auto()
    DOUBLE_CONSTANT = auto()
    CHAR_CONSTANT = auto()

    # === Keywords ===
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    RETURN = auto()
    BREAK = auto()
    CONTINUE = auto()
    PRINT = auto()

    # === Type Specifiers ===
    INT = auto()
    DOUBLE = auto()
    CHAR = auto()
    VOID = auto()

    # === Structural ===
    EOF = auto()

    @property
    def category(self) -> str:
        """Coarse category name written by dump_tokens(categories=True)."""
        if self in KEYWORDS.values():
            return "keyword"
        if self == TokenKind.IDENTIFIER:
            return "identifier"
        if self == TokenKind.INTEGER_CONSTANT:
            return "integer_constant"
        if self == TokenKind.DOUBLE_CONSTANT:
            return "float_constant"
        if self == TokenKind.CHAR_CONSTANT:
            return "char_constant"
        if self == TokenKind.STRING:
            return "string"
        if self == TokenKind.EOF:
            return "eof"
        return "punctuator"


# =============================================================================
# Keyword and Punctuator Tables
# =============================================================================

KEYWORDS: dict[str, TokenKind] = {
    # Control flow
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "while": TokenKind.WHILE,
    "return": TokenKind.RETURN,
    "break": TokenKind.BREAK,
    "continue": TokenKind.CONTINUE,
    "print": TokenKind.PRINT,

    # Type specifiers
    "int": TokenKind.INT,
    "double": TokenKind.DOUBLE,
    "char": TokenKind.CHAR,
    "void": TokenKind.VOID,
}

TYPE_SPECIFIERS = frozenset({
    TokenKind.INT,
    TokenKind.DOUBLE,
    TokenKind.CHAR,
    TokenKind.VOID,
})

# Fixed spelling of every punctuator and operator kind
PUNCTUATORS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "~": TokenKind.TILDE,
    "+": TokenKind.PLUS,
    "+=": TokenKind.PLUS_ASSIGN,
    "-": TokenKind.MINUS,
    "-=": TokenKind.MINUS_ASSIGN,
    "*": TokenKind.STAR,
    "*=": TokenKind.STAR_ASSIGN,
    "/": TokenKind.SLASH,
    "/=": TokenKind.SLASH_ASSIGN,
    "%": TokenKind.PERCENT,
    "%=": TokenKind.PERCENT_ASSIGN,
    "&": TokenKind.AMPERSAND,
    "&=": TokenKind.AND_ASSIGN,
    "&&": TokenKind.AND,
    "|": TokenKind.PIPE,
    "|=": TokenKind.OR_ASSIGN,
    "||": TokenKind.OR,
    "^": TokenKind.CARET,
    "^=": TokenKind.XOR_ASSIGN,
    "!": TokenKind.NOT,
    "!=": TokenKind.NE,
    "=": TokenKind.ASSIGN,
    "==": TokenKind.EQ,
    ">": TokenKind.GT,
    ">=": TokenKind.GE,
    ">>": TokenKind.RSHIFT,
    "<": TokenKind.LT,
    "<=": TokenKind.LE,
    "<<": TokenKind.LSHIFT,
}

SPELLINGS: dict[TokenKind, str] = {
    **{kind: text for text, kind in PUNCTUATORS.items()},
    **{kind: text for text, kind in KEYWORDS.items()},
}


def describe_kind(kind: TokenKind) -> str:
    """Human-readable name of a token kind for diagnostics."""
    if kind in SPELLINGS:
        return f"'{SPELLINGS[kind]}'"
    if kind == TokenKind.EOF:
        return "end of input"
    return kind.name.lower().replace("_", " ")


# =============================================================================
# Token Data Class
# =============================================================================

_sequence = itertools.count()


def _next_sequence_number() -> int:
    return next(_sequence)


@dataclass(frozen=True)
class Token:
    """
    A single token of ZQC source.

    Attributes:
        kind: The TokenKind classification
        lexeme: The literal source text (string and char literals keep their quotes)
        line: Line number in source (1-indexed)
        well_formed: False for literals the lexer could not terminate
        sequence_number: Global creation counter, for debugging and dumps only
    """
    kind: TokenKind
    lexeme: str
    line: int
    well_formed: bool = True
    sequence_number: int = field(default_factory=_next_sequence_number, compare=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        flag = "" if self.well_formed else ", ill-formed"
        return f"Token(#{self.sequence_number} {self.kind.name}, {self.lexeme!r}, line {self.line}{flag})"

    def is_type_specifier(self) -> bool:
        """Return True if this token is a declaration specifier keyword."""
        return self.kind in TYPE_SPECIFIERS


def eof_token(line: int) -> Token:
    """Build the end-of-stream marker for a stream ending at ``line``."""
    return Token(TokenKind.EOF, "", line)
