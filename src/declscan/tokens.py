"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Structural (single-character)
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    PERIOD = auto()  # .
    QUESTION = auto()  # ?
    COLON = auto()  # :
    COMMA = auto()  # ,
    LESS = auto()  # <
    GREATER = auto()  # >

    # Content
    SYMBOL = auto()  # any other punctuation char; value is the char
    IDENTIFIER = auto()  # value is the text, without a leading @ (see Token.verbatim)
    STRING = auto()  # value is the decoded literal contents
    NUMBER = auto()  # value is a float

    EOF = auto()


_TOKEN_NAMES = {
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.PERIOD: "'.'",
    TokenType.QUESTION: "'?'",
    TokenType.COLON: "':'",
    TokenType.COMMA: "','",
    TokenType.LESS: "'<'",
    TokenType.GREATER: "'>'",
    TokenType.SYMBOL: "symbol",
    TokenType.IDENTIFIER: "identifier",
    TokenType.STRING: "string",
    TokenType.NUMBER: "number",
    TokenType.EOF: "end of input",
}

# Single characters that map one-to-one onto a token type
STRUCTURAL = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "<": TokenType.LESS,
    ">": TokenType.GREATER,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.PERIOD,
    "?": TokenType.QUESTION,
}


def token_name(tt: TokenType) -> str:
    """Return the printable name of a token type for error messages."""
    return _TOKEN_NAMES[tt]


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its resolved value and start position."""

    type: TokenType
    value: str | float | None
    position: Position
    verbatim: bool = False  # identifier written with a leading @

    def describe(self) -> str:
        """Name the token for an error message, quoting identifiers and symbols."""
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.SYMBOL:
            return f"symbol '{self.value}'"
        return token_name(self.type)


def is_ident_start(ch: str) -> bool:
    """Return True if ch can begin an identifier (the @ sigil is handled by the lexer)."""
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ord(ch) > 127


def is_ident_char(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return is_ident_start(ch) or ("0" <= ch <= "9")


def is_symbol_char(ch: str) -> bool:
    """Return True if ch is punctuation reported as a generic SYMBOL token.

    Characters claimed earlier by the lexer (structural tokens, quotes,
    '#', '/') fall inside these ranges but never reach this check.
    """
    code = ord(ch)
    return (
        33 <= code <= 39
        or 42 <= code <= 47
        or 58 <= code <= 62
        or 91 <= code <= 94
        or code == 96
        or 123 <= code <= 127
    )
