"""declscan lexer: pulls typed tokens one at a time from a source buffer."""

from __future__ import annotations

import re

from declscan.errors import LexError
from declscan.tokens import (
    STRUCTURAL,
    Position,
    Token,
    TokenType,
    is_ident_char,
    is_ident_start,
    is_symbol_char,
)

# Longest decimal prefix, the same shape strtod accepts ("1.", ".5", "2e-3")
_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_STRING_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

# (offset, line, offset of the first char on that line)
CursorState = tuple[int, int, int]


class Lexer:
    """Tokenize C#-like source text on demand.

    Nothing is buffered: each `next_token` call scans exactly one token
    past the cursor. Lookahead snapshots the cursor and restores it.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._line_start = 0

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def current_pos(self) -> Position:
        return Position(self._line, self._pos - self._line_start + 1, self._pos)

    def snapshot(self) -> CursorState:
        return (self._pos, self._line, self._line_start)

    def restore(self, state: CursorState) -> None:
        self._pos, self._line, self._line_start = state

    def peek_char(self) -> str:
        """Return the raw character under the cursor, or '' at end of input."""
        return self._peek()

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._line_start = self._pos
        return ch

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self.current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Lookahead
    # ------------------------------------------------------------------

    def peek_matches(self, *expected: TokenType) -> bool:
        """Return True if the next tokens have exactly the expected types.

        Only token types are compared, never values. The cursor is left
        where it was whatever the outcome.
        """
        saved = self.snapshot()
        try:
            return all(self.next_token().type == tt for tt in expected)
        finally:
            self.restore(saved)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def next_token(self) -> Token:
        """Scan and return the next token. Returns EOF forever once exhausted."""
        while True:
            if self._pos >= len(self._source):
                return Token(TokenType.EOF, None, self.current_pos())

            ch = self._peek()

            if ch == "\n":
                self._advance()
                continue

            start = self.current_pos()

            tt = STRUCTURAL.get(ch)
            if tt is not None:
                self._advance()
                return Token(tt, None, start)

            if ch == "#":
                # Compiler directive: #region, #if, #pragma ...
                self._skip_to_eol()
                continue

            if ch == "/":
                nxt = self._peek(1)
                if nxt == "*":
                    self._skip_block_comment(start)
                    continue
                if nxt == "/":
                    self._skip_to_eol()
                    continue
                self._advance()
                return Token(TokenType.SYMBOL, "/", start)

            if ch in "\"'":
                return self._lex_string(start)

            if ch <= " ":
                self._advance()
                continue

            if (ch.isascii() and ch.isdigit()) or (ch == "-" and self._at_number(1)):
                return self._lex_number(start)

            if is_symbol_char(ch):
                self._advance()
                return Token(TokenType.SYMBOL, ch, start)

            if ch == "@":
                self._advance()
                if self._peek() == '"':
                    # Verbatim string; the quote sees the @ behind it
                    continue
                if self._pos >= len(self._source) or not is_ident_char(self._peek()):
                    return Token(TokenType.SYMBOL, "@", start)
                return self._lex_identifier(start, verbatim=True)

            if is_ident_start(ch):
                return self._lex_identifier(start)

            raise self._error(f"unexpected character {ch!r}", start)

    def _at_number(self, offset: int) -> bool:
        ch = self._peek(offset)
        if ch == ".":
            ch = self._peek(offset + 1)
        return ch.isascii() and ch.isdigit()

    # ------------------------------------------------------------------
    # Skipped input
    # ------------------------------------------------------------------

    def _skip_to_eol(self) -> None:
        while self._pos < len(self._source) and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self, start: Position) -> None:
        self._advance()
        self._advance()
        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated comment", start)
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

    # ------------------------------------------------------------------
    # Literals and identifiers
    # ------------------------------------------------------------------

    def _lex_string(self, start: Position) -> Token:
        verbatim = start.offset > 0 and self._source[start.offset - 1] == "@"
        quote = self._advance()
        chars: list[str] = []

        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated string", start)

            ch = self._peek()

            if ch == quote:
                self._advance()
                if verbatim and self._peek() == quote:
                    # Doubled quote inside a verbatim string
                    chars.append(self._advance())
                    continue
                break

            if ch == "\\" and not verbatim:
                self._advance()
                if self._pos >= len(self._source):
                    raise self._error("unterminated string", start)
                esc = self._advance()
                chars.append(_STRING_ESCAPES.get(esc, esc))
                continue

            chars.append(self._advance())

        return Token(TokenType.STRING, "".join(chars), start)

    def _lex_number(self, start: Position) -> Token:
        m = _NUMBER_RE.match(self._source, self._pos)
        assert m is not None  # guarded by the caller's digit check
        self._pos = m.end()
        return Token(TokenType.NUMBER, float(m.group()), start)

    def _lex_identifier(self, start: Position, verbatim: bool = False) -> Token:
        begin = self._pos
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            self._pos += 1
        text = self._source[begin : self._pos]
        return Token(TokenType.IDENTIFIER, text, start, verbatim)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list, EOF last."""
    lexer = Lexer(source)
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == TokenType.EOF:
            return tokens
