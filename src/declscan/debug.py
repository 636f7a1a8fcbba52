"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from declscan.lexer import Lexer
from declscan.tokens import TokenType


def dump_tokens(source: str, *, file: TextIO = sys.stderr) -> None:
    """Print one line per token (position, type, value) to *file*.

    A LexError propagates after the tokens before it were written.
    """
    lexer = Lexer(source)
    while True:
        tok = lexer.next_token()
        pos = f"{tok.position.line}:{tok.position.column}"
        if tok.value is None:
            file.write(f"{pos:>8}  {tok.type.name}\n")
        else:
            file.write(f"{pos:>8}  {tok.type.name} {tok.value!r}\n")
        if tok.type == TokenType.EOF:
            return
