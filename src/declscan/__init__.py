"""declscan: class declaration scanner for C#-like source files."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from declscan.decls import ClassDecl

__version__ = "0.1.0"


def scan(
    source: str,
    on_generic: Callable[[str], None] | None = None,
) -> list[ClassDecl]:
    """Return the non-generic class declarations of decoded source text.

    `on_generic` is called with the full name of each generic class that
    is left out. Raises LexError or ParseError on the first failure.
    """
    from declscan.parser import parse

    return parse(source, on_generic)


def scan_file(
    path: Path,
    on_generic: Callable[[str], None] | None = None,
) -> list[ClassDecl]:
    """Read a UTF-8 source file and scan it.

    Raises SourceEncodingError before scanning if the file is not UTF-8.
    """
    from declscan.loader import read_source

    return scan(read_source(path), on_generic)
