"""Error types with formatted source context."""

from __future__ import annotations

from pathlib import Path

from declscan.tokens import Position


class ScanError(Exception):
    """Base for the first lexing or parsing failure, with position and source context."""

    kind = "error"

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    @property
    def line(self) -> int:
        return self.position.line

    def format(self, filename: str = "input.cs") -> str:
        lines = self.source.splitlines(keepends=True)
        line_idx = self.position.line - 1
        col = self.position.column

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Single caret, pushed to the line end when the column is past it
        col = max(1, min(col, len(source_line) + 1))
        pad = " " * (col - 1)

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{self.kind}: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class LexError(ScanError):
    """Raised on the first lexing error: unterminated string or comment, stray character."""


class ParseError(ScanError):
    """Raised on the first unexpected token or unbalanced brace."""


class SourceEncodingError(Exception):
    """Raised by the source loader when a file is not valid UTF-8."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            f"{path} contains invalid UTF-8 ({reason}), so it was not scanned. "
            "Please save source files as UTF-8."
        )
