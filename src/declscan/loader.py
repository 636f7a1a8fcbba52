"""Source loading: strict UTF-8 decoding and source file discovery."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from declscan.errors import SourceEncodingError

DEFAULT_EXTENSIONS = (".cs",)


def read_source(path: Path) -> str:
    """Read a file as UTF-8, dropping a leading BOM.

    Raises SourceEncodingError on undecodable bytes; OSError propagates.
    """
    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceEncodingError(path, f"byte {exc.start}: {exc.reason}") from exc


def iter_source_files(
    paths: Iterable[Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude: Iterable[str] = (),
) -> Iterator[Path]:
    """Yield files to scan: explicit files as given, directories walked in sorted order."""
    exts = {e.lower() for e in extensions}
    skip = set(exclude)
    for path in paths:
        if not path.is_dir():
            yield path
            continue
        for child in sorted(path.rglob("*")):
            rel_dirs = child.relative_to(path).parts[:-1]
            if any(part in skip for part in rel_dirs):
                continue
            if child.is_file() and child.suffix.lower() in exts:
                yield child
