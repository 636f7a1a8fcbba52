"""Command-line interface for declscan."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from declscan.decls import ClassDecl
from declscan.errors import ScanError, SourceEncodingError
from declscan.loader import DEFAULT_EXTENSIONS, iter_source_files, read_source

FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    paths: list[Path]
    output_file: Path | None
    format: str
    extensions: list[str]
    exclude: list[str]
    verbose: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="declscan",
        description="List the classes declared in C# source files",
    )
    p.add_argument("paths", nargs="+", help="Source files or directories to scan")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover declscan.toml)",
    )
    p.add_argument(
        "--ext",
        action="append",
        default=[],
        metavar="EXT",
        help="File extension to scan in directories (repeatable, default: .cs)",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory name to skip while walking (repeatable)",
    )
    p.add_argument(
        "-v", "--verbose", action="store_true", help="Report ignored generic classes"
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def parse_ext_arg(s: str) -> str:
    """Normalize an extension to its dotted form: 'cs' -> '.cs'."""
    s = s.strip()
    if not s or s == ".":
        raise argparse.ArgumentTypeError(f"invalid extension: {s!r}")
    return s if s.startswith(".") else f".{s}"


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / "declscan.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, base_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, base_dir if base_dir is not None else Path("."))
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Format: config < CLI
    fmt = "text"
    cfg_format = config.get("format")
    if isinstance(cfg_format, str):
        if cfg_format not in FORMATS:
            raise argparse.ArgumentTypeError(f"invalid format in config: {cfg_format}")
        fmt = cfg_format
    if args.format is not None:
        fmt = args.format

    # Extensions: CLI replaces config
    cfg_scan = config.get("scan")
    extensions: list[str] = list(DEFAULT_EXTENSIONS)
    exclude: list[str] = []
    if isinstance(cfg_scan, dict):
        cfg_exts = cfg_scan.get("extensions")
        if isinstance(cfg_exts, list):
            extensions = [parse_ext_arg(str(e)) for e in cfg_exts]
        cfg_exclude = cfg_scan.get("exclude")
        if isinstance(cfg_exclude, list):
            exclude.extend(str(d) for d in cfg_exclude)
    if args.ext:
        extensions = [parse_ext_arg(e) for e in args.ext]

    # Excluded directories: config + CLI
    exclude.extend(args.exclude)

    cfg_verbose = config.get("verbose", False)
    if not isinstance(cfg_verbose, bool):
        raise argparse.ArgumentTypeError(f"invalid verbose in config: {cfg_verbose!r}")
    verbose = cfg_verbose or args.verbose

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        paths=[Path(p) for p in args.paths],
        output_file=output_file,
        format=fmt,
        extensions=extensions,
        exclude=exclude,
        verbose=verbose,
        debug=args.debug,
    )


def scan_one(path: Path, options: CliOptions) -> list[ClassDecl]:
    """Read and scan a single file, honouring --verbose and --debug."""
    from declscan import scan_file
    from declscan.debug import dump_tokens

    def report_generic(name: str) -> None:
        print(f"Ignoring generic class declaration: {name}", file=sys.stderr)

    if options.debug:
        print(f"--- tokens: {path}", file=sys.stderr)
        dump_tokens(read_source(path), file=sys.stderr)

    return scan_file(path, report_generic if options.verbose else None)


def format_text(results: dict[Path, list[ClassDecl]]) -> str:
    lines: list[str] = []
    for path, decls in results.items():
        for decl in decls:
            line = f"{path}: {decl.full_name}"
            if decl.bases:
                line += " : " + ", ".join(decl.bases)
            if decl.nested:
                line += " [nested]"
            lines.append(line)
    return "".join(f"{line}\n" for line in lines)


def format_json(results: dict[Path, list[ClassDecl]]) -> str:
    data = {str(path): [d.to_dict() for d in decls] for path, decls in results.items()}
    return json.dumps(data, indent=2) + "\n"


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    results: dict[Path, list[ClassDecl]] = {}
    exit_code = 0

    for path in iter_source_files(options.paths, options.extensions, options.exclude):
        try:
            results[path] = scan_one(path, options)
        except ScanError as exc:
            print(exc.format(str(path)), file=sys.stderr)
            exit_code = max(exit_code, 1)
        except SourceEncodingError as exc:
            print(f"error: {exc}", file=sys.stderr)
            exit_code = 2
        except OSError as exc:
            print(f"error: cannot read {path}: {exc.strerror}", file=sys.stderr)
            exit_code = 2

    if options.format == "json":
        text = format_json(results)
    else:
        text = format_text(results)
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return exit_code
