"""Tests for the CLI module: arg parsing, exit codes, output formats, end-to-end."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from declscan.cli import (
    CliOptions,
    build_parser,
    format_text,
    main,
    parse_ext_arg,
    scan_one,
)
from declscan.decls import ClassDecl
from declscan.errors import SourceEncodingError

SOURCE = """\
namespace Game
{
    public class Player : Node, IDamageable
    {
        class Stats { }
    }

    public class Pool<T> { }
}
"""

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_ext_arg_dotted(self) -> None:
        assert parse_ext_arg(".cs") == ".cs"

    def test_parse_ext_arg_bare(self) -> None:
        assert parse_ext_arg("cs") == ".cs"

    def test_parse_ext_arg_empty_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_ext_arg("")

    def test_parse_ext_arg_lone_dot_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_ext_arg(".")


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_paths_only(self) -> None:
        ns = build_parser().parse_args(["a.cs", "src"])
        assert ns.paths == ["a.cs", "src"]
        assert ns.output is None
        assert ns.format is None

    def test_output_and_format(self) -> None:
        ns = build_parser().parse_args(["a.cs", "-o", "out.json", "-f", "json"])
        assert ns.output == "out.json"
        assert ns.format == "json"

    def test_bad_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.cs", "--format", "xml"])

    def test_repeatable_flags(self) -> None:
        ns = build_parser().parse_args(
            ["src", "--ext", "cs", "--ext", ".csx", "--exclude", "obj", "--exclude", "bin"]
        )
        assert ns.ext == ["cs", ".csx"]
        assert ns.exclude == ["obj", "bin"]

    def test_verbose_and_debug(self) -> None:
        ns = build_parser().parse_args(["a.cs", "-v", "--debug"])
        assert ns.verbose is True
        assert ns.debug is True


# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------


class TestOutput:
    def test_text(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "Player.cs"
        src.write_text(SOURCE)
        assert main([str(src)]) == 0
        out = capsys.readouterr().out
        assert out == (
            f"{src}: Game.Player : Node, IDamageable\n"
            f"{src}: Game.Player.Stats [nested]\n"
        )

    def test_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "Player.cs"
        src.write_text(SOURCE)
        assert main([str(src), "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {
            str(src): [
                {
                    "namespace": "Game",
                    "name": "Player",
                    "bases": ["Node", "IDamageable"],
                    "nested": False,
                },
                {"namespace": "Game", "name": "Player.Stats", "bases": [], "nested": True},
            ]
        }

    def test_output_file(self, tmp_path: Path) -> None:
        src = tmp_path / "Player.cs"
        src.write_text(SOURCE)
        out = tmp_path / "classes.txt"
        assert main([str(src), "-o", str(out)]) == 0
        assert "Game.Player : Node, IDamageable" in out.read_text()

    def test_format_text_empty(self) -> None:
        assert format_text({}) == ""

    def test_format_text_top_level(self) -> None:
        text = format_text({Path("a.cs"): [ClassDecl("", "A")]})
        assert text == "a.cs: A\n"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_syntax_error_returns_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        bad = tmp_path / "bad.cs"
        bad.write_text("class A {\n")
        assert main([str(bad)]) == 1
        err = capsys.readouterr().err
        assert "missing closing braces" in err
        assert f"--> {bad}:2:1" in err

    def test_other_files_still_reported(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "a_bad.cs").write_text("class {")
        (tmp_path / "b_good.cs").write_text("class B { }")
        assert main([str(tmp_path)]) == 1
        assert "b_good.cs: B" in capsys.readouterr().out

    def test_invalid_utf8_returns_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        bad = tmp_path / "latin.cs"
        bad.write_bytes("class Été { }".encode("latin-1"))
        assert main([str(bad)]) == 2
        assert "invalid UTF-8" in capsys.readouterr().err

    def test_missing_file_returns_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(tmp_path / "nope.cs")]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_bad_config_returns_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cfg = tmp_path / "bad.toml"
        cfg.write_text('format = "xml"\n')
        src = tmp_path / "a.cs"
        src.write_text("class A { }")
        assert main([str(src), "--config", str(cfg)]) == 2
        assert "invalid format" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Diagnostics on stderr
# ---------------------------------------------------------------------------


class TestDiagnostics:
    def test_verbose_reports_generics(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "Player.cs"
        src.write_text(SOURCE)
        assert main([str(src), "--verbose"]) == 0
        err = capsys.readouterr().err
        assert "Ignoring generic class declaration: Game.Pool" in err

    def test_quiet_by_default(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "Player.cs"
        src.write_text(SOURCE)
        assert main([str(src)]) == 0
        assert capsys.readouterr().err == ""

    def test_debug_dumps_tokens(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "a.cs"
        src.write_text("class A { }")
        assert main([str(src), "--debug"]) == 0
        err = capsys.readouterr().err
        assert f"--- tokens: {src}" in err
        assert "IDENTIFIER 'class'" in err


# ---------------------------------------------------------------------------
# scan_one smoke test
# ---------------------------------------------------------------------------


def _options(src: Path, verbose: bool = False) -> CliOptions:
    return CliOptions(
        paths=[src],
        output_file=None,
        format="text",
        extensions=[".cs"],
        exclude=[],
        verbose=verbose,
        debug=False,
    )


class TestScanOne:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "a.cs"
        src.write_text("namespace N { class A : B { } }")
        assert scan_one(src, _options(src)) == [ClassDecl("N", "A", ("B",), False)]

    def test_strips_bom(self, tmp_path: Path) -> None:
        src = tmp_path / "a.cs"
        src.write_bytes(b"\xef\xbb\xbfclass A { }")
        assert [d.name for d in scan_one(src, _options(src))] == ["A"]

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        src = tmp_path / "a.cs"
        src.write_bytes(b"class \xff { }")
        with pytest.raises(SourceEncodingError):
            scan_one(src, _options(src))

    def test_verbose_reports_qualified_generic(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "a.cs"
        src.write_text("namespace N { class G<T> { } }")
        assert scan_one(src, _options(src, verbose=True)) == []
        assert capsys.readouterr().err == "Ignoring generic class declaration: N.G\n"
