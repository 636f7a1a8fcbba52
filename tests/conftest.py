"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from declscan.decls import ClassDecl
from declscan.lexer import tokenize
from declscan.parser import parse
from declscan.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def scan_source():
    """Return a helper that scans source and records ignored generic classes."""

    def _scan(source: str, generics: list[str] | None = None) -> list[ClassDecl]:
        sink = generics.append if generics is not None else None
        return parse(source, sink)

    return _scan


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[object]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_decl(
    decl: ClassDecl,
    namespace: str,
    name: str,
    bases: tuple[str, ...] = (),
    nested: bool = False,
) -> None:
    """Assert every field of a ClassDecl."""
    assert isinstance(decl, ClassDecl), f"Expected ClassDecl, got {type(decl).__name__}"
    assert decl.namespace == namespace, f"Expected namespace '{namespace}', got '{decl.namespace}'"
    assert decl.name == name, f"Expected name '{name}', got '{decl.name}'"
    assert decl.bases == bases, f"Expected bases {bases}, got {decl.bases}"
    assert decl.nested == nested, f"Expected nested={nested}, got {decl.nested}"
