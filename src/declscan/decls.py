"""Declaration records produced by the scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class DeclKind(Enum):
    NAMESPACE = auto()
    CLASS = auto()
    STRUCT = auto()


@dataclass(frozen=True, slots=True)
class NameDecl:
    """A named scope opened at one brace depth."""

    name: str
    kind: DeclKind

    @property
    def is_type(self) -> bool:
        return self.kind is not DeclKind.NAMESPACE


@dataclass(frozen=True, slots=True)
class ClassDecl:
    """A non-generic class declaration found in the source.

    `name` is dot-joined with the enclosing type names; `bases` keeps
    declaration order.
    """

    namespace: str
    name: str
    bases: tuple[str, ...] = ()
    nested: bool = False

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "name": self.name,
            "bases": list(self.bases),
            "nested": self.nested,
        }
