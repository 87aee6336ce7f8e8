"""Structural type tree for parsed type signatures.

Value objects only: every node is a frozen, hashable dataclass and child
sequences are tuples, so a tree built by the parser can be shared freely and
compared with ``==``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class QualifiedName:
    """A type constructor name together with the module that defines it.

    ``home`` is the dotted module path (``"Json.Decode"``) and is empty when the
    signature did not qualify the name.
    """

    home: str
    name: str

    @classmethod
    def from_dotted(cls, dotted: str) -> QualifiedName:
        home, _, name = dotted.rpartition(".")
        return cls(home=home, name=name)

    def __str__(self) -> str:
        return f"{self.home}.{self.name}" if self.home else self.name


@dataclass(frozen=True)
class Function:
    """A curried function flattened into its parameter list and final result."""

    params: tuple[Type, ...]
    result: Type


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Apply:
    """A type constructor applied to zero or more arguments."""

    name: QualifiedName
    args: tuple[Type, ...] = ()


@dataclass(frozen=True)
class Tuple:
    elements: tuple[Type, ...]


@dataclass(frozen=True)
class Record:
    """A record type; ``extension`` holds ``r`` in ``{ r | x : Int }``."""

    fields: tuple[tuple[str, Type], ...]
    extension: str | None = None


Type = Union[Function, Variable, Apply, Tuple, Record]

UNIT = Apply(QualifiedName(home="", name="()"))


def fallback_variable(raw: str) -> Variable:
    """Degraded representation of a signature that could not be parsed."""
    return Variable(raw)
