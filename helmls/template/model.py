"""Value types shared by the scanner, the scope stack and the definition query."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class Location:
    """A 0-based line and a half-open ``[start, end)`` column range on it.

    Columns count Python string characters (code points).
    """

    line: int
    start: int
    end: int

    def shifted(self, offset: int) -> "Location":
        return Location(self.line, self.start + offset, self.end + offset)


@dataclass(slots=True)
class Var:
    """A bound ``$name``.

    ``value`` stays ``None``; only the declaration site is tracked.
    """

    location: Location
    value: Optional[Any] = None


class StatementKind(Enum):
    GLOBAL = auto()
    IF = auto()
    ELSE = auto()
    WITH = auto()
    RANGE = auto()
    DEFINE = auto()


@dataclass(frozen=True, slots=True)
class Statement:
    """The block a scope belongs to and where that block was opened."""

    kind: StatementKind
    location: Optional[Location] = None

    @classmethod
    def global_(cls) -> "Statement":
        return cls(StatementKind.GLOBAL)

    def describe(self) -> str:
        name = self.kind.name.lower()
        if self.location is None:
            return name
        return f"{name} at {self.location.line}:{self.location.start}"


__all__ = ["Location", "Var", "Statement", "StatementKind"]
