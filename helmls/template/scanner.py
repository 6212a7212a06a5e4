"""Line oriented extraction and classification of Go-template actions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Tuple

from .model import Location

# ``{{- `` and `` -}}`` trim markers need whitespace next to the dash, so
# ``{{-3}}`` stays the number -3.
_ACTION_RE = re.compile(r"\{\{(?:-(?=\s))?\s*(.*?)\s*(?:(?<=\s)-)?\}\}")
_RANGE_CAPTURE_RE = re.compile(r"range\s+(\$\w+),\s*(\$\w+)\s*:=")
_DEFINE_RE = re.compile(r"\{\{-?\s*define\s+([^\}]+?)\s*-?\}\}")


class ActionKind(Enum):
    END = auto()
    IF = auto()
    ELSE = auto()
    WITH = auto()
    RANGE = auto()
    DEFINE = auto()
    INERT = auto()


_KEYWORDS = {
    "end": ActionKind.END,
    "if": ActionKind.IF,
    "else": ActionKind.ELSE,
    "with": ActionKind.WITH,
    "range": ActionKind.RANGE,
    # named templates need a matching end but hold no variables
    "define": ActionKind.DEFINE,
    "block": ActionKind.DEFINE,
}


@dataclass(slots=True)
class Action:
    """One ``{{ ... }}`` tag found on a line."""

    kind: ActionKind
    text: str
    location: Location
    tokens: List[str] = field(default_factory=list)
    declarations: List[Tuple[str, Location]] = field(default_factory=list)

    @property
    def chained_if(self) -> bool:
        """True for ``else if``, which reopens an if block."""

        return self.kind is ActionKind.ELSE and self.tokens[1:2] == ["if"]


def classify(tokens: List[str]) -> ActionKind:
    if not tokens:
        return ActionKind.INERT
    return _KEYWORDS.get(tokens[0], ActionKind.INERT)


def scan_line(line: str, lineno: int) -> List[Action]:
    """Return every action on *line*, left to right."""

    actions: List[Action] = []
    for match in _ACTION_RE.finditer(line):
        text = match.group(1)
        location = Location(lineno, match.start(1), match.end(1))
        tokens = text.split()
        action = Action(kind=classify(tokens), text=text, location=location, tokens=tokens)
        if action.kind is ActionKind.RANGE:
            action.declarations = _range_declarations(text, location)
        actions.append(action)
    return actions


def _range_declarations(text: str, location: Location) -> List[Tuple[str, Location]]:
    capture = _RANGE_CAPTURE_RE.search(text)
    if capture is None:
        return []
    declarations = []
    for group in (1, 2):
        span = Location(location.line, capture.start(group), capture.end(group))
        declarations.append((capture.group(group), span.shifted(location.start)))
    return declarations


def scan_helpers(text: str) -> List[str]:
    """Names of the ``define "name"`` helper templates found in *text*."""

    names = []
    for match in _DEFINE_RE.finditer(text):
        name = match.group(1).strip().strip('"`')
        if name:
            names.append(name)
    return names


__all__ = ["Action", "ActionKind", "classify", "scan_line", "scan_helpers"]
