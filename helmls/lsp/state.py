"""Document level state tracking for the helm language server."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lsprotocol.types import Diagnostic, Location, Position
from pygls.uris import to_fs_path

from helmls.template import check_blocks, resolve_definition

from .protocol import diagnostic_from_error, to_range, utf16_to_column

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class DocumentState:
    """Text of one template plus the diagnostics derived from it."""

    uri: str
    text: str
    version: int
    path: Path = field(init=False)
    lines: List[str] = field(init=False)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    _line_offsets: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = self._resolve_path()
        self.set_text(self.text)
        self.rebuild()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def update(self, text: str, version: int) -> List[Diagnostic]:
        self.set_text(text)
        self.version = version
        self.rebuild()
        return self.diagnostics

    def rebuild(self) -> None:
        self.diagnostics = [
            diagnostic_from_error(problem, self._line(problem.line))
            for problem in check_blocks(self.lines)
        ]

    def diagnostics_for_publish(self) -> List[Diagnostic]:
        return list(self.diagnostics)

    def definition(self, position: Position) -> Optional[Location]:
        """Declaration of the variable under *position*.

        Raises :class:`helmls.errors.MalformedTemplateError` when the lines
        above the cursor are not balanced.
        """

        if position.line >= len(self.lines):
            return None
        column = utf16_to_column(self.lines[position.line], position.character)
        found = resolve_definition(self.lines, position.line, column)
        if found is None:
            return None
        return Location(uri=self.uri, range=to_range(found, self.lines[found.line]))

    def offset_at(self, position: Position) -> int:
        if position.line >= len(self.lines):
            return len(self.text)
        line_index = max(position.line, 0)
        start_offset = self._line_offsets[line_index]
        line = self.lines[line_index]
        column = utf16_to_column(line, max(position.character, 0))
        return start_offset + column

    def set_text(self, text: str) -> None:
        """Replace the text without recomputing diagnostics."""

        self.text = text
        self.lines = _LINE_BREAK.split(text)
        self._recompute_line_offsets()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_path(self) -> Path:
        try:
            return Path(to_fs_path(self.uri))
        except (TypeError, ValueError):
            return Path(self.uri)

    def _line(self, index: Optional[int]) -> str:
        if index is None or index >= len(self.lines):
            return ""
        return self.lines[index]

    def _recompute_line_offsets(self) -> None:
        offsets: List[int] = [0]
        text = self.text
        idx = 0
        length = len(text)
        while idx < length:
            char = text[idx]
            if char == '\r':
                next_idx = idx + 1
                if next_idx < length and text[next_idx] == '\n':
                    offsets.append(next_idx + 1)
                    idx = next_idx + 1
                else:
                    offsets.append(idx + 1)
                    idx += 1
            elif char == '\n':
                offsets.append(idx + 1)
                idx += 1
            else:
                idx += 1
        if len(offsets) < len(self.lines):
            offsets.extend([len(text)] * (len(self.lines) - len(offsets)))
        self._line_offsets = offsets


__all__ = ["DocumentState"]
