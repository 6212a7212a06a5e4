"""Conversions between template locations and LSP types.

LSP columns are UTF-16 code units while the template package counts
Python code points, so every position crossing this boundary is
converted here.
"""

from __future__ import annotations

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range

from helmls.errors import HelmLSError
from helmls.template.model import Location


def _utf16_width(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


def utf16_to_column(line: str, character: int) -> int:
    """Code point index for a UTF-16 *character* offset on *line*."""

    units = 0
    for idx, char in enumerate(line):
        if units >= character:
            return idx
        units += _utf16_width(char)
    return len(line)


def column_to_utf16(line: str, column: int) -> int:
    return sum(_utf16_width(char) for char in line[:column])


def to_range(location: Location, line_text: str) -> Range:
    return Range(
        start=Position(line=location.line, character=column_to_utf16(line_text, location.start)),
        end=Position(line=location.line, character=column_to_utf16(line_text, location.end)),
    )


def diagnostic_from_error(error: HelmLSError, line_text: str = "") -> Diagnostic:
    line = max(error.line or 0, 0)
    column = column_to_utf16(line_text, max(error.column or 0, 0))
    start = Position(line=line, character=column)
    end = Position(line=line, character=column + 1)
    return Diagnostic(
        range=Range(start=start, end=end),
        message=error.message,
        severity=DiagnosticSeverity.Error,
        source="helmls",
        code=error.code,
    )


__all__ = [
    "utf16_to_column",
    "column_to_utf16",
    "to_range",
    "diagnostic_from_error",
]
