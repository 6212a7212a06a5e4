"""Unified error model for helmls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        if self.path and self.line is not None and self.column is not None:
            return f"{self.path}:{self.line}:{self.column}"
        if self.path and self.line is not None:
            return f"{self.path}:{self.line}"
        if self.line is not None:
            return f"line {self.line}"
        if self.path:
            return self.path
        return "unknown location"


class HelmLSError(Exception):
    """Base class for every error the server reports to a client."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        self.path = path
        self.line = line
        self.column = column
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class MalformedTemplateError(HelmLSError):
    """Raised when ``else``/``end`` actions do not match an open block.

    ``line`` and ``column`` are 0-based, like every other position inside
    the template package.
    """

    code = "HELM001"
    hint = "Check that every if/with/range has exactly one matching end"


class SourceUnavailableError(HelmLSError):
    """Raised when a document is neither open in the editor nor readable on disk."""

    code = "HELM002"


class ChartToolError(HelmLSError):
    """Raised when the helm binary is missing, fails or prints invalid YAML."""

    code = "HELM003"
    hint = "Make sure helm is installed and on PATH"


class ConfigError(HelmLSError):
    """Raised for invalid configuration values."""

    code = "HELM004"


__all__ = [
    "HelmLSError",
    "MalformedTemplateError",
    "SourceUnavailableError",
    "ChartToolError",
    "ConfigError",
    "ErrorLocation",
]
