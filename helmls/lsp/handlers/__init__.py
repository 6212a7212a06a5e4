"""Handler registration helpers."""

from __future__ import annotations

from . import definition, diagnostics


def register_all(server) -> None:
    diagnostics.register(server)
    definition.register(server)


__all__ = ["register_all"]
