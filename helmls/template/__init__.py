"""Static scope tracking for Helm Go-template documents."""

from .definition import check_blocks, replay, resolve_definition, token_at
from .model import Location, Statement, StatementKind, Var
from .scanner import Action, ActionKind, scan_helpers, scan_line
from .scope import Context, Scope, resolve

__all__ = [
    "Action",
    "ActionKind",
    "Context",
    "Location",
    "Scope",
    "Statement",
    "StatementKind",
    "Var",
    "check_blocks",
    "replay",
    "resolve",
    "resolve_definition",
    "scan_helpers",
    "scan_line",
    "token_at",
]
