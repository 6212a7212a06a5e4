"""Go-to-definition for template variables.

Every query replays the document from the first line, so no state
survives between calls.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from helmls.errors import MalformedTemplateError

from .model import Location
from .scanner import scan_line
from .scope import Context, resolve

logger = logging.getLogger("helmls.template.definition")


def replay(lines: Sequence[str], stop: Optional[int] = None) -> Context:
    """Apply every action on ``lines[:stop]`` to a fresh context.

    Raises :class:`MalformedTemplateError` on unbalanced ``else``/``end``.
    """

    context = Context()
    for lineno, line in enumerate(lines[:stop]):
        for action in scan_line(line, lineno):
            context.apply(action)
    return context


def token_at(line: str, column: int) -> Optional[Tuple[int, int]]:
    """Span of the whitespace delimited token around *column*.

    ``None`` when either side has no whitespace boundary.
    """

    if column < 0 or column > len(line):
        return None
    start = None
    for idx in range(min(column, len(line)) - 1, -1, -1):
        if line[idx].isspace():
            start = idx + 1
            break
    end = None
    for idx in range(column, len(line)):
        if line[idx].isspace():
            end = idx
            break
    if start is None or end is None or start >= end:
        return None
    return start, end


def resolve_definition(lines: Sequence[str], line: int, column: int) -> Optional[Location]:
    """Declaration site of the ``$variable`` under the cursor, if any."""

    if line < 0 or line >= len(lines):
        return None
    context = replay(lines, line)
    span = token_at(lines[line], column)
    if span is None:
        logger.debug("no token boundary at %s:%s", line, column)
        return None
    start, end = span
    name = lines[line][start:end]
    var = resolve(context, name)
    if var is None:
        logger.debug("%s is not declared in %r", name, context)
        return None
    return var.location


def check_blocks(lines: Sequence[str]) -> List[MalformedTemplateError]:
    """Structural problems of a whole document.

    Replay stops at the first unbalanced ``else``/``end``; otherwise every
    block still open at the end of the document is reported.
    """

    try:
        context = replay(lines)
    except MalformedTemplateError as exc:
        return [exc]
    problems = []
    for scope in context.scopes():
        location = scope.statement.location
        if location is None:
            continue
        problems.append(
            MalformedTemplateError(
                f"{scope.statement.kind.name.lower()} block is never closed",
                line=location.line,
                column=location.start,
            )
        )
    return problems


__all__ = ["replay", "token_at", "resolve_definition", "check_blocks"]
