"""Scope stack mirroring the block nesting of a template."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from helmls.errors import MalformedTemplateError

from .model import Statement, StatementKind, Var
from .scanner import Action, ActionKind

logger = logging.getLogger("helmls.template.scope")

_OPENERS = {
    ActionKind.IF: StatementKind.IF,
    ActionKind.WITH: StatementKind.WITH,
    ActionKind.RANGE: StatementKind.RANGE,
    ActionKind.DEFINE: StatementKind.DEFINE,
}


@dataclass
class Scope:
    """Variables declared directly inside one block body."""

    statement: Statement
    vars: Dict[str, Var] = field(default_factory=dict)


class Context:
    """Stack of scopes, innermost last. The bottom scope is always global."""

    def __init__(self) -> None:
        self._scopes: List[Scope] = [Scope(Statement.global_())]

    @property
    def depth(self) -> int:
        return len(self._scopes)

    @property
    def current(self) -> Scope:
        return self._scopes[-1]

    def scopes(self) -> Iterator[Scope]:
        """Iterate innermost to outermost."""

        return reversed(self._scopes)

    def declare(self, name: str, var: Var) -> Optional[Var]:
        previous = self.current.vars.get(name)
        self.current.vars[name] = var
        return previous

    def assign(self, name: str, var: Var) -> Optional[Var]:
        for scope in self.scopes():
            if name in scope.vars:
                previous = scope.vars[name]
                scope.vars[name] = var
                return previous
        return None

    def lookup(self, name: str) -> Optional[Var]:
        for scope in self.scopes():
            var = scope.vars.get(name)
            if var is not None:
                return var
        return None

    def push(self, scope: Scope) -> None:
        self._scopes.append(scope)
        logger.debug("pushed %s scope", scope.statement.describe())

    def pop(self, action: Optional[Action] = None) -> Scope:
        if len(self._scopes) <= 1:
            keyword = action.tokens[0] if action is not None and action.tokens else "end"
            line = action.location.line if action is not None else None
            column = action.location.start if action is not None else None
            raise MalformedTemplateError(
                f"'{keyword}' without a matching open block",
                line=line,
                column=column,
            )
        scope = self._scopes.pop()
        logger.debug("popped %s scope", scope.statement.describe())
        return scope

    def apply(self, action: Action) -> None:
        """Mutate the stack according to one scanned action."""

        if action.kind is ActionKind.INERT:
            return
        if action.kind is ActionKind.END:
            self.pop(action)
            return
        if action.kind is ActionKind.ELSE:
            closed = self.pop(action)
            if closed.statement.kind is not StatementKind.IF:
                raise MalformedTemplateError(
                    f"'else' closes a {closed.statement.kind.name.lower()} block instead of an if block",
                    line=action.location.line,
                    column=action.location.start,
                )
            kind = StatementKind.IF if action.chained_if else StatementKind.ELSE
            self.push(Scope(Statement(kind, action.location)))
            return
        self.push(Scope(Statement(_OPENERS[action.kind], action.location)))
        for name, location in action.declarations:
            logger.debug("declare %s at %s:%s", name, location.line, location.start)
            self.declare(name, Var(location))

    def snapshot(self) -> "Context":
        """Independent copy of the current stack."""

        return copy.deepcopy(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return self._scopes == other._scopes

    def __repr__(self) -> str:
        chain = " > ".join(scope.statement.describe() for scope in self._scopes)
        return f"Context({chain})"


def resolve(context: Context, name: str) -> Optional[Var]:
    """Find the innermost visible binding of *name*."""

    return context.lookup(name)


__all__ = ["Scope", "Context", "resolve"]
