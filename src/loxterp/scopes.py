from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import LoxRuntimeError
from .tokens import Token


class Environment:
    """
    One scope's name -> value table plus a link to the enclosing scope.

    The interpreter creates one per block and one per call, mirroring the
    scopes the resolver pushes, so `get_at`/`assign_at` can hop straight to
    the declaring scope.
    """

    __slots__ = ("values", "enclosing")

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing = enclosing

    @classmethod
    def child_of(cls, parent: "Environment") -> "Environment":
        return cls(parent)

    def __repr__(self) -> str:
        depth = 0
        scope = self.enclosing
        while scope is not None:
            depth += 1
            scope = scope.enclosing
        return f"<Environment depth={depth} names={sorted(self.values)}>"

    def define(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get(self, name: Token) -> Any:
        scope: Optional[Environment] = self
        while scope is not None:
            if name.lexeme in scope.values:
                return scope.values[name.lexeme]
            scope = scope.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        scope: Optional[Environment] = self
        while scope is not None:
            if name.lexeme in scope.values:
                scope.values[name.lexeme] = value
                return
            scope = scope.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> "Environment":
        scope = self
        for _ in range(distance):
            if scope.enclosing is None:
                raise RuntimeError(
                    f"resolver/interpreter scope mismatch: no scope at distance {distance}"
                )
            scope = scope.enclosing
        return scope

    def get_at(self, distance: int, name: str) -> Any:
        values = self.ancestor(distance).values
        if name not in values:
            raise RuntimeError(
                f"resolver/interpreter scope mismatch: {name!r} not bound at distance {distance}"
            )
        return values[name]

    def assign_at(self, distance: int, name: str, value: Any) -> None:
        self.ancestor(distance).values[name] = value
