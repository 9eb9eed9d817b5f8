from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List

from . import nodes
from .common import ReturnSignal
from .scopes import Environment

if TYPE_CHECKING:
    from .main import Interpreter


class LoxCallable:
    """Invocation contract shared by user functions, natives and classes."""

    __slots__ = ()

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """
    A user-defined function or method paired with its defining environment.

    Methods live once in their class's table; `bind` wraps the stored
    declaration in a fresh closure holding `this` instead of copying it per
    instance.
    """

    __slots__ = ("declaration", "closure", "is_initializer")

    def __init__(
        self,
        declaration: nodes.FunctionDef,
        closure: Environment,
        is_initializer: bool = False,
    ):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def __repr__(self) -> str:
        kind = "init" if self.is_initializer else "func"
        return f"<LoxFunction {self.name} ({kind})>"

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def bind(self, instance: Any) -> "LoxFunction":
        environment = Environment.child_of(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        # Child of the closure, not of the caller: capture is lexical.
        environment = Environment.child_of(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        try:
            interpreter.execute_block(self.declaration.body, environment)
        except ReturnSignal as ret:
            if self.is_initializer:
                return self.closure.get_at(0, "this")
            return ret.value

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return None


class NativeFunction(LoxCallable):
    """A host-provided function exposed as a Lox global."""

    __slots__ = ("name", "_arity", "function")

    def __init__(self, name: str, arity: int, function: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.function = function

    def __repr__(self) -> str:
        return f"<NativeFunction {self.name}/{self._arity}>"

    def __str__(self) -> str:
        return f"<native fn {self.name}>"

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self.function(*arguments)
