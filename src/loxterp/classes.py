from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .errors import LoxRuntimeError
from .functions import LoxCallable, LoxFunction
from .tokens import Token
from .values import stringify

if TYPE_CHECKING:
    from .main import Interpreter


class LoxClass(LoxCallable):
    __slots__ = ("name", "superclass", "methods")

    def __init__(
        self,
        name: str,
        superclass: Optional["LoxClass"],
        methods: Dict[str, LoxFunction],
    ):
        self.name = name
        self.superclass = superclass
        self.methods = dict(methods)

    def __repr__(self) -> str:
        base = f" < {self.superclass.name}" if self.superclass is not None else ""
        return f"<LoxClass {self.name}{base}>"

    def __str__(self) -> str:
        return f"<class {self.name}>"

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass: Optional[LoxClass] = self
        while klass is not None:
            method = klass.methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance


class LoxInstance:
    __slots__ = ("klass", "fields")

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<LoxInstance of {self.klass.name}>"

    def __str__(self) -> str:
        parts = []
        for name, value in self.fields.items():
            if isinstance(value, LoxInstance):
                # Nested instances are shown by class only; fields may form cycles.
                text = f"{value.klass.name} instance"
            else:
                text = stringify(value)
            parts.append(f"{name}={text}")
        return f"{self.klass.name} instance {{{', '.join(parts)}}}"

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value
