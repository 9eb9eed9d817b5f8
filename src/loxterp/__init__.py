from .core import RunResult
from .errors import (
    InternalSystemError,
    LoxError,
    LoxRuntimeError,
    LoxSyntaxError,
    StaticResolutionError,
)
from .main import Interpreter
from .resolver import Resolver

__all__ = [
    "Interpreter",
    "InternalSystemError",
    "LoxError",
    "LoxRuntimeError",
    "LoxSyntaxError",
    "Resolver",
    "RunResult",
    "StaticResolutionError",
]
