from __future__ import annotations

from typing import Optional

from .tokens import Token, TokenType


class LoxError(Exception):
    """Base class for every user-facing error the interpreter reports."""

    label = "Error"

    def __init__(self, token: Optional[Token], message: str, line: Optional[int] = None):
        self.token = token
        self.message = message
        if line is None:
            line = token.line if token is not None else 0
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.token is None:
            return f"[line {self.line}] {self.label}: {self.message}"
        if self.token.type is TokenType.EOF:
            return f"[line {self.line}] {self.label} at end: {self.message}"
        return f"[line {self.line}] {self.label} at '{self.token.lexeme}': {self.message}"


class LoxSyntaxError(LoxError):
    """Raised by the scanner and parser."""


class StaticResolutionError(LoxError):
    """Recorded by the resolver; the program never runs when one exists."""


class LoxRuntimeError(LoxError):
    """Raised while evaluating; aborts the current top-level statement."""


class InternalSystemError(LoxError):
    """Host failure unrelated to program semantics (clock, recursion limit)."""

    label = "System error"
