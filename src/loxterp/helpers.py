from __future__ import annotations

from typing import Any, List

from . import nodes
from .errors import InternalSystemError, LoxRuntimeError
from .functions import LoxCallable
from .tokens import Token, TokenType
from .values import is_equal, is_number, is_truthy, stringify

_COMPARISONS = {
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


class HelperMixin:
    def _look_up_variable(self, name: Token, node: nodes.Expr) -> Any:
        distance = self.locals.get(node)
        if distance is None:
            return self.globals.get(name)
        return self.environment.get_at(distance, name.lexeme)

    def _number_operands(self, operator: Token, left: Any, right: Any) -> None:
        if is_number(left) and is_number(right):
            return
        raise LoxRuntimeError(operator, "Operands must be numbers.")

    def _apply_binary(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type

        if op is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator, "Operands must be two numbers or at least one string.")

        if op is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op in _COMPARISONS:
            self._number_operands(operator, left, right)
            return _COMPARISONS[op](left, right)

        if op is TokenType.MINUS:
            self._number_operands(operator, left, right)
            return left - right
        if op is TokenType.STAR:
            self._number_operands(operator, left, right)
            return left * right
        if op is TokenType.SLASH:
            self._number_operands(operator, left, right)
            if right == 0:
                raise LoxRuntimeError(operator, "Division by zero.")
            return left / right

        raise LoxRuntimeError(operator, f"Unsupported binary operator '{operator.lexeme}'.")

    def _apply_unary(self, operator: Token, right: Any) -> Any:
        if operator.type is TokenType.MINUS:
            if not is_number(right):
                raise LoxRuntimeError(operator, "Operand must be a number.")
            return -right
        if operator.type is TokenType.BANG:
            return not is_truthy(right)
        raise LoxRuntimeError(operator, f"Unsupported unary operator '{operator.lexeme}'.")

    def _call_value(self, paren: Token, callee: Any, arguments: List[Any]) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, "Can only call functions and classes.")
        arity = callee.arity()
        if len(arguments) != arity:
            raise LoxRuntimeError(
                paren, f"Expected {arity} arguments but got {len(arguments)}."
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            # The innermost call with room to build the error reports it.
            raise InternalSystemError(paren, "Stack overflow.") from None
