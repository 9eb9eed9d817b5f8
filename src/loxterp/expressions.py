from __future__ import annotations

from typing import Any

from . import nodes
from .classes import LoxInstance
from .errors import LoxRuntimeError
from .tokens import TokenType
from .values import is_truthy


class ExpressionMixin:
    def eval_Literal(self, node: nodes.Literal) -> Any:
        return node.value

    def eval_Grouping(self, node: nodes.Grouping) -> Any:
        return self.eval_expr(node.expression)

    def eval_Variable(self, node: nodes.Variable) -> Any:
        return self._look_up_variable(node.name, node)

    def eval_This(self, node: nodes.This) -> Any:
        return self._look_up_variable(node.keyword, node)

    def eval_Assign(self, node: nodes.Assign) -> Any:
        value = self.eval_expr(node.value)
        distance = self.locals.get(node)
        if distance is None:
            self.globals.assign(node.name, value)
        else:
            self.environment.assign_at(distance, node.name.lexeme, value)
        return value

    def eval_Unary(self, node: nodes.Unary) -> Any:
        right = self.eval_expr(node.right)
        return self._apply_unary(node.operator, right)

    def eval_Binary(self, node: nodes.Binary) -> Any:
        left = self.eval_expr(node.left)
        right = self.eval_expr(node.right)
        return self._apply_binary(node.operator, left, right)

    def eval_Logical(self, node: nodes.Logical) -> Any:
        left = self.eval_expr(node.left)
        if node.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.eval_expr(node.right)

    def eval_Call(self, node: nodes.Call) -> Any:
        callee = self.eval_expr(node.callee)
        arguments = [self.eval_expr(argument) for argument in node.arguments]
        return self._call_value(node.paren, callee, arguments)

    def eval_Get(self, node: nodes.Get) -> Any:
        obj = self.eval_expr(node.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(node.name, "Only instances have properties.")
        return obj.get(node.name)

    def eval_Set(self, node: nodes.Set) -> Any:
        obj = self.eval_expr(node.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(node.name, "Only instances have fields.")
        value = self.eval_expr(node.value)
        obj.set(node.name, value)
        return value

    def eval_Super(self, node: nodes.Super) -> Any:
        distance = self.locals.get(node)
        if distance is None:
            raise RuntimeError("'super' was not resolved to a class scope")
        superclass = self.environment.get_at(distance, "super")
        # The `this` scope is always opened directly inside the `super` scope.
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(node.method.lexeme)
        if method is None:
            raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")
        return method.bind(instance)
