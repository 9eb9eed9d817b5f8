from __future__ import annotations

from typing import Dict, Optional

from . import nodes
from .classes import LoxClass
from .common import BreakSignal, ReturnSignal
from .errors import LoxRuntimeError
from .functions import LoxFunction
from .scopes import Environment
from .values import is_truthy, stringify


class StatementMixin:
    def exec_ExprStmt(self, node: nodes.ExprStmt) -> None:
        self.eval_expr(node.expression)

    def exec_Print(self, node: nodes.Print) -> None:
        value = self.eval_expr(node.expression)
        self.output(stringify(value))

    def exec_Var(self, node: nodes.Var) -> None:
        value = None
        if node.initializer is not None:
            value = self.eval_expr(node.initializer)
        self.environment.define(node.name.lexeme, value)

    def exec_Block(self, node: nodes.Block) -> None:
        self.execute_block(node.statements, Environment.child_of(self.environment))

    def exec_If(self, node: nodes.If) -> None:
        if is_truthy(self.eval_expr(node.condition)):
            self.exec_stmt(node.then_branch)
        elif node.else_branch is not None:
            self.exec_stmt(node.else_branch)

    def exec_While(self, node: nodes.While) -> None:
        while is_truthy(self.eval_expr(node.condition)):
            try:
                self.exec_stmt(node.body)
            except BreakSignal:
                break

    def exec_Break(self, node: nodes.Break) -> None:
        raise BreakSignal()

    def exec_Return(self, node: nodes.Return) -> None:
        value = self.eval_expr(node.value) if node.value is not None else None
        raise ReturnSignal(value)

    def exec_FunctionDef(self, node: nodes.FunctionDef) -> None:
        function = LoxFunction(node, self.environment, is_initializer=False)
        self.environment.define(node.name.lexeme, function)

    def exec_ClassDef(self, node: nodes.ClassDef) -> None:
        superclass: Optional[LoxClass] = None
        if node.superclass is not None:
            value = self.eval_expr(node.superclass)
            if not isinstance(value, LoxClass):
                raise LoxRuntimeError(node.superclass.name, "Superclass must be a class.")
            superclass = value

        self.environment.define(node.name.lexeme, None)

        method_scope = self.environment
        if superclass is not None:
            # One `super` scope per declaration, shared by all its methods.
            method_scope = Environment.child_of(self.environment)
            method_scope.define("super", superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in node.methods:
            methods[method.name.lexeme] = LoxFunction(
                method, method_scope, is_initializer=method.name.lexeme == "init"
            )

        klass = LoxClass(node.name.lexeme, superclass, methods)
        self.environment.assign(node.name, klass)
