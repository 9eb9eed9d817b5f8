from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Dict, Iterable, List

from . import nodes
from .errors import StaticResolutionError
from .tokens import Token

if TYPE_CHECKING:
    from typing import Protocol

    class LocalsSink(Protocol):
        def resolve(self, expr: nodes.Expr, depth: int) -> None: ...


logger = logging.getLogger(__name__)


class FunctionType(enum.Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassType(enum.Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


class Resolver:
    """
    Static pass computing, for every variable reference, how many scopes lie
    between the use and the declaration.

    Scope nesting here must match the interpreter exactly: one scope per
    block, one per function call, plus the `super` and `this` scopes a class
    declaration introduces. Globals are never tracked; a reference that is
    not found in any scope is left unrecorded and looked up by name at run
    time.

    Errors do not stop the pass; they are collected in `errors`.
    """

    def __init__(self, interpreter: "LocalsSink"):
        self.interpreter = interpreter
        self.errors: List[StaticResolutionError] = []
        # name -> ready (False while the declaration's initializer is resolved)
        self._scopes: List[Dict[str, bool]] = []
        self._current_function = FunctionType.NONE
        self._current_class = ClassType.NONE
        self._loop_depth = 0

    @property
    def success(self) -> bool:
        return not self.errors

    def resolve(self, statements: Iterable[nodes.Stmt]) -> List[StaticResolutionError]:
        statements = list(statements)
        for stmt in statements:
            self.resolve_stmt(stmt)
        logger.debug(
            "resolved %d top-level statements, %d static errors",
            len(statements),
            len(self.errors),
        )
        return self.errors

    # ----- dispatch -----

    def resolve_stmt(self, node: nodes.Stmt) -> None:
        m = getattr(self, f"visit_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Statement not supported: {node.__class__.__name__}")
        m(node)

    def resolve_expr(self, node: nodes.Expr) -> None:
        m = getattr(self, f"visit_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Expression not supported: {node.__class__.__name__}")
        m(node)

    def _resolve_block(self, statements: Iterable[nodes.Stmt]) -> None:
        for stmt in statements:
            self.resolve_stmt(stmt)

    # ----- scopes -----

    def _begin_scope(self) -> None:
        self._scopes.append({})

    def _end_scope(self) -> None:
        self._scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self._scopes:
            return
        scope = self._scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self._scopes:
            return
        self._scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: nodes.Expr, name: str) -> None:
        for depth, scope in enumerate(reversed(self._scopes)):
            if name in scope:
                self.interpreter.resolve(expr, depth)
                return
        # Not found: global, resolved by name at run time.

    def _resolve_function(self, function: nodes.FunctionDef, kind: FunctionType) -> None:
        enclosing_function = self._current_function
        enclosing_loop_depth = self._loop_depth
        self._current_function = kind
        self._loop_depth = 0

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_block(function.body)
        self._end_scope()

        self._current_function = enclosing_function
        self._loop_depth = enclosing_loop_depth

    def _error(self, token: Token, message: str) -> None:
        self.errors.append(StaticResolutionError(token, message))

    # ----- statements -----

    def visit_Block(self, node: nodes.Block) -> None:
        self._begin_scope()
        self._resolve_block(node.statements)
        self._end_scope()

    def visit_ClassDef(self, node: nodes.ClassDef) -> None:
        enclosing_class = self._current_class
        self._current_class = ClassType.CLASS

        self._declare(node.name)
        self._define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self._error(node.superclass.name, "A class can't inherit from itself.")
            self._current_class = ClassType.SUBCLASS
            self.resolve_expr(node.superclass)
            self._begin_scope()
            self._scopes[-1]["super"] = True

        self._begin_scope()
        self._scopes[-1]["this"] = True

        for method in node.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self._resolve_function(method, kind)

        self._end_scope()
        if node.superclass is not None:
            self._end_scope()

        self._current_class = enclosing_class

    def visit_ExprStmt(self, node: nodes.ExprStmt) -> None:
        self.resolve_expr(node.expression)

    def visit_FunctionDef(self, node: nodes.FunctionDef) -> None:
        # Bound before the body so the function can call itself.
        self._declare(node.name)
        self._define(node.name)
        self._resolve_function(node, FunctionType.FUNCTION)

    def visit_If(self, node: nodes.If) -> None:
        self.resolve_expr(node.condition)
        self.resolve_stmt(node.then_branch)
        if node.else_branch is not None:
            self.resolve_stmt(node.else_branch)

    def visit_Print(self, node: nodes.Print) -> None:
        self.resolve_expr(node.expression)

    def visit_Return(self, node: nodes.Return) -> None:
        if self._current_function is FunctionType.NONE:
            self._error(node.keyword, "Can't return from top-level code.")
        if node.value is not None:
            self.resolve_expr(node.value)

    def visit_Break(self, node: nodes.Break) -> None:
        if self._loop_depth == 0:
            self._error(node.keyword, "Can't break outside of a loop.")

    def visit_Var(self, node: nodes.Var) -> None:
        self._declare(node.name)
        if node.initializer is not None:
            self.resolve_expr(node.initializer)
        self._define(node.name)

    def visit_While(self, node: nodes.While) -> None:
        self.resolve_expr(node.condition)
        self._loop_depth += 1
        try:
            self.resolve_stmt(node.body)
        finally:
            self._loop_depth -= 1

    # ----- expressions -----

    def visit_Assign(self, node: nodes.Assign) -> None:
        self.resolve_expr(node.value)
        self._resolve_local(node, node.name.lexeme)

    def visit_Binary(self, node: nodes.Binary) -> None:
        self.resolve_expr(node.left)
        self.resolve_expr(node.right)

    def visit_Call(self, node: nodes.Call) -> None:
        self.resolve_expr(node.callee)
        for argument in node.arguments:
            self.resolve_expr(argument)

    def visit_Get(self, node: nodes.Get) -> None:
        self.resolve_expr(node.object)

    def visit_Grouping(self, node: nodes.Grouping) -> None:
        self.resolve_expr(node.expression)

    def visit_Literal(self, node: nodes.Literal) -> None:
        return

    def visit_Logical(self, node: nodes.Logical) -> None:
        self.resolve_expr(node.left)
        self.resolve_expr(node.right)

    def visit_Set(self, node: nodes.Set) -> None:
        self.resolve_expr(node.value)
        self.resolve_expr(node.object)

    def visit_Super(self, node: nodes.Super) -> None:
        if self._current_class is ClassType.NONE:
            self._error(node.keyword, "Can't use 'super' outside of a class.")
            return
        if self._current_class is not ClassType.SUBCLASS:
            self._error(node.keyword, "Can't use 'super' in a class with no superclass.")
            return
        self._resolve_local(node, "super")

    def visit_This(self, node: nodes.This) -> None:
        if self._current_class is ClassType.NONE:
            self._error(node.keyword, "Can't use 'this' outside of a class.")
            return
        self._resolve_local(node, "this")

    def visit_Unary(self, node: nodes.Unary) -> None:
        self.resolve_expr(node.right)

    def visit_Variable(self, node: nodes.Variable) -> None:
        if self._scopes and self._scopes[-1].get(node.name.lexeme) is False:
            self._error(node.name, "Can't read local variable in its own initializer.")
        self._resolve_local(node, node.name.lexeme)
