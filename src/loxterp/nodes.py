"""Syntax tree for Lox programs.

Nodes are immutable and compare by identity: the resolver records scope
distances per syntactic occurrence, so two structurally equal `Variable`
nodes must stay distinct dictionary keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .tokens import Token

_node = dataclass(frozen=True, eq=False)


class Expr:
    pass


class Stmt:
    pass


# ----- expressions -----


@_node
class Literal(Expr):
    value: Any


@_node
class Grouping(Expr):
    expression: Expr


@_node
class Unary(Expr):
    operator: Token
    right: Expr


@_node
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@_node
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@_node
class Variable(Expr):
    name: Token


@_node
class Assign(Expr):
    name: Token
    value: Expr


@_node
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]


@_node
class Get(Expr):
    object: Expr
    name: Token


@_node
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@_node
class This(Expr):
    keyword: Token


@_node
class Super(Expr):
    keyword: Token
    method: Token


# ----- statements -----


@_node
class ExprStmt(Stmt):
    expression: Expr


@_node
class Print(Stmt):
    expression: Expr


@_node
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@_node
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@_node
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@_node
class While(Stmt):
    condition: Expr
    body: Stmt


@_node
class FunctionDef(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@_node
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@_node
class Break(Stmt):
    keyword: Token


@_node
class ClassDef(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: Tuple[FunctionDef, ...]
