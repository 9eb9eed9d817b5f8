from __future__ import annotations

from typing import List, Optional

from . import nodes
from .errors import InternalSystemError, LoxSyntaxError
from .tokens import Token, TokenType

MAX_ARGUMENTS = 255

_STATEMENT_STARTS = frozenset(
    {
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
        TokenType.BREAK,
    }
)


class _ParseAbort(Exception):
    """Unwinds the current declaration after a syntax error has been recorded."""


class Parser:
    """
    Recursive-descent parser producing `nodes` statements.

    Errors are collected in `errors`; after one, the parser skips to the next
    statement boundary and keeps going.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.errors: List[LoxSyntaxError] = []
        self._current = 0

    def parse(self) -> List[nodes.Stmt]:
        statements: List[nodes.Stmt] = []
        try:
            while not self._at_end():
                stmt = self._declaration()
                if stmt is not None:
                    statements.append(stmt)
        except RecursionError:
            raise InternalSystemError(self._peek(), "Stack overflow.") from None
        return statements

    # ----- declarations -----

    def _declaration(self) -> Optional[nodes.Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.FUN):
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except _ParseAbort:
            self._synchronize()
            return None

    def _class_declaration(self) -> nodes.ClassDef:
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = nodes.Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._at_end():
            methods.append(self._function("method"))
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return nodes.ClassDef(name, superclass, tuple(methods))

    def _function(self, kind: str) -> nodes.FunctionDef:
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self._report(self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self._block()
        return nodes.FunctionDef(name, tuple(params), tuple(body))

    def _var_declaration(self) -> nodes.Var:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    # ----- statements -----

    def _statement(self) -> nodes.Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            value = self._expression()
            self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
            return nodes.Print(value)
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.BREAK):
            keyword = self._previous()
            self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
            return nodes.Break(keyword)
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self._block()))
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.ExprStmt(expr)

    def _for_statement(self) -> nodes.Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[nodes.Stmt]
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            expr = self._expression()
            self._consume(TokenType.SEMICOLON, "Expect ';' after loop initializer.")
            initializer = nodes.ExprStmt(expr)

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        # for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        if increment is not None:
            body = nodes.Block((body, nodes.ExprStmt(increment)))
        if condition is None:
            condition = nodes.Literal(True)
        loop: nodes.Stmt = nodes.While(condition, body)
        if initializer is not None:
            loop = nodes.Block((initializer, loop))
        return loop

    def _if_statement(self) -> nodes.If:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenType.ELSE) else None
        return nodes.If(condition, then_branch, else_branch)

    def _return_statement(self) -> nodes.Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def _while_statement(self) -> nodes.While:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self._statement())

    def _block(self) -> List[nodes.Stmt]:
        statements: List[nodes.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # ----- expressions -----

    def _expression(self) -> nodes.Expr:
        return self._assignment()

    def _assignment(self) -> nodes.Expr:
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()
            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            if isinstance(expr, nodes.Get):
                return nodes.Set(expr.object, expr.name, value)
            self._report(equals, "Invalid assignment target.")

        return expr

    def _or(self) -> nodes.Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = nodes.Logical(expr, operator, self._and())
        return expr

    def _and(self) -> nodes.Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = nodes.Logical(expr, operator, self._equality())
        return expr

    def _binary_level(self, operand, *types: TokenType) -> nodes.Expr:
        expr = operand()
        while self._match(*types):
            operator = self._previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def _equality(self) -> nodes.Expr:
        return self._binary_level(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> nodes.Expr:
        return self._binary_level(
            self._term,
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        )

    def _term(self) -> nodes.Expr:
        return self._binary_level(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> nodes.Expr:
        return self._binary_level(self._unary, TokenType.SLASH, TokenType.STAR)

    def _unary(self) -> nodes.Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return nodes.Unary(operator, self._unary())
        return self._call()

    def _call(self) -> nodes.Expr:
        expr = self._primary()
        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                return expr

    def _finish_call(self, callee: nodes.Expr) -> nodes.Call:
        arguments: List[nodes.Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._report(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break
        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def _primary(self) -> nodes.Expr:
        if self._match(TokenType.FALSE):
            return nodes.Literal(False)
        if self._match(TokenType.TRUE):
            return nodes.Literal(True)
        if self._match(TokenType.NIL):
            return nodes.Literal(None)
        if self._match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self._previous().literal)
        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return nodes.Super(keyword, method)
        if self._match(TokenType.THIS):
            return nodes.This(self._previous())
        if self._match(TokenType.IDENTIFIER):
            return nodes.Variable(self._previous())
        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)
        raise self._abort(self._peek(), "Expect expression.")

    # ----- token stream -----

    def _match(self, *types: TokenType) -> bool:
        for type in types:
            if self._check(type):
                self._advance()
                return True
        return False

    def _consume(self, type: TokenType, message: str) -> Token:
        if self._check(type):
            return self._advance()
        raise self._abort(self._peek(), message)

    def _check(self, type: TokenType) -> bool:
        if self._at_end():
            return False
        return self._peek().type is type

    def _advance(self) -> Token:
        if not self._at_end():
            self._current += 1
        return self._previous()

    def _at_end(self) -> bool:
        return self._peek().type is TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self._current]

    def _previous(self) -> Token:
        return self.tokens[self._current - 1]

    def _report(self, token: Token, message: str) -> None:
        self.errors.append(LoxSyntaxError(token, message))

    def _abort(self, token: Token, message: str) -> _ParseAbort:
        self._report(token, message)
        return _ParseAbort(message)

    def _synchronize(self) -> None:
        self._advance()
        while not self._at_end():
            if self._previous().type is TokenType.SEMICOLON:
                return
            if self._peek().type in _STATEMENT_STARTS:
                return
            self._advance()
