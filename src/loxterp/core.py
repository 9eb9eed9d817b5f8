from __future__ import annotations

import contextlib
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from . import nodes
from .code import ModuleCode
from .common import ControlFlowSignal
from .errors import InternalSystemError, LoxError, LoxRuntimeError
from .lib import make_default_globals
from .resolver import Resolver
from .scopes import Environment

logger = logging.getLogger(__name__)

# A Lox call costs about ten host frames, so this allows several thousand
# nested Lox calls.
DEFAULT_RECURSION_LIMIT = 100_000


@contextlib.contextmanager
def raised_recursion_limit(limit: int) -> Iterator[None]:
    """Raise the host recursion limit to at least `limit` for the duration."""
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


@dataclass
class RunResult:
    """Outcome of `InterpreterCore.run`."""

    errors: List[LoxError] = field(default_factory=list)
    exception: Optional[LoxError] = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.exception is None

    @property
    def had_static_error(self) -> bool:
        return bool(self.errors)

    def raise_for_exception(self) -> None:
        if self.errors:
            raise self.errors[0]
        if self.exception is not None:
            raise self.exception


class InterpreterCore:
    def __init__(
        self,
        output: Optional[Callable[[str], Any]] = None,
        natives: Optional[Mapping[str, Any]] = None,
        recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    ):
        """
        output:
          - None -> `print` each display line to stdout
          - callable -> called once per executed `print` with the line text
        natives:
          - None -> the default native globals (`clock`)
          - mapping -> exactly these globals, e.g. {} for a bare environment
        recursion_limit:
          - host recursion limit in force while `run`/`interpret` execute;
            the previous limit is restored afterwards
        """
        self.recursion_limit = recursion_limit
        self.output: Callable[[str], Any] = print if output is None else output
        self.globals = Environment()
        self.environment = self.globals
        # node identity -> scope distance, filled by the resolver
        self.locals: Dict[nodes.Expr, int] = {}
        self.runtime_error: Optional[LoxError] = None

        for name, value in (make_default_globals() if natives is None else natives).items():
            self.globals.define(name, value)

    # ----- resolver callback -----

    def resolve(self, expr: nodes.Expr, depth: int) -> None:
        self.locals[expr] = depth

    # ----- run -----

    def run(self, source: str, filename: str = "<lox>") -> RunResult:
        """
        Scan, parse, resolve and execute `source` against this interpreter's
        globals. Nothing executes unless every static stage succeeded.
        """
        with raised_recursion_limit(self.recursion_limit):
            try:
                code = ModuleCode(source, filename)
                if not code.ok:
                    return RunResult(errors=list(code.errors))

                resolver = Resolver(self)
                errors = resolver.resolve(code.statements)
            except InternalSystemError as error:
                self._record_error(error)
                return RunResult(exception=error)
            except RecursionError:
                self._record_error(InternalSystemError(None, "Stack overflow."))
                return RunResult(exception=self.runtime_error)
            if errors:
                return RunResult(errors=list(errors))

            if self.interpret(code.statements):
                return RunResult()
            return RunResult(exception=self.runtime_error)

    def interpret(self, statements: Iterable[nodes.Stmt]) -> bool:
        self.runtime_error = None
        try:
            with raised_recursion_limit(self.recursion_limit):
                for stmt in statements:
                    self.exec_stmt(stmt)
        except (LoxRuntimeError, InternalSystemError) as error:
            self._record_error(error)
            return False
        except RecursionError:
            # Overflow outside any call, e.g. a deeply nested expression.
            self.environment = self.globals
            self._record_error(InternalSystemError(None, "Stack overflow."))
            return False
        except ControlFlowSignal as signal:
            raise RuntimeError(
                f"{type(signal).__name__} escaped to top level; resolver should have rejected it"
            ) from None
        return True

    def _record_error(self, error: LoxError) -> None:
        logger.debug("execution stopped: %s", error)
        self.runtime_error = error

    # ----- dispatch -----

    def execute_block(self, statements: Iterable[nodes.Stmt], environment: Environment) -> None:
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                self.exec_stmt(stmt)
        finally:
            self.environment = previous

    def exec_stmt(self, node: nodes.Stmt) -> None:
        m = getattr(self, f"exec_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Statement not supported: {node.__class__.__name__}")
        m(node)

    def eval_expr(self, node: nodes.Expr) -> Any:
        m = getattr(self, f"eval_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Expression not supported: {node.__class__.__name__}")
        return m(node)
