from __future__ import annotations

import logging
from typing import List

from . import nodes
from .errors import LoxSyntaxError
from .parser import Parser
from .scanner import Scanner
from .tokens import Token

logger = logging.getLogger(__name__)


class ModuleCode:
    """
    Holds one unit of source text:
      - its tokens
      - the parsed statement list
      - every scan/parse error, in source order
    """

    def __init__(self, source: str, filename: str = "<lox>"):
        self.source = source
        self.filename = filename

        scanner = Scanner(source)
        self.tokens: List[Token] = scanner.scan_tokens()
        parser = Parser(self.tokens)
        self.statements: List[nodes.Stmt] = parser.parse()

        self.errors: List[LoxSyntaxError] = sorted(
            scanner.errors + parser.errors, key=lambda error: error.line
        )
        logger.debug(
            "%s: %d tokens, %d statements, %d syntax errors",
            filename,
            len(self.tokens),
            len(self.statements),
            len(self.errors),
        )

    @property
    def ok(self) -> bool:
        return not self.errors
