from __future__ import annotations

from typing import Any


class ControlFlowSignal(BaseException):
    """Internal non-user exceptions used for control flow (return/break)."""


class ReturnSignal(ControlFlowSignal):
    def __init__(self, value: Any):
        self.value = value


class BreakSignal(ControlFlowSignal):
    pass
