from __future__ import annotations

import time
from typing import Any, Dict

from ..errors import InternalSystemError
from ..functions import NativeFunction


def _clock() -> float:
    now = time.time()
    if now < 0:
        raise InternalSystemError(None, f"Clock returned invalid duration: {now!r}.")
    return float(int(now * 1000))


def make_default_globals() -> Dict[str, Any]:
    """Native functions every interpreter starts with."""
    return {
        "clock": NativeFunction("clock", 0, _clock),
    }
