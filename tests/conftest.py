from __future__ import annotations

import sys
from pathlib import Path

# Allow importing the package when running plain `pytest` without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

import pytest

from loxterp import Interpreter


@pytest.fixture
def run_lox():
    """Run a source string and return the printed lines; raise on any error."""

    def _run(source: str, *, filename: str = "<test>"):
        lines: list[str] = []
        interpreter = Interpreter(output=lines.append)
        result = interpreter.run(source, filename=filename)
        result.raise_for_exception()
        return lines

    return _run


@pytest.fixture
def run_lox_result():
    """Run a source string and return (result, printed lines) without raising."""

    def _run(source: str, *, filename: str = "<test>"):
        lines: list[str] = []
        interpreter = Interpreter(output=lines.append)
        result = interpreter.run(source, filename=filename)
        return result, lines

    return _run
