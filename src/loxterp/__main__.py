import argparse
import logging
import sys
import threading
from pathlib import Path

from .main import Interpreter

EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70

# Deep Lox recursion needs more native stack than the main thread gets.
WORKER_STACK_SIZE = 256 * 1024 * 1024


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m loxterp",
        usage="python -m loxterp [script.lox] [--verbose]",
    )
    parser.add_argument("script", nargs="?")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    return parser


def _report(result) -> None:
    for error in result.errors:
        print(error, file=sys.stderr)
    if result.exception is not None:
        print(result.exception, file=sys.stderr)


def _run_prompt(interpreter: Interpreter) -> int:
    while True:
        print("> ", end="", flush=True)
        line = sys.stdin.readline()
        if not line or not line.strip():
            return 0
        # Globals persist across lines; an error only ends the current line.
        _report(interpreter.run(line, filename="<stdin>"))


def _run_script(interpreter: Interpreter, script_path: Path) -> int:
    result = interpreter.run(script_path.read_text(), filename=str(script_path))
    _report(result)
    if result.errors:
        return EXIT_STATIC_ERROR
    if result.exception is not None:
        return EXIT_RUNTIME_ERROR
    return 0


def _call_with_large_stack(function, *args) -> int:
    """Run `function(*args)` on a worker thread with `WORKER_STACK_SIZE` of stack."""
    outcome = {}

    def target() -> None:
        try:
            outcome["value"] = function(*args)
        except BaseException as exc:
            outcome["error"] = exc

    previous = threading.stack_size(WORKER_STACK_SIZE)
    try:
        worker = threading.Thread(target=target, name="loxterp-main", daemon=True)
        worker.start()
    finally:
        threading.stack_size(previous)
    worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args_list = sys.argv[1:] if argv is None else argv
    try:
        args = parser.parse_args(args_list)
    except SystemExit as exc:
        return int(exc.code)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    interpreter = Interpreter()
    if args.script is None:
        return _call_with_large_stack(_run_prompt, interpreter)

    script_path = Path(args.script).resolve()
    if not script_path.is_file():
        print(f"loxterp: script not found: {script_path}", file=sys.stderr)
        return 2

    return _call_with_large_stack(_run_script, interpreter, script_path)


if __name__ == "__main__":
    raise SystemExit(main())
