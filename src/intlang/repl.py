"""IntRepl: incremental REPL for interactive use.

Also provides the ``intlang`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO

from .config import Settings
from .document import Document
from .environment import Environment
from .errors import IntLangError
from .evaluator import evaluate
from .logging_config import setup_logging
from .model import Empty
from .reader import parse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# IntRepl class (programmatic use)
# ---------------------------------------------------------------------------

class IntRepl:
    """Stateful REPL that accumulates variables and functions across calls.

    Usage::

        repl = IntRepl()
        repl.eval("define(a 5)")
        repl.eval("defn(inc (x) add(x 1))")
        repl.eval("call(inc a)")    # 6

        repl.doc.variables   # all global variables
        repl.doc.functions   # all declared functions
        repl.reset()         # clear state
    """

    def __init__(self, max_call_depth: int | None = None) -> None:
        self.max_call_depth = max_call_depth
        self.doc = self._new_document()

    def _new_document(self) -> Document:
        env = Environment()
        if self.max_call_depth is not None:
            env.max_call_depth = self.max_call_depth
        return Document(environment=env)

    def eval(self, text: str, out: IO[str] | None = None) -> int | None:
        """Evaluate *text* and merge results into the accumulated Document.

        Returns the value of the last top-level node, or ``None`` if it was
        a statement (or the input was empty).
        """
        self.doc.merge(parse(text), out)
        value = self.doc.last_value
        return None if value is Empty else value

    def reset(self) -> None:
        """Clear all accumulated state (variables, functions, output)."""
        self.doc = self._new_document()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _show_vars(repl: IntRepl, dest: IO[str]) -> None:
    """Print all global variables."""
    entries = repl.doc.variables
    if not entries:
        print("  (no variables defined)", file=dest)
        return
    width = max(len(k) for k in entries)
    for name, value in entries.items():
        print(f"  {name:<{width}} = {value}", file=dest)


def _show_funcs(repl: IntRepl, dest: IO[str]) -> None:
    """Print all declared function signatures."""
    if not repl.doc.functions:
        print("  (no functions defined)", file=dest)
        return
    for name, fn in repl.doc.functions.items():
        print(f"  {name}({' '.join(fn.params)})", file=dest)


def _eval_expr(repl: IntRepl, expr: str, dest: IO[str]) -> None:
    """Evaluate *expr* and print its value to *dest*."""
    value = repl.eval(expr, dest)
    if value is not None:
        print(value, file=dest)


def _run_batch(repl: IntRepl, filepath: str, dest: IO[str]) -> None:
    """Evaluate a whole source file; constructs may span lines."""
    try:
        with open(filepath, encoding="utf-8") as fh:
            source = fh.read()
    except OSError as exc:
        print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
        return
    try:
        repl.eval(source, dest)
    except IntLangError as exc:
        print(f"error: {exc}", file=sys.stderr)


def _process_line(repl: IntRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    # ── Exit ──────────────────────────────────────────────────────────────
    if line in (":q", ":quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if line == ":vars":
        _show_vars(repl, dest)
        return True

    if line == ":funcs":
        _show_funcs(repl, dest)
        return True

    if line == ":reset":
        repl.reset()
        return True

    # ── Batch file ────────────────────────────────────────────────────────
    if line.startswith("?<< "):
        _run_batch(repl, line[4:].strip(), dest)
        return True

    try:
        # ── ? expression ──────────────────────────────────────────────────
        if line.startswith("? "):
            _eval_expr(repl, line[2:].strip(), dest)
            return True

        # ── Regular input ─────────────────────────────────────────────────
        repl.eval(line, dest)
    except IntLangError as exc:
        print(f"error: {exc}", file=sys.stderr)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intlang",
        description="Run an intlang program, or start an interactive shell.",
    )
    parser.add_argument("file", nargs="?", help="source file to run")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--log-file", help="write logs to this file instead of stderr")
    parser.add_argument(
        "--max-call-depth", type=_positive_int, help="maximum nested call depth"
    )
    parser.add_argument(
        "--dump-env",
        action="store_true",
        help="print the final global variables after running FILE",
    )
    return parser


def run_file(path: str, settings: Settings, dump_env: bool = False) -> int:
    """Run the program in *path*.  Returns a process exit status."""
    try:
        with open(path, encoding="utf-8") as fh:
            source = fh.read()
    except OSError as exc:
        print(f"error: cannot read '{path}': {exc}", file=sys.stderr)
        return 1

    env = Environment(max_call_depth=settings.max_call_depth)
    try:
        evaluate(parse(source), env)
    except IntLangError as exc:
        logger.debug("Evaluation of %s aborted", path, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if dump_env:
            for name, value in env.snapshot().items():
                print(f"{name} = {value}")
    return 0


def interactive(repl: IntRepl) -> None:
    dest: IO[str] = sys.stdout
    print("intlang REPL  (:q to quit  |  :vars  :funcs  :reset  |  ? <expr>  ?<< <file>)")

    while True:
        try:
            line = input("int> ").strip()
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if not _process_line(repl, line, dest):
            break


def main(argv: list[str] | None = None) -> int:
    """``intlang`` console script / ``python -m intlang``."""
    args = _build_arg_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if args.log_file:
        settings.log_file = args.log_file
    if args.max_call_depth is not None:
        settings.max_call_depth = args.max_call_depth
    setup_logging(settings.log_level, settings.log_file)

    if args.file:
        return run_file(args.file, settings, dump_env=args.dump_env)

    interactive(IntRepl(max_call_depth=settings.max_call_depth))
    return 0


if __name__ == "__main__":
    sys.exit(main())
