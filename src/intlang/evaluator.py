"""Evaluator: recursive tree walk of a Module, producing a Document."""

from __future__ import annotations

import logging
import sys
from typing import IO

from .document import Document
from .environment import Environment
from .errors import ArityError, NestingTooDeep, NoValueError
from .model import (
    LOOP_VAR,
    Add,
    Call,
    Define,
    DefineFn,
    Empty,
    Equal,
    For,
    FunctionDef,
    Ident,
    If,
    Less,
    Module,
    More,
    Node,
    NotEqual,
    Number,
    Print,
    Sub,
    Value,
    While,
    wrap_i32,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def evaluate(
    module: Module,
    env: Environment | None = None,
    out: IO[str] | None = None,
) -> Document:
    """Evaluate every node of *module* in order and return a Document.

    Printed lines go to *out* (``sys.stdout`` by default) and are also
    recorded on ``Document.output``.
    """
    doc = Document(environment=env if env is not None else Environment())
    doc.merge(module, out)
    return doc


def eval_node(node: Node, doc: Document, out: IO[str] | None = None) -> Value:
    """Evaluate a single node against *doc*; returns an int or ``Empty``."""
    try:
        return _eval(node, doc.environment, doc, out if out is not None else sys.stdout)
    except RecursionError:
        raise NestingTooDeep() from None


def _evaluate_into(module: Module, doc: Document, out: IO[str] | None) -> Value | None:
    if out is None:
        out = sys.stdout
    env = doc.environment
    value = None
    logger.debug("Evaluating module of %d node(s)", len(module))
    try:
        for node in module:
            value = _eval(node, env, doc, out)
    except RecursionError:
        env.frames.clear()
        raise NestingTooDeep() from None
    return value


# ---------------------------------------------------------------------------
# Node dispatch
# ---------------------------------------------------------------------------

def _eval(node: Node, env: Environment, doc: Document, out: IO[str]) -> Value:
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Ident):
        return env.get_var(node.name)
    if isinstance(node, Define):
        env.set_var(node.name, _int(node.value, env, doc, out, "define"))
        return Empty
    if isinstance(node, Add):
        left = _int(node.left, env, doc, out, "add")
        return wrap_i32(left + _int(node.right, env, doc, out, "add"))
    if isinstance(node, Sub):
        left = _int(node.left, env, doc, out, "sub")
        return wrap_i32(left - _int(node.right, env, doc, out, "sub"))
    if isinstance(node, Equal):
        left = _int(node.left, env, doc, out, "equal")
        return int(left == _int(node.right, env, doc, out, "equal"))
    if isinstance(node, NotEqual):
        left = _int(node.left, env, doc, out, "notequal")
        return int(left != _int(node.right, env, doc, out, "notequal"))
    if isinstance(node, Less):
        left = _int(node.left, env, doc, out, "less")
        return int(left < _int(node.right, env, doc, out, "less"))
    if isinstance(node, More):
        left = _int(node.left, env, doc, out, "more")
        return int(left > _int(node.right, env, doc, out, "more"))
    if isinstance(node, Print):
        _eval_print(node, env, doc, out)
        return Empty
    if isinstance(node, If):
        if _int(node.cond, env, doc, out, "if"):
            _eval_body(node.body, env, doc, out)
        return Empty
    if isinstance(node, While):
        while _int(node.cond, env, doc, out, "while"):
            _eval_body(node.body, env, doc, out)
        return Empty
    if isinstance(node, For):
        _eval_for(node, env, doc, out)
        return Empty
    if isinstance(node, DefineFn):
        env.define_function(node.name, FunctionDef(node.params, node.body))
        return Empty
    if isinstance(node, Call):
        return _eval_call(node, env, doc, out)
    raise TypeError(f"not an intlang node: {node!r}")


def _int(node: Node, env: Environment, doc: Document, out: IO[str], context: str) -> int:
    """Evaluate *node* and require an integer result."""
    value = _eval(node, env, doc, out)
    if value is Empty:
        raise NoValueError(
            f"{type(node).__name__} produces no value but '{context}' needs one"
        )
    return value


def _eval_body(body: tuple[Node, ...], env: Environment, doc: Document, out: IO[str]) -> Value:
    value = Empty
    for child in body:
        value = _eval(child, env, doc, out)
    return value


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def _eval_print(node: Print, env: Environment, doc: Document, out: IO[str]) -> None:
    line = "".join(f"{_int(arg, env, doc, out, 'print')} " for arg in node.args)
    out.write(line + "\n")
    doc.output.append(line)


def _eval_for(node: For, env: Environment, doc: Document, out: IO[str]) -> None:
    counter = _int(node.init, env, doc, out, "for")
    bound = _int(node.bound, env, doc, out, "for")
    step = _int(node.step, env, doc, out, "for")
    # an enclosing loop's counter comes back once this loop ends
    scope = env.scope
    had_outer = LOOP_VAR in scope
    outer = scope.get(LOOP_VAR)
    try:
        while counter < bound:
            env.set_var(LOOP_VAR, counter)
            _eval_body(node.body, env, doc, out)
            counter = wrap_i32(counter + step)
    finally:
        if had_outer:
            scope[LOOP_VAR] = outer
        else:
            scope.pop(LOOP_VAR, None)


def _eval_call(node: Call, env: Environment, doc: Document, out: IO[str]) -> Value:
    fn = env.resolve_function(node.name)
    if len(node.args) != fn.arity:
        raise ArityError(node.name, fn.arity, len(node.args))
    args = [_int(arg, env, doc, out, node.name) for arg in node.args]
    logger.debug("Calling %s%s at depth %d", node.name, tuple(args), env.depth + 1)
    env.push_frame(dict(zip(fn.params, args)))
    try:
        return _eval_body(fn.body, env, doc, out)
    finally:
        env.pop_frame()
