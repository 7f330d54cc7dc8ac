"""Constructor helpers for building modules in Python code.

Each helper mirrors one surface form.  Plain ``int`` arguments become
:class:`Number` nodes and plain ``str`` arguments become :class:`Ident`
nodes, so ::

    module(
        define("a", 5),
        define("b", add("a", 10)),
        print_("a", "b"),
    )

builds the same tree as ``parse("define(a 5) define(b add(a 10)) print(a b)")``.
"""

from __future__ import annotations

from typing import Iterable, Union

from .model import (
    Add,
    Call,
    Define,
    DefineFn,
    Equal,
    For,
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
    While,
)

Operand = Union[Node, int, str]


def as_node(value: Operand) -> Node:
    """Coerce an int / str / Node to a Node."""
    # bool is an int subclass; True/False are not literals
    if isinstance(value, bool):
        raise TypeError(f"cannot build a node from {value!r}")
    if isinstance(value, int):
        return Number(value)
    if isinstance(value, str):
        return Ident(value)
    return value


def _nodes(values: Iterable[Operand]) -> tuple[Node, ...]:
    return tuple(as_node(v) for v in values)


def num(value: int) -> Number:
    return Number(value)


def ident(name: str) -> Ident:
    return Ident(name)


def define(name: str, value: Operand) -> Define:
    return Define(name, as_node(value))


def add(left: Operand, right: Operand) -> Add:
    return Add(as_node(left), as_node(right))


def sub(left: Operand, right: Operand) -> Sub:
    return Sub(as_node(left), as_node(right))


def equal(left: Operand, right: Operand) -> Equal:
    return Equal(as_node(left), as_node(right))


def notequal(left: Operand, right: Operand) -> NotEqual:
    return NotEqual(as_node(left), as_node(right))


def less(left: Operand, right: Operand) -> Less:
    return Less(as_node(left), as_node(right))


def more(left: Operand, right: Operand) -> More:
    return More(as_node(left), as_node(right))


def print_(*args: Operand) -> Print:
    return Print(_nodes(args))


def if_(cond: Operand, *body: Operand) -> If:
    return If(as_node(cond), _nodes(body))


def while_(cond: Operand, *body: Operand) -> While:
    return While(as_node(cond), _nodes(body))


def for_(bound: Operand, *body: Operand, start: Operand = 0, step: Operand = 1) -> For:
    """Counting loop over ``_i`` from *start* up to (excluding) *bound*."""
    return For(as_node(start), as_node(bound), as_node(step), _nodes(body))


def defn(name: str, params: Iterable[str], *body: Operand) -> DefineFn:
    return DefineFn(name, tuple(params), _nodes(body))


def call(name: str, *args: Operand) -> Call:
    return Call(name, _nodes(args))


def module(*nodes: Operand) -> Module:
    return list(_nodes(nodes))
