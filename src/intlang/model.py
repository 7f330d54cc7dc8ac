"""Data model for intlang: AST nodes, function definitions and integers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

LOOP_VAR = "_i"


def wrap_i32(n: int) -> int:
    """Fold *n* into the signed 32-bit range with two's-complement wraparound."""
    return ((n - INT32_MIN) % 2 ** 32) + INT32_MIN


# ---------------------------------------------------------------------------
# Empty: singleton for "no value"
# ---------------------------------------------------------------------------

class _EmptyType:
    """Sentinel produced by statements that have no integer result."""

    _instance: _EmptyType | None = None

    def __new__(cls) -> _EmptyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


Empty = _EmptyType()


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Number:
    value: int

    def __post_init__(self) -> None:
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"integer literal {self.value} is out of 32-bit range")


@dataclass(frozen=True, slots=True)
class Ident:
    name: str


# ---------------------------------------------------------------------------
# Binding and binary operators
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Define:
    name: str
    value: Node


@dataclass(frozen=True, slots=True)
class Add:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Sub:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Equal:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class NotEqual:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Less:
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class More:
    left: Node
    right: Node


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Print:
    args: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class If:
    cond: Node
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class While:
    cond: Node
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class For:
    init: Node
    bound: Node
    step: Node
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class DefineFn:
    name: str
    params: tuple[str, ...] = ()
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Call:
    name: str
    args: tuple[Node, ...] = ()


Node = Union[
    Number, Ident, Define,
    Add, Sub, Equal, NotEqual, Less, More,
    Print, If, While, For, DefineFn, Call,
]

Module = list[Node]

Value = Union[int, _EmptyType]

BINARY_NODES = (Add, Sub, Equal, NotEqual, Less, More)


# ---------------------------------------------------------------------------
# FunctionDef
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class FunctionDef:
    params: tuple[str, ...]
    body: tuple[Node, ...]

    @property
    def arity(self) -> int:
        return len(self.params)
