"""intlang: a minimal integer scripting language and its tree-walking interpreter."""

from .document import Document
from .environment import Environment
from .evaluator import eval_node, evaluate
from .model import (
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
    While,
)
from .errors import (
    ArityError,
    CallDepthExceeded,
    EvaluationError,
    FunctionRedefinition,
    IntLangError,
    NestingTooDeep,
    NoValueError,
    ParseError,
    UnboundVariable,
    UndefinedFunction,
)
from .reader import parse
from .repl import IntRepl


def run(source: str, out=None) -> Document:
    """Parse and evaluate *source* in a fresh Environment."""
    return evaluate(parse(source), out=out)


__all__ = [
    "run",
    "parse",
    "evaluate",
    "eval_node",
    "Document",
    "Environment",
    "Empty",
    "FunctionDef",
    "Module",
    "Node",
    "Number",
    "Ident",
    "Define",
    "Add",
    "Sub",
    "Equal",
    "NotEqual",
    "Less",
    "More",
    "Print",
    "If",
    "While",
    "For",
    "DefineFn",
    "Call",
    "IntLangError",
    "ParseError",
    "EvaluationError",
    "UnboundVariable",
    "UndefinedFunction",
    "FunctionRedefinition",
    "ArityError",
    "NoValueError",
    "CallDepthExceeded",
    "NestingTooDeep",
    "IntRepl",
]
