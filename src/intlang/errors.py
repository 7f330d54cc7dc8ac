"""Exception hierarchy for intlang."""

from __future__ import annotations


class IntLangError(Exception):
    """Base class for every error raised by intlang."""


class ParseError(IntLangError):
    """Malformed or incomplete source text."""

    def __init__(self, message: str, position: int, line: int = 0, column: int = 0) -> None:
        self.position = position
        self.line = line
        self.column = column
        if line:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class EvaluationError(IntLangError):
    """Runtime failure while evaluating a module."""


class UnboundVariable(EvaluationError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unbound variable '{name}'")


class UndefinedFunction(EvaluationError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"undefined function '{name}'")


class FunctionRedefinition(EvaluationError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"function '{name}' is already defined")


class ArityError(EvaluationError):
    def __init__(self, name: str, expected: int, got: int) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"function '{name}' takes {expected} argument(s), got {got}"
        )


class NoValueError(EvaluationError):
    """A statement was used where an integer is required."""


class CallDepthExceeded(EvaluationError):
    def __init__(self, depth: int) -> None:
        self.depth = depth
        super().__init__(f"maximum call depth of {depth} exceeded")


class NestingTooDeep(EvaluationError):
    def __init__(self) -> None:
        super().__init__("nesting too deep to evaluate")
