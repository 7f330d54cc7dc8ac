"""Variable bindings, function table and call frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import (
    CallDepthExceeded,
    FunctionRedefinition,
    UndefinedFunction,
    UnboundVariable,
)
from .model import FunctionDef

logger = logging.getLogger(__name__)

DEFAULT_MAX_CALL_DEPTH = 64


@dataclass
class Environment:
    """Holds all state mutated while a module is evaluated.

    Top-level code reads and writes the flat ``variables`` mapping.  Each
    function call pushes one frame; inside a call, writes go to that frame
    and reads fall back to the globals.
    """

    variables: dict[str, int] = field(default_factory=dict)
    functions: dict[str, FunctionDef] = field(default_factory=dict)
    frames: list[dict[str, int]] = field(default_factory=list)
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH

    # -- Variables ------------------------------------------------------

    @property
    def scope(self) -> dict[str, int]:
        """The mapping that receives new bindings."""
        return self.frames[-1] if self.frames else self.variables

    def set_var(self, name: str, value: int) -> None:
        self.scope[name] = value

    def get_var(self, name: str) -> int:
        if self.frames and name in self.frames[-1]:
            return self.frames[-1][name]
        try:
            return self.variables[name]
        except KeyError:
            raise UnboundVariable(name) from None

    def has_var(self, name: str) -> bool:
        return name in self.scope or name in self.variables

    def remove_var(self, name: str) -> None:
        self.scope.pop(name, None)

    def snapshot(self) -> dict[str, int]:
        """Copy of the global variables, for diagnostics."""
        return dict(self.variables)

    # -- Functions ------------------------------------------------------

    def define_function(self, name: str, fn: FunctionDef) -> None:
        if name in self.functions:
            raise FunctionRedefinition(name)
        self.functions[name] = fn
        logger.debug("Defined function %s(%s)", name, ", ".join(fn.params))

    def resolve_function(self, name: str) -> FunctionDef:
        try:
            return self.functions[name]
        except KeyError:
            raise UndefinedFunction(name) from None

    # -- Frames ---------------------------------------------------------

    @property
    def depth(self) -> int:
        return len(self.frames)

    def push_frame(self, bindings: dict[str, int]) -> None:
        if len(self.frames) >= self.max_call_depth:
            raise CallDepthExceeded(self.max_call_depth)
        self.frames.append(dict(bindings))

    def pop_frame(self) -> dict[str, int]:
        return self.frames.pop()
