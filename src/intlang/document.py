"""Document: the result of evaluating an intlang module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO

from .environment import Environment
from .model import FunctionDef, Module


@dataclass
class Document:
    """Holds the final environment and every line printed during evaluation."""

    environment: Environment = field(default_factory=Environment)
    output: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Not a dataclass field; value of the last node of the most recent merge()
        self._last_value: object = None

    # -- Convenience accessors ------------------------------------------

    @property
    def variables(self) -> dict[str, int]:
        return self.environment.variables

    @property
    def functions(self) -> dict[str, FunctionDef]:
        return self.environment.functions

    @property
    def last_value(self):
        """Value of the last top-level node evaluated by merge(), or None."""
        return self._last_value

    # -- Incremental evaluation -----------------------------------------

    def merge(self, module: Module, out: IO[str] | None = None) -> None:
        """Evaluate *module* against this Document's environment.

        Variables and functions accumulate across calls; printed lines are
        appended to ``output``.
        """
        from .evaluator import _evaluate_into
        self._last_value = _evaluate_into(module, self, out)
