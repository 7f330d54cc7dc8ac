"""Runtime settings, read from the environment and overridden by CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .environment import DEFAULT_MAX_CALL_DEPTH

ENV_PREFIX = "INTLANG_"


@dataclass
class Settings:
    log_level: str = "WARNING"
    log_file: str | None = None
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build Settings from ``INTLANG_*`` variables in *environ*."""
        if environ is None:
            environ = dict(os.environ)
        settings = cls()
        if f"{ENV_PREFIX}LOG_LEVEL" in environ:
            settings.log_level = environ[f"{ENV_PREFIX}LOG_LEVEL"].upper()
        if environ.get(f"{ENV_PREFIX}LOG_FILE"):
            settings.log_file = environ[f"{ENV_PREFIX}LOG_FILE"]
        if f"{ENV_PREFIX}MAX_CALL_DEPTH" in environ:
            raw = environ[f"{ENV_PREFIX}MAX_CALL_DEPTH"]
            try:
                settings.max_call_depth = int(raw)
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX}MAX_CALL_DEPTH must be an integer, got {raw!r}"
                ) from None
            if settings.max_call_depth < 1:
                raise ValueError(
                    f"{ENV_PREFIX}MAX_CALL_DEPTH must be at least 1, got {raw!r}"
                )
        return settings
