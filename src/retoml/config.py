"""Process-wide settings for retoml.

Settings are read from the environment exactly once, when this module is
first imported, and are treated as build-time switches afterwards: changing
the environment later has no effect on a running process.

Environment variables
---------------------
``RETOML_UNBOUNDED``
    When set to a truthy value (``1``, ``true``, ``yes``, ``on``) the
    recursion guard is disabled and arbitrarily deep documents are accepted.
    Only use this for trusted input; very deep nesting can exhaust the
    interpreter stack.
``RETOML_TRACE``
    When truthy, every traced grammar rule logs its entry and exit at
    ``DEBUG`` level on the ``retoml.parser.trace`` logger.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

RECURSION_LIMIT: Final[int] = 128

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable snapshot of the environment-driven switches.

    Parameters
    ----------
    unbounded:
        Disable the recursion guard.
    trace:
        Log grammar rule entry/exit for debugging.
    """

    unbounded: bool = False
    trace: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``RETOML_*`` environment variables."""
        return cls(unbounded=_flag("RETOML_UNBOUNDED"), trace=_flag("RETOML_TRACE"))


SETTINGS: Final[Settings] = Settings.from_env()

__all__ = ["RECURSION_LIMIT", "SETTINGS", "Settings"]
