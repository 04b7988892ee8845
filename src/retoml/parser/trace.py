"""Opt-in tracing of grammar rule entry and exit.

Enabled only when ``RETOML_TRACE`` is set at import time (see
``retoml.config``).  When disabled, ``traced`` returns the rule unchanged
so there is no overhead.  The nesting depth used for indentation lives in
a ``threading.local`` and has no influence on parse results.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from retoml.config import SETTINGS
from retoml.parser.errors import ParserError
from retoml.parser.input import Input

logger = logging.getLogger(__name__)

T = TypeVar("T")

_state = threading.local()


def _depth() -> int:
    return getattr(_state, "depth", 0)


def traced(label: str, *, enabled: bool | None = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorate a grammar rule so that it logs ``--> label`` / ``<-- label``.

    Parameters
    ----------
    label:
        Name printed in the trace.
    enabled:
        Override the ``RETOML_TRACE`` setting (used by tests).
    """
    active = SETTINGS.trace if enabled is None else enabled

    def decorate(rule: Callable[..., T]) -> Callable[..., T]:
        if not active:
            return rule

        def wrapper(inp: Input, *args: Any) -> T:
            depth = _depth()
            indent = " " * (depth * 2)
            logger.debug("%s--> %s %r", indent, label, inp)
            _state.depth = depth + 1
            try:
                out = rule(inp, *args)
            except ParserError as err:
                logger.debug("%s<-- %s failed (fatal=%s) at %d", indent, label, err.fatal, err.input.pos)
                raise
            finally:
                _state.depth = depth
            logger.debug("%s<-- %s ok", indent, label)
            return out

        wrapper.__name__ = getattr(rule, "__name__", label)
        wrapper.__doc__ = rule.__doc__
        return wrapper

    return decorate
