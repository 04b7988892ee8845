"""CLI package.

The ``cli`` sub-package contains the Click application and its command
implementations.  Commands import from the parent package lazily so that
``retoml --help`` stays fast.
"""
from __future__ import annotations
