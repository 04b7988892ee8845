"""retoml parser module.

Exports the parse entry points and the public ``TomlError``.  Grammar
rules live in the submodules and are private.
"""
from __future__ import annotations

from retoml.parser.entry import (
    dumps,
    loads,
    parse,
    parse_document,
    parse_key,
    parse_key_path,
    parse_value,
)
from retoml.parser.errors import TomlError

__all__ = [
    "parse",
    "parse_document",
    "parse_key",
    "parse_key_path",
    "parse_value",
    "loads",
    "dumps",
    "TomlError",
]
