"""retoml: format-preserving TOML parser and editable document model.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import retoml

    doc = retoml.parse('''
        # Server settings
        [server]
        host = "localhost"   # bind address
        port = 8080
    ''')

    doc["server"]["port"] = 9090
    str(doc)            # comments and spacing survive the edit

    retoml.loads('answer = 42')
    {'answer': 42}

    retoml.parse_key_path('a."b.c".d')
    [Key('a'), Key('b.c'), Key('d')]

    retoml.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from retoml.model.document import Document
    from retoml.model.key import Key
    from retoml.model.value import Value


def parse_document(text: str) -> "Document":
    """Parse a TOML document.

    Parameters
    ----------
    text:
        Complete TOML text.

    Returns
    -------
    Document
        The parsed document; ``str(doc) == text``.

    Raises
    ------
    retoml.parser.TomlError
        If ``text`` is not valid TOML.
    """
    from retoml.parser.entry import parse_document as _parse_document

    return _parse_document(text)


parse = parse_document


def parse_key(text: str) -> "Key":
    """Parse one simple key, bare or quoted.

    Raises
    ------
    retoml.parser.TomlError
        If ``text`` is not exactly one key.
    """
    from retoml.parser.entry import parse_key as _parse_key

    return _parse_key(text)


def parse_key_path(text: str) -> list["Key"]:
    """Parse a dotted key into its segments.

    Raises
    ------
    retoml.parser.TomlError
        If ``text`` is not a valid key.
    """
    from retoml.parser.entry import parse_key_path as _parse_key_path

    return _parse_key_path(text)


def parse_value(text: str) -> "Value":
    """Parse a single TOML value, keeping its spelling but not its decor.

    Raises
    ------
    retoml.parser.TomlError
        If ``text`` is not exactly one value.
    """
    from retoml.parser.entry import parse_value as _parse_value

    return _parse_value(text)


def loads(text: str) -> dict[str, Any]:
    """Parse TOML text into plain Python data."""
    from retoml.parser.entry import loads as _loads

    return _loads(text)


def dumps(data: "Document | Mapping[str, Any]") -> str:
    """Encode a document, or plain Python data, as TOML text."""
    from retoml.parser.entry import dumps as _dumps

    return _dumps(data)


__all__ = [
    "__version__",
    "parse",
    "parse_document",
    "parse_key",
    "parse_key_path",
    "parse_value",
    "loads",
    "dumps",
]
