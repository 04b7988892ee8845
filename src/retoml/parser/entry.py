"""Public parse entry points.

Every function here parses a complete string: trailing input that the
grammar does not consume is an error.  Internal ``ParserError`` values are
converted to ``TomlError`` with the offset of the failure measured from
the start of the text.

Usage
-----
::

    from retoml.parser.entry import parse_document

    doc = parse_document('title = "TOML"  # comment\\n')
    doc["title"] = "retoml"
    print(str(doc))  # title = "retoml"  # comment
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from retoml.model.convert import table_from
from retoml.model.document import Document
from retoml.model.key import Key
from retoml.model.repr import Repr
from retoml.model.value import Value
from retoml.parser.document import document
from retoml.parser.errors import ParserError, TomlError
from retoml.parser.input import Input
from retoml.parser.key import key, simple_key
from retoml.parser.recursion import RecursionCheck
from retoml.parser.value import value

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(rule: Callable[[Input], tuple[Input, T]], text: str, what: str) -> T:
    original = Input(text)
    logger.debug("Parsing %s (%d chars)", what, len(text))
    try:
        rest, out = rule(original)
        if not rest.at_eof:
            raise ParserError(rest, fatal=True)
    except ParserError as err:
        error = TomlError.from_parser_error(err, original)
        logger.debug("Failed to parse %s at offset %s", what, error.offset)
        raise error from None
    logger.debug("Parsed %s", what)
    return out


def parse_document(text: str) -> Document:
    """Parse a TOML document.

    Parameters
    ----------
    text:
        The complete document.

    Returns
    -------
    Document
        A document for which ``str(doc) == text``.

    Raises
    ------
    TomlError
        If ``text`` is not valid TOML.
    """
    return _run(document, text, "document")


def parse_key(text: str) -> Key:
    """Parse exactly one simple key (bare, basic or literal quoted)."""
    raw, decoded = _run(simple_key, text, "key")
    return Key(decoded, Repr(raw))


def parse_key_path(text: str) -> list[Key]:
    """Parse a possibly dotted key such as ``a."b.c".d``."""
    return _run(key, text, "key path")


def parse_value(text: str) -> Value:
    """Parse a single value.

    Surrounding whitespace is rejected; the returned value keeps its
    spelling but has no decor, so it picks up the default layout wherever
    it is inserted.
    """
    val = _run(lambda inp: value(inp, RecursionCheck()), text, "value")
    val.decor.clear()
    return val


parse = parse_document


def loads(text: str) -> dict[str, Any]:
    """Parse ``text`` and return plain Python data."""
    return parse_document(text).unwrap()


def dumps(data: Document | Mapping[str, Any]) -> str:
    """Encode a document, or a mapping of plain Python data, as TOML text."""
    if not isinstance(data, Document):
        data = Document(table_from(data))
    return str(data)
