"""Canonical TOML spellings for programmatically created scalars.

Parsed scalars keep their source text; these helpers are only used when a
value or key has no stored representation, for example after
``doc["name"] = "x"`` or an explicit ``format()``.

String style selection
----------------------
``infer_style`` scans the string once and picks the most readable form
that can spell it:

- a literal string (``'...'`` or ``'''...'''``) when the text contains a
  backslash and nothing a literal cannot hold;
- a multi-line form when the text contains a newline;
- otherwise a basic string with escapes.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Final

_ESCAPES: Final[dict[str, str]] = {
    "\b": "\\b",
    "\t": "\\t",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


class StringStyle(Enum):
    """Quoting layout of a synthesized string."""

    NEWLINE_TRIPLE = "newline-triple"
    ONELINE_TRIPLE = "oneline-triple"
    ONELINE_SINGLE = "oneline-single"

    def literal_delims(self) -> tuple[str, str]:
        if self is StringStyle.NEWLINE_TRIPLE:
            return "'''\n", "'''"
        if self is StringStyle.ONELINE_TRIPLE:
            return "'''", "'''"
        return "'", "'"

    def basic_delims(self) -> tuple[str, str]:
        # A one-line triple style only arises for literals; basic strings
        # never need it.
        if self is StringStyle.NEWLINE_TRIPLE:
            return '"""\n', '"""'
        return '"', '"'


def _is_control(c: str) -> bool:
    return c <= "\x1f" or c == "\x7f"


def infer_style(value: str) -> tuple[StringStyle, bool]:
    """Return ``(style, literal)`` for the most readable spelling of ``value``."""
    style = StringStyle.ONELINE_SINGLE
    max_singles = 0
    singles = 0
    prefer_literal = False
    can_be_literal = True

    for c in value:
        if c == "\n":
            style = StringStyle.NEWLINE_TRIPLE
        if not can_be_literal:
            continue
        if c == "'":
            singles += 1
            if singles >= 3:
                can_be_literal = False
        else:
            max_singles = max(max_singles, singles)
            singles = 0
        if c == "\\":
            prefer_literal = True
        elif c not in "\t\n" and _is_control(c):
            can_be_literal = False

    # A closing apostrophe cannot be escaped inside a literal.
    if singles > 0 and value.endswith("'"):
        can_be_literal = False
    if not (prefer_literal and can_be_literal):
        return style, False

    max_singles = max(max_singles, singles)
    if style is StringStyle.ONELINE_SINGLE and max_singles >= 1:
        style = StringStyle.ONELINE_TRIPLE
    return style, True


def to_string_repr(
    value: str,
    style: StringStyle | None = None,
    literal: bool | None = None,
) -> str:
    """Spell ``value`` as a TOML string.

    Parameters
    ----------
    value:
        The decoded string.
    style:
        Force a quoting layout; inferred when None.
    literal:
        Force literal (True) or basic (False) quoting; inferred when None.
        The caller guarantees a forced literal can spell ``value``.
    """
    if style is None or literal is None:
        inferred_style, inferred_literal = infer_style(value)
        style = inferred_style if style is None else style
        literal = inferred_literal if literal is None else literal

    if literal:
        start, end = style.literal_delims()
        return f"{start}{value}{end}"

    start, end = style.basic_delims()
    out: list[str] = [start]
    for c in value:
        if c == "\n":
            out.append("\n" if style is StringStyle.NEWLINE_TRIPLE else "\\n")
        elif c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif _is_control(c):
            out.append(f"\\u{ord(c):04X}")
        else:
            out.append(c)
    out.append(end)
    return "".join(out)


def float_repr(value: float) -> str:
    """Spell a float the way TOML requires (``inf``, ``nan``, always a dot or exponent)."""
    if math.isnan(value):
        return "-nan" if math.copysign(1.0, value) < 0 else "nan"
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    text = repr(value)
    if "e" in text and "." not in text.split("e")[0]:
        # 1e+200 is valid TOML but keep a fraction for readability
        mantissa, exponent = text.split("e")
        return f"{mantissa}.0e{exponent}"
    return text


def scalar_repr(value: object) -> str:
    """Synthesize the canonical representation of a scalar value.

    ``bool`` is checked before ``int`` since it is a subclass of it.  Any
    other object (a ``Datetime``) is spelled by its ``str()``.
    """
    if isinstance(value, str):
        return to_string_repr(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return float_repr(value)
    return str(value)
