"""Boolean, integer and float grammars.

::

    boolean     = "true" / "false"
    integer     = dec-int / hex-int / oct-int / bin-int
    dec-int     = [ "-" / "+" ] ( DIGIT1-9 1*( DIGIT / "_" DIGIT ) / DIGIT )
    float       = dec-int ( exp / frac [ exp ] ) / special-float
    special-float = [ "-" / "+" ] ( "inf" / "nan" )

An underscore must sit between two digits; anything else after it is a
fatal error.  Integers are signed 64-bit; a literal outside that range is
rejected rather than widened.  A float that overflows to infinity is
rejected as well, so ``inf`` only ever comes from the ``inf`` keyword.
"""
from __future__ import annotations

import math
from typing import Final

from retoml.model.convert import I64_MAX, I64_MIN
from retoml.parser.errors import Description, Expected, Expression, OutOfRange, ParserError
from retoml.parser.input import Input

DIGITS: Final[str] = "0123456789"
HEX_DIGITS: Final[str] = "0123456789abcdefABCDEF"
OCT_DIGITS: Final[str] = "01234567"
BIN_DIGITS: Final[str] = "01"

TRUE: Final[str] = "true"
FALSE: Final[str] = "false"
INF: Final[str] = "inf"
NAN: Final[str] = "nan"

# prefix -> (radix, digit set, label)
_RADIX_PREFIXES: Final[dict[str, tuple[int, str, str]]] = {
    "0x": (16, HEX_DIGITS, "hexadecimal integer"),
    "0o": (8, OCT_DIGITS, "octal integer"),
    "0b": (2, BIN_DIGITS, "binary integer"),
}


def _is(c: str, chars: str) -> bool:
    return bool(c) and c in chars


# ---------------------------------------------------------------------------
# Boolean
# ---------------------------------------------------------------------------


def true_(inp: Input) -> tuple[Input, bool]:
    """``true``; committed once the ``t`` has been seen."""
    if inp.first() != TRUE[0]:
        raise ParserError(inp)
    if not inp.startswith(TRUE):
        raise ParserError(inp, fatal=True)
    return inp.advance(len(TRUE)), True


def false_(inp: Input) -> tuple[Input, bool]:
    """``false``; committed once the ``f`` has been seen."""
    if inp.first() != FALSE[0]:
        raise ParserError(inp)
    if not inp.startswith(FALSE):
        raise ParserError(inp, fatal=True)
    return inp.advance(len(FALSE)), False


def boolean(inp: Input) -> tuple[Input, bool]:
    c = inp.first()
    if c == TRUE[0]:
        return true_(inp)
    if c == FALSE[0]:
        return false_(inp)
    raise ParserError(inp)


# ---------------------------------------------------------------------------
# Integer
# ---------------------------------------------------------------------------


def _digits_tail(inp: Input, digits: str, label: str) -> Input:
    """Consume ``*( digit / "_" digit )``."""
    rest = inp
    while True:
        c = rest.first()
        if _is(c, digits):
            rest = rest.advance()
        elif c == "_":
            after = rest.advance()
            if not _is(after.first(), digits):
                raise (
                    ParserError(after, fatal=True)
                    .add_context(Expected(Description("digit")))
                    .add_context(Expression(label))
                )
            rest = after.advance()
        else:
            return rest


def dec_int(inp: Input) -> tuple[Input, str]:
    """Recognize a decimal integer and return its text, underscores included."""
    rest = inp
    if _is(rest.first(), "+-"):
        rest = rest.advance()
    c = rest.first()
    if not _is(c, DIGITS):
        raise ParserError(rest).add_context(Expression("integer"))
    rest = rest.advance()
    if c != "0":
        rest = _digits_tail(rest, DIGITS, "integer")
    return rest, inp.slice_to(rest)


def _radix_int(inp: Input, radix: int, digits: str, label: str) -> tuple[Input, int]:
    # ``inp`` sits right after the ``0x``/``0o``/``0b`` prefix.
    if not _is(inp.first(), digits):
        raise ParserError(inp, fatal=True).add_context(Expression(label))
    rest = _digits_tail(inp.advance(), digits, label)
    number = int(inp.slice_to(rest).replace("_", ""), radix)
    if number > I64_MAX:
        raise ParserError(inp, fatal=True, cause=OutOfRange()).add_context(Expression(label))
    return rest, number


def integer(inp: Input) -> tuple[Input, int]:
    """Any integer form, as a Python ``int`` within the signed 64-bit range."""
    prefix = _RADIX_PREFIXES.get(inp.peek(2))
    if prefix is not None:
        radix, digits, label = prefix
        return _radix_int(inp.advance(2), radix, digits, label)
    rest, text = dec_int(inp)
    number = int(text.replace("_", ""))
    if not I64_MIN <= number <= I64_MAX:
        raise ParserError(inp, fatal=True, cause=OutOfRange()).add_context(Expression("integer"))
    return rest, number


# ---------------------------------------------------------------------------
# Float
# ---------------------------------------------------------------------------

_FLOAT: Final[str] = "floating-point number"


def _zero_prefixable_int(inp: Input) -> Input:
    if not _is(inp.first(), DIGITS):
        raise ParserError(inp, fatal=True).add_context(Expression(_FLOAT))
    return _digits_tail(inp.advance(), DIGITS, _FLOAT)


def _frac(inp: Input) -> Input:
    return _zero_prefixable_int(inp.advance())


def _exp(inp: Input) -> Input:
    rest = inp.advance()
    if _is(rest.first(), "+-"):
        rest = rest.advance()
    return _zero_prefixable_int(rest)


def _float_text(inp: Input) -> tuple[Input, str]:
    rest, _ = dec_int(inp)
    c = rest.first()
    if _is(c, "eE"):
        rest = _exp(rest)
    elif c == ".":
        rest = _frac(rest)
        if _is(rest.first(), "eE"):
            rest = _exp(rest)
    else:
        raise ParserError(rest).add_context(Expression(_FLOAT))
    return rest, inp.slice_to(rest)


def inf(inp: Input) -> tuple[Input, float]:
    if not inp.startswith(INF):
        raise ParserError(inp)
    return inp.advance(len(INF)), math.inf


def nan(inp: Input) -> tuple[Input, float]:
    if not inp.startswith(NAN):
        raise ParserError(inp)
    return inp.advance(len(NAN)), math.nan


def special_float(inp: Input) -> tuple[Input, float]:
    """``[+-](inf|nan)``; the sign is kept, even on NaN."""
    rest = inp
    sign = 1.0
    if _is(rest.first(), "+-"):
        sign = -1.0 if rest.first() == "-" else 1.0
        rest = rest.advance()
    if rest.startswith(INF):
        rest, number = inf(rest)
    else:
        rest, number = nan(rest)
    return rest, math.copysign(number, sign)


def float_(inp: Input) -> tuple[Input, float]:
    """Any float form, as a Python ``float``."""
    try:
        rest, text = _float_text(inp)
    except ParserError as err:
        if err.fatal:
            raise
        try:
            return special_float(inp)
        except ParserError as special_err:
            raise special_err.add_context(Expression(_FLOAT)) from None
    number = float(text.replace("_", ""))
    if math.isinf(number):
        raise ParserError(inp, fatal=True, cause=OutOfRange()).add_context(Expression(_FLOAT))
    return rest, number
