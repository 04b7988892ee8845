"""Value dispatch.

The first character decides which grammar applies, so only numbers and
date-times (which share a leading digit) ever need to backtrack.  Scalars
keep the text they were recognized from as their ``Repr``; every value
leaves here with empty decor, which the caller replaces with the
surrounding whitespace.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, Final

from retoml.model.repr import Decor, Repr
from retoml.model.value import Formatted, Value
from retoml.parser.array import array
from retoml.parser.combinators import alt
from retoml.parser.datetime import date_time
from retoml.parser.errors import CharLiteral, Description, Expected, Expression, ParserError
from retoml.parser.inline_table import inline_table
from retoml.parser.input import Input
from retoml.parser.numbers import false_, float_, inf, integer, nan, true_
from retoml.parser.recursion import RecursionCheck
from retoml.parser.strings import APOSTROPHE, QUOTATION_MARK, string
from retoml.parser.trace import traced

_NUMBER_START: Final[str] = "+-0123456789"

# Keywords whose first letter is also the most likely start of a mistyped
# unquoted string.
_KEYWORDS: Final[dict[str, Callable[[Input], tuple[Input, Any]]]] = {
    "t": true_,
    "f": false_,
    "i": inf,
    "n": nan,
}


# Date-times and floats both start like integers, so they are tried first.
_number = alt(date_time, float_, integer)


def _string_expected(err: ParserError) -> ParserError:
    return (
        err.add_context(Expression("string"))
        .add_context(Expected(CharLiteral(QUOTATION_MARK)))
        .add_context(Expected(CharLiteral(APOSTROPHE)))
    )


@traced("value")
def value(inp: Input, check: RecursionCheck) -> tuple[Input, Value]:
    """Parse any value.

    Parameters
    ----------
    inp:
        Input positioned at the first character of the value.
    check:
        Recursion guard, passed on to arrays and inline tables.
    """
    c = inp.first()
    if c == "[":
        return array(inp, check)
    if c == "{":
        return inline_table(inp, check)

    scalar: Any
    if c in (QUOTATION_MARK, APOSTROPHE):
        rest, scalar = string(inp)
    elif c and c in _NUMBER_START:
        rest, scalar = _number(inp)
    elif c in ("_", "."):
        rule = integer if c == "_" else float_
        try:
            rest, scalar = rule(inp)
        except ParserError as err:
            raise err.add_context(Expected(Description("leading digit"))) from None
    elif c in _KEYWORDS:
        try:
            rest, scalar = _KEYWORDS[c](inp)
        except ParserError as err:
            raise _string_expected(err) from None
    else:
        raise _string_expected(ParserError(inp))

    return rest, Formatted(scalar, Repr(inp.slice_to(rest)), Decor("", ""))
