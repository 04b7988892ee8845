"""RFC 3339 date-time grammar, as profiled by TOML.

::

    date-time      = offset-date-time / local-date-time / local-date / local-time
    full-date      = date-fullyear "-" date-month "-" date-mday
    partial-time   = time-hour ":" time-minute ":" time-second [ time-secfrac ]
    time-offset    = "Z" / time-numoffset
    time-numoffset = ( "+" / "-" ) time-hour ":" time-minute
    time-delim     = "T" / "t" / " "

Fields are range checked (month 1-12, day 1-31, hour 0-23, minute 0-59,
second 0-60) but the day is not checked against the month.  Fractional
seconds keep nanosecond precision; extra digits are truncated.
"""
from __future__ import annotations

from typing import Final

from retoml.model.datetime import Date, Datetime, Offset, Time
from retoml.parser.errors import Description, Expected, Expression, OutOfRange, ParserError
from retoml.parser.input import Input

DIGITS: Final[str] = "0123456789"
TIME_DELIMS: Final[str] = "Tt "

# SCALE[n] turns an n-digit fraction into nanoseconds.
SCALE: Final[tuple[int, ...]] = (
    0,
    100_000_000,
    10_000_000,
    1_000_000,
    100_000,
    10_000,
    1_000,
    100,
    10,
    1,
)


def _unsigned_digits(inp: Input, n: int) -> tuple[Input, int]:
    """Exactly ``n`` ASCII digits."""
    text = inp.peek(n)
    if len(text) != n or any(c not in DIGITS for c in text):
        raise ParserError(inp)
    return inp.advance(n), int(text)


def _field(inp: Input, low: int, high: int, *, fatal: bool = False) -> tuple[Input, int]:
    """Two digits within ``[low, high]``."""
    try:
        rest, number = _unsigned_digits(inp, 2)
    except ParserError as err:
        err.fatal = fatal
        raise
    if not low <= number <= high:
        raise ParserError(inp, fatal=fatal, cause=OutOfRange())
    return rest, number


def _expect(inp: Input, char: str, *, fatal: bool = False) -> Input:
    if inp.first() != char:
        raise ParserError(inp, fatal=fatal)
    return inp.advance()


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------


def full_date(inp: Input) -> tuple[Input, Date]:
    """``YYYY-MM-DD``; committed after ``YYYY-``."""
    rest, year = _unsigned_digits(inp, 4)
    rest = _expect(rest, "-")
    rest, month = _field(rest, 1, 12, fatal=True)
    rest = _expect(rest, "-", fatal=True)
    rest, day = _field(rest, 1, 31, fatal=True)
    return rest, Date(year, month, day)


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


def time_secfrac(inp: Input) -> tuple[Input, int]:
    """``.`` and at least one digit, as nanoseconds."""
    rest = _expect(inp, ".", fatal=True)
    end = rest
    while end.first() and end.first() in DIGITS:
        end = end.advance()
    digits = rest.slice_to(end)
    if not digits:
        raise ParserError(rest, fatal=True).add_context(Expected(Description("digit")))
    digits = digits[: len(SCALE) - 1]
    return end, int(digits) * SCALE[len(digits)]


def partial_time(inp: Input) -> tuple[Input, Time]:
    """``HH:MM:SS[.frac]``; committed after ``HH:``."""
    rest, hour = _field(inp, 0, 23)
    rest = _expect(rest, ":")
    rest, minute = _field(rest, 0, 59, fatal=True)
    rest = _expect(rest, ":", fatal=True)
    rest, second = _field(rest, 0, 60, fatal=True)
    nanosecond = 0
    if rest.first() == ".":
        rest, nanosecond = time_secfrac(rest)
    return rest, Time(hour, minute, second, nanosecond)


def time_offset(inp: Input) -> tuple[Input, Offset]:
    """``Z`` or ``±HH:MM``."""
    c = inp.first()
    if c in ("Z", "z"):
        return inp.advance(), Offset.Z
    if c not in ("+", "-"):
        raise ParserError(inp).add_context(Expression("time offset"))
    try:
        rest, hours = _field(inp.advance(), 0, 23, fatal=True)
        rest = _expect(rest, ":", fatal=True)
        rest, minutes = _field(rest, 0, 59, fatal=True)
    except ParserError as err:
        raise err.add_context(Expression("time offset")) from None
    if c == "-":
        hours = -hours
    return rest, Offset(hours, minutes)


# ---------------------------------------------------------------------------
# Date-time
# ---------------------------------------------------------------------------


def _date_and_time(inp: Input) -> tuple[Input, Datetime]:
    rest, date = full_date(inp)
    if not rest.first() or rest.first() not in TIME_DELIMS:
        return rest, Datetime(date=date)
    try:
        after, time = partial_time(rest.advance())
    except ParserError as err:
        if err.fatal:
            raise
        # ``1979-05-27 # comment``: the space was not a time delimiter.
        return rest, Datetime(date=date)
    offset = None
    if after.first() and after.first() in "Zz+-":
        after, offset = time_offset(after)
    return after, Datetime(date=date, time=time, offset=offset)


def date_time(inp: Input) -> tuple[Input, Datetime]:
    """Any of the four date-time shapes."""
    try:
        return _date_and_time(inp)
    except ParserError as err:
        err.add_context(Expression("date-time"))
        if err.fatal:
            raise
    try:
        rest, time = partial_time(inp)
    except ParserError as err:
        raise err.add_context(Expression("time")) from None
    return rest, Datetime(time=time)
