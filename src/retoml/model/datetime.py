"""TOML date-time values.

A TOML date-time is one of four shapes, decided by which parts are present:

===================  ======  ======  ========
kind                 date    time    offset
===================  ======  ======  ========
offset date-time     yes     yes     yes
local date-time      yes     yes     no
local date           yes     no      no
local time           no      yes     no
===================  ======  ======  ========

Any other combination is rejected at construction.  Fields are range
checked (month 1-12, day 1-31, hour 0-23, minute 0-59, second 0-60) but
day-of-month is not checked against the month, so ``1979-02-30`` is a
valid ``Date``.  ``Datetime.to_python`` is where calendar rules apply.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Union


class DatetimeKind(Enum):
    """Which of the four TOML date-time shapes a ``Datetime`` has."""

    OFFSET_DATE_TIME = auto()
    LOCAL_DATE_TIME = auto()
    LOCAL_DATE = auto()
    LOCAL_TIME = auto()


def _check(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} {value} is outside {low}..{high}")


@dataclass(frozen=True, slots=True)
class Date:
    """A calendar date with a 4-digit year.

    Parameters
    ----------
    year:
        0-9999.
    month:
        1-12.
    day:
        1-31, not checked against the length of the month.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        _check("year", self.year, 0, 9999)
        _check("month", self.month, 1, 12)
        _check("day", self.day, 1, 31)

    def __str__(self) -> str:
        return f"{self.year:04}-{self.month:02}-{self.day:02}"


@dataclass(frozen=True, slots=True)
class Time:
    """A wall-clock time with nanosecond precision.

    Parameters
    ----------
    hour:
        0-23.
    minute:
        0-59.
    second:
        0-60; 60 allows for a leap second.
    nanosecond:
        0-999_999_999.
    """

    hour: int
    minute: int
    second: int
    nanosecond: int = 0

    def __post_init__(self) -> None:
        _check("hour", self.hour, 0, 23)
        _check("minute", self.minute, 0, 59)
        _check("second", self.second, 0, 60)
        _check("nanosecond", self.nanosecond, 0, 999_999_999)

    def __str__(self) -> str:
        text = f"{self.hour:02}:{self.minute:02}:{self.second:02}"
        if self.nanosecond:
            text += "." + f"{self.nanosecond:09}".rstrip("0")
        return text


@dataclass(frozen=True, slots=True)
class Offset:
    """A UTC offset: either ``Offset.Z`` or a signed ``(hours, minutes)`` pair.

    The sign lives on ``hours`` only, so ``-00:30`` cannot be told apart
    from ``+00:30``.

    Parameters
    ----------
    hours:
        -23..23.
    minutes:
        0-59.
    utc:
        True for the ``Z`` form.
    """

    hours: int = 0
    minutes: int = 0
    utc: bool = False

    Z: ClassVar["Offset"]

    def __post_init__(self) -> None:
        _check("offset hours", self.hours, -23, 23)
        _check("offset minutes", self.minutes, 0, 59)

    def to_timedelta(self) -> _dt.timedelta:
        """Return the offset as a signed ``timedelta``."""
        sign = -1 if self.hours < 0 else 1
        return _dt.timedelta(hours=self.hours, minutes=sign * self.minutes)

    def __str__(self) -> str:
        if self.utc:
            return "Z"
        sign = "-" if self.hours < 0 else "+"
        return f"{sign}{abs(self.hours):02}:{self.minutes:02}"


Offset.Z = Offset(utc=True)


@dataclass(frozen=True, slots=True)
class Datetime:
    """A TOML date-time value.

    Parameters
    ----------
    date:
        Calendar part, absent for a local time.
    time:
        Clock part, absent for a local date.
    offset:
        UTC offset, present only for an offset date-time.

    Raises
    ------
    ValueError
        If the combination of parts is not one of the four TOML shapes.
    """

    date: Date | None = None
    time: Time | None = None
    offset: Offset | None = None

    def __post_init__(self) -> None:
        if self.date is None and self.time is None:
            raise ValueError("a datetime needs a date, a time, or both")
        if self.offset is not None and (self.date is None or self.time is None):
            raise ValueError("an offset requires both a date and a time")

    @property
    def kind(self) -> DatetimeKind:
        """The shape of this value."""
        if self.date is None:
            return DatetimeKind.LOCAL_TIME
        if self.time is None:
            return DatetimeKind.LOCAL_DATE
        if self.offset is None:
            return DatetimeKind.LOCAL_DATE_TIME
        return DatetimeKind.OFFSET_DATE_TIME

    def __str__(self) -> str:
        parts: list[str] = []
        if self.date is not None:
            parts.append(str(self.date))
        if self.time is not None:
            if parts:
                parts.append("T")
            parts.append(str(self.time))
        if self.offset is not None:
            parts.append(str(self.offset))
        return "".join(parts)

    # ------------------------------------------------------------------
    # Python interop
    # ------------------------------------------------------------------

    def to_python(self) -> Union[_dt.datetime, _dt.date, _dt.time]:
        """Convert to the matching ``datetime`` type.

        Offset date-times become timezone-aware ``datetime`` objects.
        Nanoseconds are truncated to microseconds.

        Raises
        ------
        ValueError
            If Python cannot represent the value (leap second, Feb 30,
            year 0).
        """
        kind = self.kind
        if kind is DatetimeKind.LOCAL_DATE:
            assert self.date is not None
            return _dt.date(self.date.year, self.date.month, self.date.day)
        assert self.time is not None
        clock = (
            self.time.hour,
            self.time.minute,
            self.time.second,
            self.time.nanosecond // 1000,
        )
        if kind is DatetimeKind.LOCAL_TIME:
            return _dt.time(*clock)
        assert self.date is not None
        tzinfo = None
        if self.offset is not None:
            tzinfo = _dt.timezone.utc if self.offset.utc else _dt.timezone(self.offset.to_timedelta())
        return _dt.datetime(self.date.year, self.date.month, self.date.day, *clock, tzinfo=tzinfo)

    @classmethod
    def from_python(cls, value: Union[_dt.datetime, _dt.date, _dt.time]) -> "Datetime":
        """Build a ``Datetime`` from a ``datetime``, ``date`` or ``time``.

        Raises
        ------
        ValueError
            For offsets that are not a whole number of minutes.
        """
        if isinstance(value, _dt.datetime):
            date = Date(value.year, value.month, value.day)
            time = Time(value.hour, value.minute, value.second, value.microsecond * 1000)
            delta = value.utcoffset()
            if delta is None:
                return cls(date, time)
            if value.tzinfo is _dt.timezone.utc:
                return cls(date, time, Offset.Z)
            return cls(date, time, _offset_from_timedelta(delta))
        if isinstance(value, _dt.date):
            return cls(date=Date(value.year, value.month, value.day))
        if isinstance(value, _dt.time):
            return cls(time=Time(value.hour, value.minute, value.second, value.microsecond * 1000))
        raise TypeError(f"cannot convert {type(value).__name__} to a TOML datetime")


def _offset_from_timedelta(delta: _dt.timedelta) -> Offset:
    total = int(delta.total_seconds())
    if total % 60:
        raise ValueError(f"offset {delta} is not a whole number of minutes")
    sign = -1 if total < 0 else 1
    hours, minutes = divmod(abs(total) // 60, 60)
    return Offset(sign * hours, minutes)
