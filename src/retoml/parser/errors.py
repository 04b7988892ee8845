"""Error types for the TOML grammar.

Three layers of error exist:

``ParserError``
    Internal.  Raised by grammar rules and caught by the combinators.  A
    *recoverable* ``ParserError`` means "this alternative did not match" and
    lets ``opt``/``alt``/repetition try something else; a *fatal* one (after
    ``cut``) aborts the whole parse.  As it propagates outwards each rule
    may attach a context label, building a stack from innermost to
    outermost.
``CustomError``
    Semantic causes carried by a ``ParserError``: out-of-range fields,
    duplicate keys, dotted keys extending a non-table, and recursion
    overflow.
``TomlError``
    Public.  The only error the entry points raise.  Carries the rendered
    message and the location of the failure within the original text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from retoml.model.key import Key
    from retoml.parser.input import Input


# ---------------------------------------------------------------------------
# Context labels
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CharLiteral:
    """A single expected character."""

    char: str

    def __str__(self) -> str:
        if self.char == "\n":
            return "newline"
        if self.char == "`":
            return "'`'"
        if not self.char.isprintable():
            return repr(self.char)
        return f"`{self.char}`"


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """An expected literal token such as ``]]``."""

    text: str

    def __str__(self) -> str:
        return f"`{self.text}`"


@dataclass(frozen=True, slots=True)
class Description:
    """A free-form description of what was expected, e.g. ``digit``."""

    text: str

    def __str__(self) -> str:
        return self.text


ParserValue = Union[CharLiteral, StringLiteral, Description]


@dataclass(frozen=True, slots=True)
class Expression:
    """Names the grammar rule that failed, e.g. ``date-time``."""

    label: str


@dataclass(frozen=True, slots=True)
class Expected:
    """Names a token that would have been accepted at the failure point."""

    value: ParserValue


Context = Union[Expression, Expected]


# ---------------------------------------------------------------------------
# Semantic causes
# ---------------------------------------------------------------------------


class CustomError(Exception):
    """Base class for semantic failures attached to a ``ParserError``."""


def _join_path(keys: tuple["Key", ...]) -> str:
    return ".".join(k.to_repr().as_raw() for k in keys)


@dataclass(frozen=True)
class DuplicateKey(CustomError):
    """Two entries at the same table level decode to the same key.

    Parameters
    ----------
    key:
        The repeated key as written in the message: its decoded text for
        key/value pairs, its source spelling when built by ``from_path``.
    table:
        Path of the owning table, ``()`` for the document root, or ``None``
        when the owning table is not known (inline tables).
    """

    key: str
    table: tuple["Key", ...] | None = None

    def __str__(self) -> str:
        if self.table is None:
            return f"duplicate key `{self.key}`"
        if not self.table:
            return f"duplicate key `{self.key}` in document root"
        return f"duplicate key `{self.key}` in table `{_join_path(self.table)}`"

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))

    @classmethod
    def from_path(cls, path: list["Key"] | tuple["Key", ...], i: int) -> "DuplicateKey":
        """Blame segment ``i`` of ``path``, naming the segments before it."""
        if not 0 <= i < len(path):
            raise IndexError(f"segment {i} outside key path of length {len(path)}")
        return cls(key=path[i].to_repr().as_raw(), table=tuple(path[:i]))


@dataclass(frozen=True)
class DottedKeyExtendWrongType(CustomError):
    """A dotted key tried to descend through a value that is not a table.

    Parameters
    ----------
    key:
        The key path up to and including the offending segment.
    actual:
        Type name of the value found at that segment.
    """

    key: tuple["Key", ...]
    actual: str

    def __str__(self) -> str:
        return (
            f"dotted key `{_join_path(self.key)}` attempted to extend "
            f"non-table type ({self.actual})"
        )

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))

    @property
    def index(self) -> int:
        """Index of the offending segment within the full path."""
        return len(self.key) - 1

    @classmethod
    def from_path(
        cls, path: list["Key"] | tuple["Key", ...], i: int, actual: str
    ) -> "DottedKeyExtendWrongType":
        """Blame segment ``i`` of ``path`` which holds a value of type ``actual``."""
        if not 0 <= i < len(path):
            raise IndexError(f"segment {i} outside key path of length {len(path)}")
        return cls(key=tuple(path[: i + 1]), actual=actual)


class OutOfRange(CustomError):
    """A lexically valid field violates its semantic bounds (month 13, hour 24...)."""

    def __init__(self, message: str = "value is out of range") -> None:
        super().__init__(message)


class RecursionLimitExceeded(CustomError):
    """Nesting exceeded the recursion guard."""

    def __init__(self) -> None:
        super().__init__("recursion limit exceeded")


# ---------------------------------------------------------------------------
# Internal parser error
# ---------------------------------------------------------------------------


class ParserError(Exception):
    """Failure of a grammar rule at a given input position.

    Parameters
    ----------
    input:
        The input view at which the failure occurred.
    fatal:
        ``False`` for a recoverable mismatch, ``True`` once committed.
    cause:
        Optional semantic cause.
    """

    def __init__(
        self,
        input: "Input",
        *,
        fatal: bool = False,
        cause: CustomError | None = None,
    ) -> None:
        super().__init__(input)
        self.input = input
        self.fatal = fatal
        self.cause = cause
        self.context: list[Context] = []

    def add_context(self, ctx: Context) -> "ParserError":
        """Append an outer context label and return ``self``."""
        self.context.append(ctx)
        return self

    def __str__(self) -> str:
        lines: list[str] = []
        expression = next((c.label for c in self.context if isinstance(c, Expression)), None)
        expected = [str(c.value) for c in self.context if isinstance(c, Expected)]
        if expression is not None:
            lines.append(f"invalid {expression}")
        if expected:
            lines.append("expected " + ", ".join(expected))
        if self.cause is not None:
            lines.append(str(self.cause))
        if not lines:
            found = self.input.first()
            lines.append(f"unexpected {CharLiteral(found)}" if found else "unexpected end of input")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Public error
# ---------------------------------------------------------------------------


@dataclass
class TomlError(Exception):
    """A TOML parse failure, as raised by every public entry point.

    Parameters
    ----------
    message:
        Human-readable description (may span several lines).
    original:
        The complete text that was being parsed.
    span:
        Half-open character range ``(start, end)`` of the offending input.
        Empty (``start == end``) at end of input.
    cause:
        The semantic cause, if the failure was not a plain grammar mismatch.
    """

    message: str
    original: str | None = None
    span: tuple[int, int] | None = None
    cause: CustomError | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.args = (str(self),)

    @classmethod
    def from_parser_error(cls, error: ParserError, original: "Input") -> "TomlError":
        """Convert an internal error, measuring its offset from ``original``."""
        offset = error.input.pos - original.pos
        length = len(original.source) - original.pos
        span = (offset, offset) if offset >= length else (offset, offset + 1)
        return cls(
            message=str(error),
            original=original.source[original.pos :],
            span=span,
            cause=error.cause,
        )

    @property
    def offset(self) -> int | None:
        """0-based character offset of the failure."""
        return None if self.span is None else self.span[0]

    @property
    def byte_offset(self) -> int | None:
        """0-based UTF-8 byte offset of the failure."""
        if self.span is None or self.original is None:
            return None
        return len(self.original[: self.span[0]].encode("utf-8"))

    @property
    def line(self) -> int | None:
        """1-based line number of the failure."""
        if self.span is None or self.original is None:
            return None
        return self.original.count("\n", 0, self.span[0]) + 1

    @property
    def column(self) -> int | None:
        """1-based column number of the failure."""
        if self.span is None or self.original is None:
            return None
        line_start = self.original.rfind("\n", 0, self.span[0]) + 1
        return self.span[0] - line_start + 1

    def __str__(self) -> str:
        if self.span is None or self.original is None:
            return self.message
        line_num = self.line
        column = self.column
        assert line_num is not None and column is not None
        content = self.original.split("\n")[line_num - 1].rstrip("\r")
        gutter = " " * (len(str(line_num)) + 1)
        start, end = self.span
        carets = "^" * max(1, min(end - start, len(content) - column + 1))
        return "\n".join(
            [
                f"TOML parse error at line {line_num}, column {column}",
                f"{gutter}|",
                f"{line_num} | {content}",
                f"{gutter}|{' ' * column}{carets}",
                self.message,
            ]
        )
