"""String grammars: basic, literal and their multi-line forms.

::

    string            = ml-basic-string / basic-string / ml-literal-string / literal-string
    basic-string      = '"' *basic-char '"'
    ml-basic-string   = '\"\"\"' [ newline ] ml-basic-body '\"\"\"'
    literal-string    = "'" *literal-char "'"
    ml-literal-string = "'''" [ newline ] ml-literal-body "'''"

Every rule returns the decoded string.  Escapes are only processed in
basic strings; multi-line literal strings normalize CRLF to LF.  Once the
opening delimiter has matched, any failure is fatal.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

from retoml.parser.combinators import alt
from retoml.parser.errors import CharLiteral, Expected, Expression, OutOfRange, ParserError
from retoml.parser.input import Input
from retoml.parser.trivia import newline, ws, ws_newlines

QUOTATION_MARK: Final[str] = '"'
APOSTROPHE: Final[str] = "'"
ESCAPE: Final[str] = "\\"
ML_BASIC_STRING_DELIM: Final[str] = '"""'
ML_LITERAL_STRING_DELIM: Final[str] = "'''"

_NON_ASCII: Final[str] = "\x80-\U0010ffff"

# basic-unescaped = wschar / %x21 / %x23-5B / %x5D-7E / non-ascii
BASIC_UNESCAPED_RE: Final[re.Pattern[str]] = re.compile(f"[ \\t\\x21\\x23-\\x5b\\x5d-\\x7e{_NON_ASCII}]+")
# literal-char = %x09 / %x20-26 / %x28-7E / non-ascii
LITERAL_CHARS_RE: Final[re.Pattern[str]] = re.compile(f"[\\t\\x20-\\x26\\x28-\\x7e{_NON_ASCII}]*")
MLL_CHARS_RE: Final[re.Pattern[str]] = re.compile(f"[\\t\\x20-\\x26\\x28-\\x7e{_NON_ASCII}]+")

_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
}


# ---------------------------------------------------------------------------
# Escapes
# ---------------------------------------------------------------------------


def escaped(inp: Input) -> tuple[Input, str]:
    """Decode one escape sequence starting at a backslash."""
    if inp.first() != ESCAPE:
        raise ParserError(inp)
    rest = inp.advance()
    c = rest.first()
    if c in _SIMPLE_ESCAPES:
        return rest.advance(), _SIMPLE_ESCAPES[c]
    if c == "u":
        return hexescape(rest.advance(), 4)
    if c == "U":
        return hexescape(rest.advance(), 8)
    err = ParserError(rest, fatal=True).add_context(Expression("escape sequence"))
    for expected in "bfnrtuU\\\"":
        err.add_context(Expected(CharLiteral(expected)))
    raise err


def hexescape(inp: Input, digits: int) -> tuple[Input, str]:
    """Decode exactly ``digits`` hex digits into a Unicode scalar value."""
    label = f"unicode {digits}-digit hex code"
    text = inp.peek(digits)
    if len(text) != digits or any(c not in "0123456789abcdefABCDEF" for c in text):
        raise ParserError(inp, fatal=True).add_context(Expression(label))
    code = int(text, 16)
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        raise ParserError(inp, fatal=True, cause=OutOfRange()).add_context(Expression(label))
    return inp.advance(digits), chr(code)


# ---------------------------------------------------------------------------
# Basic strings
# ---------------------------------------------------------------------------


def basic_string(inp: Input) -> tuple[Input, str]:
    """``"..."`` with escapes."""
    if inp.first() != QUOTATION_MARK:
        raise ParserError(inp)
    rest = inp.advance()
    out: list[str] = []
    while True:
        m = BASIC_UNESCAPED_RE.match(rest.source, rest.pos)
        if m is not None:
            out.append(m.group())
            rest = Input(rest.source, m.end())
        elif rest.first() == ESCAPE:
            rest, c = escaped(rest)
            out.append(c)
        else:
            break
    if rest.first() != QUOTATION_MARK:
        raise ParserError(rest, fatal=True).add_context(Expression("basic string"))
    return rest.advance(), "".join(out)


def _mlb_content(inp: Input) -> tuple[Input, str] | None:
    m = BASIC_UNESCAPED_RE.match(inp.source, inp.pos)
    if m is not None:
        return Input(inp.source, m.end()), m.group()
    if inp.first() == ESCAPE:
        trimmed = _mlb_escaped_nl(inp)
        if trimmed is not None:
            return trimmed, ""
        return escaped(inp)
    try:
        rest, _ = newline(inp)
    except ParserError:
        return None
    return rest, "\n"


def _mlb_escaped_nl(inp: Input) -> Input | None:
    # A backslash ending a line trims every following whitespace and newline.
    rest = inp
    matched = False
    while rest.first() == ESCAPE:
        after, _ = ws(rest.advance())
        try:
            after, _ = ws_newlines(after)
        except ParserError:
            break
        rest = after
        matched = True
    return rest if matched else None


def _mll_content(inp: Input) -> tuple[Input, str] | None:
    m = MLL_CHARS_RE.match(inp.source, inp.pos)
    if m is not None:
        return Input(inp.source, m.end()), m.group()
    try:
        return newline(inp)
    except ParserError:
        return None


def _ml_quotes(inp: Input, quote: str, term: Callable[[Input], bool]) -> tuple[Input, str] | None:
    # 1*2 quotes, only if followed by what ``term`` accepts.
    for n in (2, 1):
        if inp.startswith(quote * n) and term(inp.advance(n)):
            return inp.advance(n), quote * n
    return None


def _ml_body(
    inp: Input,
    quote: str,
    content: Callable[[Input], tuple[Input, str] | None],
) -> tuple[Input, str]:
    """``*content *( quotes 1*content ) [ quotes ]`` shared by both multi-line forms."""
    out: list[str] = []
    rest = inp

    def run(start: Input) -> Input:
        while True:
            step = content(start)
            if step is None:
                return start
            start, text = step
            out.append(text)

    rest = run(rest)
    while True:
        quotes = _ml_quotes(rest, quote, lambda r: r.first() not in ("", quote))
        if quotes is None:
            break
        after, text = quotes
        first = content(after)
        if first is None:
            break
        out.append(text)
        rest, chunk = first
        out.append(chunk)
        rest = run(rest)

    closing = quote * 3
    quotes = _ml_quotes(rest, quote, lambda r: r.startswith(closing))
    if quotes is not None:
        rest, text = quotes
        out.append(text)
    return rest, "".join(out)


def ml_basic_string(inp: Input) -> tuple[Input, str]:
    """``\"\"\"...\"\"\"``; a newline right after the opening delimiter is dropped."""
    if not inp.startswith(ML_BASIC_STRING_DELIM):
        raise ParserError(inp).add_context(Expression("multiline basic string"))
    rest = inp.advance(3)
    try:
        rest, _ = newline(rest)
    except ParserError:
        pass
    rest, text = _ml_body(rest, QUOTATION_MARK, _mlb_content)
    if not rest.startswith(ML_BASIC_STRING_DELIM):
        raise ParserError(rest, fatal=True).add_context(Expression("multiline basic string"))
    return rest.advance(3), text


# ---------------------------------------------------------------------------
# Literal strings
# ---------------------------------------------------------------------------


def literal_string(inp: Input) -> tuple[Input, str]:
    """``'...'``, taken verbatim."""
    if inp.first() != APOSTROPHE:
        raise ParserError(inp).add_context(Expression("literal string"))
    m = LITERAL_CHARS_RE.match(inp.source, inp.pos + 1)
    assert m is not None
    rest = Input(inp.source, m.end())
    if rest.first() != APOSTROPHE:
        raise ParserError(rest, fatal=True).add_context(Expression("literal string"))
    return rest.advance(), m.group()


def ml_literal_string(inp: Input) -> tuple[Input, str]:
    """``'''...'''``, taken verbatim apart from CRLF normalization."""
    if not inp.startswith(ML_LITERAL_STRING_DELIM):
        raise ParserError(inp).add_context(Expression("multiline literal string"))
    rest = inp.advance(3)
    try:
        rest, _ = newline(rest)
    except ParserError:
        pass
    rest, text = _ml_body(rest, APOSTROPHE, _mll_content)
    if not rest.startswith(ML_LITERAL_STRING_DELIM):
        raise ParserError(rest, fatal=True).add_context(Expression("multiline literal string"))
    return rest.advance(3), text.replace("\r\n", "\n")


string = alt(ml_basic_string, basic_string, ml_literal_string, literal_string)
