"""
The generic combinators the text parsers are built from.

Every parser takes a `StringIterator` and returns a `Result` or a `ParseFailure`.

A failing parser may leave the iterator advanced. That is a "consumed" failure, and `choice()` will not try the other alternatives after one.
Wrap a parser in `attempt()` to make its failures rewind.
"""

from __future__ import annotations
from typing import Any, Callable, Iterable, Sequence

import logging

import parsetext.const as const
from parsetext.main import (
    ExpectError,
    FailureFactory,
    ParseFailure,
    Parser,
    PosNote,
    Result,
    StringIterator,
)

logger = logging.getLogger(__name__)


def token(predicate: Callable[[Any], bool], on_failure: FailureFactory) -> Parser:
    """
    Consumes one item if `predicate(item)` holds, and yields the item.

    Otherwise returns `on_failure(si, item)` without consuming. (`item` is `None` at the end of the input.)
    """
    def inner(si: StringIterator) -> Result | ParseFailure:
        if si.is_eof():
            return on_failure(si, None)
        item = si.current()
        if not predicate(item):
            return on_failure(si, item)
        si.pos += 1
        return Result(item, None, (si.pos-1, si.pos))
    return inner

def always(value: Any, token_type: str | None = None) -> Parser:
    """Succeeds without consuming, yielding `value`."""
    return lambda si: Result(value, token_type, (si.pos, si.pos))

def never(msg: str | None = None) -> Parser:
    """Fails without consuming."""
    return lambda si: ParseFailure(si.src, si.pos, msg)

def eof(si: StringIterator) -> Result | ParseFailure:
    """A pre-defined parser (not a factory) that only succeeds at the end of the input."""
    if si.is_eof():
        return Result(None, "eof", (si.pos, si.pos))
    return ExpectError(si.src, si.pos, const.END_OF_INPUT, si.current())

def then(*parsers: Parser) -> Parser:
    """
    Runs the parsers in sequence, yielding the value of the last one.

    The first failure is returned as-is, along with whatever it consumed.
    """
    if len(parsers) <= 0:
        raise ValueError("At least one parser required.")
    def inner(si: StringIterator) -> Result | ParseFailure:
        start_pos = si.pos
        data: Any = None
        token_type: str | None = None
        for parser in parsers:
            r = parser(si)
            if not r:
                return r
            data, token_type = r.data, r.token_type
        return Result(data, token_type, (start_pos, si.pos))
    return inner

def attempt(parser: Parser) -> Parser:
    """
    If `parser` fails, rewinds to where it started.

    The failure still reports the position it failed at.
    """
    def inner(si: StringIterator) -> Result | ParseFailure:
        with si() as c:
            r = parser(si)
            if r:
                c.commit()
            return r
    return inner

def choice(parsers: Iterable[Parser]) -> Parser:
    """
    Tries the parsers in order, returning the first success.

    An alternative that fails after consuming ends the choice with its failure.
    If all of them fail without consuming, fails at the starting position with a note for each alternative.
    """
    alternatives: Sequence[Parser] = tuple(parsers)
    def inner(si: StringIterator) -> Result | ParseFailure:
        start_pos = si.pos
        failures: list[ParseFailure] = []
        for parser in alternatives:
            r = parser(si)
            if r or si.pos != start_pos:
                return r
            failures.append(r)
        # notes are shown last-first
        notes = [PosNote(f.pos, f.msg) for f in reversed(failures)]
        return ParseFailure(si.src, start_pos, const.NO_ALTERNATIVE, notes)
    return inner

def label(name: str, parser: Parser) -> Parser:
    """Names a parser, for diagnostics."""
    def inner(si: StringIterator) -> Result | ParseFailure:
        return parser(si)
    inner.__name__ = name
    inner.__qualname__ = name
    return inner

def parse(parser: Parser, src: Sequence[object], starting_pos: int = 0) -> Result:
    """
    Runs `parser` over `src`.

    Returns the `Result`, or raises the failure as a `ParseError`.
    """
    si = StringIterator(src, starting_pos)
    r = parser(si)
    if not r:
        logger.debug("%s failed at position %d: %s", getattr(parser, "__name__", "parser"), r.pos, r.msg)
        raise r.error()
    return r
