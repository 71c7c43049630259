"""
Character and string parsers.
"""

from __future__ import annotations
from typing import Final, Sequence

import re

import parsetext.const as const
from parsetext.main import (
    ExpectError,
    FailureFactory,
    Parser,
    PosNote,
    char_value,
    expect_error,
    same_char,
    unbox,
)
from parsetext.combinators import (
    always,
    attempt,
    label,
    then,
    token,
)


class StringError(ExpectError):
    """
    A literal string failed to match.

    `string` is the whole literal and `index` is the offset of the character that didn't match.
    """

    def __init__(
        self,
        src: Sequence[object],
        pos: int,
        string: Sequence[object],
        index: int,
        expected: str,
        found: object = None,
        notes: Sequence[PosNote] = (),
    ) -> None:
        self.string: Final[Sequence[object]] = string
        self.index: Final[int] = index
        super().__init__(src, pos, expected, found, notes)

    def describe(self) -> str:
        string = self.string if isinstance(self.string, str) else "".join(char_value(c) for c in self.string)
        return f"In string:'{string}' at index:{self.index}, Expected:{self.expected} Found:{self.found_text()}"


def character(c: object) -> Parser:
    """
    Matches a single character, yielding `c`.

    `c` and the input can both be boxed characters. (See `main.unbox()`)
    """
    char = char_value(c)
    return label(
        f"character({char!r})",
        then(token(lambda item: same_char(item, char), expect_error(char)), always(c, "character")),
    )

def match(pattern: str | re.Pattern[str], expected: str, flags: int | re.RegexFlag = 0) -> Parser:
    """
    Matches a single character against a regex. The token is tested in its string form.

    `expected` describes what was expected in the failure message.
    """
    compiled = re.compile(pattern, flags)
    def predicate(item: object) -> bool:
        return compiled.match(str(unbox(item))) is not None
    return token(predicate, expect_error(expected))

any_char: Final[Parser] = label("any_char", match(".", const.ANY_CHAR))
letter: Final[Parser] = label("letter", match("[a-z]", const.LETTER, re.IGNORECASE | re.ASCII))
space: Final[Parser] = label("space", match(r"\s", const.SPACE, re.IGNORECASE))
digit: Final[Parser] = label("digit", match("[0-9]", const.DIGIT))

def one_of(chars: Sequence[object]) -> Parser:
    """Matches any single character from `chars`."""
    text = "".join(char_value(c) for c in chars)
    charset = frozenset(text)
    expected = f"one of '{text}'"
    def predicate(item: object) -> bool:
        value = unbox(item)
        return isinstance(value, str) and value in charset
    return label(f"one_of({text!r})", token(predicate, expect_error(expected)))

def none_of(chars: Sequence[object]) -> Parser:
    """Matches any single character that's not in `chars`. Still fails at the end of the input."""
    text = "".join(char_value(c) for c in chars)
    charset = frozenset(text)
    expected = f"none of '{text}'"
    def predicate(item: object) -> bool:
        value = unbox(item)
        return not (isinstance(value, str) and value in charset)
    return label(f"none_of({text!r})", token(predicate, expect_error(expected)))


def _string_error(string: Sequence[object], index: int, expected: str) -> FailureFactory:
    return lambda si, found: StringError(si.src, si.pos, string, index, expected, found)

def string(s: Sequence[object]) -> Parser:
    """
    Matches every character of `s` in order, yielding `s`.

    On a mismatch, rewinds to where it started and returns a `StringError` pointing at the character that failed.
    """
    chars = [char_value(c) for c in s]
    steps = [
        token(lambda item, char=char: same_char(item, char), _string_error(s, index, char))
        for index, char in enumerate(chars)
    ]
    return label(f"string({''.join(chars)!r})", attempt(then(*steps, always(s, "string"))))
