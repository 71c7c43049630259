"""
The parser core: the input stream, rollback points, and the success and failure values.
"""

from __future__ import annotations
from typing import Self, Literal, TypeVar, Generic, Final, Callable, Sequence, Protocol
from types import TracebackType

from collections import UserString

import parsetext.const as const


_DataCovT = TypeVar("_DataCovT", covariant=True)
_TokenTypeCovT = TypeVar("_TokenTypeCovT", bound=str|None, covariant=True)


def unbox(value: object) -> object:
    """
    Returns the primitive value behind a boxed character.

    - `str` subclasses become plain `str`.
    - `collections.UserString` becomes its underlying `str`.
    - Any other object with a `value` attribute becomes that attribute. (Only one level deep.)

    Anything else is returned as-is.
    """
    if isinstance(value, str):
        return str(value)
    if isinstance(value, UserString):
        return value.data
    if hasattr(value, "value"):
        value = value.value
        if isinstance(value, UserString):
            return value.data
        if isinstance(value, str):
            return str(value)
    return value

def char_value(value: object) -> str:
    """
    Unboxes a character and checks that it is exactly one character long.

    Raises `TypeError` otherwise.
    """
    char = unbox(value)
    if not isinstance(char, str) or len(char) != 1:
        raise TypeError(f"Expected a single character, got {value!r}.")
    return char

def same_char(a: object, b: object) -> bool:
    """Compares two characters after unboxing both of them."""
    return unbox(a) == unbox(b)

def source_text(src: Sequence[object]) -> str:
    """The input as a plain string, for rendering positions."""
    if isinstance(src, str):
        return src
    return "".join(str(unbox(item)) for item in src)


class PosNote:
    """
    Positioned note.

    For `ParseError`s and `ParseFailure`s.
    """
    def __init__(self, pos: int, msg: str | None = None) -> None:
        self.pos: int = pos
        self.msg: str | None = msg

    def __repr__(self) -> str:
        return f"PosNote({self.pos}, {self.msg!r})"

class ParseFailure:
    """
    When returned from a parser function, indicates that it has failed. Can be converted into a `ParseError`.

    ```
    r = parser(si)
    if r:
        ... # `r` is a `Result` object
    else:
        ... # `r` is a `ParseFailure` object
    ```
    """

    def __init__(self, src: Sequence[object], pos: int, msg: str | None = None, notes: Sequence[PosNote] = ()) -> None:
        """
        `src`: The input that was being parsed.
        `pos`: The position of the failure.
        `msg`: The reason for the failure.
        `notes`: Positioned notes to add to the error. Should be in reverse order. That is, the note that's last in the list will be shown above the other notes.
        """
        self.src: Sequence[object] = src
        self.pos: int = pos
        self.msg: str | None = msg
        self.notes: list[PosNote] = list(notes)
        """Should be in reverse order. That is, the note that's last in the list will be shown above the other notes."""

    def error(self) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(self.src, self.pos, self.msg, self.notes)

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} at {self.pos}: {self.msg}>"

class ExpectError(ParseFailure):
    """
    "Expected X, found Y" failure.

    `found` is the offending token, or `None` if the input ran out.
    """

    def __init__(self, src: Sequence[object], pos: int, expected: str, found: object = None, notes: Sequence[PosNote] = ()) -> None:
        self.expected: Final[str] = expected
        self.found: Final[object] = found
        super().__init__(src, pos, self.describe(), notes)

    def found_text(self) -> str:
        if self.found is None:
            return const.END_OF_INPUT
        return str(unbox(self.found))

    def describe(self) -> str:
        return f"Expected:{self.expected} Found:{self.found_text()}"

def expect_error(expected: str) -> FailureFactory:
    """
    Failure factory for `token()`.

    The returned function builds an `ExpectError` at the iterator's current position.
    """
    return lambda si, found: ExpectError(si.src, si.pos, expected, found)

class ParseError(Exception):
    """
    The exception that's raised when a parser encounters an unrecoverable error.

    Usually used for syntax errors.
    """

    def __init__(self, src: Sequence[object], pos: int, msg: str | None = None, notes: Sequence[PosNote] = ()) -> None:
        """
        `src`: The input that was being parsed.
        `pos`: The position of the error.
        `msg`: The reason for the error.
        `notes`: Positioned notes to add to the error. Should be in reverse order. That is, the note that's last in the list will be shown above the other notes.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = source_text(src)
        self.pos: int = pos
        self.msg: str | None = msg
        self.append_pos_note(pos)
        for note in reversed(notes):
            self.append_existing_note(note)

    def append_pos_note(self, pos: int, msg: str | None = None) -> Self:
        note: list[str] = [] if msg is None else [msg]

        pos = min(pos, len(self.src))
        # should still work with CRLF
        line = self.src.count("\n", 0, pos) + 1
        column = pos - self.src.rfind("\n", 0, pos) # -1 when there's no newline, which is still correct
        note.append(f"At position {pos} (line {line}, column {column})")

        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*20}^")
        self.add_note("\n".join(note))
        return self

    def append_existing_note(self, note: PosNote) -> Self:
        return self.append_pos_note(note.pos, note.msg)

class Token(Generic[_TokenTypeCovT]):
    """
    When returned from a parser function, indicates that it has succeeded.

    When used for typing: `Token[TokenTypeType]`

    Example: `Token[Literal["string"]]` `Token[str]`
    """
    def __init__(self, token_type: _TokenTypeCovT, pos: tuple[int, int] | None = None) -> None:
        """
        `token_type` can either be a string or None.
        """
        self.token_type: Final[_TokenTypeCovT] = token_type
        self.pos: Final[tuple[int, int] | None] = pos

    def __bool__(self) -> Literal[True]:
        return True

    def __repr__(self) -> str:
        if self.pos is None:
            return f"<{self.token_type}>"
        return f"<{self.token_type} {self.pos[0]}..{self.pos[1]}>"

class Result(Token, Generic[_DataCovT, _TokenTypeCovT]):
    """
    When returned from a parser function, indicates that it has succeeded. Also contains the parsed value.

    ```
    r = parser(si)
    if r:
        output = r.data
    else:
        ... # failed
    ```

    When used for typing: `Result[DataType, TokenTypeType]`

    Example: `Result[str, Literal["trie"]]` `Result[str, str | None]`
    """
    def __init__(self, data: _DataCovT, token_type: _TokenTypeCovT, pos: tuple[int, int] | None = None) -> None:
        super().__init__(token_type, pos)
        self.data: _DataCovT = data

    def __repr__(self) -> str:
        return super().__repr__() + " {" + repr(self.data) + "}"



class StringIterator:
    """
    A position over a sequence of characters.

    The input can be a `str` or any sequence of (possibly boxed) characters.
    """
    def __init__(self, src: Sequence[object], starting_pos: int = 0) -> None:
        self.src: Sequence[object] = src
        """The input that's being parsed."""
        self.pos: int = starting_pos
        """The current position."""

    def is_eof(self) -> bool:
        """Whether the end of the input has been reached."""
        return self.pos >= len(self.src)

    def current(self) -> object:
        """
        The item at the current position, without consuming.

        Check `is_eof()` first, since `None` is returned at the end of the input.
        """
        if self.is_eof():
            return None
        return self.src[self.pos]

    def __call__(self) -> Checkpoint:
        """Creates a `Checkpoint` at the current position."""
        return Checkpoint(self)


class Checkpoint:
    """
    Used as a context manager:
    ```
    with Checkpoint(si) as c:
        ...
    ```

    Can be created by calling a `StringIterator`:
    ```
    with si() as c:
        r = parser(si)
        if r:
            c.commit()      # keep the consumed input
        return r            # uncommitted checkpoints roll back on exit
    ```
    """
    def __init__(self, si: StringIterator) -> None:
        """
        Create by calling the `StringIterator` instead.
        """
        self.pos: Final[int] = si.pos
        """The saved position."""
        self.si: Final[StringIterator] = si
        """The bound StringIterator."""
        self.committed: bool = False

    def commit(self) -> None:
        """Commited checkpoints will not be rolled back automatically."""
        self.committed = True

    def rollback(self) -> None:
        """Rolls back the iterator to the starting position. (Regardless of the checkpoint being commited or not.)"""
        self.si.pos = self.pos

    def rollback_if_uncommited(self) -> None:
        """Rolls back the iterator to the starting position if the checkpoint isn't committed."""
        if not self.committed:
            self.si.pos = self.pos

    def get_range(self) -> tuple[int, int]:
        return (self.pos, self.si.pos)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exctype: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc is None:
            self.rollback_if_uncommited()
        else:
            self.rollback()
        return False


class Parser(Protocol):
    """
    A protocol for parsers.

    A truthy `Result` indicates success, a falsy `ParseFailure` indicates failure.
    """
    def __call__(self, si: StringIterator) -> Result | ParseFailure: ...

FailureFactory = Callable[[StringIterator, object], ParseFailure]
"""Builds the failure of `token()` from the iterator and the offending item. (`None` at the end of the input.)"""
