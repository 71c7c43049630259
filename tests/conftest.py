from __future__ import annotations

import pytest

from parsetext import StringIterator


class Boxed:
    """A boxed character, unwrapped through its `value`."""

    def __init__(self, value: str) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Boxed({self.value!r})"


@pytest.fixture
def run():
    """Runs a parser over a fresh iterator, returning `(result, iterator)`."""
    def _run(parser, src, pos: int = 0):
        si = StringIterator(src, pos)
        return parser(si), si
    return _run
