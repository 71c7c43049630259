"""
Longest match out of a set of words, using a prefix trie.

```
keyword = trie(["in", "into", "int"])
parse(keyword, "into x").data  # "into"
```
"""

from __future__ import annotations
from typing import Final, Iterable, Iterator, Sequence

import logging

import parsetext.const as const
from parsetext.main import (
    ParseFailure,
    Parser,
    Result,
    StringIterator,
    char_value,
    unbox,
)
from parsetext.combinators import label

logger = logging.getLogger(__name__)


class TrieNode:
    """
    An immutable trie node.

    `children` is sorted in reverse order of the characters. A word ending at this node comes after every word going through its children.
    """
    def __init__(self, terminal: bool, children: tuple[tuple[str, TrieNode], ...] = ()) -> None:
        self.terminal: Final[bool] = terminal
        """Whether a word ends at this node."""
        self.children: Final[tuple[tuple[str, TrieNode], ...]] = children
        self._index: Final[dict[str, TrieNode]] = dict(children)

    def child(self, char: str) -> TrieNode | None:
        return self._index.get(char)

    def depth(self) -> int:
        """The length of the longest path below this node."""
        depth = 0
        stack: list[tuple[TrieNode, int]] = [(self, 0)]
        while stack:
            node, level = stack.pop()
            depth = max(depth, level)
            stack.extend((child, level + 1) for _, child in node.children)
        return depth

    def words(self, prefix: str = "") -> Iterator[str]:
        """Every word stored below this node, longest-first along each path."""
        stack: list[tuple[TrieNode, str, bool]] = [(self, prefix, False)]
        while stack:
            node, path, ends_here = stack.pop()
            if ends_here:
                yield path
                continue
            if node.terminal:
                stack.append((node, path, True))
            stack.extend((child, path + key, False) for key, child in reversed(node.children))

    def __repr__(self) -> str:
        return f"<TrieNode{' terminal' if self.terminal else ''} {''.join(key for key, _ in self.children)!r}>"


def build_trie(words: Iterable[Sequence[object]]) -> TrieNode:
    """
    Builds a trie out of the words.

    Duplicate words end up on the same path. Raises `TypeError` if a word contains something other than single characters.
    """
    # draft nodes: (is terminal, children), frozen into `TrieNode`s afterwards
    root: tuple[list[bool], dict[str, tuple]] = ([False], {})
    for word in words:
        node = root
        for c in word:
            node = node[1].setdefault(char_value(c), ([False], {}))
        node[0][0] = True

    frozen: dict[int, TrieNode] = {}
    stack: list[tuple[tuple, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        terminal, children = node
        if expanded:
            frozen[id(node)] = TrieNode(
                terminal[0],
                tuple((char, frozen[id(children[char])]) for char in sorted(children, reverse=True)),
            )
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in children.values())
    return frozen[id(root)]


def trie(words: Iterable[Sequence[object]]) -> Parser:
    """
    Matches the longest of `words` that the input starts with, yielding it as a `str`.

    Consumes nothing if none of them match. With no words, always fails.
    """
    root = build_trie(words)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Built trie: depth %d, %d words", root.depth(), sum(1 for _ in root.words()))

    def inner(si: StringIterator) -> Result | ParseFailure:
        with si() as c:
            node = root
            chars: list[str] = []
            # length of the longest word matched so far
            longest = 0 if root.terminal else None
            while not si.is_eof():
                value = unbox(si.current())
                next_node = node.child(value) if isinstance(value, str) else None
                if next_node is None:
                    break
                chars.append(value)
                si.pos += 1
                node = next_node
                if node.terminal:
                    longest = len(chars)
            if longest is None:
                return ParseFailure(si.src, c.pos, const.NO_ALTERNATIVE)
            si.pos = c.pos + longest
            c.commit()
            return Result("".join(chars[:longest]), "trie", c.get_range())
    return label("trie", inner)
