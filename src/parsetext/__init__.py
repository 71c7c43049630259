"""
Character, string and keyword parsers built from a small set of combinators.

See the objects for more explanations.

Defining parsers:
```
keyword = trie(["if", "in", "int", "into"])
arrow = string("->")
two_digits = then(digit, digit)
```

Using parsers:
```
si = StringIterator("into x")

result = keyword(si)
if result:
    ... # `result` is a `Result` object, `result.data` is "into"
else:
    ... # `result` is a `ParseFailure` object, `si.pos` is unchanged

parse(keyword, "into x")    # raises `ParseError` on failure
```
"""

import parsetext.const as const
from parsetext.main import (
    PosNote,
    ParseFailure,
    ExpectError,
    ParseError,
    Token,
    Result,
    StringIterator,
    Checkpoint,
    Parser,
    FailureFactory,
    unbox,
    char_value,
    same_char,
    expect_error,
)
from parsetext.combinators import (
    token,
    always,
    never,
    eof,
    then,
    attempt,
    choice,
    label,
    parse,
)
from parsetext.text import (
    StringError,
    character,
    match,
    any_char,
    letter,
    space,
    digit,
    one_of,
    none_of,
    string,
)
from parsetext.wordtrie import (
    TrieNode,
    build_trie,
    trie,
)
