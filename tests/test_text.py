"""
Tests for the character and string parsers.
"""

from collections import UserString

import pytest

from parsetext import (
    ExpectError,
    ParseError,
    StringError,
    any_char,
    character,
    choice,
    digit,
    letter,
    match,
    none_of,
    one_of,
    parse,
    space,
    string,
    then,
)
from tests.conftest import Boxed


class TestCharacter:

    @pytest.mark.parametrize("c", ["a", "Z", "0", " ", "\n", "é"])
    def test_consumes_one_matching_token(self, run, c):
        r, si = run(character(c), c + "rest")
        assert r.data == c
        assert r.token_type == "character"
        assert si.pos == 1

    def test_mismatch_consumes_nothing(self, run):
        r, si = run(character("a"), "ba")
        assert isinstance(r, ExpectError)
        assert r.expected == "a"
        assert r.found == "b"
        assert r.pos == 0
        assert si.pos == 0

    def test_end_of_input(self, run):
        r, si = run(character("a"), "")
        assert r.found is None
        assert r.msg == "Expected:a Found:end of input"

    def test_boxed_expected_yields_the_boxed_value(self, run):
        boxed = Boxed("a")
        r, si = run(character(boxed), "abc")
        assert r.data is boxed
        assert si.pos == 1

    def test_boxed_input(self, run):
        r, si = run(character("b"), [UserString("b"), Boxed("c")])
        assert r.data == "b"
        assert si.pos == 1
        r, si = run(character("c"), [Boxed("c")])
        assert r

    def test_rejects_multiple_characters(self):
        with pytest.raises(TypeError):
            character("ab")


class TestMatch:

    def test_custom_pattern(self, run):
        vowel = match("[aeiou]", "a vowel")
        r, si = run(vowel, "ex")
        assert r.data == "e"
        r, si = run(vowel, "xe")
        assert r.msg == "Expected:a vowel Found:x"
        assert si.pos == 0

    def test_tokens_are_tested_as_strings(self, run):
        r, si = run(match(".", "anything"), [1, 2])
        assert r.data == 1
        assert si.pos == 1
        r, si = run(digit, [5, "x"])
        assert r.data == 5
        assert si.pos == 1
        r, si = run(letter, [5])
        assert r.found == 5
        assert r.msg == "Expected:any letter Found:5"
        assert si.pos == 0


class TestCharacterClasses:

    @pytest.mark.parametrize("parser, accepted, rejected", [
        (digit, "0123456789", "a /"),
        (letter, "azAZmQ", "0 _-"),
        (space, " \t\n\r\f", "a0_"),
        (any_char, "a0 _\t~", "\n"),
    ])
    def test_accepts_and_rejects(self, run, parser, accepted, rejected):
        for c in accepted:
            r, si = run(parser, c + "!")
            assert r.data == c
            assert si.pos == 1
        for c in rejected:
            r, si = run(parser, c)
            assert isinstance(r, ExpectError)
            assert r.found == c
            assert si.pos == 0

    @pytest.mark.parametrize("parser, description", [
        (digit, "any digit"),
        (letter, "any letter"),
        (space, "any space"),
        (any_char, "any character"),
    ])
    def test_end_of_input(self, run, parser, description):
        r, si = run(parser, "")
        assert r.found is None
        assert r.msg == f"Expected:{description} Found:end of input"

    @pytest.mark.parametrize("c", ["\u212a", "\u017f", "\u0131", "\u00e9"])
    def test_letter_is_ascii_only(self, run, c):
        r, si = run(letter, c)
        assert isinstance(r, ExpectError)
        assert si.pos == 0

    def test_names(self):
        assert [p.__name__ for p in (any_char, letter, space, digit)] == ["any_char", "letter", "space", "digit"]


class TestOneOfNoneOf:

    def test_one_of(self, run):
        op = one_of("+-*/")
        r, si = run(op, "*2")
        assert r.data == "*"
        r, si = run(op, "2")
        assert r.msg == "Expected:one of '+-*/' Found:2"
        assert si.pos == 0

    def test_none_of(self, run):
        body = none_of('"\\')
        r, _ = run(body, "a")
        assert r.data == "a"
        r, si = run(body, '"')
        assert r.msg == "Expected:none of '\"\\' Found:\""
        assert si.pos == 0

    def test_none_of_fails_at_end_of_input(self, run):
        r, _ = run(none_of("x"), "")
        assert r.found is None


class TestString:

    def test_matches_and_leaves_the_rest(self, run):
        r, si = run(string("let"), "let x")
        assert r.data == "let"
        assert r.token_type == "string"
        assert r.pos == (0, 3)
        assert si.src[si.pos:] == " x"

    @pytest.mark.parametrize("src, index", [
        ("xet", 0),
        ("lxt", 1),
        ("lex", 2),
    ])
    def test_mismatch_reports_index_and_rewinds(self, run, src, index):
        r, si = run(string("let"), src)
        assert isinstance(r, StringError)
        assert r.index == index
        assert r.string == "let"
        assert r.expected == "let"[index]
        assert r.found == src[index]
        assert r.pos == index
        assert si.pos == 0

    def test_runs_out_of_input(self, run):
        r, si = run(string("let"), "le")
        assert r.index == 2
        assert r.found is None
        assert r.msg == "In string:'let' at index:2, Expected:t Found:end of input"
        assert si.pos == 0

    def test_message(self, run):
        r, _ = run(string("abc"), "abx")
        assert r.msg == "In string:'abc' at index:2, Expected:c Found:x"

    def test_rewinds_from_a_later_position(self, run):
        r, si = run(string("ab"), "xxaz", 2)
        assert r.pos == 3
        assert si.pos == 2

    def test_sequence_literal(self, run):
        literal = ["a", Boxed("b")]
        r, si = run(string(literal), "abc")
        assert r.data is literal
        r, si = run(string(literal), "ax")
        assert r.msg == "In string:'ab' at index:1, Expected:b Found:x"

    def test_empty_literal_always_matches(self, run):
        r, si = run(string(""), "abc")
        assert r.data == ""
        assert si.pos == 0

    def test_atomic_inside_choice(self, run):
        keyword = choice([string("let"), string("lambda")])
        r, si = run(keyword, "lambda")
        assert r.data == "lambda"

    def test_parse_error(self):
        with pytest.raises(ParseError) as info:
            parse(then(string("a"), string("bc")), "a\nbd")
        assert str(info.value) == "In string:'bc' at index:0, Expected:b Found:\n"
        assert any("At position 1 (line 1, column 2)" in note for note in info.value.__notes__)
