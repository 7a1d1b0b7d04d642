"""Tests for the marker content tokenizer."""

from __future__ import annotations

import pytest

from stache.environment.exceptions import UnterminatedMarkerError
from stache.tokenizer import Token, TokenType, tokenize


def pairs(src: str) -> list[tuple[TokenType, str]]:
    return [(t.type, t.value) for t in tokenize(src)]


class TestTokenTypes:
    def test_paths(self):
        assert pairs("user.name ../title this") == [
            (TokenType.PATH, "user.name"),
            (TokenType.PATH, "../title"),
            (TokenType.PATH, "this"),
        ]

    def test_private(self):
        assert pairs("@index @../key") == [
            (TokenType.PRIVATE, "index"),
            (TokenType.PRIVATE, "../key"),
        ]

    def test_sub_expression(self):
        assert pairs("fmt (lookup items 0) x") == [
            (TokenType.PATH, "fmt"),
            (TokenType.SUB_EXPRESSION, "lookup items 0"),
            (TokenType.PATH, "x"),
        ]

    def test_nested_sub_expression(self):
        assert pairs("(a (b c))") == [(TokenType.SUB_EXPRESSION, "a (b c)")]

    def test_sub_expression_without_space(self):
        assert pairs("fmt(a)") == [
            (TokenType.PATH, "fmt"),
            (TokenType.SUB_EXPRESSION, "a"),
        ]

    def test_strings(self):
        assert pairs("\"double\" 'single'") == [
            (TokenType.STRING, "double"),
            (TokenType.STRING, "single"),
        ]

    def test_string_with_escaped_quote(self):
        assert pairs(r'"say \"hi\""') == [(TokenType.STRING, 'say "hi"')]

    def test_string_with_spaces_and_parens(self):
        assert pairs('"a (b) c"') == [(TokenType.STRING, "a (b) c")]

    def test_parenthesis_inside_string_in_sub_expression(self):
        assert pairs('(fmt ")")') == [(TokenType.SUB_EXPRESSION, 'fmt ")"')]

    @pytest.mark.parametrize("value", ["0", "42", "-1", "3.25"])
    def test_numbers(self, value):
        assert pairs(value) == [(TokenType.NUMBER, value)]

    def test_number_like_path(self):
        assert pairs("1a") == [(TokenType.PATH, "1a")]


class TestTokenChain:
    def test_blank_input(self):
        assert Token.first("   ") is None
        assert tokenize("") == []

    def test_next_and_rest(self):
        head = Token.first("each items as |item|")
        assert head.value == "each"
        assert head.next().value == "items"
        assert [t.value for t in head.rest()] == ["items", "as", "|item|"]

    def test_tail_is_left_stripped(self):
        head = Token.first("a    b")
        assert head.tail == "b"


class TestTokenizerErrors:
    def test_unbalanced_parenthesis(self):
        with pytest.raises(UnterminatedMarkerError, match="unmatched brackets"):
            tokenize("fmt (a b")

    def test_unterminated_string(self):
        with pytest.raises(UnterminatedMarkerError, match="unterminated string"):
            tokenize('"abc')
