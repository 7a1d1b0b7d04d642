"""Token reader for marker content.

Breaks the inside of one marker (``each items as |item|``) or of one
sub-expression into argument tokens. Tokens form a forward-only chain:
``Token.first(src)`` reads the first one and ``token.next()`` reads the token
after it from ``token.tail``.

Token Types:
    PATH            name, user.age, ../title, this
    PRIVATE         @index, @../key (value excludes the ``@``)
    SUB_EXPRESSION  (lookup items @index) (value excludes the parentheses)
    STRING          "quoted \\" text" or 'single' (value is unescaped)
    NUMBER          42, 3.5, -1

Example:
    >>> [(t.type.name, t.value) for t in tokenize('user.name (helper arg) @index "x"')]
    [('PATH', 'user.name'), ('SUB_EXPRESSION', 'helper arg'), ('PRIVATE', 'index'), ('STRING', 'x')]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from stache.environment.exceptions import UnterminatedMarkerError, near_snippet

_END = re.compile(r"[\s(]")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_QUOTES = frozenset("\"'")


class TokenType(Enum):
    PATH = 1
    PRIVATE = 2
    SUB_EXPRESSION = 3
    STRING = 4
    NUMBER = 5


@dataclass(frozen=True, slots=True)
class Token:
    """One argument token.

    Attributes:
        type: Token classification.
        value: Token text with sigils, parentheses and quotes removed.
        tail: Remaining unread content, left-stripped.
    """

    type: TokenType
    value: str
    tail: str

    @classmethod
    def first(cls, src: str) -> Token | None:
        """Read the first token of ``src``, or None when it is blank."""
        return _parse(src.strip())

    def next(self) -> Token | None:
        """Read the token following this one."""
        return _parse(self.tail)

    def rest(self) -> list[Token]:
        """All tokens after this one, in order."""
        tokens: list[Token] = []
        token = self.next()
        while token is not None:
            tokens.append(token)
            token = token.next()
        return tokens


def tokenize(src: str) -> list[Token]:
    """Read every token of ``src``."""
    first = Token.first(src)
    if first is None:
        return []
    return [first, *first.rest()]


def _find_end(src: str) -> int:
    match = _END.search(src)
    return match.start() if match else len(src)


def _find_closing_quote(src: str) -> int:
    """Index of the quote closing the string that opens ``src``."""
    quote = src[0]
    escaped = False
    for i in range(1, len(src)):
        c = src[i]
        if escaped:
            escaped = False
        elif c == "\\":
            escaped = True
        elif c == quote:
            return i
    raise UnterminatedMarkerError("unterminated string", near=near_snippet(src))


def _find_closing_paren(src: str) -> int:
    """Index of the parenthesis balancing the one that opens ``src``.

    Parentheses inside quoted strings are not counted.
    """
    count = 0
    i = 0
    while i < len(src):
        c = src[i]
        if c in _QUOTES:
            i += _find_closing_quote(src[i:])
        elif c == "(":
            count += 1
        elif c == ")":
            count -= 1
            if count == 0:
                return i
        i += 1
    raise UnterminatedMarkerError("unmatched brackets", near=near_snippet(src))


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", r"\1", body, flags=re.DOTALL)


def _parse(src: str) -> Token | None:
    if not src:
        return None
    head = src[0]
    if head == "@":
        end = _find_end(src)
        return Token(TokenType.PRIVATE, src[1:end], src[end:].lstrip())
    if head == "(":
        end = _find_closing_paren(src)
        return Token(TokenType.SUB_EXPRESSION, src[1:end].strip(), src[end + 1 :].lstrip())
    if head in _QUOTES:
        end = _find_closing_quote(src)
        return Token(TokenType.STRING, _unescape(src[1:end]), src[end + 1 :].lstrip())
    end = _find_end(src)
    value = src[:end]
    token_type = TokenType.NUMBER if _NUMBER.fullmatch(value) else TokenType.PATH
    return Token(token_type, value, src[end:].lstrip())
