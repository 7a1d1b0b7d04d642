"""Expression scanner for Handlebars-style templates.

Splits template text into a forward-only chain of ``Expression`` records.
Each record holds the literal text that precedes a marker (``prefix``), the
marker's classified type and inner content, and the offset where scanning
resumes. ``scan(source)`` returns the first record; ``expression.next()``
returns the one after it, so a template is walked without slicing or
buffering the whole marker list:

    >>> expr = scan("Hello {{name}}!")
    >>> expr.prefix, expr.type, expr.content, expr.postfix
    ('Hello ', <ExpressionType.HTML_ESCAPED: 2>, 'name', '!')
    >>> expr.next() is None
    True

Marker forms:
    {{! comment }}  {{!-- comment with }} --}}     COMMENT
    {{ value }}                                    HTML_ESCAPED
    {{{ value }}}                                  RAW
    {{# helper args }}                             OPEN
    {{/ helper }}                                  CLOSE
    \\{{ anything }}  {{{{tag}}}} ... {{{{/tag}}}}  ESCAPED (verbatim text)

A ``~`` directly inside either delimiter trims whitespace from the literal
text on that side (``{{~#if x~}}``).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from stache.environment.exceptions import (
    EmptyBlockContentError,
    UnterminatedMarkerError,
    near_snippet,
)

_OPEN = "{{"
_CLOSE = "}}"
_WHITESPACE = re.compile(r"\s*")


class ExpressionType(Enum):
    """Classification of a scanned marker."""

    COMMENT = 1
    HTML_ESCAPED = 2
    RAW = 3
    OPEN = 4
    CLOSE = 5
    ESCAPED = 6


@dataclass(frozen=True, slots=True)
class Expression:
    """One marker plus the literal text before it.

    Attributes:
        type: Marker classification.
        prefix: Literal text between the previous marker and this one,
            already trimmed when a ``~`` modifier applies.
        content: Marker content between the delimiters (verbatim text for
            ESCAPED markers).
        source: The full text being scanned.
        start: Offset of the first character of the marker (the backslash
            for ``\\{{`` escapes).
        end: Offset where the next scan starts (after any ``~}}`` trimming).
    """

    type: ExpressionType
    prefix: str
    content: str
    source: str
    start: int
    end: int

    @property
    def postfix(self) -> str:
        """Unscanned text after this marker."""
        return self.source[self.end :]

    @property
    def raw(self) -> str:
        """The marker as written in the template."""
        return self.source[self.start : self.end].rstrip()

    @property
    def near(self) -> str:
        """Trailing context up to the end of this marker, for diagnostics."""
        return near_snippet(self.source[: self.end])

    def next(self) -> Expression | None:
        """Scan the expression following this one."""
        return scan(self.source, self.end)


def scan(source: str, pos: int = 0) -> Expression | None:
    """Return the first expression at or after ``pos``, or None.

    Text after the last marker is not part of any expression; callers take it
    from the last expression's ``postfix`` (or the whole source when this
    returns None).

    Raises:
        UnterminatedMarkerError: A marker has no closing delimiter.
        EmptyBlockContentError: A non-comment marker has no content.
    """
    start = source.find(_OPEN, pos)
    if start < 0:
        return None
    prefix = source[pos:start]

    # \{{ ... }} passes through without the backslash
    if start > pos and source[start - 1] == "\\":
        close = source.find(_CLOSE, start + 2)
        if close < 0:
            raise _unterminated(source, start)
        end = close + len(_CLOSE)
        return Expression(
            ExpressionType.ESCAPED, prefix[:-1], source[start:end], source, start - 1, end
        )

    if source.startswith("{{{{", start):
        return _scan_raw_block(source, start, prefix)

    cursor = start + 2
    trim_left = False
    if source.startswith("~", cursor):
        trim_left = True
        cursor += 1
    if cursor >= len(source):
        raise _unterminated(source, start)

    marker = source[cursor]
    if marker == "{":
        cursor += 1
        if source.startswith("~", cursor):
            trim_left = True
            cursor += 1
        expression_type, terminator = ExpressionType.RAW, "}}}"
    elif marker == "!":
        cursor += 1
        if source.startswith("--", cursor):
            cursor += 2
            terminator = "--}}"
        else:
            terminator = _CLOSE
        expression_type = ExpressionType.COMMENT
    elif marker == "#":
        cursor += 1
        expression_type, terminator = ExpressionType.OPEN, _CLOSE
    elif marker == "/":
        cursor += 1
        expression_type, terminator = ExpressionType.CLOSE, _CLOSE
    else:
        expression_type, terminator = ExpressionType.HTML_ESCAPED, _CLOSE

    if trim_left:
        prefix = prefix.rstrip()
    return _close(expression_type, source, prefix, start, cursor, terminator)


def _close(
    expression_type: ExpressionType,
    source: str,
    prefix: str,
    start: int,
    content_start: int,
    terminator: str,
) -> Expression:
    found = source.find(terminator, content_start)
    if found < 0:
        raise _unterminated(source, start)
    content_end = found
    end = found + len(terminator)
    if found > content_start and source[found - 1] == "~":
        content_end -= 1
        end = _WHITESPACE.match(source, end).end()
    content = source[content_start:content_end]
    if expression_type is not ExpressionType.COMMENT and not content.strip():
        raise EmptyBlockContentError("empty block", source=source, offset=found + len(terminator))
    return Expression(expression_type, prefix, content, source, start, end)


def _scan_raw_block(source: str, start: int, prefix: str) -> Expression:
    """Scan ``{{{{tag}}}} body {{{{/tag}}}}``; the body is kept verbatim.

    The footer must name the same tag as the opener, so bodies may contain
    other ``{{{{...}}}}`` sequences (embedded script templates, for example).
    """
    opener_end = source.find("}}}}", start + 4)
    if opener_end < 0:
        raise _unterminated(source, start)
    tag = source[start + 4 : opener_end].strip()
    if not tag:
        raise EmptyBlockContentError("empty raw block tag", source=source, offset=opener_end + 4)
    body_start = opener_end + 4
    footer = "{{{{/" + tag + "}}}}"
    body_end = source.find(footer, body_start)
    if body_end < 0:
        raise UnterminatedMarkerError(
            f"raw block {tag} is never closed", source=source, offset=len(source)
        )
    return Expression(
        ExpressionType.ESCAPED,
        prefix,
        source[body_start:body_end],
        source,
        start,
        body_end + len(footer),
    )


def _unterminated(source: str, start: int) -> UnterminatedMarkerError:
    return UnterminatedMarkerError(
        "Unclosed block", near=near_snippet(source[:start]), source=source, offset=start
    )


def iter_expressions(source: str) -> Iterator[Expression]:
    """Yield every expression in ``source`` in order."""
    expression = scan(source)
    while expression is not None:
        yield expression
        expression = expression.next()
