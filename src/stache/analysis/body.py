"""Static pre-scan of a block body.

Before an ``each`` block emits its loop it needs to know two things about
the text that follows its opening marker:

- which private variables (``@index``, ``@key``, ``@value``) are addressed to
  *this* block, i.e. used at nesting depth ``d`` with exactly ``d`` leading
  ``../`` segments;
- whether an ``{{else}}`` marker sits at the block's own depth.

Both scans stop at the close marker that ends the block. Nested block-open
markers count as being at the current depth for their own arguments, since
those arguments are evaluated before the nested scope opens.
"""

from __future__ import annotations

from stache.expression import Expression, ExpressionType, scan
from stache.tokenizer import TokenType, tokenize

PARENT = "../"

_VALUE_TYPES = frozenset({ExpressionType.HTML_ESCAPED, ExpressionType.RAW})


def split_parents(path: str) -> tuple[int, str]:
    """Split leading ``../`` segments from a path.

    Example:
        >>> split_parents("../../title")
        (2, 'title')
    """
    count = 0
    while path.startswith(PARENT):
        path = path[len(PARENT) :]
        count += 1
    return count, path


def _walk_body(body: str):
    """Yield ``(depth, expression)`` for each marker until the block closes."""
    depth = 0
    expression: Expression | None = scan(body)
    while expression is not None:
        if expression.type is ExpressionType.CLOSE:
            depth -= 1
            if depth < 0:
                return
        else:
            yield depth, expression
            if expression.type is ExpressionType.OPEN:
                depth += 1
        expression = expression.next()


def _privates_in(content: str, depth: int) -> set[str]:
    names: set[str] = set()
    for token in tokenize(content):
        if token.type is TokenType.PRIVATE:
            parents, name = split_parents(token.value)
            if parents == depth:
                names.add(name)
        elif token.type is TokenType.SUB_EXPRESSION:
            names |= _privates_in(token.value, depth)
    return names


def find_private_uses(body: str) -> frozenset[str]:
    """Private variable names that refer to the block whose body is ``body``.

    Example:
        >>> sorted(find_private_uses("{{@index}}{{#each x}}{{@../key}}{{@value}}{{/each}}{{/each}}"))
        ['index', 'key']
    """
    names: set[str] = set()
    for depth, expression in _walk_body(body):
        if expression.type is ExpressionType.OPEN or expression.type in _VALUE_TYPES:
            names |= _privates_in(expression.content, depth)
    return frozenset(names)


def has_else(body: str) -> bool:
    """True if ``{{else}}`` appears at the top level of the block body."""
    for depth, expression in _walk_body(body):
        if (
            depth == 0
            and expression.type is ExpressionType.HTML_ESCAPED
            and expression.content.strip() == "else"
        ):
            return True
    return False
