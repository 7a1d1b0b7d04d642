"""Value expression compilation.

The content of a value marker (or of a sub-expression) is a callee followed
by arguments:

    {{name}}                root.name
    {{fmt price "EUR" 2}}   root.fmt(root.price, 'EUR', 2)
    {{lookup items @index}} lookup(this_1.items, _i_1)
    {{fmt (lookup a 0)}}    root.fmt(lookup(root.a, 0))

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from stache.compiler.utils import call
from stache.environment.exceptions import (
    ArityMismatchError,
    EmptyBlockContentError,
    MissingArgumentError,
)
from stache.tokenizer import Token, TokenType
from stache.utils.constants import USE_LOOKUP

if TYPE_CHECKING:
    from stache.expression import Expression

LOOKUP = "lookup"


def _number(value: str) -> int | float:
    if "." in value:
        return float(value)
    return int(value)


class ExpressionCompilationMixin:
    """Mixin for compiling tokens and value expressions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    __slots__ = ()

    if TYPE_CHECKING:
        # From ScopeMixin
        def resolve_path(self, path: str) -> ast.expr: ...

        def resolve_private(
            self, value: str, expression: Expression | None = None
        ) -> ast.expr: ...

        # From Compilation
        def require(self, capability: str) -> None: ...

    def compile_value(self, content: str) -> ast.expr:
        """Compile marker content: a path, a call, or a ``lookup``."""
        head = Token.first(content)
        if head is None:
            raise EmptyBlockContentError("expected an expression")
        args = head.rest()

        if head.type is TokenType.PATH and head.value == LOOKUP:
            if not args:
                raise MissingArgumentError("calling lookup without arguments")
            if len(args) != 2:
                raise ArityMismatchError(f"lookup expects 2 arguments, got {len(args)}")
            self.require(USE_LOOKUP)
            return call(LOOKUP, *(self.compile_token(arg) for arg in args))

        func = self.compile_token(head)
        if not args:
            return func
        return ast.Call(
            func=func,
            args=[self.compile_token(arg) for arg in args],
            keywords=[],
        )

    def compile_token(self, token: Token) -> ast.expr:
        """Compile a single argument token."""
        if token.type is TokenType.PATH:
            return self.resolve_path(token.value)
        if token.type is TokenType.PRIVATE:
            return self.resolve_private(token.value)
        if token.type is TokenType.SUB_EXPRESSION:
            return self.compile_value(token.value)
        if token.type is TokenType.NUMBER:
            return ast.Constant(value=_number(token.value))
        return ast.Constant(value=token.value)
