"""Conditional blocks: if, unless, if_some, if_some_ref.

    {{#if done}}A{{else}}B{{/if}}
        if as_bool(root.done):
            out.write('A')
        else:
            out.write('B')

    {{#if_some user as |u|}}{{u.name}}{{/if_some}}
        if (u_1 := root.user) is not None:
            out.write('{}'.format(as_display_html(u_1.name)))

``if`` and ``unless`` do not open a binding; paths inside them resolve as
they would outside. ``if_some`` binds the present value for its body.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from stache.compiler.blocks.base import Block, only_argument, read_local, required_argument
from stache.compiler.scope import NO_LOCAL, Local
from stache.compiler.utils import call, store
from stache.environment.exceptions import ElseNotAllowedError
from stache.utils.constants import USE_AS_BOOL

if TYPE_CHECKING:
    from stache.compiler.core import Compilation
    from stache.expression import Expression
    from stache.tokenizer import Token


class ConditionalBlock(Block):
    """Block emitting one ``if`` statement with an optional else arm."""

    def __init__(self, node: ast.If, local: Local = NO_LOCAL):
        super().__init__(local=local)
        self.node = node

    def handle_else(self, compiler: Compilation, expression: Expression) -> None:
        if self.in_else:
            raise ElseNotAllowedError(f"{self.name} already has an else arm")
        compiler.pop_frame()
        compiler.push_frame(self.node.orelse)
        self.in_else = True

    @classmethod
    def _start(cls, compiler: Compilation, test: ast.expr, local: Local = NO_LOCAL) -> ConditionalBlock:
        node = ast.If(test=test, body=[], orelse=[])
        compiler.emit(node)
        compiler.push_frame(node.body)
        return cls(node, local)


class If(ConditionalBlock):
    name = "if"
    negate = False

    @classmethod
    def open(cls, compiler: Compilation, token: Token, expression: Expression) -> Block:
        argument = only_argument(token)
        compiler.require(USE_AS_BOOL)
        test: ast.expr = call(USE_AS_BOOL, compiler.compile_token(argument))
        if cls.negate:
            test = ast.UnaryOp(op=ast.Not(), operand=test)
        return cls._start(compiler, test)


class Unless(If):
    name = "unless"
    negate = True


class IfSome(ConditionalBlock):
    """Runs its body when the argument is not ``None``."""

    name = "if_some"

    @classmethod
    def open(cls, compiler: Compilation, token: Token, expression: Expression) -> Block:
        argument = required_argument(token)
        local = read_local(argument)
        test = ast.Compare(
            left=ast.NamedExpr(
                target=store(compiler.local_identifier(local)),
                value=compiler.compile_token(argument),
            ),
            ops=[ast.IsNot()],
            comparators=[ast.Constant(value=None)],
        )
        return cls._start(compiler, test, local)


class IfSomeRef(IfSome):
    name = "if_some_ref"
