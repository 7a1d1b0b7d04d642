"""each / each_ref: iterate over a value.

    {{#each items}}{{@index}}: {{name}}{{else}}none{{/each}}
        _i_1 = 0
        _empty_1 = True
        for this_1 in root.items:
            _empty_1 = False
            out.write('{}: {}'.format(as_display_html(_i_1), as_display_html(this_1.name)))
            _i_1 += 1
        if _empty_1:
            out.write('none')

Before emitting the loop the remaining template text is pre-scanned: the
``@index`` counter exists only if the body reads it at this depth, the
``empty`` flag only if an ``{{else}}`` belongs to this block, and the
iterable is wrapped in ``as_pairs`` only if ``@key`` or ``@value`` is read.
The else arm runs after an empty loop, so it sees neither the loop binding
nor the private variables.
"""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING

from stache.analysis import find_private_uses, has_else
from stache.compiler.blocks.base import Block, read_local, required_argument
from stache.compiler.scope import INTERNAL_PREFIX, Local
from stache.compiler.utils import assign, call, load, store
from stache.environment.exceptions import ElseNotAllowedError, UnboundPrivateVariableError
from stache.utils.constants import USE_AS_PAIRS

if TYPE_CHECKING:
    from stache.compiler.core import Compilation
    from stache.expression import Expression
    from stache.tokenizer import Token

logger = logging.getLogger(__name__)

_PAIR_FIELDS = {"key": 0, "value": 1}


class Each(Block):
    name = "each"

    def __init__(
        self,
        local: Local,
        counter: str | None = None,
        empty_flag: str | None = None,
    ):
        super().__init__(local=local, counter=counter)
        self.empty_flag = empty_flag
        self.else_node: ast.If | None = None

    @classmethod
    def open(cls, compiler: Compilation, token: Token, expression: Expression) -> Block:
        argument = required_argument(token)
        local = read_local(argument)
        depth = compiler.next_depth
        body = expression.postfix
        privates = find_private_uses(body)

        iterable = compiler.compile_token(argument)
        pairs = bool(privates & _PAIR_FIELDS.keys())
        if pairs:
            compiler.require(USE_AS_PAIRS)
            iterable = call(USE_AS_PAIRS, iterable)

        counter = None
        if "index" in privates:
            counter = compiler.bind(f"{INTERNAL_PREFIX}i_{depth}")
            compiler.emit(assign(counter, ast.Constant(value=0)))

        empty_flag = None
        if has_else(body):
            empty_flag = compiler.bind(f"{INTERNAL_PREFIX}empty_{depth}")
            compiler.emit(assign(empty_flag, ast.Constant(value=True)))

        logger.debug(
            "each at depth %d: counter=%s, else=%s, pairs=%s",
            depth,
            counter,
            empty_flag is not None,
            pairs,
        )

        loop = ast.For(
            target=store(compiler.local_identifier(local)),
            iter=iterable,
            body=[],
            orelse=[],
        )
        compiler.emit(loop)
        compiler.push_frame(loop.body)
        if empty_flag is not None:
            compiler.emit(assign(empty_flag, ast.Constant(value=False)))
        return cls(local, counter, empty_flag)

    def _advance_counter(self, compiler: Compilation) -> None:
        if self.counter is not None:
            compiler.emit(
                ast.AugAssign(target=store(self.counter), op=ast.Add(), value=ast.Constant(value=1))
            )

    def handle_else(self, compiler: Compilation, expression: Expression) -> None:
        if self.empty_flag is None or self.else_node is not None:
            raise ElseNotAllowedError(f"{self.name} already has an else arm")
        self._advance_counter(compiler)
        compiler.pop_frame()
        self.else_node = ast.If(test=load(self.empty_flag), body=[], orelse=[])
        compiler.emit(self.else_node)
        compiler.push_frame(self.else_node.body)
        self.in_else = True

    def handle_close(self, compiler: Compilation) -> None:
        if self.else_node is None:
            self._advance_counter(compiler)
        compiler.pop_frame()

    def resolve_private(
        self, depth: int, name: str, expression: Expression | None = None
    ) -> ast.expr:
        if self.in_else:
            raise UnboundPrivateVariableError(
                f"@{name} is not available in the else arm of {self.name}"
            )
        if name == "index":
            if self.counter is None:
                raise UnboundPrivateVariableError("@index is not tracked for this loop")
            return load(self.counter)
        if name in _PAIR_FIELDS:
            return ast.Subscript(
                value=load(self.local.identifier(depth)),
                slice=ast.Constant(value=_PAIR_FIELDS[name]),
                ctx=ast.Load(),
            )
        return super().resolve_private(depth, name, expression)


class EachRef(Each):
    name = "each_ref"
