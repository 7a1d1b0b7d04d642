"""with / with_ref: bind a value for the body.

    {{#with author}}{{name}}{{/with}}
        this_1 = root.author
        out.write('{}'.format(as_display_html(this_1.name)))

The body runs exactly once and is emitted into the enclosing statement
list; no output frame is pushed, so adjacent writes around the block can be
coalesced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stache.compiler.blocks.base import Block, read_local, required_argument
from stache.compiler.utils import assign

if TYPE_CHECKING:
    from stache.compiler.core import Compilation
    from stache.expression import Expression
    from stache.tokenizer import Token


class With(Block):
    name = "with"

    @classmethod
    def open(cls, compiler: Compilation, token: Token, expression: Expression) -> Block:
        argument = required_argument(token)
        local = read_local(argument)
        value = compiler.compile_token(argument)
        compiler.emit(assign(compiler.local_identifier(local), value))
        return cls(local=local)

    def handle_close(self, compiler: Compilation) -> None:
        pass


class WithRef(With):
    name = "with_ref"
