"""Block protocol and shared helpers.

A block is opened by a ``{{#name ...}}`` marker and owns the scope pushed
for its body. The compiler drives it through three hooks:

- ``open`` (a classmethod on the factory) emits the statements that start
  the block and pushes the frame its body writes to;
- ``handle_else`` switches to the else arm, if the block has one;
- ``handle_close`` finishes the body and pops every frame the block pushed.

Pending writes are always flushed by the compiler before any hook runs.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, ClassVar, Protocol

from stache.compiler.scope import INTERNAL_PREFIX, NO_LOCAL, THIS_LOCAL, Local
from stache.environment.exceptions import (
    ArityMismatchError,
    ElseNotAllowedError,
    MissingArgumentError,
    UnboundPrivateVariableError,
)
from stache.tokenizer import Token, TokenType

if TYPE_CHECKING:
    from stache.compiler.core import Compilation
    from stache.expression import Expression

REF_SUFFIX = "_ref"


class Block:
    """Base class for every block, including the root.

    Attributes:
        name: Helper name the block was opened with.
        local: Binding the block introduces for its body.
        this: Dotted path (resolved in the parent scope) that ``this`` stands
            for, or the root object name for the root block.
        counter: Identifier of the ``@index`` counter, if one was allocated.
        in_else: True once ``{{else}}`` was seen; paths in the else arm
            resolve without the block's binding.
    """

    name: ClassVar[str] = ""

    def __init__(
        self,
        local: Local = NO_LOCAL,
        this: str | None = None,
        counter: str | None = None,
    ):
        self.local = local
        self.this = this
        self.counter = counter
        self.in_else = False

    def closes_with(self, name: str) -> bool:
        """True if ``{{/name}}`` closes this block.

        ``_ref`` variants also accept their base name.
        """
        return name == self.name or name == self.name.removesuffix(REF_SUFFIX)

    def handle_else(self, compiler: Compilation, expression: Expression) -> None:
        raise ElseNotAllowedError(f"else is not supported inside {self.name or 'the template root'}")

    def handle_close(self, compiler: Compilation) -> None:
        compiler.pop_frame()

    def resolve_private(
        self, depth: int, name: str, expression: Expression | None = None
    ) -> ast.expr:
        raise UnboundPrivateVariableError(f"unexpected variable @{name}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(local={self.local!r}, this={self.this!r})"


class Root(Block):
    """Depth-0 block; ``this`` is the configured root object name."""

    def __init__(self, root_var_name: str | None = None):
        super().__init__(this=root_var_name)


class BlockFactory(Protocol):
    """Anything that opens a block for ``{{#name ...}}``.

    ``token`` is the helper-name token (its ``next()`` is the first
    argument) and ``expression`` the open marker.
    """

    def open(self, compiler: Compilation, token: Token, expression: Expression) -> Block: ...


def required_argument(token: Token) -> Token:
    """First argument after the helper name."""
    argument = token.next()
    if argument is None:
        raise MissingArgumentError(f"expected variable after {token.value}")
    return argument


def only_argument(token: Token) -> Token:
    """The single argument of a helper that accepts exactly one."""
    argument = required_argument(token)
    extra = argument.next()
    if extra is not None:
        raise ArityMismatchError(f"{token.value} expects one argument, got {extra.value}")
    return argument


def read_local(argument: Token) -> Local:
    """Read an optional ``as |name|`` clause after the block argument.

    Example:
        >>> read_local(Token.first("items as |item|")).name
        'item'
    """
    keyword = argument.next()
    if keyword is None:
        return THIS_LOCAL
    if keyword.type is not TokenType.PATH or keyword.value != "as":
        raise ArityMismatchError(f"unexpected token {keyword.value}")
    names = " ".join(token.value for token in keyword.rest()).strip().strip("|").strip()
    if not names:
        raise MissingArgumentError("expected variable after as")
    if not names.isidentifier() or names == "this" or names.startswith(INTERNAL_PREFIX):
        raise ArityMismatchError(f"invalid block parameter {names}")
    return Local.named(names)
