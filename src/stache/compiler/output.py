"""Pending-write batching and output frames.

Literal text and value expressions are not written as soon as they are
seen. They accumulate as pending writes and are flushed as one formatted
write call when control flow is about to be emitted (or the template ends),
so ``Hello {{name}}!`` becomes a single statement:

    out.write('Hello {}!'.format(as_display_html(root.name)))

Statements are appended to the innermost *frame*: the statement list of the
block body currently being generated (the module body, an ``if`` body, a
``for`` body, an else arm). Blocks push the list they own and pop it when
their body ends.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stache.compiler.coalescing import make_write
from stache.compiler.utils import call

if TYPE_CHECKING:
    from stache.compiler.core import Options


@dataclass(frozen=True, slots=True)
class Literal:
    """Pending literal text."""

    text: str


@dataclass(frozen=True, slots=True)
class Value:
    """Pending value, already wrapped in its display capability."""

    expr: ast.expr
    capability: str


PendingWrite = Literal | Value


class OutputMixin:
    """Mixin for batching writes and managing output frames.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    __slots__ = ()

    if TYPE_CHECKING:
        # Host attributes (from Compilation.__init__)
        _options: Options
        _frames: list[list[ast.stmt]]
        _pending: list[PendingWrite]

        # From Compilation
        def require(self, capability: str) -> None: ...

    def write_literal(self, text: str) -> None:
        if text:
            self._pending.append(Literal(text))

    def write_value(self, expr: ast.expr, capability: str) -> None:
        """Queue ``capability(expr)`` for output."""
        self.require(capability)
        self._pending.append(Value(call(capability, expr), capability))

    def flush(self) -> None:
        """Emit pending writes as one write call and clear them."""
        if not self._pending:
            return
        pieces = [item.text if isinstance(item, Literal) else item.expr for item in self._pending]
        self._pending.clear()
        self.emit(make_write(self._options.write_var_name, pieces))

    def emit(self, stmt: ast.stmt) -> None:
        """Append a statement to the innermost frame.

        Pending writes must already be flushed; emitting control flow past
        them would reorder the output.
        """
        self._frames[-1].append(stmt)

    def push_frame(self, body: list[ast.stmt]) -> None:
        self._frames.append(body)

    def pop_frame(self) -> list[ast.stmt]:
        """Close the innermost frame; an empty body receives ``pass``."""
        if len(self._frames) == 1:
            raise RuntimeError("cannot pop the module frame")
        body = self._frames.pop()
        if not body:
            body.append(ast.Pass())
        return body
