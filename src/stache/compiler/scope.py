"""Scope chain and path resolution.

Scopes form an arena: ``_scopes[d]`` is the scope at nesting depth ``d``, and
the parent of scope ``d`` is always ``_scopes[d - 1]``. The root scope at
depth 0 is created with the compilation and is never popped.

Resolution happens entirely at compile time. A template path becomes a
Python expression over the identifiers the blocks introduced:

    {{name}}              root.name          (root name "root")
    {{#each items}}       for this_1 in root.items:
      {{title}}             this_1.title
      {{../title}}          root.title
      {{@index}}            _i_1
    {{/each}}

Identifiers a block binds are recorded; a free-standing root name (no root
object configured) that equals one of them, or a runtime helper, is a
compile error rather than a silent capture. Bookkeeping names (counters,
flags) start with ``_``, which block parameters may not.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
import keyword
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from stache.analysis import split_parents
from stache.compiler.utils import attribute_path, is_index, load
from stache.utils.constants import CAPABILITIES
from stache.environment.exceptions import (
    MismatchedBlockCloseError,
    UnresolvableScopeError,
)

if TYPE_CHECKING:
    from stache.compiler.blocks.base import Block
    from stache.expression import Expression


class LocalKind(Enum):
    """How a block binds the value it introduces."""

    NONE = 1
    THIS = 2
    AS = 3


@dataclass(frozen=True, slots=True)
class Local:
    """Binding introduced by a block.

    ``THIS`` rebinds the implicit context (``this``, ``this.x`` and ``x`` all
    read from it); ``AS`` binds only the given name (``as |item|``), leaving
    other paths to the enclosing scopes.
    """

    kind: LocalKind
    name: str | None = None

    @classmethod
    def named(cls, name: str) -> Local:
        return cls(LocalKind.AS, name)

    def identifier(self, depth: int) -> str:
        """Python identifier holding the bound value at ``depth``."""
        base = self.name if self.kind is LocalKind.AS and self.name else "this"
        return f"{base}_{depth}"


# Prefix of bookkeeping identifiers (loop counters, else flags)
INTERNAL_PREFIX = "_"

NO_LOCAL = Local(LocalKind.NONE)
THIS_LOCAL = Local(LocalKind.THIS)


@dataclass(frozen=True, slots=True)
class Scope:
    """One level of the scope stack.

    Attributes:
        depth: Arena index (0 for the root).
        block: The block that owns this scope.
        frames: Number of output frames open before the block was opened.
    """

    depth: int
    block: Block
    frames: int = 1

    @property
    def parent_depth(self) -> int | None:
        return self.depth - 1 if self.depth > 0 else None


def _check_segment(part: str, path: str, *, first: bool) -> None:
    if is_index(part) and not first:
        return
    if not part.isidentifier() or keyword.iskeyword(part):
        raise UnresolvableScopeError(f"invalid path segment {part!r} in {path}")


class ScopeMixin:
    """Mixin owning the scope stack and path resolution.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    __slots__ = ()

    if TYPE_CHECKING:
        # Host attributes (from Compilation.__init__)
        _scopes: list[Scope]
        _bound: set[str]
        _free: set[str]
        _reserved: frozenset[str]

    @property
    def current_scope(self) -> Scope:
        return self._scopes[-1]

    @property
    def depth(self) -> int:
        """Depth of the innermost open scope."""
        return len(self._scopes) - 1

    @property
    def next_depth(self) -> int:
        """Depth the next opened block will receive."""
        return len(self._scopes)

    def push_scope(self, block: Block, frames: int) -> Scope:
        scope = Scope(depth=self.next_depth, block=block, frames=frames)
        self._scopes.append(scope)
        return scope

    def pop_scope(self) -> Scope:
        if len(self._scopes) == 1:
            raise MismatchedBlockCloseError("no open block to close")
        return self._scopes.pop()

    def bind(self, identifier: str) -> str:
        """Claim ``identifier`` for generated code and return it.

        Blocks call this for every name they assign. Binding the same name
        twice is fine (sibling blocks at one depth share identifiers).

        Raises:
            UnresolvableScopeError: The template already uses ``identifier``
                as a free-standing name, or it is the sink or root name.
        """
        if identifier in self._reserved or identifier in self._free:
            raise UnresolvableScopeError(
                f"block binding {identifier} collides with a name the template uses"
            )
        self._bound.add(identifier)
        return identifier

    def local_identifier(self, local: Local) -> str:
        """Identifier for a block about to be opened with ``local``."""
        return self.bind(local.identifier(self.next_depth))

    def find_scope(self, path: str) -> tuple[str, Scope]:
        """Strip leading ``../`` segments and return the landing scope.

        Raises:
            UnresolvableScopeError: More parents than open scopes.
        """
        parents, rest = split_parents(path)
        depth = self.depth - parents
        if depth < 0:
            raise UnresolvableScopeError(f"unable to resolve scope for {path}")
        return rest, self._scopes[depth]

    def resolve_path(self, path: str) -> ast.expr:
        """Compile a PATH token to a Python expression."""
        rest, scope = self.find_scope(path)
        parts = rest.split(".")
        for i, part in enumerate(parts):
            _check_segment(part, path, first=i == 0)
        return self._resolve_parts(parts, scope.depth, path)

    def resolve_private(self, value: str, expression: Expression | None = None) -> ast.expr:
        """Compile a PRIVATE token (``@index``, ``@../key``) to an expression."""
        name, scope = self.find_scope(value)
        return scope.block.resolve_private(scope.depth, name, expression)

    def _resolve_parts(self, parts: list[str], depth: int, path: str) -> ast.expr:
        block = self._scopes[depth].block

        if depth == 0:
            if parts[0] == "this":
                parts = parts[1:]
            if block.this is not None:
                return attribute_path(load(block.this), parts)
            if not parts or not parts[0].isidentifier():
                raise UnresolvableScopeError(f"{path} has no root object to refer to")
            self._use_free_name(parts[0], path)
            return attribute_path(load(parts[0]), parts[1:])

        # An else arm runs without the block's binding
        local = NO_LOCAL if block.in_else else block.local
        if local.kind is LocalKind.AS:
            if parts[0] == local.name:
                return attribute_path(load(local.identifier(depth)), parts[1:])
        elif local.kind is LocalKind.THIS:
            if parts[0] == "this":
                parts = parts[1:]
            return attribute_path(load(local.identifier(depth)), parts)

        if block.this is not None:
            base = self._resolve_parts(block.this.split("."), depth - 1, path)
            if parts[0] == "this":
                parts = parts[1:]
            return attribute_path(base, parts)
        return self._resolve_parts(parts, depth - 1, path)

    def _use_free_name(self, name: str, path: str) -> None:
        if name in self._bound:
            raise UnresolvableScopeError(f"{path} collides with a name bound by a block")
        if name in CAPABILITIES:
            raise UnresolvableScopeError(f"{path} shadows the runtime helper {name}")
        self._free.add(name)
