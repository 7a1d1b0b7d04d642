"""Block registry for the stache compiler.

Maps helper names (``{{#name ...}}``) to block factories with a dict-like
interface:

    - registry['name'] = factory
    - registry.update({'name': factory})
    - factory = registry['name']
    - 'name' in registry

All mutations use copy-on-write, so a compilation reading the registry
never observes a half-applied update from another thread.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stache.compiler.blocks import BlockFactory


class BlockRegistry:
    """Name → block factory table passed explicitly to a ``Compiler``."""

    __slots__ = ("_blocks",)

    def __init__(self, blocks: Mapping[str, BlockFactory] | None = None):
        self._blocks: dict[str, BlockFactory] = dict(blocks or {})

    @classmethod
    def with_builtins(cls) -> BlockRegistry:
        """Registry holding if, unless, if_some, with, each and their _ref variants."""
        from stache.compiler.blocks import add_builtins

        return add_builtins(cls())

    def __getitem__(self, name: str) -> BlockFactory:
        return self._blocks[name]

    def __setitem__(self, name: str, factory: BlockFactory) -> None:
        new = self._blocks.copy()
        new[name] = factory
        self._blocks = new

    def __delitem__(self, name: str) -> None:
        new = self._blocks.copy()
        del new[name]
        self._blocks = new

    def __contains__(self, name: object) -> bool:
        return name in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def get(self, name: str, default: BlockFactory | None = None) -> BlockFactory | None:
        return self._blocks.get(name, default)

    def update(self, mapping: Mapping[str, BlockFactory]) -> None:
        """Batch registration."""
        new = self._blocks.copy()
        new.update(mapping)
        self._blocks = new

    def copy(self) -> BlockRegistry:
        """Independent registry with the same entries."""
        return BlockRegistry(self._blocks)

    def keys(self):
        return self._blocks.keys()

    def values(self):
        return self._blocks.values()

    def items(self):
        return self._blocks.items()

    def __repr__(self) -> str:
        return f"BlockRegistry({sorted(self._blocks)!r})"
