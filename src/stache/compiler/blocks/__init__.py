"""Builtin blocks.

Each builtin is a ``Block`` subclass whose ``open`` classmethod makes the
class itself a block factory. ``add_builtins`` installs them into a
``BlockRegistry`` under their helper names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stache.compiler.blocks.base import (
    Block,
    BlockFactory,
    Root,
    only_argument,
    read_local,
    required_argument,
)
from stache.compiler.blocks.conditionals import If, IfSome, IfSomeRef, Unless
from stache.compiler.blocks.loops import Each, EachRef
from stache.compiler.blocks.with_blocks import With, WithRef

if TYPE_CHECKING:
    from stache.environment.registry import BlockRegistry

BUILTIN_BLOCKS: dict[str, BlockFactory] = {
    block.name: block
    for block in (If, Unless, IfSome, IfSomeRef, With, WithRef, Each, EachRef)
}


def add_builtins(registry: BlockRegistry) -> BlockRegistry:
    """Install the builtin blocks into ``registry`` and return it."""
    registry.update(BUILTIN_BLOCKS)
    return registry


__all__ = [
    "BUILTIN_BLOCKS",
    "Block",
    "BlockFactory",
    "Each",
    "EachRef",
    "If",
    "IfSome",
    "IfSomeRef",
    "Root",
    "Unless",
    "With",
    "WithRef",
    "add_builtins",
    "only_argument",
    "read_local",
    "required_argument",
]
