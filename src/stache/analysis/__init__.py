"""Static analysis of template text ahead of code generation."""

from __future__ import annotations

from stache.analysis.body import find_private_uses, has_else, split_parents

__all__ = ["find_private_uses", "has_else", "split_parents"]
