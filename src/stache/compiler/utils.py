"""Small AST constructors shared by the compiler mixins.

Nodes carry no source positions; callers run ``ast.fix_missing_locations``
on the finished tree before ``ast.unparse``.
"""

from __future__ import annotations

import ast


def load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def store(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Store())


def call(func: str, *args: ast.expr) -> ast.Call:
    """``func(*args)`` for a runtime helper or other global name."""
    return ast.Call(func=load(func), args=list(args), keywords=[])


def assign(name: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[store(name)], value=value)


def attribute_path(base: ast.expr, parts: list[str]) -> ast.expr:
    """Apply dotted segments to ``base``; all-digit segments become subscripts.

    Example:
        >>> ast.unparse(attribute_path(load("root"), ["items", "0", "name"]))
        'root.items[0].name'
    """
    node = base
    for part in parts:
        if is_index(part):
            node = ast.Subscript(value=node, slice=ast.Constant(value=int(part)), ctx=ast.Load())
        else:
            node = ast.Attribute(value=node, attr=part, ctx=ast.Load())
    return node


def is_index(part: str) -> bool:
    return part.isascii() and part.isdigit()
