"""Write-call construction and coalescing.

Every piece of template output reaches the sink through a single statement
shape:

    out.write('literal text')
    out.write('Hello {}!'.format(as_display_html(root.name)))

``make_write`` builds it from an ordered list of pieces (literal strings and
value expressions); ``write_pieces`` recognises it again. The coalescing pass
uses the pair to merge runs of adjacent write statements into one call,
recursively through ``if`` and ``for`` bodies:

    out.write('<ul>')                      out.write('<ul>')
    for this_1 in root.items:              for this_1 in root.items:
        out.write('<li>')          =>          out.write('<li>{}</li>'.format(...))
        out.write('{}</li>'.format(...))

Merging is output preserving and idempotent: statements that are not write
calls on the sink (assignments, counters, loops) always break a run.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Sequence
from string import Formatter

from stache.compiler.utils import load

logger = logging.getLogger(__name__)

Piece = str | ast.expr

_FORMATTER = Formatter()


def _escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def normalize_pieces(pieces: Sequence[Piece]) -> list[Piece]:
    """Join adjacent literal pieces and drop empty ones."""
    result: list[Piece] = []
    for piece in pieces:
        if isinstance(piece, str):
            if not piece:
                continue
            if result and isinstance(result[-1], str):
                result[-1] += piece
                continue
        result.append(piece)
    return result


def make_write(writer: str, pieces: Sequence[Piece]) -> ast.stmt:
    """Build ``writer.write(...)`` for ``pieces``.

    Literal-only output is written as a plain string constant; otherwise the
    literals become a format string (braces doubled) with one ``{}`` field
    per value.
    """
    pieces = normalize_pieces(pieces)
    values = [piece for piece in pieces if not isinstance(piece, str)]
    if values:
        template = "".join(
            _escape_braces(piece) if isinstance(piece, str) else "{}" for piece in pieces
        )
        argument: ast.expr = ast.Call(
            func=ast.Attribute(value=ast.Constant(value=template), attr="format", ctx=ast.Load()),
            args=values,
            keywords=[],
        )
    else:
        argument = ast.Constant(value="".join(pieces))  # type: ignore[arg-type]
    return ast.Expr(
        value=ast.Call(
            func=ast.Attribute(value=load(writer), attr="write", ctx=ast.Load()),
            args=[argument],
            keywords=[],
        )
    )


def _format_pieces(template: str, values: list[ast.expr]) -> list[Piece] | None:
    pieces: list[Piece] = []
    remaining = iter(values)
    used = 0
    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError:
        return None
    for literal, field, spec, conversion in parsed:
        if literal:
            pieces.append(literal)
        if field is None:
            continue
        # Only auto-numbered fields without spec or conversion
        if field or spec or conversion:
            return None
        value = next(remaining, None)
        if value is None:
            return None
        pieces.append(value)
        used += 1
    if used != len(values):
        return None
    return pieces


def write_pieces(stmt: ast.stmt, writer: str) -> list[Piece] | None:
    """Return the pieces written by ``stmt``, or None if it is not a write call."""
    if not isinstance(stmt, ast.Expr) or not isinstance(stmt.value, ast.Call):
        return None
    call = stmt.value
    func = call.func
    if (
        not isinstance(func, ast.Attribute)
        or func.attr != "write"
        or not isinstance(func.value, ast.Name)
        or func.value.id != writer
        or len(call.args) != 1
        or call.keywords
    ):
        return None
    argument = call.args[0]
    if isinstance(argument, ast.Constant) and isinstance(argument.value, str):
        return [argument.value]
    if (
        isinstance(argument, ast.Call)
        and isinstance(argument.func, ast.Attribute)
        and argument.func.attr == "format"
        and isinstance(argument.func.value, ast.Constant)
        and isinstance(argument.func.value.value, str)
        and not argument.keywords
        and not any(isinstance(arg, ast.Starred) for arg in argument.args)
    ):
        return _format_pieces(argument.func.value.value, list(argument.args))
    return None


def coalesce_writes(body: list[ast.stmt], writer: str) -> list[ast.stmt]:
    """Merge adjacent write calls in ``body`` and in nested statement lists.

    Nested ``body``/``orelse`` lists of ``if``, ``for`` and ``while``
    statements are rewritten in place; the returned list replaces ``body``.
    """
    result: list[ast.stmt] = []
    run: list[Piece] = []
    run_length = 0
    merged = 0

    def close_run() -> None:
        nonlocal run, run_length, merged
        if run_length:
            result.append(make_write(writer, run))
            merged += run_length - 1
        run = []
        run_length = 0

    for stmt in body:
        pieces = write_pieces(stmt, writer)
        if pieces is not None:
            run.extend(pieces)
            run_length += 1
            continue
        close_run()
        if isinstance(stmt, (ast.If, ast.For, ast.While)):
            stmt.body = coalesce_writes(stmt.body, writer)
            if stmt.orelse:
                stmt.orelse = coalesce_writes(stmt.orelse, writer)
        result.append(stmt)
    close_run()

    if merged:
        logger.debug("Merged %d write statements", merged)
    return result


def optimize_source(code: str, writer: str) -> str:
    """Apply ``coalesce_writes`` to Python source text."""
    module = ast.parse(code)
    module.body = coalesce_writes(module.body, writer)
    ast.fix_missing_locations(module)
    return ast.unparse(module)
