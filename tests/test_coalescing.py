"""Tests for write-call construction and the coalescing pass."""

from __future__ import annotations

import ast

import pytest

from stache.compiler.coalescing import (
    coalesce_writes,
    make_write,
    normalize_pieces,
    optimize_source,
    write_pieces,
)


def unparse(stmt: ast.stmt) -> str:
    return ast.unparse(stmt)


class TestMakeWrite:
    def test_literal_only(self):
        assert unparse(make_write("out", ["a", "b"])) == "out.write('ab')"

    def test_literal_braces_are_not_doubled_without_values(self):
        assert unparse(make_write("out", ["{x}"])) == "out.write('{x}')"

    def test_format_with_values(self):
        value = ast.Name(id="v", ctx=ast.Load())
        assert unparse(make_write("w", ["{", value, "}"])) == "w.write('{{{}}}'.format(v))"

    def test_quotes_are_handled_by_unparse(self):
        stmt = make_write("out", ["it's \"quoted\"\n"])
        assert ast.literal_eval(stmt.value.args[0]) == "it's \"quoted\"\n"

    def test_normalize_pieces(self):
        value = ast.Name(id="v", ctx=ast.Load())
        assert normalize_pieces(["a", "", "b", value, "", "c"]) == ["ab", value, "c"]


class TestWritePieces:
    def test_round_trip_recognition(self):
        stmt = ast.parse("out.write('a{}b'.format(x))").body[0]
        pieces = write_pieces(stmt, "out")
        assert pieces[0] == "a"
        assert isinstance(pieces[1], ast.Name)
        assert pieces[2] == "b"

    @pytest.mark.parametrize(
        "code",
        [
            "other.write('a')",
            "out.write('a', 'b')",
            "out.write(1)",
            "out.flush()",
            "out.write('{0}'.format(x))",
            "out.write('{!r}'.format(x))",
            "out.write('{}{}'.format(x))",
            "out.write('{}'.format(*xs))",
            "x = 1",
        ],
    )
    def test_non_write_statements(self, code):
        assert write_pieces(ast.parse(code).body[0], "out") is None


class TestCoalesceWrites:
    def test_merges_adjacent(self):
        code = "out.write('a')\nout.write('{}'.format(x))\nout.write('b')"
        assert optimize_source(code, "out") == "out.write('a{}b'.format(x))"

    def test_other_statements_break_runs(self):
        code = "out.write('a')\ny = 1\nout.write('b')"
        assert optimize_source(code, "out") == code

    def test_recurses_into_blocks(self):
        code = "\n".join(
            [
                "for x in xs:",
                "    out.write('a')",
                "    out.write('b')",
                "if c:",
                "    out.write('c')",
                "    out.write('d')",
                "else:",
                "    out.write('e')",
                "    out.write('f')",
            ]
        )
        assert optimize_source(code, "out") == "\n".join(
            [
                "for x in xs:",
                "    out.write('ab')",
                "if c:",
                "    out.write('cd')",
                "else:",
                "    out.write('ef')",
            ]
        )

    def test_braces_survive_merge(self):
        code = "out.write('{')\nout.write('{}'.format(x))\nout.write('}')"
        assert optimize_source(code, "out") == "out.write('{{{}}}'.format(x))"

    def test_other_writer_untouched(self):
        code = "w.write('a')\nw.write('b')"
        assert optimize_source(code, "out") == code

    def test_idempotent(self):
        code = "out.write('a')\nout.write('{}'.format(x))\nif y:\n    out.write('b')\n    out.write('c')"
        once = optimize_source(code, "out")
        assert optimize_source(once, "out") == once

    def test_empty_body(self):
        assert coalesce_writes([], "out") == []
