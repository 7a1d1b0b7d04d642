"""Tests for function generation from signature-headed templates."""

from __future__ import annotations

import ast
import io

import pytest

from stache.build import generate_function_from_file, generate_function_from_str
from stache.environment.exceptions import (
    InvalidSignatureError,
    ParseError,
    UnresolvableScopeError,
)

from .conftest import obj


class TestGenerateFromStr:
    def test_literal_function(self):
        generated = generate_function_from_str("{{!def write(writer)}}Hello, World!")
        assert generated.name == "write"
        assert generated.uses == frozenset()
        assert generated.source == "def write(writer):\n    writer.write('Hello, World!')\n"

    def test_import_line_comes_first(self):
        generated = generate_function_from_str("{{!def greet(out, name)}}Hi {{name}}")
        assert generated.source == (
            "from stache.template.helpers import as_display_html\n\n"
            "def greet(out, name):\n"
            "    out.write('Hi {}'.format(as_display_html(name)))\n"
        )
        ast.parse(generated.source)

    def test_empty_body_gets_pass(self):
        generated = generate_function_from_str("{{!def nothing(out)}}")
        assert generated.source == "def nothing(out):\n    pass\n"

    def test_signature_with_defaults_and_annotations(self):
        generated = generate_function_from_str(
            "{{!def page(f: object, title: str = 'x', *, items=())}}"
            "{{title}}{{#each items}}{{this}}{{/each}}"
        )
        function = generated.load()
        buffer = io.StringIO()
        function(buffer, items=[1, 2])
        assert buffer.getvalue() == "x12"

    def test_load_returns_callable(self):
        function = generate_function_from_str("{{!def hello(out, who)}}Hello {{who}}!").load()
        buffer = io.StringIO()
        function(buffer, "<you>")
        assert buffer.getvalue() == "Hello &lt;you&gt;!"

    def test_body_errors_propagate(self):
        with pytest.raises(UnresolvableScopeError):
            generate_function_from_str("{{!def f(out)}}{{../x}}")


class TestInvalidSignatures:
    @pytest.mark.parametrize(
        "src",
        [
            "",
            "no markers",
            "{{x}}",
            "text {{!def f(out)}}",
            "{{!not python}}",
            "{{!x = 1}}",
            "{{!def f()}}",
            "{{!def f(*, out)}}",
            "{{!async def f(out)}}",
        ],
    )
    def test_rejected(self, src):
        with pytest.raises(InvalidSignatureError):
            generate_function_from_str(src)


class TestGenerateFromFile:
    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "card.hbs"
        path.write_text("{{!def card(out, name)}}<p>{{name}} ✓</p>", encoding="utf-8")
        generated = generate_function_from_file(path)
        buffer = io.StringIO()
        generated.load()(buffer, "Zoë")
        assert buffer.getvalue() == "<p>Zoë ✓</p>"

    def test_errors_carry_file_name(self, tmp_path):
        path = tmp_path / "broken.hbs"
        path.write_text("{{!def broken(out)}}{{#if x}}", encoding="utf-8")
        with pytest.raises(ParseError) as exc_info:
            generate_function_from_file(path)
        assert exc_info.value.name == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            generate_function_from_file(tmp_path / "missing.hbs")


class TestControlFlowFunctions:
    def test_each_with_index_and_else(self):
        function = generate_function_from_str(
            "{{!def rows(out, xs)}}{{#each xs}}{{@index}}:{{this}};{{else}}none{{/each}}"
        ).load()
        buffer = io.StringIO()
        function(buffer, ["a", "b"])
        function(buffer, [])
        assert buffer.getvalue() == "0:a;1:b;none"

    def test_with_block(self):
        function = generate_function_from_str(
            "{{!def card(out, user)}}{{#with user}}{{name}}{{/with}}"
        ).load()
        buffer = io.StringIO()
        function(buffer, obj(name="Ann"))
        assert buffer.getvalue() == "Ann"
