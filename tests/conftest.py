"""Pytest configuration and fixtures for stache tests."""

from __future__ import annotations

import io
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from stache import Compiler, Options
from stache.build import generate_function_from_str


@pytest.fixture
def compiler():
    """Compiler with no root object and sink ``out``."""
    return Compiler()


@pytest.fixture
def compile_code() -> Callable[..., str]:
    """Compile a template and return only the generated code."""

    def _compile(source: str, root: str | None = None, writer: str = "out") -> str:
        options = Options(root_var_name=root, write_var_name=writer)
        return Compiler(options).compile(source).code

    return _compile


@pytest.fixture
def render() -> Callable[..., str]:
    """Compile a template into a function and call it with ``context``.

    Every keyword becomes a parameter of the generated function, so the
    template refers to them as top-level names.
    """

    def _render(source: str, **context: Any) -> str:
        params = ", ".join(["out", *sorted(context)])
        function = generate_function_from_str(f"{{{{!def render({params})}}}}{source}").load()
        buffer = io.StringIO()
        function(buffer, **context)
        return buffer.getvalue()

    return _render


def obj(**attrs: Any) -> SimpleNamespace:
    """Attribute-style context object for templates."""
    return SimpleNamespace(**attrs)


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert the result contains all expected parts.

    Args:
        result: Generated code or rendered output.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in result, (
            f"Output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
