"""Attach a compiled template to a class.

    @template("<p>{{name}} is {{age}}</p>")
    class Person:
        def __init__(self, name, age):
            self.name = name
            self.age = age

    str(Person("Ann", 42))          # '<p>Ann is 42</p>'
    Person("Ann", 42).write_to(f)   # writes to any object with write(str)

The template is compiled once, when the class is decorated, with ``self`` as
the root object and ``f`` as the sink. The class gains ``write_to``,
``__str__`` and ``__html__``; the last one makes instances render unescaped
when they are used as values in other templates.
"""

from __future__ import annotations

import ast
import io
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from stache.compiler import Compiler, Options
from stache.environment.registry import BlockRegistry
from stache.template.helpers import STATIC_NAMESPACE

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

ROOT_NAME = "self"
WRITER_NAME = "f"


def _template_path(cls: type, path: str | Path) -> Path:
    file = Path(path)
    if file.is_absolute():
        return file
    module = sys.modules.get(cls.__module__)
    module_file = getattr(module, "__file__", None)
    base = Path(module_file).parent if module_file else Path.cwd()
    return base / file


def _build_write_to(code: ast.Module, filename: str) -> tuple[Callable[..., None], str]:
    module = ast.parse(f"def write_to({ROOT_NAME}, {WRITER_NAME}):\n    pass")
    function = module.body[0]
    if not isinstance(function, ast.FunctionDef):
        raise TypeError("write_to header did not parse to a function definition")
    function.body = list(code.body) or [ast.Pass()]
    ast.fix_missing_locations(module)
    source = ast.unparse(module)
    namespace: dict[str, Any] = dict(STATIC_NAMESPACE)
    exec(compile(source, filename, "exec"), namespace)
    return namespace["write_to"], source


def _str(self: Any) -> str:
    buffer = io.StringIO()
    self.write_to(buffer)
    return buffer.getvalue()


def _html(self: Any) -> str:
    return str(self)


def template(
    source: str | None = None,
    *,
    path: str | Path | None = None,
    blocks: BlockRegistry | None = None,
) -> Callable[[T], T]:
    """Class decorator compiling ``source`` (or the file at ``path``).

    Relative paths are resolved against the directory of the module that
    defines the class.

    Raises:
        TypeError: Neither or both of ``source`` and ``path`` were given.
        ParseError: The template is malformed.
    """
    if (source is None) == (path is None):
        raise TypeError("template() takes exactly one of source or path")

    def decorate(cls: T) -> T:
        if path is not None:
            file = _template_path(cls, path)
            logger.debug("Reading template %s for %s", file, cls.__qualname__)
            text = file.read_text(encoding="utf-8")
            name = str(file)
        elif source is not None:
            text = source
            name = f"<{cls.__qualname__}>"
        else:
            raise TypeError("template() takes exactly one of source or path")

        options = Options(root_var_name=ROOT_NAME, write_var_name=WRITER_NAME)
        compiled = Compiler(options, blocks).compile(text, name)
        write_to, generated = _build_write_to(compiled.module, name)
        write_to.__qualname__ = f"{cls.__qualname__}.write_to"

        cls.write_to = write_to
        cls.__str__ = _str
        cls.__html__ = _html
        cls.__stache_source__ = generated
        logger.debug("Attached template to %s (uses %s)", cls.__qualname__, sorted(compiled.uses))
        return cls

    return decorate
