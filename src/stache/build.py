"""Generate Python functions from template files.

A template used this way starts with a comment holding the function header.
The first parameter is the sink the body writes to; the other parameters are
the names the template refers to at the top level:

    {{!def render_greeting(out, user)}}
    Hello {{user.name}}!

becomes

    from stache.template.helpers import as_display_html

    def render_greeting(out, user):
        out.write('\\nHello {}!\\n'.format(as_display_html(user.name)))

Typical use is a build step that writes the generated module next to the
application code, or ``GeneratedFunction.load()`` to get the function
directly.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stache.compiler import Compiler, Options
from stache.environment.exceptions import InvalidSignatureError, near_snippet
from stache.environment.registry import BlockRegistry
from stache.expression import ExpressionType, scan
from stache.template.helpers import STATIC_NAMESPACE

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedFunction:
    """A compiled template wrapped in a function definition.

    Attributes:
        name: Function name from the signature comment.
        uses: Runtime capability names the function body calls.
        source: Module source: the helper import line (if any) followed by
            the function definition.
    """

    name: str
    uses: frozenset[str]
    source: str

    def load(self) -> Callable[..., Any]:
        """Execute ``source`` and return the defined function."""
        namespace: dict[str, Any] = dict(STATIC_NAMESPACE)
        exec(compile(self.source, f"<stache:{self.name}>", "exec"), namespace)
        return namespace[self.name]


def _parse_signature(header: str) -> ast.FunctionDef:
    try:
        module = ast.parse(f"{header}:\n    pass")
    except SyntaxError as exc:
        raise InvalidSignatureError(
            f"invalid function signature: {exc.msg}", near=near_snippet(header)
        ) from exc
    if len(module.body) != 1 or not isinstance(module.body[0], ast.FunctionDef):
        raise InvalidSignatureError(
            "signature must be a single def statement", near=near_snippet(header)
        )
    function = module.body[0]
    if function.decorator_list:
        raise InvalidSignatureError("signature must not have decorators", near=near_snippet(header))
    return function


def _writer_name(function: ast.FunctionDef, header: str) -> str:
    params = [*function.args.posonlyargs, *function.args.args]
    if not params:
        raise InvalidSignatureError(
            "expected the first argument to be a writer", near=near_snippet(header)
        )
    return params[0].arg


def generate_function_from_str(
    src: str,
    blocks: BlockRegistry | None = None,
    *,
    name: str | None = None,
) -> GeneratedFunction:
    """Compile a template whose first marker is a ``{{!def ...}}`` comment.

    Args:
        src: Template text.
        blocks: Block registry; builtins when None.
        name: Template name used in error locations.

    Raises:
        InvalidSignatureError: Missing or malformed signature comment.
        ParseError: The template body is malformed.
    """
    first = scan(src)
    if first is None or first.type is not ExpressionType.COMMENT or first.prefix.strip():
        raise InvalidSignatureError(
            "first expression must be a comment containing the function signature",
            near=near_snippet(src[:64]) or None,
        )
    header = first.content.strip()
    function = _parse_signature(header)
    writer = _writer_name(function, header)

    compiled = Compiler(Options(write_var_name=writer), blocks).compile(first.postfix, name)
    function.body = list(compiled.module.body) or [ast.Pass()]
    module = ast.Module(body=[function], type_ignores=[])
    ast.fix_missing_locations(module)

    parts = [compiled.imports(), ast.unparse(module)]
    source = "\n\n".join(part for part in parts if part) + "\n"
    logger.debug("Generated function %s (writer=%s)", function.name, writer)
    return GeneratedFunction(name=function.name, uses=compiled.uses, source=source)


def generate_function_from_file(
    path: str | Path,
    blocks: BlockRegistry | None = None,
) -> GeneratedFunction:
    """Read a UTF-8 template file and compile it with ``generate_function_from_str``."""
    path = Path(path)
    logger.debug("Reading template %s", path)
    src = path.read_text(encoding="utf-8")
    return generate_function_from_str(src, blocks, name=str(path))
