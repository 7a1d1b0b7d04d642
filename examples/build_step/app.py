"""Build step -- turn a directory of templates into one Python module.

Each ``.hbs`` file starts with a ``{{!def ...}}`` header naming the function
it becomes. The build joins the generated functions under a single helper
import, which is what a project would write to disk and import like any
other module.

Run:
    python app.py
"""

import io
from pathlib import Path
from typing import Any

from stache.build import GeneratedFunction, generate_function_from_file
from stache.template.helpers import STATIC_NAMESPACE
from stache.utils.constants import RUNTIME_MODULE

templates_dir = Path(__file__).parent / "templates"


def build_module(functions: list[GeneratedFunction]) -> str:
    """Join generated functions into module source with one import line."""
    uses = sorted(set().union(*(function.uses for function in functions)))
    parts = [f"from {RUNTIME_MODULE} import {', '.join(uses)}"] if uses else []
    for function in functions:
        # Drop each function's own import line; the module has a shared one.
        body = function.source.split("\n\n", 1)[-1] if function.uses else function.source
        parts.append(body.rstrip("\n"))
    return "\n\n\n".join(parts) + "\n"


functions = [generate_function_from_file(path) for path in sorted(templates_dir.glob("*.hbs"))]
module_source = build_module(functions)

namespace: dict[str, Any] = dict(STATIC_NAMESPACE)
exec(compile(module_source, "<generated>", "exec"), namespace)


def render(name: str, *args: Any) -> str:
    buffer = io.StringIO()
    namespace[name](buffer, *args)
    return buffer.getvalue()


output = render("render_list", "Menu", ["tea", "<cake>"])


def main() -> None:
    print(module_source)
    print(output)


if __name__ == "__main__":
    main()
