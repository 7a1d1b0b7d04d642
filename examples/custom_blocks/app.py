"""Custom blocks -- extending the compiler with a BlockRegistry.

A block is a class with an ``open`` classmethod that emits Python AST nodes
and opens an output frame for the body. Registering it under a name makes
``{{#name ...}}`` available in templates.

Run:
    python app.py
"""

import ast
import io

from stache import Block, Compiler, Options
from stache.build import generate_function_from_str
from stache.compiler.blocks import only_argument
from stache.compiler.utils import call, store
from stache.environment.registry import BlockRegistry


class Repeat(Block):
    """``{{#repeat n}}...{{/repeat}}`` writes its body ``n`` times."""

    name = "repeat"

    @classmethod
    def open(cls, compiler, token, expression):
        count = compiler.compile_token(only_argument(token))
        loop = ast.For(
            target=store(compiler.bind(f"_{compiler.next_depth}")),
            iter=call("range", count),
            body=[],
            orelse=[],
        )
        compiler.emit(loop)
        compiler.push_frame(loop.body)
        return cls()


blocks = BlockRegistry.with_builtins()
blocks["repeat"] = Repeat

source = "{{#repeat stars}}*{{/repeat}} {{label}}"

compiled = Compiler(Options(root_var_name="rating"), blocks).compile(source)

rate = generate_function_from_str(
    "{{!def rate(out, stars, label)}}" + source,
    blocks,
).load()

buffer = io.StringIO()
rate(buffer, 3, "good")
output = buffer.getvalue()


def main() -> None:
    print(compiled.code)
    print()
    print(output)


if __name__ == "__main__":
    main()
