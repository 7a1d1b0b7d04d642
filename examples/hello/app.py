"""Hello World -- the simplest stache example.

Compile a template from a string, look at the Python it becomes, then turn
it into a function and call it.

Run:
    python app.py
"""

import io

from stache import Compiler
from stache.build import generate_function_from_str

compiled = Compiler().compile("Hello, {{name}}!")

# Wrap the same template in a function header and load it
render = generate_function_from_str("{{!def render(out, name)}}Hello, {{name}}!").load()

buffer = io.StringIO()
render(buffer, "World")
output = buffer.getvalue()


def main() -> None:
    print(compiled.imports())
    print(compiled.code)
    print()
    print(output)

    # Multiple renders with different context
    for name in ["Stache", "<Python>"]:
        buffer = io.StringIO()
        render(buffer, name)
        print(buffer.getvalue())


if __name__ == "__main__":
    main()
