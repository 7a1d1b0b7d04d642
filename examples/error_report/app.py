"""Error reports -- what a malformed template looks like.

Every compile error is a ``ParseError`` carrying an error code, the template
name and the position of the offending marker. ``format_compact()`` renders
it with a source snippet; colors follow ``NO_COLOR`` / ``FORCE_COLOR`` and
whether stderr is a terminal.

Run:
    python app.py
"""

from stache import Compiler, ParseError

BROKEN = {
    "unclosed.hbs": "<ul>\n{{#each items}}\n  <li>{{this}}</li>\n</ul>\n",
    "mismatched.hbs": "{{#if ready}}\nready\n{{/each}}\n",
    "scope.hbs": "{{#with user}}\n{{../../name}}\n{{/with}}\n",
    "unknown.hbs": "before\n{{#loop items}}{{/loop}}\n",
}


def collect_errors() -> dict[str, ParseError]:
    compiler = Compiler()
    errors: dict[str, ParseError] = {}
    for name, source in BROKEN.items():
        try:
            compiler.compile(source, name=name)
        except ParseError as exc:
            errors[name] = exc
    return errors


errors = collect_errors()


def main() -> None:
    for error in errors.values():
        print(error.format_compact())
        print()


if __name__ == "__main__":
    main()
