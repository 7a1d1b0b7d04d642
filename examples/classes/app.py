"""Templates on classes -- the @template decorator.

Each decorated class is compiled once, at definition time. Instances render
with ``str()`` and can be used as values inside other templates without
being escaped twice.

Run:
    python app.py
"""

from pathlib import Path

from stache.derive import template

templates_dir = Path(__file__).parent / "templates"


@template("<b>{{name}}</b>")
class Person:
    def __init__(self, name: str) -> None:
        self.name = name


@template("<ul>{{#each members}}<li>{{this}}</li>{{/each}}</ul>")
class Team:
    def __init__(self, members: list[Person]) -> None:
        self.members = members


@template(path=templates_dir / "card.hbs")
class Card:
    def __init__(self, title: str, tags: list[str], author: Person | None = None) -> None:
        self.title = title
        self.tags = tags
        self.author = author


team = Team([Person("Ann"), Person("Bo & Co")])
card = Card("Release notes", ["python", "templates"], Person("Ann"))

output = str(team)


def main() -> None:
    print(output)
    print(card, end="")
    print(Card("Draft", []), end="")
    print()
    print(Card.__stache_source__)


if __name__ == "__main__":
    main()
