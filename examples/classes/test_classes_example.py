"""Tests for the classes example."""

import io


class TestClassesApp:
    """Verify decorated classes render correctly."""

    def test_nested_instances_are_not_escaped_twice(self, example_app) -> None:
        assert example_app.output == "<ul><li><b>Ann</b></li><li><b>Bo &amp; Co</b></li></ul>"

    def test_card_from_file(self, example_app) -> None:
        assert str(example_app.card) == (
            "<article><h2>Release notes</h2><span>python</span><span>templates</span>"
            "<p>by Ann</p></article>\n"
        )

    def test_card_fallbacks(self, example_app) -> None:
        card = example_app.Card("Draft", [])
        assert str(card) == "<article><h2>Draft</h2><em>untagged</em></article>\n"

    def test_write_to_any_sink(self, example_app) -> None:
        buffer = io.StringIO()
        example_app.Person("Cy").write_to(buffer)
        assert buffer.getvalue() == "<b>Cy</b>"
