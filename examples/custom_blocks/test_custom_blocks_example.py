"""Tests for the custom blocks example."""

import pytest

from stache import Compiler
from stache.environment.exceptions import UnknownHelperError


class TestCustomBlocksApp:
    def test_output(self, example_app) -> None:
        assert example_app.output == "*** good"

    def test_generated_loop(self, example_app) -> None:
        assert example_app.compiled.code == "\n".join(
            [
                "for _1 in range(rating.stars):",
                "    out.write('*')",
                "out.write(' {}'.format(as_display_html(rating.label)))",
            ]
        )

    def test_default_registry_is_untouched(self, example_app) -> None:
        with pytest.raises(UnknownHelperError):
            Compiler().compile(example_app.source)
