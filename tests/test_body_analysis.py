"""Tests for the block body pre-scan."""

from __future__ import annotations

import pytest

from stache.analysis import find_private_uses, has_else, split_parents


class TestSplitParents:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("title", (0, "title")),
            ("../title", (1, "title")),
            ("../../a.b", (2, "a.b")),
            ("../", (1, "")),
        ],
    )
    def test_split(self, path, expected):
        assert split_parents(path) == expected


class TestFindPrivateUses:
    def test_direct_use(self):
        assert find_private_uses("{{@index}}{{/each}}") == {"index"}

    def test_stops_at_block_close(self):
        assert find_private_uses("{{/each}}{{@index}}") == frozenset()

    def test_nested_use_needs_parent_prefix(self):
        body = "{{#if a}}{{@../index}}{{/if}}{{/each}}"
        assert find_private_uses(body) == {"index"}

    def test_nested_use_without_prefix_belongs_to_inner_block(self):
        body = "{{#each b}}{{@index}}{{/each}}{{/each}}"
        assert find_private_uses(body) == frozenset()

    def test_inside_sub_expression(self):
        assert find_private_uses("{{lookup items @key}}{{/each}}") == {"key"}

    def test_block_argument_counts_at_current_depth(self):
        assert find_private_uses("{{#with @value}}{{/with}}{{/each}}") == {"value"}

    def test_triple_brace_values(self):
        assert find_private_uses("{{{@index}}}") == {"index"}

    def test_ignores_comments_and_escapes(self):
        body = "{{! @index }}\\{{@index}}{{{{raw}}}}{{@key}}{{{{/raw}}}}"
        assert find_private_uses(body) == frozenset()


class TestHasElse:
    def test_else_at_depth_zero(self):
        assert has_else("a{{else}}b{{/each}}")

    def test_no_else(self):
        assert not has_else("a{{/each}}")

    def test_else_of_nested_block(self):
        assert not has_else("{{#if x}}a{{else}}b{{/if}}{{/each}}")

    def test_else_after_close_is_not_ours(self):
        assert not has_else("a{{/each}}{{else}}")

    def test_else_with_padding(self):
        assert has_else("{{ else }}{{/each}}")
