"""Shared hypothesis strategies for stache property-based testing.

Provides reusable strategies that generate template inputs at two levels:

- **Scanner**: Literal text without markers, and arbitrary text
- **Templates**: Well-formed templates built from values and nested blocks

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Scanner strategies
# ---------------------------------------------------------------------------

# Plain text that cannot open a marker (no braces, no backslashes)
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{}\\\x00",
    ),
    min_size=1,
    max_size=200,
)

# Arbitrary text that might stress the scanner (fuzz-like)
arbitrary_template_source = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

# ---------------------------------------------------------------------------
# Template strategies
# ---------------------------------------------------------------------------

# Identifiers safe to use as template paths (no Python keywords, no "this")
safe_identifier = st.sampled_from(
    [
        "x",
        "y",
        "a",
        "b",
        "val",
        "item",
        "count",
        "name",
        "data",
        "title",
        "flag",
        "total",
    ]
)

# Literal text safe inside templates (no braces, no whitespace trimming issues)
literal_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("Ll", "Lu", "Nd"),
        whitelist_characters=" <>&\"'.,!-\n",
    ),
    min_size=0,
    max_size=20,
)

value_marker = st.one_of(
    safe_identifier.map(lambda name: f"{{{{{name}}}}}"),
    safe_identifier.map(lambda name: f"{{{{{{{name}}}}}}}"),
    safe_identifier.map(lambda name: f"{{{{../{name}}}}}"),
)

_block_names = st.sampled_from(["if", "unless", "with", "each", "if_some"])


def _wrap(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    return st.tuples(_block_names, safe_identifier, children, st.booleans()).map(
        lambda parts: _block(*parts)
    )


def _block(name: str, arg: str, body: str, with_else: bool) -> str:
    if with_else and name != "with":
        return f"{{{{#{name} {arg}}}}}{body}{{{{else}}}}{body}{{{{/{name}}}}}"
    return f"{{{{#{name} {arg}}}}}{body}{{{{/{name}}}}}"


# Well-formed templates: literals and values nested in balanced blocks.
# ``../`` values are only generated where they stay resolvable because each
# template is wrapped in at least one block.
template_body = st.recursive(
    st.lists(st.one_of(literal_text, value_marker), max_size=4).map("".join),
    lambda children: st.lists(st.one_of(children, _wrap(children)), min_size=1, max_size=3).map(
        "".join
    ),
    max_leaves=12,
)

well_formed_template = st.tuples(safe_identifier, template_body).map(
    lambda parts: f"{{{{#with {parts[0]}}}}}{parts[1]}{{{{/with}}}}"
)
