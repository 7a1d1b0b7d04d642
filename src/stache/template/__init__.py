"""Runtime support for generated template code.

Re-exports the helper functions so hosts can write
``from stache.template import STATIC_NAMESPACE``.

"""

from stache.template.helpers import (
    STATIC_NAMESPACE,
    Display,
    DisplayHtml,
    as_bool,
    as_display,
    as_display_html,
    as_pairs,
    escape_html,
    lookup,
)

__all__ = [
    "STATIC_NAMESPACE",
    "Display",
    "DisplayHtml",
    "as_bool",
    "as_display",
    "as_display_html",
    "as_pairs",
    "escape_html",
    "lookup",
]
