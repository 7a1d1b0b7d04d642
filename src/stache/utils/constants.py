"""Shared constants for stache.

Capability names are the runtime helper functions generated code calls.
They are collected per compilation in ``CompiledTemplate.uses`` so the host
can import exactly what the code needs from ``RUNTIME_MODULE``.
"""

from __future__ import annotations

RUNTIME_MODULE = "stache.template.helpers"

# Truthiness for if/unless
USE_AS_BOOL = "as_bool"
# {{{ value }}}
USE_AS_DISPLAY = "as_display"
# {{ value }}
USE_AS_DISPLAY_HTML = "as_display_html"
# {{lookup container index}}
USE_LOOKUP = "lookup"
# each blocks reading @key / @value
USE_AS_PAIRS = "as_pairs"

CAPABILITIES: frozenset[str] = frozenset(
    {USE_AS_BOOL, USE_AS_DISPLAY, USE_AS_DISPLAY_HTML, USE_LOOKUP, USE_AS_PAIRS}
)
