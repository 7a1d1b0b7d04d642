"""Runtime helper functions called by generated template code.

Generated code imports exactly the helpers listed in
``CompiledTemplate.uses``:

    from stache.template.helpers import as_bool, as_display_html

None of them hold state; they use only their parameters.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
)


def _plain(value: Any) -> str:
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def escape_html(text: str) -> str:
    """Escape ``& < > "`` for HTML text and attribute values."""
    return text.translate(_HTML_ESCAPES)


class Display:
    """Plain rendering of a value for ``{{{ value }}}``.

    ``None`` renders as the empty string and booleans in lower case, so
    templates read the same as their Handlebars counterparts.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __str__(self) -> str:
        return _plain(self.value)

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class DisplayHtml(Display):
    """HTML-escaped rendering of a value for ``{{ value }}``.

    Objects implementing ``__html__`` (markup-safe strings, or classes built
    with ``stache.derive.template``) are trusted and written unescaped.
    """

    __slots__ = ()

    def __str__(self) -> str:
        html = getattr(self.value, "__html__", None)
        if html is not None:
            return str(html())
        return escape_html(_plain(self.value))


def as_bool(value: Any) -> bool:
    """Truthiness used by ``if`` and ``unless``.

    Empty strings, empty collections, zero and None are false.
    """
    return bool(value)


def as_display(value: Any) -> Display:
    return Display(value)


def as_display_html(value: Any) -> DisplayHtml:
    return DisplayHtml(value)


def lookup(container: Any, index: Any) -> Any:
    """``container[index]``, or None when the entry does not exist.

    Example:
        >>> lookup(["a", "b"], 1), lookup({"k": 1}, "x"), lookup(None, 0)
        ('b', None, None)
    """
    if container is None:
        return None
    try:
        return container[index]
    except (LookupError, TypeError):
        return None


def as_pairs(value: Any) -> Iterable[tuple[Any, Any]]:
    """Pairs for ``@key`` / ``@value``: mapping items or enumerated items."""
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return value.items()
    return enumerate(value)


# Names generated code may call, for hosts executing code with exec()
STATIC_NAMESPACE: dict[str, Any] = {
    "as_bool": as_bool,
    "as_display": as_display,
    "as_display_html": as_display_html,
    "lookup": lookup,
    "as_pairs": as_pairs,
}
