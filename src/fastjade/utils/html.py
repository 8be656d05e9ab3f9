"""HTML escaping utilities.

Escaping is a single pass over the string via ``str.translate()``. Values
that implement ``__html__`` (``Markup`` here, or markupsafe-compatible
objects from other libraries) are trusted and passed through unchanged.

"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


class Markup(str):
    """A string that is already safe HTML and must not be escaped again.

    Example:
        >>> html_escape(Markup("<b>bold</b>"))
        '<b>bold</b>'
        >>> html_escape("<b>bold</b>")
        '&lt;b&gt;bold&lt;/b&gt;'

    """

    __slots__ = ()

    def __html__(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"Markup({super().__repr__()})"


def html_escape(value: Any) -> str:
    """Escape ``value`` for safe inclusion in HTML text or attribute values.

    Non-string values are converted with ``str()`` first, so ``None`` becomes
    ``'None'`` and ``True`` becomes ``'True'``.
    """
    html = getattr(value, "__html__", None)
    if html is not None:
        return html()
    return str(value).translate(_ESCAPE_TABLE)
