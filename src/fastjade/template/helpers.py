"""Pure runtime helper functions injected into the template namespace.

These functions are called by compiled template code at render time.
None of them close over Environment state; they are pure functions of
their arguments.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import builtins
import re
from collections.abc import Callable, Mapping
from typing import Any

from fastjade.utils.html import Markup, html_escape

_UPPER_RE = re.compile(r"[A-Z]")


def css_string(value: Any) -> str:
    """Convert a mapping of style properties to a CSS declaration string.

    Keys are converted from camelCase to kebab-case. Strings pass through.

    Example:
        >>> css_string({"fontSize": "12px", "color": "red"})
        'font-size:12px; color:red'
    """
    if isinstance(value, str):
        return value
    return "; ".join(
        f"{_UPPER_RE.sub(lambda m: '-' + m.group().lower(), key)}:{item}"
        for key, item in value.items()
    )


def render_attribute(name: str, thunk: Callable[[], Any]) -> str:
    """Render one expression-valued attribute, including its leading space.

    The value is produced by calling ``thunk`` so that a name missing from
    the render context can be caught here rather than aborting the render.

    Value Rules:
        - undefined name, ``None`` or ``False``: attribute omitted
        - ``True``: bare attribute (`` checked``)
        - mapping under ``style``: CSS declaration string
        - list or tuple under ``class``: space-joined
        - anything else: ``str()`` then HTML-escaped

    Example:
        >>> render_attribute("href", lambda: "/a?b=1&c=2")
        ' href="/a?b=1&amp;c=2"'
        >>> render_attribute("disabled", lambda: True)
        ' disabled'
    """
    try:
        value = thunk()
    except NameError:
        return ""
    if value is None or value is False:
        return ""
    if value is True:
        return f" {name}"
    if name == "style" and isinstance(value, Mapping):
        value = css_string(value)
    elif name == "class" and isinstance(value, (list, tuple)):
        value = " ".join(str(item) for item in value if item is not None and item is not False)
    return f' {name}="{html_escape(value)}"'


# =============================================================================
# Shared Base Namespace
# =============================================================================
# Entries shared by every render call. Template copies this dict once and
# overlays the caller's context on each render.
#
# Thread-Safety: This dict is read-only after module load.
# =============================================================================

# Names generated code depends on; applied last so context cannot shadow them
RESERVED_NAMESPACE: dict[str, Any] = {
    "__builtins__": builtins,
    "_e": html_escape,
    "_s": str,
    "_attr": render_attribute,
}

STATIC_NAMESPACE: dict[str, Any] = {
    **RESERVED_NAMESPACE,
    "css": css_string,
    "Markup": Markup,
}
