"""Content filters: ``:name`` blocks.

A filter receives the raw lines of the text block nested under it and
returns the node that replaces the block in the tree. Filters run at parse
time; the linearizer only ever sees their result.

    :javascript
      console.log("#{user.name}")

becomes a ``<script type="text/javascript">`` element with the lines as
text children.

Custom filters are registered through ``Environment(filters=...)``:

    >>> def shout(lines, lineno):
    ...     return Text(lineno, " ".join(lines).upper())
    >>> env = Environment(filters={"shout": shout})

"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from fastjade.nodes import Element, LiteralAttribute, Node, Text

ContentFilter = Callable[[list[str], int], Node]


def javascript(lines: list[str], lineno: int) -> Node:
    """Wrap the block in an inline ``<script>`` element."""
    script = Element(
        lineno,
        "script",
        (LiteralAttribute("type", "text/javascript"),),
    )
    for line in lines:
        script.add(Text(lineno, line))
    return script


DEFAULT_FILTERS: Mapping[str, ContentFilter] = {
    "javascript": javascript,
}
