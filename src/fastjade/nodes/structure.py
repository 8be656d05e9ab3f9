"""Template structure nodes: root, comments, filters and file references."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastjade.nodes.base import Node


@dataclass(slots=True)
class Template(Node):
    """Root node representing a complete template."""

    lineno: int = 0


@dataclass(slots=True)
class SuppressedComment(Node):
    """Template-only comment (``//-``) or a placeholder for a broken line.

    Parsed so that indentation stays consistent; renders nothing.
    """


@dataclass(slots=True)
class FilterBlock(Node):
    """Content filter: ``:name`` followed by an absorbed text block.

    Exists only while the parser collects the block; the filter then
    replaces it with its result node.
    """

    name: str
    lines: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Include(Node):
    """``include path``: recognized but not supported. Renders nothing."""

    target: str


@dataclass(slots=True)
class Extends(Node):
    """``extends path``: recognized but not supported. Renders nothing."""

    target: str
