"""Base node class for the fastjade parse tree."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Node:
    """Base class for all parse-tree nodes.

    Nodes track the 1-based source line they came from. Children are kept in
    document order. The tree is built incrementally by the line parser, so
    nodes are mutable while the parser is inside their subtree; nothing
    changes them afterwards.

    Attributes:
        lineno: 1-based source line
        children: Child nodes in document order
        is_text: Deeper-indented lines are absorbed as literal text
            instead of being parsed as markup
    """

    lineno: int
    children: list[Node] = field(default_factory=list, kw_only=True)
    is_text: bool = field(default=False, kw_only=True)

    def add(self, child: Node) -> Node:
        self.children.append(child)
        return child
