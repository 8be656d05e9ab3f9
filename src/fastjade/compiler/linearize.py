"""Part linearizer: node tree → ordered part list.

Walks the tree depth-first and emits ``Part`` objects through a
``PartsCombinator``. Layout rules:

- Every output-producing child of the root is followed by a newline.
- An element with more than one child, or whose single child has children
  of its own, is a block: a newline follows the opening tag and every
  output-producing child. A single leaf child is rendered inline.
- Statements produce no output; their children inherit the enclosing
  block mode.
- Elements nested under an output line are each followed by a newline.
- Tag names are emitted in lowercase.

Example:
    ```
    ul
      - for item in items
        li= item
    ```
    → ``[TEXT "<ul>\\n", BLOCK_START "for item in items",
    TEXT "<li>", ESCAPED "item", TEXT "</li>\\n", BLOCK_END, TEXT "</ul>\\n"]``

"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from fastjade.compiler.parts import Part, PartKind, PartsCombinator
from fastjade.environment.exceptions import InternalCompilerError
from fastjade.nodes import (
    Element,
    ExpressionAttribute,
    HtmlComment,
    Node,
    Output,
    Statement,
    Template,
    Text,
)
from fastjade.utils.constants import COMPOUND_KEYWORDS, VOID_ELEMENTS
from fastjade.utils.html import html_escape

_INJECTION_RE = re.compile(r"[#!]\{")
_KEYWORD_RE = re.compile(r"[A-Za-z_]+")

# Node types followed by a newline in block layout
_OUTPUT_NODES = (Element, HtmlComment, Output, Text)


def split_injections(value: str) -> list[tuple[PartKind, str]]:
    """Split text on ``#{expr}`` (escaped) and ``!{expr}`` (raw) markers.

    An unterminated marker takes the rest of the string as its expression.

    Example:
        >>> split_injections("Hi #{name}!")
        [(PartKind.TEXT, 'Hi '), (PartKind.ESCAPED, 'name'), (PartKind.TEXT, '!')]
    """
    pieces: list[tuple[PartKind, str]] = []
    pos = 0
    while True:
        marker = _INJECTION_RE.search(value, pos)
        if marker is None:
            if pos < len(value):
                pieces.append((PartKind.TEXT, value[pos:]))
            return pieces
        if marker.start() > pos:
            pieces.append((PartKind.TEXT, value[pos : marker.start()]))
        kind = PartKind.ESCAPED if value[marker.start()] == "#" else PartKind.RAW
        end = value.find("}", marker.end())
        if end == -1:
            pieces.append((kind, value[marker.end() :]))
            return pieces
        pieces.append((kind, value[marker.end() : end]))
        pos = end + 1


def opens_block(code: str) -> bool:
    """True if a statement line is a compound statement header."""
    if code.rstrip().endswith(":"):
        return True
    keyword = _KEYWORD_RE.match(code)
    return keyword is not None and keyword.group() in COMPOUND_KEYWORDS


class Linearizer:
    """Flatten a parse tree into parts.

    Node Dispatch:
        O(1) dict lookup on the node class name. A node type without a
        handler is a compiler bug and raises ``InternalCompilerError``.

    """

    __slots__ = ("_dispatch", "_name", "_parts")

    def __init__(self, name: str | None = None):
        self._name = name
        self._parts = PartsCombinator()
        self._dispatch: dict[str, Callable[[Node, bool], None]] = {
            "Template": self._linearize_template,
            "Element": self._linearize_element,
            "Text": self._linearize_text,
            "HtmlComment": self._linearize_comment,
            "Output": self._linearize_output,
            "Statement": self._linearize_statement,
            "SuppressedComment": self._skip,
            "Include": self._skip,
            "Extends": self._skip,
        }

    def linearize(self, tree: Template) -> list[Part]:
        self._parts = PartsCombinator()
        self._visit(tree, True)
        return self._parts.parts

    def _visit(self, node: Node, block: bool) -> None:
        handler = self._dispatch.get(type(node).__name__)
        if handler is None:
            raise InternalCompilerError(
                f"no linearizer for node type {type(node).__name__} "
                f"(line {node.lineno})",
                self._name,
            )
        handler(node, block)

    def _children(self, children: Sequence[Node], block: bool) -> None:
        for child in children:
            self._visit(child, block)
            if block and isinstance(child, _OUTPUT_NODES):
                self._parts.text("\n", child.lineno)

    def _inject(self, value: str, lineno: int) -> None:
        for kind, piece in split_injections(value):
            self._parts.add(kind, piece, lineno)

    # ─────────────────────────────────────────────────────────────────────────
    # Handlers
    # ─────────────────────────────────────────────────────────────────────────

    def _linearize_template(self, node: Node, block: bool) -> None:
        self._children(node.children, True)

    def _skip(self, node: Node, block: bool) -> None:
        pass

    def _linearize_text(self, node: Text, block: bool) -> None:
        if node.interpolate:
            self._inject(node.value, node.lineno)
        else:
            self._parts.text(node.value, node.lineno)
        for child in node.children:
            self._parts.text("\n", child.lineno)
            self._visit(child, False)

    def _linearize_element(self, node: Element, block: bool) -> None:
        parts = self._parts
        tag = node.tag.lower()
        parts.text(f"<{tag}", node.lineno)
        self._attributes(node)
        if tag in VOID_ELEMENTS:
            parts.text("/>", node.lineno)
            return

        parts.text(">", node.lineno)
        children = node.children
        is_block = len(children) > 1 or (len(children) == 1 and bool(children[0].children))
        if is_block:
            parts.text("\n", node.lineno)
        self._children(children, is_block)
        parts.text(f"</{tag}>", node.lineno)

    def _attributes(self, node: Element) -> None:
        parts = self._parts
        for attr in node.attributes:
            if isinstance(attr, ExpressionAttribute):
                parts.add(
                    PartKind.UNCHECKED,
                    f"_attr({attr.name!r}, lambda: ({attr.expr}))",
                    node.lineno,
                )
            elif attr.value is None:
                parts.text(f" {attr.name}", node.lineno)
            else:
                parts.text(f' {attr.name}="', node.lineno)
                for kind, piece in split_injections(attr.value):
                    if kind is PartKind.TEXT:
                        piece = html_escape(piece)
                    parts.add(kind, piece, node.lineno)
                parts.text('"', node.lineno)

    def _linearize_comment(self, node: HtmlComment, block: bool) -> None:
        parts = self._parts
        parts.text("<!--", node.lineno)
        if node.text:
            parts.text(" ", node.lineno)
            self._inject(node.text, node.lineno)
        if node.children:
            for child in node.children:
                parts.text("\n", child.lineno)
                self._visit(child, False)
            parts.text("\n-->", node.lineno)
        else:
            parts.text(" -->" if node.text else "-->", node.lineno)

    def _linearize_output(self, node: Output, block: bool) -> None:
        kind = PartKind.ESCAPED if node.escape else PartKind.RAW
        self._parts.add(kind, node.expr, node.lineno)
        for child in node.children:
            self._visit(child, False)
            if isinstance(child, Element):
                self._parts.text("\n", child.lineno)

    def _linearize_statement(self, node: Statement, block: bool) -> None:
        if node.children or opens_block(node.code):
            self._parts.add(PartKind.BLOCK_START, node.code, node.lineno)
            self._children(node.children, block)
            self._parts.add(PartKind.BLOCK_END, "", node.lineno)
        else:
            self._parts.add(PartKind.STATEMENT, node.code, node.lineno)


def linearize(tree: Template, name: str | None = None) -> list[Part]:
    """Flatten ``tree`` into a part list. See ``Linearizer``."""
    return Linearizer(name).linearize(tree)
