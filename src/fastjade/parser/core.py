"""Indentation-sensitive line parser.

Turns template source into a tree of ``fastjade.nodes`` objects. Each line
is classified by its first characters; its parent is the nearest open line
with strictly smaller indentation.

Indentation frames:
    The parser keeps an explicit stack of ``(width, node)`` frames, local to
    one ``parse()`` call. A new line pops every frame whose width is greater
    than or equal to its own, attaches to the frame left on top, and pushes
    itself. Tabs and spaces both count as one column.

Text blocks:
    Nodes flagged ``is_text`` (pipe text, ``tag.``, ``script``/``style``,
    comments, filters) absorb every following line that is indented deeper
    than they are. The block's indentation is fixed by its first content
    line; deeper lines keep their extra leading whitespace.

Error recovery:
    A bad line never aborts the parse. It is reported as a warning through
    the diagnostics collector and replaced by a placeholder node.

Example:
    >>> tree = Parser("ul\\n  li one\\n  li two").parse()
    >>> [child.tag for child in tree.children[0].children]
    ['li', 'li']

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from fastjade.environment.diagnostics import DiagnosticCollector
from fastjade.environment.exceptions import ErrorCode, InternalCompilerError
from fastjade.nodes import (
    Element,
    Extends,
    FilterBlock,
    HtmlComment,
    Include,
    Node,
    Output,
    Statement,
    SuppressedComment,
    Template,
    Text,
)
from fastjade.parser.filters import DEFAULT_FILTERS, ContentFilter
from fastjade.parser.header import AttributeSyntaxError, Modifier, parse_header
from fastjade.utils.constants import (
    DEFAULT_DOCTYPE,
    DOCTYPES,
    RAW_TEXT_ELEMENTS,
    VOID_ELEMENTS,
)

_DOCTYPE_RE = re.compile(r"doctype(?:\s+(.*?))?\s*$", re.IGNORECASE)
_FILTER_RE = re.compile(r":([\w-]+)[ \t]?(.*)$")
_REFERENCE_RE = re.compile(r"(include|extends)\b\s*(.*)$")


def _indent_width(line: str) -> int:
    """Index of the first non-whitespace character, or len(line) if blank."""
    return len(line) - len(line.lstrip())


@dataclass(slots=True)
class _TextBlock:
    """An open text-consuming node and the state of its absorbed lines."""

    owner: Node
    parent: Node
    indent: int
    text_indent: int = -1
    pending_blank: int = 0


class Parser:
    """Parse template source into a ``Template`` node tree.

    Attributes:
        _source: Template source text
        _name: Template label for diagnostics
        _filters: Content filters by name
        _diagnostics: Warning channel

    """

    __slots__ = ("_diagnostics", "_filters", "_name", "_source")

    def __init__(
        self,
        source: str,
        name: str | None = None,
        filters: Mapping[str, ContentFilter] | None = None,
        diagnostics: DiagnosticCollector | None = None,
    ):
        self._source = source
        self._name = name
        self._filters = {**DEFAULT_FILTERS, **(filters or {})}
        self._diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector(name)

    def parse(self) -> Template:
        """Parse the whole source. An empty source yields an empty root."""
        root = Template()
        frames: list[tuple[int, Node]] = [(-1, root)]
        block: _TextBlock | None = None

        for lineno, line in enumerate(self._source.replace("\r", "").split("\n"), start=1):
            width = _indent_width(line)

            if block is not None:
                if self._absorb(block, line, width, lineno):
                    continue
                self._close_block(block)
                block = None

            if width == len(line):
                continue

            while frames[-1][0] >= width:
                frames.pop()
            parent = frames[-1][1]

            if _is_void(parent) and not parent.children:
                self._diagnostics.warning(
                    f"<{parent.tag}> is a void element; nested lines are ignored",
                    lineno,
                    line,
                    ErrorCode.VOID_ELEMENT_CONTENT,
                )

            node = self._parse_line(line[width:], lineno, line)
            parent.add(node)
            frames.append((width, node))
            if node.is_text:
                block = _TextBlock(node, parent, width)

        if block is not None:
            self._close_block(block)
        return root

    # ─────────────────────────────────────────────────────────────────────────
    # Text blocks
    # ─────────────────────────────────────────────────────────────────────────

    def _absorb(self, block: _TextBlock, line: str, width: int, lineno: int) -> bool:
        """Add ``line`` to the open text block. False if the line ends it."""
        if width == len(line):
            if block.text_indent != -1:
                block.pending_blank += 1
            return True
        if width <= block.indent:
            return False
        if block.text_indent == -1:
            block.text_indent = width
        for _ in range(block.pending_blank):
            self._append_text(block.owner, "", lineno)
        block.pending_blank = 0
        self._append_text(block.owner, line[min(width, block.text_indent) :], lineno)
        return True

    @staticmethod
    def _append_text(owner: Node, text: str, lineno: int) -> None:
        if isinstance(owner, FilterBlock):
            owner.lines.append(text)
        elif not isinstance(owner, SuppressedComment):
            owner.add(Text(lineno, text))

    def _close_block(self, block: _TextBlock) -> None:
        owner = block.owner
        if not isinstance(owner, FilterBlock):
            return
        siblings = block.parent.children
        if not siblings or siblings[-1] is not owner:
            raise InternalCompilerError(
                f"filter block on line {owner.lineno} is not the last child of its parent",
                self._name,
            )
        content_filter = self._filters.get(owner.name)
        if content_filter is None:
            siblings[-1] = SuppressedComment(owner.lineno)
        else:
            siblings[-1] = content_filter(owner.lines, owner.lineno)

    # ─────────────────────────────────────────────────────────────────────────
    # Line dispatch
    # ─────────────────────────────────────────────────────────────────────────

    def _parse_line(self, text: str, lineno: int, line: str) -> Node:
        """Classify one stripped, non-blank line and build its node."""
        first = text[0]

        if first == "|":
            value = text[1:]
            if value.startswith(" "):
                value = value[1:]
            return Text(lineno, value, is_text=True)

        if first == "=":
            return Output(lineno, text[1:].strip())

        if text.startswith("!="):
            return Output(lineno, text[2:].strip(), escape=False)

        if text.startswith("//-"):
            return SuppressedComment(lineno, is_text=True)

        if text.startswith("//"):
            return HtmlComment(lineno, text=text[2:].strip(), is_text=True)

        doctype = _DOCTYPE_RE.match(text)
        if doctype:
            return Text(lineno, _doctype(doctype.group(1)), interpolate=False)

        if first == "-":
            return Statement(lineno, text[1:].strip())

        if first == ":":
            return self._parse_filter(text, lineno, line)

        reference = _REFERENCE_RE.match(text)
        if reference:
            keyword, target = reference.groups()
            self._diagnostics.warning(
                f"'{keyword}' is not supported; line ignored",
                lineno,
                line,
                ErrorCode.UNSUPPORTED_INCLUDE,
            )
            node_type = Include if keyword == "include" else Extends
            return node_type(lineno, target.strip())

        return self._parse_element(text, lineno, line)

    def _parse_filter(self, text: str, lineno: int, line: str) -> Node:
        match = _FILTER_RE.match(text)
        if not match:
            return Text(lineno, text)
        name, inline = match.groups()
        if name not in self._filters:
            self._diagnostics.warning(
                f"Unknown filter ':{name}'; block discarded",
                lineno,
                line,
                ErrorCode.UNKNOWN_FILTER,
            )
        lines = [inline] if inline else []
        return FilterBlock(lineno, name, lines, is_text=True)

    def _parse_element(self, text: str, lineno: int, line: str) -> Node:
        try:
            header = parse_header(text)
        except AttributeSyntaxError as exc:
            self._diagnostics.warning(
                f"Invalid attribute list: {exc}; line ignored",
                lineno,
                line,
                ErrorCode.ATTRIBUTE_SYNTAX,
            )
            return SuppressedComment(lineno, is_text=True)

        if header.tag is None or (
            header.modifier is Modifier.OTHER and not header.has_attribute_list
        ):
            return Text(lineno, text)

        element = Element(lineno, header.tag, header.attributes)
        modifier = header.modifier
        if modifier is Modifier.EQ:
            element.add(Output(lineno, header.remainder.strip()))
        elif modifier is Modifier.BANG_EQ:
            element.add(Output(lineno, header.remainder.strip(), escape=False))
        elif modifier is Modifier.DOT:
            element.is_text = True
            if header.remainder:
                element.add(Text(lineno, header.remainder))
        else:
            if header.remainder:
                element.add(Text(lineno, header.remainder))
            if modifier is Modifier.NONE and header.tag.lower() in RAW_TEXT_ELEMENTS:
                element.is_text = True

        if _is_void(element) and (element.children or element.is_text):
            self._diagnostics.warning(
                f"<{element.tag}> is a void element; its content is ignored",
                lineno,
                line,
                ErrorCode.VOID_ELEMENT_CONTENT,
            )
        return element


def _is_void(node: Node) -> bool:
    return isinstance(node, Element) and node.tag.lower() in VOID_ELEMENTS


def _doctype(argument: str | None) -> str:
    if not argument:
        return DEFAULT_DOCTYPE
    return DOCTYPES.get(argument.lower(), f"<!DOCTYPE {argument}>")


def parse(
    source: str,
    name: str | None = None,
    filters: Mapping[str, ContentFilter] | None = None,
    diagnostics: DiagnosticCollector | None = None,
) -> Template:
    """Parse ``source`` into a node tree. See ``Parser``."""
    return Parser(source, name, filters, diagnostics).parse()
