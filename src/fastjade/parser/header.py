"""Element header sub-parser.

Parses the leading ``tag#id.class(attr="v", attr=expr)`` part of a line
and classifies what follows it:

    p.lead(title="Intro") Hello there
    ^ tag  ^ selectors    ^ modifier NONE, remainder "Hello there"

    a(href=url)= label
                ^ modifier EQ, remainder " label"

The header parser knows nothing about indentation or the node tree; the
line parser calls it once per markup line and turns the ``Header`` into
nodes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from fastjade.nodes.markup import Attribute, ExpressionAttribute, LiteralAttribute

_TAG_RE = re.compile(r"[A-Za-z][\w:-]*")
_SELECTORS_RE = re.compile(r"(?:[.#][\w-]+)+")
_SELECTOR_RE = re.compile(r"([.#])([\w-]+)")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_@:][\w@:.-]*")
# A bare attribute value is a single Python expression token
_BARE_VALUE_RE = re.compile(r"[^\s,()'\"]+")

DEFAULT_TAG = "div"


class AttributeSyntaxError(ValueError):
    """Malformed attribute list; the line parser reports it as a warning."""

    def __init__(self, message: str, column: int):
        self.column = column
        super().__init__(message)


class Modifier(Enum):
    """What follows the element header on the same line."""

    NONE = "none"  # end of line, or inline text after one space
    DOT = "dot"  # ``.``: nested lines are a text block
    EQ = "eq"  # ``=``: escaped expression
    BANG_EQ = "bang_eq"  # ``!=``: raw expression
    OTHER = "other"  # anything else directly after the header


@dataclass(frozen=True, slots=True)
class Header:
    """Result of parsing an element header.

    Attributes:
        tag: Element name, or None when the line has no tag/selector prefix
        attributes: Attribute fragments in render order
        modifier: What follows the header
        remainder: Text after the modifier
        has_attribute_list: The header carried a ``(...)`` list
    """

    tag: str | None
    attributes: tuple[Attribute, ...] = ()
    modifier: Modifier = Modifier.NONE
    remainder: str = ""
    has_attribute_list: bool = False


NOT_A_HEADER = Header(tag=None)


def parse_header(line: str) -> Header:
    """Parse the element header at the start of ``line``.

    ``line`` must already be stripped of its indentation. Returns
    ``NOT_A_HEADER`` when the line does not start with a tag or selector.

    Raises:
        AttributeSyntaxError: The ``(...)`` attribute list is malformed
    """
    pos = 0
    tag_match = _TAG_RE.match(line)
    tag = None
    if tag_match:
        tag = tag_match.group()
        pos = tag_match.end()

    element_id: str | None = None
    classes: list[str] = []
    selectors = _SELECTORS_RE.match(line, pos)
    if selectors:
        for kind, value in _SELECTOR_RE.findall(selectors.group()):
            if kind == "#":
                if element_id is None:
                    element_id = value
            else:
                classes.append(value)
        pos = selectors.end()

    if tag is None and not selectors:
        return NOT_A_HEADER

    attributes: list[Attribute] = []
    has_list = pos < len(line) and line[pos] == "("
    if has_list:
        attributes, pos = _parse_attribute_list(line, pos + 1)

    attributes = _merge_selectors(element_id, classes, attributes)
    modifier, remainder = _split_modifier(line[pos:])
    return Header(
        tag=tag or DEFAULT_TAG,
        attributes=tuple(attributes),
        modifier=modifier,
        remainder=remainder,
        has_attribute_list=has_list,
    )


def _split_modifier(rest: str) -> tuple[Modifier, str]:
    if not rest:
        return Modifier.NONE, ""
    if rest.startswith("!="):
        return Modifier.BANG_EQ, rest[2:]
    first = rest[0]
    if first == "=":
        return Modifier.EQ, rest[1:]
    if first == ".":
        return Modifier.DOT, rest[1:].lstrip()
    if first in " \t":
        return Modifier.NONE, rest[1:]
    return Modifier.OTHER, rest


def _merge_selectors(
    element_id: str | None,
    classes: list[str],
    attributes: list[Attribute],
) -> list[Attribute]:
    """Put selector id/class first, folding a literal ``class`` attribute in."""
    merged: list[Attribute] = []
    rest: list[Attribute] = []
    for attr in attributes:
        if (
            classes
            and attr.name == "class"
            and isinstance(attr, LiteralAttribute)
            and attr.value is not None
        ):
            classes = [*classes, attr.value]
            continue
        rest.append(attr)
    if element_id is not None:
        merged.append(LiteralAttribute("id", element_id))
    if classes:
        merged.append(LiteralAttribute("class", " ".join(classes)))
    merged.extend(rest)
    return merged


def _skip(line: str, pos: int, chars: str) -> int:
    while pos < len(line) and line[pos] in chars:
        pos += 1
    return pos


def _find_quote(line: str, start: int) -> int:
    """Index of the quote closing the string opened at ``start``, or -1."""
    quote = line[start]
    pos = start + 1
    while pos < len(line):
        char = line[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos
        pos += 1
    return -1


def _parse_attribute_list(line: str, pos: int) -> tuple[list[Attribute], int]:
    """Parse ``attr=value, ...)`` starting just after the opening paren.

    Returns the attributes and the position after the closing paren.
    """
    attributes: list[Attribute] = []
    while True:
        pos = _skip(line, pos, " \t,")
        if pos >= len(line):
            raise AttributeSyntaxError("unterminated attribute list", pos)
        if line[pos] == ")":
            return attributes, pos + 1

        name_match = _ATTR_NAME_RE.match(line, pos)
        if not name_match:
            raise AttributeSyntaxError(
                f"unexpected {line[pos]!r} in attribute list", pos
            )
        name = name_match.group()
        pos = _skip(line, name_match.end(), " \t")

        if pos < len(line) and line[pos] == "=":
            pos = _skip(line, pos + 1, " \t")
            if pos >= len(line):
                raise AttributeSyntaxError(f"missing value for attribute {name!r}", pos)
            if line[pos] in "\"'":
                end = _find_quote(line, pos)
                if end == -1:
                    raise AttributeSyntaxError(
                        f"unterminated string for attribute {name!r}", pos
                    )
                quote = line[pos]
                value = line[pos + 1 : end].replace("\\" + quote, quote)
                attributes.append(LiteralAttribute(name, value))
                pos = end + 1
            else:
                value_match = _BARE_VALUE_RE.match(line, pos)
                if not value_match:
                    raise AttributeSyntaxError(
                        f"missing value for attribute {name!r}", pos
                    )
                attributes.append(ExpressionAttribute(name, value_match.group()))
                pos = value_match.end()
        else:
            attributes.append(LiteralAttribute(name, None))

        if pos < len(line) and line[pos] not in " \t,)":
            raise AttributeSyntaxError(
                f"expected ',' or ')' after attribute {name!r}", pos
            )
