"""HTML markup nodes: elements, attributes, comments and text."""

from __future__ import annotations

from dataclasses import dataclass

from fastjade.nodes.base import Node


@dataclass(frozen=True, slots=True)
class LiteralAttribute:
    """Attribute with a literal value: ``key="value"``.

    ``value`` may contain ``#{}``/``!{}`` injections; literal parts are
    HTML-escaped when the element is linearized. A ``None`` value is a bare
    boolean attribute (``input(disabled)``).
    """

    name: str
    value: str | None


@dataclass(frozen=True, slots=True)
class ExpressionAttribute:
    """Attribute bound to a Python expression: ``key=expr``."""

    name: str
    expr: str


Attribute = LiteralAttribute | ExpressionAttribute


@dataclass(slots=True)
class Element(Node):
    """HTML element: ``tag#id.class(attr="v") content``"""

    tag: str
    attributes: tuple[Attribute, ...] = ()


@dataclass(slots=True)
class HtmlComment(Node):
    """Visible comment: ``// text``. Nested lines are comment lines."""

    text: str = ""


@dataclass(slots=True)
class Text(Node):
    """Literal text.

    With ``interpolate`` set, ``#{expr}`` and ``!{expr}`` markers are
    evaluated at render time. Children are further absorbed lines, each
    rendered on its own line.
    """

    value: str
    interpolate: bool = True
