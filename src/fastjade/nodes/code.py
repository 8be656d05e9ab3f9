"""Embedded Python nodes: output expressions and statements."""

from __future__ import annotations

from dataclasses import dataclass

from fastjade.nodes.base import Node


@dataclass(slots=True)
class Output(Node):
    """Expression output: ``= expr`` (escaped) or ``!= expr`` (raw)."""

    expr: str
    escape: bool = True


@dataclass(slots=True)
class Statement(Node):
    """Python statement line: ``- code``.

    Children (deeper-indented lines) form the body of the statement, so
    ``- for item in items`` followed by nested lines is a loop.
    """

    code: str
