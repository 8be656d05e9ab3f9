"""Linear output parts: the interface between linearizer and synthesizer.

A template flattens into a sequence of parts. Literal text is merged as it
is appended, so a part list never holds two adjacent ``TEXT`` parts and the
synthesizer emits one ``_append()`` per run of literal output.

    p Hello #{name}!
    → [TEXT "<p>Hello ", ESCAPED "name", TEXT "!</p>\\n"]

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class PartKind(Enum):
    TEXT = "text"  # literal output
    ESCAPED = "escaped"  # expression, HTML-escaped, undefined-guarded
    RAW = "raw"  # expression, unescaped, undefined-guarded
    UNCHECKED = "unchecked"  # expression appended as-is (attribute helpers)
    STATEMENT = "statement"  # Python statement(s), emitted verbatim
    BLOCK_START = "block_start"  # compound statement header opening a body
    BLOCK_END = "block_end"  # closes the innermost BLOCK_START


@dataclass(frozen=True, slots=True)
class Part:
    """One linear unit of template output or control flow."""

    kind: PartKind
    value: str = ""
    lineno: int = 0


class PartsCombinator:
    """Accumulates parts, merging consecutive literal text.

    Empty text is dropped. The merged part keeps the line number of the
    first text it absorbed.

    Example:
        >>> parts = PartsCombinator()
        >>> parts.add(PartKind.TEXT, "<p>")
        >>> parts.add(PartKind.TEXT, "hi</p>")
        >>> list(parts)
        [Part(kind=<PartKind.TEXT: 'text'>, value='<p>hi</p>', lineno=0)]
    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[Part] = []

    def add(self, kind: PartKind, value: str = "", lineno: int = 0) -> None:
        if kind is PartKind.TEXT:
            if not value:
                return
            if self._parts and self._parts[-1].kind is PartKind.TEXT:
                last = self._parts[-1]
                self._parts[-1] = Part(PartKind.TEXT, last.value + value, last.lineno)
                return
        self._parts.append(Part(kind, value, lineno))

    def text(self, value: str, lineno: int = 0) -> None:
        self.add(PartKind.TEXT, value, lineno)

    @property
    def parts(self) -> list[Part]:
        return list(self._parts)

    def __iter__(self) -> Iterator[Part]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)
