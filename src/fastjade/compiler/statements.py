"""Statement compilation for the fastjade compiler.

Provides the mixin that turns ``- code`` lines into Python AST:

- plain statements are parsed and spliced into the current body
- block headers (``if``, ``for``, ``while``, ``with``, ``try``, ``def``)
  become compound statements whose body is the nested template lines
- continuation clauses (``elif``, ``else``, ``except``, ``finally``) attach
  to the compound statement that precedes them in the same body

    ```
    - if user
      p= user.name
    - else
      p Anonymous
    ```

    ```python
    if user:
        try:
            _append('<p>' ...)
    else:
        _append('<p>Anonymous</p>\\n')
    ```

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
import re
from typing import TYPE_CHECKING

from fastjade.compiler.parts import Part
from fastjade.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
)
from fastjade.utils.constants import CONTINUATION_KEYWORDS

_CLAUSE_RE = re.compile(rf"({'|'.join(sorted(CONTINUATION_KEYWORDS))})\b")

_COMPOUND_TYPES = (
    ast.If,
    ast.For,
    ast.While,
    ast.With,
    ast.Try,
    ast.FunctionDef,
    ast.ClassDef,
)


def relocate(node: ast.AST, lineno: int) -> ast.AST:
    """Point ``node`` and everything below it at template line ``lineno``."""
    for child in ast.walk(node):
        if "lineno" in child._attributes:
            child.lineno = lineno
            child.end_lineno = lineno
            if getattr(child, "col_offset", None) is None:
                child.col_offset = 0
            end = getattr(child, "end_col_offset", None)
            if end is None or end < child.col_offset:
                child.end_col_offset = child.col_offset
    return node


class StatementCompilationMixin:
    """Mixin for compiling statement and block parts.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        _bodies: list[list[ast.stmt]]
        _elif_ids: set[int]
        _open_tries: list[ast.Try]
        _name: str | None

        def _line(self, lineno: int) -> str | None: ...

    def _compile_statement(self, part: Part) -> None:
        """Compile ``- code``: one or more statements, spliced verbatim."""
        try:
            module = ast.parse(part.value.strip())
        except (SyntaxError, ValueError) as exc:
            raise self._error(
                f"Invalid Python statement {part.value.strip()!r}",
                part,
                ErrorCode.INVALID_STATEMENT,
                exc,
            ) from exc
        for stmt in module.body:
            self._bodies[-1].append(relocate(stmt, part.lineno))

    def _compile_block_start(self, part: Part) -> None:
        header = part.value.strip()
        if header.endswith(":"):
            header = header[:-1].rstrip()

        clause = _CLAUSE_RE.match(header)
        if clause:
            body = self._attach_clause(clause.group(1), header, part)
        else:
            compound = self._parse_compound(header, part)
            self._bodies[-1].append(compound)
            body = compound.body
        self._bodies.append(body)

    def _compile_block_end(self, part: Part) -> None:
        if len(self._bodies) < 2:
            raise InternalCompilerError(
                f"block end on line {part.lineno} without an open block", self._name
            )
        body = self._bodies.pop()
        if not body:
            body.append(relocate(ast.Pass(), part.lineno))

    def _check_open_tries(self) -> None:
        for node in self._open_tries:
            if not node.handlers and not node.finalbody:
                raise TemplateCompileError(
                    "'try' block needs an 'except' or 'finally' clause",
                    node.lineno,
                    self._name,
                    self._line(node.lineno),
                    code=ErrorCode.ORPHAN_CLAUSE,
                )

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _parse_compound(self, header: str, part: Part) -> ast.stmt:
        """Parse a block header into a compound statement with an empty body."""
        is_try = header == "try"
        source = "try:\n    pass\nfinally:\n    pass" if is_try else f"{header}:\n    pass"
        try:
            module = ast.parse(source)
        except (SyntaxError, ValueError) as exc:
            raise self._error(
                f"Invalid block statement {header!r}",
                part,
                ErrorCode.INVALID_STATEMENT,
                exc,
            ) from exc

        node = module.body[0] if len(module.body) == 1 else None
        if not isinstance(node, _COMPOUND_TYPES):
            raise self._error(
                f"Statement {header!r} cannot have nested lines",
                part,
                ErrorCode.INVALID_STATEMENT,
            )
        relocate(node, part.lineno)
        node.body = []
        if isinstance(node, ast.Try):
            node.finalbody = []
            self._open_tries.append(node)
        return node

    def _chain_tail(self, node: ast.stmt | None) -> ast.stmt | None:
        """Follow an if/elif chain to its last ``If``."""
        while (
            isinstance(node, ast.If)
            and len(node.orelse) == 1
            and id(node.orelse[0]) in self._elif_ids
        ):
            node = node.orelse[0]
        return node

    def _attach_clause(self, keyword: str, header: str, part: Part) -> list[ast.stmt]:
        """Attach a continuation clause to the preceding compound statement."""
        current = self._bodies[-1]
        previous = current[-1] if current else None

        if keyword == "elif":
            target = self._chain_tail(previous)
            if isinstance(target, ast.If) and not target.orelse:
                branch = self._parse_compound("if" + header[len("elif") :], part)
                self._elif_ids.add(id(branch))
                target.orelse = [branch]
                return branch.body

        elif keyword == "else":
            if header != "else":
                raise self._error(
                    f"Invalid block statement {header!r}", part, ErrorCode.INVALID_STATEMENT
                )
            target = self._chain_tail(previous)
            if isinstance(target, (ast.If, ast.For, ast.While)) and not target.orelse:
                target.orelse = []
                return target.orelse
            if (
                isinstance(previous, ast.Try)
                and previous.handlers
                and not previous.orelse
                and not previous.finalbody
            ):
                previous.orelse = []
                return previous.orelse

        elif keyword == "except":
            if isinstance(previous, ast.Try) and not previous.orelse and not previous.finalbody:
                try:
                    module = ast.parse(f"try:\n    pass\n{header}:\n    pass")
                except (SyntaxError, ValueError) as exc:
                    raise self._error(
                        f"Invalid block statement {header!r}",
                        part,
                        ErrorCode.INVALID_STATEMENT,
                        exc,
                    ) from exc
                handler = relocate(module.body[0].handlers[0], part.lineno)
                handler.body = []
                previous.handlers.append(handler)
                return handler.body

        elif isinstance(previous, ast.Try) and not previous.finalbody and header == "finally":
            previous.finalbody = []
            return previous.finalbody

        raise self._error(
            f"'{keyword}' has no matching statement to continue",
            part,
            ErrorCode.ORPHAN_CLAUSE,
        )

    def _error(
        self,
        message: str,
        part: Part,
        code: ErrorCode,
        cause: BaseException | None = None,
    ) -> TemplateCompileError:
        return TemplateCompileError(
            message,
            part.lineno,
            self._name,
            self._line(part.lineno),
            code=code,
            cause=cause,
        )
