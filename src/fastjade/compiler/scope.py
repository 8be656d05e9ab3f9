"""Local-name analysis for the generated render function.

Context values are globals of ``render()``. A name that template code
assigns anywhere in the function body is a local for the whole body, so a
read before the assignment would miss the context value. The compiler
seeds every such local from the context before the first template line:

    ```
    - total = total + 1
    p= total
    ```

    ```python
    def render(_context):
        _buf = []
        _append = _buf.append
        try:
            total = _context['total']
        except KeyError:
            pass
        total = total + 1
        ...
    ```

A name missing from the context stays unbound; reading it raises
``UnboundLocalError``, a ``NameError``, so output guards still render the
undefined marker.

Nested ``def``/``class``/``lambda`` bodies and comprehensions have their
own scopes and are not searched, except for the parts Python evaluates in
the enclosing scope (decorators, defaults, bases, the first iterable).
"""

from __future__ import annotations

import ast
from collections.abc import Iterable

# Names owned by the generated function itself
GENERATED_NAMES = frozenset({"_buf", "_append", "_context"})


class LocalNameCollector(ast.NodeVisitor):
    """Collect names bound in the visited scope.

    Attributes:
        assigned: Names bound by assignment, loops, imports, definitions
        declared: Names declared ``global`` or ``nonlocal`` (not locals)
    """

    def __init__(self) -> None:
        self.assigned: set[str] = set()
        self.declared: set[str] = set()

    @property
    def locals(self) -> set[str]:
        return self.assigned - self.declared - GENERATED_NAMES

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, (ast.Store, ast.Del)):
            self.assigned.add(node.id)

    def visit_Global(self, node: ast.Global) -> None:
        self.declared.update(node.names)

    visit_Nonlocal = visit_Global

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.name != "*":
                self.assigned.add(alias.asname or alias.name.split(".")[0])

    visit_ImportFrom = visit_Import

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.name:
            self.assigned.add(node.name)
        self.generic_visit(node)

    def visit_MatchAs(self, node: ast.MatchAs) -> None:
        if node.name:
            self.assigned.add(node.name)
        self.generic_visit(node)

    def visit_MatchStar(self, node: ast.MatchStar) -> None:
        if node.name:
            self.assigned.add(node.name)

    def visit_MatchMapping(self, node: ast.MatchMapping) -> None:
        if node.rest:
            self.assigned.add(node.rest)
        self.generic_visit(node)

    # Nested scopes: only the parts evaluated in the enclosing scope

    def _visit_all(self, nodes: Iterable[ast.AST | None]) -> None:
        for node in nodes:
            if node is not None:
                self.visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self.assigned.add(node.name)
        self._visit_all(node.decorator_list)
        self._visit_all(node.args.defaults)
        self._visit_all(node.args.kw_defaults)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.assigned.add(node.name)
        self._visit_all(node.decorator_list)
        self._visit_all(node.bases)
        self._visit_all(keyword.value for keyword in node.keywords)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self._visit_all(node.args.defaults)
        self._visit_all(node.args.kw_defaults)

    def _visit_comprehension(
        self, node: ast.ListComp | ast.SetComp | ast.DictComp | ast.GeneratorExp
    ) -> None:
        self.visit(node.generators[0].iter)
        # Assignment expressions bind in the enclosing scope
        for child in ast.walk(node):
            if isinstance(child, ast.NamedExpr) and isinstance(child.target, ast.Name):
                self.assigned.add(child.target.id)

    visit_ListComp = _visit_comprehension
    visit_SetComp = _visit_comprehension
    visit_DictComp = _visit_comprehension
    visit_GeneratorExp = _visit_comprehension


def local_names(body: Iterable[ast.stmt]) -> list[str]:
    """Names that ``body`` binds as locals of its function, sorted."""
    collector = LocalNameCollector()
    for stmt in body:
        collector.visit(stmt)
    return sorted(collector.locals)


def seed_from_context(name: str) -> ast.stmt:
    """Generate ``try: name = _context['name'] except KeyError: pass``."""
    return ast.Try(
        body=[
            ast.Assign(
                targets=[ast.Name(id=name, ctx=ast.Store())],
                value=ast.Subscript(
                    value=ast.Name(id="_context", ctx=ast.Load()),
                    slice=ast.Constant(value=name),
                    ctx=ast.Load(),
                ),
            )
        ],
        handlers=[
            ast.ExceptHandler(
                type=ast.Name(id="KeyError", ctx=ast.Load()),
                name=None,
                body=[ast.Pass()],
            )
        ],
        orelse=[],
        finalbody=[],
    )
