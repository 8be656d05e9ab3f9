"""fastjade Compiler Core: part list → Python code object.

The Compiler synthesizes an ``ast.Module`` defining one function,
``render(_context)``, from a linearized part list, then compiles it.

Design Principles:
1. **AST-to-AST**: Generate ``ast.Module``, not source strings
2. **StringBuilder**: Output via ``_append()``, join at end
3. **Local caching**: ``_buf.append`` bound once as ``_append``
4. **Template lines**: every generated statement carries the line number of
   the template line it came from, so tracebacks point into the template

Generated shape:

    ```python
    def render(_context):
        _buf = []
        _append = _buf.append
        _append('<p>')
        try:
            _append(_e(name))
        except NameError:
            _append('undefined')
        _append('</p>\\n')
        return ''.join(_buf)
    ```

Names referenced by template code resolve against the function globals,
which ``Template`` builds per render from the helper namespace plus the
caller's context. Names assigned by template statements become locals
seeded from the context (see ``fastjade.compiler.scope``).

"""

from __future__ import annotations

import ast
import types
from collections.abc import Callable, Iterable

from fastjade.compiler.parts import Part, PartKind
from fastjade.compiler.scope import local_names, seed_from_context
from fastjade.compiler.statements import StatementCompilationMixin, relocate
from fastjade.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
)
from fastjade.utils.constants import UNDEFINED_TEXT

RENDER_FUNCTION = "render"


class Compiler(StatementCompilationMixin):
    """Compile part lists to Python code objects.

    Attributes:
        _name: Template name for error messages
        _filename: Filename passed to ``compile()``; tracebacks match on it
        _source_lines: Template source lines, for error snippets
        _bodies: Stack of statement lists; the top receives new statements
        _elif_ids: ids of ``If`` nodes created from ``elif`` lines
        _open_tries: ``Try`` nodes awaiting ``except``/``finally``

    Part Dispatch:
        O(1) dict lookup on ``Part.kind``. A kind without a handler raises
        ``InternalCompilerError``.

    Example:
        >>> from fastjade.compiler.parts import Part, PartKind
        >>> code = Compiler("hello").compile([Part(PartKind.TEXT, "<p>hi</p>\\n", 1)])
        >>> namespace = {}
        >>> exec(code, namespace)
        >>> namespace["render"]({})
        '<p>hi</p>\\n'

    """

    __slots__ = (
        "_bodies",
        "_elif_ids",
        "_filename",
        "_name",
        "_open_tries",
        "_part_dispatch",
        "_source_lines",
    )

    def __init__(
        self,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._name = name
        self._filename = filename
        self._source_lines = source.replace("\r", "").split("\n") if source else []
        self._bodies: list[list[ast.stmt]] = []
        self._elif_ids: set[int] = set()
        self._open_tries: list[ast.Try] = []
        self._part_dispatch: dict[PartKind, Callable[[Part], None]] = {
            PartKind.TEXT: self._compile_text,
            PartKind.ESCAPED: self._compile_escaped,
            PartKind.RAW: self._compile_raw,
            PartKind.UNCHECKED: self._compile_unchecked,
            PartKind.STATEMENT: self._compile_statement,
            PartKind.BLOCK_START: self._compile_block_start,
            PartKind.BLOCK_END: self._compile_block_end,
        }

    def compile(self, parts: Iterable[Part]) -> types.CodeType:
        """Compile ``parts`` to a code object defining ``render(_context)``.

        Raises:
            TemplateCompileError: Embedded Python that does not compile
            InternalCompilerError: Malformed part list
        """
        return self.compile_module(self.synthesize(parts))

    def compile_module(self, module: ast.Module) -> types.CodeType:
        """Compile a module built by ``synthesize()``."""
        try:
            return compile(module, self._filename or "<template>", "exec")
        except SyntaxError as exc:
            # Valid syntax the bytecode compiler still rejects, e.g. 'break' outside a loop
            raise TemplateCompileError(
                f"Invalid Python in template: {exc.msg}",
                exc.lineno,
                self._name,
                self._line(exc.lineno),
                code=ErrorCode.INVALID_STATEMENT,
                cause=exc,
            ) from exc
        except ValueError as exc:
            raise InternalCompilerError(f"generated an invalid AST: {exc}", self._name) from exc

    def synthesize(self, parts: Iterable[Part]) -> ast.Module:
        """Build the module AST for ``parts`` without compiling it."""
        template_body: list[ast.stmt] = []
        self._bodies = [template_body]
        self._elif_ids = set()
        self._open_tries = []

        for part in parts:
            handler = self._part_dispatch.get(part.kind)
            if handler is None:
                raise InternalCompilerError(f"unknown part kind {part.kind!r}", self._name)
            handler(part)

        if len(self._bodies) != 1:
            raise InternalCompilerError(
                f"{len(self._bodies) - 1} block(s) left open at end of template", self._name
            )
        self._check_open_tries()

        body = self._prologue()
        body.extend(seed_from_context(name) for name in local_names(template_body))
        body.extend(template_body)

        body.append(
            ast.Return(
                value=ast.Call(
                    func=ast.Attribute(
                        value=ast.Constant(value=""),
                        attr="join",
                        ctx=ast.Load(),
                    ),
                    args=[ast.Name(id="_buf", ctx=ast.Load())],
                    keywords=[],
                ),
            )
        )

        render = ast.FunctionDef(
            name=RENDER_FUNCTION,
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg="_context")],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=body,
            decorator_list=[],
            returns=None,
            type_params=[],
        )
        module = ast.Module(body=[render], type_ignores=[])
        ast.fix_missing_locations(module)
        return module

    def to_source(self, parts: Iterable[Part]) -> str:
        """Python source of the generated module, for debugging."""
        return ast.unparse(self.synthesize(parts))

    def _line(self, lineno: int | None) -> str | None:
        if lineno is None or not 0 < lineno <= len(self._source_lines):
            return None
        return self._source_lines[lineno - 1]

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _prologue() -> list[ast.stmt]:
        return [
            # _buf = []
            ast.Assign(
                targets=[ast.Name(id="_buf", ctx=ast.Store())],
                value=ast.List(elts=[], ctx=ast.Load()),
            ),
            # _append = _buf.append
            ast.Assign(
                targets=[ast.Name(id="_append", ctx=ast.Store())],
                value=ast.Attribute(
                    value=ast.Name(id="_buf", ctx=ast.Load()),
                    attr="append",
                    ctx=ast.Load(),
                ),
            ),
        ]

    @staticmethod
    def _emit_output(value_expr: ast.expr) -> ast.stmt:
        """Generate ``_append(value_expr)``."""
        return ast.Expr(
            value=ast.Call(
                func=ast.Name(id="_append", ctx=ast.Load()),
                args=[value_expr],
                keywords=[],
            ),
        )

    def _emit(self, stmt: ast.stmt, lineno: int) -> None:
        self._bodies[-1].append(relocate(stmt, lineno))

    def _parse_expression(self, part: Part) -> ast.expr:
        source = part.value.strip()
        try:
            tree = ast.parse(source, mode="eval")
        except (SyntaxError, ValueError) as exc:
            raise self._error(
                f"Invalid Python expression {source!r}",
                part,
                ErrorCode.INVALID_EXPRESSION,
                exc,
            ) from exc
        return tree.body

    def _guarded(self, value_expr: ast.expr, lineno: int) -> None:
        """Append ``value_expr``, or the undefined marker on NameError."""
        self._emit(
            ast.Try(
                body=[self._emit_output(value_expr)],
                handlers=[
                    ast.ExceptHandler(
                        type=ast.Name(id="NameError", ctx=ast.Load()),
                        name=None,
                        body=[self._emit_output(ast.Constant(value=UNDEFINED_TEXT))],
                    )
                ],
                orelse=[],
                finalbody=[],
            ),
            lineno,
        )

    def _wrap(self, helper: str, part: Part) -> ast.expr:
        return ast.Call(
            func=ast.Name(id=helper, ctx=ast.Load()),
            args=[self._parse_expression(part)],
            keywords=[],
        )

    def _compile_text(self, part: Part) -> None:
        self._emit(self._emit_output(ast.Constant(value=part.value)), part.lineno)

    def _compile_escaped(self, part: Part) -> None:
        self._guarded(self._wrap("_e", part), part.lineno)

    def _compile_raw(self, part: Part) -> None:
        self._guarded(self._wrap("_s", part), part.lineno)

    def _compile_unchecked(self, part: Part) -> None:
        self._emit(self._emit_output(self._parse_expression(part)), part.lineno)


def compile_parts(
    parts: Iterable[Part],
    name: str | None = None,
    filename: str | None = None,
    source: str | None = None,
) -> types.CodeType:
    """Compile ``parts`` to a code object. See ``Compiler``."""
    return Compiler(name, filename, source).compile(parts)
