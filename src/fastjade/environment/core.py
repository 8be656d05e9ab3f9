"""fastjade Environment: configuration, compilation and template caching.

The Environment is the entry point for compiling templates. It runs the
pipeline and keeps compiled templates by name:

    ```
    source ─▶ Parser ─▶ node tree ─▶ Linearizer ─▶ parts ─▶ Compiler ─▶ Template
                 │                                             │
                 └──────────── DiagnosticCollector ◀───────────┘
    ```

Configuration is the constructor's keyword arguments; there is no config
file. Compiled templates are cached in a bounded LRU keyed by normalized
template name.

Thread-Safety:
- Compilation uses only per-call state
- The template cache is guarded by a lock; two threads asking for the same
  uncached template may both compile it, and the last one wins

Example:
    >>> from fastjade import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("views/"))
    >>> env.get_template("index").render(user=user)
    >>> env.compile_directory()
    (12, 0)

"""

from __future__ import annotations

import ast
import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping
from typing import Any

from fastjade.compiler.core import Compiler
from fastjade.compiler.linearize import Linearizer
from fastjade.environment.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    Severity,
)
from fastjade.environment.exceptions import (
    InternalCompilerError,
    TemplateCompileError,
    TemplateError,
    TemplateNotFoundError,
)
from fastjade.environment.loaders import Loader
from fastjade.parser.core import Parser
from fastjade.parser.filters import ContentFilter
from fastjade.template.core import Template

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration and template cache.

    Attributes:
        loader: Where ``get_template()`` finds sources (None: strings only)
        filters: Extra ``:name`` content filters, merged over the built-ins
        extension: Suffix appended to template names that lack it
        diagnostics: Sink called with every compile Diagnostic (default:
            log through ``logging``)
        warnings_as_errors: Raise ``TemplateSyntaxError`` on the first warning
        cache_size: Maximum number of cached templates (0 disables caching)

    Example:
        >>> env = Environment()
        >>> env.from_string("a(href=url) Home").render(url="/")
        '<a href="/">Home</a>\\n'

    """

    __slots__ = (
        "_cache",
        "_lock",
        "cache_size",
        "diagnostics",
        "extension",
        "filters",
        "loader",
        "warnings_as_errors",
        "__weakref__",
    )

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        filters: Mapping[str, ContentFilter] | None = None,
        extension: str = ".jade",
        diagnostics: DiagnosticSink | None = None,
        warnings_as_errors: bool = False,
        cache_size: int = 400,
    ):
        if cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {cache_size}")
        self.loader = loader
        self.filters: dict[str, ContentFilter] = dict(filters or {})
        self.extension = extension
        self.diagnostics = diagnostics
        self.warnings_as_errors = warnings_as_errors
        self.cache_size = cache_size
        self._cache: OrderedDict[str, Template] = OrderedDict()
        self._lock = threading.Lock()

    # ─────────────────────────────────────────────────────────────────────────
    # Compilation
    # ─────────────────────────────────────────────────────────────────────────

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile template source. The result is not cached.

        Args:
            source: Template source text
            name: Label used in diagnostics and error messages

        Raises:
            TemplateCompileError: Embedded Python is invalid
            TemplateSyntaxError: A warning was raised with warnings_as_errors
        """
        return self._compile(source, name, None)

    def _compile(self, source: str, name: str | None, filename: str | None) -> Template:
        collector = DiagnosticCollector(name, self.diagnostics, self.warnings_as_errors)
        code_filename = filename or f"<fastjade:{name or 'string'}>"
        compiler = Compiler(name, code_filename, source)
        try:
            tree = Parser(source, name, self.filters, collector).parse()
            parts = Linearizer(name).linearize(tree)
            module = compiler.synthesize(parts)
            code = compiler.compile_module(module)
        except TemplateCompileError as exc:
            collector.emit(
                Diagnostic(Severity.ERROR, exc.message, exc.lineno, exc.line, name, exc.code)
            )
            raise
        except InternalCompilerError as exc:
            collector.emit(
                Diagnostic(Severity.INTERNAL, exc.message, None, None, name, exc.code)
            )
            raise

        return Template(
            self,
            code,
            name,
            code_filename,
            source=source,
            warnings=collector.warnings,
            python_source=ast.unparse(module),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Named templates
    # ─────────────────────────────────────────────────────────────────────────

    def _normalize(self, name: str) -> str:
        name = name.replace("\\", "/").lstrip("/")
        if self.extension and not name.endswith(self.extension):
            name += self.extension
        return name

    def get_template(self, name: str) -> Template:
        """Load, compile and cache a template by name.

        The extension is appended when ``name`` lacks it, so ``"index"`` and
        ``"index.jade"`` are the same template.

        Raises:
            TemplateNotFoundError: No loader, or the loader has no such template
            TemplateCompileError: Embedded Python is invalid
        """
        if self.loader is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found: no loader configured"
            )
        key = self._normalize(name)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                return cached

        source, filename = self.loader.get_source(key)
        template = self._compile(source, key, filename)
        logger.debug("Compiled template %s", key)

        if self.cache_size:
            with self._lock:
                self._cache[key] = template
                self._cache.move_to_end(key)
                while len(self._cache) > self.cache_size:
                    self._cache.popitem(last=False)
        return template

    def is_compiled(self, name: str) -> bool:
        """True if ``name`` is in the template cache."""
        with self._lock:
            return self._normalize(name) in self._cache

    def get_compiled(self, name: str) -> Template | None:
        """The cached template for ``name``, without loading or compiling."""
        with self._lock:
            return self._cache.get(self._normalize(name))

    def render_template(
        self, name: str, context: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        """Get (compiling if needed) and render a template in one call."""
        return self.get_template(name).render(context, **kwargs)

    def compile_directory(self, directory: str = "", recursive: bool = True) -> tuple[int, int]:
        """Compile every template below ``directory`` of the loader.

        Failures are logged and counted, not raised, so one bad template
        does not stop the batch.

        Returns:
            ``(compiled, failed)`` counts
        """
        if self.loader is None:
            raise TemplateNotFoundError("Cannot compile a directory: no loader configured")

        compiled = failed = 0
        for name in self.loader.list_templates(directory, recursive):
            if not name.endswith(self.extension):
                continue
            try:
                self.get_template(name)
            except TemplateError as exc:
                failed += 1
                logger.warning("Failed to compile %s: %s", name, exc.format_compact())
            else:
                compiled += 1

        logger.info(
            "Compiled %d template(s) in '%s' (%d failed)",
            compiled,
            directory or ".",
            failed,
        )
        return compiled, failed

    def clear_cache(self) -> None:
        """Drop every cached template."""
        with self._lock:
            self._cache.clear()

    def __repr__(self) -> str:
        return f"<Environment loader={self.loader!r} cached={len(self._cache)}>"
