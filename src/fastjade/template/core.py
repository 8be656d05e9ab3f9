"""fastjade Template: compiled template object ready for rendering.

The Template class wraps the compiled ``render(_context)`` function and
provides the ``render()`` API. Templates are immutable and thread-safe for
concurrent rendering.

Architecture:
    ```
    Template
    ├── _env_ref: WeakRef[Environment]  # Prevents circular refs
    ├── _render_code: code object       # Body of the generated render()
    ├── _name, _filename                # For error messages
    ├── _source                         # For runtime error snippets
    └── warnings, python_source         # Compile diagnostics, debug view
    ```

Context Scoping:
Each ``render()`` call builds a fresh globals dict (runtime helpers +
builtins + context) and wraps the compiled code in a new function over it,
so template expressions name context members directly:

    ```python
    t = env.from_string("p= user.name")
    t.render(user=User("Ada"))   # user resolves as a global
    ```

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (globals dict, output buffer)
- Multiple threads can call ``render()`` concurrently

"""

from __future__ import annotations

import traceback
import types
import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from fastjade.compiler.core import RENDER_FUNCTION
from fastjade.environment.exceptions import TemplateError, TemplateRuntimeError
from fastjade.template.helpers import RESERVED_NAMESPACE, STATIC_NAMESPACE

if TYPE_CHECKING:
    from fastjade.environment import Environment
    from fastjade.environment.diagnostics import Diagnostic


class Template:
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        filename: Filename the code was compiled under; traceback frames
            with this filename belong to the template
        warnings: Diagnostics reported while compiling
        python_source: Source of the generated render function

    Error Enhancement:
        Exceptions raised by template code are wrapped in
        ``TemplateRuntimeError`` carrying the template line:
            ```
            Runtime Error: 'NoneType' object has no attribute 'title'
              Location: article.jade:15
               |
             15 | h1= post.title
               |
            ```

    Example:
        >>> from fastjade import Environment
        >>> t = Environment().from_string("p Hello, #{name}!")
        >>> t.render(name="World")
        '<p>Hello, World!</p>\\n'
        >>> t({"name": "World"})  # Dict context also works
        '<p>Hello, World!</p>\\n'

    """

    __slots__ = (
        "_env_ref",
        "_filename",
        "_name",
        "_render_code",
        "_source",
        "_source_lines",
        "python_source",
        "warnings",
    )

    def __init__(
        self,
        env: Environment,
        code: types.CodeType,
        name: str | None,
        filename: str | None,
        source: str | None = None,
        warnings: tuple[Diagnostic, ...] = (),
        python_source: str | None = None,
    ):
        # Use weakref to prevent circular reference: Template <-> Environment
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._name = name
        self._filename = filename
        self._source = source
        self._source_lines = source.replace("\r", "").split("\n") if source else []
        self.warnings = warnings
        self.python_source = python_source

        namespace = dict(STATIC_NAMESPACE)
        exec(code, namespace)
        self._render_code: types.CodeType = namespace[RENDER_FUNCTION].__code__

    @property
    def env(self) -> Environment:
        """The owning Environment (dereferences weak reference)."""
        env = self._env_ref()
        if env is None:
            raise RuntimeError(
                f"Environment has been garbage collected"
                f" (template: {self._name or 'unknown'})"
            )
        return env

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Filename used for compile() and traceback matching."""
        return self._filename

    def render(self, context: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Render the template with the given context.

        Args:
            context: Mapping of variables visible to template code
            **kwargs: More variables; override same-named ``context`` keys

        Returns:
            Rendered HTML

        Raises:
            TemplateRuntimeError: Template code raised an exception
        """
        ctx: dict[str, Any] = {}
        if context is not None:
            ctx.update(context)
        ctx.update(kwargs)
        # ``context`` names the whole mapping unless the mapping has its own key
        namespace = {**STATIC_NAMESPACE, "context": ctx, **ctx, **RESERVED_NAMESPACE}

        render_func = types.FunctionType(self._render_code, namespace, RENDER_FUNCTION)
        try:
            result: str = render_func(ctx)
            return result
        except TemplateError:
            raise
        except Exception as e:
            raise self._enhance_error(e) from e

    __call__ = render

    def _enhance_error(self, error: Exception) -> TemplateRuntimeError:
        """Convert an exception into TemplateRuntimeError with template location."""
        lineno = None
        for frame, frame_lineno in traceback.walk_tb(error.__traceback__):
            if frame.f_code.co_filename == self._filename:
                lineno = frame_lineno

        message = str(error).strip() or f"{type(error).__name__} (no details available)"
        if not message.startswith(type(error).__name__):
            message = f"{type(error).__name__}: {message}"

        line = None
        if lineno is not None and 0 < lineno <= len(self._source_lines):
            line = self._source_lines[lineno - 1]
        return TemplateRuntimeError(
            message,
            template_name=self._name,
            lineno=lineno,
            line=line,
        )

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
