"""fastjade: indentation-based HTML templates compiled to Python functions.

Templates describe HTML with indentation instead of closing tags, and embed
Python for logic and interpolation. Each template compiles once into a
plain Python ``render(_context)`` function.

Quickstart:
    >>> import fastjade
    >>> template = fastjade.compile("ul\\n  - for item in items\\n    li= item")
    >>> template.render(items=["a", "<b>"])
    '<ul>\\n<li>a</li>\\n<li>&lt;b&gt;</li>\\n</ul>\\n'

File-based templates:
    >>> from fastjade import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("views/"))
    >>> env.get_template("index").render(user=user)

Architecture:
Template Source → Parser → node tree → Linearizer → parts → Compiler →
Python AST → compile() → render(_context)

Pipeline stages:
1. **Parser**: Classifies each line and nests it by indentation
2. **Linearizer**: Flattens the tree into text, expression and statement parts
3. **Compiler**: Builds an ``ast.Module`` defining ``render(_context)``
4. **Template**: Runs the function with the context as its globals

Syntax at a glance:
    ```
    doctype html
    html
      head
        title= title
      body#main.page
        a(href=url, class="nav") Home
        p Hello, #{user.name}!
        - if user.admin
          p.badge Admin
        - else
          p Member
        // rendered comment
        //- silent comment
        :javascript
          init();
    ```

Undefined Names:
A name missing from the context renders as ``undefined`` in text
positions and omits the attribute in attribute positions; it never aborts
the render.

Thread-Safety:
- Compilation is idempotent and uses only per-call state
- Rendering builds a fresh namespace and buffer per call
- The Environment template cache is lock-guarded

"""

from collections.abc import Mapping
from typing import Any

from fastjade.environment import (
    Diagnostic,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    InternalCompilerError,
    Severity,
    TemplateCompileError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
)
from fastjade.template import Markup, Template
from fastjade.utils.html import html_escape

__version__ = "0.3.0"

_default_env = Environment()


def compile(source: str, name: str | None = None) -> Template:
    """Compile ``source`` with the shared default environment."""
    return _default_env.from_string(source, name)


def render(
    template: Template | str, context: Mapping[str, Any] | None = None, /, **kwargs: Any
) -> str:
    """Render a Template, or compile and render template source."""
    if isinstance(template, str):
        template = _default_env.from_string(template)
    return template.render(context, **kwargs)


__all__ = [
    "Diagnostic",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "InternalCompilerError",
    "Markup",
    "Severity",
    "Template",
    "TemplateCompileError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "__version__",
    "compile",
    "html_escape",
    "render",
]
