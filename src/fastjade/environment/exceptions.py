"""Exceptions for the fastjade template compiler.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template not found by loader
├── TemplateSyntaxError       # Line warning promoted to an error
├── TemplateCompileError      # Generated render function does not load
├── TemplateRuntimeError      # User code raised while rendering
└── InternalCompilerError     # Compiler invariant violated (a fastjade bug)

Per-line problems (bad attribute lists, unknown filters, ``include``) are
not exceptions: they are reported as warnings through the diagnostics sink
and the line degrades to a placeholder. Only ``TemplateCompileError`` and
``InternalCompilerError`` prevent a template from being produced.

Example:
    ```
    FJ-CMP-001: Invalid Python expression in profile.jade:4
      --> profile.jade:4
       |
      4 | p= user.
       |
    Cause: invalid syntax
    ```

"""

from __future__ import annotations

from enum import Enum

from fastjade.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for fastjade diagnostics.

    Format: FJ-{CATEGORY}-{NUMBER}
    Categories: PAR (line parser), CMP (function synthesis), RUN (runtime),
    TPL (template loading), INT (internal)
    """

    # Line parser warnings (FJ-PAR-xxx)
    ATTRIBUTE_SYNTAX = "FJ-PAR-001"
    UNKNOWN_FILTER = "FJ-PAR-002"
    UNSUPPORTED_INCLUDE = "FJ-PAR-003"
    VOID_ELEMENT_CONTENT = "FJ-PAR-004"

    # Function synthesis errors (FJ-CMP-xxx)
    INVALID_EXPRESSION = "FJ-CMP-001"
    INVALID_STATEMENT = "FJ-CMP-002"
    ORPHAN_CLAUSE = "FJ-CMP-003"

    # Runtime errors (FJ-RUN-xxx)
    RUNTIME_ERROR = "FJ-RUN-001"

    # Template loading errors (FJ-TPL-xxx)
    TEMPLATE_NOT_FOUND = "FJ-TPL-001"
    SYNTAX_ERROR = "FJ-TPL-002"

    # Internal errors (FJ-INT-xxx)
    INTERNAL = "FJ-INT-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'parser', 'compiler', 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "CMP": "compiler",
            "RUN": "runtime",
            "TPL": "template",
            "INT": "internal",
        }.get(prefix, "unknown")


def _location(name: str | None, lineno: int | None) -> str:
    loc = name or "<template>"
    if lineno:
        loc += f":{lineno}"
    return loc


def _snippet(lineno: int | None, line: str | None) -> list[str]:
    if not lineno or line is None:
        return []
    return [
        terminal.dim_text("   |"),
        terminal.format_source_line(lineno, line),
        terminal.dim_text("   |"),
    ]


class TemplateError(Exception):
    """Base exception for all fastjade template errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a one-header diagnostic without traceback noise."""
        header = str(self).splitlines()[0] if str(self) else type(self).__name__
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

    Example:
        >>> env.get_template("missing")
        TemplateNotFoundError: Template 'missing.jade' not found in: views/
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class _LocatedError(TemplateError):
    """Template error pointing at a single template line."""

    _label = "Error"

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        line: str | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.line = line
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [
            f"{self._label}: {self.message}",
            f"  --> {terminal.location(_location(self.name, self.lineno))}",
        ]
        parts.extend(_snippet(self.lineno, self.line))
        return "\n".join(parts)


class TemplateSyntaxError(_LocatedError):
    """A per-line warning that was promoted to an error.

    Raised only when the Environment is configured with
    ``warnings_as_errors=True``; otherwise the same problem is a warning.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR
    _label = "Syntax Error"


class TemplateCompileError(_LocatedError):
    """The synthesized render function could not be built.

    Raised when an embedded Python expression or statement is invalid, or
    when a clause such as ``- else`` has no statement to attach to. The
    underlying ``SyntaxError`` (if any) is kept as ``cause`` and chained.
    """

    code: ErrorCode | None = ErrorCode.INVALID_EXPRESSION
    _label = "Compile Error"

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        line: str | None = None,
        *,
        code: ErrorCode | None = None,
        cause: BaseException | None = None,
    ):
        self.cause = cause
        super().__init__(message, lineno, name, line, code=code)

    def _format_message(self) -> str:
        msg = super()._format_message()
        if self.cause is not None:
            detail = getattr(self.cause, "msg", None) or str(self.cause)
            msg += f"\nCause: {detail}"
        return msg


class TemplateRuntimeError(TemplateError):
    """An exception raised by template code while rendering.

    Output Format:
        ```
        Runtime Error: 'NoneType' object has no attribute 'title'
          Location: article.jade:15
           |
         15 | h1= post.title
           |
        ```
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        line: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_name or self.lineno:
            loc = _location(self.template_name, self.lineno)
            parts.append(f"  Location: {terminal.location(loc)}")
        parts.extend(_snippet(self.lineno, self.line))
        return "\n".join(parts)


class InternalCompilerError(TemplateError):
    """A compiler invariant was violated.

    No template source can trigger this; it signals a bug in fastjade
    (for example a node type the linearizer has no handler for).
    """

    code: ErrorCode | None = ErrorCode.INTERNAL

    def __init__(self, message: str, name: str | None = None):
        self.message = message
        self.name = name
        super().__init__(f"Internal Error: {message} (in {name or '<template>'})")
