"""Compile diagnostics: the warning/error channel between compiler and caller.

The compiler reports three categories of diagnostics:

- ``WARNING``: a recoverable per-line problem. The line degrades to a
  placeholder and compilation continues.
- ``ERROR``: the synthesized render function failed to load (invalid
  embedded Python). Reported, then raised as ``TemplateCompileError``.
- ``INTERNAL``: a compiler invariant was violated. Reported, then raised as
  ``InternalCompilerError``.

A sink is any callable accepting a ``Diagnostic``. The default sink logs
through the standard ``logging`` module; the library never installs
handlers, so applications decide where the records go.

Example:
    >>> seen = []
    >>> env = Environment(diagnostics=seen.append)
    >>> env.from_string("include header")
    >>> seen[0].code
    <ErrorCode.UNSUPPORTED_INCLUDE: 'FJ-PAR-003'>

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from fastjade.environment import terminal
from fastjade.environment.exceptions import ErrorCode, TemplateSyntaxError

logger = logging.getLogger(__name__)


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single compile diagnostic.

    Attributes:
        severity: Diagnostic category
        message: Human-readable description
        lineno: 1-based template line, or None when not line-specific
        line: The offending template line text
        name: Template label used for messages
        code: Searchable error code
    """

    severity: Severity
    message: str
    lineno: int | None = None
    line: str | None = None
    name: str | None = None
    code: ErrorCode | None = None

    @property
    def location(self) -> str:
        loc = self.name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def format(self) -> str:
        """Format as a multi-line terminal diagnostic."""
        paint = {
            Severity.WARNING: terminal.warning_code,
            Severity.ERROR: terminal.error_code,
            Severity.INTERNAL: terminal.internal_code,
        }[self.severity]
        label = self.code.value if self.code else self.severity.value
        parts = [
            f"{paint(label)}: {self.message}",
            f"  --> {terminal.location(self.location)}",
        ]
        if self.lineno and self.line is not None:
            parts.append(terminal.format_source_line(self.lineno, self.line))
        return "\n".join(parts)

    def __str__(self) -> str:
        prefix = f"{self.code.value}: " if self.code else ""
        return f"{prefix}{self.message} ({self.location})"


DiagnosticSink = Callable[[Diagnostic], None]

_LOG_LEVELS = {
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.INTERNAL: logging.CRITICAL,
}


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default sink: emit the diagnostic as a log record."""
    logger.log(_LOG_LEVELS[diagnostic.severity], "%s", diagnostic)


class DiagnosticCollector:
    """Per-compilation diagnostics channel.

    Records every diagnostic for the compiled Template, forwards it to the
    configured sink, and optionally promotes warnings to
    ``TemplateSyntaxError``.
    """

    __slots__ = ("_sink", "diagnostics", "name", "warnings_as_errors")

    def __init__(
        self,
        name: str | None = None,
        sink: DiagnosticSink | None = None,
        warnings_as_errors: bool = False,
    ):
        self.name = name
        self._sink = sink if sink is not None else log_diagnostic
        self.warnings_as_errors = warnings_as_errors
        self.diagnostics: list[Diagnostic] = []

    def warning(
        self,
        message: str,
        lineno: int | None = None,
        line: str | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        if self.warnings_as_errors:
            raise TemplateSyntaxError(message, lineno, self.name, line, code=code)
        self.emit(Diagnostic(Severity.WARNING, message, lineno, line, self.name, code))

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        self._sink(diagnostic)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity is Severity.WARNING)
