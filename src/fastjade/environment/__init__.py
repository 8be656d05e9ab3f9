"""fastjade environment: configuration, loaders, diagnostics and errors."""

from fastjade.environment.core import Environment
from fastjade.environment.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    Severity,
    log_diagnostic,
)
from fastjade.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
)
from fastjade.environment.loaders import DictLoader, FileSystemLoader, Loader

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "InternalCompilerError",
    "Loader",
    "Severity",
    "TemplateCompileError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "log_diagnostic",
]
