"""fastjade parser: indentation-sensitive template source → node tree."""

from fastjade.parser.core import Parser, parse
from fastjade.parser.filters import DEFAULT_FILTERS, ContentFilter
from fastjade.parser.header import Header, Modifier, parse_header

__all__ = [
    "DEFAULT_FILTERS",
    "ContentFilter",
    "Header",
    "Modifier",
    "Parser",
    "parse",
    "parse_header",
]
