"""fastjade Template package: compiled template objects ready for rendering."""

from fastjade.template.core import Template
from fastjade.template.helpers import css_string, render_attribute
from fastjade.utils.html import Markup

__all__ = [
    "Markup",
    "Template",
    "css_string",
    "render_attribute",
]
