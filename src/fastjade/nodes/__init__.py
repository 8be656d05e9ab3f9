"""fastjade parse-tree nodes.

One class per node kind; the line parser builds the tree, the linearizer
dispatches on the class.
"""

from fastjade.nodes.base import Node
from fastjade.nodes.code import Output, Statement
from fastjade.nodes.markup import (
    Attribute,
    Element,
    ExpressionAttribute,
    HtmlComment,
    LiteralAttribute,
    Text,
)
from fastjade.nodes.structure import (
    Extends,
    FilterBlock,
    Include,
    SuppressedComment,
    Template,
)

__all__ = [
    "Attribute",
    "Element",
    "ExpressionAttribute",
    "Extends",
    "FilterBlock",
    "HtmlComment",
    "Include",
    "LiteralAttribute",
    "Node",
    "Output",
    "Statement",
    "SuppressedComment",
    "Template",
    "Text",
]
