"""fastjade compiler: node tree → parts → Python code object."""

from fastjade.compiler.core import Compiler, compile_parts
from fastjade.compiler.linearize import Linearizer, linearize, split_injections
from fastjade.compiler.parts import Part, PartKind, PartsCombinator

__all__ = [
    "Compiler",
    "Linearizer",
    "Part",
    "PartKind",
    "PartsCombinator",
    "compile_parts",
    "linearize",
    "split_injections",
]
