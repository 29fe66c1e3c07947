"""A Ruby formatter core: turns a parsed Ruby syntax tree into a layout
document, and a layout document into text."""
from .ast import Comment, Node, Span, load, loads
from .errors import ConfigurationError, FormatError, StructuralError, UnsupportedNode
from .layout import render
from .options import Options
from .printer import Printer, format_json, format_tree, print_tree

__all__ = [
    "Comment",
    "ConfigurationError",
    "FormatError",
    "Node",
    "Options",
    "Printer",
    "Span",
    "StructuralError",
    "UnsupportedNode",
    "format_json",
    "format_tree",
    "load",
    "loads",
    "print_tree",
    "render",
]
