"""The printers, one module per area of the grammar.

Importing this package registers every printer with the default registry.
"""
from . import calls, containers, control, definitions, expressions, literals, statements  # noqa: F401
