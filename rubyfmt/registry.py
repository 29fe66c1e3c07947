"""The mapping from node tag to printer function.

Printers register themselves with the `printer` decorator:

    @printer("if", "unless")
    def print_conditional(node, ctx):
        ...

Each tag maps to exactly one printer; registering a tag twice is an error, as
is a tag that isn't part of the known grammar.
"""
import typing

from .ast import NODE_TYPES
from .context import PrinterFunction


class Registry:
    _printers: dict[str, PrinterFunction]
    _own_comments: set[str]

    def __init__(self):
        self._printers = {}
        self._own_comments = set()

    def register(self, tags: typing.Iterable[str], fn: PrinterFunction, own_comments: bool = False):
        for tag in tags:
            if tag not in NODE_TYPES:
                raise ValueError(f"Cannot register a printer for unknown node type {tag}")
            if tag in self._printers:
                existing = self._printers[tag].__name__
                raise ValueError(f"Node type {tag} already has a printer ({existing})")
            self._printers[tag] = fn
            if own_comments:
                self._own_comments.add(tag)

    def printer(self, *tags: str, own_comments: bool = False):
        """Register the decorated function as the printer for the given tags.

        Pass own_comments=True if the printer places the node's comments
        itself, so the dispatcher shouldn't.
        """

        def decorator(fn: PrinterFunction) -> PrinterFunction:
            self.register(tags, fn, own_comments=own_comments)
            return fn

        return decorator

    def lookup(self, tag: str) -> PrinterFunction | None:
        return self._printers.get(tag)

    def prints_own_comments(self, tag: str) -> bool:
        return tag in self._own_comments

    def missing(self) -> set[str]:
        """Every known tag that nobody registered a printer for."""
        return set(NODE_TYPES) - set(self._printers)

    def __contains__(self, tag: str) -> bool:
        return tag in self._printers


REGISTRY = Registry()

printer = REGISTRY.printer
