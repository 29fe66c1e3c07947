"""The printing context threaded down through the printers.

A context is a persistent linked stack (like the parser's repair stack): each
level holds one node and points at its parent, and carries the set of tags of
every enclosing node so "am I somewhere inside a command?" is a set lookup
instead of a walk up the tree. Nothing here is ever mutated; descending makes
a new level.
"""
import typing

from . import doc
from .ast import Node
from .doc import Document

if typing.TYPE_CHECKING:
    from .chains import Link
    from .options import Options
    from .printer import Printer


class Printed(typing.NamedTuple):
    """What a printer hands back to its parent: the document, plus (for nodes
    in a method chain) the link the parent needs to lay the chain out."""

    doc: Document
    link: "Link | None" = None


PrinterFunction = typing.Callable[[Node, "Context"], "Document | str | Printed"]


class Context(typing.NamedTuple):
    node: Node
    parent: "Context | None"
    enclosing: frozenset[str]
    printer: "Printer"

    @property
    def options(self) -> "Options":
        return self.printer.options

    @property
    def parent_node(self) -> Node | None:
        if self.parent is None:
            return None
        return self.parent.node

    def ancestor(self, n: int) -> Node | None:
        """The nth enclosing node; ancestor(1) is the parent."""
        context = self
        while n > 0 and context is not None:
            context = context.parent
            n -= 1
        return context.node if context is not None else None

    def parent_is(self, *types: str) -> bool:
        parent = self.parent_node
        return parent is not None and parent.type in types

    def inside(self, *types: str) -> bool:
        """True if any enclosing node (not this one) has one of these tags."""
        return any(t in self.enclosing for t in types)

    def descend(self, child: Node) -> "Context":
        enclosing = self.enclosing
        if self.node.type not in enclosing:
            enclosing = enclosing | {self.node.type}
        return Context(node=child, parent=self, enclosing=enclosing, printer=self.printer)

    def visit(self, child: Node | None, using: PrinterFunction | None = None) -> Printed:
        if child is None:
            return Printed(None)
        return self.printer.visit(self.descend(child), using=using)

    def print(self, child: Node | None, using: PrinterFunction | None = None) -> Document:
        return self.visit(child, using=using).doc

    def map(self, children: typing.Iterable[Node]) -> list[Document]:
        return [self.print(child) for child in children]

    def join(self, separator: Document | str, children: typing.Iterable[Node]) -> Document:
        return doc.join(separator, self.map(children))


def root_context(node: Node, printer: "Printer") -> Context:
    return Context(node=node, parent=None, enclosing=frozenset(), printer=printer)
