"""Turning a syntax tree into a layout document.

The printer walks the tree top-down, calling the registered printer for each
node (see [registry] and the modules in [nodes]) and wrapping the result with
the node's comments. Before any printing happens the whole tree is checked
against the registry, so an unknown node fails the run up front rather than
halfway through a document.
"""
import copy
import logging

from . import ast, comments, doc
from . import nodes  # noqa: F401 registers the printers
from .ast import Node
from .context import Context, Printed, PrinterFunction, root_context
from .doc import Document
from .embed import EmbeddedFormatter
from .errors import StructuralError, UnsupportedNode
from .layout import render
from .options import Options
from .registry import REGISTRY, Registry

printer_log = logging.getLogger("rubyfmt.printer")


class Printer:
    options: Options
    registry: Registry
    embedded_formatter: EmbeddedFormatter | None

    def __init__(
        self,
        options: Options | None = None,
        embedded_formatter: EmbeddedFormatter | None = None,
        registry: Registry | None = None,
    ):
        self.options = options if options is not None else Options()
        self.registry = registry if registry is not None else REGISTRY
        self.embedded_formatter = embedded_formatter

    def dispatch(self, node: Node) -> PrinterFunction:
        fn = self.registry.lookup(node.type)
        if fn is None:
            raise UnsupportedNode(node.type, ast.dump(node), node.loc)
        return fn

    def validate(self, tree: Node):
        """Check every node in the tree has a printer, every token has text
        and every fixed-shape node has the right number of children, before
        we produce anything."""
        for node in tree.walk():
            if node.type not in self.registry:
                raise UnsupportedNode(node.type, ast.dump(node), node.loc)
            if node.type.startswith("@"):
                if len(node.body) != 1 or not isinstance(node.body[0], str):
                    raise StructuralError(node.type, ast.dump(node), node.loc, "token must carry exactly one string")
                continue
            expected = ast.ARITY.get(node.type)
            if expected is not None and len(node.body) != expected:
                raise StructuralError(
                    node.type,
                    ast.dump(node),
                    node.loc,
                    f"expected {expected} children, found {len(node.body)}",
                )

    def visit(self, ctx: Context, using: PrinterFunction | None = None) -> Printed:
        node = ctx.node
        fn = using if using is not None else self.dispatch(node)
        printer_log.debug(f"{node.type} -> {fn.__name__}")

        result = fn(node, ctx)
        if isinstance(result, Printed):
            document, link = result
        else:
            document, link = doc.cons(result), None

        if node.has_comments() and not self.registry.prints_own_comments(node.type):
            document = comments.splice(document, node.comments, node.end_line)

        return Printed(document, link)

    def print_tree(self, tree: Node) -> Document:
        """The layout document for a tree. The tree itself is left as it
        was given."""
        self.validate(tree)

        if tree.type == "program" and any(c.line is not None for c in tree.comments):
            # Comments handed over in one list with the program: find them
            # homes before printing, on a copy so the caller's tree keeps them.
            tree = copy.deepcopy(tree)
            floating, tree.comments = tree.comments, []
            comments.attach_comments(tree, floating)

        return self.visit(root_context(tree, self)).doc

    def format_tree(self, tree: Node) -> str:
        document = self.print_tree(tree)
        return render(document, self.options.print_width, self.options.tab_width)


def print_tree(
    tree: Node,
    options: Options | None = None,
    embedded_formatter: EmbeddedFormatter | None = None,
) -> Document:
    return Printer(options, embedded_formatter).print_tree(tree)


def format_tree(
    tree: Node,
    options: Options | None = None,
    embedded_formatter: EmbeddedFormatter | None = None,
) -> str:
    return Printer(options, embedded_formatter).format_tree(tree)


def format_json(
    text: str,
    options: Options | None = None,
    embedded_formatter: EmbeddedFormatter | None = None,
) -> str:
    """Format a tree given as JSON text."""
    return format_tree(ast.loads(text), options, embedded_formatter)
