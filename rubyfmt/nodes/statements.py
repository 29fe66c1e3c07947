"""Statement lists and the bodies that hold them."""
from .. import comments, doc, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, hardline, line, softline
from ..registry import printer
from .calls import ARGUMENT_CONTAINERS, argument_list

# Bare calls that change the visibility of what follows. They get a blank
# line on either side.
ACCESS_CONTROLS = frozenset(["private", "protected", "public"])


def is_access_control(stmt: Node) -> bool:
    return (
        stmt.type in ("vcall", "var_ref")
        and stmt[0].type == "@ident"
        and stmt[0].value in ACCESS_CONTROLS
    )


def first_line(stmt: Node) -> int | None:
    """The first source line a statement occupies, counting the comments
    printed above it."""
    lines = [c.line for c in stmt.comments if c.line is not None and (c.leading or stmt.type == "void_stmt")]
    if stmt.start_line is not None:
        lines.append(stmt.start_line)
    return min(lines, default=None)


def last_line(stmt: Node) -> int | None:
    lines = [c.line for c in stmt.comments if c.line is not None and not c.leading]
    if stmt.end_line is not None:
        lines.append(stmt.end_line)
    return max(lines, default=None)


@printer("program")
def print_program(node: Node, ctx: Context) -> Document:
    return doc.cons(ctx.print(node[0]), hardline)


@printer("void_stmt")
def print_void_stmt(node: Node, ctx: Context) -> Document:
    return None


@printer("stmts", own_comments=True)
def print_stmts(node: Node, ctx: Context) -> Document:
    statements = [s for s in node.body if s.type != "void_stmt" or s.has_comments()]

    # Nothing but comments: print them as they are, with none of the
    # blank-line bookkeeping below.
    if all(s.type == "void_stmt" for s in statements):
        floating = list(node.comments)
        for statement in statements:
            floating.extend(statement.comments)
        if len(floating) == 0:
            return None
        return comments.print_comments_only(floating)

    in_interpolation = ctx.parent_is("string_embexpr")

    parts: list[Document] = []
    previous: Node | None = None
    for statement in statements:
        if statement.type == "void_stmt":
            printed = comments.print_comments_only(statement.comments)
        else:
            printed = ctx.print(statement)

        start, end = first_line(statement), None if previous is None else last_line(previous)
        if previous is None:
            parts.append(printed)
        elif (
            start is not None and end is not None and start - end > 1
        ) or is_access_control(statement) or is_access_control(previous):
            parts.extend([hardline, hardline, printed])
        elif in_interpolation and statement.start_line is not None and statement.start_line == previous.end_line:
            parts.extend(["; ", printed])
        else:
            parts.extend([hardline, printed])

        previous = statement

    return comments.splice(doc.cons(*parts), node.comments, node.end_line)


@printer("bodystmt")
def print_bodystmt(node: Node, ctx: Context) -> Document:
    """The body of a def, class, begin or do block: the statements indented
    one level, then any rescue, else and ensure clauses at the level of the
    keyword that opened the body. Callers add the closing `end`."""
    stmts, rescue, else_stmts, ensure = node.body
    parts: list[Document] = []

    if not heuristics.is_empty_stmts(stmts):
        parts.append(doc.indent(hardline, ctx.print(stmts)))

    if rescue is not None:
        parts.extend([hardline, ctx.print(rescue)])

    if else_stmts is not None:
        if else_stmts.type == "else":
            parts.extend([hardline, ctx.print(else_stmts)])
        elif heuristics.is_empty_stmts(else_stmts):
            parts.extend([hardline, "else"])
        else:
            parts.extend([hardline, "else", doc.indent(hardline, ctx.print(else_stmts))])

    if ensure is not None:
        parts.extend([hardline, ctx.print(ensure)])

    return doc.group(*parts)


@printer("paren")
def print_paren(node: Node, ctx: Context) -> Document:
    contents = node[0]
    if contents is None:
        return "()"

    if contents.type == "params":
        return doc.group("(", doc.indent(softline, ctx.print(contents)), softline, ")")

    if contents.type in ARGUMENT_CONTAINERS:
        contents_doc = doc.join(doc.cons(",", line), argument_list(ctx, contents))
    else:
        contents_doc = ctx.print(contents)

    return doc.group("(", doc.indent(softline, contents_doc), softline, ")")


@printer("begin")
def print_begin(node: Node, ctx: Context) -> Document:
    return doc.cons("begin", ctx.print(node[0]), hardline, "end")


def _print_hook(node: Node, ctx: Context, name: str) -> Document:
    return doc.group(name, " {", doc.indent(line, ctx.print(node[0])), line, "}")


@printer("BEGIN")
def print_BEGIN(node: Node, ctx: Context) -> Document:
    return _print_hook(node, ctx, "BEGIN")


@printer("END")
def print_END(node: Node, ctx: Context) -> Document:
    return _print_hook(node, ctx, "END")
