"""Parameters, method, class and module definitions, alias and undef."""
from .. import comments, doc, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, hardline, line, softline
from ..registry import printer

############################################################################
# Parameters
############################################################################


@printer("params")
def print_params(node: Node, ctx: Context) -> Document:
    reqs, opts, rest, posts, keywords, kwrest, block = node.body
    parts: list[Document] = []

    parts.extend(ctx.map(reqs or []))
    for name, value in opts or []:
        parts.append(doc.cons(ctx.print(name), " = ", ctx.print(value)))

    if rest is not None and rest.type != "excessed_comma":
        parts.append(ctx.print(rest))

    parts.extend(ctx.map(posts or []))
    for label, value in keywords or []:
        if value is None:
            parts.append(ctx.print(label))
        else:
            parts.append(doc.group(ctx.print(label), " ", ctx.print(value)))

    if kwrest == "nil":
        parts.append("**nil")
    elif kwrest is not None:
        parts.append(ctx.print(kwrest))

    if block is not None:
        parts.append(ctx.print(block))

    # `|a,|` destructures the first element; keep the comma.
    trailing = "," if rest is not None and rest.type == "excessed_comma" else None
    return doc.group(doc.join(doc.cons(",", line), parts), trailing)


@printer("rest_param")
def print_rest_param(node: Node, ctx: Context) -> Document:
    return doc.cons("*", ctx.print(node[0]))


@printer("kwrest_param")
def print_kwrest_param(node: Node, ctx: Context) -> Document:
    return doc.cons("**", ctx.print(node[0]))


@printer("excessed_comma")
def print_excessed_comma(node: Node, ctx: Context) -> Document:
    return ","


def parameter_list(ctx: Context, params: Node) -> Document:
    """`(a, b)` for a def, breaking one parameter per line, or nothing if
    there are no parameters."""
    if params.type == "paren":
        ctx = ctx.descend(params)
        params = params[0]

    if heuristics.is_empty_params(params):
        return None
    return doc.group("(", doc.indent(softline, ctx.print(params)), softline, ")")


############################################################################
# Methods
############################################################################


def _print_method(ctx: Context, declaration: list[Document], bodystmt: Node) -> Document:
    if heuristics.is_empty_bodystmt(bodystmt) and not bodystmt.has_comments():
        return doc.group(*declaration, "; end")
    return doc.group(doc.group(*declaration), ctx.print(bodystmt), hardline, "end")


@printer("def")
def print_def(node: Node, ctx: Context) -> Document:
    name, params, bodystmt = node.body
    declaration = ["def ", ctx.print(name), parameter_list(ctx, params)]
    return _print_method(ctx, declaration, bodystmt)


@printer("defs")
def print_defs(node: Node, ctx: Context) -> Document:
    target, operator, name, params, bodystmt = node.body
    if isinstance(operator, Node):
        operator = operator.value
    declaration = ["def ", ctx.print(target), operator, ctx.print(name), parameter_list(ctx, params)]
    return _print_method(ctx, declaration, bodystmt)


############################################################################
# Classes and modules
############################################################################


def _print_scope(ctx: Context, declaration: Document, bodystmt: Node) -> Document:
    if heuristics.is_empty_bodystmt(bodystmt) and not bodystmt.has_comments():
        return doc.group(declaration, doc.if_break(line, "; "), "end")
    return doc.group(declaration, ctx.print(bodystmt), hardline, "end")


@printer("class")
def print_class(node: Node, ctx: Context) -> Document:
    constant, superclass, bodystmt = node.body
    declaration = doc.cons("class ", ctx.print(constant))
    if superclass is not None:
        declaration = doc.cons(declaration, " < ", ctx.print(superclass))
    return _print_scope(ctx, declaration, bodystmt)


@printer("module")
def print_module(node: Node, ctx: Context) -> Document:
    constant, bodystmt = node.body
    return _print_scope(ctx, doc.group("module ", ctx.print(constant)), bodystmt)


@printer("sclass")
def print_sclass(node: Node, ctx: Context) -> Document:
    target, bodystmt = node.body
    return _print_scope(ctx, doc.cons("class << ", ctx.print(target)), bodystmt)


############################################################################
# alias and undef
############################################################################


def _bare_word(symbol: Node, ctx: Context) -> Document:
    """`:foo` as `foo`. The symbol's comments move onto the bare word."""
    if symbol.type != "symbol_literal":
        return ctx.print(symbol)
    return comments.splice(ctx.descend(symbol).print(symbol[0]), symbol.comments, symbol.end_line)


@printer("alias", "var_alias")
def print_alias(node: Node, ctx: Context) -> Document:
    left, right = node.body
    # A comment after the first name has to end its line.
    separator = hardline if left.has_comments() else line
    return doc.group(
        "alias ",
        _bare_word(left, ctx),
        doc.group(doc.align(6, separator, _bare_word(right, ctx))),
    )


@printer("undef")
def print_undef(node: Node, ctx: Context) -> Document:
    names = [_bare_word(symbol, ctx) for symbol in node.body]
    return doc.group("undef ", doc.align(6, doc.join(doc.cons(",", line), names)))
