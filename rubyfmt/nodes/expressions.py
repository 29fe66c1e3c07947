"""Variables, constants, assignment and operators."""
from .. import chains, doc, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, line, softline
from ..registry import printer
from .calls import argument_list, call_operator

############################################################################
# Variables and references
############################################################################


@printer("var_ref")
def print_var_ref(node: Node, ctx: Context) -> Document:
    return ctx.print(node[0])


@printer("var_field")
def print_var_field(node: Node, ctx: Context) -> Document:
    return ctx.print(node[0])


@printer("const_path_ref", "const_path_field")
def print_const_path(node: Node, ctx: Context) -> Document:
    return ctx.join("::", node.body)


@printer("top_const_ref", "top_const_field")
def print_top_const(node: Node, ctx: Context) -> Document:
    return doc.cons("::", ctx.print(node[0]))


@printer("field")
def print_field(node: Node, ctx: Context) -> Document:
    receiver, operator, name = node.body
    return doc.group(ctx.print(receiver), call_operator(operator, name), ctx.print(name))


@printer("aref", "aref_field")
def print_aref(node: Node, ctx: Context) -> Document:
    collection, index = node.body
    if index is None:
        return doc.cons(ctx.print(collection), "[]")

    return doc.group(
        ctx.print(collection),
        "[",
        doc.indent(softline, doc.join(doc.cons(",", line), argument_list(ctx, index))),
        softline,
        "]",
    )


@printer("defined")
def print_defined(node: Node, ctx: Context) -> Document:
    return doc.group("defined?(", doc.indent(softline, ctx.print(node[0])), softline, ")")


############################################################################
# Assignment
############################################################################


@printer("assign")
def print_assign(node: Node, ctx: Context) -> Document:
    target, value = node.body
    target_doc = ctx.print(target)
    value_doc = ctx.print(value)

    if heuristics.skip_assign_indent(value):
        return doc.group(target_doc, " = ", value_doc)
    return doc.group(target_doc, " =", doc.indent(line, value_doc))


@printer("opassign")
def print_opassign(node: Node, ctx: Context) -> Document:
    target, operator, value = node.body
    return doc.group(ctx.print(target), " ", ctx.print(operator), doc.indent(line, ctx.print(value)))


@printer("massign")
def print_massign(node: Node, ctx: Context) -> Document:
    targets, value = node.body
    return doc.group(doc.group(ctx.print(targets)), " =", doc.indent(line, ctx.print(value)))


def _is_splat(target: Node) -> bool:
    return target.type in ("arg_star", "rest_param")


@printer("mlhs")
def print_mlhs(node: Node, ctx: Context) -> Document:
    targets = ctx.map(node.body)
    # `a, = list` takes the first element; without the comma it would take
    # the whole list.
    trailing = "," if len(node.body) == 1 and not _is_splat(node[0]) else None
    return doc.cons(doc.join(doc.cons(",", line), targets), trailing)


@printer("mlhs_paren")
def print_mlhs_paren(node: Node, ctx: Context) -> Document:
    # `(a, b) = c` parses with a paren the left hand side doesn't need.
    if ctx.parent_is("massign", "mlhs_paren"):
        return ctx.print(node[0])
    return doc.group("(", doc.indent(softline, ctx.print(node[0])), softline, ")")


@printer("mrhs")
def print_mrhs(node: Node, ctx: Context) -> Document:
    return doc.group(ctx.join(doc.cons(",", line), node.body))


############################################################################
# Operators
############################################################################


@printer("binary")
def print_binary(node: Node, ctx: Context) -> Document:
    left, operator, right = node.body
    if isinstance(operator, Node):
        operator = operator.value
    space = "" if operator == "**" else " "

    left_doc = doc.group(ctx.print(left))
    right_doc = ctx.print(right)

    # Right operands that open on the operator's line however wide they get.
    if right.type in chains.NO_INDENT:
        return doc.group(left_doc, space, operator, space, doc.group(right_doc))

    return doc.group(
        left_doc,
        space,
        doc.group(doc.indent(operator, softline if space == "" else line, right_doc)),
    )


@printer("unary")
def print_unary(node: Node, ctx: Context) -> Document:
    operator, operand = node.body
    if isinstance(operator, Node):
        operator = operator.value
    if operator == "not":
        return doc.cons("not ", ctx.print(operand))
    # Ruby spells unary minus and plus `-@` and `+@`.
    return doc.cons(operator.rstrip("@"), ctx.print(operand))


@printer("not")
def print_not(node: Node, ctx: Context) -> Document:
    operand = node[0]
    if operand is None:
        return "not()"
    if operand.type == "paren":
        return doc.cons("not", ctx.print(operand))
    return doc.cons("not ", ctx.print(operand))


@printer("dot2")
def print_dot2(node: Node, ctx: Context) -> Document:
    left, right = node.body
    return doc.cons(ctx.print(left), "..", ctx.print(right))


@printer("dot3")
def print_dot3(node: Node, ctx: Context) -> Document:
    left, right = node.body
    return doc.cons(ctx.print(left), "...", ctx.print(right))
