"""Method calls, their arguments and the blocks attached to them."""
import typing

from .. import chains, comments, doc, heuristics
from ..ast import Node
from ..context import Context, Printed
from ..doc import Document, hardline, line, softline
from ..registry import printer

ARGUMENT_CONTAINERS = ("args", "args_add_block")


############################################################################
# Arguments
############################################################################


def arguments(ctx: Context) -> list[Document]:
    """The printed arguments of the args container at `ctx`, one per
    argument."""
    node = ctx.node
    if node.type == "args":
        docs = [ctx.print(arg) for arg in node.body]
    else:
        args, block = node.body
        docs = arguments(ctx.descend(args)) if args is not None else []
        if block is not None:
            docs.append(doc.cons("&", ctx.print(block)))

    if node.has_comments() and len(docs) > 0:
        docs[-1] = comments.splice(docs[-1], node.comments)
    return docs


def argument_list(ctx: Context, child: Node | None) -> list[Document]:
    """Print `child` (an argument container or a single argument) as a
    list of argument documents."""
    if child is None:
        return []
    if child.type in ARGUMENT_CONTAINERS:
        return arguments(ctx.descend(child))
    return [ctx.print(child)]


def argument_nodes(child: Node | None) -> list[Node]:
    if child is None:
        return []
    if child.type == "args":
        return list(child.body)
    if child.type == "args_add_block":
        args, block = child.body
        nodes = argument_nodes(args)
        return nodes + [block] if block is not None else nodes
    return [child]


def _trailing_comma(ctx: Context, contents: Node | None) -> Document:
    if not ctx.options.trailing_commas or contents is None:
        return None
    if contents.type == "args_add_block" and contents[1] is not None:
        # Nothing may follow a block argument.
        return None
    nodes = argument_nodes(contents)
    if len(nodes) == 1 and nodes[0].type in ("command", "command_call"):
        return None
    return doc.if_break(",", "")


def parenthesized(ctx: Context, contents: Node | None, docs: list[Document]) -> Document:
    """`(a, b, c)`, breaking to one argument per line."""
    if contents is not None and contents.type == "@args_forward":
        return doc.group("(", doc.indent(softline, "..."), softline, ")")

    return doc.group(
        "(",
        doc.indent(softline, doc.join(doc.cons(",", line), docs), _trailing_comma(ctx, contents)),
        softline,
        ")",
    )


@printer("args", "args_add_block")
def print_args(node: Node, ctx: Context) -> Document:
    return doc.join(", ", arguments(ctx))


@printer("arg_paren")
def print_arg_paren(node: Node, ctx: Context) -> Document:
    contents = node[0]
    if contents is None:
        return "()"
    return parenthesized(ctx, contents, argument_list(ctx, contents))


@printer("arg_star")
def print_arg_star(node: Node, ctx: Context) -> Document:
    return doc.cons("*", ctx.print(node[0]))


@printer("blockarg")
def print_blockarg(node: Node, ctx: Context) -> Document:
    return doc.cons("&", ctx.print(node[0]))


############################################################################
# Calls
############################################################################


def call_operator(operator, message=None) -> str:
    """The text of a call operator. `Foo::bar` prints as `Foo.bar`; both
    mean the same method call."""
    if isinstance(operator, Node):
        operator = operator.value
    if operator == "::" and not (isinstance(message, Node) and message.type == "@const"):
        return "."
    return operator


def _is_where_not(receiver: Node, message) -> bool:
    # Keep `.where.not` together.
    if receiver.type != "call" or not isinstance(message, Node) or message.type == "@op":
        return False
    inner = receiver[2]
    return isinstance(inner, Node) and inner.value == "where" and message.value == "not"


@printer("call")
def print_call(node: Node, ctx: Context) -> Printed:
    receiver, operator, message = node.body

    received = ctx.visit(receiver)
    operator_doc = call_operator(operator, message)
    message_doc = None if message == "call" else ctx.print(message)

    # A comment above the message keeps the operator on the receiver's line.
    operator_trailing = isinstance(message, Node) and message.has_leading_comments()
    if operator_trailing:
        left = doc.cons(received.doc, operator_doc)
        right: list[Document] = [message_doc]
    else:
        left = received.doc
        right = [operator_doc, message_doc]

    if receiver.type in chains.NO_INDENT:
        return Printed(doc.cons(left, *right))

    if not _is_where_not(receiver, message):
        right.insert(0, hardline if receiver.has_comments() else softline)

    link = None
    if chains.continues_chain(ctx):
        if received.link is not None and operator_trailing:
            link = chains.extend(received.link, left, operator_doc, *right, call=True, receiver=receiver)
        else:
            link = chains.extend(received.link, left, *right, call=True, receiver=receiver)

    if chains.is_root(ctx, received.link):
        assert received.link is not None
        tail = doc.cons(operator_doc, *right) if operator_trailing else doc.cons(*right)
        return Printed(chains.vertical(received.link, tail, doc.cons(left, doc.group(*right))))

    return Printed(doc.group(left, doc.group(doc.indent(*right))), link)


@printer("fcall", "vcall")
def print_call_name(node: Node, ctx: Context) -> Document:
    return ctx.print(node[0])


def _print_method_add_arg(node: Node, ctx: Context, extra: typing.Sequence[Document] = ()) -> Printed:
    callee, argument_node = node.body
    method = ctx.visit(callee)

    is_paren = argument_node.type == "arg_paren"
    if is_paren:
        paren_ctx = ctx.descend(argument_node)
        contents = argument_node[0]
    else:
        paren_ctx = ctx
        contents = argument_node
    docs = argument_list(paren_ctx, contents) + list(extra)

    if len(docs) == 0 and (contents is None or contents.type != "@args_forward"):
        # `foo()` is just `foo`, except where the parentheses say it's a
        # method call rather than a constant or a `.()` call.
        if callee.type == "fcall" and callee[0].type == "@const":
            return Printed(doc.cons(method.doc, "()"))
        if callee.type == "call" and callee[2] == "call":
            return Printed(doc.cons(method.doc, "()"))
        return Printed(method.doc)

    # A block argument can't be followed by a trailing comma.
    args_doc = parenthesized(paren_ctx, None if extra else contents, docs)
    if is_paren and argument_node.has_comments():
        args_doc = comments.splice(args_doc, argument_node.comments)

    link = None
    if chains.continues_chain(ctx):
        link = chains.extend(method.link, method.doc, args_doc, call=False, receiver=callee)

    if chains.is_root(ctx, method.link):
        assert method.link is not None
        if method.link.call_depth == method.link.depth:
            return Printed(chains.split_arguments(method.link, args_doc))
        return Printed(chains.vertical(method.link, args_doc, doc.cons(method.doc, args_doc)))

    return Printed(doc.cons(method.doc, args_doc), link)


@printer("method_add_arg")
def print_method_add_arg(node: Node, ctx: Context) -> Printed:
    return _print_method_add_arg(node, ctx)


def _with_block_argument(proc: str):
    def print_method_add_arg_with_block(node: Node, ctx: Context) -> Printed:
        return _print_method_add_arg(node, ctx, extra=(proc,))

    def print_command_with_block(node: Node, ctx: Context) -> Document:
        if node.type == "command":
            return _print_command(node, ctx, extra=(proc,))
        return _print_command_call(node, ctx, extra=(proc,))

    return print_method_add_arg_with_block, print_command_with_block


def _print_to_proc(node: Node, ctx: Context, proc: str) -> Document | None:
    callee = node[0]
    with_args, with_command = _with_block_argument(proc)

    match callee.type:
        case "call":
            return doc.group(ctx.print(callee), "(", doc.indent(softline, proc), softline, ")")
        case "method_add_arg":
            return ctx.print(callee, using=with_args)
        case "command" | "command_call":
            return ctx.print(callee, using=with_command)
        case "fcall" | "vcall":
            return doc.cons(ctx.print(callee), "(", proc, ")")
    return None


@printer("method_add_block")
def print_method_add_block(node: Node, ctx: Context) -> Document | Printed:
    callee, block = node.body

    if ctx.options.to_proc and not block.has_comments() and heuristics.to_proc_allowed(ctx):
        proc = heuristics.to_proc(block)
        if proc is not None:
            shorthand = _print_to_proc(node, ctx, proc)
            if shorthand is not None:
                return shorthand

    called = ctx.visit(callee)
    block_doc = ctx.print(block)

    link = None
    if chains.continues_chain(ctx):
        link = chains.extend(called.link, called.doc, block_doc, call=False, receiver=callee)

    if chains.is_root(ctx, called.link):
        assert called.link is not None
        if called.link.call_depth == called.link.depth:
            return Printed(chains.split_arguments(called.link, block_doc))
        return Printed(chains.vertical(called.link, block_doc, doc.cons(called.doc, block_doc)))

    return Printed(doc.cons(called.doc, block_doc), link)


############################################################################
# Commands
############################################################################


def _has_ternary_argument(args: Node | None) -> bool:
    return any(arg.type == "ifop" for arg in argument_nodes(args))


def _starts_with_def(args: Node | None) -> bool:
    nodes = argument_nodes(args)
    return len(nodes) > 0 and nodes[0].type in ("def", "defs")


def _print_command(node: Node, ctx: Context, extra: typing.Sequence[Document] = ()) -> Document:
    name, args = node.body
    command = ctx.print(name)
    joined = doc.join(doc.cons(",", line), argument_list(ctx, args) + list(extra))

    if _has_ternary_argument(args):
        broken = doc.cons(command, "(", doc.indent(softline, joined), softline, ")")
    elif _starts_with_def(args):
        broken = doc.cons(command, " ", joined)
    else:
        broken = doc.cons(command, " ", doc.align(doc.flat_width(command) + 1, joined))

    return doc.group(doc.if_break(broken, doc.cons(command, " ", joined)))


@printer("command")
def print_command(node: Node, ctx: Context) -> Document:
    return _print_command(node, ctx)


def _print_command_call(node: Node, ctx: Context, extra: typing.Sequence[Document] = ()) -> Document:
    receiver, operator, message, args = node.body
    parts = [ctx.print(receiver), call_operator(operator, message), ctx.print(message)]

    docs = argument_list(ctx, args) + list(extra)
    if len(docs) == 0:
        return doc.cons(*parts)

    joined = doc.join(doc.cons(",", line), docs)
    if _has_ternary_argument(args):
        broken = doc.cons(*parts, "(", doc.indent(softline, joined), softline, ")")
    elif message.value in ("to", "not_to", "to_not"):
        # RSpec expectations read better without the alignment.
        broken = doc.cons(*parts, " ", joined)
    else:
        head = doc.cons(*parts, " ")
        broken = doc.cons(head, doc.align(doc.flat_width(head), joined))

    return doc.group(doc.if_break(broken, doc.cons(*parts, " ", joined)))


@printer("command_call")
def print_command_call(node: Node, ctx: Context) -> Document:
    return _print_command_call(node, ctx)


############################################################################
# Blocks
############################################################################


@printer("block_var")
def print_block_var(node: Node, ctx: Context) -> Document:
    params, locals_ = node.body
    parts: list[Document] = ["|", doc.remove_lines(ctx.print(params))]
    if locals_:
        parts.extend(["; ", doc.join(", ", ctx.map(locals_))])
    parts.append("|")
    return doc.cons(*parts)


def _block_statements(node: Node) -> tuple[Node, bool]:
    """The statement list of a block and whether it also has rescue, else or
    ensure clauses."""
    if node.type == "brace_block":
        return node[1], False
    bodystmt = node[1]
    return bodystmt[0], any(part is not None for part in bodystmt.body[1:])


@printer("brace_block", "do_block")
def print_block(node: Node, ctx: Context) -> Document:
    block_var, body = node.body
    stmts, has_clauses = _block_statements(node)

    # Inside a command's arguments, do...end would bind to the command
    # instead, so braces have to stay braces.
    use_braces = node.type == "brace_block" and ctx.inside("command", "command_call")
    opening, closing = ("{", "}") if use_braces else ("do", "end")
    variables = doc.cons(" ", ctx.print(block_var)) if block_var is not None else None

    if has_clauses:
        return doc.cons(doc.break_parent, " ", opening, variables, ctx.print(body), hardline, closing)

    if node.type == "do_block":
        statements_doc = ctx.descend(body).print(stmts)
    else:
        statements_doc = ctx.print(stmts)

    empty = heuristics.is_empty_stmts(stmts)
    do_block = doc.cons(
        " ",
        opening,
        variables,
        None if empty else doc.indent(softline, statements_doc),
        softline,
        closing,
    )

    only_comments = all(s.type == "void_stmt" for s in stmts.body) and not empty
    parent = ctx.parent_node
    receiver_is_command = parent is not None and parent.type == "method_add_block" and parent[0].type in (
        "command",
        "command_call",
    )
    if only_comments or receiver_is_command:
        return doc.cons(doc.break_parent, do_block)

    if empty and block_var is None:
        brace_block: Document = " {}"
    else:
        brace_block = doc.cons(" {", variables, None if empty else doc.cons(" ", statements_doc), " }")

    return doc.group(doc.if_break(do_block, brace_block))


@printer("lambda")
def print_lambda(node: Node, ctx: Context) -> Document:
    params, body = node.body

    params_ctx = ctx
    params_node = params
    if params.type == "paren":
        params_ctx = ctx.descend(params)
        params_node = params[0]

    params_doc = None
    if not heuristics.is_empty_params(params_node):
        params_doc = doc.group("(", doc.indent(softline, params_ctx.print(params_node)), softline, ")")

    if body.type == "bodystmt":
        stmts, has_clauses = body[0], any(part is not None for part in body.body[1:])
        if has_clauses:
            return doc.cons(doc.break_parent, "->", params_doc, " do", ctx.print(body), hardline, "end")
        statements_doc = ctx.descend(body).print(stmts)
    else:
        stmts = body
        statements_doc = ctx.print(body)

    if heuristics.is_empty_stmts(stmts):
        return doc.cons("->", params_doc, " {}")

    in_command = ctx.inside("command", "command_call")
    return doc.group(
        doc.if_break(
            doc.cons(
                "->",
                params_doc,
                " ",
                "{" if in_command else "do",
                doc.indent(line, statements_doc),
                line,
                "}" if in_command else "end",
            ),
            doc.cons("->", params_doc, " { ", statements_doc, " }"),
        )
    )


############################################################################
# super and yield
############################################################################


@printer("super")
def print_super(node: Node, ctx: Context) -> Document:
    args = node[0]
    if args.type == "arg_paren":
        return doc.cons("super", ctx.print(args))

    return doc.group("super ", doc.align(6, doc.group(doc.join(doc.cons(",", line), argument_list(ctx, args)))))


@printer("zsuper")
def print_zsuper(node: Node, ctx: Context) -> Document:
    return "super"


@printer("yield")
def print_yield(node: Node, ctx: Context) -> Document:
    args = node[0]
    if args.type == "paren":
        return doc.cons("yield", ctx.print(args))
    return doc.cons("yield ", doc.join(", ", argument_list(ctx, args)))


@printer("yield0")
def print_yield0(node: Node, ctx: Context) -> Document:
    return "yield"
