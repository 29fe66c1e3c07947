"""Conditionals, loops, case, rescue and the other flow-control keywords."""
from .. import doc, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, break_parent, hardline, line, softline
from ..registry import printer
from .calls import ARGUMENT_CONTAINERS, argument_list, argument_nodes

############################################################################
# Conditionals
############################################################################


def _ternary_clause(stmts: Node, ctx: Context) -> Document:
    """One branch of a ternary. `not x` has to be `not(x)` there."""
    statement = stmts[0] if stmts.type == "stmts" else stmts
    if statement.type == "not" and statement[0] is not None:
        statement_ctx = ctx.descend(stmts) if statement is not stmts else ctx
        operand = statement_ctx.descend(statement).print(statement[0])
        return doc.cons("not(", operand, ")")
    return ctx.print(stmts)


def _ternary_clauses(keyword: str, truthy: Document, falsy: Document) -> list[Document]:
    if keyword == "if":
        return [truthy, " : ", falsy]
    return [falsy, " : ", truthy]


def _body(stmts: Node, ctx: Context) -> Document:
    """The indented body of a clause, or nothing if the body is empty."""
    if heuristics.is_empty_stmts(stmts):
        return None
    return doc.indent(softline, ctx.print(stmts))


def _with_addition(keyword: str, node: Node, ctx: Context, breaking: bool) -> Document:
    predicate, stmts, addition = node.body
    return doc.cons(
        f"{keyword} ",
        doc.align(len(keyword) + 1, ctx.print(predicate)),
        _body(stmts, ctx),
        softline,
        ctx.print(addition),
        softline,
        "end",
        break_parent if breaking else None,
    )


def _block_form(keyword: str, predicate: Document, body: Document) -> Document:
    return doc.cons(
        f"{keyword} ",
        doc.align(len(keyword) + 1, predicate),
        doc.indent(hardline, body) if body is not None else None,
        hardline,
        "end",
    )


def _inline(ctx: Context, *parts: Document) -> Document:
    """A modifier form, in parentheses if the parent would otherwise take
    part of it."""
    if heuristics.needs_inline_parens(ctx):
        return doc.cons("(", *parts, ")")
    return doc.cons(*parts)


def _print_single(node: Node, ctx: Context, keyword: str, modifier: bool) -> Document:
    predicate, statements = node.body[:2]
    predicate_doc = ctx.print(predicate)
    statements_doc = ctx.print(statements)

    multiline = doc.cons(
        f"{keyword} ",
        doc.align(len(keyword) + 1, predicate_doc),
        doc.indent(softline, statements_doc),
        softline,
        "end",
    )

    # Comments inside the body would end up in the middle of the line.
    body_has_comments = not modifier and (
        statements.has_comments() or any(s.has_comments() for s in statements.body)
    )
    if not ctx.options.modifier or body_has_comments:
        return doc.cons(multiline, break_parent)

    inline = _inline(ctx, statements_doc, f" {keyword} ", predicate_doc)

    # `a = 1 if a.nil?` declares `a` before the predicate runs; the block
    # form would be a NameError.
    if modifier and heuristics.contains_assignment(statements):
        return inline

    return doc.group(doc.if_break(multiline, inline))


def _print_conditional(node: Node, ctx: Context, keyword: str) -> Document:
    predicate, stmts, addition = node.body

    if ctx.options.inline_conditionals and heuristics.can_ternary(node):
        parts = [ctx.print(predicate), " ? "]
        parts.extend(
            _ternary_clauses(
                keyword,
                _ternary_clause(stmts, ctx),
                _ternary_clause(addition[0], ctx.descend(addition)),
            )
        )
        if ctx.parent_is("binary", "call"):
            parts = ["(", *parts, ")"]
        return doc.group(doc.if_break(_with_addition(keyword, node, ctx, False), doc.cons(*parts)))

    if addition is not None:
        return doc.group(_with_addition(keyword, node, ctx, True))

    if heuristics.is_empty_stmts(stmts):
        return _block_form(keyword, ctx.print(predicate), None)

    # Modifiers would either hide the assignment from the body or stack up as
    # `a if b if c`.
    if heuristics.contains_assignment(predicate) or heuristics.contains_single_conditional(stmts):
        return _block_form(keyword, ctx.print(predicate), ctx.print(stmts))

    return _print_single(node, ctx, keyword, modifier=False)


@printer("if")
def print_if(node: Node, ctx: Context) -> Document:
    return _print_conditional(node, ctx, "if")


@printer("unless")
def print_unless(node: Node, ctx: Context) -> Document:
    return _print_conditional(node, ctx, "unless")


@printer("if_mod")
def print_if_mod(node: Node, ctx: Context) -> Document:
    return _print_single(node, ctx, "if", modifier=True)


@printer("unless_mod")
def print_unless_mod(node: Node, ctx: Context) -> Document:
    return _print_single(node, ctx, "unless", modifier=True)


@printer("elsif")
def print_elsif(node: Node, ctx: Context) -> Document:
    predicate, stmts, addition = node.body
    parts = [
        doc.group("elsif ", doc.align(6, ctx.print(predicate))),
        doc.indent(hardline, ctx.print(stmts)) if not heuristics.is_empty_stmts(stmts) else None,
    ]
    if addition is not None:
        parts.append(doc.group(hardline, ctx.print(addition)))
    return doc.group(*parts)


@printer("else")
def print_else(node: Node, ctx: Context) -> Document:
    stmts = node[0]
    # A command in an else branch reads badly as part of a ternary.
    forced = break_parent if len(stmts.body) == 1 and stmts[0].type == "command" else None
    return doc.cons(forced, "else", _body(stmts, ctx))


@printer("ifop")
def print_ifop(node: Node, ctx: Context) -> Document:
    predicate, truthy, falsy = node.body
    predicate_doc = ctx.print(predicate)
    truthy_doc = _ternary_clause(truthy, ctx)
    falsy_doc = _ternary_clause(falsy, ctx)

    return doc.group(
        doc.if_break(
            doc.cons(
                "if ",
                doc.align(3, predicate_doc),
                doc.indent(softline, truthy_doc),
                softline,
                "else",
                doc.indent(softline, falsy_doc),
                softline,
                "end",
            ),
            doc.cons(predicate_doc, " ? ", *_ternary_clauses("if", truthy_doc, falsy_doc)),
        )
    )


############################################################################
# Loops
############################################################################


def _print_loop(node: Node, ctx: Context, keyword: str, modifier: bool) -> Document:
    predicate, body = node.body

    if not modifier and heuristics.is_empty_stmts(body):
        return doc.group(doc.group(keyword, " ", ctx.print(predicate)), hardline, "end")

    predicate_doc = ctx.print(predicate)
    body_doc = ctx.print(body)
    inline = _inline(ctx, body_doc, f" {keyword} ", predicate_doc)

    # `begin ... end while x` runs the body once before testing; as a block
    # loop it wouldn't.
    if modifier and body.type == "begin":
        return inline

    block = doc.cons(
        f"{keyword} ",
        doc.align(len(keyword) + 1, predicate_doc),
        doc.indent(softline, body_doc),
        softline,
        "end",
    )

    if not ctx.options.modifier or heuristics.contains_assignment(predicate):
        return doc.cons(break_parent, block)

    return doc.group(doc.if_break(block, inline))


@printer("while")
def print_while(node: Node, ctx: Context) -> Document:
    return _print_loop(node, ctx, "while", modifier=False)


@printer("until")
def print_until(node: Node, ctx: Context) -> Document:
    return _print_loop(node, ctx, "until", modifier=False)


@printer("while_mod")
def print_while_mod(node: Node, ctx: Context) -> Document:
    return _print_loop(node, ctx, "while", modifier=True)


@printer("until_mod")
def print_until_mod(node: Node, ctx: Context) -> Document:
    return _print_loop(node, ctx, "until", modifier=True)


@printer("for")
def print_for(node: Node, ctx: Context) -> Document:
    target, iterable, stmts = node.body
    return doc.group(
        "for ",
        ctx.print(target),
        " in ",
        ctx.print(iterable),
        doc.indent(hardline, ctx.print(stmts)) if not heuristics.is_empty_stmts(stmts) else None,
        hardline,
        "end",
    )


############################################################################
# case
############################################################################


@printer("case")
def print_case(node: Node, ctx: Context) -> Document:
    value, clause = node.body
    return doc.cons(
        "case",
        doc.cons(" ", ctx.print(value)) if value is not None else None,
        hardline,
        ctx.print(clause),
        hardline,
        "end",
    )


@printer("when")
def print_when(node: Node, ctx: Context) -> Document:
    args, stmts, addition = node.body

    # fill() wants content and separators alternating, so the comma rides
    # along with the item before it.
    predicates = argument_list(ctx, args)
    items: list[Document] = []
    for index, predicate in enumerate(predicates):
        if index < len(predicates) - 1:
            items.extend([doc.cons(predicate, ","), line])
        else:
            items.append(predicate)

    parts = [doc.cons("when ", doc.align(5, doc.fill(items)))]
    if not heuristics.is_empty_stmts(stmts):
        parts.append(doc.indent(hardline, ctx.print(stmts)))
    if addition is not None:
        parts.extend([hardline, ctx.print(addition)])
    return doc.group(*parts)


@printer("in")
def print_in(node: Node, ctx: Context) -> Document:
    pattern, stmts, addition = node.body
    parts = [doc.cons("in ", doc.align(3, ctx.print(pattern)))]
    if not heuristics.is_empty_stmts(stmts):
        parts.append(doc.indent(hardline, ctx.print(stmts)))
    if addition is not None:
        parts.extend([hardline, ctx.print(addition)])
    return doc.group(*parts)


############################################################################
# Patterns
############################################################################

_PATTERN_PARENTS = ("aryptn", "binary", "hshptn", "rassign")


@printer("aryptn")
def print_aryptn(node: Node, ctx: Context) -> Document:
    constant, *items = node.body
    args = doc.group(doc.join(doc.cons(",", line), ctx.map(items)))

    # `in [a]` and `in a` mean different things.
    if constant is not None or ctx.parent_is(*_PATTERN_PARENTS) or len(items) < 2:
        args = doc.cons("[", args, "]")

    if constant is not None:
        return doc.cons(ctx.print(constant), args)
    return args


def _print_pattern_pair(pair, ctx: Context) -> Document:
    if isinstance(pair, Node):
        return ctx.print(pair)
    key, value = pair
    if value is None:
        return ctx.print(key)
    return doc.cons(ctx.print(key), " ", ctx.print(value))


@printer("hshptn")
def print_hshptn(node: Node, ctx: Context) -> Document:
    constant, pairs = node.body
    if len(pairs) == 0:
        return doc.cons(ctx.print(constant), "[]") if constant is not None else "{}"

    args = doc.group(doc.join(doc.cons(",", line), [_print_pattern_pair(p, ctx) for p in pairs]))

    if constant is not None:
        return doc.cons(ctx.print(constant), "[", args, "]")
    if ctx.parent_is(*_PATTERN_PARENTS):
        return doc.cons("{ ", args, " }")
    return args


@printer("rassign")
def print_rassign(node: Node, ctx: Context) -> Document:
    value, operator, pattern = node.body
    return doc.group(ctx.print(value), f" {operator}", doc.group(doc.indent(line, ctx.print(pattern))))


############################################################################
# rescue and ensure
############################################################################


@printer("rescue")
def print_rescue(node: Node, ctx: Context) -> Document:
    rescue_ex, stmts, next_rescue = node.body

    parts: list[Document] = ["rescue"]
    if rescue_ex is not None:
        parts.append(doc.align(7, ctx.print(rescue_ex)))
    else:
        # A bare rescue catches StandardError; say so.
        parts.append(" StandardError")

    if not heuristics.is_empty_stmts(stmts):
        parts.append(doc.indent(hardline, ctx.print(stmts)))

    if next_rescue is not None:
        parts.extend([hardline, ctx.print(next_rescue)])

    return doc.group(*parts)


@printer("rescue_ex")
def print_rescue_ex(node: Node, ctx: Context) -> Document:
    exceptions, variable = node.body

    parts: list[Document] = []
    if isinstance(exceptions, (list, tuple)):
        if len(exceptions) > 0:
            parts.extend([" ", doc.group(doc.join(doc.cons(",", line), ctx.map(exceptions)))])
    elif exceptions is not None:
        if exceptions.type in ARGUMENT_CONTAINERS or exceptions.type == "mrhs":
            parts.extend([" ", doc.group(doc.join(doc.cons(",", line), argument_list(ctx, exceptions)))])
        else:
            parts.extend([" ", ctx.print(exceptions)])

    if len(parts) == 0:
        parts.append(" StandardError")

    if variable is not None:
        parts.extend([" => ", ctx.print(variable)])

    return doc.group(*parts)


@printer("ensure")
def print_ensure(node: Node, ctx: Context) -> Document:
    stmts = node[0]
    if heuristics.is_empty_stmts(stmts):
        return "ensure"
    return doc.cons("ensure", doc.indent(hardline, ctx.print(stmts)))


@printer("rescue_mod")
def print_rescue_mod(node: Node, ctx: Context) -> Document:
    statement, value = node.body
    return doc.cons(
        "begin",
        doc.indent(hardline, ctx.print(statement)),
        hardline,
        "rescue StandardError",
        doc.indent(hardline, ctx.print(value)),
        hardline,
        "end",
    )


############################################################################
# return, break and next
############################################################################


def _single_argument(ctx: Context, args: Node) -> tuple[Context, Node] | None:
    """The only argument in an argument container, with the context to print
    it from, or None if there isn't exactly one."""
    while args.type in ARGUMENT_CONTAINERS:
        if args.type == "args_add_block":
            inner, block = args.body
            if block is not None or inner is None:
                return None
        else:
            if len(args.body) != 1:
                return None
            inner = args[0]
        if args.has_comments():
            return None
        ctx = ctx.descend(args)
        args = inner
    return ctx, args


def _paren_statement(paren: Node) -> Node | None:
    """The only statement inside a `paren`, if there is just one."""
    contents = paren[0]
    if paren.has_comments() or contents is None or contents.type != "stmts":
        return None
    if contents.has_comments() or len(contents.body) != 1:
        return None
    return contents[0]


def _can_skip_return_parens(statement: Node) -> bool:
    if statement.type == "binary" and statement[1] in ("and", "or"):
        return False
    return statement.type != "not"


@printer("return")
def print_return(node: Node, ctx: Context) -> Document:
    args = node[0]
    if len(argument_nodes(args)) == 0:
        return "return"

    values: list[Document] | None = None
    single = _single_argument(ctx, args)
    if single is not None:
        arg_ctx, arg = single

        if arg.type == "paren":
            statement = _paren_statement(arg)
            if statement is None or not _can_skip_return_parens(statement):
                return doc.cons("return", ctx.print(args))
            arg_ctx = arg_ctx.descend(arg).descend(arg[0])
            arg = statement

        # `return [a, b]` prints like `return a, b`.
        if arg.type == "array" and arg[0] is not None and arg[0].type == "args" and len(arg[0].body) > 1:
            values = argument_list(arg_ctx.descend(arg), arg[0])
        else:
            values = [arg_ctx.print(arg)]

    if values is None:
        values = argument_list(ctx, args)

    brackets = len(values) > 1
    return doc.group(
        "return",
        doc.if_break(" [" if brackets else "(", " "),
        doc.indent(softline, doc.join(doc.cons(",", line), values)),
        softline,
        doc.if_break("]" if brackets else ")", ""),
    )


@printer("return0")
def print_return0(node: Node, ctx: Context) -> Document:
    return "return"


# Parentheses around these change what the keyword applies to.
_UNSKIPPABLE_PARENS = frozenset(["if_mod", "rescue_mod", "unless_mod", "until_mod", "while_mod"])


def _print_flow_control(node: Node, ctx: Context, keyword: str) -> Document:
    args = node[0]
    if len(argument_nodes(args)) == 0:
        return keyword

    single = _single_argument(ctx, args)
    if single is not None and single[1].type == "paren":
        arg_ctx, paren = single
        statement = _paren_statement(paren)
        if statement is not None and statement.type not in _UNSKIPPABLE_PARENS:
            return doc.cons(f"{keyword} ", arg_ctx.descend(paren).print(paren[0]))
        return doc.cons(keyword, arg_ctx.print(paren))

    return doc.cons(f"{keyword} ", doc.join(", ", argument_list(ctx, args)))


@printer("break")
def print_break(node: Node, ctx: Context) -> Document:
    return _print_flow_control(node, ctx, "break")


@printer("next")
def print_next(node: Node, ctx: Context) -> Document:
    return _print_flow_control(node, ctx, "next")


@printer("redo")
def print_redo(node: Node, ctx: Context) -> Document:
    return "redo"


@printer("retry")
def print_retry(node: Node, ctx: Context) -> Document:
    return "retry"
