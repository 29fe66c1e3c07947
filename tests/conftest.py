"""Small constructors for building syntax trees in tests.

They mirror the JSON shapes the parser produces, so a test reads roughly like
the Ruby it stands for:

    program(assign(var_field("x"), integer("1")))   # x = 1
"""
from rubyfmt.ast import Comment, Node, Span, node, token
from rubyfmt.options import Options
from rubyfmt.printer import format_tree


def at(n: Node, start: int, end: int | None = None) -> Node:
    """Give a node a location covering the given lines."""
    n.loc = Span(start, 0, end if end is not None else start, 0)
    return n


def commented(n: Node, *comments: Comment) -> Node:
    n.comments.extend(comments)
    return n


def ident(name: str) -> Node:
    return token("@ident", name)


def const(name: str) -> Node:
    return token("@const", name)


def integer(value: str) -> Node:
    return token("@int", value)


def label(name: str) -> Node:
    return token("@label", f"{name}:")


def var_ref(name: str) -> Node:
    return node("var_ref", ident(name))


def var_field(name: str) -> Node:
    return node("var_field", ident(name))


def vcall(name: str) -> Node:
    return node("vcall", ident(name))


def string(text: str, quote: str = "'") -> Node:
    return node("string_literal", quote, [token("@tstring_content", text)])


def symbol(name: str) -> Node:
    return node("symbol_literal", ident(name))


def stmts(*statements: Node) -> Node:
    return node("stmts", *statements)


def void() -> Node:
    return node("void_stmt")


def program(*statements: Node) -> Node:
    return node("program", stmts(*statements))


def args(*values: Node) -> Node:
    return node("args", *values)


def arg_paren(*values: Node) -> Node:
    if len(values) == 0:
        return node("arg_paren", None)
    return node("arg_paren", node("args_add_block", args(*values), None))


def call(receiver: Node, name: str, operator: str = ".") -> Node:
    return node("call", receiver, operator, ident(name))


def method_call(receiver: Node, name: str, *values: Node) -> Node:
    return node("method_add_arg", call(receiver, name), arg_paren(*values))


def fcall(name: str, *values: Node) -> Node:
    return node("method_add_arg", node("fcall", ident(name)), arg_paren(*values))


def command(name: str, *values: Node) -> Node:
    return node("command", ident(name), node("args_add_block", args(*values), None))


def array(*values: Node) -> Node:
    if len(values) == 0:
        return node("array", None)
    return node("array", args(*values))


def hash_literal(*pairs: tuple[Node, Node]) -> Node:
    if len(pairs) == 0:
        return node("hash", None)
    return node("hash", node("assoclist_from_args", *(node("assoc_new", k, v) for k, v in pairs)))


def params(*names: str) -> Node:
    reqs = [ident(name) for name in names] or None
    return node("params", reqs, None, None, None, None, None, None)


def brace_block(param_names: list[str], *statements: Node) -> Node:
    block_var = node("block_var", params(*param_names), None) if param_names else None
    return node("brace_block", block_var, stmts(*statements))


def bodystmt(*statements: Node, rescue=None, else_stmts=None, ensure=None) -> Node:
    if len(statements) == 0:
        statements = (void(),)
    return node("bodystmt", stmts(*statements), rescue, else_stmts, ensure)


def define(name: str, *statements: Node, param_names: tuple[str, ...] = ()) -> Node:
    return node("def", ident(name), params(*param_names), bodystmt(*statements))


def assign(target: Node, value: Node) -> Node:
    return node("assign", target, value)


def if_(predicate: Node, *statements: Node, addition: Node | None = None) -> Node:
    return node("if", predicate, stmts(*statements), addition)


def else_(*statements: Node) -> Node:
    return node("else", stmts(*statements))


def heredoc(opener: str, content: str, terminator: str) -> Node:
    parts = [token("@tstring_content", content)] if content else []
    return node("heredoc", opener, parts, terminator)


def fmt(tree: Node, **options) -> str:
    return format_tree(tree, Options(**options))
