"""Checks behind the rewrites the printers make.

Every function here is a pure question about a piece of tree ("can this block
be written as `&:method`?", "can this if/else be a ternary?") or a pure text
transform. The printers decide what to do with the answers; nothing here
changes the tree.
"""
import re
import typing

from .ast import Node

if typing.TYPE_CHECKING:
    from .context import Context


def is_empty_stmts(node: Node | None) -> bool:
    """A statement list with nothing in it but an uncommented placeholder."""
    return (
        node is not None
        and node.type == "stmts"
        and not node.has_comments()
        and all(isinstance(s, Node) and s.type == "void_stmt" and not s.has_comments() for s in node.body)
    )


def is_empty_bodystmt(node: Node) -> bool:
    stmts, rescue, else_stmts, ensure = node.body
    return is_empty_stmts(stmts) and rescue is None and else_stmts is None and ensure is None


def is_empty_params(node: Node | None) -> bool:
    if node is None:
        return True
    if node.type == "paren":
        node = node[0]
        if node is None:
            return True
    return all(not part for part in node.body)


############################################################################
# Shorthand blocks
############################################################################


def _is_period(operator) -> bool:
    if isinstance(operator, Node):
        operator = operator.value
    return operator in (".", "::")


def to_proc(block: Node) -> str | None:
    """If the block just calls a method with no arguments on its only
    parameter, return the `&:method` form for it.

        { |x| x.to_s }     =>  &:to_s
        do |x| x.to_s end  =>  &:to_s
    """
    block_var = block[0]
    if block_var is None:
        return None

    params = block_var[0]
    reqs, opts, rest, posts, keywords, kwrest, block_param = params.body
    if len(reqs or []) != 1 or opts or rest or posts or keywords or kwrest or block_param:
        return None

    param = reqs[0]
    if not isinstance(param, Node) or param.type != "@ident":
        return None

    if block.type == "do_block":
        bodystmt = block[1]
        stmts, rescue, else_stmts, ensure = bodystmt.body
        if rescue is not None or else_stmts is not None or ensure is not None:
            return None
    else:
        stmts = block[1]

    statements = [s for s in stmts.body if s.type != "void_stmt"]
    if len(statements) != 1 or len(stmts.body) != 1:
        return None

    call = statements[0]
    if call.type != "call" or call.has_comments():
        return None

    receiver, operator, message = call.body
    if receiver.type != "var_ref" or receiver.has_comments() or receiver[0].value != param.value:
        return None
    if not _is_period(operator):
        return None
    if not isinstance(message, Node) or message.type != "@ident" or message.has_comments():
        return None

    return f"&:{message.value}"


def _key_name(key: Node) -> str | None:
    match key.type:
        case "@label":
            return key.value[:-1]
        case "symbol_literal":
            return key[0].value
    return None


def to_proc_allowed(ctx: "Context") -> bool:
    """Whether the `&:method` rewrite may fire for the block attached at this
    `method_add_block`.

    It never fires when the block call is itself inside the brackets of an
    index (`foo[bar.map { |x| x.baz }]`), or when it's the value of a guarded
    hash key (by default `if:` and `unless:`, where frameworks call the proc
    with arguments that `&:method` would mishandle).
    """
    parent = ctx.parent
    while parent is not None and parent.node.type in ("args", "args_add_block", "arg_paren"):
        parent = parent.parent
    if parent is not None and parent.node.type in ("aref", "aref_field"):
        return False

    parent_node = ctx.parent_node
    if parent_node is not None and parent_node.type == "assoc_new" and parent_node[1] is ctx.node:
        name = _key_name(parent_node[0])
        if name is not None and name in ctx.options.to_proc_guarded_keys:
            return False

    return True


############################################################################
# Conditionals and loops
############################################################################

# Statements that can't sit in a branch of a ternary without parentheses.
NO_TERNARY = frozenset(
    [
        "alias",
        "assign",
        "break",
        "command",
        "command_call",
        "heredoc",
        "if",
        "if_mod",
        "ifop",
        "lambda",
        "massign",
        "next",
        "opassign",
        "rescue_mod",
        "return",
        "return0",
        "super",
        "undef",
        "unless",
        "unless_mod",
        "until_mod",
        "var_alias",
        "void_stmt",
        "while_mod",
        "yield",
        "yield0",
        "zsuper",
    ]
)


def _operator_text(operator) -> str:
    return operator.value if isinstance(operator, Node) else operator


def _is_and_or(node: Node) -> bool:
    return node.type == "binary" and _operator_text(node[1]) in ("and", "or")


def _is_keyword_predicate(node: Node) -> bool:
    """`and`, `or` and `not` bind looser than `?:`, so `a and b ? c : d`
    reads as `a and (b ? c : d)`."""
    if node.type == "not" or (node.type == "unary" and _operator_text(node[0]) == "not"):
        return True
    return _is_and_or(node)


def _can_ternary_stmts(stmts: Node) -> bool:
    if len(stmts.body) != 1 or stmts.has_comments():
        return False

    stmt = stmts[0]
    if stmt.has_comments():
        return False

    # `a ? b or c : d` would change what `or` applies to.
    if _is_and_or(stmt):
        return False

    return stmt.type not in NO_TERNARY


def can_ternary(node: Node) -> bool:
    """An if/unless with exactly one `else`, one statement on each side and
    a plain predicate can be printed as `predicate ? a : b`."""
    predicate, stmts, addition = node.body
    return (
        predicate.type not in ("assign", "opassign", "command_call", "command")
        and not _is_keyword_predicate(predicate)
        and addition is not None
        and addition.type == "else"
        and _can_ternary_stmts(stmts)
        and _can_ternary_stmts(addition[0])
    )


def contains_assignment(node) -> bool:
    """True if the node is, or somewhere holds, an assignment."""
    if isinstance(node, (list, tuple)):
        return any(contains_assignment(n) for n in node)
    if not isinstance(node, Node) or node.type.startswith("@"):
        return False
    if node.type in ("assign", "massign", "opassign"):
        return True
    return any(contains_assignment(child) for child in node.body)


def contains_single_conditional(stmts: Node) -> bool:
    """A body that is just another conditional; folding both into modifiers
    would give `a if b if c`."""
    return len(stmts.body) == 1 and stmts[0].type in ("if", "if_mod", "ifop", "unless", "unless_mod")


# Parents that bind tighter than a modifier, so `x = (a if b)` needs the
# parentheses to keep meaning the same thing.
INLINE_PARENS = frozenset(["args", "assign", "assoc_new", "binary", "call", "massign", "opassign"])


def needs_inline_parens(ctx: "Context") -> bool:
    return ctx.parent_is(*INLINE_PARENS)


############################################################################
# Hashes
############################################################################

_LABEL_PATTERN = re.compile(r"^[_A-Za-z]")
_BARE_WORD = re.compile(r"^[_A-Za-z][_A-Za-z0-9]*[?!]?$")


def is_valid_hash_label(symbol: Node) -> bool:
    """Keyword-argument style labels start with a letter or underscore and
    don't end in `=`."""
    label = symbol[0].value
    return _LABEL_PATTERN.match(label) is not None and not label.endswith("=")


def dyna_symbol_content(node: Node) -> str | None:
    """The content of a dynamic symbol with no interpolation, or None."""
    _, parts = node.body
    if not all(isinstance(p, Node) and p.type == "@tstring_content" for p in parts):
        return None
    return "".join(p.value for p in parts)


def _can_label(key: Node) -> bool:
    match key.type:
        case "@label":
            return True
        case "symbol_literal":
            return is_valid_hash_label(key)
        case "dyna_symbol":
            content = dyna_symbol_content(key)
            return content is not None and _BARE_WORD.match(content) is not None
    return False


def can_use_hash_labels(assocs: typing.Iterable[Node]) -> bool:
    """True if every key in the hash can be written `key:`. It's all or
    nothing: a hash never mixes the two styles."""
    for assoc in assocs:
        if assoc.type == "assoc_splat":
            continue
        if not _can_label(assoc[0]):
            return False
    return True


def skip_assign_indent(node: Node) -> bool:
    """Values that look right starting on the same line as the `=` or `=>`
    that introduces them, however big they are."""
    if node.type in (
        "array",
        "dyna_symbol",
        "hash",
        "heredoc",
        "lambda",
        "qsymbols",
        "qwords",
        "regexp_literal",
        "symbols",
        "words",
    ):
        return True
    return node.type == "call" and skip_assign_indent(node[0])


############################################################################
# Numbers
############################################################################


def canonical_int(value: str) -> str:
    """Normalize an integer literal without changing its value.

    Old style octal (`0755`) gets an explicit `0o`; plain decimals of five or
    more digits are grouped in threes (`1_234_567`).
    """
    sign = ""
    if value[:1] in ("-", "+"):
        sign, value = value[0], value[1:]

    if len(value) > 1 and value[0] == "0" and value[1].isdigit():
        return f"{sign}0o{value[1:]}"

    if value[:1] != "0" and len(value) >= 5 and value.isdigit():
        head = len(value) % 3 or 3
        groups = [value[:head]] + [value[i : i + 3] for i in range(head, len(value), 3)]
        return sign + "_".join(groups)

    return sign + value


############################################################################
# Strings
############################################################################

QUOTE_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def closing_quote(quote: str) -> str:
    """The delimiter that closes a string opened with `quote`."""
    if not quote.startswith("%"):
        return quote
    boundary = quote[-1]
    return QUOTE_PAIRS.get(boundary, boundary)


def is_plain(parts: typing.Sequence) -> bool:
    return all(isinstance(p, Node) and p.type == "@tstring_content" for p in parts)


def is_quote_locked(parts: typing.Sequence) -> bool:
    """Content whose meaning depends on the kind of quote around it: escapes
    and anything that would interpolate inside double quotes."""
    for part in parts:
        if not isinstance(part, Node) or part.type != "@tstring_content":
            return True
        value = part.value
        if "\\" in value or "#{" in value or "#@" in value or "#$" in value:
            return True
    return False


def preferred_quote(source_quote: str, parts: typing.Sequence, preferred: str) -> str:
    """The quote a string literal should print with.

    We only switch to the preferred quote when doing so can't change the
    string's value: no interpolation, no escapes and no occurrence of the
    preferred quote in the content. Otherwise the source quote stays.
    """
    if len(parts) == 0:
        return preferred
    if is_quote_locked(parts):
        return source_quote

    content = "".join(p.value for p in parts)
    if preferred in content:
        return source_quote
    if source_quote.startswith("%") and closing_quote(source_quote) in content:
        # Balanced nested brackets; leave them to the source delimiter.
        return source_quote
    return preferred


############################################################################
# Arrays
############################################################################

_WORD_UNSAFE = re.compile(r"[\s\\\[\]]")


def is_string_array(elements: typing.Sequence[Node]) -> bool:
    """Two or more plain strings that could be written as `%w[...]`."""
    if len(elements) < 2:
        return False

    for element in elements:
        if element.type != "string_literal" or element.has_comments():
            return False
        _, parts = element.body
        if len(parts) != 1 or parts[0].type != "@tstring_content":
            return False
        if _WORD_UNSAFE.search(parts[0].value):
            return False
    return True


def is_symbol_array(elements: typing.Sequence[Node]) -> bool:
    """Two or more plain symbols that could be written as `%i[...]`."""
    if len(elements) < 2:
        return False
    for element in elements:
        if element.type != "symbol_literal" or element.has_comments():
            return False
        if _WORD_UNSAFE.search(element[0].value):
            return False
    return True
