"""The syntax tree handed to us by the parser.

Trees arrive as JSON: every node is an object with a `type` tag, a `body`
array of tag-dependent children, and optionally `comments` and `loc`. Leaf
tokens have tags starting with `@` and carry their source text as the only
element of their body.
"""
import dataclasses
import json
import typing

from .errors import StructuralError


class Span(typing.NamedTuple):
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclasses.dataclass
class Comment:
    text: str
    leading: bool = False
    line: int | None = None

    @property
    def is_block(self) -> bool:
        return self.text.startswith("=begin")


@dataclasses.dataclass
class Node:
    type: str
    body: tuple
    comments: list[Comment] = dataclasses.field(default_factory=list)
    loc: Span | None = None

    def __getitem__(self, index: int):
        return self.body[index]

    def __len__(self) -> int:
        return len(self.body)

    @property
    def value(self) -> str:
        """The source text of a token node."""
        assert self.type.startswith("@"), f"{self.type} is not a token"
        return self.body[0]

    @property
    def start_line(self) -> int | None:
        return self.loc.start_line if self.loc is not None else None

    @property
    def end_line(self) -> int | None:
        return self.loc.end_line if self.loc is not None else None

    def has_comments(self) -> bool:
        return len(self.comments) > 0

    def has_leading_comments(self) -> bool:
        return any(comment.leading for comment in self.comments)

    def children(self) -> typing.Iterator["Node"]:
        """All the nodes directly below this one, in order, including nodes
        nested in the fixed-arity lists some productions carry."""

        def walk(value):
            if isinstance(value, Node):
                yield value
            elif isinstance(value, (list, tuple)):
                for item in value:
                    yield from walk(item)

        if self.type.startswith("@"):
            return iter(())
        return walk(self.body)

    def walk(self) -> typing.Iterator["Node"]:
        yield self
        for child in self.children():
            yield from child.walk()

    def payload(self, limit: int = 400) -> str:
        result = json.dumps(dump(self), indent=2)
        if len(result) > limit:
            result = result[:limit] + "..."
        return result

    def format_lines(self) -> list[str]:
        lines = []

        def format_node(node: Node, indent: int):
            if node.type.startswith("@"):
                lines.append((" " * indent) + f"{node.type}:{repr(node.value)}")
                return

            where = f" [{node.loc.start_line}, {node.loc.end_line}]" if node.loc else ""
            lines.append((" " * indent) + f"{node.type}{where}")
            for child in node.children():
                format_node(child, indent + 2)

        format_node(self, 0)
        return lines

    def format(self) -> str:
        return "\n".join(self.format_lines())


def node(type: str, *body, comments: list[Comment] | None = None, loc: Span | None = None) -> Node:
    return Node(type=type, body=tuple(body), comments=comments or [], loc=loc)


def token(type: str, value: str, loc: Span | None = None) -> Node:
    if not type.startswith("@"):
        type = "@" + type
    return Node(type=type, body=(value,), loc=loc)


TOKEN_TYPES = frozenset(
    [
        "@int",
        "@float",
        "@rational",
        "@imaginary",
        "@ident",
        "@const",
        "@ivar",
        "@cvar",
        "@gvar",
        "@kw",
        "@op",
        "@label",
        "@period",
        "@backref",
        "@backtick",
        "@tstring_content",
        "@CHAR",
        "@args_forward",
        "@__end__",
    ]
)

# Every production the printer knows how to handle. Anything else in a tree is
# a structural error.
NODE_TYPES = TOKEN_TYPES | frozenset(
    [
        # Statements and bodies
        "program",
        "stmts",
        "void_stmt",
        "bodystmt",
        "paren",
        "begin",
        "BEGIN",
        "END",
        # Variables and references
        "var_ref",
        "var_field",
        "vcall",
        "const_path_ref",
        "const_path_field",
        "top_const_ref",
        "top_const_field",
        "field",
        "aref",
        "aref_field",
        "defined",
        # Assignment
        "assign",
        "opassign",
        "massign",
        "mlhs",
        "mlhs_paren",
        "mrhs",
        # Operators
        "binary",
        "unary",
        "not",
        "dot2",
        "dot3",
        # Strings, symbols, regexps
        "string_literal",
        "xstring_literal",
        "string_concat",
        "string_embexpr",
        "string_dvar",
        "symbol_literal",
        "dyna_symbol",
        "regexp_literal",
        "heredoc",
        # Collections
        "array",
        "qwords",
        "qsymbols",
        "words",
        "symbols",
        "word",
        "hash",
        "assoclist_from_args",
        "bare_assoc_hash",
        "assoc_new",
        "assoc_splat",
        # Arguments
        "args",
        "args_add_block",
        "arg_paren",
        "arg_star",
        "blockarg",
        # Calls and blocks
        "call",
        "fcall",
        "method_add_arg",
        "method_add_block",
        "command",
        "command_call",
        "brace_block",
        "do_block",
        "block_var",
        "lambda",
        "super",
        "zsuper",
        "yield",
        "yield0",
        # Parameters
        "params",
        "rest_param",
        "kwrest_param",
        "excessed_comma",
        # Definitions
        "def",
        "defs",
        "class",
        "module",
        "sclass",
        "alias",
        "var_alias",
        "undef",
        # Control flow
        "if",
        "unless",
        "elsif",
        "else",
        "if_mod",
        "unless_mod",
        "ifop",
        "while",
        "until",
        "while_mod",
        "until_mod",
        "for",
        "case",
        "when",
        "in",
        "rescue",
        "rescue_ex",
        "ensure",
        "rescue_mod",
        "return",
        "return0",
        "break",
        "next",
        "redo",
        "retry",
        # Pattern matching
        "aryptn",
        "hshptn",
        "rassign",
    ]
)

# How many children each fixed-shape production has. Productions missing from
# here (statement lists, argument lists, patterns...) take any number.
ARITY = {
    "program": 1,
    "void_stmt": 0,
    "bodystmt": 4,
    "paren": 1,
    "begin": 1,
    "BEGIN": 1,
    "END": 1,
    "var_ref": 1,
    "var_field": 1,
    "vcall": 1,
    "const_path_ref": 2,
    "const_path_field": 2,
    "top_const_ref": 1,
    "top_const_field": 1,
    "field": 3,
    "aref": 2,
    "aref_field": 2,
    "defined": 1,
    "assign": 2,
    "opassign": 3,
    "massign": 2,
    "mlhs_paren": 1,
    "binary": 3,
    "unary": 2,
    "not": 1,
    "dot2": 2,
    "dot3": 2,
    "string_literal": 2,
    "xstring_literal": 1,
    "string_concat": 2,
    "string_embexpr": 1,
    "string_dvar": 1,
    "symbol_literal": 1,
    "dyna_symbol": 2,
    "regexp_literal": 3,
    "heredoc": 3,
    "array": 1,
    "hash": 1,
    "assoc_new": 2,
    "assoc_splat": 1,
    "args_add_block": 2,
    "arg_paren": 1,
    "arg_star": 1,
    "blockarg": 1,
    "call": 3,
    "fcall": 1,
    "method_add_arg": 2,
    "method_add_block": 2,
    "command": 2,
    "command_call": 4,
    "brace_block": 2,
    "do_block": 2,
    "block_var": 2,
    "lambda": 2,
    "super": 1,
    "zsuper": 0,
    "yield": 1,
    "yield0": 0,
    "params": 7,
    "rest_param": 1,
    "kwrest_param": 1,
    "excessed_comma": 0,
    "def": 3,
    "defs": 5,
    "class": 3,
    "module": 2,
    "sclass": 2,
    "alias": 2,
    "var_alias": 2,
    "if": 3,
    "unless": 3,
    "elsif": 3,
    "else": 1,
    "if_mod": 2,
    "unless_mod": 2,
    "ifop": 3,
    "while": 2,
    "until": 2,
    "while_mod": 2,
    "until_mod": 2,
    "for": 3,
    "case": 2,
    "when": 3,
    "in": 3,
    "rescue": 3,
    "rescue_ex": 2,
    "ensure": 1,
    "rescue_mod": 2,
    "return": 1,
    "return0": 0,
    "break": 1,
    "next": 1,
    "redo": 0,
    "retry": 0,
    "hshptn": 2,
    "rassign": 3,
}


############################################################################
# JSON
############################################################################


def _load_value(value: typing.Any) -> typing.Any:
    if isinstance(value, dict):
        return load(value)
    if isinstance(value, list):
        return [_load_value(v) for v in value]
    return value


def _load_comment(value: typing.Any) -> Comment:
    if not isinstance(value, dict):
        raise StructuralError("comment", value, None, "comments must be objects")

    text = value.get("text")
    if text is None:
        # Ripper hands us the comment without its leading marker.
        raw = value.get("value")
        if not isinstance(raw, str):
            raise StructuralError("comment", value, None, "comment has no text")
        text = "#" + raw

    return Comment(text=text.rstrip("\r\n"), leading=bool(value.get("leading", False)), line=value.get("line"))


def load(obj: typing.Any) -> Node:
    """Convert a decoded JSON object into a Node tree."""
    if not isinstance(obj, dict) or not isinstance(obj.get("type"), str):
        raise StructuralError("<unknown>", obj, None, "expected a node object with a 'type'")

    loc = obj.get("loc")
    span = None
    if loc is not None:
        if not isinstance(loc, list) or len(loc) != 4:
            raise StructuralError(obj["type"], obj, None, "'loc' must be [sl, sc, el, ec]")
        span = Span(*loc)

    body = obj.get("body", [])
    if not isinstance(body, list):
        body = [body]

    return Node(
        type=obj["type"],
        body=tuple(_load_value(v) for v in body),
        comments=[_load_comment(c) for c in obj.get("comments") or []],
        loc=span,
    )


def loads(text: str) -> Node:
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise StructuralError("<json>", text[:80], None, f"invalid JSON tree: {e}") from e
    return load(decoded)


def dump(value: typing.Any) -> typing.Any:
    """The JSON form of a tree, the inverse of `load`."""
    if isinstance(value, Node):
        result: dict[str, typing.Any] = {"type": value.type, "body": [dump(v) for v in value.body]}
        if value.comments:
            result["comments"] = [dataclasses.asdict(c) for c in value.comments]
        if value.loc is not None:
            result["loc"] = list(value.loc)
        return result
    if isinstance(value, (list, tuple)):
        return [dump(v) for v in value]
    return value
