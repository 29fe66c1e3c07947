"""Tokens, strings, symbols, regular expressions and heredocs."""
import re

from .. import doc, embed, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, hardline, literalline, softline
from ..registry import printer


############################################################################
# Tokens
############################################################################


@printer(
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
    "@args_forward",
)
def print_token(node: Node, ctx: Context) -> Document:
    return node.value


@printer("@int")
def print_int(node: Node, ctx: Context) -> Document:
    return heuristics.canonical_int(node.value)


@printer("@tstring_content")
def print_string_content(node: Node, ctx: Context) -> Document:
    return doc.literal_lines(node.value)


@printer("@CHAR")
def print_char(node: Node, ctx: Context) -> Document:
    """`?a` character literals become ordinary one-character strings."""
    value = node.value
    quote = ctx.options.quote
    if len(value) != 2 or value[1] in ("\\", "'", '"', "#"):
        return value
    return f"{quote}{value[1]}{quote}"


@printer("@__end__")
def print_end_content(node: Node, ctx: Context) -> Document:
    content = node.value
    if content.startswith("__END__"):
        content = content[len("__END__") :].lstrip("\r\n")
    if content.endswith("\n"):
        content = content[:-1]
    if content == "":
        return "__END__"
    return doc.cons("__END__", literalline, doc.literal_lines(content))


############################################################################
# Strings
############################################################################


def string_parts(parts, ctx: Context) -> list[Document]:
    result = []
    for part in parts:
        if part.type == "@tstring_content":
            result.append(doc.literal_lines(part.value))
        else:
            result.append(ctx.print(part))
    return result


@printer("string_literal")
def print_string_literal(node: Node, ctx: Context) -> Document:
    source_quote, parts = node.body
    preferred = ctx.options.quote

    if len(parts) == 0:
        return preferred + preferred

    quote = heuristics.preferred_quote(source_quote, parts, preferred)
    return doc.cons(quote, *string_parts(parts, ctx), heuristics.closing_quote(quote))


@printer("xstring_literal")
def print_xstring_literal(node: Node, ctx: Context) -> Document:
    return doc.cons("`", *string_parts(node[0], ctx), "`")


@printer("string_concat")
def print_string_concat(node: Node, ctx: Context) -> Document:
    left, right = node.body
    return doc.group(ctx.print(left), " \\", doc.indent(hardline, ctx.print(right)))


@printer("string_embexpr")
def print_string_embexpr(node: Node, ctx: Context) -> Document:
    statements = ctx.print(node[0])

    # An interpolation written on one line stays on one line.
    if node.loc is None or node.loc.start_line == node.loc.end_line:
        return doc.cons("#{", doc.remove_lines(statements), "}")

    return doc.group("#{", doc.indent(softline, statements), softline, "}")


@printer("string_dvar")
def print_string_dvar(node: Node, ctx: Context) -> Document:
    return doc.cons("#{", ctx.print(node[0]), "}")


############################################################################
# Symbols
############################################################################


@printer("symbol_literal")
def print_symbol_literal(node: Node, ctx: Context) -> Document:
    return doc.cons(":", ctx.print(node[0]))


def dyna_symbol_body(node: Node, ctx: Context) -> Document:
    """A dynamic symbol without its leading colon."""
    source_quote, parts = node.body

    if source_quote.startswith("%s"):
        return doc.cons(source_quote, *string_parts(parts, ctx), heuristics.closing_quote(source_quote))

    if source_quote.startswith(":"):
        source_quote = source_quote[1:]
    quote = heuristics.preferred_quote(source_quote, parts, ctx.options.quote)
    return doc.cons(quote, *string_parts(parts, ctx), heuristics.closing_quote(quote))


@printer("dyna_symbol")
def print_dyna_symbol(node: Node, ctx: Context) -> Document:
    body = dyna_symbol_body(node, ctx)
    if node[0].startswith("%s"):
        return body
    return doc.cons(":", body)


############################################################################
# Regular expressions
############################################################################


def _content_matches(parts, pattern: re.Pattern) -> bool:
    return any(part.type == "@tstring_content" and pattern.search(part.value) for part in parts)


_SLASH = re.compile(r"/")
_BRACES = re.compile(r"[{}]")


@printer("regexp_literal")
def print_regexp_literal(node: Node, ctx: Context) -> Document:
    """Regexps print as `/.../` unless they contain a slash, or would read as
    division in a command's arguments, in which case `%r{...}`."""
    beging, parts, ending = node.body
    docs = string_parts(parts, ctx)

    first = parts[0] if len(parts) > 0 else None
    ambiguous = (
        first is not None
        and first.type == "@tstring_content"
        and first.value[:1] in (" ", "=")
        and ctx.inside("command", "command_call")
    )
    use_braces = ambiguous or _content_matches(parts, _SLASH)

    if use_braces and _content_matches(parts, _BRACES):
        return doc.cons(beging, *docs, ending)

    if use_braces:
        return doc.cons("%r{", *docs, "}", ending[1:])
    return doc.cons("/", *docs, "/", ending[1:])


############################################################################
# Heredocs
############################################################################


@printer("heredoc")
def print_heredoc(node: Node, ctx: Context) -> Document:
    return embed.print_heredoc(node, ctx)
