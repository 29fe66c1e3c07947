"""Array and hash literals."""
from .. import comments, doc, heuristics
from ..ast import Node
from ..context import Context
from ..doc import Document, hardline, line, softline
from ..registry import printer
from .calls import argument_list, argument_nodes
from .literals import dyna_symbol_body, string_parts


def _empty_collection(node: Node, opening: str, closing: str) -> Document:
    """`[]` or `{}`, with any comments that were written between the
    brackets kept there."""
    inside, outside = comments.inner_comments(node)
    if len(inside) == 0:
        result: Document = opening + closing
    else:
        result = doc.group(
            opening,
            doc.indent(hardline, doc.join(hardline, [comments.comment_doc(c) for c in inside])),
            hardline,
            closing,
        )
    return comments.splice(result, outside, node.end_line)


def _trailing_comma(ctx: Context) -> Document:
    if ctx.options.trailing_commas:
        return doc.if_break(",", "")
    return None


############################################################################
# Arrays
############################################################################

_BRACKETS = (("[", "]"), ("(", ")"), ("{", "}"), ("<", ">"))


def _word_array(start: str, words: list[Document], texts: list[str]) -> Document:
    """`%w[a b c]` and friends. Square brackets unless a word has one in it."""
    opening, closing = _BRACKETS[0]
    for candidate in _BRACKETS:
        if not any(candidate[0] in t or candidate[1] in t for t in texts):
            opening, closing = candidate
            break

    return doc.group(start, opening, doc.indent(softline, doc.join(line, words)), softline, closing)


def _word_texts(node: Node) -> list[str]:
    texts = []
    for word in node.body:
        if word.type == "@tstring_content":
            texts.append(word.value)
        else:
            texts.append("".join(p.value for p in word.body if p.type == "@tstring_content"))
    return texts


@printer("qwords")
def print_qwords(node: Node, ctx: Context) -> Document:
    return _word_array("%w", ctx.map(node.body), _word_texts(node))


@printer("qsymbols")
def print_qsymbols(node: Node, ctx: Context) -> Document:
    return _word_array("%i", ctx.map(node.body), _word_texts(node))


@printer("words")
def print_words(node: Node, ctx: Context) -> Document:
    return _word_array("%W", ctx.map(node.body), _word_texts(node))


@printer("symbols")
def print_symbols(node: Node, ctx: Context) -> Document:
    return _word_array("%I", ctx.map(node.body), _word_texts(node))


@printer("word")
def print_word(node: Node, ctx: Context) -> Document:
    return doc.cons(*string_parts(node.body, ctx))


def _print_array(node: Node, ctx: Context) -> Document:
    contents = node[0]
    if contents.type in ("qwords", "qsymbols", "words", "symbols"):
        return ctx.print(contents)

    elements = argument_nodes(contents)
    if ctx.options.array_literal:
        if heuristics.is_string_array(elements):
            texts = [element[1][0].value for element in elements]
            return _word_array("%w", list(texts), texts)

        if heuristics.is_symbol_array(elements):
            texts = [element[0].value for element in elements]
            return _word_array("%i", list(texts), texts)

    return doc.group(
        "[",
        doc.indent(softline, doc.join(doc.cons(",", line), argument_list(ctx, contents)), _trailing_comma(ctx)),
        softline,
        "]",
    )


@printer("array", own_comments=True)
def print_array(node: Node, ctx: Context) -> Document:
    if node[0] is None:
        return _empty_collection(node, "[", "]")
    return comments.splice(_print_array(node, ctx), node.comments, node.end_line)


############################################################################
# Hashes
############################################################################


def _label_key(key: Node, ctx: Context) -> Document:
    match key.type:
        case "@label":
            return ctx.print(key)
        case "symbol_literal":
            return doc.cons(ctx.descend(key).print(key[0]), ":")
        case "dyna_symbol":
            content = heuristics.dyna_symbol_content(key)
            assert content is not None
            return doc.cons(content, ":")
    raise AssertionError(f"{key.type} can't be written as a label")


def _rocket_key(key: Node, ctx: Context) -> Document:
    match key.type:
        case "@label":
            return doc.cons(":", key.value[:-1], " =>")
        case "dyna_symbol" if not key[0].startswith("%s"):
            return doc.cons(":", dyna_symbol_body(key, ctx.descend(key)), " =>")
    return doc.cons(ctx.print(key), " =>")


def _print_assoc(node: Node, ctx: Context, labels: bool) -> Document:
    key, value = node.body

    if labels:
        key_doc = _label_key(key, ctx)
        if key.type != "@label" and key.has_comments():
            key_doc = comments.splice(key_doc, key.comments)
    else:
        key_doc = _rocket_key(key, ctx)

    value_doc = ctx.print(value)

    # A nested hash breaks along with the hash around it.
    if value.type == "hash":
        return doc.cons(key_doc, " ", value_doc)

    if not heuristics.skip_assign_indent(value) or key.has_comments():
        return doc.group(key_doc, doc.indent(line, value_doc))
    return doc.group(key_doc, " ", value_doc)


def _uses_labels(ctx: Context, assocs) -> bool:
    return ctx.options.hash_label and heuristics.can_use_hash_labels(assocs)


@printer("assoc_new")
def print_assoc_new(node: Node, ctx: Context) -> Document:
    parent = ctx.parent_node
    siblings = parent.body if parent is not None and parent.type in ("assoclist_from_args", "bare_assoc_hash") else [node]
    return _print_assoc(node, ctx, _uses_labels(ctx, siblings))


@printer("assoc_splat")
def print_assoc_splat(node: Node, ctx: Context) -> Document:
    return doc.cons("**", ctx.print(node[0]))


@printer("assoclist_from_args", "bare_assoc_hash")
def print_assoc_list(node: Node, ctx: Context) -> Document:
    labels = _uses_labels(ctx, node.body)

    def print_assoc_with_style(assoc: Node, assoc_ctx: Context) -> Document:
        return _print_assoc(assoc, assoc_ctx, labels)

    docs = []
    for assoc in node.body:
        if assoc.type == "assoc_new":
            docs.append(ctx.print(assoc, using=print_assoc_with_style))
        else:
            docs.append(ctx.print(assoc))
    return doc.join(doc.cons(",", line), docs)


@printer("hash", own_comments=True)
def print_hash(node: Node, ctx: Context) -> Document:
    contents = node[0]
    if contents is None:
        return _empty_collection(node, "{", "}")

    hash_doc = doc.cons("{", doc.indent(line, ctx.print(contents), _trailing_comma(ctx)), line, "}")

    # Inside another hash we break along with it.
    if not ctx.parent_is("assoc_new"):
        hash_doc = doc.group(hash_doc)

    return comments.splice(hash_doc, node.comments, node.end_line)
