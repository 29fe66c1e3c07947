"""Method chains.

A chain is a run of calls, argument lists and blocks hanging off each other
by their receivers:

    list.select(&:odd?).map { |x| x * 2 }.sum

Each link in the chain is printed on its own, but once a chain gets long
enough we also want to offer the "one call per line" layout:

    list
      .select(&:odd?)
      .map { |x| x * 2 }
      .sum

The printers for `call`, `method_add_arg` and `method_add_block` cooperate to
build that second layout as a fold: each one hands its parent a `Link` that
says how deep the chain is so far and what the vertical layout looks like up to
here. The printer at the top of the chain (whose parent is not itself part of
the chain) decides whether to use it.
"""
import dataclasses
import logging

from . import doc
from .ast import Node
from .context import Context
from .doc import Document

chain_log = logging.getLogger("rubyfmt.chain")

CHAIN_TYPES = frozenset(["call", "method_add_arg", "method_add_block"])

# Receivers that attach directly to the call on them; there is never a line
# break between `]` and `.each`, or between a heredoc opener and `.strip`.
NO_INDENT = frozenset(["array", "hash", "heredoc", "if", "method_add_block", "xstring_literal"])


@dataclasses.dataclass(frozen=True)
class Link:
    # How many chain links have been folded in so far.
    depth: int
    # How many of those, counting back from the latest, are plain calls with
    # no arguments or block.
    call_depth: int
    # The vertical layout so far, as fragments to be concatenated and indented.
    fragments: tuple[Document, ...]
    first_receiver_type: str | None


def continues_chain(ctx: Context) -> bool:
    """True if this node's parent is another link in the same chain."""
    node = ctx.node
    return ctx.parent_is(*CHAIN_TYPES) and not node.has_comments()


def in_signature_block(ctx: Context) -> bool:
    """True if the node is the body of a `sig { ... }` or `sig do ... end`
    block, the type signature convention that reads better broken early."""
    for depth in (2, 3, 4):
        ancestor = ctx.ancestor(depth)
        if ancestor is None:
            return False
        if ancestor.type == "method_add_block":
            return _is_sig_call(ancestor[0])
    return False


def _is_sig_call(callee: Node) -> bool:
    if callee.type == "method_add_arg":
        callee = callee[0]
    return callee.type in ("fcall", "vcall", "var_ref") and callee[0].value == "sig"


def threshold(ctx: Context) -> int:
    if in_signature_block(ctx):
        return ctx.options.signature_chain_threshold
    return ctx.options.chain_threshold


def extend(link: Link | None, fallback: Document, *fragments: Document, call: bool, receiver: Node) -> Link:
    """The link to hand up: the child's link (if any) with this node's
    fragments added to the vertical layout."""
    if link is None:
        return Link(
            depth=1,
            call_depth=1 if call else 0,
            fragments=(fallback, *fragments),
            first_receiver_type=receiver.type,
        )
    return Link(
        depth=link.depth + 1,
        call_depth=link.call_depth + 1 if call else 0,
        fragments=link.fragments + fragments,
        first_receiver_type=link.first_receiver_type or receiver.type,
    )


def is_root(ctx: Context, link: Link | None) -> bool:
    """True if this node closes a chain long enough to offer the vertical
    layout."""
    if link is None or ctx.parent_is(*CHAIN_TYPES):
        return False

    limit = threshold(ctx)
    if link.depth >= limit:
        chain_log.debug(f"{ctx.node.type} closes a chain of {link.depth} (threshold {limit})")
        return True
    return False


def vertical(link: Link, tail: Document, flat: Document) -> Document:
    """Offer the one-call-per-line layout as the broken alternative."""
    return doc.group(doc.if_break(doc.group(doc.indent(*link.fragments, tail)), flat))


def split_arguments(link: Link, tail: Document) -> Document:
    """For a chain of bare calls finished off by arguments or a block: keep the
    calls together and let the arguments break first."""
    return doc.cons(doc.group(doc.indent(*link.fragments)), doc.group(tail))
