"""Putting comments back.

Comments come to us in one of two ways: already attached to the node they
belong to (the parser did the work), or as a flat list with line numbers on
the program root. In the second case `attach_comments` finds an anchor for
each one. Either way the printer then calls `splice` to wrap each node's
document with the comments it carries.

Anchors are always statements. Structural nodes like argument lists can't
hold a comment in any way that survives printing, so we never choose them.
"""
import logging
import typing

from . import doc
from .ast import Comment, Node, Span
from .doc import Document, break_parent, hardline
from .errors import StructuralError

comments_log = logging.getLogger("rubyfmt.comments")


def comment_doc(comment: Comment) -> Document:
    if comment.is_block:
        # =begin/=end must stay byte-for-byte, newlines and all.
        return doc.literal_lines(comment.text)
    return doc.text(comment.text)


def splice(document: Document, comments: typing.Sequence[Comment], end_line: int | None = None) -> Document:
    """Wrap a printed node with its comments.

    Leading comments go above the node, each on its own line. Trailing
    comments go at the end of the line the node finishes on, unless we know
    they were on a later line in the source, in which case they go on their
    own line below it.
    """
    if len(comments) == 0:
        return document

    parts: list[Document] = []
    for comment in comments:
        if comment.leading:
            parts.extend([comment_doc(comment), hardline])

    parts.append(document)

    for comment in comments:
        if comment.leading:
            continue
        if end_line is not None and comment.line is not None and comment.line > end_line:
            parts.extend([hardline, comment_doc(comment)])
        else:
            parts.extend([doc.line_suffix(" ", comment_doc(comment)), break_parent])

    return doc.cons(*parts)


def print_comments_only(comments: typing.Sequence[Comment]) -> Document:
    """The document for a body that has nothing in it but comments."""
    return doc.cons(break_parent, doc.join(hardline, [comment_doc(c) for c in comments]))


def inner_comments(node: Node) -> tuple[list[Comment], list[Comment]]:
    """Split a node's comments into the ones that sit inside its brackets and
    the ones around it. Used for empty collections, which have nothing else to
    hang an inner comment on."""
    if node.loc is None or node.loc.start_line == node.loc.end_line:
        return [], list(node.comments)

    inside, outside = [], []
    for comment in node.comments:
        if comment.line is not None and node.loc.start_line <= comment.line < node.loc.end_line and not comment.leading:
            inside.append(comment)
        else:
            outside.append(comment)
    return inside, outside


############################################################################
# Attachment
############################################################################


class StatementList(typing.NamedTuple):
    stmts: Node
    span: Span | None
    depth: int


def statement_lists(tree: Node) -> list[StatementList]:
    """Every `stmts` node in the tree with the span it covers.

    A statement list without its own location borrows the span of the nearest
    enclosing node that has one; no span at all means "the whole file".
    """
    result = []

    def visit(node: Node, span: Span | None, depth: int):
        span = node.loc or span
        if node.type == "stmts":
            result.append(StatementList(node, span, depth))
        for child in node.children():
            visit(child, span, depth + 1)

    visit(tree, None, 0)
    return result


def _statements(stmts: Node) -> list[Node]:
    return [s for s in stmts.body if isinstance(s, Node)]


def attach_comments(tree: Node, comments: typing.Iterable[Comment]):
    """Attach free-floating comments to statements in the tree.

    For each comment, in order of preference:

    - the outermost statement ending on the comment's line takes it as a
      trailing comment;
    - otherwise the next statement in the innermost statement list around the
      comment takes it as a leading comment;
    - otherwise, if that list is empty, its placeholder statement takes it;
    - otherwise the last statement before it takes it as a trailing comment.
    """
    lists = statement_lists(tree)
    if len(lists) == 0:
        raise StructuralError(tree.type, tree.payload(), tree.loc, "no statement list to attach comments to")

    comments = list(comments)
    for comment in comments:
        if comment.line is None:
            raise StructuralError("comment", comment.text, None, "unattached comments need a line number")

    for comment in sorted(comments, key=lambda c: c.line):
        _attach(comment, lists)


def _attach(comment: Comment, lists: list[StatementList]):
    line = comment.line
    assert line is not None

    enders = [
        (entry.depth, stmt)
        for entry in lists
        for stmt in _statements(entry.stmts)
        if stmt.loc is not None and stmt.end_line == line and stmt.type != "void_stmt"
    ]
    if len(enders) > 0:
        _, anchor = min(enders, key=lambda e: e[0])
        comments_log.debug(f"Line {line}: trailing comment on {anchor.type} [{anchor.start_line}, {anchor.end_line}]")
        anchor.comments.append(Comment(comment.text, leading=False, line=line))
        return

    containing = [entry for entry in lists if entry.span is None or entry.span.contains_line(line)]
    if len(containing) == 0:
        containing = lists[:1]
    innermost = max(containing, key=lambda e: e.depth)
    statements = _statements(innermost.stmts)

    real = [s for s in statements if s.type != "void_stmt"]
    if len(real) == 0:
        if len(statements) == 0:
            comments_log.debug(f"Line {line}: comment on empty statement list")
            innermost.stmts.comments.append(Comment(comment.text, leading=False, line=line))
        else:
            comments_log.debug(f"Line {line}: comment on placeholder statement")
            statements[0].comments.append(Comment(comment.text, leading=False, line=line))
        return

    following = [s for s in real if s.loc is not None and s.start_line > line]
    if len(following) > 0:
        anchor = following[0]
        comments_log.debug(f"Line {line}: leading comment on {anchor.type} at line {anchor.start_line}")
        anchor.comments.append(Comment(comment.text, leading=True, line=line))
        return

    preceding = [s for s in real if s.loc is None or s.start_line < line]
    anchor = preceding[-1] if len(preceding) > 0 else real[-1]
    comments_log.debug(f"Line {line}: trailing comment on {anchor.type} (own line)")
    anchor.comments.append(Comment(comment.text, leading=False, line=line))
