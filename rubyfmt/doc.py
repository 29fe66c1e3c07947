# The layout document algebra.
"""Documents are the intermediate form between a syntax tree and formatted
text. Printers build them bottom-up; a renderer (see [layout]) resolves the
line breaks for a particular width.

`None` is the empty document. Use the helper functions (`cons`, `group`,
`indent`...) rather than the constructors: they flatten nested concatenations
and drop empty documents so the trees stay small.
"""
import dataclasses
import typing


############################################################################
# Documents
############################################################################


@dataclasses.dataclass(frozen=True)
class Text:
    text: str


@dataclasses.dataclass(frozen=True)
class Concat:
    docs: tuple["Document", ...]


@dataclasses.dataclass(frozen=True)
class NewLine:
    """A place where the line may break.

    When the enclosing group is flat the newline is replaced by `replace`.
    Hard newlines always break, and literal newlines do not indent the next
    line past the current root.
    """

    replace: str
    hard: bool = False
    literal: bool = False


@dataclasses.dataclass(frozen=True)
class BreakParent:
    pass


@dataclasses.dataclass(frozen=True)
class Indent:
    child: "Document"


@dataclasses.dataclass(frozen=True)
class Align:
    amount: int
    child: "Document"


@dataclasses.dataclass(frozen=True)
class Group:
    child: "Document"
    id: str | None = None
    should_break: bool = False


@dataclasses.dataclass(frozen=True)
class IfBreak:
    broken: "Document"
    flat: "Document"
    group_id: str | None = None


@dataclasses.dataclass(frozen=True)
class Fill:
    items: tuple["Document", ...]


@dataclasses.dataclass(frozen=True)
class LineSuffix:
    child: "Document"


@dataclasses.dataclass(frozen=True)
class MarkAsRoot:
    child: "Document"


Document = (
    None
    | Text
    | Concat
    | NewLine
    | BreakParent
    | Indent
    | Align
    | Group
    | IfBreak
    | Fill
    | LineSuffix
    | MarkAsRoot
)

# The shapes of line break a printer can ask for.
softline = NewLine("")
line = NewLine(" ")
hardline = NewLine("", hard=True)
literalline = NewLine("", hard=True, literal=True)

break_parent = BreakParent()


def text(value: str) -> Document:
    if value == "":
        return None
    return Text(value)


def _coerce(document: "Document | str") -> Document:
    if isinstance(document, str):
        return text(document)
    return document


def cons(*documents: "Document | str") -> Document:
    result = []
    for document in documents:
        document = _coerce(document)
        if isinstance(document, Concat):
            result.extend(document.docs)
        elif document is not None:
            result.append(document)

    if len(result) == 0:
        return None
    if len(result) == 1:
        return result[0]

    return Concat(tuple(result))


def group(*documents: "Document | str", id: str | None = None, should_break: bool = False) -> Document:
    child = cons(*documents)
    if child is None:
        return None

    # Regrouping a bare group is a waste, unless we're adding something.
    if isinstance(child, Group) and id is None and not should_break:
        return child

    return Group(child, id=id, should_break=should_break)


def indent(*documents: "Document | str") -> Document:
    child = cons(*documents)
    if child is None:
        return None
    return Indent(child)


def align(amount: int, *documents: "Document | str") -> Document:
    child = cons(*documents)
    if child is None:
        return None
    if amount == 0:
        return child
    return Align(amount, child)


def if_break(
    broken: "Document | str", flat: "Document | str" = None, group_id: str | None = None
) -> Document:
    broken = _coerce(broken)
    flat = _coerce(flat)
    if broken is None and flat is None:
        return None
    return IfBreak(broken, flat, group_id=group_id)


def fill(items: typing.Iterable["Document | str"]) -> Document:
    items = tuple(_coerce(item) for item in items)
    if len(items) == 0:
        return None
    return Fill(items)


def line_suffix(*documents: "Document | str") -> Document:
    child = cons(*documents)
    if child is None:
        return None
    return LineSuffix(child)


def mark_as_root(*documents: "Document | str") -> Document:
    child = cons(*documents)
    if child is None:
        return None
    return MarkAsRoot(child)


def join(separator: "Document | str", documents: typing.Iterable["Document | str"]) -> Document:
    parts: list[Document | str] = []
    for index, document in enumerate(documents):
        if index > 0:
            parts.append(separator)
        parts.append(document)
    return cons(*parts)


def literal_lines(value: str) -> Document:
    """Turn verbatim text into a document, one literal newline per line
    break so the content never picks up indentation."""
    return join(literalline, (text(part) for part in value.split("\n")))


############################################################################
# Inspection
############################################################################


def flat_width(doc: Document) -> int:
    """The width of the document if it were printed entirely flat.

    Hard line breaks count as nothing; this is used for heuristics that want a
    rough idea of how big something is, not for layout.
    """
    match doc:
        case None | BreakParent() | LineSuffix():
            return 0
        case Text(value):
            return len(value)
        case NewLine(replace, hard):
            return 0 if hard else len(replace)
        case Concat(docs) | Fill(docs):
            return sum(flat_width(d) for d in docs)
        case Indent(child) | Align(_, child) | Group(child) | MarkAsRoot(child):
            return flat_width(child)
        case IfBreak(_, flat):
            return flat_width(flat)
        case _:
            typing.assert_never(doc)


def contains_forced_break(doc: Document) -> bool:
    """True if the document contains a hard newline or a BreakParent that is
    not tucked away inside a line suffix."""
    match doc:
        case None | Text():
            return False
        case BreakParent():
            return True
        case NewLine(hard=hard):
            return hard
        case LineSuffix():
            return False
        case Concat(docs) | Fill(docs):
            return any(contains_forced_break(d) for d in docs)
        case Indent(child) | Align(_, child) | Group(child) | MarkAsRoot(child):
            return contains_forced_break(child)
        case IfBreak(broken, flat):
            return contains_forced_break(broken) or contains_forced_break(flat)
        case _:
            typing.assert_never(doc)


def propagate_breaks(doc: Document) -> Document:
    """Mark every group that transitively holds a forced break as broken.

    Returns a new document; the input is not modified.
    """

    def visit(doc: Document) -> tuple[Document, bool]:
        match doc:
            case None | Text():
                return doc, False

            case BreakParent():
                return doc, True

            case NewLine(hard=hard):
                return doc, hard

            case LineSuffix(child):
                # Whatever is in the suffix is flushed at the end of the line,
                # so it never forces the line it sits on to break.
                child, _ = visit(child)
                return LineSuffix(child), False

            case Concat(docs):
                results = [visit(d) for d in docs]
                return Concat(tuple(d for d, _ in results)), any(b for _, b in results)

            case Fill(items):
                results = [visit(d) for d in items]
                return Fill(tuple(d for d, _ in results)), any(b for _, b in results)

            case Indent(child):
                child, broken = visit(child)
                return Indent(child), broken

            case Align(amount, child):
                child, broken = visit(child)
                return Align(amount, child), broken

            case MarkAsRoot(child):
                child, broken = visit(child)
                return MarkAsRoot(child), broken

            case Group(child, id, should_break):
                child, broken = visit(child)
                return Group(child, id=id, should_break=should_break or broken), should_break or broken

            case IfBreak(broken_doc, flat_doc, group_id):
                broken_doc, b1 = visit(broken_doc)
                flat_doc, b2 = visit(flat_doc)
                return IfBreak(broken_doc, flat_doc, group_id), b1 or b2

            case _:
                typing.assert_never(doc)

    result, _ = visit(doc)
    return result


def remove_lines(doc: Document) -> Document:
    """Force a document flat: soft line breaks become their replacement text,
    groups are dropped and every IfBreak takes its flat branch. Hard lines are
    kept."""
    match doc:
        case None | Text() | BreakParent():
            return doc
        case NewLine(replace, hard):
            return doc if hard else text(replace)
        case Concat(docs):
            return cons(*(remove_lines(d) for d in docs))
        case Fill(items):
            return cons(*(remove_lines(d) for d in items))
        case Indent(child):
            return indent(remove_lines(child))
        case Align(amount, child):
            return align(amount, remove_lines(child))
        case Group(child):
            return remove_lines(child)
        case IfBreak(_, flat):
            return remove_lines(flat)
        case LineSuffix(child):
            return line_suffix(remove_lines(child))
        case MarkAsRoot(child):
            return mark_as_root(remove_lines(child))
        case _:
            typing.assert_never(doc)


def dump(doc: Document) -> list:
    """A nested list form of a document, handy for debugging and tests."""
    match doc:
        case None:
            return []
        case Text(value):
            return [value]
        case NewLine(replace, hard, literal):
            if literal:
                return ["<literalline>"]
            if hard:
                return ["<hardline>"]
            return [f"<newline {repr(replace)}>"]
        case BreakParent():
            return ["<break-parent>"]
        case Concat(docs):
            result = []
            for d in docs:
                result += dump(d)
            return result
        case Indent(child):
            return [["<indent>", *dump(child)]]
        case Align(amount, child):
            return [[f"<align {amount}>", *dump(child)]]
        case Group(child, id, should_break):
            tag = "<group!>" if should_break else "<group>"
            if id is not None:
                tag = tag[:-1] + f" {id}>"
            return [[tag, *dump(child)]]
        case IfBreak(broken, flat, _):
            return [["<if-break>", dump(broken), dump(flat)]]
        case Fill(items):
            return [["<fill>", *[dump(i) for i in items]]]
        case LineSuffix(child):
            return [["<line-suffix>", *dump(child)]]
        case MarkAsRoot(child):
            return [["<root>", *dump(child)]]
        case _:
            typing.assert_never(doc)
