"""A reference renderer for layout documents.

This is a fairly direct Wadler/Lindig style printer: walk a stack of chunks,
and at each group ask whether the flat form fits in what's left of the line.
It understands the whole document algebra in [doc], which is all the
formatter needs to be usable from the command line and in tests.
"""
import dataclasses
import typing

from .doc import (
    Align,
    BreakParent,
    Concat,
    Document,
    Fill,
    Group,
    IfBreak,
    Indent,
    LineSuffix,
    MarkAsRoot,
    NewLine,
    Text,
    contains_forced_break,
    propagate_breaks,
)


@dataclasses.dataclass(frozen=True)
class Chunk:
    doc: Document
    indent: str
    root: str
    flat: bool

    def with_document(self, doc: Document, and_indent: str = "") -> "Chunk":
        return Chunk(doc=doc, indent=self.indent + and_indent, root=self.root, flat=self.flat)


def _trim(output: list[str]) -> int:
    """Remove trailing blanks from the output, returning how many went."""
    trimmed = 0
    while len(output) > 0:
        last = output[-1]
        stripped = last.rstrip(" \t")
        trimmed += len(last) - len(stripped)
        if stripped == "":
            output.pop()
        else:
            output[-1] = stripped
            break
    return trimmed


def layout_document(doc: Document, width: int, indent: str) -> str:
    """Lay out a document to fit within the given width, returning the text."""

    doc = propagate_breaks(doc)

    column = 0
    group_modes: dict[str, bool] = {}
    line_suffixes: list[Chunk] = []
    chunks: list[Chunk] = [Chunk(doc=doc, indent="", root="", flat=False)]

    def is_flat(chunk: Chunk, group_id: str | None) -> bool:
        if group_id is not None:
            return group_modes.get(group_id, chunk.flat)
        return chunk.flat

    def fits(chunk: Chunk, *, rest: bool = True) -> bool:
        remaining = width - column
        if remaining < 0:
            return False

        stack = [chunk]
        rest_index = len(chunks)
        while True:
            if len(stack) == 0:
                if not rest or rest_index == 0:
                    return True
                rest_index -= 1
                stack.append(chunks[rest_index])
                continue

            chunk = stack.pop()
            match chunk.doc:
                case None | LineSuffix():
                    pass

                case Text(value):
                    remaining -= len(value)

                case NewLine(replace, hard):
                    if chunk.flat and not hard:
                        remaining -= len(replace)
                    else:
                        # A real line break, so everything up to here fit.
                        return True

                case BreakParent():
                    pass

                case Concat(docs) | Fill(docs):
                    stack.extend(chunk.with_document(d) for d in reversed(docs))

                case Indent(child) | Align(_, child) | MarkAsRoot(child):
                    stack.append(chunk.with_document(child))

                case Group(child, _, should_break):
                    flat = chunk.flat and not should_break
                    stack.append(dataclasses.replace(chunk, doc=child, flat=flat))

                case IfBreak(broken, flat, group_id):
                    choice = flat if is_flat(chunk, group_id) else broken
                    stack.append(chunk.with_document(choice))

                case _:
                    typing.assert_never(chunk.doc)

            if remaining < 0:
                return False

    def flush_suffixes():
        # Single-line suffixes (comments) go before multi-line ones (heredoc
        # bodies), otherwise a comment would land on the terminator line.
        pending = sorted(line_suffixes, key=lambda c: contains_forced_break(c.doc))
        chunks.extend(reversed(pending))
        line_suffixes.clear()

    output: list[str] = []
    # Index of the output entry holding the root padding of the last literal
    # newline, while nothing has been written after it.
    padding: int | None = None
    while len(chunks) > 0 or len(line_suffixes) > 0:
        if len(chunks) == 0:
            # Flush anything that was waiting for the end of the line.
            flush_suffixes()
            continue

        chunk = chunks.pop()
        match chunk.doc:
            case None | BreakParent():
                pass

            case Text(value):
                output.append(value)
                column += len(value)
                padding = None

            case NewLine(replace, hard, literal):
                if chunk.flat and not hard:
                    output.append(replace)
                    column += len(replace)
                    if replace:
                        padding = None
                    continue

                if len(line_suffixes) > 0:
                    chunks.append(chunk)
                    flush_suffixes()
                    continue

                if literal:
                    # Blank verbatim lines don't get the root padding.
                    if padding is not None and padding == len(output) - 1:
                        output[padding] = "\n"
                    output.append("\n" + chunk.root)
                    column = len(chunk.root)
                    padding = len(output) - 1
                else:
                    padding = None
                    _trim(output)
                    output.append("\n" + chunk.indent)
                    column = len(chunk.indent)

            case Concat(docs):
                chunks.extend(chunk.with_document(d) for d in reversed(docs))

            # Indentation only shows after a line break, which a flat chunk
            # never has. Line suffixes then indent from the line they were
            # written on rather than from wherever the flat text ended up.
            case Indent(child):
                chunks.append(chunk.with_document(child, and_indent="" if chunk.flat else indent))

            case Align(amount, child):
                chunks.append(chunk.with_document(child, and_indent="" if chunk.flat else " " * amount))

            case MarkAsRoot(child):
                chunks.append(dataclasses.replace(chunk, doc=child, root=chunk.indent))

            case Group(child, group_id, should_break):
                candidate = dataclasses.replace(chunk, doc=child, flat=True)
                if chunk.flat or (not should_break and fits(candidate)):
                    chunks.append(candidate)
                    flat = True
                else:
                    chunks.append(dataclasses.replace(chunk, doc=child, flat=False))
                    flat = False

                if group_id is not None:
                    group_modes[group_id] = flat

            case IfBreak(broken, flat, group_id):
                choice = flat if is_flat(chunk, group_id) else broken
                chunks.append(chunk.with_document(choice))

            case LineSuffix(child):
                line_suffixes.append(dataclasses.replace(chunk, doc=child, flat=False))

            case Fill(items):
                if len(items) == 0:
                    continue

                content = items[0]
                content_flat = dataclasses.replace(chunk, doc=content, flat=True)
                content_fits = not contains_forced_break(content) and fits(content_flat, rest=False)

                if len(items) == 1:
                    chunks.append(content_flat if content_fits else chunk.with_document(content))
                    continue

                separator = items[1]
                if len(items) == 2:
                    sep_chunk = dataclasses.replace(chunk, doc=separator, flat=content_fits)
                    chunks.append(sep_chunk)
                    chunks.append(content_flat if content_fits else chunk.with_document(content))
                    continue

                # Check whether the next item fits on this line along with the
                # separator; if not, the separator breaks.
                pair = Concat((content, separator, items[2]))
                pair_fits = fits(dataclasses.replace(chunk, doc=pair, flat=True), rest=False)

                chunks.append(chunk.with_document(Fill(items[2:])))
                chunks.append(dataclasses.replace(chunk, doc=separator, flat=pair_fits))
                chunks.append(content_flat if content_fits else chunk.with_document(content))

            case _:
                typing.assert_never(chunk.doc)

    return "".join(output)


def render(doc: Document, width: int = 80, tab_width: int = 2) -> str:
    """Render a document with the given print width and an indent unit of
    `tab_width` spaces."""
    return layout_document(doc, width, " " * tab_width)
