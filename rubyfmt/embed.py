"""Heredocs, and the other languages that live inside them.

A heredoc prints in two places: the opener (`<<~SQL`) sits inline where the
expression was, and the body follows on the lines after the current one.
We get that by putting the body in a line suffix, so it waits for the end of
the line, and by printing it with literal newlines, so the ambient indentation
never leaks into it.

If the heredoc's delimiter names a language we know (`<<~SQL`, `<<~RUBY`...)
and the body has no interpolation, the body is handed to an embedded formatter
and the result is spliced back in, indented one level. Every other heredoc
goes out exactly as it was written.
"""
import logging
import re
import typing

from . import doc
from .ast import Node
from .context import Context
from .doc import Document, hardline, literalline

embed_log = logging.getLogger("rubyfmt.embed")

EmbeddedFormatter = typing.Callable[[str, str], str]

_OPENER = re.compile(r"^<<([~-]?)(['\"`]?)([A-Za-z_][A-Za-z_0-9]*)\2$")


class Opener(typing.NamedTuple):
    mode: str
    quote: str
    tag: str

    @property
    def squiggly(self) -> bool:
        return self.mode == "~"


def parse_opener(beging: str) -> Opener | None:
    match = _OPENER.match(beging.strip())
    if match is None:
        return None
    return Opener(mode=match.group(1), quote=match.group(2), tag=match.group(3))


# Ruby measures a `<<~` body's indentation with tabs stopping at every
# eighth column.
TAB_STOP = 8


def indent_width(line: str) -> int:
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width = (width // TAB_STOP + 1) * TAB_STOP
        else:
            break
    return width


def common_leading_whitespace(content: str) -> int:
    """The indentation shared by every non-blank line, in columns, ignoring
    whatever follows the final newline."""
    lines = content.split("\n")[:-1]
    minimum = None
    for line in lines:
        if line.strip() == "":
            continue
        width = indent_width(line)
        minimum = width if minimum is None else min(minimum, width)
    return minimum or 0


def _dedent_line(line: str, amount: int) -> str:
    # A tab that would go past `amount` stays, as it does in Ruby.
    width = 0
    for index, char in enumerate(line):
        if width >= amount or char not in " \t":
            return line[index:]
        step = width + 1 if char == " " else (width // TAB_STOP + 1) * TAB_STOP
        if step > amount:
            return line[index:]
        width = step
    return ""


def strip_common_whitespace(content: str) -> str:
    """Remove the shared indentation from every line of a `<<~` body.

    This is what Ruby does to the body of a squiggly heredoc anyway, so it
    doesn't change the string.
    """
    minimum = common_leading_whitespace(content)
    if minimum == 0:
        return content
    return "\n".join(_dedent_line(line, minimum) for line in content.split("\n"))


def _body_lines(content: str) -> Document:
    if content.endswith("\n"):
        content = content[:-1]
    return doc.literal_lines(content)


def _print_parts(node: Node, ctx: Context) -> list[Document]:
    _, parts, _ = node.body
    result = []
    for part in parts:
        if part.type == "@tstring_content":
            result.append(doc.literal_lines(part.value.replace("\r\n", "\n")))
        else:
            result.append(ctx.print(part))
    return result


def _plain_content(node: Node) -> str | None:
    _, parts, _ = node.body
    if not all(p.type == "@tstring_content" for p in parts):
        return None
    return "".join(p.value for p in parts)


def embedded_language(node: Node, ctx: Context) -> str | None:
    beging, _, _ = node.body
    opener = parse_opener(beging)
    if opener is None:
        return None
    return ctx.options.embedded_languages.get(opener.tag.lower())


def format_embedded(node: Node, ctx: Context) -> str | None:
    """Run the embedded formatter over the heredoc body, if it applies.

    Returns the formatted body, or None to print the body as it is.
    """
    formatter = ctx.printer.embedded_formatter
    if formatter is None:
        return None

    language = embedded_language(node, ctx)
    if language is None:
        return None

    content = _plain_content(node)
    if content is None:
        embed_log.debug(f"Not formatting {language} heredoc: body has interpolation")
        return None

    opener = parse_opener(node[0])
    if opener is not None and opener.squiggly:
        content = strip_common_whitespace(content)

    embed_log.debug(f"Formatting {len(content)} characters of {language}")
    try:
        return formatter(content, language)
    except Exception as e:
        if not ctx.options.embedded_fallback:
            raise
        embed_log.warning(f"Embedded {language} formatter failed, keeping heredoc body as is: {e}")
        return None


def _reindented(beging: str, content: str, ending: str) -> Document:
    # The body goes one level in from the code around it. Ruby strips the
    # shared indentation of a `<<~` body, so the value is the same.
    body = None
    if content != "":
        body = doc.indent(doc.mark_as_root(literalline, _body_lines(content)))
    return doc.cons(beging, doc.line_suffix(body, hardline, ending.strip()))


def print_heredoc(node: Node, ctx: Context) -> Document:
    beging, _, ending = node.body
    opener = parse_opener(beging)
    squiggly = opener is not None and opener.squiggly

    formatted = format_embedded(node, ctx)
    if formatted is not None:
        formatted = formatted.rstrip("\n")
        if squiggly:
            return _reindented(beging, formatted, ending)
        body = None
        if formatted != "":
            body = doc.cons(literalline, doc.literal_lines(formatted))
        return doc.cons(beging, doc.line_suffix(body, literalline, ending.strip()))

    # Anything the formatter didn't touch goes out byte for byte, terminator
    # included.
    return doc.cons(
        beging,
        doc.line_suffix(doc.group(literalline, *_print_parts(node, ctx), ending.rstrip("\r\n"))),
    )
