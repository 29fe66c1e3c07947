"""Format a Ruby syntax tree from the command line.

    python -m rubyfmt tree.json
    python -m rubyfmt --parser-command "ruby parse.rb" app.rb
"""
import argparse
import json
import logging
import sys

from . import ast, doc
from .client import ParserClient
from .errors import FormatError
from .options import Options
from .printer import Printer


def build_options(parsed: argparse.Namespace) -> Options:
    values = {
        "print_width": parsed.print_width,
        "tab_width": parsed.tab_width,
        "modifier": not parsed.no_modifier,
        "inline_conditionals": not parsed.no_inline_conditionals,
        "array_literal": not parsed.no_array_literal,
        "hash_label": not parsed.no_hash_label,
        "to_proc": parsed.to_proc,
        "trailing_comma": parsed.trailing_comma,
    }
    if parsed.quote is not None:
        values["quote"] = parsed.quote
    return Options.from_mapping(values)


def read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(args: list[str]) -> int:
    parser = argparse.ArgumentParser(prog="rubyfmt", description="Format a parsed Ruby syntax tree")
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Path to the JSON tree to format (or Ruby source, with --parser-command). "
        "Reads stdin if omitted or '-'.",
    )
    parser.add_argument(
        "--parser-command",
        type=str,
        default=None,
        help="A command that reads Ruby source on stdin and writes the JSON tree on stdout. "
        "When given, the input is Ruby source rather than a tree.",
    )
    parser.add_argument("--print-width", type=int, default=80, help="The line width to aim for (default: %(default)s)")
    parser.add_argument("--tab-width", type=int, default=2, help="Spaces per indent level (default: %(default)s)")
    parser.add_argument("--no-modifier", action="store_true", help="Never use `stmt if cond` modifier forms")
    parser.add_argument(
        "--no-inline-conditionals", action="store_true", help="Never turn if/else into a ternary"
    )
    parser.add_argument("--no-array-literal", action="store_true", help="Never use %%w[] and %%i[] shorthand")
    parser.add_argument("--no-hash-label", action="store_true", help="Always write hash keys as `key => value`")
    parser.add_argument("--to-proc", action="store_true", help="Rewrite `{ |x| x.foo }` as `(&:foo)`")
    parser.add_argument("--quote", choices=["'", '"'], default=None, help="The preferred string quote")
    parser.add_argument(
        "--trailing-comma",
        choices=["none", "all", "es5"],
        default="none",
        help="Add trailing commas to broken lists (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Log what the printer is doing")
    parser.add_argument("--doc", action="store_true", help="Print the layout document instead of the text")

    parsed = parser.parse_args(args[1:])
    logging.basicConfig(level=logging.DEBUG if parsed.debug else logging.WARNING)

    try:
        options = build_options(parsed)
        text = read_input(parsed.input)

        if parsed.parser_command is not None:
            with ParserClient(parsed.parser_command) as client:
                tree = client.parse(text)
        else:
            tree = ast.loads(text)

        printer = Printer(options)
        if parsed.doc:
            document = printer.print_tree(tree)
            sys.stdout.write(json.dumps(doc.dump(document), indent=2))
            sys.stdout.write("\n")
        else:
            sys.stdout.write(printer.format_tree(tree))
    except FormatError as e:
        print(f"rubyfmt: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"rubyfmt: {e}", file=sys.stderr)
        return 1

    return 0


def run():
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
