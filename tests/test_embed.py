import pytest
from hypothesis import given
from hypothesis.strategies import lists, sampled_from, text

from rubyfmt import embed
from rubyfmt.ast import node, token
from rubyfmt.options import Options
from rubyfmt.printer import format_tree

from conftest import assign, heredoc, program, var_field, vcall


def upper(content: str, language: str) -> str:
    return content.upper()


def failing(content: str, language: str) -> str:
    raise ValueError(f"cannot format {language}")


def sql_assignment(content="  select 1\n"):
    return program(assign(var_field("query"), heredoc("<<~SQL", content, "  SQL\n")))


def test_parse_opener():
    assert embed.parse_opener("<<~SQL") == embed.Opener("~", "", "SQL")
    assert embed.parse_opener("<<-'EOS'") == embed.Opener("-", "'", "EOS")
    assert embed.parse_opener("<<EOS").squiggly is False
    assert embed.parse_opener("not a heredoc") is None


def test_common_leading_whitespace_ignores_blank_lines():
    assert embed.common_leading_whitespace("    a\n\n      b\n") == 4
    assert embed.common_leading_whitespace("a\n  b\n") == 0


def test_strip_common_whitespace():
    assert embed.strip_common_whitespace("    foo\n      bar\n") == "foo\n  bar\n"


def test_tabs_count_to_the_next_tab_stop():
    assert embed.indent_width("\tfoo") == 8
    assert embed.indent_width("  \tfoo") == 8
    assert embed.common_leading_whitespace("\tfoo\n        bar\n") == 8
    assert embed.strip_common_whitespace("\tfoo\n        bar\n") == "foo\nbar\n"


def test_tab_past_the_shared_indent_is_kept():
    assert embed.strip_common_whitespace("    foo\n\tbar\n") == "foo\n\tbar\n"


@given(
    lists(text(alphabet="abc ", min_size=1, max_size=8), min_size=1, max_size=5),
    sampled_from(["", "  ", "      ", "\t", "\t  ", "  \t"]),
)
def test_strip_common_whitespace_undoes_indenting(lines, prefix):
    content = "".join(line.strip() + "\n" for line in lines if line.strip())
    if content == "":
        return
    indented = "".join(prefix + line + "\n" for line in content.splitlines())
    assert embed.strip_common_whitespace(indented) == content


def test_embedded_formatter_output_is_spliced_in():
    output = format_tree(sql_assignment(), embedded_formatter=upper)
    assert output == "query = <<~SQL\n  SELECT 1\nSQL\n"


def test_unknown_language_is_left_alone():
    tree = program(assign(var_field("text"), heredoc("<<~TEXT", "  hello\n", "TEXT\n")))
    assert format_tree(tree, embedded_formatter=upper) == "text = <<~TEXT\n  hello\nTEXT\n"


def test_interpolated_body_is_left_alone():
    parts = [
        token("@tstring_content", "  select "),
        node("string_embexpr", node("stmts", vcall("column"))),
        token("@tstring_content", "\n"),
    ]
    tree = program(assign(var_field("query"), node("heredoc", "<<-SQL", parts, "SQL\n")))
    assert format_tree(tree, embedded_formatter=upper) == "query = <<-SQL\n  select #{column}\nSQL\n"


def test_formatter_errors_propagate_by_default():
    with pytest.raises(ValueError):
        format_tree(sql_assignment(), embedded_formatter=failing)


def test_formatter_errors_can_fall_back():
    output = format_tree(sql_assignment(), Options(embedded_fallback=True), embedded_formatter=failing)
    assert output == "query = <<~SQL\n  select 1\n  SQL\n"


def test_languages_are_configurable():
    tree = program(assign(var_field("q"), heredoc("<<~GRAPHQL", "  { a }\n", "GRAPHQL\n")))
    seen = []

    def record(content, language):
        seen.append(language)
        return content

    format_tree(tree, Options(embedded_languages={"graphql": "graphql"}), embedded_formatter=record)
    assert seen == ["graphql"]
