from hypothesis import given
from hypothesis.strategies import integers, lists, text

import rubyfmt.doc as doc
from rubyfmt.doc import hardline, line, literalline, softline
from rubyfmt.layout import render


def bracketed(*items: str) -> doc.Document:
    return doc.group("[", doc.indent(softline, doc.join(doc.cons(",", line), items)), softline, "]")


def test_group_stays_flat_when_it_fits():
    assert render(bracketed("1", "2", "3")) == "[1, 2, 3]"


def test_group_breaks_when_too_wide():
    assert render(bracketed("1", "2", "3"), width=5) == "[\n  1,\n  2,\n  3\n]"


def test_tab_width_sets_the_indent():
    assert render(bracketed("1", "2"), width=3, tab_width=4) == "[\n    1,\n    2\n]"


def test_hardline_breaks_enclosing_groups():
    document = doc.group("a", line, doc.group("b", hardline, "c"))
    assert render(document) == "a\nb\nc"


def test_break_parent_breaks_enclosing_groups():
    document = doc.group("a", line, "b", doc.break_parent)
    assert render(document) == "a\nb"


def test_line_suffix_waits_for_the_newline():
    document = doc.cons("a", doc.line_suffix(" # note"), ";", hardline, "b")
    assert render(document) == "a; # note\nb"


def test_line_suffix_does_not_break_its_group():
    document = doc.group("a", doc.line_suffix(" # note"), line, "b")
    assert render(document) == "a b # note"


def test_comment_suffix_flushes_before_heredoc_suffix():
    heredoc_body = doc.cons(literalline, "body", hardline, "EOS")
    document = doc.cons("x = <<~EOS", doc.line_suffix(heredoc_body), doc.line_suffix(" # c"), hardline)
    assert render(document) == "x = <<~EOS # c\nbody\nEOS\n"


def test_if_break_follows_the_enclosing_group():
    contents = (doc.indent(softline, "1", doc.if_break(",")), softline, "]")
    assert render(doc.group("[", *contents)) == "[1]"
    assert render(doc.group("[", *contents, should_break=True)) == "[\n  1,\n]"


def test_if_break_can_follow_another_group():
    first = doc.group("a", line, "b", id="first")
    document = doc.cons(first, doc.if_break(" broken", " flat", group_id="first"))
    assert render(document, width=10) == "a b flat"
    assert render(document, width=2) == "a\nb broken"


def test_fill_packs_as_many_items_as_fit():
    document = doc.fill(["a", line, "b", line, "c"])
    assert render(document, width=3) == "a b\nc"
    assert render(document, width=80) == "a b c"


def test_align_adds_spaces():
    document = doc.cons("when ", doc.align(5, doc.group("a,", line, "b")))
    assert render(document, width=6) == "when a,\n     b"


def test_literal_lines_ignore_indentation():
    document = doc.indent("x", hardline, doc.literal_lines("first\n  second"))
    assert render(document) == "x\n  first\n  second"


def test_mark_as_root_sets_literal_indentation():
    document = doc.indent(doc.mark_as_root("x", literalline, "y", literalline, literalline, "z"))
    assert render(document) == "x\n  y\n\n  z"


def test_trailing_whitespace_is_trimmed():
    document = doc.indent("a ", hardline, "b")
    assert render(document) == "a\n  b"


def test_propagate_breaks_marks_groups():
    document = doc.group("a", doc.group("b", hardline))
    result = doc.propagate_breaks(document)
    assert isinstance(result, doc.Group)
    assert result.should_break


def test_line_suffix_contents_do_not_propagate():
    document = doc.group("a", doc.line_suffix("b", hardline))
    result = doc.propagate_breaks(document)
    assert isinstance(result, doc.Group)
    assert not result.should_break


def test_remove_lines_flattens():
    document = bracketed("1", "2")
    assert render(doc.remove_lines(document), width=1) == "[1, 2]"


def test_dump():
    assert doc.dump(doc.group("a", line, "b")) == [["<group>", "a", "<newline ' '>", "b"]]


def test_cons_drops_empty_documents():
    assert doc.cons(None, "", "a") == doc.Text("a")
    assert doc.cons(None, "") is None


@given(lists(text(alphabet="abc", min_size=1, max_size=5), min_size=1, max_size=10), integers(1, 40))
def test_flat_rendering_matches_flat_width(words, width):
    document = doc.group(doc.join(line, words))
    rendered = render(document, width=width)
    if doc.flat_width(document) <= width:
        assert rendered == " ".join(words)
    else:
        assert rendered == "\n".join(words)
