import pytest

from rubyfmt import comments
from rubyfmt.ast import Comment, node
from rubyfmt.errors import StructuralError

from conftest import at, bodystmt, define, fmt, program, stmts, vcall, void


def attach(tree, *pairs):
    comments.attach_comments(tree, [Comment(text, line=line) for text, line in pairs])
    return tree


def test_trailing_comment_goes_to_the_statement_ending_on_its_line():
    foo = at(vcall("foo"), 1)
    attach(at(program(foo), 1), ("# a", 1))
    assert foo.comments == [Comment("# a", leading=False, line=1)]


def test_outermost_statement_wins():
    inner = at(vcall("inner"), 2)
    method = at(define("m", inner), 1, 2)
    attach(at(program(method), 1, 2), ("# end", 2))
    assert method.comments == [Comment("# end", leading=False, line=2)]
    assert inner.comments == []


def test_comment_on_its_own_line_leads_the_next_statement():
    foo = at(vcall("foo"), 1)
    bar = at(vcall("bar"), 3)
    attach(at(program(foo, bar), 1, 3), ("# b", 2))
    assert bar.comments == [Comment("# b", leading=True, line=2)]
    assert foo.comments == []


def test_innermost_statement_list_is_chosen():
    inner = at(vcall("inner"), 3)
    method = at(node("def", *define("m").body[:2], at(bodystmt(inner), 2, 4)), 1, 4)
    after = at(vcall("after"), 6)
    attach(at(program(method, after), 1, 6), ("# inside", 2))
    assert inner.comments == [Comment("# inside", leading=True, line=2)]


def test_comment_after_the_last_statement():
    foo = at(vcall("foo"), 1)
    attach(at(program(foo), 1, 3), ("# last", 3))
    assert foo.comments == [Comment("# last", leading=False, line=3)]


def test_comment_in_an_empty_body_goes_to_the_placeholder():
    placeholder = void()
    method = at(node("def", *define("m").body[:2], at(node("bodystmt", stmts(placeholder), None, None, None), 1, 3)), 1, 3)
    attach(at(program(method), 1, 3), ("# todo", 2))
    assert placeholder.comments == [Comment("# todo", leading=False, line=2)]
    assert fmt(program(method)) == "def m\n  # todo\nend\n"


def test_comments_need_lines():
    with pytest.raises(StructuralError):
        comments.attach_comments(program(vcall("foo")), [Comment("# lost")])


def test_comment_below_the_node_stays_on_its_own_line():
    foo = at(vcall("foo"), 1)
    foo.comments.append(Comment("# later", line=2))
    assert fmt(program(foo)) == "foo\n# later\n"


def test_block_comments_are_verbatim():
    foo = vcall("foo")
    foo.comments.append(Comment("=begin\n  keep   this\n=end", leading=True))
    assert fmt(program(foo)) == "=begin\n  keep   this\n=end\nfoo\n"


def test_inner_comments():
    empty = at(node("array", None), 1, 3)
    empty.comments = [Comment("# inside", line=2), Comment("# after", line=3)]
    inside, outside = comments.inner_comments(empty)
    assert [c.text for c in inside] == ["# inside"]
    assert [c.text for c in outside] == ["# after"]


def test_printing_leaves_the_tree_alone():
    foo, bar = at(vcall("foo"), 1), at(vcall("bar"), 3)
    tree = at(program(foo, bar), 1, 3)
    floating = [Comment("# a", line=1), Comment("# b", line=2)]
    tree.comments = list(floating)

    assert fmt(tree) == "foo # a\n# b\nbar\n"
    assert tree.comments == floating
    assert foo.comments == [] and bar.comments == []
    assert fmt(tree) == "foo # a\n# b\nbar\n"
