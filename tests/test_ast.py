import json

import pytest

from rubyfmt import ast
from rubyfmt.ast import Comment, Span
from rubyfmt.errors import StructuralError


TREE = {
    "type": "program",
    "body": [
        {
            "type": "stmts",
            "body": [{"type": "vcall", "body": [{"type": "@ident", "body": ["foo"]}], "loc": [1, 0, 1, 3]}],
        }
    ],
    "comments": [{"value": " hello\n", "line": 1}],
}


def test_load_builds_nodes():
    tree = ast.load(TREE)
    assert tree.type == "program"
    call = tree[0][0]
    assert call.type == "vcall"
    assert call[0].value == "foo"
    assert call.loc == Span(1, 0, 1, 3)
    assert call.start_line == 1


def test_load_reads_ripper_style_comments():
    tree = ast.load(TREE)
    assert tree.comments == [Comment("# hello", leading=False, line=1)]


def test_loads_rejects_bad_json():
    with pytest.raises(StructuralError) as e:
        ast.loads("{not json")
    assert "invalid JSON" in str(e.value)


def test_load_rejects_missing_type():
    with pytest.raises(StructuralError):
        ast.load({"body": []})


def test_load_rejects_bad_location():
    with pytest.raises(StructuralError) as e:
        ast.load({"type": "program", "body": [], "loc": [1, 2]})
    assert "loc" in str(e.value)


def test_dump_is_the_inverse_of_load():
    tree = ast.loads(json.dumps(TREE))
    assert ast.load(ast.dump(tree)) == tree


def test_walk_visits_nested_lists():
    tree = ast.node(
        "params",
        [ast.token("@ident", "a"), ast.token("@ident", "b")],
        None,
        None,
        None,
        None,
        None,
        None,
    )
    assert [n.type for n in tree.walk()] == ["params", "@ident", "@ident"]


def test_tokens_have_no_children():
    assert list(ast.token("ident", "x").children()) == []
    assert ast.token("ident", "x").type == "@ident"


def test_format_shows_structure():
    tree = ast.load(TREE)
    assert tree.format() == "program\n  stmts\n    vcall [1, 1]\n      @ident:'foo'"


def test_block_comments():
    assert Comment("=begin\nhi\n=end").is_block
    assert not Comment("# hi").is_block
