import io
import json
import sys

from rubyfmt import ast
from rubyfmt.__main__ import main

from conftest import array, integer, program, string


def write_tree(tmp_path, tree) -> str:
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(ast.dump(tree)))
    return str(path)


def test_formats_a_tree_file(tmp_path, capsys):
    path = write_tree(tmp_path, program(array(integer("1"), integer("2"))))
    assert main(["rubyfmt", path]) == 0
    assert capsys.readouterr().out == "[1, 2]\n"


def test_reads_stdin(monkeypatch, capsys):
    tree = program(string("hi"))
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps(ast.dump(tree))))
    assert main(["rubyfmt", "--quote", '"']) == 0
    assert capsys.readouterr().out == '"hi"\n'


def test_options_from_flags(tmp_path, capsys):
    path = write_tree(tmp_path, program(array(integer("1000"), integer("2000"))))
    assert main(["rubyfmt", "--print-width", "8", "--tab-width", "4", "--trailing-comma", "all", path]) == 0
    assert capsys.readouterr().out == "[\n    1000,\n    2000,\n]\n"


def test_dump_document(tmp_path, capsys):
    path = write_tree(tmp_path, program(integer("1")))
    assert main(["rubyfmt", "--doc", path]) == 0
    assert json.loads(capsys.readouterr().out) == ["1", "<hardline>"]


def test_unsupported_node_fails(tmp_path, capsys):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps({"type": "program", "body": [{"type": "stmts", "body": [{"type": "bogus"}]}]}))
    assert main(["rubyfmt", str(path)]) == 1
    assert "bogus" in capsys.readouterr().err


def test_missing_file_fails(tmp_path, capsys):
    assert main(["rubyfmt", str(tmp_path / "missing.json")]) == 1
    assert "rubyfmt:" in capsys.readouterr().err


def test_invalid_option_fails(tmp_path, capsys):
    path = write_tree(tmp_path, program(integer("1")))
    assert main(["rubyfmt", "--print-width", "0", path]) == 1
    assert "print_width" in capsys.readouterr().err


def test_malformed_node_fails(tmp_path, capsys):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps({"type": "program", "body": [{"type": "stmts", "body": [{"type": "assign", "body": []}]}]}))
    assert main(["rubyfmt", str(path)]) == 1
    assert "assign" in capsys.readouterr().err
