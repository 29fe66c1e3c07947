import json
import sys

import pytest

from rubyfmt.client import ParserClient, ParserError

TREE = {"type": "program", "body": [{"type": "stmts", "body": [{"type": "@int", "body": ["42"]}]}]}


def script(source: str) -> list[str]:
    return [sys.executable, "-c", source]


ECHO_TREE = script(f"import sys; sys.stdin.read(); print({json.dumps(json.dumps(TREE))})")


def test_parse_returns_a_tree():
    with ParserClient(ECHO_TREE) as client:
        tree = client.parse("42")
    assert tree.type == "program"
    assert tree[0][0].value == "42"


def test_client_can_parse_repeatedly():
    with ParserClient(ECHO_TREE) as client:
        first = client.parse("42")
        second = client.parse("42")
    assert first == second


def test_parse_requires_an_open_client():
    client = ParserClient(ECHO_TREE)
    with pytest.raises(ParserError):
        client.parse("42")

    with client:
        client.parse("42")
    with pytest.raises(ParserError):
        client.parse("42")


def test_parser_error_output():
    with ParserClient(script("print('ERROR: unexpected end-of-input')")) as client:
        with pytest.raises(ParserError) as e:
            client.parse("def")
    assert str(e.value) == "unexpected end-of-input"


def test_parser_failure_includes_stderr():
    failing = script("import sys; sys.stderr.write('boom'); sys.exit(3)")
    with ParserClient(failing) as client:
        with pytest.raises(ParserError) as e:
            client.parse("x")
    assert "exit 3" in str(e.value)
    assert "boom" in str(e.value)


def test_parser_timeout():
    with ParserClient(script("import time; time.sleep(10)"), timeout=0.5) as client:
        with pytest.raises(ParserError) as e:
            client.parse("x")
    assert "timed out" in str(e.value)


def test_missing_command():
    with pytest.raises(ParserError):
        with ParserClient("definitely-not-a-real-parser-command"):
            pass


def test_command_strings_are_split():
    assert ParserClient("ruby -r ripper parse.rb").command == ["ruby", "-r", "ripper", "parse.rb"]
    with pytest.raises(ValueError):
        ParserClient("")
