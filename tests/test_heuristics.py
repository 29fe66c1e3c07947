from hypothesis import assume, example, given
from hypothesis.strategies import booleans, from_regex, integers, lists, sampled_from, text

from rubyfmt import heuristics
from rubyfmt.ast import node, token

from conftest import (
    arg_paren,
    brace_block,
    call,
    command,
    fmt,
    hash_literal,
    integer,
    label,
    program,
    string,
    symbol,
    var_ref,
)

names = from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True)


############################################################################
# Numbers
############################################################################


@given(integers(min_value=0))
@example(0)
@example(10000)
def test_canonical_int_keeps_the_value(value):
    assert int(heuristics.canonical_int(str(value)), 0) == value


@given(integers(min_value=1, max_value=10**12))
def test_canonical_int_keeps_negative_values(value):
    assert int(heuristics.canonical_int(f"-{value}"), 0) == -value


@given(text(alphabet="01234567", min_size=1, max_size=10))
def test_canonical_int_octal(digits):
    result = heuristics.canonical_int("0" + digits)
    assert result == "0o" + digits
    assert int(result, 0) == int(digits, 8)


def test_canonical_int_grouping():
    assert heuristics.canonical_int("1234") == "1234"
    assert heuristics.canonical_int("12345") == "12_345"
    assert heuristics.canonical_int("1234567") == "1_234_567"
    assert heuristics.canonical_int("0x1F") == "0x1F"
    assert heuristics.canonical_int("1_000") == "1_000"


############################################################################
# Strings
############################################################################


@given(text(alphabet="abc xyz.,!?", max_size=20), sampled_from(["'", '"']), sampled_from(["'", '"']))
def test_plain_strings_switch_to_the_preferred_quote(content, source, preferred):
    parts = [token("@tstring_content", content)] if content else []
    assert heuristics.preferred_quote(source, parts, preferred) == preferred


@given(text(alphabet="ab'\"\\#{}", max_size=20), sampled_from(["'", '"']))
def test_quote_change_never_alters_content(content, preferred):
    assume(content != "")
    parts = [token("@tstring_content", content)]
    quote = heuristics.preferred_quote('"', parts, preferred)
    if quote != '"':
        assert not heuristics.is_quote_locked(parts)
        assert quote not in content


def test_interpolation_locks_the_quote():
    parts = [token("@tstring_content", "a"), node("string_embexpr", node("stmts", var_ref("b")))]
    assert heuristics.preferred_quote('"', parts, "'") == '"'


def test_percent_strings_keep_unbalanced_delimiters():
    parts = [token("@tstring_content", "a)b")]
    assert heuristics.preferred_quote("%q(", parts, "'") == "%q("
    assert heuristics.closing_quote("%q(") == ")"
    assert heuristics.closing_quote("%q|") == "|"


############################################################################
# Hashes
############################################################################


def test_hash_label_validity():
    assert heuristics.is_valid_hash_label(symbol("foo"))
    assert not heuristics.is_valid_hash_label(node("symbol_literal", token("@ident", "foo=")))
    assert not heuristics.is_valid_hash_label(node("symbol_literal", token("@op", "+")))


@given(lists(booleans(), min_size=1, max_size=6), names)
def test_hash_keys_never_mix_styles(string_keys, name):
    keys = [string(name) if is_string else symbol(name) for is_string in string_keys]
    tree = program(hash_literal(*((key, integer("1")) for key in keys)))
    output = fmt(tree)
    if any(string_keys):
        assert output.count("=>") == len(keys)
    else:
        assert output.count("=>") == 0
        assert output.count(f"{name}: 1") == len(keys)


############################################################################
# Shorthand blocks
############################################################################


def block_call(receiver: str, param: str, body_receiver: str, method: str, with_args: bool):
    if with_args:
        body = node("method_add_arg", call(var_ref(body_receiver), method), arg_paren(integer("1")))
    else:
        body = call(var_ref(body_receiver), method)
    return node("method_add_block", call(var_ref(receiver), "map"), brace_block([param], body))


@given(names, names, booleans(), booleans())
def test_to_proc_fires_only_for_a_bare_call_on_the_parameter(param, method, on_param, with_args):
    body_receiver = param if on_param else param + "_other"
    output = fmt(program(block_call("list", param, body_receiver, method, with_args)), to_proc=True)

    if on_param and not with_args:
        assert output == f"list.map(&:{method})\n"
    else:
        assert "&:" not in output
        assert output.startswith(f"list.map {{ |{param}| {body_receiver}.{method}")


def test_to_proc_is_off_by_default():
    tree = program(block_call("list", "x", "x", "to_s", False))
    assert fmt(tree) == "list.map { |x| x.to_s }\n"


def test_to_proc_needs_exactly_one_parameter():
    tree = program(node("method_add_block", call(var_ref("list"), "map"), brace_block(["x", "y"], call(var_ref("x"), "to_s"))))
    assert fmt(tree, to_proc=True) == "list.map { |x, y| x.to_s }\n"


def hook(key, block_call_node):
    pair = node("assoc_new", key, block_call_node)
    return command("before_action", node("bare_assoc_hash", pair))


def test_to_proc_skips_guarded_keys():
    tree = program(hook(label("if"), block_call("foo", "x", "x", "bar", False)))
    assert fmt(tree, to_proc=True) == "before_action if: foo.map { |x| x.bar }\n"


def test_to_proc_fires_for_other_keys():
    tree = program(hook(label("only"), block_call("foo", "x", "x", "bar", False)))
    assert fmt(tree, to_proc=True) == "before_action only: foo.map(&:bar)\n"


def test_to_proc_guarded_keys_are_configurable():
    tree = program(hook(label("only"), block_call("foo", "x", "x", "bar", False)))
    assert fmt(tree, to_proc=True, to_proc_guarded_keys=("only",)) == (
        "before_action only: foo.map { |x| x.bar }\n"
    )


def test_to_proc_skipped_inside_an_index():
    index = node("aref", var_ref("h"), node("args_add_block", node("args", block_call("foo", "x", "x", "bar", False)), None))
    assert fmt(program(index), to_proc=True) == "h[foo.map { |x| x.bar }]\n"


############################################################################
# Conditionals
############################################################################


def test_can_ternary():
    simple = node("if", var_ref("a"), node("stmts", integer("1")), node("else", node("stmts", integer("2"))))
    assert heuristics.can_ternary(simple)

    no_else = node("if", var_ref("a"), node("stmts", integer("1")), None)
    assert not heuristics.can_ternary(no_else)

    assigned = node("assign", node("var_field", token("@ident", "x")), integer("1"))
    with_assignment = node("if", var_ref("a"), node("stmts", assigned), node("else", node("stmts", integer("2"))))
    assert not heuristics.can_ternary(with_assignment)


def test_can_ternary_rejects_keyword_predicates():
    def conditional(predicate):
        return node("if", predicate, node("stmts", integer("1")), node("else", node("stmts", integer("2"))))

    assert not heuristics.can_ternary(conditional(node("binary", var_ref("a"), "and", var_ref("b"))))
    assert not heuristics.can_ternary(conditional(node("binary", var_ref("a"), token("@kw", "or"), var_ref("b"))))
    assert not heuristics.can_ternary(conditional(node("not", var_ref("a"))))
    assert heuristics.can_ternary(conditional(node("binary", var_ref("a"), "&&", var_ref("b"))))


def test_contains_assignment_looks_inside():
    assigned = node("assign", node("var_field", token("@ident", "x")), integer("1"))
    assert heuristics.contains_assignment(node("paren", node("stmts", assigned)))
    assert not heuristics.contains_assignment(var_ref("x"))
