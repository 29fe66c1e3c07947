import pytest

from rubyfmt.errors import ConfigurationError
from rubyfmt.options import Options


def test_defaults():
    options = Options()
    assert options.print_width == 80
    assert options.quote == "'"
    assert options.indent == "  "
    assert not options.trailing_commas
    assert options.to_proc_guarded_keys == ("if", "unless")


def test_from_mapping_accepts_camel_case_names():
    options = Options.from_mapping(
        {
            "printWidth": 100,
            "tabWidth": 4,
            "rubyToProc": True,
            "rubySingleQuote": False,
            "trailingComma": "all",
        }
    )
    assert options.print_width == 100
    assert options.indent == "    "
    assert options.to_proc
    assert options.quote == '"'
    assert options.trailing_commas


def test_from_mapping_ignores_unknown_keys():
    assert Options.from_mapping({"semi": False, "print_width": 40}).print_width == 40


def test_from_mapping_converts_lists():
    options = Options.from_mapping({"to_proc_guarded_keys": ["if", "unless", "only"]})
    assert options.to_proc_guarded_keys == ("if", "unless", "only")


@pytest.mark.parametrize(
    "values",
    [
        {"print_width": 0},
        {"print_width": "80"},
        {"tab_width": True},
        {"modifier": "yes"},
        {"quote": "`"},
        {"trailing_comma": "some"},
        {"chain_threshold": 2, "signature_chain_threshold": 3},
        {"embedded_languages": {"sql": 1}},
        {"embedded_languages": ["sql"]},
        {"to_proc_guarded_keys": "if"},
        {"to_proc_guarded_keys": 3},
        {"to_proc_guarded_keys": ("if", None)},
    ],
)
def test_invalid_options(values):
    with pytest.raises(ConfigurationError):
        Options(**values)


def test_invalid_single_quote_alias():
    with pytest.raises(ConfigurationError) as e:
        Options.from_mapping({"rubySingleQuote": "yes"})
    assert "rubySingleQuote" in str(e.value)


def test_error_names_the_option():
    with pytest.raises(ConfigurationError) as e:
        Options(trailing_comma="sometimes")
    assert e.value.option == "trailing_comma"
    assert "sometimes" in str(e.value)


def test_from_mapping_rejects_malformed_collections():
    with pytest.raises(ConfigurationError) as e:
        Options.from_mapping({"embedded_languages": ["sql"]})
    assert e.value.option == "embedded_languages"

    with pytest.raises(ConfigurationError) as e:
        Options.from_mapping({"to_proc_guarded_keys": "if"})
    assert e.value.option == "to_proc_guarded_keys"
