"""Formatter configuration.

Options are immutable for the duration of a print. Build them directly, or
from a loose mapping (a config file, command line flags) with
`Options.from_mapping`, which validates everything before any printing
starts.
"""
import collections.abc
import dataclasses
import logging
import types
import typing

from .errors import ConfigurationError

options_log = logging.getLogger("rubyfmt.options")

TRAILING_COMMA_POLICIES = ("none", "all", "es5")
QUOTES = ("'", '"')

DEFAULT_EMBEDDED_LANGUAGES: typing.Mapping[str, str] = types.MappingProxyType(
    {
        "css": "css",
        "javascript": "javascript",
        "js": "javascript",
        "less": "less",
        "markdown": "markdown",
        "ruby": "ruby",
        "scss": "scss",
        "sql": "sql",
    }
)


@dataclasses.dataclass(frozen=True)
class Options:
    print_width: int = 80
    tab_width: int = 2

    # Allow `foo if bar` and `foo while bar` when they fit.
    modifier: bool = True
    # Allow `a ? b : c` for simple if/else.
    inline_conditionals: bool = True
    # Prefer %w[] and %i[] for arrays of simple words and symbols.
    array_literal: bool = True
    # Prefer `key: value` over `:key => value` where every key allows it.
    hash_label: bool = True
    # Rewrite `{ |x| x.foo }` as `(&:foo)`.
    to_proc: bool = False
    # Hash keys under which the to_proc rewrite never fires.
    to_proc_guarded_keys: tuple[str, ...] = ("if", "unless")
    quote: str = "'"
    trailing_comma: str = "none"

    chain_threshold: int = 3
    signature_chain_threshold: int = 2

    embedded_languages: typing.Mapping[str, str] = dataclasses.field(
        default_factory=lambda: DEFAULT_EMBEDDED_LANGUAGES
    )
    # Keep heredoc content verbatim if the embedded formatter fails, rather
    # than failing the whole run.
    embedded_fallback: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        for name in ("print_width", "tab_width", "chain_threshold", "signature_chain_threshold"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(name, value, "a positive integer")

        for name in ("modifier", "inline_conditionals", "array_literal", "hash_label", "to_proc", "embedded_fallback"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(name, value, "a boolean")

        if self.quote not in QUOTES:
            raise ConfigurationError("quote", self.quote, "one of ' or \"")

        if self.trailing_comma not in TRAILING_COMMA_POLICIES:
            raise ConfigurationError("trailing_comma", self.trailing_comma, f"one of {', '.join(TRAILING_COMMA_POLICIES)}")

        if self.signature_chain_threshold > self.chain_threshold:
            raise ConfigurationError(
                "signature_chain_threshold",
                self.signature_chain_threshold,
                f"at most chain_threshold ({self.chain_threshold})",
            )

        # A bare string would pass as a sequence of one-letter keys.
        guarded = self.to_proc_guarded_keys
        if not isinstance(guarded, (tuple, list)) or not all(isinstance(k, str) for k in guarded):
            raise ConfigurationError("to_proc_guarded_keys", guarded, "a list of key names")

        languages = self.embedded_languages
        if not isinstance(languages, collections.abc.Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in languages.items()
        ):
            raise ConfigurationError("embedded_languages", self.embedded_languages, "a mapping of tag to language")

    @property
    def indent(self) -> str:
        return " " * self.tab_width

    @property
    def trailing_commas(self) -> bool:
        return self.trailing_comma in ("all", "es5")

    @classmethod
    def from_mapping(cls, mapping: typing.Mapping[str, typing.Any]) -> "Options":
        """Build options from a loose mapping.

        Keys may be the field names or the camelCase names from editor configs
        (`printWidth`, `rubySingleQuote`...). Unknown keys are ignored.
        """
        fields = {f.name for f in dataclasses.fields(cls)}
        values: dict[str, typing.Any] = {}

        for key, value in mapping.items():
            name = _ALIASES.get(key, key)
            if name == "single_quote":
                if not isinstance(value, bool):
                    raise ConfigurationError(key, value, "a boolean")
                values["quote"] = "'" if value else '"'
            elif name in fields:
                if name == "to_proc_guarded_keys" and isinstance(value, list):
                    value = tuple(value)
                elif name == "embedded_languages" and isinstance(value, dict):
                    value = types.MappingProxyType(dict(value))
                values[name] = value
            else:
                options_log.debug(f"Ignoring unrecognized option {key}")

        return cls(**values)


_ALIASES = {
    "printWidth": "print_width",
    "tabWidth": "tab_width",
    "trailingComma": "trailing_comma",
    "rubyModifier": "modifier",
    "rubyArrayLiteral": "array_literal",
    "rubyHashLabel": "hash_label",
    "rubyToProc": "to_proc",
    "rubySingleQuote": "single_quote",
    "rubyInlineConditionals": "inline_conditionals",
}
