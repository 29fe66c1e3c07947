import json
import typing

if typing.TYPE_CHECKING:
    from .ast import Span


class FormatError(Exception):
    """Base class for everything that can stop a format run."""


class StructuralError(FormatError):
    """The tree doesn't have the shape a printer relies on.

    Carries the offending tag, its raw payload and (where known) the source
    span so the message points at the real problem.
    """

    tag: str
    payload: typing.Any
    span: "Span | None"
    reason: str

    def __init__(self, tag: str, payload: typing.Any, span: "Span | None", reason: str):
        super().__init__(tag, reason)
        self.tag = tag
        self.payload = payload
        self.span = span
        self.reason = reason

    def _payload_str(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        try:
            return json.dumps(self.payload, indent=2, default=str)
        except (TypeError, ValueError):
            return repr(self.payload)

    def __str__(self):
        where = ""
        if self.span is not None:
            where = f" at line {self.span.start_line}, column {self.span.start_column}"
        return f"{self.reason}: {self.tag}{where}\n{self._payload_str()}"


class UnsupportedNode(StructuralError):
    """A node whose tag has no registered printer."""

    def __init__(self, tag: str, payload: typing.Any, span: "Span | None" = None):
        super().__init__(tag, payload, span, "Unsupported node encountered")


class ConfigurationError(FormatError):
    """An option had a value we can't work with."""

    option: str
    value: typing.Any

    def __init__(self, option: str, value: typing.Any, expected: str):
        super().__init__(option, value)
        self.option = option
        self.value = value
        self.expected = expected

    def __str__(self):
        return f"Invalid value for option '{self.option}': {self.value!r} (expected {self.expected})"
