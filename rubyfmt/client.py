"""Getting a tree out of an external parser.

The parser is a command that reads Ruby source on stdin and writes the JSON
tree (see [ast]) on stdout. A client is scoped: open it with `with`, parse as
many sources as you like, and it refuses to run once closed.

    with ParserClient(["ruby", "parse.rb"]) as client:
        tree = client.parse(source)
"""
import logging
import shlex
import shutil
import subprocess
import typing

from . import ast
from .ast import Node
from .errors import FormatError

client_log = logging.getLogger("rubyfmt.client")


class ParserError(FormatError):
    """The parser command failed or rejected the source."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.message = message
        self.stderr = stderr

    def __str__(self):
        if self.stderr:
            return f"{self.message}: {self.stderr}"
        return self.message


class ParserClient:
    command: list[str]
    timeout: float | None
    _open: bool

    def __init__(self, command: str | typing.Sequence[str], timeout: float | None = None):
        if isinstance(command, str):
            command = shlex.split(command)
        if len(command) == 0:
            raise ValueError("The parser command cannot be empty")
        self.command = list(command)
        self.timeout = timeout
        self._open = False

    def __enter__(self) -> "ParserClient":
        if shutil.which(self.command[0]) is None:
            raise ParserError(f"Parser command not found: {self.command[0]}")
        self._open = True
        client_log.debug(f"Opened parser client for {shlex.join(self.command)}")
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._open = False
        client_log.debug("Closed parser client")

    def parse(self, source: str) -> Node:
        if not self._open:
            raise ParserError("The parser client is not open")

        client_log.debug(f"Parsing {len(source)} characters")
        try:
            result = subprocess.run(
                self.command,
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ParserError(f"Parser timed out after {self.timeout}s") from None

        if result.returncode != 0:
            raise ParserError(f"Parser failed (exit {result.returncode})", result.stderr.strip())

        output = result.stdout
        if output.startswith("ERROR: "):
            raise ParserError(output[len("ERROR: ") :].strip())

        return ast.loads(output)
