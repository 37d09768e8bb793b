"""
Input resolution for aika.

Turns an input descriptor given on the command line (file:, dir:, cmd:, -,
or the name of a configured input) into a single block of text.
"""
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, TextIO

from ..constants import FILE_SEPARATOR
from ..errors import InputUnavailable, UnknownInput
from .bash_runner import BashRunner
from .file_loader import FileLoader

logger = logging.getLogger(__name__)


class InputKind(Enum):
    """Kinds of input source."""
    FILE = "file"
    DIRECTORY = "dir"
    COMMAND = "cmd"
    NAMED = "named"
    STDIN = "stdin"


@dataclass(frozen=True)
class InputSource:
    """
    A parsed input descriptor.

    Attributes:
        kind: Which variant this source is
        paths: File paths, in order (FILE only)
        value: Directory path, command string or input name
    """
    kind: InputKind
    paths: tuple[str, ...] = ()
    value: str = ""

    @classmethod
    def files(cls, *paths: str) -> "InputSource":
        return cls(kind=InputKind.FILE, paths=tuple(paths))

    @classmethod
    def directory(cls, path: str) -> "InputSource":
        return cls(kind=InputKind.DIRECTORY, value=path)

    @classmethod
    def command(cls, command: str) -> "InputSource":
        return cls(kind=InputKind.COMMAND, value=command)

    @classmethod
    def named(cls, name: str) -> "InputSource":
        return cls(kind=InputKind.NAMED, value=name)

    @classmethod
    def stdin(cls) -> "InputSource":
        return cls(kind=InputKind.STDIN)

    def describe(self) -> str:
        """Descriptor string for messages, in the same syntax the CLI accepts."""
        if self.kind is InputKind.FILE:
            return "file:" + ",".join(self.paths)
        if self.kind is InputKind.STDIN:
            return "-"
        if self.kind is InputKind.NAMED:
            return self.value
        return f"{self.kind.value}:{self.value}"


def parse_input_source(text: str) -> InputSource:
    """
    Parse an input descriptor.

    Examples:
        >>> parse_input_source("file:a.txt,b.txt").paths
        ('a.txt', 'b.txt')
        >>> parse_input_source("git-diff-cached").kind
        <InputKind.NAMED: 'named'>

    Raises:
        InputUnavailable: If the descriptor has a prefix but nothing after it
    """
    text = text.strip()

    if text in ("-", "stdin:"):
        return InputSource.stdin()

    prefix, sep, rest = text.partition(":")
    if sep and prefix in ("file", "dir", "cmd"):
        rest = rest.strip()
        if not rest:
            raise InputUnavailable(f"Empty {prefix}: input", source=text)
        if prefix == "file":
            paths = [p.strip() for p in rest.split(",") if p.strip()]
            return InputSource.files(*paths)
        if prefix == "dir":
            return InputSource.directory(rest)
        return InputSource.command(rest)

    if not text:
        raise InputUnavailable("Empty input descriptor", source=text)
    return InputSource.named(text)


class InputResolver:
    """
    Resolves InputSource values to text.

    Named inputs are looked up in the configured inputs table and run as
    shell commands.
    """

    def __init__(
        self,
        named_inputs: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        loader: Optional[FileLoader] = None,
        runner: Optional[BashRunner] = None,
        stdin: Optional[TextIO] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            named_inputs: Mapping of input name to shell command
            cwd: Working directory for paths and commands
            loader: File loader (created for cwd if not provided)
            runner: Command runner (created if not provided)
            stdin: Stream read for stdin inputs (sys.stdin if not provided)
        """
        self._named_inputs = dict(named_inputs or {})
        self._cwd = cwd
        self._loader = loader or FileLoader(cwd)
        self._runner = runner or BashRunner()
        self._stdin = stdin

    def resolve(self, source: InputSource) -> str:
        """
        Resolve a source to a single string.

        Raises:
            InputUnavailable: If any part of the source cannot be read
        """
        logger.debug(f"Resolving input {source.describe()}")

        if source.kind is InputKind.FILE:
            return self._resolve_files(source)
        if source.kind is InputKind.DIRECTORY:
            return self._resolve_directory(source)
        if source.kind is InputKind.COMMAND:
            return self._resolve_command(source.value, source.describe())
        if source.kind is InputKind.NAMED:
            command = self._named_inputs.get(source.value)
            if command is None:
                raise UnknownInput(source.value, list(self._named_inputs))
            return self._resolve_command(command, source.value)
        return (self._stdin or sys.stdin).read()

    def _resolve_files(self, source: InputSource) -> str:
        if not source.paths:
            raise InputUnavailable("No files given", source=source.describe())

        contents = []
        for loaded in self._loader.load_multiple(list(source.paths)):
            if not loaded.success:
                raise InputUnavailable(loaded.error or f"Cannot read {loaded.path}", source=loaded.path)
            contents.append(loaded.content)
        return FILE_SEPARATOR.join(contents)

    def _resolve_directory(self, source: InputSource) -> str:
        try:
            files = self._loader.load_directory(source.value)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise InputUnavailable(str(e), source=source.describe()) from e
        except OSError as e:
            raise InputUnavailable(f"Cannot read directory {source.value}: {e}", source=source.describe()) from e

        if not files:
            raise InputUnavailable(f"No text files found in {source.value}", source=source.describe())

        logger.debug(f"Read {len(files)} files from {source.value}")
        return FILE_SEPARATOR.join(loaded.format_for_prompt() for loaded in files)

    def _resolve_command(self, command: str, label: str) -> str:
        result = self._runner.run(command, cwd=self._cwd)
        if result.decode_error:
            raise InputUnavailable(
                f"Command '{command}' wrote output that is not valid UTF-8: {result.decode_error}",
                source=label,
            )
        if not result.success:
            detail = result.stderr.strip() or "no error output"
            raise InputUnavailable(
                f"Command '{command}' failed with status {result.return_code}: {detail}",
                source=label,
            )
        return result.stdout
