"""
File loader for aika.
Handles reading file and directory contents for file: and dir: inputs.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class LoadedFile:
    """Represents a loaded file."""
    path: str
    content: str
    encoding: str = ""
    is_binary: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if file was loaded successfully."""
        return self.error is None and not self.is_binary

    def format_for_prompt(self) -> str:
        """Format file content with a header naming its path."""
        return f"# File: {self.path}\n{self.content}"


class FileLoader:
    """
    Loads file contents for inclusion in prompts.

    Supports text files, binary detection, encoding fallback
    and recursive directory walks.
    """

    TEXT_EXTENSIONS = {
        '.txt', '.md', '.py', '.js', '.ts', '.jsx', '.tsx',
        '.java', '.c', '.cpp', '.h', '.hpp', '.cs', '.go',
        '.rs', '.rb', '.php', '.swift', '.kt', '.scala',
        '.html', '.css', '.scss', '.sass', '.less',
        '.json', '.yaml', '.yml', '.toml', '.xml',
        '.sql', '.sh', '.bash', '.zsh', '.fish', '.ps1',
        '.r', '.m', '.lua', '.pl', '.vim', '.el',
        '.dockerfile', '.makefile', '.cmake',
        '.gitignore', '.env', '.ini', '.cfg', '.conf',
        '.rst', '.tex', '.org', '.adoc', '.diff', '.patch'
    }

    BINARY_EXTENSIONS = {
        '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.ico', '.webp',
        '.mp3', '.wav', '.ogg', '.flac', '.aac',
        '.mp4', '.avi', '.mkv', '.mov', '.webm',
        '.pdf', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx',
        '.zip', '.tar', '.gz', '.rar', '.7z',
        '.exe', '.dll', '.so', '.dylib',
        '.pyc', '.pyo', '.class', '.o', '.obj'
    }

    ENCODINGS = ['utf-8', 'cp1252']

    def __init__(self, base_dir: Optional[str] = None) -> None:
        """
        Initialize file loader.

        Args:
            base_dir: Base directory for relative paths
        """
        self._base_dir = Path(base_dir) if base_dir else Path.cwd()

    def load(self, path: str) -> LoadedFile:
        """
        Load a single text file.

        Args:
            path: File path (absolute, relative or ~-prefixed)

        Returns:
            LoadedFile with contents or error
        """
        file_path = self._resolve_path(path)

        if not file_path.exists():
            return LoadedFile(path=path, content="", error=f"File not found: {path}")

        if not file_path.is_file():
            return LoadedFile(path=path, content="", error=f"Not a file: {path}")

        try:
            if self._is_binary(file_path):
                return LoadedFile(path=path, content="", encoding="binary", is_binary=True,
                                  error=f"Binary file: {path}")

            content, encoding = self._read_text(file_path)
            return LoadedFile(path=path, content=content, encoding=encoding)
        except PermissionError:
            return LoadedFile(path=path, content="", error=f"Permission denied: {path}")
        except OSError as e:
            return LoadedFile(path=path, content="", error=f"Cannot read {path}: {e}")

    def load_multiple(self, paths: List[str]) -> List[LoadedFile]:
        """
        Load multiple files, preserving the order given.

        Args:
            paths: List of file paths

        Returns:
            List of LoadedFile objects
        """
        return [self.load(path) for path in paths]

    def load_directory(self, path: str) -> List[LoadedFile]:
        """
        Load every text file below a directory.

        The walk is recursive. Entries whose name starts with '.' are skipped
        together with everything below them, and binary files are skipped.
        Files are returned sorted by their POSIX path relative to the directory.

        Args:
            path: Directory path

        Returns:
            List of LoadedFile objects whose path is relative to the directory

        Raises:
            FileNotFoundError: If the directory does not exist
            NotADirectoryError: If the path is not a directory
        """
        dir_path = self._resolve_path(path)

        if not dir_path.exists():
            raise FileNotFoundError(f"Directory not found: {path}")
        if not dir_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")

        relative_paths = sorted(
            file.relative_to(dir_path).as_posix()
            for file in self._walk(dir_path)
        )

        loaded = []
        for relative in relative_paths:
            result = self.load(str(dir_path / relative))
            if result.is_binary:
                logger.debug(f"Skipping binary file {relative}")
                continue
            if result.error:
                logger.warning(f"Skipping {relative}: {result.error}")
                continue
            result.path = relative
            loaded.append(result)

        return loaded

    def _walk(self, directory: Path):
        for item in directory.iterdir():
            if item.name.startswith('.'):
                continue
            if item.is_dir():
                yield from self._walk(item)
            elif item.is_file():
                yield item

    def _resolve_path(self, path: str) -> Path:
        """Resolve a path relative to base directory."""
        path = path.strip()

        if path.startswith('~'):
            return Path(path).expanduser()

        p = Path(path)
        if p.is_absolute():
            return p

        return (self._base_dir / path).resolve()

    def _is_binary(self, path: Path) -> bool:
        """Check if a file is binary."""
        suffix = path.suffix.lower()

        if suffix in self.TEXT_EXTENSIONS:
            return False
        if suffix in self.BINARY_EXTENSIONS:
            return True

        with open(path, 'rb') as f:
            chunk = f.read(8192)
        if not chunk:
            return False
        if b'\x00' in chunk:
            return True

        text_chars = bytearray({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100)) - {0x7f})
        non_text = chunk.translate(None, text_chars)
        return len(non_text) / len(chunk) > 0.30

    def _read_text(self, path: Path) -> Tuple[str, str]:
        """Read text file with encoding detection."""
        for encoding in self.ENCODINGS:
            try:
                with open(path, 'r', encoding=encoding, newline='') as f:
                    return f.read(), encoding
            except UnicodeError:
                continue

        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
            return f.read(), 'utf-8 (with replacements)'
