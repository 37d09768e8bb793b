"""I/O handlers for aika."""
from .bash_runner import BashRunner, CommandResult
from .file_loader import FileLoader, LoadedFile
from .input_resolver import InputKind, InputResolver, InputSource, parse_input_source

__all__ = [
    'BashRunner', 'CommandResult',
    'FileLoader', 'LoadedFile',
    'InputKind', 'InputResolver', 'InputSource', 'parse_input_source',
]
