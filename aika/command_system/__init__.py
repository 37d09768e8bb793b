"""Slash command system for the aika REPL."""
from .base import CommandResult, SlashCommand
from .parser import CommandParser, ParsedInput
from .registry import CommandRegistry, get_command_registry

__all__ = [
    'CommandResult',
    'SlashCommand',
    'CommandParser',
    'ParsedInput',
    'CommandRegistry',
    'get_command_registry',
]
