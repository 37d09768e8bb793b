"""
Command registry for aika.
Handles command registration, discovery, and lookup.
"""
import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import AikaError
from .base import SlashCommand, CommandResult

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Registry for REPL slash commands.

    Commands are auto-discovered from the commands package.
    """

    def __init__(self, discover: bool = True) -> None:
        self._commands: Dict[str, SlashCommand] = {}
        self._aliases: Dict[str, str] = {}
        if discover:
            self._discover_commands()

    def _discover_commands(self) -> None:
        """Auto-discover and register commands from the commands package."""
        from . import commands as commands_package

        package_path = Path(commands_package.__file__).parent

        for module_info in pkgutil.iter_modules([str(package_path)]):
            if module_info.name.startswith('_'):
                continue

            module = importlib.import_module(
                f".commands.{module_info.name}",
                package="aika.command_system"
            )

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type) and
                    issubclass(attr, SlashCommand) and
                    attr is not SlashCommand and
                    not attr_name.startswith('_')
                ):
                    self.register(attr())

        logger.debug(f"Discovered {len(self._commands)} slash commands")

    def register(self, command: SlashCommand) -> None:
        """
        Register a command.

        Args:
            command: Command instance to register
        """
        self._commands[command.name] = command

        for alias in command.aliases:
            self._aliases[alias] = command.name

    def get(self, name: str) -> Optional[SlashCommand]:
        """
        Get a command by name or alias.

        Args:
            name: Command name or alias

        Returns:
            Command instance or None
        """
        name = name.lower()

        if name in self._commands:
            return self._commands[name]

        if name in self._aliases:
            return self._commands[self._aliases[name]]

        return None

    def execute(self, name: str, args: str = "", **kwargs) -> CommandResult:
        """
        Execute a command by name.

        Errors raised by aika itself (a provider failing during /models, for
        example) are turned into an error result.

        Args:
            name: Command name
            args: Command arguments
            **kwargs: REPL context

        Returns:
            CommandResult from execution
        """
        command = self.get(name)

        if command is None:
            return CommandResult.error(
                f"Unknown command: /{name}. Type /help for available commands."
            )

        try:
            return command.run(args, **kwargs)
        except AikaError as e:
            return CommandResult.error(str(e))

    def list_commands(self) -> List[dict]:
        """
        List all registered commands.

        Returns:
            List of command info dicts, sorted by name
        """
        return [
            {
                "name": name,
                "description": command.description,
                "aliases": command.aliases,
            }
            for name, command in sorted(self._commands.items())
        ]

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


_registry: Optional[CommandRegistry] = None


def get_command_registry() -> CommandRegistry:
    """Get the shared command registry, discovering commands on first use."""
    global _registry
    if _registry is None:
        _registry = CommandRegistry()
    return _registry
