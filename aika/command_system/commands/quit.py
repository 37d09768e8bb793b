"""Quit command for aika."""
from typing import Any

from ..base import SlashCommand, CommandResult


class QuitCommand(SlashCommand):
    """Leave the REPL."""

    name = "quit"
    description = "Exit the REPL (also: exit, quit, Ctrl+D)"
    aliases = ["exit", "q"]

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """Execute quit command."""
        return CommandResult.exit()
