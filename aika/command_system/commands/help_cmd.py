"""Help command for aika."""
from typing import Any

from ...constants import HELP_TEXT
from ..base import SlashCommand, CommandResult


class HelpCommand(SlashCommand):
    """Display help information."""

    name = "help"
    description = "Show this help message"
    aliases = ["h", "?"]

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """Execute help command."""
        return CommandResult.success(HELP_TEXT.strip("\n"))
