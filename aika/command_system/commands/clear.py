"""Clear command for aika."""
from typing import Any

from ..base import SlashCommand, CommandResult


class ClearCommand(SlashCommand):
    """Forget the session's prompt/response history."""

    name = "clear"
    description = "Clear conversation history"

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """Execute clear command."""
        session = kwargs.get("session")
        if session is None:
            return CommandResult.error("No active session")

        session.clear_history()
        return CommandResult.success("Conversation history cleared.")
