"""History command for aika."""
from typing import Any

from ..base import SlashCommand, CommandResult


class HistoryCommand(SlashCommand):
    """Show the prompts and responses of this session."""

    name = "history"
    description = "Show conversation history"

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """Execute history command."""
        session = kwargs.get("session")
        if session is None:
            return CommandResult.error("No active session")

        if not session.history:
            return CommandResult.success("No conversation history.")

        lines = []
        for i, (prompt, response) in enumerate(session.history, 1):
            lines.append(f"{i}. You: {prompt}")
            lines.append(f"   AI: {response}")
        return CommandResult.success("\n".join(lines))
