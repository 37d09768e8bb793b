"""Models command for aika."""
import asyncio
from typing import Any

from ..base import SlashCommand, CommandResult


class ModelsCommand(SlashCommand):
    """List the models offered by the session's provider."""

    name = "models"
    description = "List available models"

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """Execute models command."""
        session = kwargs.get("session")
        if session is None:
            return CommandResult.error("No active session")

        provider = session.provider
        models = asyncio.run(provider.list_models())
        session.writer.write_models(provider.name, models)
        return CommandResult.success()
