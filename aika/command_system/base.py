"""
Slash command building blocks for the aika REPL.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a slash command.

    Attributes:
        message: Text for the REPL to print, empty for nothing
        is_error: Whether the message should be shown as an error
        should_exit: Whether the REPL loop ends after this command
    """
    message: str = ""
    is_error: bool = False
    should_exit: bool = False

    @property
    def is_success(self) -> bool:
        return not self.is_error

    @classmethod
    def success(cls, message: str = "") -> 'CommandResult':
        return cls(message=message)

    @classmethod
    def error(cls, message: str) -> 'CommandResult':
        return cls(message=message, is_error=True)

    @classmethod
    def exit(cls) -> 'CommandResult':
        return cls(should_exit=True)


class SlashCommand(ABC):
    """
    A command typed as /name in the REPL.

    Subclasses in the commands package are picked up by the registry,
    which files them under name and every alias.
    """

    name: str = ""
    description: str = ""
    aliases: List[str] = []

    @abstractmethod
    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        """
        Execute the command.

        Args:
            args: Everything typed after the command name
            **kwargs: REPL context; 'session' is the active ReplSession

        Returns:
            CommandResult for the REPL to act on
        """

    def __repr__(self) -> str:
        return f"/{self.name}"
