"""
Command parser for aika.
Parses REPL input into slash commands and prompts.
"""
from dataclasses import dataclass

from ..constants import SLASH_PREFIX

# Bare words that leave the REPL without a slash
EXIT_WORDS = {"exit", "quit"}


@dataclass
class ParsedInput:
    """Result of parsing user input."""
    type: str  # 'command', 'message', 'empty'
    command: str = ""
    args: str = ""
    raw: str = ""
    message: str = ""


class CommandParser:
    """
    Parser for REPL input.

    Handles parsing of:
    - Slash commands (/command args)
    - Bare exit words (exit, quit)
    - Regular prompts
    """

    def parse(self, input_text: str) -> ParsedInput:
        """
        Parse user input into a structured result.

        Args:
            input_text: Raw user input

        Returns:
            ParsedInput with parsed components
        """
        text = input_text.strip()

        if not text:
            return ParsedInput(type="empty", raw=input_text)

        if text.lower() in EXIT_WORDS:
            return ParsedInput(type="command", command="quit", raw=text)

        if text.startswith(SLASH_PREFIX):
            return self._parse_command(text)

        return ParsedInput(type="message", message=text, raw=text)

    def _parse_command(self, text: str) -> ParsedInput:
        """Parse a slash command."""
        without_prefix = text[len(SLASH_PREFIX):]

        parts = without_prefix.split(maxsplit=1)
        command = parts[0].lower() if parts else ""
        args = parts[1] if len(parts) > 1 else ""

        return ParsedInput(
            type="command",
            command=command,
            args=args,
            raw=text
        )
