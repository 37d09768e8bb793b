"""
Interactive REPL for aika.

Every line that is not a slash command is sent to the provider as its own
one-shot query. Prompts and responses are kept in an in-memory history that
/history shows and /clear empties; the history is never sent back to the
provider.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from .command_system import CommandParser, CommandRegistry, get_command_registry
from .constants import APP_NAME, APP_VERSION, REPL_PROMPT, SLASH_PREFIX
from .errors import AikaError
from .llm import CompletionRequest, LLMProvider
from .pipeline import Pipeline
from .rich_ui import ErrorConsole, OutputWriter

logger = logging.getLogger(__name__)


@dataclass
class ReplSession:
    """State shared between the REPL loop and its slash commands."""
    provider: LLMProvider
    writer: OutputWriter
    history: List[Tuple[str, str]] = field(default_factory=list)

    def add_exchange(self, prompt: str, response: str) -> None:
        self.history.append((prompt, response))

    def clear_history(self) -> None:
        self.history.clear()


class Repl:
    """Read-eval-print loop over a single provider."""

    def __init__(
        self,
        pipeline: Pipeline,
        provider: LLMProvider,
        commands: Optional[CommandRegistry] = None,
        errors: Optional[ErrorConsole] = None,
        prompt_session: Optional[PromptSession] = None,
    ) -> None:
        """
        Initialize the REPL.

        Args:
            pipeline: Pipeline used to complete prompts
            provider: Provider every line is sent to
            commands: Slash command registry (shared registry if not provided)
            errors: Console for error messages
            prompt_session: prompt_toolkit session to read lines from
        """
        self._pipeline = pipeline
        self._commands = commands or get_command_registry()
        self._errors = errors or ErrorConsole()
        self._parser = CommandParser()
        self._prompt_session = prompt_session
        self._running = True
        self.session = ReplSession(provider=provider, writer=pipeline.writer)

    def _create_prompt_session(self) -> PromptSession:
        words = []
        for cmd in self._commands.list_commands():
            words.append(f"{SLASH_PREFIX}{cmd['name']}")
        return PromptSession(
            history=InMemoryHistory(),
            completer=WordCompleter(words, sentence=True),
        )

    def run(self) -> None:
        """Run the loop until /quit, exit, quit or Ctrl+D."""
        if self._prompt_session is None:
            self._prompt_session = self._create_prompt_session()

        provider = self.session.provider
        console = self.session.writer.console
        console.print(
            f"{APP_NAME} {APP_VERSION} - {provider.name} ({provider.model}). Type /help for commands.",
            markup=False,
            highlight=False,
        )

        self._running = True
        while self._running:
            try:
                line = self._prompt_session.prompt(REPL_PROMPT)
            except KeyboardInterrupt:
                continue
            except EOFError:
                break

            self.handle_line(line)

    def handle_line(self, line: str) -> bool:
        """
        Process one line of input.

        Args:
            line: Raw line as typed

        Returns:
            False once the REPL should stop, True otherwise
        """
        parsed = self._parser.parse(line)

        if parsed.type == "command":
            self._handle_command(parsed.command, parsed.args)
        elif parsed.type == "message":
            self._handle_message(parsed.message)

        return self._running

    def _handle_command(self, command: str, args: str) -> None:
        result = self._commands.execute(command, args, session=self.session)

        if result.should_exit:
            self._running = False

        if result.message:
            if result.is_error:
                self._errors.print_error(result.message)
            else:
                self.session.writer.console.print(result.message, markup=False, highlight=False)

    def _handle_message(self, message: str) -> None:
        provider = self.session.provider
        request = CompletionRequest(prompt=message, model=provider.model)

        try:
            response = asyncio.run(self._pipeline.complete(provider, request))
        except AikaError as e:
            logger.debug(f"Query failed: {e!r}")
            self._errors.print_error(str(e))
            return

        self.session.writer.write(response.content)
        self.session.add_exchange(message, response.content)
