"""
Output writer for aika.
Prints provider responses, either in one piece or chunk by chunk while streaming.
"""
import logging
from typing import AsyncIterator, Iterable, Optional

from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.text import Text

from ..llm.base import StreamChunk
from ..utils import wrap_text

logger = logging.getLogger(__name__)


class OutputWriter:
    """
    Writes responses to the terminal.

    Plain mode prints the text exactly as received, with markup and
    highlighting disabled, so output can be piped. Markdown mode renders
    through rich.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        markdown: bool = False,
        wrap: Optional[int] = None,
    ) -> None:
        """
        Initialize the writer.

        Args:
            console: Rich Console for output (stdout if not provided)
            markdown: Render responses as markdown
            wrap: Column width for wrapping full responses
        """
        self._console = console or Console(highlight=False, soft_wrap=True, emoji=False)
        self._markdown = markdown
        self._wrap = wrap

    @property
    def console(self) -> Console:
        """Get the Rich console."""
        return self._console

    def write(self, text: str) -> None:
        """Print a complete response once."""
        if self._wrap is not None:
            text = wrap_text(text, self._wrap)

        if self._markdown:
            self._console.print(Markdown(text))
        else:
            self._console.print(text, markup=False, highlight=False, emoji=False)

    async def write_stream(self, chunks: AsyncIterator[StreamChunk]) -> str:
        """
        Print chunks as they arrive, in arrival order.

        Args:
            chunks: Async iterator of StreamChunk

        Returns:
            The concatenated response text
        """
        if self._markdown:
            return await self._write_stream_markdown(chunks)

        parts: list[str] = []
        try:
            async for chunk in chunks:
                if not chunk.content:
                    continue
                parts.append(chunk.content)
                self._console.print(chunk.content, end="", markup=False, highlight=False, emoji=False)
                self._console.file.flush()
        except BaseException:
            if parts:
                self._console.print()
            raise

        self._console.print()

        logger.debug(f"Streamed {len(parts)} chunks")
        return "".join(parts)

    async def _write_stream_markdown(self, chunks: AsyncIterator[StreamChunk]) -> str:
        buffer = ""
        with Live(Markdown(""), console=self._console, refresh_per_second=12) as live:
            async for chunk in chunks:
                if not chunk.content:
                    continue
                buffer += chunk.content
                live.update(Markdown(buffer))
        return buffer

    def write_models(self, provider: str, models: Iterable[str]) -> None:
        """Print a provider's model list."""
        self._console.print(Text(f"Available {provider} models:", style="bold"))
        for model in models:
            self._console.print(f"  {model}", markup=False, highlight=False, emoji=False)


class ErrorConsole:
    """Prints user-facing errors to stderr."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(stderr=True, highlight=False, soft_wrap=True)

    @property
    def console(self) -> Console:
        return self._console

    def print_error(self, message: str) -> None:
        text = Text("Error: ", style="bold red")
        text.append(message)
        self._console.print(text)

    def print_warning(self, message: str) -> None:
        self._console.print(Text(message, style="yellow"))
