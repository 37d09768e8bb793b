"""
Prompt templates for aika.

A template is a named string holding an {input} marker that is replaced by
the resolved input text.
"""
from dataclasses import dataclass
from typing import Mapping, Optional

from ..constants import INPUT_MARKER
from ..errors import UnknownPrompt


def interpolate(template: str, input_text: str, marker: str = INPUT_MARKER) -> str:
    """Replace every marker in the template with the input text.

    Replacement is a single pass over the template, so marker text that
    appears inside input_text is left as it is. No escaping is applied.

    Example:
        >>> interpolate("Summarize: {input}", "hello")
        'Summarize: hello'
    """
    return input_text.join(template.split(marker))


@dataclass(frozen=True)
class PromptTemplate:
    """A named prompt template."""
    name: str
    text: str

    @property
    def has_marker(self) -> bool:
        return INPUT_MARKER in self.text

    def render(self, input_text: str) -> str:
        return interpolate(self.text, input_text)


# Sends the input unchanged when no prompt is selected
PASSTHROUGH = PromptTemplate(name="", text=INPUT_MARKER)


class PromptLibrary:
    """Named prompt templates loaded from the configuration."""

    def __init__(self, prompts: Mapping[str, str]) -> None:
        self._templates = {
            name: PromptTemplate(name=name, text=text)
            for name, text in prompts.items()
        }

    def get(self, name: Optional[str]) -> PromptTemplate:
        """
        Look up a template by name.

        Args:
            name: Template name, or None for the passthrough template

        Raises:
            UnknownPrompt: If the name is not configured
        """
        if name is None:
            return PASSTHROUGH
        try:
            return self._templates[name]
        except KeyError:
            raise UnknownPrompt(name, list(self._templates)) from None

    def render(self, name: Optional[str], input_text: str) -> str:
        return self.get(name).render(input_text)

    def names(self) -> list[str]:
        return sorted(self._templates)

    def __contains__(self, name: str) -> bool:
        return name in self._templates
