"""
Query pipeline for aika.

Resolve input, render the prompt template, call the provider, write the
response. Each step runs once, in that order, and the first error stops the
run.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .config import AppConfig
from .errors import InputUnavailable
from .io_handlers import InputResolver, parse_input_source
from .llm import CompletionRequest, LLMProvider, LLMResponse, ProviderRegistry
from .prompts import PromptLibrary
from .rich_ui import OutputWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOptions:
    """Options of a single query invocation."""
    input: Optional[str] = None
    prompt: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    stream: bool = False


class Pipeline:
    """Wires the resolver, prompt library, provider registry and writer together."""

    def __init__(
        self,
        config: AppConfig,
        registry: Optional[ProviderRegistry] = None,
        resolver: Optional[InputResolver] = None,
        writer: Optional[OutputWriter] = None,
    ) -> None:
        self._config = config
        self._registry = registry or ProviderRegistry(config)
        self._resolver = resolver or InputResolver(config.inputs)
        self._prompts = PromptLibrary(config.prompts)
        self._writer = writer or OutputWriter()

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def writer(self) -> OutputWriter:
        return self._writer

    def provider(self, name: Optional[str] = None, model: Optional[str] = None) -> LLMProvider:
        """Build the selected provider, falling back to the configured default."""
        return self._registry.get(name or self._registry.default_provider_name(), model=model)

    def render_prompt(self, options: QueryOptions) -> str:
        """
        Resolve the input and substitute it into the selected template.

        The template is looked up before the input is resolved, so an unknown
        prompt fails without running any command.

        Raises:
            UnknownPrompt: If the prompt name is not configured
            InputUnavailable: If the input cannot be read, or neither input nor prompt was given
        """
        template = self._prompts.get(options.prompt)

        if options.input is None:
            if options.prompt is None:
                raise InputUnavailable("Nothing to send: give --input, --prompt or both")
            input_text = ""
        else:
            input_text = self._resolver.resolve(parse_input_source(options.input))

        logger.debug(f"Input is {len(input_text)} chars, template '{template.name or '{input}'}'")
        return template.render(input_text)

    async def run_query(self, options: QueryOptions) -> str:
        """
        Run one query end to end and write the response.

        Returns:
            The full response text
        """
        prompt = self.render_prompt(options)
        provider = self.provider(options.provider, options.model)
        request = CompletionRequest(prompt=prompt, model=provider.model, stream=options.stream)

        if request.stream:
            return await self._writer.write_stream(provider.stream(request))

        response = await self.complete(provider, request)
        self._writer.write(response.content)
        return response.content

    async def complete(self, provider: LLMProvider, request: CompletionRequest) -> LLMResponse:
        response = await provider.complete(request)
        logger.debug(
            f"{response.provider} answered in {response.latency_ms:.0f} ms, "
            f"{response.input_tokens} input / {response.output_tokens} output tokens"
        )
        return response

    async def list_models(self, provider_name: Optional[str] = None) -> dict[str, list[str]]:
        """
        List models for one provider, or for every registered provider.

        When listing every provider, the ones without a credential are skipped.

        Returns:
            Mapping of provider display name to model IDs
        """
        names = [provider_name] if provider_name else self._registry.list_providers()

        listed: dict[str, list[str]] = {}
        for name in names:
            provider = self._registry.get(name)
            if provider_name is None and not provider.api_key:
                logger.warning(f"Skipping {provider.name}: no API key configured")
                continue
            models = await provider.list_models()
            listed[provider.name] = models
            self._writer.write_models(provider.name, models)
        return listed
