"""
Provider registry for managing LLM providers in aika.
Handles registration, alias lookup, and instantiation of providers.
"""
import logging
from typing import Any, Dict, Optional, Type

import httpx

from ..config import AppConfig, canonical_provider_name
from ..constants import PROVIDERS
from ..errors import UnknownProvider
from .base import LLMProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry for LLM providers.

    Maps provider names and aliases to provider classes and builds instances
    with the credential and default model taken from the configuration.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            config: Loaded configuration (defaults if not provided)
            transport: httpx transport handed to every provider instance
        """
        self._config = config or AppConfig()
        self._transport = transport
        self._providers: Dict[str, Type[LLMProvider]] = {}
        self._aliases: Dict[str, str] = {}
        self._register_default_providers()

    def _register_default_providers(self) -> None:
        """Register built-in providers."""
        from .anthropic import AnthropicProvider
        from .mistral import MistralProvider
        from .openai import OpenAIProvider

        self.register("anthropic", AnthropicProvider)
        self.register("openai", OpenAIProvider)
        self.register("mistral", MistralProvider)

    def register(self, name: str, provider_class: Type[LLMProvider]) -> None:
        """
        Register a provider class.

        Aliases listed for the name in PROVIDERS are registered with it.

        Args:
            name: Provider name/identifier
            provider_class: Provider class
        """
        name = name.lower()
        self._providers[name] = provider_class
        for alias in PROVIDERS.get(name, {}).get("aliases", []):
            self._aliases[alias] = name

    def resolve_name(self, name: str) -> str:
        """
        Resolve a name or alias to a registered provider name.

        Raises:
            UnknownProvider: If neither the name nor an alias is registered
        """
        name = name.strip().lower()
        if name in self._providers:
            return name
        if name in self._aliases:
            return self._aliases[name]
        canonical = canonical_provider_name(name)
        if canonical in self._providers:
            return canonical
        raise UnknownProvider(name, self.list_providers())

    def get(self, name: str, model: Optional[str] = None, **kwargs: Any) -> LLMProvider:
        """
        Build a provider instance.

        Args:
            name: Provider name or alias
            model: Model override (falls back to the configured default)
            **kwargs: Additional arguments for provider constructor

        Returns:
            Provider instance

        Raises:
            UnknownProvider: If the provider is not registered
        """
        name = self.resolve_name(name)
        provider_class = self._providers[name]

        kwargs.setdefault("api_key", self._config.get_api_key(name))
        kwargs.setdefault("base_url", self._config.get_base_url(name))
        kwargs["model"] = model or self._config.get_model(name)
        if self._transport is not None:
            kwargs.setdefault("transport", self._transport)

        provider = provider_class(**kwargs)
        logger.debug(f"Using provider {provider.name} with model {provider.model}")
        return provider

    def default_provider_name(self) -> str:
        """Name of the provider selected by the configuration."""
        return self.resolve_name(self._config.default_provider)

    def list_providers(self) -> list[str]:
        """
        List registered provider names.

        Returns:
            List of provider names
        """
        return list(self._providers.keys())

    def is_registered(self, name: str) -> bool:
        """
        Check if a provider name or alias is registered.

        Args:
            name: Provider name

        Returns:
            True if registered
        """
        try:
            self.resolve_name(name)
        except UnknownProvider:
            return False
        return True
