"""LLM provider modules for aika."""
from .base import CompletionRequest, LLMProvider, LLMResponse, ProviderConfig, StreamChunk
from .provider_registry import ProviderRegistry
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .mistral import MistralProvider

__all__ = [
    'CompletionRequest', 'LLMProvider', 'LLMResponse', 'ProviderConfig', 'StreamChunk',
    'ProviderRegistry',
    'AnthropicProvider', 'OpenAIProvider', 'MistralProvider',
]
