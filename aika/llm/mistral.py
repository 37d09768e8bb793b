"""
Mistral LLM provider implementation for aika.
"""
import time
from typing import Any, AsyncGenerator, Optional

import httpx

from ..constants import PROVIDERS
from .base import LLMProvider, LLMResponse, ProviderConfig, StreamChunk, json_object, token_count


class MistralProvider(LLMProvider):
    """
    Mistral AI chat completions provider.

    The API is OpenAI-compatible; the stream may end without a [DONE] marker.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize Mistral provider.

        Args:
            api_key: Mistral API key
            model: Default model to use
            base_url: API base URL override
            transport: Optional httpx transport
            **kwargs: Additional configuration
        """
        config = self._default_config()
        if api_key:
            config.api_key = api_key
        if model:
            config.default_model = model
        if base_url:
            config.base_url = base_url
        super().__init__(config, transport=transport)

    def _default_config(self) -> ProviderConfig:
        info = PROVIDERS["mistral"]
        return ProviderConfig(
            name=info["name"],
            base_url=info["base_url"],
            default_model=info["default_model"],
        )

    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat completion request to Mistral."""
        model = model or self._model
        temperature = temperature if temperature is not None else self._config.temperature
        max_tokens = max_tokens or self._config.max_tokens

        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
            **kwargs
        }

        start_time = time.perf_counter()
        data = await self._post_json("/chat/completions", payload)
        latency_ms = (time.perf_counter() - start_time) * 1000

        choice = self._first_choice(data)
        message = json_object(choice.get("message"))
        content = message.get("content")
        usage = json_object(data.get("usage"))

        return LLMResponse(
            content=content if isinstance(content, str) else "",
            model=data.get("model", model),
            provider=self.name,
            input_tokens=token_count(usage, "prompt_tokens"),
            output_tokens=token_count(usage, "completion_tokens"),
            finish_reason=choice.get("finish_reason") or "stop",
            latency_ms=latency_ms,
            raw_response=data
        )

    async def chat_stream(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any
    ) -> AsyncGenerator[StreamChunk, None]:
        """Send a streaming chat completion request to Mistral."""
        model = model or self._model
        temperature = temperature if temperature is not None else self._config.temperature
        max_tokens = max_tokens or self._config.max_tokens

        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": True,
            **kwargs
        }

        async with self._stream_lines("/chat/completions", payload) as lines:
            async for data in self._iter_sse_data(lines):
                choice = self._stream_choice(data)
                content = json_object(choice.get("delta")).get("content")
                if isinstance(content, str) and content:
                    yield StreamChunk(
                        content=content,
                        finish_reason=choice.get("finish_reason"),
                        model=data.get("model", model)
                    )

    async def list_models(self) -> list[str]:
        """List available models from the Mistral API."""
        data = await self._get_json("/models")
        return self._model_ids(data)
