"""
Anthropic (Claude) LLM provider implementation for aika.
"""
import json
import time
from typing import Any, AsyncGenerator, Optional

import httpx

from ..constants import PROVIDERS
from ..errors import ProviderError
from .base import LLMProvider, LLMResponse, ProviderConfig, StreamChunk, json_object, token_count

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(LLMProvider):
    """
    Anthropic Messages API provider.

    Uses x-api-key authentication and the versioned Messages endpoint.
    Streaming responses are server-sent events typed by an 'event:' line.
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
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
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

        self._headers["anthropic-version"] = ANTHROPIC_VERSION

    def _default_config(self) -> ProviderConfig:
        info = PROVIDERS["anthropic"]
        return ProviderConfig(
            name=info["name"],
            base_url=info["base_url"],
            default_model=info["default_model"],
        )

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._require_api_key(),
        }
        headers.update(self._headers)
        return headers

    def _payload(
        self,
        messages: list[dict],
        model: Optional[str],
        temperature: Optional[float],
        max_tokens: Optional[int],
        **kwargs: Any
    ) -> dict:
        return {
            "model": model or self._model,
            "messages": messages,
            "max_tokens": max_tokens or self._config.max_tokens,
            "temperature": temperature if temperature is not None else self._config.temperature,
            **kwargs
        }

    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a message request to Anthropic."""
        payload = self._payload(messages, model, temperature, max_tokens, **kwargs)

        start_time = time.perf_counter()
        data = await self._post_json("/messages", payload)
        latency_ms = (time.perf_counter() - start_time) * 1000

        content_items = data.get("content")
        if not isinstance(content_items, list):
            raise ProviderError(self.name, None, f"response has no content: {data}")

        content = "".join(
            item["text"]
            for item in content_items
            if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str)
        )
        usage = json_object(data.get("usage"))

        return LLMResponse(
            content=content,
            model=data.get("model", payload["model"]),
            provider=self.name,
            input_tokens=token_count(usage, "input_tokens"),
            output_tokens=token_count(usage, "output_tokens"),
            finish_reason=data.get("stop_reason") or "stop",
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
        """Send a streaming message request to Anthropic."""
        payload = self._payload(messages, model, temperature, max_tokens, stream=True, **kwargs)

        async with self._stream_lines("/messages", payload) as lines:
            async for event in self._iter_sse_data(lines):
                event_type = event.get("type")
                if event_type == "message_stop":
                    break

                if event_type == "error":
                    error = json_object(event.get("error"))
                    raise ProviderError(self.name, None, error.get("message") or json.dumps(error))

                if event_type == "content_block_delta":
                    delta = json_object(event.get("delta"))
                    text = delta.get("text")
                    if delta.get("type") == "text_delta" and isinstance(text, str) and text:
                        yield StreamChunk(content=text, model=payload["model"])
                elif event_type == "message_delta":
                    stop_reason = json_object(event.get("delta")).get("stop_reason")
                    if stop_reason:
                        yield StreamChunk(content="", finish_reason=stop_reason, model=payload["model"])

    async def list_models(self) -> list[str]:
        """List available models from the Anthropic API."""
        data = await self._get_json("/models")
        return self._model_ids(data)
