"""
Base classes for LLM providers in aika.
Defines the abstract interface that all providers must implement.
"""
import json
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, AsyncIterator, Iterator, Optional

import httpx

from ..constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, REQUEST_TIMEOUT
from ..errors import AuthError, NetworkError, ProviderError

logger = logging.getLogger(__name__)


@dataclass
class StreamChunk:
    """Represents a chunk of streamed response."""
    content: str
    finish_reason: Optional[str] = None
    model: Optional[str] = None


@dataclass
class LLMResponse:
    """Represents a complete LLM response."""
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    finish_reason: str = "stop"
    latency_ms: float = 0.0
    raw_response: Optional[dict] = None

    def __post_init__(self) -> None:
        if self.total_tokens == 0:
            self.total_tokens = self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class CompletionRequest:
    """A single prompt to send to a provider."""
    prompt: str
    model: Optional[str] = None
    stream: bool = False

    def to_messages(self) -> list[dict]:
        return [{"role": "user", "content": self.prompt}]


@dataclass
class ProviderConfig:
    """Configuration for an LLM provider."""
    name: str
    base_url: str
    api_key: Optional[str] = None
    default_model: str = ""
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    timeout: float = REQUEST_TIMEOUT


def json_object(value: Any) -> dict:
    """Return value if it decoded to a JSON object, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def token_count(usage: dict, key: str) -> int:
    value = usage.get(key)
    return value if isinstance(value, int) else 0


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All provider implementations must inherit from this class and implement
    chat, chat_stream and list_models. Every HTTP failure leaves this layer
    as an AuthError, NetworkError or ProviderError.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            config: Provider configuration
            transport: Optional httpx transport (used by tests)
        """
        self._config = config or self._default_config()
        self._api_key = self._config.api_key
        self._model = self._config.default_model
        self._transport = transport
        self._headers: dict[str, str] = {}

    @abstractmethod
    def _default_config(self) -> ProviderConfig:
        """Endpoint, display name and default model when nothing is configured."""

    @property
    def name(self) -> str:
        """Display name used in messages, e.g. 'Anthropic'."""
        return self._config.name

    @property
    def model(self) -> str:
        return self._model

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Send a CompletionRequest and wait for the full response."""
        return await self.chat(request.to_messages(), model=request.model)

    def stream(self, request: CompletionRequest) -> AsyncIterator[StreamChunk]:
        """Send a CompletionRequest and iterate over the response chunks."""
        return self.chat_stream(request.to_messages(), model=request.model)

    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """
        POST one completion and wait for the whole answer.

        Args:
            messages: Chat messages; aika always sends a single user message
            model: Model to use instead of the provider's current one
            temperature: Sampling temperature, where the provider accepts one
            max_tokens: Output token limit (DEFAULT_MAX_TOKENS if not given)
            **kwargs: Extra fields merged into the request body

        Raises:
            AuthError, NetworkError, ProviderError
        """

    @abstractmethod
    def chat_stream(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any
    ) -> AsyncGenerator[StreamChunk, None]:
        """
        POST one streaming completion.

        Takes the same arguments as chat. The request is only sent once
        iteration starts, and iteration ends when the provider signals the
        end of the stream.

        Yields:
            StreamChunk for each piece of text, in arrival order
        """

    @abstractmethod
    async def list_models(self) -> list[str]:
        """GET the provider's model list and return the model IDs."""

    def _build_headers(self) -> dict[str, str]:
        """Build request headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._require_api_key()}",
        }
        headers.update(self._headers)
        return headers

    def _require_api_key(self) -> str:
        if not self._api_key:
            raise AuthError(self.name, "no API key configured")
        return self._api_key

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            transport=self._transport,
            timeout=self._config.timeout,
        )

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        """Turn httpx failures into NetworkError."""
        try:
            yield
        except httpx.TimeoutException as e:
            raise NetworkError(self.name, f"timed out ({e.__class__.__name__})") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(self.name, str(e) or e.__class__.__name__) from e

    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        await response.aread()
        body = response.text
        if response.status_code in (401, 403):
            raise AuthError(self.name, f"credential rejected ({response.status_code}): {body}")
        raise ProviderError(self.name, response.status_code, body)

    def _first_choice(self, data: dict) -> dict:
        """
        Get the first entry of a Chat Completions 'choices' list.

        Raises:
            ProviderError: If there is no choice object to read
        """
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise ProviderError(self.name, None, f"response has no choices: {data}")
        return choices[0]

    def _stream_choice(self, data: dict) -> dict:
        """First choice of a streamed chunk, or an empty dict when it carries none."""
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            return choices[0]
        return {}

    def _model_ids(self, data: dict) -> list[str]:
        models = data.get("data")
        if not isinstance(models, list):
            raise ProviderError(self.name, None, f"unexpected model list: {data}")
        return [
            model["id"]
            for model in models
            if isinstance(model, dict) and isinstance(model.get("id"), str)
        ]

    def _decode(self, response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, response.status_code, f"invalid JSON in response: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(self.name, response.status_code, "unexpected response shape")
        return data

    async def _get_json(self, path: str) -> dict:
        headers = self._build_headers()
        with self._translate_errors():
            async with self._client() as client:
                response = await client.get(path, headers=headers)
                await self._raise_for_status(response)
        return self._decode(response)

    async def _post_json(self, path: str, payload: dict) -> dict:
        headers = self._build_headers()
        logger.debug(f"POST {self._config.base_url}{path} model={payload.get('model')}")
        with self._translate_errors():
            async with self._client() as client:
                response = await client.post(path, headers=headers, json=payload)
                await self._raise_for_status(response)
        return self._decode(response)

    @asynccontextmanager
    async def _stream_lines(self, path: str, payload: dict) -> AsyncIterator[AsyncIterator[str]]:
        """Open a streaming POST and provide an iterator over its lines."""
        headers = self._build_headers()
        logger.debug(f"POST {self._config.base_url}{path} model={payload.get('model')} (stream)")
        with self._translate_errors():
            async with self._client() as client:
                async with client.stream("POST", path, headers=headers, json=payload) as response:
                    await self._raise_for_status(response)
                    yield self._guarded_lines(response)

    async def _guarded_lines(self, response: httpx.Response) -> AsyncGenerator[str, None]:
        with self._translate_errors():
            async for line in response.aiter_lines():
                yield line

    async def _iter_sse_data(self, lines: AsyncIterator[str]) -> AsyncGenerator[dict, None]:
        """
        Decode the data lines of an OpenAI-style event stream.

        Stops at 'data: [DONE]' or at the end of the body. Lines that are not
        valid JSON, or that decode to something other than an object, are
        logged and skipped.
        """
        async for line in lines:
            if not line or not line.startswith("data:"):
                continue

            data_str = line[5:].strip()
            if data_str == "[DONE]":
                break

            try:
                data = json.loads(data_str)
            except json.JSONDecodeError as e:
                logger.debug(f"Failed to parse {self.name} stream line: {e}")
                continue

            if not isinstance(data, dict):
                logger.debug(f"Skipping {self.name} stream event that is not an object: {data_str}")
                continue

            yield data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self._model})"
