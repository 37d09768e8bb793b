"""
Error types for aika.

Every failure the pipeline can report derives from AikaError so the CLI can
print it as a single message and pick an exit code.
"""
from typing import Optional


class AikaError(Exception):
    """Base class for all errors surfaced to the user."""


class ConfigError(AikaError):
    """Raised when the configuration file is missing required shape or cannot be parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.path = path
        self.line = line
        self.column = column

        full_message = message
        if path:
            full_message = f"{path}: {full_message}"
        if line is not None and column is not None:
            full_message = f"{full_message} (line {line}, column {column})"
        elif line is not None:
            full_message = f"{full_message} (line {line})"

        super().__init__(full_message)


class InputUnavailable(AikaError):
    """Raised when an input source cannot be turned into text."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


class UnknownInput(InputUnavailable):
    """Raised when a named input is not present in the configuration."""

    def __init__(self, name: str, available: Optional[list[str]] = None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown input: '{name}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message, source=name)


class UnknownPrompt(AikaError):
    """Raised when a prompt template name is not configured."""

    def __init__(self, name: str, available: Optional[list[str]] = None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown prompt: '{name}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class UnknownProvider(AikaError):
    """Raised when a provider name is not registered."""

    def __init__(self, name: str, available: Optional[list[str]] = None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Provider '{name}' not found"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class AuthError(AikaError):
    """Raised when a credential is missing or rejected by the provider."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class NetworkError(AikaError):
    """Raised when the provider could not be reached."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} request failed: {message}")


class ProviderError(AikaError):
    """Raised when the provider answers with a non-2xx status or an unreadable body."""

    def __init__(self, provider: str, status_code: Optional[int], body: str):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"{provider} API error: {body}"
        else:
            message = f"{provider} API error ({status_code}): {body}"
        super().__init__(message)
