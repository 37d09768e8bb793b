"""
Constants and configuration defaults for aika.
"""
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "aika"
APP_VERSION: Final[str] = "0.3.0"
APP_DESCRIPTION: Final[str] = "Send local text through a prompt template to an AI provider"

CONFIG_DIR: Final[Path] = Path.home() / ".config" / "aika"
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.toml"
CONFIG_ENV_VAR: Final[str] = "AIKA_CONFIG"

INPUT_MARKER: Final[str] = "{input}"
FILE_SEPARATOR: Final[str] = "\n"
COMMAND_TIMEOUT: Final[int] = 60

SLASH_PREFIX: Final[str] = "/"
REPL_PROMPT: Final[str] = "aika> "

DEFAULT_PROVIDER: Final[str] = "anthropic"
DEFAULT_MAX_TOKENS: Final[int] = 4096
DEFAULT_TEMPERATURE: Final[float] = 0.0
REQUEST_TIMEOUT: Final[float] = 120.0

PROVIDERS: Final[dict] = {
    "anthropic": {
        "name": "Anthropic",
        "base_url": "https://api.anthropic.com/v1",
        "env_key": "ANTHROPIC_API_KEY",
        "credential": "anthropic_api_key",
        "default_model": "claude-3-5-sonnet-latest",
        "aliases": ["claude"],
    },
    "openai": {
        "name": "OpenAI",
        "base_url": "https://api.openai.com/v1",
        "env_key": "OPENAI_API_KEY",
        "credential": "openai_api_key",
        "default_model": "gpt-4o",
        "aliases": ["gpt"],
    },
    "mistral": {
        "name": "Mistral",
        "base_url": "https://api.mistral.ai/v1",
        "env_key": "MISTRAL_API_KEY",
        "credential": "mistral_api_key",
        "default_model": "mistral-large-latest",
        "aliases": [],
    },
}

DEFAULT_INPUTS: Final[dict] = {
    "git-diff": "git diff",
    "git-diff-cached": "git diff --cached",
}

DEFAULT_PROMPTS: Final[dict] = {
    "commit-message": (
        "Generate a concise and descriptive git commit message for the "
        "following changes:\n\n```\n{input}\n```"
    ),
    "review": (
        "Review the following changes. Point out bugs, risky edits and "
        "missing tests, most important first:\n\n```\n{input}\n```"
    ),
    "explain": "Explain what the following does in plain terms:\n\n{input}",
}

HELP_TEXT: Final[str] = """
Available Commands:
  /help          - Show this help message
  /clear         - Clear conversation history
  /history       - Show conversation history
  /models        - List available models
  /quit          - Exit the REPL (also: exit, quit, Ctrl+D)

Anything else is sent to the provider as a prompt.
"""
