"""
Configuration management for aika.
Handles loading the TOML configuration file and resolving credentials from environment variables.
"""
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILE,
    DEFAULT_INPUTS,
    DEFAULT_PROMPTS,
    DEFAULT_PROVIDER,
    PROVIDERS,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)

_LOCATION_PATTERN = re.compile(r"\(at line (\d+), column (\d+)\)")


def canonical_provider_name(name: str) -> str:
    """
    Map a provider name or alias to its registry name.

    Unknown names are returned lowercased so the registry can report them.
    """
    name = name.strip().lower()
    if name in PROVIDERS:
        return name
    for canonical, info in PROVIDERS.items():
        if name in info.get("aliases", []):
            return canonical
    return name


@dataclass(frozen=True)
class ProviderSettings:
    """Per-provider settings from a [providers.<name>] table."""
    model: Optional[str] = None
    base_url: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    credentials: dict[str, str] = field(default_factory=dict)
    providers: dict[str, ProviderSettings] = field(default_factory=dict)
    inputs: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_INPUTS))
    prompts: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PROMPTS))
    default_provider: str = DEFAULT_PROVIDER
    path: Optional[Path] = None

    def get_api_key(self, provider: str) -> Optional[str]:
        """
        Get the credential for a provider.

        The provider's environment variable takes precedence over the
        [credentials] table.

        Args:
            provider: Provider name or alias

        Returns:
            The API key or None if not configured anywhere
        """
        info = PROVIDERS.get(canonical_provider_name(provider))
        if info is None:
            return None

        env_value = os.environ.get(info["env_key"], "").strip()
        if env_value:
            return env_value
        return self.credentials.get(info["credential"]) or None

    def get_model(self, provider: str) -> Optional[str]:
        """Get the configured default model for a provider, if any."""
        settings = self.providers.get(canonical_provider_name(provider))
        return settings.model if settings else None

    def get_base_url(self, provider: str) -> Optional[str]:
        """Get a configured base URL override for a provider, if any."""
        settings = self.providers.get(canonical_provider_name(provider))
        return settings.base_url if settings else None


def default_config_path() -> Path:
    """Config path from AIKA_CONFIG, falling back to ~/.config/aika/config.toml."""
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_FILE


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """
    Load configuration from a TOML file.

    A missing file is not an error: the built-in defaults are returned.

    Args:
        path: Explicit config path (uses default_config_path() if None)

    Returns:
        The loaded AppConfig

    Raises:
        ConfigError: If the file cannot be read or has the wrong shape
    """
    config_path = Path(path).expanduser() if path else default_config_path()

    if not config_path.exists():
        logger.warning(f"Config file not found at {config_path}, using default configuration.")
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        line, column = _error_location(str(e))
        message = _LOCATION_PATTERN.sub("", str(e)).strip()
        raise ConfigError(f"Invalid TOML: {message}", str(config_path), line, column) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", str(config_path)) from e

    logger.debug(f"Loaded config from {config_path}")
    return parse_config(data, config_path)


def parse_config(data: dict[str, Any], path: Optional[Path] = None) -> AppConfig:
    """
    Build an AppConfig from decoded TOML data.

    User sections are merged over the defaults.

    Raises:
        ConfigError: If a section has the wrong shape
    """
    location = str(path) if path else None
    config = AppConfig(path=path)

    credentials = _table(data, "credentials", location)
    for key, value in credentials.items():
        if not isinstance(value, str):
            raise ConfigError(f"credentials.{key} must be a string", location)
        config.credentials[key] = value

    for name, section in _table(data, "providers", location).items():
        if not isinstance(section, dict):
            raise ConfigError(f"providers.{name} must be a table", location)
        model = section.get("model")
        base_url = section.get("base_url")
        if model is not None and not isinstance(model, str):
            raise ConfigError(f"providers.{name}.model must be a string", location)
        if base_url is not None and not isinstance(base_url, str):
            raise ConfigError(f"providers.{name}.base_url must be a string", location)
        config.providers[canonical_provider_name(name)] = ProviderSettings(model=model, base_url=base_url)

    for name, section in _table(data, "inputs", location).items():
        config.inputs[name] = _string_field(section, "command", f"inputs.{name}", location)

    for name, section in _table(data, "prompts", location).items():
        config.prompts[name] = _string_field(section, "prompt", f"prompts.{name}", location)

    default_provider = data.get("default_provider")
    if default_provider is not None:
        if not isinstance(default_provider, str):
            raise ConfigError("default_provider must be a string", location)
        config.default_provider = canonical_provider_name(default_provider)

    return config


def _table(data: dict[str, Any], key: str, location: Optional[str]) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a table", location)
    return value


def _string_field(section: Any, key: str, name: str, location: Optional[str]) -> str:
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a table", location)
    value = section.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"{name}.{key} must be a string", location)
    return value


def _error_location(message: str) -> tuple[Optional[int], Optional[int]]:
    match = _LOCATION_PATTERN.search(message)
    if match is None:
        return None, None
    return int(match.group(1)), int(match.group(2))

