"""Configuration for the model registry.

Provider credentials and endpoints are read from environment variables at
call time. Compatible-provider descriptors may additionally be supplied from
a YAML/JSON file whose default location follows the XDG Base Directory
Specification.
"""

import os
from pathlib import Path
from typing import Any, List, Mapping, Optional

import platformdirs

# Application name used for directory paths
APP_NAME = "llm-model-registry"

# Provider credential environment variables
ENV_OPENAI_API_KEY = "OPENAI_API_KEY"
ENV_GOOGLE_API_KEY = "GOOGLE_GENERATIVE_AI_API_KEY"
ENV_ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"
ENV_XAI_API_KEY = "XAI_API_KEY"
ENV_GROQ_API_KEY = "GROQ_API_KEY"
ENV_OPENROUTER_API_KEY = "OPENROUTER_API_KEY"

# Provider endpoint environment variables
ENV_OLLAMA_BASE_URL = "OLLAMA_BASE_URL"
ENV_GROQ_BASE_URL = "GROQ_BASE_URL"
ENV_ANTHROPIC_API_VERSION = "ANTHROPIC_API_VERSION"

# Compatible provider configuration
ENV_COMPATIBLE_DATA = "OPENAI_COMPATIBLE_DATA"
ENV_COMPATIBLE_PATH = "LMR_COMPATIBLE_PROVIDERS_PATH"
COMPATIBLE_PROVIDERS_FILENAME = "compatible_providers.yml"

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/api"
DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_ANTHROPIC_API_VERSION = "2023-06-01"

DEFAULT_REFRESH_INTERVAL = 5 * 60.0
DEFAULT_REQUEST_TIMEOUT = 10.0

# Placeholder some deployments use for masked keys
MASKED_KEY = "****"


def has_valid_key(key: Optional[str]) -> bool:
    """Return whether a credential value is usable.

    Args:
        key: Raw credential value, possibly None

    Returns:
        True if the key is non-empty and not the masked placeholder
    """
    return bool(key) and key != MASKED_KEY


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_compatible_providers_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the path to the compatible-provider descriptor file.

    Args:
        env: Environment mapping to consult (defaults to ``os.environ``)

    Returns:
        Path from LMR_COMPATIBLE_PROVIDERS_PATH if set, otherwise the
        default file in the user config directory
    """
    env = os.environ if env is None else env
    override = env.get(ENV_COMPATIBLE_PATH)
    if override:
        return Path(override).expanduser()
    return get_user_config_dir() / COMPATIBLE_PROVIDERS_FILENAME


class RegistryConfig:
    """Configuration for the model registry."""

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_workers: Optional[int] = None,
        fallback_provider: str = "openai",
        fallback_model: str = "gpt-4.1",
        compatible_providers: Optional[List[Any]] = None,
        compatible_providers_path: Optional[str] = None,
        seed_static_models: bool = True,
    ):
        """Initialize registry configuration.

        Args:
            env: Mapping credentials and endpoints are read from. If None,
                 ``os.environ`` is used (read live on every lookup).
            refresh_interval: Minimum seconds between non-forced refreshes.
            request_timeout: Timeout in seconds for each provider request.
            max_workers: Thread pool size for concurrent provider fetches.
                         If None, one worker per provider.
            fallback_provider: Provider of the last-resort model.
            fallback_model: Name of the last-resort model.
            compatible_providers: Already-parsed compatible-provider
                                  descriptors. Takes precedence over the
                                  environment and file sources.
            compatible_providers_path: Custom path to a compatible-provider
                                       descriptor file.
            seed_static_models: Whether to register the built-in seed table.
        """
        self.env: Mapping[str, str] = os.environ if env is None else env

        if refresh_interval < 0:
            raise ValueError("refresh_interval must not be negative")
        if request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if not fallback_provider or not fallback_model:
            raise ValueError("fallback_provider and fallback_model must be non-empty")

        self.refresh_interval = refresh_interval
        self.request_timeout = request_timeout
        self.max_workers = max_workers
        self.fallback_provider = fallback_provider
        self.fallback_model = fallback_model
        self.compatible_providers = compatible_providers
        self.compatible_providers_path = compatible_providers_path
        self.seed_static_models = seed_static_models

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Read an environment value from the configured mapping."""
        value = self.env.get(name)
        return value if value else default
