"""Tests for registry error types."""

from llm_model_registry import (
    ConfigurationError,
    FallbackModelUnavailableError,
    InvalidConfigFormatError,
    ModelNotSupportedError,
    ModelRegistryError,
    NetworkError,
    ProviderFetchError,
)


def test_hierarchy() -> None:
    """All registry errors share a common base."""
    for error_cls in (
        ConfigurationError,
        InvalidConfigFormatError,
        ModelNotSupportedError,
        FallbackModelUnavailableError,
        NetworkError,
        ProviderFetchError,
    ):
        assert issubclass(error_cls, ModelRegistryError)
    assert issubclass(InvalidConfigFormatError, ConfigurationError)
    assert issubclass(ProviderFetchError, NetworkError)


def test_invalid_config_format_error() -> None:
    error = InvalidConfigFormatError("bad payload", path="/tmp/providers.yml", expected_type="dict")

    assert str(error) == "bad payload"
    assert error.message == "bad payload"
    assert error.path == "/tmp/providers.yml"
    assert error.expected_type == "dict"


def test_model_not_supported_error() -> None:
    error = ModelNotSupportedError("no name", provider="openai", model="")

    assert str(error) == "no name"
    assert error.provider == "openai"
    assert error.model == ""


def test_fallback_model_unavailable_error() -> None:
    error = FallbackModelUnavailableError("missing", provider="openai", model="gpt-4.1")

    assert (error.provider, error.model) == ("openai", "gpt-4.1")


def test_provider_fetch_error() -> None:
    error = ProviderFetchError("HTTP 429", provider="groq", url="https://api.groq.com/openai/v1/models", status_code=429)

    assert str(error) == "HTTP 429"
    assert error.provider == "groq"
    assert error.url == "https://api.groq.com/openai/v1/models"
    assert error.status_code == 429
