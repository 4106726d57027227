"""Tests for registry configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from llm_model_registry import RegistryConfig
from llm_model_registry.config import (
    COMPATIBLE_PROVIDERS_FILENAME,
    DEFAULT_REFRESH_INTERVAL,
    get_compatible_providers_path,
    get_user_config_dir,
    has_valid_key,
)


@pytest.mark.parametrize(
    "key,expected",
    [(None, False), ("", False), ("****", False), ("sk-123", True), ("*****", True)],
)
def test_has_valid_key(key, expected) -> None:
    assert has_valid_key(key) is expected


def test_defaults() -> None:
    config = RegistryConfig(env={})

    assert config.refresh_interval == DEFAULT_REFRESH_INTERVAL == 300.0
    assert config.request_timeout == 10.0
    assert config.max_workers is None
    assert (config.fallback_provider, config.fallback_model) == ("openai", "gpt-4.1")
    assert config.seed_static_models is True


def test_environment_defaults_to_os_environ() -> None:
    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-env"}):
        assert RegistryConfig().get("OPENAI_API_KEY") == "sk-env"


def test_get_treats_empty_as_missing() -> None:
    config = RegistryConfig(env={"GROQ_BASE_URL": ""})
    assert config.get("GROQ_BASE_URL", "https://default") == "https://default"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"refresh_interval": -1},
        {"request_timeout": 0},
        {"max_workers": 0},
        {"fallback_provider": ""},
        {"fallback_model": ""},
    ],
)
def test_invalid_values(kwargs) -> None:
    with pytest.raises(ValueError):
        RegistryConfig(env={}, **kwargs)


def test_zero_interval_is_allowed() -> None:
    assert RegistryConfig(env={}, refresh_interval=0).refresh_interval == 0


class TestCompatibleProvidersPath:
    """Tests for locating the compatible-provider file."""

    def test_default_path_in_user_config_dir(self) -> None:
        path = get_compatible_providers_path({})
        assert path == get_user_config_dir() / COMPATIBLE_PROVIDERS_FILENAME

    def test_user_config_dir_uses_platformdirs(self, tmp_path: Path) -> None:
        with patch("llm_model_registry.config.platformdirs.user_config_dir", return_value=str(tmp_path)) as mock_dir:
            assert get_user_config_dir() == tmp_path
        mock_dir.assert_called_once_with("llm-model-registry")

    def test_environment_override(self, tmp_path: Path) -> None:
        target = tmp_path / "providers.yml"
        path = get_compatible_providers_path({"LMR_COMPATIBLE_PROVIDERS_PATH": str(target)})
        assert path == target
