"""Shared fixtures for the registry test suite."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

import pytest

from llm_model_registry import ModelDescriptor, ModelRegistry, ProviderDirectory, RegistryConfig
from llm_model_registry.providers import ProviderAdapter


class FakeAdapter(ProviderAdapter):
    """In-memory adapter with a scripted model listing.

    ``gate`` blocks listing calls until it is set, which lets tests hold a
    refresh in flight.
    """

    def __init__(
        self,
        config: RegistryConfig,
        key: str,
        models: Optional[Iterable[Union[str, ModelDescriptor]]] = None,
        error: Optional[Exception] = None,
        credential: bool = True,
        gate: Optional[threading.Event] = None,
    ) -> None:
        super().__init__(config)
        self.key = key
        self.models = list(models or [])
        self.error = error
        self.credential = credential
        self.gate = gate
        self.calls = 0
        self.started = threading.Event()
        self._calls_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return f"https://{self.key}.invalid/v1"

    def has_credential(self) -> bool:
        return self.credential

    def _list_models(self) -> List[ModelDescriptor]:
        with self._calls_lock:
            self.calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return [m if isinstance(m, ModelDescriptor) else ModelDescriptor(m) for m in self.models]

    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        return {"provider": self.key, "model": api_name, "messages": messages, **params}


@pytest.fixture
def config(tmp_path: Path) -> RegistryConfig:
    """Configuration isolated from the process environment and user files."""
    return RegistryConfig(
        env={},
        compatible_providers_path=str(tmp_path / "missing.yml"),
        seed_static_models=False,
    )


@pytest.fixture
def make_adapter(config: RegistryConfig) -> Callable[..., FakeAdapter]:
    """Factory for fake adapters bound to the isolated configuration."""

    def _make(key: str, models: Optional[Iterable[Union[str, ModelDescriptor]]] = None, **kwargs: Any) -> FakeAdapter:
        return FakeAdapter(config, key, models=models, **kwargs)

    return _make


@pytest.fixture
def make_registry(config: RegistryConfig) -> Callable[..., ModelRegistry]:
    """Factory for registries backed by fake adapters.

    An ``openai`` adapter is added unless one is supplied, so the fallback
    model can always be built.
    """

    def _make(*adapters: ProviderAdapter, clock: Optional[Callable[[], float]] = None) -> ModelRegistry:
        adapters_list = list(adapters)
        if not any(a.key == "openai" for a in adapters_list):
            adapters_list.insert(0, FakeAdapter(config, "openai"))
        directory = ProviderDirectory(config, adapters=adapters_list)
        if clock is None:
            return ModelRegistry(config, directory=directory)
        return ModelRegistry(config, directory=directory, clock=clock)

    return _make


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Drop stream handlers the CLI attaches so later tests do not write to closed streams."""
    package_logger = logging.getLogger("llm_model_registry")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)
