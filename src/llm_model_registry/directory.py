"""Provider directory.

Maps provider keys to adapters and answers credential-presence checks.
Dynamically configured providers record their credential presence in an
explicit override map that is consulted before the adapters themselves.
"""

from typing import Dict, Iterable, List, Optional

from .config import RegistryConfig
from .errors import ModelNotSupportedError
from .handles import ModelHandle
from .logging import LogEvent, log_debug
from .providers import STATIC_PROVIDERS, ProviderAdapter


class ProviderDirectory:
    """Table of provider adapters keyed by provider identifier."""

    def __init__(self, config: RegistryConfig, adapters: Optional[Iterable[ProviderAdapter]] = None) -> None:
        """Initialize the directory.

        Args:
            config: Registry configuration passed to the built-in adapters
            adapters: Adapters forming the refresh fetch table. If None, one
                      adapter per built-in provider is created.
        """
        self.config = config
        self._adapters: Dict[str, ProviderAdapter] = {}
        self._explicit_credentials: Dict[str, bool] = {}
        self._fetch_table: List[str] = []

        if adapters is None:
            adapters = [adapter_cls(config) for adapter_cls in STATIC_PROVIDERS]
        for adapter in adapters:
            self.add(adapter, fetchable=True)

    def add(self, adapter: ProviderAdapter, fetchable: bool = False) -> None:
        """Add or replace an adapter.

        Args:
            adapter: Adapter to register under ``adapter.key``
            fetchable: Whether the adapter joins the refresh fetch table
        """
        self._adapters[adapter.key] = adapter
        if fetchable and adapter.key not in self._fetch_table:
            self._fetch_table.append(adapter.key)

    def get(self, provider: str) -> Optional[ProviderAdapter]:
        return self._adapters.get(provider)

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters

    def keys(self) -> List[str]:
        return list(self._adapters)

    def fetch_table(self) -> List[ProviderAdapter]:
        """Adapters queried on every refresh."""
        return [self._adapters[key] for key in self._fetch_table]

    def set_explicit_credential(self, provider: str, present: bool) -> None:
        """Record credential presence for a provider, overriding its adapter."""
        self._explicit_credentials[provider] = present

    def has_credential(self, provider: str) -> bool:
        """Return whether a provider's minimum credential is present.

        Providers with neither an explicit record nor an adapter are
        treated as credentialed.
        """
        if provider in self._explicit_credentials:
            return self._explicit_credentials[provider]
        adapter = self._adapters.get(provider)
        if adapter is not None:
            return adapter.has_credential()
        return True

    def factory(self, provider: str, model_name: str) -> Optional[ModelHandle]:
        """Build a handle for a raw model name.

        Returns:
            The new handle, or None if the provider is unknown or cannot
            build the model
        """
        adapter = self._adapters.get(provider)
        if adapter is None:
            return None
        try:
            return adapter.build_handle(model_name)
        except ModelNotSupportedError as e:
            log_debug(LogEvent.MODEL_RESOLUTION, str(e), provider=provider, model=model_name)
            return None
