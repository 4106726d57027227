"""Core registry functionality.

This module provides the ModelRegistry class, which owns the model catalog,
the provider directory and the refresh coordinator, and resolves symbolic
model references to callable handles.

Typical usage:

    from llm_model_registry import ModelRegistry, ModelReference

    registry = ModelRegistry()
    handle = registry.get_model(ModelReference("openai", "gpt-4.1"))

A registry is built once at startup and shared by reference with every
consumer; construction seeds the catalog, so do it before handing the
instance to concurrent callers.
"""

import time
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from .catalog import ModelCatalog, ProviderSummary
from .config import RegistryConfig
from .directory import ProviderDirectory
from .errors import FallbackModelUnavailableError
from .handles import ModelHandle, ModelReference
from .logging import LogEvent, log_debug, log_error, log_warning
from .refresh import RefreshCoordinator, RefreshResult
from .seed import SeedLoader

Reference = Union[ModelReference, Mapping[str, Any], Tuple[str, str]]


def _coerce_reference(reference: Optional[Reference]) -> Optional[ModelReference]:
    """Normalize the accepted reference shapes, or return None if unusable."""
    if reference is None:
        return None
    if isinstance(reference, Mapping):
        provider, model = reference.get("provider"), reference.get("model")
    elif isinstance(reference, tuple) and len(reference) == 2:
        provider, model = reference
    else:
        return None
    if not isinstance(provider, str) or not isinstance(model, str) or not provider or not model:
        return None
    return ModelReference(provider, model)


class ModelRegistry:
    """Registry of callable model handles across providers."""

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        directory: Optional[ProviderDirectory] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize and seed a new registry instance.

        Args:
            config: Configuration for this registry instance. If None, default
                   configuration is used.
            directory: Provider directory to use. If None, one adapter per
                       built-in provider is created.
            clock: Monotonic time source for the refresh throttle
        """
        self.config = config or RegistryConfig()
        self.catalog = ModelCatalog()
        self.directory = directory or ProviderDirectory(self.config)
        self.refresher = RefreshCoordinator(self.catalog, self.directory, self.config, clock=clock)
        SeedLoader(self.catalog, self.directory, self.config).load()

    def get_model(self, reference: Optional[Reference] = None) -> ModelHandle:
        """Resolve a model reference to a handle.

        Args:
            reference: ``ModelReference``, ``{"provider": ..., "model": ...}``
                       mapping or ``(provider, model)`` tuple. If None, the
                       fallback model is returned.

        Returns:
            The catalogued handle when present; otherwise a handle built by
            the provider (and catalogued for next time); otherwise the
            fallback handle

        Raises:
            FallbackModelUnavailableError: If the fallback is needed but
                                           cannot be produced
        """
        ref = _coerce_reference(reference)
        if ref is None:
            if reference is not None:
                log_warning(LogEvent.MODEL_RESOLUTION, "Ignoring malformed model reference", reference=repr(reference))
            return self.fallback_model()

        handle = self.catalog.get(ref.provider, ref.model)
        if handle is not None:
            return handle

        handle = self.directory.factory(ref.provider, ref.model)
        if handle is not None:
            self.catalog.register(ref.provider, ref.model, handle)
            log_debug(
                LogEvent.MODEL_RESOLUTION,
                f"Built uncatalogued model {ref.provider}/{ref.model}",
                provider=ref.provider,
                model=ref.model,
            )
            return handle

        log_debug(
            LogEvent.MODEL_RESOLUTION,
            f"Cannot resolve {ref.provider}/{ref.model}; using fallback",
            provider=ref.provider,
            model=ref.model,
        )
        return self.fallback_model()

    def fallback_model(self) -> ModelHandle:
        """Return the last-resort handle, building and cataloguing it if needed.

        Raises:
            FallbackModelUnavailableError: If the fallback provider cannot
                                           build the fallback model
        """
        provider, model = self.config.fallback_provider, self.config.fallback_model
        handle = self.catalog.get(provider, model)
        if handle is not None:
            return handle
        handle = self.directory.factory(provider, model)
        if handle is not None:
            self.catalog.register(provider, model, handle)
            return handle
        log_error(LogEvent.MODEL_RESOLUTION, "Fallback model is not available", provider=provider, model=model)
        raise FallbackModelUnavailableError(
            f"Fallback model '{provider}/{model}' is not available",
            provider=provider,
            model=model,
        )

    def is_tool_call_unsupported(self, handle: ModelHandle) -> bool:
        """Return whether a handle is known not to support tool calls.

        Handles the registry does not know about are assumed capable.
        """
        return self.catalog.is_tool_call_unsupported(handle)

    def register_model(
        self,
        provider: str,
        name: str,
        display_name: Optional[str] = None,
        api_name: Optional[str] = None,
        tool_call_unsupported: Optional[bool] = None,
        image_input_unsupported: Optional[bool] = None,
    ) -> bool:
        """Build a handle via the provider directory and catalogue it.

        Returns:
            False if the provider cannot build the model, True otherwise
        """
        handle = self.directory.factory(provider, api_name or name)
        return self.catalog.register(
            provider,
            name,
            handle,
            display_name=display_name,
            tool_call_unsupported=tool_call_unsupported,
            image_input_unsupported=image_input_unsupported,
        )

    def refresh(self, force: bool = False) -> RefreshResult:
        """Refresh the catalog from live provider listings.

        See :meth:`RefreshCoordinator.refresh`.
        """
        return self.refresher.refresh(force=force)

    def check_provider_api_key(self, provider: str) -> bool:
        return self.directory.has_credential(provider)

    def list_providers(self) -> List[str]:
        """List every provider known to the directory or present in the catalog."""
        return sorted(set(self.directory.keys()) | set(self.catalog.providers()), key=lambda p: (p.casefold(), p))

    def list_summary(self) -> List[ProviderSummary]:
        """Summarize the catalog, sorted by provider then display label."""
        return self.catalog.list_summary(self.directory.has_credential)

    def models_info(self, refresh: bool = True) -> List[ProviderSummary]:
        """Summarize the catalog with credentialed providers listed first.

        Args:
            refresh: Run a non-forced (throttled) refresh first

        Returns:
            Provider summaries; order within each credential group is the
            :meth:`list_summary` order
        """
        if refresh:
            self.refresh()
        return sorted(self.list_summary(), key=lambda summary: not summary.has_api_key)
