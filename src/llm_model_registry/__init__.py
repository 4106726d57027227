"""Registry of callable language-model handles across providers.

This package keeps an in-memory catalog of (provider, model) handles,
refreshes it from live provider listings under a time-to-live throttle,
tracks per-model capability metadata, and resolves symbolic model
references to handles with a fallback model as the last resort.
"""

# Version of the package
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

try:
    __version__ = _version("llm-model-registry")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "0.0.0"

# Import main components for easier access
from .catalog import ModelCatalog, ModelMetadata, ModelSummary, ProviderSummary
from .config import RegistryConfig
from .directory import ProviderDirectory
from .errors import (
    ConfigurationError,
    FallbackModelUnavailableError,
    InvalidConfigFormatError,
    ModelNotSupportedError,
    ModelRegistryError,
    NetworkError,
    ProviderFetchError,
)
from .handles import ModelDescriptor, ModelHandle, ModelReference
from .providers import ProviderAdapter
from .refresh import RefreshCoordinator, RefreshResult, RefreshStatus
from .registry import ModelRegistry

# Define public API
__all__ = [
    # Core registry
    "ModelRegistry",
    "RegistryConfig",
    "ModelReference",
    "ModelHandle",
    "ModelDescriptor",
    # Components
    "ModelCatalog",
    "ModelMetadata",
    "ModelSummary",
    "ProviderSummary",
    "ProviderDirectory",
    "ProviderAdapter",
    "RefreshCoordinator",
    "RefreshResult",
    "RefreshStatus",
    # Errors
    "ModelRegistryError",
    "ConfigurationError",
    "InvalidConfigFormatError",
    "ModelNotSupportedError",
    "FallbackModelUnavailableError",
    "NetworkError",
    "ProviderFetchError",
]
