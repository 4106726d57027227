"""Model handles, descriptors and references.

A :class:`ModelHandle` is the object callers receive from the registry. The
registry only stores handles and compares them by identity; invoking one is
delegated to the provider adapter that built it.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional

if TYPE_CHECKING:
    from .providers import ProviderAdapter


class ModelReference(NamedTuple):
    """Symbolic (provider, model) reference supplied by callers."""

    provider: str
    model: str


@dataclass(frozen=True)
class ModelDescriptor:
    """A model entry from a seed table or a live provider listing.

    ``name`` is the catalog key; ``api_name`` is what gets sent to the
    provider and defaults to ``name``. Capability flags left as None fall
    back to the catalog defaults at registration time.
    """

    name: str
    display_name: Optional[str] = None
    api_name: Optional[str] = None
    tool_call_unsupported: Optional[bool] = None
    image_input_unsupported: Optional[bool] = None

    @property
    def request_name(self) -> str:
        return self.api_name or self.name


class ModelHandle:
    """Callable handle bound to one provider model.

    Handles hash and compare by identity, which lets the catalog keep a weak
    reverse index from handle to catalog key.
    """

    def __init__(self, provider: "ProviderAdapter", api_name: str) -> None:
        """Initialize a handle.

        Args:
            provider: Adapter that built the handle and serves requests
            api_name: Model identifier sent to the provider
        """
        self._provider = provider
        self.api_name = api_name

    @property
    def provider(self) -> str:
        """Key of the provider that serves this handle."""
        return self._provider.key

    def __call__(self, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        """Send one chat request and return the decoded response body.

        Args:
            messages: Chat messages as ``{"role": ..., "content": ...}`` dicts
            **params: Extra request parameters passed through to the provider

        Returns:
            Decoded JSON response

        Raises:
            NetworkError: If the request fails or returns a non-success status
        """
        return self._provider.complete(self.api_name, messages, **params)

    def __repr__(self) -> str:
        return f"ModelHandle(provider={self.provider!r}, api_name={self.api_name!r})"
