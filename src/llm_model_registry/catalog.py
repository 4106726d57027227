"""In-memory model catalog.

The catalog maps ``(provider, model)`` keys to handles and keeps a parallel
metadata record for every key. Both stores, plus a weak reverse index from
handle to key, are only touched while holding the catalog lock, so readers
never observe a provider halfway through a replacement.
"""

import threading
import weakref
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .handles import ModelDescriptor, ModelHandle
from .logging import LogEvent, log_debug

ModelKey = Tuple[str, str]

# Known (provider, model) pairs that cannot drive tool calls
TOOL_CALL_UNSUPPORTED_KEYS: FrozenSet[ModelKey] = frozenset(
    {
        ("openai", "o4-mini"),
        ("ollama", "gemma3:1b"),
        ("ollama", "gemma3:4b"),
        ("ollama", "gemma3:12b"),
        ("openRouter", "openai/gpt-oss-20b:free"),
        ("openRouter", "qwen/qwen3-8b:free"),
        ("openRouter", "qwen/qwen3-14b:free"),
        ("openRouter", "deepseek/deepseek-r1-0528:free"),
        ("openRouter", "google/gemini-2.0-flash-exp:free"),
    }
)

# Providers whose models accept image input unless stated otherwise
IMAGE_INPUT_SUPPORTED_PROVIDERS: FrozenSet[str] = frozenset({"google", "xai", "openai", "anthropic"})


def default_tool_call_unsupported(provider: str, name: str) -> bool:
    return (provider, name) in TOOL_CALL_UNSUPPORTED_KEYS


def default_image_input_unsupported(provider: str) -> bool:
    return provider not in IMAGE_INPUT_SUPPORTED_PROVIDERS


@dataclass(frozen=True)
class ModelMetadata:
    """Capability metadata for one catalog entry."""

    display_name: Optional[str]
    tool_call_unsupported: bool
    image_input_unsupported: bool


@dataclass(frozen=True)
class ModelSummary:
    """Public view of one model.

    ``display_name`` is only set when it differs from ``name``.
    """

    name: str
    display_name: Optional[str]
    tool_call_unsupported: bool
    image_input_unsupported: bool

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["display_name"] is None:
            del data["display_name"]
        return data


@dataclass(frozen=True)
class ProviderSummary:
    """Public view of one provider and its catalogued models."""

    provider: str
    has_api_key: bool
    models: List[ModelSummary]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "has_api_key": self.has_api_key,
            "models": [m.to_dict() for m in self.models],
        }


class ModelCatalog:
    """Thread-safe store of model handles and their metadata."""

    def __init__(self) -> None:
        self._handles: Dict[str, Dict[str, ModelHandle]] = {}
        self._metadata: Dict[ModelKey, ModelMetadata] = {}
        self._reverse: "weakref.WeakKeyDictionary[ModelHandle, ModelKey]" = weakref.WeakKeyDictionary()
        self._lock = threading.RLock()

    def register(
        self,
        provider: str,
        name: str,
        handle: Optional[ModelHandle],
        display_name: Optional[str] = None,
        tool_call_unsupported: Optional[bool] = None,
        image_input_unsupported: Optional[bool] = None,
    ) -> bool:
        """Insert or overwrite one entry.

        Metadata is replaced wholesale. Capability flags left as None take
        the deny-list and provider allow-list defaults.

        Args:
            provider: Provider key
            name: Model name (catalog key)
            handle: Handle to store. If None, nothing is changed.
            display_name: Optional human-readable name
            tool_call_unsupported: Explicit tool-call flag
            image_input_unsupported: Explicit image-input flag

        Returns:
            True if the entry was stored
        """
        if handle is None:
            return False
        metadata = ModelMetadata(
            display_name=display_name,
            tool_call_unsupported=(
                default_tool_call_unsupported(provider, name)
                if tool_call_unsupported is None
                else tool_call_unsupported
            ),
            image_input_unsupported=(
                default_image_input_unsupported(provider)
                if image_input_unsupported is None
                else image_input_unsupported
            ),
        )
        with self._lock:
            self._store(provider, name, handle, metadata)
        return True

    def _store(self, provider: str, name: str, handle: ModelHandle, metadata: ModelMetadata) -> None:
        key = (provider, name)
        models = self._handles.setdefault(provider, {})
        previous = models.get(name)
        if previous is not None and previous is not handle:
            self._forget(previous, key)
        models[name] = handle
        self._metadata[key] = metadata
        self._reverse[handle] = key

    def _forget(self, handle: ModelHandle, key: ModelKey) -> None:
        # The same handle may have been re-registered under another key
        if self._reverse.get(handle) == key:
            del self._reverse[handle]

    def clear_provider(self, provider: str) -> None:
        """Remove every entry and metadata record under a provider."""
        with self._lock:
            models = self._handles.pop(provider, {})
            for name, handle in models.items():
                self._forget(handle, (provider, name))
            for key in [k for k in self._metadata if k[0] == provider]:
                del self._metadata[key]

    def replace_provider(self, provider: str, entries: Iterable[Tuple[ModelDescriptor, Optional[ModelHandle]]]) -> int:
        """Clear a provider and register a new set of entries atomically.

        Readers waiting on the catalog lock see either the old or the new
        entries, never the cleared provider.

        Args:
            provider: Provider key
            entries: Descriptor and handle pairs. Pairs without a handle are
                     skipped.

        Returns:
            Number of entries registered
        """
        entries = list(entries)
        with self._lock:
            self.clear_provider(provider)
            count = 0
            for descriptor, handle in entries:
                if self.register(
                    provider,
                    descriptor.name,
                    handle,
                    display_name=descriptor.display_name,
                    tool_call_unsupported=descriptor.tool_call_unsupported,
                    image_input_unsupported=descriptor.image_input_unsupported,
                ):
                    count += 1
        log_debug(LogEvent.MODEL_CATALOG, f"Replaced {provider} entries", provider=provider, count=count)
        return count

    def get(self, provider: str, name: str) -> Optional[ModelHandle]:
        with self._lock:
            return self._handles.get(provider, {}).get(name)

    def metadata(self, provider: str, name: str) -> Optional[ModelMetadata]:
        with self._lock:
            return self._metadata.get((provider, name))

    def key_for(self, handle: ModelHandle) -> Optional[ModelKey]:
        """Look up the key a handle was registered under."""
        with self._lock:
            return self._reverse.get(handle)

    def is_tool_call_unsupported(self, handle: ModelHandle) -> bool:
        """Return whether a handle is known not to support tool calls.

        Unknown handles and keys without metadata are assumed capable.
        """
        with self._lock:
            key = self._reverse.get(handle)
            if key is None:
                return False
            metadata = self._metadata.get(key)
            return metadata.tool_call_unsupported if metadata else False

    def providers(self) -> List[str]:
        with self._lock:
            return [p for p, models in self._handles.items() if models]

    def models(self, provider: str) -> List[str]:
        with self._lock:
            return list(self._handles.get(provider, {}))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        with self._lock:
            return key[1] in self._handles.get(key[0], {})

    def __len__(self) -> int:
        with self._lock:
            return sum(len(models) for models in self._handles.values())

    def list_summary(self, credential_check: Callable[[str], bool]) -> List[ProviderSummary]:
        """Project the catalog into sorted provider summaries.

        Args:
            credential_check: Returns whether a provider has a usable credential

        Returns:
            One summary per provider with at least one entry, providers
            sorted by identifier and models by display label, both
            case-insensitively
        """
        with self._lock:
            snapshot = {
                provider: [(name, self._metadata.get((provider, name))) for name in models]
                for provider, models in self._handles.items()
                if models
            }

        summaries = []
        for provider in sorted(snapshot, key=lambda p: (p.casefold(), p)):
            entries = []
            for name, meta in snapshot[provider]:
                display = meta.display_name if meta else None
                entries.append(
                    ModelSummary(
                        name=name,
                        display_name=display if display and display != name else None,
                        tool_call_unsupported=meta.tool_call_unsupported if meta else False,
                        image_input_unsupported=(
                            meta.image_input_unsupported if meta else default_image_input_unsupported(provider)
                        ),
                    )
                )
            entries.sort(key=lambda m: (m.label.casefold(), m.label))
            summaries.append(ProviderSummary(provider=provider, has_api_key=credential_check(provider), models=entries))
        return summaries
