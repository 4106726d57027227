"""Startup population of the model catalog.

Two sources are loaded once, before the registry is shared:

* a hand-curated seed table of well-known models per built-in provider;
* OpenAI-compatible providers described in external configuration, each
  with its own base URL, API key and model list.

Compatible-provider configuration is best effort: any parse or validation
failure is logged and results in zero compatible providers.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Set

import yaml

from .catalog import ModelCatalog
from .config import ENV_COMPATIBLE_DATA, RegistryConfig, get_compatible_providers_path, has_valid_key
from .directory import ProviderDirectory
from .errors import ConfigurationError, InvalidConfigFormatError, ModelNotSupportedError
from .handles import ModelDescriptor, ModelHandle
from .logging import LogEvent, log_info, log_warning
from .providers import STATIC_PROVIDERS, CompatibleProviderAdapter

STATIC_MODEL_SEED: Dict[str, List[ModelDescriptor]] = {
    "openai": [
        ModelDescriptor("gpt-4.1"),
        ModelDescriptor("gpt-4.1-mini"),
        ModelDescriptor("o4-mini"),
        ModelDescriptor("o3"),
        ModelDescriptor("gpt-5"),
        ModelDescriptor("gpt-5-mini"),
        ModelDescriptor("gpt-5-nano"),
    ],
    "google": [
        ModelDescriptor("gemini-2.5-flash-lite"),
        ModelDescriptor("gemini-2.5-flash"),
        ModelDescriptor("gemini-2.5-pro"),
    ],
    "anthropic": [
        ModelDescriptor("claude-sonnet-4-5", display_name="sonnet-4.5"),
        ModelDescriptor("claude-opus-4-1", display_name="opus-4.1"),
    ],
    "xai": [
        ModelDescriptor("grok-4-fast-non-reasoning", display_name="grok-4-fast"),
        ModelDescriptor("grok-4"),
        ModelDescriptor("grok-3"),
        ModelDescriptor("grok-3-mini"),
    ],
    "ollama": [
        ModelDescriptor("gemma3:1b"),
        ModelDescriptor("gemma3:4b"),
        ModelDescriptor("gemma3:12b"),
    ],
    "groq": [
        ModelDescriptor("moonshotai/kimi-k2-instruct", "kimi-k2-instruct", image_input_unsupported=False),
        ModelDescriptor(
            "meta-llama/llama-4-scout-17b-16e-instruct", "llama-4-scout-17b", image_input_unsupported=False
        ),
        ModelDescriptor("openai/gpt-oss-20b", "gpt-oss-20b", image_input_unsupported=False),
        ModelDescriptor("openai/gpt-oss-120b", "gpt-oss-120b", image_input_unsupported=False),
        ModelDescriptor("qwen/qwen3-32b", "qwen3-32b", image_input_unsupported=False),
    ],
    "openRouter": [
        ModelDescriptor("openai/gpt-oss-20b:free", "gpt-oss-20b:free", image_input_unsupported=False),
        ModelDescriptor("qwen/qwen3-8b:free", "qwen3-8b:free", image_input_unsupported=False),
        ModelDescriptor("qwen/qwen3-14b:free", "qwen3-14b:free", image_input_unsupported=False),
        ModelDescriptor("qwen/qwen3-coder:free", "qwen3-coder:free", image_input_unsupported=False),
        ModelDescriptor("deepseek/deepseek-r1-0528:free", "deepseek-r1:free", image_input_unsupported=False),
        ModelDescriptor("deepseek/deepseek-chat-v3-0324:free", "deepseek-v3:free", image_input_unsupported=False),
        ModelDescriptor(
            "google/gemini-2.0-flash-exp:free", "gemini-2.0-flash-exp:free", image_input_unsupported=False
        ),
    ],
}


@dataclass(frozen=True)
class CompatibleModelConfig:
    api_name: str
    ui_name: str
    supports_tools: bool = True


@dataclass(frozen=True)
class CompatibleProviderConfig:
    provider: str
    base_url: str
    api_key: Optional[str] = None
    models: List[CompatibleModelConfig] = field(default_factory=list)


class CompatibleModels(NamedTuple):
    """Handles built for compatible providers."""

    adapters: List[CompatibleProviderAdapter]
    models: Dict[str, Dict[str, ModelHandle]]
    unsupported: Set[ModelHandle]


def _pick(entry: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in entry:
            return entry[name]
    return None


def _require_str(value: Any, what: str, path: Optional[str], optional: bool = False) -> Optional[str]:
    if optional and (value is None or value == ""):
        return None
    if not isinstance(value, str) or not value.strip():
        raise InvalidConfigFormatError(f"{what} must be a non-empty string", path=path, expected_type="str")
    return value.strip()


def parse_compatible_providers(raw: Any, path: Optional[str] = None) -> List[CompatibleProviderConfig]:
    """Parse compatible-provider descriptors.

    Args:
        raw: YAML/JSON text, an already-decoded list, or None
        path: Source file, used in error messages

    Returns:
        Parsed descriptors; empty for None or blank input

    Raises:
        InvalidConfigFormatError: If the payload does not match the schema
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except ValueError:
            try:
                raw = yaml.safe_load(raw)
            except yaml.YAMLError as e:
                raise InvalidConfigFormatError(f"Could not parse compatible providers: {e}", path=path) from e
        if raw is None:
            return []
    if not isinstance(raw, list):
        raise InvalidConfigFormatError("Compatible providers must be a list", path=path)

    static_keys = {adapter_cls.key for adapter_cls in STATIC_PROVIDERS}
    providers: List[CompatibleProviderConfig] = []
    seen: Set[str] = set()
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InvalidConfigFormatError(f"Provider entry {index} must be a mapping", path=path, expected_type="dict")
        provider = _require_str(entry.get("provider"), f"Provider entry {index} 'provider'", path)
        if provider in static_keys:
            raise InvalidConfigFormatError(f"Provider '{provider}' conflicts with a built-in provider", path=path)
        if provider in seen:
            raise InvalidConfigFormatError(f"Provider '{provider}' is defined more than once", path=path)
        seen.add(provider)
        base_url = _require_str(_pick(entry, "baseUrl", "base_url"), f"Provider '{provider}' base URL", path)
        api_key = _require_str(_pick(entry, "apiKey", "api_key"), f"Provider '{provider}' API key", path, optional=True)

        raw_models = entry.get("models") or []
        if not isinstance(raw_models, list):
            raise InvalidConfigFormatError(f"Provider '{provider}' models must be a list", path=path)
        models = []
        for model_entry in raw_models:
            if not isinstance(model_entry, dict):
                raise InvalidConfigFormatError(
                    f"Provider '{provider}' model entries must be mappings", path=path, expected_type="dict"
                )
            api_name = _require_str(_pick(model_entry, "apiName", "api_name"), f"Provider '{provider}' apiName", path)
            ui_name = _pick(model_entry, "uiName", "ui_name") or api_name
            supports_tools = _pick(model_entry, "supportsTools", "supports_tools")
            if supports_tools is not None and not isinstance(supports_tools, bool):
                raise InvalidConfigFormatError(
                    f"Provider '{provider}' supportsTools must be a boolean", path=path, expected_type="bool"
                )
            models.append(
                CompatibleModelConfig(
                    api_name=api_name,
                    ui_name=str(ui_name),
                    supports_tools=True if supports_tools is None else supports_tools,
                )
            )
        providers.append(CompatibleProviderConfig(provider=provider, base_url=base_url, api_key=api_key, models=models))
    return providers


def load_compatible_providers(config: RegistryConfig) -> List[CompatibleProviderConfig]:
    """Load compatible-provider descriptors from the first available source.

    Sources, in order: ``config.compatible_providers``, the
    OPENAI_COMPATIBLE_DATA environment variable, then the descriptor file.
    Never raises; failures are logged and yield an empty list.
    """
    path: Optional[str] = None
    try:
        if config.compatible_providers is not None:
            return parse_compatible_providers(config.compatible_providers)
        env_payload = config.get(ENV_COMPATIBLE_DATA)
        if env_payload:
            return parse_compatible_providers(env_payload)
        file_path = Path(config.compatible_providers_path) if config.compatible_providers_path else None
        file_path = file_path or get_compatible_providers_path(config.env)
        if not file_path.exists():
            return []
        path = str(file_path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidConfigFormatError(f"Compatible providers file is not valid UTF-8: {e}", path=path) from e
        return parse_compatible_providers(content, path=path)
    except (ConfigurationError, OSError) as e:
        log_warning(
            LogEvent.SEED_LOAD,
            f"Ignoring compatible provider configuration: {e}",
            error=str(e),
            path=path,
        )
        return []


def build_compatible_models(config: RegistryConfig, providers: List[CompatibleProviderConfig]) -> CompatibleModels:
    """Build adapters and handles for compatible providers.

    Returns:
        The adapters, handles keyed by provider then UI name, and the set
        of handles whose models do not support tool calls
    """
    adapters: List[CompatibleProviderAdapter] = []
    models: Dict[str, Dict[str, ModelHandle]] = {}
    unsupported: Set[ModelHandle] = set()
    for provider in providers:
        adapter = CompatibleProviderAdapter(config, provider.provider, provider.base_url, provider.api_key)
        adapters.append(adapter)
        handles = models.setdefault(provider.provider, {})
        for model in provider.models:
            try:
                handle = adapter.build_handle(model.api_name)
            except ModelNotSupportedError as e:
                log_warning(LogEvent.SEED_LOAD, str(e), provider=provider.provider, model=model.api_name)
                continue
            handles[model.ui_name] = handle
            if not model.supports_tools:
                unsupported.add(handle)
    return CompatibleModels(adapters=adapters, models=models, unsupported=unsupported)


class SeedLoader:
    """Populates a catalog from the static seed table and compatible providers."""

    def __init__(self, catalog: ModelCatalog, directory: ProviderDirectory, config: RegistryConfig) -> None:
        self.catalog = catalog
        self.directory = directory
        self.config = config

    def load(self) -> int:
        """Run both seed steps.

        Returns:
            Total number of entries registered
        """
        count = self.load_static() if self.config.seed_static_models else 0
        count += self.load_compatible()
        log_info(LogEvent.SEED_LOAD, "Model catalog seeded", registered=count)
        return count

    def load_static(self) -> int:
        count = 0
        for provider, descriptors in STATIC_MODEL_SEED.items():
            for descriptor in descriptors:
                handle = self.directory.factory(provider, descriptor.request_name)
                if self.catalog.register(
                    provider,
                    descriptor.name,
                    handle,
                    display_name=descriptor.display_name,
                    tool_call_unsupported=descriptor.tool_call_unsupported,
                    image_input_unsupported=descriptor.image_input_unsupported,
                ):
                    count += 1
        return count

    def load_compatible(self) -> int:
        providers = load_compatible_providers(self.config)
        built = build_compatible_models(self.config, providers)

        for adapter in built.adapters:
            self.directory.add(adapter)
            self.directory.set_explicit_credential(adapter.key, has_valid_key(adapter.api_key))

        count = 0
        for provider, handles in built.models.items():
            for name, handle in handles.items():
                if self.catalog.register(
                    provider,
                    name,
                    handle,
                    display_name=name,
                    tool_call_unsupported=handle in built.unsupported,
                    image_input_unsupported=False,
                ):
                    count += 1
        if providers:
            log_info(
                LogEvent.SEED_LOAD,
                "Loaded compatible providers",
                providers=[p.provider for p in providers],
                models=count,
            )
        return count
