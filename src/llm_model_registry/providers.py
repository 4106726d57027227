"""Provider adapters.

Each adapter knows how to build handles for one upstream provider, whether
the provider's minimum credential is present, how to list the provider's
live models and how to send a chat request. New providers are added by
subclassing :class:`ProviderAdapter` and listing the class in
:data:`STATIC_PROVIDERS`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set, Tuple, Type

import requests

from . import config as cfg
from .config import RegistryConfig, has_valid_key
from .errors import ModelNotSupportedError, NetworkError, ProviderFetchError
from .handles import ModelDescriptor, ModelHandle
from .logging import LogEvent, log_debug

# Upper bound on listing pages followed for paginated providers
MAX_LISTING_PAGES = 20


class ProviderAdapter(ABC):
    """Base class for provider adapters."""

    key: str = ""
    key_env: Optional[str] = None

    # Image-input flag applied to models found by a live listing. None
    # leaves the catalog's provider allow-list default in place.
    listed_image_input_unsupported: Optional[bool] = None

    def __init__(self, config: RegistryConfig) -> None:
        self.config = config

    @property
    def api_key(self) -> Optional[str]:
        """Current credential, read from the configured environment."""
        if self.key_env is None:
            return None
        return self.config.get(self.key_env)

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL of the provider's API, without a trailing slash."""

    def has_credential(self) -> bool:
        """Return whether the provider's minimum credential is present."""
        return has_valid_key(self.api_key)

    def build_handle(self, model_name: str) -> ModelHandle:
        """Build a callable handle for a raw model name.

        Args:
            model_name: Identifier sent to the provider

        Returns:
            A new handle

        Raises:
            ModelNotSupportedError: If the model name is empty
        """
        if not model_name or not model_name.strip():
            raise ModelNotSupportedError(
                f"Provider '{self.key}' cannot build a handle without a model name",
                provider=self.key,
                model=model_name,
            )
        return ModelHandle(self, model_name)

    def fetch_live_models(self) -> List[ModelDescriptor]:
        """List the models the provider currently serves.

        Returns an empty list without issuing a request when the credential
        is missing.

        Raises:
            ProviderFetchError: On network failure, non-success status or a
                                malformed payload
        """
        if not self.has_credential():
            return []
        return self._list_models()

    @abstractmethod
    def _list_models(self) -> List[ModelDescriptor]:
        """Fetch and parse the provider's model listing."""

    @abstractmethod
    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        """Send one non-streaming chat request."""

    def _headers(self) -> Dict[str, str]:
        return {}

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Issue an uncached GET and decode the JSON body.

        Raises:
            ProviderFetchError: If the request fails or the body is not a JSON object
        """
        headers = {**self._headers(), "Cache-Control": "no-cache"}
        log_debug(LogEvent.PROVIDER_FETCH, f"Fetching model listing for {self.key}", provider=self.key, url=url)
        try:
            response = requests.get(url, headers=headers, params=params, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            raise ProviderFetchError(
                f"Failed to load {self.key} models: {e}",
                provider=self.key,
                url=url,
            ) from e
        try:
            if not response.ok:
                raise ProviderFetchError(
                    f"Failed to load {self.key} models: HTTP {response.status_code}",
                    provider=self.key,
                    url=url,
                    status_code=response.status_code,
                )
            try:
                payload = response.json()
            except ValueError as e:
                raise ProviderFetchError(
                    f"Failed to load {self.key} models: response is not JSON",
                    provider=self.key,
                    url=url,
                    status_code=response.status_code,
                ) from e
        finally:
            # Ensure response is closed to prevent resource leaks
            response.close()

        if not isinstance(payload, dict):
            raise ProviderFetchError(
                f"Failed to load {self.key} models: expected a JSON object",
                provider=self.key,
                url=url,
            )
        return payload

    def _post_json(self, url: str, body: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a JSON body and decode the JSON response.

        Raises:
            NetworkError: If the request fails or returns a non-success status
        """
        try:
            response = requests.post(
                url,
                json=body,
                headers=self._headers(),
                params=params,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"Request to {self.key} failed: {e}", url=url) from e
        try:
            if not response.ok:
                raise NetworkError(f"Request to {self.key} failed: HTTP {response.status_code}", url=url)
            try:
                return response.json()
            except ValueError as e:
                raise NetworkError(f"Response from {self.key} is not JSON", url=url) from e
        finally:
            response.close()

    def _require_list(self, payload: Dict[str, Any], field: str, url: str) -> List[Any]:
        items = payload.get(field)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ProviderFetchError(
                f"Failed to load {self.key} models: '{field}' is not a list",
                provider=self.key,
                url=url,
            )
        return items


def _dedupe(descriptors: List[ModelDescriptor]) -> List[ModelDescriptor]:
    seen: Set[str] = set()
    unique = []
    for descriptor in descriptors:
        if descriptor.name in seen:
            continue
        seen.add(descriptor.name)
        unique.append(descriptor)
    return unique


def _split_system(messages: List[Dict[str, Any]]) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    system_parts = [str(m.get("content", "")) for m in messages if m.get("role") == "system"]
    rest = [m for m in messages if m.get("role") != "system"]
    return ("\n\n".join(system_parts) if system_parts else None), rest


class OpenAICompatibleAdapter(ProviderAdapter):
    """Adapter for providers speaking the OpenAI ``/models`` and chat API."""

    default_base_url: str = ""
    base_url_env: Optional[str] = None
    # Listing field holding a human-readable name, if the provider has one
    display_name_field: Optional[str] = None

    @property
    def base_url(self) -> str:
        url = self.config.get(self.base_url_env) if self.base_url_env else None
        return (url or self.default_base_url).rstrip("/")

    def _headers(self) -> Dict[str, str]:
        key = self.api_key
        return {"Authorization": f"Bearer {key}"} if key else {}

    def _list_models(self) -> List[ModelDescriptor]:
        url = f"{self.base_url}/models"
        payload = self._get_json(url)
        descriptors = []
        for item in self._require_list(payload, "data", url):
            if not isinstance(item, dict):
                continue
            model_id = item.get("id")
            if not model_id:
                continue
            display = item.get(self.display_name_field) if self.display_name_field else None
            descriptors.append(
                ModelDescriptor(
                    name=model_id,
                    display_name=display or model_id,
                    image_input_unsupported=self.listed_image_input_unsupported,
                )
            )
        return _dedupe(descriptors)

    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        body = {"model": api_name, "messages": messages, **params}
        return self._post_json(f"{self.base_url}/chat/completions", body)


class OpenAIAdapter(OpenAICompatibleAdapter):
    key = "openai"
    key_env = cfg.ENV_OPENAI_API_KEY
    default_base_url = "https://api.openai.com/v1"


class XAIAdapter(OpenAICompatibleAdapter):
    key = "xai"
    key_env = cfg.ENV_XAI_API_KEY
    default_base_url = "https://api.x.ai/v1"
    display_name_field = "name"
    listed_image_input_unsupported = False


class GroqAdapter(OpenAICompatibleAdapter):
    key = "groq"
    key_env = cfg.ENV_GROQ_API_KEY
    default_base_url = cfg.DEFAULT_GROQ_BASE_URL
    base_url_env = cfg.ENV_GROQ_BASE_URL
    listed_image_input_unsupported = False


class OpenRouterAdapter(OpenAICompatibleAdapter):
    key = "openRouter"
    key_env = cfg.ENV_OPENROUTER_API_KEY
    default_base_url = "https://openrouter.ai/api/v1"
    display_name_field = "name"
    listed_image_input_unsupported = False


class CompatibleProviderAdapter(OpenAICompatibleAdapter):
    """Adapter for a dynamically configured OpenAI-compatible provider."""

    def __init__(self, config: RegistryConfig, key: str, base_url: str, api_key: Optional[str]) -> None:
        super().__init__(config)
        self.key = key
        self.default_base_url = base_url
        self._api_key = api_key

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key


class GoogleAdapter(ProviderAdapter):
    key = "google"
    key_env = cfg.ENV_GOOGLE_API_KEY
    listed_image_input_unsupported = False

    @property
    def base_url(self) -> str:
        return "https://generativelanguage.googleapis.com/v1beta"

    def _list_models(self) -> List[ModelDescriptor]:
        url = f"{self.base_url}/models"
        params: Dict[str, Any] = {"key": self.api_key, "pageSize": 200}
        descriptors = []
        for _ in range(MAX_LISTING_PAGES):
            payload = self._get_json(url, params=params)
            for item in self._require_list(payload, "models", url):
                if not isinstance(item, dict):
                    continue
                raw = (item.get("name") or "").removeprefix("models/").strip()
                name = raw or item.get("displayName") or ""
                if not name:
                    continue
                descriptors.append(
                    ModelDescriptor(
                        name=name,
                        display_name=item.get("displayName") or name,
                        image_input_unsupported=self.listed_image_input_unsupported,
                    )
                )
            token = payload.get("nextPageToken")
            if not token:
                break
            params = {**params, "pageToken": token}
        return _dedupe(descriptors)

    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        system, rest = _split_system(messages)
        body: Dict[str, Any] = {
            "contents": [
                {
                    "role": "model" if m.get("role") == "assistant" else "user",
                    "parts": [{"text": str(m.get("content", ""))}],
                }
                for m in rest
            ],
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if params:
            body["generationConfig"] = params
        return self._post_json(
            f"{self.base_url}/models/{api_name}:generateContent",
            body,
            params={"key": self.api_key},
        )


class AnthropicAdapter(ProviderAdapter):
    key = "anthropic"
    key_env = cfg.ENV_ANTHROPIC_API_KEY
    listed_image_input_unsupported = False

    @property
    def base_url(self) -> str:
        return "https://api.anthropic.com/v1"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": self.config.get(cfg.ENV_ANTHROPIC_API_VERSION) or cfg.DEFAULT_ANTHROPIC_API_VERSION,
        }

    def _list_models(self) -> List[ModelDescriptor]:
        url = f"{self.base_url}/models"
        params: Dict[str, Any] = {"limit": 1000}
        descriptors = []
        for _ in range(MAX_LISTING_PAGES):
            payload = self._get_json(url, params=params)
            for item in self._require_list(payload, "data", url):
                if not isinstance(item, dict) or not item.get("id"):
                    continue
                descriptors.append(
                    ModelDescriptor(
                        name=item["id"],
                        display_name=item.get("display_name") or item["id"],
                        image_input_unsupported=self.listed_image_input_unsupported,
                    )
                )
            last_id = payload.get("last_id")
            if not payload.get("has_more") or not last_id:
                break
            params = {**params, "after_id": last_id}
        return _dedupe(descriptors)

    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        system, rest = _split_system(messages)
        body: Dict[str, Any] = {"model": api_name, "messages": rest, "max_tokens": 1024, **params}
        if system:
            body["system"] = system
        return self._post_json(f"{self.base_url}/messages", body)


class OllamaAdapter(ProviderAdapter):
    """Adapter for a local Ollama server. No credential is required."""

    key = "ollama"

    @property
    def base_url(self) -> str:
        return (self.config.get(cfg.ENV_OLLAMA_BASE_URL) or cfg.DEFAULT_OLLAMA_BASE_URL).rstrip("/")

    def has_credential(self) -> bool:
        return True

    def _list_models(self) -> List[ModelDescriptor]:
        url = f"{self.base_url}/tags"
        payload = self._get_json(url)
        descriptors = []
        for item in self._require_list(payload, "models", url):
            if not isinstance(item, dict):
                continue
            model_id = item.get("name") or item.get("model")
            if not model_id:
                continue
            descriptors.append(ModelDescriptor(name=model_id, display_name=model_id))
        return _dedupe(descriptors)

    def complete(self, api_name: str, messages: List[Dict[str, Any]], **params: Any) -> Dict[str, Any]:
        body = {"model": api_name, "messages": messages, "stream": False, **params}
        return self._post_json(f"{self.base_url}/chat", body)


# Fetch table: every provider here is queried on refresh, in no particular order
STATIC_PROVIDERS: Tuple[Type[ProviderAdapter], ...] = (
    OpenAIAdapter,
    GoogleAdapter,
    AnthropicAdapter,
    XAIAdapter,
    GroqAdapter,
    OpenRouterAdapter,
    OllamaAdapter,
)
