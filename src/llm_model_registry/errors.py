"""Error types for the LLM model registry.

This module defines the error types raised by provider adapters, the
configuration loader and the model resolver.
"""

from typing import Optional


class ModelRegistryError(Exception):
    """Base class for all registry-related errors.

    This is the parent class for all registry-specific exceptions.
    """

    pass


class ConfigurationError(ModelRegistryError):
    """Base class for configuration-related errors.

    This is raised for errors related to configuration loading, parsing,
    or validation.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the configuration file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class InvalidConfigFormatError(ConfigurationError):
    """Raised when a compatible-provider payload has an invalid format.

    Examples:
        >>> try:
        ...     parse_compatible_providers('{"provider": 1}')
        ... except InvalidConfigFormatError as e:
        ...     print(f"Invalid config format: {e}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "list",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the configuration file
            expected_type: Expected type of the configuration
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class ModelNotSupportedError(ModelRegistryError):
    """Raised when a provider cannot build a handle for a model.

    Examples:
        >>> try:
        ...     adapter.build_handle("")
        ... except ModelNotSupportedError as e:
        ...     print(f"Model {e.model} is not supported by {e.provider}")
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        """Initialize model not supported error.

        Args:
            message: Error message
            provider: Provider the model was requested from
            model: The unsupported model name
        """
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model

    def __str__(self) -> str:
        """Return string representation of the error.

        Returns:
            Error message
        """
        return self.message


class FallbackModelUnavailableError(ModelRegistryError):
    """Raised when the fallback model can be neither found nor built.

    A correctly configured process can always produce the fallback handle,
    so this error signals a misconfiguration rather than a transient fault.
    """

    def __init__(self, message: str, provider: str, model: str) -> None:
        """Initialize fallback error.

        Args:
            message: Error message
            provider: Provider of the fallback model
            model: Name of the fallback model
        """
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model


class NetworkError(ModelRegistryError):
    """Raised when a network operation fails.

    Examples:
        >>> try:
        ...     handle([{"role": "user", "content": "hi"}])
        ... except NetworkError as e:
        ...     print(f"Network error: {e}")
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        """Initialize network error.

        Args:
            message: Error message
            url: Optional URL that was being accessed
        """
        super().__init__(message)
        self.message = message
        self.url = url


class ProviderFetchError(NetworkError):
    """Raised when a provider's model listing cannot be loaded.

    The refresh coordinator catches this per provider and treats the
    provider as having returned zero models.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Initialize provider fetch error.

        Args:
            message: Error message
            provider: Provider whose listing failed
            url: Optional URL that was being accessed
            status_code: HTTP status code, if a response was received
        """
        super().__init__(message, url)
        self.provider = provider
        self.status_code = status_code
