"""CLI commands package."""

# Import all command modules to make them available
from . import models, providers, refresh

__all__ = ["models", "providers", "refresh"]
