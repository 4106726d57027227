#!/usr/bin/env python3
"""Example of basic registry usage."""

from llm_model_registry import ModelReference, ModelRegistry, RegistryConfig
from llm_model_registry.logging import configure_logging


def print_resolution(registry, reference):
    """Print what a reference resolves to.

    Args:
        registry: Registry to resolve against
        reference: Model reference to look up
    """
    handle = registry.get_model(reference)
    key = registry.catalog.key_for(handle)

    print(f"Requested: {reference.provider}/{reference.model}")
    print(f"  Resolved: {key[0]}/{key[1]}" if key else f"  Resolved: {handle!r}")
    print(f"  Tool calls unsupported: {registry.is_tool_call_unsupported(handle)}")
    print()


def main():
    """Run the example."""
    configure_logging("INFO")
    registry = ModelRegistry(RegistryConfig())

    for reference in [
        ModelReference("openai", "gpt-4.1"),
        ModelReference("ollama", "gemma3:1b"),
        ModelReference("groq", "llama-3.3-70b-versatile"),
        ModelReference("nowhere", "unknown-model"),
    ]:
        print_resolution(registry, reference)

    # Pulls live listings for every provider with a key; throttled afterwards
    result = registry.refresh()
    print(f"Refresh: {result.status.value} ({result.message})")
    if result.failed_providers:
        print(f"  Failed: {', '.join(result.failed_providers)}")
    print()

    for summary in registry.models_info(refresh=False):
        key_note = "" if summary.has_api_key else " (no API key)"
        print(f"{summary.provider}{key_note}: {len(summary.models)} models")
        for model in summary.models[:5]:
            print(f"  - {model.label}")


if __name__ == "__main__":
    main()
