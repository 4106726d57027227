"""Tests for throttled, single-flight catalog refresh."""

import logging
import threading
from typing import Callable, List
from unittest.mock import patch

import pytest

from llm_model_registry import ModelDescriptor, ModelRegistry, ProviderDirectory, ProviderFetchError, RefreshStatus


class TestThrottle:
    """Tests for the minimum interval between refreshes."""

    def test_first_refresh_runs(self, make_registry: Callable, make_adapter: Callable, clock) -> None:
        adapter = make_adapter("groq", ["qwen/qwen3-32b"])
        registry = make_registry(adapter, clock=clock)

        result = registry.refresh()

        assert result.status is RefreshStatus.REFRESHED
        assert adapter.calls == 1
        assert registry.refresher.last_refresh_at == clock.now

    def test_second_refresh_within_interval_is_throttled(
        self, make_registry: Callable, make_adapter: Callable, clock
    ) -> None:
        adapter = make_adapter("groq", ["qwen/qwen3-32b"])
        registry = make_registry(adapter, clock=clock)
        registry.refresh()
        clock.advance(299)

        result = registry.refresh()

        assert result.status is RefreshStatus.THROTTLED
        assert result.model_counts == {}
        assert adapter.calls == 1

    def test_refresh_after_interval(self, make_registry: Callable, make_adapter: Callable, clock) -> None:
        adapter = make_adapter("groq", ["qwen/qwen3-32b"])
        registry = make_registry(adapter, clock=clock)
        registry.refresh()
        clock.advance(300)

        assert registry.refresh().status is RefreshStatus.REFRESHED
        assert adapter.calls == 2

    def test_force_bypasses_throttle(self, make_registry: Callable, make_adapter: Callable, clock) -> None:
        adapter = make_adapter("groq", ["qwen/qwen3-32b"])
        registry = make_registry(adapter, clock=clock)
        registry.refresh()

        assert registry.refresh(force=True).status is RefreshStatus.REFRESHED
        assert adapter.calls == 2

    def test_round_with_only_failures_still_sets_timestamp(
        self, make_registry: Callable, make_adapter: Callable, clock
    ) -> None:
        adapter = make_adapter("groq", error=ProviderFetchError("boom", provider="groq"))
        registry = make_registry(adapter, clock=clock)

        registry.refresh()
        clock.advance(1)

        assert registry.refresh().status is RefreshStatus.THROTTLED
        assert adapter.calls == 1


class _JoinCounter(logging.Handler):
    """Signals once the expected number of callers have joined a refresh."""

    def __init__(self, expected: int) -> None:
        super().__init__(logging.DEBUG)
        self.expected = expected
        self.count = 0
        self.reached = threading.Event()

    def emit(self, record: logging.LogRecord) -> None:
        if record.getMessage() == "Joining in-flight refresh":
            self.count += 1
            if self.count >= self.expected:
                self.reached.set()


class TestSingleFlight:
    """Tests for concurrent refresh callers."""

    def _start(self, registry, results: List, force: bool = False) -> threading.Thread:
        thread = threading.Thread(target=lambda: results.append(registry.refresh(force=force)))
        thread.start()
        return thread

    def test_concurrent_callers_share_one_round(self, make_registry: Callable, make_adapter: Callable) -> None:
        """Callers arriving during a refresh wait for it instead of fetching again."""
        gate = threading.Event()
        adapter = make_adapter("groq", ["qwen/qwen3-32b"], gate=gate)
        registry = make_registry(adapter)
        results: List = []

        counter = _JoinCounter(expected=4)
        package_logger = logging.getLogger("llm_model_registry")
        previous_level = package_logger.level
        package_logger.addHandler(counter)
        package_logger.setLevel(logging.DEBUG)
        try:
            owner = self._start(registry, results)
            assert adapter.started.wait(timeout=5)
            assert registry.refresher.in_flight is True
            joiners = [self._start(registry, results) for _ in range(3)]
            forced = self._start(registry, results, force=True)
            assert counter.reached.wait(timeout=5)
            gate.set()
            for thread in [owner, *joiners, forced]:
                thread.join(timeout=5)
        finally:
            gate.set()
            package_logger.removeHandler(counter)
            package_logger.setLevel(previous_level)

        assert adapter.calls == 1
        statuses = sorted(r.status.value for r in results)
        assert statuses == ["joined"] * 4 + ["refreshed"]
        assert all(r.model_counts == {"openai": 0, "groq": 1} for r in results)
        assert registry.refresher.in_flight is False

    def test_round_error_clears_in_flight(self, make_registry: Callable, make_adapter: Callable) -> None:
        """An unexpected failure while applying a round does not wedge later refreshes."""
        registry = make_registry(make_adapter("groq", ["qwen/qwen3-32b"]))

        with patch.object(registry.catalog, "replace_provider", side_effect=RuntimeError("catalog broke")):
            with pytest.raises(RuntimeError):
                registry.refresh()

        assert registry.refresher.in_flight is False
        assert registry.refresher.last_refresh_at is None
        assert registry.refresh().status is RefreshStatus.REFRESHED


class TestRound:
    """Tests for how a round updates the catalog."""

    def test_models_replace_previous_entries(self, make_registry: Callable, make_adapter: Callable) -> None:
        adapter = make_adapter("groq", ["new-model"])
        registry = make_registry(adapter)
        registry.register_model("groq", "old-model", display_name="Old")

        result = registry.refresh()

        assert registry.catalog.models("groq") == ["new-model"]
        assert registry.catalog.metadata("groq", "old-model") is None
        assert result.updated_providers == ["groq"]

    def test_failed_provider_keeps_entries(self, make_registry: Callable, make_adapter: Callable) -> None:
        """A failing provider keeps its entries while others are replaced."""
        failing = make_adapter("anthropic", error=ProviderFetchError("HTTP 500", provider="anthropic"))
        working = make_adapter("groq", ["fresh"])
        registry = make_registry(failing, working)
        registry.register_model("anthropic", "claude-opus-4-1")
        registry.register_model("groq", "stale")

        result = registry.refresh()

        assert registry.catalog.models("anthropic") == ["claude-opus-4-1"]
        assert registry.catalog.models("groq") == ["fresh"]
        assert result.failed_providers == ["anthropic"]
        assert result.model_counts["anthropic"] == 0

    def test_unexpected_adapter_error_is_contained(self, make_registry: Callable, make_adapter: Callable) -> None:
        registry = make_registry(make_adapter("groq", error=KeyError("bad payload")))

        result = registry.refresh()

        assert result.status is RefreshStatus.REFRESHED
        assert result.failed_providers == ["groq"]

    def test_empty_listing_keeps_entries(self, make_registry: Callable, make_adapter: Callable) -> None:
        registry = make_registry(make_adapter("groq", []))
        registry.register_model("groq", "kept")

        registry.refresh()

        assert registry.catalog.models("groq") == ["kept"]

    def test_providers_without_credentials_are_skipped(
        self, make_registry: Callable, make_adapter: Callable
    ) -> None:
        adapter = make_adapter("anthropic", ["claude-opus-4-1"], credential=False)
        registry = make_registry(adapter)

        result = registry.refresh()

        assert adapter.calls == 0
        assert result.skipped_providers == ["anthropic"]
        assert registry.catalog.models("anthropic") == []

    def test_listed_flags_are_applied(self, make_registry: Callable, make_adapter: Callable) -> None:
        """Listing flags override defaults and the deny-list still applies."""
        adapter = make_adapter(
            "openRouter",
            [
                ModelDescriptor("qwen/qwen3-8b:free", display_name="Qwen3 8B", image_input_unsupported=False),
                ModelDescriptor("mistral/large"),
            ],
        )
        registry = make_registry(adapter)

        registry.refresh()

        qwen = registry.catalog.metadata("openRouter", "qwen/qwen3-8b:free")
        assert qwen.tool_call_unsupported is True
        assert qwen.image_input_unsupported is False
        assert qwen.display_name == "Qwen3 8B"
        assert registry.catalog.metadata("openRouter", "mistral/large").image_input_unsupported is True

    def test_max_workers_bounds_pool(self, config, make_registry: Callable, make_adapter: Callable) -> None:
        config.max_workers = 1
        registry = make_registry(make_adapter("a", ["x"]), make_adapter("b", ["y"]))

        result = registry.refresh()

        assert result.updated_providers == ["a", "b"]

    def test_empty_fetch_table(self, config) -> None:
        registry = ModelRegistry(config, directory=ProviderDirectory(config, adapters=[]))

        result = registry.refresh()

        assert result.status is RefreshStatus.REFRESHED
        assert result.model_counts == {}
