"""Refresh coordination.

A refresh queries every provider in the directory's fetch table
concurrently and replaces each provider's catalog entries with its live
listing. At most one refresh runs at a time: callers arriving while one is
in flight wait on the same future instead of starting another. Non-forced
refreshes are throttled to one per ``refresh_interval`` seconds.
"""

import dataclasses
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .catalog import ModelCatalog
from .config import RegistryConfig
from .directory import ProviderDirectory
from .handles import ModelDescriptor
from .logging import LogEvent, log_debug, log_info, log_warning
from .providers import ProviderAdapter


class RefreshStatus(Enum):
    """Outcome of a refresh call."""

    REFRESHED = "refreshed"
    THROTTLED = "throttled"
    JOINED = "joined"


@dataclass
class RefreshResult:
    """Result of a refresh call.

    ``model_counts`` holds the number of models each provider returned.
    Providers listed in ``failed_providers`` or ``skipped_providers`` kept
    their previous catalog entries.
    """

    status: RefreshStatus
    message: str
    model_counts: Dict[str, int] = field(default_factory=dict)
    failed_providers: List[str] = field(default_factory=list)
    skipped_providers: List[str] = field(default_factory=list)

    @property
    def updated_providers(self) -> List[str]:
        return [provider for provider, count in self.model_counts.items() if count > 0]


_FETCHED = "fetched"
_FAILED = "failed"
_SKIPPED = "skipped"


class RefreshCoordinator:
    """Throttled, single-flight refresh of a model catalog."""

    def __init__(
        self,
        catalog: ModelCatalog,
        directory: ProviderDirectory,
        config: RegistryConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the coordinator.

        Args:
            catalog: Catalog to update
            directory: Source of the fetch table and credential checks
            config: Registry configuration (interval, worker count)
            clock: Monotonic time source, in seconds
        """
        self.catalog = catalog
        self.directory = directory
        self.config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: Optional["Future[RefreshResult]"] = None
        self._last_refresh_at: Optional[float] = None

    @property
    def last_refresh_at(self) -> Optional[float]:
        """Clock reading at the last successful refresh, or None."""
        with self._lock:
            return self._last_refresh_at

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight is not None

    def refresh(self, force: bool = False) -> RefreshResult:
        """Refresh the catalog from live provider listings.

        Args:
            force: Ignore the minimum interval since the last refresh

        Returns:
            Result of the refresh this call ran or waited on

        Raises:
            Exception: Only if applying the round to the catalog fails
                       unexpectedly; provider errors never propagate
        """
        with self._lock:
            last = self._last_refresh_at
            if not force and last is not None and self._clock() - last < self.config.refresh_interval:
                return RefreshResult(
                    status=RefreshStatus.THROTTLED,
                    message="Catalog was refreshed recently; skipping provider fetches",
                )
            future = self._in_flight
            owner = future is None
            if future is None:
                future = Future()
                self._in_flight = future

        if not owner:
            log_debug(LogEvent.REGISTRY_REFRESH, "Joining in-flight refresh")
            return dataclasses.replace(future.result(), status=RefreshStatus.JOINED)

        try:
            result = self._run_round()
        except BaseException as e:
            with self._lock:
                self._in_flight = None
            future.set_exception(e)
            raise

        with self._lock:
            self._last_refresh_at = self._clock()
            self._in_flight = None
        future.set_result(result)
        return result

    def _fetch(self, adapter: ProviderAdapter) -> Tuple[List[ModelDescriptor], str]:
        if not self.directory.has_credential(adapter.key):
            return [], _SKIPPED
        try:
            return adapter.fetch_live_models(), _FETCHED
        except Exception as e:
            log_warning(
                LogEvent.PROVIDER_FETCH,
                f"Failed to refresh {adapter.key} models: {e}",
                provider=adapter.key,
                error=str(e),
            )
            return [], _FAILED

    def _run_round(self) -> RefreshResult:
        adapters = self.directory.fetch_table()
        fetched: Dict[str, List[ModelDescriptor]] = {}
        failed: List[str] = []
        skipped: List[str] = []

        if adapters:
            workers = self.config.max_workers or len(adapters)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="model-refresh") as executor:
                futures = {executor.submit(self._fetch, adapter): adapter.key for adapter in adapters}
                for done in as_completed(futures):
                    provider = futures[done]
                    models, outcome = done.result()
                    fetched[provider] = models
                    if outcome == _FAILED:
                        failed.append(provider)
                    elif outcome == _SKIPPED:
                        skipped.append(provider)

        counts: Dict[str, int] = {}
        for adapter in adapters:
            models = fetched.get(adapter.key, [])
            counts[adapter.key] = len(models)
            if not models:
                # Keep the last known entries rather than emptying the provider
                log_info(
                    LogEvent.REGISTRY_REFRESH,
                    f"No models returned for {adapter.key}; keeping existing entries",
                    provider=adapter.key,
                )
                continue
            self.catalog.replace_provider(
                adapter.key,
                [(descriptor, self.directory.factory(adapter.key, descriptor.request_name)) for descriptor in models],
            )

        updated = sum(1 for count in counts.values() if count)
        log_info(
            LogEvent.REGISTRY_REFRESH,
            f"Refreshed {updated} of {len(adapters)} providers",
            counts=counts,
            failed=sorted(failed),
            skipped=sorted(skipped),
        )
        return RefreshResult(
            status=RefreshStatus.REFRESHED,
            message=f"Refreshed {updated} of {len(adapters)} providers",
            model_counts=counts,
            failed_providers=sorted(failed),
            skipped_providers=sorted(skipped),
        )
