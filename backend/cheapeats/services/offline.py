"""
Offline manager: decides between live and cached results and owns connectivity state.

One instance per process. start() reads current connectivity and subscribes to changes;
release() unsubscribes. Both are idempotent. Connectivity callbacks may arrive on any
thread; each one becomes a single assignment on is_offline.
"""
import dataclasses
import logging
import threading
from typing import Callable

from cheapeats.services.cache.connectivity import ConnectivityMonitor
from cheapeats.services.cache.observable import StateValue
from cheapeats.services.cache.store import RestaurantCacheStore
from cheapeats.services.filters import FilterState, apply_filters
from cheapeats.services.types import CacheStats, DataFreshness, LatLng, Restaurant

logger = logging.getLogger(__name__)

LiveFetch = Callable[[], list[Restaurant]]


class OfflineManager:
    def __init__(
        self,
        store: RestaurantCacheStore,
        monitor: ConnectivityMonitor,
        cache_images_on_wifi: bool = True,
    ) -> None:
        self._store = store
        self._monitor = monitor
        self._cache_images_on_wifi = cache_images_on_wifi
        self._lock = threading.Lock()
        self._token: int | None = None
        self.is_offline: StateValue[bool] = StateValue(False)
        self.cache_stats: StateValue[CacheStats] = StateValue(CacheStats())

    @property
    def store(self) -> RestaurantCacheStore:
        return self._store

    @property
    def is_started(self) -> bool:
        return self._token is not None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        with self._lock:
            if self._token is not None:
                return
            self.is_offline.set(not self._monitor.has_internet())
            self._token = self._monitor.register(self._on_available, self._on_lost)
        self.refresh_stats()
        logger.info("Offline manager started (offline=%s)", self.is_offline.value)

    def release(self) -> None:
        with self._lock:
            token, self._token = self._token, None
        if token is not None:
            self._monitor.unregister(token)
            logger.info("Offline manager released")

    def _on_available(self) -> None:
        self.is_offline.set(False)

    def _on_lost(self) -> None:
        # Losing one network does not mean losing all of them
        self.is_offline.set(not self._monitor.has_internet())

    def is_on_wifi(self) -> bool:
        return self._monitor.is_unmetered()

    # -------------------------------------------------------------------------
    # Cache operations
    # -------------------------------------------------------------------------

    def cache_results(self, restaurants: list[Restaurant], user_location: LatLng | None = None) -> int:
        prefetch = self._cache_images_on_wifi and self.is_on_wifi()
        n = self._store.cache_results(restaurants, user_location, prefetch_thumbnails=prefetch)
        self.refresh_stats()
        return n

    def get_cached_results(
        self,
        user_location: LatLng | None = None,
        filter_state: FilterState | None = None,
    ) -> list[Restaurant]:
        return apply_filters(self._store.get_cached(user_location), filter_state)

    def record_access(self, restaurant_id: str) -> bool:
        return self._store.record_access(restaurant_id)

    def cleanup_old_data(self) -> dict:
        result = self._store.cleanup_old_data()
        self.refresh_stats()
        return result

    def clear_cache(self) -> None:
        self._store.clear_cache()
        self.refresh_stats()

    def refresh_stats(self) -> CacheStats:
        stats = self._store.stats()
        self.cache_stats.set(stats)
        return stats

    # -------------------------------------------------------------------------
    # Live-or-cached
    # -------------------------------------------------------------------------

    def get_results(
        self,
        fetch_live: LiveFetch,
        user_location: LatLng | None = None,
        filter_state: FilterState | None = None,
    ) -> tuple[list[Restaurant], bool]:
        """
        Returns (restaurants, served_from_cache). Offline goes straight to the cache; a failed
        live fetch falls back to it. Live results are written through before being returned.
        """
        if self.is_offline.value:
            return self.get_cached_results(user_location, filter_state), True
        try:
            live = fetch_live()
        except Exception as e:
            logger.warning("Live fetch failed, serving cached results: %s", e, exc_info=True)
            return self.get_cached_results(user_location, filter_state), True
        live = [dataclasses.replace(r, data_freshness=DataFreshness.LIVE) for r in live]
        try:
            self.cache_results(live, user_location)
        except Exception as e:
            logger.warning("Write-through failed, returning live results uncached: %s", e, exc_info=True)
        return apply_filters(live, filter_state), False
