"""Offline restaurant cache: store, thumbnails, connectivity and observable state."""
from cheapeats.services.cache.connectivity import (
    ConnectivityMonitor,
    SocketConnectivityMonitor,
    StaticConnectivityMonitor,
)
from cheapeats.services.cache.observable import StateValue
from cheapeats.services.cache.store import RestaurantCacheStore
from cheapeats.services.cache.thumbnails import HttpImageFetcher, ImageFetcher
