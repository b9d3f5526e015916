"""Normalized restaurant types shared by the cache, filters, clustering and API. Same shape live or cached."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from cheapeats.core.constants import CHEAP_PRICE_CEILING, FLEXIBLE_PRICE_CEILING


@dataclass(frozen=True)
class LatLng:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LatLngBounds:
    """Axis-aligned view bounds. west > east means the box crosses the antimeridian."""

    southwest: LatLng
    northeast: LatLng

    def contains(self, point: LatLng) -> bool:
        if not (self.southwest.latitude <= point.latitude <= self.northeast.latitude):
            return False
        west, east = self.southwest.longitude, self.northeast.longitude
        if west <= east:
            return west <= point.longitude <= east
        return point.longitude >= west or point.longitude <= east


@dataclass(frozen=True)
class TransitStation:
    name: str
    location: LatLng
    lines: tuple[str, ...] = ()


class PriceSource(str, enum.Enum):
    """Where a restaurant's average price came from. Persisted by name."""

    API_VERIFIED = "API_VERIFIED"
    USER_REPORTED = "USER_REPORTED"
    ESTIMATED = "ESTIMATED"
    CACHED = "CACHED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: str | None) -> "PriceSource":
        """Decode a persisted name; anything unrecognised is UNKNOWN."""
        if not raw:
            return cls.UNKNOWN
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            return cls.UNKNOWN

    @property
    def display_label(self) -> str:
        return _PRICE_SOURCE_LABELS[self]


_PRICE_SOURCE_LABELS = {
    PriceSource.API_VERIFIED: "Verified",
    PriceSource.USER_REPORTED: "Reported",
    PriceSource.ESTIMATED: "Estimated",
    PriceSource.CACHED: "Cached",
    PriceSource.UNKNOWN: "",
}


class DataFreshness(str, enum.Enum):
    LIVE = "LIVE"        # fetched from the upstream API just now
    RECENT = "RECENT"    # less than an hour old
    CACHED = "CACHED"    # served from local storage
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: str | None) -> "DataFreshness":
        if not raw:
            return cls.UNKNOWN
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            return cls.UNKNOWN


_PRICE_POINTS = {0: "Free", 1: "$", 2: "$$", 3: "$$$", 4: "$$$$"}


@dataclass
class Restaurant:
    """One restaurant as handed to consumers, whether live or read back from the cache."""

    id: str
    name: str
    cuisine: str
    price_level: int
    rating: float
    address: str
    location: LatLng
    distance: float = 0.0
    image_url: str | None = None
    is_sponsored: bool = False
    has_student_discount: bool = False
    near_ttc: bool = False
    average_price: float | None = None
    price_source: PriceSource = PriceSource.UNKNOWN
    is_open_now: bool | None = None
    data_freshness: DataFreshness = DataFreshness.UNKNOWN
    # Local file on this server; only set on cache reads
    thumbnail_path: str | None = None

    @property
    def latitude(self) -> float:
        return self.location.latitude

    @property
    def longitude(self) -> float:
        return self.location.longitude

    @property
    def price_point(self) -> str:
        return _PRICE_POINTS.get(self.price_level, "$")

    @property
    def is_under_15(self) -> bool:
        if self.average_price is not None:
            return self.average_price < CHEAP_PRICE_CEILING
        return self.price_level <= 1

    @property
    def is_verified_under_15(self) -> bool:
        return (
            self.average_price is not None
            and self.average_price <= CHEAP_PRICE_CEILING
            and self.price_source == PriceSource.API_VERIFIED
        )

    def is_flexibly_cheap(self) -> bool:
        """Flexible mode: estimated prices up to $17 count; no price falls back to price level."""
        if self.average_price is None:
            return self.price_level <= 1
        return self.average_price <= FLEXIBLE_PRICE_CEILING


@dataclass(frozen=True)
class CheapAreaHint:
    center: LatLng
    radius: float
    restaurant_count: int
    avg_price: float
    label: str


@dataclass(frozen=True)
class CacheStats:
    restaurant_count: int = 0
    image_size_bytes: int = 0

    @property
    def formatted_size(self) -> str:
        if self.image_size_bytes < 1024:
            return f"{self.image_size_bytes}B"
        if self.image_size_bytes < 1024 * 1024:
            return f"{self.image_size_bytes // 1024}KB"
        return f"{self.image_size_bytes // (1024 * 1024)}MB"

    def to_dict(self) -> dict:
        return {
            "restaurant_count": self.restaurant_count,
            "image_size_bytes": self.image_size_bytes,
            "formatted_size": self.formatted_size,
        }
