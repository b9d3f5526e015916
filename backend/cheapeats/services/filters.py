"""
Filter contract shared by live and cached results: every active filter must match (AND).

Price filter has two modes:
  - STRICT: verified (or unknown-source) average price <= $15; no price falls back to price level <= 1;
    estimated prices are excluded.
  - FLEXIBLE: average price <= $17, or price level <= 1 when no price is known.
Open-now only drops restaurants known to be closed; unknown hours stay in.
"""
import enum
from dataclasses import dataclass
from typing import Iterable

from cheapeats.core.constants import CHEAP_PRICE_CEILING
from cheapeats.services.types import PriceSource, Restaurant


class PriceFilterMode(str, enum.Enum):
    STRICT = "STRICT"
    FLEXIBLE = "FLEXIBLE"


@dataclass(frozen=True)
class FilterState:
    under_15: bool = False
    price_mode: PriceFilterMode = PriceFilterMode.STRICT
    student_discount: bool = False
    near_ttc: bool = False
    open_now: bool = False

    @property
    def has_active_filters(self) -> bool:
        return self.under_15 or self.student_discount or self.near_ttc or self.open_now

    @property
    def active_filter_count(self) -> int:
        return sum((self.under_15, self.student_discount, self.near_ttc, self.open_now))

    def matches(self, restaurant: Restaurant) -> bool:
        if self.under_15 and not matches_price_filter(restaurant, self.price_mode):
            return False
        if self.student_discount and not restaurant.has_student_discount:
            return False
        if self.near_ttc and not restaurant.near_ttc:
            return False
        if self.open_now and restaurant.is_open_now is False:
            return False
        return True


def matches_price_filter(restaurant: Restaurant, mode: PriceFilterMode) -> bool:
    if mode == PriceFilterMode.FLEXIBLE:
        return restaurant.is_flexibly_cheap()
    if restaurant.average_price is None:
        return restaurant.price_level <= 1
    if restaurant.price_source in (PriceSource.API_VERIFIED, PriceSource.UNKNOWN):
        return restaurant.average_price <= CHEAP_PRICE_CEILING
    return False


def apply_filters(restaurants: Iterable[Restaurant], state: FilterState | None) -> list[Restaurant]:
    restaurants = list(restaurants)
    if state is None or not state.has_active_filters:
        return restaurants
    return [r for r in restaurants if state.matches(r)]
