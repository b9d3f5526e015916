from cheapeats.models.cached_restaurant import CachedRestaurant
from cheapeats.models.deal import Deal, DealSource, DealType
from cheapeats.models.view_history import ViewHistoryEntry, ViewSource

__all__ = [
    "CachedRestaurant",
    "Deal",
    "DealSource",
    "DealType",
    "ViewHistoryEntry",
    "ViewSource",
]
