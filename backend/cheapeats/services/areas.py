"""
Cheap-area hints: spots on the map with several cheap restaurants close together.

Grid bucketing, not k-means: floor(lat / GRID_SIZE), floor(lng / GRID_SIZE) picks the cell.
O(n), and a restaurant stays in the same cell as the view pans. A point exactly on a cell
edge lands in the lower cell. Output order is not defined; nothing is cached between calls.
"""
import math
from collections import defaultdict
from typing import Callable, Iterable

from cheapeats.core.constants import CLUSTER_RADIUS_METERS, DEFAULT_CLUSTER_PRICE, GRID_SIZE, MIN_CLUSTER_SIZE
from cheapeats.services.types import CheapAreaHint, LatLng, LatLngBounds, Restaurant


def grid_cell(point: LatLng) -> tuple[int, int]:
    return math.floor(point.latitude / GRID_SIZE), math.floor(point.longitude / GRID_SIZE)


def cheap_areas(
    restaurants: Iterable[Restaurant],
    view_bounds: LatLngBounds,
    is_cheap: Callable[[Restaurant], bool] = Restaurant.is_flexibly_cheap,
) -> list[CheapAreaHint]:
    """One hint per grid cell holding at least MIN_CLUSTER_SIZE cheap restaurants inside view_bounds."""
    candidates = [r for r in restaurants if is_cheap(r) and view_bounds.contains(r.location)]
    if len(candidates) < MIN_CLUSTER_SIZE:
        return []

    cells: dict[tuple[int, int], list[Restaurant]] = defaultdict(list)
    for r in candidates:
        cells[grid_cell(r.location)].append(r)

    hints = []
    for members in cells.values():
        if len(members) < MIN_CLUSTER_SIZE:
            continue
        n = len(members)
        center = LatLng(
            sum(r.latitude for r in members) / n,
            sum(r.longitude for r in members) / n,
        )
        prices = [r.average_price for r in members if r.average_price is not None]
        avg_price = sum(prices) / len(prices) if prices else DEFAULT_CLUSTER_PRICE
        hints.append(
            CheapAreaHint(
                center=center,
                radius=CLUSTER_RADIUS_METERS,
                restaurant_count=n,
                avg_price=avg_price,
                label=f"{n} spots ~${int(avg_price)}",
            )
        )
    return hints
