"""
Geographic utility functions: great-circle distance and transit-station lookups.
"""
from math import asin, cos, radians, sin, sqrt
from typing import Sequence

from cheapeats.core.constants import DEFAULT_TRANSIT_RADIUS_METERS, WALKING_SPEED_M_PER_MIN
from cheapeats.core.transit_stations import (
    ALL_STATIONS,
    GTA_MAX_LAT,
    GTA_MAX_LNG,
    GTA_MIN_LAT,
    GTA_MIN_LNG,
    MAJOR_STATIONS,
)
from cheapeats.services.types import LatLng, TransitStation

EARTH_RADIUS_METERS = 6371000.0


def distance_meters(a: LatLng, b: LatLng) -> float:
    """
    Calculate distance between two points in meters using the Haversine formula.
    Symmetric, never negative, zero for identical points.
    """
    dlat = radians(b.latitude - a.latitude)
    dlon = radians(b.longitude - a.longitude)
    h = sin(dlat / 2) ** 2 + cos(radians(a.latitude)) * cos(radians(b.latitude)) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_METERS * asin(sqrt(min(1.0, h)))


def nearest_station(
    point: LatLng,
    stations: Sequence[TransitStation] = ALL_STATIONS,
) -> tuple[TransitStation, float] | None:
    """Closest station and its distance, or None if stations is empty. Ties keep the first one."""
    best: tuple[TransitStation, float] | None = None
    for station in stations:
        d = distance_meters(point, station.location)
        if best is None or d < best[1]:
            best = (station, d)
    return best


def is_within_radius(
    point: LatLng,
    stations: Sequence[TransitStation] = ALL_STATIONS,
    radius_meters: float = DEFAULT_TRANSIT_RADIUS_METERS,
) -> bool:
    return any(distance_meters(point, s.location) <= radius_meters for s in stations)


def stations_within_radius(
    point: LatLng,
    stations: Sequence[TransitStation] = ALL_STATIONS,
    radius_meters: float = DEFAULT_TRANSIT_RADIUS_METERS,
) -> list[tuple[TransitStation, float]]:
    """All stations within radius_meters as (station, distance), nearest first; ties keep input order."""
    hits = [(s, distance_meters(point, s.location)) for s in stations]
    hits = [h for h in hits if h[1] <= radius_meters]
    hits.sort(key=lambda h: h[1])
    return hits


def is_in_toronto_area(point: LatLng) -> bool:
    """TTC features only make sense inside the GTA box."""
    return GTA_MIN_LAT <= point.latitude <= GTA_MAX_LAT and GTA_MIN_LNG <= point.longitude <= GTA_MAX_LNG


def is_near_major_hub(point: LatLng, radius_meters: float = DEFAULT_TRANSIT_RADIUS_METERS) -> bool:
    return is_within_radius(point, MAJOR_STATIONS, radius_meters)


def walking_time_minutes(distance: float) -> int:
    # ~5 km/h
    return int(distance / WALKING_SPEED_M_PER_MIN)


def walking_time_to_nearest_station(
    point: LatLng,
    stations: Sequence[TransitStation] = ALL_STATIONS,
) -> int | None:
    nearest = nearest_station(point, stations)
    if nearest is None:
        return None
    return walking_time_minutes(nearest[1])
