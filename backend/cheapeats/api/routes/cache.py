"""
Offline cache API: connectivity, write-through of live results, cached reads, maintenance.

GET /cache/restaurants never touches the network. Pass lat+lng for a nearby read, neither
for the most recently accessed rows.
"""
import dataclasses
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cheapeats.api.deps import get_offline_manager
from cheapeats.api.schemas import LatLngModel, RestaurantModel, restaurant_to_dict
from cheapeats.core.cache_config import get_cache_config
from cheapeats.core.errors import (
    MSG_RESTAURANT_NOT_CACHED,
    MSG_THUMBNAIL_NOT_CACHED,
    STATUS_BAD_REQUEST,
    rejection_to_http,
)
from cheapeats.db.session import get_db
from cheapeats.services.filters import FilterState, PriceFilterMode
from cheapeats.services.offline import OfflineManager
from cheapeats.services.repeat_protection import filter_recently_shown
from cheapeats.services.types import LatLng

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/connectivity")
def connectivity(manager: OfflineManager = Depends(get_offline_manager)) -> dict[str, Any]:
    return {"offline": manager.is_offline.value, "unmetered": manager.is_on_wifi()}


@router.get("/cache/config")
def cache_config() -> dict[str, Any]:
    """Effective cache policy (env overrides applied)."""
    return dataclasses.asdict(get_cache_config())


@router.get("/cache/stats")
def cache_stats(manager: OfflineManager = Depends(get_offline_manager)) -> dict[str, Any]:
    return manager.refresh_stats().to_dict()


class CacheRestaurantsRequest(BaseModel):
    restaurants: list[RestaurantModel] = Field(..., max_length=500)
    user_location: LatLngModel | None = None


@router.post("/cache/restaurants")
def cache_restaurants(
    body: CacheRestaurantsRequest,
    manager: OfflineManager = Depends(get_offline_manager),
) -> dict[str, Any]:
    """Write-through: store a live result set so it can be served offline later."""
    location = body.user_location.to_latlng() if body.user_location else None
    n = manager.cache_results([r.to_restaurant() for r in body.restaurants], location)
    return {"cached": n, "stats": manager.cache_stats.value.to_dict()}


@router.get("/cache/restaurants")
def get_cached_restaurants(
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    under_15: bool = Query(False),
    price_mode: PriceFilterMode = Query(PriceFilterMode.STRICT),
    student_discount: bool = Query(False),
    near_ttc: bool = Query(False),
    open_now: bool = Query(False),
    exclude_recently_shown: bool = Query(False, description="Hide restaurants recommended in the last 24h"),
    manager: OfflineManager = Depends(get_offline_manager),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail="lat and lng must be given together")
    location = LatLng(lat, lng) if lat is not None else None
    state = FilterState(
        under_15=under_15,
        price_mode=price_mode,
        student_discount=student_discount,
        near_ttc=near_ttc,
        open_now=open_now,
    )
    restaurants = manager.get_cached_results(location, state)
    if exclude_recently_shown:
        restaurants = filter_recently_shown(db, restaurants)
    return {
        "restaurants": [restaurant_to_dict(r) for r in restaurants],
        "count": len(restaurants),
        "offline": manager.is_offline.value,
    }


@router.get("/cache/restaurants/cheapest")
def get_cheapest_cached(
    limit: int = Query(20, ge=1, le=100),
    manager: OfflineManager = Depends(get_offline_manager),
) -> dict[str, Any]:
    restaurants = manager.store.get_cheapest_cached(limit)
    return {"restaurants": [restaurant_to_dict(r) for r in restaurants], "count": len(restaurants)}


@router.get("/cache/restaurants/{restaurant_id}")
def get_cached_restaurant(
    restaurant_id: str,
    manager: OfflineManager = Depends(get_offline_manager),
) -> dict[str, Any]:
    r = manager.store.get_cached_restaurant(restaurant_id)
    if r is None:
        raise rejection_to_http(MSG_RESTAURANT_NOT_CACHED)
    return restaurant_to_dict(r)


@router.get("/cache/restaurants/{restaurant_id}/thumbnail")
def get_cached_thumbnail(
    restaurant_id: str,
    manager: OfflineManager = Depends(get_offline_manager),
):
    """Serves the locally cached JPEG so clients never need the server's file path."""
    path = manager.store.get_thumbnail_file(restaurant_id)
    if path is None:
        raise rejection_to_http(MSG_THUMBNAIL_NOT_CACHED)
    return FileResponse(path, media_type="image/jpeg")


@router.post("/cache/restaurants/{restaurant_id}/access")
def record_access(
    restaurant_id: str,
    manager: OfflineManager = Depends(get_offline_manager),
) -> dict[str, Any]:
    if not manager.record_access(restaurant_id):
        raise rejection_to_http(MSG_RESTAURANT_NOT_CACHED)
    return {"ok": True}


@router.post("/cache/cleanup")
def cleanup_cache(manager: OfflineManager = Depends(get_offline_manager)) -> dict[str, Any]:
    result = manager.cleanup_old_data()
    return {**result, "stats": manager.cache_stats.value.to_dict()}


@router.delete("/cache")
def clear_cache(manager: OfflineManager = Depends(get_offline_manager)) -> dict[str, Any]:
    manager.clear_cache()
    logger.info("Offline cache cleared via API")
    return {"ok": True, "stats": manager.cache_stats.value.to_dict()}
