"""View history API: record what the user saw, and hide recent recommendations from a result set."""
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cheapeats.api.schemas import RestaurantModel, restaurant_to_dict
from cheapeats.core.timeutil import utcnow
from cheapeats.db.session import get_db
from cheapeats.models.view_history import ViewSource
from cheapeats.services.repeat_protection import (
    filter_recently_shown,
    get_most_viewed,
    get_recently_viewed,
    get_total_view_count,
    record_view,
)

router = APIRouter()


class RecordViewRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1, max_length=128)
    source: ViewSource


@router.post("")
def post_view(body: RecordViewRequest, db: Session = Depends(get_db)) -> dict[str, Any]:
    entry = record_view(db, body.restaurant_id, body.source)
    return {
        "id": entry.id,
        "restaurant_id": entry.restaurant_id,
        "source": entry.source,
        "viewed_at": entry.viewed_at.isoformat(),
    }


class FilterRequest(BaseModel):
    restaurants: list[RestaurantModel] = Field(..., max_length=500)


@router.post("/filter")
def filter_views(body: FilterRequest, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Drop restaurants recommended within the cooldown; order is preserved."""
    kept = filter_recently_shown(db, [r.to_restaurant() for r in body.restaurants])
    return {"restaurants": [restaurant_to_dict(r) for r in kept], "count": len(kept)}


@router.get("/recent")
def recent_views(
    hours: int = Query(24, ge=1, le=168),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    ids = get_recently_viewed(db, utcnow() - timedelta(hours=hours))
    return {"restaurant_ids": ids, "count": len(ids)}


@router.get("/most-viewed")
def most_viewed(
    days: int = Query(7, ge=1, le=90),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    rows = get_most_viewed(db, utcnow() - timedelta(days=days), limit=limit)
    return {
        "restaurants": [{"restaurant_id": rid, "view_count": n} for rid, n in rows],
        "total_views": get_total_view_count(db),
    }
