"""Cheap-area hints for the current map view."""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from cheapeats.api.schemas import BoundsModel, RestaurantModel
from cheapeats.services.areas import cheap_areas
from cheapeats.services.filters import PriceFilterMode, matches_price_filter

router = APIRouter()


class CheapAreasRequest(BaseModel):
    restaurants: list[RestaurantModel] = Field(..., max_length=1000)
    bounds: BoundsModel
    price_mode: PriceFilterMode = PriceFilterMode.FLEXIBLE


@router.post("/cheap")
def post_cheap_areas(body: CheapAreasRequest) -> dict[str, Any]:
    hints = cheap_areas(
        [r.to_restaurant() for r in body.restaurants],
        body.bounds.to_bounds(),
        is_cheap=lambda r: matches_price_filter(r, body.price_mode),
    )
    return {
        "areas": [
            {
                "latitude": h.center.latitude,
                "longitude": h.center.longitude,
                "radius": h.radius,
                "restaurant_count": h.restaurant_count,
                "avg_price": h.avg_price,
                "label": h.label,
            }
            for h in hints
        ],
    }
