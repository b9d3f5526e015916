"""
Request bodies and response shapes used by more than one router.
Enum fields travel as their names; unknown names decode to UNKNOWN instead of failing.
"""
from datetime import datetime
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, Field

from cheapeats.models.deal import Deal
from cheapeats.services.deals.schedule import is_active_now, time_remaining_text, valid_days_text
from cheapeats.services.types import DataFreshness, LatLng, LatLngBounds, PriceSource, Restaurant


class LatLngModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_latlng(self) -> LatLng:
        return LatLng(self.latitude, self.longitude)


class BoundsModel(BaseModel):
    southwest: LatLngModel
    northeast: LatLngModel

    def to_bounds(self) -> LatLngBounds:
        return LatLngBounds(self.southwest.to_latlng(), self.northeast.to_latlng())


class RestaurantModel(BaseModel):
    id: str = Field(..., min_length=1, max_length=128)
    name: str
    cuisine: str = ""
    price_level: int = Field(1, ge=0, le=4)
    rating: float = 0.0
    address: str = ""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    distance: float = 0.0
    image_url: str | None = None
    is_sponsored: bool = False
    has_student_discount: bool = False
    near_ttc: bool = False
    average_price: float | None = Field(None, ge=0)
    price_source: str | None = None
    is_open_now: bool | None = None
    data_freshness: str | None = None

    def to_restaurant(self) -> Restaurant:
        return Restaurant(
            id=self.id,
            name=self.name,
            cuisine=self.cuisine,
            price_level=self.price_level,
            rating=self.rating,
            address=self.address,
            location=LatLng(self.latitude, self.longitude),
            distance=self.distance,
            image_url=self.image_url,
            is_sponsored=self.is_sponsored,
            has_student_discount=self.has_student_discount,
            near_ttc=self.near_ttc,
            average_price=self.average_price,
            price_source=PriceSource.parse(self.price_source),
            is_open_now=self.is_open_now,
            data_freshness=DataFreshness.parse(self.data_freshness),
        )


def restaurant_to_dict(r: Restaurant) -> dict[str, Any]:
    return {
        "id": r.id,
        "name": r.name,
        "cuisine": r.cuisine,
        "price_level": r.price_level,
        "price_point": r.price_point,
        "rating": r.rating,
        "address": r.address,
        "latitude": r.latitude,
        "longitude": r.longitude,
        "distance": r.distance,
        "image_url": r.image_url,
        "thumbnail_url": f"/cache/restaurants/{quote(r.id, safe='')}/thumbnail" if r.thumbnail_path else None,
        "is_sponsored": r.is_sponsored,
        "has_student_discount": r.has_student_discount,
        "near_ttc": r.near_ttc,
        "average_price": r.average_price,
        "price_source": r.price_source.value,
        "price_source_label": r.price_source.display_label,
        "is_open_now": r.is_open_now,
        "data_freshness": r.data_freshness.value,
    }


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def deal_to_dict(d: Deal, now: datetime | None = None) -> dict[str, Any]:
    return {
        "id": d.id,
        "restaurant_id": d.restaurant_id,
        "restaurant_name": d.restaurant_name,
        "title": d.title,
        "description": d.description,
        "original_price": d.original_price,
        "deal_price": d.deal_price,
        "savings_amount": d.savings_amount,
        "savings_percent": d.savings_percent,
        "deal_type": d.deal_type,
        "source": d.source,
        "valid_days": d.valid_days,
        "valid_days_text": valid_days_text(d.valid_days),
        "start_time": d.start_time,
        "end_time": d.end_time,
        "valid_from": _iso(d.valid_from),
        "valid_until": _iso(d.valid_until),
        "is_active_now": is_active_now(d, now),
        "time_remaining": time_remaining_text(d, now),
        "upvotes": d.upvotes,
        "downvotes": d.downvotes,
        "net_votes": d.net_votes,
        "report_count": d.report_count,
    }
