"""Offline copy of a restaurant last seen in a live result, plus cache bookkeeping."""
from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.sql import func

from cheapeats.db.base import Base
from cheapeats.services.types import DataFreshness, LatLng, PriceSource, Restaurant


class CachedRestaurant(Base):
    __tablename__ = "cached_restaurants"
    __table_args__ = (
        Index("ix_cached_restaurants_lat_lng", "latitude", "longitude"),
    )

    id = Column(String(128), primary_key=True)

    name = Column(String(256), nullable=False)
    cuisine = Column(String(128), nullable=False, default="")
    address = Column(String(512), nullable=False, default="")
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    price_level = Column(Integer, nullable=False, default=1)
    rating = Column(Float, nullable=False, default=0.0, index=True)
    near_ttc = Column(Boolean, nullable=False, default=False, index=True)
    has_student_discount = Column(Boolean, nullable=False, default=False)

    average_price = Column(Float, nullable=True, index=True)
    price_source = Column(String(32), nullable=False, default=PriceSource.UNKNOWN.name)

    is_open_now = Column(Boolean, nullable=True)
    opening_hours_json = Column(Text, nullable=True)

    image_url = Column(Text, nullable=True)
    thumbnail_path = Column(Text, nullable=True)

    cached_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_accessed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    data_freshness = Column(String(16), nullable=False, default=DataFreshness.CACHED.name)

    # Where the user was when this row was written (scopes "nearby" reads)
    cached_near_lat = Column(Float, nullable=True)
    cached_near_lng = Column(Float, nullable=True)

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant, user_location: LatLng | None, now) -> "CachedRestaurant":
        row = cls(id=restaurant.id, thumbnail_path=None)
        row.update_from(restaurant, user_location, now)
        return row

    def update_from(self, restaurant: Restaurant, user_location: LatLng | None, now) -> None:
        """Overwrite the snapshot columns. thumbnail_path is owned by the thumbnail task and left alone."""
        self.name = restaurant.name
        self.cuisine = restaurant.cuisine
        self.address = restaurant.address
        self.latitude = restaurant.location.latitude
        self.longitude = restaurant.location.longitude
        self.price_level = restaurant.price_level
        self.rating = restaurant.rating
        self.near_ttc = restaurant.near_ttc
        self.has_student_discount = restaurant.has_student_discount
        self.average_price = restaurant.average_price
        self.price_source = restaurant.price_source.name
        self.is_open_now = restaurant.is_open_now
        self.opening_hours_json = None
        self.image_url = restaurant.image_url
        self.cached_at = now
        self.last_accessed_at = now
        self.data_freshness = DataFreshness.CACHED.name
        self.cached_near_lat = user_location.latitude if user_location else None
        self.cached_near_lng = user_location.longitude if user_location else None

    def to_restaurant(self) -> Restaurant:
        """Public shape. Never claims to be live; distance depends on a live position so it resets."""
        return Restaurant(
            id=self.id,
            name=self.name,
            cuisine=self.cuisine,
            price_level=self.price_level,
            rating=self.rating,
            distance=0.0,
            image_url=self.image_url,
            thumbnail_path=self.thumbnail_path,
            address=self.address,
            location=LatLng(self.latitude, self.longitude),
            is_sponsored=False,
            has_student_discount=self.has_student_discount,
            near_ttc=self.near_ttc,
            average_price=self.average_price,
            price_source=PriceSource.parse(self.price_source),
            is_open_now=self.is_open_now,
            data_freshness=DataFreshness.CACHED,
        )
