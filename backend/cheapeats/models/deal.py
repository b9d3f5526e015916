"""A deal or daily special at a restaurant. Validity is a weekly day mask plus optional time/date windows."""
import enum
import uuid

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from cheapeats.db.base import Base

ALL_DAYS_MASK = 127


class DealType(str, enum.Enum):
    DAILY_SPECIAL = "DAILY_SPECIAL"
    WEEKLY_SPECIAL = "WEEKLY_SPECIAL"
    LIMITED_TIME = "LIMITED_TIME"
    STUDENT_DISCOUNT = "STUDENT_DISCOUNT"
    HAPPY_HOUR = "HAPPY_HOUR"
    COMBO_DEAL = "COMBO_DEAL"


class DealSource(str, enum.Enum):
    OFFICIAL = "OFFICIAL"
    USER_SUBMITTED = "USER_SUBMITTED"
    SCRAPED = "SCRAPED"
    VERIFIED = "VERIFIED"


class Deal(Base):
    __tablename__ = "deals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    restaurant_id = Column(String(128), nullable=False, index=True)
    restaurant_name = Column(String(256), nullable=False)

    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    original_price = Column(Float, nullable=True)
    deal_price = Column(Float, nullable=False, index=True)

    deal_type = Column(String(32), nullable=False, default=DealType.DAILY_SPECIAL.value, index=True)
    source = Column(String(32), nullable=False, default=DealSource.OFFICIAL.value)

    # Time constraints: valid_days is a bitmask (MONDAY=1 .. SUNDAY=64); 0 and 127 mean every day
    valid_days = Column(Integer, nullable=False, default=ALL_DAYS_MASK, index=True)
    start_time = Column(String(5), nullable=True)  # "HH:MM"
    end_time = Column(String(5), nullable=True)  # "HH:MM"
    valid_from = Column(DateTime(timezone=True), nullable=True)
    valid_until = Column(DateTime(timezone=True), nullable=True, index=True)

    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)
    report_count = Column(Integer, nullable=False, default=0)
    submitted_by = Column(String(128), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def net_votes(self) -> int:
        return (self.upvotes or 0) - (self.downvotes or 0)

    @property
    def is_user_submitted(self) -> bool:
        return self.source == DealSource.USER_SUBMITTED.value

    @property
    def savings_amount(self) -> float | None:
        if self.original_price is None:
            return None
        return self.original_price - self.deal_price

    @property
    def savings_percent(self) -> int | None:
        if not self.original_price:
            return None
        return int((self.original_price - self.deal_price) / self.original_price * 100)
