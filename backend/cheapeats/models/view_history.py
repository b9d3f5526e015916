"""Append-only log of when a restaurant was shown to the user, and how they got there."""
import enum
import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from cheapeats.db.base import Base


class ViewSource(str, enum.Enum):
    SEARCH = "SEARCH"
    RECOMMENDATION = "RECOMMENDATION"
    MAP_TAP = "MAP_TAP"
    COLLECTION = "COLLECTION"
    DEAL = "DEAL"


class ViewHistoryEntry(Base):
    __tablename__ = "view_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    restaurant_id = Column(String(128), nullable=False, index=True)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    source = Column(String(32), nullable=False)
