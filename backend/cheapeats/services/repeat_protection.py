"""
Repeat protection: keep recommendations varied by hiding restaurants recommended recently.

Only views recorded with source RECOMMENDATION count toward the cooldown; a restaurant the
user reached by searching is never hidden. Duplicate views are stored as-is (the cooldown
only cares whether any entry falls inside the window).

MAX_REPEATS_PER_DAY is declared in constants but not enforced here: the cooldown is the
whole policy.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from cheapeats.core.constants import COOLDOWN_HOURS, HISTORY_RETENTION_DAYS
from cheapeats.core.timeutil import as_utc, utcnow
from cheapeats.models.view_history import ViewHistoryEntry, ViewSource
from cheapeats.services.types import Restaurant

logger = logging.getLogger(__name__)


def get_recently_recommended_ids(db: Session, since: datetime) -> set[str]:
    rows = (
        db.query(ViewHistoryEntry.restaurant_id)
        .filter(
            ViewHistoryEntry.viewed_at >= as_utc(since),
            ViewHistoryEntry.source == ViewSource.RECOMMENDATION.value,
        )
        .all()
    )
    return {r[0] for r in rows}


def filter_recently_shown(
    db: Session,
    restaurants: Iterable[Restaurant],
    now: datetime | None = None,
) -> list[Restaurant]:
    """Drop restaurants recommended within the last COOLDOWN_HOURS. Input order is kept."""
    since = as_utc(now or utcnow()) - timedelta(hours=COOLDOWN_HOURS)
    recent = get_recently_recommended_ids(db, since)
    return [r for r in restaurants if r.id not in recent]


def record_view(
    db: Session,
    restaurant_id: str,
    source: ViewSource,
    now: datetime | None = None,
) -> ViewHistoryEntry:
    entry = ViewHistoryEntry(
        restaurant_id=restaurant_id,
        viewed_at=as_utc(now or utcnow()),
        source=ViewSource(source).value,
    )
    db.add(entry)
    db.commit()
    return entry


def cleanup(db: Session, now: datetime | None = None) -> int:
    """Delete history older than HISTORY_RETENTION_DAYS. Meant for a periodic job, not every read."""
    before = as_utc(now or utcnow()) - timedelta(days=HISTORY_RETENTION_DAYS)
    n = db.query(ViewHistoryEntry).filter(ViewHistoryEntry.viewed_at < before).delete(synchronize_session=False)
    db.commit()
    logger.debug("View history cleanup removed %s entries", n)
    return n


def get_recently_viewed(db: Session, since: datetime) -> list[str]:
    """Restaurant ids viewed since `since`, newest first (any source)."""
    rows = (
        db.query(ViewHistoryEntry.restaurant_id)
        .filter(ViewHistoryEntry.viewed_at > as_utc(since))
        .order_by(ViewHistoryEntry.viewed_at.desc())
        .all()
    )
    return [r[0] for r in rows]


def get_last_view(db: Session, restaurant_id: str) -> ViewHistoryEntry | None:
    return (
        db.query(ViewHistoryEntry)
        .filter(ViewHistoryEntry.restaurant_id == restaurant_id)
        .order_by(ViewHistoryEntry.viewed_at.desc())
        .first()
    )


def get_view_count(db: Session, restaurant_id: str, since: datetime) -> int:
    return (
        db.query(ViewHistoryEntry)
        .filter(ViewHistoryEntry.restaurant_id == restaurant_id, ViewHistoryEntry.viewed_at > as_utc(since))
        .count()
    )


def get_most_viewed(db: Session, since: datetime, limit: int = 10) -> list[tuple[str, int]]:
    """(restaurant_id, view_count) pairs, most viewed first."""
    view_count = func.count(ViewHistoryEntry.id).label("view_count")
    rows = (
        db.query(ViewHistoryEntry.restaurant_id, view_count)
        .filter(ViewHistoryEntry.viewed_at > as_utc(since))
        .group_by(ViewHistoryEntry.restaurant_id)
        .order_by(view_count.desc())
        .limit(limit)
        .all()
    )
    return [(r[0], r[1]) for r in rows]


def get_total_view_count(db: Session) -> int:
    return db.query(ViewHistoryEntry).count()
