"""
Deals: read active/expiring deals, accept user submissions, count votes and reports, expire old rows.

SQL does the coarse cut (price ceiling, not expired, day mask); schedule.is_active_now
does the exact check including time of day.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from cheapeats.core.constants import (
    ACTIVE_DEALS_LIMIT,
    CHEAP_PRICE_CEILING,
    DEAL_MIN_TITLE_LENGTH,
    EXPIRING_DEALS_WITHIN_HOURS,
)
from cheapeats.core.errors import MSG_DEAL_PRICE_TOO_HIGH, MSG_DEAL_TITLE_TOO_SHORT
from cheapeats.core.timeutil import as_utc, utcnow
from cheapeats.models.deal import Deal, DealSource, DealType
from cheapeats.services.deals.schedule import ALL_DAYS, is_active_now, today_bitmask

logger = logging.getLogger(__name__)


@dataclass
class DealSubmission:
    restaurant_id: str
    restaurant_name: str
    title: str
    deal_price: float
    original_price: float | None = None
    description: str | None = None
    deal_type: DealType = DealType.DAILY_SPECIAL
    valid_days: int = ALL_DAYS
    start_time: str | None = None
    end_time: str | None = None
    valid_until: datetime | None = None
    submitted_by: str | None = None


@dataclass
class DealSubmitResult:
    """Outcome of a submission: either the stored deal or a human-readable rejection reason."""
    ok: bool
    deal: Deal | None = None
    reason: str | None = None


def _not_expired(now: datetime):
    return or_(Deal.valid_until.is_(None), Deal.valid_until > now)


def get_active_deals_today(db: Session, now: datetime | None = None, limit: int = ACTIVE_DEALS_LIMIT) -> list[Deal]:
    """
    Cheap deals valid right now. Deals with an expiry come first (soonest first), then by price.
    """
    now = as_utc(now or utcnow())
    mask = today_bitmask(now)
    rows = (
        db.query(Deal)
        .filter(
            Deal.deal_price < CHEAP_PRICE_CEILING,
            _not_expired(now),
            or_(Deal.valid_days.op("&")(mask) > 0, Deal.valid_days == 0, Deal.valid_days == ALL_DAYS),
        )
        .order_by(
            case((Deal.valid_until.isnot(None), 0), else_=1),
            Deal.valid_until.asc(),
            Deal.deal_price.asc(),
        )
        .limit(limit)
        .all()
    )
    return [d for d in rows if is_active_now(d, now)]


def get_deals_for_restaurant(db: Session, restaurant_id: str, now: datetime | None = None) -> list[Deal]:
    now = as_utc(now or utcnow())
    return (
        db.query(Deal)
        .filter(
            Deal.restaurant_id == restaurant_id,
            Deal.deal_price < CHEAP_PRICE_CEILING,
            _not_expired(now),
        )
        .order_by(Deal.deal_price.asc())
        .all()
    )


def get_expiring_deals(
    db: Session,
    within_hours: int = EXPIRING_DEALS_WITHIN_HOURS,
    now: datetime | None = None,
) -> list[Deal]:
    """Deals whose valid_until falls within the next within_hours."""
    now = as_utc(now or utcnow())
    soon = now + timedelta(hours=within_hours)
    return (
        db.query(Deal)
        .filter(Deal.valid_until.isnot(None), Deal.valid_until > now, Deal.valid_until < soon)
        .order_by(Deal.valid_until.asc())
        .all()
    )


def get_deal(db: Session, deal_id: str) -> Deal | None:
    return db.query(Deal).filter(Deal.id == deal_id).first()


def validate_submission(submission: DealSubmission) -> str | None:
    """Return a rejection reason, or None if the submission is acceptable."""
    if submission.deal_price >= CHEAP_PRICE_CEILING:
        return MSG_DEAL_PRICE_TOO_HIGH.format(ceiling=CHEAP_PRICE_CEILING)
    if len(submission.title or "") < DEAL_MIN_TITLE_LENGTH:
        return MSG_DEAL_TITLE_TOO_SHORT
    return None


def submit_deal(db: Session, submission: DealSubmission) -> DealSubmitResult:
    """Store a user-submitted deal. Validation failures come back as a result, never raised."""
    reason = validate_submission(submission)
    if reason:
        logger.info("Deal submission rejected for %s: %s", submission.restaurant_id, reason)
        return DealSubmitResult(ok=False, reason=reason)
    deal = Deal(
        restaurant_id=submission.restaurant_id,
        restaurant_name=submission.restaurant_name,
        title=submission.title,
        description=submission.description,
        original_price=submission.original_price,
        deal_price=submission.deal_price,
        deal_type=submission.deal_type.value,
        source=DealSource.USER_SUBMITTED.value,
        valid_days=submission.valid_days,
        start_time=submission.start_time,
        end_time=submission.end_time,
        valid_until=as_utc(submission.valid_until),
        submitted_by=submission.submitted_by,
    )
    db.add(deal)
    db.commit()
    db.refresh(deal)
    return DealSubmitResult(ok=True, deal=deal)


def _bump(db: Session, deal_id: str, column) -> bool:
    n = db.query(Deal).filter(Deal.id == deal_id).update({column: column + 1}, synchronize_session=False)
    db.commit()
    return n > 0


def upvote_deal(db: Session, deal_id: str) -> bool:
    return _bump(db, deal_id, Deal.upvotes)


def downvote_deal(db: Session, deal_id: str) -> bool:
    return _bump(db, deal_id, Deal.downvotes)


def report_deal(db: Session, deal_id: str) -> bool:
    return _bump(db, deal_id, Deal.report_count)


def cleanup_expired_deals(db: Session, now: datetime | None = None) -> int:
    """Hard-delete deals whose valid_until has passed. Returns rows deleted."""
    now = as_utc(now or utcnow())
    n = db.query(Deal).filter(Deal.valid_until < now).delete(synchronize_session=False)
    db.commit()
    if n:
        logger.info("Deleted %s expired deals", n)
    return n


def get_active_deal_count(db: Session) -> int:
    return db.query(Deal).filter(Deal.deal_price < CHEAP_PRICE_CEILING).count()
