"""
Deals API: active and expiring deals, per-restaurant deals, user submissions and votes.
Submissions that fail validation come back as 422 with the reason as detail.
"""
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cheapeats.api.schemas import deal_to_dict
from cheapeats.core.errors import MSG_DEAL_NOT_FOUND, rejection_to_http
from cheapeats.core.timeutil import utcnow
from cheapeats.db.session import get_db
from cheapeats.models.deal import DealType
from cheapeats.services.deals.repository import (
    DealSubmission,
    downvote_deal,
    get_active_deals_today,
    get_deal,
    get_deals_for_restaurant,
    get_expiring_deals,
    report_deal,
    submit_deal,
    upvote_deal,
)
from cheapeats.services.deals.schedule import ALL_DAYS

router = APIRouter()

_HH_MM = r"^([01]\d|2[0-3]):[0-5]\d$"


@router.get("/active")
def active_deals(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    now = utcnow()
    deals = get_active_deals_today(db, now=now, limit=limit)
    return {"deals": [deal_to_dict(d, now) for d in deals], "count": len(deals)}


@router.get("/expiring")
def expiring_deals(
    within_hours: int = Query(3, ge=1, le=48),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    now = utcnow()
    deals = get_expiring_deals(db, within_hours=within_hours, now=now)
    return {"deals": [deal_to_dict(d, now) for d in deals], "count": len(deals)}


@router.get("/restaurant/{restaurant_id}")
def deals_for_restaurant(restaurant_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    now = utcnow()
    deals = get_deals_for_restaurant(db, restaurant_id, now=now)
    return {"deals": [deal_to_dict(d, now) for d in deals], "count": len(deals)}


class SubmitDealRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1, max_length=128)
    restaurant_name: str = Field(..., min_length=1, max_length=256)
    title: str = Field(..., max_length=256)
    deal_price: float = Field(..., ge=0)
    original_price: float | None = Field(None, ge=0)
    description: str | None = None
    deal_type: DealType = DealType.DAILY_SPECIAL
    valid_days: int = Field(ALL_DAYS, ge=0, le=ALL_DAYS)
    start_time: str | None = Field(None, pattern=_HH_MM)
    end_time: str | None = Field(None, pattern=_HH_MM)
    valid_until: datetime | None = None
    submitted_by: str | None = Field(None, max_length=128)


@router.post("")
def post_deal(body: SubmitDealRequest, db: Session = Depends(get_db)) -> dict[str, Any]:
    result = submit_deal(db, DealSubmission(**body.model_dump()))
    if not result.ok:
        raise rejection_to_http(result.reason)
    return {"ok": True, "deal": deal_to_dict(result.deal)}


@router.get("/{deal_id}")
def get_one_deal(deal_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    deal = get_deal(db, deal_id)
    if deal is None:
        raise rejection_to_http(MSG_DEAL_NOT_FOUND)
    return deal_to_dict(deal)


def _vote_response(db: Session, deal_id: str, applied: bool) -> dict[str, Any]:
    if not applied:
        raise rejection_to_http(MSG_DEAL_NOT_FOUND)
    deal = get_deal(db, deal_id)
    return {"ok": True, "upvotes": deal.upvotes, "downvotes": deal.downvotes, "report_count": deal.report_count}


@router.post("/{deal_id}/upvote")
def upvote(deal_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    return _vote_response(db, deal_id, upvote_deal(db, deal_id))


@router.post("/{deal_id}/downvote")
def downvote(deal_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    return _vote_response(db, deal_id, downvote_deal(db, deal_id))


@router.post("/{deal_id}/report")
def report(deal_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    return _vote_response(db, deal_id, report_deal(db, deal_id))
