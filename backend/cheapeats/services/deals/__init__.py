"""
Deals: weekly-schedule evaluation (schedule) and persistence (repository).
"""
from cheapeats.services.deals.repository import (
    DealSubmission,
    DealSubmitResult,
    cleanup_expired_deals,
    get_active_deals_today,
    get_expiring_deals,
    submit_deal,
)
from cheapeats.services.deals.schedule import is_active_now, time_remaining_text, valid_days_text

__all__ = [
    "DealSubmission",
    "DealSubmitResult",
    "cleanup_expired_deals",
    "get_active_deals_today",
    "get_expiring_deals",
    "submit_deal",
    "is_active_now",
    "time_remaining_text",
    "valid_days_text",
]
