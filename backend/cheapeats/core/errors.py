"""
Centralized error handling for deal submission and cache API failures.
Constants and a reusable helper so routes stay thin and new rejection types are easy to add.
"""
from __future__ import annotations

from typing import Callable

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

MSG_DEAL_PRICE_TOO_HIGH = "Deal must be under ${ceiling:.0f}"
MSG_DEAL_TITLE_TOO_SHORT = "Title too short"
MSG_DEAL_NOT_FOUND = "Deal not found"
MSG_RESTAURANT_NOT_CACHED = "Restaurant not in offline cache"
MSG_THUMBNAIL_NOT_CACHED = "Thumbnail not in offline cache"

# HTTP status codes for known error categories
STATUS_UNPROCESSABLE = 422  # submission rejected by validation
STATUS_NOT_FOUND = 404
STATUS_BAD_REQUEST = 400


# ---------------------------------------------------------------------------
# Rejection rules: (predicate, status_code)
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

def _is_validation_rejection(reason: str) -> bool:
    return reason == MSG_DEAL_TITLE_TOO_SHORT or reason.startswith("Deal must be under")


def _is_not_found(reason: str) -> bool:
    return "not found" in reason.lower() or "not in offline cache" in reason.lower()


# List of (predicate, status_code). First match wins.
REJECTION_RULES: list[tuple[Callable[[str], bool], int]] = [
    (_is_validation_rejection, STATUS_UNPROCESSABLE),
    (_is_not_found, STATUS_NOT_FOUND),
]


def rejection_to_http(reason: str) -> HTTPException:
    """
    Map a rejection reason returned by a service into an HTTPException.
    Uses REJECTION_RULES for known reasons; otherwise returns 400 with the reason as detail.
    """
    for predicate, status_code in REJECTION_RULES:
        if predicate(reason):
            return HTTPException(status_code=status_code, detail=reason)
    return HTTPException(status_code=STATUS_BAD_REQUEST, detail=reason)
