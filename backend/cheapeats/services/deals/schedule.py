"""
Deal schedule: is a deal active at a given instant, and how to describe its window.

- valid_days is a 7-bit mask, one bit per weekday (MONDAY=1 .. SUNDAY=64).
  0 and ALL_DAYS both mean "every day".
- start_time / end_time are zero-padded "HH:MM" strings compared lexicographically,
  which matches numeric order as long as the padding is kept.
- valid_from / valid_until are absolute UTC instants.

Nothing here is stored: activity is recomputed from (deal, now) on every call.
Weekday and time of day are read in settings.schedule_timezone.
"""
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from cheapeats.config import settings
from cheapeats.core.timeutil import as_utc, utcnow

MONDAY = 1
TUESDAY = 2
WEDNESDAY = 4
THURSDAY = 8
FRIDAY = 16
SATURDAY = 32
SUNDAY = 64
WEEKDAYS = MONDAY | TUESDAY | WEDNESDAY | THURSDAY | FRIDAY
WEEKENDS = SATURDAY | SUNDAY
ALL_DAYS = WEEKDAYS | WEEKENDS

# Monday-first, matching datetime.weekday()
_DAY_BITS = (MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY)
_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _zone(tz: tzinfo | None) -> tzinfo:
    return tz or ZoneInfo(settings.schedule_timezone)


def _local(now: datetime, tz: tzinfo | None) -> datetime:
    return as_utc(now).astimezone(_zone(tz))


def today_bitmask(now: datetime | None = None, tz: tzinfo | None = None) -> int:
    """Single-bit mask for now's weekday in the schedule timezone."""
    return _DAY_BITS[_local(now or utcnow(), tz).weekday()]


def create_days_mask(*days: int) -> int:
    mask = 0
    for day in days:
        mask |= day
    return mask


def is_unrestricted(valid_days: int | None) -> bool:
    return not valid_days or valid_days == ALL_DAYS


def is_active_now(deal, now: datetime | None = None, tz: tzinfo | None = None) -> bool:
    """
    True if every constraint on the deal holds at now:
    date window, day of week, then time of day (only when both ends are set).
    """
    now_utc = as_utc(now or utcnow())

    valid_from = as_utc(deal.valid_from)
    valid_until = as_utc(deal.valid_until)
    if valid_from is not None and now_utc < valid_from:
        return False
    if valid_until is not None and now_utc > valid_until:
        return False

    local = now_utc.astimezone(_zone(tz))
    mask = deal.valid_days or 0
    if not is_unrestricted(mask) and (mask & _DAY_BITS[local.weekday()]) == 0:
        return False

    if deal.start_time is not None and deal.end_time is not None:
        current = f"{local.hour:02d}:{local.minute:02d}"
        if current < deal.start_time or current > deal.end_time:
            return False

    return True


def time_remaining_text(deal, now: datetime | None = None, tz: tzinfo | None = None) -> str | None:
    """
    Badge text for a deal that is about to end, or None.
    An end_time already past today yields None; it never wraps to tomorrow.
    Far-off expiries (48h+) get no badge.
    """
    if deal.valid_until is None and deal.end_time is None:
        return None

    now_utc = as_utc(now or utcnow())

    if deal.end_time is not None and is_active_now(deal, now_utc, tz):
        parts = deal.end_time.split(":")
        if len(parts) == 2:
            try:
                local = now_utc.astimezone(_zone(tz))
                end = local.replace(hour=int(parts[0]), minute=int(parts[1]), second=0, microsecond=0)
            except ValueError:
                return None
            minutes = int((end - local).total_seconds() / 60)
            if minutes <= 0:
                return None
            if minutes < 60:
                return f"Ends in {minutes}min"
            if minutes < 120:
                return f"Ends in 1hr {minutes - 60}min"
            return f"Until {deal.end_time}"

    if deal.valid_until is not None:
        hours = int((as_utc(deal.valid_until) - now_utc).total_seconds() / 3600)
        if hours <= 0:
            return None
        if hours < 24:
            return f"Ends in {hours}hr"
        if hours < 48:
            return "Ends tomorrow"
        return None

    return None


def valid_days_text(valid_days: int) -> str:
    if valid_days in (ALL_DAYS, 0):
        return "Every day"
    if valid_days == WEEKDAYS:
        return "Weekdays"
    if valid_days == WEEKENDS:
        return "Weekends"
    return ", ".join(name for bit, name in zip(_DAY_BITS, _DAY_NAMES) if valid_days & bit)
