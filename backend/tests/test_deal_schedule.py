from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cheapeats.models.deal import Deal
from cheapeats.services.deals.schedule import (
    ALL_DAYS,
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    WEEKDAYS,
    WEEKENDS,
    create_days_mask,
    is_active_now,
    time_remaining_text,
    today_bitmask,
    valid_days_text,
)

TZ = ZoneInfo("America/Toronto")
# Wednesday lunch in Toronto
WEDNESDAY_NOON = datetime(2026, 10, 21, 12, 30, tzinfo=TZ)


def _deal(**kwargs) -> Deal:
    fields = dict(
        restaurant_id="r1",
        restaurant_name="Pho Place",
        title="Lunch special",
        deal_price=9.99,
        valid_days=ALL_DAYS,
        start_time=None,
        end_time=None,
        valid_from=None,
        valid_until=None,
    )
    fields.update(kwargs)
    return Deal(**fields)


def test_day_constants():
    assert (MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY) == (1, 2, 4, 8, 16, 32, 64)
    assert WEEKDAYS == 31
    assert WEEKENDS == 96
    assert ALL_DAYS == 127
    assert create_days_mask(MONDAY, WEDNESDAY, FRIDAY) == 21
    assert create_days_mask() == 0


def test_today_bitmask_uses_local_weekday():
    assert today_bitmask(WEDNESDAY_NOON, TZ) == WEDNESDAY
    assert today_bitmask(datetime(2026, 10, 18, 9, 0, tzinfo=TZ), TZ) == SUNDAY
    # 02:00 UTC Thursday is still Wednesday evening in Toronto
    assert today_bitmask(datetime(2026, 10, 22, 2, 0, tzinfo=timezone.utc), TZ) == WEDNESDAY


@pytest.mark.parametrize(
    "start_time,end_time,valid_days",
    [(None, None, ALL_DAYS), ("00:00", "23:59", ALL_DAYS), ("11:00", "14:00", WEDNESDAY), (None, None, 0)],
)
def test_not_active_after_valid_until(start_time, end_time, valid_days):
    deal = _deal(
        start_time=start_time,
        end_time=end_time,
        valid_days=valid_days,
        valid_until=WEDNESDAY_NOON - timedelta(minutes=1),
    )
    assert not is_active_now(deal, WEDNESDAY_NOON, TZ)


@pytest.mark.parametrize(
    "start_time,end_time,valid_days",
    [(None, None, ALL_DAYS), ("00:00", "23:59", ALL_DAYS), ("11:00", "14:00", WEDNESDAY)],
)
def test_not_active_before_valid_from(start_time, end_time, valid_days):
    deal = _deal(
        start_time=start_time,
        end_time=end_time,
        valid_days=valid_days,
        valid_from=WEDNESDAY_NOON + timedelta(hours=1),
    )
    assert not is_active_now(deal, WEDNESDAY_NOON, TZ)


def test_active_inside_date_window():
    deal = _deal(
        valid_from=WEDNESDAY_NOON - timedelta(days=1),
        valid_until=WEDNESDAY_NOON + timedelta(days=1),
    )
    assert is_active_now(deal, WEDNESDAY_NOON, TZ)


@pytest.mark.parametrize("start_time,end_time", [(None, None), ("00:00", "23:59"), ("12:00", "13:00")])
def test_tuesday_thursday_deal_inactive_on_wednesday(start_time, end_time):
    deal = _deal(valid_days=TUESDAY | THURSDAY, start_time=start_time, end_time=end_time)
    assert deal.valid_days == 10
    assert not is_active_now(deal, WEDNESDAY_NOON, TZ)


def test_wednesday_deal_active_on_wednesday():
    assert is_active_now(_deal(valid_days=WEDNESDAY | FRIDAY), WEDNESDAY_NOON, TZ)


def test_zero_mask_means_every_day():
    assert is_active_now(_deal(valid_days=0), WEDNESDAY_NOON, TZ)
    assert is_active_now(_deal(valid_days=0), datetime(2026, 10, 18, 12, 0, tzinfo=TZ), TZ)


def test_time_of_day_window():
    assert is_active_now(_deal(start_time="11:00", end_time="14:00"), WEDNESDAY_NOON, TZ)
    assert is_active_now(_deal(start_time="12:30", end_time="12:30"), WEDNESDAY_NOON, TZ)
    assert not is_active_now(_deal(start_time="13:00", end_time="14:00"), WEDNESDAY_NOON, TZ)
    assert not is_active_now(_deal(start_time="09:00", end_time="12:29"), WEDNESDAY_NOON, TZ)


def test_time_window_needs_both_ends():
    assert is_active_now(_deal(start_time="13:00"), WEDNESDAY_NOON, TZ)
    assert is_active_now(_deal(end_time="11:00"), WEDNESDAY_NOON, TZ)


def test_naive_valid_until_is_treated_as_utc():
    now_utc = WEDNESDAY_NOON.astimezone(timezone.utc)
    naive_past = (now_utc - timedelta(minutes=5)).replace(tzinfo=None)
    assert not is_active_now(_deal(valid_until=naive_past), WEDNESDAY_NOON, TZ)


def test_valid_days_text():
    assert valid_days_text(ALL_DAYS) == "Every day"
    assert valid_days_text(0) == "Every day"
    assert valid_days_text(WEEKDAYS) == "Weekdays"
    assert valid_days_text(WEEKENDS) == "Weekends"
    assert valid_days_text(create_days_mask(MONDAY, WEDNESDAY, FRIDAY)) == "Mon, Wed, Fri"
    assert valid_days_text(SUNDAY | MONDAY) == "Mon, Sun"
    assert valid_days_text(TUESDAY) == "Tue"


def test_time_remaining_none_without_end():
    assert time_remaining_text(_deal(), WEDNESDAY_NOON, TZ) is None


def test_time_remaining_ends_tomorrow():
    deal = _deal(valid_until=WEDNESDAY_NOON + timedelta(hours=30))
    assert time_remaining_text(deal, WEDNESDAY_NOON, TZ) == "Ends tomorrow"


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(hours=5), "Ends in 5hr"),
        (timedelta(hours=5, minutes=59), "Ends in 5hr"),
        (timedelta(hours=23, minutes=59), "Ends in 23hr"),
        (timedelta(hours=72), None),
        (timedelta(minutes=30), None),
    ],
)
def test_time_remaining_from_valid_until(delta, expected):
    deal = _deal(valid_until=WEDNESDAY_NOON + delta)
    assert time_remaining_text(deal, WEDNESDAY_NOON, TZ) == expected


@pytest.mark.parametrize(
    "end_time,expected",
    [
        ("13:00", "Ends in 30min"),
        ("14:00", "Ends in 1hr 30min"),
        ("15:00", "Until 15:00"),
        ("12:00", None),
        ("12:30", None),
    ],
)
def test_time_remaining_from_end_time(end_time, expected):
    deal = _deal(end_time=end_time)
    assert time_remaining_text(deal, WEDNESDAY_NOON, TZ) == expected


def test_time_remaining_inactive_deal_falls_back_to_valid_until():
    deal = _deal(
        valid_days=TUESDAY,
        end_time="14:00",
        valid_until=WEDNESDAY_NOON + timedelta(hours=4),
    )
    assert time_remaining_text(deal, WEDNESDAY_NOON, TZ) == "Ends in 4hr"
