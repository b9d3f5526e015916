from cheapeats.services.filters import FilterState, PriceFilterMode, apply_filters, matches_price_filter
from cheapeats.services.types import PriceSource


def test_no_active_filters_returns_everything(make_restaurant):
    restaurants = [make_restaurant("a", average_price=30.0), make_restaurant("b")]
    assert apply_filters(restaurants, FilterState()) == restaurants
    assert apply_filters(restaurants, None) == restaurants
    assert not FilterState().has_active_filters
    assert FilterState(near_ttc=True, open_now=True).active_filter_count == 2


def test_strict_price_mode(make_restaurant):
    strict = PriceFilterMode.STRICT
    assert matches_price_filter(make_restaurant("a", average_price=15.0), strict)
    assert not matches_price_filter(make_restaurant("b", average_price=15.5), strict)
    assert matches_price_filter(
        make_restaurant("c", average_price=12.0, price_source=PriceSource.UNKNOWN), strict
    )
    assert not matches_price_filter(
        make_restaurant("d", average_price=12.0, price_source=PriceSource.ESTIMATED), strict
    )
    assert not matches_price_filter(
        make_restaurant("e", average_price=12.0, price_source=PriceSource.USER_REPORTED), strict
    )
    assert matches_price_filter(make_restaurant("f", average_price=None, price_level=1), strict)
    assert not matches_price_filter(make_restaurant("g", average_price=None, price_level=2), strict)


def test_flexible_price_mode(make_restaurant):
    flexible = PriceFilterMode.FLEXIBLE
    assert matches_price_filter(
        make_restaurant("a", average_price=16.5, price_source=PriceSource.ESTIMATED), flexible
    )
    assert matches_price_filter(make_restaurant("b", average_price=17.0), flexible)
    assert not matches_price_filter(make_restaurant("c", average_price=17.5), flexible)
    assert matches_price_filter(make_restaurant("d", average_price=None, price_level=0), flexible)


def test_filters_are_anded(make_restaurant):
    restaurants = [
        make_restaurant("cheap_ttc_student", near_ttc=True, has_student_discount=True),
        make_restaurant("cheap_ttc", near_ttc=True),
        make_restaurant("pricey_ttc_student", average_price=22.0, near_ttc=True, has_student_discount=True),
    ]
    state = FilterState(under_15=True, near_ttc=True, student_discount=True)
    assert [r.id for r in apply_filters(restaurants, state)] == ["cheap_ttc_student"]


def test_open_now_keeps_unknown_hours(make_restaurant):
    restaurants = [
        make_restaurant("open", is_open_now=True),
        make_restaurant("closed", is_open_now=False),
        make_restaurant("unknown", is_open_now=None),
    ]
    assert [r.id for r in apply_filters(restaurants, FilterState(open_now=True))] == ["open", "unknown"]
