import pytest

from cheapeats.services.areas import cheap_areas, grid_cell
from cheapeats.services.filters import PriceFilterMode, matches_price_filter
from cheapeats.services.types import LatLng, LatLngBounds

VIEW = LatLngBounds(LatLng(43.60, -79.50), LatLng(43.80, -79.30))

# Three points inside one 0.003-degree cell
SAME_CELL = [(43.6705, -79.3855), (43.6706, -79.3856), (43.6707, -79.3857)]


def _cluster(make_restaurant, prices, coords=SAME_CELL):
    return [
        make_restaurant(f"r{i}", lat=lat, lng=lng, average_price=price)
        for i, ((lat, lng), price) in enumerate(zip(coords, prices))
    ]


def test_points_share_a_cell():
    assert len({grid_cell(LatLng(lat, lng)) for lat, lng in SAME_CELL}) == 1


def test_fewer_than_three_gives_no_hints(make_restaurant):
    assert cheap_areas(_cluster(make_restaurant, [10.0, 10.0]), VIEW) == []
    assert cheap_areas([], VIEW) == []


def test_three_in_one_cell_gives_a_hint(make_restaurant):
    hints = cheap_areas(_cluster(make_restaurant, [9.5, 10.0, 10.5]), VIEW)
    assert len(hints) == 1
    hint = hints[0]
    assert hint.restaurant_count == 3
    assert hint.avg_price == pytest.approx(10.0)
    assert hint.label == "3 spots ~$10"
    assert hint.radius == 300.0
    assert hint.center.latitude == pytest.approx(43.6706)
    assert hint.center.longitude == pytest.approx(-79.3856)


def test_label_truncates_average(make_restaurant):
    hints = cheap_areas(_cluster(make_restaurant, [10.0, 11.0, 12.9]), VIEW)
    assert hints[0].label == "3 spots ~$11"


def test_missing_prices_use_default(make_restaurant):
    hints = cheap_areas(_cluster(make_restaurant, [None, None, None]), VIEW)
    assert hints[0].avg_price == 12.0
    assert hints[0].label == "3 spots ~$12"


def test_spread_out_restaurants_give_no_hints(make_restaurant):
    coords = [(43.6705, -79.3855), (43.6805, -79.3955), (43.6905, -79.4055)]
    assert cheap_areas(_cluster(make_restaurant, [10.0, 10.0, 10.0], coords), VIEW) == []


def test_out_of_view_restaurants_ignored(make_restaurant):
    small_view = LatLngBounds(LatLng(43.6700, -79.3860), LatLng(43.6706, -79.3850))
    assert cheap_areas(_cluster(make_restaurant, [10.0, 10.0, 10.0]), small_view) == []


def test_expensive_restaurants_ignored(make_restaurant):
    assert cheap_areas(_cluster(make_restaurant, [10.0, 10.0, 25.0]), VIEW) == []


def test_flexible_default_versus_strict(make_restaurant):
    restaurants = _cluster(make_restaurant, [10.0, 16.0, 16.5])
    assert len(cheap_areas(restaurants, VIEW)) == 1
    strict = cheap_areas(restaurants, VIEW, is_cheap=lambda r: matches_price_filter(r, PriceFilterMode.STRICT))
    assert strict == []


def test_two_cells_two_hints(make_restaurant):
    coords = SAME_CELL + [(43.7105, -79.4255), (43.7106, -79.4256), (43.7107, -79.4257)]
    restaurants = _cluster(make_restaurant, [10.0] * 6, coords)
    hints = cheap_areas(restaurants, VIEW)
    assert sorted(h.restaurant_count for h in hints) == [3, 3]


def test_bounds_across_antimeridian():
    bounds = LatLngBounds(LatLng(-10.0, 170.0), LatLng(10.0, -170.0))
    assert bounds.contains(LatLng(0.0, 179.0))
    assert bounds.contains(LatLng(0.0, -179.0))
    assert not bounds.contains(LatLng(0.0, 0.0))


def test_grid_cell_floors_negative_coordinates():
    assert grid_cell(LatLng(0.001, -0.001)) == (0, -1)
    assert grid_cell(LatLng(-0.001, 0.001)) == (-1, 0)
    assert grid_cell(LatLng(0.0, 0.0)) == (0, 0)
    # Toronto: both longitudes sit in the same negative cell
    assert grid_cell(LatLng(43.6705, -79.3855))[1] == grid_cell(LatLng(43.6707, -79.3857))[1] < 0


def test_cluster_straddling_zero_longitude_does_not_merge(make_restaurant):
    view = LatLngBounds(LatLng(-1.0, -1.0), LatLng(1.0, 1.0))
    coords = [(0.0010, -0.0010), (0.0011, -0.0005), (0.0012, 0.0010)]
    assert cheap_areas(_cluster(make_restaurant, [10.0, 10.0, 10.0], coords), view) == []


def test_cluster_west_of_zero_longitude_still_groups(make_restaurant):
    view = LatLngBounds(LatLng(-1.0, -1.0), LatLng(1.0, 1.0))
    coords = [(0.0010, -0.0010), (0.0011, -0.0005), (0.0012, -0.0020)]
    hints = cheap_areas(_cluster(make_restaurant, [10.0, 10.0, 10.0], coords), view)
    assert [h.restaurant_count for h in hints] == [3]
