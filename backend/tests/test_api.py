import pytest
from fastapi.testclient import TestClient

from cheapeats.db.session import get_db
from cheapeats.main import app

client = TestClient(app)

LAT, LNG = 43.6700, -79.3860


@pytest.fixture(autouse=True)
def wired_app(manager, session_factory):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.state.offline_manager = manager
    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.clear()


def _restaurant(rid, **kwargs):
    body = {
        "id": rid,
        "name": f"Restaurant {rid}",
        "cuisine": "Thai",
        "price_level": 1,
        "rating": 4.0,
        "address": "100 Bloor St",
        "latitude": LAT,
        "longitude": LNG,
        "average_price": 10.0,
        "price_source": "API_VERIFIED",
    }
    body.update(kwargs)
    return body


def _cache(*restaurants):
    resp = client.post(
        "/cache/restaurants",
        json={"restaurants": list(restaurants), "user_location": {"latitude": LAT, "longitude": LNG}},
    )
    assert resp.status_code == 200
    return resp.json()


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_connectivity():
    assert client.get("/connectivity").json() == {"offline": False, "unmetered": True}


def test_cache_write_and_read_back():
    data = _cache(_restaurant("a", distance=300.0), _restaurant("b", price_source="MYSTERY"))
    assert data["cached"] == 2
    assert data["stats"]["restaurant_count"] == 2

    resp = client.get("/cache/restaurants", params={"lat": LAT, "lng": LNG})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    by_id = {r["id"]: r for r in body["restaurants"]}
    assert by_id["a"]["data_freshness"] == "CACHED"
    assert by_id["a"]["distance"] == 0.0
    assert by_id["b"]["price_source"] == "UNKNOWN"


def test_cached_read_requires_both_coordinates():
    assert client.get("/cache/restaurants", params={"lat": LAT}).status_code == 400


def test_cached_read_with_filters():
    _cache(_restaurant("cheap"), _restaurant("pricey", average_price=25.0), _restaurant("ttc", near_ttc=True))
    ids = [r["id"] for r in client.get("/cache/restaurants", params={"under_15": True}).json()["restaurants"]]
    assert sorted(ids) == ["cheap", "ttc"]
    ids = [r["id"] for r in client.get("/cache/restaurants", params={"near_ttc": True}).json()["restaurants"]]
    assert ids == ["ttc"]


def test_cached_read_excludes_recent_recommendations():
    _cache(_restaurant("A"), _restaurant("B"))
    resp = client.post("/views", json={"restaurant_id": "A", "source": "RECOMMENDATION"})
    assert resp.status_code == 200
    ids = [
        r["id"]
        for r in client.get("/cache/restaurants", params={"exclude_recently_shown": True}).json()["restaurants"]
    ]
    assert ids == ["B"]


def test_get_one_cached_restaurant():
    _cache(_restaurant("a"))
    assert client.get("/cache/restaurants/a").json()["name"] == "Restaurant a"
    assert client.get("/cache/restaurants/missing").status_code == 404


def test_cached_thumbnail_served_by_route(manager):
    _cache(_restaurant("a", image_url="https://img.example.com/a.jpg"), _restaurant("b"))
    assert manager.store.wait_for_pending(timeout=10)

    a = client.get("/cache/restaurants/a").json()
    assert a["image_url"] == "https://img.example.com/a.jpg"
    assert a["thumbnail_url"] == "/cache/restaurants/a/thumbnail"
    assert "thumbnail_path" not in a
    resp = client.get(a["thumbnail_url"])
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.content[:2] == b"\xff\xd8"

    assert client.get("/cache/restaurants/b").json()["thumbnail_url"] is None
    resp = client.get("/cache/restaurants/b/thumbnail")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Thumbnail not in offline cache"


def test_cheapest_cached():
    _cache(_restaurant("a", average_price=12.0), _restaurant("b", average_price=7.0))
    ids = [r["id"] for r in client.get("/cache/restaurants/cheapest").json()["restaurants"]]
    assert ids == ["b", "a"]


def test_record_access():
    _cache(_restaurant("a"))
    assert client.post("/cache/restaurants/a/access").json() == {"ok": True}
    resp = client.post("/cache/restaurants/missing/access")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Restaurant not in offline cache"


def test_stats_cleanup_and_clear():
    _cache(_restaurant("a"))
    assert client.get("/cache/stats").json()["restaurant_count"] == 1
    cleanup = client.post("/cache/cleanup").json()
    assert cleanup["expired"] == 0
    assert cleanup["stats"]["restaurant_count"] == 1
    cleared = client.delete("/cache").json()
    assert cleared["ok"] is True
    assert cleared["stats"] == {"restaurant_count": 0, "image_size_bytes": 0, "formatted_size": "0B"}


def test_views_filter():
    client.post("/views", json={"restaurant_id": "A", "source": "RECOMMENDATION"})
    client.post("/views", json={"restaurant_id": "B", "source": "SEARCH"})
    resp = client.post("/views/filter", json={"restaurants": [_restaurant("A"), _restaurant("B"), _restaurant("C")]})
    assert [r["id"] for r in resp.json()["restaurants"]] == ["B", "C"]


def test_views_rejects_unknown_source():
    assert client.post("/views", json={"restaurant_id": "A", "source": "TELEPATHY"}).status_code == 422


def test_views_recent_and_most_viewed():
    for rid in ("A", "B", "A"):
        client.post("/views", json={"restaurant_id": rid, "source": "SEARCH"})
    assert client.get("/views/recent").json()["count"] == 3
    most = client.get("/views/most-viewed").json()
    assert most["restaurants"][0] == {"restaurant_id": "A", "view_count": 2}
    assert most["total_views"] == 3


def _deal(**kwargs):
    body = {"restaurant_id": "r1", "restaurant_name": "Pho Place", "title": "Small pho + spring roll", "deal_price": 9.5}
    body.update(kwargs)
    return body


def test_submit_and_list_deal():
    resp = client.post("/deals", json=_deal(original_price=13.0))
    assert resp.status_code == 200
    deal = resp.json()["deal"]
    assert deal["source"] == "USER_SUBMITTED"
    assert deal["valid_days_text"] == "Every day"
    assert deal["is_active_now"] is True

    active = client.get("/deals/active").json()
    assert [d["id"] for d in active["deals"]] == [deal["id"]]
    assert client.get("/deals/restaurant/r1").json()["count"] == 1
    assert client.get(f"/deals/{deal['id']}").json()["title"] == "Small pho + spring roll"


def test_submit_deal_rejections():
    resp = client.post("/deals", json=_deal(deal_price=15.0))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Deal must be under $15"
    resp = client.post("/deals", json=_deal(title="Pho"))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Title too short"


def test_submit_deal_validates_time_format():
    assert client.post("/deals", json=_deal(start_time="9am", end_time="11:00")).status_code == 422


def test_deal_votes():
    deal_id = client.post("/deals", json=_deal()).json()["deal"]["id"]
    client.post(f"/deals/{deal_id}/upvote")
    client.post(f"/deals/{deal_id}/upvote")
    body = client.post(f"/deals/{deal_id}/downvote").json()
    assert (body["upvotes"], body["downvotes"]) == (2, 1)
    assert client.post(f"/deals/{deal_id}/report").json()["report_count"] == 1
    assert client.post("/deals/missing/upvote").status_code == 404


def test_expiring_deals_empty():
    client.post("/deals", json=_deal())
    assert client.get("/deals/expiring").json() == {"deals": [], "count": 0}


def test_cheap_areas():
    restaurants = [
        _restaurant("a", latitude=43.6705, longitude=-79.3855, average_price=9.0),
        _restaurant("b", latitude=43.6706, longitude=-79.3856, average_price=10.0),
        _restaurant("c", latitude=43.6707, longitude=-79.3857, average_price=11.0),
    ]
    bounds = {
        "southwest": {"latitude": 43.60, "longitude": -79.50},
        "northeast": {"latitude": 43.80, "longitude": -79.30},
    }
    areas = client.post("/areas/cheap", json={"restaurants": restaurants, "bounds": bounds}).json()["areas"]
    assert len(areas) == 1
    assert areas[0]["label"] == "3 spots ~$10"
    assert areas[0]["restaurant_count"] == 3

    few = client.post("/areas/cheap", json={"restaurants": restaurants[:2], "bounds": bounds}).json()
    assert few == {"areas": []}


def test_cache_config():
    config = client.get("/cache/config").json()
    assert config["max_cached_restaurants"] >= 10
    assert config["thumbnail_size"] >= 32
    assert set(config) >= {"max_age_days", "max_cache_size_mb", "repeat_cooldown_hours"}
