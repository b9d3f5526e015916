"""
Pytest fixtures for the CheapEats backend.

Each test gets its own file-backed SQLite database under tmp_path, so worker threads
(thumbnail fetches, orphan sweep) open real connections to the same data.
"""
from datetime import datetime, timedelta, timezone

import pytest
from PIL import Image
from sqlalchemy.orm import sessionmaker

import cheapeats.models  # noqa: F401  (registers tables on Base)
from cheapeats.db.base import Base
from cheapeats.db.session import make_engine
from cheapeats.services.cache.connectivity import StaticConnectivityMonitor
from cheapeats.services.cache.store import RestaurantCacheStore
from cheapeats.services.offline import OfflineManager
from cheapeats.services.types import LatLng, PriceSource, Restaurant

# Near Bloor-Yonge
TORONTO = LatLng(43.6700, -79.3860)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeImageFetcher:
    """Returns a solid image larger than the thumbnail box; URLs containing 'fail' raise."""

    def __init__(self, width: int = 640, height: int = 480) -> None:
        self.width = width
        self.height = height
        self.calls: list[str] = []

    def fetch(self, url: str, size: int) -> Image.Image:
        self.calls.append(url)
        if "fail" in url:
            raise OSError(f"cannot fetch {url}")
        img = Image.new("RGB", (self.width, self.height), color=(200, 80, 40))
        img.thumbnail((size, size))
        return img


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 21, 16, 0, tzinfo=timezone.utc))


@pytest.fixture
def image_fetcher():
    return FakeImageFetcher()


@pytest.fixture
def thumbnail_dir(tmp_path):
    return tmp_path / "thumbnails"


@pytest.fixture
def store(session_factory, thumbnail_dir, image_fetcher, clock):
    s = RestaurantCacheStore(session_factory, thumbnail_dir, image_fetcher=image_fetcher, clock=clock)
    yield s
    s.shutdown(wait=True)


@pytest.fixture
def monitor():
    return StaticConnectivityMonitor(online=True, unmetered=True)


@pytest.fixture
def manager(store, monitor):
    m = OfflineManager(store, monitor, cache_images_on_wifi=True)
    m.start()
    yield m
    m.release()


@pytest.fixture
def make_restaurant():
    def _make(
        rid: str,
        *,
        lat: float = TORONTO.latitude,
        lng: float = TORONTO.longitude,
        average_price: float | None = 10.0,
        **kwargs,
    ) -> Restaurant:
        fields = dict(
            id=rid,
            name=f"Restaurant {rid}",
            cuisine="Ramen",
            price_level=1,
            rating=4.2,
            address="1 Yonge St",
            location=LatLng(lat, lng),
            average_price=average_price,
            price_source=PriceSource.API_VERIFIED,
        )
        fields.update(kwargs)
        return Restaurant(**fields)

    return _make
