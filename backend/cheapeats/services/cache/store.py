"""
Restaurant cache store: bounded local copy of restaurants from live results, plus thumbnails.

Rows are written synchronously by the caller (write-through). Thumbnails are fetched on a
worker pool after the write returns; a thumbnail task only ever sets thumbnail_path on its
own row and does nothing if that row was evicted meanwhile.

Ceilings:
  - count: rows beyond MAX_CACHED_RESTAURANTS are evicted least-recently-accessed first
    (older cached_at breaks ties). Checked after every cache_results and in cleanup_old_data.
  - bytes: in cleanup_old_data, while thumbnail files exceed MAX_CACHE_SIZE_MB, the
    least-recently-accessed row with a thumbnail loses it (file deleted, path cleared).
    The row stays.
"""
import logging
import shutil
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable

from sqlalchemy import and_
from sqlalchemy.orm import Session

from cheapeats.core.cache_config import THUMBNAIL_WORKERS
from cheapeats.core.constants import (
    CACHE_SIZE_CEILING_BYTES,
    CHEAP_PRICE_CEILING,
    CHEAPEST_READ_LIMIT,
    MAX_CACHE_AGE_DAYS,
    MAX_CACHED_RESTAURANTS,
    NEARBY_LNG_CORRECTION,
    NEARBY_RADIUS_SQUARED,
    NEARBY_READ_LIMIT,
    RECENT_READ_LIMIT,
    THUMBNAIL_SIZE,
)
from cheapeats.core.timeutil import as_utc, utcnow
from cheapeats.models.cached_restaurant import CachedRestaurant
from cheapeats.services.cache.thumbnails import (
    ImageFetcher,
    is_safe_file_stem,
    save_thumbnail,
    thumbnail_path_for,
)
from cheapeats.services.types import CacheStats, LatLng, Restaurant

logger = logging.getLogger(__name__)


class RestaurantCacheStore:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        thumbnail_dir: str | Path,
        image_fetcher: ImageFetcher | None = None,
        clock: Callable[[], datetime] = utcnow,
        executor: ThreadPoolExecutor | None = None,
        *,
        max_restaurants: int = MAX_CACHED_RESTAURANTS,
        max_cache_bytes: int = CACHE_SIZE_CEILING_BYTES,
        max_age_days: int = MAX_CACHE_AGE_DAYS,
        thumbnail_size: int = THUMBNAIL_SIZE,
    ) -> None:
        self._session_factory = session_factory
        self._thumbnail_dir = Path(thumbnail_dir)
        self._image_fetcher = image_fetcher
        self._clock = clock
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=THUMBNAIL_WORKERS,
            thread_name_prefix="cache_worker",
        )
        self._max_restaurants = max_restaurants
        self._max_cache_bytes = max_cache_bytes
        self._max_age_days = max_age_days
        self._thumbnail_size = thumbnail_size
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

    @property
    def thumbnail_dir(self) -> Path:
        return self._thumbnail_dir

    def _now(self) -> datetime:
        return as_utc(self._clock())

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def cache_results(
        self,
        restaurants: Iterable[Restaurant],
        user_location: LatLng | None = None,
        prefetch_thumbnails: bool = False,
    ) -> int:
        """
        Upsert one row per restaurant and enforce the count ceiling. Returns the number of
        rows written. Thumbnail fetches, if requested, are queued and not waited on.
        """
        # Last one wins for duplicate ids within a batch
        latest = {r.id: r for r in restaurants}
        if not latest:
            return 0
        now = self._now()
        db = self._session_factory()
        try:
            existing = {
                row.id: row
                for row in db.query(CachedRestaurant).filter(CachedRestaurant.id.in_(list(latest))).all()
            }
            for r in latest.values():
                row = existing.get(r.id)
                if row is None:
                    db.add(CachedRestaurant.from_restaurant(r, user_location, now))
                else:
                    # UPDATE only the snapshot columns; a thumbnail committed meanwhile survives
                    row.update_from(r, user_location, now)
            db.commit()
            evicted = self._enforce_count_ceiling(db)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Cached %s restaurants (evicted %s)", len(latest), evicted)

        if prefetch_thumbnails and self._image_fetcher is not None:
            for r in latest.values():
                if r.image_url and is_safe_file_stem(r.id):
                    self._submit(self._fetch_thumbnail, r.id, r.image_url)
        return len(latest)

    def record_access(self, restaurant_id: str) -> bool:
        db = self._session_factory()
        try:
            n = (
                db.query(CachedRestaurant)
                .filter(CachedRestaurant.id == restaurant_id)
                .update({CachedRestaurant.last_accessed_at: self._now()}, synchronize_session=False)
            )
            db.commit()
            return n > 0
        finally:
            db.close()

    # -------------------------------------------------------------------------
    # Reads (local only, never the network)
    # -------------------------------------------------------------------------

    def get_cached(
        self,
        user_location: LatLng | None = None,
        predicate: Callable[[Restaurant], bool] | None = None,
    ) -> list[Restaurant]:
        """
        With a location: rows inside a small ellipse around it (longitude scaled for Toronto's
        latitude), best rated first, up to NEARBY_READ_LIMIT. Without: most recently accessed,
        up to RECENT_READ_LIMIT.
        """
        db = self._session_factory()
        try:
            q = db.query(CachedRestaurant)
            if user_location is not None:
                lat, lng = user_location.latitude, user_location.longitude
                dlat = NEARBY_RADIUS_SQUARED ** 0.5
                dlng = dlat / NEARBY_LNG_CORRECTION
                lat_diff = CachedRestaurant.latitude - lat
                lng_diff = (CachedRestaurant.longitude - lng) * NEARBY_LNG_CORRECTION
                q = (
                    q.filter(
                        # Box first so the lat/lng index does the coarse cut
                        CachedRestaurant.latitude.between(lat - dlat, lat + dlat),
                        CachedRestaurant.longitude.between(lng - dlng, lng + dlng),
                        lat_diff * lat_diff + lng_diff * lng_diff < NEARBY_RADIUS_SQUARED,
                    )
                    .order_by(CachedRestaurant.rating.desc())
                    .limit(NEARBY_READ_LIMIT)
                )
            else:
                q = q.order_by(CachedRestaurant.last_accessed_at.desc()).limit(RECENT_READ_LIMIT)
            restaurants = [row.to_restaurant() for row in q.all()]
        finally:
            db.close()
        if predicate is not None:
            restaurants = [r for r in restaurants if predicate(r)]
        return restaurants

    def get_cached_restaurant(self, restaurant_id: str) -> Restaurant | None:
        db = self._session_factory()
        try:
            row = db.query(CachedRestaurant).filter(CachedRestaurant.id == restaurant_id).first()
            return row.to_restaurant() if row else None
        finally:
            db.close()

    def get_thumbnail_file(self, restaurant_id: str) -> Path | None:
        """The cached thumbnail for a row, if the row has one and the file is still on disk."""
        r = self.get_cached_restaurant(restaurant_id)
        if r is None or not r.thumbnail_path:
            return None
        path = Path(r.thumbnail_path)
        return path if path.is_file() else None

    def get_cheapest_cached(self, limit: int = CHEAPEST_READ_LIMIT) -> list[Restaurant]:
        db = self._session_factory()
        try:
            rows = (
                db.query(CachedRestaurant)
                .filter(CachedRestaurant.average_price < CHEAP_PRICE_CEILING)
                .order_by(CachedRestaurant.average_price.asc())
                .limit(limit)
                .all()
            )
            return [row.to_restaurant() for row in rows]
        finally:
            db.close()

    def stats(self) -> CacheStats:
        db = self._session_factory()
        try:
            count = db.query(CachedRestaurant).count()
        finally:
            db.close()
        return CacheStats(restaurant_count=count, image_size_bytes=self._thumbnail_bytes())

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def cleanup_old_data(self) -> dict:
        """
        Age out rows older than max_age_days, enforce the count ceiling, sweep orphaned
        thumbnail files, then enforce the byte ceiling. Returns what was removed.
        """
        cutoff = self._now() - timedelta(days=self._max_age_days)
        db = self._session_factory()
        try:
            stale = (
                db.query(CachedRestaurant.id, CachedRestaurant.thumbnail_path)
                .filter(CachedRestaurant.cached_at < cutoff)
                .all()
            )
            if stale:
                db.query(CachedRestaurant).filter(
                    CachedRestaurant.id.in_([s.id for s in stale])
                ).delete(synchronize_session=False)
                db.commit()
            evicted = self._enforce_count_ceiling(db)
            ids_snapshot = {r[0] for r in db.query(CachedRestaurant.id).all()}
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        orphans = self._submit(self._sweep_orphans, ids_snapshot).result()
        thumbnails_dropped = self._enforce_size_ceiling()
        result = {
            "expired": len(stale),
            "evicted": evicted,
            "orphans_removed": orphans,
            "thumbnails_dropped": thumbnails_dropped,
        }
        logger.info("Cache cleanup: %s", result)
        return result

    def clear_cache(self) -> None:
        db = self._session_factory()
        try:
            db.query(CachedRestaurant).delete(synchronize_session=False)
            db.commit()
        finally:
            db.close()
        try:
            shutil.rmtree(self._thumbnail_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove thumbnail dir %s: %s", self._thumbnail_dir, e, exc_info=True)

    def _enforce_count_ceiling(self, db: Session) -> int:
        excess = db.query(CachedRestaurant).count() - self._max_restaurants
        if excess <= 0:
            return 0
        victims = (
            db.query(CachedRestaurant.id, CachedRestaurant.thumbnail_path)
            .order_by(CachedRestaurant.last_accessed_at.asc(), CachedRestaurant.cached_at.asc())
            .limit(excess)
            .all()
        )
        db.query(CachedRestaurant).filter(
            CachedRestaurant.id.in_([v.id for v in victims])
        ).delete(synchronize_session=False)
        db.commit()
        for v in victims:
            self._unlink(v.thumbnail_path)
        logger.info("Evicted %s cached restaurants over the %s ceiling", len(victims), self._max_restaurants)
        return len(victims)

    def _enforce_size_ceiling(self) -> int:
        total = self._thumbnail_bytes()
        if total <= self._max_cache_bytes:
            return 0
        dropped = 0
        db = self._session_factory()
        try:
            rows = (
                db.query(CachedRestaurant.id, CachedRestaurant.thumbnail_path)
                .filter(CachedRestaurant.thumbnail_path.isnot(None))
                .order_by(CachedRestaurant.last_accessed_at.asc(), CachedRestaurant.cached_at.asc())
                .all()
            )
            for row in rows:
                if total <= self._max_cache_bytes:
                    break
                total -= self._file_size(row.thumbnail_path)
                self._unlink(row.thumbnail_path)
                db.query(CachedRestaurant).filter(
                    and_(CachedRestaurant.id == row.id, CachedRestaurant.thumbnail_path == row.thumbnail_path)
                ).update({CachedRestaurant.thumbnail_path: None}, synchronize_session=False)
                dropped += 1
            db.commit()
        finally:
            db.close()
        if dropped:
            logger.info("Dropped %s thumbnails to stay under %s bytes", dropped, self._max_cache_bytes)
        return dropped

    def _sweep_orphans(self, ids_snapshot: set[str]) -> int:
        """Delete thumbnail files whose stem is not a cached id. The id set is taken once, up front."""
        if not self._thumbnail_dir.is_dir():
            return 0
        removed = 0
        for path in self._thumbnail_dir.iterdir():
            if path.is_file() and path.stem not in ids_snapshot:
                try:
                    path.unlink()
                    removed += 1
                except OSError as e:
                    logger.warning("Could not delete orphan thumbnail %s: %s", path, e, exc_info=True)
        return removed

    # -------------------------------------------------------------------------
    # Thumbnails
    # -------------------------------------------------------------------------

    def _fetch_thumbnail(self, restaurant_id: str, url: str) -> None:
        try:
            img = self._image_fetcher.fetch(url, self._thumbnail_size)
            path = save_thumbnail(img, thumbnail_path_for(self._thumbnail_dir, restaurant_id))
        except Exception as e:
            logger.warning("Thumbnail fetch failed for %s (%s): %s", restaurant_id, url, e, exc_info=True)
            return
        db = self._session_factory()
        try:
            n = (
                db.query(CachedRestaurant)
                .filter(CachedRestaurant.id == restaurant_id)
                .update({CachedRestaurant.thumbnail_path: str(path)}, synchronize_session=False)
            )
            db.commit()
            if n == 0:
                # Row evicted while we were fetching
                self._unlink(str(path))
        except Exception as e:
            logger.warning("Thumbnail path update failed for %s: %s", restaurant_id, e, exc_info=True)
            db.rollback()
        finally:
            db.close()

    def _thumbnail_bytes(self) -> int:
        if not self._thumbnail_dir.is_dir():
            return 0
        total = 0
        for path in self._thumbnail_dir.iterdir():
            if path.is_file():
                total += self._file_size(str(path))
        return total

    @staticmethod
    def _file_size(path: str | None) -> int:
        if not path:
            return 0
        try:
            return Path(path).stat().st_size
        except OSError:
            return 0

    @staticmethod
    def _unlink(path: str | None) -> None:
        if not path:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete thumbnail %s: %s", path, e, exc_info=True)

    # -------------------------------------------------------------------------
    # Worker pool
    # -------------------------------------------------------------------------

    def _submit(self, fn, *args) -> Future:
        future = self._executor.submit(fn, *args)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._discard_pending)
        return future

    def _discard_pending(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def wait_for_pending(self, timeout: float | None = None) -> bool:
        """Block until queued thumbnail work finishes. True if nothing is left pending."""
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
