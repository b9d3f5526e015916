"""
Periodic maintenance: offline cache cleanup, view-history retention, expired deals.
Each job opens its own session, logs and rolls back on failure, and never raises into
the scheduler.
"""
import logging

from cheapeats.db.session import SessionLocal
from cheapeats.services.deals.repository import cleanup_expired_deals
from cheapeats.services.offline import OfflineManager
from cheapeats.services.repeat_protection import cleanup as cleanup_view_history

logger = logging.getLogger(__name__)


def run_cache_cleanup_job(manager: OfflineManager) -> None:
    """Age out and trim the restaurant cache; refreshes the manager's stats."""
    try:
        result = manager.cleanup_old_data()
        logger.info("Cache cleanup job done: %s", result)
    except Exception as e:
        logger.exception("Cache cleanup job failed: %s", e)


def run_view_history_cleanup_job(session_factory=SessionLocal) -> None:
    db = session_factory()
    try:
        n = cleanup_view_history(db)
        logger.info("View history cleanup job removed %s entries", n)
    except Exception as e:
        logger.exception("View history cleanup job failed: %s", e)
        db.rollback()
    finally:
        db.close()


def run_expired_deals_cleanup_job(session_factory=SessionLocal) -> None:
    db = session_factory()
    try:
        n = cleanup_expired_deals(db)
        logger.info("Expired deals cleanup job removed %s deals", n)
    except Exception as e:
        logger.exception("Expired deals cleanup job failed: %s", e)
        db.rollback()
    finally:
        db.close()
