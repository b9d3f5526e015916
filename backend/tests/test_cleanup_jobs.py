from datetime import timedelta

from cheapeats.core.timeutil import utcnow
from cheapeats.models.deal import Deal
from cheapeats.models.view_history import ViewHistoryEntry, ViewSource
from cheapeats.scheduler.cleanup_jobs import (
    run_cache_cleanup_job,
    run_expired_deals_cleanup_job,
    run_view_history_cleanup_job,
)
from cheapeats.services.repeat_protection import record_view


class BrokenSession:
    def __init__(self):
        self.rolled_back = False
        self.closed = False

    def query(self, *args, **kwargs):
        raise RuntimeError("database went away")

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def test_view_history_job_prunes(db, session_factory):
    record_view(db, "old", ViewSource.SEARCH, now=utcnow() - timedelta(days=10))
    record_view(db, "new", ViewSource.SEARCH)
    run_view_history_cleanup_job(session_factory)
    db.expire_all()
    assert [e.restaurant_id for e in db.query(ViewHistoryEntry).all()] == ["new"]


def test_expired_deals_job(db, session_factory):
    db.add(Deal(restaurant_id="r1", restaurant_name="A", title="Gone deal", deal_price=5.0,
                valid_days=127, valid_until=utcnow() - timedelta(days=1)))
    db.add(Deal(restaurant_id="r1", restaurant_name="A", title="Live deal", deal_price=5.0, valid_days=127))
    db.commit()
    run_expired_deals_cleanup_job(session_factory)
    db.expire_all()
    assert [d.title for d in db.query(Deal).all()] == ["Live deal"]


def test_jobs_roll_back_and_close_on_failure():
    for job in (run_view_history_cleanup_job, run_expired_deals_cleanup_job):
        session = BrokenSession()
        job(lambda: session)
        assert session.rolled_back
        assert session.closed


def test_cache_cleanup_job(manager, clock, make_restaurant):
    manager.cache_results([make_restaurant("old")])
    clock.advance(days=8)
    run_cache_cleanup_job(manager)
    assert manager.cache_stats.value.restaurant_count == 0


def test_cache_cleanup_job_swallows_errors():
    class Exploding:
        def cleanup_old_data(self):
            raise OSError("disk full")

    run_cache_cleanup_job(Exploding())
