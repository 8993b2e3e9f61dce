from datetime import timedelta

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import async_sessionmaker

from personal_manager.models.entities import ActivityLogEntry, Module
from personal_manager.models.store import RecordStore
from personal_manager.services.activity import (
    clear_all_activities,
    log_activity,
    prune_old_activities,
    recent_activities,
)
from personal_manager.utils.clock import utcnow


async def _count(db) -> int:
    return await db.scalar(select(func.count(ActivityLogEntry.id)))


async def _add_old_entry(db, days: int) -> None:
    db.add(ActivityLogEntry(
        owner_id=1, description="old entry", type="module", status="added",
        created_at=utcnow() - timedelta(days=days),
    ))
    await db.commit()


async def test_log_activity_writes_row(db_session):
    assert await log_activity(db_session, 1, "Added module: Intro IT (IT101)", "module", "added") is True
    rows = await recent_activities(db_session, 1)
    assert len(rows) == 1
    assert rows[0].type == "module"
    assert rows[0].status == "added"


async def test_log_activity_prunes_expired_rows(db_session):
    await _add_old_entry(db_session, days=31)
    await _add_old_entry(db_session, days=5)

    await log_activity(db_session, 1, "Added savings: 1,000 TZS", "savings", "added")
    descriptions = [a.description for a in (await db_session.scalars(select(ActivityLogEntry))).all()]
    assert len(descriptions) == 2
    assert "Added savings: 1,000 TZS" in descriptions


async def test_recent_activities_window_order_and_limit(db_session):
    await _add_old_entry(db_session, days=40)
    for i in range(12):
        db_session.add(ActivityLogEntry(
            owner_id=1, description=f"entry {i}", type="money", status="added",
            created_at=utcnow() - timedelta(minutes=12 - i),
        ))
    await db_session.commit()

    rows = await recent_activities(db_session, 1)
    assert len(rows) == 10
    assert rows[0].description == "entry 11"
    assert all(r.description != "old entry" for r in rows)
    assert await recent_activities(db_session, 2) == []


async def test_prune_without_old_rows_is_noop(db_session):
    await log_activity(db_session, 1, "Deleted module", "module", "deleted")
    assert await prune_old_activities(db_session) == 0
    assert await _count(db_session) == 1


async def test_clear_all_logs_the_clear(db_session):
    for _ in range(3):
        await log_activity(db_session, 1, "Deleted journey", "journey", "deleted")

    assert await clear_all_activities(db_session, 1) == 3
    rows = await recent_activities(db_session, 1)
    assert len(rows) == 1
    assert rows[0].description == "Cleared all recent activities"
    assert (rows[0].type, rows[0].status) == ("system", "cleared")


async def test_log_failure_is_reported_not_raised(engine, db_session):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE activities"))

    assert await log_activity(db_session, 1, "Added module: X (X1)", "module", "added") is False


async def test_log_activity_fits_a_single_connection_pool(single_connection_engine):
    factory = async_sessionmaker(bind=single_connection_engine, expire_on_commit=False)
    async with factory() as db:
        # insert() refreshes after commit, so the session is holding the only connection
        module = await RecordStore(db, Module).insert(owner_id=1, code="IT101", name="Intro IT")

        assert await log_activity(db, 1, "Added module: Intro IT (IT101)", "module", "added") is True
        assert module.code == "IT101"
        assert await _count(db) == 1
