from __future__ import annotations

"""
personal_manager/services/activity.py

Activity log: the human-readable audit trail shown on the dashboard.

- log_activity() is best-effort. Callers commit their own records first; the
  logger then releases the caller's connection and writes through its own
  session, so a request holds at most one pooled connection at a time and a
  failed log insert never rolls back the caller's records. Failure is
  reported as a False return instead of raising.
- Rows older than ACTIVITY_RETENTION_DAYS are pruned after every successful
  write; there is no scheduled job.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.config import settings
from personal_manager.core.errors import from_sqlalchemy
from personal_manager.models.entities import ActivityLogEntry
from personal_manager.models.store import run_query
from personal_manager.utils.clock import utcnow

log = logging.getLogger(__name__)


def retention_cutoff(now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) - timedelta(days=settings.ACTIVITY_RETENTION_DAYS)


async def log_activity(
    db: AsyncSession,
    owner_id: int,
    description: str,
    type_: str,
    status: str = "completed",
) -> bool:
    # the caller's connection goes back to the pool before the log session
    # checks one out; close() keeps loaded attributes on the caller's records
    await db.close()
    try:
        async with AsyncSession(db.bind, expire_on_commit=False) as log_db:
            log_db.add(ActivityLogEntry(owner_id=owner_id, description=description, type=type_, status=status))
            await log_db.commit()
            log.info("[activity] %s (%s/%s)", description, type_, status)
            await prune_old_activities(log_db)
    except SQLAlchemyError as e:
        log.warning("[activity] failed to log %r: %s", description, e)
        return False
    return True


async def prune_old_activities(db: AsyncSession, now: Optional[datetime] = None) -> int:
    try:
        result = await db.execute(delete(ActivityLogEntry).where(ActivityLogEntry.created_at < retention_cutoff(now)))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        log.warning("[activity] prune failed: %s", e)
        return 0
    pruned = result.rowcount or 0
    if pruned:
        log.info("[activity] pruned %d entries older than %d days", pruned, settings.ACTIVITY_RETENTION_DAYS)
    return pruned


async def recent_activities(
    db: AsyncSession, owner_id: int, limit: Optional[int] = None, now: Optional[datetime] = None
) -> List[ActivityLogEntry]:
    stmt = (
        select(ActivityLogEntry)
        .where(ActivityLogEntry.owner_id == owner_id, ActivityLogEntry.created_at >= retention_cutoff(now))
        .order_by(ActivityLogEntry.created_at.desc(), ActivityLogEntry.id.desc())
        .limit(limit or settings.ACTIVITY_FEED_LIMIT)
    )
    return [row[0] for row in await run_query(db, stmt)]


async def clear_all_activities(db: AsyncSession, owner_id: int) -> int:
    """Delete every log row, then record the clear itself. Returns rows removed."""
    try:
        result = await db.execute(delete(ActivityLogEntry))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise from_sqlalchemy(e) from e
    cleared = result.rowcount or 0
    await log_activity(db, owner_id, "Cleared all recent activities", "system", "cleared")
    return cleared
