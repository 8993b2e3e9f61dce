from __future__ import annotations

"""
personal_manager/services/dashboard.py

Dashboard counters. Each field comes from its own COUNT/SUM query; a failing
query (missing table, broken column) zeroes that field only and the others are
still reported. get_dashboard_stats() itself never raises.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.config import settings
from personal_manager.models.entities import (
    ActivityLogEntry, Appointment, ExamEntry, Journey, MoneyRecord, Module, SavingsEntry,
)
from personal_manager.models.schemas import DashboardStats
from personal_manager.utils.clock import utcnow

log = logging.getLogger(__name__)


def _count(model, *where) -> Select:
    return select(func.count(model.id)).where(*where)


def _total(column, *where) -> Select:
    return select(func.coalesce(func.sum(column), 0)).where(*where)


def stat_queries(owner_id: int, now: Optional[datetime] = None) -> Dict[str, Select]:
    since = (now or utcnow()) - timedelta(days=settings.RECENT_ACTIVITY_DAYS)
    return {
        "module_count": _count(Module, Module.owner_id == owner_id),
        "appointment_count": _count(Appointment, Appointment.owner_id == owner_id, Appointment.status == "upcoming"),
        "appointment_completed": _count(Appointment, Appointment.owner_id == owner_id, Appointment.status == "completed"),
        "money_owed": _total(MoneyRecord.amount, MoneyRecord.owner_id == owner_id, MoneyRecord.status == "pending"),
        "money_returned": _total(MoneyRecord.amount, MoneyRecord.owner_id == owner_id, MoneyRecord.status == "returned"),
        "journey_count": _count(Journey, Journey.owner_id == owner_id),
        "journey_completed": _count(Journey, Journey.owner_id == owner_id, Journey.status == "completed"),
        "savings_total": _total(SavingsEntry.amount, SavingsEntry.owner_id == owner_id),
        "exam_count": _count(ExamEntry, ExamEntry.owner_id == owner_id),
        "recent_activity_count": _count(
            ActivityLogEntry, ActivityLogEntry.owner_id == owner_id, ActivityLogEntry.created_at >= since
        ),
    }


async def _scalar_or_zero(db: AsyncSession, field: str, stmt: Select) -> Any:
    try:
        return (await db.execute(stmt)).scalar() or 0
    except Exception as e:
        log.warning("[dashboard] %s unavailable, reporting 0: %s", field, e)
        try:
            await db.rollback()
        except Exception:
            log.debug("[dashboard] rollback after %s failure also failed", field, exc_info=True)
        return 0


async def get_dashboard_stats(db: AsyncSession, owner_id: int, now: Optional[datetime] = None) -> DashboardStats:
    values: Dict[str, Any] = {}
    for field, stmt in stat_queries(owner_id, now).items():
        values[field] = await _scalar_or_zero(db, field, stmt)
    stats = DashboardStats(**values)
    log.info("[dashboard] stats for owner %s: %s", owner_id, stats.model_dump())
    return stats
