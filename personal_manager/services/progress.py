from __future__ import annotations

"""
personal_manager/services/progress.py

CA-marks progress:
- one GROUP BY query sums every module's recorded marks for an owner
- each module total is classified into a tier against a fixed 40-mark ceiling
- the overall status is derived from how the tiers are distributed

Everything after the query is pure and can be tested without a database.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.models.entities import MarkEntry, Module
from personal_manager.models.schemas import CaMarksProgress, ModuleProgress
from personal_manager.models.store import run_query

MAX_CA_MARKS = 40
EXCELLENT_FLOOR = 26
GOOD_FLOOR = 21
GOOD_CEILING = 25
# share of good-or-better modules needed for an overall "good"
GOOD_SHARE = 0.6

TIER_COLORS = {
    "excellent": "#28a745",
    "good": "#ffc107",
    "failed": "#dc3545",
}


@dataclass
class ModuleTotals:
    module_id: int
    module_name: str
    module_code: Optional[str]
    total_marks: float
    assessment_count: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_total(total_marks: float) -> str:
    """Tier by raw total. Totals above the ceiling stay excellent; totals between bands fail."""
    if total_marks >= EXCELLENT_FLOOR:
        return "excellent"
    if GOOD_FLOOR <= total_marks <= GOOD_CEILING:
        return "good"
    return "failed"


def module_progress(totals: ModuleTotals) -> ModuleProgress:
    pct = min(totals.total_marks / MAX_CA_MARKS * 100, 100)
    tier = classify_total(totals.total_marks)
    return ModuleProgress(
        module_id=totals.module_id,
        module_name=totals.module_name,
        module_code=totals.module_code,
        total_marks=totals.total_marks,
        assessment_count=totals.assessment_count,
        percentage=round_half_up(pct),
        remaining_marks=max(MAX_CA_MARKS - totals.total_marks, 0),
        status=tier,
        status_color=TIER_COLORS[tier],
    )


def overall_status(excellent: int, good: int, total: int) -> str:
    if total == 0:
        return "failed"
    if excellent == total:
        return "excellent"
    if excellent > 0 or good > 0:
        return "good" if excellent + good >= GOOD_SHARE * total else "failed"
    return "failed"


def build_progress_report(rows: Iterable[ModuleTotals]) -> CaMarksProgress:
    modules: List[ModuleProgress] = [module_progress(r) for r in rows]
    modules.sort(key=lambda m: m.total_marks, reverse=True)

    excellent = sum(1 for m in modules if m.status == "excellent")
    good = sum(1 for m in modules if m.status == "good")
    failed = sum(1 for m in modules if m.status == "failed")
    total = len(modules)

    percentage = round_half_up(sum(m.percentage for m in modules) / total) if total else 0
    status = overall_status(excellent, good, total)
    return CaMarksProgress(
        total_modules=total,
        excellent_modules=excellent,
        good_modules=good,
        failed_modules=failed,
        max_marks_per_module=MAX_CA_MARKS,
        percentage=percentage,
        status=status,
        status_color=TIER_COLORS[status],
        modules=modules,
    )


async def fetch_module_totals(db: AsyncSession, owner_id: int) -> List[ModuleTotals]:
    stmt = (
        select(
            MarkEntry.module_id,
            MarkEntry.module_name,
            Module.code,
            func.sum(MarkEntry.marks).label("total_marks"),
            func.count(MarkEntry.id).label("assessment_count"),
        )
        .outerjoin(Module, Module.id == MarkEntry.module_id)
        .where(MarkEntry.owner_id == owner_id)
        .group_by(MarkEntry.module_id, MarkEntry.module_name, Module.code)
        .order_by(MarkEntry.module_id)
    )
    rows = await run_query(db, stmt)
    return [
        ModuleTotals(
            module_id=r[0],
            module_name=r[1],
            module_code=r[2],
            total_marks=float(r[3] or 0),
            assessment_count=int(r[4] or 0),
        )
        for r in rows
    ]


async def get_ca_marks_progress(db: AsyncSession, owner_id: int) -> CaMarksProgress:
    return build_progress_report(await fetch_module_totals(db, owner_id))
