from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.responses import ok
from personal_manager.deps import get_db, get_owner_id
from personal_manager.models.schemas import ActivityOut, ApiResponse, ClearedActivities, DashboardStats
from personal_manager.services.activity import clear_all_activities, recent_activities
from personal_manager.services.dashboard import get_dashboard_stats

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats", response_model=ApiResponse[DashboardStats])
async def dashboard_stats(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await get_dashboard_stats(db, owner_id))


@router.get("/activities", response_model=ApiResponse[List[ActivityOut]])
async def list_activities(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await recent_activities(db, owner_id))


@router.delete("/activities", response_model=ApiResponse[ClearedActivities])
async def clear_activities(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    cleared = await clear_all_activities(db, owner_id)
    return ok(ClearedActivities(cleared_count=cleared), "Activities cleared successfully")
