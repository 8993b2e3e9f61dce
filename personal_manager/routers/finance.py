from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.config import settings
from personal_manager.core.errors import NotFoundError
from personal_manager.core.responses import ok
from personal_manager.deps import get_db, get_owner_id
from personal_manager.models.entities import MoneyRecord, SavingsEntry, SchoolFee
from personal_manager.models.schemas import (
    ApiResponse, MoneyIn, MoneyOut, SavingsIn, SavingsOut, SchoolFeeIn, SchoolFeeOut,
)
from personal_manager.models.store import RecordStore
from personal_manager.services.activity import log_activity

router = APIRouter(tags=["finance"])


def _money(amount: float) -> str:
    return f"{amount:,.0f} {settings.CURRENCY}"


# ---------- Money lent / borrowed ----------
@router.get("/money", response_model=ApiResponse[List[MoneyOut]])
async def list_money(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, MoneyRecord).select_all(owner_id, MoneyRecord.borrow_date))


@router.post("/money", response_model=ApiResponse[MoneyOut])
async def add_money(payload: MoneyIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    rec = await RecordStore(db, MoneyRecord).insert(owner_id=owner_id, status="pending", **payload.model_dump())
    await log_activity(db, owner_id, f"Added money record: {rec.person} owes {_money(rec.amount)}", "money", "added")
    return ok(rec, "Money record added successfully")


@router.put("/money/{record_id}", response_model=ApiResponse[MoneyOut])
async def update_money(
    record_id: int, payload: MoneyIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, MoneyRecord)
    if not await store.update(record_id, owner_id, **payload.model_dump()):
        raise NotFoundError("Money record", record_id)
    await log_activity(db, owner_id, f"Updated money record for {payload.person}", "money", "updated")
    return ok(await store.select_by_id(record_id, owner_id), "Money record updated successfully")


@router.put("/money/{record_id}/return", response_model=ApiResponse[MoneyOut])
async def mark_money_returned(
    record_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    # two concurrent calls both succeed; last write wins
    store = RecordStore(db, MoneyRecord)
    if not await store.update(record_id, owner_id, status="returned"):
        raise NotFoundError("Money record", record_id)
    await log_activity(db, owner_id, "Marked money as returned", "money", "returned")
    return ok(await store.select_by_id(record_id, owner_id), "Money marked as returned")


@router.delete("/money/{record_id}", response_model=ApiResponse[None])
async def delete_money(record_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, MoneyRecord).delete(record_id, owner_id):
        raise NotFoundError("Money record", record_id)
    await log_activity(db, owner_id, "Deleted money record", "money", "deleted")
    return ok(None, "Money record deleted successfully")


# ---------- Savings ----------
@router.get("/savings", response_model=ApiResponse[List[SavingsOut]])
async def list_savings(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, SavingsEntry).select_all(owner_id, SavingsEntry.date.desc()))


@router.post("/savings", response_model=ApiResponse[SavingsOut])
async def add_savings(payload: SavingsIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    rec = await RecordStore(db, SavingsEntry).insert(owner_id=owner_id, **payload.model_dump())
    await log_activity(db, owner_id, f"Added savings: {_money(rec.amount)}", "savings", "added")
    return ok(rec, "Savings record added successfully")


@router.put("/savings/{record_id}", response_model=ApiResponse[SavingsOut])
async def update_savings(
    record_id: int, payload: SavingsIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, SavingsEntry)
    if not await store.update(record_id, owner_id, **payload.model_dump()):
        raise NotFoundError("Savings record", record_id)
    await log_activity(db, owner_id, f"Updated savings: {_money(payload.amount)}", "savings", "updated")
    return ok(await store.select_by_id(record_id, owner_id), "Savings record updated successfully")


@router.delete("/savings/{record_id}", response_model=ApiResponse[None])
async def delete_savings(record_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, SavingsEntry).delete(record_id, owner_id):
        raise NotFoundError("Savings record", record_id)
    await log_activity(db, owner_id, "Deleted savings record", "savings", "deleted")
    return ok(None, "Savings record deleted successfully")


# ---------- School fees ----------
def _fee_label(year: int, semester: str, amount: float) -> str:
    return f"Year {year} {semester} - {_money(amount)}"


@router.get("/school-fees", response_model=ApiResponse[List[SchoolFeeOut]])
async def list_school_fees(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, SchoolFee).select_all(owner_id, SchoolFee.year, SchoolFee.semester))


@router.post("/school-fees", response_model=ApiResponse[SchoolFeeOut])
async def add_school_fee(
    payload: SchoolFeeIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    fee = await RecordStore(db, SchoolFee).insert(owner_id=owner_id, **payload.model_dump())
    await log_activity(
        db, owner_id, f"Added school fee payment: {_fee_label(fee.year, fee.semester, fee.amount)}",
        "school-fees", "added",
    )
    return ok(fee, "School fee payment added successfully")


@router.put("/school-fees/{fee_id}", response_model=ApiResponse[SchoolFeeOut])
async def update_school_fee(
    fee_id: int, payload: SchoolFeeIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, SchoolFee)
    if not await store.update(fee_id, owner_id, **payload.model_dump()):
        raise NotFoundError("School fee payment", fee_id)
    await log_activity(
        db, owner_id, f"Updated school fee payment: {_fee_label(payload.year, payload.semester, payload.amount)}",
        "school-fees", "updated",
    )
    return ok(await store.select_by_id(fee_id, owner_id), "School fee payment updated successfully")


@router.delete("/school-fees/{fee_id}", response_model=ApiResponse[None])
async def delete_school_fee(fee_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    store = RecordStore(db, SchoolFee)
    fee = await store.select_by_id(fee_id, owner_id)
    if fee is None or not await store.delete(fee_id, owner_id):
        raise NotFoundError("School fee payment", fee_id)
    await log_activity(
        db, owner_id, f"Deleted school fee payment: {_fee_label(fee.year, fee.semester, fee.amount)}",
        "school-fees", "deleted",
    )
    return ok(None, "School fee payment deleted successfully")
