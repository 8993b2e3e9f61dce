from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.errors import NotFoundError
from personal_manager.core.responses import ok
from personal_manager.deps import get_db, get_owner_id
from personal_manager.models.entities import ExamEntry, MarkEntry, Module
from personal_manager.models.schemas import (
    ApiResponse, CaMarksProgress, ExamIn, ExamOut, MarkIn, MarkOut, ModuleIn, ModuleOut,
)
from personal_manager.models.store import RecordStore, run_query
from personal_manager.services.activity import log_activity
from personal_manager.services.progress import get_ca_marks_progress

router = APIRouter(tags=["academics"])


# ---------- Modules ----------
@router.get("/modules", response_model=ApiResponse[List[ModuleOut]])
async def list_modules(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, Module).select_all(owner_id, Module.code))


@router.post("/modules", response_model=ApiResponse[ModuleOut])
async def add_module(payload: ModuleIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    m = await RecordStore(db, Module).insert(owner_id=owner_id, **payload.model_dump())
    await log_activity(db, owner_id, f"Added module: {m.name} ({m.code})", "module", "added")
    return ok(m, "Module added successfully")


@router.put("/modules/{module_id}", response_model=ApiResponse[ModuleOut])
async def update_module(
    module_id: int, payload: ModuleIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, Module)
    if not await store.update(module_id, owner_id, **payload.model_dump()):
        raise NotFoundError("Module", module_id)
    await log_activity(db, owner_id, f"Updated module: {payload.name} ({payload.code})", "module", "updated")
    return ok(await store.select_by_id(module_id, owner_id), "Module updated successfully")


@router.delete("/modules/{module_id}", response_model=ApiResponse[None])
async def delete_module(module_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, Module).delete(module_id, owner_id):
        raise NotFoundError("Module", module_id)
    await log_activity(db, owner_id, "Deleted module", "module", "deleted")
    return ok(None, "Module deleted successfully")


# ---------- Exam timetable ----------
@router.get("/timetable", response_model=ApiResponse[List[ExamOut]])
async def list_timetable(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, ExamEntry).select_all(owner_id, ExamEntry.date, ExamEntry.time))


@router.post("/timetable", response_model=ApiResponse[ExamOut])
async def add_exam(payload: ExamIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    e = await RecordStore(db, ExamEntry).insert(owner_id=owner_id, **payload.model_dump())
    await log_activity(
        db, owner_id, f"Added exam: {e.module_name} ({e.module_code}) on {e.date.isoformat()}", "timetable", "added"
    )
    return ok(e, "Timetable entry added successfully")


@router.put("/timetable/{exam_id}", response_model=ApiResponse[ExamOut])
async def update_exam(
    exam_id: int, payload: ExamIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, ExamEntry)
    if not await store.update(exam_id, owner_id, **payload.model_dump()):
        raise NotFoundError("Timetable entry", exam_id)
    await log_activity(
        db, owner_id, f"Updated exam: {payload.module_name} ({payload.module_code})", "timetable", "updated"
    )
    return ok(await store.select_by_id(exam_id, owner_id), "Timetable entry updated successfully")


@router.delete("/timetable/{exam_id}", response_model=ApiResponse[None])
async def delete_exam(exam_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, ExamEntry).delete(exam_id, owner_id):
        raise NotFoundError("Timetable entry", exam_id)
    await log_activity(db, owner_id, "Deleted exam entry", "timetable", "deleted")
    return ok(None, "Timetable entry deleted successfully")


# ---------- CA marks ----------
async def _module_snapshot(db: AsyncSession, module_id: int, owner_id: int) -> dict:
    """Copy of the module fields a mark row keeps, taken at write time."""
    module = await RecordStore(db, Module).select_by_id(module_id, owner_id)
    if module is None:
        raise NotFoundError("Module", module_id)
    return {"module_name": module.name, "lecturer": module.lecturer or "", "code": module.code}


@router.get("/marks", response_model=ApiResponse[List[MarkOut]])
async def list_marks(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    rows = await run_query(
        db,
        select(MarkEntry, Module.code)
        .outerjoin(Module, Module.id == MarkEntry.module_id)
        .where(MarkEntry.owner_id == owner_id)
        .order_by(MarkEntry.date.desc(), MarkEntry.id.desc()),
    )
    out = []
    for mark, code in rows:
        item = MarkOut.model_validate(mark)
        item.module_code = code
        out.append(item)
    return ok(out)


@router.get("/ca-marks-progress", response_model=ApiResponse[CaMarksProgress])
async def ca_marks_progress(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await get_ca_marks_progress(db, owner_id))


@router.post("/marks", response_model=ApiResponse[MarkOut])
async def add_marks(payload: MarkIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    snap = await _module_snapshot(db, payload.module_id, owner_id)
    code = snap.pop("code")
    mark = await RecordStore(db, MarkEntry).insert(owner_id=owner_id, **payload.model_dump(), **snap)
    out = MarkOut.model_validate(mark)
    out.module_code = code
    await log_activity(
        db, owner_id, f"Added marks: {payload.marks:g} for {mark.module_name} ({code})", "marks", "added"
    )
    return ok(out, "Marks added successfully")


@router.put("/marks/{mark_id}", response_model=ApiResponse[MarkOut])
async def update_marks(
    mark_id: int, payload: MarkIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    snap = await _module_snapshot(db, payload.module_id, owner_id)
    code = snap.pop("code")
    store = RecordStore(db, MarkEntry)
    if not await store.update(mark_id, owner_id, **payload.model_dump(), **snap):
        raise NotFoundError("Marks", mark_id)
    out = MarkOut.model_validate(await store.select_by_id(mark_id, owner_id))
    out.module_code = code
    await log_activity(
        db, owner_id, f"Updated marks: {payload.marks:g} for {snap['module_name']} ({code})", "marks", "updated"
    )
    return ok(out, "Marks updated successfully")


@router.delete("/marks/{mark_id}", response_model=ApiResponse[None])
async def delete_marks(mark_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, MarkEntry).delete(mark_id, owner_id):
        raise NotFoundError("Marks", mark_id)
    await log_activity(db, owner_id, "Deleted marks entry", "marks", "deleted")
    return ok(None, "Marks deleted successfully")
