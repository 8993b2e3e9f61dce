from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.errors import NotFoundError
from personal_manager.core.responses import ok
from personal_manager.deps import get_db, get_owner_id
from personal_manager.models.entities import Appointment, Journey
from personal_manager.models.schemas import (
    ApiResponse, AppointmentIn, AppointmentOut, AppointmentStatusIn, JourneyIn, JourneyOut, JourneyStatusIn,
)
from personal_manager.models.store import RecordStore
from personal_manager.services.activity import log_activity

router = APIRouter(tags=["planner"])


# ---------- Appointments ----------
async def _set_appointment_status(db: AsyncSession, owner_id: int, appointment_id: int, status: str) -> Appointment:
    store = RecordStore(db, Appointment)
    if not await store.update(appointment_id, owner_id, status=status):
        raise NotFoundError("Appointment", appointment_id)
    return await store.select_by_id(appointment_id, owner_id)


@router.get("/appointments", response_model=ApiResponse[List[AppointmentOut]])
async def list_appointments(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, Appointment).select_all(owner_id, Appointment.date, Appointment.time))


@router.post("/appointments", response_model=ApiResponse[AppointmentOut])
async def add_appointment(
    payload: AppointmentIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    a = await RecordStore(db, Appointment).insert(owner_id=owner_id, status="upcoming", **payload.model_dump())
    await log_activity(
        db, owner_id, f"Added appointment: {a.name} on {a.date.isoformat()} at {a.time.strftime('%H:%M')}",
        "appointment", "added",
    )
    return ok(a, "Appointment added successfully")


@router.put("/appointments/{appointment_id}", response_model=ApiResponse[AppointmentOut])
async def update_appointment(
    appointment_id: int, payload: AppointmentIn,
    db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id),
):
    store = RecordStore(db, Appointment)
    if not await store.update(appointment_id, owner_id, **payload.model_dump()):
        raise NotFoundError("Appointment", appointment_id)
    await log_activity(db, owner_id, f"Updated appointment: {payload.name}", "appointment", "updated")
    return ok(await store.select_by_id(appointment_id, owner_id), "Appointment updated successfully")


@router.put("/appointments/{appointment_id}/complete", response_model=ApiResponse[AppointmentOut])
async def complete_appointment(
    appointment_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    a = await _set_appointment_status(db, owner_id, appointment_id, "completed")
    await log_activity(db, owner_id, "Completed appointment", "appointment", "completed")
    return ok(a, "Appointment marked as completed")


@router.put("/appointments/{appointment_id}/status", response_model=ApiResponse[AppointmentOut])
async def set_appointment_status(
    appointment_id: int, payload: AppointmentStatusIn,
    db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id),
):
    a = await _set_appointment_status(db, owner_id, appointment_id, payload.status)
    await log_activity(db, owner_id, f"Updated appointment status to {payload.status}", "appointment", "status_updated")
    return ok(a, f"Appointment status updated to {payload.status}")


@router.delete("/appointments/{appointment_id}", response_model=ApiResponse[None])
async def delete_appointment(
    appointment_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    if not await RecordStore(db, Appointment).delete(appointment_id, owner_id):
        raise NotFoundError("Appointment", appointment_id)
    await log_activity(db, owner_id, "Deleted appointment", "appointment", "deleted")
    return ok(None, "Appointment deleted successfully")


# ---------- Journeys ----------
# total_cost is never stored: Journey.total_cost is computed from the two cost
# columns, and JourneyIn has no field for it, so a client-sent total is dropped.
async def _set_journey_status(db: AsyncSession, owner_id: int, journey_id: int, status: str) -> Journey:
    store = RecordStore(db, Journey)
    if not await store.update(journey_id, owner_id, status=status):
        raise NotFoundError("Journey", journey_id)
    return await store.select_by_id(journey_id, owner_id)


@router.get("/journeys", response_model=ApiResponse[List[JourneyOut]])
async def list_journeys(db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    return ok(await RecordStore(db, Journey).select_all(owner_id, Journey.date, Journey.time))


@router.post("/journeys", response_model=ApiResponse[JourneyOut])
async def add_journey(payload: JourneyIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    j = await RecordStore(db, Journey).insert(owner_id=owner_id, **payload.model_dump())
    await log_activity(
        db, owner_id, f"Added journey: {j.journey_from} to {j.journey_to} on {j.date.isoformat()}", "journey", "added"
    )
    return ok(j, "Journey added successfully")


@router.put("/journeys/{journey_id}", response_model=ApiResponse[JourneyOut])
async def update_journey(
    journey_id: int, payload: JourneyIn, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)
):
    store = RecordStore(db, Journey)
    fields = payload.model_dump(exclude={"status"})
    if not await store.update(journey_id, owner_id, **fields):
        raise NotFoundError("Journey", journey_id)
    await log_activity(
        db, owner_id, f"Updated journey: {payload.journey_from} to {payload.journey_to}", "journey", "updated"
    )
    return ok(await store.select_by_id(journey_id, owner_id), "Journey updated successfully")


@router.put("/journeys/{journey_id}/complete", response_model=ApiResponse[JourneyOut])
async def complete_journey(journey_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    j = await _set_journey_status(db, owner_id, journey_id, "completed")
    await log_activity(db, owner_id, "Completed journey", "journey", "completed")
    return ok(j, "Journey marked as completed")


@router.put("/journeys/{journey_id}/status", response_model=ApiResponse[JourneyOut])
async def set_journey_status(
    journey_id: int, payload: JourneyStatusIn,
    db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id),
):
    j = await _set_journey_status(db, owner_id, journey_id, payload.status)
    await log_activity(db, owner_id, f"Updated journey status to {payload.status}", "journey", "status_updated")
    return ok(j, f"Journey marked as {payload.status}")


@router.delete("/journeys/{journey_id}", response_model=ApiResponse[None])
async def delete_journey(journey_id: int, db: AsyncSession = Depends(get_db), owner_id: int = Depends(get_owner_id)):
    if not await RecordStore(db, Journey).delete(journey_id, owner_id):
        raise NotFoundError("Journey", journey_id)
    await log_activity(db, owner_id, "Deleted journey", "journey", "deleted")
    return ok(None, "Journey deleted successfully")
