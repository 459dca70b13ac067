"""
Weekly schedule API endpoints.

Provides schedule management functionality including:
- Listing schedules with doctor/department/weekday/status filters
- Creating, updating and deleting weekly schedules
- Previewing the slot layout of a draft schedule
- Importing a doctor's legacy working-hours blob
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import SchedulingError
from services import DoctorDirectory, ScheduleEditor, WeeklyScheduleStore
from api.responses import ScheduleListResponse, ScheduleResponse, SchedulePreviewResponse
from utils.datetime_utils import parse_date_string

logger = logging.getLogger(__name__)

router = APIRouter()


# Request Models

class ScheduleCreateRequest(BaseModel):
    """Request model for creating (or previewing) a weekly schedule."""
    doctor_id: int
    working_days: List[str]  # e.g. ["monday", "wednesday"]
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM"
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    slot_duration_minutes: int
    max_patients_per_slot: int = 1
    consultation_mode: str  # "in-person", "online" or "both"
    room_number: Optional[str] = None
    valid_from: str  # Format: "YYYY-MM-DD"
    valid_to: Optional[str] = None  # "YYYY-MM-DD", "always" or None for no end date
    status: str = "active"
    notes: Optional[str] = None


class ScheduleUpdateRequest(BaseModel):
    """Request model for partially updating a weekly schedule. Omitted fields are unchanged."""
    working_days: Optional[List[str]] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    slot_duration_minutes: Optional[int] = None
    max_patients_per_slot: Optional[int] = None
    consultation_mode: Optional[str] = None
    room_number: Optional[str] = None
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class LegacyImportRequest(BaseModel):
    """Request model for importing legacy working hours."""
    room_number: Optional[str] = None
    valid_from: Optional[str] = None  # Format: "YYYY-MM-DD", defaults to today


# API Endpoints

@router.get("/schedules", summary="List weekly schedules")
async def list_schedules(
    doctor_id: Optional[int] = Query(None, description="Only this doctor's schedules"),
    department_id: Optional[int] = Query(None, description="Only schedules of doctors in this department"),
    day_of_week: Optional[str] = Query(None, description="Weekday name, e.g. 'monday'"),
    status_filter: Optional[str] = Query(None, alias="status", description="'active', 'inactive' or 'all'"),
    db: Session = Depends(get_db)
) -> ScheduleListResponse:
    """List schedules matching every given filter, ordered by doctor then start time."""
    schedules = WeeklyScheduleStore(db).list(
        doctor_id=doctor_id,
        department_id=department_id,
        day_of_week=day_of_week,
        status=status_filter,
    )
    return ScheduleListResponse(schedules=[ScheduleResponse.from_model(s) for s in schedules])


@router.get("/schedules/{schedule_id}", summary="Get a weekly schedule")
async def get_schedule(schedule_id: int, db: Session = Depends(get_db)) -> ScheduleResponse:
    return ScheduleResponse.from_model(WeeklyScheduleStore(db).get_by_id(schedule_id))


@router.get("/doctors/{doctor_id}/schedules", summary="List a doctor's weekly schedules")
async def list_doctor_schedules(doctor_id: int, db: Session = Depends(get_db)) -> ScheduleListResponse:
    """All schedules of a doctor, active and inactive."""
    DoctorDirectory(db).get_doctor(doctor_id)
    schedules = WeeklyScheduleStore(db).get(doctor_id)
    return ScheduleListResponse(schedules=[ScheduleResponse.from_model(s) for s in schedules])


@router.get("/departments/{department_id}/schedules", summary="List a department's weekly schedules")
async def list_department_schedules(department_id: int, db: Session = Depends(get_db)) -> ScheduleListResponse:
    schedules = WeeklyScheduleStore(db).list_by_department(department_id)
    return ScheduleListResponse(schedules=[ScheduleResponse.from_model(s) for s in schedules])


@router.post("/schedules",
             summary="Create a weekly schedule",
             status_code=status.HTTP_201_CREATED)
async def create_schedule(
    request: ScheduleCreateRequest,
    db: Session = Depends(get_db)
) -> ScheduleResponse:
    """
    Create a weekly schedule.

    Rejects inconsistent input (e.g. break outside the working window) and
    schedules overlapping another active schedule of the same doctor with a
    400 response naming the offending field.
    """
    try:
        schedule = ScheduleEditor(db).create(request.model_dump())
        return ScheduleResponse.from_model(schedule)
    except (HTTPException, SchedulingError):
        raise
    except Exception as e:
        logger.exception(f"Failed to create schedule for doctor {request.doctor_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create schedule"
        )


@router.post("/schedules/preview", summary="Preview the slots of a draft schedule")
async def preview_schedule(request: ScheduleCreateRequest, db: Session = Depends(get_db)) -> SchedulePreviewResponse:
    """
    Compute the slot layout of a draft schedule without saving it.

    Only the single-schedule field rules are checked here.
    """
    preview = ScheduleEditor(db).preview(request.model_dump())
    return SchedulePreviewResponse.from_preview(preview)


@router.patch("/schedules/{schedule_id}", summary="Update a weekly schedule")
async def update_schedule(
    schedule_id: int,
    request: ScheduleUpdateRequest,
    db: Session = Depends(get_db)
) -> ScheduleResponse:
    """Apply a partial update; the resulting schedule is validated as a whole."""
    changes: Dict[str, Any] = request.model_dump(exclude_unset=True)
    try:
        schedule = ScheduleEditor(db).update(schedule_id, changes)
        return ScheduleResponse.from_model(schedule)
    except (HTTPException, SchedulingError):
        raise
    except Exception as e:
        logger.exception(f"Failed to update schedule {schedule_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update schedule"
        )


@router.delete("/schedules/{schedule_id}",
               summary="Delete a weekly schedule",
               status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(schedule_id: int, db: Session = Depends(get_db)) -> None:
    """Delete a schedule. Existing bookings are kept."""
    ScheduleEditor(db).delete(schedule_id)


@router.post("/doctors/{doctor_id}/schedules/import-legacy",
             summary="Import a doctor's legacy working hours",
             status_code=status.HTTP_201_CREATED)
async def import_legacy_working_hours(
    doctor_id: int,
    request: Optional[LegacyImportRequest] = None,
    db: Session = Depends(get_db)
) -> ScheduleResponse:
    """
    Convert the doctor's legacy working-hours blob into a weekly schedule.

    The blob is cleared afterwards; importing twice fails with 400.
    """
    request = request or LegacyImportRequest()
    valid_from = parse_date_string(request.valid_from) if request.valid_from else None
    schedule = ScheduleEditor(db).import_legacy_working_hours(
        doctor_id,
        room_number=request.room_number,
        valid_from=valid_from,
    )
    return ScheduleResponse.from_model(schedule)
