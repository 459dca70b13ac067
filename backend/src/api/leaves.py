"""
Leave API endpoints.

Full-day leaves remove every slot of the doctor on that date; partial-day
leaves (with start/end time) block only the intersecting slots.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from core.database import get_db
from services import DoctorDirectory, LeaveRegistry
from api.responses import LeaveListResponse, LeaveResponse
from utils.datetime_utils import parse_date_string, parse_time_string

logger = logging.getLogger(__name__)

router = APIRouter()


class LeaveCreateRequest(BaseModel):
    """Request model for recording a leave."""
    date: str  # Format: "YYYY-MM-DD"
    start_time: Optional[str] = None  # Format: "HH:MM" or None for a full-day leave
    end_time: Optional[str] = None    # Format: "HH:MM" or None for a full-day leave
    note: Optional[str] = None


@router.get("/doctors/{doctor_id}/leaves", summary="List a doctor's leaves")
async def list_leaves(
    doctor_id: int,
    date_from: Optional[str] = Query(None, description="First date (YYYY-MM-DD), inclusive"),
    date_to: Optional[str] = Query(None, description="Last date (YYYY-MM-DD), inclusive"),
    db: Session = Depends(get_db)
) -> LeaveListResponse:
    DoctorDirectory(db).get_doctor(doctor_id)
    leaves = LeaveRegistry(db).list_for_doctor(
        doctor_id,
        date_from=parse_date_string(date_from) if date_from else None,
        date_to=parse_date_string(date_to) if date_to else None,
    )
    return LeaveListResponse(leaves=[LeaveResponse.from_model(leave) for leave in leaves])


@router.post("/doctors/{doctor_id}/leaves",
             summary="Record a leave",
             status_code=status.HTTP_201_CREATED)
async def create_leave(
    doctor_id: int,
    request: LeaveCreateRequest,
    db: Session = Depends(get_db)
) -> LeaveResponse:
    """
    Record a leave for a doctor.

    Past dates are rejected unless leave backfill is enabled.
    """
    leave = LeaveRegistry(db).add(
        doctor_id,
        parse_date_string(request.date),
        note=request.note,
        start_time=parse_time_string(request.start_time) if request.start_time else None,
        end_time=parse_time_string(request.end_time) if request.end_time else None,
    )
    return LeaveResponse.from_model(leave)


@router.delete("/leaves/{leave_id}",
               summary="Remove a leave",
               status_code=status.HTTP_204_NO_CONTENT)
async def delete_leave(leave_id: int, db: Session = Depends(get_db)) -> None:
    LeaveRegistry(db).remove(leave_id)
