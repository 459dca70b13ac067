"""
Availability and booking API endpoints.

Provides:
- Slots of a doctor for one date or a batch of dates
- Booking confirmation with overbooking detection
- Booking listing and cancellation
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from core.constants import MAX_BATCH_DATES
from core.database import get_db
from core.exceptions import SchedulingError
from services import AvailabilityService, BookingLedger, DoctorDirectory
from api.responses import (
    AvailabilityResponse, BatchAvailabilityResponse,
    BookingConfirmationResponse, BookingListResponse, BookingResponse,
)
from utils.datetime_utils import parse_date_string, parse_time_string

logger = logging.getLogger(__name__)

router = APIRouter()


class BatchAvailabilityRequest(BaseModel):
    """Request model for batch availability."""
    dates: List[str]  # Format: "YYYY-MM-DD"


class BookingCreateRequest(BaseModel):
    """Request model for confirming a booking."""
    date: str  # Format: "YYYY-MM-DD"
    time: str  # Format: "HH:MM", slot start time
    patient_ref: str


@router.get("/doctors/{doctor_id}/availability", summary="Get a doctor's slots for a date")
async def get_availability(
    doctor_id: int,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    db: Session = Depends(get_db)
) -> AvailabilityResponse:
    """
    Get the slots of a doctor on a date.

    Every slot carries its status (available, booked or blocked) and booked
    count. On a full-day leave the slot list is empty and is_leave is true.
    """
    try:
        requested_date = parse_date_string(date)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date format: {date} (expected YYYY-MM-DD)"
        )

    result = AvailabilityService(db).get_availability(doctor_id, requested_date)
    return AvailabilityResponse.from_result(result)


@router.post("/doctors/{doctor_id}/availability/batch", summary="Get a doctor's slots for several dates")
async def get_batch_availability(
    doctor_id: int,
    request: BatchAvailabilityRequest,
    db: Session = Depends(get_db)
) -> BatchAvailabilityResponse:
    """Availability for up to MAX_BATCH_DATES dates, in request order."""
    if len(request.dates) > MAX_BATCH_DATES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_BATCH_DATES} dates can be requested at once"
        )

    dates = []
    for date_str in request.dates:
        try:
            dates.append(parse_date_string(date_str))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid date format: {date_str} (expected YYYY-MM-DD)"
            )

    results = AvailabilityService(db).get_batch_availability(doctor_id, dates)
    return BatchAvailabilityResponse(results=[AvailabilityResponse.from_result(r) for r in results])


@router.get("/doctors/{doctor_id}/bookings", summary="List a doctor's bookings for a date")
async def list_bookings(
    doctor_id: int,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    include_cancelled: bool = Query(False, description="Include cancelled bookings"),
    db: Session = Depends(get_db)
) -> BookingListResponse:
    DoctorDirectory(db).get_doctor(doctor_id)
    bookings = BookingLedger(db).bookings_for(
        doctor_id, parse_date_string(date), include_cancelled=include_cancelled
    )
    return BookingListResponse(bookings=[BookingResponse.from_model(b) for b in bookings])


@router.post("/doctors/{doctor_id}/bookings",
             summary="Confirm a booking",
             status_code=status.HTTP_201_CREATED)
async def confirm_booking(
    doctor_id: int,
    request: BookingCreateRequest,
    db: Session = Depends(get_db)
) -> BookingConfirmationResponse:
    """
    Confirm a booking.

    The booking is always recorded. When the slot was already full the
    response has overbooked=true; when no schedule offers the time (or the
    doctor is on leave) it has outside_schedule=true.
    """
    booking_date = parse_date_string(request.date)
    booking_time = parse_time_string(request.time)
    try:
        confirmation = AvailabilityService(db).confirm_booking(
            doctor_id, booking_date, booking_time, request.patient_ref
        )
        return BookingConfirmationResponse.from_confirmation(confirmation)
    except (HTTPException, SchedulingError):
        raise
    except Exception as e:
        logger.exception(f"Failed to confirm booking for doctor {doctor_id} on {request.date}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to confirm booking"
        )


@router.delete("/bookings/{booking_id}", summary="Cancel a booking")
async def cancel_booking(booking_id: int, db: Session = Depends(get_db)) -> BookingResponse:
    """Cancel a booking, freeing its seat. Cancelling twice is harmless."""
    return BookingResponse.from_model(BookingLedger(db).cancel(booking_id))
