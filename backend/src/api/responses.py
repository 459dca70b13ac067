"""
Shared response models for API endpoints.

This module contains Pydantic response models that are shared across
multiple API endpoints to ensure consistency and reduce duplication.
Times are serialized as "HH:MM" strings and dates as "YYYY-MM-DD".
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from models import Booking, Leave, WeeklySchedule
from shared_types.availability import AvailabilityResult, BookingConfirmation, SchedulePreview, TimeSlot
from utils.datetime_utils import format_time


class DepartmentResponse(BaseModel):
    """Response model for a department."""
    id: int
    name: str


class DepartmentListResponse(BaseModel):
    departments: List[DepartmentResponse]


class DoctorResponse(BaseModel):
    """Response model for doctor directory entries."""
    id: int
    name: str
    specialization: Optional[str] = None
    department: Optional[str] = None  # Department name
    department_id: Optional[int] = None


class DoctorListResponse(BaseModel):
    doctors: List[DoctorResponse]


class ScheduleResponse(BaseModel):
    """Response model for a weekly schedule."""
    id: int
    doctor_id: int
    working_days: List[str]
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM"
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    slot_duration_minutes: int
    max_patients_per_slot: int
    consultation_mode: str
    room_number: Optional[str] = None
    valid_from: str  # Format: "YYYY-MM-DD"
    valid_to: Optional[str] = None  # None means no end date
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, schedule: WeeklySchedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            doctor_id=schedule.doctor_id,
            working_days=list(schedule.working_days or []),
            start_time=format_time(schedule.start_time),
            end_time=format_time(schedule.end_time),
            break_start=format_time(schedule.break_start) if schedule.break_start else None,
            break_end=format_time(schedule.break_end) if schedule.break_end else None,
            slot_duration_minutes=schedule.slot_duration_minutes,
            max_patients_per_slot=schedule.max_patients_per_slot,
            consultation_mode=schedule.consultation_mode,
            room_number=schedule.room_number,
            valid_from=schedule.valid_from.isoformat(),
            valid_to=schedule.valid_to.isoformat() if schedule.valid_to else None,
            status=schedule.status,
            notes=schedule.notes,
            created_at=schedule.created_at,
            updated_at=schedule.updated_at,
        )


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleResponse]


class PreviewSlotResponse(BaseModel):
    start_time: str
    end_time: str


class SchedulePreviewResponse(BaseModel):
    """Response model for the slot layout of a draft schedule."""
    slots: List[PreviewSlotResponse]
    total_slots: int
    total_capacity: int
    total_minutes: int

    @classmethod
    def from_preview(cls, preview: SchedulePreview) -> "SchedulePreviewResponse":
        return cls(
            slots=[
                PreviewSlotResponse(start_time=format_time(s.start_time), end_time=format_time(s.end_time))
                for s in preview.slots
            ],
            total_slots=preview.total_slots,
            total_capacity=preview.total_capacity,
            total_minutes=preview.total_minutes,
        )


class LeaveResponse(BaseModel):
    """Response model for a leave entry."""
    id: int
    doctor_id: int
    date: str  # Format: "YYYY-MM-DD"
    start_time: Optional[str] = None  # None for a full-day leave
    end_time: Optional[str] = None
    is_all_day: bool
    note: Optional[str] = None

    @classmethod
    def from_model(cls, leave: Leave) -> "LeaveResponse":
        return cls(
            id=leave.id,
            doctor_id=leave.doctor_id,
            date=leave.date.isoformat(),
            start_time=format_time(leave.start_time) if leave.start_time else None,
            end_time=format_time(leave.end_time) if leave.end_time else None,
            is_all_day=leave.is_all_day,
            note=leave.note,
        )


class LeaveListResponse(BaseModel):
    leaves: List[LeaveResponse]


class TimeSlotResponse(BaseModel):
    """Response model for one generated slot."""
    start_time: str
    end_time: str
    status: str  # "available", "booked" or "blocked"
    booked_count: int
    capacity: int
    booked_by: List[str] = []

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotResponse":
        return cls(
            start_time=format_time(slot.start_time),
            end_time=format_time(slot.end_time),
            status=slot.status,
            booked_count=slot.booked_count,
            capacity=slot.capacity,
            booked_by=list(slot.booked_by),
        )


class AvailabilityResponse(BaseModel):
    """Response model for a doctor's slots on one date."""
    date: str
    is_leave: bool
    slots: List[TimeSlotResponse]

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            date=result.date.isoformat(),
            is_leave=result.is_leave,
            slots=[TimeSlotResponse.from_slot(slot) for slot in result.slots],
        )


class BatchAvailabilityResponse(BaseModel):
    results: List[AvailabilityResponse]


class BookingResponse(BaseModel):
    """Response model for a booking."""
    id: int
    doctor_id: int
    date: str
    time: str  # Format: "HH:MM"
    patient_ref: str
    status: str
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            doctor_id=booking.doctor_id,
            date=booking.date.isoformat(),
            time=format_time(booking.time),
            patient_ref=booking.patient_ref,
            status=booking.status,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
        )


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]


class BookingConfirmationResponse(BaseModel):
    """
    Response model for a confirmed booking.

    The booking is always written; overbooked/outside_schedule are warnings
    the client should ask the user to acknowledge.
    """
    booking: BookingResponse
    overbooked: bool
    slot_status: Optional[str] = None
    outside_schedule: bool = False

    @classmethod
    def from_confirmation(cls, confirmation: BookingConfirmation) -> "BookingConfirmationResponse":
        return cls(
            booking=BookingResponse.from_model(confirmation.booking),
            overbooked=confirmation.overbooked,
            slot_status=confirmation.slot_status,
            outside_schedule=confirmation.outside_schedule,
        )
