"""
Services package for shared business logic.

This package contains service classes that encapsulate the scheduling logic
shared across the API endpoints.
"""

from .doctor_directory import DoctorDirectory
from .slot_generator import SlotGenerator
from .schedule_store import WeeklyScheduleStore
from .leave_registry import LeaveRegistry
from .booking_ledger import BookingLedger
from .availability_service import AvailabilityService
from .schedule_editor import ScheduleEditor

__all__ = [
    "DoctorDirectory",
    "SlotGenerator",
    "WeeklyScheduleStore",
    "LeaveRegistry",
    "BookingLedger",
    "AvailabilityService",
    "ScheduleEditor",
]
