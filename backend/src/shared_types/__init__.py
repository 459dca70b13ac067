"""
Shared type definitions for the scheduling backend.

This module contains dataclasses that are passed between stores, the slot
generator and the availability service.
"""

from shared_types.availability import (
    TimeSlot, AvailabilityResult, BookingConfirmation, SchedulePreview, PreviewSlot
)
from shared_types.schedule import WeeklyScheduleData

__all__ = [
    "TimeSlot",
    "AvailabilityResult",
    "BookingConfirmation",
    "SchedulePreview",
    "PreviewSlot",
    "WeeklyScheduleData",
]
