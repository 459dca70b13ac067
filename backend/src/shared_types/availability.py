"""
Shared types for availability-related functionality.

TimeSlot is a derived value: it is produced by SlotGenerator on every query
and never persisted.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from core.constants import SLOT_STATUS_AVAILABLE, SLOT_STATUS_BOOKED
from utils.datetime_utils import format_time

if TYPE_CHECKING:
    from models.booking import Booking


@dataclass
class TimeSlot:
    """
    One bookable interval [start_time, end_time) for a doctor on a date.

    `status` is the three-state value shown in the picker legend. The raw
    `booked_count` is kept alongside it so that capacity checks do not depend
    on the collapsed status.
    """
    start_time: time
    end_time: time
    doctor_id: int
    date: date
    status: str = SLOT_STATUS_AVAILABLE
    booked_count: int = 0
    capacity: int = 1
    booked_by: List[str] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.status == SLOT_STATUS_AVAILABLE

    @property
    def is_booked(self) -> bool:
        return self.status == SLOT_STATUS_BOOKED

    @property
    def remaining_capacity(self) -> int:
        return max(self.capacity - self.booked_count, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format used by API responses."""
        return {
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "doctor_id": self.doctor_id,
            "date": self.date.isoformat(),
            "status": self.status,
            "booked_count": self.booked_count,
            "capacity": self.capacity,
            "booked_by": list(self.booked_by),
        }


@dataclass
class AvailabilityResult:
    """Answer to "what can be booked for doctor D on date X"."""
    date: date
    slots: List[TimeSlot]
    is_leave: bool = False


@dataclass
class BookingConfirmation:
    """
    Result of confirming a booking.

    `overbooked` asks the caller for an explicit acknowledgement; the booking
    has already been written either way.
    """
    booking: "Booking"
    overbooked: bool
    slot_status: Optional[str] = None
    outside_schedule: bool = False


@dataclass
class PreviewSlot:
    start_time: time
    end_time: time


@dataclass
class SchedulePreview:
    """Slot layout of a draft schedule, independent of any date."""
    slots: List[PreviewSlot]
    slot_duration_minutes: int
    max_patients_per_slot: int

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    @property
    def total_capacity(self) -> int:
        return self.total_slots * self.max_patients_per_slot

    @property
    def total_minutes(self) -> int:
        return self.total_slots * self.slot_duration_minutes
