"""
Slot generation from a doctor's weekly schedule.

Pure functions only - no database queries. Callers pass in the schedule, the
date, the bookings already fetched for that doctor/date and any partial-day
leave windows, and get back the ordered list of TimeSlot values.
"""

import logging
from collections import defaultdict
from datetime import date as date_type, time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from core.constants import (
    SCHEDULE_STATUS_ACTIVE, BOOKING_STATUS_CONFIRMED,
    SLOT_STATUS_AVAILABLE, SLOT_STATUS_BOOKED, SLOT_STATUS_BLOCKED,
)
from shared_types.availability import TimeSlot, SchedulePreview, PreviewSlot
from shared_types.schedule import WeeklyScheduleData
from utils.datetime_utils import time_to_minutes, minutes_to_time, weekday_name
from utils.schedule_validators import time_overlap

if TYPE_CHECKING:
    from models.booking import Booking
    from models.weekly_schedule import WeeklySchedule

logger = logging.getLogger(__name__)

ScheduleLike = Union["WeeklySchedule", WeeklyScheduleData]
TimeWindow = Tuple[time, time]


class SlotGenerator:
    """
    Expands a weekly pattern into concrete slots for one calendar date.

    Walk rules:
    - slots start at start_time and advance by slot_duration_minutes
    - a step that would run past end_time is dropped, never clamped
    - a slot intersecting [break_start, break_end) is dropped entirely
    Every returned slot therefore has exactly the nominal duration.
    """

    @staticmethod
    def applies_on(schedule: ScheduleLike, target_date: date_type) -> bool:
        """True if the schedule is active, valid on target_date and works that weekday."""
        if schedule.status != SCHEDULE_STATUS_ACTIVE:
            return False
        if target_date < schedule.valid_from:
            return False
        if schedule.valid_to is not None and target_date > schedule.valid_to:
            return False
        return weekday_name(target_date) in (schedule.working_days or [])

    @staticmethod
    def generate(
        schedule: ScheduleLike,
        target_date: date_type,
        existing_bookings: Iterable["Booking"],
        blocked_windows: Optional[Sequence[TimeWindow]] = None
    ) -> List[TimeSlot]:
        """
        Generate the slots of one schedule for target_date.

        Args:
            schedule: Weekly pattern (model or plain data)
            target_date: Date to expand
            existing_bookings: Bookings for the doctor; others are ignored
            blocked_windows: Partial-day leave windows; intersecting slots become blocked

        Returns:
            Slots in ascending start-time order, empty when the pattern does not apply
        """
        if not SlotGenerator.applies_on(schedule, target_date):
            return []

        bookings_by_start = SlotGenerator._group_bookings_by_start(
            existing_bookings, schedule.doctor_id, target_date
        )
        windows = list(blocked_windows or [])
        capacity = schedule.max_patients_per_slot

        slots: List[TimeSlot] = []
        for slot_start, slot_end in SlotGenerator.walk(schedule):
            slot_bookings = bookings_by_start.get(slot_start, [])
            booked_count = len(slot_bookings)

            if any(time_overlap(slot_start, slot_end, w_start, w_end) for w_start, w_end in windows):
                status = SLOT_STATUS_BLOCKED
            elif booked_count >= capacity:
                status = SLOT_STATUS_BOOKED
            else:
                status = SLOT_STATUS_AVAILABLE

            slots.append(TimeSlot(
                start_time=slot_start,
                end_time=slot_end,
                doctor_id=schedule.doctor_id,
                date=target_date,
                status=status,
                booked_count=booked_count,
                capacity=capacity,
                booked_by=[b.patient_ref for b in slot_bookings],
            ))

        return slots

    @staticmethod
    def walk(schedule: ScheduleLike) -> List[TimeWindow]:
        """
        Produce the (start, end) pairs of a pattern's working window.

        Independent of date, bookings and status.
        """
        duration = schedule.slot_duration_minutes
        if duration <= 0:
            return []

        window_end = time_to_minutes(schedule.end_time)
        has_break = schedule.break_start is not None and schedule.break_end is not None

        pairs: List[TimeWindow] = []
        current = time_to_minutes(schedule.start_time)
        while current + duration <= window_end:
            slot_start = minutes_to_time(current)
            slot_end = minutes_to_time(current + duration)
            current += duration

            if has_break and time_overlap(slot_start, slot_end, schedule.break_start, schedule.break_end):
                continue
            pairs.append((slot_start, slot_end))

        return pairs

    @staticmethod
    def preview(schedule: ScheduleLike) -> SchedulePreview:
        """Slot layout of a (possibly unsaved) schedule with its capacity totals."""
        return SchedulePreview(
            slots=[PreviewSlot(start_time=s, end_time=e) for s, e in SlotGenerator.walk(schedule)],
            slot_duration_minutes=schedule.slot_duration_minutes,
            max_patients_per_slot=schedule.max_patients_per_slot,
        )

    @staticmethod
    def _group_bookings_by_start(
        bookings: Iterable["Booking"],
        doctor_id: int,
        target_date: date_type
    ) -> Dict[time, List["Booking"]]:
        """Index confirmed bookings of doctor/date by their minute-precision start time."""
        grouped: Dict[time, List["Booking"]] = defaultdict(list)
        for booking in bookings:
            if booking.doctor_id != doctor_id or booking.date != target_date:
                continue
            if (getattr(booking, "status", None) or BOOKING_STATUS_CONFIRMED) != BOOKING_STATUS_CONFIRMED:
                continue
            grouped[booking.time.replace(second=0, microsecond=0)].append(booking)
        for slot_bookings in grouped.values():
            slot_bookings.sort(key=lambda b: (b.id or 0, b.patient_ref or ""))
        return grouped
