"""
Availability service for shared scheduling and availability logic.

Combines the weekly schedule store, the leave registry and the booking ledger
into the single question the booking UI asks: "which slots of doctor D on
date X are available, booked or blocked?". Slots are computed on every call.
"""

import logging
from datetime import date as date_type, time
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from core.constants import MAX_BATCH_DATES, SLOT_STATUS_BOOKED, SLOT_STATUS_BLOCKED
from core.exceptions import ValidationError
from services.booking_ledger import BookingLedger
from services.doctor_directory import DoctorDirectory
from services.leave_registry import LeaveRegistry
from services.schedule_store import WeeklyScheduleStore
from services.slot_generator import SlotGenerator
from shared_types.availability import AvailabilityResult, BookingConfirmation, TimeSlot
from utils.datetime_utils import format_time

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Service class for availability operations.

    Collaborators default to session-bound instances; tests may inject their own.
    """

    def __init__(
        self,
        db: Session,
        schedule_store: Optional[WeeklyScheduleStore] = None,
        leave_registry: Optional[LeaveRegistry] = None,
        booking_ledger: Optional[BookingLedger] = None
    ):
        self.db = db
        directory = DoctorDirectory(db)
        self.directory = directory
        self.schedule_store = schedule_store or WeeklyScheduleStore(db, directory)
        self.leave_registry = leave_registry or LeaveRegistry(db, directory)
        self.booking_ledger = booking_ledger or BookingLedger(db, directory)

    def get_availability(self, doctor_id: int, target_date: date_type) -> AvailabilityResult:
        """
        Compute the slots of a doctor on a date.

        A full-day leave short-circuits to no slots with is_leave set. Otherwise
        the slots of every active pattern covering the date are merged in
        start-time order, with partial-day leave windows marked blocked.

        Raises:
            NotFoundError: If the doctor does not exist
        """
        self.directory.get_doctor(doctor_id)

        if self.leave_registry.is_on_leave(doctor_id, target_date):
            logger.debug(f"Doctor {doctor_id} is on leave on {target_date}")
            return AvailabilityResult(date=target_date, slots=[], is_leave=True)

        schedules = self.schedule_store.active_for_date(doctor_id, target_date)
        if not schedules:
            return AvailabilityResult(date=target_date, slots=[])

        bookings = self.booking_ledger.bookings_for(doctor_id, target_date)
        blocked = self.leave_registry.blocked_windows(doctor_id, target_date)

        slots: List[TimeSlot] = []
        for schedule in schedules:
            slots.extend(SlotGenerator.generate(schedule, target_date, bookings, blocked))
        slots.sort(key=lambda slot: slot.start_time)

        return AvailabilityResult(date=target_date, slots=slots)

    def get_batch_availability(self, doctor_id: int, dates: Sequence[date_type]) -> List[AvailabilityResult]:
        """
        Availability for several dates, one result per requested date in request order.

        Raises:
            ValidationError: If more than MAX_BATCH_DATES dates are requested
            NotFoundError: If the doctor does not exist
        """
        if len(dates) > MAX_BATCH_DATES:
            raise ValidationError(
                f"At most {MAX_BATCH_DATES} dates can be requested at once", field="dates"
            )
        self.directory.get_doctor(doctor_id)
        return [self.get_availability(doctor_id, target_date) for target_date in dates]

    def find_slot(self, doctor_id: int, target_date: date_type, slot_time: time) -> Optional[TimeSlot]:
        """The slot starting at slot_time, or None when no schedule produces one."""
        return self._slot_at(self.get_availability(doctor_id, target_date), slot_time)

    @staticmethod
    def _slot_at(availability: AvailabilityResult, slot_time: Optional[time]) -> Optional[TimeSlot]:
        if slot_time is None:
            return None
        slot_time = slot_time.replace(second=0, microsecond=0)
        return next((s for s in availability.slots if s.start_time == slot_time), None)

    def confirm_booking(
        self,
        doctor_id: int,
        target_date: date_type,
        slot_time: time,
        patient_ref: str
    ) -> BookingConfirmation:
        """
        Record a booking and report whether it overbooks the slot.

        Capacity is advisory: a booking into a full slot is still written and
        flagged overbooked so the caller can ask for acknowledgement. Bookings
        at a time no schedule produces (or on leave) are recorded too and
        flagged outside_schedule.

        Raises:
            NotFoundError: If the doctor does not exist
            ValidationError: If the booking fields are malformed
        """
        availability = self.get_availability(doctor_id, target_date)
        slot = self._slot_at(availability, slot_time)
        slot_status = slot.status if slot else None

        booking = self.booking_ledger.record(doctor_id, target_date, slot_time, patient_ref)

        overbooked = slot_status == SLOT_STATUS_BOOKED
        outside_schedule = availability.is_leave or slot_status is None or slot_status == SLOT_STATUS_BLOCKED

        if overbooked:
            logger.warning(
                f"Overbooked doctor {doctor_id} on {target_date} at {format_time(booking.time)}: "
                f"{slot.booked_count + 1} bookings for capacity {slot.capacity}"
            )
        elif outside_schedule:
            logger.warning(
                f"Booking {booking.id} for doctor {doctor_id} on {target_date} at "
                f"{format_time(booking.time)} is outside the doctor's schedule"
            )

        return BookingConfirmation(
            booking=booking,
            overbooked=overbooked,
            slot_status=slot_status,
            outside_schedule=outside_schedule,
        )
