"""
Booking ledger.

Records appointments against (doctor, date, time). The ledger never rejects a
booking for capacity reasons; overbooking is detected and surfaced by
AvailabilityService, not prevented here.
"""

import logging
from datetime import date as date_type, time
from typing import List, Optional

from sqlalchemy.orm import Session

from core.constants import BOOKING_STATUS_CONFIRMED, BOOKING_STATUS_CANCELLED, MAX_PATIENT_REF_LENGTH
from core.exceptions import NotFoundError, ValidationError
from models import Booking
from services.doctor_directory import DoctorDirectory
from utils.datetime_utils import clinic_now, format_time

logger = logging.getLogger(__name__)


class BookingLedger:

    def __init__(self, db: Session, directory: Optional[DoctorDirectory] = None):
        self.db = db
        self.directory = directory or DoctorDirectory(db)

    def bookings_for(
        self,
        doctor_id: int,
        target_date: date_type,
        include_cancelled: bool = False
    ) -> List[Booking]:
        """
        Bookings of a doctor on a date, ordered by time then id.

        Only confirmed bookings count toward slot capacity, so cancelled ones
        are excluded unless asked for.
        """
        query = self.db.query(Booking).filter(
            Booking.doctor_id == doctor_id,
            Booking.date == target_date,
        )
        if not include_cancelled:
            query = query.filter(Booking.status == BOOKING_STATUS_CONFIRMED)
        return query.order_by(Booking.time, Booking.id).all()

    def get_by_id(self, booking_id: int) -> Booking:
        """
        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def record(self, doctor_id: int, target_date: date_type, slot_time: time, patient_ref: str) -> Booking:
        """
        Persist a confirmed booking.

        Args:
            doctor_id: Booked doctor
            target_date: Appointment date
            slot_time: Slot start time (minute precision)
            patient_ref: Opaque patient identifier

        Raises:
            NotFoundError: If the doctor does not exist
            ValidationError: If a field is missing or malformed
        """
        self.directory.get_doctor(doctor_id)

        if target_date is None:
            raise ValidationError("date is required", field="date")
        if slot_time is None:
            raise ValidationError("time is required", field="time")

        patient_ref = (patient_ref or "").strip()
        if not patient_ref:
            raise ValidationError("patient_ref is required", field="patient_ref")
        if len(patient_ref) > MAX_PATIENT_REF_LENGTH:
            raise ValidationError(
                f"patient_ref must be at most {MAX_PATIENT_REF_LENGTH} characters", field="patient_ref"
            )

        booking = Booking(
            doctor_id=doctor_id,
            date=target_date,
            time=slot_time.replace(second=0, microsecond=0),
            patient_ref=patient_ref,
            status=BOOKING_STATUS_CONFIRMED,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)

        logger.info(
            f"Recorded booking {booking.id} for doctor {doctor_id} on {target_date} at {format_time(booking.time)}"
        )
        return booking

    def cancel(self, booking_id: int) -> Booking:
        """
        Soft-cancel a booking, freeing its seat in the slot.

        Cancelling an already cancelled booking is a no-op.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self.get_by_id(booking_id)
        if booking.status == BOOKING_STATUS_CANCELLED:
            return booking

        booking.status = BOOKING_STATUS_CANCELLED
        booking.cancelled_at = clinic_now()
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Cancelled booking {booking_id} for doctor {booking.doctor_id} on {booking.date}")
        return booking
