"""
Booking model for appointments recorded against a doctor's slot.

Patient and visit details belong to the patient-management side; a booking
only carries an opaque patient reference.
"""

from datetime import date as date_type, datetime, time as time_type
from typing import Optional

from sqlalchemy import String, Date, Time, TIMESTAMP, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import BOOKING_STATUS_CONFIRMED
from core.database import Base


class Booking(Base):
    """
    A booked appointment at (doctor, date, time).

    Capacity is advisory: several confirmed bookings may share the same
    start time, including more than the slot's capacity (overbooking).
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the booking."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id", ondelete="CASCADE"))
    """Reference to the booked doctor."""

    date: Mapped[date_type] = mapped_column(Date)
    """Date of the appointment."""

    time: Mapped[time_type] = mapped_column(Time)
    """Slot start time of the appointment."""

    patient_ref: Mapped[str] = mapped_column(String(100))
    """Opaque patient identifier supplied by the patient directory."""

    status: Mapped[str] = mapped_column(String(20), default=BOOKING_STATUS_CONFIRMED)
    """'confirmed' or 'cancelled'."""

    cancelled_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the booking was cancelled (if applicable)."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the booking was recorded."""

    __table_args__ = (
        CheckConstraint(
            "status IN ('confirmed', 'cancelled')",
            name='check_valid_booking_status'
        ),
        Index('idx_bookings_doctor_date_status', 'doctor_id', 'date', 'status'),
    )

    @property
    def is_confirmed(self) -> bool:
        return self.status == BOOKING_STATUS_CONFIRMED

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, doctor_id={self.doctor_id}, date={self.date}, time={self.time}, status={self.status})>"
