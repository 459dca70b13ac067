"""
Weekly schedule model for a doctor's recurring working pattern.

A weekly schedule is the single source of truth for when a doctor can be
booked: working days, working window, optional break, slot length, per-slot
capacity, consultation mode, room and validity range. Concrete time slots
are never stored; they are projected from this pattern on every read.
"""

from datetime import date as date_type, datetime, time
from typing import List, Optional

from sqlalchemy import String, Integer, Date, Time, TIMESTAMP, ForeignKey, JSON, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import SCHEDULE_STATUS_ACTIVE, ROOM_REQUIRED_MODES
from core.database import Base
from utils.datetime_utils import time_to_minutes


class WeeklySchedule(Base):
    """
    Recurring weekly pattern for one doctor.

    A doctor may have several patterns (e.g. different rooms on different
    days). Two active patterns of the same doctor must not claim the same
    weekday with overlapping working windows during overlapping validity
    ranges; WeeklyScheduleStore rejects such edits.
    """

    __tablename__ = "weekly_schedules"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the schedule."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id", ondelete="CASCADE"))
    """Reference to the doctor this pattern belongs to."""

    working_days: Mapped[List[str]] = mapped_column(JSON, default=list)
    """Lowercase weekday tags, e.g. ['monday', 'wednesday']."""

    start_time: Mapped[time] = mapped_column(Time)
    """Start of the working window (wall-clock)."""

    end_time: Mapped[time] = mapped_column(Time)
    """End of the working window (wall-clock, exclusive)."""

    break_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """Optional break start; must lie within the working window."""

    break_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """Optional break end (exclusive)."""

    slot_duration_minutes: Mapped[int] = mapped_column(Integer)
    """Length of every generated slot."""

    max_patients_per_slot: Mapped[int] = mapped_column(Integer, default=1)
    """Number of bookings a slot accepts before it is reported as booked."""

    consultation_mode: Mapped[str] = mapped_column(String(20))
    """One of 'in-person', 'online', 'both'."""

    room_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    """Room/location; required when the mode includes in-person visits."""

    valid_from: Mapped[date_type] = mapped_column(Date)
    """First date (inclusive) on which the pattern applies."""

    valid_to: Mapped[Optional[date_type]] = mapped_column(Date, nullable=True)
    """Last date (inclusive) on which the pattern applies. Null means no end."""

    status: Mapped[str] = mapped_column(String(20), default=SCHEDULE_STATUS_ACTIVE)
    """'active' or 'inactive'. Inactive patterns never generate slots."""

    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    """Free-text staff notes."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the schedule was created."""

    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the schedule was last updated."""

    # Relationships
    doctor = relationship("Doctor", back_populates="schedules")
    """Relationship to the Doctor entity."""

    __table_args__ = (
        CheckConstraint(
            "consultation_mode IN ('in-person', 'online', 'both')",
            name='check_valid_consultation_mode'
        ),
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name='check_valid_schedule_status'
        ),
        CheckConstraint("slot_duration_minutes > 0", name='check_positive_slot_duration'),
        CheckConstraint("max_patients_per_slot > 0", name='check_positive_slot_capacity'),
        Index('idx_weekly_schedules_doctor_status', 'doctor_id', 'status'),
    )

    @property
    def is_active(self) -> bool:
        return self.status == SCHEDULE_STATUS_ACTIVE

    @property
    def requires_room(self) -> bool:
        return self.consultation_mode in ROOM_REQUIRED_MODES

    @property
    def duration_minutes(self) -> int:
        """Length of the working window in minutes, break included."""
        return time_to_minutes(self.end_time) - time_to_minutes(self.start_time)

    def __repr__(self) -> str:
        return (
            f"<WeeklySchedule(id={self.id}, doctor_id={self.doctor_id}, days={self.working_days}, "
            f"{self.start_time}-{self.end_time}, status={self.status})>"
        )
