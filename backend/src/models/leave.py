"""
Leave model representing date-specific doctor unavailability.

A leave without times is a full-day marker: the doctor has no bookable slots
on that date regardless of the weekly schedule. A leave with a time window
only blocks the slots that intersect it.
"""

from datetime import date as date_type, datetime, time
from typing import Optional

from sqlalchemy import String, Date, Time, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class Leave(Base):
    """
    Leave / holiday override for one doctor on one date.

    Past leaves are kept as history; there is no expiry.
    """

    __tablename__ = "doctor_leaves"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the leave."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id", ondelete="CASCADE"))
    """Reference to the doctor on leave."""

    date: Mapped[date_type] = mapped_column(Date)
    """Date of the leave."""

    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """Start of a partial-day leave. Null for a full-day leave."""

    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """End of a partial-day leave. Null for a full-day leave."""

    note: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    """Reason, e.g. 'Medical conference'."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the leave was recorded."""

    __table_args__ = (
        Index('idx_doctor_leaves_doctor_date', 'doctor_id', 'date'),
    )

    @property
    def is_all_day(self) -> bool:
        """Check if this is a full-day leave."""
        return self.start_time is None or self.end_time is None

    def __repr__(self) -> str:
        return f"<Leave(id={self.id}, doctor_id={self.doctor_id}, date={self.date}, time={self.start_time}-{self.end_time})>"
