"""
Doctor model backing the doctor directory.

Doctor identity and profile are managed outside the scheduling subsystem;
this table is the concrete directory the schedules, leaves and bookings
reference by id.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import String, TIMESTAMP, ForeignKey, Boolean, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base


class Doctor(Base):
    """
    Doctor entity referenced by weekly schedules, leaves and bookings.

    `working_hours` is the legacy free-form working-hours blob from the
    previous front-end. It is kept only until it has been imported into a
    structured WeeklySchedule (see ScheduleEditor.import_legacy_working_hours)
    and is never read when computing availability.
    """

    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the doctor."""

    name: Mapped[str] = mapped_column(String(255))
    """Full display name."""

    specialization: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Medical specialization (e.g. 'Cardiologist')."""

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Contact email."""

    department_id: Mapped[Optional[int]] = mapped_column(ForeignKey("departments.id"), nullable=True)
    """Department the doctor belongs to."""

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    """Inactive doctors are hidden from the directory listing."""

    working_hours: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    """
    Legacy working-hours blob, either a JSON string or an object such as:
    {"days": ["monday"], "startTime": "09:00", "endTime": "17:00",
     "maxPatients": 20, "consultationType": "OPD"}
    Cleared once imported.
    """

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the doctor record was created."""

    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the doctor record was last updated."""

    # Relationships
    department = relationship("Department", back_populates="doctors")
    """Relationship to the Department entity."""

    schedules = relationship("WeeklySchedule", back_populates="doctor")
    """Recurring weekly schedules of this doctor."""

    __table_args__ = (
        Index('idx_doctors_department', 'department_id'),
    )

    @property
    def department_name(self) -> Optional[str]:
        """Department name for display, or None if unassigned."""
        return self.department.name if self.department else None

    def __repr__(self) -> str:
        return f"<Doctor(id={self.id}, name='{self.name}')>"
