"""
Department model for the hospital's clinical departments.

Departments are owned by the doctor directory; the scheduling subsystem only
reads them to group doctors and their weekly schedules.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base


class Department(Base):
    """Clinical department (e.g. Cardiology, Pediatrics)."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the department."""

    name: Mapped[str] = mapped_column(String(255), unique=True)
    """Display name of the department."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the department was created."""

    # Relationships
    doctors = relationship("Doctor", back_populates="department")
    """Doctors belonging to this department."""

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name='{self.name}')>"
