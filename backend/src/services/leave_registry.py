"""
Leave registry.

Date-specific overrides of a doctor's weekly pattern. A full-day leave wins
over every schedule; a partial-day leave blocks the slots it intersects.
"""

import logging
from datetime import date as date_type, time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config import ALLOW_LEAVE_BACKFILL
from core.constants import MAX_NOTE_LENGTH
from core.exceptions import NotFoundError, ValidationError
from models import Leave
from services.doctor_directory import DoctorDirectory
from utils.datetime_utils import clinic_today, format_time

logger = logging.getLogger(__name__)


class LeaveRegistry:
    """Records and answers leave lookups for one database session."""

    def __init__(self, db: Session, directory: Optional[DoctorDirectory] = None):
        self.db = db
        self.directory = directory or DoctorDirectory(db)

    def add(
        self,
        doctor_id: int,
        leave_date: date_type,
        note: Optional[str] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        allow_past: Optional[bool] = None,
        today: Optional[date_type] = None
    ) -> Leave:
        """
        Record a leave for a doctor.

        Without start_time/end_time the leave covers the whole day.

        Args:
            doctor_id: Doctor taking leave
            leave_date: Date of the leave
            note: Optional reason
            start_time: Start of a partial-day leave
            end_time: End of a partial-day leave
            allow_past: Accept dates before today; defaults to ALLOW_LEAVE_BACKFILL
            today: Reference date, defaults to the clinic's current date

        Raises:
            NotFoundError: If the doctor does not exist
            ValidationError: If the date is in the past, the window is malformed
                or a full-day leave already exists for that date
        """
        self.directory.get_doctor(doctor_id)

        if leave_date is None:
            raise ValidationError("date is required", field="date")

        if allow_past is None:
            allow_past = ALLOW_LEAVE_BACKFILL
        reference = today or clinic_today()
        if not allow_past and leave_date < reference:
            raise ValidationError(
                f"Cannot record leave for a past date: {leave_date.isoformat()}", field="date"
            )

        if (start_time is None) != (end_time is None):
            missing = "end_time" if end_time is None else "start_time"
            raise ValidationError(f"{missing} is required for a partial-day leave", field=missing)
        if start_time is not None and end_time is not None and start_time >= end_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

        if note is not None:
            note = note.strip() or None
            if note and len(note) > MAX_NOTE_LENGTH:
                raise ValidationError(f"note must be at most {MAX_NOTE_LENGTH} characters", field="note")

        if start_time is None and self.is_on_leave(doctor_id, leave_date):
            raise ValidationError(
                f"Doctor {doctor_id} is already on leave on {leave_date.isoformat()}", field="date"
            )

        leave = Leave(
            doctor_id=doctor_id,
            date=leave_date,
            start_time=start_time,
            end_time=end_time,
            note=note,
        )
        self.db.add(leave)
        self.db.commit()
        self.db.refresh(leave)

        if leave.is_all_day:
            logger.info(f"Recorded full-day leave {leave.id} for doctor {doctor_id} on {leave_date}")
        else:
            logger.info(
                f"Recorded leave {leave.id} for doctor {doctor_id} on {leave_date} "
                f"{format_time(start_time)}-{format_time(end_time)}"
            )
        return leave

    def remove(self, leave_id: int) -> None:
        """
        Raises:
            NotFoundError: If the leave does not exist
        """
        leave = self.db.query(Leave).filter(Leave.id == leave_id).first()
        if not leave:
            raise NotFoundError("Leave", leave_id)
        doctor_id, leave_date = leave.doctor_id, leave.date
        self.db.delete(leave)
        self.db.commit()
        logger.info(f"Removed leave {leave_id} for doctor {doctor_id} on {leave_date}")

    def is_on_leave(self, doctor_id: int, target_date: date_type) -> bool:
        """True only for a full-day leave; partial-day leaves block slots instead."""
        leaves = self.db.query(Leave).filter(
            Leave.doctor_id == doctor_id,
            Leave.date == target_date,
        ).all()
        return any(leave.is_all_day for leave in leaves)

    def list_for_doctor(
        self,
        doctor_id: int,
        date_from: Optional[date_type] = None,
        date_to: Optional[date_type] = None
    ) -> List[Leave]:
        """Leaves of a doctor in date order, optionally restricted to [date_from, date_to]."""
        query = self.db.query(Leave).filter(Leave.doctor_id == doctor_id)
        if date_from is not None:
            query = query.filter(Leave.date >= date_from)
        if date_to is not None:
            query = query.filter(Leave.date <= date_to)
        return query.order_by(Leave.date, Leave.start_time, Leave.id).all()

    def blocked_windows(self, doctor_id: int, target_date: date_type) -> List[Tuple[time, time]]:
        """Partial-day leave windows of a doctor on target_date."""
        leaves = self.db.query(Leave).filter(
            Leave.doctor_id == doctor_id,
            Leave.date == target_date,
        ).order_by(Leave.start_time).all()
        return [(leave.start_time, leave.end_time) for leave in leaves if not leave.is_all_day]
