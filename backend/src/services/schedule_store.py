"""
Weekly schedule store.

Persists doctors' recurring weekly patterns and enforces the schedule
invariants on every create/update, so no caller can store an inconsistent or
ambiguous pattern. Slots are derived from these rows on each read; there is
no slot cache to invalidate after a write.
"""

import logging
from dataclasses import replace
from datetime import date as date_type
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.constants import SCHEDULE_STATUS_ACTIVE, WEEKDAYS
from core.exceptions import NotFoundError, ValidationError
from models import Doctor, WeeklySchedule
from services.doctor_directory import DoctorDirectory
from services.slot_generator import SlotGenerator
from shared_types.schedule import WeeklyScheduleData
from utils.datetime_utils import format_time
from utils.schedule_validators import (
    validate_schedule_fields, normalize_working_days,
    time_overlap, date_ranges_overlap,
)

logger = logging.getLogger(__name__)


class WeeklyScheduleStore:
    """
    Database-backed store for WeeklySchedule rows.

    One instance per session/request.
    """

    def __init__(self, db: Session, directory: Optional[DoctorDirectory] = None):
        self.db = db
        self.directory = directory or DoctorDirectory(db)

    def get(self, doctor_id: int) -> List[WeeklySchedule]:
        """All patterns of a doctor, active and inactive, ordered by start time."""
        return self.db.query(WeeklySchedule).filter(
            WeeklySchedule.doctor_id == doctor_id
        ).order_by(WeeklySchedule.start_time, WeeklySchedule.id).all()

    def get_by_id(self, schedule_id: int) -> WeeklySchedule:
        """
        Raises:
            NotFoundError: If the schedule does not exist
        """
        schedule = self.db.query(WeeklySchedule).filter(WeeklySchedule.id == schedule_id).first()
        if not schedule:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    def list(
        self,
        doctor_id: Optional[int] = None,
        department_id: Optional[int] = None,
        day_of_week: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[WeeklySchedule]:
        """
        List schedules matching all given filters.

        Args:
            doctor_id: Only this doctor's patterns
            department_id: Only patterns of doctors in this department
            day_of_week: Weekday tag the pattern must include
            status: 'active', 'inactive', or None/'all' for both

        Returns:
            Schedules ordered by doctor, then start time
        """
        query = self.db.query(WeeklySchedule)
        if doctor_id is not None:
            query = query.filter(WeeklySchedule.doctor_id == doctor_id)
        if department_id is not None:
            query = query.join(Doctor, Doctor.id == WeeklySchedule.doctor_id).filter(
                Doctor.department_id == department_id
            )
        if status and status != "all":
            query = query.filter(WeeklySchedule.status == status)

        schedules = query.order_by(
            WeeklySchedule.doctor_id, WeeklySchedule.start_time, WeeklySchedule.id
        ).all()

        # working_days is a JSON list; filter in Python to stay portable across backends
        if day_of_week:
            day = day_of_week.strip().lower()
            if day not in WEEKDAYS:
                raise ValidationError(f"Unknown weekday: {day_of_week}", field="day_of_week")
            schedules = [s for s in schedules if day in (s.working_days or [])]

        return schedules

    def list_by_department(self, department_id: int) -> List[WeeklySchedule]:
        """Schedules of every doctor in a department (joined through the doctor)."""
        return self.list(department_id=department_id)

    def active_for_date(self, doctor_id: int, target_date: date_type) -> List[WeeklySchedule]:
        """Active patterns of a doctor that apply on target_date, ordered by start time."""
        candidates = self.db.query(WeeklySchedule).filter(
            WeeklySchedule.doctor_id == doctor_id,
            WeeklySchedule.status == SCHEDULE_STATUS_ACTIVE,
            WeeklySchedule.valid_from <= target_date,
        ).order_by(WeeklySchedule.start_time).all()
        return [s for s in candidates if SlotGenerator.applies_on(s, target_date)]

    def create(self, data: WeeklyScheduleData) -> WeeklySchedule:
        """
        Validate and persist a new pattern.

        Raises:
            NotFoundError: If the doctor does not exist
            ValidationError: If a field rule or the overlap rule fails
        """
        data = replace(data, working_days=normalize_working_days(data.working_days))
        self.directory.get_doctor(data.doctor_id)
        validate_schedule_fields(data)
        self._ensure_no_overlap(data, exclude_schedule_id=None)

        schedule = WeeklySchedule(**data.to_dict())
        self.db.add(schedule)
        self.db.commit()
        self.db.refresh(schedule)

        logger.info(
            f"Created schedule {schedule.id} for doctor {schedule.doctor_id}: "
            f"{schedule.working_days} {format_time(schedule.start_time)}-{format_time(schedule.end_time)}"
        )
        return schedule

    def update(self, schedule_id: int, changes: Dict[str, Any]) -> WeeklySchedule:
        """
        Apply a partial update, validating the resulting pattern as a whole.

        Args:
            schedule_id: Schedule to update
            changes: Field name -> new value; unknown fields are rejected

        Raises:
            NotFoundError: If the schedule (or a newly referenced doctor) does not exist
            ValidationError: If the merged pattern violates a rule
        """
        schedule = self.get_by_id(schedule_id)

        allowed = set(WeeklyScheduleData.field_names())
        unknown = set(changes) - allowed
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"Unknown schedule field: {field}", field=field)

        merged = WeeklyScheduleData.from_model(schedule)
        for name, value in changes.items():
            setattr(merged, name, value)
        merged.working_days = normalize_working_days(merged.working_days)

        if merged.doctor_id != schedule.doctor_id:
            self.directory.get_doctor(merged.doctor_id)
        validate_schedule_fields(merged)
        self._ensure_no_overlap(merged, exclude_schedule_id=schedule.id)

        for name, value in merged.to_dict().items():
            setattr(schedule, name, value)
        self.db.commit()
        self.db.refresh(schedule)

        logger.info(f"Updated schedule {schedule.id} for doctor {schedule.doctor_id}: fields={sorted(changes)}")
        return schedule

    def delete(self, schedule_id: int) -> None:
        """
        Raises:
            NotFoundError: If the schedule does not exist
        """
        schedule = self.get_by_id(schedule_id)
        self.db.delete(schedule)
        self.db.commit()
        logger.info(f"Deleted schedule {schedule_id} for doctor {schedule.doctor_id}")

    def find_overlapping(
        self,
        data: WeeklyScheduleData,
        exclude_schedule_id: Optional[int] = None
    ) -> Optional[WeeklySchedule]:
        """
        Find an active pattern of the same doctor that would make slot generation ambiguous.

        Two active patterns conflict when they share a weekday, their working
        windows overlap and their validity ranges overlap.
        """
        if data.status != SCHEDULE_STATUS_ACTIVE:
            return None

        query = self.db.query(WeeklySchedule).filter(
            WeeklySchedule.doctor_id == data.doctor_id,
            WeeklySchedule.status == SCHEDULE_STATUS_ACTIVE,
        )
        if exclude_schedule_id is not None:
            query = query.filter(WeeklySchedule.id != exclude_schedule_id)

        days = set(data.working_days or [])
        for other in query.order_by(WeeklySchedule.id).all():
            if not days & set(other.working_days or []):
                continue
            if not time_overlap(data.start_time, data.end_time, other.start_time, other.end_time):
                continue
            if not date_ranges_overlap(data.valid_from, data.valid_to, other.valid_from, other.valid_to):
                continue
            return other
        return None

    def _ensure_no_overlap(self, data: WeeklyScheduleData, exclude_schedule_id: Optional[int]) -> None:
        other = self.find_overlapping(data, exclude_schedule_id)
        if other is None:
            return
        shared = [day for day in WEEKDAYS if day in set(data.working_days) & set(other.working_days or [])]
        raise ValidationError(
            f"Overlaps active schedule {other.id} on {', '.join(shared)} "
            f"({format_time(other.start_time)}-{format_time(other.end_time)})",
            field="working_days"
        )
