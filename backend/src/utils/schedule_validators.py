"""
Weekly schedule field validation utilities.

Provides the field-level rules shared by WeeklyScheduleStore (create/update)
and ScheduleEditor (draft preview). Each failure is a ValidationError naming
the offending field. The cross-schedule overlap rule needs the database and
lives in WeeklyScheduleStore.
"""

from datetime import date, time
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from core.constants import (
    WEEKDAYS, CONSULTATION_MODES, ROOM_REQUIRED_MODES,
    SCHEDULE_STATUSES, SCHEDULE_STATUS_ACTIVE,
)
from core.exceptions import ValidationError
from utils.datetime_utils import format_time

if TYPE_CHECKING:
    from shared_types.schedule import WeeklyScheduleData


def normalize_working_days(days: Optional[Iterable[str]]) -> List[str]:
    """
    Lowercase, de-duplicate and sort weekday tags into Monday-first order.

    Raises:
        ValidationError: If a tag is not a weekday name
    """
    if days is None:
        return []
    if isinstance(days, str):
        raise ValidationError("working_days must be a list of weekday names", field="working_days")

    normalized = set()
    for day in days:
        tag = str(day).strip().lower()
        if tag not in WEEKDAYS:
            raise ValidationError(f"Unknown weekday: {day}", field="working_days")
        normalized.add(tag)
    return [day for day in WEEKDAYS if day in normalized]


def time_overlap(start1: time, end1: time, start2: time, end2: time) -> bool:
    """Check if two half-open time intervals overlap."""
    return start1 < end2 and start2 < end1


def date_ranges_overlap(
    from1: date, to1: Optional[date],
    from2: date, to2: Optional[date]
) -> bool:
    """Check if two inclusive date ranges overlap. None means no end."""
    return (to2 is None or from1 <= to2) and (to1 is None or from2 <= to1)


def validate_break_window(
    start_time: time,
    end_time: time,
    break_start: Optional[time],
    break_end: Optional[time]
) -> Optional[Tuple[time, time]]:
    """
    Validate the optional break against the working window.

    Returns:
        (break_start, break_end) or None when no break is configured
    """
    if break_start is None and break_end is None:
        return None
    if break_start is None:
        raise ValidationError("break_start is required when break_end is set", field="break_start")
    if break_end is None:
        raise ValidationError("break_end is required when break_start is set", field="break_end")
    if break_start >= break_end:
        raise ValidationError("break_end must be after break_start", field="break_end")
    if break_start < start_time:
        raise ValidationError("break_start must not be before start_time", field="break_start")
    if break_end > end_time:
        raise ValidationError("break_end must be before end_time", field="break_end")
    return break_start, break_end


def validate_schedule_fields(data: "WeeklyScheduleData") -> None:
    """
    Validate a complete schedule against the single-pattern invariants.

    Rules:
    - working_days non-empty while active, weekday tags only
    - start_time < end_time
    - break window inside the working window, break_start < break_end
    - slot_duration_minutes > 0, max_patients_per_slot > 0
    - consultation_mode known, room_number present for in-person modes
    - status known, valid_to not before valid_from

    Raises:
        ValidationError: On the first rule that fails
    """
    if data.doctor_id is None:
        raise ValidationError("doctor_id is required", field="doctor_id")

    if data.status not in SCHEDULE_STATUSES:
        raise ValidationError(
            f"status must be one of: {', '.join(SCHEDULE_STATUSES)}", field="status"
        )

    days = normalize_working_days(data.working_days)
    if not days and data.status == SCHEDULE_STATUS_ACTIVE:
        raise ValidationError("working_days must not be empty for an active schedule", field="working_days")

    if data.start_time is None:
        raise ValidationError("start_time is required", field="start_time")
    if data.end_time is None:
        raise ValidationError("end_time is required", field="end_time")
    if data.start_time >= data.end_time:
        raise ValidationError(
            f"end_time must be after start_time ({format_time(data.start_time)}-{format_time(data.end_time)})",
            field="end_time"
        )

    validate_break_window(data.start_time, data.end_time, data.break_start, data.break_end)

    if not isinstance(data.slot_duration_minutes, int) or data.slot_duration_minutes <= 0:
        raise ValidationError(
            "slot_duration_minutes must be a positive number of minutes", field="slot_duration_minutes"
        )

    if not isinstance(data.max_patients_per_slot, int) or data.max_patients_per_slot <= 0:
        raise ValidationError(
            "max_patients_per_slot must be a positive number", field="max_patients_per_slot"
        )

    if data.consultation_mode not in CONSULTATION_MODES:
        raise ValidationError(
            f"consultation_mode must be one of: {', '.join(CONSULTATION_MODES)}", field="consultation_mode"
        )
    if data.consultation_mode in ROOM_REQUIRED_MODES and not (data.room_number or "").strip():
        raise ValidationError(
            "room_number is required for in-person consultations", field="room_number"
        )

    if data.valid_from is None:
        raise ValidationError("valid_from is required", field="valid_from")
    if data.valid_to is not None and data.valid_to < data.valid_from:
        raise ValidationError("valid_to must not be before valid_from", field="valid_to")
