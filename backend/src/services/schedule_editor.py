"""
Schedule editor service.

Entry point for staff edits to weekly schedules. Normalizes loosely typed
input (HH:MM strings, ISO dates, the "always" no-end marker, mixed-case
weekday names) into WeeklyScheduleData and delegates to WeeklyScheduleStore,
which enforces the invariants. Also owns the draft preview and the one-time
import of the legacy working-hours blob.
"""

import json
import logging
from datetime import date as date_type, time
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy.orm import Session

from core.config import DEFAULT_SLOT_DURATION_MINUTES
from core.constants import (
    NO_END_SENTINEL, SCHEDULE_STATUS_ACTIVE, MAX_NOTE_LENGTH, MAX_ROOM_NUMBER_LENGTH,
    CONSULTATION_MODE_IN_PERSON, CONSULTATION_MODE_ONLINE, CONSULTATION_MODE_BOTH,
)
from core.exceptions import ValidationError
from models import WeeklySchedule
from services.doctor_directory import DoctorDirectory
from services.schedule_store import WeeklyScheduleStore
from services.slot_generator import SlotGenerator
from shared_types.availability import SchedulePreview
from shared_types.schedule import WeeklyScheduleData
from utils.datetime_utils import clinic_today, parse_date_string, parse_time_string
from utils.schedule_validators import normalize_working_days, validate_schedule_fields

logger = logging.getLogger(__name__)

TIME_FIELDS = ("start_time", "end_time", "break_start", "break_end")
INT_FIELDS = ("doctor_id", "slot_duration_minutes", "max_patients_per_slot")

# Legacy consultationType values -> consultation_mode
LEGACY_CONSULTATION_MODES = {
    "opd": CONSULTATION_MODE_IN_PERSON,
    "ipd": CONSULTATION_MODE_IN_PERSON,
    "in-person": CONSULTATION_MODE_IN_PERSON,
    "online": CONSULTATION_MODE_ONLINE,
    "both": CONSULTATION_MODE_BOTH,
}

ScheduleInput = Union[WeeklyScheduleData, Mapping[str, Any]]


def _coerce_time(name: str, value: Any) -> Optional[time]:
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return parse_time_string(value)
        except ValueError as e:
            raise ValidationError(str(e), field=name) from e
    raise ValidationError(f"{name} must be a time in HH:MM format", field=name)


def _coerce_date(name: str, value: Any, allow_no_end: bool = False) -> Optional[date_type]:
    if value is None or isinstance(value, date_type):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if allow_no_end and text.lower() == NO_END_SENTINEL:
            return None
        try:
            return parse_date_string(text)
        except ValueError as e:
            raise ValidationError(str(e), field=name) from e
    raise ValidationError(f"{name} must be a date in YYYY-MM-DD format", field=name)


def _coerce_int(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise ValidationError(f"{name} must be a whole number", field=name) from e
    raise ValidationError(f"{name} must be a whole number", field=name)


def _optional_text(name: str, value: Any, max_length: int) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if len(text) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters", field=name)
    return text


def normalize_changes(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert loosely typed schedule fields to their stored Python types.

    Unknown keys are rejected; keys that are absent stay absent so the result
    can be used as a partial update.

    Raises:
        ValidationError: If a key is unknown or a value cannot be converted
    """
    allowed = set(WeeklyScheduleData.field_names())
    changes: Dict[str, Any] = {}
    for name, value in raw.items():
        if name not in allowed:
            raise ValidationError(f"Unknown schedule field: {name}", field=name)

        if name in TIME_FIELDS:
            changes[name] = _coerce_time(name, value)
        elif name in INT_FIELDS:
            changes[name] = _coerce_int(name, value)
        elif name == "valid_from":
            changes[name] = _coerce_date(name, value)
        elif name == "valid_to":
            changes[name] = _coerce_date(name, value, allow_no_end=True)
        elif name == "working_days":
            changes[name] = normalize_working_days(value)
        elif name == "room_number":
            changes[name] = _optional_text(name, value, MAX_ROOM_NUMBER_LENGTH)
        elif name == "notes":
            changes[name] = _optional_text(name, value, MAX_NOTE_LENGTH)
        elif name in ("consultation_mode", "status"):
            changes[name] = value.strip().lower() if isinstance(value, str) else value
        else:
            changes[name] = value
    return changes


def build_schedule_data(raw: ScheduleInput) -> WeeklyScheduleData:
    """
    Build a complete WeeklyScheduleData from a dict (or pass one through).

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    if isinstance(raw, WeeklyScheduleData):
        return raw

    values = normalize_changes(raw)
    values.setdefault("status", SCHEDULE_STATUS_ACTIVE)
    required = (
        "doctor_id", "working_days", "start_time", "end_time",
        "slot_duration_minutes", "max_patients_per_slot", "consultation_mode", "valid_from",
    )
    for name in required:
        if values.get(name) is None:
            raise ValidationError(f"{name} is required", field=name)
    return WeeklyScheduleData(**values)


class ScheduleEditor:
    """
    Validated create/update/delete of weekly schedules.

    Accepts either WeeklyScheduleData or the plain dict shape the API layer
    receives.
    """

    def __init__(self, db: Session, store: Optional[WeeklyScheduleStore] = None):
        self.db = db
        self.store = store or WeeklyScheduleStore(db)

    def create(self, raw: ScheduleInput) -> WeeklySchedule:
        """
        Raises:
            ValidationError: If the input is malformed or violates an invariant
            NotFoundError: If the doctor does not exist
        """
        return self.store.create(build_schedule_data(raw))

    def update(self, schedule_id: int, raw_changes: Mapping[str, Any]) -> WeeklySchedule:
        """
        Apply a partial update; omitted fields keep their stored values.

        Raises:
            ValidationError: If the merged schedule violates an invariant
            NotFoundError: If the schedule does not exist
        """
        return self.store.update(schedule_id, normalize_changes(raw_changes))

    def delete(self, schedule_id: int) -> None:
        self.store.delete(schedule_id)

    def preview(self, raw: ScheduleInput) -> SchedulePreview:
        """
        Slot layout of a draft schedule without saving it.

        Field rules are checked; the cross-schedule overlap rule is not.
        """
        data = build_schedule_data(raw)
        data.working_days = normalize_working_days(data.working_days)
        validate_schedule_fields(data)
        return SlotGenerator.preview(data)

    def import_legacy_working_hours(
        self,
        doctor_id: int,
        room_number: Optional[str] = None,
        valid_from: Optional[date_type] = None
    ) -> WeeklySchedule:
        """
        Convert a doctor's legacy working-hours blob into a WeeklySchedule.

        The blob is cleared after a successful import so it is never read as
        a second source of truth.

        Args:
            doctor_id: Doctor whose blob is imported
            room_number: Room for in-person modes (the blob has none)
            valid_from: First valid date, defaults to today

        Raises:
            NotFoundError: If the doctor does not exist
            ValidationError: If there is no blob, it is not valid JSON,
                or the resulting schedule fails validation
        """
        doctor = DoctorDirectory(self.db).get_doctor(doctor_id)
        blob = doctor.working_hours

        if blob is None or (isinstance(blob, str) and not blob.strip()):
            raise ValidationError(f"Doctor {doctor_id} has no legacy working hours", field="working_hours")
        if isinstance(blob, str):
            try:
                blob = json.loads(blob)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Legacy working hours are not valid JSON: {e.msg}", field="working_hours") from e
        if not isinstance(blob, dict) or not blob:
            raise ValidationError("Legacy working hours must be a JSON object", field="working_hours")

        legacy_type = str(blob.get("consultationType") or "OPD").strip().lower()
        data = build_schedule_data({
            "doctor_id": doctor_id,
            "working_days": blob.get("days") or [],
            "start_time": blob.get("startTime"),
            "end_time": blob.get("endTime"),
            "slot_duration_minutes": DEFAULT_SLOT_DURATION_MINUTES,
            "max_patients_per_slot": 1,
            "consultation_mode": LEGACY_CONSULTATION_MODES.get(legacy_type, CONSULTATION_MODE_IN_PERSON),
            "room_number": room_number,
            "valid_from": valid_from or clinic_today(),
            "valid_to": None,
        })

        schedule = self.store.create(data)

        doctor.working_hours = None
        self.db.commit()

        logger.info(f"Imported legacy working hours for doctor {doctor_id} as schedule {schedule.id}")
        return schedule
