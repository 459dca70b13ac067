"""
Plain data form of a weekly schedule.

Used as the input to ScheduleEditor/WeeklyScheduleStore and for comparing a
stored pattern with the data it was created from.
"""

from dataclasses import dataclass, fields, asdict
from datetime import date, time
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from core.constants import SCHEDULE_STATUS_ACTIVE

if TYPE_CHECKING:
    from models.weekly_schedule import WeeklySchedule


@dataclass
class WeeklyScheduleData:
    """Field values of a WeeklySchedule without id and timestamps."""
    doctor_id: int
    working_days: List[str]
    start_time: time
    end_time: time
    slot_duration_minutes: int
    max_patients_per_slot: int
    consultation_mode: str
    valid_from: date
    valid_to: Optional[date] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    room_number: Optional[str] = None
    status: str = SCHEDULE_STATUS_ACTIVE
    notes: Optional[str] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_model(cls, schedule: "WeeklySchedule") -> "WeeklyScheduleData":
        """Snapshot the editable fields of a stored schedule."""
        values = {name: getattr(schedule, name) for name in cls.field_names()}
        values["working_days"] = list(values["working_days"] or [])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
