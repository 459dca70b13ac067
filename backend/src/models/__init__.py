# Package initialization
# Import all models to ensure relationships are properly established
from .department import Department
from .doctor import Doctor
from .weekly_schedule import WeeklySchedule
from .leave import Leave
from .booking import Booking

__all__ = [
    "Department",
    "Doctor",
    "WeeklySchedule",
    "Leave",
    "Booking",
]
