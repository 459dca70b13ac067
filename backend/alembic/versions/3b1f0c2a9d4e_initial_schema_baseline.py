"""initial_schema_baseline

Revision ID: 3b1f0c2a9d4e
Revises:
Create Date: 2026-10-19 10:00:00.000000

Baseline migration for the scheduling schema: departments, doctors,
weekly_schedules, doctor_leaves and bookings, created from the current
model definitions. All future migrations are incremental changes from this
baseline.
"""
from typing import Sequence, Union

from alembic import op

# Import all models to ensure they're registered with Base.metadata
from core.database import Base
from models.department import Department
from models.doctor import Doctor
from models.weekly_schedule import WeeklySchedule
from models.leave import Leave
from models.booking import Booking


# revision identifiers, used by Alembic.
revision: str = '3b1f0c2a9d4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = [
    Department.__table__,
    Doctor.__table__,
    WeeklySchedule.__table__,
    Leave.__table__,
    Booking.__table__,
]


def upgrade() -> None:
    """
    Create all scheduling tables with their indexes and check constraints.
    """
    Base.metadata.create_all(bind=op.get_bind(), tables=TABLES)


def downgrade() -> None:
    """
    Drop all scheduling tables.
    """
    Base.metadata.drop_all(bind=op.get_bind(), tables=list(reversed(TABLES)))
