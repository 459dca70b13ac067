"""
Test configuration and shared fixtures for the doctor scheduling test suite.

Uses an in-memory SQLite database per test: tables are created from the
model metadata before each test and discarded with the engine afterwards.
The Alembic migrations are exercised separately in
integration/test_migrations.py.
"""

import os

# Must be set before core.database creates the application engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date, time, timedelta
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base
# Import all models to ensure they're registered with SQLAlchemy before any relationships are resolved
from models import Department, Doctor, WeeklySchedule, Leave, Booking
from shared_types.schedule import WeeklyScheduleData


# 2030-01-07 is a Monday; far enough ahead that "past date" rules never trigger
NEXT_MONDAY = date(2030, 1, 7)


@pytest.fixture(scope="function")
def db_engine():
    """
    Create a fresh in-memory SQLite engine for one test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the per-test engine."""
    TestSession = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    session = TestSession()

    yield session

    session.close()


@pytest.fixture
def department(db_session: Session) -> Department:
    """Create a test department."""
    department = Department(name="Cardiology")
    db_session.add(department)
    db_session.commit()
    return department


@pytest.fixture
def doctor(db_session: Session, department: Department) -> Doctor:
    """Create a test doctor in the Cardiology department."""
    doctor = Doctor(
        name="Dr. Asha Rao",
        specialization="Cardiologist",
        email="asha.rao@example.com",
        department_id=department.id,
        is_active=True,
    )
    db_session.add(doctor)
    db_session.commit()
    return doctor


@pytest.fixture
def other_doctor(db_session: Session, department: Department) -> Doctor:
    """Create a second test doctor in the same department."""
    doctor = Doctor(
        name="Dr. Vikram Shah",
        specialization="Cardiologist",
        department_id=department.id,
        is_active=True,
    )
    db_session.add(doctor)
    db_session.commit()
    return doctor


@pytest.fixture
def next_monday() -> date:
    return NEXT_MONDAY


def make_schedule_data(doctor_id: int, **overrides) -> WeeklyScheduleData:
    """
    Build a valid Monday 09:00-11:00, 30-minute, capacity-1 schedule.

    Keyword arguments override individual fields.
    """
    values = dict(
        doctor_id=doctor_id,
        working_days=["monday"],
        start_time=time(9, 0),
        end_time=time(11, 0),
        slot_duration_minutes=30,
        max_patients_per_slot=1,
        consultation_mode="in-person",
        room_number="101",
        valid_from=NEXT_MONDAY - timedelta(days=7),
        valid_to=None,
    )
    values.update(overrides)
    return WeeklyScheduleData(**values)


@pytest.fixture
def schedule_data(doctor: Doctor) -> WeeklyScheduleData:
    """Valid Monday 09:00-11:00 schedule data for the test doctor."""
    return make_schedule_data(doctor.id)
