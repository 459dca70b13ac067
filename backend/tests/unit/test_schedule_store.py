"""
Unit tests for WeeklyScheduleStore.

Covers persistence round trips, the overlap rule between active schedules,
filtered listing and partial updates.
"""

import pytest
from datetime import date, time, timedelta

from core.exceptions import NotFoundError, ValidationError
from models import Department, Doctor
from services.schedule_store import WeeklyScheduleStore
from shared_types.schedule import WeeklyScheduleData

from tests.conftest import make_schedule_data, NEXT_MONDAY


class TestCreateAndGet:
    """Test creating schedules and reading them back."""

    def test_round_trip(self, db_session, doctor):
        data = make_schedule_data(
            doctor.id,
            working_days=["wednesday", "Monday"],
            break_start=time(10, 0),
            break_end=time(10, 15),
            max_patients_per_slot=3,
            notes="OPD block",
        )
        store = WeeklyScheduleStore(db_session)

        created = store.create(data)
        stored = store.get(doctor.id)

        expected = make_schedule_data(
            doctor.id,
            working_days=["monday", "wednesday"],
            break_start=time(10, 0),
            break_end=time(10, 15),
            max_patients_per_slot=3,
            notes="OPD block",
        )

        assert len(stored) == 1
        assert stored[0].id == created.id
        assert WeeklyScheduleData.from_model(stored[0]) == expected
        assert stored[0].working_days == ["monday", "wednesday"]
        assert stored[0].created_at is not None

    def test_create_leaves_input_untouched(self, db_session, doctor):
        data = make_schedule_data(doctor.id, working_days=["Wednesday", "monday"])

        WeeklyScheduleStore(db_session).create(data)

        assert data.working_days == ["Wednesday", "monday"]

    def test_unknown_doctor(self, db_session):
        with pytest.raises(NotFoundError):
            WeeklyScheduleStore(db_session).create(make_schedule_data(999))

    def test_invalid_fields_are_not_persisted(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)

        with pytest.raises(ValidationError) as excinfo:
            store.create(make_schedule_data(doctor.id, break_start=time(10, 30), break_end=time(11, 30)))

        assert excinfo.value.field == "break_end"
        assert store.get(doctor.id) == []

    def test_get_by_id_unknown(self, db_session):
        with pytest.raises(NotFoundError, match="Schedule 42 not found"):
            WeeklyScheduleStore(db_session).get_by_id(42)


class TestOverlapRule:
    """Test that two active schedules cannot claim the same weekday and time."""

    def test_overlapping_window_same_day_rejected(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))

        with pytest.raises(ValidationError, match="Overlaps active schedule") as excinfo:
            store.create(make_schedule_data(
                doctor.id, working_days=["monday", "tuesday"], start_time=time(10, 30), end_time=time(12, 0)
            ))
        assert excinfo.value.field == "working_days"

    def test_morning_and_afternoon_sessions_allowed(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(doctor.id, start_time=time(14, 0), end_time=time(17, 0)))

        assert len(store.get(doctor.id)) == 2

    def test_touching_windows_allowed(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(doctor.id, start_time=time(11, 0), end_time=time(12, 0)))

    def test_different_weekdays_allowed(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(doctor.id, working_days=["tuesday"]))

    def test_disjoint_validity_ranges_allowed(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(
            doctor.id, valid_from=date(2030, 1, 1), valid_to=date(2030, 3, 31)
        ))
        store.create(make_schedule_data(doctor.id, valid_from=date(2030, 4, 1)))

    def test_inactive_schedule_does_not_conflict(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id, status="inactive"))
        store.create(make_schedule_data(doctor.id))

    def test_other_doctor_does_not_conflict(self, db_session, doctor, other_doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(other_doctor.id))

    def test_reactivating_into_conflict_rejected(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        inactive = store.create(make_schedule_data(doctor.id, status="inactive"))

        with pytest.raises(ValidationError):
            store.update(inactive.id, {"status": "active"})


class TestUpdateAndDelete:
    """Test partial updates and deletion."""

    def test_partial_update_keeps_other_fields(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        schedule = store.create(make_schedule_data(doctor.id))

        updated = store.update(schedule.id, {"end_time": time(12, 0), "max_patients_per_slot": 4})

        assert updated.end_time == time(12, 0)
        assert updated.max_patients_per_slot == 4
        assert updated.start_time == time(9, 0)
        assert updated.room_number == "101"

    def test_update_does_not_conflict_with_itself(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        schedule = store.create(make_schedule_data(doctor.id))

        store.update(schedule.id, {"start_time": time(8, 30)})

    def test_update_validates_merged_schedule(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        schedule = store.create(make_schedule_data(doctor.id))

        with pytest.raises(ValidationError) as excinfo:
            store.update(schedule.id, {"end_time": time(8, 0)})

        assert excinfo.value.field == "end_time"
        db_session.refresh(schedule)
        assert schedule.end_time == time(11, 0)

    def test_unknown_field_rejected(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        schedule = store.create(make_schedule_data(doctor.id))

        with pytest.raises(ValidationError) as excinfo:
            store.update(schedule.id, {"colour": "blue"})
        assert excinfo.value.field == "colour"

    def test_delete(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        schedule = store.create(make_schedule_data(doctor.id))

        store.delete(schedule.id)

        assert store.get(doctor.id) == []
        with pytest.raises(NotFoundError):
            store.delete(schedule.id)


class TestListing:
    """Test filtered listing."""

    @pytest.fixture
    def populated(self, db_session, doctor, other_doctor):
        neurology = Department(name="Neurology")
        db_session.add(neurology)
        db_session.commit()
        neurologist = Doctor(name="Dr. Meera Iyer", department_id=neurology.id, is_active=True)
        db_session.add(neurologist)
        db_session.commit()

        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(doctor.id, working_days=["friday"], status="inactive"))
        store.create(make_schedule_data(other_doctor.id, working_days=["tuesday"]))
        store.create(make_schedule_data(neurologist.id, working_days=["monday"], consultation_mode="online"))
        return store, neurology

    def test_no_filters_lists_everything(self, populated):
        store, _ = populated
        assert len(store.list()) == 4

    def test_status_filter(self, populated):
        store, _ = populated
        assert len(store.list(status="active")) == 3
        assert len(store.list(status="inactive")) == 1
        assert len(store.list(status="all")) == 4

    def test_day_filter(self, populated):
        store, _ = populated
        assert len(store.list(day_of_week="Monday")) == 2

    def test_unknown_day_filter(self, populated):
        store, _ = populated
        with pytest.raises(ValidationError):
            store.list(day_of_week="someday")

    def test_department_filter(self, populated, department):
        store, neurology = populated
        assert len(store.list_by_department(department.id)) == 3
        assert len(store.list_by_department(neurology.id)) == 1

    def test_combined_filters(self, populated, doctor):
        store, _ = populated
        result = store.list(doctor_id=doctor.id, status="active", day_of_week="monday")
        assert len(result) == 1


class TestActiveForDate:

    def test_returns_covering_schedules_in_start_order(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        afternoon = store.create(make_schedule_data(doctor.id, start_time=time(14, 0), end_time=time(16, 0)))
        morning = store.create(make_schedule_data(doctor.id))
        store.create(make_schedule_data(doctor.id, working_days=["tuesday"]))

        result = store.active_for_date(doctor.id, NEXT_MONDAY)

        assert [s.id for s in result] == [morning.id, afternoon.id]

    def test_excludes_expired(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id, valid_to=NEXT_MONDAY - timedelta(days=1)))

        assert store.active_for_date(doctor.id, NEXT_MONDAY) == []
