"""
Unit tests for AvailabilityService.

Tests how schedules, leaves and bookings combine into per-date slots,
including:
- Leave override
- Merging morning/afternoon schedules
- Partial-day leave blocking
- Overbooking detection on confirmation
- Batch requests
"""

import pytest
from datetime import date, time, timedelta

from core.constants import MAX_BATCH_DATES
from core.exceptions import NotFoundError, ValidationError
from services.availability_service import AvailabilityService
from services.booking_ledger import BookingLedger
from services.leave_registry import LeaveRegistry
from services.schedule_store import WeeklyScheduleStore

from tests.conftest import make_schedule_data, NEXT_MONDAY


TODAY = date(2030, 1, 1)


@pytest.fixture
def monday_schedule(db_session, doctor):
    """Monday 09:00-11:00, 30-minute slots, capacity 1."""
    return WeeklyScheduleStore(db_session).create(make_schedule_data(doctor.id))


def _statuses(result):
    return {slot.start_time: slot.status for slot in result.slots}


class TestGetAvailability:
    """Test per-date availability."""

    def test_generates_slots_for_working_day(self, db_session, doctor, monday_schedule):
        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert not result.is_leave
        assert [s.start_time for s in result.slots] == [time(9, 0), time(9, 30), time(10, 0), time(10, 30)]

    def test_booking_marks_slot_booked(self, db_session, doctor, monday_schedule):
        BookingLedger(db_session).record(doctor.id, NEXT_MONDAY, time(10, 0), "PAT-1")

        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert _statuses(result)[time(10, 0)] == "booked"
        assert _statuses(result)[time(9, 0)] == "available"

    def test_no_schedule_means_no_slots(self, db_session, doctor):
        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert result.slots == []
        assert not result.is_leave

    def test_full_day_leave_overrides_schedule(self, db_session, doctor, monday_schedule):
        BookingLedger(db_session).record(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")
        LeaveRegistry(db_session).add(doctor.id, NEXT_MONDAY, today=TODAY)

        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert result.is_leave
        assert result.slots == []

    def test_leave_on_other_date_has_no_effect(self, db_session, doctor, monday_schedule):
        LeaveRegistry(db_session).add(doctor.id, NEXT_MONDAY + timedelta(days=1), today=TODAY)

        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert len(result.slots) == 4

    def test_partial_leave_blocks_intersecting_slots(self, db_session, doctor, monday_schedule):
        LeaveRegistry(db_session).add(
            doctor.id, NEXT_MONDAY, start_time=time(10, 0), end_time=time(11, 0), today=TODAY
        )

        statuses = _statuses(AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY))

        assert statuses == {
            time(9, 0): "available",
            time(9, 30): "available",
            time(10, 0): "blocked",
            time(10, 30): "blocked",
        }

    def test_morning_and_afternoon_schedules_are_merged(self, db_session, doctor):
        store = WeeklyScheduleStore(db_session)
        store.create(make_schedule_data(doctor.id, start_time=time(14, 0), end_time=time(15, 0)))
        store.create(make_schedule_data(doctor.id))

        result = AvailabilityService(db_session).get_availability(doctor.id, NEXT_MONDAY)

        assert [s.start_time for s in result.slots] == [
            time(9, 0), time(9, 30), time(10, 0), time(10, 30), time(14, 0), time(14, 30),
        ]

    def test_schedule_edit_is_visible_immediately(self, db_session, doctor, monday_schedule):
        service = AvailabilityService(db_session)
        assert len(service.get_availability(doctor.id, NEXT_MONDAY).slots) == 4

        WeeklyScheduleStore(db_session).update(monday_schedule.id, {"slot_duration_minutes": 60})

        assert len(service.get_availability(doctor.id, NEXT_MONDAY).slots) == 2

    def test_unknown_doctor(self, db_session):
        with pytest.raises(NotFoundError):
            AvailabilityService(db_session).get_availability(555, NEXT_MONDAY)


class TestFindSlot:
    """Test looking up a single slot by start time."""

    def test_finds_slot_with_current_status(self, db_session, doctor, monday_schedule):
        BookingLedger(db_session).record(doctor.id, NEXT_MONDAY, time(9, 30), "PAT-1")

        slot = AvailabilityService(db_session).find_slot(doctor.id, NEXT_MONDAY, time(9, 30, 45))

        assert slot.start_time == time(9, 30)
        assert slot.status == "booked"
        assert slot.booked_by == ["PAT-1"]

    def test_off_grid_time_has_no_slot(self, db_session, doctor, monday_schedule):
        assert AvailabilityService(db_session).find_slot(doctor.id, NEXT_MONDAY, time(9, 15)) is None

    def test_no_slot_on_leave_day(self, db_session, doctor, monday_schedule):
        LeaveRegistry(db_session).add(doctor.id, NEXT_MONDAY, today=TODAY)

        assert AvailabilityService(db_session).find_slot(doctor.id, NEXT_MONDAY, time(9, 0)) is None


class TestConfirmBooking:
    """Test booking confirmation and overbooking detection."""

    def test_available_slot(self, db_session, doctor, monday_schedule):
        confirmation = AvailabilityService(db_session).confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")

        assert not confirmation.overbooked
        assert not confirmation.outside_schedule
        assert confirmation.slot_status == "available"
        assert confirmation.booking.id is not None

    def test_overbooking_is_recorded_and_flagged(self, db_session, doctor, monday_schedule):
        service = AvailabilityService(db_session)
        service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")

        confirmation = service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-2")

        assert confirmation.overbooked
        assert confirmation.slot_status == "booked"
        bookings = BookingLedger(db_session).bookings_for(doctor.id, NEXT_MONDAY)
        assert [b.patient_ref for b in bookings] == ["PAT-1", "PAT-2"]
        slot = service.get_availability(doctor.id, NEXT_MONDAY).slots[0]
        assert slot.booked_count == 2
        assert slot.status == "booked"

    def test_capacity_two_not_overbooked_on_second(self, db_session, doctor):
        WeeklyScheduleStore(db_session).create(make_schedule_data(doctor.id, max_patients_per_slot=2))
        service = AvailabilityService(db_session)

        first = service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")
        second = service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-2")
        third = service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-3")

        assert (first.overbooked, second.overbooked, third.overbooked) == (False, False, True)

    def test_off_schedule_time_is_recorded_and_flagged(self, db_session, doctor, monday_schedule):
        confirmation = AvailabilityService(db_session).confirm_booking(doctor.id, NEXT_MONDAY, time(16, 0), "PAT-1")

        assert not confirmation.overbooked
        assert confirmation.outside_schedule
        assert confirmation.slot_status is None
        assert confirmation.booking.id is not None

    def test_booking_on_leave_is_flagged(self, db_session, doctor, monday_schedule):
        LeaveRegistry(db_session).add(doctor.id, NEXT_MONDAY, today=TODAY)

        confirmation = AvailabilityService(db_session).confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")

        assert confirmation.outside_schedule
        assert not confirmation.overbooked

    def test_booking_into_blocked_slot_is_flagged(self, db_session, doctor, monday_schedule):
        LeaveRegistry(db_session).add(
            doctor.id, NEXT_MONDAY, start_time=time(9, 0), end_time=time(9, 30), today=TODAY
        )

        confirmation = AvailabilityService(db_session).confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")

        assert confirmation.slot_status == "blocked"
        assert confirmation.outside_schedule

    def test_cancellation_frees_the_slot(self, db_session, doctor, monday_schedule):
        service = AvailabilityService(db_session)
        confirmation = service.confirm_booking(doctor.id, NEXT_MONDAY, time(9, 0), "PAT-1")

        BookingLedger(db_session).cancel(confirmation.booking.id)

        assert _statuses(service.get_availability(doctor.id, NEXT_MONDAY))[time(9, 0)] == "available"


class TestBatchAvailability:
    """Test multi-date availability."""

    def test_results_follow_request_order(self, db_session, doctor, monday_schedule):
        dates = [NEXT_MONDAY + timedelta(days=7), NEXT_MONDAY + timedelta(days=1), NEXT_MONDAY]

        results = AvailabilityService(db_session).get_batch_availability(doctor.id, dates)

        assert [r.date for r in results] == dates
        assert [len(r.slots) for r in results] == [4, 0, 4]

    def test_too_many_dates(self, db_session, doctor):
        dates = [NEXT_MONDAY + timedelta(days=i) for i in range(MAX_BATCH_DATES + 1)]

        with pytest.raises(ValidationError) as excinfo:
            AvailabilityService(db_session).get_batch_availability(doctor.id, dates)
        assert excinfo.value.field == "dates"
