import pytest
from datetime import date, datetime

from app.core.clock import ensure_local, local_tz
from app.core.exceptions import DuplicateCheckInError, InvalidStateError
from app.models.attendance import AttendanceLog
from app.models.employee import Employee
from app.models.holiday import Holiday
from app.services import attendance_service, ot_service

OFFICE = {"lat": 13.7563, "lng": 100.5018}
ACROSS_THE_ROAD = {"lat": 13.7568, "lng": 100.5020}   # ~60 m
SIAM_SQUARE = {"lat": 13.7455, "lng": 100.5340}       # ~3.6 km

PLAIN_MONDAY = date(2026, 10, 19)
SATURDAY = date(2026, 10, 24)


def _at(day, hour, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=local_tz())


def test_geofence_check_inside(client, employee):
    response = client.post("/api/attendance/geofence-check", json={"employee_id": employee.id, **ACROSS_THE_ROAD})
    assert response.status_code == 200
    data = response.json()
    assert data["in_radius"] is True
    assert 0 < data["distance_meters"] < 100
    assert data["distance_text"].endswith(" m")
    assert data["radius_meters"] == 100

def test_geofence_check_outside(client, employee):
    data = client.post("/api/attendance/geofence-check", json={"employee_id": employee.id, **SIAM_SQUARE}).json()
    assert data["in_radius"] is False
    assert data["distance_text"].endswith(" km")

def test_geofence_check_needs_branch(client, db_session):
    loner = Employee(name="Freelancer", email="free@example.com")
    db_session.add(loner)
    db_session.commit()
    response = client.post("/api/attendance/geofence-check", json={"employee_id": loner.id, **OFFICE})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "NO_BRANCH"

def test_check_in_and_out(client, employee):
    checked_in = client.post("/api/attendance/check-in", json={"employee_id": employee.id, **OFFICE})
    assert checked_in.status_code == 200
    assert checked_in.json()["clock_in_distance"] == 0

    duplicate = client.post("/api/attendance/check-in", json={"employee_id": employee.id, **OFFICE})
    assert duplicate.status_code == 409
    assert duplicate.json()["errors"][0]["code"] == "ALREADY_CHECKED_IN"

    checked_out = client.post("/api/attendance/check-out", json={"employee_id": employee.id, **ACROSS_THE_ROAD})
    assert checked_out.status_code == 200
    data = checked_out.json()
    assert data["clock_out_time"] is not None
    assert data["total_hours"] is not None

def test_check_in_outside_radius_reports_distance(client, employee):
    response = client.post("/api/attendance/check-in", json={"employee_id": employee.id, **SIAM_SQUARE})
    assert response.status_code == 403
    error = response.json()["errors"][0]
    assert error["code"] == "OUTSIDE_GEOFENCE"
    assert error["details"]["distance_meters"] > 3000
    assert error["details"]["radius_meters"] == 100

def test_check_in_requires_location(client, employee):
    response = client.post("/api/attendance/check-in", json={"employee_id": employee.id})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "LOCATION_REQUIRED"

def test_gps_can_be_switched_off(client, employee, set_settings):
    set_settings(require_gps="false")
    response = client.post("/api/attendance/check-in", json={"employee_id": employee.id, **SIAM_SQUARE})
    assert response.status_code == 200
    assert response.json()["clock_in_distance"] is None

def test_wfh_check_in_skips_geofence(client, employee):
    response = client.post("/api/attendance/check-in", json={"employee_id": employee.id, "work_mode": "wfh"})
    assert response.status_code == 200
    assert response.json()["status"] == "wfh"

def test_check_out_without_check_in(client, employee):
    response = client.post("/api/attendance/check-out", json={"employee_id": employee.id, **OFFICE})
    assert response.status_code == 409

def test_list_attendance(client, employee):
    client.post("/api/attendance/check-in", json={"employee_id": employee.id, **OFFICE})
    rows = client.get("/api/attendance", params={"employee_id": employee.id}).json()
    assert len(rows) == 1


class TestLateness:
    """Service-level checks with a fixed clock; default start 08:30 with 15 minutes grace."""

    @pytest.mark.parametrize("hour, minute, expected", [(8, 0, 0), (8, 45, 0), (8, 50, 5), (9, 30, 45)])
    def test_late_minutes_on_a_workday(self, db_session, employee, hour, minute, expected):
        log = attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, hour, minute), **OFFICE)
        assert log.late_minutes == expected
        assert log.is_late is (expected > 0)

    def test_never_late_on_a_weekend(self, db_session, employee):
        log = attendance_service.check_in(db_session, employee.id, now=_at(SATURDAY, 11), **OFFICE)
        assert log.late_minutes == 0
        assert log.is_late is False

    def test_holiday_check_in(self, db_session, employee):
        db_session.add(Holiday(date=PLAIN_MONDAY, name="Substitution Day", type="public"))
        db_session.commit()
        log = attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 10), **OFFICE)
        assert log.status == "holiday"
        assert log.late_minutes == 0

    def test_configured_start_time(self, db_session, employee, set_settings):
        set_settings(work_start_time="09:00", late_threshold="5")
        log = attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 9, 20), **OFFICE)
        assert log.late_minutes == 15

    def test_unusable_start_time_falls_back_to_default(self, db_session, employee, set_settings):
        # written straight to the store, bypassing the settings API validation
        set_settings(work_start_time="25:00")
        log = attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 9), **OFFICE)
        assert log.late_minutes == 15

    def test_total_hours_and_state_errors(self, db_session, employee):
        with pytest.raises(InvalidStateError):
            attendance_service.check_out(db_session, employee.id, now=_at(PLAIN_MONDAY, 17), **OFFICE)

        attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 8, 30), **OFFICE)
        with pytest.raises(DuplicateCheckInError):
            attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 8, 35), **OFFICE)

        log = attendance_service.check_out(db_session, employee.id, now=_at(PLAIN_MONDAY, 17, 45), **OFFICE)
        assert log.total_hours == 9.25
        with pytest.raises(InvalidStateError):
            attendance_service.check_out(db_session, employee.id, now=_at(PLAIN_MONDAY, 18), **OFFICE)

    def test_check_out_after_midnight(self, db_session, employee):
        attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 22), **OFFICE)
        log = attendance_service.check_out(db_session, employee.id, now=_at(date(2026, 10, 20), 1, 30), **OFFICE)
        assert log.work_date == PLAIN_MONDAY
        assert log.total_hours == 3.5

    def test_stale_open_log_is_not_picked_up(self, db_session, employee):
        attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 8, 30), **OFFICE)
        with pytest.raises(InvalidStateError):
            attendance_service.check_out(db_session, employee.id, now=_at(date(2026, 10, 21), 9), **OFFICE)


def test_auto_checkout_endpoint_when_disabled(client):
    response = client.post("/api/attendance/auto-checkout")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["enabled"] is False
    assert body["data"]["auto_checkouts"] == 0
    assert body["warnings"] == ["auto_checkout_disabled"]


class TestAutoCheckout:
    """Defaults: work ends 17:30, logs close 4 h later with an 18:00 check-out."""

    def _checked_in(self, db_session, employee):
        return attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 8, 30), **OFFICE)

    def test_disabled_by_default(self, db_session, employee):
        log = self._checked_in(db_session, employee)
        result = attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 23))
        assert result.enabled is False
        assert db_session.get(AttendanceLog, log.id).clock_out_time is None

    def test_closes_after_the_delay(self, db_session, employee, set_settings):
        set_settings(auto_checkout_enabled="true")
        log = self._checked_in(db_session, employee)

        early = attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 21, 29))
        assert early.closed == []

        result = attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 21, 30))
        assert [closed.id for closed in result.closed] == [log.id]
        closed = db_session.get(AttendanceLog, log.id)
        assert ensure_local(closed.clock_out_time) == _at(PLAIN_MONDAY, 18)
        assert closed.total_hours == 9.5
        assert closed.auto_checkout is True

        # already closed logs are left alone
        assert attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 23)).closed == []

    def test_configured_delay_and_time(self, db_session, employee, set_settings):
        set_settings(auto_checkout_enabled="true", auto_checkout_delay_hours="1", auto_checkout_time="17:30")
        log = self._checked_in(db_session, employee)
        result = attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 18, 30))
        assert len(result.closed) == 1
        assert db_session.get(AttendanceLog, log.id).total_hours == 9.0

    def test_late_arrival_never_gets_negative_hours(self, db_session, employee, set_settings):
        set_settings(auto_checkout_enabled="true")
        log = attendance_service.check_in(db_session, employee.id, now=_at(PLAIN_MONDAY, 19), **OFFICE)
        attendance_service.auto_checkout(db_session, now=_at(date(2026, 10, 20), 8))
        assert db_session.get(AttendanceLog, log.id).total_hours == 0

    def test_skips_employees_with_approved_ot(self, db_session, employee, set_settings):
        set_settings(auto_checkout_enabled="true")
        log = self._checked_in(db_session, employee)
        ot = ot_service.create_ot_request(db_session, employee.id, PLAIN_MONDAY, "18:00", "23:00", "stocktake")
        ot.status = "approved"
        db_session.commit()

        result = attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 22))
        assert result.skipped_with_ot == 1
        assert db_session.get(AttendanceLog, log.id).clock_out_time is None

        set_settings(auto_checkout_skip_if_ot="false")
        assert len(attendance_service.auto_checkout(db_session, now=_at(PLAIN_MONDAY, 22)).closed) == 1
