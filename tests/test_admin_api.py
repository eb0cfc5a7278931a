from datetime import date, timedelta

from app.core.clock import today_local


def test_branch_and_employee_admin(client):
    branch = client.post("/api/branches", json={"name": "Khon Kaen", "gps_lat": 16.4419, "gps_lng": 102.8360})
    assert branch.status_code == 201
    assert branch.json()["radius_meters"] == 100

    employee = client.post("/api/employees", json={
        "name": "Malee",
        "email": "malee@example.com",
        "base_salary": 18000,
        "branch_id": branch.json()["id"],
    })
    assert employee.status_code == 201
    assert employee.json()["is_system_account"] is False

    duplicate = client.post("/api/employees", json={"name": "Malee 2", "email": "malee@example.com"})
    assert duplicate.status_code == 409

    listed = client.get("/api/employees", params={"branch_id": branch.json()["id"]}).json()
    assert [e["email"] for e in listed] == ["malee@example.com"]

def test_employee_with_unknown_branch(client):
    response = client.post("/api/employees", json={"name": "Nobody", "email": "n@example.com", "branch_id": 999})
    assert response.status_code == 404

def test_settings_roundtrip(client):
    initial = client.get("/api/settings").json()
    assert initial["success"] is True
    assert initial["data"]["rates"] == {"workday_rate": 1.0, "weekend_rate": 1.5, "holiday_rate": 2.0}

    updated = client.put("/api/settings", json={"values": {"ot_rate_holiday": "3", "working_days": "1,2,3,4,5,6"}})
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["rates"]["holiday_rate"] == 3.0
    assert data["working_days"] == [1, 2, 3, 4, 5, 6]

def test_unknown_setting_key_is_rejected(client):
    response = client.put("/api/settings", json={"values": {"ot_rate_midnight": "4"}})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "UNKNOWN_SETTING"

def test_unusable_setting_value_is_rejected(client):
    response = client.put("/api/settings", json={"values": {"work_start_time": "25:00", "late_threshold": "10"}})
    assert response.status_code == 400
    error = response.json()["errors"][0]
    assert error["code"] == "INVALID_SETTING_VALUE"
    assert error["details"] == {"work_start_time": "must be a time in HH:MM format"}
    # nothing from the rejected batch is written
    assert client.get("/api/settings").json()["data"]["late_threshold_minutes"] == 15

def test_auto_approve_switches(client, employee):
    assert client.get("/api/settings/auto-approve").json() == {
        "ot": False, "leave": False, "wfh": False, "field_work": False, "late": False,
    }
    response = client.put("/api/settings/auto-approve", json={"wfh": True, "late": True})
    assert response.json()["wfh"] is True
    assert response.json()["late"] is True
    assert response.json()["ot"] is False

    created = client.post("/api/requests/wfh", json={"employee_id": employee.id, "request_date": "2026-10-22", "reason": "Plumber"})
    assert created.json()["status"] == "approved"

def test_holiday_admin_and_lookups(client, branch, other_branch):
    monday = date(2026, 10, 19)
    created = client.post("/api/holidays", json={
        "date": monday.isoformat(), "name": "Founding Day", "type": "branch", "branch_id": branch.id,
    })
    assert created.status_code == 201

    own = client.get("/api/holidays/day-info", params={"date": monday.isoformat(), "branch_id": branch.id}).json()
    other = client.get("/api/holidays/day-info", params={"date": monday.isoformat(), "branch_id": other_branch.id}).json()
    assert own["data"]["type"] == "holiday"
    assert own["data"]["holiday_name"] == "Founding Day"
    assert other["data"]["type"] == "workday"

    rate = client.get("/api/holidays/rate", params={"date": monday.isoformat(), "branch_id": branch.id, "ot_type": "pre_shift"}).json()
    assert rate["data"]["rate_multiplier"] == 2.0
    assert rate["data"]["is_holiday"] is True

    listed = client.get("/api/holidays", params={
        "start_date": "2026-10-01", "end_date": "2026-10-31", "branch_id": branch.id,
    }).json()
    assert [h["name"] for h in listed] == ["Founding Day"]
    assert client.get("/api/holidays", params={"start_date": "2026-10-01", "end_date": "2026-10-31"}).json() == []

def test_branch_holiday_needs_branch_id(client):
    response = client.post("/api/holidays", json={"date": "2026-10-19", "name": "Somewhere", "type": "branch"})
    assert response.status_code == 422

def test_rate_uses_employee_branch_and_overrides(client, db_session, employee):
    employee.ot_rate_1_5x = 1.75
    db_session.commit()
    rate = client.get("/api/holidays/rate", params={"date": "2026-10-19", "employee_id": employee.id}).json()
    assert rate["data"]["rate_multiplier"] == 1.75
    assert rate["warnings"] == []

def test_upcoming_holidays(client):
    soon = today_local() + timedelta(days=3)
    later = today_local() + timedelta(days=90)
    client.post("/api/holidays", json={"date": soon.isoformat(), "name": "Soon"})
    client.post("/api/holidays", json={"date": later.isoformat(), "name": "Later"})

    names = [h["name"] for h in client.get("/api/holidays/upcoming").json()]
    assert names == ["Soon"]
    assert [h["name"] for h in client.get("/api/holidays/upcoming", params={"days": 120}).json()] == ["Soon", "Later"]
