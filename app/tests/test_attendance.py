"""
Tests for the attendance state engine
"""
from datetime import datetime, timedelta

import pytest
from fastapi import status
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.exceptions import (
    ActiveBreakMustEndFirst,
    AlreadyClockedIn,
    FaceVerificationRequired,
    NoActiveSession,
)
from app.models.attendance import Attendance, AttendanceStatus
from app.services import attendance_service, break_service
from app.services.attendance_service import determine_status
from app.services.company_config_service import update_config


def local(*args) -> datetime:
    """A wall-clock instant in the company zone."""
    return datetime(*args, tzinfo=ZoneInfo(settings.TZ))


@pytest.mark.parametrize(
    "clock, expected",
    [
        ((9, 14, 59), AttendanceStatus.PRESENT),
        ((9, 15, 0), AttendanceStatus.PRESENT),
        ((9, 15, 1), AttendanceStatus.LATE),
        ((7, 0, 0), AttendanceStatus.PRESENT),
        ((13, 0, 0), AttendanceStatus.LATE),
    ],
)
def test_late_threshold_boundary(tenant_db, employee, clock, expected):
    now = local(2024, 3, 4, *clock)
    attendance, is_late = attendance_service.clock_in(tenant_db, employee.id, now)

    assert attendance.status == expected
    assert is_late is (expected == AttendanceStatus.LATE)
    assert attendance.work_date == now.date()


def test_forced_status_skips_late_check(tenant_db, employee):
    attendance, is_late = attendance_service.clock_in(
        tenant_db, employee.id, local(2024, 3, 4, 11, 0), status=AttendanceStatus.SICK
    )

    assert attendance.status == AttendanceStatus.SICK
    assert is_late is False


def test_explicit_present_is_still_checked(tenant_db, employee):
    attendance, is_late = attendance_service.clock_in(
        tenant_db, employee.id, local(2024, 3, 4, 11, 0), status=AttendanceStatus.PRESENT
    )
    assert attendance.status == AttendanceStatus.LATE
    assert is_late is True


def test_company_config_drives_lateness(tenant_db, employee):
    update_config(tenant_db, work_start_time="10:00", late_threshold_minutes=0)
    config = attendance_service.find_config(tenant_db)

    assert determine_status(local(2024, 3, 4, 10, 0, 0), config, employee) == AttendanceStatus.PRESENT
    assert determine_status(local(2024, 3, 4, 10, 0, 1), config, employee) == AttendanceStatus.LATE


def test_user_start_time_used_without_config(employee):
    employee.start_work_time = "08:00"

    assert determine_status(local(2024, 3, 4, 8, 15), None, employee) == AttendanceStatus.PRESENT
    assert determine_status(local(2024, 3, 4, 8, 16), None, employee) == AttendanceStatus.LATE


def test_late_window_past_midnight_rolls_over(employee):
    employee.start_work_time = "23:50"

    # Deadline is 00:05 of the next day, so the whole work date is on time
    assert determine_status(local(2024, 3, 4, 23, 59), None, employee) == AttendanceStatus.PRESENT


def test_second_clock_in_same_day_rejected(tenant_db, employee):
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))

    with pytest.raises(AlreadyClockedIn):
        attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 18, 0))

    assert tenant_db.query(Attendance).filter(Attendance.user_id == employee.id).count() == 1


def test_clock_in_again_after_clock_out_rejected(tenant_db, employee):
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))
    attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0))

    with pytest.raises(AlreadyClockedIn):
        attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 17, 5))


def test_next_day_clock_in_allowed(tenant_db, employee):
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))
    attendance, _ = attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 5, 8, 0))

    assert attendance.work_date.isoformat() == "2024-03-05"


def test_work_date_follows_company_clock(tenant_db, employee):
    # 20:00 UTC is already the next morning in Jakarta
    utc_evening = datetime(2024, 3, 4, 20, 0, tzinfo=ZoneInfo("UTC"))
    attendance, _ = attendance_service.clock_in(tenant_db, employee.id, utc_evening)

    assert attendance.work_date == utc_evening.astimezone(ZoneInfo(settings.TZ)).date()


def test_face_registered_user_must_verify(tenant_db, employee):
    employee.face_registered = True
    tenant_db.commit()

    with pytest.raises(FaceVerificationRequired):
        attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))

    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0), face_verified=True)
    with pytest.raises(FaceVerificationRequired):
        attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0))


def test_clock_out_without_clock_in(tenant_db, employee):
    with pytest.raises(NoActiveSession):
        attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0))


def test_clock_out_twice(tenant_db, employee):
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))
    attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0), photo="out.jpg")

    with pytest.raises(NoActiveSession):
        attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 30))


def test_clock_out_blocked_by_active_break(tenant_db, employee):
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))
    break_service.start_break(tenant_db, employee.id, local(2024, 3, 4, 12, 0))

    with pytest.raises(ActiveBreakMustEndFirst):
        attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0))

    break_service.end_break(tenant_db, employee.id, local(2024, 3, 4, 12, 30))
    attendance = attendance_service.clock_out(tenant_db, employee.id, local(2024, 3, 4, 17, 0))
    assert attendance.clock_out is not None


def test_monthly_statistics(tenant_db, employee):
    days = [
        (local(2024, 3, 4, 8, 0), None),
        (local(2024, 3, 5, 10, 0), None),
        (local(2024, 3, 6, 8, 0), AttendanceStatus.SICK),
        (local(2024, 3, 7, 8, 0), AttendanceStatus.LEAVE),
        (local(2024, 4, 1, 8, 0), None),
    ]
    for now, forced in days:
        attendance_service.clock_in(tenant_db, employee.id, now, status=forced)
    break_service.start_break(tenant_db, employee.id, local(2024, 4, 1, 12, 0))
    break_service.end_break(tenant_db, employee.id, local(2024, 4, 1, 12, 20))

    march = attendance_service.get_statistics(tenant_db, employee.id, 3, 2024)
    april = attendance_service.get_statistics(tenant_db, employee.id, 4, 2024)

    assert march == {
        "total_days": 4,
        "present": 1,
        "late": 1,
        "absent": 0,
        "sick": 1,
        "leave": 1,
        "alpha": 0,
        "total_break_minutes": 0,
    }
    assert april["total_days"] == 1
    assert april["total_break_minutes"] == 20


def test_admin_report_filters(tenant_db, employee, make_user):
    other = make_user("sari@acme.test")
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 4, 8, 0))
    attendance_service.clock_in(tenant_db, other.id, local(2024, 3, 4, 7, 0))
    attendance_service.clock_in(tenant_db, employee.id, local(2024, 3, 10, 8, 0))

    march_4 = local(2024, 3, 4).date()
    by_range = attendance_service.admin_report(tenant_db, march_4, march_4)
    by_user = attendance_service.admin_report(tenant_db, user_id=employee.id)
    everything = attendance_service.admin_report(tenant_db, start_date=march_4)

    assert {a.user_id for a in by_range} == {employee.id, other.id}
    assert [a.work_date.day for a in by_user] == [10, 4]
    # A single bound does not filter
    assert len(everything) == 3


def test_clock_in_endpoint(client, employee_headers):
    response = client.post(
        "/api/v1/attendance/clock-in",
        json={"latitude": -6.2, "longitude": 106.8, "photo": "in.jpg"},
        headers=employee_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["is_late"] == (data["attendance"]["status"] == "LATE")
    assert data["attendance"]["latitude"] == -6.2
    assert data["attendance"]["clock_in_photo"] == "in.jpg"
    assert data["attendance"]["clock_in"].endswith("Z")

    again = client.post("/api/v1/attendance/clock-in", json={}, headers=employee_headers)
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["kind"] == "ALREADY_CLOCKED_IN"


def test_today_and_clock_out_endpoints(client, employee_headers):
    assert client.get("/api/v1/attendance/today", headers=employee_headers).json() is None

    client.post("/api/v1/attendance/clock-in", json={}, headers=employee_headers)
    today = client.get("/api/v1/attendance/today", headers=employee_headers).json()
    assert today["clock_out"] is None
    assert today["breaks"] == []

    out = client.post("/api/v1/attendance/clock-out", json={"photo": "out.jpg"}, headers=employee_headers)
    assert out.status_code == status.HTTP_200_OK
    assert out.json()["clock_out"] is not None

    again = client.post("/api/v1/attendance/clock-out", json={}, headers=employee_headers)
    assert again.json()["kind"] == "NO_ACTIVE_SESSION"


def test_history_is_paginated(client, tenant_db, employee, employee_headers):
    start = local(2024, 1, 1, 8, 0)
    for offset in range(5):
        attendance_service.clock_in(tenant_db, employee.id, start + timedelta(days=offset))

    response = client.get("/api/v1/attendance/history?page=2&limit=2", headers=employee_headers)

    data = response.json()
    assert data["total"] == 5
    assert [item["work_date"] for item in data["items"]] == ["2024-01-03", "2024-01-02"]


def test_admin_endpoints_require_admin(client, employee_headers, admin_headers):
    denied = client.get("/api/v1/attendance/admin/today", headers=employee_headers)
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert denied.json()["kind"] == "INSUFFICIENT_ROLE"

    client.post("/api/v1/attendance/clock-in", json={}, headers=employee_headers)
    allowed = client.get("/api/v1/attendance/admin/today", headers=admin_headers)
    assert allowed.status_code == status.HTTP_200_OK
    assert [a["user"]["email"] for a in allowed.json()] == ["budi@acme.test"]


def test_statistics_endpoint_rejects_bad_month(client, employee_headers):
    response = client.get("/api/v1/attendance/statistics?month=13", headers=employee_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["kind"] == "VALIDATION_ERROR"
