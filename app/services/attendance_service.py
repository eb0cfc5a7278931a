"""
Attendance Service Layer

Check-in / check-out against the employee's branch geofence.

Lateness is only counted on workdays:
    late_minutes = max(0, clock_in - (work_start_time + late_threshold_minutes))

Logs left open after the working day are closed by `auto_checkout` when enabled.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.clock import build_local_datetime, ensure_local, now_local
from app.core.exceptions import (
    AppException,
    DuplicateCheckInError,
    InvalidStateError,
    OutsideGeofenceError,
)
from app.models.attendance import AttendanceLog, AttendanceStatus, WorkMode
from app.models.branch import Branch
from app.models.employee import Employee
from app.models.ot_request import OTRequest
from app.models.request_base import RequestStatus
from app.services.geofence import GeoFence, GeofenceResult, GeoPoint, check_radius
from app.services.holiday_service import DayType, get_day_info
from app.services.ot_calculator import elapsed_hours
from app.services.request_service import get_employee
from app.services.settings_service import SystemSettings, load_system_settings

logger = logging.getLogger(__name__)


def _branch_for(db: Session, employee: Employee) -> Optional[Branch]:
    if employee.branch_id is None:
        return None
    return db.get(Branch, employee.branch_id)


def fence_for(branch: Branch) -> GeoFence:
    return GeoFence(lat=branch.gps_lat, lng=branch.gps_lng, radius_meters=branch.radius_meters)


def geofence_check(db: Session, employee_id: int, lat: float, lng: float) -> Tuple[GeofenceResult, Branch]:
    """Check a position against the employee's branch without recording anything."""
    employee = get_employee(db, employee_id)
    branch = _branch_for(db, employee)
    if branch is None:
        raise AppException("Employee is not assigned to a branch", error_code="NO_BRANCH")
    return check_radius(GeoPoint(lat, lng), fence_for(branch)), branch


def _verify_location(
    db: Session,
    employee: Employee,
    lat: Optional[float],
    lng: Optional[float],
    system_settings: SystemSettings,
) -> Optional[GeofenceResult]:
    """Geofence gate. Returns None when no check applies (GPS not required, or no branch)."""
    branch = _branch_for(db, employee)
    if not system_settings.require_gps or branch is None:
        return None
    if lat is None or lng is None:
        raise AppException("GPS location is required", error_code="LOCATION_REQUIRED")

    result = check_radius(GeoPoint(lat, lng), fence_for(branch))
    if not result.in_radius:
        logger.info(
            f"Employee {employee.id} outside geofence of branch {branch.id}",
            extra={"distance_meters": result.distance_meters, "radius_meters": branch.radius_meters},
        )
        raise OutsideGeofenceError(result.distance_meters, branch.radius_meters)
    return result


def late_minutes_for(clock_in: datetime, work_date: date, system_settings: SystemSettings) -> int:
    deadline = build_local_datetime(work_date, system_settings.work_start_time)
    minutes = int((ensure_local(clock_in) - deadline).total_seconds() // 60) - system_settings.late_threshold_minutes
    return max(0, minutes)


def get_attendance(db: Session, employee_id: int, work_date: date) -> Optional[AttendanceLog]:
    return (
        db.query(AttendanceLog)
        .filter(AttendanceLog.employee_id == employee_id, AttendanceLog.work_date == work_date)
        .first()
    )


def _open_log_since(db: Session, employee_id: int, since: date) -> Optional[AttendanceLog]:
    return (
        db.query(AttendanceLog)
        .filter(
            AttendanceLog.employee_id == employee_id,
            AttendanceLog.work_date >= since,
            AttendanceLog.clock_in_time.isnot(None),
            AttendanceLog.clock_out_time.is_(None),
        )
        .order_by(AttendanceLog.work_date.desc())
        .first()
    )


def check_in(
    db: Session,
    employee_id: int,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    work_mode: WorkMode = WorkMode.ONSITE,
    now: Optional[datetime] = None,
) -> AttendanceLog:
    employee = get_employee(db, employee_id)
    now = now or now_local()
    work_date = now.date()
    system_settings = load_system_settings(db).value

    existing = get_attendance(db, employee_id, work_date)
    if existing is not None and existing.clock_in_time is not None:
        raise DuplicateCheckInError()

    # Off-site modes skip the geofence
    fence = _verify_location(db, employee, lat, lng, system_settings) if work_mode == WorkMode.ONSITE else None

    day_info = get_day_info(db, work_date, system_settings.working_days, employee.branch_id).value
    late = late_minutes_for(now, work_date, system_settings) if day_info.type == DayType.WORKDAY else 0

    log = existing or AttendanceLog(employee_id=employee_id, work_date=work_date)
    log.clock_in_time = now
    log.clock_in_gps_lat = lat
    log.clock_in_gps_lng = lng
    log.clock_in_distance = fence.distance_meters if fence else None
    log.is_late = late > 0
    log.late_minutes = late
    log.work_mode = work_mode.value
    log.status = (
        AttendanceStatus.HOLIDAY.value if day_info.type == DayType.HOLIDAY
        else AttendanceStatus.WFH.value if work_mode == WorkMode.WFH
        else AttendanceStatus.PRESENT.value
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info(f"Employee {employee_id} checked in on {work_date} ({day_info.type.value}, late {late} min)")
    return log


def check_out(
    db: Session,
    employee_id: int,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    now: Optional[datetime] = None,
) -> AttendanceLog:
    employee = get_employee(db, employee_id)
    now = now or now_local()
    log = get_attendance(db, employee_id, now.date())
    if log is None or log.clock_in_time is None:
        # Shift that started before midnight
        log = _open_log_since(db, employee_id, now.date() - timedelta(days=1))
        if log is None:
            raise InvalidStateError("No check-in found for today")
    if log.clock_out_time is not None:
        raise InvalidStateError("Already checked out today")

    fence = None
    if log.work_mode == WorkMode.ONSITE.value:
        fence = _verify_location(db, employee, lat, lng, load_system_settings(db).value)

    log.clock_out_time = now
    log.clock_out_gps_lat = lat
    log.clock_out_gps_lng = lng
    log.clock_out_distance = fence.distance_meters if fence else None
    log.total_hours = float(elapsed_hours(log.clock_in_time, now))
    db.commit()
    db.refresh(log)
    logger.info(f"Employee {employee_id} checked out after {log.total_hours} h")
    return log


def list_attendance(
    db: Session,
    employee_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[AttendanceLog]:
    query = db.query(AttendanceLog)
    if employee_id:
        query = query.filter(AttendanceLog.employee_id == employee_id)
    if start_date:
        query = query.filter(AttendanceLog.work_date >= start_date)
    if end_date:
        query = query.filter(AttendanceLog.work_date <= end_date)
    return query.order_by(AttendanceLog.work_date.desc()).all()


@dataclass
class AutoCheckoutResult:
    enabled: bool
    closed: List[AttendanceLog] = field(default_factory=list)
    skipped_with_ot: int = 0


def _has_approved_ot(db: Session, employee_id: int, work_date: date) -> bool:
    return db.query(OTRequest.id).filter(
        OTRequest.employee_id == employee_id,
        OTRequest.request_date == work_date,
        OTRequest.status == RequestStatus.APPROVED.value,
    ).first() is not None


def auto_checkout(db: Session, now: Optional[datetime] = None) -> AutoCheckoutResult:
    """
    Close attendance logs still open `auto_checkout_delay_hours` after
    `work_end_time` on their work date. The recorded check-out is
    `auto_checkout_time` on that date (never earlier than the check-in).
    Meant to be called every few minutes by a scheduler.
    """
    system_settings = load_system_settings(db).value
    if not system_settings.auto_checkout_enabled:
        return AutoCheckoutResult(enabled=False)

    now = ensure_local(now or now_local())
    delay = timedelta(hours=system_settings.auto_checkout_delay_hours)
    result = AutoCheckoutResult(enabled=True)

    open_logs = (
        db.query(AttendanceLog)
        .filter(
            AttendanceLog.work_date <= now.date(),
            AttendanceLog.clock_in_time.isnot(None),
            AttendanceLog.clock_out_time.is_(None),
        )
        .order_by(AttendanceLog.work_date, AttendanceLog.id)
        .all()
    )
    for log in open_logs:
        if now < build_local_datetime(log.work_date, system_settings.work_end_time) + delay:
            continue
        if system_settings.auto_checkout_skip_if_ot and _has_approved_ot(db, log.employee_id, log.work_date):
            result.skipped_with_ot += 1
            continue

        clock_in = ensure_local(log.clock_in_time)
        clock_out = max(build_local_datetime(log.work_date, system_settings.auto_checkout_time), clock_in)
        log.clock_out_time = clock_out
        log.total_hours = float(elapsed_hours(clock_in, clock_out))
        log.auto_checkout = True
        log.note = f"Auto check-out: no check-out within {system_settings.auto_checkout_delay_hours:g} h of work end"
        result.closed.append(log)

    if result.closed:
        db.commit()
        logger.info(
            f"Auto check-out closed {len(result.closed)} attendance log(s)",
            extra={"attendance_ids": [log.id for log in result.closed]},
        )
    return result
