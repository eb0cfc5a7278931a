"""
OT Service Layer

Overtime requests from preview to completed session:

    preview  -> rate + amount estimate, nothing written
    create   -> rate quoted, initial status from the auto-approval gate
    start    -> approved requests only; workdays need a check-in first;
                the rate is re-resolved from the calendar on the day
    end      -> actual window priced, status "completed"
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.clock import build_local_datetime, ensure_local, now_local
from app.core.exceptions import InvalidStateError, NotFoundError
from app.models.attendance import AttendanceLog, AttendanceStatus, WorkMode
from app.models.employee import Employee
from app.models.ot_request import OTRequest, OTType
from app.models.request_base import RequestStatus
from app.services.auto_approve import AutoApproveKey
from app.services.holiday_service import DayType, get_day_info
from app.services.ot_calculator import OTCalculation, calculate_ot
from app.services.rate_resolver import RateResolution, rate_for_day_type, resolve_rate
from app.services.request_service import create_gated, fill_approved_window, get_employee
from app.services.settings_service import SystemSettings, load_system_settings

logger = logging.getLogger(__name__)


@dataclass
class OTQuote:
    start_time: datetime
    end_time: datetime
    rate: RateResolution
    calculation: OTCalculation
    warnings: List[str] = field(default_factory=list)


def _price(employee: Employee, start: datetime, end: datetime, multiplier: float, system_settings: SystemSettings) -> OTCalculation:
    return calculate_ot(
        start_time=start,
        end_time=end,
        base_salary=employee.base_salary,
        ot_rate_multiplier=multiplier,
        days_per_month=system_settings.work_time.days_per_month,
        hours_per_day=system_settings.work_time.hours_per_day,
    )


def quote_ot(
    db: Session,
    employee_id: int,
    request_date: date,
    start_hhmm: str,
    end_hhmm: str,
    ot_type: OTType = OTType.NORMAL,
) -> OTQuote:
    employee = get_employee(db, employee_id)
    settings_lookup = load_system_settings(db)
    system_settings = settings_lookup.value

    start = build_local_datetime(request_date, start_hhmm)
    end = build_local_datetime(request_date, end_hhmm)

    rate = resolve_rate(
        db,
        request_date,
        branch_id=employee.branch_id,
        employee_overrides=employee,
        ot_type=ot_type,
        rates=system_settings.rates,
    )
    calculation = _price(employee, start, end, rate.rate_multiplier, system_settings)

    warnings = []
    if settings_lookup.defaulted:
        warnings.append("settings_unavailable")
    if rate.holiday_lookup_degraded:
        warnings.append("holiday_lookup_unavailable")
    if not calculation.is_priced:
        warnings.append("pricing_unavailable")
    return OTQuote(start, end, rate, calculation, warnings)


def create_ot_request(
    db: Session,
    employee_id: int,
    request_date: date,
    start_hhmm: str,
    end_hhmm: str,
    reason: str,
    ot_type: OTType = OTType.NORMAL,
) -> OTRequest:
    quote = quote_ot(db, employee_id, request_date, start_hhmm, end_hhmm, ot_type)
    ot = create_gated(db, OTRequest, AutoApproveKey.OT, {
        "employee_id": employee_id,
        "ot_type": quote.rate.ot_type,
        "request_date": request_date,
        "requested_start_time": quote.start_time,
        "requested_end_time": quote.end_time,
        "reason": reason,
        "ot_rate": quote.rate.rate_multiplier,
        "is_holiday": quote.rate.is_holiday,
        "holiday_name": quote.rate.holiday_name,
    })
    if ot.status == RequestStatus.APPROVED.value:
        fill_approved_window(ot)
        db.commit()
        db.refresh(ot)
    return ot


def get_ot_request(db: Session, ot_id: int) -> OTRequest:
    ot = db.get(OTRequest, ot_id)
    if ot is None:
        raise NotFoundError("OTRequest", ot_id)
    return ot


def _attendance_for(db: Session, employee_id: int, work_date: date) -> Optional[AttendanceLog]:
    return (
        db.query(AttendanceLog)
        .filter(AttendanceLog.employee_id == employee_id, AttendanceLog.work_date == work_date)
        .first()
    )


def start_ot(db: Session, ot_id: int, now: Optional[datetime] = None) -> OTRequest:
    ot = get_ot_request(db, ot_id)
    if ot.status != RequestStatus.APPROVED.value:
        raise InvalidStateError("Only approved OT can be started", ot.status)
    if ot.actual_start_time is not None:
        raise InvalidStateError("OT already started", ot.status)

    now = now or now_local()
    employee = get_employee(db, ot.employee_id)
    system_settings = load_system_settings(db).value
    day_info = get_day_info(db, ot.request_date, system_settings.working_days, employee.branch_id).value
    day_rate = rate_for_day_type(day_info, system_settings, employee, ot_type=ot.ot_type)

    attendance = _attendance_for(db, ot.employee_id, ot.request_date)
    if day_rate.require_checkin:
        if attendance is None or attendance.clock_in_time is None:
            raise InvalidStateError("Check in before starting OT on a workday")
    elif attendance is None:
        # OT on a day off is the arrival itself
        db.add(AttendanceLog(
            employee_id=ot.employee_id,
            work_date=ot.request_date,
            clock_in_time=now,
            status=AttendanceStatus.PRESENT.value,
            work_mode=WorkMode.ONSITE.value,
            note=f"OT start ({day_rate.day_type.value})",
        ))

    # The calendar on the day wins over what was known at request time
    ot.ot_rate = day_rate.rate_multiplier
    ot.day_type = day_rate.day_type.value
    ot.is_holiday = day_rate.day_type == DayType.HOLIDAY
    ot.holiday_name = day_rate.holiday_name
    ot.actual_start_time = now
    db.commit()
    db.refresh(ot)
    logger.info(f"OT #{ot.id} started ({ot.day_type}, rate {ot.ot_rate})")
    return ot


def end_ot(db: Session, ot_id: int, now: Optional[datetime] = None) -> OTRequest:
    ot = get_ot_request(db, ot_id)
    if ot.actual_start_time is None:
        raise InvalidStateError("OT has not started", ot.status)
    if ot.actual_end_time is not None:
        raise InvalidStateError("OT already ended", ot.status)

    now = now or now_local()
    employee = get_employee(db, ot.employee_id)
    system_settings = load_system_settings(db).value
    calculation = _price(employee, ensure_local(ot.actual_start_time), now, ot.ot_rate or 0, system_settings)

    ot.actual_end_time = now
    ot.actual_ot_hours = float(calculation.hours)
    ot.ot_amount = float(calculation.amount) if calculation.is_priced else None
    ot.status = RequestStatus.COMPLETED.value
    db.commit()
    db.refresh(ot)
    if not calculation.is_priced:
        logger.warning(f"OT #{ot.id} completed without pricing: employee {employee.id} has no usable salary configuration")
    return ot


def list_ot_requests(
    db: Session,
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[OTRequest]:
    query = db.query(OTRequest)
    if employee_id:
        query = query.filter(OTRequest.employee_id == employee_id)
    if status:
        query = query.filter(OTRequest.status == status)
    if start_date:
        query = query.filter(OTRequest.request_date >= start_date)
    if end_date:
        query = query.filter(OTRequest.request_date <= end_date)
    return query.order_by(OTRequest.request_date.desc(), OTRequest.id.desc()).all()
