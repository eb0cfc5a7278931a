"""
Request Service Layer

Creation and status transitions for leave, WFH, field-work and late requests,
plus the approve / reject / cancel transitions shared with OT requests.

Architecture:
- Router -> Service (this module) -> Models
- Initial status always comes from the auto-approval gate
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Type

from sqlalchemy.orm import Session

from app.core.clock import now_local
from app.core.exceptions import AppException, InvalidStateError, NotFoundError
from app.models.employee import Employee
from app.models.field_work_request import FieldWorkRequest
from app.models.late_request import LateRequest
from app.models.leave_request import LeaveRequest
from app.models.ot_request import OTRequest
from app.models.request_base import RequestStatus
from app.models.wfh_request import WFHRequest
from app.services.auto_approve import AutoApproveKey, gate_new_request
from app.services.ot_calculator import elapsed_hours

logger = logging.getLogger(__name__)

# URL segment -> (model, auto-approve key)
REQUEST_TYPES: Dict[str, tuple] = {
    "ot": (OTRequest, AutoApproveKey.OT),
    "leave": (LeaveRequest, AutoApproveKey.LEAVE),
    "wfh": (WFHRequest, AutoApproveKey.WFH),
    "field-work": (FieldWorkRequest, AutoApproveKey.FIELD_WORK),
    "late": (LateRequest, AutoApproveKey.LATE),
}

CANCELLABLE = {RequestStatus.PENDING.value, RequestStatus.APPROVED.value}


def get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if employee is None or not employee.is_active:
        raise NotFoundError("Employee", employee_id)
    return employee


def resolve_request_type(request_type: str) -> tuple:
    if request_type not in REQUEST_TYPES:
        raise AppException(
            message=f"Unknown request type '{request_type}'",
            status_code=404,
            error_code="UNKNOWN_REQUEST_TYPE",
        )
    return REQUEST_TYPES[request_type]


def _persist(db: Session, record):
    db.add(record)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record


def create_gated(db: Session, model: Type, key: AutoApproveKey, data: Dict[str, Any]):
    """Run `data` through the auto-approval gate and insert it into `model`'s table."""
    get_employee(db, data["employee_id"])
    record = model(**gate_new_request(db, key, data))
    _persist(db, record)
    logger.info(f"Created {model.__tablename__} #{record.id} ({record.status})")
    return record


def create_leave_request(
    db: Session,
    employee_id: int,
    leave_type: str,
    start_date: date,
    end_date: date,
    reason: str,
    is_half_day: bool = False,
    attachment_url: Optional[str] = None,
) -> LeaveRequest:
    if end_date < start_date:
        raise AppException("Leave end date is before start date", error_code="INVALID_DATE_RANGE")
    if is_half_day and end_date != start_date:
        raise AppException("A half-day leave must start and end on the same day", error_code="INVALID_DATE_RANGE")
    return create_gated(db, LeaveRequest, AutoApproveKey.LEAVE, {
        "employee_id": employee_id,
        "leave_type": leave_type,
        "start_date": start_date,
        "end_date": end_date,
        "is_half_day": is_half_day,
        "reason": reason,
        "attachment_url": attachment_url,
    })


def create_wfh_request(db: Session, employee_id: int, request_date: date, reason: str, is_half_day: bool = False) -> WFHRequest:
    return create_gated(db, WFHRequest, AutoApproveKey.WFH, {
        "employee_id": employee_id,
        "request_date": request_date,
        "is_half_day": is_half_day,
        "reason": reason,
    })


def create_field_work_request(
    db: Session, employee_id: int, request_date: date, location: str, reason: str, is_half_day: bool = False
) -> FieldWorkRequest:
    return create_gated(db, FieldWorkRequest, AutoApproveKey.FIELD_WORK, {
        "employee_id": employee_id,
        "request_date": request_date,
        "location": location,
        "is_half_day": is_half_day,
        "reason": reason,
    })


def create_late_request(
    db: Session, employee_id: int, request_date: date, reason: str, actual_arrival_time: Optional[str] = None
) -> LateRequest:
    return create_gated(db, LateRequest, AutoApproveKey.LATE, {
        "employee_id": employee_id,
        "request_date": request_date,
        "actual_arrival_time": actual_arrival_time,
        "reason": reason,
    })


def fill_approved_window(ot: OTRequest) -> None:
    """Default the approved OT window to the requested one."""
    if ot.approved_start_time is None:
        ot.approved_start_time = ot.requested_start_time
    if ot.approved_end_time is None:
        ot.approved_end_time = ot.requested_end_time
    ot.approved_ot_hours = float(elapsed_hours(ot.approved_start_time, ot.approved_end_time))


def get_request(db: Session, request_type: str, request_id: int):
    model, _ = resolve_request_type(request_type)
    record = db.get(model, request_id)
    if record is None:
        raise NotFoundError(model.__name__, request_id)
    return record


def update_request_status(
    db: Session,
    request_type: str,
    request_id: int,
    status: RequestStatus,
    actor_id: int,
    cancel_reason: Optional[str] = None,
    now: Optional[datetime] = None,
):
    """
    Move a request to approved / rejected / cancelled.

    Only pending requests can be approved or rejected. Pending and approved
    requests can be cancelled, except OT sessions that have already started.
    """
    record = get_request(db, request_type, request_id)
    get_employee(db, actor_id)
    now = now or now_local()

    if status in (RequestStatus.APPROVED, RequestStatus.REJECTED):
        if record.status != RequestStatus.PENDING.value:
            raise InvalidStateError(f"Only pending requests can be {status.value}", record.status)
        record.approved_by = actor_id
        record.approved_at = now
        if status == RequestStatus.APPROVED and isinstance(record, OTRequest):
            fill_approved_window(record)
    elif status == RequestStatus.CANCELLED:
        if record.status not in CANCELLABLE:
            raise InvalidStateError(f"Cannot cancel a {record.status} request", record.status)
        if isinstance(record, OTRequest) and record.actual_start_time is not None:
            raise InvalidStateError("OT session already started", record.status)
        record.cancelled_by = actor_id
        record.cancelled_at = now
        record.cancel_reason = cancel_reason
    else:
        raise AppException(f"Unsupported status transition to {status.value}", error_code="INVALID_TRANSITION")

    previous = record.status
    record.status = status.value
    _persist(db, record)
    logger.info(f"{record.__tablename__} #{record.id}: {previous} -> {record.status} by {actor_id}")
    return record
