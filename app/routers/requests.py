from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.request_base import RequestStatus
from app.schemas.requests import (
    FieldWorkRequestCreate,
    FieldWorkRequestResponse,
    LateRequestCreate,
    LateRequestResponse,
    LeaveRequestCreate,
    LeaveRequestResponse,
    RequestResponse,
    StatusAction,
    WFHRequestCreate,
    WFHRequestResponse,
)
from app.services import request_service

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("/leave", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
def create_leave(payload: LeaveRequestCreate, db: Session = Depends(get_db)):
    return request_service.create_leave_request(
        db,
        employee_id=payload.employee_id,
        leave_type=payload.leave_type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        is_half_day=payload.is_half_day,
        attachment_url=payload.attachment_url,
    )


@router.post("/wfh", response_model=WFHRequestResponse, status_code=status.HTTP_201_CREATED)
def create_wfh(payload: WFHRequestCreate, db: Session = Depends(get_db)):
    return request_service.create_wfh_request(
        db, payload.employee_id, payload.request_date, payload.reason, payload.is_half_day
    )


@router.post("/field-work", response_model=FieldWorkRequestResponse, status_code=status.HTTP_201_CREATED)
def create_field_work(payload: FieldWorkRequestCreate, db: Session = Depends(get_db)):
    return request_service.create_field_work_request(
        db, payload.employee_id, payload.request_date, payload.location, payload.reason, payload.is_half_day
    )


@router.post("/late", response_model=LateRequestResponse, status_code=status.HTTP_201_CREATED)
def create_late(payload: LateRequestCreate, db: Session = Depends(get_db)):
    return request_service.create_late_request(
        db, payload.employee_id, payload.request_date, payload.reason, payload.actual_arrival_time
    )


@router.get("/{request_type}/{request_id}", response_model=RequestResponse)
def get_request(request_type: str, request_id: int, db: Session = Depends(get_db)):
    return request_service.get_request(db, request_type, request_id)


# Shared transitions; request_type is one of ot, leave, wfh, field-work, late
@router.post("/{request_type}/{request_id}/approve", response_model=RequestResponse)
def approve_request(request_type: str, request_id: int, action: StatusAction, db: Session = Depends(get_db)):
    return request_service.update_request_status(
        db, request_type, request_id, RequestStatus.APPROVED, action.actor_id
    )


@router.post("/{request_type}/{request_id}/reject", response_model=RequestResponse)
def reject_request(request_type: str, request_id: int, action: StatusAction, db: Session = Depends(get_db)):
    return request_service.update_request_status(
        db, request_type, request_id, RequestStatus.REJECTED, action.actor_id
    )


@router.post("/{request_type}/{request_id}/cancel", response_model=RequestResponse)
def cancel_request(request_type: str, request_id: int, action: StatusAction, db: Session = Depends(get_db)):
    return request_service.update_request_status(
        db, request_type, request_id, RequestStatus.CANCELLED, action.actor_id, cancel_reason=action.reason
    )
