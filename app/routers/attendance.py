"""
Attendance Router

Geofence check, check-in / check-out and the auto-checkout job. Clock
endpoints are rate limited per client address.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.attendance import (
    AttendanceResponse,
    AutoCheckoutResponse,
    CheckInRequest,
    CheckOutRequest,
    GeofenceCheckRequest,
    GeofenceCheckResponse,
)
from app.services import attendance_service
from app.services.geofence import format_distance

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/geofence-check", response_model=GeofenceCheckResponse)
def geofence_check(payload: GeofenceCheckRequest, db: Session = Depends(get_db)):
    result, branch = attendance_service.geofence_check(db, payload.employee_id, payload.lat, payload.lng)
    return GeofenceCheckResponse(
        in_radius=result.in_radius,
        distance_meters=result.distance_meters,
        distance_text=format_distance(result.distance_meters),
        radius_meters=branch.radius_meters,
    )


@router.post("/check-in", response_model=AttendanceResponse)
@limiter.limit(settings.rate_limit_checkin)
def check_in(request: Request, payload: CheckInRequest, db: Session = Depends(get_db)):
    return attendance_service.check_in(db, payload.employee_id, payload.lat, payload.lng, payload.work_mode)


@router.post("/check-out", response_model=AttendanceResponse)
@limiter.limit(settings.rate_limit_checkin)
def check_out(request: Request, payload: CheckOutRequest, db: Session = Depends(get_db)):
    return attendance_service.check_out(db, payload.employee_id, payload.lat, payload.lng)


@router.post("/auto-checkout", response_model=ApiResponse[AutoCheckoutResponse])
def run_auto_checkout(db: Session = Depends(get_db)):
    """Scheduler hook: close logs left open after the working day."""
    result = attendance_service.auto_checkout(db)
    return ApiResponse.ok(AutoCheckoutResponse(
        enabled=result.enabled,
        auto_checkouts=len(result.closed),
        attendance_ids=[log.id for log in result.closed],
        skipped_with_ot=result.skipped_with_ot,
    ), warnings=[] if result.enabled else ["auto_checkout_disabled"])


@router.get("", response_model=List[AttendanceResponse])
def list_attendance(
    employee_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return attendance_service.list_attendance(db, employee_id, start_date, end_date)
