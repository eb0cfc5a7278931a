from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.clock import today_local
from app.core.exceptions import AppException, NotFoundError
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.branch import Branch
from app.models.ot_request import OTType
from app.schemas.holiday import HolidayCreate, HolidayResponse, RateResponse
from app.services import holiday_service
from app.services.holiday_service import DayInfo
from app.services.rate_resolver import resolve_rate
from app.services.request_service import get_employee
from app.services.settings_service import load_system_settings

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("", response_model=List[HolidayResponse])
def list_holidays(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Holidays in [start_date, end_date]; defaults to the coming year."""
    start = start_date or today_local()
    end = end_date or start + timedelta(days=365)
    if end < start:
        raise AppException("end_date is before start_date", error_code="INVALID_DATE_RANGE")
    return holiday_service.holidays_in_range(db, start, end, branch_id)


@router.get("/upcoming", response_model=List[HolidayResponse])
def upcoming_holidays(
    days: int = Query(30, ge=1, le=366),
    limit: int = Query(5, ge=1, le=100),
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return holiday_service.upcoming_holidays(db, days=days, limit=limit, branch_id=branch_id)


@router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
def create_holiday(payload: HolidayCreate, db: Session = Depends(get_db)):
    if payload.branch_id is not None and db.get(Branch, payload.branch_id) is None:
        raise NotFoundError("Branch", payload.branch_id)
    return holiday_service.create_holiday(db, payload.date, payload.name, payload.type, payload.branch_id)


@router.get("/day-info", response_model=ApiResponse[DayInfo])
def day_info(
    day: date = Query(..., alias="date"),
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    working_days = load_system_settings(db).value.working_days
    lookup = holiday_service.get_day_info(db, day, working_days, branch_id)
    return ApiResponse.ok(lookup.value, warnings=["holiday_lookup_unavailable"] if lookup.defaulted else [])


@router.get("/rate", response_model=ApiResponse[RateResponse])
def ot_rate(
    day: date = Query(..., alias="date"),
    branch_id: Optional[int] = None,
    ot_type: OTType = OTType.NORMAL,
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """OT multiplier for a date; an employee id applies that employee's overrides and branch."""
    employee = get_employee(db, employee_id) if employee_id is not None else None
    if employee is not None and branch_id is None:
        branch_id = employee.branch_id

    rates = load_system_settings(db).value.rates
    resolution = resolve_rate(db, day, branch_id=branch_id, employee_overrides=employee, ot_type=ot_type, rates=rates)
    return ApiResponse.ok(
        RateResponse(
            date=day,
            ot_type=resolution.ot_type,
            rate_multiplier=resolution.rate_multiplier,
            is_holiday=resolution.is_holiday,
            holiday_name=resolution.holiday_name,
        ),
        warnings=["holiday_lookup_unavailable"] if resolution.holiday_lookup_degraded else [],
    )
