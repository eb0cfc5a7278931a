"""
OT Router

HTTP endpoints for overtime preview, requests and sessions.
All business logic is delegated to the OT service layer.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.ot import OTPreviewRequest, OTPreviewResponse, OTRequestCreate, OTRequestResponse
from app.services import ot_service

router = APIRouter(prefix="/ot", tags=["overtime"])


@router.post("/preview", response_model=ApiResponse[OTPreviewResponse])
def preview_ot(payload: OTPreviewRequest, db: Session = Depends(get_db)):
    """
    Rate and amount for a prospective OT window. Nothing is written.
    `warnings` lists any lookup that fell back to defaults.
    """
    quote = ot_service.quote_ot(
        db, payload.employee_id, payload.request_date, payload.start_time, payload.end_time, payload.ot_type
    )
    calculation = quote.calculation
    return ApiResponse.ok(
        OTPreviewResponse(
            start_time=quote.start_time,
            end_time=quote.end_time,
            ot_type=quote.rate.ot_type,
            rate_multiplier=quote.rate.rate_multiplier,
            is_holiday=quote.rate.is_holiday,
            holiday_name=quote.rate.holiday_name,
            hours=float(calculation.hours),
            hourly_rate=float(calculation.hourly_rate),
            amount=float(calculation.amount) if calculation.is_priced else None,
        ),
        warnings=quote.warnings,
    )


@router.post("/requests", response_model=OTRequestResponse, status_code=status.HTTP_201_CREATED)
def create_ot_request(payload: OTRequestCreate, db: Session = Depends(get_db)):
    return ot_service.create_ot_request(
        db,
        employee_id=payload.employee_id,
        request_date=payload.request_date,
        start_hhmm=payload.start_time,
        end_hhmm=payload.end_time,
        reason=payload.reason,
        ot_type=payload.ot_type,
    )


@router.get("/requests", response_model=List[OTRequestResponse])
def list_ot_requests(
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return ot_service.list_ot_requests(db, employee_id, status, start_date, end_date)


@router.get("/requests/{ot_id}", response_model=OTRequestResponse)
def get_ot_request(ot_id: int, db: Session = Depends(get_db)):
    return ot_service.get_ot_request(db, ot_id)


@router.post("/requests/{ot_id}/start", response_model=OTRequestResponse)
def start_ot(ot_id: int, db: Session = Depends(get_db)):
    return ot_service.start_ot(db, ot_id)


@router.post("/requests/{ot_id}/end", response_model=OTRequestResponse)
def end_ot(ot_id: int, db: Session = Depends(get_db)):
    return ot_service.end_ot(db, ot_id)
