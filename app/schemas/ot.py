from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import date, datetime

from app.core.clock import parse_hhmm
from app.models.ot_request import OTType


class OTWindow(BaseModel):
    employee_id: int
    request_date: date
    start_time: str = Field(..., description="Local wall-clock time, HH:MM")
    end_time: str = Field(..., description="Local wall-clock time, HH:MM")
    ot_type: OTType = OTType.NORMAL

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        try:
            parse_hhmm(v)
        except ValueError:
            raise ValueError("must be a time in HH:MM format")
        return v


class OTPreviewRequest(OTWindow):
    pass


class OTRequestCreate(OTWindow):
    reason: str = Field(..., min_length=1)


class OTPreviewResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    ot_type: str
    rate_multiplier: float
    is_holiday: bool
    holiday_name: Optional[str] = None
    hours: float
    hourly_rate: float
    # None when the employee has no usable salary configuration
    amount: Optional[float] = None


class OTRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    ot_type: str
    request_date: date
    status: str
    reason: Optional[str] = None

    requested_start_time: datetime
    requested_end_time: datetime
    approved_start_time: Optional[datetime] = None
    approved_end_time: Optional[datetime] = None
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None

    approved_ot_hours: Optional[float] = None
    actual_ot_hours: Optional[float] = None
    ot_rate: Optional[float] = None
    ot_amount: Optional[float] = None
    is_holiday: bool
    holiday_name: Optional[str] = None
    day_type: Optional[str] = None

    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
