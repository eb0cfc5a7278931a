from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import date, datetime

from app.core.clock import parse_hhmm
from app.models.leave_request import LeaveType


class RequestBase(BaseModel):
    employee_id: int
    reason: str = Field(..., min_length=1)


class LeaveRequestCreate(RequestBase):
    leave_type: LeaveType
    start_date: date
    end_date: date
    is_half_day: bool = False
    attachment_url: Optional[str] = None


class WFHRequestCreate(RequestBase):
    request_date: date
    is_half_day: bool = False


class FieldWorkRequestCreate(RequestBase):
    request_date: date
    location: str = Field(..., min_length=1)
    is_half_day: bool = False


class LateRequestCreate(RequestBase):
    request_date: date
    actual_arrival_time: Optional[str] = None

    @field_validator("actual_arrival_time")
    @classmethod
    def validate_arrival(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            parse_hhmm(v)
        except ValueError:
            raise ValueError("must be a time in HH:MM format")
        return v


class StatusAction(BaseModel):
    """Acting employee for approve / reject / cancel."""
    actor_id: int
    reason: Optional[str] = None


class RequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    status: str
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    cancelled_by: Optional[int] = None
    cancelled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class LeaveRequestResponse(RequestResponse):
    leave_type: str
    start_date: date
    end_date: date
    is_half_day: bool
    attachment_url: Optional[str] = None


class WFHRequestResponse(RequestResponse):
    request_date: date
    is_half_day: bool


class FieldWorkRequestResponse(RequestResponse):
    request_date: date
    location: str
    is_half_day: bool


class LateRequestResponse(RequestResponse):
    request_date: date
    actual_arrival_time: Optional[str] = None
