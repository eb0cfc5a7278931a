from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime

from app.models.attendance import WorkMode


class LocationPayload(BaseModel):
    employee_id: int
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)


class GeofenceCheckRequest(BaseModel):
    employee_id: int
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class GeofenceCheckResponse(BaseModel):
    in_radius: bool
    distance_meters: int
    distance_text: str
    radius_meters: float


class CheckInRequest(LocationPayload):
    work_mode: WorkMode = WorkMode.ONSITE


class CheckOutRequest(LocationPayload):
    pass


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    work_date: date
    clock_in_time: Optional[datetime] = None
    clock_in_distance: Optional[int] = None
    clock_out_time: Optional[datetime] = None
    clock_out_distance: Optional[int] = None
    total_hours: Optional[float] = None
    is_late: bool
    late_minutes: int
    status: str
    work_mode: str
    auto_checkout: bool = False
    note: Optional[str] = None


class AutoCheckoutResponse(BaseModel):
    enabled: bool
    auto_checkouts: int = 0
    attendance_ids: List[int] = []
    skipped_with_ot: int = 0
