from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BranchBase(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    gps_lat: float = Field(..., ge=-90, le=90)
    gps_lng: float = Field(..., ge=-180, le=180)
    radius_meters: float = Field(100.0, gt=0)


class BranchCreate(BranchBase):
    pass


class BranchResponse(BranchBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: str
    phone: Optional[str] = None
    base_salary: Optional[float] = Field(None, ge=0)
    branch_id: Optional[int] = None
    # Per-employee OT multipliers; unset or non-positive falls back to the settings
    ot_rate_1x: Optional[float] = None
    ot_rate_1_5x: Optional[float] = None
    ot_rate_2x: Optional[float] = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeResponse(EmployeeBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_system_account: bool
    is_active: bool
