from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator
import datetime as dt

from app.models.holiday import HolidayType


class HolidayCreate(BaseModel):
    date: dt.date
    name: str = Field(..., min_length=1)
    type: HolidayType = HolidayType.PUBLIC
    branch_id: Optional[int] = None

    @model_validator(mode="after")
    def branch_holiday_needs_branch(self):
        if self.type == HolidayType.BRANCH and self.branch_id is None:
            raise ValueError("branch holidays require branch_id")
        return self


class HolidayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: dt.date
    name: str
    type: str
    branch_id: Optional[int] = None
    is_active: bool


class RateResponse(BaseModel):
    date: dt.date
    ot_type: str
    rate_multiplier: float
    is_holiday: bool
    holiday_name: Optional[str] = None
