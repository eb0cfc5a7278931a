from typing import Dict, Optional
from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    values: Dict[str, str] = Field(..., min_length=1)


class AutoApproveSettings(BaseModel):
    ot: bool = False
    leave: bool = False
    wfh: bool = False
    field_work: bool = False
    late: bool = False


class AutoApproveUpdate(BaseModel):
    ot: Optional[bool] = None
    leave: Optional[bool] = None
    wfh: Optional[bool] = None
    field_work: Optional[bool] = None
    late: Optional[bool] = None
