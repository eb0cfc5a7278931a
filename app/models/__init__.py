# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    branch, employee, holiday, system_setting, attendance,
    ot_request, leave_request, wfh_request, field_work_request, late_request
)

# Explicit class exports for cleaner imports
from .branch import Branch
from .employee import Employee
from .holiday import Holiday, HolidayType
from .system_setting import SystemSetting
from .attendance import AttendanceLog
from .request_base import RequestStatus
from .ot_request import OTRequest, OTType
from .leave_request import LeaveRequest, LeaveType
from .wfh_request import WFHRequest
from .field_work_request import FieldWorkRequest
from .late_request import LateRequest

__all__ = [
    "Branch",
    "Employee",
    "Holiday",
    "HolidayType",
    "SystemSetting",
    "AttendanceLog",
    "RequestStatus",
    "OTRequest",
    "OTType",
    "LeaveRequest",
    "LeaveType",
    "WFHRequest",
    "FieldWorkRequest",
    "LateRequest",
]
