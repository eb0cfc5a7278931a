from sqlalchemy import Column, String, Date, Boolean
from app.database import Base
from app.models.request_base import ApprovalMixin
import enum

class LeaveType(str, enum.Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    MILITARY = "military"
    OTHER = "other"

class LeaveRequest(ApprovalMixin, Base):
    __tablename__ = "leave_requests"

    leave_type = Column(String, index=True, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_half_day = Column(Boolean, default=False, nullable=False)
    attachment_url = Column(String, nullable=True)
