from sqlalchemy import Column, String, Float, Date, DateTime, Boolean
from app.database import Base
from app.models.request_base import ApprovalMixin
import enum

class OTType(str, enum.Enum):
    NORMAL = "normal"
    PRE_SHIFT = "pre_shift"
    HOLIDAY = "holiday"

class OTRequest(ApprovalMixin, Base):
    __tablename__ = "ot_requests"

    ot_type = Column(String, default=OTType.NORMAL.value, nullable=False)
    request_date = Column(Date, nullable=False, index=True)

    requested_start_time = Column(DateTime(timezone=True), nullable=False)
    requested_end_time = Column(DateTime(timezone=True), nullable=False)
    approved_start_time = Column(DateTime(timezone=True), nullable=True)
    approved_end_time = Column(DateTime(timezone=True), nullable=True)
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)

    approved_ot_hours = Column(Float, nullable=True)
    actual_ot_hours = Column(Float, nullable=True)

    # Multiplier quoted at creation, re-resolved from the calendar when the session starts
    ot_rate = Column(Float, nullable=True)
    # NULL means the OT could not be priced (e.g. no base salary configured)
    ot_amount = Column(Float, nullable=True)

    is_holiday = Column(Boolean, default=False, nullable=False)
    holiday_name = Column(String, nullable=True)
    # Calendar day type (workday / weekend / holiday) recorded when the session starts
    day_type = Column(String, nullable=True)
