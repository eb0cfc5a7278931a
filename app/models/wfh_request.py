from sqlalchemy import Column, Date, Boolean
from app.database import Base
from app.models.request_base import ApprovalMixin

class WFHRequest(ApprovalMixin, Base):
    __tablename__ = "wfh_requests"

    request_date = Column(Date, nullable=False, index=True)
    is_half_day = Column(Boolean, default=False, nullable=False)
