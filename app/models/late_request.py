from sqlalchemy import Column, String, Date
from app.database import Base
from app.models.request_base import ApprovalMixin

class LateRequest(ApprovalMixin, Base):
    __tablename__ = "late_requests"

    request_date = Column(Date, nullable=False, index=True)
    actual_arrival_time = Column(String, nullable=True)  # "HH:MM"
