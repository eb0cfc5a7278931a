from sqlalchemy import Column, String, Date, Boolean
from app.database import Base
from app.models.request_base import ApprovalMixin

class FieldWorkRequest(ApprovalMixin, Base):
    __tablename__ = "field_work_requests"

    request_date = Column(Date, nullable=False, index=True)
    location = Column(String, nullable=False)
    is_half_day = Column(Boolean, default=False, nullable=False)
