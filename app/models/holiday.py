from sqlalchemy import Column, Integer, String, Date, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.database import Base
import enum

class HolidayType(str, enum.Enum):
    PUBLIC = "public"
    COMPANY = "company"
    BRANCH = "branch"  # only applies to employees of `branch_id`

class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default=HolidayType.PUBLIC.value)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
