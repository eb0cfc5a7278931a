from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base
import enum

class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    HOLIDAY = "holiday"
    WFH = "wfh"

class WorkMode(str, enum.Enum):
    ONSITE = "onsite"
    WFH = "wfh"
    FIELD = "field"

class AttendanceLog(Base):
    __tablename__ = "attendance_logs"
    __table_args__ = (UniqueConstraint("employee_id", "work_date", name="uq_attendance_employee_day"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False, index=True)

    clock_in_time = Column(DateTime(timezone=True), nullable=True)
    clock_in_gps_lat = Column(Float, nullable=True)
    clock_in_gps_lng = Column(Float, nullable=True)
    clock_in_distance = Column(Integer, nullable=True)  # metres from branch

    clock_out_time = Column(DateTime(timezone=True), nullable=True)
    clock_out_gps_lat = Column(Float, nullable=True)
    clock_out_gps_lng = Column(Float, nullable=True)
    clock_out_distance = Column(Integer, nullable=True)

    total_hours = Column(Float, nullable=True)
    is_late = Column(Boolean, default=False, nullable=False)
    late_minutes = Column(Integer, default=0, nullable=False)
    status = Column(String, default=AttendanceStatus.PRESENT.value)
    work_mode = Column(String, default=WorkMode.ONSITE.value)
    # Closed by the auto-checkout job rather than by the employee
    auto_checkout = Column(Boolean, default=False, nullable=False)
    note = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
