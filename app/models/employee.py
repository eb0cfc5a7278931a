from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)

    # Monthly salary; hourly wage is derived from work-time settings
    base_salary = Column(Float, nullable=True)

    # Per-employee OT multipliers (override the workday / normal / holiday tiers)
    ot_rate_1x = Column(Float, nullable=True)
    ot_rate_1_5x = Column(Float, nullable=True)
    ot_rate_2x = Column(Float, nullable=True)

    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)

    # Reserved account that auto-approved requests are attributed to
    is_system_account = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="employees")

    def __repr__(self):
        return f"<Employee {self.email}>"
