"""
Columns and status lifecycle shared by the five request tables
(OT, leave, WFH, field work, late).
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func
import enum

class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"  # OT only: session ended and priced
    CANCELLED = "cancelled"

class ApprovalMixin:
    id = Column(Integer, primary_key=True, index=True)
    status = Column(String, default=RequestStatus.PENDING.value, nullable=False, index=True)
    reason = Column(String, nullable=True)

    approved_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @declared_attr
    def employee_id(cls):
        return Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    @declared_attr
    def approved_by(cls):
        return Column(Integer, ForeignKey("employees.id"), nullable=True)

    @declared_attr
    def cancelled_by(cls):
        return Column(Integer, ForeignKey("employees.id"), nullable=True)
