from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)

    # Geofence centre and tolerance used to gate check-in/check-out
    gps_lat = Column(Float, nullable=False)
    gps_lng = Column(Float, nullable=False)
    radius_meters = Column(Float, nullable=False, default=100.0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employees = relationship("Employee", back_populates="branch")

    def __repr__(self):
        return f"<Branch {self.name} ({self.gps_lat}, {self.gps_lng}) r={self.radius_meters}m>"
