from sqlalchemy import Column, Integer, String, Float, Boolean
from app.database import Base

class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)  # e.g., "sick", "personal", "vacation"
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    max_days_per_year = Column(Float, nullable=True)  # NULL = unlimited
    is_paid = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
