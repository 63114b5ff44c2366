from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum

class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"  # approved by at least one level, waiting on the next
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    leave_code = Column(String, unique=True, nullable=True)  # Human-readable reference, e.g. "LV-2025-0001"
    employee_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    leave_type = Column(String, index=True, nullable=False)  # LeaveType.code
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    total_days = Column(Float, nullable=False)  # Fractional for half days
    reason = Column(Text, nullable=True)
    status = Column(String, default=LeaveStatus.PENDING.value, index=True)  # String so unknown workflow states survive a read
    reject_reason = Column(Text, nullable=True)
    cancel_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employee = relationship("User", foreign_keys=[employee_id], back_populates="leave_requests")
    approvals = relationship(
        "LeaveApproval",
        back_populates="leave_request",
        order_by="LeaveApproval.level",
        cascade="all, delete-orphan",
    )


class LeaveApproval(Base):
    """One level of the approval chain. Written by the workflow, read here for timelines."""
    __tablename__ = "leave_approvals"

    id = Column(Integer, primary_key=True, index=True)
    leave_request_id = Column(Integer, ForeignKey("leave_requests.id"), index=True, nullable=False)
    level = Column(Integer, nullable=False)
    status = Column(String, default=LeaveStatus.PENDING.value)
    approver_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    comment = Column(Text, nullable=True)
    action_at = Column(DateTime(timezone=True), nullable=True)

    leave_request = relationship("LeaveRequest", back_populates="approvals")
    approver = relationship("User", foreign_keys=[approver_id])
