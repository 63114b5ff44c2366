# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, department, user, leave_type, leave_request

# Explicit class exports for cleaner imports
from .company import Company
from .department import Department, Section
from .user import User, UserRole
from .leave_type import LeaveType
from .leave_request import LeaveRequest, LeaveApproval, LeaveStatus

__all__ = [
    "Company",
    "Department",
    "Section",
    "User",
    "UserRole",
    "LeaveType",
    "LeaveRequest",
    "LeaveApproval",
    "LeaveStatus",
]
