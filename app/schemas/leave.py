from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import List, Literal, Optional

from app.services.leave_balance import ReportStats, StatusCounts

DrilldownStatus = Literal["approved", "pending", "rejected", "cancelled"]


class LeaveTypeResponse(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    max_days_per_year: Optional[float] = None
    is_paid: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ApproverBrief(BaseModel):
    id: int
    first_name: str
    last_name: str
    position: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveApprovalResponse(BaseModel):
    id: int
    level: int
    status: str
    comment: Optional[str] = None
    action_at: Optional[datetime] = None
    approver: Optional[ApproverBrief] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveRequestResponse(BaseModel):
    id: int
    leave_code: Optional[str] = None
    leave_type: str
    start_date: date
    end_date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    total_days: float
    reason: Optional[str] = None
    status: Optional[str] = None
    reject_reason: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    approvals: List[LeaveApprovalResponse] = []

    model_config = ConfigDict(from_attributes=True)


class BalanceItem(BaseModel):
    code: str
    name: str
    is_paid: bool
    total: float
    used: float
    approved: float
    pending: float
    rejected: float
    cancelled: float
    remaining: float
    is_unlimited: bool
    is_over_limit: bool
    approved_percentage: float
    pending_percentage: float


class DashboardBalanceResponse(BaseModel):
    employee_id: int
    year: int
    balances: List[BalanceItem]


class DrilldownResponse(BaseModel):
    employee_id: int
    year: int
    leave_type: str
    status: DrilldownStatus
    count: int
    total_days: float
    requests: List[LeaveRequestResponse]


class AdminLeaveFilters(BaseModel):
    status: Optional[str] = None
    leave_type: Optional[str] = None
    company: Optional[str] = None
    department: Optional[str] = None
    section: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None


class LeaveReportFilters(AdminLeaveFilters):
    year: Optional[int] = None
    month: int = 0  # 0 = every month of the year


class AdminEmployeeBrief(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str
    position: Optional[str] = None
    company: Optional[str] = None
    department: Optional[str] = None
    section: Optional[str] = None
    company_name: Optional[str] = None
    department_name: Optional[str] = None
    section_name: Optional[str] = None


class AdminLeaveItem(LeaveRequestResponse):
    employee: AdminEmployeeBrief


class AdminLeaveListResponse(BaseModel):
    leaves: List[AdminLeaveItem]
    stats: StatusCounts


class LeaveReportRow(BaseModel):
    id: int
    employee_code: str
    employee_name: str
    position: str
    department: str
    department_code: Optional[str] = None
    section: str
    section_code: str
    start_date: date
    end_date: date
    total_days: float
    leave_type: str
    leave_type_name: str
    reason: Optional[str] = None
    status: Optional[str] = None
    status_label: Optional[str] = None
    note: str


class CompanyOption(BaseModel):
    code: str
    name: str


class DepartmentOption(BaseModel):
    code: str
    name: str
    company_code: Optional[str] = None


class SectionOption(BaseModel):
    code: str
    name: str
    department_code: Optional[str] = None


class LeaveReportResponse(BaseModel):
    rows: List[LeaveReportRow]
    stats: ReportStats
    companies: List[CompanyOption]
    departments: List[DepartmentOption]
    sections: List[SectionOption]


class LeaveSummaryItem(BaseModel):
    code: str
    name: str
    max_days: float
    used_days: float
    remaining_days: float  # -1 when unlimited
    is_unlimited: bool


class EmployeeLeaveSummaryResponse(BaseModel):
    user_id: int
    user_name: str
    year: int
    summary: List[LeaveSummaryItem]
