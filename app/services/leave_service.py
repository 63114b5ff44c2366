"""
Leave Service Layer

Database access for the leave endpoints. Queries live here; the numbers are
produced by the pure balance engine in app.services.leave_balance.

Architecture:
- Router -> Service (this module) -> Models + leave_balance
- Period filtering happens here, before the engine sees any request
"""
import calendar
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.exceptions import EmployeeNotFoundError, InvalidPeriodError
from app.models.company import Company
from app.models.department import Department, Section
from app.models.leave_request import LeaveApproval, LeaveRequest
from app.models.leave_type import LeaveType
from app.models.user import User
from app.schemas.leave import AdminLeaveFilters, LeaveReportFilters, LeaveRequestResponse
from app.services import leave_balance
from app.services.leave_balance import BalanceDisplay, StatusBucket
from app.services.vacation import calculate_vacation_days

logger = logging.getLogger(__name__)

# Always listed in the approver summary even when missing from the catalog
SYNTHETIC_UNLIMITED_TYPES = {
    "unpaid": "Personal leave (unpaid)",
    "other": "Other leave",
}

# Status labels shown in the admin leave report; unknown states show as stored
STATUS_LABELS = {
    "approved": "Approved",
    "rejected": "Rejected",
    "pending": "Awaiting approval",
    "in_progress": "In progress",
    "cancelled": "Cancelled",
}


def period_bounds(year: int, month: Optional[int] = None) -> Tuple[date, date]:
    """
    Inclusive date range for a year, or for one month of it.
    Months outside 1..12 are ignored and the whole year is returned.
    """
    try:
        if month is not None and 1 <= month <= 12:
            last_day = calendar.monthrange(year, month)[1]
            return date(year, month, 1), date(year, month, last_day)
        return date(year, 1, 1), date(year, 12, 31)
    except ValueError:
        raise InvalidPeriodError(f"Year {year} is out of range")


def get_active_leave_types(db: Session) -> List[LeaveType]:
    return db.query(LeaveType).filter(LeaveType.is_active.is_(True)).order_by(LeaveType.id.asc()).all()


def get_employee(db: Session, employee_id: int) -> User:
    employee = db.query(User).filter(User.id == employee_id).first()
    if not employee:
        raise EmployeeNotFoundError(employee_id)
    return employee


def get_employee_leaves(
    db: Session,
    employee_id: int,
    year: int,
    month: Optional[int] = None,
) -> List[LeaveRequest]:
    """Employee's requests starting inside the period, newest first, with approval chain loaded."""
    get_employee(db, employee_id)
    start, end = period_bounds(year, month)
    return (
        db.query(LeaveRequest)
        .options(selectinload(LeaveRequest.approvals).selectinload(LeaveApproval.approver))
        .filter(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.start_date >= start,
            LeaveRequest.start_date <= end,
        )
        .order_by(LeaveRequest.start_date.desc(), LeaveRequest.id.desc())
        .all()
    )


def get_dashboard_balances(db: Session, employee_id: int, year: int) -> Dict[str, Any]:
    """Per-type balances plus chart values for the employee dashboard."""
    leave_types = get_active_leave_types(db)
    requests = get_employee_leaves(db, employee_id, year)
    summaries = leave_balance.aggregate(leave_types, requests, year)

    balances = []
    for summary in summaries.values():
        display = BalanceDisplay.from_summary(summary)
        balances.append({
            **summary.model_dump(exclude={"quota"}),
            **display.model_dump(),
        })

    logger.info(
        f"Computed {len(balances)} balance(s) for employee {employee_id}",
        extra={"employee_id": employee_id, "year": year, "request_count": len(requests)},
    )
    return {"employee_id": employee_id, "year": year, "balances": balances}


def get_drilldown(
    db: Session,
    employee_id: int,
    year: int,
    leave_type: str,
    status: str,
) -> Dict[str, Any]:
    """Requests behind one dashboard bucket."""
    requests = get_employee_leaves(db, employee_id, year)
    matches = leave_balance.drilldown(requests, leave_type, status)

    rows_by_id = {r.id: r for r in requests}
    rows = [rows_by_id[m.id] for m in matches]
    return {
        "employee_id": employee_id,
        "year": year,
        "leave_type": leave_type,
        "status": status,
        "count": len(rows),
        "total_days": leave_balance.total_days(matches),
        "requests": rows,
    }


def _apply_admin_filters(query, filters: AdminLeaveFilters, with_status: bool = True):
    if with_status and filters.status and filters.status != "all":
        if filters.status == StatusBucket.PENDING.value:
            query = query.filter(LeaveRequest.status.in_(leave_balance.statuses_for_bucket(StatusBucket.PENDING)))
        else:
            query = query.filter(LeaveRequest.status == filters.status)

    if filters.leave_type and filters.leave_type != "all":
        query = query.filter(LeaveRequest.leave_type == filters.leave_type)

    if filters.start_date:
        query = query.filter(LeaveRequest.start_date >= filters.start_date)
    if filters.end_date:
        query = query.filter(LeaveRequest.end_date <= filters.end_date)

    if filters.company and filters.company != "all":
        query = query.filter(User.company == filters.company)
    if filters.department and filters.department != "all":
        query = query.filter(User.department == filters.department)
    if filters.section and filters.section != "all":
        query = query.filter(User.section == filters.section)

    if filters.search:
        term = filters.search.strip()
        query = query.filter(or_(
            User.employee_code.contains(term),
            User.first_name.contains(term),
            User.last_name.contains(term),
        ))
    return query


def list_admin_leaves(db: Session, filters: AdminLeaveFilters) -> Dict[str, Any]:
    """
    All leave requests matching the admin filters, newest first.
    Stats reuse every filter except status so tab counts stay stable while switching tabs.
    """
    base = db.query(LeaveRequest).join(User, LeaveRequest.employee_id == User.id)
    rows = (
        _apply_admin_filters(base, filters)
        .options(
            selectinload(LeaveRequest.employee),
            selectinload(LeaveRequest.approvals).selectinload(LeaveApproval.approver),
        )
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        .all()
    )

    status_rows = _apply_admin_filters(
        db.query(LeaveRequest.status).join(User, LeaveRequest.employee_id == User.id),
        filters,
        with_status=False,
    ).all()
    stats = leave_balance.count_by_status(status_rows)

    company_names = {c.code: c.name for c in db.query(Company.code, Company.name).all()}
    dept_names = {d.code: d.name for d in db.query(Department.code, Department.name).all()}
    section_names = {s.code: s.name for s in db.query(Section.code, Section.name).all()}

    leaves = []
    for row in rows:
        employee = row.employee
        item = LeaveRequestResponse.model_validate(row).model_dump()
        item["employee"] = {
            "id": employee.id,
            "employee_code": employee.employee_code,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "position": employee.position,
            "company": employee.company,
            "department": employee.department,
            "section": employee.section,
            "company_name": company_names.get(employee.company, employee.company),
            "department_name": dept_names.get(employee.department, employee.department),
            "section_name": section_names.get(employee.section, employee.section) if employee.section else None,
        }
        leaves.append(item)

    return {"leaves": leaves, "stats": stats}


def _report_note(row: LeaveRequest) -> str:
    """Reject reason, else cancel reason, else the approvers' comments in level order."""
    comments = []
    for approval in sorted(row.approvals, key=lambda a: a.level):
        comment = (approval.comment or "").strip()
        if not comment:
            continue
        who = approval.approver.first_name if approval.approver else f"L{approval.level}"
        comments.append(f"[{who}] {comment}")
    return row.reject_reason or row.cancel_reason or "; ".join(comments)


def get_leave_report(db: Session, filters: LeaveReportFilters) -> Dict[str, Any]:
    """
    Admin leave report: one row per request with a readable status and note,
    day/status totals over exactly those rows, and the organisation lists
    used to fill the report's filter dropdowns.

    month=0 covers the whole year. A month without a year uses the current year;
    with neither, every period is included.
    """
    query = _apply_admin_filters(
        db.query(LeaveRequest).join(User, LeaveRequest.employee_id == User.id),
        filters,
    )
    if filters.month or filters.year is not None:
        start, end = period_bounds(filters.year or date.today().year, filters.month or None)
        query = query.filter(LeaveRequest.start_date >= start, LeaveRequest.start_date <= end)

    requests = (
        query.options(
            selectinload(LeaveRequest.employee),
            selectinload(LeaveRequest.approvals).selectinload(LeaveApproval.approver),
        )
        .order_by(LeaveRequest.start_date.desc(), LeaveRequest.id.desc())
        .all()
    )
    stats = leave_balance.report_stats(requests)

    type_names = {t.code: t.name for t in db.query(LeaveType.code, LeaveType.name).all()}
    companies = db.query(Company).order_by(Company.name.asc()).all()
    departments = (
        db.query(Department)
        .filter(Department.is_active.is_(True))
        .order_by(Department.name.asc())
        .all()
    )
    sections = (
        db.query(Section)
        .options(selectinload(Section.department_rel))
        .filter(Section.is_active.is_(True))
        .order_by(Section.name.asc())
        .all()
    )
    dept_names = {d.code: d.name for d in departments}
    section_names = {s.code: s.name for s in sections}

    rows = []
    for req in requests:
        employee = req.employee
        rows.append({
            "id": req.id,
            "employee_code": employee.employee_code,
            "employee_name": employee.full_name,
            "position": employee.position or "-",
            "department": dept_names.get(employee.department) or employee.department or "-",
            "department_code": employee.department,
            "section": section_names.get(employee.section, employee.section) if employee.section else "-",
            "section_code": employee.section or "",
            "start_date": req.start_date,
            "end_date": req.end_date,
            "total_days": req.total_days,
            "leave_type": req.leave_type,
            "leave_type_name": type_names.get(req.leave_type, req.leave_type),
            "reason": req.reason,
            "status": req.status,
            "status_label": STATUS_LABELS.get(req.status, req.status),
            "note": _report_note(req),
        })

    logger.info(
        f"Leave report built with {len(rows)} row(s)",
        extra={"year": filters.year, "month": filters.month, "total_days": stats.total_days},
    )
    return {
        "rows": rows,
        "stats": stats,
        "companies": [{"code": c.code, "name": c.name} for c in companies],
        "departments": [{"code": d.code, "name": d.name, "company_code": d.company} for d in departments],
        "sections": [
            {
                "code": s.code,
                "name": s.name,
                "department_code": s.department_rel.code if s.department_rel else None,
            }
            for s in sections
        ],
    }


def get_employee_leave_summary(
    db: Session,
    user_id: int,
    year: int,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Approved days per leave type for one employee, as shown to approvers.
    Unlimited types report remaining_days = -1.
    """
    employee = get_employee(db, user_id)
    leave_types = get_active_leave_types(db)
    start, end = period_bounds(year)
    requests = db.query(LeaveRequest).filter(
        LeaveRequest.employee_id == user_id,
        LeaveRequest.start_date >= start,
        LeaveRequest.start_date <= end,
    ).all()

    catalog = [leave_balance.as_leave_type(t) for t in leave_types]
    present = {t.code for t in catalog}
    for code, name in SYNTHETIC_UNLIMITED_TYPES.items():
        if code not in present:
            catalog.append(leave_balance.LeaveTypeInfo(code=code, name=name, max_days_per_year=None, is_paid=code != "unpaid"))

    summaries = leave_balance.aggregate(catalog, requests, year)

    items = []
    for info in catalog:
        summary = summaries[info.code]
        max_days = summary.total
        if info.code == settings.vacation_leave_code and employee.start_date:
            max_days = calculate_vacation_days(
                employee.start_date,
                year,
                info.max_days_per_year or settings.default_vacation_days,
                today=today,
            )

        is_unlimited = summary.is_unlimited or info.code in settings.unlimited_leave_codes
        used_days = summary.approved
        items.append({
            "code": info.code,
            "name": info.name,
            "max_days": max_days,
            "used_days": used_days,
            "remaining_days": -1 if is_unlimited else max(0, max_days - used_days),
            "is_unlimited": is_unlimited,
        })

    return {
        "user_id": employee.id,
        "user_name": employee.full_name,
        "year": year,
        "summary": items,
    }
