from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.limiter import admin_rate_limit, limiter
from app.database import get_db
from app.schemas.leave import (
    AdminLeaveFilters,
    AdminLeaveListResponse,
    LeaveReportFilters,
    LeaveReportResponse,
)
from app.services import leave_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@router.get("/leaves", response_model=AdminLeaveListResponse)
@limiter.limit(admin_rate_limit)
def list_all_leaves(
    request: Request,
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
    company: Optional[str] = None,
    department: Optional[str] = None,
    section: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Leave requests across companies, departments and sections.
    `status=pending` also matches requests that are mid-way through approval.
    """
    filters = AdminLeaveFilters(
        status=status,
        leave_type=leave_type,
        company=company,
        department=department,
        section=section,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return leave_service.list_admin_leaves(db, filters)


@router.get("/leave-reports", response_model=LeaveReportResponse)
@limiter.limit(admin_rate_limit)
def leave_report(
    request: Request,
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: int = Query(0, ge=0, le=12, description="1-12, or 0 for the whole year"),
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
    company: Optional[str] = None,
    department: Optional[str] = None,
    section: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Printable leave report with day totals and the filter option lists."""
    filters = LeaveReportFilters(
        year=year,
        month=month,
        status=status,
        leave_type=leave_type,
        company=company,
        department=department,
        section=section,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return leave_service.get_leave_report(db, filters)
