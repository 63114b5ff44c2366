from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.leave import (
    DashboardBalanceResponse,
    DrilldownResponse,
    DrilldownStatus,
    LeaveRequestResponse,
    LeaveTypeResponse,
)
from app.services import leave_service

router = APIRouter(tags=["leave"])


def _year_or_current(year: Optional[int]) -> int:
    return year if year is not None else date.today().year


@router.get("/leave-types", response_model=List[LeaveTypeResponse])
def list_leave_types(db: Session = Depends(get_db)):
    return leave_service.get_active_leave_types(db)


@router.get("/my-leaves", response_model=ApiResponse[List[LeaveRequestResponse]])
def list_my_leaves(
    employee_id: int = Query(..., ge=1),
    year: Optional[int] = Query(None, ge=1900, le=2200),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """Employee's requests for a year (or one month of it), newest first."""
    leaves = leave_service.get_employee_leaves(db, employee_id, _year_or_current(year), month)
    data = [LeaveRequestResponse.model_validate(leave) for leave in leaves]
    return ApiResponse.ok(data=data)


@router.get("/leave/balance", response_model=DashboardBalanceResponse)
def get_leave_balance(
    employee_id: int = Query(..., ge=1),
    year: Optional[int] = Query(None, ge=1900, le=2200),
    db: Session = Depends(get_db),
):
    return leave_service.get_dashboard_balances(db, employee_id, _year_or_current(year))


@router.get("/leave/balance/drilldown", response_model=DrilldownResponse)
def get_balance_drilldown(
    leave_type: str,
    status: DrilldownStatus,
    employee_id: int = Query(..., ge=1),
    year: Optional[int] = Query(None, ge=1900, le=2200),
    db: Session = Depends(get_db),
):
    return leave_service.get_drilldown(db, employee_id, _year_or_current(year), leave_type, status)
