from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.leave import EmployeeLeaveSummaryResponse
from app.services import leave_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/leave-summary", response_model=EmployeeLeaveSummaryResponse)
def get_leave_summary(
    user_id: int,
    year: Optional[int] = Query(None, ge=1900, le=2200),
    db: Session = Depends(get_db),
):
    """Approved days and remaining entitlement per leave type, for approvers."""
    year = year if year is not None else date.today().year
    return leave_service.get_employee_leave_summary(db, user_id, year)
