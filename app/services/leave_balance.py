"""
Leave Balance Engine

Pure computations behind the dashboard balance card and the admin tab counts.
Nothing in this module touches the database: callers hand in snapshots
(ORM rows, dicts or the read models below) and get freshly built results back.

Classification rule shared by every function here:
- approved            -> approved
- pending, in_progress -> pending
- rejected            -> rejected
- cancelled           -> cancelled
- anything else       -> OTHER (never summed, never drilled into)
"""
import enum
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.leave_request import LeaveStatus

logger = logging.getLogger(__name__)


class StatusBucket(str, enum.Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    OTHER = "other"


COUNTED_BUCKETS = (
    StatusBucket.APPROVED,
    StatusBucket.PENDING,
    StatusBucket.REJECTED,
    StatusBucket.CANCELLED,
)

_STATUS_TO_BUCKET = {
    LeaveStatus.APPROVED.value: StatusBucket.APPROVED,
    LeaveStatus.PENDING.value: StatusBucket.PENDING,
    LeaveStatus.IN_PROGRESS.value: StatusBucket.PENDING,
    LeaveStatus.REJECTED.value: StatusBucket.REJECTED,
    LeaveStatus.CANCELLED.value: StatusBucket.CANCELLED,
}


def classify_status(status: Any) -> StatusBucket:
    """Map a raw workflow status onto its balance bucket."""
    if isinstance(status, enum.Enum):
        status = status.value
    if not isinstance(status, str):
        return StatusBucket.OTHER
    return _STATUS_TO_BUCKET.get(status, StatusBucket.OTHER)


def statuses_for_bucket(bucket: StatusBucket) -> List[str]:
    """Raw status values that classify into `bucket` (used to build DB filters)."""
    return [raw for raw, b in _STATUS_TO_BUCKET.items() if b == bucket]


# --- Read models ---

class Quota(BaseModel):
    """Annual allowance: either unlimited or capped at a number of days."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["unlimited", "capped"]
    days: float = 0.0

    @classmethod
    def unlimited(cls) -> "Quota":
        return cls(kind="unlimited")

    @classmethod
    def capped(cls, days: float) -> "Quota":
        return cls(kind="capped", days=max(float(days), 0.0))

    @classmethod
    def from_max_days(cls, max_days: Optional[float]) -> "Quota":
        if max_days is None:
            return cls.unlimited()
        return cls.capped(max_days)

    @property
    def is_unlimited(self) -> bool:
        return self.kind == "unlimited"

    @property
    def total(self) -> float:
        return 0.0 if self.is_unlimited else self.days


class LeaveTypeInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    code: str
    name: str = ""
    max_days_per_year: Optional[float] = None
    is_paid: bool = True

    @property
    def quota(self) -> Quota:
        return Quota.from_max_days(self.max_days_per_year)


class LeaveRequestSnapshot(BaseModel):
    """
    A leave request as read from the workflow.
    `status` is kept exactly as stored, including None or a non-string, and
    only classify_status decides what it counts towards.
    `approvals` is carried along unchanged for timeline rendering.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    leave_code: Optional[str] = None
    leave_type: str
    total_days: float = 0.0
    status: Optional[Any] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    approvals: List[Any] = Field(default_factory=list)

    @property
    def bucket(self) -> StatusBucket:
        return classify_status(self.status)


class BalanceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    is_paid: bool
    quota: Quota
    total: float
    used: float
    approved: float
    pending: float
    rejected: float
    cancelled: float
    remaining: float

    @property
    def is_unlimited(self) -> bool:
        return self.quota.is_unlimited

    def bucket_days(self, bucket: Union[StatusBucket, str]) -> float:
        bucket = StatusBucket(bucket)
        if bucket == StatusBucket.OTHER:
            return 0.0
        return getattr(self, bucket.value)


class BalanceDisplay(BaseModel):
    """Chart values derived from a summary."""
    is_unlimited: bool
    is_over_limit: bool
    approved_percentage: float
    pending_percentage: float

    @classmethod
    def from_summary(cls, summary: BalanceSummary) -> "BalanceDisplay":
        if summary.is_unlimited:
            return cls(is_unlimited=True, is_over_limit=False, approved_percentage=0.0, pending_percentage=0.0)

        # Over-limit is decided before any division happens
        if summary.remaining < 0:
            return cls(is_unlimited=False, is_over_limit=True, approved_percentage=100.0, pending_percentage=0.0)

        if summary.total == 0:
            # Capped at zero days and nothing used yet
            return cls(is_unlimited=False, is_over_limit=False, approved_percentage=0.0, pending_percentage=0.0)

        return cls(
            is_unlimited=False,
            is_over_limit=False,
            approved_percentage=summary.approved / summary.total * 100,
            pending_percentage=summary.pending / summary.total * 100,
        )


class StatusCounts(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0


class ReportStats(StatusCounts):
    total_days: float = 0.0


# --- Coercion helpers ---

def as_leave_type(obj: Any) -> LeaveTypeInfo:
    if isinstance(obj, LeaveTypeInfo):
        return obj
    return LeaveTypeInfo.model_validate(obj, from_attributes=True)


def as_request(obj: Any) -> LeaveRequestSnapshot:
    if isinstance(obj, LeaveRequestSnapshot):
        return obj
    return LeaveRequestSnapshot.model_validate(obj, from_attributes=True)


# --- Operations ---

def _build_summary(info: LeaveTypeInfo, sums: Dict[StatusBucket, float]) -> BalanceSummary:
    quota = info.quota
    approved = sums[StatusBucket.APPROVED]
    pending = sums[StatusBucket.PENDING]
    used = approved + pending
    total = quota.total
    return BalanceSummary(
        code=info.code,
        name=info.name,
        is_paid=info.is_paid,
        quota=quota,
        total=total,
        used=used,
        approved=approved,
        pending=pending,
        rejected=sums[StatusBucket.REJECTED],
        cancelled=sums[StatusBucket.CANCELLED],
        remaining=total - used,
    )


def aggregate(
    leave_types: Iterable[Any],
    requests: Iterable[Any],
    year: Optional[int] = None,
) -> Dict[str, BalanceSummary]:
    """
    Build one BalanceSummary per leave type, keyed by code, in catalog order.

    `requests` must already be limited to the period of interest; `year` is
    accepted for the caller's bookkeeping and is not used to filter.
    Requests for codes outside the catalog, and requests in an unrecognised
    status, contribute nothing.
    """
    sums_by_code: Dict[str, Dict[StatusBucket, float]] = {}
    skipped = 0
    for req in requests:
        req = as_request(req)
        bucket = req.bucket
        if bucket == StatusBucket.OTHER:
            skipped += 1
            continue
        sums = sums_by_code.setdefault(req.leave_type, dict.fromkeys(COUNTED_BUCKETS, 0.0))
        sums[bucket] += req.total_days

    if skipped:
        logger.debug(f"Balance aggregation skipped {skipped} request(s) with unrecognised status", extra={"year": year})

    result: Dict[str, BalanceSummary] = {}
    for leave_type in leave_types:
        info = as_leave_type(leave_type)
        sums = sums_by_code.get(info.code) or dict.fromkeys(COUNTED_BUCKETS, 0.0)
        result[info.code] = _build_summary(info, sums)
    return result


def drilldown(
    requests: Iterable[Any],
    leave_type_code: str,
    status_filter: Union[StatusBucket, str],
) -> List[LeaveRequestSnapshot]:
    """
    Requests behind one bucket of one leave type, in their original order.
    An unknown filter (including "other") matches nothing.
    """
    try:
        wanted = StatusBucket(status_filter)
    except ValueError:
        return []
    if wanted == StatusBucket.OTHER:
        return []

    matches = []
    for req in requests:
        req = as_request(req)
        if req.leave_type == leave_type_code and req.bucket == wanted:
            matches.append(req)
    return matches


def total_days(requests: Iterable[Any]) -> float:
    return sum((as_request(r).total_days for r in requests), 0.0)


def count_by_status(requests: Iterable[Any]) -> StatusCounts:
    """
    Tab counts for the admin listing: number of requests per bucket across
    every leave type. `total` includes requests in unrecognised states.
    """
    counts = StatusCounts()
    for req in requests:
        status = req.get("status") if isinstance(req, dict) else getattr(req, "status", None)
        counts.total += 1
        bucket = classify_status(status)
        if bucket != StatusBucket.OTHER:
            setattr(counts, bucket.value, getattr(counts, bucket.value) + 1)
    return counts


def report_stats(requests: Iterable[Any]) -> ReportStats:
    """
    count_by_status plus the summed days of every request, whatever its
    status. Used by the admin leave report, which shows both side by side.
    """
    requests = list(requests)
    stats = ReportStats(**count_by_status(requests).model_dump())
    for req in requests:
        days = req.get("total_days") if isinstance(req, dict) else getattr(req, "total_days", None)
        stats.total_days += days or 0.0
    return stats
