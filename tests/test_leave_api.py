import pytest
from datetime import date, datetime, timezone
from app.models.leave_request import LeaveApproval, LeaveStatus


@pytest.fixture
def dashboard_leaves(employee, leave_types, make_leave):
    """A year of leave for one employee, plus noise that must not be counted."""
    return {
        "sick_approved": make_leave(employee, "sick", 3, LeaveStatus.APPROVED.value, start=date(2025, 2, 3)),
        "sick_pending": make_leave(employee, "sick", 2, LeaveStatus.PENDING.value, start=date(2025, 4, 7)),
        "sick_rejected": make_leave(employee, "sick", 1, LeaveStatus.REJECTED.value, start=date(2025, 5, 5)),
        "sick_in_progress": make_leave(employee, "sick", 4, LeaveStatus.IN_PROGRESS.value, start=date(2025, 6, 2)),
        "sick_withdrawn": make_leave(employee, "sick", 7, "withdrawn", start=date(2025, 6, 9)),
        "personal_over": make_leave(employee, "personal", 6, LeaveStatus.APPROVED.value, start=date(2025, 7, 1)),
        "unpaid": make_leave(employee, "unpaid", 2, LeaveStatus.APPROVED.value, start=date(2025, 8, 4)),
        "last_year": make_leave(employee, "sick", 10, LeaveStatus.APPROVED.value, start=date(2024, 12, 30)),
    }


def _by_code(balances):
    return {b["code"]: b for b in balances}


def test_list_leave_types_only_active(client, leave_types):
    response = client.get("/api/leave-types")
    assert response.status_code == 200
    codes = [t["code"] for t in response.json()]
    assert codes == ["sick", "personal", "vacation", "unpaid"]


def test_dashboard_balances(client, employee, dashboard_leaves):
    response = client.get("/api/leave/balance", params={"employee_id": employee.id, "year": 2025})
    assert response.status_code == 200
    data = response.json()
    assert data["year"] == 2025
    balances = _by_code(data["balances"])
    assert list(balances) == ["sick", "personal", "vacation", "unpaid"]

    sick = balances["sick"]
    assert sick["total"] == 30
    assert sick["approved"] == 3
    assert sick["pending"] == 6
    assert sick["rejected"] == 1
    assert sick["cancelled"] == 0
    assert sick["used"] == 9
    assert sick["remaining"] == 21
    assert sick["is_over_limit"] is False
    assert sick["approved_percentage"] == pytest.approx(10.0)
    assert sick["pending_percentage"] == pytest.approx(20.0)


def test_dashboard_over_limit_and_unlimited(client, employee, dashboard_leaves):
    response = client.get("/api/leave/balance", params={"employee_id": employee.id, "year": 2025})
    balances = _by_code(response.json()["balances"])

    personal = balances["personal"]
    assert personal["remaining"] == -1
    assert personal["is_over_limit"] is True
    assert personal["approved_percentage"] == 100

    unpaid = balances["unpaid"]
    assert unpaid["is_unlimited"] is True
    assert unpaid["is_over_limit"] is False
    assert unpaid["total"] == 0
    assert unpaid["is_paid"] is False

    vacation = balances["vacation"]
    assert vacation["used"] == 0
    assert vacation["remaining"] == 6


def test_dashboard_previous_year(client, employee, dashboard_leaves):
    response = client.get("/api/leave/balance", params={"employee_id": employee.id, "year": 2024})
    sick = _by_code(response.json()["balances"])["sick"]
    assert sick["approved"] == 10
    assert sick["pending"] == 0


def test_dashboard_unknown_employee(client, leave_types):
    response = client.get("/api/leave/balance", params={"employee_id": 9999, "year": 2025})
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["code"] == "EMPLOYEE_NOT_FOUND"


def test_drilldown_pending_includes_in_progress(client, employee, dashboard_leaves):
    response = client.get(
        "/api/leave/balance/drilldown",
        params={"employee_id": employee.id, "year": 2025, "leave_type": "sick", "status": "pending"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert data["total_days"] == 6
    assert {r["status"] for r in data["requests"]} == {"pending", "in_progress"}


def test_drilldown_totals_match_dashboard(client, employee, dashboard_leaves):
    balances = _by_code(client.get(
        "/api/leave/balance", params={"employee_id": employee.id, "year": 2025}
    ).json()["balances"])
    for status in ("approved", "pending", "rejected", "cancelled"):
        data = client.get(
            "/api/leave/balance/drilldown",
            params={"employee_id": employee.id, "year": 2025, "leave_type": "sick", "status": status},
        ).json()
        assert data["total_days"] == balances["sick"][status]


def test_drilldown_empty_bucket(client, employee, dashboard_leaves):
    response = client.get(
        "/api/leave/balance/drilldown",
        params={"employee_id": employee.id, "year": 2025, "leave_type": "sick", "status": "cancelled"},
    )
    assert response.status_code == 200
    assert response.json()["requests"] == []
    assert response.json()["total_days"] == 0


def test_drilldown_rejects_unknown_status(client, employee, dashboard_leaves):
    response = client.get(
        "/api/leave/balance/drilldown",
        params={"employee_id": employee.id, "year": 2025, "leave_type": "sick", "status": "withdrawn"},
    )
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "status"


def test_my_leaves_for_year_newest_first(client, employee, dashboard_leaves):
    response = client.get("/api/my-leaves", params={"employee_id": employee.id, "year": 2025})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    starts = [item["start_date"] for item in body["data"]]
    assert len(starts) == 7
    assert starts == sorted(starts, reverse=True)


def test_my_leaves_month_filter(client, employee, dashboard_leaves):
    response = client.get("/api/my-leaves", params={"employee_id": employee.id, "year": 2025, "month": 6})
    data = response.json()["data"]
    assert {item["status"] for item in data} == {"in_progress", "withdrawn"}


def test_my_leaves_ignores_out_of_range_month(client, employee, dashboard_leaves):
    response = client.get("/api/my-leaves", params={"employee_id": employee.id, "year": 2025, "month": 13})
    assert len(response.json()["data"]) == 7


def test_my_leaves_includes_approval_chain(client, db_session, employee, make_employee, leave_types, make_leave):
    manager = make_employee(first_name="Manee", position="Manager")
    leave = make_leave(employee, "sick", 1, LeaveStatus.IN_PROGRESS.value, start=date(2025, 1, 6))
    leave.approvals.append(LeaveApproval(
        level=2, status="pending", approver_id=manager.id,
    ))
    leave.approvals.append(LeaveApproval(
        level=1, status="approved", approver_id=manager.id, comment="OK",
        action_at=datetime(2025, 1, 2, 9, 0, tzinfo=timezone.utc),
    ))
    db_session.flush()
    db_session.expire(leave, ["approvals"])

    data = client.get("/api/my-leaves", params={"employee_id": employee.id, "year": 2025}).json()["data"]
    approvals = data[0]["approvals"]
    assert [a["level"] for a in approvals] == [1, 2]
    assert approvals[0]["approver"]["first_name"] == "Manee"
    assert approvals[0]["comment"] == "OK"


def test_my_leaves_requires_employee(client):
    response = client.get("/api/my-leaves")
    assert response.status_code == 422


def test_null_status_row_is_left_out_of_balances(client, db_session, employee, dashboard_leaves, make_leave):
    orphan = make_leave(employee, "sick", 5, LeaveStatus.APPROVED.value, start=date(2025, 9, 1))
    orphan.status = None
    db_session.flush()

    response = client.get("/api/leave/balance", params={"employee_id": employee.id, "year": 2025})
    assert response.status_code == 200
    sick = _by_code(response.json()["balances"])["sick"]
    assert (sick["approved"], sick["pending"], sick["rejected"]) == (3, 6, 1)

    drill = client.get(
        "/api/leave/balance/drilldown",
        params={"employee_id": employee.id, "year": 2025, "leave_type": "sick", "status": "approved"},
    )
    assert drill.status_code == 200
    assert [r["id"] for r in drill.json()["requests"]] == [dashboard_leaves["sick_approved"].id]

    leaves = client.get("/api/my-leaves", params={"employee_id": employee.id, "year": 2025}).json()["data"]
    assert leaves[0]["id"] == orphan.id
    assert leaves[0]["status"] is None
