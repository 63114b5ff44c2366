import pytest
import os
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.database import Base, get_db
from app.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def leave_types(db_session):
    """Default catalog: two capped types, one unlimited, one inactive."""
    from app.models.leave_type import LeaveType

    types = [
        LeaveType(code="sick", name="Sick leave", max_days_per_year=30, is_paid=True),
        LeaveType(code="personal", name="Personal leave", max_days_per_year=5, is_paid=True),
        LeaveType(code="vacation", name="Vacation", max_days_per_year=6, is_paid=True),
        LeaveType(code="unpaid", name="Unpaid leave", max_days_per_year=None, is_paid=False),
        LeaveType(code="ordination", name="Ordination leave", max_days_per_year=15, is_active=False),
    ]
    db_session.add_all(types)
    db_session.flush()
    return types

@pytest.fixture(scope="function")
def make_employee(db_session):
    """Factory fixture for employees."""
    from app.models.user import User
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "employee_code": f"EMP{counter['n']:04d}",
            "first_name": "Somchai",
            "last_name": f"Tester{counter['n']}",
            "position": "Engineer",
            "company": "PSC",
            "department": "psc-hr",
            "section": None,
            "start_date": date(2020, 1, 15),
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.flush()
        return user
    return _make

@pytest.fixture(scope="function")
def employee(make_employee):
    return make_employee()

@pytest.fixture(scope="function")
def make_leave(db_session):
    """Factory fixture for leave requests."""
    from app.models.leave_request import LeaveRequest

    def _make(employee, leave_type, total_days, status, start=date(2025, 3, 3), end=None, **overrides):
        leave = LeaveRequest(
            employee_id=employee.id,
            leave_type=leave_type,
            total_days=total_days,
            status=status,
            start_date=start,
            end_date=end or start,
            reason=overrides.pop("reason", "Personal matters"),
            **overrides,
        )
        db_session.add(leave)
        db_session.flush()
        return leave
    return _make

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
