from app.database import SessionLocal, init_db
from app.models.leave_type import LeaveType

DEFAULT_LEAVE_TYPES = [
    {"code": "sick", "name": "Sick leave", "max_days_per_year": 30, "is_paid": True},
    {"code": "personal", "name": "Personal leave", "max_days_per_year": 3, "is_paid": True},
    {"code": "vacation", "name": "Vacation", "max_days_per_year": 6, "is_paid": True},
    {"code": "maternity", "name": "Maternity leave", "max_days_per_year": 98, "is_paid": True},
    {"code": "ordination", "name": "Ordination leave", "max_days_per_year": 15, "is_paid": True},
    {"code": "unpaid", "name": "Personal leave (unpaid)", "max_days_per_year": None, "is_paid": False},
    {"code": "other", "name": "Other leave", "max_days_per_year": None, "is_paid": False},
]

def seed():
    init_db()
    db = SessionLocal()
    try:
        for entry in DEFAULT_LEAVE_TYPES:
            existing = db.query(LeaveType).filter(LeaveType.code == entry["code"]).first()
            if existing:
                # Keep the catalog in sync with the defaults
                for key, value in entry.items():
                    setattr(existing, key, value)
                print(f"Updated leave type: {entry['code']}")
            else:
                db.add(LeaveType(**entry))
                print(f"Created leave type: {entry['code']}")
        db.commit()
    finally:
        db.close()

if __name__ == "__main__":
    seed()
