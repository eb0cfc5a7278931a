"""
Seed a local database with the system account, default settings,
a sample branch and a few public holidays.

    PYTHONPATH=. python scripts/seed_defaults.py
"""
from datetime import date

from app.core.init_system import ensure_default_settings, ensure_system_account
from app.database import SessionLocal, init_db
from app.models.branch import Branch
from app.models.holiday import Holiday, HolidayType

SAMPLE_HOLIDAYS = [
    (date(2026, 1, 1), "New Year's Day"),
    (date(2026, 4, 13), "Songkran Festival"),
    (date(2026, 4, 14), "Songkran Festival"),
    (date(2026, 4, 15), "Songkran Festival"),
    (date(2026, 5, 1), "National Labour Day"),
    (date(2026, 12, 5), "Father's Day"),
    (date(2026, 12, 31), "New Year's Eve"),
]

def seed():
    init_db()
    db = SessionLocal()
    try:
        account = ensure_system_account(db)
        added = ensure_default_settings(db)
        db.commit()
        print(f"System account: {account.email} (id={account.id}); {added} setting(s) added")

        if not db.query(Branch).first():
            branch = Branch(name="Head Office", address="Bangkok", gps_lat=13.7563, gps_lng=100.5018, radius_meters=100)
            db.add(branch)
            db.commit()
            print(f"Created branch: {branch.name}")

        existing = {d for (d,) in db.query(Holiday.date).all()}
        for day, name in SAMPLE_HOLIDAYS:
            if day not in existing:
                db.add(Holiday(date=day, name=name, type=HolidayType.PUBLIC.value))
        db.commit()
        print(f"Holidays on file: {db.query(Holiday).count()}")
    finally:
        db.close()

if __name__ == "__main__":
    seed()
