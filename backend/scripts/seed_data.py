"""Seed the database with the academy's reference programs and an admin account."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.program import Program
from app.models.user import User
from app.services.auth_service import create_access_token
from app.utils.permissions import ADMIN

STANDARD_BATCHES = [
    {
        "type": "Weekday Batch",
        "schedule": "Monday & Thursday",
        "slots": [
            {"time": "8-9 AM", "level": "Beginner Level"},
            {"time": "9-10 AM", "level": "Advanced Level"},
        ],
    },
    {
        "type": "Weekend Batch",
        "schedule": "Saturday & Sunday",
        "slots": [
            {"time": "8-9 AM", "level": "Beginner Level"},
            {"time": "9-10 AM", "level": "Advanced Level"},
        ],
    },
]

PROGRAMS = [
    ("Kalamboli Branch", "Main Branch", "green",
     ["Personal coach assignment", "Progress tracking", "Practice games", "Study materials"]),
    ("Kamothe Branch", "Associated with Vibe House Studio", "blue",
     ["Group coaching", "Interactive sessions", "Game analysis", "Tournament prep"]),
    ("Roadpali Branch", "Associated with Rhythm Revolution Studio", "purple",
     ["Professional coaching", "Tactical training", "Position analysis", "Opening theory"]),
    ("Online Mode", "Learn from Anywhere", "orange",
     ["1-on-1 coaching", "Flexible timings", "Digital resources", "Online tournaments"]),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.role == ADMIN).first()
        if admin is None:
            admin = User(email="admin@academy.local", name="Academy Admin", role=ADMIN)
            db.add(admin)
            db.commit()
            db.refresh(admin)
            print(f"Created admin user {admin.email}")

        if db.query(Program).count() > 0:
            print("Programs already seeded. Skipping.")
        else:
            for order, (branch, location, color, features) in enumerate(PROGRAMS):
                db.add(Program(
                    branch=branch,
                    location=location,
                    batches=[dict(batch, slots=[dict(slot) for slot in batch["slots"]]) for batch in STANDARD_BATCHES],
                    features=features,
                    color_theme=color,
                    whatsapp_number=settings.DEFAULT_WHATSAPP_NUMBER,
                    display_order=order,
                    is_active=True,
                ))
            db.commit()
            print(f"Seeded {len(PROGRAMS)} programs.")

        print(f"Admin bearer token: {create_access_token(admin.user_id)}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
