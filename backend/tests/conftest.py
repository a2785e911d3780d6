import copy

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.program import Program
from app.models.user import User
from app.services.auth_service import create_access_token
from app.utils.permissions import ADMIN, STAFF

TEST_DB_URL = "sqlite:///./test_chess_academy.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

VALID_PROGRAM = {
    "branch": "Test Branch",
    "location": "Loc",
    "batches": [
        {"type": "Weekday", "schedule": "Mon", "slots": [{"time": "8-9", "level": "Beg"}]},
    ],
    "features": ["f1"],
    "whatsappNumber": "+917039184939",
}


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@academy.test", name="Admin", role=ADMIN),
        "staff": User(email="staff@academy.test", name="Staff", role=STAFF),
        "retired": User(email="retired@academy.test", name="Retired", role=ADMIN, is_active=False),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def admin_headers(seed_users):
    return auth_headers(seed_users["admin"])


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}


def program_payload(**overrides) -> dict:
    payload = copy.deepcopy(VALID_PROGRAM)
    payload.update(overrides)
    return payload


def add_program(db, branch: str, location: str = "Somewhere", **fields) -> Program:
    program = Program(
        branch=branch,
        location=location,
        batches=copy.deepcopy(VALID_PROGRAM["batches"]),
        features=["Group coaching"],
        whatsapp_number="+917039184939",
        **fields,
    )
    db.add(program)
    db.commit()
    db.refresh(program)
    return program
