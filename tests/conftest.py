import logging
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from skills_tracker.database import Base, get_db
from skills_tracker.main import app
from skills_tracker.models.user import User
from skills_tracker.models.skill import Skill, UserSkill
from skills_tracker.services.auth_service import hash_password
from skills_tracker.utils.permissions import Principal

TEST_DB_URL = "sqlite:///./test_skills_tracker.db"
PASSWORD = "secret-pass"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


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
def logger():
    return logging.getLogger("tests.skills_tracker")


@pytest.fixture
def seed_users(db):
    password_hash = hash_password(PASSWORD)
    users = {
        "manager": User(username="manager", password_hash=password_hash, role="manager", name="Manager One"),
        "manager2": User(username="manager2", password_hash=password_hash, role="manager", name="Manager Two"),
        "alice": User(username="alice", password_hash=password_hash, role="employee", name="Alice"),
        "bob": User(username="bob", password_hash=password_hash, role="employee", name="Bob"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_skills(db):
    skills = {
        "python": Skill(name="Python", description="Backend", category="technical"),
        "sql": Skill(name="SQL", description="Databases", category="technical"),
        "talk": Skill(name="Communication", description="Soft skill", category="soft"),
    }
    for s in skills.values():
        db.add(s)
    db.commit()
    for s in skills.values():
        db.refresh(s)
    return skills


@pytest.fixture
def alice_knows_python_and_sql(db, seed_users, seed_skills):
    for key in ("python", "sql"):
        db.add(UserSkill(user_id=seed_users["alice"].id, skill_id=seed_skills[key].id, level=3))
    db.add(UserSkill(user_id=seed_users["bob"].id, skill_id=seed_skills["python"].id, level=5))
    db.commit()


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, username=user.username, role=user.role)


def get_token(client, username: str, password: str = PASSWORD) -> str:
    resp = client.post("/api/v1/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_headers(client, username: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, username)}"}
