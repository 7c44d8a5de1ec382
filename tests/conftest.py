# tests/conftest.py

from __future__ import annotations

import os

# db.database reads these at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from auth.security import create_access_token, hash_password
from db.database import Base, get_db
from main import app
from models.plant import Plant
from models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory schema per test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db: Session, email: str, name: str = "Test User", password: str = "secret123") -> User:
    user = User(email=email, name=name, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_plant(db: Session, user: User, name: str = "Monty", species: str = "Monstera deliciosa") -> Plant:
    plant = Plant(
        user_id=user.user_id,
        name=name,
        species=species,
        date_acquired=date(2023, 5, 1),
        location="Living room",
        watering_frequency=7,
        fertilizing_frequency=30,
    )
    db.add(plant)
    db.commit()
    db.refresh(plant)
    return plant


@pytest.fixture()
def user(db_session: Session) -> User:
    return make_user(db_session, "gardener@example.com")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    return make_user(db_session, "neighbour@example.com", name="Neighbour")


@pytest.fixture()
def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}


@pytest.fixture()
def other_headers(other_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.user_id)}"}


@pytest.fixture()
def plant(db_session: Session, user: User) -> Plant:
    return make_plant(db_session, user)
