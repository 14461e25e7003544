import os

# Configure the app for an in-memory database before anything imports settings
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENVIRONMENT"] = "testing"
os.environ["REMINDER_SWEEP_IN_PROCESS"] = "false"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from remindpay import crud
from remindpay.api import deps
from remindpay.core import security
from remindpay.db.base import Base
from remindpay.db.session import SessionLocal, engine
from remindpay.main import app
from remindpay.models.reminder import Reminder
from remindpay.reminders.clock import FrozenClock
from remindpay.reminders.recurrence import OccurrenceType, ReminderType
from remindpay.schemas.user import UserCreate

UTC = timezone.utc
NOW = datetime(2020, 1, 15, 12, 0, tzinfo=UTC)


def parse_dt(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def client(clock):
    app.dependency_overrides[deps.get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(email=None, password="pwd"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return crud.user.create(db, obj_in=UserCreate(email=email, password=password))

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("test@example.com")


@pytest.fixture
def other_user(make_user):
    return make_user("test2@example.com")


def auth_headers_for(user) -> dict:
    return {"Authorization": f"Bearer {security.create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def make_reminder(db):
    def _make_reminder(
        user,
        remind_at,
        occurrence=OccurrenceType.YEARLY,
        title="test title",
        type=ReminderType.EVENT,
        description=None,
    ):
        reminder = Reminder(
            user_id=user.id,
            title=title,
            description=description,
            type=type,
            occurrence=occurrence,
            remind_at=remind_at,
            created_at=NOW - timedelta(days=30),
            updated_at=NOW - timedelta(days=30),
        )
        db.add(reminder)
        db.commit()
        db.refresh(reminder)
        return reminder

    return _make_reminder
