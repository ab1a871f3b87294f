"""
Shared fixtures: in-memory database, app client and data factories
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core.db import Database
from app.models import Event, EventStatus, User, UserRole, Venue
from app.utils.dates import utcnow
from app.utils.security import create_access_token, hash_password, rate_limiter
from main import create_app


@pytest.fixture
def database():
    """Fresh in-memory SQLite database per test"""
    db = Database("sqlite://", poolclass=StaticPool)
    db.create_all()
    try:
        yield db
    finally:
        db.drop_all()
        db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


def make_user(db_session, email="jean.dupont@example.com", first_name="Jean", last_name="Dupont",
              role=UserRole.participant, password=None) -> User:
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        role=role,
        password_hash=hash_password(password) if password else "",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_event(db_session, organizer, title="Tech Talk", status=EventStatus.published,
               capacity=50, deadline=None, venue=None) -> Event:
    if venue is None:
        venue = Venue(name="Salle Virunga", street="12 Avenue du Lac", city="Goma",
                      country="DRC", capacity=200, facilities=["wifi"])
        db_session.add(venue)
        db_session.flush()

    start = utcnow() + timedelta(days=10)
    event = Event(
        title=title,
        description="An evening of talks",
        type="conference",
        start_date=start,
        end_date=start + timedelta(hours=2),
        registration_deadline=deadline or start - timedelta(days=1),
        capacity=capacity,
        status=status,
        tags=["tech"],
        price=0,
        organizer_id=organizer.id,
        venue_id=venue.id,
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def organizer(db_session):
    return make_user(db_session, email="organizer@example.com", first_name="Amani",
                     last_name="Kahindo", role=UserRole.organizer)


@pytest.fixture
def attendee(db_session):
    return make_user(db_session, email="attendee@example.com", first_name="Neema",
                     last_name="Bahati", password="s3cret-pass")


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Tech Talk",
        "description": "Monthly developer meetup",
        "type": "conference",
        "start_date": datetime(2025, 6, 1, 9, 0),
        "end_date": datetime(2025, 6, 1, 11, 0),
    }
    payload.update(overrides)
    return payload
