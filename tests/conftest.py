"""Shared test fixtures."""

from datetime import UTC, date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from roster.core.database import get_session
from roster.lists.generator import GenerationState
from roster.lists.store import SqlRecordStore
from roster.main import app
from roster.models import Event, Profile, Registration

TODAY = date(2024, 3, 10)
REGISTRATION_START = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(session: Session) -> SqlRecordStore:
    """Record store over the test session."""
    return SqlRecordStore(session)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_generation_state():
    """Keep last-run status from leaking between tests."""
    GenerationState.reset()
    yield
    GenerationState.reset()


@pytest.fixture(name="make_event")
def make_event_fixture(session: Session):
    """Factory for events; defaults to one due tomorrow with 10 spots."""

    def _make_event(**kwargs) -> Event:
        kwargs.setdefault("description", "Board games night")
        kwargs.setdefault("date", (TODAY + timedelta(days=1)).isoformat())
        event = Event(**kwargs)
        session.add(event)
        session.commit()
        session.refresh(event)
        return event

    return _make_event


@pytest.fixture(name="add_participant")
def add_participant_fixture(session: Session):
    """Factory registering a user for an event.

    ``order`` spaces registration times a minute apart so ties resolve
    predictably. Pass ``profile=False`` to simulate a missing profile.
    """

    def _add_participant(
        event: Event,
        user_id: str,
        is_organizer: bool = False,
        last_attended: date | None = None,
        order: int = 0,
        profile: bool = True,
    ) -> Registration:
        if profile and session.get(Profile, user_id) is None:
            session.add(
                Profile(
                    user_id=user_id,
                    email=f"{user_id}@example.com",
                    display_name=user_id.title(),
                    last_attended=last_attended,
                )
            )
        registration = Registration(
            event_id=event.id,
            user_id=user_id,
            display_name=user_id.title(),
            is_organizer=is_organizer,
            registered_at=REGISTRATION_START + timedelta(minutes=order),
        )
        session.add(registration)
        session.commit()
        return registration

    return _add_participant


@pytest.fixture(name="sample_event")
def sample_event_fixture(make_event) -> Event:
    """Create a sample event for testing."""
    return make_event(id="evt_sample", spots=2)
