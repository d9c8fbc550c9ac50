"""Tests for database models."""

from datetime import date

import pytest
from sqlmodel import Session, select

from roster.models import Event, Profile, Registration


class TestEventModel:
    """Tests for the Event model."""

    def test_create_event(self, session: Session):
        """Test creating a basic event."""
        event = Event(description="Volleyball", date="2024-03-11", spots=12)
        session.add(event)
        session.commit()

        retrieved = session.exec(select(Event).where(Event.description == "Volleyball")).first()

        assert retrieved is not None
        assert retrieved.id
        assert retrieved.list_generated is False
        assert retrieved.attendees is None
        assert retrieved.waiting_list is None
        assert retrieved.sorted_at is None
        assert retrieved.generate_list_days_before is None

    def test_lists_round_trip_as_json(self, session: Session):
        """Test that generated lists are stored as JSON."""
        event = Event(
            id="evt_json",
            date="2024-03-11",
            attendees=[{"uid": "u1", "displayName": "Anna", "isOrganizer": True}],
            waiting_list=[{"uid": "u2", "displayName": "Olek"}],
            list_generated=True,
        )
        session.add(event)
        session.commit()
        session.expire_all()

        retrieved = session.get(Event, "evt_json")
        assert retrieved.attendees[0]["isOrganizer"] is True
        assert retrieved.waiting_list == [{"uid": "u2", "displayName": "Olek"}]


class TestRegistrationModel:
    """Tests for the Registration model."""

    def test_create_registration(self, sample_event: Event, session: Session):
        """Test creating a registration linked to an event."""
        registration = Registration(event_id=sample_event.id, user_id="anna")
        session.add(registration)
        session.commit()

        retrieved = session.get(Registration, (sample_event.id, "anna"))
        assert retrieved is not None
        assert retrieved.display_name == "Unknown User"
        assert retrieved.is_organizer is False
        assert retrieved.registered_at is not None

    def test_one_registration_per_user_and_event(self, sample_event: Event, session: Session):
        """Test that (event, user) is unique."""
        session.add(Registration(event_id=sample_event.id, user_id="anna"))
        session.commit()

        session.add(Registration(event_id=sample_event.id, user_id="anna"))
        with pytest.raises(Exception):  # IntegrityError or identity conflict
            session.commit()

    def test_event_relationship(self, sample_event: Event, session: Session):
        """Test registration-event relationship."""
        session.add(Registration(event_id=sample_event.id, user_id="anna"))
        session.add(Registration(event_id=sample_event.id, user_id="olek"))
        session.commit()
        session.refresh(sample_event)

        assert {r.user_id for r in sample_event.registrations} == {"anna", "olek"}


class TestProfileModel:
    """Tests for the Profile model."""

    def test_new_profile_never_attended(self, session: Session):
        """Test that a new profile has no attendance history."""
        session.add(Profile(user_id="anna", email="anna@example.com"))
        session.commit()

        retrieved = session.get(Profile, "anna")
        assert retrieved.last_attended is None
        assert retrieved.is_organizer is False

    def test_last_attended_date(self, session: Session):
        """Test storing an attendance date."""
        session.add(Profile(user_id="olek", last_attended=date(2024, 1, 1)))
        session.commit()
        session.expire_all()

        assert session.get(Profile, "olek").last_attended == date(2024, 1, 1)
