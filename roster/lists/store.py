"""Record store adapter used by list generation.

List generation never touches the database directly; it goes through a
``RecordStore`` passed in by the caller. ``SqlRecordStore`` is the SQLModel
implementation used by the scheduler, the HTTP trigger and the operator
script. Tests substitute subclasses that fail on demand.
"""
from collections.abc import Iterable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import date, datetime
from typing import Protocol

from sqlalchemy import or_, update
from sqlmodel import Session, select

from roster.models import Event, Profile, Registration


class RecordStore(Protocol):
    """Read/write contract list generation depends on."""

    def list_pending_events(self) -> list[Event]: ...

    def list_registrations(self, event_id: str) -> list[Registration]: ...

    def get_profile(self, user_id: str) -> Profile | None: ...

    def get_profiles(self, user_ids: Iterable[str]) -> dict[str, Profile]: ...

    def update_event(
        self,
        event_id: str,
        attendees: list[dict],
        waiting_list: list[dict],
        sorted_at: datetime,
    ) -> bool: ...

    def update_profile(self, user_id: str, last_attended: date) -> bool: ...

    def transaction(self) -> AbstractContextManager["RecordStore"]: ...

    def rollback(self) -> None: ...


class SqlRecordStore:
    """RecordStore backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def list_pending_events(self) -> list[Event]:
        statement = (
            select(Event)
            .where(Event.list_generated == False)  # noqa: E712
            .order_by(Event.date, Event.id)
        )
        return list(self.session.exec(statement).all())

    def list_registrations(self, event_id: str) -> list[Registration]:
        statement = (
            select(Registration)
            .where(Registration.event_id == event_id)
            .order_by(Registration.registered_at)
        )
        return list(self.session.exec(statement).all())

    def get_profile(self, user_id: str) -> Profile | None:
        return self.session.get(Profile, user_id)

    def get_profiles(self, user_ids: Iterable[str]) -> dict[str, Profile]:
        """Fetch every requested profile in one round trip.

        Returns only the profiles that exist; callers decide what a missing
        entry means.
        """
        ids = list(user_ids)
        if not ids:
            return {}
        statement = select(Profile).where(Profile.user_id.in_(ids))
        return {profile.user_id: profile for profile in self.session.exec(statement).all()}

    def update_event(
        self,
        event_id: str,
        attendees: list[dict],
        waiting_list: list[dict],
        sorted_at: datetime,
    ) -> bool:
        """Write generated lists, only if the event is still pending.

        This is the compare-and-swap on ``list_generated``. Returns False when
        no row matched, i.e. another run already committed this event.
        """
        statement = (
            update(Event)
            .where(Event.id == event_id)
            .where(Event.list_generated == False)  # noqa: E712
            .values(
                attendees=attendees,
                waiting_list=waiting_list,
                list_generated=True,
                sorted_at=sorted_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        return result.rowcount == 1

    def update_profile(self, user_id: str, last_attended: date) -> bool:
        """Advance ``last_attended``; never moves it backwards.

        Returns False when the profile is missing or already has an equal or
        later date.
        """
        statement = (
            update(Profile)
            .where(Profile.user_id == user_id)
            .where(
                or_(
                    Profile.last_attended.is_(None),
                    Profile.last_attended < last_attended,
                )
            )
            .values(last_attended=last_attended)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        return result.rowcount == 1

    @contextmanager
    def transaction(self) -> Iterator["SqlRecordStore"]:
        """Commit everything written inside the block, or nothing."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def rollback(self) -> None:
        self.session.rollback()
