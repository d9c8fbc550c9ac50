"""Event model for activities whose attendee lists are generated.

This module defines the Event model which represents a scheduled activity
with a fixed number of spots. Events are created by the event-creation flow
(outside this service) and mutated exactly once by list generation, which
fills in the attendee and waiting lists and flips ``list_generated``.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from roster.models.registration import Registration


class Event(SQLModel, table=True):
    """A scheduled activity with limited capacity.

    The event's ``date`` is kept as the text the creation form submitted
    (``YYYY-MM-DD``). Recurring events are created without a one-time date
    and therefore carry ``date=None``; list generation reports those as
    configuration errors rather than guessing a date.

    Attributes:
        id: Opaque identifier.
        group_id: Group the event belongs to (informational).
        description: Event title/description shown to users.
        location: Where the event takes place.
        time: Time of day as entered by the organizer, e.g. "19:00".
        date: Scheduled date as ISO text, or None for recurring events.
        spots: Capacity. Participants beyond it go to the waiting list.
        generate_list_days_before: How many days before ``date`` the lists
            become due. None means the configured default (2).
        list_generated: True once lists have been committed. Never reset.
        attendees: Confirmed participants as
            ``{"uid", "displayName", "isOrganizer"}`` dicts, set on commit.
        waiting_list: Waiting participants as ``{"uid", "displayName"}``
            dicts in rank order, set on commit.
        sorted_at: When the lists were committed.
        created_at: When the event record was created.
        registrations: Registrations for this event.
    """
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    group_id: str | None = Field(default=None, index=True)
    description: str = ""
    location: str | None = None
    time: str | None = None
    date: str | None = None
    spots: int = Field(default=10)
    generate_list_days_before: int | None = None
    list_generated: bool = Field(default=False, index=True)
    attendees: list[dict] | None = Field(default=None, sa_column=Column(JSON))
    waiting_list: list[dict] | None = Field(default=None, sa_column=Column(JSON))
    sorted_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    registrations: list["Registration"] = Relationship(back_populates="event")
