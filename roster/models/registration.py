"""Registration model linking a user to an event they want to attend."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from roster.models.event import Event


class Registration(SQLModel, table=True):
    """A user's declared intent to attend one event.

    At most one registration exists per (event, user); registering again
    overwrites the previous record. Resigning deletes it. List generation
    only ever reads registrations.

    Attributes:
        event_id: Foreign key to the Event.
        user_id: The registering user.
        display_name: Name shown on the generated lists.
        is_organizer: Self-declared at registration time. Organizers are
            ranked ahead of everyone else.
        registered_at: When the registration was (last) recorded. Used as
            the tie-break between otherwise equal participants.
        event: Reference to the parent Event object.
    """
    event_id: str = Field(foreign_key="event.id", primary_key=True)
    user_id: str = Field(primary_key=True)
    display_name: str = "Unknown User"
    is_organizer: bool = Field(default=False)
    registered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    event: Optional["Event"] = Relationship(back_populates="registrations")
