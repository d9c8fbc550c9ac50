"""Profile model holding a user's attendance history.

A profile is created when a user signs up and records the date of the most
recent event the user was confirmed into. That date drives ranking: users
who have never attended, or attended longest ago, are preferred.
"""

from datetime import UTC, date, datetime

from sqlmodel import Field, SQLModel


class Profile(SQLModel, table=True):
    """Per-user attendance record.

    Attributes:
        user_id: Identifier of the user (primary key).
        email: Sign-up email address.
        display_name: Human-readable name, if known.
        is_organizer: Set once the user has registered as an organizer for
            any event. Informational; ranking uses the registration's flag.
        last_attended: Date of the latest event the user was confirmed for.
            None means the user has never attended. Only ever moves forward.
        created_at: When the profile was created.
    """
    user_id: str = Field(primary_key=True)
    email: str | None = None
    display_name: str | None = None
    is_organizer: bool = Field(default=False)
    last_attended: date | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
