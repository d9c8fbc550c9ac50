"""Registration routes for joining and leaving events."""
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, SQLModel

from roster.core.database import get_session
from roster.models import Event, Profile, Registration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/{event_id}/registrations", tags=["registrations"])


class RegistrationCreate(SQLModel):
    user_id: str
    display_name: str | None = None
    is_organizer: bool = False


@router.post("")
async def register(
    event_id: str,
    data: RegistrationCreate,
    session: Session = Depends(get_session),
):
    """
    Register a user for an event.

    Registering again overwrites the previous registration, including its
    timestamp. Registering as an organizer also marks the user's profile as
    an organizer. Once the event's lists are generated, registration is
    closed.
    """
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.list_generated:
        raise HTTPException(status_code=400, detail="Lists already generated")

    registration = session.get(Registration, (event_id, data.user_id))
    if registration is None:
        registration = Registration(event_id=event_id, user_id=data.user_id)

    registration.display_name = data.display_name or "Unknown User"
    registration.is_organizer = data.is_organizer
    registration.registered_at = datetime.now(UTC)
    session.add(registration)

    if data.is_organizer:
        profile = session.get(Profile, data.user_id)
        if profile:
            profile.is_organizer = True
            session.add(profile)
        else:
            logger.warning(f"Organizer {data.user_id} registered without a profile")

    session.commit()

    return {"success": True, "message": "Successfully registered!"}


@router.delete("/{user_id}")
async def resign(event_id: str, user_id: str, session: Session = Depends(get_session)):
    """
    Remove a user's registration from an event.

    Lists that were already generated are not changed; the registration only
    stops counting for generation that has not happened yet.
    """
    registration = session.get(Registration, (event_id, user_id))
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")

    session.delete(registration)
    session.commit()

    return {"success": True, "message": "Successfully resigned from the event."}
