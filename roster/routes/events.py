"""Event routes for reading generated lists."""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from roster.core.database import get_session
from roster.models import Event

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/{event_id}/lists")
async def event_lists(event_id: str, session: Session = Depends(get_session)):
    """
    Return the generated attendee and waiting lists for an event.

    Before generation both lists are empty and ``list_generated`` is false.
    """
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    return {
        "event_id": event.id,
        "description": event.description,
        "date": event.date,
        "spots": event.spots,
        "list_generated": event.list_generated,
        "attendees": event.attendees or [],
        "waiting_list": event.waiting_list or [],
        "sorted_at": event.sorted_at.isoformat() if event.sorted_at else None,
    }
