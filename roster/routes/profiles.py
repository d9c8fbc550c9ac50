"""Profile routes for the sign-up hook."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, SQLModel

from roster.core.config import settings
from roster.core.database import get_session
from roster.models import Profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


class ProfileCreate(SQLModel):
    user_id: str
    email: str | None = None
    display_name: str | None = None


def email_allowed(email: str | None) -> bool:
    """Check the sign-up email against the configured domain, if any."""
    domain = settings.allowed_email_domain.strip().lstrip("@").lower()
    if not domain:
        return True
    return bool(email) and email.lower().endswith(f"@{domain}")


@router.post("")
async def create_profile(data: ProfileCreate, session: Session = Depends(get_session)):
    """
    Create a profile for a newly signed-up user.

    New profiles start with no attendance history. Users whose email is
    outside the allowed domain are ignored. An existing profile is left
    untouched so its attendance history is never reset.
    """
    if not email_allowed(data.email):
        logger.info(f"Non-corporate user signed up and will be ignored: {data.email}")
        return {"created": False, "user_id": data.user_id}

    if session.get(Profile, data.user_id):
        return {"created": False, "user_id": data.user_id}

    profile = Profile(
        user_id=data.user_id,
        email=data.email,
        display_name=data.display_name,
    )
    session.add(profile)
    session.commit()
    logger.info(f"Created profile for user {data.user_id}")

    return {"created": True, "user_id": data.user_id}


@router.get("/{user_id}")
async def get_profile(user_id: str, session: Session = Depends(get_session)):
    """Return a user's profile and attendance history."""
    profile = session.get(Profile, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    return {
        "user_id": profile.user_id,
        "display_name": profile.display_name,
        "is_organizer": profile.is_organizer,
        "last_attended": profile.last_attended.isoformat() if profile.last_attended else None,
    }
