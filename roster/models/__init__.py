from roster.models.event import Event
from roster.models.profile import Profile
from roster.models.registration import Registration

__all__ = ["Event", "Registration", "Profile"]
