from app.models.base import Base, BaseModel
from app.models.associations import association_admins
from app.models.user import User, UserRole
from app.models.association import Association
from app.models.application import (
    Application,
    ApplicationStatus,
    OPEN_STATUSES,
    TERMINAL_STATUSES,
)
from app.models.event import Event, ArrivalRules
from app.models.rsvp import RSVP, RSVPStatus, Checkin

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # User
    "User",
    "UserRole",
    "association_admins",
    # Association
    "Association",
    # Application
    "Application",
    "ApplicationStatus",
    "OPEN_STATUSES",
    "TERMINAL_STATUSES",
    # Event
    "Event",
    "ArrivalRules",
    # Attendance
    "RSVP",
    "RSVPStatus",
    "Checkin",
]
