"""
Client-side route guard decisions.

Mirrors the role floor only, so the client can avoid flashing protected
screens while a real request is in flight. Not a trust boundary: whatever
this allows is checked again by the API.
"""
from typing import Optional

from app.config import settings
from app.core.roles import has_role
from app.models.user import UserRole
from app.schemas.auth import GuardDecision, Principal


def navigation_for(
    principal: Optional[Principal], required_role: Optional[UserRole] = None
) -> GuardDecision:
    if principal is None:
        return GuardDecision(
            outcome="sign_in",
            redirect_to=settings.SIGN_IN_PATH,
            required_role=required_role,
        )

    # USER floor: being signed in is enough
    if required_role is not None and not has_role(principal, required_role):
        return GuardDecision(
            outcome="unauthorized",
            redirect_to=settings.UNAUTHORIZED_PATH,
            required_role=required_role,
        )

    return GuardDecision(outcome="render", required_role=required_role)
