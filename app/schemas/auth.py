from pydantic import BaseModel, Field
from typing import Optional

from app.models.user import UserRole


class Principal(BaseModel):
    """
    Authenticated identity as carried by the bearer token.

    Only the edge interceptor and the UI guard work from this; API handlers
    reload the user from the database instead.
    """
    user_id: int
    role: UserRole

    @classmethod
    def from_token_payload(cls, payload: Optional[dict]) -> Optional["Principal"]:
        """Build a principal from decoded claims, or None if they are unusable."""
        if not payload:
            return None
        try:
            return cls(user_id=int(payload["sub"]), role=UserRole(payload["role"]))
        except (KeyError, TypeError, ValueError):
            return None


class GuardDecision(BaseModel):
    """Advisory navigation outcome for client-side route guards."""
    outcome: str = Field(..., description="'render', 'sign_in' or 'unauthorized'")
    redirect_to: Optional[str] = None
    required_role: Optional[UserRole] = None
