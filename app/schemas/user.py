from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class UserResponse(UserBase):
    id: int
    uuid: str
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2 (was orm_mode in v1)


class UserSummary(BaseModel):
    """Public subset shown in member and RSVP lists."""
    id: int
    name: Optional[str] = None
    email: EmailStr

    class Config:
        from_attributes = True


class RoleChange(BaseModel):
    role: UserRole = Field(..., description="New platform-wide role")


class MembershipResponse(BaseModel):
    user_id: int
    association_id: Optional[int] = Field(
        None, description="Association the user currently belongs to, if any"
    )
