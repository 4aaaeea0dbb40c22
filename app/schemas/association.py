from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from app.schemas.user import UserSummary


class AssociationBase(BaseModel):
    """Base association schema with common fields."""
    name: str = Field(..., min_length=1, max_length=100, description="Association name")
    location: str = Field(..., min_length=1, max_length=200, description="City or area")


class AssociationCreate(AssociationBase):
    """Schema for creating an association (platform admin)."""
    owner_id: int = Field(..., description="User ID of the owner")
    max_population: Optional[int] = Field(None, ge=1)


class AssociationUpdate(BaseModel):
    """Schema for updating association details."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    max_population: Optional[int] = Field(None, ge=1)


class AssociationPublicResponse(BaseModel):
    """Limited view available to any signed-in user."""
    id: int
    name: str
    location: str
    population: int
    max_population: int

    class Config:
        from_attributes = True


class AssociationResponse(AssociationPublicResponse):
    """Full view for members and admins."""
    uuid: str
    owner_id: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]
    admins: List[UserSummary] = []

    class Config:
        from_attributes = True


class AdminAppointment(BaseModel):
    user_id: int = Field(..., description="User ID to appoint as admin")


class AdminAssignmentByEmail(BaseModel):
    admin_email: EmailStr
