from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.application import ApplicationStatus


class ApplicationCreate(BaseModel):
    """Schema for applying to an association."""
    association_id: int
    motivation: Optional[str] = Field(None, max_length=2000)


class ApplicationInvite(BaseModel):
    association_id: int
    user_id: int


class ApplicationResponse(BaseModel):
    id: int
    uuid: str
    user_id: int
    association_id: int
    status: ApplicationStatus
    approved: bool
    approved_by_id: Optional[int]
    motivation: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
