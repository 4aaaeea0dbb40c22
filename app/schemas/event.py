from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

from app.models.event import ArrivalRules
from app.models.rsvp import RSVPStatus
from app.schemas.user import UserSummary


class EventBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=200)
    date: datetime
    arrival_time: datetime
    arrival_rules: ArrivalRules = ArrivalRules.ON_TIME
    description_md: Optional[str] = None
    ticket_link: Optional[str] = Field(None, max_length=500)


class EventCreate(EventBase):
    association_id: int


class EventUpdate(BaseModel):
    """Partial update. ``association_id`` is deliberately absent."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    arrival_rules: Optional[ArrivalRules] = None
    description_md: Optional[str] = None
    ticket_link: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for field in ("name", "location", "date", "arrival_time", "arrival_rules"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class EventResponse(EventBase):
    id: int
    uuid: str
    association_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class RSVPCreate(BaseModel):
    status: RSVPStatus
    comment: Optional[str] = Field(None, max_length=500)
    guests_count: int = Field(0, ge=0)


class RSVPResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    status: RSVPStatus
    comment: Optional[str]
    guests_count: int
    responded_at: datetime
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    user_rsvp: Optional[RSVPResponse] = None


class CheckinCreate(BaseModel):
    user_id: int
    notes: Optional[str] = Field(None, max_length=500)


class CheckinResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    checked_in_by_id: int
    checked_in_at: datetime
    notes: Optional[str]

    class Config:
        from_attributes = True
