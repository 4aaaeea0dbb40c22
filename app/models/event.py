from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import enum
from app.models.base import BaseModel
if TYPE_CHECKING:
    from app.models.association import Association
    from app.models.rsvp import RSVP, Checkin


class ArrivalRules(str, enum.Enum):
    """How strictly the start time is meant"""

    ON_TIME = "ON_TIME"
    BRITISH_SOCIAL = "BRITISH_SOCIAL"
    BRITISH_BUSINESS = "BRITISH_BUSINESS"
    GERMAN = "GERMAN"


class Event(BaseModel):
    """
    Event hosted by an association.
    The owning association never changes once the event exists.
    """

    __tablename__ = "events"

    # Basic info
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    arrival_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    arrival_rules: Mapped[ArrivalRules] = mapped_column(
        SQLEnum(ArrivalRules), default=ArrivalRules.ON_TIME, nullable=False
    )

    # Details
    description_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    ticket_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    # Foreign keys
    association_id: Mapped[int] = mapped_column(
        ForeignKey("associations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    association: Mapped["Association"] = relationship(
        "Association", back_populates="events", lazy="selectin"
    )
    rsvps: Mapped[List["RSVP"]] = relationship(
        "RSVP", back_populates="event", cascade="all, delete-orphan", lazy="select"
    )
    checkins: Mapped[List["Checkin"]] = relationship(
        "Checkin", back_populates="event", cascade="all, delete-orphan", lazy="select"
    )
