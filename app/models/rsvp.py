from sqlalchemy import String, DateTime, ForeignKey, Integer, Enum as SQLEnum, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import enum
from app.models.base import BaseModel
if TYPE_CHECKING:
    from app.models.event import Event
    from app.models.user import User


class RSVPStatus(str, enum.Enum):
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"
    LATE = "LATE"
    CANCELLED = "CANCELLED"


class RSVP(BaseModel):
    """A member's answer to an event invitation. One per (event, user)."""

    __tablename__ = "rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),)

    status: Mapped[RSVPStatus] = mapped_column(SQLEnum(RSVPStatus), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)
    guests_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    responded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    event: Mapped["Event"] = relationship("Event", back_populates="rsvps", lazy="selectin")
    user: Mapped["User"] = relationship("User", lazy="selectin")


class Checkin(BaseModel):
    """Attendance recorded by an association admin at the door."""

    __tablename__ = "checkins"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_checkins_event_user"),)

    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    checked_in_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    event: Mapped["Event"] = relationship("Event", back_populates="checkins", lazy="selectin")
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id], lazy="selectin")
    checked_in_by: Mapped["User"] = relationship(
        "User", foreign_keys=[checked_in_by_id], lazy="selectin"
    )
