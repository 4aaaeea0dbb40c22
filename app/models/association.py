from sqlalchemy import String, ForeignKey, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from app.models.base import BaseModel
from app.models.associations import association_admins

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.event import Event
    from app.models.application import Application


class Association(BaseModel):
    """
    A geographically-scoped group users apply to join.
    Exactly one owner; any number of appointed admins.
    """

    __tablename__ = "associations"

    # Basic info
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)

    # Capacity
    population: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_population: Mapped[int] = mapped_column(Integer, default=30, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Owner, set at creation
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="owned_associations",
        foreign_keys=[owner_id],
        lazy="selectin"
    )

    admins: Mapped[List["User"]] = relationship(
        "User",
        secondary=association_admins,
        back_populates="administered_associations",
        lazy="selectin"
    )

    events: Mapped[List["Event"]] = relationship(
        "Event",
        back_populates="association",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="association",
        lazy="select",
    )
