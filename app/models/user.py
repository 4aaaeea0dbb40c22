from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List, TYPE_CHECKING
import enum
from app.models.base import BaseModel
from app.models.associations import association_admins
if TYPE_CHECKING:
    from app.models.association import Association
    from app.models.application import Application


class UserRole(str, enum.Enum):
    """Platform-wide capability tiers, lowest first."""

    USER = "USER"
    ASSOCIATION_ADMIN = "ASSOCIATION_ADMIN"
    PLATFORM_ADMIN = "PLATFORM_ADMIN"


class User(BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole), default=UserRole.USER, nullable=False
    )

    # Status
    # Users are never deleted; blacklisting flips this flag.
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    # quotes for forward references before models are defined
    owned_associations: Mapped[List["Association"]] = relationship(
        "Association",
        back_populates="owner",
        foreign_keys="[Association.owner_id]",
        lazy="selectin"
    )
    administered_associations: Mapped[List["Association"]] = relationship(
        "Association",
        secondary=association_admins,
        back_populates="admins",
        lazy="selectin"
    )
    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="user",
        foreign_keys="[Application.user_id]",
        lazy="selectin"
    )
