from sqlalchemy import ForeignKey, Boolean, Text, Index, Enum as SQLEnum, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
import enum
from app.models.base import BaseModel
if TYPE_CHECKING:
    from app.models.user import User
    from app.models.association import Association


class ApplicationStatus(str, enum.Enum):
    """Lifecycle of a membership application"""

    NEW = "NEW"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    KICKED = "KICKED"
    SELFIMMOLATE = "SELFIMMOLATE"  # withdrawn by the applicant
    INVITED = "INVITED"


OPEN_STATUSES = (
    ApplicationStatus.NEW,
    ApplicationStatus.UNDER_REVIEW,
    ApplicationStatus.INVITED,
)

TERMINAL_STATUSES = (
    ApplicationStatus.REJECTED,
    ApplicationStatus.KICKED,
    ApplicationStatus.SELFIMMOLATE,
)


class Application(BaseModel):
    """
    One attempt by a user to join an association.

    Membership is never stored; it is read off the APPROVED row.
    """

    __tablename__ = "applications"
    __table_args__ = (
        # A user holds at most one APPROVED application platform-wide.
        Index(
            "uq_applications_user_approved",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'APPROVED'"),
            postgresql_where=text("status = 'APPROVED'"),
        ),
        # At most one open application per (user, association).
        Index(
            "uq_applications_user_association_open",
            "user_id",
            "association_id",
            unique=True,
            sqlite_where=text("status IN ('NEW', 'UNDER_REVIEW', 'INVITED')"),
            postgresql_where=text("status IN ('NEW', 'UNDER_REVIEW', 'INVITED')"),
        ),
    )

    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(ApplicationStatus), default=ApplicationStatus.NEW, nullable=False, index=True
    )
    approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    motivation: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    # Foreign keys
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    association_id: Mapped[int] = mapped_column(
        ForeignKey("associations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    approved_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, default=None
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="applications", foreign_keys=[user_id], lazy="selectin"
    )
    association: Mapped["Association"] = relationship(
        "Association", back_populates="applications", lazy="selectin"
    )
    approved_by: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[approved_by_id], lazy="selectin"
    )
