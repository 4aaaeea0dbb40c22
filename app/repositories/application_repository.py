from sqlalchemy.orm import Session
from sqlalchemy import select, and_, update
from typing import Iterable, List, Optional
from app.models.application import Application, ApplicationStatus
from app.repositories.repository import BaseRepository


class ApplicationRepository(BaseRepository[Application]):
    """Repository for membership applications."""

    def __init__(self, db: Session):
        super().__init__(Application, db)

    def find_latest(self, user_id: int, association_id: int) -> Optional[Application]:
        """Most recent application of a user to one association."""
        stmt = (
            select(Application)
            .where(
                and_(
                    Application.user_id == user_id,
                    Application.association_id == association_id
                )
            )
            .order_by(Application.created_at.desc(), Application.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def find_latest_approved(self, user_id: int) -> Optional[Application]:
        """Most recent APPROVED application of a user, any association."""
        stmt = (
            select(Application)
            .where(
                and_(
                    Application.user_id == user_id,
                    Application.status == ApplicationStatus.APPROVED,
                    Application.approved.is_(True)
                )
            )
            .order_by(Application.updated_at.desc(), Application.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def find_for_pair(
        self,
        user_id: int,
        association_id: int,
        statuses: Optional[Iterable[ApplicationStatus]] = None
    ) -> List[Application]:
        """All applications of a user to an association, optionally filtered by status."""
        stmt = select(Application).where(
            and_(
                Application.user_id == user_id,
                Application.association_id == association_id
            )
        )
        if statuses is not None:
            stmt = stmt.where(Application.status.in_(list(statuses)))
        stmt = stmt.order_by(Application.created_at.desc(), Application.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def get_user_applications(self, user_id: int) -> List[Application]:
        stmt = (
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_association_applications(
        self,
        association_id: int,
        status: Optional[ApplicationStatus] = None
    ) -> List[Application]:
        stmt = select(Application).where(Application.association_id == association_id)
        if status is not None:
            stmt = stmt.where(Application.status == status)
        stmt = stmt.order_by(Application.created_at.desc(), Application.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def update_status(
        self,
        application_id: int,
        from_statuses: Iterable[ApplicationStatus],
        new_status: ApplicationStatus,
        actor_id: int,
        approved: Optional[bool] = None,
    ) -> bool:
        """
        Conditionally move an application to a new status.

        The UPDATE only matches while the row is still in one of
        ``from_statuses``, so of two concurrent writers at most one wins.
        Does not commit; the caller owns the transaction.

        Returns:
            True if the row was updated, False if its status had already moved
        """
        values = {"status": new_status}
        if approved is not None:
            values["approved"] = approved
            values["approved_by_id"] = actor_id if approved else None

        stmt = (
            update(Application)
            .where(
                and_(
                    Application.id == application_id,
                    Application.status.in_(list(from_statuses))
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1
