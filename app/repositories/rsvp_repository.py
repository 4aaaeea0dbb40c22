from sqlalchemy.orm import Session
from sqlalchemy import select, and_, func
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
from app.models.rsvp import RSVP, Checkin
from app.repositories.repository import BaseRepository


class RSVPRepository(BaseRepository[RSVP]):
    """Repository for RSVPs and check-ins."""

    def __init__(self, db: Session):
        super().__init__(RSVP, db)

    def find(self, event_id: int, user_id: int) -> Optional[RSVP]:
        stmt = select(RSVP).where(
            and_(RSVP.event_id == event_id, RSVP.user_id == user_id)
        )
        return self.db.execute(stmt).scalars().first()

    def upsert(self, event_id: int, user_id: int, data: Dict[str, Any]) -> RSVP:
        """
        Create the RSVP or overwrite the existing answer.

        A concurrent first answer for the same pair loses the insert to the
        unique constraint and is written as an update instead.
        """
        rsvp = self.find(event_id, user_id)
        if rsvp is None:
            try:
                return self.create(RSVP(event_id=event_id, user_id=user_id, **data))
            except IntegrityError:
                self.db.rollback()
                rsvp = self.find(event_id, user_id)
                if rsvp is None:
                    raise

        for key, value in data.items():
            setattr(rsvp, key, value)
        rsvp.responded_at = func.now()
        self.db.commit()
        self.db.refresh(rsvp)
        return rsvp

    def get_event_rsvps(self, event_id: int) -> List[RSVP]:
        stmt = (
            select(RSVP)
            .where(RSVP.event_id == event_id)
            .order_by(RSVP.responded_at.desc(), RSVP.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_checkin(self, event_id: int, user_id: int) -> Optional[Checkin]:
        stmt = select(Checkin).where(
            and_(Checkin.event_id == event_id, Checkin.user_id == user_id)
        )
        return self.db.execute(stmt).scalars().first()

    def upsert_checkin(
        self,
        event_id: int,
        user_id: int,
        checked_in_by_id: int,
        notes: Optional[str] = None
    ) -> Checkin:
        """Record attendance, refreshing the timestamp on repeat scans."""
        checkin = self.find_checkin(event_id, user_id)
        if checkin is None:
            try:
                checkin = Checkin(
                    event_id=event_id,
                    user_id=user_id,
                    checked_in_by_id=checked_in_by_id,
                    notes=notes
                )
                self.db.add(checkin)
                self.db.commit()
                self.db.refresh(checkin)
                return checkin
            except IntegrityError:
                self.db.rollback()
                checkin = self.find_checkin(event_id, user_id)
                if checkin is None:
                    raise

        checkin.checked_in_by_id = checked_in_by_id
        checkin.notes = notes
        checkin.checked_in_at = func.now()
        self.db.commit()
        self.db.refresh(checkin)
        return checkin
