from sqlalchemy.orm import Session
from sqlalchemy import select, and_
from typing import List, Optional
from datetime import datetime
from app.models.event import Event
from app.repositories.repository import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for event operations."""

    def __init__(self, db: Session):
        super().__init__(Event, db)

    def get_association_id(self, event_id: int) -> Optional[int]:
        """Owning association of an event, or None if the event does not exist."""
        stmt = select(Event.association_id).where(Event.id == event_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_association_events(
        self,
        association_id: int,
        upcoming_after: Optional[datetime] = None
    ) -> List[Event]:
        stmt = select(Event).where(Event.association_id == association_id)
        if upcoming_after is not None:
            stmt = stmt.where(Event.date >= upcoming_after)
        stmt = stmt.order_by(Event.date.asc())
        return list(self.db.execute(stmt).scalars().all())
