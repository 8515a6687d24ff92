"""Event repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select

from eventreel.models.event import Event, Invitee
from eventreel.repositories.base import Repository, db_errors
from eventreel.results import AppError, Result, failure, success


@dataclass(frozen=True)
class EventEntity:
    id: str
    owner_id: str
    name: str
    created_at: datetime
    deadline: datetime

    @classmethod
    def from_row(cls, event: Event) -> "EventEntity":
        return cls(
            id=event.id,
            owner_id=event.owner_id,
            name=event.name,
            created_at=event.created_at,
            deadline=event.deadline,
        )


@dataclass(frozen=True)
class EventInviteeDTO:
    """An event joined with one of its invitees."""

    event_id: str
    invitee_id: str
    event_created_at: datetime
    event_deadline: datetime


class EventRepository(Repository):
    @db_errors
    def insert_event(self, owner_id: str, name: str, deadline: datetime) -> Result[str]:
        event = Event(owner_id=owner_id, name=name, deadline=deadline)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return success(event.id)

    @db_errors
    def get_events_by_owner_id(self, owner_id: str) -> Result[list[EventEntity]]:
        rows = self.db.scalars(select(Event).where(Event.owner_id == owner_id).order_by(Event.created_at)).all()
        if not rows:
            return failure(AppError.not_found("no events found for specified owner"))
        return success([EventEntity.from_row(row) for row in rows])

    @db_errors
    def get_event_by_id(self, event_id: str) -> Result[EventEntity]:
        event = self.db.get(Event, event_id)
        if event is None:
            return failure(AppError.not_found("no event found with specified ID"))
        return success(EventEntity.from_row(event))

    @db_errors
    def delete_event(self, event_id: str) -> Result[str]:
        result = self.db.execute(delete(Event).where(Event.id == event_id))
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found("no event found with specified ID"))
        self.db.commit()
        return success(event_id)

    @db_errors
    def get_event_invitee(self, event_id: str, invitee_id: str) -> Result[EventInviteeDTO]:
        row = self.db.execute(
            select(Event.id, Invitee.id, Event.created_at, Event.deadline)
            .join(Invitee, Invitee.event_id == Event.id)
            .where(Event.id == event_id, Invitee.id == invitee_id)
            .limit(1)
        ).first()
        if row is None:
            return failure(AppError.not_found("event-invitee association with specified IDs not found"))
        return success(
            EventInviteeDTO(event_id=row[0], invitee_id=row[1], event_created_at=row[2], event_deadline=row[3])
        )
