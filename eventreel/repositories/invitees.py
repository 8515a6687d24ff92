"""Invitee repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select

from eventreel.models.event import Invitee
from eventreel.repositories.base import Repository, db_errors
from eventreel.results import AppError, Result, failure, success


@dataclass(frozen=True)
class InviteeDTO:
    id: str
    name: str
    created_at: datetime

    @classmethod
    def from_row(cls, invitee: Invitee) -> "InviteeDTO":
        return cls(id=invitee.id, name=invitee.name, created_at=invitee.created_at)


class InviteeRepository(Repository):
    @db_errors
    def insert_invitees(self, event_id: str, names: list[str]) -> Result[list[InviteeDTO]]:
        rows = [Invitee(event_id=event_id, name=name) for name in names]
        self.db.add_all(rows)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        return success([InviteeDTO.from_row(row) for row in rows])

    @db_errors
    def get_invitees_by_event_id(self, event_id: str) -> Result[list[InviteeDTO]]:
        rows = self.db.scalars(
            select(Invitee).where(Invitee.event_id == event_id).order_by(Invitee.created_at)
        ).all()
        if not rows:
            return failure(AppError.not_found("no invitees found for specified event"))
        return success([InviteeDTO.from_row(row) for row in rows])

    @db_errors
    def delete_invitee(self, event_id: str, invitee_id: str) -> Result[str]:
        result = self.db.execute(delete(Invitee).where(Invitee.event_id == event_id, Invitee.id == invitee_id))
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found("no invitee found with specified ID for the event"))
        self.db.commit()
        return success(invitee_id)
