"""Note repository."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_

from db import models
from db.database import Database
from db.mappers import NOTE_MAPPER, to_epoch_ms
from db.models import NOTE_ASSIGNED_CONTACTS, NOTE_COMPANIES, NOTE_DEALS
from db.repositories.base import Repository
from schemas import Note

logger = logging.getLogger(__name__)


class NoteRepository(Repository[Note]):
    def __init__(self, db: Database):
        super().__init__(db, models.Note.__table__, NOTE_MAPPER)

    def find_by_status(self, status: str) -> list[Note]:
        return self._find(self.table.c.status == status, order_by="created_at DESC")

    def find_by_creator(self, created_by: str) -> list[Note]:
        return self._find(self.table.c.created_by == created_by, order_by="created_at DESC")

    def find_by_date_range(self, start: datetime, end: datetime) -> list[Note]:
        created_at = self.table.c.created_at
        return self._find(
            created_at >= to_epoch_ms(start),
            created_at <= to_epoch_ms(end),
            order_by="created_at DESC",
        )

    def search_by_content(self, query: str) -> list[Note]:
        """Substring match on title or content."""
        c = self.table.c
        return self._find(
            or_(c.title.contains(query, autoescape=True), c.content.contains(query, autoescape=True)),
            order_by="created_at DESC",
        )

    def get_recent(self, limit: int = 10) -> list[Note]:
        return self._find(order_by="created_at DESC", limit=limit)

    def add_company(self, note_id: str, company_id: str) -> None:
        self._link(NOTE_COMPANIES, note_id, company_id)

    def remove_company(self, note_id: str, company_id: str) -> bool:
        return self._unlink(NOTE_COMPANIES, note_id, company_id)

    def get_company_ids(self, note_id: str) -> list[str]:
        return self._linked_ids(NOTE_COMPANIES, note_id)

    def add_deal(self, note_id: str, deal_id: str) -> None:
        self._link(NOTE_DEALS, note_id, deal_id)

    def remove_deal(self, note_id: str, deal_id: str) -> bool:
        return self._unlink(NOTE_DEALS, note_id, deal_id)

    def get_deal_ids(self, note_id: str) -> list[str]:
        return self._linked_ids(NOTE_DEALS, note_id)

    def assign_contact(self, note_id: str, contact_id: str) -> None:
        self._link(NOTE_ASSIGNED_CONTACTS, note_id, contact_id)

    def unassign_contact(self, note_id: str, contact_id: str) -> bool:
        return self._unlink(NOTE_ASSIGNED_CONTACTS, note_id, contact_id)

    def get_assigned_contact_ids(self, note_id: str) -> list[str]:
        return self._linked_ids(NOTE_ASSIGNED_CONTACTS, note_id)

    def get_with_relationships(self, note_id: str) -> Optional[Note]:
        note = self.get_by_id(note_id)
        if note is None:
            return None
        return note.model_copy(update={
            "company_ids": self.get_company_ids(note_id),
            "deal_ids": self.get_deal_ids(note_id),
            "assigned_contact_ids": self.get_assigned_contact_ids(note_id),
        })
