"""Task repository."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_

from db import models
from db.database import Database
from db.mappers import TASK_MAPPER, now_ms, to_epoch_ms
from db.models import TASK_ASSIGNED_CONTACTS, TASK_COMPANIES, TASK_CONTACTS, TASK_DEALS
from db.repositories.base import Repository
from schemas import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING, Task, TaskStatistics

logger = logging.getLogger(__name__)


class TaskRepository(Repository[Task]):
    def __init__(self, db: Database):
        super().__init__(db, models.Task.__table__, TASK_MAPPER)

    def _overdue(self):
        c = self.table.c
        return (
            c.due_at < now_ms(),
            or_(c.status.is_(None), c.status != STATUS_COMPLETED),
        )

    def find_by_status(self, status: str) -> list[Task]:
        return self._find(self.table.c.status == status, order_by="due_at ASC")

    def find_by_priority(self, priority: str) -> list[Task]:
        return self._find(self.table.c.priority == priority, order_by="due_at ASC")

    def find_by_creator(self, created_by: str) -> list[Task]:
        return self._find(self.table.c.created_by == created_by, order_by="due_at ASC")

    def find_overdue(self) -> list[Task]:
        return self._find(*self._overdue(), order_by="due_at ASC")

    def find_by_due_date_range(self, start: datetime, end: datetime) -> list[Task]:
        due_at = self.table.c.due_at
        return self._find(
            due_at >= to_epoch_ms(start), due_at <= to_epoch_ms(end), order_by="due_at ASC"
        )

    def add_company(self, task_id: str, company_id: str) -> None:
        self._link(TASK_COMPANIES, task_id, company_id)

    def remove_company(self, task_id: str, company_id: str) -> bool:
        return self._unlink(TASK_COMPANIES, task_id, company_id)

    def get_company_ids(self, task_id: str) -> list[str]:
        return self._linked_ids(TASK_COMPANIES, task_id)

    def add_contact(self, task_id: str, contact_id: str) -> None:
        self._link(TASK_CONTACTS, task_id, contact_id)

    def remove_contact(self, task_id: str, contact_id: str) -> bool:
        return self._unlink(TASK_CONTACTS, task_id, contact_id)

    def get_contact_ids(self, task_id: str) -> list[str]:
        return self._linked_ids(TASK_CONTACTS, task_id)

    def add_deal(self, task_id: str, deal_id: str) -> None:
        self._link(TASK_DEALS, task_id, deal_id)

    def remove_deal(self, task_id: str, deal_id: str) -> bool:
        return self._unlink(TASK_DEALS, task_id, deal_id)

    def get_deal_ids(self, task_id: str) -> list[str]:
        return self._linked_ids(TASK_DEALS, task_id)

    def assign_contact(self, task_id: str, contact_id: str) -> None:
        self._link(TASK_ASSIGNED_CONTACTS, task_id, contact_id)

    def unassign_contact(self, task_id: str, contact_id: str) -> bool:
        return self._unlink(TASK_ASSIGNED_CONTACTS, task_id, contact_id)

    def get_assigned_contact_ids(self, task_id: str) -> list[str]:
        return self._linked_ids(TASK_ASSIGNED_CONTACTS, task_id)

    def get_with_relationships(self, task_id: str) -> Optional[Task]:
        task = self.get_by_id(task_id)
        if task is None:
            return None
        return task.model_copy(update={
            "company_ids": self.get_company_ids(task_id),
            "contact_ids": self.get_contact_ids(task_id),
            "deal_ids": self.get_deal_ids(task_id),
            "assigned_contact_ids": self.get_assigned_contact_ids(task_id),
        })

    def get_statistics(self) -> TaskStatistics:
        status = self.table.c.status
        return TaskStatistics(
            total=self.count(),
            pending=self.count(status == STATUS_PENDING),
            in_progress=self.count(status == STATUS_IN_PROGRESS),
            completed=self.count(status == STATUS_COMPLETED),
            overdue=self.count(*self._overdue()),
        )
