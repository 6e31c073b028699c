"""Deal repository — status/priority finders, links and value aggregates."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select

from db import models
from db.database import Database
from db.mappers import DEAL_MAPPER, now_ms, to_epoch_ms
from db.models import DEAL_COMPANIES, DEAL_CONTACTS, DEAL_RELATED_DEALS
from db.repositories.base import Repository
from schemas import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING, Deal, DealStatistics

logger = logging.getLogger(__name__)


class DealRepository(Repository[Deal]):
    def __init__(self, db: Database):
        super().__init__(db, models.Deal.__table__, DEAL_MAPPER)

    def find_by_status(self, status: str) -> list[Deal]:
        return self._find(self.table.c.status == status, order_by="due_at ASC")

    def find_by_priority(self, priority: str) -> list[Deal]:
        return self._find(self.table.c.priority == priority, order_by="due_at ASC")

    def find_overdue(self) -> list[Deal]:
        """Deals past their due date that are not completed."""
        c = self.table.c
        return self._find(
            c.due_at < now_ms(),
            or_(c.status.is_(None), c.status != STATUS_COMPLETED),
            order_by="due_at ASC",
        )

    def find_by_due_date_range(self, start: datetime, end: datetime) -> list[Deal]:
        due_at = self.table.c.due_at
        return self._find(
            due_at >= to_epoch_ms(start), due_at <= to_epoch_ms(end), order_by="due_at ASC"
        )

    # -- links ------------------------------------------------------------

    def add_company(self, deal_id: str, company_id: str) -> None:
        self._link(DEAL_COMPANIES, deal_id, company_id)

    def remove_company(self, deal_id: str, company_id: str) -> bool:
        return self._unlink(DEAL_COMPANIES, deal_id, company_id)

    def get_company_ids(self, deal_id: str) -> list[str]:
        return self._linked_ids(DEAL_COMPANIES, deal_id)

    def add_contact(self, deal_id: str, contact_id: str) -> None:
        self._link(DEAL_CONTACTS, deal_id, contact_id)

    def remove_contact(self, deal_id: str, contact_id: str) -> bool:
        return self._unlink(DEAL_CONTACTS, deal_id, contact_id)

    def get_contact_ids(self, deal_id: str) -> list[str]:
        return self._linked_ids(DEAL_CONTACTS, deal_id)

    def add_related_deal(self, deal_id: str, related_deal_id: str) -> None:
        self._link(DEAL_RELATED_DEALS, deal_id, related_deal_id)

    def remove_related_deal(self, deal_id: str, related_deal_id: str) -> bool:
        return self._unlink(DEAL_RELATED_DEALS, deal_id, related_deal_id)

    def get_related_deal_ids(self, deal_id: str) -> list[str]:
        return self._linked_ids(DEAL_RELATED_DEALS, deal_id)

    def get_with_relationships(self, deal_id: str) -> Optional[Deal]:
        deal = self.get_by_id(deal_id)
        if deal is None:
            return None
        return deal.model_copy(update={
            "company_ids": self.get_company_ids(deal_id),
            "contact_ids": self.get_contact_ids(deal_id),
            "related_deal_ids": self.get_related_deal_ids(deal_id),
        })

    # -- aggregates -------------------------------------------------------

    def _sum_amount(self, *criteria) -> float:
        stmt = select(func.coalesce(func.sum(self.table.c.amount), 0))
        if criteria:
            stmt = stmt.where(*criteria)
        return float(self.db.execute(stmt).scalar_one())

    def get_total_value_by_status(self, status: str) -> float:
        return self._sum_amount(self.table.c.status == status)

    def get_statistics(self) -> DealStatistics:
        status = self.table.c.status
        return DealStatistics(
            total=self.count(),
            pending=self.count(status == STATUS_PENDING),
            in_progress=self.count(status == STATUS_IN_PROGRESS),
            completed=self.count(status == STATUS_COMPLETED),
            total_value=self._sum_amount(),
        )
