"""Company repository — finders plus contact and category links."""
import logging
from typing import Optional

from db import models
from db.database import Database
from db.mappers import COMPANY_MAPPER
from db.models import COMPANY_CATEGORIES, COMPANY_CONTACTS
from db.repositories.base import Repository
from schemas import Company

logger = logging.getLogger(__name__)


class CompanyRepository(Repository[Company]):
    def __init__(self, db: Database):
        super().__init__(db, models.Company.__table__, COMPANY_MAPPER)

    def find_by_domain(self, domain: str) -> Optional[Company]:
        return self._first(self.table.c.domain == domain)

    def search_by_name(self, query: str) -> list[Company]:
        return self._find(
            self.table.c.name.contains(query, autoescape=True), order_by="name ASC"
        )

    def find_by_country(self, country: str) -> list[Company]:
        return self._find(self.table.c.country == country, order_by="name ASC")

    def find_by_connection_strength(self, connection_strength_id: int) -> list[Company]:
        return self._find(
            self.table.c.connection_strength_id == connection_strength_id,
            order_by="name ASC",
        )

    def get_recent(self, limit: int = 10) -> list[Company]:
        return self._find(order_by="created_at DESC", limit=limit)

    # -- contacts ---------------------------------------------------------

    def add_contact(self, company_id: str, contact_id: str) -> None:
        self._link(COMPANY_CONTACTS, company_id, contact_id)

    def remove_contact(self, company_id: str, contact_id: str) -> bool:
        return self._unlink(COMPANY_CONTACTS, company_id, contact_id)

    def get_contact_ids(self, company_id: str) -> list[str]:
        return self._linked_ids(COMPANY_CONTACTS, company_id)

    # -- categories -------------------------------------------------------

    def add_category(self, company_id: str, category_id: int) -> None:
        self._link(COMPANY_CATEGORIES, company_id, category_id)

    def remove_category(self, company_id: str, category_id: int) -> bool:
        return self._unlink(COMPANY_CATEGORIES, company_id, category_id)

    def get_category_ids(self, company_id: str) -> list[int]:
        return self._linked_ids(COMPANY_CATEGORIES, company_id)

    def get_with_relationships(self, company_id: str) -> Optional[Company]:
        """Return the company with contact_ids and category_ids filled in."""
        company = self.get_by_id(company_id)
        if company is None:
            return None
        return company.model_copy(update={
            "contact_ids": self.get_contact_ids(company_id),
            "category_ids": self.get_category_ids(company_id),
        })
