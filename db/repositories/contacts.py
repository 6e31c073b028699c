"""Contact repository — lookups by email/company and activity windows."""
import logging
from datetime import datetime
from typing import Optional

from dateutil import tz
from dateutil.relativedelta import relativedelta

from db import models
from db.database import Database
from db.mappers import CONTACT_MAPPER, to_epoch_ms
from db.repositories.base import Repository
from schemas import Contact

logger = logging.getLogger(__name__)

RECENT_WINDOW = relativedelta(days=7)


class ContactRepository(Repository[Contact]):
    def __init__(self, db: Database):
        super().__init__(db, models.Contact.__table__, CONTACT_MAPPER)

    def find_by_email(self, email: str) -> Optional[Contact]:
        """Return the first contact with this email, or None."""
        return self._first(self.table.c.email == email)

    def find_by_company_id(self, company_id: str) -> list[Contact]:
        return self._find(self.table.c.company_id == company_id, order_by="name ASC")

    def search_by_name(self, query: str) -> list[Contact]:
        """Substring match on name (case-insensitive for ASCII)."""
        return self._find(
            self.table.c.name.contains(query, autoescape=True), order_by="name ASC"
        )

    def find_by_country(self, country: str) -> list[Contact]:
        return self._find(self.table.c.country == country, order_by="name ASC")

    def get_recent(self, limit: int = 10) -> list[Contact]:
        return self._find(order_by="created_at DESC", limit=limit)

    def find_by_date_range(self, start: datetime, end: datetime) -> list[Contact]:
        """Contacts created between start and end, inclusive."""
        created_at = self.table.c.created_at
        return self._find(
            created_at >= to_epoch_ms(start),
            created_at <= to_epoch_ms(end),
            order_by="created_at DESC",
        )

    def get_leads(self) -> list[Contact]:
        """Contacts created since local midnight today."""
        midnight = datetime.now(tz.tzlocal()).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        return self._find(
            self.table.c.created_at >= to_epoch_ms(midnight), order_by="created_at DESC"
        )

    def get_follow_ups(self) -> list[Contact]:
        """Contacts created within the last seven days."""
        since = datetime.now(tz.tzlocal()) - RECENT_WINDOW
        return self._find(
            self.table.c.created_at >= to_epoch_ms(since), order_by="created_at DESC"
        )

    def get_pipeline(self) -> list[Contact]:
        """Contacts not touched in the last seven days."""
        cutoff = datetime.now(tz.tzlocal()) - RECENT_WINDOW
        return self._find(
            self.table.c.updated_at < to_epoch_ms(cutoff), order_by="updated_at ASC"
        )
