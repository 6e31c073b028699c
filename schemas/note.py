"""Note domain model."""
from datetime import datetime
from typing import Optional

from .entity import Entity


class Note(Entity):
    status: str
    due_at: datetime
    title: Optional[str] = None
    content: Optional[str] = None
    created_by: Optional[str] = None
    logo: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None

    company_ids: Optional[list[str]] = None
    deal_ids: Optional[list[str]] = None
    assigned_contact_ids: Optional[list[str]] = None
