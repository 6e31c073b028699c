"""Task domain model and aggregate."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .entity import Entity


class Task(Entity):
    created_by: str
    due_at: datetime
    title: Optional[str] = None
    content: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None

    company_ids: Optional[list[str]] = None
    contact_ids: Optional[list[str]] = None
    deal_ids: Optional[list[str]] = None
    assigned_contact_ids: Optional[list[str]] = None


class TaskStatistics(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    overdue: int
