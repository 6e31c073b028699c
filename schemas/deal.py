"""Deal domain model and aggregate."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .entity import Entity


class Deal(Entity):
    title: str
    content: str
    user_name: str
    due_at: datetime
    avatar: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    comments: int = 0
    amount: Optional[float] = None
    currency: Optional[str] = None
    payment_date: Optional[datetime] = None
    payment_type: Optional[str] = None
    contract_number: Optional[str] = None
    discount: Optional[float] = None

    company_ids: Optional[list[str]] = None
    contact_ids: Optional[list[str]] = None
    related_deal_ids: Optional[list[str]] = None


class DealStatistics(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    total_value: float
