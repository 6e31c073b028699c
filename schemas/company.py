"""Company domain model."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .entity import Entity


class Badge(BaseModel):
    name: str
    state: str


class Company(Entity):
    name: str
    logo: Optional[str] = None
    domain: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    angel_list: Optional[str] = None
    linkedin: Optional[str] = None
    connection_strength_id: Optional[int] = None
    x: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    telegram: Optional[str] = None
    founded_at: Optional[datetime] = None
    estimated_arr_id: Optional[int] = None
    employee_range_id: Optional[int] = None
    last_interaction_at: Optional[datetime] = None
    last_contacted: Optional[str] = None
    team_id: Optional[str] = None
    badge: Optional[Badge] = None

    # Populated from junction tables by get_with_relationships()
    contact_ids: Optional[list[str]] = None
    category_ids: Optional[list[int]] = None
