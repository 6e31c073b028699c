"""Contact domain model."""
from typing import Optional

from .entity import Entity


class Contact(Entity):
    name: str
    avatar: Optional[str] = None
    initials: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    company_id: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    # network name -> profile URL
    social_links: Optional[dict[str, str]] = None
