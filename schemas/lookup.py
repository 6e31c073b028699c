"""Read-only reference data shown in pickers."""
from typing import Optional

from pydantic import BaseModel


class Category(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    bullet: Optional[str] = None
    description: Optional[str] = None


class ConnectionStrength(BaseModel):
    id: int
    name: str
    color: Optional[str] = None


class EmployeeRange(BaseModel):
    id: int
    label: str


class EstimatedArr(BaseModel):
    id: int
    label: str
