from .entity import (
    Entity,
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
    to_utc_ms,
    utcnow,
)
from .contact import Contact
from .company import Badge, Company
from .deal import Deal, DealStatistics
from .task import Task, TaskStatistics
from .note import Note
from .lookup import Category, ConnectionStrength, EmployeeRange, EstimatedArr

__all__ = [
    "Entity", "STATUS_PENDING", "STATUS_IN_PROGRESS", "STATUS_COMPLETED",
    "to_utc_ms", "utcnow",
    "Contact", "Badge", "Company", "Deal", "DealStatistics",
    "Task", "TaskStatistics", "Note",
    "Category", "ConnectionStrength", "EmployeeRange", "EstimatedArr",
]
