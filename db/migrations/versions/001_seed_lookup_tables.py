"""Seed the lookup tables used by company pickers.

Revision ID: 001
Create Date: 2026-10-19
"""
from sqlalchemy import delete
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from db import models
from db.database import Database

version = 1
name = "seed_lookup_tables"

CATEGORIES = [
    {"id": 1, "name": "Technology", "color": "blue", "bullet": "●", "description": "Technology companies"},
    {"id": 2, "name": "Finance", "color": "green", "bullet": "●", "description": "Financial services"},
    {"id": 3, "name": "Healthcare", "color": "red", "bullet": "●", "description": "Healthcare and life sciences"},
    {"id": 4, "name": "Retail", "color": "purple", "bullet": "●", "description": "Retail and e-commerce"},
    {"id": 5, "name": "Manufacturing", "color": "orange", "bullet": "●", "description": "Manufacturing and industry"},
]

CONNECTION_STRENGTHS = [
    {"id": 1, "name": "Weak", "color": "bg-red-100 text-red-800"},
    {"id": 2, "name": "Medium", "color": "bg-yellow-100 text-yellow-800"},
    {"id": 3, "name": "Strong", "color": "bg-green-100 text-green-800"},
    {"id": 4, "name": "Very Strong", "color": "bg-blue-100 text-blue-800"},
    {"id": 5, "name": "Extremely Strong", "color": "bg-purple-100 text-purple-800"},
]

EMPLOYEE_RANGES = [
    {"id": i, "label": label}
    for i, label in enumerate(["1-10", "11-50", "51-200", "201-500", "501-1000", "1000+"], start=1)
]

ESTIMATED_ARRS = [
    {"id": i, "label": label}
    for i, label in enumerate(
        ["$0-$100K", "$100K-$500K", "$500K-$1M", "$1M-$5M", "$5M-$10M", "$10M+"], start=1
    )
]

_SEEDS = (
    (models.Category, CATEGORIES),
    (models.ConnectionStrength, CONNECTION_STRENGTHS),
    (models.EmployeeRange, EMPLOYEE_RANGES),
    (models.EstimatedArr, ESTIMATED_ARRS),
)


def upgrade(db: Database) -> None:
    for model, rows in _SEEDS:
        db.execute(sqlite_insert(model).values(rows).on_conflict_do_nothing())


def downgrade(db: Database) -> None:
    for model, _ in _SEEDS:
        db.execute(delete(model))
