"""Read-only access to the seeded lookup tables."""
from sqlalchemy import select

from db import models
from db.database import Database
from schemas import Category, ConnectionStrength, EmployeeRange, EstimatedArr


def list_categories(db: Database) -> list[Category]:
    rows = db.execute(select(models.Category.__table__).order_by(models.Category.id)).mappings()
    return [Category.model_validate(dict(row)) for row in rows]


def list_connection_strengths(db: Database) -> list[ConnectionStrength]:
    table = models.ConnectionStrength.__table__
    rows = db.execute(select(table).order_by(table.c.id)).mappings()
    return [ConnectionStrength.model_validate(dict(row)) for row in rows]


def list_employee_ranges(db: Database) -> list[EmployeeRange]:
    table = models.EmployeeRange.__table__
    rows = db.execute(select(table).order_by(table.c.id)).mappings()
    return [EmployeeRange.model_validate(dict(row)) for row in rows]


def list_estimated_arrs(db: Database) -> list[EstimatedArr]:
    table = models.EstimatedArr.__table__
    rows = db.execute(select(table).order_by(table.c.id)).mappings()
    return [EstimatedArr.model_validate(dict(row)) for row in rows]
