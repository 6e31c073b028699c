"""Seed sample companies with their categories and contacts.

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from db import models
from db.database import Database
from db.repositories.companies import CompanyRepository
from schemas import Badge, Company

logger = logging.getLogger(__name__)

version = 3
name = "seed_companies"

# company, category ids, contact ids
COMPANIES = [
    (
        Company(
            id="seed-company-1", name="Northwind Logistics", domain="northwind.example",
            email="hello@northwind.example", city="Seattle", state="WA", country="USA",
            connection_strength_id=4, employee_range_id=3, estimated_arr_id=4,
            badge=Badge(name="Customer", state="success"),
        ),
        [1, 4],
        ["seed-contact-1", "seed-contact-5"],
    ),
    (
        Company(
            id="seed-company-2", name="Lumen Analytics", domain="lumen.example",
            city="Milan", country="Italy", connection_strength_id=2, employee_range_id=2,
            estimated_arr_id=2,
        ),
        [1],
        ["seed-contact-2"],
    ),
    (
        Company(
            id="seed-company-3", name="Helix Health", domain="helix.example",
            city="London", country="UK", connection_strength_id=3, employee_range_id=4,
            estimated_arr_id=5, badge=Badge(name="Prospect", state="warning"),
        ),
        [3, 2],
        ["seed-contact-3"],
    ),
    (
        Company(
            id="seed-company-4", name="Orbita Manufacturing", domain="orbita.example",
            city="Madrid", country="Spain", connection_strength_id=1, employee_range_id=5,
            estimated_arr_id=3,
        ),
        [5],
        ["seed-contact-4"],
    ),
]


def upgrade(db: Database) -> None:
    repo = CompanyRepository(db)
    for company, category_ids, contact_ids in COMPANIES:
        try:
            repo.create(company)
            for category_id in category_ids:
                repo.add_category(company.id, category_id)
            for contact_id in contact_ids:
                repo.add_contact(company.id, contact_id)
        except SQLAlchemyError as exc:
            logger.warning("Skipping seed company %s: %s", company.id, exc)


def downgrade(db: Database) -> None:
    ids = [company.id for company, _, _ in COMPANIES]
    db.execute(delete(models.CompanyCategory).where(models.CompanyCategory.company_id.in_(ids)))
    db.execute(delete(models.CompanyContact).where(models.CompanyContact.company_id.in_(ids)))
    repo = CompanyRepository(db)
    for company_id in ids:
        repo.delete(company_id)
