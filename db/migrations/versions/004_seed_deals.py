"""Seed sample deals linked to the sample companies and contacts.

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
import logging
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from db import models
from db.database import Database
from db.repositories.deals import DealRepository
from schemas import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING, Deal

logger = logging.getLogger(__name__)

version = 4
name = "seed_deals"


def _deals() -> list[tuple[Deal, list[str], list[str]]]:
    now = datetime.now(timezone.utc)
    return [
        (
            Deal(
                id="seed-deal-1", title="Northwind fleet rollout",
                content="Annual licence for 40 depots", user_name="Grace Kim",
                status=STATUS_IN_PROGRESS, priority="high", due_at=now + relativedelta(months=1),
                amount=48000.0, currency="USD", payment_type="invoice",
            ),
            ["seed-company-1"],
            ["seed-contact-1"],
        ),
        (
            Deal(
                id="seed-deal-2", title="Lumen pilot", content="Three-month analytics pilot",
                user_name="Grace Kim", status=STATUS_PENDING, priority="medium",
                due_at=now + relativedelta(weeks=2), amount=6500.0, currency="EUR",
            ),
            ["seed-company-2"],
            ["seed-contact-2"],
        ),
        (
            Deal(
                id="seed-deal-3", title="Helix renewal", content="Renewal of the 2025 contract",
                user_name="Grace Kim", status=STATUS_COMPLETED, priority="low",
                due_at=now - relativedelta(months=1), completed_at=now - relativedelta(days=40),
                completed_by="Grace Kim", amount=21000.0, currency="GBP",
                contract_number="HX-2026-014", discount=5.0,
            ),
            ["seed-company-3"],
            ["seed-contact-3"],
        ),
    ]


def upgrade(db: Database) -> None:
    repo = DealRepository(db)
    for deal, company_ids, contact_ids in _deals():
        try:
            repo.create(deal)
            for company_id in company_ids:
                repo.add_company(deal.id, company_id)
            for contact_id in contact_ids:
                repo.add_contact(deal.id, contact_id)
        except SQLAlchemyError as exc:
            logger.warning("Skipping seed deal %s: %s", deal.id, exc)


def downgrade(db: Database) -> None:
    ids = [deal.id for deal, _, _ in _deals()]
    db.execute(delete(models.DealCompany).where(models.DealCompany.deal_id.in_(ids)))
    db.execute(delete(models.DealContact).where(models.DealContact.deal_id.in_(ids)))
    repo = DealRepository(db)
    for deal_id in ids:
        repo.delete(deal_id)
