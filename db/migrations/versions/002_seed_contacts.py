"""Seed sample contacts.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from db.database import Database
from db.repositories.contacts import ContactRepository
from schemas import Contact

logger = logging.getLogger(__name__)

version = 2
name = "seed_contacts"

CONTACTS = [
    Contact(
        id="seed-contact-1", name="Ann Lee", initials="AL", email="ann.lee@northwind.example",
        phone="+1 555 0101", position="Head of Operations", city="Seattle", state="WA",
        country="USA", social_links={"linkedin": "https://linkedin.com/in/annlee"},
    ),
    Contact(
        id="seed-contact-2", name="Marco Rossi", initials="MR", email="marco@lumen.example",
        position="CTO", city="Milan", country="Italy",
    ),
    Contact(
        id="seed-contact-3", name="Priya Nair", initials="PN", email="priya.nair@helix.example",
        phone="+44 20 7946 0018", position="VP Finance", city="London", country="UK",
        social_links={"x": "https://x.com/priyanair"},
    ),
    Contact(
        id="seed-contact-4", name="Tomás García", initials="TG", email="tomas@orbita.example",
        position="Procurement Lead", city="Madrid", country="Spain",
    ),
    Contact(
        id="seed-contact-5", name="Grace Kim", initials="GK", email="grace.kim@northwind.example",
        position="Account Executive", city="Seattle", state="WA", country="USA",
    ),
]


def upgrade(db: Database) -> None:
    repo = ContactRepository(db)
    for contact in CONTACTS:
        try:
            repo.create(contact)
        except SQLAlchemyError as exc:
            logger.warning("Skipping seed contact %s: %s", contact.id, exc)


def downgrade(db: Database) -> None:
    repo = ContactRepository(db)
    for contact in CONTACTS:
        repo.delete(contact.id)
