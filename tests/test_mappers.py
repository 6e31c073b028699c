"""Unit tests for row <-> domain model conversion."""
import logging
from datetime import datetime, timedelta, timezone

from db.mappers import (
    company_from_row,
    company_to_row,
    contact_from_row,
    contact_to_row,
    deal_from_row,
    deal_to_row,
    from_epoch_ms,
    note_from_row,
    note_to_row,
    task_from_row,
    task_to_row,
    to_epoch_ms,
)
from schemas import Badge, Company, Contact, Deal, Note, Task

WHEN = datetime(2025, 3, 14, 15, 9, 26, 535000, tzinfo=timezone.utc)


class TestEpochMillis:
    def test_epoch(self):
        assert to_epoch_ms(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0
        assert from_epoch_ms(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000

    def test_offset_aware_values_are_converted(self):
        plus_two = timezone(timedelta(hours=2))
        assert to_epoch_ms(datetime(1970, 1, 1, 2, 0, 0, tzinfo=plus_two)) == 0

    def test_sub_millisecond_digits_are_dropped(self):
        value = datetime(2025, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        assert from_epoch_ms(to_epoch_ms(value)) == value.replace(microsecond=123000)

    def test_none(self):
        assert to_epoch_ms(None) is None
        assert from_epoch_ms(None) is None


class TestContactMapper:
    def test_round_trip(self):
        contact = Contact(
            id="c1", name="Ann", email="ann@example.com", company_id="co1",
            social_links={"linkedin": "https://linkedin.com/in/ann"},
            created_at=WHEN, updated_at=WHEN,
        )
        row = contact_to_row(contact)
        assert row["created_at"] == to_epoch_ms(WHEN)
        assert row["social_links"] == '{"linkedin": "https://linkedin.com/in/ann"}'
        assert contact_from_row(row) == contact

    def test_empty_values_collapse_to_none(self):
        contact = Contact(id="c1", name="Ann", email="", social_links={})
        row = contact_to_row(contact)
        assert row["email"] is None
        assert row["social_links"] is None

        restored = contact_from_row(row)
        assert restored.email is None
        assert restored.social_links is None

    def test_malformed_json_is_logged_and_dropped(self, caplog):
        row = contact_to_row(Contact(id="c1", name="Ann"))
        row["social_links"] = "{not json"
        with caplog.at_level(logging.WARNING, logger="db.mappers"):
            contact = contact_from_row(row)
        assert contact.social_links is None
        assert contact.name == "Ann"
        assert "Contact.social_links" in caplog.text

    def test_wrong_json_shape_is_dropped(self, caplog):
        row = contact_to_row(Contact(id="c1", name="Ann"))
        row["social_links"] = '["not", "a", "map"]'
        with caplog.at_level(logging.WARNING, logger="db.mappers"):
            assert contact_from_row(row).social_links is None
        assert caplog.records


class TestCompanyMapper:
    def test_round_trip_with_badge(self):
        company = Company(
            id="co1", name="Acme", domain="acme.example", connection_strength_id=3,
            founded_at=datetime(2010, 5, 1, tzinfo=timezone.utc),
            badge=Badge(name="Customer", state="success"),
            created_at=WHEN, updated_at=WHEN,
        )
        row = company_to_row(company)
        assert row["founded_at"] == to_epoch_ms(company.founded_at)
        assert company_from_row(row) == company

    def test_relationship_ids_are_not_stored(self):
        company = Company(id="co1", name="Acme", contact_ids=["c1"], category_ids=[1])
        row = company_to_row(company)
        assert "contact_ids" not in row
        restored = company_from_row(row)
        assert restored.contact_ids is None
        assert restored.category_ids is None


class TestDealTaskNoteMappers:
    def test_deal_round_trip_keeps_zero_amount(self):
        deal = Deal(
            id="d1", title="Pilot", content="Trial", user_name="Grace", due_at=WHEN,
            amount=0.0, discount=0.0, status="pending", payment_date=WHEN,
            created_at=WHEN, updated_at=WHEN,
        )
        row = deal_to_row(deal)
        assert row["amount"] == 0.0
        assert row["comments"] == 0
        assert deal_from_row(row) == deal

    def test_task_round_trip(self):
        task = Task(
            id="t1", created_by="Grace", due_at=WHEN, completed_at=WHEN,
            title="Call back", created_at=WHEN, updated_at=WHEN,
        )
        assert task_from_row(task_to_row(task)) == task

    def test_note_round_trip(self):
        note = Note(
            id="n1", status="pending", due_at=WHEN, content="Met at the expo",
            created_at=WHEN, updated_at=WHEN,
        )
        assert note_from_row(note_to_row(note)) == note
