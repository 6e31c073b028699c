"""Integration tests for the entity repositories."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from db.config import DB_STORAGE_KEY
from db.exceptions import InvalidIdentifierError
from db.repositories import (
    CompanyRepository,
    ContactRepository,
    DealRepository,
    NoteRepository,
    TaskRepository,
)
from schemas import Company, Contact, Deal, DealStatistics, Note, Task, TaskStatistics

PAST = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


def _now():
    return datetime.now(timezone.utc)


def _deal(id, **kwargs):
    fields = {"title": f"Deal {id}", "content": "Details", "user_name": "Grace", "due_at": _now()}
    fields.update(kwargs)
    return Deal(id=id, **fields)


def _task(id, **kwargs):
    fields = {"created_by": "Grace", "due_at": _now()}
    fields.update(kwargs)
    return Task(id=id, **fields)


def _note(id, **kwargs):
    fields = {"status": "pending", "due_at": _now()}
    fields.update(kwargs)
    return Note(id=id, **fields)


# ---------------------------------------------------------------------------
# Base repository behaviour (through ContactRepository)
# ---------------------------------------------------------------------------


class TestContactCrud:
    def test_create_update_delete(self, db):
        """Create, update and delete one contact."""
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann", created_at=PAST, updated_at=PAST))

        contacts = repo.get_all()
        assert len(contacts) == 1
        assert contacts[0].name == "Ann"

        updated = repo.update("c1", {"phone": "555"})
        assert updated.phone == "555"
        assert repo.get_by_id("c1").phone == "555"
        assert updated.updated_at > PAST
        assert updated.created_at == PAST

        assert repo.delete("c1") is True
        assert repo.get_by_id("c1") is None
        assert repo.delete("c1") is False

    def test_create_returns_stored_entity(self, db):
        created = ContactRepository(db).create(Contact(name="Bea", email=""))
        assert created.id
        assert created.email is None

    def test_duplicate_id_raises(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann"))
        with pytest.raises(IntegrityError):
            repo.create(Contact(id="c1", name="Other Ann"))

    def test_update_missing_returns_none(self, db):
        assert ContactRepository(db).update("missing", {"phone": "555"}) is None

    def test_update_accepts_a_model(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann"))
        updated = repo.update("c1", Contact(id="ignored", name="Ann Lee"))
        assert updated.id == "c1"
        assert updated.name == "Ann Lee"

    def test_update_rejects_unknown_fields(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann"))
        with pytest.raises(ValidationError):
            repo.update("c1", {"favourite_colour": "green"})

    def test_update_can_clear_structured_field(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann", social_links={"x": "https://x.com/ann"}))
        assert repo.update("c1", {"social_links": {}}).social_links is None

    def test_every_write_is_snapshotted(self, db, store):
        repo = ContactRepository(db)
        before = store.get_item(DB_STORAGE_KEY)
        repo.create(Contact(id="c1", name="Ann"))
        after_create = store.get_item(DB_STORAGE_KEY)
        assert after_create != before

        repo.delete("missing")
        assert store.get_item(DB_STORAGE_KEY) == after_create

    def test_find_by_count_exists(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann", country="UK"))
        repo.create(Contact(id="c2", name="Bob", country="UK"))
        repo.create(Contact(id="c3", name="Cid", country="US"))

        assert [c.id for c in repo.find_by("country", "UK", order_by="name DESC")] == ["c2", "c1"]
        assert repo.count() == 3
        assert repo.count(repo.table.c.country == "US") == 1
        assert repo.exists("c1")
        assert not repo.exists("c9")

    def test_find_by_unknown_field(self, db):
        with pytest.raises(InvalidIdentifierError):
            ContactRepository(db).find_by("password", "x")

    def test_get_page_returns_entities(self, db):
        repo = ContactRepository(db)
        for i in range(5):
            repo.create(Contact(id=f"c{i}", name=f"Contact {i}"))
        page = repo.get_page(page=2, page_size=2, order_by="name ASC")
        assert [c.name for c in page.data] == ["Contact 2", "Contact 3"]
        assert page.total_pages == 3


class TestContactFinders:
    def test_email_company_country(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Zed", email="zed@acme.example", company_id="co1"))
        repo.create(Contact(id="c2", name="Amy", company_id="co1", country="France"))

        assert repo.find_by_email("zed@acme.example").id == "c1"
        assert repo.find_by_email("nobody@acme.example") is None
        assert [c.id for c in repo.find_by_company_id("co1")] == ["c2", "c1"]
        assert [c.id for c in repo.find_by_country("France")] == ["c2"]

    def test_search_by_name(self, db):
        repo = ContactRepository(db)
        repo.create(Contact(id="c1", name="Ann Lee"))
        repo.create(Contact(id="c2", name="Joanna"))
        repo.create(Contact(id="c3", name="Bob"))
        repo.create(Contact(id="c4", name="100% Ann"))

        assert [c.id for c in repo.search_by_name("ann")] == ["c4", "c1", "c2"]
        assert [c.id for c in repo.search_by_name("%")] == ["c4"]

    def test_recent_and_date_range(self, db):
        repo = ContactRepository(db)
        for i in range(3):
            day = PAST + timedelta(days=i)
            repo.create(Contact(id=f"c{i}", name=f"C{i}", created_at=day, updated_at=day))

        assert [c.id for c in repo.get_recent(2)] == ["c2", "c1"]
        in_range = repo.find_by_date_range(PAST + timedelta(hours=1), PAST + timedelta(days=2))
        assert [c.id for c in in_range] == ["c2", "c1"]

    def test_activity_windows(self, db):
        repo = ContactRepository(db)
        now = _now()
        two_days = now - timedelta(days=2)
        ten_days = now - timedelta(days=10)
        repo.create(Contact(id="today", name="Today"))
        repo.create(Contact(id="recent", name="Recent", created_at=two_days, updated_at=two_days))
        repo.create(Contact(id="stale", name="Stale", created_at=ten_days, updated_at=ten_days))

        assert {c.id for c in repo.get_leads()} == {"today"}
        assert {c.id for c in repo.get_follow_ups()} == {"today", "recent"}
        assert {c.id for c in repo.get_pipeline()} == {"stale"}


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


class TestCompanies:
    def test_add_contact_is_idempotent(self, db):
        """Linking the same contact twice leaves a single junction row."""
        companies = CompanyRepository(db)
        companies.create(Company(id="co1", name="Acme"))
        ContactRepository(db).create(Contact(id="c1", name="Ann"))

        companies.add_contact("co1", "c1")
        companies.add_contact("co1", "c1")
        assert companies.get_contact_ids("co1") == ["c1"]

    def test_remove_links(self, db):
        companies = CompanyRepository(db)
        companies.create(Company(id="co1", name="Acme"))
        companies.add_contact("co1", "c1")
        companies.add_category("co1", 2)

        assert companies.remove_contact("co1", "c1") is True
        assert companies.remove_contact("co1", "c1") is False
        assert companies.get_contact_ids("co1") == []
        assert companies.remove_category("co1", 2) is True
        assert companies.get_category_ids("co1") == []

    def test_get_with_relationships(self, db):
        companies = CompanyRepository(db)
        companies.create(Company(id="co1", name="Acme"))
        companies.add_contact("co1", "c2")
        companies.add_contact("co1", "c1")
        companies.add_category("co1", 3)

        company = companies.get_with_relationships("co1")
        assert company.contact_ids == ["c1", "c2"]
        assert company.category_ids == [3]
        assert companies.get_by_id("co1").contact_ids is None
        assert companies.get_with_relationships("missing") is None

    def test_delete_does_not_cascade_junction_rows(self, db):
        companies = CompanyRepository(db)
        companies.create(Company(id="co1", name="Acme"))
        companies.add_contact("co1", "c1")
        companies.delete("co1")
        assert companies.get_contact_ids("co1") == ["c1"]

    def test_finders(self, db):
        companies = CompanyRepository(db)
        companies.create(Company(id="co1", name="Acme Corp", domain="acme.example", country="US",
                                 connection_strength_id=2))
        companies.create(Company(id="co2", name="Bolt", domain="bolt.example", country="US"))

        assert companies.find_by_domain("bolt.example").id == "co2"
        assert companies.find_by_domain("none.example") is None
        assert [c.id for c in companies.search_by_name("acme")] == ["co1"]
        assert [c.id for c in companies.find_by_country("US")] == ["co1", "co2"]
        assert [c.id for c in companies.find_by_connection_strength(2)] == ["co1"]
        assert len(companies.get_recent(1)) == 1


# ---------------------------------------------------------------------------
# Deals
# ---------------------------------------------------------------------------


class TestDeals:
    def test_statistics(self, db):
        deals = DealRepository(db)
        deals.create(_deal("d1", status="pending", amount=100))
        deals.create(_deal("d2", status="pending", amount=200))
        deals.create(_deal("d3", status="completed", amount=300))

        assert deals.get_statistics() == DealStatistics(
            total=3, pending=2, in_progress=0, completed=1, total_value=600
        )
        assert deals.get_total_value_by_status("pending") == 300
        assert deals.get_total_value_by_status("lost") == 0

    def test_statistics_on_empty_table(self, db):
        stats = DealRepository(db).get_statistics()
        assert stats.total == 0
        assert stats.total_value == 0

    def test_status_priority_and_due_ordering(self, db):
        deals = DealRepository(db)
        now = _now()
        deals.create(_deal("late", status="pending", priority="high", due_at=now + timedelta(days=9)))
        deals.create(_deal("soon", status="pending", due_at=now + timedelta(days=1)))

        assert [d.id for d in deals.find_by_status("pending")] == ["soon", "late"]
        assert [d.id for d in deals.find_by_priority("high")] == ["late"]
        window = deals.find_by_due_date_range(now, now + timedelta(days=2))
        assert [d.id for d in window] == ["soon"]

    def test_find_overdue(self, db):
        deals = DealRepository(db)
        yesterday = _now() - timedelta(days=1)
        deals.create(_deal("open", status="pending", due_at=yesterday))
        deals.create(_deal("no-status", due_at=yesterday))
        deals.create(_deal("done", status="completed", due_at=yesterday))
        deals.create(_deal("future", status="pending", due_at=_now() + timedelta(days=1)))

        assert {d.id for d in deals.find_overdue()} == {"open", "no-status"}

    def test_links_and_relationships(self, db):
        deals = DealRepository(db)
        deals.create(_deal("d1"))
        deals.create(_deal("d2"))
        deals.add_company("d1", "co1")
        deals.add_contact("d1", "c1")
        deals.add_related_deal("d1", "d2")
        deals.add_related_deal("d1", "d2")

        deal = deals.get_with_relationships("d1")
        assert deal.company_ids == ["co1"]
        assert deal.contact_ids == ["c1"]
        assert deal.related_deal_ids == ["d2"]
        assert deals.get_related_deal_ids("d2") == []

        assert deals.remove_related_deal("d1", "d2") is True
        assert deals.remove_company("d1", "co1") is True
        assert deals.remove_contact("d1", "c1") is True
        assert deals.get_with_relationships("d1").related_deal_ids == []

    def test_delete_then_get(self, db):
        deals = DealRepository(db)
        deals.create(_deal("d1"))
        assert deals.delete("d1")
        assert deals.get_by_id("d1") is None


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TestTasks:
    def test_statistics_and_overdue(self, db):
        tasks = TaskRepository(db)
        yesterday = _now() - timedelta(days=1)
        tasks.create(_task("t1", status="pending", due_at=yesterday))
        tasks.create(_task("t2", status="in_progress", due_at=_now() + timedelta(days=3)))
        tasks.create(_task("t3", status="completed", due_at=yesterday))
        tasks.create(_task("t4", due_at=yesterday))

        assert tasks.get_statistics() == TaskStatistics(
            total=4, pending=1, in_progress=1, completed=1, overdue=2
        )
        assert {t.id for t in tasks.find_overdue()} == {"t1", "t4"}

    def test_finders(self, db):
        tasks = TaskRepository(db)
        now = _now()
        tasks.create(_task("t1", created_by="Ann", priority="low", status="pending",
                           due_at=now + timedelta(days=2)))
        tasks.create(_task("t2", created_by="Bob", priority="low", due_at=now + timedelta(days=1)))

        assert [t.id for t in tasks.find_by_creator("Ann")] == ["t1"]
        assert [t.id for t in tasks.find_by_priority("low")] == ["t2", "t1"]
        assert [t.id for t in tasks.find_by_status("pending")] == ["t1"]
        assert [t.id for t in tasks.find_by_due_date_range(now, now + timedelta(days=1, hours=1))] == ["t2"]

    def test_links_and_assignments(self, db):
        tasks = TaskRepository(db)
        tasks.create(_task("t1"))
        tasks.add_company("t1", "co1")
        tasks.add_contact("t1", "c1")
        tasks.add_deal("t1", "d1")
        tasks.assign_contact("t1", "c2")
        tasks.assign_contact("t1", "c2")

        task = tasks.get_with_relationships("t1")
        assert task.company_ids == ["co1"]
        assert task.contact_ids == ["c1"]
        assert task.deal_ids == ["d1"]
        assert task.assigned_contact_ids == ["c2"]

        assert tasks.unassign_contact("t1", "c2") is True
        assert tasks.get_assigned_contact_ids("t1") == []
        assert tasks.remove_deal("t1", "d1") is True
        assert tasks.remove_contact("t1", "c1") is True
        assert tasks.remove_company("t1", "co1") is True
        assert tasks.get_company_ids("t1") == []


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestNotes:
    def test_search_by_content(self, db):
        notes = NoteRepository(db)
        notes.create(_note("n1", title="Expo follow-up", content="Send deck", created_at=PAST))
        notes.create(_note("n2", title="Pricing", content="They asked about the expo rate",
                           created_at=PAST + timedelta(days=1)))
        notes.create(_note("n3", title="Misc", content="Nothing relevant"))

        assert [n.id for n in notes.search_by_content("expo")] == ["n2", "n1"]
        assert notes.search_by_content("absent") == []

    def test_finders(self, db):
        notes = NoteRepository(db)
        notes.create(_note("n1", created_by="Ann", status="completed", created_at=PAST))
        notes.create(_note("n2", created_by="Ann", created_at=PAST + timedelta(days=3)))

        assert [n.id for n in notes.find_by_creator("Ann")] == ["n2", "n1"]
        assert [n.id for n in notes.find_by_status("completed")] == ["n1"]
        assert [n.id for n in notes.find_by_date_range(PAST, PAST + timedelta(days=1))] == ["n1"]
        assert [n.id for n in notes.get_recent(1)] == ["n2"]

    def test_links_and_assignments(self, db):
        notes = NoteRepository(db)
        notes.create(_note("n1"))
        notes.add_company("n1", "co1")
        notes.add_deal("n1", "d1")
        notes.assign_contact("n1", "c1")

        note = notes.get_with_relationships("n1")
        assert note.company_ids == ["co1"]
        assert note.deal_ids == ["d1"]
        assert note.assigned_contact_ids == ["c1"]

        assert notes.remove_company("n1", "co1")
        assert notes.remove_deal("n1", "d1")
        assert notes.unassign_contact("n1", "c1")
        assert notes.get_with_relationships("n1").assigned_contact_ids == []


@pytest.mark.parametrize(
    "repo_cls,entity",
    [
        (ContactRepository, Contact(id="x1", name="Ann")),
        (CompanyRepository, Company(id="x1", name="Acme")),
        (DealRepository, _deal("x1")),
        (TaskRepository, _task("x1")),
        (NoteRepository, _note("x1")),
    ],
)
def test_delete_then_get_returns_none(db, repo_cls, entity):
    repo = repo_cls(db)
    repo.create(entity)
    assert repo.delete("x1") is True
    assert repo.get_by_id("x1") is None
