"""Repository layer for the local CRM store.

Entity repositories wrap the generic Repository with finders, aggregates
and junction-table helpers:
- contacts: find_by_email, find_by_company_id, search_by_name, get_leads,
            get_follow_ups, get_pipeline
- companies: find_by_domain, search_by_name, contact and category links
- deals: find_by_status, find_overdue, company/contact/related-deal links,
         get_statistics
- tasks: find_by_creator, find_overdue, links, assignments, get_statistics
- notes: search_by_content, links, assignments
- lookups: list_categories, list_connection_strengths, list_employee_ranges,
           list_estimated_arrs
"""
from db.repositories.base import Repository
from db.repositories.companies import CompanyRepository
from db.repositories.contacts import ContactRepository
from db.repositories.deals import DealRepository
from db.repositories.notes import NoteRepository
from db.repositories.tasks import TaskRepository

__all__ = [
    "Repository",
    "CompanyRepository",
    "ContactRepository",
    "DealRepository",
    "NoteRepository",
    "TaskRepository",
]
