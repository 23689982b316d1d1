"""Occurrence domain service."""

from datetime import date

from payables.database.base import Database
from payables.domain.entities import OccurrenceGroups
from payables.domain.recurrence import expand, group_occurrences


class OccurrenceService:
    """Builds the list of monthly occurrences for a tenant."""

    def __init__(self, db: Database):
        """Initialize occurrence service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_occurrences(self, tenant_id: str, as_of: date) -> OccurrenceGroups:
        """Return the tenant's occurrences visible on as_of, grouped for display.

        Accounts and payment records are read through the same session so the
        engine works on one consistent snapshot.
        """
        accounts = self.db.list_accounts(tenant_id)
        payments = self.db.list_payment_records(tenant_id)
        return group_occurrences(expand(accounts, payments, as_of))
