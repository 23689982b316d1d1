"""Abstract database interface.

Every query is scoped by ``tenant_id``; an entity belonging to another tenant
is reported the same way as a missing one.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from payables.domain.entities import (
    Account,
    CostCenterAllocation,
    CostCenterShare,
    PaymentRecord,
    Supplier,
)


class Database(ABC):
    """Abstract database interface for payables."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Supplier operations
    @abstractmethod
    def create_supplier(
        self,
        tenant_id: str,
        name: str,
        tax_id: Optional[str] = None,
        invoice_by_email: bool = False,
        invoice_by_portal: bool = False,
        portal_url: Optional[str] = None,
        notes: Optional[str] = None,
        active: bool = True,
    ) -> int:
        """Create a supplier. Returns supplier ID."""
        pass

    @abstractmethod
    def get_supplier(self, tenant_id: str, supplier_id: int) -> Optional[Supplier]:
        """Get supplier by ID."""
        pass

    @abstractmethod
    def get_supplier_by_name(self, tenant_id: str, name: str) -> Optional[Supplier]:
        """Get supplier by exact name."""
        pass

    @abstractmethod
    def list_suppliers(self, tenant_id: str, include_inactive: bool = True) -> list[Supplier]:
        """List suppliers ordered by name."""
        pass

    @abstractmethod
    def update_supplier(
        self,
        tenant_id: str,
        supplier_id: int,
        *,
        name: str,
        tax_id: Optional[str],
        invoice_by_email: bool,
        invoice_by_portal: bool,
        portal_url: Optional[str],
        notes: Optional[str],
        active: bool,
    ) -> None:
        """Replace all editable supplier fields."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        tenant_id: str,
        supplier_id: int,
        description: str,
        amount: Decimal,
        issue_day: int,
        due_day: int,
        end_date: Optional[date] = None,
        cost_centers: Sequence[CostCenterShare] = (),
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, tenant_id: str, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, tenant_id: str, supplier_id: Optional[int] = None) -> list[Account]:
        """List accounts, optionally filtered by supplier."""
        pass

    @abstractmethod
    def update_account(
        self,
        tenant_id: str,
        account_id: int,
        *,
        supplier_id: int,
        description: str,
        amount: Decimal,
        issue_day: int,
        due_day: int,
        end_date: Optional[date],
        cost_centers: Sequence[CostCenterShare],
    ) -> None:
        """Replace all editable account fields."""
        pass

    @abstractmethod
    def delete_account(self, tenant_id: str, account_id: int) -> None:
        """Delete an account and its cost centers."""
        pass

    @abstractmethod
    def get_account_payment_count(self, tenant_id: str, account_id: int) -> int:
        """Get count of payment records for an account."""
        pass

    # Payment record operations
    @abstractmethod
    def create_payment_record(
        self,
        tenant_id: str,
        account_id: int,
        paid_month: str,
        paid_date: date,
        invoice_numbers: Sequence[str],
        recipient: str,
        amount: Decimal,
        cost_centers_snapshot: Sequence[CostCenterAllocation] = (),
    ) -> int:
        """Create a payment record. Returns payment record ID.

        Raises:
            ConflictError: If the account already has a record for paid_month
        """
        pass

    @abstractmethod
    def get_payment_record(self, tenant_id: str, payment_id: int) -> Optional[PaymentRecord]:
        """Get payment record by ID."""
        pass

    @abstractmethod
    def payment_record_exists(self, tenant_id: str, account_id: int, paid_month: str) -> bool:
        """Check if an account already has a record for paid_month."""
        pass

    @abstractmethod
    def list_payment_records(
        self,
        tenant_id: str,
        account_id: Optional[int] = None,
        paid_start: Optional[date] = None,
        paid_end: Optional[date] = None,
    ) -> list[PaymentRecord]:
        """List payment records, most recent paid date first.

        Args:
            tenant_id: Tenant key
            account_id: Optional account ID filter
            paid_start: Optional inclusive lower bound on paid date
            paid_end: Optional inclusive upper bound on paid date
        """
        pass
