"""Domain model entities for payables.

These are pure data classes representing business concepts, independent of
database schema. Occurrences are derived by the recurrence engine and are
never persisted.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class OccurrenceStatus(Enum):
    """Presentation group of a monthly occurrence."""

    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    PAID = "paid"


@dataclass(frozen=True)
class Supplier:
    """Supplier domain entity."""

    id: int
    tenant_id: str
    name: str
    created_at: datetime
    tax_id: Optional[str] = None
    invoice_by_email: bool = False
    invoice_by_portal: bool = False
    portal_url: Optional[str] = None
    notes: Optional[str] = None
    active: bool = True


@dataclass(frozen=True)
class CostCenterShare:
    """Percentage of an account's amount charged to a cost center."""

    code: str
    percent: Decimal


@dataclass(frozen=True)
class CostCenterAllocation:
    """Cost center share frozen at settlement time, with its computed value."""

    code: str
    percent: Decimal
    value: Decimal


@dataclass(frozen=True)
class Account:
    """Recurring supplier invoice definition."""

    id: int
    tenant_id: str
    supplier_id: int
    description: str
    amount: Decimal
    issue_day: int
    due_day: int
    created_at: datetime
    end_date: Optional[date] = None
    cost_centers: tuple[CostCenterShare, ...] = ()


@dataclass(frozen=True)
class PaymentRecord:
    """Settlement of one monthly occurrence of an account."""

    id: int
    tenant_id: str
    account_id: int
    paid_month: str
    paid_date: date
    invoice_numbers: tuple[str, ...]
    recipient: str
    amount: Decimal
    cost_centers_snapshot: tuple[CostCenterAllocation, ...] = ()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Occurrence:
    """One monthly instance of a recurring account, identified by (account_id, period)."""

    account_id: int
    supplier_id: int
    description: str
    period: str
    issue_date: date
    due_date: date
    amount: Decimal
    is_paid: bool
    status: OccurrenceStatus
    invoice_numbers: tuple[str, ...] = ()
    recipient: Optional[str] = None
    paid_date: Optional[date] = None
    payment_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, str]:
        return (self.account_id, self.period)

    @property
    def is_overdue(self) -> bool:
        return self.status is OccurrenceStatus.OVERDUE


@dataclass(frozen=True)
class OccurrenceGroups:
    """Expanded occurrences split into presentation sections."""

    overdue: tuple[Occurrence, ...] = ()
    upcoming: tuple[Occurrence, ...] = ()
    paid: tuple[Occurrence, ...] = ()

    def __len__(self) -> int:
        return len(self.overdue) + len(self.upcoming) + len(self.paid)


@dataclass(frozen=True)
class HistoryEntry:
    """Payment record joined with its account and supplier for history views."""

    payment_id: int
    account_id: int
    supplier_id: int
    supplier_name: str
    description: str
    paid_month: str
    paid_date: date
    due_date: date
    amount: Decimal
    invoice_numbers: tuple[str, ...]
    recipient: str
    cost_centers_snapshot: tuple[CostCenterAllocation, ...] = ()
