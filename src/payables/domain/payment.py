"""Payment domain service: settlement recording and payment history."""

import logging
from datetime import date
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Optional, Sequence

from payables.database.base import Database
from payables.domain.entities import (
    CostCenterAllocation,
    CostCenterShare,
    HistoryEntry,
    PaymentRecord,
)
from payables.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    period_already_paid,
    period_outside_recurrence,
)
from payables.domain.account import validate_cost_centers
from payables.domain.recurrence import compute_due_date, month_of
from payables.utils.date_parser import parse_period

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def allocate_cost_centers(
    amount: Decimal, shares: Sequence[CostCenterShare]
) -> tuple[CostCenterAllocation, ...]:
    """Split an amount across cost center shares.

    Uses largest-remainder rounding: every value is floored to cents, then
    the leftover cents go one at a time to the shares with the largest
    remainders (earlier shares win ties). Values add up to the amount and
    are never negative.
    """
    if not shares:
        return ()

    exact = [amount * share.percent / 100 for share in shares]
    values = [e.quantize(_CENT, rounding=ROUND_FLOOR) for e in exact]
    leftover = int((amount - sum(values)) / _CENT)
    by_remainder = sorted(range(len(shares)), key=lambda i: exact[i] - values[i], reverse=True)
    for i in by_remainder[:leftover]:
        values[i] += _CENT

    return tuple(
        CostCenterAllocation(code=share.code, percent=share.percent, value=value)
        for share, value in zip(shares, values)
    )


def _matches(entry: HistoryEntry, needle: str) -> bool:
    return (
        needle in entry.description.lower()
        or needle in entry.supplier_name.lower()
        or any(needle in nf.lower() for nf in entry.invoice_numbers)
        or needle in entry.recipient.lower()
    )


class PaymentService:
    """Service for recording settlements and browsing payment history."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_payment(
        self,
        tenant_id: str,
        account_id: int,
        period: str,
        invoice_numbers: Iterable[str],
        recipient: str,
        paid_date: date,
        cost_centers: Optional[Iterable[CostCenterShare]] = None,
    ) -> int:
        """Record the settlement of one monthly period of an account.

        Args:
            tenant_id: Tenant key
            account_id: Account being settled
            period: Period key (YYYY-MM) of the settled occurrence
            invoice_numbers: Invoice/NF identifiers, at least one
            recipient: Who received the invoice
            paid_date: Date the settlement is recorded for
            cost_centers: Shares to snapshot (defaults to the account's current ones)

        Returns:
            Payment record ID

        Raises:
            NotFoundError: If the account doesn't exist in the tenant
            ValidationError: If period, invoice numbers or recipient are invalid
            ConflictError: If the period was already settled
        """
        account = self.db.get_account(tenant_id, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        try:
            period = parse_period(period)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        year, month = (int(part) for part in period.split("-"))
        start = month_of(account.created_at)
        if (year, month) < start or (
            account.end_date is not None and (year, month) > month_of(account.end_date)
        ):
            raise ValidationError(period_outside_recurrence(account_id, period))

        numbers = tuple(n.strip() for n in invoice_numbers if n and n.strip())
        if not numbers:
            raise ValidationError("At least one invoice number is required")
        recipient = (recipient or "").strip()
        if not recipient:
            raise ValidationError("Recipient is required")

        shares = account.cost_centers if cost_centers is None else validate_cost_centers(cost_centers)

        if self.db.payment_record_exists(tenant_id, account_id, period):
            logger.warning("Account %s already paid for %s", account_id, period)
            raise ConflictError(period_already_paid(account_id, period))

        payment_id = self.db.create_payment_record(
            tenant_id=tenant_id,
            account_id=account_id,
            paid_month=period,
            paid_date=paid_date,
            invoice_numbers=numbers,
            recipient=recipient,
            amount=account.amount,
            cost_centers_snapshot=allocate_cost_centers(account.amount, shares),
        )
        logger.info("Recorded payment %s for account %s period %s", payment_id, account_id, period)
        return payment_id

    def get_payment(self, tenant_id: str, payment_id: int) -> Optional[PaymentRecord]:
        """Get a payment record by ID, or None if not found."""
        return self.db.get_payment_record(tenant_id, payment_id)

    def list_payments(self, tenant_id: str, account_id: Optional[int] = None) -> list[PaymentRecord]:
        """List payment records, most recent paid date first."""
        return self.db.list_payment_records(tenant_id, account_id=account_id)

    def list_history(
        self,
        tenant_id: str,
        supplier_id: Optional[int] = None,
        due_start: Optional[date] = None,
        due_end: Optional[date] = None,
        paid_start: Optional[date] = None,
        paid_end: Optional[date] = None,
        search: Optional[str] = None,
    ) -> list[HistoryEntry]:
        """List settled occurrences with their frozen cost center snapshots.

        Args:
            tenant_id: Tenant key
            supplier_id: Only payments of this supplier's accounts
            due_start: Inclusive lower bound on the derived due date
            due_end: Inclusive upper bound on the derived due date
            paid_start: Inclusive lower bound on the paid date
            paid_end: Inclusive upper bound on the paid date
            search: Case-insensitive text matched against description,
                supplier name, invoice numbers and recipient

        Returns:
            History entries, most recent paid date first
        """
        records = self.db.list_payment_records(tenant_id, paid_start=paid_start, paid_end=paid_end)
        if not records:
            return []

        accounts = {acc.id: acc for acc in self.db.list_accounts(tenant_id, supplier_id=supplier_id)}
        suppliers = {s.id: s.name for s in self.db.list_suppliers(tenant_id)}
        needle = (search or "").strip().lower()

        entries = []
        for record in records:
            account = accounts.get(record.account_id)
            if account is None:
                # Filtered out by supplier
                continue

            year, month = (int(part) for part in record.paid_month.split("-"))
            due_date = compute_due_date(year, month, account.due_day, account.issue_day)
            if due_start is not None and due_date < due_start:
                continue
            if due_end is not None and due_date > due_end:
                continue

            entry = HistoryEntry(
                payment_id=record.id,
                account_id=record.account_id,
                supplier_id=account.supplier_id,
                supplier_name=suppliers.get(account.supplier_id, "Unknown"),
                description=account.description,
                paid_month=record.paid_month,
                paid_date=record.paid_date,
                due_date=due_date,
                amount=record.amount,
                invoice_numbers=record.invoice_numbers,
                recipient=record.recipient,
                cost_centers_snapshot=record.cost_centers_snapshot,
            )
            if needle and not _matches(entry, needle):
                continue
            entries.append(entry)
        return entries
