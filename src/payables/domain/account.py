"""Account domain service.

Accounts are recurring invoice definitions. All recurrence-rule validation
happens here, before anything is persisted, so the recurrence engine only
ever sees valid rules.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from payables.database.base import Database
from payables.domain.entities import Account as AccountEntity, CostCenterShare
from payables.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    cost_centers_total,
    day_out_of_range,
    supplier_not_found,
)

logger = logging.getLogger(__name__)

_UNSET = object()
_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")

DESCRIPTION_MIN_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 200


def validate_day(field: str, value: int) -> int:
    """Check an issue or due day is an integer in 1-31."""
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
        raise ValidationError(day_out_of_range(field, value))
    return value


def validate_description(description: str) -> str:
    description = (description or "").strip()
    if len(description) < DESCRIPTION_MIN_LENGTH:
        raise ValidationError(
            f"Description must have at least {DESCRIPTION_MIN_LENGTH} characters"
        )
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must have at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


def validate_amount(amount: Decimal) -> Decimal:
    amount = Decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if amount != amount.quantize(_CENT):
        raise ValidationError("Amount cannot have more than two decimal places")
    return amount


def validate_cost_centers(cost_centers: Iterable[CostCenterShare]) -> tuple[CostCenterShare, ...]:
    """Check cost center shares and return them with cleaned codes.

    An empty list means the account is not allocated. Otherwise codes must be
    unique and non-blank, each percent positive with at most two decimals, and
    the percentages must sum to exactly 100.
    """
    shares = []
    seen = set()
    for share in cost_centers:
        code = (share.code or "").strip()
        if not code:
            raise ValidationError("Cost center code is required")
        if code in seen:
            raise ValidationError(f"Cost center '{code}' is listed more than once")
        seen.add(code)

        percent = Decimal(share.percent)
        if not percent.is_finite() or percent <= 0 or percent > _HUNDRED:
            raise ValidationError(f"Cost center '{code}' percent must be between 0 and 100")
        if percent != percent.quantize(_CENT):
            raise ValidationError(f"Cost center '{code}' percent cannot have more than two decimal places")
        shares.append(CostCenterShare(code=code, percent=percent))

    if shares:
        total = sum((s.percent for s in shares), Decimal("0"))
        if total != _HUNDRED:
            raise ValidationError(cost_centers_total(total))
    return tuple(shares)


def validate_end_date(end_date: Optional[date], created_at: datetime) -> Optional[date]:
    """Check the end date does not fall before the month the account starts."""
    if end_date is None:
        return None
    if (end_date.year, end_date.month) < (created_at.year, created_at.month):
        raise ValidationError(
            f"End date {end_date.isoformat()} is before the account start "
            f"({created_at.year:04d}-{created_at.month:02d})"
        )
    return end_date


class AccountService:
    """Service for managing recurring accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_supplier(self, tenant_id: str, supplier_id: int) -> None:
        if self.db.get_supplier(tenant_id, supplier_id) is None:
            raise NotFoundError(supplier_not_found(supplier_id))

    def _require_account(self, tenant_id: str, account_id: int) -> AccountEntity:
        account = self.db.get_account(tenant_id, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def create_account(
        self,
        tenant_id: str,
        supplier_id: int,
        description: str,
        amount: Decimal,
        issue_day: int,
        due_day: int,
        end_date: Optional[date] = None,
        cost_centers: Iterable[CostCenterShare] = (),
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create a new recurring account.

        Args:
            tenant_id: Tenant key
            supplier_id: Supplier ID
            description: Account description (3-200 characters)
            amount: Monthly amount, positive
            issue_day: Nominal issue day of month (1-31)
            due_day: Nominal due day of month (1-31)
            end_date: Optional last date of the recurrence
            cost_centers: Optional cost center shares summing to 100
            created_at: Start of the recurrence (defaults to local now, the
                same clock the occurrence dashboard reads)

        Returns:
            Account ID

        Raises:
            NotFoundError: If supplier doesn't exist in the tenant
            ValidationError: If any field is invalid
        """
        self._check_supplier(tenant_id, supplier_id)
        created_at = created_at or datetime.now()
        description = validate_description(description)
        amount = validate_amount(amount)
        validate_day("Issue day", issue_day)
        validate_day("Due day", due_day)
        shares = validate_cost_centers(cost_centers)
        end_date = validate_end_date(end_date, created_at)

        account_id = self.db.create_account(
            tenant_id=tenant_id,
            supplier_id=supplier_id,
            description=description,
            amount=amount,
            issue_day=issue_day,
            due_day=due_day,
            end_date=end_date,
            cost_centers=shares,
            created_at=created_at,
        )
        logger.info(
            "Created account %s for tenant %s (issue day %s, due day %s)",
            account_id,
            tenant_id,
            issue_day,
            due_day,
        )
        return account_id

    def get_account(self, tenant_id: str, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(tenant_id, account_id)

    def list_accounts(self, tenant_id: str, supplier_id: Optional[int] = None) -> list[AccountEntity]:
        """List accounts of a tenant, optionally for one supplier."""
        return self.db.list_accounts(tenant_id, supplier_id=supplier_id)

    def update_account(
        self,
        tenant_id: str,
        account_id: int,
        supplier_id: Optional[int] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        issue_day: Optional[int] = None,
        due_day: Optional[int] = None,
        end_date=_UNSET,
        cost_centers: Optional[Iterable[CostCenterShare]] = None,
    ) -> None:
        """Update account fields.

        Arguments left as None keep their current value; pass end_date=None
        to make the recurrence open-ended again. Payment records already
        written keep their own cost center snapshot.

        Raises:
            NotFoundError: If account or supplier doesn't exist
            ValidationError: If any new value is invalid
        """
        account = self._require_account(tenant_id, account_id)

        if supplier_id is not None:
            self._check_supplier(tenant_id, supplier_id)

        self.db.update_account(
            tenant_id,
            account_id,
            supplier_id=account.supplier_id if supplier_id is None else supplier_id,
            description=account.description if description is None else validate_description(description),
            amount=account.amount if amount is None else validate_amount(amount),
            issue_day=account.issue_day if issue_day is None else validate_day("Issue day", issue_day),
            due_day=account.due_day if due_day is None else validate_day("Due day", due_day),
            end_date=(
                account.end_date if end_date is _UNSET else validate_end_date(end_date, account.created_at)
            ),
            cost_centers=(
                account.cost_centers if cost_centers is None else validate_cost_centers(cost_centers)
            ),
        )
        logger.info("Updated account %s for tenant %s", account_id, tenant_id)

    def end_account(self, tenant_id: str, account_id: int, end_date: date) -> None:
        """Stop an account's recurrence after the month of end_date."""
        self.update_account(tenant_id, account_id, end_date=end_date)

    def delete_account(self, tenant_id: str, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account doesn't exist
            DependencyError: If the account has payment history
        """
        self._require_account(tenant_id, account_id)

        payment_count = self.db.get_account_payment_count(tenant_id, account_id)
        if payment_count > 0:
            raise DependencyError(account_delete_blocked(account_id, payment_count))

        self.db.delete_account(tenant_id, account_id)
        logger.info("Deleted account %s for tenant %s", account_id, tenant_id)
