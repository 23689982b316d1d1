"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist in the tenant."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def supplier_not_found(supplier: int | str) -> str:
    """Return message for missing supplier by ID or name."""
    if isinstance(supplier, int):
        return f"Supplier {supplier} not found"
    return f"Supplier '{supplier}' not found"


def duplicate_supplier_name(name: str) -> str:
    """Return message for duplicate supplier name."""
    return f"Supplier with name '{name}' already exists"


def period_already_paid(account_id: int, period: str) -> str:
    """Return message for a second settlement of the same period."""
    return f"Account {account_id} is already paid for period {period}"


def period_outside_recurrence(account_id: int, period: str) -> str:
    """Return message for a period the account does not recur in."""
    return f"Period {period} is outside the recurrence of account {account_id}"


def day_out_of_range(field: str, value: int) -> str:
    """Return message for an issue or due day outside 1-31."""
    return f"{field} must be between 1 and 31 (got {value})"


def cost_centers_total(total) -> str:
    """Return message when cost center percentages do not add up."""
    return f"Cost center percentages must sum to 100 (got {total})"


def account_delete_blocked(account_id: int, payment_count: int) -> str:
    """Return message when account has payment history."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{payment_count} payment{'s' if payment_count != 1 else ''}. "
        "Set an end date instead."
    )
