"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON encoding of
invoice numbers and cost center snapshots on payment records.
"""

from decimal import Decimal
from typing import Any, Iterable

from payables.domain import entities as domain
from payables.database.models import (
    Supplier as ORMSupplier,
    Account as ORMAccount,
    AccountCostCenter as ORMAccountCostCenter,
    PaymentRecord as ORMPaymentRecord,
)


def supplier_to_domain(orm_supplier: ORMSupplier) -> domain.Supplier:
    """Convert SQLAlchemy Supplier model to domain Supplier entity."""
    return domain.Supplier(
        id=orm_supplier.id,
        tenant_id=orm_supplier.tenant_id,
        name=orm_supplier.name,
        created_at=orm_supplier.created_at,
        tax_id=orm_supplier.tax_id,
        invoice_by_email=orm_supplier.invoice_by_email,
        invoice_by_portal=orm_supplier.invoice_by_portal,
        portal_url=orm_supplier.portal_url,
        notes=orm_supplier.notes,
        active=orm_supplier.active,
    )


def cost_center_to_domain(orm_cost_center: ORMAccountCostCenter) -> domain.CostCenterShare:
    """Convert SQLAlchemy AccountCostCenter model to domain CostCenterShare."""
    return domain.CostCenterShare(
        code=orm_cost_center.code,
        percent=Decimal(orm_cost_center.percent),
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        tenant_id=orm_account.tenant_id,
        supplier_id=orm_account.supplier_id,
        description=orm_account.description,
        amount=Decimal(orm_account.amount),
        issue_day=orm_account.issue_day,
        due_day=orm_account.due_day,
        created_at=orm_account.created_at,
        end_date=orm_account.end_date,
        cost_centers=tuple(cost_center_to_domain(cc) for cc in orm_account.cost_centers),
    )


def snapshot_to_json(allocations: Iterable[domain.CostCenterAllocation]) -> list[dict[str, Any]]:
    """Encode a cost center snapshot for the JSON column."""
    return [
        {"code": a.code, "percent": str(a.percent), "value": str(a.value)}
        for a in allocations
    ]


def snapshot_from_json(data: list[dict[str, Any]] | None) -> tuple[domain.CostCenterAllocation, ...]:
    """Decode a cost center snapshot from the JSON column."""
    return tuple(
        domain.CostCenterAllocation(
            code=item["code"],
            percent=Decimal(str(item.get("percent", "0"))),
            value=Decimal(str(item.get("value", "0"))),
        )
        for item in data or []
    )


def payment_record_to_domain(orm_payment: ORMPaymentRecord) -> domain.PaymentRecord:
    """Convert SQLAlchemy PaymentRecord model to domain PaymentRecord entity."""
    return domain.PaymentRecord(
        id=orm_payment.id,
        tenant_id=orm_payment.tenant_id,
        account_id=orm_payment.account_id,
        paid_month=orm_payment.paid_month,
        paid_date=orm_payment.paid_date,
        invoice_numbers=tuple(orm_payment.invoice_numbers or ()),
        recipient=orm_payment.recipient,
        amount=Decimal(orm_payment.amount),
        cost_centers_snapshot=snapshot_from_json(orm_payment.cost_centers_snapshot),
        created_at=orm_payment.created_at,
    )
